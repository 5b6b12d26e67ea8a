#!/usr/bin/env python3
"""
Graph Walker Module
Single depth-first pre-order pass over the asset hierarchy producing the
intermediate tree and the registries the exporter needs.
"""

from core.deduplicator import StructuralDeduplicator
from core.errors import MalformedTransform
from core.identifiers import RuntimeNames
from core.scene_data import AssetGraph, CompileOptions, NodeKind, MESH_KINDS, kind_name
from core.scene_tree import TreeNode, WalkResult
from core.transforms import is_finite, sparse


class GraphWalker:
    """Walks an AssetGraph once

    Every node is visited exactly once. Shared geometry/material references
    are data references, not edges, so they never cause a revisit.

    Node names are claimed in visit order, the same order the three.js loader
    claims them, so each TreeNode knows the key it has in useGLTF's nodes.

    Side effects:
    - feeds mesh nodes to the StructuralDeduplicator as they are discovered
    - registers every node looked up in nodes and every material reached
    """

    def __init__(self, asset: AssetGraph, options: CompileOptions = None, deduplicator=None):
        self.asset = asset
        self.options = options or CompileOptions()
        if deduplicator is None:
            # Morph-target geometries are always emitted inline
            morphing = frozenset(key for key, geometry in asset.geometries.items() if geometry.morph_targets)
            deduplicator = StructuralDeduplicator(self.options.instancing, excluded_geometries=morphing)
        self.deduplicator = deduplicator
        self.runtime_names = RuntimeNames()
        self._animated = {target for clip in asset.animations for target in clip.targets}
        self._next_id = 0

    def walk(self) -> WalkResult:
        """Build the intermediate tree under a synthetic scene root

        Returns:
            WalkResult: Tree plus node/material registries

        Raises:
            MalformedTransform: If a node carries a NaN or infinite component
        """
        root = TreeNode(node_id=-1, runtime_name='', name='Scene', kind=NodeKind.GROUP)
        result = WalkResult(root=root)

        for scene_node in self.asset.roots:
            root.children.append(self._visit(scene_node, result, inside_bone=False))

        result.node_count = self._next_id
        return result

    def _visit(self, scene_node, result, inside_bone):
        node_id = self._next_id
        self._next_id += 1

        translation, rotation, scale = self._read_transform(scene_node)
        kind = kind_name(scene_node.kind)

        tree_node = TreeNode(
            node_id=node_id,
            runtime_name=self.runtime_names.claim(scene_node.name),
            name=scene_node.name,
            kind=kind,
            translation=translation,
            rotation=rotation,
            scale=scale,
            geometry=scene_node.geometry,
            material=scene_node.material,
            skin=scene_node.skin,
            camera=scene_node.camera,
            light=scene_node.light,
            visible=scene_node.visible,
            user_data=dict(scene_node.extras),
            animation_target=bool(scene_node.name) and scene_node.name in self._animated,
            inside_bone=inside_bone,
        )

        self._register(tree_node, result)
        self.deduplicator.add_candidate(tree_node)

        child_inside_bone = inside_bone or kind == NodeKind.BONE
        for child in scene_node.children:
            tree_node.children.append(self._visit(child, result, child_inside_bone))

        return tree_node

    def _read_transform(self, scene_node):
        """Validate a node transform and drop exactly-default components"""
        transform = scene_node.transform
        for component in ('translation', 'rotation', 'scale'):
            if not is_finite(getattr(transform, component)):
                raise MalformedTransform(component, scene_node.name, self.asset.source_path)

        return sparse(
            tuple(float(v) for v in transform.translation),
            tuple(float(v) for v in transform.rotation),
            tuple(float(v) for v in transform.scale),
        )

    def _register(self, tree_node, result):
        """Record the node and material lookups the output will contain"""
        if tree_node.inside_bone:
            return

        if tree_node.kind in MESH_KINDS or tree_node.kind == NodeKind.BONE:
            result.referenced_nodes.setdefault(tree_node.runtime_name, NodeKind(tree_node.kind))

        key = tree_node.material
        if key is not None and key not in result.referenced_materials:
            material = self.asset.materials.get(key)
            # useGLTF keys materials by their raw, unsanitized name
            result.referenced_materials[key] = material.name if material else key
