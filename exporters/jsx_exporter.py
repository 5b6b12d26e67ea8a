#!/usr/bin/env python3
"""
JSX Exporter Module
Compiles an AssetGraph into a React Three Fiber component (JSX or TSX).

Pipeline, each stage with its own contract:
- GraphWalker: intermediate tree, runtime names, registries, dedup candidates
- StructuralDeduplicator: instancing classes
- TreePruner: flattened tree
- emit(): source text

Output layout:
- metadata header comment (when the asset carries provenance)
- imports, optional type declarations
- Instances component (only when something is instanced)
- Model component with the JSX tree
- preload statement

Lookups into useGLTF's nodes and materials use the keys the loader creates
(sanitized, uniquified node names and raw material names). The allocator
only names declarations this file introduces, the instances entries.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Set

from core.deduplicator import StructuralDeduplicator
from core.errors import UnsupportedNodeKind
from core.graph_walker import GraphWalker
from core.identifiers import IdentifierAllocator, is_identifier
from core.scene_data import AssetGraph, Camera, CompileOptions, Light, NodeKind, kind_name
from core.scene_tree import WalkResult
from core.transforms import format_number, quaternion_to_euler, rounds_to
from core.tree_pruner import TreePruner

from .base_exporter import BaseExporter
from .jsx_writer import JSXWriter

GENERATOR = "gltf2jsx"

NODE_TYPES = {
    NodeKind.MESH: "THREE.Mesh",
    NodeKind.SKINNED_MESH: "THREE.SkinnedMesh",
    NodeKind.BONE: "THREE.Bone",
}

MATERIAL_TYPES = {
    "standard": "THREE.MeshStandardMaterial",
    "physical": "THREE.MeshPhysicalMaterial",
    "basic": "THREE.MeshBasicMaterial",
}

LIGHT_TAGS = {
    "point": "pointLight",
    "spot": "spotLight",
    "directional": "directionalLight",
}

PROVENANCE_FIELDS = (
    ("author", "Author"),
    ("license", "License"),
    ("source", "Source"),
    ("title", "Title"),
    ("generator", "Generator"),
)


def quote(text):
    """Single-quoted JavaScript string literal"""
    escaped = str(text).replace("\\", "\\\\").replace("'", "\\'").replace("\n", "\\n")
    return f"'{escaped}'"


def accessor(obj, key):
    """obj.key when key is a plain identifier, obj['key'] otherwise"""
    return f"{obj}.{key}" if is_identifier(key) else f"{obj}[{quote(key)}]"


def property_key(key):
    """Object type member name, quoted unless it is a plain identifier"""
    return key if is_identifier(key) else quote(key)


def asset_url(file_name):
    """URL passed to useGLTF: absolute path unless already absolute or remote"""
    if file_name.startswith('/') or file_name.lower().startswith('http'):
        return file_name
    return f"/{file_name}"


@dataclass
class EmitContext:
    """State of one emit() call, never shared between compiles

    Attributes:
        asset: AssetGraph the tree was walked from
        dedup: StructuralDeduplicator with identifiers assigned
        walk: WalkResult holding the node and material registries
        drei: drei components the written tree needs imported
    """
    asset: AssetGraph
    dedup: StructuralDeduplicator
    walk: WalkResult
    drei: Set[str] = field(default_factory=set)


class JSXExporter(BaseExporter):
    """React Three Fiber component exporter

    compile() is a pure function of the asset and options; export() writes
    the result to disk. Per-compile state lives in an EmitContext, so one
    exporter can compile any number of assets.
    """

    def __init__(self, options: CompileOptions = None, progress_callback=None):
        super().__init__(progress_callback)
        self.options = options or CompileOptions()
        self.stats = {}

    def get_format_name(self):
        return "React Three Fiber TSX" if self.options.types else "React Three Fiber JSX"

    def get_file_extension(self):
        return "tsx" if self.options.types else "jsx"

    # === PIPELINE ===

    def compile(self, asset: AssetGraph) -> str:
        """Walk, deduplicate, prune and emit

        Raises:
            UnsupportedNodeKind: A node kind has no element
            MalformedTransform: A transform has NaN/Infinity components
        """
        text, _ = self.compile_with_stats(asset)
        return text

    def compile_with_stats(self, asset: AssetGraph):
        """compile() plus the numbers the debug summary reports

        Returns:
            tuple: (source text, stats dict)
        """
        walker = GraphWalker(asset, self.options)
        walk = walker.walk()

        dedup = walker.deduplicator
        dedup.assign_identifiers(IdentifierAllocator(self.options.keep_original_names))

        pruner = TreePruner(self.options.keep_groups)
        tree = pruner.prune(walk.root)

        text = self.emit(tree, dedup, walk, asset)

        geometries = {n.geometry for n in walk.root.iter_tree() if n.geometry in asset.geometries}
        skins = {n.skin for n in walk.root.iter_tree() if n.skin in asset.skins}
        stats = {
            'nodes': walk.node_count,
            'pruned': pruner.pruned_count,
            'instanced': len(dedup.classes()),
            'materials': len(walk.referenced_materials),
            'geometries': len(geometries),
            'vertices': sum(asset.geometries[key].vertex_count for key in geometries),
            'skins': len(skins),
            'joints': sum(len(asset.skins[key].joints) for key in skins),
            'instancing_summary': dedup.get_summary(),
        }
        return text, stats

    def export(self, asset: AssetGraph, output_file):
        """Compile and write the component file

        Args:
            asset: Loaded AssetGraph
            output_file: Destination .jsx/.tsx path

        Returns:
            dict: 'success', 'jsx_file', 'files', 'message'
        """
        try:
            output_path = Path(output_file)
            self.log(f"Exporting {self.get_format_name()}...")

            text, self.stats = self.compile_with_stats(asset)

            self.validate_output_path(output_path.parent)
            with open(output_path, 'w', encoding='utf-8') as f:
                f.write(text)

            self.log(f"✓ Component file created: {output_path.name}")
            return {
                'success': True,
                'jsx_file': str(output_path),
                'files': [str(output_path)],
                'message': f"{self.get_format_name()} export complete: {output_path.name}"
            }

        except Exception as e:
            error_msg = f"{self.get_format_name()} export failed: {str(e)}"
            self.log(f"✗ {error_msg}")
            if self.options.debug:
                import traceback
                self.log(traceback.format_exc())
            return {
                'success': False,
                'message': error_msg,
                'files': []
            }

    # === EMISSION ===

    def emit(self, tree, dedup, walk, asset: AssetGraph) -> str:
        """Generate the component source from the pruned tree

        Args:
            tree: Pruned scene root (TreeNode)
            dedup: StructuralDeduplicator with identifiers assigned
            walk: WalkResult holding the node and material registries
            asset: AssetGraph the tree was walked from

        Returns:
            str: Complete component source
        """
        ctx = EmitContext(asset=asset, dedup=dedup, walk=walk)

        instanced = dedup.classes()
        animated = bool(asset.animations)
        url = quote(asset_url(self.options.file_name))
        types = self.options.types

        body = JSXWriter(self.options.print_width, depth=2)
        self._write_root(ctx, body, tree, animated)

        drei = ['useGLTF']
        if animated:
            drei.append('useAnimations')
        if instanced:
            drei.append('Merged')
        drei.extend(name for name in ('PerspectiveCamera', 'OrthographicCamera') if name in ctx.drei)

        out = JSXWriter(self.options.print_width)
        out.extend(self._generate_header(asset.provenance))

        if types:
            out.line("import * as THREE from 'three'")
        out.line("import React, { useRef } from 'react'" if animated else "import React from 'react'")
        out.line(f"import {{ {', '.join(drei)} }} from '@react-three/drei'")
        if types:
            out.line("import { GLTF } from 'three-stdlib'")
        out.line()

        if types:
            self._write_types(out, walk, asset, instanced)

        if instanced:
            self._write_instances(out, instanced, url)

        self._write_model(out, body, url, animated, bool(instanced))
        out.line(f"useGLTF.preload({url})")
        return out.getvalue()

    def _generate_header(self, provenance):
        """Comment block with source provenance, empty without any"""
        entries = [(label, provenance[key]) for key, label in PROVENANCE_FIELDS if provenance.get(key)]
        if not entries:
            return []
        lines = ["/*", f"Auto-generated by: {GENERATOR}"]
        for label, value in entries:
            lines.append(f"{label}: {str(value).replace('*/', '* /')}")
        lines.extend(["*/", ""])
        return lines

    def _write_types(self, out, walk, asset, instanced):
        out.line("type GLTFResult = GLTF & {")
        out.indent()
        out.line("nodes: {")
        out.indent()
        for name, kind in walk.referenced_nodes.items():
            out.line(f"{property_key(name)}: {NODE_TYPES.get(kind, 'THREE.Object3D')}")
        out.dedent()
        out.line("}")
        out.line("materials: {")
        out.indent()
        declared = set()
        for key, name in walk.referenced_materials.items():
            # Same-named materials share one entry in the loaded map
            if name in declared:
                continue
            declared.add(name)
            material = asset.materials.get(key)
            shading = material.shading if material else "standard"
            out.line(f"{property_key(name)}: {MATERIAL_TYPES.get(shading, 'THREE.Material')}")
        out.dedent()
        out.line("}")
        if asset.animations:
            out.line("animations: GLTFAction[]")
        out.dedent()
        out.line("}")
        out.line()

        if asset.animations:
            names = " | ".join(quote(clip.name) for clip in asset.animations)
            out.line(f"type ActionName = {names}")
            out.line()
            out.line("interface GLTFAction extends THREE.AnimationClip {")
            out.line("  name: ActionName")
            out.line("}")
            out.line()

        if instanced:
            out.line("type ContextType = Record<string, React.ForwardRefExoticComponent<JSX.IntrinsicElements['mesh']>>")
            out.line()

    def _write_instances(self, out, instanced, url):
        types = self.options.types
        out.line("const context = React.createContext({} as ContextType)" if types
                 else "const context = React.createContext()")
        out.line()
        props_type = ": JSX.IntrinsicElements['group']" if types else ""
        out.line(f"export function Instances({{ children, ...props }}{props_type}) {{")
        out.indent()
        out.line(f"const {{ nodes }} = useGLTF({url})" + (" as GLTFResult" if types else ""))
        out.line("const instances = React.useMemo(")
        out.indent()
        out.line("() => ({")
        out.indent()
        for instance_class in instanced:
            source = accessor('nodes', instance_class.representative.runtime_name)
            out.line(f"{instance_class.identifier}: {source},")
        out.dedent()
        out.line("}),")
        out.line("[nodes]")
        out.dedent()
        out.line(")")
        out.line("return (")
        out.indent()
        out.line("<Merged meshes={instances} {...props}>")
        out.indent()
        arg = "instances: ContextType" if types else "instances"
        out.line(f"{{({arg}) => <context.Provider value={{instances}} children={{children}} />}}")
        out.dedent()
        out.line("</Merged>")
        out.dedent()
        out.line(")")
        out.dedent()
        out.line("}")
        out.line()

    def _write_model(self, out, body, url, animated, instanced):
        types = self.options.types
        props_type = ": JSX.IntrinsicElements['group']" if types else ""
        out.line(f"export function Model(props{props_type}) {{")
        out.indent()
        if instanced:
            out.line("const instances = React.useContext(context)")
        if animated:
            out.line("const group = useRef<THREE.Group>(null)" if types else "const group = useRef()")
            out.line(f"const {{ nodes, materials, animations }} = useGLTF({url})"
                     + (" as GLTFResult" if types else ""))
            out.line("const { actions } = useAnimations(animations, group)")
        else:
            out.line(f"const {{ nodes, materials }} = useGLTF({url})" + (" as GLTFResult" if types else ""))
        out.line("return (")
        for text in body.lines:
            out.lines.append(text)
        out.line(")")
        out.dedent()
        out.line("}")
        out.line()

    # === TREE ===

    def _write_root(self, ctx, writer, root, animated):
        props = (["ref={group}"] if animated else []) + ["{...props}", "dispose={null}"]
        if not root.children:
            writer.self_closing("group", props)
            return
        writer.open_element("group", props)
        for child in root.children:
            self._write_node(ctx, writer, child)
        writer.close_element("group")

    def _write_node(self, ctx, writer, node):
        instance_class = ctx.dedup.class_for(node)
        if instance_class is not None:
            tag = f"instances.{instance_class.identifier}"
            props = self._name_props(node) + self._shadow_props()
            override = instance_class.material_override(node)
            if override is not None:
                props.append(f"material={{{self._material_ref(ctx, override)}}}")
            props += self._transform_props(node) + self._tail_props(node)
            children = node.children
        else:
            tag, props, children = self._element(ctx, node)

        if children:
            writer.open_element(tag, props)
            for child in children:
                self._write_node(ctx, writer, child)
            writer.close_element(tag)
        else:
            writer.self_closing(tag, props)

    def _element(self, ctx, node):
        """Tag, props and children to write for a node

        Raises:
            UnsupportedNodeKind: If the kind has no element
        """
        try:
            kind = NodeKind(kind_name(node.kind))
        except ValueError:
            raise UnsupportedNodeKind(kind_name(node.kind), node.name, ctx.asset.source_path) from None

        if kind == NodeKind.BONE:
            # The bone object carries its whole subtree
            return "primitive", [f"object={{{accessor('nodes', node.runtime_name)}}}"], []
        if kind == NodeKind.CAMERA:
            tag, props = self._camera_element(ctx, node)
        elif kind == NodeKind.LIGHT:
            tag, props = self._light_element(ctx, node)
        elif kind in (NodeKind.MESH, NodeKind.SKINNED_MESH):
            tag, props = kind.value, self._mesh_props(ctx, node, kind)
        else:
            tag, props = "group", self._name_props(node)

        props += self._transform_props(node) + self._tail_props(node)
        return tag, props, node.children

    def _mesh_props(self, ctx, node, kind):
        props = self._name_props(node) + self._shadow_props()
        source = accessor('nodes', node.runtime_name)
        if node.geometry is not None:
            props.append(f"geometry={{{source}.geometry}}")
        if node.material is not None:
            props.append(f"material={{{self._material_ref(ctx, node.material)}}}")
        if kind == NodeKind.SKINNED_MESH:
            props.append(f"skeleton={{{source}.skeleton}}")
        geometry = ctx.asset.geometries.get(node.geometry) if node.geometry else None
        if geometry is not None and geometry.morph_targets:
            props.append(f"morphTargetDictionary={{{source}.morphTargetDictionary}}")
            props.append(f"morphTargetInfluences={{{source}.morphTargetInfluences}}")
        return props

    def _camera_element(self, ctx, node):
        camera = ctx.asset.cameras.get(node.camera) or Camera(key=node.camera or "")
        precision = self.options.precision
        props = self._name_props(node) + ["makeDefault={false}"]
        props.append(f"far={{{format_number(camera.far, precision)}}}")
        props.append(f"near={{{format_number(camera.near, precision)}}}")
        if camera.type == "orthographic":
            tag = "OrthographicCamera"
            props.append(f"zoom={{{format_number(camera.zoom, precision)}}}")
        else:
            tag = "PerspectiveCamera"
            props.append(f"fov={{{format_number(camera.fov, precision)}}}")
        ctx.drei.add(tag)
        return tag, props

    def _light_element(self, ctx, node):
        light = ctx.asset.lights.get(node.light) or Light(key=node.light or "")
        tag = LIGHT_TAGS.get(light.type)
        if tag is None:
            raise UnsupportedNodeKind(f"light:{light.type}", node.name, ctx.asset.source_path)

        precision = self.options.precision
        props = self._name_props(node)
        props.append(f"intensity={{{format_number(light.intensity, precision)}}}")
        if light.type == "spot":
            outer = light.outer_cone_angle
            penumbra = 1.0 - light.inner_cone_angle / outer if outer else 0.0
            props.append(f"angle={{{format_number(outer, precision)}}}")
            props.append(f"penumbra={{{format_number(penumbra, precision)}}}")
        if light.type in ("point", "spot"):
            props.append("decay={2}")
            if light.range:
                props.append(f"distance={{{format_number(light.range, precision)}}}")
        if not rounds_to(light.color, 1.0, precision):
            props.append(f"color={self._vector(light.color)}")
        if light.type in ("spot", "directional"):
            props.append("target-position={[0, 0, -1]}")
        return tag, props

    # === PROPS ===

    def _name_props(self, node):
        """name prop carrying the runtime name, which animation tracks bind to"""
        name = node.runtime_name
        if not name or not (self.options.keep_names or node.animation_target):
            return []
        # JSX attribute strings have no escapes and decode HTML entities
        if '"' in name or '&' in name:
            return [f"name={{{quote(name)}}}"]
        return [f'name="{name}"']

    def _shadow_props(self):
        return ["castShadow", "receiveShadow"] if self.options.shadows else []

    def _transform_props(self, node):
        """position/rotation/scale, each omitted when it rounds to default"""
        precision = self.options.precision
        props = []
        if node.translation is not None and not rounds_to(node.translation, 0.0, precision):
            props.append(f"position={self._vector(node.translation)}")
        if node.rotation is not None:
            euler = quaternion_to_euler(node.rotation)
            if not rounds_to(euler, 0.0, precision):
                props.append(f"rotation={self._vector(euler)}")
        if node.scale is not None and not rounds_to(node.scale, 1.0, precision):
            formatted = [format_number(v, precision) for v in node.scale]
            if formatted[0] == formatted[1] == formatted[2]:
                props.append(f"scale={{{formatted[0]}}}")
            else:
                props.append(f"scale={self._vector(node.scale)}")
        return props

    def _tail_props(self, node):
        props = []
        if not node.visible:
            props.append("visible={false}")
        if self.options.meta and node.user_data:
            props.append(f"userData={{{json.dumps(node.user_data, default=str)}}}")
        return props

    def _vector(self, values):
        return "{[" + ", ".join(format_number(v, self.options.precision) for v in values) + "]}"

    def _material_ref(self, ctx, key):
        return accessor('materials', ctx.walk.referenced_materials[key])
