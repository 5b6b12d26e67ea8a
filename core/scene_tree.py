#!/usr/bin/env python3
"""
Scene Tree Module
Intermediate tree built by the GraphWalker, rewritten by the TreePruner and
consumed by the JSX exporter.
"""

from dataclasses import dataclass, field
from typing import List, Dict, Optional, Tuple, Any

Vector3 = Tuple[float, float, float]
Quaternion = Tuple[float, float, float, float]


@dataclass
class TreeNode:
    """One node of the intermediate tree

    Transform components are None when exactly default, so the pruner and the
    exporter only deal with what differs.

    Attributes:
        node_id: Visit order of the walk, stable across runs
        runtime_name: Object name the loader gives this node ('' when unnamed)
        name: Original source name
        kind: Node kind string (NodeKind value, or whatever the loader gave)
        inside_bone: True for descendants of a bone; carried by the bone primitive
    """
    node_id: int
    runtime_name: str
    name: str
    kind: str
    translation: Optional[Vector3] = None
    rotation: Optional[Quaternion] = None
    scale: Optional[Vector3] = None
    geometry: Optional[str] = None
    material: Optional[str] = None
    skin: Optional[str] = None
    camera: Optional[str] = None
    light: Optional[str] = None
    visible: bool = True
    user_data: Dict[str, Any] = field(default_factory=dict)
    animation_target: bool = False
    inside_bone: bool = False
    children: List['TreeNode'] = field(default_factory=list)

    @property
    def transform(self):
        return (self.translation, self.rotation, self.scale)

    @property
    def has_entity(self):
        return any(ref is not None for ref in
                   (self.geometry, self.material, self.skin, self.camera, self.light))

    @property
    def is_identity(self):
        return self.translation is None and self.rotation is None and self.scale is None

    def iter_tree(self):
        """Yield this node and its descendants in pre-order"""
        yield self
        for child in self.children:
            yield from child.iter_tree()


@dataclass
class WalkResult:
    """Everything the walk collected

    Attributes:
        root: Synthetic scene root owning the asset roots
        node_count: Number of asset nodes visited
        referenced_nodes: runtime name -> NodeKind of nodes looked up in nodes
        referenced_materials: material key -> material name the loader keys it by,
            first reference order
    """
    root: TreeNode
    node_count: int = 0
    referenced_nodes: Dict[str, str] = field(default_factory=dict)
    referenced_materials: Dict[str, str] = field(default_factory=dict)
