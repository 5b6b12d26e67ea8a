#!/usr/bin/env python3
"""
Structural Deduplicator Module
Groups mesh nodes that share geometry (and optionally material) so a single
definition can be placed many times.
"""

from dataclasses import dataclass, field
from typing import List, Dict, Optional, Tuple

from core.scene_data import InstancingMode, NodeKind
from core.scene_tree import TreeNode


@dataclass
class InstanceClass:
    """Equivalence class of interchangeable mesh nodes

    Attributes:
        key: (geometry key,) or (geometry key, material key)
        representative: First member in traversal order; its geometry and
            material make up the shared definition
        member_ids: node_id of every member, traversal order
        member_materials: node_id -> material key recorded per member
        identifier: Name of the definition in the instances lookup
    """
    key: Tuple
    representative: TreeNode
    member_ids: List[int] = field(default_factory=list)
    member_materials: Dict[int, Optional[str]] = field(default_factory=dict)
    identifier: str = ""

    @property
    def size(self):
        return len(self.member_ids)

    def material_override(self, node):
        """Material a member reference must carry, or None to inherit"""
        material = self.member_materials.get(node.node_id)
        if material is None or material == self.representative.material:
            return None
        return material


class StructuralDeduplicator:
    """Partitions mesh candidates into instancing equivalence classes

    Modes:
    - none: nothing is instanced
    - selective: key is the geometry alone; members may override the material
    - all: key is geometry plus material

    A class is instanced only with two or more members. Geometries listed in
    excluded_geometries (those with morph targets) never become candidates.
    """

    def __init__(self, mode=InstancingMode.NONE, excluded_geometries=frozenset()):
        self.mode = InstancingMode(mode)
        self.excluded_geometries = frozenset(excluded_geometries)
        self._classes: Dict[Tuple, InstanceClass] = {}
        self._membership: Dict[int, Tuple] = {}

    def add_candidate(self, node: TreeNode):
        """Record a mesh node discovered by the walk"""
        if node.kind != NodeKind.MESH or node.geometry is None or node.inside_bone:
            return
        if node.geometry in self.excluded_geometries:
            return

        if self.mode == InstancingMode.ALL:
            key = (node.geometry, node.material)
        else:
            key = (node.geometry,)

        instance_class = self._classes.get(key)
        if instance_class is None:
            instance_class = InstanceClass(key=key, representative=node)
            self._classes[key] = instance_class
        instance_class.member_ids.append(node.node_id)
        instance_class.member_materials[node.node_id] = node.material
        self._membership[node.node_id] = key

    def classes(self) -> List[InstanceClass]:
        """Instanced classes in order of first appearance"""
        if self.mode == InstancingMode.NONE:
            return []
        return [c for c in self._classes.values() if c.size >= 2]

    def class_for(self, node: TreeNode) -> Optional[InstanceClass]:
        """Instanced class of a node, None if it is emitted inline"""
        if self.mode == InstancingMode.NONE:
            return None
        key = self._membership.get(node.node_id)
        if key is None:
            return None
        instance_class = self._classes[key]
        return instance_class if instance_class.size >= 2 else None

    def assign_identifiers(self, allocator):
        """Name every instanced class from its representative"""
        for instance_class in self.classes():
            rep = instance_class.representative
            instance_class.identifier = allocator.allocate(rep.name, 'geometry')

    def get_summary(self):
        """Human-readable summary of the instancing decision"""
        instanced = self.classes()
        lines = [f"Instancing ({self.mode.value}):"]
        lines.append(f"  - Candidate meshes: {len(self._membership)}")
        lines.append(f"  - Shared definitions: {len(instanced)}")
        for instance_class in instanced:
            lines.append(f"    - {instance_class.identifier or instance_class.representative.name}"
                         f": {instance_class.size} placements")
        return "\n".join(lines)
