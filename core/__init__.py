#!/usr/bin/env python3
"""
Core Module
Format-agnostic asset graph and the compile passes that turn it into a
component tree: walk, deduplicate, prune.
"""

from .errors import SceneCompileError, UnsupportedNodeKind, MalformedTransform, AmbiguousIdentifier
from .scene_data import (
    AssetGraph,
    SceneNode,
    Transform,
    Geometry,
    Material,
    Skin,
    Camera,
    Light,
    AnimationClip,
    NodeKind,
    InstancingMode,
    CompileOptions,
)
from .scene_tree import TreeNode, WalkResult
from .identifiers import IdentifierAllocator, RuntimeNames
from .deduplicator import StructuralDeduplicator, InstanceClass
from .graph_walker import GraphWalker
from .tree_pruner import TreePruner

__all__ = [
    'SceneCompileError',
    'UnsupportedNodeKind',
    'MalformedTransform',
    'AmbiguousIdentifier',
    'AssetGraph',
    'SceneNode',
    'Transform',
    'Geometry',
    'Material',
    'Skin',
    'Camera',
    'Light',
    'AnimationClip',
    'NodeKind',
    'InstancingMode',
    'CompileOptions',
    'TreeNode',
    'WalkResult',
    'IdentifierAllocator',
    'RuntimeNames',
    'StructuralDeduplicator',
    'InstanceClass',
    'GraphWalker',
    'TreePruner',
]
