#!/usr/bin/env python3
"""
Scene Data Module
Format-agnostic data structures for the loaded asset graph.

This module defines the data structures that decouple the glTF reader from
the JSX exporter. The reader loads a file into an AssetGraph, and the
compiler consumes it without knowledge of the source format.
"""

from dataclasses import dataclass, field
from typing import List, Dict, Optional, Tuple, Any
from enum import Enum


class NodeKind(str, Enum):
    """Scene node kinds understood by the compiler"""
    GROUP = "group"
    MESH = "mesh"
    SKINNED_MESH = "skinnedMesh"
    BONE = "bone"
    CAMERA = "camera"
    LIGHT = "light"


class InstancingMode(str, Enum):
    """How aggressively repeated geometry is shared"""
    NONE = "none"
    SELECTIVE = "selective"  # geometry key only, per-instance material override
    ALL = "all"              # geometry and material key must both match


MESH_KINDS = (NodeKind.MESH, NodeKind.SKINNED_MESH)


def kind_name(kind):
    """Plain string of a node kind, whether an enum member or a raw string"""
    return kind.value if isinstance(kind, Enum) else str(kind)


IDENTITY_QUATERNION = (0.0, 0.0, 0.0, 1.0)


@dataclass
class Transform:
    """Local transform of a scene node

    Attributes:
        translation: [x, y, z] translation
        rotation: [x, y, z, w] unit quaternion
        scale: [sx, sy, sz] scale multipliers
    """
    translation: Tuple[float, float, float] = (0.0, 0.0, 0.0)
    rotation: Tuple[float, float, float, float] = IDENTITY_QUATERNION
    scale: Tuple[float, float, float] = (1.0, 1.0, 1.0)

    @classmethod
    def from_euler(cls, translation=(0.0, 0.0, 0.0), euler=(0.0, 0.0, 0.0),
                   scale=(1.0, 1.0, 1.0)) -> 'Transform':
        """Build a transform from XYZ Euler angles in radians"""
        from core.transforms import euler_to_quaternion
        return cls(tuple(translation), euler_to_quaternion(euler), tuple(scale))


@dataclass
class Geometry:
    """Shared vertex/index buffers of one mesh primitive

    Attributes:
        key: Content-derived key; equal keys are interchangeable for instancing
        name: Loader-assigned name (may be empty)
        vertex_count: Number of vertices
        morph_targets: Morph target names, empty if the geometry has none
    """
    key: str
    name: str = ""
    vertex_count: int = 0
    morph_targets: List[str] = field(default_factory=list)


@dataclass
class Material:
    """Shading parameters, identified by key

    Attributes:
        key: Loader-assigned key
        name: Material name (may be empty or duplicated)
        shading: 'standard', 'physical' or 'basic'
    """
    key: str
    name: str = ""
    shading: str = "standard"


@dataclass
class Skin:
    """Skeleton binding referenced by skinned meshes"""
    key: str
    name: str = ""
    joints: List[str] = field(default_factory=list)


@dataclass
class Camera:
    """Camera optical properties

    Attributes:
        type: 'perspective' or 'orthographic'
        fov: Vertical field of view in degrees (perspective)
        zoom: Orthographic zoom factor
    """
    key: str
    name: str = ""
    type: str = "perspective"
    fov: float = 50.0
    near: float = 0.1
    far: float = 2000.0
    zoom: float = 1.0


@dataclass
class Light:
    """Punctual light

    Attributes:
        type: 'point', 'spot' or 'directional'
        color: [r, g, b] linear color, 0..1
        range: Cutoff distance, 0 means unlimited
        inner_cone_angle, outer_cone_angle: Spot cone in radians
    """
    key: str
    name: str = ""
    type: str = "point"
    color: Tuple[float, float, float] = (1.0, 1.0, 1.0)
    intensity: float = 1.0
    range: float = 0.0
    inner_cone_angle: float = 0.0
    outer_cone_angle: float = 0.7853981633974483


@dataclass
class AnimationClip:
    """Animation clip with the names of the nodes it drives"""
    name: str
    targets: List[str] = field(default_factory=list)


@dataclass
class SceneNode:
    """Node of the asset hierarchy

    Children are owned; geometry/material/skin/camera/light are keys into the
    AssetGraph indexes and may be shared by many nodes.
    """
    name: str = ""
    kind: str = NodeKind.GROUP
    transform: Transform = field(default_factory=Transform)
    children: List['SceneNode'] = field(default_factory=list)
    geometry: Optional[str] = None
    material: Optional[str] = None
    skin: Optional[str] = None
    camera: Optional[str] = None
    light: Optional[str] = None
    visible: bool = True
    extras: Dict[str, Any] = field(default_factory=dict)


@dataclass
class AssetGraph:
    """Complete loaded asset

    Attributes:
        roots: Top-level scene nodes, in scene order
        geometries, materials, skins, cameras, lights: Entity indexes by key
        animations: Animation clips in file order
        provenance: Asset metadata (author, license, source, title, generator)
        source_path: Path of the file the asset was loaded from
    """
    roots: List[SceneNode] = field(default_factory=list)
    geometries: Dict[str, Geometry] = field(default_factory=dict)
    materials: Dict[str, Material] = field(default_factory=dict)
    skins: Dict[str, Skin] = field(default_factory=dict)
    cameras: Dict[str, Camera] = field(default_factory=dict)
    lights: Dict[str, Light] = field(default_factory=dict)
    animations: List[AnimationClip] = field(default_factory=list)
    provenance: Dict[str, str] = field(default_factory=dict)
    source_path: str = ""

    def iter_nodes(self):
        """Yield every node in depth-first pre-order"""
        stack = list(reversed(self.roots))
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))


@dataclass
class CompileOptions:
    """Configuration of one compile pass

    Attributes:
        keep_original_names: Name instances entries after their source meshes
        keep_names: Emit a name prop on every element
        keep_groups: Never prune empty wrapper groups
        meta: Emit userData props from node extras
        types: Emit TypeScript type declarations
        shadows: Emit castShadow/receiveShadow on meshes
        precision: Fractional digits kept in numeric props
        print_width: Line width before element props wrap
        instancing: InstancingMode
        file_name: Asset URL used by the accessor and preload statements
        debug: Verbose progress logging in the converter
    """
    keep_original_names: bool = True
    keep_names: bool = False
    keep_groups: bool = False
    meta: bool = False
    types: bool = False
    shadows: bool = False
    precision: int = 2
    print_width: int = 120
    instancing: InstancingMode = InstancingMode.NONE
    file_name: str = "model.glb"
    debug: bool = False

    def __post_init__(self):
        if self.precision < 0:
            raise ValueError(f"precision must be >= 0, got {self.precision}")
        if self.print_width <= 0:
            raise ValueError(f"print_width must be positive, got {self.print_width}")
        self.instancing = InstancingMode(self.instancing)
