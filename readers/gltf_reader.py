#!/usr/bin/env python3
"""
glTF Reader Module
Loads .gltf/.glb files with pygltflib and builds the AssetGraph
"""

import json
import math

from pygltflib import GLTF2

from core.scene_data import (
    AssetGraph, SceneNode, Transform, Geometry, Material, Skin, Camera, Light,
    AnimationClip, NodeKind,
)
from core.transforms import decompose_matrix

from .base_reader import BaseReader

LIGHTS_EXTENSION = "KHR_lights_punctual"
VISIBILITY_EXTENSION = "KHR_node_visibility"
UNLIT_EXTENSION = "KHR_materials_unlit"
PHYSICAL_EXTENSIONS = {
    "KHR_materials_clearcoat",
    "KHR_materials_transmission",
    "KHR_materials_sheen",
    "KHR_materials_ior",
    "KHR_materials_specular",
    "KHR_materials_volume",
    "KHR_materials_iridescence",
}

IDENTITY_MATRIX = [1.0, 0.0, 0.0, 0.0,
                   0.0, 1.0, 0.0, 0.0,
                   0.0, 0.0, 1.0, 0.0,
                   0.0, 0.0, 0.0, 1.0]


def _accessor_map(attributes):
    """Semantic -> accessor index, for pygltflib Attributes or plain dicts"""
    if attributes is None:
        return {}
    if not isinstance(attributes, dict):
        attributes = vars(attributes)
    return {k: v for k, v in attributes.items() if v is not None}


class GLTFReader(BaseReader):
    """glTF 2.0 reader implementing the BaseReader interface

    Entity keys are the glTF array indices as strings, except geometry keys,
    which are derived from the accessors a primitive uses so that meshes
    sharing buffers compare equal.
    """

    def __init__(self, gltf_file, gltf=None):
        """Load the document unless an already parsed GLTF2 is given

        Args:
            gltf_file: Path to the .gltf/.glb file
            gltf: Optional pygltflib.GLTF2 document
        """
        super().__init__(gltf_file)
        self.gltf = gltf if gltf is not None else GLTF2().load(str(self.file_path))
        self._joints = set()

    def get_format_name(self):
        """Return human-readable format name"""
        return "glTF"

    def read_asset(self):
        """Build the AssetGraph for the default scene"""
        gltf = self.gltf
        asset = AssetGraph(source_path=str(self.file_path))

        asset.materials = self._read_materials()
        asset.cameras = self._read_cameras()
        asset.lights = self._read_lights()
        asset.skins = self._read_skins()
        asset.animations = self._read_animations()
        asset.provenance = self.extract_provenance()

        self._joints = {joint for skin in (gltf.skins or []) for joint in (skin.joints or [])}

        for index in self._root_indices():
            asset.roots.append(self._read_node(index, asset))
        return asset

    def extract_provenance(self):
        """Author/license/source/title from asset.extras, plus generator"""
        provenance = {}
        gltf_asset = self.gltf.asset
        if gltf_asset is None:
            return provenance
        extras = gltf_asset.extras if isinstance(gltf_asset.extras, dict) else {}
        for key in ("author", "license", "source", "title"):
            if extras.get(key):
                provenance[key] = str(extras[key])
        if gltf_asset.generator:
            provenance["generator"] = gltf_asset.generator
        return provenance

    # === HIERARCHY ===

    def _root_indices(self):
        gltf = self.gltf
        if gltf.scenes:
            scene_index = gltf.scene if gltf.scene is not None else 0
            return list(gltf.scenes[scene_index].nodes or [])

        # No scene: every node that is nobody's child is a root
        children = {c for node in (gltf.nodes or []) for c in (node.children or [])}
        return [i for i in range(len(gltf.nodes or [])) if i not in children]

    def _read_node(self, index, asset):
        gltf_node = self.gltf.nodes[index]
        name = gltf_node.name or ""
        extensions = gltf_node.extensions or {}

        node = SceneNode(
            name=name,
            transform=self._read_transform(gltf_node),
            extras=dict(gltf_node.extras) if isinstance(gltf_node.extras, dict) else {},
            visible=extensions.get(VISIBILITY_EXTENSION, {}).get("visible", True),
        )

        meshes = self._mesh_attachments(gltf_node, asset) if gltf_node.mesh is not None else []
        attachments = list(meshes)
        if gltf_node.camera is not None:
            camera = asset.cameras.get(str(gltf_node.camera))
            attachments.append(SceneNode(name=camera.name if camera else "", kind=NodeKind.CAMERA,
                                         camera=str(gltf_node.camera)))
        light = extensions.get(LIGHTS_EXTENSION, {}).get("light")
        if light is not None:
            light_def = asset.lights.get(str(light))
            attachments.append(SceneNode(name=(light_def.name if light_def else "") or f"light_{light}",
                                         kind=NodeKind.LIGHT, light=str(light)))

        if index in self._joints or len(meshes) > 1:
            # Bones and split meshes keep their own kind and hang everything below
            node.kind = NodeKind.BONE if index in self._joints else NodeKind.GROUP
            node.children.extend(attachments)
        elif attachments:
            primary = attachments[0]
            node.name = name or primary.name
            node.kind = primary.kind
            node.geometry, node.material, node.skin = primary.geometry, primary.material, primary.skin
            node.camera, node.light = primary.camera, primary.light
            node.children.extend(attachments[1:])

        for child in gltf_node.children or []:
            node.children.append(self._read_node(child, asset))
        return node

    def _mesh_attachments(self, gltf_node, asset):
        """One mesh node per primitive, named after the mesh like the three.js loader does"""
        mesh = self.gltf.meshes[gltf_node.mesh]
        mesh_name = mesh.name or f"mesh_{gltf_node.mesh}"
        extras = mesh.extras if isinstance(mesh.extras, dict) else {}
        target_names = list(extras.get("targetNames", []))
        kind = NodeKind.SKINNED_MESH if gltf_node.skin is not None else NodeKind.MESH
        skin = str(gltf_node.skin) if gltf_node.skin is not None else None
        split = len(mesh.primitives) > 1

        nodes = []
        for i, primitive in enumerate(mesh.primitives):
            key = self._geometry_key(primitive)
            if key not in asset.geometries:
                asset.geometries[key] = Geometry(
                    key=key,
                    name=f"{mesh_name}_{i}" if split else mesh_name,
                    vertex_count=self._vertex_count(primitive),
                    morph_targets=(target_names or [str(t) for t in range(len(primitive.targets))])
                    if primitive.targets else [],
                )
            nodes.append(SceneNode(
                name=mesh_name,
                kind=kind,
                geometry=key,
                material=str(primitive.material) if primitive.material is not None else None,
                skin=skin,
            ))
        return nodes

    def _read_transform(self, gltf_node):
        if gltf_node.matrix and list(gltf_node.matrix) != IDENTITY_MATRIX:
            translation, rotation, scale = decompose_matrix(gltf_node.matrix)
            return Transform(translation, rotation, scale)
        return Transform(
            tuple(gltf_node.translation or (0.0, 0.0, 0.0)),
            tuple(gltf_node.rotation or (0.0, 0.0, 0.0, 1.0)),
            tuple(gltf_node.scale or (1.0, 1.0, 1.0)),
        )

    # === GEOMETRY ===

    def _geometry_key(self, primitive):
        """Content-derived key: the accessors and mode a primitive draws with"""
        extensions = primitive.extensions or {}
        return json.dumps({
            "attributes": _accessor_map(primitive.attributes),
            "indices": primitive.indices,
            "mode": primitive.mode,
            "targets": [_accessor_map(target) for target in (primitive.targets or [])],
            "draco": extensions.get("KHR_draco_mesh_compression"),
        }, sort_keys=True)

    def _vertex_count(self, primitive):
        position = _accessor_map(primitive.attributes).get("POSITION")
        if position is None or not self.gltf.accessors:
            return 0
        return self.gltf.accessors[position].count

    # === SHARED ENTITIES ===

    def _read_materials(self):
        materials = {}
        for i, gltf_material in enumerate(self.gltf.materials or []):
            extensions = set((gltf_material.extensions or {}).keys())
            if UNLIT_EXTENSION in extensions:
                shading = "basic"
            elif extensions & PHYSICAL_EXTENSIONS:
                shading = "physical"
            else:
                shading = "standard"
            materials[str(i)] = Material(key=str(i), name=gltf_material.name or "", shading=shading)
        return materials

    def _read_cameras(self):
        cameras = {}
        for i, gltf_camera in enumerate(self.gltf.cameras or []):
            camera = Camera(key=str(i), name=gltf_camera.name or "", type=gltf_camera.type or "perspective")
            if camera.type == "orthographic" and gltf_camera.orthographic is not None:
                params = gltf_camera.orthographic
            else:
                params = gltf_camera.perspective
                if params is not None and params.yfov is not None:
                    camera.fov = math.degrees(params.yfov)
            if params is not None:
                if params.znear is not None:
                    camera.near = params.znear
                if params.zfar is not None:
                    camera.far = params.zfar
            cameras[str(i)] = camera
        return cameras

    def _read_lights(self):
        extension = (self.gltf.extensions or {}).get(LIGHTS_EXTENSION, {})
        lights = {}
        for i, light_def in enumerate(extension.get("lights", [])):
            spot = light_def.get("spot", {})
            lights[str(i)] = Light(
                key=str(i),
                name=light_def.get("name", ""),
                type=light_def.get("type", "point"),
                color=tuple(light_def.get("color", (1.0, 1.0, 1.0))),
                intensity=light_def.get("intensity", 1.0),
                range=light_def.get("range", 0.0),
                inner_cone_angle=spot.get("innerConeAngle", 0.0),
                outer_cone_angle=spot.get("outerConeAngle", math.pi / 4),
            )
        return lights

    def _read_skins(self):
        node_names = [node.name or "" for node in (self.gltf.nodes or [])]
        return {
            str(i): Skin(key=str(i), name=skin.name or "",
                         joints=[node_names[j] for j in (skin.joints or [])])
            for i, skin in enumerate(self.gltf.skins or [])
        }

    def _read_animations(self):
        node_names = [node.name or "" for node in (self.gltf.nodes or [])]
        clips = []
        for i, animation in enumerate(self.gltf.animations or []):
            targets = []
            for channel in animation.channels or []:
                target = channel.target.node if channel.target else None
                if target is not None and node_names[target] and node_names[target] not in targets:
                    targets.append(node_names[target])
            clips.append(AnimationClip(name=animation.name or f"animation_{i}", targets=targets))
        return clips
