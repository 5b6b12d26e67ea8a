import math

import pytest
from pygltflib import (
    GLTF2, Animation, AnimationChannel, AnimationChannelTarget, AnimationSampler, Asset,
    Attributes, Camera, Material, Mesh, Node, Orthographic, Perspective, Primitive, Scene, Skin,
)

from core.scene_data import CompileOptions, InstancingMode, NodeKind
from exporters.jsx_exporter import JSXExporter
from readers import GLTFReader, create_reader, get_file_type, is_supported_format


def chair_mesh(**kwargs):
    return Mesh(name="ChairMesh", primitives=[Primitive(attributes=Attributes(POSITION=0), indices=1, material=0)],
                **kwargs)


def room_document():
    return GLTF2(
        asset=Asset(generator="Blender", extras={"author": "Jane Doe", "license": "CC-BY-4.0", "title": "Room"}),
        scene=0,
        scenes=[Scene(nodes=[0])],
        nodes=[
            Node(name="Room", children=[1, 2], translation=[0.0, 1.0, 0.0]),
            Node(name="Chair", mesh=0),
            Node(name="Chair.001", mesh=0, rotation=[0.0, 0.7071068, 0.0, 0.7071068]),
        ],
        meshes=[chair_mesh()],
        materials=[Material(name="Wood")],
    )


def read(document, path="room.gltf"):
    return GLTFReader(path, gltf=document).read_asset()


def test_hierarchy_and_transforms():
    asset = read(room_document())
    (room,) = asset.roots
    assert room.name == "Room"
    assert room.kind == NodeKind.GROUP
    assert room.transform.translation == (0.0, 1.0, 0.0)
    assert [c.name for c in room.children] == ["Chair", "Chair.001"]
    assert all(c.kind == NodeKind.MESH for c in room.children)
    assert room.children[1].transform.rotation == (0.0, 0.7071068, 0.0, 0.7071068)
    assert asset.source_path == "room.gltf"


def test_shared_primitives_share_a_geometry_key():
    asset = read(room_document())
    first, second = asset.roots[0].children
    assert len(asset.geometries) == 1
    assert first.geometry == second.geometry
    assert first.material == "0"
    assert asset.materials["0"].name == "Wood"
    assert asset.materials["0"].shading == "standard"


def test_provenance():
    assert read(room_document()).provenance == {
        "author": "Jane Doe",
        "license": "CC-BY-4.0",
        "title": "Room",
        "generator": "Blender",
    }


def test_reader_output_instances_end_to_end():
    asset = read(room_document())
    text = JSXExporter(CompileOptions(instancing=InstancingMode.ALL, file_name="room.gltf")).compile(asset)
    assert "Chair: nodes.Chair," in text
    assert text.count("<instances.Chair") == 2
    assert "useGLTF.preload('/room.gltf')" in text


def test_multi_primitive_mesh_becomes_group():
    document = GLTF2(
        scenes=[Scene(nodes=[0])],
        nodes=[Node(name="Sofa", mesh=0)],
        meshes=[Mesh(name="Sofa", primitives=[
            Primitive(attributes=Attributes(POSITION=0), indices=1),
            Primitive(attributes=Attributes(POSITION=2), indices=3),
        ])],
    )
    asset = read(document)
    (sofa,) = asset.roots
    assert sofa.kind == NodeKind.GROUP
    assert [(c.name, c.kind) for c in sofa.children] == [("Sofa", NodeKind.MESH), ("Sofa", NodeKind.MESH)]
    assert sofa.children[0].geometry != sofa.children[1].geometry
    assert sofa.children[0].material is None

    text = JSXExporter(CompileOptions()).compile(asset)
    assert "nodes.Sofa_1.geometry" in text
    assert "nodes.Sofa_2.geometry" in text


def test_skins_bones_and_skinned_meshes():
    document = GLTF2(
        scenes=[Scene(nodes=[0])],
        nodes=[
            Node(name="Armature", children=[1, 2]),
            Node(name="Hips"),
            Node(name="Body", mesh=0, skin=0),
        ],
        meshes=[chair_mesh()],
        skins=[Skin(name="Rig", joints=[1])],
    )
    asset = read(document)
    hips, body = asset.roots[0].children
    assert hips.kind == NodeKind.BONE
    assert body.kind == NodeKind.SKINNED_MESH
    assert body.skin == "0"
    assert asset.skins["0"].joints == ["Hips"]


def test_cameras_and_lights():
    document = GLTF2(
        scenes=[Scene(nodes=[0, 1, 2, 3])],
        nodes=[
            Node(name="Cam", camera=0),
            Node(name="Top", camera=1),
            Node(name="Lamp", extensions={"KHR_lights_punctual": {"light": 0}}),
            Node(name="Screen", mesh=0, camera=0),
        ],
        meshes=[chair_mesh()],
        cameras=[
            Camera(type="perspective", perspective=Perspective(yfov=math.radians(60), znear=0.1, zfar=100.0)),
            Camera(type="orthographic", orthographic=Orthographic(xmag=1.0, ymag=1.0, znear=0.01, zfar=50.0)),
        ],
        extensions={"KHR_lights_punctual": {"lights": [
            {"type": "spot", "name": "Lamp", "intensity": 3.0,
             "spot": {"innerConeAngle": 0.2, "outerConeAngle": 0.6}},
        ]}},
    )
    asset = read(document)
    cam, top, lamp, screen = asset.roots

    assert cam.kind == NodeKind.CAMERA and cam.camera == "0"
    assert asset.cameras["0"].fov == pytest.approx(60.0)
    assert asset.cameras["0"].far == 100.0
    assert asset.cameras["1"].type == "orthographic"
    assert asset.cameras["1"].near == 0.01

    assert lamp.kind == NodeKind.LIGHT and lamp.light == "0"
    light = asset.lights["0"]
    assert (light.type, light.intensity, light.inner_cone_angle, light.outer_cone_angle) == ("spot", 3.0, 0.2, 0.6)

    assert screen.kind == NodeKind.MESH
    assert [(c.kind, c.camera) for c in screen.children] == [(NodeKind.CAMERA, "0")]


def test_material_shading_from_extensions():
    document = GLTF2(materials=[
        Material(name="Flat", extensions={"KHR_materials_unlit": {}}),
        Material(name="Paint", extensions={"KHR_materials_clearcoat": {"clearcoatFactor": 1.0}}),
        Material(name="Plain"),
    ])
    materials = read(document).materials
    assert [materials[k].shading for k in ("0", "1", "2")] == ["basic", "physical", "standard"]


def test_matrix_is_decomposed():
    document = GLTF2(
        scenes=[Scene(nodes=[0])],
        nodes=[Node(name="M", matrix=[2.0, 0.0, 0.0, 0.0,
                                      0.0, 2.0, 0.0, 0.0,
                                      0.0, 0.0, 2.0, 0.0,
                                      2.0, 3.0, 4.0, 1.0])],
    )
    transform = read(document).roots[0].transform
    assert transform.translation == (2.0, 3.0, 4.0)
    assert transform.scale == (2.0, 2.0, 2.0)
    assert transform.rotation == pytest.approx((0.0, 0.0, 0.0, 1.0))


def test_animations_name_their_targets():
    document = room_document()
    document.animations = [
        Animation(
            channels=[AnimationChannel(sampler=0, target=AnimationChannelTarget(node=1, path="rotation")),
                      AnimationChannel(sampler=0, target=AnimationChannelTarget(node=1, path="translation"))],
            samplers=[AnimationSampler(input=0, output=1)],
        ),
        Animation(name="Slide", channels=[AnimationChannel(sampler=0, target=AnimationChannelTarget(node=2))],
                  samplers=[AnimationSampler(input=0, output=1)]),
    ]
    clips = read(document).animations
    assert [(c.name, c.targets) for c in clips] == [("animation_0", ["Chair"]), ("Slide", ["Chair.001"])]


def test_morph_target_names_and_visibility():
    document = GLTF2(
        scenes=[Scene(nodes=[0])],
        nodes=[Node(name="Face", mesh=0, extensions={"KHR_node_visibility": {"visible": False}})],
        meshes=[Mesh(extras={"targetNames": ["smile"]}, primitives=[
            Primitive(attributes=Attributes(POSITION=0), targets=[Attributes(POSITION=2)]),
        ])],
    )
    asset = read(document)
    (face,) = asset.roots
    assert face.visible is False
    assert asset.geometries[face.geometry].morph_targets == ["smile"]


def test_without_scene_roots_are_parentless_nodes():
    document = GLTF2(nodes=[Node(name="A", children=[1]), Node(name="B"), Node(name="C")])
    assert [n.name for n in read(document).roots] == ["A", "C"]


def test_reader_factory():
    assert get_file_type("model.GLB") == "glb"
    assert get_file_type("model.obj") == "unknown"
    assert is_supported_format("scene.gltf")
    assert not is_supported_format("scene.fbx")
    with pytest.raises(ValueError):
        create_reader("scene.fbx")


def test_unnamed_nodes_take_the_loader_default_names():
    document = GLTF2(
        scenes=[Scene(nodes=[0, 1, 2])],
        nodes=[
            Node(mesh=0),
            Node(mesh=1),
            Node(extensions={"KHR_lights_punctual": {"light": 0}}),
        ],
        meshes=[chair_mesh(), Mesh(primitives=[Primitive(attributes=Attributes(POSITION=2))])],
        extensions={"KHR_lights_punctual": {"lights": [{"type": "point"}]}},
    )
    asset = read(document)
    assert [n.name for n in asset.roots] == ["ChairMesh", "mesh_1", "light_0"]

    text = JSXExporter(CompileOptions()).compile(asset)
    assert "geometry={nodes.ChairMesh.geometry}" in text
    assert "geometry={nodes.mesh_1.geometry}" in text
