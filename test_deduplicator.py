from core.deduplicator import StructuralDeduplicator
from core.identifiers import IdentifierAllocator
from core.scene_data import InstancingMode, NodeKind
from core.scene_tree import TreeNode


def make_node(node_id, geometry="box", material="steel", kind=NodeKind.MESH, name=None, **kwargs):
    name = f"Mesh{node_id}" if name is None else name
    return TreeNode(node_id=node_id, runtime_name=name, name=name, kind=kind,
                    geometry=geometry, material=material, **kwargs)


def feed(dedup, nodes):
    for node in nodes:
        dedup.add_candidate(node)
    return nodes


def test_none_mode_never_instances():
    dedup = StructuralDeduplicator(InstancingMode.NONE)
    nodes = feed(dedup, [make_node(i) for i in range(3)])
    assert dedup.classes() == []
    assert all(dedup.class_for(node) is None for node in nodes)


def test_all_mode_requires_matching_material():
    dedup = StructuralDeduplicator(InstancingMode.ALL)
    nodes = feed(dedup, [
        make_node(0, material="steel"),
        make_node(1, material="steel"),
        make_node(2, material="wood"),
    ])
    classes = dedup.classes()
    assert len(classes) == 1
    assert classes[0].key == ("box", "steel")
    assert classes[0].member_ids == [0, 1]
    assert dedup.class_for(nodes[2]) is None


def test_selective_mode_groups_by_geometry_only():
    dedup = StructuralDeduplicator("selective")
    feed(dedup, [make_node(0, material="steel"), make_node(1, material="wood")])
    classes = dedup.classes()
    assert len(classes) == 1
    assert classes[0].key == ("box",)
    assert classes[0].size == 2


def test_single_member_is_not_instanced():
    dedup = StructuralDeduplicator(InstancingMode.ALL)
    nodes = feed(dedup, [make_node(0, geometry="box"), make_node(1, geometry="sphere")])
    assert dedup.classes() == []
    assert dedup.class_for(nodes[0]) is None


def test_representative_is_first_in_traversal_order():
    dedup = StructuralDeduplicator(InstancingMode.ALL)
    feed(dedup, [make_node(4, name="First"), make_node(7, name="Second")])
    assert dedup.classes()[0].representative.name == "First"


def test_non_mesh_and_bone_descendants_are_skipped():
    dedup = StructuralDeduplicator(InstancingMode.ALL)
    feed(dedup, [
        make_node(0, kind=NodeKind.SKINNED_MESH),
        make_node(1, kind=NodeKind.SKINNED_MESH),
        make_node(2, inside_bone=True),
        make_node(3, inside_bone=True),
        make_node(4, geometry=None),
        make_node(5, geometry=None),
    ])
    assert dedup.classes() == []


def test_material_override_in_selective_mode():
    dedup = StructuralDeduplicator(InstancingMode.SELECTIVE)
    rep, other, bare = feed(dedup, [
        make_node(0, material="steel"),
        make_node(1, material="wood"),
        make_node(2, material=None),
    ])
    instance_class = dedup.class_for(rep)
    assert instance_class.material_override(rep) is None
    assert instance_class.material_override(other) == "wood"
    assert instance_class.material_override(bare) is None


def test_identifiers_come_from_representative_names():
    dedup = StructuralDeduplicator(InstancingMode.ALL)
    feed(dedup, [
        make_node(0, geometry="a", name="Chair"),
        make_node(1, geometry="a", name="Chair"),
        make_node(2, geometry="b", name=""),
        make_node(3, geometry="b", name=""),
    ])
    dedup.assign_identifiers(IdentifierAllocator())
    assert [c.identifier for c in dedup.classes()] == ["Chair", "nodes1"]
    summary = dedup.get_summary()
    assert "Shared definitions: 2" in summary
    assert "Chair: 2 placements" in summary


def test_excluded_geometries_are_never_candidates():
    dedup = StructuralDeduplicator(InstancingMode.SELECTIVE, excluded_geometries={"face"})
    nodes = feed(dedup, [
        make_node(0, geometry="face"),
        make_node(1, geometry="face"),
        make_node(2, geometry="box"),
        make_node(3, geometry="box"),
    ])
    assert [c.key for c in dedup.classes()] == [("box",)]
    assert dedup.class_for(nodes[0]) is None
    assert "Candidate meshes: 2" in dedup.get_summary()
