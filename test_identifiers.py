import pytest

from core.errors import AmbiguousIdentifier
from core.identifiers import IdentifierAllocator, RuntimeNames, is_identifier, runtime_name, sanitize


def test_sanitize_replaces_whitespace_and_drops_illegal_characters():
    assert sanitize("my node") == "my_node"
    assert sanitize("Chair.001") == "Chair001"
    assert sanitize("3D-Model") == "_3DModel"
    assert sanitize("$ok") == "$ok"
    assert sanitize("!!!") == ""
    assert sanitize("") == ""


def test_original_name_kept_when_free():
    allocator = IdentifierAllocator(keep_original_names=True)
    assert allocator.allocate("Chair", "mesh") == "Chair"
    assert "Chair" in allocator


def test_collision_falls_back_to_kind_counter():
    allocator = IdentifierAllocator(keep_original_names=True)
    assert allocator.allocate("Box", "mesh") == "Box"
    assert allocator.allocate("Box", "mesh") == "mesh1"
    assert allocator.allocate("Box", "mesh") == "mesh2"


def test_reserved_words_are_never_returned():
    allocator = IdentifierAllocator(keep_original_names=True)
    assert allocator.allocate("class") == "node1"
    assert allocator.allocate("default", "group") == "group1"


def test_empty_or_unusable_names_get_a_base():
    allocator = IdentifierAllocator()
    assert allocator.allocate("", "geometry") == "nodes1"
    assert allocator.allocate(None, "material") == "materials1"
    assert allocator.allocate("***", "camera") == "camera1"


def test_counter_skips_names_already_taken():
    allocator = IdentifierAllocator(keep_original_names=True)
    assert allocator.allocate("mesh1", "mesh") == "mesh1"
    assert allocator.allocate("", "mesh") == "mesh2"
    assert allocator.allocate("", "mesh") == "mesh3"


def test_original_names_ignored_when_disabled():
    allocator = IdentifierAllocator(keep_original_names=False)
    names = [allocator.allocate(name, "mesh") for name in ("Chair", "Table", "Chair")]
    assert names == ["mesh1", "mesh2", "mesh3"]
    assert allocator.registry["mesh1"] == "Chair"


def test_allocations_are_unique_for_many_duplicates():
    allocator = IdentifierAllocator()
    names = [allocator.allocate("Leaf", "mesh") for _ in range(50)]
    assert len(set(names)) == 50


def test_register_twice_raises():
    allocator = IdentifierAllocator()
    allocator.allocate("Box")
    with pytest.raises(AmbiguousIdentifier):
        allocator._register("Box", "Box")


def test_runtime_name_follows_the_loader_sanitizer():
    assert runtime_name("Left Arm") == "Left_Arm"
    assert runtime_name("Chair.001") == "Chair001"
    assert runtime_name("rig:hand[0]/tip") == "righand0tip"
    assert runtime_name("Würfel") == "Würfel"
    assert runtime_name(None) == ""


def test_runtime_names_suffix_repeated_claims():
    names = RuntimeNames()
    claimed = [names.claim(name) for name in ("Cube", "Cube", "Cube.", "Sphere", "Cube")]
    assert claimed == ["Cube", "Cube_1", "Cube_2", "Sphere", "Cube_3"]


def test_runtime_names_leave_unnamed_objects_alone():
    names = RuntimeNames()
    assert names.claim("") == ""
    assert names.claim(None) == ""
    assert names.claim("Box") == "Box"


def test_generated_suffixes_are_not_reserved():
    names = RuntimeNames()
    assert [names.claim(name) for name in ("A", "A", "A_1")] == ["A", "A_1", "A_1"]


def test_is_identifier():
    assert is_identifier("Cube_1")
    assert is_identifier("$ref")
    assert is_identifier("default")
    assert not is_identifier("1st")
    assert not is_identifier("Steel Plate")
    assert not is_identifier("Würfel")
    assert not is_identifier("")
