"""Tests for the Component aggregate: module paths, libraries and item sets."""

import pytest
from pydantic import ValidationError

from compdesc.errors import DuplicateTargetPath, InvalidDependencyFormat, MalformedDependency
from compdesc.kernel.component import Component, new_component, paths_overlap
from compdesc.kernel.dependency import parse_dependency
from compdesc.kernel.items import (
    Directory,
    FileContainer,
    FileItem,
    Library,
    Link,
    Module,
    PermissionConfig,
    Property,
)
from compdesc.kernel.schema import SCHEMA_VERSION
from compdesc.kernel.traits import Platform


def make_module(target_path: str, name: str = "foo") -> Module:
    return Module(name=name, target_path=target_path, dependency=parse_dependency(f"com.example:{name}:1.0.0"))


@pytest.fixture
def component() -> Component:
    return new_component("Shop", "Example shop component")


class TestPathsOverlap:
    @pytest.mark.parametrize(
        "a, b",
        [
            ("modules/a/b", "modules/a/b"),
            ("modules/a/b", "modules/a/b/c"),
            ("modules/a/b/c", "modules/a/b"),
            ("modules/a/b/", "modules/a/b"),
            ("modules/a/b/", "modules/a/b/c"),
        ],
    )
    def test_overlapping(self, a, b):
        assert paths_overlap(a, b)

    @pytest.mark.parametrize(
        "a, b",
        [
            ("modules/a/b", "modules/a/bc"),
            ("modules/a/bc", "modules/a/b"),
            ("modules/a", "modules/b"),
            ("foo", "modules/foo"),
        ],
    )
    def test_disjoint(self, a, b):
        assert not paths_overlap(a, b)


class TestAddModule:
    """Module target paths must be exclusive."""

    def test_add_uses_module_target_path(self, component):
        module = make_module("modules/a/b")
        component.add_module(module)
        assert component.modules == {"modules/a/b": module}

    def test_add_with_explicit_target_path(self, component):
        module = make_module("ignored")
        component.add_module(module, "modules/custom")
        assert component.modules == {"modules/custom": module}

    def test_identical_path_rejected(self, component):
        component.add_module(make_module("modules/a/b"))
        with pytest.raises(DuplicateTargetPath, match="modules/a/b"):
            component.add_module(make_module("modules/a/b", name="other"))

    def test_sibling_with_common_prefix_allowed(self, component):
        component.add_module(make_module("modules/a/b"))
        component.add_module(make_module("modules/a/bc", name="bc"))
        assert set(component.modules) == {"modules/a/b", "modules/a/bc"}

    def test_nested_path_rejected(self, component):
        component.add_module(make_module("modules/a/b"))
        with pytest.raises(DuplicateTargetPath) as exc_info:
            component.add_module(make_module("modules/a/b/c", name="c"))
        assert exc_info.value.target_path == "modules/a/b/c"
        assert exc_info.value.existing_path == "modules/a/b"

    def test_enclosing_path_rejected(self, component):
        component.add_module(make_module("modules/a/b/c"))
        with pytest.raises(DuplicateTargetPath):
            component.add_module(make_module("modules/a/b", name="b"))

    def test_component_unchanged_after_rejection(self, component):
        first = make_module("modules/a/b")
        component.add_module(first)
        before = dict(component.modules)
        with pytest.raises(DuplicateTargetPath):
            component.add_module(make_module("modules/a/b/c", name="c"))
        assert component.modules == before


class TestAddJarModule:
    def test_jar_module_keyed_by_module_name(self, component):
        module = component.add_jar_module("com.example:foo:1.0.0")
        assert component.modules == {"foo": module}
        assert module.name == "foo"
        assert module.target_path == "foo"
        assert module.dependency == parse_dependency("com.example:foo:1.0.0")

    @pytest.mark.parametrize("value", ["foo", "com.example:foo"])
    def test_malformed_dependency(self, component, value):
        with pytest.raises(InvalidDependencyFormat):
            component.add_jar_module(value)
        assert component.modules == {}

    def test_invalid_format_is_malformed_dependency(self):
        assert InvalidDependencyFormat is MalformedDependency

    def test_jar_module_collision(self, component):
        component.add_jar_module("com.example:foo:1.0.0")
        with pytest.raises(DuplicateTargetPath):
            component.add_jar_module("org.other:foo:2.0.0")


class TestAddLib:
    """Libraries are keyed by dependency string; last write wins."""

    def test_add_library_object(self, component):
        lib = Library(dependency=parse_dependency("g:m:v"), target_name="m-v.jar")
        component.add_lib(lib)
        assert component.libs == {"g:m:v": lib}

    def test_add_from_string_defaults_target_name(self, component):
        lib = component.add_lib("com.example:bar:2.0.0")
        assert lib.target_name == component.libs_target_path

    def test_last_write_wins(self, component):
        component.add_lib("com.example:bar:2.0.0", target_name="bar-first.jar")
        component.add_lib("com.example:bar:2.0.0", target_name="bar-second.jar")
        assert list(component.libs) == ["com.example:bar:2.0.0"]
        assert component.libs["com.example:bar:2.0.0"].target_name == "bar-second.jar"

    def test_malformed_string(self, component):
        with pytest.raises(MalformedDependency):
            component.add_lib("bar")


ITEM_ADDERS = [
    ("add_file_container", "file_containers", FileContainer(name="c", target_path="bin", item_type="sh")),
    ("add_file_item", "file_items", FileItem(name="env", extension="properties", target_path="conf")),
    ("add_link_item", "link_items", Link(name="current", target_path="share")),
    ("add_directory", "directory_items", Directory(dir_path="var/log")),
    ("add_property", "properties", Property(key="k", value="v", pattern="*.properties")),
    ("add_permission_conf", "permission_config", PermissionConfig(file="bin/start.sh", permissions="rwx")),
]


@pytest.mark.parametrize("adder, field_name, item", ITEM_ADDERS)
def test_item_set_add_returns_true_then_false(component, adder, field_name, item):
    """Adding an equal value twice returns True then False and keeps one entry."""
    add = getattr(component, adder)
    assert add(item) is True
    assert add(item.model_copy()) is False
    assert len(getattr(component, field_name)) == 1


def test_different_items_both_added(component):
    assert component.add_file_item(FileItem(name="a")) is True
    assert component.add_file_item(FileItem(name="a", platform=Platform(classifier="linux"))) is True
    assert len(component.file_items) == 2


def test_end_to_end_building(component):
    """Jar module, module path collision and library replacement in one build."""
    component.add_jar_module("com.example:foo:1.0.0")
    foo_module = make_module("modules/foo")
    component.add_module(foo_module)
    with pytest.raises(DuplicateTargetPath):
        component.add_module(make_module("modules/foo", name="foo2"), "modules/foo")
    with pytest.raises(DuplicateTargetPath):
        component.add_module(make_module("foo", name="foo3"))

    component.add_lib("com.example:bar:2.0.0", target_name="bar.jar")
    component.add_lib("com.example:bar:2.0.0", target_name="bar-2.0.0.jar")
    assert len(component.libs) == 1
    assert component.libs["com.example:bar:2.0.0"].target_name == "bar-2.0.0.jar"
    assert set(component.modules) == {"foo", "modules/foo"}


class TestConstruction:
    def test_defaults(self, component):
        assert component.display_name == "Shop"
        assert component.component_description == "Example shop component"
        assert component.modules_target_path == "modules"
        assert component.libs_target_path == "libs"
        assert component.file_target_path == "properties"
        assert component.container_target_path == ""
        assert component.metadata.version == SCHEMA_VERSION

    def test_defaults_can_be_overridden(self):
        component = new_component("Shop", "", modules_target_path="mods", target="opt/shop")
        assert component.modules_target_path == "mods"
        assert component.target == "opt/shop"

    def test_fields_cannot_be_reassigned(self, component):
        with pytest.raises(ValidationError):
            component.display_name = "Other"

    def test_overlapping_modules_rejected_at_construction(self):
        with pytest.raises(ValidationError, match="overlaps"):
            Component(
                display_name="Shop",
                modules={"a/b": make_module("a/b"), "a/b/c": make_module("a/b/c", name="c")},
            )

    def test_validate_layout_accepts_disjoint_paths(self, component):
        component.add_module(make_module("a/b"))
        component.add_module(make_module("a/bc", name="bc"))
        component.validate_layout()


class TestItemsFor:
    def test_narrows_to_platform(self, full_component):
        linux = full_component.items_for("linux", "production")
        assert len(linux.file_containers) == 1
        assert len(linux.directory_items) == 1

        win = full_component.items_for("win", "test")
        assert win.file_containers == set()
        assert win.directory_items == set()
        # Platform independent items stay
        assert win.file_items == full_component.file_items
        assert win.libs == full_component.libs

    def test_source_component_unchanged(self, full_component):
        containers = set(full_component.file_containers)
        full_component.items_for("win")
        assert full_component.file_containers == containers


class TestSerialization:
    def test_item_sets_written_in_stable_order(self, full_component):
        """Set members are ordered independent of insertion order."""
        reordered = full_component.model_copy(deep=True)
        for name in ("zeta", "alpha"):
            full_component.add_file_item(FileItem(name=name, platform=Platform(classifier="linux")))
        for name in ("alpha", "zeta"):
            reordered.add_file_item(FileItem(name=name, platform=Platform(classifier="linux")))
        dumped = full_component.model_dump(mode="json", by_alias=True)["fileItems"]
        assert dumped == reordered.model_dump(mode="json", by_alias=True)["fileItems"]
        assert len(dumped) == 3

    def test_python_dump_matches_json_dump(self, full_component):
        """Python-mode dumps write string sets and item sets as sorted lists too."""
        python_dump = full_component.model_dump(by_alias=True)
        json_dump = full_component.model_dump(mode="json", by_alias=True)
        assert python_dump["types"] == ["production", "test"]
        assert python_dump["fileItems"] == json_dump["fileItems"]
        assert python_dump["directoryItems"] == json_dump["directoryItems"]
        assert python_dump["modules"]["modules/foo"]["jars"] == ["foo"]
