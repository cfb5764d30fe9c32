"""Pytest configuration and shared fixtures.

No sys.path hacks - tests import from the installed compdesc package.
"""

import pytest

from compdesc.kernel.component import Component, new_component
from compdesc.kernel.content_type import ContentType
from compdesc.kernel.dependency import Dependency
from compdesc.kernel.items import (
    Directory,
    FileContainer,
    FileItem,
    Link,
    Module,
    PermissionConfig,
    Property,
)
from compdesc.kernel.metadata import new_metadata
from compdesc.kernel.traits import Platform, UpdatePolicy
from compdesc.store import DescriptorStore

FIXED_MILLIS = 1_530_000_000_000


@pytest.fixture
def store() -> DescriptorStore:
    """Store using the library's schema version."""
    return DescriptorStore()


@pytest.fixture
def metadata():
    return new_metadata("com.example", "shop", "1.0.0", clock=lambda: FIXED_MILLIS)


@pytest.fixture
def foo_module() -> Module:
    return Module(
        name="foo",
        target_path="modules/foo",
        dependency=Dependency(group="com.example", module="foo", version="1.0.0"),
        pkgs=frozenset({"foo-share"}),
        jars=frozenset({"foo"}),
    )


@pytest.fixture
def full_component(metadata, foo_module) -> Component:
    """Component with at least one item of every kind."""
    component = new_component(
        "Shop",
        "Example shop component",
        types=frozenset({"production", "test"}),
        classifiers=frozenset({"linux", "macos"}),
        excludes=frozenset({"**/log/**"}),
        preserve_includes=frozenset({"**/conf/*.properties"}),
        metadata=metadata,
    )
    component.add_module(foo_module)
    component.add_jar_module("com.example:bar:2.0.0")
    component.add_lib("org.slf4j:slf4j-api:1.7.25", target_name="slf4j-api-1.7.25.jar")
    component.add_file_container(
        FileContainer(
            name="startscripts",
            target_path="bin",
            item_type="sh",
            platform=Platform(classifier="linux"),
            update=UpdatePolicy(
                content_type=ContentType.STATIC,
                excludes=frozenset({"bin/custom*.sh"}),
            ),
        )
    )
    component.add_file_item(
        FileItem(
            name="environment",
            extension="properties",
            target_path="conf",
            update=UpdatePolicy(content_type=ContentType.CONFIGURATION, excluded_from_update=True),
        )
    )
    component.add_link_item(Link(name="share/current", target_path="share/1.0.0"))
    component.add_directory(Directory(dir_path="var/log", platform=Platform(types=frozenset({"production"}))))
    component.add_property(Property(key="server.port", value="8080", pattern="**/conf/server.properties"))
    component.add_permission_conf(PermissionConfig(file="bin/start.sh", permissions="rwxr-x---"))
    return component
