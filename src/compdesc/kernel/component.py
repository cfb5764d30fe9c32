"""Component aggregate: the root of a deployment descriptor.

A Component is built incrementally through its add_* operations and then
persisted once. Module target paths partition the installed file system
tree, so overlapping module paths are rejected when a module is added.
Other item kinds do not own a subtree and use plain set semantics.

The aggregate is not safe for concurrent mutation; callers building one
Component from several threads must serialize the add_* calls.
"""

import json
from typing import Any, Dict, Iterable, List, Optional, Set, Union

from pydantic import Field, SerializationInfo, field_serializer, model_validator

from compdesc.errors import DuplicateTargetPath
from .base import DescriptorModel, StringSet
from .dependency import parse_dependency
from .items import (
    Directory,
    FileContainer,
    FileItem,
    Library,
    Link,
    Module,
    PermissionConfig,
    Property,
)
from .metadata import MetaData, new_metadata
from .schema import (
    DEFAULT_CONTAINER_TARGET,
    DEFAULT_FILE_TARGET,
    DEFAULT_LIBS_TARGET,
    DEFAULT_MODULES_TARGET,
)

PATH_SEPARATOR = "/"

_ITEM_SETS = (
    "file_containers",
    "file_items",
    "link_items",
    "directory_items",
    "properties",
    "permission_config",
)


def paths_overlap(path_a: str, path_b: str) -> bool:
    """Check if two target paths are equal or one contains the other.

    A path only contains another one at a path-segment boundary:
    'a/b' contains 'a/b/c' but not 'a/bc'.
    """
    a = path_a.rstrip(PATH_SEPARATOR)
    b = path_b.rstrip(PATH_SEPARATOR)
    if a == b:
        return True
    shorter, longer = (a, b) if len(a) < len(b) else (b, a)
    return longer.startswith(shorter) and longer[len(shorter)] == PATH_SEPARATOR


def _canonical_key(document: Dict[str, Any]) -> str:
    return json.dumps(document, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def _default_metadata() -> MetaData:
    return new_metadata("", "", "")


class Component(DescriptorModel):
    """Deployment descriptor of a component.

    Attributes:
        display_name: Display name of the component
        component_description: Description of the component
        types: All supported deployment/environment types
        classifiers: All supported OS classifiers
        modules_target_path: Installation target of all modules
        libs_target_path: Installation target of all libraries
        file_target_path: Installation target of all single files
        container_target_path: Installation target of all containers
        target: Installation target of the component itself
        descriptor_storage_path: Storage path of the descriptor in the installation
        modules: Modules keyed by their target path
        libs: Libraries keyed by their dependency string
        excludes: Exclude patterns for update installations
        preserve_excludes: Patterns excluded from preserving on update
        preserve_includes: Patterns preserved on update
        metadata: Creation time, schema version and component coordinate
    """
    display_name: str
    component_description: str = ""

    types: StringSet = frozenset()
    classifiers: StringSet = frozenset()

    modules_target_path: str = DEFAULT_MODULES_TARGET
    libs_target_path: str = DEFAULT_LIBS_TARGET
    file_target_path: str = DEFAULT_FILE_TARGET
    container_target_path: str = DEFAULT_CONTAINER_TARGET
    target: str = ""
    descriptor_storage_path: str = ""

    modules: Dict[str, Module] = Field(default_factory=dict)
    libs: Dict[str, Library] = Field(default_factory=dict)
    file_containers: Set[FileContainer] = Field(default_factory=set)
    file_items: Set[FileItem] = Field(default_factory=set)
    link_items: Set[Link] = Field(default_factory=set)
    directory_items: Set[Directory] = Field(default_factory=set)
    properties: Set[Property] = Field(default_factory=set)
    permission_config: Set[PermissionConfig] = Field(default_factory=set)

    excludes: StringSet = frozenset()
    preserve_excludes: StringSet = frozenset()
    preserve_includes: StringSet = frozenset()

    metadata: MetaData = Field(default_factory=_default_metadata)

    @model_validator(mode="after")
    def validate_module_paths(self) -> "Component":
        """Materialized components must not contain overlapping module paths."""
        self.validate_layout()
        return self

    @field_serializer(*_ITEM_SETS)
    def _serialize_item_set(self, items: Set[DescriptorModel], info: SerializationInfo) -> List[Dict[str, Any]]:
        # Items are dumped as JSON objects in both modes, sorted on their canonical
        # JSON so equal components produce equal documents
        dumped = [item.model_dump(mode="json", by_alias=bool(info.by_alias)) for item in items]
        return sorted(dumped, key=_canonical_key)

    def validate_layout(self) -> None:
        """Check all module target paths pairwise.

        Raises:
            DuplicateTargetPath: If two module paths overlap
        """
        paths = list(self.modules)
        for index, path in enumerate(paths):
            for other in paths[index + 1:]:
                if paths_overlap(path, other):
                    raise DuplicateTargetPath(other, path)

    def find_overlapping_module_path(self, target_path: str) -> Optional[str]:
        """Return the configured module path overlapping target_path, if any."""
        for existing in self.modules:
            if paths_overlap(existing, target_path):
                return existing
        return None

    def add_module(self, module: Module, target_path: Optional[str] = None) -> None:
        """
        Add a module to the module map.

        Args:
            module: Module to add
            target_path: Key of the module; defaults to module.target_path

        Raises:
            DuplicateTargetPath: If the path is already configured or overlaps
                with the path of another module. The component is unchanged.
        """
        if target_path is None:
            target_path = module.target_path
        if target_path in self.modules:
            raise DuplicateTargetPath(target_path, target_path)
        existing = self.find_overlapping_module_path(target_path)
        if existing is not None:
            raise DuplicateTargetPath(target_path, existing)
        self.modules[target_path] = module

    def add_jar_module(self, dependency: str) -> Module:
        """
        Add a module consisting of a single jar.

        The module is named and keyed after the module part of the dependency.

        Args:
            dependency: Module dependency with format "group:module:version"

        Returns:
            The added module

        Raises:
            InvalidDependencyFormat: If the dependency string is malformed
            DuplicateTargetPath: If the module name collides with another module path
        """
        dep = parse_dependency(dependency)
        module = Module(name=dep.module, target_path=dep.module, dependency=dep)
        self.add_module(module)
        return module

    def add_lib(self, library: Union[Library, str], target_name: Optional[str] = None) -> Library:
        """
        Add a library; an existing entry for the same dependency is replaced.

        Args:
            library: Library object or dependency with format "group:module:version"
            target_name: Installed name when a dependency string is given
                (defaults to the libs target path)

        Returns:
            The stored library
        """
        if isinstance(library, str):
            dep = parse_dependency(library)
            name = target_name if target_name is not None else self.libs_target_path
            library = Library(dependency=dep, target_name=name)
        self.libs[library.dependency.to_id()] = library
        return library

    def _add_to_set(self, field_name: str, item: DescriptorModel) -> bool:
        items = getattr(self, field_name)
        if item in items:
            return False
        items.add(item)
        return True

    def add_file_container(self, container: FileContainer) -> bool:
        """Add a file container; False if an equal container is already configured."""
        return self._add_to_set("file_containers", container)

    def add_file_item(self, file_item: FileItem) -> bool:
        """Add a file item; False if an equal file item is already configured."""
        return self._add_to_set("file_items", file_item)

    def add_link_item(self, link: Link) -> bool:
        """Add a link; False if an equal link is already configured."""
        return self._add_to_set("link_items", link)

    def add_directory(self, directory: Directory) -> bool:
        """Add a directory; False if an equal directory is already configured."""
        return self._add_to_set("directory_items", directory)

    def add_property(self, prop: Property) -> bool:
        """Add a property; False if an equal property is already configured."""
        return self._add_to_set("properties", prop)

    def add_permission_conf(self, permission: PermissionConfig) -> bool:
        """Add a permission configuration; False if an equal one is already configured."""
        return self._add_to_set("permission_config", permission)

    def items_for(self, classifier: str = "", deployment_type: str = "") -> "Component":
        """
        Return a copy of this component narrowed to one OS classifier and deployment type.

        Items without classifier or types apply everywhere. Empty arguments act
        as wildcards. The returned component shares the (immutable) items.
        """
        def _keep(items: Iterable[DescriptorModel]) -> Set[DescriptorModel]:
            return {item for item in items if item.platform.applies_to(classifier, deployment_type)}

        update: Dict[str, Any] = {
            "modules": {
                path: module for path, module in self.modules.items()
                if module.applies_to(classifier, deployment_type)
            },
            "libs": {
                key: lib for key, lib in self.libs.items()
                if lib.applies_to(classifier, deployment_type)
            },
        }
        for field_name in _ITEM_SETS:
            update[field_name] = _keep(getattr(self, field_name))
        return self.model_copy(update=update)


def new_component(display_name: str, description: str = "", **defaults: Any) -> Component:
    """
    Create an empty component for incremental building.

    Args:
        display_name: Display name of the component
        description: Description of the component
        **defaults: Further Component fields, e.g. modules_target_path or metadata

    Returns:
        New Component
    """
    return Component(display_name=display_name, component_description=description, **defaults)
