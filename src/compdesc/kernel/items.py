"""Placeable items of a component descriptor.

Every item is an immutable value object. Items are stored in de-duplicating
sets or maps of a Component, so equality is structural over all fields.
Path strings are relative and never None; an empty path means "no override,
use the component default".
"""

from typing import Tuple

from pydantic import Field

from .base import DescriptorModel, StringSet
from .dependency import Dependency
from .traits import Platform, UpdatePolicy, data_policy, immutable_policy, platform_independent


class Module(DescriptorModel):
    """An installable module with its own dependency and an exclusive target path.

    Attributes:
        name: Module name
        target_path: Target path of the module in an installed component
        dependency: Dependency coordinate of the module
        pkgs: Additional packages of this module
        jars: Additional jars of this module
        target_included: True if the target path is included in the module packages
        update: Update behaviour (content type defaults to IMMUTABLE)
        types: Deployment or environment types
        classifiers: OS specific usages of this module
    """
    name: str
    target_path: str
    dependency: Dependency
    pkgs: StringSet = frozenset()
    jars: StringSet = frozenset()
    target_included: bool = False
    update: UpdatePolicy = Field(default_factory=immutable_policy)
    types: StringSet = frozenset()
    classifiers: StringSet = frozenset()

    def applies_to(self, classifier: str = "", deployment_type: str = "") -> bool:
        """Check whether the module is used for an OS classifier and deployment type."""
        if self.classifiers and classifier and classifier not in self.classifiers:
            return False
        if self.types and deployment_type and deployment_type not in self.types:
            return False
        return True


class Library(DescriptorModel):
    """A library of the component, keyed by its dependency string."""
    dependency: Dependency
    target_name: str
    types: StringSet = frozenset()

    def applies_to(self, classifier: str = "", deployment_type: str = "") -> bool:
        """Libraries are OS independent; only deployment types narrow them."""
        return not (self.types and deployment_type and deployment_type not in self.types)


class FileContainer(DescriptorModel):
    """A container (zip file) extracted into the component.

    Attributes:
        name: Container name
        target_path: Target path of the container in an installed component
        item_type: Additional description of the container
        target_included: True if the target path is part of the container itself
    """
    name: str
    target_path: str
    item_type: str
    target_included: bool = False
    platform: Platform = Field(default_factory=platform_independent)
    update: UpdatePolicy = Field(default_factory=immutable_policy)


class FileItem(DescriptorModel):
    """A single file copied into the component as it is."""
    name: str = ""
    extension: str = ""
    target_path: str = ""
    platform: Platform = Field(default_factory=platform_independent)
    update: UpdatePolicy = Field(default_factory=immutable_policy)


class Link(DescriptorModel):
    """A link in the component.

    If the name starts with '/' it is an absolute path. The target path must
    exist in the installed component.
    """
    name: str = ""
    target_path: str = ""
    platform: Platform = Field(default_factory=platform_independent)
    update: UpdatePolicy = Field(default_factory=immutable_policy)


class Directory(DescriptorModel):
    """A directory created in the component (content type defaults to DATA)."""
    dir_path: str
    platform: Platform = Field(default_factory=platform_independent)
    update: UpdatePolicy = Field(default_factory=data_policy)


class Property(DescriptorModel):
    """A deployment property applied to installed files matching a pattern."""
    key: str
    value: str
    pattern: str
    platform: Platform = Field(default_factory=platform_independent)
    update: UpdatePolicy = Field(default_factory=immutable_policy)

    @property
    def identity(self) -> Tuple[str, str]:
        """Conceptual key of a property: (key, pattern)."""
        return (self.key, self.pattern)


class PermissionConfig(DescriptorModel):
    """File permissions for a relative file or directory path."""
    file: str
    permissions: str
    platform: Platform = Field(default_factory=platform_independent)
