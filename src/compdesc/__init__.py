"""compdesc: component deployment descriptors with versioned persistence."""

from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("compdesc")
except PackageNotFoundError:
    __version__ = "dev"

# Public API exports
from compdesc.errors import (
    DescriptorError,
    DuplicateTargetPath,
    IncompatibleVersion,
    InvalidDependencyFormat,
    MalformedDependency,
    PersistenceError,
    ReadFailure,
    WriteFailure,
)
from compdesc.kernel.component import Component, new_component
from compdesc.kernel.content_type import ContentType
from compdesc.kernel.dependency import Dependency, parse_dependency
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
from compdesc.kernel.metadata import MetaData, new_metadata
from compdesc.kernel.schema import SCHEMA_VERSION
from compdesc.kernel.traits import Platform, UpdatePolicy
from compdesc.store import DescriptorStore, peek_metadata, read_from_file, write_to_file

__all__ = [
    "__version__",
    "SCHEMA_VERSION",
    "Component",
    "new_component",
    "ContentType",
    "Dependency",
    "parse_dependency",
    "Module",
    "Library",
    "FileContainer",
    "FileItem",
    "Link",
    "Directory",
    "Property",
    "PermissionConfig",
    "Platform",
    "UpdatePolicy",
    "MetaData",
    "new_metadata",
    "DescriptorStore",
    "write_to_file",
    "read_from_file",
    "peek_metadata",
    "DescriptorError",
    "MalformedDependency",
    "InvalidDependencyFormat",
    "DuplicateTargetPath",
    "IncompatibleVersion",
    "PersistenceError",
    "ReadFailure",
    "WriteFailure",
]
