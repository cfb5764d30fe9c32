"""Exception hierarchy for component descriptors."""

from pathlib import Path
from typing import Optional, Union


class DescriptorError(Exception):
    """Base exception for descriptor model and persistence errors."""
    pass


class MalformedDependency(DescriptorError, ValueError):
    """Raised when a dependency string is not in 'group:module:version' format."""
    def __init__(self, value: str):
        self.value = value
        super().__init__(
            f"Dependency string '{value}' must have a group, a module and a version part. "
            f"See 'group:module:version'."
        )


# Name used by the module-building operations
InvalidDependencyFormat = MalformedDependency


class DuplicateTargetPath(DescriptorError, ValueError):
    """Raised when a module target path collides with an already configured module."""
    def __init__(self, target_path: str, existing_path: str):
        self.target_path = target_path
        self.existing_path = existing_path
        if target_path == existing_path:
            msg = f"TargetPath '{target_path}' is configured for another module."
        else:
            msg = (
                f"TargetPath '{target_path}' overlaps with the target path "
                f"'{existing_path}' of another module."
            )
        super().__init__(msg)


class IncompatibleVersion(DescriptorError):
    """Raised when a descriptor's schema version differs from the supported one."""
    def __init__(self, found: str, expected: str, path: Optional[Union[str, Path]] = None):
        self.found = found
        self.expected = expected
        self.path = Path(path) if path is not None else None
        location = f" of {self.path}" if self.path is not None else ""
        super().__init__(
            f"The descriptor version{location} ({found}) is not compatible "
            f"with the library version ({expected})."
        )


class PersistenceError(DescriptorError):
    """Base exception for descriptor read/write failures.

    Always carries the file path and the underlying cause.
    """
    action = "access"

    def __init__(self, path: Union[str, Path], cause: Union[BaseException, str]):
        self.path = Path(path)
        self.cause = cause
        super().__init__(f"Could not {self.action} component descriptor {self.path}. ({cause})")


class ReadFailure(PersistenceError):
    """Raised when a descriptor cannot be read, parsed or mapped."""
    action = "read"


class WriteFailure(PersistenceError):
    """Raised when a descriptor cannot be generated or written."""
    action = "write"
