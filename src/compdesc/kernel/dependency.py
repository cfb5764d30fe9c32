"""Dependency coordinates in 'group:module:version' form."""

from compdesc.errors import MalformedDependency
from .base import DescriptorModel


class Dependency(DescriptorModel):
    """A (group, module, version) coordinate of a module, library or component."""
    group: str
    module: str
    version: str

    def __str__(self) -> str:
        return f"{self.group}:{self.module}:{self.version}"

    def to_id(self) -> str:
        """Canonical string form, used as the key of the component's library map."""
        return str(self)

    @classmethod
    def parse(cls, value: str) -> "Dependency":
        """Parse a dependency string; see parse_dependency()."""
        return parse_dependency(value)


def parse_dependency(value: str) -> Dependency:
    """
    Parse a dependency string in the format group:module:version.

    Parts beyond the third one (e.g. a classifier in 'g:m:v:extra') are ignored.

    Args:
        value: Dependency as a single string

    Returns:
        Dependency object

    Raises:
        MalformedDependency: If fewer than three colon-separated parts are present
    """
    parts = value.split(":")
    if len(parts) < 3:
        raise MalformedDependency(value)
    return Dependency(group=parts[0], module=parts[1], version=parts[2])
