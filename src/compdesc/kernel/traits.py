"""Attribute groups embedded by value in placeable items.

Each item kind lists the groups it carries as ordinary fields:

- Platform: OS classifier and deployment/environment types
- UpdatePolicy: content type, update exclusion flag and update patterns
"""

from .base import DescriptorModel, StringSet
from .content_type import ContentType, ContentTypeField


class Platform(DescriptorModel):
    """OS/environment applicability of an item.

    An empty classifier means platform independent, empty types means the
    item applies to every deployment type.
    """
    classifier: str = ""
    types: StringSet = frozenset()

    def applies_to(self, classifier: str = "", deployment_type: str = "") -> bool:
        """Check whether the item is used for an OS classifier and deployment type.

        Empty arguments act as wildcards.
        """
        if self.classifier and classifier and self.classifier != classifier:
            return False
        if self.types and deployment_type and deployment_type not in self.types:
            return False
        return True


class UpdatePolicy(DescriptorModel):
    """Behaviour of an item during update installations.

    excluded_from_update has the same polarity for every item kind: if True,
    the item is not part of an update installation. The pattern sets are only
    carried for the installer, they are not evaluated here.
    """
    content_type: ContentTypeField = ContentType.IMMUTABLE
    excluded_from_update: bool = False
    excludes: StringSet = frozenset()
    preserve_excludes: StringSet = frozenset()
    preserve_includes: StringSet = frozenset()


def data_policy() -> UpdatePolicy:
    """Default update policy for directories (DATA content)."""
    return UpdatePolicy(content_type=ContentType.DATA)


def immutable_policy() -> UpdatePolicy:
    return UpdatePolicy()


def platform_independent() -> Platform:
    return Platform()
