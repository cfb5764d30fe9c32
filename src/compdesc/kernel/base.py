"""Base model and shared field types for descriptor entities."""

from typing import Annotated, FrozenSet, List

from pydantic import BaseModel, ConfigDict, PlainSerializer
from pydantic.alias_generators import to_camel


def _sorted_strings(values: FrozenSet[str]) -> List[str]:
    """Serialize a string set as a sorted list (byte-stable documents)."""
    return sorted(values)


# Order-free set of strings: duplicates collapse, dumped as a sorted list
StringSet = Annotated[
    FrozenSet[str],
    PlainSerializer(_sorted_strings, return_type=List[str]),
]


class DescriptorModel(BaseModel):
    """Immutable value object of the descriptor document.

    Attributes are snake_case in Python and camelCase in the persisted
    document. Instances are frozen and hashable, so equality is structural
    over all fields.
    """
    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        alias_generator=to_camel,
        populate_by_name=True,
    )
