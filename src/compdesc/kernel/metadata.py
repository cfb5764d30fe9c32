"""Descriptor metadata: creation time, schema version and component coordinate."""

import time
from typing import Callable

from pydantic import Field

from .base import DescriptorModel
from .dependency import Dependency
from .schema import SCHEMA_VERSION


def current_time_millis() -> int:
    """Wall-clock time in milliseconds since the epoch."""
    return time.time_ns() // 1_000_000


class MetaData(DescriptorModel):
    """Metadata attached to every persisted descriptor."""
    creation: int = Field(..., description="Creation time in milliseconds since the epoch")
    version: str = Field(..., description="Schema version of the descriptor document")
    component_id: Dependency = Field(..., alias="componentID")


def new_metadata(
    group: str,
    module: str,
    version: str,
    schema_version: str = SCHEMA_VERSION,
    clock: Callable[[], int] = current_time_millis,
) -> MetaData:
    """
    Create metadata for a newly built component.

    Args:
        group: Group of the component
        module: Module name of the component
        version: Version of the component
        schema_version: Schema version stamped into the metadata
        clock: Source of the creation time in milliseconds

    Returns:
        MetaData stamped with the current time and the schema version
    """
    return MetaData(
        creation=clock(),
        version=schema_version,
        component_id=Dependency(group=group, module=module, version=version),
    )
