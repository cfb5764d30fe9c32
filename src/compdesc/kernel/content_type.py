"""Content type enumeration and its lenient-read / strict-write codec.

Decoding looks up the exact enumeration name. Unknown names never fail a
document read: they are logged and replaced by UNSPECIFIED. Encoding always
emits the literal enumeration name.
"""

import logging
from enum import Enum
from typing import Annotated, Any

from pydantic import BeforeValidator, PlainSerializer

logger = logging.getLogger(__name__)


class ContentType(str, Enum):
    """Update behaviour of a placed item."""

    STATIC = "STATIC"
    IMMUTABLE = "IMMUTABLE"
    DATA = "DATA"
    CONFIGURATION = "CONFIGURATION"
    UNSPECIFIED = "UNSPECIFIED"


def decode_content_type(value: Any) -> ContentType:
    """Decode a textual content type (case-sensitive name lookup).

    Returns ContentType.UNSPECIFIED for any unknown value instead of raising.
    """
    if isinstance(value, ContentType):
        return value
    if isinstance(value, str):
        member = ContentType.__members__.get(value)
        if member is not None:
            return member
    logger.warning(f"ContentType {value!r} was not available for deserialization, using UNSPECIFIED.")
    return ContentType.UNSPECIFIED


def encode_content_type(content_type: ContentType) -> str:
    """Encode a content type as its literal enumeration name."""
    return content_type.name


ContentTypeField = Annotated[
    ContentType,
    BeforeValidator(decode_content_type),
    PlainSerializer(encode_content_type, return_type=str),
]
