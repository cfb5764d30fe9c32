"""Versioned persistence of component descriptors.

A DescriptorStore writes a Component as an indented JSON document and reads
it back. Before a document is materialized its metadata is peeked and the
schema version compared with the store's version; a mismatch is a hard
IncompatibleVersion error unless the caller asks for migration.

The target file is treated as exclusively owned for the duration of one
call; no locking is done.
"""

import contextlib
import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

from pydantic import ValidationError
from pydantic_core import PydanticSerializationError

from compdesc.errors import DescriptorError, IncompatibleVersion, ReadFailure, WriteFailure
from compdesc.kernel.component import Component
from compdesc.kernel.dependency import Dependency
from compdesc.kernel.metadata import MetaData, new_metadata
from compdesc.kernel.schema import MIGRATIONS, SCHEMA_VERSION, Migration, migrate_document

logger = logging.getLogger(__name__)

PathLike = Union[str, os.PathLike, Path]


def _normalize_path(path: PathLike) -> Path:
    """Normalize path input to Path object."""
    return Path(path) if not isinstance(path, Path) else path


def _text(node: Dict[str, Any], key: str) -> str:
    value = node.get(key)
    return value if isinstance(value, str) else ""


class DescriptorStore:
    """Read/write gateway for component descriptor documents.

    Args:
        schema_version: Version stamped into new metadata and required on read
        indent: Indentation of written documents
        migrations: Migration steps used by read_from_file(migrate=True)
    """

    def __init__(
        self,
        schema_version: str = SCHEMA_VERSION,
        indent: int = 2,
        migrations: Optional[Dict[str, Migration]] = None,
    ):
        self.schema_version = schema_version
        self.indent = indent
        self.migrations = dict(MIGRATIONS if migrations is None else migrations)

    def new_metadata(self, group: str, module: str, version: str) -> MetaData:
        """Create metadata for a new component, stamped with this store's schema version."""
        return new_metadata(group, module, version, schema_version=self.schema_version)

    def to_document(self, component: Component) -> Dict[str, Any]:
        """Convert a component to its JSON-compatible document (pure, no I/O)."""
        return component.model_dump(mode="json", by_alias=True)

    def from_document(self, document: Dict[str, Any]) -> Component:
        """Materialize a component from a document (pure, no I/O, no version check).

        Raises:
            pydantic.ValidationError: If the document does not match the schema
        """
        return Component.model_validate(document)

    def write_to_file(self, component: Component, path: PathLike) -> None:
        """
        Write a component descriptor; an existing file is replaced.

        The document is written to a temporary sibling file first and moved
        into place, so a failed write never leaves a partial descriptor.

        The component metadata must carry this store's schema version;
        build it with new_metadata() of the same store.

        Raises:
            WriteFailure: If the component cannot be serialized or written,
                or its metadata version differs from the store's version
        """
        target = _normalize_path(path)
        if component.metadata.version != self.schema_version:
            raise WriteFailure(
                target,
                f"metadata version {component.metadata.version} does not match "
                f"the store version {self.schema_version}",
            )
        try:
            text = json.dumps(self.to_document(component), indent=self.indent, ensure_ascii=False)
            # UnicodeEncodeError (lone surrogates) is a ValueError
            payload = (text + "\n").encode("utf-8")
        except (PydanticSerializationError, TypeError, ValueError) as e:
            raise WriteFailure(target, f"the component can not be generated: {e}") from e

        temp_path = target.with_name(f".{target.name}.tmp")
        try:
            temp_path.write_bytes(payload)
            os.replace(temp_path, target)
        except OSError as e:
            with contextlib.suppress(OSError):
                temp_path.unlink()
            raise WriteFailure(target, e) from e
        logger.info(f"Wrote component descriptor '{component.display_name}' to {target}")

    def _load_document(self, path: Path) -> Dict[str, Any]:
        try:
            data = path.read_bytes()
        except OSError as e:
            raise ReadFailure(path, e) from e
        try:
            document = json.loads(data.decode("utf-8"))
        except UnicodeDecodeError as e:
            raise ReadFailure(path, f"invalid UTF-8: {e}") from e
        except json.JSONDecodeError as e:
            raise ReadFailure(path, f"invalid JSON: {e}") from e
        if not isinstance(document, dict):
            raise ReadFailure(path, "descriptor document must be a JSON object")
        return document

    def _metadata_from_document(self, document: Dict[str, Any], path: Path) -> MetaData:
        node = document.get("metadata")
        if not isinstance(node, dict):
            raise ReadFailure(path, "descriptor has no metadata")
        creation = node.get("creation")
        version = node.get("version")
        if not isinstance(creation, int) or isinstance(creation, bool):
            raise ReadFailure(path, "metadata.creation must be an integer")
        if not isinstance(version, str):
            raise ReadFailure(path, "metadata.version must be a string")
        component_id = node.get("componentID")
        if not isinstance(component_id, dict):
            component_id = {}
        return MetaData(
            creation=creation,
            version=version,
            component_id=Dependency(
                group=_text(component_id, "group"),
                module=_text(component_id, "module"),
                version=_text(component_id, "version"),
            ),
        )

    def peek_metadata(self, path: PathLike) -> MetaData:
        """
        Read only the metadata of a descriptor file.

        The rest of the document is not materialized, so this works for
        documents of any schema version.

        Raises:
            ReadFailure: If the file cannot be read or has no valid metadata
        """
        source = _normalize_path(path)
        metadata = self._metadata_from_document(self._load_document(source), source)
        logger.debug(f"Descriptor {source} has schema version {metadata.version}")
        return metadata

    def read_from_file(self, path: PathLike, migrate: bool = False) -> Component:
        """
        Read a component descriptor.

        Args:
            path: Descriptor file
            migrate: Upgrade documents of an older schema version through the
                registered migrations instead of rejecting them

        Returns:
            Fully materialized Component

        Raises:
            IncompatibleVersion: If the document version differs from the store's
                version (and cannot be migrated, when migrate=True)
            ReadFailure: If the file cannot be read, parsed or mapped
        """
        source = _normalize_path(path)
        document = self._load_document(source)
        metadata = self._metadata_from_document(document, source)

        if metadata.version != self.schema_version:
            if not migrate:
                raise IncompatibleVersion(metadata.version, self.schema_version, source)
            try:
                document = migrate_document(document, self.schema_version, self.migrations)
            except IncompatibleVersion as e:
                raise IncompatibleVersion(e.found, e.expected, source) from e
            except (TypeError, ValueError, AttributeError, KeyError) as e:
                raise ReadFailure(source, f"migration failed: {e}") from e

        try:
            component = self.from_document(document)
        except ValidationError as e:
            raise ReadFailure(source, f"mapping failed: {e}") from e
        except DescriptorError as e:
            raise ReadFailure(source, e) from e
        logger.info(f"Read component descriptor '{component.display_name}' from {source}")
        return component


# Default gateway, stamped with the library's schema version
default_store = DescriptorStore()


def write_to_file(component: Component, path: PathLike) -> None:
    """Write a component with the default store."""
    default_store.write_to_file(component, path)


def read_from_file(path: PathLike, migrate: bool = False) -> Component:
    """Read a component with the default store."""
    return default_store.read_from_file(path, migrate=migrate)


def peek_metadata(path: PathLike) -> MetaData:
    """Read only the metadata of a descriptor file."""
    return default_store.peek_metadata(path)
