"""Descriptor schema versions and document migrations.

SCHEMA_VERSION is the version written into new descriptors and the only
version a DescriptorStore materializes. Older documents can be upgraded by
walking MIGRATIONS, a chain of steps keyed by the version they start from.

Version 1.0 (legacy) stored the OS and update attributes flat on every item:

- classifier, types, contentType directly on the item
- update exclusion as 'excludedFromUpdate', 'updatable' or 'isUpdatable';
  all three mean "not part of an update installation" when true
- container update patterns as 'excludesFromUpdate'
- component defaults as modulesTarget, libsTarget, fileTarget,
  containerTarget, descriptorPath and excludesFromUpdate

Version 2.0 groups them into 'platform' and 'update' objects.
"""

import copy
import logging
from typing import Any, Callable, Dict, Optional

from compdesc.errors import IncompatibleVersion

logger = logging.getLogger(__name__)

SCHEMA_VERSION = "2.0"
LEGACY_SCHEMA_VERSION = "1.0"

DEFAULT_MODULES_TARGET = "modules"
DEFAULT_LIBS_TARGET = "libs"
DEFAULT_FILE_TARGET = "properties"
DEFAULT_CONTAINER_TARGET = ""

Document = Dict[str, Any]
Migration = Callable[[Document], Document]

_LEGACY_COMPONENT_KEYS = {
    "modulesTarget": "modulesTargetPath",
    "libsTarget": "libsTargetPath",
    "fileTarget": "fileTargetPath",
    "containerTarget": "containerTargetPath",
    "descriptorPath": "descriptorStoragePath",
    "excludesFromUpdate": "excludes",
}

_LEGACY_UPDATE_FLAGS = ("excludedFromUpdate", "updatable", "isUpdatable")

# Item set -> default content type of its current item kind
_LEGACY_ITEM_SETS = {
    "fileContainers": "IMMUTABLE",
    "fileItems": "IMMUTABLE",
    "linkItems": "IMMUTABLE",
    "directoryItems": "DATA",
    "properties": "IMMUTABLE",
}


def document_version(document: Document) -> Optional[str]:
    """Return metadata.version of a raw document, or None if absent."""
    metadata = document.get("metadata")
    if not isinstance(metadata, dict):
        return None
    version = metadata.get("version")
    return version if isinstance(version, str) else None


def _legacy_update_policy(item: Dict[str, Any], default_content_type: str) -> Optional[Dict[str, Any]]:
    policy: Dict[str, Any] = {}
    if "contentType" in item:
        policy["contentType"] = item.pop("contentType")
    flags = [bool(item.pop(flag)) for flag in _LEGACY_UPDATE_FLAGS if flag in item]
    if flags:
        policy["excludedFromUpdate"] = any(flags)
    if "excludesFromUpdate" in item:
        policy["excludes"] = item.pop("excludesFromUpdate")
    if not policy:
        return None
    policy.setdefault("contentType", default_content_type)
    return policy


def _legacy_platform(item: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    platform = {key: item.pop(key) for key in ("classifier", "types") if key in item}
    return platform or None


def _migrate_legacy_item(item: Any, default_content_type: str) -> Any:
    if not isinstance(item, dict):
        # Left for validation to reject
        return item
    migrated = dict(item)
    platform = _legacy_platform(migrated)
    policy = _legacy_update_policy(migrated, default_content_type)
    if platform is not None:
        migrated["platform"] = platform
    if policy is not None:
        migrated["update"] = policy
    return migrated


def _migrate_legacy_module(module: Any) -> Any:
    # Modules keep their own types/classifiers sets
    if not isinstance(module, dict):
        return module
    migrated = dict(module)
    policy = _legacy_update_policy(migrated, "IMMUTABLE")
    if policy is not None:
        migrated["update"] = policy
    return migrated


def migrate_1_0_to_2_0(document: Document) -> Document:
    """Upgrade a version 1.0 document to version 2.0 (pure, returns a new dict)."""
    migrated: Document = {}
    for key, value in document.items():
        migrated[_LEGACY_COMPONENT_KEYS.get(key, key)] = value

    if isinstance(migrated.get("modules"), dict):
        migrated["modules"] = {
            path: _migrate_legacy_module(module) for path, module in migrated["modules"].items()
        }
    for set_name, default_content_type in _LEGACY_ITEM_SETS.items():
        if isinstance(migrated.get(set_name), list):
            migrated[set_name] = [
                _migrate_legacy_item(item, default_content_type) for item in migrated[set_name]
            ]
    if isinstance(migrated.get("permissionConfig"), list):
        migrated["permissionConfig"] = [
            _migrate_legacy_item(item, "IMMUTABLE") for item in migrated["permissionConfig"]
        ]

    metadata = dict(migrated.get("metadata") or {})
    metadata["version"] = "2.0"
    migrated["metadata"] = metadata
    return migrated


MIGRATIONS: Dict[str, Migration] = {
    LEGACY_SCHEMA_VERSION: migrate_1_0_to_2_0,
}


def migrate_document(
    document: Document,
    target_version: str = SCHEMA_VERSION,
    migrations: Optional[Dict[str, Migration]] = None,
) -> Document:
    """
    Upgrade a raw descriptor document to target_version.

    Args:
        document: Raw document (from JSON); not modified
        target_version: Schema version to reach
        migrations: Migration steps keyed by source version (defaults to MIGRATIONS)

    Returns:
        Document at target_version

    Raises:
        IncompatibleVersion: If no chain of migrations leads to target_version
    """
    steps = MIGRATIONS if migrations is None else migrations
    current = copy.deepcopy(document)
    version = document_version(current)
    visited = set()
    while version != target_version:
        step = steps.get(version) if version is not None else None
        if step is None or version in visited:
            raise IncompatibleVersion(str(version), target_version)
        visited.add(version)
        current = step(current)
        next_version = document_version(current)
        logger.info(f"Migrated descriptor document from version {version} to {next_version}")
        version = next_version
    return current
