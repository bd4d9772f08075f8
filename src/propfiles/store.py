"""Property file store.

Every operation rebuilds its view of the file from disk, applies at most one
mutation and, if anything needs saving, writes the whole file back through the
output stream of the same ``MutableFile`` it was read from. Nothing is cached
between calls.

Write rules:

- ``add_property_if_not_exists`` never touches a file that already has the key.
- ``change_property`` skips the write when the key already holds the value.
- ``remove_property`` always rewrites the file, even if the key was absent.

Unsorted writes keep the order keys were read in; keys added by the write
follow them in ascending order. Sorted writes put every key in ascending order.
"""

import logging
from collections.abc import Mapping
from types import MappingProxyType

from jproperties import Properties, PropertyError

from propfiles.constants import PROJECT_IDENTIFIER
from propfiles.domain.properties import (
    format_entries,
    load_properties,
    to_dict,
    updated_at_comment,
    write_properties,
)
from propfiles.files import FileManager, MutableFile, PathResolver
from propfiles.metadata import MetadataService
from propfiles.models import LogicalPath, LookupStatus, PropertyLookup

logger = logging.getLogger(__name__)


class PropertyFileError(Exception):
    """Base class for all property store failures."""


class InvalidArgumentError(PropertyFileError, ValueError):
    """Raised before any I/O when a required argument is missing or blank."""


class PropertyFileNotFoundError(PropertyFileError):
    """Raised when the target property file does not exist."""

    def __init__(self, identifier: str) -> None:
        super().__init__(f"Properties file not found: {identifier}")
        self.identifier = identifier


class PropertyLoadError(PropertyFileError):
    """Raised when a property file cannot be read or parsed."""


class PropertyStoreError(PropertyFileError):
    """Raised when a property file cannot be written."""


def _require_path(path: LogicalPath | None) -> None:
    if path is None:
        raise InvalidArgumentError("Property file path required")


def _require_text(value: str | None, label: str) -> None:
    if value is None or not value.strip():
        raise InvalidArgumentError(f"{label} required")


class PropertyFileStore:
    """Reads and updates ``.properties`` files inside a project.

    Args:
        file_manager: Existence checks and mutable file sessions.
        path_resolver: Maps (logical path, filename) to a file identifier.
        metadata_service: Optional; when given, ``is_properties_command_available``
            requires it to know about the current project.
    """

    def __init__(
        self,
        file_manager: FileManager,
        path_resolver: PathResolver,
        metadata_service: MetadataService | None = None,
    ) -> None:
        self._file_manager = file_manager
        self._path_resolver = path_resolver
        self._metadata_service = metadata_service

    def is_properties_command_available(self) -> bool:
        if self._metadata_service is None:
            return True
        return self._metadata_service.get(PROJECT_IDENTIFIER) is not None

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add_property_if_not_exists(
        self,
        path: LogicalPath,
        filename: str,
        key: str,
        value: str,
        sorted_keys: bool = False,
    ) -> bool:
        """Add ``key=value`` unless the key is already present.

        Returns True if the file was written.
        """
        return self._manage_property(path, filename, key, value, sorted_keys, change_existing=False)

    def change_property(
        self,
        path: LogicalPath,
        filename: str,
        key: str,
        value: str,
        sorted_keys: bool = False,
    ) -> bool:
        """Add or overwrite ``key``. Identical values are not rewritten.

        Returns True if the file was written.
        """
        return self._manage_property(path, filename, key, value, sorted_keys, change_existing=True)

    def remove_property(self, path: LogicalPath, filename: str, key: str) -> None:
        """Remove ``key`` and rewrite the file, whether or not the key existed."""
        _require_path(path)
        _require_text(filename, "Property filename")
        _require_text(key, "Key")

        identifier = self._path_resolver.resolve(path, filename)
        mutable_file = self._open(identifier)
        props = self._read(mutable_file)
        if key in props:
            del props[key]
        else:
            logger.debug("Key %s not present in %s; rewriting anyway", key, identifier)
        self._write(mutable_file, props, sorted_keys=False)

    def _manage_property(
        self,
        path: LogicalPath,
        filename: str,
        key: str,
        value: str,
        sorted_keys: bool,
        change_existing: bool,
    ) -> bool:
        _require_path(path)
        _require_text(filename, "Property filename")
        _require_text(key, "Key")
        _require_text(value, "Value")

        identifier = self._path_resolver.resolve(path, filename)
        mutable_file = self._open(identifier)
        props = self._read(mutable_file)

        current = props[key].data if key in props else None
        if current is not None and (current == value or not change_existing):
            logger.debug("Leaving %s untouched: %s already set", identifier, key)
            return False

        props[key] = value
        self._write(mutable_file, props, sorted_keys)
        return True

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_property(self, path: LogicalPath, filename: str, key: str) -> PropertyLookup:
        """Look up a single key. A missing file is reported, not raised."""
        _require_path(path)
        _require_text(filename, "Property filename")
        _require_text(key, "Key")

        identifier = self._path_resolver.resolve(path, filename)
        if not self._file_manager.exists(identifier):
            return PropertyLookup(LookupStatus.FILE_ABSENT)
        return PropertyLookup.of(self.load_entries(identifier).get(key))

    def get_property_keys(
        self, path: LogicalPath, filename: str, include_values: bool
    ) -> list[str]:
        """Return sorted keys, or sorted ``key = value`` lines."""
        return format_entries(self._load(path, filename), include_values)

    def get_properties(self, path: LogicalPath, filename: str) -> Mapping[str, str]:
        """Return every key/value pair as a read-only mapping."""
        return MappingProxyType(self._load(path, filename))

    def load_entries(self, identifier: str) -> dict[str, str]:
        """Parse the file behind ``identifier`` into a key→value dict."""
        return to_dict(self._read(self._open(identifier)))

    def _load(self, path: LogicalPath, filename: str) -> dict[str, str]:
        _require_path(path)
        _require_text(filename, "Property filename")
        return self.load_entries(self._path_resolver.resolve(path, filename))

    # ------------------------------------------------------------------
    # Stream handling
    # ------------------------------------------------------------------

    def _open(self, identifier: str) -> MutableFile:
        if not self._file_manager.exists(identifier):
            raise PropertyFileNotFoundError(identifier)
        try:
            return self._file_manager.update_file(identifier)
        except FileNotFoundError as exc:
            raise PropertyFileNotFoundError(identifier) from exc

    def _read(self, mutable_file: MutableFile) -> Properties:
        try:
            with mutable_file.open_input() as stream:
                return load_properties(stream)
        except (OSError, PropertyError, UnicodeDecodeError) as exc:
            logger.error("Could not load properties from %s: %s", mutable_file.identifier, exc)
            raise PropertyLoadError(
                f"Could not load properties from {mutable_file.identifier}"
            ) from exc

    def _write(self, mutable_file: MutableFile, props: Properties, sorted_keys: bool) -> None:
        try:
            with mutable_file.open_output() as stream:
                write_properties(props, stream, updated_at_comment(), sorted_keys)
        except (OSError, PropertyError, UnicodeEncodeError) as exc:
            logger.error("Could not store properties to %s: %s", mutable_file.identifier, exc)
            raise PropertyStoreError(
                f"Could not store properties to {mutable_file.identifier}"
            ) from exc
        logger.info("Updated %s (%d properties)", mutable_file.identifier, len(props))
