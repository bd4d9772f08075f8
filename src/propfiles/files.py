"""File collaborators: existence checks, mutable file sessions, path resolution.

The store never opens files itself. It asks a ``FileManager`` whether a file
exists and for a ``MutableFile`` whose input and output streams belong to one
update session. The output stream buffers everything written to it and, when
closed, replaces the file contents and notifies the registered listeners once.

Two managers are provided: ``LocalFileManager`` for real files and
``MemoryFileManager``, which keeps file contents in a dict.
"""

import io
import logging
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import BinaryIO, Protocol

from propfiles.constants import DEFAULT_LAYOUT, PROPERTIES_ENCODING
from propfiles.models import FileEvent, FileEventKind, LogicalPath

logger = logging.getLogger(__name__)

FileListener = Callable[[FileEvent], None]


class MutableFile(Protocol):
    """Paired read/write access to one existing file."""

    @property
    def identifier(self) -> str: ...

    def open_input(self) -> BinaryIO:
        """Return a readable stream over the current contents."""
        ...

    def open_output(self) -> BinaryIO:
        """Return a stream that replaces the contents when closed."""
        ...


class FileManager(Protocol):
    """Protocol that all file backends must satisfy."""

    def exists(self, identifier: str) -> bool: ...

    def update_file(self, identifier: str) -> MutableFile:
        """Start an update session. Raises FileNotFoundError if the file is absent."""
        ...


class PathResolver(Protocol):
    def resolve(self, path: LogicalPath, filename: str) -> str:
        """Map a logical root and a filename to a file identifier."""
        ...


class _CommitOnClose(io.BytesIO):
    """In-memory output stream that hands its bytes to ``commit`` on close."""

    def __init__(self, commit: Callable[[bytes], None]) -> None:
        super().__init__()
        self._commit = commit

    def close(self) -> None:
        if self.closed:
            return
        data = self.getvalue()
        super().close()
        self._commit(data)


class FileSession:
    """A ``MutableFile`` built from a reader and a committer."""

    def __init__(
        self,
        identifier: str,
        reader: Callable[[], BinaryIO],
        committer: Callable[[str, bytes], None],
    ) -> None:
        self._identifier = identifier
        self._reader = reader
        self._committer = committer

    @property
    def identifier(self) -> str:
        return self._identifier

    def open_input(self) -> BinaryIO:
        return self._reader()

    def open_output(self) -> BinaryIO:
        return _CommitOnClose(lambda data: self._committer(self._identifier, data))


class _ListenerRegistry:
    def __init__(self) -> None:
        self._listeners: list[FileListener] = []

    def add_listener(self, listener: FileListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: FileListener) -> None:
        """Unregister a listener. No-op if it was never registered."""
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify(self, identifier: str) -> None:
        event = FileEvent(kind=FileEventKind.UPDATED, identifier=identifier)
        for listener in list(self._listeners):
            listener(event)


class LocalFileManager(_ListenerRegistry):
    """FileManager backed by the local file system. Identifiers are paths."""

    def exists(self, identifier: str) -> bool:
        return Path(identifier).is_file()

    def update_file(self, identifier: str) -> FileSession:
        if not self.exists(identifier):
            raise FileNotFoundError(identifier)
        return FileSession(identifier, lambda: Path(identifier).open("rb"), self._commit)

    def _commit(self, identifier: str, data: bytes) -> None:
        Path(identifier).write_bytes(data)
        logger.debug("Wrote %d bytes to %s", len(data), identifier)
        self._notify(identifier)


class MemoryFileManager(_ListenerRegistry):
    """FileManager that keeps file contents in memory.

    Text contents passed to the constructor or ``write`` are encoded with the
    property-file encoding.
    """

    def __init__(self, files: Mapping[str, bytes | str] | None = None) -> None:
        super().__init__()
        self._files: dict[str, bytes] = {}
        for identifier, content in (files or {}).items():
            self.write(identifier, content)

    def exists(self, identifier: str) -> bool:
        return identifier in self._files

    def update_file(self, identifier: str) -> FileSession:
        if not self.exists(identifier):
            raise FileNotFoundError(identifier)
        return FileSession(identifier, lambda: io.BytesIO(self._files[identifier]), self._commit)

    def read(self, identifier: str) -> bytes:
        return self._files[identifier]

    def read_text(self, identifier: str) -> str:
        return self._files[identifier].decode(PROPERTIES_ENCODING)

    def write(self, identifier: str, content: bytes | str) -> None:
        """Create or replace a file without notifying listeners."""
        if isinstance(content, str):
            content = content.encode(PROPERTIES_ENCODING)
        self._files[identifier] = content

    def delete(self, identifier: str) -> None:
        self._files.pop(identifier, None)

    def _commit(self, identifier: str, data: bytes) -> None:
        self._files[identifier] = data
        self._notify(identifier)


class ProjectPathResolver:
    """Resolves logical roots to directories under a project root.

    Args:
        root: The project root directory.
        layout: Optional directory overrides per logical root, relative to
            ``root``. Roots not listed use the Maven defaults.
    """

    def __init__(self, root: Path, layout: Mapping[LogicalPath, str] | None = None) -> None:
        self._root = root
        self._layout: dict[LogicalPath, str] = {**DEFAULT_LAYOUT, **(layout or {})}

    def directory(self, path: LogicalPath) -> Path:
        return self._root / self._layout[path]

    def resolve(self, path: LogicalPath, filename: str) -> str:
        return str(self.directory(path) / filename)
