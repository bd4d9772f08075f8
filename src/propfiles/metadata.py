"""Project metadata lookup, used to decide whether property commands are available."""

from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from propfiles.constants import PROJECT_IDENTIFIER, PROJECT_MARKERS


@dataclass(frozen=True)
class ProjectMetadata:
    root: Path
    build_file: Path


class MetadataService(Protocol):
    def get(self, identifier: str) -> ProjectMetadata | None:
        """Return metadata for the identifier, or None if nothing is known."""
        ...


class ProjectMetadataService:
    """Reports project metadata when the root directory holds a build file."""

    def __init__(self, root: Path, markers: tuple[str, ...] = PROJECT_MARKERS) -> None:
        self._root = root
        self._markers = markers

    def get(self, identifier: str) -> ProjectMetadata | None:
        if identifier != PROJECT_IDENTIFIER:
            return None
        for marker in self._markers:
            candidate = self._root / marker
            if candidate.is_file():
                return ProjectMetadata(root=self._root, build_file=candidate)
        return None
