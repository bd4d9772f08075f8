"""Domain models."""

from dataclasses import dataclass
from enum import Enum, auto


class LogicalPath(Enum):
    """Logical roots of a project, resolved to directories by a PathResolver."""

    ROOT = "ROOT"
    SRC_MAIN_JAVA = "SRC_MAIN_JAVA"
    SRC_MAIN_RESOURCES = "SRC_MAIN_RESOURCES"
    SRC_TEST_JAVA = "SRC_TEST_JAVA"
    SRC_TEST_RESOURCES = "SRC_TEST_RESOURCES"
    SRC_MAIN_WEBAPP = "SRC_MAIN_WEBAPP"
    SPRING_CONFIG_ROOT = "SPRING_CONFIG_ROOT"


@dataclass(frozen=True)
class PropertyEntry:
    key: str
    value: str

    def render(self, include_value: bool = True) -> str:
        """Return ``key = value``, or the bare key when include_value is False."""
        if not include_value:
            return self.key
        return f"{self.key} = {self.value}"


class LookupStatus(Enum):
    FOUND = auto()
    KEY_ABSENT = auto()
    FILE_ABSENT = auto()


@dataclass(frozen=True)
class PropertyLookup:
    """Outcome of a single-key lookup.

    ``value`` is only set when ``status`` is FOUND. A key that is present with
    an empty value is FOUND with ``value == ""``, which is distinct from
    KEY_ABSENT.
    """

    status: LookupStatus
    value: str | None = None

    @property
    def found(self) -> bool:
        return self.status is LookupStatus.FOUND

    @classmethod
    def of(cls, value: str | None) -> "PropertyLookup":
        if value is None:
            return cls(LookupStatus.KEY_ABSENT)
        return cls(LookupStatus.FOUND, value)


class FileEventKind(Enum):
    UPDATED = auto()


@dataclass(frozen=True)
class FileEvent:
    """Notification sent to file-change listeners when an output stream closes."""

    kind: FileEventKind
    identifier: str
