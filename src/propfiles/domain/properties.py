"""Pure functions for parsing and serializing property files.

Parsing and serialization are delegated to ``jproperties``, which implements
the ``java.util.Properties`` text format:

- ``key=value``, ``key:value`` and ``key value`` assignments
- ``#`` and ``!`` comment lines
- a trailing backslash continues a logical line
- ``\\uXXXX`` escapes, with non-Latin-1 characters escaped on write

A loaded ``Properties`` object remembers the order its keys were read in.
Storing it writes those keys in that order, followed by any keys added since
in ascending order. These functions do no I/O of their own beyond the streams
handed to them.
"""

from collections.abc import Mapping
from datetime import datetime
from typing import BinaryIO

from jproperties import Properties

from propfiles.constants import PROPERTIES_ENCODING, UPDATED_AT_FORMAT
from propfiles.models import PropertyEntry


def load_properties(stream: BinaryIO) -> Properties:
    """Load a binary property stream, keeping the order keys were read in."""
    props = Properties()
    props.load(stream, PROPERTIES_ENCODING)
    return props


def to_dict(props: Properties) -> dict[str, str]:
    """Return the key→value pairs of ``props`` as a plain dict.

    A repeated key in the source takes the value of its last occurrence.
    """
    return {key: props[key].data for key in props}


def write_properties(
    props: Properties,
    stream: BinaryIO,
    comment: str,
    sorted_keys: bool = False,
) -> None:
    """Serialize ``props`` to ``stream`` with ``comment`` as the header line.

    With ``sorted_keys`` every key is written in ascending order. Otherwise
    keys that were loaded keep their order and keys added afterwards follow
    them in ascending order.
    """
    if sorted_keys:
        ordered = Properties()
        for key in sorted(props):
            ordered[key] = props[key].data
        props = ordered
    props.store(
        stream,
        initial_comments=comment,
        encoding=PROPERTIES_ENCODING,
        timestamp=False,
    )


def updated_at_comment(now: datetime | None = None) -> str:
    """Return the ``Updated at <timestamp>`` header written on every save."""
    moment = now or datetime.now().astimezone()
    return f"Updated at {moment.strftime(UPDATED_AT_FORMAT)}"


def format_entries(entries: Mapping[str, str], include_values: bool) -> list[str]:
    """Render entries as a sorted, deduplicated list of keys or ``key = value`` lines."""
    rendered = {
        PropertyEntry(key=key, value=value).render(include_values)
        for key, value in entries.items()
    }
    return sorted(rendered)
