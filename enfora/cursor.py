"""Sequential cursor over the capture groups of a matched sentence.

Several groups of the telemetry grammar are optional, so the position of a
field in the match does not tell whether it carries data. ``GroupCursor``
walks the groups in order instead: each read consumes exactly the groups it
needs, and ``has_next()`` both tests and skips a group that is missing or
empty. Extraction code therefore reads like the wire layout::

    if cursor.has_next():
        attributes["sat"] = cursor.next_int()
"""

import re

from enfora.fields import (
    convert_to_decimal_degrees,
    parse_float_field,
    parse_int_field,
)

__all__ = ["GroupCursor"]


class GroupCursor:
    """Iterator-like reader over ``match.groups()``.

    Args:
        match: A successful match of a pattern with capture groups.
    """

    def __init__(self, match: re.Match[str]) -> None:
        self._groups: tuple[str | None, ...] = match.groups()
        self._position = 0

    @property
    def remaining(self) -> int:
        return len(self._groups) - self._position

    def has_next(self, count: int = 1) -> bool:
        """Return True if the next *count* groups all carry data.

        If any of them is missing or empty, all *count* groups are consumed
        and False is returned, so the caller moves on to the next field.
        """
        window = self._groups[self._position : self._position + count]
        if len(window) < count or not all(window):
            self._position += count
            return False
        return True

    def next(self) -> str | None:
        """Consume and return the next raw group (None if it did not match)."""
        if self._position >= len(self._groups):
            raise IndexError("no capture groups left")
        value = self._groups[self._position]
        self._position += 1
        return value

    def next_int(self, default: int | None = None) -> int | None:
        value = parse_int_field(self.next())
        return default if value is None else value

    def next_float(self, default: float | None = None) -> float | None:
        value = parse_float_field(self.next())
        return default if value is None else value

    def next_coordinate(self) -> float | None:
        """Consume degrees, minutes and hemisphere groups as decimal degrees."""
        degrees = self.next()
        minutes = self.next()
        hemisphere = self.next()
        return convert_to_decimal_degrees(degrees, minutes, hemisphere)
