"""Type-safe domain enums for message priority and output formats."""

from __future__ import annotations

from enum import Enum, IntEnum


class Priority(IntEnum):
    """Message priority, numbered like the X-Priority header (1 = highest).

    The provider expects the lower-cased level name in the ``importance``
    field of the request payload.

    Example:
        >>> Priority.HIGH.importance
        'high'
        >>> Priority.parse("lowest")
        <Priority.LOWEST: 5>
        >>> Priority.parse(1)
        <Priority.HIGHEST: 1>
    """

    HIGHEST = 1
    HIGH = 2
    NORMAL = 3
    LOW = 4
    LOWEST = 5

    @property
    def importance(self) -> str:
        """Return the payload value for this level."""
        return self.name.lower()

    @classmethod
    def parse(cls, value: Priority | int | str) -> Priority:
        """Resolve a member from an int level, a member, or a case-insensitive name.

        Raises:
            ValueError: When the value names no priority level.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, int):
            return cls(value)
        if not isinstance(value, str):
            raise ValueError(f"Unknown priority: {value!r}")
        text = value.strip()
        if text.isdigit():
            return cls(int(text))
        try:
            return cls[text.upper()]
        except KeyError:
            raise ValueError(f"Unknown priority: {value!r}") from None


class OutputFormat(str, Enum):
    """Output format options for configuration display.

    Inherits from str to allow direct string comparison and Click integration.

    Example:
        >>> OutputFormat.HUMAN.value
        'human'
        >>> OutputFormat.JSON == "json"
        True
    """

    HUMAN = "human"
    JSON = "json"


__all__ = [
    "OutputFormat",
    "Priority",
]
