"""Type system for ghstream.

Column types exposed by tables, and the timestamp conversions used when
projecting remote values into row cells.
"""

import re
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any

_FRACTION = re.compile(r"\.(\d+)")


class DataType(Enum):
    """Column types a table can declare."""

    TEXT = "TEXT"
    INTEGER = "INTEGER"

    # Timestamps are stored and returned as RFC 3339 text
    TIMESTAMP = "TIMESTAMP"

    def __str__(self) -> str:
        return self.value

    def is_textual(self) -> bool:
        """Check if values of this type are returned as strings."""
        return self in (DataType.TEXT, DataType.TIMESTAMP)

    def validate(self, value: Any) -> bool:
        """Check that a projected value matches this type (None is a typed null)."""
        if value is None:
            return True
        if self == DataType.INTEGER:
            return isinstance(value, int) and not isinstance(value, bool)
        return isinstance(value, str)


# Go-style zero time. Some APIs serialize "no value" as this instant.
ZERO_TIME = datetime(1, 1, 1, tzinfo=timezone.utc)


def parse_timestamp(value: str | None) -> datetime | None:
    """Parse an ISO 8601 / RFC 3339 timestamp.

    Args:
        value: Timestamp string such as ``2021-05-01T00:00:00Z``, or None

    Returns:
        Timezone-aware datetime, or None for a missing or zero timestamp

    Raises:
        ValueError: If the string is not a valid timestamp
    """
    if value is None or value == "":
        return None

    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    # fromisoformat before 3.11 only accepts 3 or 6 fractional digits
    text = _FRACTION.sub(lambda m: "." + m.group(1).ljust(6, "0")[:6], text, count=1)

    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)

    if is_zero_timestamp(parsed):
        return None
    return parsed


def is_zero_timestamp(value: datetime | None) -> bool:
    """Check whether a timestamp represents absence of a value."""
    if value is None:
        return True
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value == ZERO_TIME


def format_timestamp(value: datetime | None) -> str | None:
    """Render a timestamp as RFC 3339 text.

    The fractional second is omitted when zero and trailing zeros are
    trimmed otherwise. UTC is written as ``Z``.

    Examples:
        >>> format_timestamp(datetime(2021, 5, 1, tzinfo=timezone.utc))
        '2021-05-01T00:00:00Z'
        >>> format_timestamp(None) is None
        True

    Returns:
        Formatted string, or None for a zero/missing timestamp
    """
    if is_zero_timestamp(value):
        return None

    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)

    text = value.strftime("%Y-%m-%dT%H:%M:%S")
    if value.microsecond:
        text += "." + f"{value.microsecond:06d}".rstrip("0")

    offset = value.utcoffset() or timedelta(0)
    if offset == timedelta(0):
        return text + "Z"

    sign = "+" if offset > timedelta(0) else "-"
    minutes = abs(int(offset.total_seconds())) // 60
    return f"{text}{sign}{minutes // 60:02d}:{minutes % 60:02d}"


class Schema:
    """Schema definition for a table or query result.

    Holds column names and their corresponding data types, in column order.
    """

    def __init__(self, columns: dict[str, DataType]):
        """Initialize schema.

        Args:
            columns: Dictionary mapping column names to data types
        """
        self.columns = columns

    def __getitem__(self, column: str) -> DataType:
        """Get type of a column."""
        return self.columns[column]

    def __contains__(self, column: str) -> bool:
        """Check if column exists in schema."""
        return column in self.columns

    def __len__(self) -> int:
        """Get number of columns."""
        return len(self.columns)

    def __repr__(self) -> str:
        cols = ", ".join(f"{name}: {dtype}" for name, dtype in self.columns.items())
        return f"Schema({cols})"

    def get_column_names(self) -> list[str]:
        """Get list of column names."""
        return list(self.columns.keys())

    def get_column_type(self, column: str) -> DataType | None:
        """Get type of a column, or None if column doesn't exist."""
        return self.columns.get(column)

    def validate_column(self, column: str) -> None:
        """Validate that a column exists in the schema.

        Raises:
            ValueError: If column doesn't exist
        """
        if column not in self.columns:
            available = ", ".join(self.columns.keys())
            raise ValueError(
                f"Column '{column}' not found in schema. Available columns: {available}"
            )

    def to_dict(self) -> dict[str, Any]:
        """Convert schema to dictionary."""
        return {name: dtype.value for name, dtype in self.columns.items()}
