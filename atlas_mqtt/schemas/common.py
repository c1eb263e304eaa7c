"""
Common Schema Types
==================

Bounded Context: Shared Data Structures

Types shared by zone event and snapshot messages.

Types:
- Timestamp: ISO 8601 timestamp wrapper (UTC)
"""

from dataclasses import dataclass
from datetime import datetime, timezone

SCHEMA_VERSION = "1.0"


@dataclass(frozen=True)
class Timestamp:
    """
    Immutable ISO 8601 timestamp wrapper.

    Example:
        >>> Timestamp.now().value
        '2026-03-02T10:15:00.123456+00:00'
    """
    value: str

    def __post_init__(self):
        if not isinstance(self.value, str) or not self.value:
            raise ValueError(f"Timestamp must be a non-empty string, got {self.value!r}")

    @classmethod
    def now(cls) -> 'Timestamp':
        return cls(value=datetime.now(timezone.utc).isoformat())

    def to_datetime(self) -> datetime:
        """Parse to datetime (ValueError on malformed input)."""
        try:
            return datetime.fromisoformat(self.value)
        except ValueError as e:
            raise ValueError(f"Invalid ISO timestamp: {self.value}") from e

    def to_dict(self) -> str:
        """Serialize to JSON (as string)."""
        return self.value
