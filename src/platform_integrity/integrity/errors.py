"""
Integrity error types.

Each failing snapshot operation raises exactly one of these:

- EmptyResultError: measurement produced nothing on this host
- MalformedInputError: persisted snapshot text could not be parsed
- IntegrityMismatchError: two snapshots differ
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .snapshot import Discrepancy


class IntegrityError(Exception):
    """Base class for integrity snapshot failures."""


class EmptyResultError(IntegrityError):
    """No measurements were collected from any producer."""

    def __init__(self, message: str = "no measurements"):
        super().__init__(message)


class MalformedInputError(IntegrityError):
    """A non-comment line did not split into ``id=checksum``."""

    def __init__(self, text: str, line: str, line_number: int):
        super().__init__(f"failed to parse: {text}")
        self.text = text
        self.line = line
        self.line_number = line_number


class IntegrityMismatchError(IntegrityError):
    """Two snapshots differ; carries the structured discrepancy list."""

    def __init__(self, discrepancies: list["Discrepancy"]):
        self.discrepancies = list(discrepancies)
        super().__init__(self.summary)

    @property
    def summary(self) -> str:
        """Comma-separated rendering of every discrepancy."""
        return ", ".join(str(d) for d in self.discrepancies)
