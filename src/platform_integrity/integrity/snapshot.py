"""
Integrity snapshot of security-relevant firmware state.

A snapshot maps opaque identifiers (conventionally ``UEFI:<name>`` or
``ACPI:<name>``) to lowercase hex SHA-256 checksums. Two snapshots taken at
different times can be compared to detect tampering between boots.

Text format (one entry per line, no trailing newline):

    UEFI:PK=3b0f...
    ACPI:SLIC=9a41...

Empty lines and lines starting with ``#`` are ignored when reading.
"""

from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass
from enum import Enum
from typing import Any

from .checksum import sha256_hex
from .errors import EmptyResultError, IntegrityMismatchError, MalformedInputError

MISSING = "MISSING"

# A producer is called with no arguments and yields (identifier, raw bytes)
MeasurementProducer = Callable[[], Iterable[tuple[str, bytes]]]


class DiscrepancyKind(str, Enum):
    """How an identifier differs between two snapshots."""

    ADDED = "added"  # present now, absent in the reference
    REMOVED = "removed"  # present in the reference, absent now
    CHANGED = "changed"


@dataclass(frozen=True)
class Discrepancy:
    """One identifier whose presence or value differs between snapshots."""

    id: str
    kind: DiscrepancyKind
    old: str | None = None
    new: str | None = None

    def __str__(self) -> str:
        return f"{self.id}={self.old or MISSING}->{self.new or MISSING}"

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "id": self.id,
            "kind": self.kind.value,
            "old": self.old,
            "new": self.new,
        }


class IntegritySnapshot:
    """
    Point-in-time record of firmware checksums.

    Usage:
        snapshot = IntegritySnapshot()
        snapshot.measure(producers)
        text = snapshot.to_string()

        reference = IntegritySnapshot.from_string(text)
        snapshot.compare(reference)  # raises IntegrityMismatchError on drift
    """

    def __init__(self):
        self._checksums: dict[str, str] = {}

    def add_checksum(self, id: str, checksum: str) -> None:
        """
        Insert or overwrite a checksum.

        Args:
            id: Identifier, e.g. ``UEFI:PK``
            checksum: Lowercase hex digest
        """
        if not id:
            raise ValueError("Identifier must not be empty")
        if not checksum:
            raise ValueError(f"Checksum for {id} must not be empty")
        self._checksums[id] = checksum

    def add_measurement(self, id: str, data: bytes) -> str:
        """
        Hash raw bytes and record the checksum.

        Returns:
            The SHA-256 checksum that was stored
        """
        checksum = sha256_hex(data)
        self.add_checksum(id, checksum)
        return checksum

    def measure(self, producers: Iterable[MeasurementProducer]) -> int:
        """
        Collect measurements from every producer.

        Args:
            producers: Zero-argument callables yielding ``(id, bytes)`` pairs

        Returns:
            Number of entries in the snapshot

        Raises:
            EmptyResultError: If no producer yielded anything
        """
        for producer in producers:
            for id, data in producer():
                self.add_measurement(id, data)

        # nothing of use
        if not self._checksums:
            raise EmptyResultError()
        return len(self._checksums)

    def to_string(self) -> str | None:
        """Serialize to ``id=checksum`` lines, or None if empty."""
        if not self._checksums:
            return None
        return "\n".join(f"{id}={checksum}" for id, checksum in self._checksums.items())

    def load(self, text: str) -> None:
        """
        Parse snapshot text into this snapshot.

        Parsing stops at the first malformed line; entries added before it
        remain, so the snapshot must not be trusted after a failure.

        Raises:
            MalformedInputError: If a line is not ``id=checksum``
        """
        for line_number, line in enumerate(text.split("\n"), start=1):
            if not line or line.startswith("#"):
                continue
            id, sep, checksum = line.partition("=")
            if not sep or not id or not checksum:
                raise MalformedInputError(text, line, line_number)
            self.add_checksum(id, checksum)

    @classmethod
    def from_string(cls, text: str) -> "IntegritySnapshot":
        """Create a snapshot from text produced by ``to_string``."""
        snapshot = cls()
        snapshot.load(text)
        return snapshot

    def diff(self, other: "IntegritySnapshot") -> list[Discrepancy]:
        """
        List the discrepancies between this snapshot and a reference.

        Args:
            other: What we had at another time

        Returns:
            Added and changed entries in this snapshot's order, followed by
            entries removed since the reference
        """
        discrepancies: list[Discrepancy] = []

        # look at what we have now
        for id, value in self._checksums.items():
            value2 = other._checksums.get(id)
            if value2 is None:
                discrepancies.append(Discrepancy(id, DiscrepancyKind.ADDED, new=value))
            elif value2 != value:
                discrepancies.append(
                    Discrepancy(id, DiscrepancyKind.CHANGED, old=value2, new=value)
                )

        # look at what we had then
        for id, value in other._checksums.items():
            if id not in self._checksums:
                discrepancies.append(Discrepancy(id, DiscrepancyKind.REMOVED, old=value))

        return discrepancies

    def compare(self, other: "IntegritySnapshot") -> None:
        """
        Compare against a reference snapshot.

        Raises:
            IntegrityMismatchError: If any entry was added, removed or changed
        """
        discrepancies = self.diff(other)
        if discrepancies:
            raise IntegrityMismatchError(discrepancies)

    def get(self, id: str) -> str | None:
        """Get the checksum for an identifier."""
        return self._checksums.get(id)

    def to_dict(self) -> dict[str, str]:
        """Copy of the identifier to checksum mapping."""
        return dict(self._checksums)

    def __len__(self) -> int:
        return len(self._checksums)

    def __contains__(self, id: object) -> bool:
        return id in self._checksums

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._checksums))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, IntegritySnapshot):
            return NotImplemented
        return self._checksums == other._checksums

    def __repr__(self) -> str:
        return f"IntegritySnapshot({len(self._checksums)} entries)"
