"""
Integrity Verifier - High-level API for boot-to-boot firmware verification.

Provides easy-to-use methods for:
- Measuring the current firmware state
- Recording it as the trusted baseline
- Detecting drift against that baseline
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

from .errors import IntegrityMismatchError
from .snapshot import IntegritySnapshot, MeasurementProducer

if TYPE_CHECKING:
    from ..storage.baseline import BaselineStore

logger = logging.getLogger("platform_integrity.verifier")


@dataclass
class VerificationResult:
    """Result of an integrity verification."""

    is_valid: bool
    message: str
    timestamp: datetime
    details: dict[str, Any]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "is_valid": self.is_valid,
            "message": self.message,
            "timestamp": self.timestamp.isoformat(),
            "details": self.details,
        }


class IntegrityVerifier:
    """
    Measures firmware state and checks it against a stored baseline.

    EmptyResultError and MalformedInputError propagate to the caller; a
    mismatch is reported through the returned VerificationResult.
    """

    def __init__(self, store: "BaselineStore", producers: Iterable[MeasurementProducer]):
        """
        Initialize verifier.

        Args:
            store: Where the baseline snapshot is persisted
            producers: Measurement producers to build snapshots from
        """
        self.store = store
        self.producers = list(producers)

    def measure(self) -> IntegritySnapshot:
        """Take a fresh snapshot of the current state."""
        snapshot = IntegritySnapshot()
        count = snapshot.measure(self.producers)
        logger.debug(f"Measured {count} entries")
        return snapshot

    def record_baseline(self) -> IntegritySnapshot:
        """Measure now and persist the result as the baseline."""
        snapshot = self.measure()
        self.store.save(snapshot)
        return snapshot

    def verify(self, current: IntegritySnapshot | None = None) -> VerificationResult:
        """
        Verify the current state against the recorded baseline.

        Args:
            current: Snapshot to check; measured now if not given

        Returns:
            VerificationResult with any discrepancies in its details
        """
        baseline = self.store.load()
        if baseline is None:
            return VerificationResult(
                is_valid=False,
                message="No baseline recorded",
                timestamp=datetime.now(timezone.utc),
                details={"baseline_file": str(self.store.path)},
            )

        if current is None:
            current = self.measure()
        return self.compare(current, baseline)

    def compare(
        self,
        current: IntegritySnapshot,
        reference: IntegritySnapshot,
    ) -> VerificationResult:
        """
        Compare two snapshots.

        Args:
            current: What we have now
            reference: What we had at another time
        """
        details: dict[str, Any] = {
            "current_count": len(current),
            "reference_count": len(reference),
            "discrepancies": [],
        }

        try:
            current.compare(reference)
        except IntegrityMismatchError as e:
            logger.warning(f"Integrity mismatch: {e.summary}")
            details["discrepancies"] = [d.to_dict() for d in e.discrepancies]
            details["summary"] = e.summary
            return VerificationResult(
                is_valid=False,
                message="Integrity mismatch detected",
                timestamp=datetime.now(timezone.utc),
                details=details,
            )

        return VerificationResult(
            is_valid=True,
            message="Integrity verified",
            timestamp=datetime.now(timezone.utc),
            details=details,
        )
