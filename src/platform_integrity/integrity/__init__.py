"""Integrity module - firmware snapshots, comparison and verification."""

from .errors import (
    EmptyResultError,
    IntegrityError,
    IntegrityMismatchError,
    MalformedInputError,
)
from .snapshot import Discrepancy, DiscrepancyKind, IntegritySnapshot
from .verifier import IntegrityVerifier, VerificationResult

__all__ = [
    "IntegritySnapshot",
    "Discrepancy",
    "DiscrepancyKind",
    "IntegrityVerifier",
    "VerificationResult",
    "IntegrityError",
    "EmptyResultError",
    "MalformedInputError",
    "IntegrityMismatchError",
]
