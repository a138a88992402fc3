"""
Integrity verification API routes.
"""

import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from ..integrity import EmptyResultError, IntegritySnapshot, IntegrityVerifier, MalformedInputError
from .dependencies import get_verifier

logger = logging.getLogger("platform_integrity.api")

router = APIRouter(prefix="/verify", tags=["Integrity"])


class CompareRequest(BaseModel):
    """Request to compare two snapshot texts."""

    current: str = Field(..., description="Snapshot text for the current state")
    reference: str = Field(..., description="Snapshot text recorded earlier")


class BaselineResponse(BaseModel):
    """Response from recording a baseline."""

    success: bool
    entry_count: int
    baseline_file: str


@router.post("/baseline")
async def record_baseline(
    verifier: IntegrityVerifier = Depends(get_verifier),
) -> BaselineResponse:
    """
    Measure now and store the result as the trusted baseline.

    Overwrites any previously recorded baseline.
    """
    try:
        snapshot = verifier.record_baseline()
    except EmptyResultError as e:
        raise HTTPException(status_code=404, detail=str(e))

    return BaselineResponse(
        success=True,
        entry_count=len(snapshot),
        baseline_file=str(verifier.store.path),
    )


@router.get("")
async def verify_against_baseline(
    verifier: IntegrityVerifier = Depends(get_verifier),
) -> dict[str, Any]:
    """
    Verify the current state against the recorded baseline.

    A mismatch is a normal result (``is_valid`` false), not an HTTP error.
    """
    try:
        result = verifier.verify()
    except EmptyResultError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except MalformedInputError as e:
        logger.error(f"Stored baseline is corrupt at line {e.line_number}")
        raise HTTPException(status_code=500, detail=f"Corrupt baseline at line {e.line_number}")

    return result.to_dict()


@router.post("/compare")
async def compare_snapshots(
    request: CompareRequest,
    verifier: IntegrityVerifier = Depends(get_verifier),
) -> dict[str, Any]:
    """Compare two snapshot texts without touching the stored baseline."""
    try:
        current = IntegritySnapshot.from_string(request.current)
        reference = IntegritySnapshot.from_string(request.reference)
    except MalformedInputError as e:
        raise HTTPException(
            status_code=422,
            detail={"error": "malformed snapshot", "line": e.line, "line_number": e.line_number},
        )

    return verifier.compare(current, reference).to_dict()


@router.delete("/baseline")
async def clear_baseline(
    verifier: IntegrityVerifier = Depends(get_verifier),
) -> dict[str, str]:
    """Forget the recorded baseline."""
    verifier.store.clear()
    return {"status": "cleared"}
