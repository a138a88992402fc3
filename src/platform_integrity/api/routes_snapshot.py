"""
Snapshot API routes.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from ..integrity import EmptyResultError, IntegritySnapshot, IntegrityVerifier, MalformedInputError
from .dependencies import get_verifier

logger = logging.getLogger("platform_integrity.api")

router = APIRouter(prefix="/snapshot", tags=["Snapshot"])


class SnapshotResponse(BaseModel):
    """A snapshot as checksums and canonical text."""

    entry_count: int
    checksums: dict[str, str]
    text: str | None = None


class ParseRequest(BaseModel):
    """Request to parse snapshot text."""

    text: str = Field(..., description="Snapshot text, one id=checksum per line")


def to_response(snapshot: IntegritySnapshot) -> SnapshotResponse:
    return SnapshotResponse(
        entry_count=len(snapshot),
        checksums=snapshot.to_dict(),
        text=snapshot.to_string(),
    )


@router.get("")
async def get_snapshot(
    verifier: IntegrityVerifier = Depends(get_verifier),
) -> SnapshotResponse:
    """Measure the current firmware state."""
    try:
        snapshot = verifier.measure()
    except EmptyResultError as e:
        logger.warning(f"Measurement failed: {e}")
        raise HTTPException(status_code=404, detail=str(e))

    logger.info(f"Measured snapshot with {len(snapshot)} entries")
    return to_response(snapshot)


@router.post("/parse")
async def parse_snapshot(request: ParseRequest) -> SnapshotResponse:
    """
    Parse snapshot text.

    Comment lines starting with ``#`` and blank lines are ignored.
    """
    try:
        snapshot = IntegritySnapshot.from_string(request.text)
    except MalformedInputError as e:
        raise HTTPException(
            status_code=422,
            detail={"error": "malformed snapshot", "line": e.line, "line_number": e.line_number},
        )

    return to_response(snapshot)
