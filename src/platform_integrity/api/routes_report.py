"""
Report generation API routes.
"""

from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import HTMLResponse

from ..integrity import EmptyResultError, IntegrityVerifier, MalformedInputError
from ..reporting import IntegrityReport, ReportGenerator
from .dependencies import get_generator, get_verifier

router = APIRouter(prefix="/report", tags=["Reporting"])


def build_report(verifier: IntegrityVerifier) -> IntegrityReport:
    """Verify now and wrap the result in a report."""
    try:
        snapshot = verifier.measure()
        result = verifier.verify(snapshot)
    except EmptyResultError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except MalformedInputError as e:
        raise HTTPException(status_code=500, detail=f"Corrupt baseline at line {e.line_number}")

    now = datetime.now(timezone.utc)
    return IntegrityReport(
        report_id=f"IR-{now.strftime('%Y%m%d%H%M%S')}-{uuid4().hex[:8]}",
        title="Firmware Integrity Report",
        generated_at=now,
        generated_by="Platform Integrity v1.0",
        result=result,
        checksums=snapshot.to_dict(),
    )


@router.get("/html", response_class=HTMLResponse)
async def get_html_report(
    verifier: IntegrityVerifier = Depends(get_verifier),
    generator: ReportGenerator = Depends(get_generator),
) -> HTMLResponse:
    """Render the current verification as an HTML page."""
    report = build_report(verifier)
    return HTMLResponse(content=generator.generate_html(report))


@router.post("/generate")
async def generate_report(
    verifier: IntegrityVerifier = Depends(get_verifier),
    generator: ReportGenerator = Depends(get_generator),
) -> dict[str, Any]:
    """Verify now and save the HTML report to the reports directory."""
    report = build_report(verifier)
    path = generator.save_html(report)

    return {
        "success": True,
        "report_id": report.report_id,
        "is_valid": report.result.is_valid,
        "path": str(path),
    }
