"""API routes module."""

from .routes_report import router as report_router
from .routes_snapshot import router as snapshot_router
from .routes_verify import router as verify_router

__all__ = ["snapshot_router", "verify_router", "report_router"]
