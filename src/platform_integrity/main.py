"""
Platform Integrity - FastAPI Application Entry Point.

Measures UEFI variables and ACPI tables and reports drift between boots.
"""

import json
import logging
import sys
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from . import __version__
from .api import report_router, snapshot_router, verify_router
from .config import get_settings


# ============================================================================
# JSON LOGGING SETUP
# ============================================================================

class JSONFormatter(logging.Formatter):
    """Custom JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        for key in ["endpoint", "method", "status_code", "action", "entry_count", "error"]:
            if hasattr(record, key):
                log_data[key] = getattr(record, key)

        return json.dumps(log_data, default=str)


def setup_json_logging(level: str = "INFO") -> logging.Logger:
    """Configure JSON logging for the service."""
    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(JSONFormatter())
    root_logger.addHandler(console_handler)

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

    return logging.getLogger("platform_integrity")


logger = logging.getLogger("platform_integrity")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    settings = get_settings()
    setup_json_logging(settings.log_level)
    logger.info("Starting Platform Integrity service")
    logger.info(f"UEFI source: {settings.efivars_dir}, ACPI source: {settings.acpi_tables_dir}")
    logger.info(f"Baseline file: {settings.baseline_file}")

    yield

    logger.info("Shutdown complete")


app = FastAPI(
    title="Platform Integrity",
    description="""
# Firmware Integrity Snapshots

Checksums security-relevant firmware state and detects change between boots:
- **UEFI variables**: PK, KEK, db, dbx, BootOrder, BootCurrent and Boot####
- **ACPI tables**: configurable list, SLIC by default

## Getting Started

1. Record a trusted baseline via `POST /verify/baseline`
2. After a reboot or update, check for drift via `GET /verify`
3. Render an HTML report via `GET /report/html`
    """,
    version=__version__,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.include_router(snapshot_router)
app.include_router(verify_router)
app.include_router(report_router)


@app.get("/", tags=["Health"])
async def root():
    """Root endpoint with API information."""
    settings = get_settings()
    return {
        "name": settings.app_name,
        "version": __version__,
        "status": "running",
        "docs": "/docs",
        "endpoints": {
            "snapshot": "/snapshot",
            "verify": "/verify",
            "report": "/report",
        },
    }


@app.get("/health", tags=["Health"])
async def health_check():
    """Health check endpoint."""
    logger.info("Health check requested", extra={"action": "health_check"})

    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@app.exception_handler(Exception)
async def global_exception_handler(request, exc):
    """Global exception handler."""
    logger.error(f"Unhandled error: {exc}", exc_info=exc)
    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal server error",
            "detail": str(exc),
        },
    )


def main():
    """Run the application with uvicorn."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "platform_integrity.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )


if __name__ == "__main__":
    main()
