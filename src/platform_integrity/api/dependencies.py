"""
Shared service instances for the API routes.
"""

from ..config import get_settings
from ..integrity import IntegrityVerifier
from ..measurement import default_producers
from ..reporting import ReportGenerator
from ..storage import BaselineStore

# Global instances
_verifier: IntegrityVerifier | None = None
_generator: ReportGenerator | None = None


def get_verifier() -> IntegrityVerifier:
    """Get or create the global IntegrityVerifier."""
    global _verifier
    if _verifier is None:
        settings = get_settings()
        _verifier = IntegrityVerifier(
            store=BaselineStore(settings.baseline_file),
            producers=default_producers(settings),
        )
    return _verifier


def get_generator() -> ReportGenerator:
    """Get or create the global ReportGenerator."""
    global _generator
    if _generator is None:
        settings = get_settings()
        _generator = ReportGenerator(output_dir=settings.reports_dir)
    return _generator
