"""Reporting module - HTML integrity reports."""

from .generator import IntegrityReport, ReportGenerator

__all__ = ["IntegrityReport", "ReportGenerator"]
