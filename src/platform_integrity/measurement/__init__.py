"""Measurement module - UEFI variable and ACPI table producers."""

from .producers import AcpiTableProducer, UefiVariableProducer, default_producers

__all__ = ["AcpiTableProducer", "UefiVariableProducer", "default_producers"]
