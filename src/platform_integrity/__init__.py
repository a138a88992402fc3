"""Platform Integrity - detect firmware tampering between boots."""

__version__ = "1.0.0"
