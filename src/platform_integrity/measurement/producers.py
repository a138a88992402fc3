"""
Measurement producers for UEFI variables and ACPI tables.

Each producer is a zero-argument callable yielding ``(identifier, bytes)``
pairs. A source that is absent or unreadable on this host yields nothing;
deciding whether an empty result matters is left to the snapshot.
"""

import logging
from collections.abc import Iterator
from pathlib import Path

from ..config import Settings
from ..integrity.snapshot import MeasurementProducer

logger = logging.getLogger("platform_integrity.measurement")

EFI_GLOBAL_GUID = "8be4df61-93ca-11d2-aa0d-00e098032b8c"
EFI_SECURITY_DATABASE_GUID = "d719b2cb-3d3a-4596-a3bc-dad00e67656f"

# efivarfs prefixes every variable with a 32-bit attribute mask
EFIVAR_ATTRIBUTES_SIZE = 4


def _read_file(path: Path) -> bytes | None:
    """Read a file, returning None if it is absent or unreadable."""
    try:
        return path.read_bytes()
    except FileNotFoundError:
        return None
    except OSError as e:
        logger.warning(f"Cannot read {path}: {e}")
        return None


class UefiVariableProducer:
    """
    Reads security-relevant UEFI variables from efivarfs.

    Measures the Secure Boot key databases, boot order and every
    ``Boot####`` entry that exists and is non-empty.
    """

    DEFAULT_VARIABLES: list[tuple[str, str]] = [
        (EFI_GLOBAL_GUID, "BootOrder"),
        (EFI_GLOBAL_GUID, "BootCurrent"),
        (EFI_GLOBAL_GUID, "KEK"),
        (EFI_GLOBAL_GUID, "PK"),
        (EFI_SECURITY_DATABASE_GUID, "db"),
        (EFI_SECURITY_DATABASE_GUID, "dbx"),
    ]

    BOOT_ENTRY_COUNT = 0xFF  # Boot0000 ... Boot00FE

    def __init__(
        self,
        efivars_dir: Path,
        variables: list[tuple[str, str]] | None = None,
    ):
        """
        Initialize producer.

        Args:
            efivars_dir: Mount point of efivarfs
            variables: (vendor GUID, name) pairs to measure
        """
        self.efivars_dir = efivars_dir
        self.variables = variables if variables is not None else self.DEFAULT_VARIABLES

    def read_variable(self, guid: str, name: str) -> bytes | None:
        """Get the data of a variable without its attribute header."""
        blob = _read_file(self.efivars_dir / f"{name}-{guid}")
        if blob is None:
            return None
        return blob[EFIVAR_ATTRIBUTES_SIZE:]

    def __call__(self) -> Iterator[tuple[str, bytes]]:
        if not self.efivars_dir.is_dir():
            logger.debug(f"No efivarfs at {self.efivars_dir}, skipping UEFI")
            return

        # important keys
        for guid, name in self.variables:
            data = self.read_variable(guid, name)
            if data is not None:
                yield f"UEFI:{name}", data

        for i in range(self.BOOT_ENTRY_COUNT):
            name = f"Boot{i:04X}"
            data = self.read_variable(EFI_GLOBAL_GUID, name)
            if data:
                yield f"UEFI:{name}", data


class AcpiTableProducer:
    """Reads named ACPI tables, skipping any that are absent or empty."""

    DEFAULT_TABLES = ("SLIC",)

    def __init__(self, tables_dir: Path, tables: list[str] | tuple[str, ...] | None = None):
        self.tables_dir = tables_dir
        self.tables = tuple(tables) if tables is not None else self.DEFAULT_TABLES

    def __call__(self) -> Iterator[tuple[str, bytes]]:
        for table in self.tables:
            path = self.tables_dir / table
            blob = _read_file(path)
            if blob:
                yield f"ACPI:{table}", blob
            elif blob is not None:
                logger.debug(f"ACPI table {table} is empty")
            elif not path.exists():
                logger.debug(f"ACPI table {table} not present")


def default_producers(settings: Settings) -> list[MeasurementProducer]:
    """Build the UEFI and ACPI producers from configuration."""
    return [
        UefiVariableProducer(settings.efivars_dir),
        AcpiTableProducer(settings.acpi_tables_dir, settings.acpi_tables),
    ]
