"""
Shared fixtures: fake efivarfs and ACPI trees.
"""

import struct
from pathlib import Path

import pytest

from platform_integrity.config import get_settings
from platform_integrity.measurement.producers import (
    EFI_GLOBAL_GUID,
    EFI_SECURITY_DATABASE_GUID,
)

# EFI_VARIABLE_NON_VOLATILE | BOOTSERVICE_ACCESS | RUNTIME_ACCESS
EFIVAR_ATTRIBUTES = struct.pack("<I", 0x7)


def write_efivar(efivars_dir: Path, name: str, guid: str, data: bytes) -> Path:
    """Write a variable the way efivarfs exposes it."""
    path = efivars_dir / f"{name}-{guid}"
    path.write_bytes(EFIVAR_ATTRIBUTES + data)
    return path


@pytest.fixture
def efivars_dir(tmp_path: Path) -> Path:
    efivars = tmp_path / "efivars"
    efivars.mkdir()
    write_efivar(efivars, "PK", EFI_GLOBAL_GUID, b"platform-key")
    write_efivar(efivars, "KEK", EFI_GLOBAL_GUID, b"key-exchange-key")
    write_efivar(efivars, "db", EFI_SECURITY_DATABASE_GUID, b"allowed-signatures")
    write_efivar(efivars, "dbx", EFI_SECURITY_DATABASE_GUID, b"revoked-signatures")
    write_efivar(efivars, "BootOrder", EFI_GLOBAL_GUID, b"\x01\x00\x00\x00")
    write_efivar(efivars, "Boot0000", EFI_GLOBAL_GUID, b"\\EFI\\BOOT\\BOOTX64.EFI")
    write_efivar(efivars, "Boot0001", EFI_GLOBAL_GUID, b"\\EFI\\fedora\\shimx64.efi")
    return efivars


@pytest.fixture
def acpi_dir(tmp_path: Path) -> Path:
    tables = tmp_path / "acpi"
    tables.mkdir()
    (tables / "SLIC").write_bytes(b"SLIC" + b"\x00" * 32)
    return tables


@pytest.fixture
def settings(tmp_path: Path, efivars_dir: Path, acpi_dir: Path, monkeypatch):
    """Settings pointing at the fake firmware trees."""
    monkeypatch.setenv("PLATFORM_INTEGRITY_EFIVARS_DIR", str(efivars_dir))
    monkeypatch.setenv("PLATFORM_INTEGRITY_ACPI_TABLES_DIR", str(acpi_dir))
    monkeypatch.setenv("PLATFORM_INTEGRITY_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("PLATFORM_INTEGRITY_REPORTS_DIR", str(tmp_path / "reports"))
    get_settings.cache_clear()
    yield get_settings()
    get_settings.cache_clear()
