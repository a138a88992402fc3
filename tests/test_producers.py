"""
Tests for UEFI and ACPI measurement producers.
"""

import hashlib
import logging

from platform_integrity.integrity import IntegritySnapshot
from platform_integrity.measurement import AcpiTableProducer, UefiVariableProducer, default_producers
from platform_integrity.measurement.producers import EFI_GLOBAL_GUID

from .conftest import write_efivar


class TestUefiVariableProducer:
    """Test efivarfs reading."""

    def test_reads_named_variables(self, efivars_dir):
        measurements = dict(UefiVariableProducer(efivars_dir)())

        assert measurements["UEFI:PK"] == b"platform-key"
        assert measurements["UEFI:KEK"] == b"key-exchange-key"
        assert measurements["UEFI:db"] == b"allowed-signatures"
        assert measurements["UEFI:dbx"] == b"revoked-signatures"
        assert measurements["UEFI:BootOrder"] == b"\x01\x00\x00\x00"

    def test_strips_attribute_header(self, efivars_dir):
        producer = UefiVariableProducer(efivars_dir)

        assert producer.read_variable(EFI_GLOBAL_GUID, "PK") == b"platform-key"

    def test_missing_named_variable_skipped(self, efivars_dir):
        ids = [id for id, _ in UefiVariableProducer(efivars_dir)()]

        assert "UEFI:BootCurrent" not in ids

    def test_boot_entries(self, efivars_dir):
        ids = [id for id, _ in UefiVariableProducer(efivars_dir)()]

        assert "UEFI:Boot0000" in ids
        assert "UEFI:Boot0001" in ids
        assert "UEFI:Boot0002" not in ids

    def test_boot_entry_names_are_uppercase_hex(self, efivars_dir):
        write_efivar(efivars_dir, "Boot00AB", EFI_GLOBAL_GUID, b"entry")

        ids = [id for id, _ in UefiVariableProducer(efivars_dir)()]

        assert "UEFI:Boot00AB" in ids

    def test_boot_entry_range_ends_at_00fe(self, efivars_dir):
        write_efivar(efivars_dir, "Boot00FE", EFI_GLOBAL_GUID, b"last")
        write_efivar(efivars_dir, "Boot00FF", EFI_GLOBAL_GUID, b"beyond")

        ids = [id for id, _ in UefiVariableProducer(efivars_dir)()]

        assert "UEFI:Boot00FE" in ids
        assert "UEFI:Boot00FF" not in ids

    def test_empty_boot_entry_skipped(self, efivars_dir):
        write_efivar(efivars_dir, "Boot0005", EFI_GLOBAL_GUID, b"")

        ids = [id for id, _ in UefiVariableProducer(efivars_dir)()]

        assert "UEFI:Boot0005" not in ids

    def test_missing_efivarfs_yields_nothing(self, tmp_path):
        assert list(UefiVariableProducer(tmp_path / "absent")()) == []

    def test_missing_efivarfs_not_a_warning(self, tmp_path, caplog):
        with caplog.at_level(logging.DEBUG, logger="platform_integrity.measurement"):
            list(UefiVariableProducer(tmp_path / "absent")())

        assert not [r for r in caplog.records if r.levelno >= logging.WARNING]

    def test_unreadable_variable_logs_warning(self, efivars_dir, caplog):
        (efivars_dir / f"BootCurrent-{EFI_GLOBAL_GUID}").mkdir()

        with caplog.at_level(logging.WARNING, logger="platform_integrity.measurement"):
            ids = [id for id, _ in UefiVariableProducer(efivars_dir)()]

        assert "UEFI:BootCurrent" not in ids
        assert "UEFI:PK" in ids
        assert any("Cannot read" in r.getMessage() for r in caplog.records)


class TestAcpiTableProducer:
    """Test ACPI table reading."""

    def test_reads_table(self, acpi_dir):
        measurements = list(AcpiTableProducer(acpi_dir)())

        assert measurements == [("ACPI:SLIC", b"SLIC" + b"\x00" * 32)]

    def test_absent_table_skipped(self, acpi_dir):
        assert list(AcpiTableProducer(acpi_dir, ["MSDM"])()) == []

    def test_empty_table_skipped(self, acpi_dir):
        (acpi_dir / "MSDM").write_bytes(b"")

        ids = [id for id, _ in AcpiTableProducer(acpi_dir, ["SLIC", "MSDM"])()]

        assert ids == ["ACPI:SLIC"]

    def test_missing_directory_yields_nothing(self, tmp_path):
        assert list(AcpiTableProducer(tmp_path / "absent")()) == []

    def test_absent_table_logged_at_debug(self, acpi_dir, caplog):
        with caplog.at_level(logging.DEBUG, logger="platform_integrity.measurement"):
            list(AcpiTableProducer(acpi_dir, ["MSDM"])())

        messages = [
            (r.levelno, r.getMessage())
            for r in caplog.records
            if r.name == "platform_integrity.measurement"
        ]
        assert messages == [(logging.DEBUG, "ACPI table MSDM not present")]

    def test_unreadable_table_logs_warning(self, acpi_dir, caplog):
        (acpi_dir / "SLIC").unlink()
        (acpi_dir / "SLIC").mkdir()

        with caplog.at_level(logging.DEBUG, logger="platform_integrity.measurement"):
            measurements = list(AcpiTableProducer(acpi_dir)())

        assert measurements == []
        warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
        assert len(warnings) == 1
        assert "Cannot read" in warnings[0].getMessage()
        assert not any("not present" in r.getMessage() for r in caplog.records)


class TestDefaultProducers:
    """Test producers built from settings."""

    def test_measure_host(self, settings):
        snapshot = IntegritySnapshot()
        snapshot.measure(default_producers(settings))

        assert "UEFI:PK" in snapshot
        assert "ACPI:SLIC" in snapshot
        assert snapshot.get("UEFI:PK") == hashlib.sha256(b"platform-key").hexdigest()
        assert len(snapshot) == 8
