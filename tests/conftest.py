"""
Shared Test Fixtures
====================

Builders for SMBIOS byte buffers used across the test modules:
- make_record: one structure record (header, formatted area, string set)
- make_entry_point32 / make_entry_point64: entry points with correct
  checksums unless told otherwise
- sample_table_blob: a small table with BIOS and System records plus the
  end-of-table marker
"""

import struct
from typing import Optional, Sequence

import pytest


# =============================================================================
# Builders
# =============================================================================

def _make_record(
    type_code: int,
    handle: int,
    data: bytes = b"",
    strings: Sequence[bytes] = (),
    length: Optional[int] = None,
) -> bytes:
    """
    Build one structure record.

    The string set is closed with the usual extra NUL; a record without
    strings ends with two NULs.
    """
    if length is None:
        length = 4 + len(data)
    result = bytearray(struct.pack("<BBH", type_code, length, handle))
    result.extend(data)
    if strings:
        for text in strings:
            result.extend(text)
            result.append(0)
        result.append(0)
    else:
        result.extend(b"\x00\x00")
    return bytes(result)


def _make_entry_point32(
    table_length: int = 0x0456,
    table_address: int = 0x000F0800,
    structure_count: int = 42,
    max_structure_size: int = 0x0123,
    good_checksum: bool = True,
) -> bytes:
    """Build a 31-byte "_SM_" entry point."""
    anchor = b"_SM_"
    length, major, minor, revision = 0x1F, 2, 8, 0
    formatted = b"\x00" * 5

    leading = (
        sum(anchor) + length + major + minor
        + (max_structure_size & 0xFF) + revision + sum(formatted)
    )
    checksum = (-leading) & 0xFF
    if not good_checksum:
        checksum = (checksum + 1) & 0xFF

    intermediate = struct.pack(
        "<5sBHIHB", b"_DMI_", 0, table_length, table_address, structure_count, 0x28
    )
    inter_checksum = (-sum(intermediate)) & 0xFF

    return struct.pack(
        "<4sBBBBHB5s5sBHIHB",
        anchor, checksum, length, major, minor, max_structure_size, revision,
        formatted, b"_DMI_", inter_checksum, table_length, table_address,
        structure_count, 0x28,
    )


def _make_entry_point64(
    table_length: int = 0x1000,
    table_address: int = 0x7FFF0000,
    good_checksum: bool = True,
) -> bytes:
    """Build a 24-byte "_SM3_" entry point."""
    fields = [b"_SM3_", 0, 0x18, 3, 2, 0, 1, 0, table_length, table_address]
    raw = struct.pack("<5sBBBBBBBIQ", *fields)
    checksum = (-sum(raw)) & 0xFF
    if not good_checksum:
        checksum = (checksum + 1) & 0xFF
    fields[1] = checksum
    return struct.pack("<5sBBBBBBBIQ", *fields)


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def make_record():
    """Factory fixture: build a structure record."""
    return _make_record


@pytest.fixture
def make_entry_point32():
    """Factory fixture: build a 32-bit entry point."""
    return _make_entry_point32


@pytest.fixture
def make_entry_point64():
    """Factory fixture: build a 64-bit entry point."""
    return _make_entry_point64


@pytest.fixture
def end_marker() -> bytes:
    """Type 127 end-of-table record."""
    return _make_record(127, 0xFEFF)


@pytest.fixture
def bios_record() -> bytes:
    """
    BIOS Information (type 0) record, handle 0x0000.

    Vendor = string 1, version = string 2, release date = string 3,
    segment 0xE800, ROM size byte 0x0F (1024 KB).
    """
    data = struct.pack("<BBHBBQ", 1, 2, 0xE800, 3, 0x0F, 0x08)
    return _make_record(0, 0x0000, data, [b"Acme", b"1.2.3", b"01/02/2024"])


@pytest.fixture
def system_record() -> bytes:
    """System Information (type 1) record, handle 0x0001, no serial string."""
    data = struct.pack("<BBBB", 1, 2, 3, 0)
    return _make_record(1, 0x0001, data, [b"Acme", b"Widget", b"Rev A"])


@pytest.fixture
def sample_table_blob(bios_record: bytes, system_record: bytes, end_marker: bytes) -> bytes:
    """BIOS record, System record, end-of-table marker."""
    return bios_record + system_record + end_marker
