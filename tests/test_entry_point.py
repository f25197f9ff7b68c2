"""
Entry Point Unit Tests
======================

Test Categories
---------------
1. Checksum: Testing byte-sum helpers
2. EntryPoint32: Testing the "_SM_" layout and its leading-field checksum
3. EntryPoint64: Testing the "_SM3_" layout and the opt-in checksum
4. Detection: Testing parse_entry_point() and validate_entry_point()
"""

import struct

import pytest

from smbios_tools.config import DecoderConfig
from smbios_tools.errors import EntryPointError, EntryPointFormatError
from smbios_tools.tables import (
    EntryPoint32,
    EntryPoint64,
    analyze_checksum,
    analyze_entry_point_checksum,
    byte_sum,
    calculate_checksum,
    parse_entry_point,
    validate_entry_point,
    verify_byte_sum,
)


# Offsets summed by the 32-bit validity rule: anchor, checksum, length,
# versions, low byte of max structure size, revision, formatted area
COUNTED_OFFSETS_32 = [0, 1, 2, 3, 4, 5, 6, 7, 8, 10, 11, 12, 13, 14, 15]


def _mutate(data: bytes, offset: int, delta: int = 1) -> bytes:
    buf = bytearray(data)
    buf[offset] = (buf[offset] + delta) & 0xFF
    return bytes(buf)


# =============================================================================
# Checksum Tests
# =============================================================================

class TestChecksum:
    """Tests for byte-sum checksum helpers."""

    def test_byte_sum_wraps(self):
        assert byte_sum(b"\xff\x01") == 0
        assert byte_sum(b"\x80\x80\x05") == 5
        assert byte_sum(b"") == 0

    def test_verify_byte_sum(self):
        assert verify_byte_sum(b"\x10\xf0")
        assert not verify_byte_sum(b"\x10\xf1")

    def test_calculate_checksum_ignores_stored_byte(self):
        assert calculate_checksum(b"\x10\x99\x20", 1) == 0xD0
        assert calculate_checksum(b"\x10\x00\x20", 1) == 0xD0

    def test_calculate_checksum_bad_offset(self):
        with pytest.raises(ValueError):
            calculate_checksum(b"\x00\x00", 2)

    def test_analyze_checksum(self):
        good = analyze_checksum(b"\x10\xd0\x20", 1)
        assert good.is_valid
        assert good.covered_bytes == 3

        bad = analyze_checksum(b"\x10\x00\x20", 1)
        assert not bad.is_valid
        assert bad.stored_checksum == 0x00
        assert bad.calculated_checksum == 0xD0
        assert "0xD0" in bad.message


# =============================================================================
# 32-bit Entry Point Tests
# =============================================================================

class TestEntryPoint32:
    """Tests for EntryPoint32."""

    def test_decode_fields(self, make_entry_point32):
        entry = EntryPoint32.from_bytes(make_entry_point32())
        assert entry.anchor == b"_SM_"
        assert entry.length == 0x1F
        assert entry.version == "2.8"
        assert entry.max_structure_size == 0x0123
        assert entry.inter_anchor == b"_DMI_"
        assert entry.table_length == 0x0456
        assert entry.table_address == 0x000F0800
        assert entry.structure_count == 42
        assert entry.bcd_revision == 0x28

    def test_size(self):
        assert EntryPoint32.SIZE == 31

    def test_valid(self, make_entry_point32):
        assert EntryPoint32.from_bytes(make_entry_point32()).is_valid()

    def test_bad_checksum(self, make_entry_point32):
        entry = EntryPoint32.from_bytes(make_entry_point32(good_checksum=False))
        assert not entry.is_valid()
        analysis = entry.analyze_checksum()
        assert not analysis.is_valid
        assert analysis.calculated_checksum == (analysis.stored_checksum - 1) & 0xFF

    @pytest.mark.parametrize("offset", COUNTED_OFFSETS_32)
    @pytest.mark.parametrize("delta", [1, 0x80, 0xFF])
    def test_mutating_counted_byte_invalidates(self, make_entry_point32, offset, delta):
        data = _mutate(make_entry_point32(), offset, delta)
        assert not EntryPoint32.from_bytes(data).is_valid()

    @pytest.mark.parametrize("offset", [9] + list(range(16, 31)))
    def test_uncounted_bytes_ignored(self, make_entry_point32, offset):
        """High byte of max size and the intermediate block are not summed."""
        data = _mutate(make_entry_point32(), offset)
        assert EntryPoint32.from_bytes(data).is_valid()

    def test_intermediate_checksum(self, make_entry_point32):
        data = make_entry_point32()
        assert EntryPoint32.from_bytes(data).verify_intermediate_checksum()
        assert not EntryPoint32.from_bytes(_mutate(data, 0x16)).verify_intermediate_checksum()

    def test_extra_bytes_ignored(self, make_entry_point32):
        entry = EntryPoint32.from_bytes(make_entry_point32() + b"\xAA" * 8)
        assert entry.is_valid()

    def test_short_buffer(self, make_entry_point32):
        with pytest.raises(EntryPointFormatError, match="need 31 bytes, got 30"):
            EntryPoint32.from_bytes(make_entry_point32()[:30])


# =============================================================================
# 64-bit Entry Point Tests
# =============================================================================

class TestEntryPoint64:
    """Tests for EntryPoint64."""

    def test_decode_fields(self, make_entry_point64):
        entry = EntryPoint64.from_bytes(make_entry_point64())
        assert entry.anchor == b"_SM3_"
        assert entry.length == 0x18
        assert entry.version == "3.2"
        assert entry.revision == 1
        assert entry.table_length == 0x1000
        assert entry.table_address == 0x7FFF0000

    def test_size(self):
        assert EntryPoint64.SIZE == 24

    def test_valid_on_anchor(self, make_entry_point64):
        assert EntryPoint64.from_bytes(make_entry_point64()).is_valid()

    def test_checksum_not_consulted(self, make_entry_point64):
        """is_valid() depends only on the anchor."""
        entry = EntryPoint64.from_bytes(make_entry_point64(good_checksum=False))
        assert entry.is_valid()
        garbage = b"_SM3_" + bytes(range(0x40, 0x40 + 19))
        assert EntryPoint64.from_bytes(garbage).is_valid()

    @pytest.mark.parametrize("offset", range(5))
    def test_anchor_mismatch(self, make_entry_point64, offset):
        data = _mutate(make_entry_point64(), offset)
        assert not EntryPoint64.from_bytes(data).is_valid()

    def test_verify_checksum(self, make_entry_point64):
        assert EntryPoint64.from_bytes(make_entry_point64()).verify_checksum()
        assert not EntryPoint64.from_bytes(make_entry_point64(good_checksum=False)).verify_checksum()

    def test_analyze_checksum(self, make_entry_point64):
        analysis = EntryPoint64.from_bytes(make_entry_point64()).analyze_checksum()
        assert analysis.is_valid
        assert analysis.covered_bytes == 24

    @pytest.mark.parametrize("length", [0, 1, 5, 6, 23])
    def test_short_declared_length_fails_checksum(self, length):
        """A length below 24 cannot pass the whole-structure checksum."""
        data = struct.pack(
            "<5sBBBBBBBIQ", b"_SM3_", 0x55, length, 3, 2, 0, 1, 0, 0x1000, 0x7FFF0000
        )
        entry = EntryPoint64.from_bytes(data)
        assert entry.is_valid()
        assert not entry.verify_checksum()
        assert not entry.analyze_checksum().is_valid
        config = DecoderConfig(verify_smbios3_checksum=True)
        assert not validate_entry_point(entry, config)

    def test_short_buffer(self, make_entry_point64):
        with pytest.raises(EntryPointFormatError):
            EntryPoint64.from_bytes(make_entry_point64()[:23])


# =============================================================================
# Detection and Validation Tests
# =============================================================================

class TestParseEntryPoint:
    """Tests for parse_entry_point() and validate_entry_point()."""

    def test_detects_32bit(self, make_entry_point32):
        assert isinstance(parse_entry_point(make_entry_point32()), EntryPoint32)

    def test_detects_64bit(self, make_entry_point64):
        assert isinstance(parse_entry_point(make_entry_point64()), EntryPoint64)

    def test_unknown_anchor(self):
        with pytest.raises(EntryPointFormatError, match="Unknown entry point anchor"):
            parse_entry_point(b"_XX_" + bytes(27))

    def test_error_hierarchy(self):
        assert issubclass(EntryPointFormatError, EntryPointError)

    def test_validate_32bit(self, make_entry_point32):
        assert validate_entry_point(parse_entry_point(make_entry_point32()))
        assert not validate_entry_point(
            parse_entry_point(make_entry_point32(good_checksum=False))
        )

    def test_validate_64bit_default_ignores_checksum(self, make_entry_point64):
        entry = parse_entry_point(make_entry_point64(good_checksum=False))
        assert validate_entry_point(entry)

    def test_validate_64bit_with_checksum(self, make_entry_point64):
        config = DecoderConfig(verify_smbios3_checksum=True)
        assert validate_entry_point(parse_entry_point(make_entry_point64()), config)
        assert not validate_entry_point(
            parse_entry_point(make_entry_point64(good_checksum=False)), config
        )

    def test_analyze_either_layout(self, make_entry_point32, make_entry_point64):
        good32 = analyze_entry_point_checksum(parse_entry_point(make_entry_point32()))
        assert good32.is_valid
        assert good32.covered_bytes == 15

        good64 = analyze_entry_point_checksum(parse_entry_point(make_entry_point64()))
        assert good64.is_valid
        assert good64.covered_bytes == 24

        bad64 = analyze_entry_point_checksum(
            parse_entry_point(make_entry_point64(good_checksum=False))
        )
        assert not bad64.is_valid
        assert bad64.calculated_checksum == (bad64.stored_checksum - 1) & 0xFF
