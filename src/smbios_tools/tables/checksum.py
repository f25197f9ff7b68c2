"""
Entry Point Checksum Calculations
=================================

This module provides the byte-sum checksum functions used by SMBIOS
entry point structures.

Byte-Sum Rule
-------------
Every SMBIOS checksum is a single byte chosen so that the sum of a range
of bytes, including the checksum byte itself, is zero modulo 256.

32-bit Entry Point (_SM_)
-------------------------
The entry point validity check sums a fixed list of leading fields only:
anchor (4), checksum, length, major version, minor version, the LOW byte
of the maximum structure size, revision and the 5-byte formatted area.
The high byte of the maximum structure size is not part of the sum. This
is not a checksum over the whole record; callers must not assume one.

The intermediate block (_DMI_ anchor through BCD revision, 15 bytes at
offset 0x10) has its own checksum byte, checked separately.

64-bit Entry Point (_SM3_)
--------------------------
The checksum covers the whole structure (entry point length bytes).
EntryPoint64.is_valid() does not consult it; the check is opt-in through
verify_checksum() or DecoderConfig.verify_smbios3_checksum.

Reference
---------
- DMTF DSP0134, section 5.2 (Table convention)
"""

from dataclasses import dataclass
from typing import Iterable, Union


@dataclass
class ChecksumAnalysis:
    """
    Result of analyzing an entry point checksum.

    Attributes:
        is_valid: True if the covered bytes sum to zero
        stored_checksum: The checksum byte stored in the structure
        calculated_checksum: The checksum byte that would make the sum zero
        covered_bytes: Number of bytes included in the sum
        message: Human-readable explanation of the analysis
    """
    is_valid: bool
    stored_checksum: int
    calculated_checksum: int
    covered_bytes: int = 0
    message: str = ""


def byte_sum(data: Union[bytes, Iterable[int]]) -> int:
    """
    Sum bytes modulo 256.

    Example:
        >>> byte_sum(b"\\xff\\x01")
        0
    """
    return sum(data) & 0xFF


def verify_byte_sum(data: Union[bytes, Iterable[int]]) -> bool:
    """Check that a range of bytes, checksum included, sums to zero."""
    return byte_sum(data) == 0


def calculate_checksum(data: bytes, checksum_offset: int) -> int:
    """
    Calculate the checksum byte for a range of bytes.

    The byte at checksum_offset is treated as zero, and the value
    returned is the one that makes the whole range sum to zero.

    Args:
        data: The covered bytes, checksum byte included
        checksum_offset: Position of the checksum byte within data

    Returns:
        Checksum byte value (0x00 - 0xFF)
    """
    if not 0 <= checksum_offset < len(data):
        raise ValueError(
            f"Checksum offset {checksum_offset} outside {len(data)}-byte range"
        )
    partial = byte_sum(data) - data[checksum_offset]
    return (-partial) & 0xFF


def analyze_checksum(data: bytes, checksum_offset: int) -> ChecksumAnalysis:
    """
    Analyze the checksum of a range of bytes.

    Args:
        data: The covered bytes, checksum byte included
        checksum_offset: Position of the checksum byte within data

    Returns:
        ChecksumAnalysis describing the result
    """
    stored = data[checksum_offset]
    calculated = calculate_checksum(data, checksum_offset)
    is_valid = verify_byte_sum(data)

    if is_valid:
        message = "Checksum valid"
    else:
        message = (
            f"Checksum mismatch: stored 0x{stored:02X}, "
            f"expected 0x{calculated:02X}"
        )

    return ChecksumAnalysis(
        is_valid=is_valid,
        stored_checksum=stored,
        calculated_checksum=calculated,
        covered_bytes=len(data),
        message=message,
    )


def analyze_entry_point_checksum(entry_point) -> ChecksumAnalysis:
    """
    Analyze the checksum of either entry point layout.

    A 32-bit entry point is analyzed with its leading-field rule, a
    64-bit one with the whole-structure rule over its declared length.

    Args:
        entry_point: An EntryPoint32 or EntryPoint64

    Returns:
        ChecksumAnalysis describing the result
    """
    return entry_point.analyze_checksum()
