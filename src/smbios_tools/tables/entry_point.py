"""
SMBIOS Entry Point Structures
=============================

The entry point is a small fixed-layout structure located by the caller
in firmware memory (or read from a firmware-provided file). It describes
where the structure table lives and how long it is.

Two layouts exist:

32-bit Entry Point, anchor "_SM_" (31 bytes):
    Offset  Size    Description
    ------  ----    -----------
    0x00    4       Anchor "_SM_"
    0x04    1       Checksum
    0x05    1       Entry point length
    0x06    1       Major version
    0x07    1       Minor version
    0x08    2       Maximum structure size
    0x0A    1       Entry point revision
    0x0B    5       Formatted area
    0x10    5       Intermediate anchor "_DMI_"
    0x15    1       Intermediate checksum
    0x16    2       Structure table length
    0x18    4       Structure table address
    0x1C    2       Number of structures
    0x1E    1       BCD revision

64-bit Entry Point, anchor "_SM3_" (24 bytes):
    Offset  Size    Description
    ------  ----    -----------
    0x00    5       Anchor "_SM3_"
    0x05    1       Checksum
    0x06    1       Entry point length
    0x07    1       Major version
    0x08    1       Minor version
    0x09    1       Docrev
    0x0A    1       Entry point revision
    0x0B    1       Reserved
    0x0C    4       Structure table maximum size
    0x10    8       Structure table address

All integers are little-endian. Fields are decoded one by one from their
offsets; nothing depends on the host memory layout.

Usage Examples
--------------
    >>> from smbios_tools.tables import parse_entry_point
    >>> entry = parse_entry_point(Path("smbios_entry_point").read_bytes())
    >>> if entry.is_valid():
    ...     print(f"SMBIOS {entry.version}, table at 0x{entry.table_address:X}")
"""

from dataclasses import dataclass, field
from typing import ClassVar, Optional, Union
import logging
import struct

from smbios_tools.config import DecoderConfig
from smbios_tools.errors import EntryPointFormatError
from smbios_tools.tables.checksum import (
    ChecksumAnalysis,
    analyze_checksum,
    verify_byte_sum,
)

# Logger for this module
logger = logging.getLogger(__name__)


ANCHOR_32 = b"_SM_"
ANCHOR_64 = b"_SM3_"
INTERMEDIATE_ANCHOR = b"_DMI_"


# =============================================================================
# 32-bit Entry Point
# =============================================================================

@dataclass(frozen=True)
class EntryPoint32:
    """
    32-bit ("_SM_") entry point structure.

    Validity follows the documented leading-field rule only: the byte sum
    of anchor, checksum, length, versions, the low byte of
    max_structure_size, revision and the formatted area must be zero.
    """
    anchor: bytes
    checksum: int
    length: int
    major_version: int
    minor_version: int
    max_structure_size: int
    revision: int
    formatted: bytes
    inter_anchor: bytes
    inter_checksum: int
    table_length: int
    table_address: int
    structure_count: int
    bcd_revision: int

    STRUCT_FORMAT: ClassVar[str] = "<4sBBBBHB5s5sBHIHB"
    SIZE: ClassVar[int] = struct.calcsize(STRUCT_FORMAT)

    @classmethod
    def from_bytes(cls, data: bytes) -> "EntryPoint32":
        """
        Decode a 32-bit entry point.

        Args:
            data: Buffer starting at the anchor, at least 31 bytes

        Raises:
            EntryPointFormatError: If the buffer is too short
        """
        if len(data) < cls.SIZE:
            raise EntryPointFormatError(
                f"32-bit entry point too short: need {cls.SIZE} bytes, got {len(data)}"
            )
        return cls(*struct.unpack_from(cls.STRUCT_FORMAT, data, 0))

    def _checksum_bytes(self) -> bytes:
        """The bytes covered by the validity sum, checksum at offset 4."""
        return (
            bytes(self.anchor)
            + bytes([
                self.checksum,
                self.length,
                self.major_version,
                self.minor_version,
                self.max_structure_size & 0xFF,
                self.revision,
            ])
            + bytes(self.formatted)
        )

    def _intermediate_bytes(self) -> bytes:
        """The 15-byte intermediate block, "_DMI_" through BCD revision."""
        return struct.pack(
            "<5sBHIHB",
            self.inter_anchor,
            self.inter_checksum,
            self.table_length,
            self.table_address,
            self.structure_count,
            self.bcd_revision,
        )

    def is_valid(self) -> bool:
        """True if the leading-field byte sum is zero modulo 256."""
        valid = verify_byte_sum(self._checksum_bytes())
        if not valid:
            logger.debug(f"32-bit entry point checksum mismatch (stored 0x{self.checksum:02X})")
        return valid

    def analyze_checksum(self) -> ChecksumAnalysis:
        """Analyze the leading-field checksum."""
        return analyze_checksum(self._checksum_bytes(), 4)

    def verify_intermediate_checksum(self) -> bool:
        """True if the "_DMI_" block carries a matching anchor and sums to zero."""
        return (
            self.inter_anchor == INTERMEDIATE_ANCHOR
            and verify_byte_sum(self._intermediate_bytes())
        )

    @property
    def version(self) -> str:
        return f"{self.major_version}.{self.minor_version}"


# =============================================================================
# 64-bit Entry Point
# =============================================================================

@dataclass(frozen=True)
class EntryPoint64:
    """
    64-bit ("_SM3_") entry point structure.

    is_valid() compares the anchor only. The whole-structure checksum is
    available through verify_checksum() and is applied by
    validate_entry_point() when DecoderConfig.verify_smbios3_checksum is set.
    """
    anchor: bytes
    checksum: int
    length: int
    major_version: int
    minor_version: int
    docrev: int
    revision: int
    reserved: int
    table_length: int
    table_address: int
    # Bytes the structure was decoded from, used for the checksum
    raw: bytes = field(default=b"", repr=False, compare=False)

    STRUCT_FORMAT: ClassVar[str] = "<5sBBBBBBBIQ"
    SIZE: ClassVar[int] = struct.calcsize(STRUCT_FORMAT)

    @classmethod
    def from_bytes(cls, data: bytes) -> "EntryPoint64":
        """
        Decode a 64-bit entry point.

        Args:
            data: Buffer starting at the anchor, at least 24 bytes

        Raises:
            EntryPointFormatError: If the buffer is too short
        """
        if len(data) < cls.SIZE:
            raise EntryPointFormatError(
                f"64-bit entry point too short: need {cls.SIZE} bytes, got {len(data)}"
            )
        fields = struct.unpack_from(cls.STRUCT_FORMAT, data, 0)
        # Keep the declared length when the buffer has it, for future revisions
        declared = max(fields[2], cls.SIZE)
        return cls(*fields, raw=bytes(data[:declared]))

    def is_valid(self) -> bool:
        """True if the anchor is "_SM3_". The checksum is not consulted."""
        return self.anchor == ANCHOR_64

    def _checksum_bytes(self) -> bytes:
        raw = self.raw or struct.pack(
            self.STRUCT_FORMAT,
            self.anchor,
            self.checksum,
            self.length,
            self.major_version,
            self.minor_version,
            self.docrev,
            self.revision,
            self.reserved,
            self.table_length,
            self.table_address,
        )
        return raw[:self.length]

    def _covers_checksum(self) -> bool:
        if self.length < self.SIZE:
            logger.debug(
                f"64-bit entry point length {self.length} is below the {self.SIZE}-byte minimum"
            )
            return False
        return True

    def verify_checksum(self) -> bool:
        """
        True if the entry point length bytes sum to zero modulo 256.

        A declared length shorter than the 24-byte structure fails.
        """
        if not self._covers_checksum():
            return False
        covered = self._checksum_bytes()
        if len(covered) < self.length:
            logger.debug(
                f"64-bit entry point declares {self.length} bytes, only {len(covered)} available"
            )
            return False
        return verify_byte_sum(covered)

    def analyze_checksum(self) -> ChecksumAnalysis:
        """Analyze the whole-structure checksum."""
        covered = self._checksum_bytes()
        if not self._covers_checksum():
            return ChecksumAnalysis(
                is_valid=False,
                stored_checksum=self.checksum,
                calculated_checksum=self.checksum,
                covered_bytes=len(covered),
                message=f"Entry point length {self.length} is shorter than {self.SIZE} bytes",
            )
        return analyze_checksum(covered, 5)

    @property
    def version(self) -> str:
        return f"{self.major_version}.{self.minor_version}"


EntryPoint = Union[EntryPoint32, EntryPoint64]


# =============================================================================
# Convenience Functions
# =============================================================================

def parse_entry_point(data: bytes) -> EntryPoint:
    """
    Decode an entry point, choosing the layout by its anchor.

    Args:
        data: Buffer starting at the anchor

    Returns:
        EntryPoint64 for "_SM3_", EntryPoint32 for "_SM_"

    Raises:
        EntryPointFormatError: If the anchor is unknown or the buffer is
            too short for the detected layout
    """
    if data[:5] == ANCHOR_64:
        entry = EntryPoint64.from_bytes(data)
    elif data[:4] == ANCHOR_32:
        entry = EntryPoint32.from_bytes(data)
    else:
        raise EntryPointFormatError(f"Unknown entry point anchor: {bytes(data[:5])!r}")

    logger.debug(
        f"Parsed {type(entry).__name__}: SMBIOS {entry.version}, "
        f"table 0x{entry.table_address:X} ({entry.table_length} bytes)"
    )
    return entry


def validate_entry_point(
    entry: EntryPoint, config: Optional[DecoderConfig] = None
) -> bool:
    """
    Validate an entry point under the given configuration.

    The 32-bit layout uses its leading-field checksum. The 64-bit layout
    uses its anchor, plus the whole-structure checksum when
    config.verify_smbios3_checksum is set.
    """
    config = config or DecoderConfig()

    if not entry.is_valid():
        return False
    if isinstance(entry, EntryPoint64) and config.verify_smbios3_checksum:
        return entry.verify_checksum()
    return True
