"""
SMBIOS Structure Record Definitions
===================================

This module defines the data structures produced by the structure table
decoder: the fixed 4-byte record header and the decoded table record.

Structure Table Overview
------------------------
The structure table is a concatenation of variable-length records:

    [header][formatted area][string set]  [header][formatted area][string set] ...

Record Format
-------------
    Byte 0:   Type code (0-255, 127 = end of table)
    Byte 1:   Length of header + formatted area (at least 4)
    Byte 2-3: Handle (little-endian), unique within the table
    Byte 4+:  Formatted area (length - 4 bytes)
    Then:     String set, each string NUL-terminated, the set closed by
              an extra NUL (a record without strings ends with two NULs)

Strings are referenced from the formatted area by 1-based index; index 0
means "no string".

Text Handling
-------------
Each string byte maps to exactly one character (Latin-1 identity
mapping). No multi-byte decoding is attempted; the raw bytes are kept
alongside the text view for callers that need a different encoding.

Reference
---------
- DMTF DSP0134: System Management BIOS (SMBIOS) Reference Specification
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Optional


# Encoding that maps every byte to the character with the same code point
STRING_ENCODING = "latin-1"


# =============================================================================
# Enumeration Types
# =============================================================================

class TableType(IntEnum):
    """
    Structure type codes.

    Only the common types are named; any code 0-255 may appear in a table
    and is carried through as a plain integer.
    """
    BIOS_INFORMATION = 0
    SYSTEM_INFORMATION = 1
    BASEBOARD_INFORMATION = 2
    CHASSIS_INFORMATION = 3
    PROCESSOR_INFORMATION = 4
    CACHE_INFORMATION = 7
    PORT_CONNECTOR = 8
    SYSTEM_SLOTS = 9
    OEM_STRINGS = 11
    SYSTEM_CONFIGURATION_OPTIONS = 12
    BIOS_LANGUAGE = 13
    SYSTEM_EVENT_LOG = 15
    PHYSICAL_MEMORY_ARRAY = 16
    MEMORY_DEVICE = 17
    MEMORY_ARRAY_MAPPED_ADDRESS = 19
    MEMORY_DEVICE_MAPPED_ADDRESS = 20
    SYSTEM_BOOT_INFORMATION = 32
    IPMI_DEVICE = 38
    SYSTEM_POWER_SUPPLY = 39
    ADDITIONAL_INFORMATION = 40
    ONBOARD_DEVICES_EXTENDED = 41
    INACTIVE = 126
    END_OF_TABLE = 127

    # OEM-specific types range from 128 to 255
    OEM_MIN = 128
    OEM_MAX = 255

    @classmethod
    def is_oem(cls, type_code: int) -> bool:
        """Check if a type code is in the OEM-specific range."""
        return cls.OEM_MIN <= type_code <= cls.OEM_MAX

    @classmethod
    def get_name(cls, type_code: int) -> str:
        """Get a human-readable name for a type code."""
        names = {
            0: "BIOS Information",
            1: "System Information",
            2: "Baseboard Information",
            3: "Chassis Information",
            4: "Processor Information",
            7: "Cache Information",
            8: "Port Connector Information",
            9: "System Slots",
            11: "OEM Strings",
            12: "System Configuration Options",
            13: "BIOS Language Information",
            15: "System Event Log",
            16: "Physical Memory Array",
            17: "Memory Device",
            19: "Memory Array Mapped Address",
            20: "Memory Device Mapped Address",
            32: "System Boot Information",
            38: "IPMI Device Information",
            39: "System Power Supply",
            40: "Additional Information",
            41: "Onboard Devices Extended Information",
            126: "Inactive",
            127: "End Of Table",
        }
        if type_code in names:
            return names[type_code]
        if cls.is_oem(type_code):
            return f"OEM-specific (0x{type_code:02X})"
        return f"Unknown (0x{type_code:02X})"


# =============================================================================
# Record Header
# =============================================================================

@dataclass(frozen=True)
class Header:
    """
    Fixed 4-byte prefix common to every structure record.

    Structure:
        Offset  Size    Description
        ------  ----    -----------
        0       1       Type code
        1       1       Length (header + formatted area)
        2       2       Handle (little-endian)
    """
    type: int = 0
    length: int = 0
    handle: int = 0
    HEADER_SIZE: int = field(default=4, repr=False, init=False, compare=False)

    @property
    def is_end_of_table(self) -> bool:
        """True for the type 127 end-of-table marker."""
        return self.type == TableType.END_OF_TABLE

    @property
    def data_length(self) -> int:
        """Length of the formatted area that follows the header."""
        return self.length - self.HEADER_SIZE

    def get_type_name(self) -> str:
        """Get a human-readable name for this record's type."""
        return TableType.get_name(self.type)


# =============================================================================
# Table Record
# =============================================================================

@dataclass(frozen=True)
class Table:
    """
    One decoded structure record.

    Attributes:
        header: The record header
        data: Formatted area (header.length - 4 bytes); a truncated record
            has its missing tail filled with zeros
        raw_strings: The string set as raw bytes, in table order
        truncated: True when the blob ended before the record was complete

    Example:
        >>> table = decode_tables(blob)[0]
        >>> vendor = table.get_str(table.data[0])
    """
    header: Header
    data: bytes = b""
    raw_strings: tuple[bytes, ...] = ()
    truncated: bool = False

    @property
    def strings(self) -> tuple[str, ...]:
        """The string set, one character per byte."""
        return tuple(raw.decode(STRING_ENCODING) for raw in self.raw_strings)

    @property
    def type(self) -> int:
        return self.header.type

    @property
    def handle(self) -> int:
        return self.header.handle

    def get_str(self, index: int) -> Optional[str]:
        """
        Look up a string by its 1-based index.

        Args:
            index: String number as stored in the formatted area

        Returns:
            The string, or None for index 0 ("no string") or an index past
            the end of the string set
        """
        raw = self.get_raw_str(index)
        return raw.decode(STRING_ENCODING) if raw is not None else None

    def get_raw_str(self, index: int) -> Optional[bytes]:
        """Same as get_str() but returns the undecoded bytes."""
        if 0 < index <= len(self.raw_strings):
            return self.raw_strings[index - 1]
        return None

    def get_type_name(self) -> str:
        """Get a human-readable name for this record's type."""
        return self.header.get_type_name()
