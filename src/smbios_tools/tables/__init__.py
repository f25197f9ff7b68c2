"""
SMBIOS Table Handling
=====================

This module decodes the two byte regions exported by platform firmware
for SMBIOS: the fixed entry point structure and the structure table it
points to.

Overview
--------
The caller locates the entry point (physical memory scan, EFI
configuration table, or a firmware-provided file), validates it, slices
the structure table blob using the entry point's length and address, and
hands that blob to the decoder.

This module provides:
- **EntryPoint32 / EntryPoint64**: Decode and validate entry points
- **decode_tables**: Decode a structure table blob into Table records
- **TableParser**: Decode a blob and look records up by type or handle
- **Table / Header**: The decoded record types
- **BiosInfo / SystemInfo**: Typed views over common records
- **Checksum utilities**: Byte-sum checksums used by entry points

Quick Start
-----------
    >>> from smbios_tools.tables import parse_entry_point, decode_tables
    >>> entry = parse_entry_point(entry_bytes)
    >>> if entry.is_valid():
    ...     for table in decode_tables(table_bytes):
    ...         print(table.get_type_name(), table.strings)

Reference
---------
- DMTF DSP0134: System Management BIOS (SMBIOS) Reference Specification
"""

# =============================================================================
# Public API Exports
# =============================================================================

from smbios_tools.tables.records import (
    STRING_ENCODING,
    TableType,
    Header,
    Table,
)

from smbios_tools.tables.checksum import (
    ChecksumAnalysis,
    byte_sum,
    verify_byte_sum,
    calculate_checksum,
    analyze_checksum,
    analyze_entry_point_checksum,
)

from smbios_tools.tables.entry_point import (
    ANCHOR_32,
    ANCHOR_64,
    INTERMEDIATE_ANCHOR,
    EntryPoint,
    EntryPoint32,
    EntryPoint64,
    parse_entry_point,
    validate_entry_point,
)

from smbios_tools.tables.parser import (
    TableParser,
    decode_header,
    decode_tables,
    parse_table_file,
)

from smbios_tools.tables.views import (
    BiosInfo,
    SystemInfo,
    TableView,
    view_for,
)

__all__ = [
    # Records
    "STRING_ENCODING",
    "TableType",
    "Header",
    "Table",
    # Checksum utilities
    "ChecksumAnalysis",
    "byte_sum",
    "verify_byte_sum",
    "calculate_checksum",
    "analyze_checksum",
    "analyze_entry_point_checksum",
    # Entry points
    "ANCHOR_32",
    "ANCHOR_64",
    "INTERMEDIATE_ANCHOR",
    "EntryPoint",
    "EntryPoint32",
    "EntryPoint64",
    "parse_entry_point",
    "validate_entry_point",
    # Decoder
    "TableParser",
    "decode_header",
    "decode_tables",
    "parse_table_file",
    # Views
    "BiosInfo",
    "SystemInfo",
    "TableView",
    "view_for",
]
