"""
SMBIOS Tools - System Management BIOS Table Decoder
===================================================

This package decodes the SMBIOS firmware data area into structured
records usable by inventory and diagnostic tooling.

Firmware exports two byte regions: a small fixed entry point structure
(32-bit "_SM_" or 64-bit "_SM3_" layout) and the structure table, a
sequence of variable-length, type-tagged records each followed by its
own set of strings.

Main Components
---------------
- **tables**: Entry point validation and structure table decoding
- **config**: Decoding policy (truncation handling, optional checks)
- **cli**: The smbdump command-line tool

Quick Start
-----------
Decode a dumped structure table:
    >>> from smbios_tools import TableParser, TableType
    >>> parser = TableParser.from_file("/sys/firmware/dmi/tables/DMI")
    >>> system = parser.find_first(TableType.SYSTEM_INFORMATION)
    >>> print(system.strings)

Or use the command-line tool:
    $ smbdump entry smbios_entry_point
    $ smbdump list DMI

Reference Documentation
-----------------------
- DMTF DSP0134: https://www.dmtf.org/standards/smbios
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from smbios_tools.config import DecoderConfig
from smbios_tools.errors import (
    SmbiosError,
    EntryPointError,
    EntryPointFormatError,
    TableDecodeError,
    CorruptHeaderError,
    TruncatedTableError,
    TableViewError,
)
from smbios_tools.tables import (
    TableType,
    Header,
    Table,
    EntryPoint32,
    EntryPoint64,
    parse_entry_point,
    validate_entry_point,
    TableParser,
    decode_header,
    decode_tables,
    BiosInfo,
    SystemInfo,
    view_for,
)

__all__ = [
    "__version__",
    # Configuration
    "DecoderConfig",
    # Errors
    "SmbiosError",
    "EntryPointError",
    "EntryPointFormatError",
    "TableDecodeError",
    "CorruptHeaderError",
    "TruncatedTableError",
    "TableViewError",
    # Tables
    "TableType",
    "Header",
    "Table",
    "EntryPoint32",
    "EntryPoint64",
    "parse_entry_point",
    "validate_entry_point",
    "TableParser",
    "decode_header",
    "decode_tables",
    "BiosInfo",
    "SystemInfo",
    "view_for",
]
