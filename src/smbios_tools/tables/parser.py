"""
Structure Table Decoder
=======================

This module walks an SMBIOS structure table blob and produces the ordered
sequence of Table records it contains.

Decoding Rules
--------------
One forward pass with a cursor starting at offset 0:

1. Decode the 4-byte header at the cursor. A short tail yields a header
   whose missing bytes are zero.
2. Type 127 ends the table; nothing is emitted for it and any bytes after
   it are ignored.
3. A header length below 4 raises CorruptHeaderError and aborts the
   whole decode.
4. Copy length - 4 bytes of formatted area. A short blob leaves the tail
   zero-filled and the record is flagged as truncated.
5. Read the string set: NUL-terminated runs. A first empty run closes the
   set (consuming the second NUL of the double-NUL pair), a later empty
   run closes it too. Empty strings are never stored.
6. Emit the record and continue with the next header.

Truncation Policy
-----------------
By default a blob that ends inside a record produces a Table with
``truncated=True`` and decoding stops at the end of the buffer. With
``DecoderConfig(strict_truncation=True)`` a TruncatedTableError is raised
instead.

Usage Examples
--------------
Decoding a table blob:
    >>> from smbios_tools.tables import decode_tables
    >>> for table in decode_tables(blob):
    ...     print(f"0x{table.handle:04X} {table.get_type_name()}")

Querying a dumped table file:
    >>> parser = TableParser.from_file("/sys/firmware/dmi/tables/DMI")
    >>> bios = parser.find_first(TableType.BIOS_INFORMATION)
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, Optional, Union
import logging
import struct

from smbios_tools.config import DecoderConfig
from smbios_tools.errors import (
    CorruptHeaderError,
    SmbiosError,
    TableDecodeError,
    TruncatedTableError,
)
from smbios_tools.tables.records import Header, Table, TableType

# Logger for this module
logger = logging.getLogger(__name__)


# =============================================================================
# Header Decoder
# =============================================================================

def decode_header(data: bytes, offset: int = 0) -> tuple[Header, int]:
    """
    Decode a record header at the given offset.

    Reads type (1 byte), length (1 byte) and handle (2 bytes,
    little-endian). When fewer than 4 bytes remain, only the available
    bytes are used and the remaining fields stay zero.

    Args:
        data: The table blob
        offset: Cursor position of the header

    Returns:
        Tuple of (header, bytes consumed)
    """
    chunk = bytes(data[offset:offset + Header.HEADER_SIZE])
    consumed = len(chunk)
    padded = chunk.ljust(Header.HEADER_SIZE, b"\x00")
    type_code, length, handle = struct.unpack("<BBH", padded)
    return Header(type=type_code, length=length, handle=handle), consumed


# =============================================================================
# String Set Reader
# =============================================================================

def _read_strings(data: bytes, offset: int) -> tuple[list[bytes], int, bool]:
    """
    Read the string set that follows a formatted area.

    Returns:
        Tuple of (raw strings, new offset, complete). complete is False
        when the blob ended before the set was closed.
    """
    strings: list[bytes] = []
    end = len(data)

    while offset < end:
        nul = data.find(b"\x00", offset)
        if nul == -1:
            # Unterminated final string
            strings.append(data[offset:end])
            return strings, end, False

        run = data[offset:nul]
        offset = nul + 1

        if run:
            strings.append(run)
            continue

        if strings:
            # Second NUL of the double-NUL terminator
            return strings, offset, True

        # First run empty: the record has no strings, consume the pair
        if offset >= end:
            return strings, offset, False
        if data[offset] == 0:
            offset += 1
        else:
            logger.debug(f"Single NUL string terminator before offset 0x{offset:04X}")
        return strings, offset, True

    return strings, offset, False


# =============================================================================
# Structure Table Decoder
# =============================================================================

def decode_tables(
    data: bytes, config: Optional[DecoderConfig] = None
) -> list[Table]:
    """
    Decode a structure table blob into Table records.

    Args:
        data: The structure table blob (bytes-like)
        config: Decoding policy (default: DecoderConfig())

    Returns:
        Tables in encounter order, excluding the end-of-table marker

    Raises:
        CorruptHeaderError: If a header length is smaller than 4
        TruncatedTableError: If the blob ends inside a record and
            config.strict_truncation is set
    """
    config = config or DecoderConfig()
    data = bytes(data)
    end = len(data)

    tables: list[Table] = []
    offset = 0

    while offset < end:
        if config.max_tables is not None and len(tables) >= config.max_tables:
            logger.warning(f"Stopped after {config.max_tables} tables at offset 0x{offset:04X}")
            break

        start = offset
        header, consumed = decode_header(data, offset)
        offset += consumed

        if header.is_end_of_table:
            logger.debug(f"End of table at offset 0x{start:04X}")
            break

        # Part of the record that ran out first, None while complete
        missing: Optional[str] = None
        if consumed < Header.HEADER_SIZE:
            missing = "record header"

        if header.length < Header.HEADER_SIZE:
            logger.error(f"Corrupt header at offset 0x{start:04X}: length {header.length}")
            raise CorruptHeaderError(header.length, offset=start, handle=header.handle)

        # Formatted area
        data_length = header.data_length
        body = data[offset:offset + data_length]
        offset += len(body)
        if len(body) < data_length:
            missing = missing or "formatted area"
            body = body.ljust(data_length, b"\x00")

        # String set
        raw_strings, offset, complete = _read_strings(data, offset)
        if not complete:
            missing = missing or "string set"

        if missing is not None:
            if config.strict_truncation:
                logger.error(f"Truncated {missing} at offset 0x{start:04X}")
                raise TruncatedTableError(missing, offset=start, handle=header.handle)
            logger.warning(
                f"Truncated {missing} in record at offset 0x{start:04X} "
                f"(handle 0x{header.handle:04X})"
            )

        table = Table(
            header=header,
            data=body,
            raw_strings=tuple(raw_strings),
            truncated=missing is not None,
        )
        tables.append(table)
        logger.debug(
            f"Parsed {table.get_type_name()} handle 0x{header.handle:04X} "
            f"({data_length} bytes, {len(raw_strings)} strings)"
        )

    return tables


# =============================================================================
# Table Parser
# =============================================================================

@dataclass
class TableParser:
    """
    Parser for a complete structure table blob.

    Decodes the blob on construction and provides lookup helpers over the
    resulting records.

    Attributes:
        data: The raw table blob
        config: Decoding policy
        tables: Decoded records in table order
        is_valid: True when the blob decoded without error
        error_message: Error text when decoding failed

    Example:
        >>> parser = TableParser.from_file("DMI")
        >>> for table in parser.iter_type(TableType.MEMORY_DEVICE):
        ...     print(table.get_str(table.data[0x0C]))
    """
    # Raw table blob (not exposed in repr)
    data: bytes = field(repr=False)

    config: DecoderConfig = field(default_factory=DecoderConfig)

    tables: list[Table] = field(init=False, default_factory=list)

    is_valid: bool = field(init=False, default=False)

    error_message: Optional[str] = field(init=False, default=None)

    def __post_init__(self) -> None:
        """Decode the blob after initialization."""
        self._parse()

    @classmethod
    def from_file(
        cls, filepath: Union[str, Path], config: Optional[DecoderConfig] = None
    ) -> "TableParser":
        """
        Create a TableParser from a dumped table file.

        Raises:
            FileNotFoundError: If the file doesn't exist
            TableDecodeError: If the table cannot be decoded
        """
        data = Path(filepath).read_bytes()
        return cls.from_bytes(data, config)

    @classmethod
    def from_bytes(
        cls, data: bytes, config: Optional[DecoderConfig] = None
    ) -> "TableParser":
        """Create a TableParser from a table blob."""
        return cls(data=bytes(data), config=config or DecoderConfig())

    def _parse(self) -> None:
        try:
            self.tables = decode_tables(self.data, self.config)
            self.is_valid = True
        except SmbiosError as e:
            self.is_valid = False
            self.error_message = str(e)
            logger.error(f"Failed to decode structure table: {e}")
            raise
        except Exception as e:
            self.is_valid = False
            self.error_message = str(e)
            logger.error(f"Unexpected error decoding structure table: {e}")
            raise TableDecodeError(f"failed to decode structure table: {e}") from e

    # =========================================================================
    # Public Query Methods
    # =========================================================================

    def iter_type(self, type_code: int) -> Iterator[Table]:
        """
        Iterate over all records of one type.

        Yields:
            Table instances in table order
        """
        for table in self.tables:
            if table.type == type_code:
                yield table

    def find_first(self, type_code: int) -> Optional[Table]:
        """Get the first record of a type, None if there is none."""
        return next(self.iter_type(type_code), None)

    def get_by_handle(self, handle: int) -> Optional[Table]:
        """Get a record by its handle, None if no record has it."""
        for table in self.tables:
            if table.handle == handle:
                return table
        return None

    @property
    def truncated_count(self) -> int:
        """Number of records flagged as truncated."""
        return sum(1 for table in self.tables if table.truncated)

    def get_info(self) -> dict:
        """
        Get summary information about the table.

        Returns:
            Dictionary with table information
        """
        type_counts: dict[int, int] = {}
        for table in self.tables:
            type_counts[table.type] = type_counts.get(table.type, 0) + 1

        return {
            "total_bytes": len(self.data),
            "table_count": len(self.tables),
            "truncated_count": self.truncated_count,
            "types": {
                TableType.get_name(type_code): count
                for type_code, count in sorted(type_counts.items())
            },
        }


# =============================================================================
# Convenience Functions
# =============================================================================

def parse_table_file(
    filepath: Union[str, Path], config: Optional[DecoderConfig] = None
) -> TableParser:
    """
    Decode a dumped structure table file.

    Raises:
        FileNotFoundError: If the file doesn't exist
        TableDecodeError: If the table cannot be decoded
    """
    return TableParser.from_file(filepath, config)
