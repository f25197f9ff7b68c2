"""
SMBIOS Tools Error Hierarchy
============================

This module defines the exception hierarchy for the whole package.
All exceptions inherit from SmbiosError, allowing callers to catch all
decoding errors with a single except clause if desired.

Exception Hierarchy
-------------------
SmbiosError (base)
├── EntryPointError (entry point handling)
│   └── EntryPointFormatError - buffer too short or unknown anchor
├── TableDecodeError (structure table stream)
│   ├── CorruptHeaderError - header length smaller than the header itself
│   └── TruncatedTableError - buffer ends inside a record (strict mode)
└── TableViewError - typed view applied to a record that is too short

Error messages for the table stream carry the byte offset at which the
problem was found:
    offset 0x0042: error: header length 2 is smaller than 4
"""

from typing import Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class SmbiosError(Exception):
    """
    Base exception for all SMBIOS decoding errors.

        try:
            tables = decode_tables(blob)
        except SmbiosError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Entry Point Exceptions
# =============================================================================

class EntryPointError(SmbiosError):
    """Base exception for entry point handling errors."""
    pass


class EntryPointFormatError(EntryPointError):
    """
    Entry point buffer cannot be decoded.

    Raised when:
    - The buffer is shorter than the fixed structure size
    - The anchor matches neither the 32-bit nor the 64-bit signature
    """
    pass


# =============================================================================
# Structure Table Exceptions
# =============================================================================

class TableDecodeError(SmbiosError):
    """
    Base exception for structure table decoding errors.

    Attributes:
        message: The error description
        offset: Byte offset in the table blob where the record starts
        handle: Handle of the offending record, when known
    """

    def __init__(
        self,
        message: str,
        offset: Optional[int] = None,
        handle: Optional[int] = None,
    ):
        self.message = message
        self.offset = offset
        self.handle = handle
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """
        Format the message with the record location.

        Example output:
            offset 0x0042: error: header length 2 is smaller than 4 (handle 0x0003)
        """
        if self.offset is not None:
            text = f"offset 0x{self.offset:04X}: error: {self.message}"
        else:
            text = f"error: {self.message}"
        if self.handle is not None:
            text += f" (handle 0x{self.handle:04X})"
        return text


class CorruptHeaderError(TableDecodeError):
    """
    A record header declares a length smaller than the 4-byte header.

    The formatted-area length (length - 4) would be negative, so the
    rest of the stream cannot be located. Decoding stops.
    """

    def __init__(self, length: int, offset: Optional[int] = None,
                 handle: Optional[int] = None):
        self.length = length
        super().__init__(
            f"header length {length} is smaller than 4",
            offset=offset,
            handle=handle,
        )


class TruncatedTableError(TableDecodeError):
    """
    The table blob ends inside a record.

    Only raised when DecoderConfig.strict_truncation is set; the default
    policy marks the record as truncated and keeps it.
    """

    def __init__(self, what: str, offset: Optional[int] = None,
                 handle: Optional[int] = None):
        self.what = what
        super().__init__(f"buffer ends inside {what}", offset=offset, handle=handle)


# =============================================================================
# Typed View Exceptions
# =============================================================================

class TableViewError(SmbiosError):
    """
    A typed view was applied to a record whose formatted area is too short.

    Attributes:
        view: Name of the view class
        needed: Bytes of formatted data the view requires
        available: Bytes the record actually has
    """

    def __init__(self, view: str, needed: int, available: int):
        self.view = view
        self.needed = needed
        self.available = available
        super().__init__(
            f"{view} needs {needed} bytes of formatted data, record has {available}"
        )
