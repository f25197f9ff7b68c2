"""
Typed Views over Structure Records
==================================

Fixed-offset interpretations of a record's formatted area. Offsets below
are relative to Table.data, i.e. the byte after the 4-byte header.

BIOS Information (type 0):
    Offset  Size    Description
    ------  ----    -----------
    0x00    1       Vendor (string number)
    0x01    1       BIOS version (string number)
    0x02    2       BIOS starting address segment
    0x04    1       BIOS release date (string number)
    0x05    1       BIOS ROM size, (n + 1) * 64K
    0x06    8       BIOS characteristics

System Information (type 1):
    Offset  Size    Description
    ------  ----    -----------
    0x00    1       Manufacturer (string number)
    0x01    1       Product name (string number)
    0x02    1       Version (string number)
    0x03    1       Serial number (string number)
"""

from dataclasses import dataclass
from typing import ClassVar, Optional, Union
import struct

from smbios_tools.errors import TableViewError
from smbios_tools.tables.records import Table, TableType


def _unpack(view: str, fmt: str, table: Table) -> tuple:
    size = struct.calcsize(fmt)
    if len(table.data) < size:
        raise TableViewError(view, size, len(table.data))
    return struct.unpack_from(fmt, table.data, 0)


@dataclass(frozen=True)
class BiosInfo:
    """BIOS Information (type 0) with string fields resolved."""
    vendor: Optional[str]
    version: Optional[str]
    address: int
    release_date: Optional[str]
    rom_size: int
    characteristics: int

    STRUCT_FORMAT: ClassVar[str] = "<BBHBBQ"

    @classmethod
    def from_table(cls, table: Table) -> "BiosInfo":
        """
        Interpret a type 0 record.

        Raises:
            TableViewError: If the formatted area is shorter than 14 bytes
        """
        vendor, version, address, date, size, characteristics = _unpack(
            cls.__name__, cls.STRUCT_FORMAT, table
        )
        return cls(
            vendor=table.get_str(vendor),
            version=table.get_str(version),
            address=address,
            release_date=table.get_str(date),
            rom_size=size,
            characteristics=characteristics,
        )

    @property
    def rom_size_kb(self) -> int:
        return (self.rom_size + 1) * 64


@dataclass(frozen=True)
class SystemInfo:
    """System Information (type 1) with string fields resolved."""
    manufacturer: Optional[str]
    name: Optional[str]
    version: Optional[str]
    serial: Optional[str]

    STRUCT_FORMAT: ClassVar[str] = "<BBBB"

    @classmethod
    def from_table(cls, table: Table) -> "SystemInfo":
        """
        Interpret a type 1 record.

        Raises:
            TableViewError: If the formatted area is shorter than 4 bytes
        """
        indices = _unpack(cls.__name__, cls.STRUCT_FORMAT, table)
        return cls(*(table.get_str(index) for index in indices))


TableView = Union[BiosInfo, SystemInfo]

_VIEWS = {
    TableType.BIOS_INFORMATION: BiosInfo,
    TableType.SYSTEM_INFORMATION: SystemInfo,
}


def view_for(table: Table) -> Optional[TableView]:
    """
    Get the typed view for a record.

    Returns:
        A view instance, or None when no view exists for the record type

    Raises:
        TableViewError: If the record is too short for its view
    """
    view_class = _VIEWS.get(table.type)
    if view_class is None:
        return None
    return view_class.from_table(table)
