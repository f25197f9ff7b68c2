"""
smbdump - SMBIOS Dump Inspection Command-Line Interface
=======================================================

This module implements the command-line interface for inspecting SMBIOS
entry point and structure table dumps, such as the files Linux exports
under /sys/firmware/dmi/tables/.

Commands
--------
- **entry**: Decode and validate an entry point structure
- **list**: List the records of a structure table
- **show**: Show one record (or all records of a type) in detail
- **validate**: Check that a structure table decodes cleanly

Usage Examples
--------------
Inspect the entry point:
    $ smbdump entry smbios_entry_point

List all records:
    $ smbdump list DMI

Show the BIOS information record:
    $ smbdump show --type 0 DMI

Show a record by handle:
    $ smbdump show --handle 0x0100 DMI

Fail on truncated records:
    $ smbdump --strict validate DMI
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import click

from smbios_tools import __version__
from smbios_tools.cli.errors import ExitCode, handle_cli_exception
from smbios_tools.config import DecoderConfig
from smbios_tools.errors import TableViewError
from smbios_tools.tables import (
    EntryPoint32,
    EntryPoint64,
    Table,
    TableParser,
    analyze_entry_point_checksum,
    parse_entry_point,
    validate_entry_point,
    view_for,
)


# =============================================================================
# CLI Context and Utilities
# =============================================================================

class Context:
    """
    Shared context for CLI commands.

    Stores verbosity and the decoding configuration built from the
    environment and the global options.
    """

    def __init__(self) -> None:
        self.verbose: bool = False
        self.config: DecoderConfig = DecoderConfig()

    def setup_logging(self) -> None:
        """Configure logging based on verbosity."""
        level = logging.DEBUG if self.verbose else logging.WARNING
        logging.basicConfig(
            level=level,
            format="%(levelname)s: %(message)s" if self.verbose else "%(message)s",
        )


pass_context = click.make_pass_decorator(Context, ensure=True)


class IntLiteral(click.ParamType):
    """
    Click parameter type for integers written in decimal or hex.

    Accepts: 17, 0x11, 0X0011
    """
    name = "integer"

    def convert(self, value, param: Optional[click.Parameter],
                ctx: Optional[click.Context]) -> int:
        """Convert string to int."""
        if isinstance(value, int):
            return value
        try:
            return int(value, 0)
        except ValueError:
            self.fail(f"'{value}' is not a decimal or 0x-prefixed integer", param, ctx)


INT_LITERAL = IntLiteral()


def hex_dump(data: bytes, width: int = 16) -> str:
    """Format bytes as offset / hex / printable-text lines."""
    lines = []
    for i in range(0, len(data), width):
        chunk = data[i:i + width]
        hex_part = " ".join(f"{b:02X}" for b in chunk)
        text_part = "".join(chr(b) if 32 <= b < 127 else "." for b in chunk)
        lines.append(f"{i:04X}  {hex_part:<{width * 3}} {text_part}")
    return "\n".join(lines)


def _print_table(table: Table) -> None:
    """Print one record with its data, strings and typed view."""
    header = table.header
    title = f"Handle 0x{header.handle:04X}, type {header.type} - {table.get_type_name()}"
    click.echo("=" * 60)
    click.echo(title)
    click.echo("=" * 60)
    click.echo(f"Length:    {header.length} bytes")
    if table.truncated:
        click.echo("Status:    TRUNCATED")

    if table.data:
        click.echo("Data:")
        for line in hex_dump(table.data).splitlines():
            click.echo(f"  {line}")

    if table.raw_strings:
        click.echo("Strings:")
        for index, text in enumerate(table.strings, start=1):
            click.echo(f"  {index}: {text}")

    try:
        view = view_for(table)
    except TableViewError as e:
        click.echo(f"View:      {e}")
        view = None
    if view is not None:
        click.echo(f"{type(view).__name__}:")
        for name, value in vars(view).items():
            click.echo(f"  {name:<16} {value}")
    click.echo()


# =============================================================================
# Main CLI Group
# =============================================================================

@click.group()
@click.version_option(__version__, "--version", "-V", prog_name="smbdump")
@click.option("-v", "--verbose", is_flag=True, help="Verbose output and debug logging")
@click.option("--strict", is_flag=True,
              help="Treat truncated records as errors")
@click.option("--verify-sm3-checksum", is_flag=True,
              help="Also check the 64-bit entry point checksum")
@pass_context
def main(ctx: Context, verbose: bool, strict: bool,
         verify_sm3_checksum: bool) -> None:
    """
    SMBIOS entry point and structure table inspector.

    \b
    Commands:
      entry     Decode and validate an entry point
      list      List structure table records
      show      Show records in detail
      validate  Check that a structure table decodes cleanly

    \b
    Examples:
      smbdump entry smbios_entry_point
      smbdump list DMI
      smbdump show --type 1 DMI

    Settings can also come from SMBIOS_STRICT, SMBIOS_VERIFY_SM3_CHECKSUM
    and SMBIOS_MAX_TABLES.
    """
    ctx.verbose = verbose
    ctx.config = DecoderConfig.from_env()
    if strict:
        ctx.config.strict_truncation = True
    if verify_sm3_checksum:
        ctx.config.verify_smbios3_checksum = True
    ctx.setup_logging()


# =============================================================================
# Entry Command
# =============================================================================

@main.command("entry")
@click.argument(
    "entry_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@pass_context
def cmd_entry(ctx: Context, entry_file: Path) -> None:
    """
    Decode and validate an entry point structure.

    Exits with status 1 when the entry point is not valid.

    \b
    Example:
      smbdump entry /sys/firmware/dmi/tables/smbios_entry_point
    """
    try:
        entry = parse_entry_point(entry_file.read_bytes())
        analysis = analyze_entry_point_checksum(entry)

        click.echo(f"Entry Point: {entry_file}")
        click.echo("=" * 40)
        if isinstance(entry, EntryPoint64):
            click.echo("Layout:        64-bit (_SM3_)")
        else:
            click.echo("Layout:        32-bit (_SM_)")
        click.echo(f"Version:       {entry.version}")
        click.echo(f"Length:        {entry.length} bytes")
        click.echo(f"Revision:      {entry.revision}")
        click.echo(f"Table Address: 0x{entry.table_address:08X}")
        click.echo(f"Table Length:  {entry.table_length} bytes")

        if isinstance(entry, EntryPoint32):
            click.echo(f"Structures:    {entry.structure_count}")
            click.echo(f"Max Size:      {entry.max_structure_size} bytes")
            click.echo(f"Checksum:      {analysis.message}")
            intermediate = "Valid" if entry.verify_intermediate_checksum() else "MISMATCH"
            click.echo(f"Intermediate:  {intermediate}")
        else:
            click.echo(f"Docrev:        {entry.docrev}")
            checked = "checked" if ctx.config.verify_smbios3_checksum else "not checked"
            click.echo(f"Checksum:      {analysis.message} ({checked})")

        if validate_entry_point(entry, ctx.config):
            click.echo("\nStatus:        VALID")
        else:
            click.echo("\nStatus:        INVALID")
            sys.exit(ExitCode.DECODE_ERROR)

    except Exception as e:
        handle_cli_exception(e, ctx.verbose)


# =============================================================================
# List Command
# =============================================================================

@main.command("list")
@click.argument(
    "table_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@pass_context
def cmd_list(ctx: Context, table_file: Path) -> None:
    """
    List the records of a structure table.

    \b
    Example:
      smbdump list DMI

    \b
    Output format:
      Handle  Type  Length  Strings  Name
      0x0000     0      24        3  BIOS Information
    """
    try:
        parser = TableParser.from_file(table_file, ctx.config)

        click.echo(f"{'Handle':<8}{'Type':>4}{'Length':>8}{'Strings':>9}  Name")
        click.echo("-" * 60)

        for table in parser.tables:
            name = table.get_type_name()
            if table.truncated:
                name += " [truncated]"
            click.echo(
                f"0x{table.handle:04X}  {table.type:>4}{table.header.length:>8}"
                f"{len(table.raw_strings):>9}  {name}"
            )

        if ctx.verbose:
            info = parser.get_info()
            click.echo("-" * 60)
            click.echo(f"Total: {info['table_count']} records, {info['total_bytes']} bytes")

    except Exception as e:
        handle_cli_exception(e, ctx.verbose)


# =============================================================================
# Show Command
# =============================================================================

@main.command("show")
@click.argument(
    "table_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option("-H", "--handle", type=INT_LITERAL, help="Record handle (e.g. 0x0100)")
@click.option("-t", "--type", "type_code", type=INT_LITERAL, help="Record type code")
@click.option("--raw", is_flag=True, help="Print strings as escaped bytes")
@pass_context
def cmd_show(ctx: Context, table_file: Path, handle: Optional[int],
             type_code: Optional[int], raw: bool) -> None:
    """
    Show records in detail: data bytes, strings and decoded fields.

    \b
    Examples:
      smbdump show --type 0 DMI
      smbdump show --handle 0x0100 DMI
    """
    try:
        if handle is None and type_code is None:
            raise click.BadParameter("one of --handle or --type is required")

        parser = TableParser.from_file(table_file, ctx.config)

        if handle is not None:
            table = parser.get_by_handle(handle)
            selected = [table] if table is not None else []
        else:
            selected = list(parser.iter_type(type_code))

        if not selected:
            click.echo("No matching records.")
            return

        for table in selected:
            _print_table(table)
            if raw and table.raw_strings:
                click.echo("Raw strings:")
                for index, value in enumerate(table.raw_strings, start=1):
                    click.echo(f"  {index}: {value!r}")
                click.echo()

    except Exception as e:
        handle_cli_exception(e, ctx.verbose)


# =============================================================================
# Validate Command
# =============================================================================

@main.command("validate")
@click.argument(
    "table_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@pass_context
def cmd_validate(ctx: Context, table_file: Path) -> None:
    """
    Check that a structure table decodes cleanly.

    Fails (status 1) on a corrupt header, and on truncated records.

    \b
    Example:
      smbdump validate DMI
    """
    try:
        parser = TableParser.from_file(table_file, ctx.config)
        info = parser.get_info()

        if ctx.verbose:
            click.echo("Validation Details:")
            click.echo(f"  Records decoded: {info['table_count']}")
            for name, count in info["types"].items():
                click.echo(f"    {name}: {count}")

        if parser.truncated_count:
            click.echo("Validation FAILED:")
            for table in parser.tables:
                if table.truncated:
                    click.echo(f"  ERROR: record 0x{table.handle:04X} is truncated")
            sys.exit(ExitCode.DECODE_ERROR)

        click.echo(f"Validation PASSED: {table_file} ({info['table_count']} records)")

    except Exception as e:
        handle_cli_exception(e, ctx.verbose)


# =============================================================================
# Entry Point
# =============================================================================

if __name__ == "__main__":
    main()
