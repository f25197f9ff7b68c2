"""
SMBIOS Tools Command-Line Interface
===================================

This package provides the command-line tool for the SMBIOS decoder:

- **smbdump**: Inspect entry point and structure table dumps

The tool is a Click-based CLI application with help for every command.
"""

__all__ = ["smbdump"]
