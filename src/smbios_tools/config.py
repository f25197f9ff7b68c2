"""
Decoder Configuration
=====================

Decoding policy settings. Configuration can come from:
- Default values (defined here)
- Environment variables (DecoderConfig.from_env)
- Explicit keyword arguments (CLI flags, library callers)

The defaults reproduce the lenient behavior of firmware table readers:
short buffers produce records flagged as truncated instead of errors, and
the 64-bit entry point is accepted on its anchor alone.
"""

from dataclasses import dataclass
from typing import Optional
import os


# Values accepted as "true" in environment variables
_TRUE_VALUES = ("1", "true", "yes", "on")
_FALSE_VALUES = ("0", "false", "no", "off")


def _env_flag(name: str) -> Optional[bool]:
    """Read a boolean environment variable, None when unset or invalid."""
    value = os.environ.get(name)
    if value is None:
        return None
    value = value.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    return None


@dataclass
class DecoderConfig:
    """
    Configuration for structure table and entry point decoding.

    Attributes:
        strict_truncation: Raise TruncatedTableError when the blob ends
            inside a record (default: False, record kept with truncated=True)
        verify_smbios3_checksum: Require the whole-structure byte sum of a
            64-bit entry point to be zero in validate_entry_point()
            (default: False, anchor only)
        max_tables: Stop decoding after this many tables (default: None,
            unlimited)
    """

    strict_truncation: bool = False
    verify_smbios3_checksum: bool = False
    max_tables: Optional[int] = None

    @classmethod
    def from_env(cls) -> "DecoderConfig":
        """
        Create DecoderConfig from environment variables.

        Environment variables (all optional):
            SMBIOS_STRICT: Raise on truncated records ("1", "true", ...)
            SMBIOS_VERIFY_SM3_CHECKSUM: Check the 64-bit entry point checksum
            SMBIOS_MAX_TABLES: Maximum number of tables to decode (integer)

        Returns:
            DecoderConfig with values from environment variables
        """
        config = cls()

        if (strict := _env_flag("SMBIOS_STRICT")) is not None:
            config.strict_truncation = strict

        if (verify := _env_flag("SMBIOS_VERIFY_SM3_CHECKSUM")) is not None:
            config.verify_smbios3_checksum = verify

        if max_tables := os.environ.get("SMBIOS_MAX_TABLES"):
            try:
                value = int(max_tables)
            except ValueError:
                pass  # Ignore invalid values
            else:
                if value > 0:
                    config.max_tables = value

        return config
