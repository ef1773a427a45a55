"""
Backpack Configuration
======================

Connection defaults for the display. Configuration can come from:
- Default values (defined here)
- Environment variables
- Explicit arguments (command-line options, init() arguments)

Environment Variables
---------------------
HT16K33_BUS:     Bus identifier (default "i2c-1")
HT16K33_ADDRESS: Device address, any integer literal (default 0x70)
HT16K33_STRICT:  Raise on invalid parameters instead of ignoring them
"""

import logging
import os
from dataclasses import dataclass
from typing import Final

logger = logging.getLogger(__name__)


DEFAULT_BUS_ID: Final[str] = "i2c-1"

# Factory address of the HT16K33; jumpers select 0x70-0x77
DEFAULT_ADDRESS: Final[int] = 0x70

# 7-bit addresses above 0x77 are reserved by the I2C specification
MAX_ADDRESS: Final[int] = 0x77

_TRUE_VALUES: Final[frozenset[str]] = frozenset({"1", "true", "yes", "on"})


@dataclass
class BackpackConfig:
    """
    Settings used to open a display handle.

    Attributes:
        bus_id: Two-wire bus identifier (default "i2c-1")
        address: 7-bit device address (default 0x70)
        strict: Raise InvalidParameterError instead of ignoring
                out-of-range positions, brightness and text lengths
    """

    bus_id: str = DEFAULT_BUS_ID
    address: int = DEFAULT_ADDRESS
    strict: bool = False

    @classmethod
    def from_env(cls) -> "BackpackConfig":
        """
        Create BackpackConfig from environment variables.

        Values that cannot be parsed are ignored with a warning and the
        default is kept.
        """
        config = cls()

        if bus_id := os.environ.get("HT16K33_BUS"):
            config.bus_id = bus_id

        if address := os.environ.get("HT16K33_ADDRESS"):
            try:
                config.address = parse_address(address)
            except ValueError as e:
                logger.warning("Ignoring HT16K33_ADDRESS: %s", e)

        if strict := os.environ.get("HT16K33_STRICT"):
            config.strict = strict.strip().lower() in _TRUE_VALUES

        return config


def parse_address(text: str) -> int:
    """
    Parse a device address written as any Python integer literal.

    Example:
        >>> parse_address("0x71")
        113

    Raises:
        ValueError: If text is not an integer or not a 7-bit address.
    """
    try:
        address = int(text, 0)
    except ValueError:
        raise ValueError(f"Invalid address: {text!r}") from None
    validate_address(address)
    return address


def validate_address(address: int) -> None:
    """Raise ValueError unless address is a usable 7-bit address."""
    if not 0 <= address <= MAX_ADDRESS:
        raise ValueError(
            f"Address 0x{address:02X} out of range: must be 0x00-0x{MAX_ADDRESS:02X}"
        )
