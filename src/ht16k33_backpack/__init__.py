"""
HT16K33 Backpack - Driver for 14-Segment Alphanumeric LED Displays
==================================================================

This package drives quad alphanumeric LED backpacks built around the
Holtek HT16K33 controller, connected over an I2C bus. It translates
display operations (power, brightness, blink rate, character and string
rendering) into the chip's command byte protocol.

Main Components
---------------
- **glyphs**: Character to 14-segment bitmask table
- **protocol**: Pure command-byte builders
- **backpack**: Display handle (init, commands, deinit)
- **transport**: I2C bus access via smbus2, plus an in-memory transport
- **cli**: The ``htseg`` command-line tool

Quick Start
-----------
    >>> from ht16k33_backpack import Backpack, glyph_for, with_decimal_point
    >>> with Backpack.open("i2c-1", 0x70) as display:
    ...     display.power().radiate(8)
    ...     display.write_string_to(0, "HOT")
    ...     display.write_char_to(3, with_decimal_point(glyph_for("5")))

Or from the shell:
    $ htseg show "12.5%"
    $ htseg --address 0x71 brightness 4

Reference Documentation
-----------------------
- Holtek HT16K33 datasheet, "RAM Mapping 16*8 LED Controller Driver"
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from ht16k33_backpack.backpack import Backpack, deinit, init
from ht16k33_backpack.config import (
    DEFAULT_ADDRESS,
    DEFAULT_BUS_ID,
    BackpackConfig,
)
from ht16k33_backpack.errors import (
    BackpackError,
    BusOpenError,
    BusWriteError,
    HandleClosedError,
    InvalidBrightnessError,
    InvalidLengthError,
    InvalidParameterError,
    InvalidPositionError,
    TransportError,
)
from ht16k33_backpack.glyphs import (
    BLANK,
    DECIMAL_POINT,
    GLYPHS,
    encode_string,
    glyph_for,
    render_text,
    with_decimal_point,
)
from ht16k33_backpack.protocol import BlinkRate
from ht16k33_backpack.transport import (
    I2CTransport,
    MemoryTransport,
    Transport,
    list_i2c_buses,
)

__all__ = [
    "__version__",
    # Display handle
    "Backpack",
    "init",
    "deinit",
    "BlinkRate",
    # Configuration
    "BackpackConfig",
    "DEFAULT_ADDRESS",
    "DEFAULT_BUS_ID",
    # Glyphs
    "BLANK",
    "DECIMAL_POINT",
    "GLYPHS",
    "glyph_for",
    "with_decimal_point",
    "encode_string",
    "render_text",
    # Transport
    "Transport",
    "I2CTransport",
    "MemoryTransport",
    "list_i2c_buses",
    # Exception hierarchy
    "BackpackError",
    "TransportError",
    "BusOpenError",
    "BusWriteError",
    "HandleClosedError",
    "InvalidParameterError",
    "InvalidPositionError",
    "InvalidBrightnessError",
    "InvalidLengthError",
]
