"""
HT16K33 Command Protocol
========================

Pure builders for the command bytes understood by the HT16K33 LED
controller. Nothing in this module touches the bus: every function
returns the exact byte string that forms one write transaction.

Command Summary
---------------
| Command               | Byte(s)                          |
|-----------------------|----------------------------------|
| Oscillator on / off   | 0x21 / 0x20                      |
| Display setup         | 0x80 | blink << 1 | on           |
| Brightness (0-15)     | 0xE0 | level                     |
| RAM write             | position * 2, then data bytes    |

Display RAM
-----------
The quad alphanumeric backpack uses four digit cells of two bytes each,
so a full frame is one address byte followed by eight data bytes.

Reference: Holtek HT16K33 datasheet, "Command Summary".
"""

from enum import Enum
from typing import Final, Optional, Union

from ht16k33_backpack.glyphs import GLYPH_SIZE


# =============================================================================
# Constants
# =============================================================================

CMD_SYSTEM_SETUP: Final[int] = 0x20
CMD_DISPLAY_SETUP: Final[int] = 0x80
CMD_DIMMING: Final[int] = 0xE0

OSCILLATOR_ON: Final[int] = 0x01
DISPLAY_ON: Final[int] = 0x01

DIGIT_COUNT: Final[int] = 4
BRIGHTNESS_LEVELS: Final[int] = 16

RAM_FRAME_SIZE: Final[int] = DIGIT_COUNT * GLYPH_SIZE

CLEAR_FRAME: Final[bytes] = bytes([0x00]) + bytes([0x00] * RAM_FRAME_SIZE)
FILL_FRAME: Final[bytes] = bytes([0x00]) + bytes([0xFF] * RAM_FRAME_SIZE)


# =============================================================================
# Blink Rates
# =============================================================================

class BlinkRate(Enum):
    """
    Blink frequency of the display setup command.

    The value is the two-bit field placed in bits 1-2 of the command.
    """

    OFF = 0
    TWO_HZ = 1
    ONE_HZ = 2
    HALF_HZ = 3

    @classmethod
    def from_hz(cls, hz: Optional[float]) -> "BlinkRate":
        """
        Map a frequency in hertz onto a blink rate.

        Only numbers equal to 0.5, 1.0 or 2.0 select a blink rate. Any other
        value, including None, strings and booleans, means no blinking.
        """
        if isinstance(hz, bool) or not isinstance(hz, (int, float)):
            return cls.OFF
        return _RATES_BY_HZ.get(hz, cls.OFF)

    @property
    def hz(self) -> float:
        """Blink frequency in hertz (0.0 when not blinking)."""
        return _HZ_BY_RATE[self]


_RATES_BY_HZ: Final[dict[float, BlinkRate]] = {
    0.5: BlinkRate.HALF_HZ,
    1.0: BlinkRate.ONE_HZ,
    2.0: BlinkRate.TWO_HZ,
}

_HZ_BY_RATE: Final[dict[BlinkRate, float]] = {
    BlinkRate.OFF: 0.0,
    BlinkRate.HALF_HZ: 0.5,
    BlinkRate.ONE_HZ: 1.0,
    BlinkRate.TWO_HZ: 2.0,
}

BlinkSpec = Union[BlinkRate, float, None]


# =============================================================================
# Validation
# =============================================================================

def is_valid_position(position: int) -> bool:
    """Return True if position addresses one of the digit cells."""
    return _is_int(position) and 0 <= position < DIGIT_COUNT


def is_valid_brightness(level: int) -> bool:
    """Return True if level is one of the sixteen dimming steps."""
    return _is_int(level) and 0 <= level < BRIGHTNESS_LEVELS


def fits_display(position: int, count: int) -> bool:
    """Return True if count cells starting at position fit the display."""
    return _is_int(position) and position >= 0 and count + position <= DIGIT_COUNT


def _is_int(value) -> bool:
    # bool is an int subclass; True must not address cell 1
    return isinstance(value, int) and not isinstance(value, bool)


# =============================================================================
# Command Builders
# =============================================================================

def oscillator_command(on: bool) -> bytes:
    """System setup command: 0x21 starts the oscillator, 0x20 stops it."""
    return bytes([CMD_SYSTEM_SETUP | (OSCILLATOR_ON if on else 0x00)])


def display_command(on: bool = True, blink: BlinkRate = BlinkRate.OFF) -> bytes:
    """
    Display setup command.

    Example:
        >>> display_command(True, BlinkRate.HALF_HZ).hex()
        '87'
    """
    return bytes([CMD_DISPLAY_SETUP | (blink.value << 1) | (DISPLAY_ON if on else 0x00)])


def brightness_command(level: int) -> bytes:
    """
    Dimming set command.

    Raises:
        ValueError: If level is outside 0-15.
    """
    if not is_valid_brightness(level):
        raise ValueError(f"Brightness must be 0-{BRIGHTNESS_LEVELS - 1}, got {level}")
    return bytes([CMD_DIMMING | level])


def ram_write(position: int, data: bytes) -> bytes:
    """
    Display RAM write starting at a digit cell.

    Args:
        position: First digit cell (0-3).
        data: Glyph bytes, two per cell.

    Raises:
        ValueError: If position is negative or data overruns the RAM.
    """
    if not _is_int(position) or position < 0:
        raise ValueError(f"Position must be a non-negative integer, got {position!r}")
    address = position * GLYPH_SIZE
    if address + len(data) > RAM_FRAME_SIZE:
        raise ValueError(
            f"{len(data)} bytes at offset {address} overrun the "
            f"{RAM_FRAME_SIZE}-byte display RAM"
        )
    return bytes([address]) + bytes(data)
