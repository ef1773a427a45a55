"""
HT16K33 Quad Alphanumeric Backpack
==================================

This module implements the display handle: one open session with one
HT16K33 chip driving four 14-segment digit cells. Every command is
translated into exactly one write transaction on the bus.

Lifecycle
---------
A handle is either open or closed:

- ``init()`` / ``Backpack.open()`` opens the bus and starts the chip's
  oscillator (0x21). This is the only way to obtain an open handle.
- Commands write through the open handle and return it, so calls can
  be chained.
- ``deinit()`` / ``Backpack.close()`` stops the oscillator (0x20) and
  releases the bus. Any later command raises HandleClosedError.

The handle is a context manager, which guarantees the bus is released:

    with Backpack.open("i2c-1") as display:
        display.power().radiate(8).write_string_to(0, "HOT")

Invalid Parameters
------------------
Out-of-range positions, brightness levels and text lengths make the
command a no-op (logged at DEBUG level). Handles opened with
``strict=True`` raise the matching InvalidParameterError instead.

Errors
------
Bus failures are never retried: BusOpenError and BusWriteError
propagate to the caller immediately.
"""

import logging
from typing import Iterable, Optional, Sequence

from ht16k33_backpack.config import (
    DEFAULT_ADDRESS,
    DEFAULT_BUS_ID,
    BackpackConfig,
    validate_address,
)
from ht16k33_backpack.errors import (
    HandleClosedError,
    InvalidBrightnessError,
    InvalidLengthError,
    InvalidParameterError,
    InvalidPositionError,
)
from ht16k33_backpack.glyphs import GLYPH_SIZE, encode_string, glyph_bytes
from ht16k33_backpack.protocol import (
    CLEAR_FRAME,
    FILL_FRAME,
    BlinkRate,
    BlinkSpec,
    brightness_command,
    display_command,
    fits_display,
    is_valid_brightness,
    is_valid_position,
    oscillator_command,
    ram_write,
)
from ht16k33_backpack.transport import I2CTransport, Transport, TransportFactory

logger = logging.getLogger(__name__)


class Backpack:
    """
    Open session with one HT16K33 chip.

    Construct through Backpack.open() or init(); the constructor only
    wraps a transport that has already been opened and does not start
    the oscillator.

    Attributes:
        transport: Bus connection, exclusively owned by this handle
        address: 7-bit device address
        strict: Raise on invalid parameters instead of ignoring them
    """

    def __init__(
        self,
        transport: Transport,
        address: int = DEFAULT_ADDRESS,
        strict: bool = False,
    ):
        self.transport = transport
        self.address = address
        self.strict = strict
        self._open = True

    # =========================================================================
    # Lifecycle
    # =========================================================================

    @classmethod
    def open(
        cls,
        bus_id: str = DEFAULT_BUS_ID,
        address: int = DEFAULT_ADDRESS,
        transport_factory: Optional[TransportFactory] = None,
        strict: bool = False,
    ) -> "Backpack":
        """
        Open the bus and start the chip's oscillator.

        Args:
            bus_id: Bus identifier (default "i2c-1").
            address: Device address (default 0x70).
            transport_factory: Callable opening a transport for bus_id.
                               Defaults to I2CTransport.open.
            strict: Raise on invalid parameters.

        Returns:
            Open handle.

        Raises:
            ValueError: If address is not a 7-bit address.
            BusOpenError: If the bus cannot be opened.
            BusWriteError: If the oscillator command fails. The bus is
                           closed before the error propagates.
        """
        validate_address(address)
        factory = transport_factory or I2CTransport.open

        transport = factory(bus_id)
        backpack = cls(transport, address=address, strict=strict)
        try:
            backpack._write(oscillator_command(True), "start oscillator")
        except Exception:
            backpack._open = False
            backpack._release()
            raise

        logger.info("Display at 0x%02X on %s initialized", address, bus_id)
        return backpack

    @classmethod
    def from_config(
        cls,
        config: BackpackConfig,
        transport_factory: Optional[TransportFactory] = None,
    ) -> "Backpack":
        """Open a handle with the settings in config."""
        return cls.open(
            config.bus_id,
            config.address,
            transport_factory=transport_factory,
            strict=config.strict,
        )

    @property
    def is_open(self) -> bool:
        return self._open

    def close(self) -> None:
        """
        Stop the oscillator and release the bus.

        The bus is released even if the oscillator command fails; the
        write error still propagates. A failure to release the bus is
        logged at WARNING level and does not replace that error.

        Raises:
            HandleClosedError: If the handle is already closed.
        """
        self._ensure_open("close display")
        try:
            self._write(oscillator_command(False), "stop oscillator")
        finally:
            self._open = False
            self._release()
            logger.info("Display at 0x%02X released", self.address)

    def __enter__(self) -> "Backpack":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if self._open:
            self.close()

    def __repr__(self) -> str:
        state = "open" if self._open else "closed"
        return f"Backpack(address=0x{self.address:02X}, {state})"

    # =========================================================================
    # Display Control
    # =========================================================================

    def power(self, on: bool = True) -> "Backpack":
        """Switch the display on or off. Blinking is cleared."""
        self._ensure_open("set power")
        self._write(display_command(on, BlinkRate.OFF), "set power")
        return self

    def blink(self, hz: BlinkSpec = None) -> "Backpack":
        """
        Switch the display on with a blink rate.

        Args:
            hz: A BlinkRate, or a frequency of exactly 0.5, 1.0 or 2.0.
                Any other value (or None) switches the display on
                without blinking.
        """
        self._ensure_open("set blink rate")
        rate = hz if isinstance(hz, BlinkRate) else BlinkRate.from_hz(hz)
        self._write(display_command(True, rate), "set blink rate")
        return self

    def radiate(self, brightness: int) -> "Backpack":
        """
        Set the brightness level (0 = dimmest, 15 = brightest).

        Out-of-range levels are ignored unless the handle is strict.
        """
        self._ensure_open("set brightness")
        if not is_valid_brightness(brightness):
            return self._reject(InvalidBrightnessError(brightness))
        self._write(brightness_command(brightness), "set brightness")
        return self

    # =========================================================================
    # Display RAM
    # =========================================================================

    def clear(self) -> "Backpack":
        """Extinguish every segment of all four digits."""
        self._ensure_open("clear display")
        self._write(CLEAR_FRAME, "clear display")
        return self

    def fill(self) -> "Backpack":
        """Light every segment of all four digits."""
        self._ensure_open("fill display")
        self._write(FILL_FRAME, "fill display")
        return self

    def write_char_to(self, pos: int, glyph: Sequence[int]) -> "Backpack":
        """
        Write one glyph to a digit cell.

        Args:
            pos: Digit cell, 0 (leftmost) to 3.
            glyph: 2-byte segment bitmask, e.g. from glyph_for().

        Raises:
            ValueError: If glyph is not exactly two bytes.
        """
        self._ensure_open("write character")
        data = glyph_bytes(glyph)
        if not is_valid_position(pos):
            return self._reject(InvalidPositionError(pos))
        self._write(ram_write(pos, data), "write character")
        return self

    def write_string_to(self, pos: int, chars: Iterable[str]) -> "Backpack":
        """
        Render characters left to right starting at a digit cell.

        Each character takes one cell; unsupported characters are
        blank. Text that does not fit from pos is ignored unless the
        handle is strict.
        """
        self._ensure_open("write string")
        return self._write_cells(pos, encode_string(chars))

    def write_glyphs_to(self, pos: int, glyphs: Sequence[bytes]) -> "Backpack":
        """
        Write pre-rendered glyphs starting at a digit cell, e.g. text
        rendered with render_text().

        Raises:
            ValueError: If any glyph is not exactly two bytes.
        """
        self._ensure_open("write string")
        return self._write_cells(pos, b"".join(glyph_bytes(g) for g in glyphs))

    # =========================================================================
    # Internals
    # =========================================================================

    def _ensure_open(self, operation: str) -> None:
        if not self._open:
            raise HandleClosedError(operation)

    def _write_cells(self, pos: int, data: bytes) -> "Backpack":
        count = len(data) // GLYPH_SIZE
        if isinstance(pos, bool) or not isinstance(pos, int) or pos < 0:
            return self._reject(InvalidPositionError(pos))
        if not fits_display(pos, count):
            return self._reject(InvalidLengthError(pos, count))
        self._write(ram_write(pos, data), "write string")
        return self

    def _release(self) -> None:
        try:
            self.transport.close()
        except Exception as e:
            logger.warning("Error closing bus: %s", e)

    def _write(self, data: bytes, operation: str) -> None:
        logger.debug("%s: 0x%02X <- %s", operation, self.address, data.hex())
        self.transport.write(self.address, data)

    def _reject(self, error: InvalidParameterError) -> "Backpack":
        if self.strict:
            raise error
        logger.debug("Ignored: %s", error)
        return self


# =============================================================================
# Functional Interface
# =============================================================================

def init(
    bus_id: str = DEFAULT_BUS_ID,
    address: int = DEFAULT_ADDRESS,
    transport_factory: Optional[TransportFactory] = None,
    strict: bool = False,
) -> Backpack:
    """
    Initialize the display at address on bus_id and return its handle.

    Equivalent to Backpack.open().
    """
    return Backpack.open(bus_id, address, transport_factory=transport_factory, strict=strict)


def deinit(handle: Backpack) -> None:
    """Stop the display's oscillator and release its bus."""
    handle.close()
