"""
HT16K33 Backpack Error Hierarchy
================================

This module defines the exception hierarchy for the whole package.
All exceptions inherit from BackpackError, allowing callers to catch
every driver-related error with a single except clause if desired.

Exception Hierarchy
-------------------
BackpackError (base)
├── TransportError (two-wire bus)
│   ├── BusOpenError - the bus device cannot be opened
│   └── BusWriteError - a write transaction failed
├── HandleClosedError - command issued after deinit
└── InvalidParameterError (strict mode only)
    ├── InvalidPositionError - digit position outside [0, 4)
    ├── InvalidBrightnessError - brightness outside [0, 16)
    └── InvalidLengthError - text does not fit from the start position

Invalid Parameters
------------------
By default an out-of-range position, brightness or text length turns
the command into a no-op and the handle is returned unchanged. The
InvalidParameterError family is only raised by handles opened with
``strict=True``.
"""

from typing import Optional


# =============================================================================
# Base Exception Class
# =============================================================================

class BackpackError(Exception):
    """
    Base exception for all HT16K33 backpack errors.

        try:
            with Backpack.open("i2c-1") as display:
                display.write_string_to(0, "HOT")
        except BackpackError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Transport Exceptions
# =============================================================================

class TransportError(BackpackError):
    """
    Base exception for two-wire bus failures.

    Attributes:
        bus_id: Bus identifier the failure relates to (if known)
        address: 7-bit device address (if known)
    """

    def __init__(
        self,
        message: str,
        bus_id: Optional[str] = None,
        address: Optional[int] = None,
    ):
        self.bus_id = bus_id
        self.address = address
        super().__init__(message)


class BusOpenError(TransportError):
    """
    The bus device could not be opened.

    Raised by the transport factory during init; the handle is never
    created.
    """
    pass


class BusWriteError(TransportError):
    """
    A write transaction was not completed.

    Usually the chip did not acknowledge its address: wrong address,
    loose wiring or missing pull-ups.
    """
    pass


# =============================================================================
# Handle State Exceptions
# =============================================================================

class HandleClosedError(BackpackError):
    """A command was issued on a handle that has already been closed."""

    def __init__(self, operation: str):
        self.operation = operation
        super().__init__(f"Cannot {operation}: display handle is closed")


# =============================================================================
# Parameter Exceptions (strict mode)
# =============================================================================

class InvalidParameterError(BackpackError, ValueError):
    """
    Base exception for parameters rejected in strict mode.

    Attributes:
        value: The rejected value
    """

    def __init__(self, message: str, value: object = None):
        self.value = value
        super().__init__(message)


class InvalidPositionError(InvalidParameterError):
    """Digit position outside the four cells of the display."""

    def __init__(self, position: int):
        super().__init__(
            f"Invalid digit position {position!r}: must be 0-3", value=position
        )


class InvalidBrightnessError(InvalidParameterError):
    """Brightness level outside the sixteen dimming steps."""

    def __init__(self, level: int):
        super().__init__(
            f"Invalid brightness {level}: must be 0-15", value=level
        )


class InvalidLengthError(InvalidParameterError):
    """Text does not fit on the display from the requested position."""

    def __init__(self, position: int, length: int):
        self.position = position
        self.length = length
        super().__init__(
            f"{length} character(s) do not fit from position {position}",
            value=length,
        )
