"""
Two-Wire Bus Transport
======================

This module provides the bus transport the display handle writes
through. The handle only needs three operations:

- open a bus by identifier (a factory callable)
- write a byte string to a 7-bit device address
- close the bus

Implementations
---------------
- **I2CTransport**: Linux i2c-dev bus via smbus2. Each write is one raw
  I2C write transaction (no SMBus register byte is prepended).
- **MemoryTransport**: Records writes in memory. Used for dry runs and
  tests.

Bus Identifiers
---------------
Bus identifiers follow the Linux device naming: ``"i2c-1"`` opens
``/dev/i2c-1``. A bare bus number (``"1"``) and a full device path are
also accepted.

Thread Safety
-------------
Transports are NOT thread-safe. A transport is owned by exactly one
display handle.
"""

import logging
from pathlib import Path
from typing import Callable, Final, Optional, Protocol

from smbus2 import SMBus, i2c_msg

from ht16k33_backpack.errors import BusOpenError, BusWriteError

# Configure module logger
logger = logging.getLogger(__name__)


# =============================================================================
# Constants
# =============================================================================

DEV_DIR: Final[Path] = Path("/dev")

BUS_PREFIX: Final[str] = "i2c-"


# =============================================================================
# Transport Capability
# =============================================================================

class Transport(Protocol):
    """Bus connection owned by a display handle."""

    def write(self, address: int, data: bytes) -> None: ...

    def close(self) -> None: ...


TransportFactory = Callable[[str], Transport]


# =============================================================================
# Bus Identifiers
# =============================================================================

def resolve_bus_path(bus_id: str) -> str:
    """
    Resolve a bus identifier to its character device path.

    Example:
        >>> resolve_bus_path("i2c-1")
        '/dev/i2c-1'
        >>> resolve_bus_path("3")
        '/dev/i2c-3'
        >>> resolve_bus_path("/dev/i2c-7")
        '/dev/i2c-7'
    """
    bus_id = str(bus_id).strip()
    if bus_id.startswith("/"):
        return bus_id
    if bus_id.isdigit():
        bus_id = f"{BUS_PREFIX}{bus_id}"
    return str(DEV_DIR / bus_id)


def list_i2c_buses(dev_dir: Path = DEV_DIR) -> list[str]:
    """
    List the I2C bus identifiers present on this system.

    Returns:
        Identifiers such as ``"i2c-1"``, sorted by bus number.
    """
    buses = []
    for path in dev_dir.glob(f"{BUS_PREFIX}*"):
        suffix = path.name[len(BUS_PREFIX):]
        if suffix.isdigit():
            buses.append(path.name)
            logger.debug("Found bus: %s", path)
    return sorted(buses, key=lambda name: int(name[len(BUS_PREFIX):]))


# =============================================================================
# smbus2 Transport
# =============================================================================

class I2CTransport:
    """
    I2C bus connection through the Linux i2c-dev interface.

    Use I2CTransport.open() rather than constructing directly; it maps
    OS errors onto BusOpenError with a hint for the common causes.
    """

    def __init__(self, bus: SMBus, bus_id: str):
        self._bus: Optional[SMBus] = bus
        self.bus_id = bus_id

    @classmethod
    def open(cls, bus_id: str) -> "I2CTransport":
        """
        Open an I2C bus.

        Args:
            bus_id: Bus identifier, e.g. "i2c-1".

        Returns:
            Open transport.

        Raises:
            BusOpenError: If the bus device cannot be opened.
        """
        path = resolve_bus_path(bus_id)
        logger.info("Opening I2C bus: %s", path)

        try:
            bus = SMBus(path)
        except FileNotFoundError as e:
            raise BusOpenError(
                f"I2C bus not found: {path}. "
                "Enable I2C (e.g. raspi-config) or use 'htseg buses' to list buses.",
                bus_id=bus_id,
            ) from e
        except PermissionError as e:
            raise BusOpenError(
                f"Permission denied accessing {path}. "
                "You may need to add your user to the 'i2c' group: "
                "sudo usermod -a -G i2c $USER",
                bus_id=bus_id,
            ) from e
        except OSError as e:
            raise BusOpenError(f"Cannot open {path}: {e}", bus_id=bus_id) from e

        return cls(bus, bus_id)

    @property
    def is_open(self) -> bool:
        return self._bus is not None

    def write(self, address: int, data: bytes) -> None:
        """
        Write bytes to a device as a single transaction.

        Raises:
            BusWriteError: If the bus is closed or the transaction fails.
        """
        if self._bus is None:
            raise BusWriteError(
                f"Bus {self.bus_id} is closed", bus_id=self.bus_id, address=address
            )

        msg = i2c_msg.write(address, bytes(data))
        try:
            self._bus.i2c_rdwr(msg)
        except OSError as e:
            raise BusWriteError(
                f"Write to 0x{address:02X} on {self.bus_id} failed: {e}. "
                "Check the device address and wiring.",
                bus_id=self.bus_id,
                address=address,
            ) from e

        logger.debug("Sent %d bytes to 0x%02X: %s", len(data), address, bytes(data).hex())

    def close(self) -> None:
        """Close the bus. Closing twice is harmless."""
        if self._bus is None:
            return
        bus, self._bus = self._bus, None
        bus.close()
        logger.debug("I2C bus closed: %s", self.bus_id)


# =============================================================================
# In-Memory Transport
# =============================================================================

class MemoryTransport:
    """
    Transport that records every write instead of driving a bus.

    Attributes:
        bus_id: Identifier the transport was opened with
        writes: (address, data) for every write, in order
        closed: True once close() has been called
    """

    def __init__(self, bus_id: str = "memory"):
        self.bus_id = bus_id
        self.writes: list[tuple[int, bytes]] = []
        self.closed = False

    @classmethod
    def open(cls, bus_id: str) -> "MemoryTransport":
        return cls(bus_id)

    @property
    def frames(self) -> list[bytes]:
        """Payloads of every write, without addresses."""
        return [data for _, data in self.writes]

    def write(self, address: int, data: bytes) -> None:
        if self.closed:
            raise BusWriteError(
                f"Bus {self.bus_id} is closed", bus_id=self.bus_id, address=address
            )
        self.writes.append((address, bytes(data)))
        logger.debug("Recorded %d bytes to 0x%02X: %s", len(data), address, bytes(data).hex())

    def close(self) -> None:
        self.closed = True
