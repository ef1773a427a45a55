"""
htseg - Quad Alphanumeric Display Command-Line Interface
========================================================

This module implements the command-line interface for HT16K33 quad
alphanumeric backpacks. Each device command runs one complete session:
the display is initialized, the command is sent, and the display is
released again (which stops its oscillator and blanks it).

Usage Examples
--------------
List available I2C buses:
    $ htseg buses

Show text for ten seconds:
    $ htseg --hold 10 show "12.5%"

Use a backpack with its address jumpers set:
    $ htseg --address 0x71 --hold 5 fill

Print the bytes that would be sent, without touching the bus:
    $ htseg --dry-run show HOT

Configuration
-------------
Defaults for --bus, --address and --strict are read from the
HT16K33_BUS, HT16K33_ADDRESS and HT16K33_STRICT environment variables.

Exit Codes
----------
0 - Success
1 - Bus or device error
2 - Invalid arguments or configuration error
"""

import logging
import time
from contextlib import contextmanager
from typing import Iterator, Optional

import click

from ht16k33_backpack import __version__
from ht16k33_backpack.backpack import Backpack
from ht16k33_backpack.cli.errors import handle_cli_exception
from ht16k33_backpack.config import BackpackConfig, parse_address
from ht16k33_backpack.glyphs import render_text
from ht16k33_backpack.protocol import DIGIT_COUNT, BlinkRate
from ht16k33_backpack.transport import MemoryTransport, list_i2c_buses

# Configure logging
logger = logging.getLogger(__name__)

BLINK_CHOICES = {
    "off": BlinkRate.OFF,
    "0.5": BlinkRate.HALF_HZ,
    "1": BlinkRate.ONE_HZ,
    "2": BlinkRate.TWO_HZ,
}


# =============================================================================
# CLI Context and Utilities
# =============================================================================

class Context:
    """
    Shared context for CLI commands.

    Stores the connection settings and global options.
    """

    def __init__(self) -> None:
        self.config: BackpackConfig = BackpackConfig()
        self.dry_run: bool = False
        self.hold: float = 0.0
        self.verbose: bool = False

    def setup_logging(self) -> None:
        """Configure logging based on verbosity."""
        level = logging.DEBUG if self.verbose else logging.WARNING
        logging.basicConfig(
            level=level,
            format="%(levelname)s: %(message)s" if self.verbose else "%(message)s",
        )


pass_context = click.make_pass_decorator(Context, ensure=True)


def format_frame(address: int, data: bytes) -> str:
    """Format one bus write for display, e.g. '0x70 <- 21'."""
    return f"0x{address:02X} <- {data.hex(' ')}"


@contextmanager
def session(ctx: Context) -> Iterator[Backpack]:
    """
    Run one init/deinit session against the configured display.

    Errors are reported through handle_cli_exception, which exits.
    """
    recorder: Optional[MemoryTransport] = None

    def open_memory(bus_id: str) -> MemoryTransport:
        nonlocal recorder
        recorder = MemoryTransport.open(bus_id)
        return recorder

    factory = open_memory if ctx.dry_run else None

    try:
        with Backpack.from_config(ctx.config, transport_factory=factory) as display:
            yield display
            if ctx.hold > 0:
                logger.info("Holding display for %.1fs", ctx.hold)
                time.sleep(ctx.hold)
    except Exception as e:
        handle_cli_exception(e, verbose=ctx.verbose)

    if recorder is not None:
        for address, data in recorder.writes:
            click.echo(format_frame(address, data))


# =============================================================================
# Main CLI Group
# =============================================================================

class AddressType(click.ParamType):
    """Device address given as any integer literal, e.g. 0x71 or 113."""

    name = "address"

    def convert(self, value, param, ctx):
        if isinstance(value, int):
            return value
        try:
            return parse_address(value)
        except ValueError as e:
            self.fail(str(e), param, ctx)


@click.group()
@click.option(
    "-b", "--bus",
    type=str,
    default=None,
    help="I2C bus identifier (default: $HT16K33_BUS or i2c-1)",
)
@click.option(
    "-a", "--address",
    type=AddressType(),
    default=None,
    help="Device address (default: $HT16K33_ADDRESS or 0x70)",
)
@click.option(
    "--strict/--lenient",
    default=None,
    help="Fail on out-of-range values instead of ignoring them",
)
@click.option(
    "-n", "--dry-run",
    is_flag=True,
    help="Print the bytes that would be written instead of using the bus",
)
@click.option(
    "--hold",
    type=click.FloatRange(min=0.0),
    default=0.0,
    help="Seconds to keep the display on before releasing it",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Enable verbose output",
)
@click.version_option(version=__version__, prog_name="htseg")
@pass_context
def main(
    ctx: Context,
    bus: Optional[str],
    address: Optional[int],
    strict: Optional[bool],
    dry_run: bool,
    hold: float,
    verbose: bool,
) -> None:
    """
    Drive an HT16K33 quad alphanumeric LED display over I2C.

    The display is released (and goes dark) when each command exits;
    use --hold to keep it visible for a while.
    """
    ctx.verbose = verbose
    ctx.setup_logging()

    ctx.config = BackpackConfig.from_env()
    if bus is not None:
        ctx.config.bus_id = bus
    if address is not None:
        ctx.config.address = address
    if strict is not None:
        ctx.config.strict = strict
    ctx.dry_run = dry_run
    ctx.hold = hold


# =============================================================================
# Buses Command
# =============================================================================

@main.command()
def buses() -> None:
    """
    List available I2C buses.

    Example:
        htseg buses
    """
    bus_list = list_i2c_buses()

    if not bus_list:
        click.echo("No I2C buses found.")
        click.echo("\nTips:")
        click.echo("  - Enable the I2C interface (raspi-config > Interface Options)")
        click.echo("  - Load the i2c-dev kernel module: sudo modprobe i2c-dev")
        return

    click.echo("Available I2C buses:")
    for bus_id in bus_list:
        click.echo(f"  {bus_id}")


# =============================================================================
# Display Commands
# =============================================================================

@main.command()
@click.argument("text")
@click.option(
    "-p", "--position",
    type=click.IntRange(0, DIGIT_COUNT - 1),
    default=0,
    help="First digit to write (0-3, default 0)",
)
@pass_context
def show(ctx: Context, text: str, position: int) -> None:
    """
    Show TEXT on the display.

    Digits, letters, '%' and space are supported; a '.' lights the
    decimal point of the preceding character.

    Example:
        htseg show HOT
        htseg show "12.5%"
        htseg show 7 --position 3
    """
    glyphs = render_text(text)
    if len(glyphs) + position > DIGIT_COUNT and not ctx.config.strict:
        click.echo(
            f"Warning: '{text}' needs {len(glyphs)} digit(s), only "
            f"{DIGIT_COUNT - position} available; truncating",
            err=True,
        )
        glyphs = glyphs[:DIGIT_COUNT - position]

    with session(ctx) as display:
        display.clear().write_glyphs_to(position, glyphs).power()


@main.command()
@pass_context
def clear(ctx: Context) -> None:
    """Extinguish all segments."""
    with session(ctx) as display:
        display.clear().power()


@main.command()
@pass_context
def fill(ctx: Context) -> None:
    """Light all segments (display test)."""
    with session(ctx) as display:
        display.fill().power()


@main.command()
@click.argument("rate", type=click.Choice(list(BLINK_CHOICES)))
@pass_context
def blink(ctx: Context, rate: str) -> None:
    """
    Set the blink RATE in hertz (off, 0.5, 1 or 2).

    Example:
        htseg --hold 5 blink 2
    """
    with session(ctx) as display:
        display.blink(BLINK_CHOICES[rate])


@main.command()
@click.argument("level", type=int)
@pass_context
def brightness(ctx: Context, level: int) -> None:
    """
    Set the brightness LEVEL (0-15).

    Out-of-range levels are ignored unless --strict is given.
    """
    with session(ctx) as display:
        display.power().radiate(level)


@main.command()
@click.argument("state", type=click.Choice(["on", "off"]))
@pass_context
def power(ctx: Context, state: str) -> None:
    """Switch the display on or off."""
    with session(ctx) as display:
        display.power(state == "on")


if __name__ == "__main__":
    main()
