#!/usr/bin/env python3
"""
Climate Readout Demo
====================

This script shows a temperature and humidity readout on a quad
alphanumeric backpack:
1. Open the display from environment configuration
2. Set brightness and switch the display on
3. Alternate between "23.5C" style temperature and "45%" humidity
4. Blink while a reading is out of range

Usage:
    python examples/climate_demo.py
    python examples/climate_demo.py --dry-run
"""

import sys
import time

from ht16k33_backpack import (
    Backpack,
    BackpackConfig,
    BlinkRate,
    MemoryTransport,
    render_text,
)

READINGS = [(21.5, 40), (23.0, 45), (31.5, 62)]


def show(display: Backpack, text: str) -> None:
    glyphs = render_text(text)[:4]
    display.clear().write_glyphs_to(4 - len(glyphs), glyphs)


def main():
    dry_run = "--dry-run" in sys.argv[1:]
    config = BackpackConfig.from_env()

    # ==========================================================================
    # 1. Open the display
    # ==========================================================================
    recorder = MemoryTransport(config.bus_id)
    factory = (lambda bus_id: recorder) if dry_run else None

    with Backpack.from_config(config, transport_factory=factory) as display:
        display.power().radiate(6)

        # ======================================================================
        # 2. Cycle through the readings
        # ======================================================================
        for temperature, humidity in READINGS:
            too_hot = temperature > 30.0
            display.blink(BlinkRate.ONE_HZ if too_hot else BlinkRate.OFF)

            show(display, f"{temperature:.1f}C")
            time.sleep(0 if dry_run else 2)

            show(display, f"{humidity}%")
            time.sleep(0 if dry_run else 2)

    if dry_run:
        for address, data in recorder.writes:
            print(f"0x{address:02X} <- {data.hex(' ')}")


if __name__ == "__main__":
    main()
