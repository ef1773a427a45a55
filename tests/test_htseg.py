"""
htseg CLI Tests
===============

Tests for the command-line tool. Device commands run with --dry-run,
which records the bus writes and prints them instead of opening a bus.
"""

import pytest
from unittest.mock import patch

from click.testing import CliRunner

from ht16k33_backpack import __version__
from ht16k33_backpack.cli.htseg import format_frame, main
from ht16k33_backpack.errors import BusOpenError
from ht16k33_backpack.transport import I2CTransport


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("HT16K33_BUS", "HT16K33_ADDRESS", "HT16K33_STRICT"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def runner():
    return CliRunner()


def frames(output: str) -> list[str]:
    return [line for line in output.splitlines() if " <- " in line]


class TestFormatting:
    """Tests for frame formatting."""

    def test_format_frame(self):
        assert format_frame(0x70, b"\x00\xF6\x00") == "0x70 <- 00 f6 00"


class TestDryRun:
    """Device commands in dry-run mode."""

    def test_show(self, runner):
        result = runner.invoke(main, ["--dry-run", "show", "HOT"])
        assert result.exit_code == 0, result.output
        assert frames(result.output) == [
            "0x70 <- 21",
            "0x70 <- 00 00 00 00 00 00 00 00 00",
            "0x70 <- 00 f6 00 3f 00 01 12",
            "0x70 <- 81",
            "0x70 <- 20",
        ]

    def test_show_decimal_point_and_position(self, runner):
        result = runner.invoke(main, ["--dry-run", "show", "1.5", "--position", "2"])
        assert result.exit_code == 0, result.output
        assert "0x70 <- 04 06 40 ed 00" in frames(result.output)

    def test_show_truncates(self, runner):
        result = runner.invoke(main, ["--dry-run", "show", "HELLO"])
        assert result.exit_code == 0
        assert "truncating" in result.output

    def test_show_strict_too_long(self, runner):
        result = runner.invoke(main, ["--dry-run", "--strict", "show", "HELLO"])
        assert result.exit_code == 2
        assert "do not fit" in result.output

    def test_clear(self, runner):
        result = runner.invoke(main, ["--dry-run", "clear"])
        assert frames(result.output)[1] == "0x70 <- 00 00 00 00 00 00 00 00 00"

    def test_fill(self, runner):
        result = runner.invoke(main, ["--dry-run", "fill"])
        assert frames(result.output)[1] == "0x70 <- 00 ff ff ff ff ff ff ff ff"

    @pytest.mark.parametrize("rate,byte", [("off", "81"), ("0.5", "87"), ("1", "85"), ("2", "83")])
    def test_blink(self, runner, rate, byte):
        result = runner.invoke(main, ["--dry-run", "blink", rate])
        assert frames(result.output) == ["0x70 <- 21", f"0x70 <- {byte}", "0x70 <- 20"]

    def test_brightness(self, runner):
        result = runner.invoke(main, ["--dry-run", "brightness", "7"])
        assert frames(result.output) == ["0x70 <- 21", "0x70 <- 81", "0x70 <- e7", "0x70 <- 20"]

    def test_brightness_out_of_range_ignored(self, runner):
        result = runner.invoke(main, ["--dry-run", "brightness", "16"])
        assert result.exit_code == 0
        assert frames(result.output) == ["0x70 <- 21", "0x70 <- 81", "0x70 <- 20"]

    def test_brightness_out_of_range_strict(self, runner):
        result = runner.invoke(main, ["--dry-run", "--strict", "brightness", "16"])
        assert result.exit_code == 2
        assert "Invalid brightness" in result.output

    def test_power_off(self, runner):
        result = runner.invoke(main, ["--dry-run", "power", "off"])
        assert frames(result.output) == ["0x70 <- 21", "0x70 <- 80", "0x70 <- 20"]

    def test_address_option(self, runner):
        result = runner.invoke(main, ["--dry-run", "--address", "0x71", "clear"])
        assert frames(result.output)[0] == "0x71 <- 21"

    def test_address_from_env(self, runner, monkeypatch):
        monkeypatch.setenv("HT16K33_ADDRESS", "0x74")
        result = runner.invoke(main, ["--dry-run", "clear"])
        assert frames(result.output)[0] == "0x74 <- 21"

    def test_invalid_address(self, runner):
        result = runner.invoke(main, ["--dry-run", "--address", "0x80", "clear"])
        assert result.exit_code == 2
        assert "out of range" in result.output

    def test_hold_sleeps(self, runner):
        with patch("ht16k33_backpack.cli.htseg.time.sleep") as sleep:
            result = runner.invoke(main, ["--dry-run", "--hold", "2.5", "fill"])
        assert result.exit_code == 0
        sleep.assert_called_once_with(2.5)


class TestDeviceErrors:
    """Bus errors map to exit code 1."""

    def test_bus_open_failure(self, runner):
        error = BusOpenError("I2C bus not found: /dev/i2c-9", bus_id="i2c-9")
        with patch.object(I2CTransport, "open", side_effect=error):
            result = runner.invoke(main, ["--bus", "i2c-9", "clear"])
        assert result.exit_code == 1
        assert "Device error" in result.output
        assert "/dev/i2c-9" in result.output


class TestBuses:
    """Tests for the buses command."""

    def test_no_buses(self, runner):
        with patch("ht16k33_backpack.cli.htseg.list_i2c_buses", return_value=[]):
            result = runner.invoke(main, ["buses"])
        assert result.exit_code == 0
        assert "No I2C buses found" in result.output

    def test_lists_buses(self, runner):
        with patch("ht16k33_backpack.cli.htseg.list_i2c_buses", return_value=["i2c-1", "i2c-20"]):
            result = runner.invoke(main, ["buses"])
        assert result.exit_code == 0
        assert "i2c-1" in result.output
        assert "i2c-20" in result.output


class TestVersion:

    def test_version(self, runner):
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output
