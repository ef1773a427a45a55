r"""
Glyph Table for 14-Segment Alphanumeric Displays
================================================

This module translates printable characters into the 16-bit segment
bitmasks the HT16K33 expects in its display RAM. Each glyph is two bytes,
low byte first, exactly as it is written to the chip.

Segment Layout
--------------
Bits of the low byte (bit 0 first): A, B, C, D, E, F, G1, G2.
Bits of the high byte (bit 0 first): H, J, K, L, M, N, DP.

          A
       -------
      |\  |  /|
     F| H J K |B
      |  \|/  |
       -G1- -G2-
      |  /|\  |
     E| N M L |C
      |/  |  \|
       -------  . DP
          D

Character Set
-------------
Digits 0-9, letters A-Z and a-z, '%' and space. Anything else renders
as the blank glyph. Digits, '%', 'C', 'E', 'H', 'T' and space use the
encodings of the original backpack firmware; the remaining letters come
from the standard quad alphanumeric backpack font.
"""

from typing import Final, Iterable


# =============================================================================
# Constants
# =============================================================================

# Decimal point bit, carried in the high byte
DECIMAL_POINT: Final[int] = 0x40

BLANK: Final[bytes] = bytes((0x00, 0x00))

GLYPH_SIZE: Final[int] = 2


# =============================================================================
# Character Table
# =============================================================================
# (low byte, high byte) per character.

GLYPHS: Final[dict[str, bytes]] = {
    " ": BLANK,
    "%": bytes((0xE4, 0x1E)),
    # Digits
    "0": bytes((0x3F, 0x00)),
    "1": bytes((0x06, 0x00)),
    "2": bytes((0xDB, 0x00)),
    "3": bytes((0xCF, 0x00)),
    "4": bytes((0xE6, 0x00)),
    "5": bytes((0xED, 0x00)),
    "6": bytes((0xFD, 0x00)),
    "7": bytes((0x01, 0x0C)),
    "8": bytes((0xFF, 0x00)),
    "9": bytes((0xE7, 0x00)),
    # Upper case
    "A": bytes((0xF7, 0x00)),
    "B": bytes((0x8F, 0x12)),
    "C": bytes((0x39, 0x00)),
    "D": bytes((0x0F, 0x12)),
    "E": bytes((0xF9, 0x00)),
    "F": bytes((0x71, 0x00)),
    "G": bytes((0xBD, 0x00)),
    "H": bytes((0xF6, 0x00)),
    "I": bytes((0x09, 0x12)),
    "J": bytes((0x1E, 0x00)),
    "K": bytes((0x70, 0x0C)),
    "L": bytes((0x38, 0x00)),
    "M": bytes((0x36, 0x05)),
    "N": bytes((0x36, 0x09)),
    "O": bytes((0x3F, 0x00)),
    "P": bytes((0xF3, 0x00)),
    "Q": bytes((0x3F, 0x20)),
    "R": bytes((0xF3, 0x08)),
    "S": bytes((0xED, 0x00)),
    "T": bytes((0x01, 0x12)),
    "U": bytes((0x3E, 0x00)),
    "V": bytes((0x30, 0x24)),
    "W": bytes((0x36, 0x28)),
    "X": bytes((0x00, 0x2D)),
    "Y": bytes((0x00, 0x15)),
    "Z": bytes((0x09, 0x24)),
    # Lower case
    "a": bytes((0x58, 0x10)),
    "b": bytes((0x78, 0x20)),
    "c": bytes((0xD8, 0x00)),
    "d": bytes((0x8E, 0x08)),
    "e": bytes((0x58, 0x08)),
    "f": bytes((0x71, 0x00)),
    "g": bytes((0x8E, 0x04)),
    "h": bytes((0x70, 0x10)),
    "i": bytes((0x00, 0x10)),
    "j": bytes((0x0E, 0x00)),
    "k": bytes((0x00, 0x36)),
    "l": bytes((0x30, 0x00)),
    "m": bytes((0xD4, 0x10)),
    "n": bytes((0x50, 0x10)),
    "o": bytes((0xDC, 0x00)),
    "p": bytes((0x70, 0x01)),
    "q": bytes((0x86, 0x04)),
    "r": bytes((0x50, 0x00)),
    "s": bytes((0x88, 0x08)),
    "t": bytes((0x78, 0x00)),
    "u": bytes((0x1C, 0x00)),
    "v": bytes((0x04, 0x20)),
    "w": bytes((0x14, 0x28)),
    "x": bytes((0xC0, 0x28)),
    "y": bytes((0x0C, 0x20)),
    "z": bytes((0x48, 0x08)),
}

SUPPORTED_CHARACTERS: Final[frozenset[str]] = frozenset(GLYPHS)


# =============================================================================
# Lookup
# =============================================================================

def glyph_for(char: object) -> bytes:
    """
    Return the 2-byte segment bitmask for a single character.

    This never fails: unsupported characters, multi-character strings
    and non-string values all render as the blank glyph.

    Example:
        >>> glyph_for("A").hex()
        'f700'
        >>> glyph_for("~") == BLANK
        True
    """
    if not isinstance(char, str):
        return BLANK
    return GLYPHS.get(char, BLANK)


def with_decimal_point(glyph: bytes) -> bytes:
    """
    Light the decimal point of an existing glyph.

    Only the high byte is touched, so applying this twice gives the same
    result as applying it once.

    Args:
        glyph: A 2-byte glyph (bytes, bytearray or a pair of ints).

    Returns:
        New 2-byte glyph with the decimal point bit set.

    Raises:
        ValueError: If the glyph is not exactly two bytes.
    """
    low, high = glyph_bytes(glyph)
    return bytes((low, high | DECIMAL_POINT))


def encode_string(chars: Iterable[str]) -> bytes:
    """Concatenate the glyphs of every character, left to right."""
    return b"".join(glyph_for(c) for c in chars)


def render_text(text: str) -> list[bytes]:
    """
    Render text into one glyph per display cell.

    A '.' does not take a cell of its own; it lights the decimal point
    of the preceding glyph. A leading '.', or one following another '.',
    is drawn as a blank cell with only the point lit.

    Example:
        >>> [g.hex() for g in render_text("1.5")]
        ['0640', 'ed00']
    """
    glyphs: list[bytes] = []
    dotted = False
    for char in text:
        if char == "." and glyphs and not dotted:
            glyphs[-1] = with_decimal_point(glyphs[-1])
            dotted = True
        elif char == ".":
            glyphs.append(with_decimal_point(BLANK))
            dotted = True
        else:
            glyphs.append(glyph_for(char))
            dotted = False
    return glyphs


def glyph_bytes(glyph) -> bytes:
    """
    Return glyph as exactly two bytes.

    Raises:
        ValueError: If glyph is an int or not exactly two bytes long.
    """
    # bytes(n) would silently build n zero bytes
    if isinstance(glyph, int):
        raise ValueError(f"Glyph must be a byte sequence, got int {glyph}")
    data = bytes(glyph)
    if len(data) != GLYPH_SIZE:
        raise ValueError(
            f"Glyph must be exactly {GLYPH_SIZE} bytes, got {len(data)}"
        )
    return data
