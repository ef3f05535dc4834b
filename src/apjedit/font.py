"""Font (96 glyphs of 8 bytes) and ULA colour palette (16 bytes)."""

import logging

from .constants import (
    FONT_GLYPHS, FONT_GLYPH_SIZE, PALETTE_SIZE, DEFAULT_ULA_PALETTE, pixel_rows,
)
from .fileutil import read_exact, write_fixed, fit_bytes, chunk, parse_numbers

logger = logging.getLogger(__name__)


def default_font() -> list[bytes]:
    return [bytes(FONT_GLYPH_SIZE) for _ in range(FONT_GLYPHS)]


def default_palette() -> list[int]:
    return list(DEFAULT_ULA_PALETTE)


def decode_font(f) -> list[bytes]:
    return chunk(read_exact(f, FONT_GLYPHS * FONT_GLYPH_SIZE), FONT_GLYPH_SIZE)


def encode_font(f, glyphs: list[bytes]) -> None:
    glyphs = list(glyphs[:FONT_GLYPHS])
    glyphs += [b''] * (FONT_GLYPHS - len(glyphs))
    for glyph in glyphs:
        write_fixed(f, glyph, FONT_GLYPH_SIZE)


def glyph_pixels(glyph: bytes) -> list[str]:
    return pixel_rows(fit_bytes(glyph, FONT_GLYPH_SIZE))


def apply_font(glyphs: list[bytes], lines: list[str]) -> list[bytes]:
    """Overlay the glyphs of a DEFINEFONT definition, starting at the space character."""
    data = parse_numbers(lines)
    imported = [fit_bytes(g, FONT_GLYPH_SIZE) for g in chunk(data, FONT_GLYPH_SIZE)]
    if len(imported) > FONT_GLYPHS:
        logger.warning(f"DEFINEFONT holds {len(imported)} glyphs, keeping {FONT_GLYPHS}")
    result = list(glyphs[:FONT_GLYPHS])
    result += default_font()[len(result):]
    for i, glyph in enumerate(imported[:FONT_GLYPHS]):
        result[i] = glyph
    return result


def decode_palette(f) -> list[int]:
    return list(read_exact(f, PALETTE_SIZE))


def encode_palette(f, palette: list[int]) -> None:
    write_fixed(f, palette, PALETTE_SIZE)


def apply_palette(palette: list[int], lines: list[str]) -> list[int]:
    """Overlay DEFINEPALETTE values onto the palette from slot 0."""
    values = parse_numbers(lines)
    if len(values) > PALETTE_SIZE:
        logger.warning(f"DEFINEPALETTE holds {len(values)} values, keeping {PALETTE_SIZE}")
    result = list(fit_bytes(palette, PALETTE_SIZE))
    result[:min(len(values), PALETTE_SIZE)] = values[:PALETTE_SIZE]
    return result
