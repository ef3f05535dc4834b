"""Blocks: the 8x8 tiles screens are built from.

Binary section layout:
  count (1 byte)
  block type (1 byte) per block
  then, platform by platform, that platform's data for every block:
    Spectrum 9 (8 pixel rows + colour attribute), Timex 16, CPC 24,
    Atom 8, MSX 16, Atom colour 8.
"""

import logging
import re
from dataclasses import dataclass, field

from .constants import (
    BLOCK_PLATFORMS, BLOCK_ATTR_INDEX, BLOCK_TYPE_CODES, DEFAULT_BLOCK_ATTR,
    block_type_name, pixel_rows,
)
from .fileutil import (
    read_exact, read_u8, write_u8, write_count, write_fixed, fit_bytes,
    parse_numbers,
)

logger = logging.getLogger(__name__)

BLOCK_RE = re.compile(r'DEFINEBLOCK\s+(\w+)', re.ASCII)
PLATFORM_SIZES = dict(BLOCK_PLATFORMS)


def _zeros(name):
    return field(default_factory=lambda: bytes(PLATFORM_SIZES[name]))


@dataclass
class Block:
    id: int = 0
    block_type: int = 0
    spectrum: bytes = _zeros('spectrum')
    timex: bytes = _zeros('timex')
    cpc: bytes = _zeros('cpc')
    atom: bytes = _zeros('atom')
    msx: bytes = _zeros('msx')
    atom_colour: bytes = _zeros('atom_colour')

    @property
    def type_name(self) -> str:
        return block_type_name(self.block_type)

    @property
    def attribute(self) -> int:
        return self.spectrum[BLOCK_ATTR_INDEX]

    @property
    def pixels(self) -> list[str]:
        return pixel_rows(self.spectrum[:BLOCK_ATTR_INDEX])

    def to_dict(self) -> dict:
        d = {'id': self.id, 'type': self.type_name}
        for name, _ in BLOCK_PLATFORMS:
            d[name] = list(getattr(self, name))
        return d

    def display(self) -> None:
        print(f"  Block {self.id:3d}  {self.type_name:<14s} attr={self.attribute}")
        for row in self.pixels:
            print(f"    {row}")


def default_block(block_id: int = 0) -> Block:
    spectrum = bytearray(PLATFORM_SIZES['spectrum'])
    spectrum[BLOCK_ATTR_INDEX] = DEFAULT_BLOCK_ATTR
    return Block(id=block_id, spectrum=bytes(spectrum))


def decode_blocks(f) -> list[Block]:
    count = read_u8(f)
    blocks = [Block(id=i, block_type=t) for i, t in enumerate(read_exact(f, count))]
    for name, size in BLOCK_PLATFORMS:
        for block in blocks:
            setattr(block, name, read_exact(f, size))
    logger.debug(f"Decoded {count} blocks")
    return blocks


def encode_blocks(f, blocks: list[Block]) -> None:
    write_count(f, len(blocks), 'blocks')
    for block in blocks:
        write_u8(f, block.block_type)
    for name, size in BLOCK_PLATFORMS:
        for block in blocks:
            write_fixed(f, getattr(block, name), size)


def parse_block_type(token: str) -> int:
    """Resolve a block type name (WALLBLOCK) or number to its code."""
    if token.isascii() and token.isdigit():
        return int(token) & 0xFF
    code = BLOCK_TYPE_CODES.get(token.upper())
    if code is None:
        logger.warning(f"Unknown block type {token!r}, using EMPTYBLOCK")
        return 0
    return code


def parse_block(lines: list[str], block_id: int) -> Block | None:
    """Build a Block from a DEFINEBLOCK definition.

    The first line names the block type; the following lines hold the
    eight pixel rows and the colour attribute.
    """
    m = BLOCK_RE.search(lines[0])
    if not m:
        logger.debug(f"Skipping malformed block header: {lines[0]!r}")
        return None
    data = parse_numbers(lines[1:])
    size = PLATFORM_SIZES['spectrum']
    if len(data) != size:
        logger.warning(f"Block {block_id}: {len(data)} data values, expected {size}")
    return Block(id=block_id, block_type=parse_block_type(m.group(1)),
                 spectrum=fit_bytes(data, size))
