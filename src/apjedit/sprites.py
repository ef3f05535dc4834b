"""Sprites: 16x16 animated images, one or more frames each.

Binary section layout:
  count (1 byte)
  (offset, frames) byte pair per sprite; offset is the running frame total
  then, platform by platform, every frame of every sprite:
    Spectrum 32, Timex 32, CPC 80, Atom 32, Atom colour 32, VZ colour 16
"""

import logging
import re
from dataclasses import dataclass, field

from .constants import SPRITE_PLATFORMS, pixel_rows
from .fileutil import (
    read_exact, read_u8, write_u8, write_count, write_fixed, fit_bytes,
    parse_numbers,
)

logger = logging.getLogger(__name__)

SPRITE_RE = re.compile(r'DEFINESPRITE\s+(\w+)', re.ASCII)
PLATFORM_SIZES = dict(SPRITE_PLATFORMS)


@dataclass
class Sprite:
    id: int = 0
    offset: int = 0
    frames: int = 1
    spectrum: list[bytes] = field(default_factory=list)
    timex: list[bytes] = field(default_factory=list)
    cpc: list[bytes] = field(default_factory=list)
    atom: list[bytes] = field(default_factory=list)
    atom_colour: list[bytes] = field(default_factory=list)
    vz_colour: list[bytes] = field(default_factory=list)

    def frame(self, platform: str, index: int) -> bytes:
        """Frame data for a platform, zero-filled when it was never set."""
        frames = getattr(self, platform)
        size = PLATFORM_SIZES[platform]
        if index < len(frames):
            return fit_bytes(frames[index], size)
        return bytes(size)

    def frame_pixels(self, index: int = 0) -> list[str]:
        return pixel_rows(self.frame('spectrum', index), 2)

    def to_dict(self) -> dict:
        d = {'id': self.id, 'offset': self.offset, 'frames': self.frames}
        for name, _ in SPRITE_PLATFORMS:
            d[name] = [list(self.frame(name, i)) for i in range(self.frames)]
        return d

    def display(self) -> None:
        print(f"  Sprite {self.id:3d}  frames={self.frames} offset={self.offset}")
        for i in range(self.frames):
            print(f"    frame {i}")
            for row in self.frame_pixels(i):
                print(f"      {row}")


def blank_sprite(sprite_id: int = 0, frames: int = 1) -> Sprite:
    sprite = Sprite(id=sprite_id, frames=frames)
    for name, size in SPRITE_PLATFORMS:
        setattr(sprite, name, [bytes(size) for _ in range(frames)])
    return sprite


def calc_offsets(sprites: list[Sprite]) -> None:
    """Set each sprite's offset to the number of frames before it."""
    total = 0
    for sprite in sprites:
        sprite.offset = total
        total += sprite.frames


def decode_sprites(f) -> list[Sprite]:
    count = read_u8(f)
    sprites = []
    for i in range(count):
        offset, frames = read_exact(f, 2)
        sprites.append(Sprite(id=i, offset=offset, frames=frames))
    for name, size in SPRITE_PLATFORMS:
        for sprite in sprites:
            setattr(sprite, name, [read_exact(f, size) for _ in range(sprite.frames)])
    logger.debug(f"Decoded {count} sprites")
    return sprites


def encode_sprites(f, sprites: list[Sprite]) -> None:
    write_count(f, len(sprites), 'sprites')
    for sprite in sprites:
        write_u8(f, sprite.offset)
        write_u8(f, sprite.frames)
    for name, size in SPRITE_PLATFORMS:
        for sprite in sprites:
            for i in range(sprite.frames):
                write_fixed(f, sprite.frame(name, i), size)


def parse_sprite(lines: list[str], sprite_id: int) -> Sprite | None:
    """Build a Sprite from a DEFINESPRITE definition.

    The header gives the frame count; each frame is 32 values, usually
    written as two lines of 16.
    """
    m = SPRITE_RE.search(lines[0])
    if not m:
        logger.debug(f"Skipping malformed sprite header: {lines[0]!r}")
        return None
    frames = int(m.group(1)) if m.group(1).isascii() and m.group(1).isdigit() else 1
    size = PLATFORM_SIZES['spectrum']
    data = parse_numbers(lines[1:])
    if len(data) != frames * size:
        logger.warning(f"Sprite {sprite_id}: {len(data)} data values, "
                       f"expected {frames * size}")
    sprite = blank_sprite(sprite_id, frames)
    sprite.spectrum = [fit_bytes(data[i * size:(i + 1) * size], size)
                       for i in range(frames)]
    return sprite
