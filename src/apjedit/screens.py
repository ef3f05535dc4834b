"""Screens (rooms) and the sprite placements that populate them.

Screens section: count (1 byte), then height x width block ids per screen,
with the dimensions taken from the window.

Sprite placement section: for every screen in order, its placements as
(type, image, unused, x, y) byte runs followed by a 0xFF terminator.
"""

import logging
from dataclasses import dataclass, field

from .constants import (
    SPRITE_INFO_ENTRY_SIZE, SPRITE_INFO_TERMINATOR, SPRITE_INFO_UNUSED_DEFAULT,
)
from .fileutil import (
    read_exact, read_u8, write_u8, write_count, chunk_grid, fit_grid,
    flatten_grid, parse_numbers,
)
from .window import Window

logger = logging.getLogger(__name__)


@dataclass
class Screen:
    id: int = 0
    grid: list[list[int]] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {'id': self.id, 'grid': [list(row) for row in self.grid]}

    def display(self) -> None:
        print(f"  Screen {self.id:3d}")
        for row in self.grid:
            print('    ' + ' '.join(f'{cell:3d}' for cell in row))


@dataclass
class SpritePlacement:
    """A sprite positioned on a screen."""
    type: int = 0
    image: int = 0
    unused: int = SPRITE_INFO_UNUSED_DEFAULT
    screen: int = 0
    x: int = 0
    y: int = 0

    def to_dict(self) -> dict:
        return {'type': self.type, 'image': self.image, 'unused': self.unused,
                'screen': self.screen, 'x': self.x, 'y': self.y}


def blank_screen(window: Window, screen_id: int = 0) -> Screen:
    return Screen(id=screen_id, grid=fit_grid([], window.height, window.width))


def decode_screens(f, window: Window) -> list[Screen]:
    count = read_u8(f)
    screens = []
    for i in range(count):
        data = read_exact(f, window.cells)
        screens.append(Screen(id=i, grid=chunk_grid(data, window.height, window.width)))
    logger.debug(f"Decoded {count} screens of {window.height}x{window.width}")
    return screens


def encode_screens(f, screens: list[Screen], window: Window) -> None:
    write_count(f, len(screens), 'screens')
    for screen in screens:
        f.write(flatten_grid(fit_grid(screen.grid, window.height, window.width)))


def decode_placements(f, screen_count: int) -> list[SpritePlacement]:
    placements = []
    for screen in range(screen_count):
        while True:
            first = read_u8(f)
            if first == SPRITE_INFO_TERMINATOR:
                break
            image, unused, x, y = read_exact(f, SPRITE_INFO_ENTRY_SIZE - 1)
            placements.append(SpritePlacement(first, image, unused, screen, x, y))
    return placements


def encode_placements(f, placements: list[SpritePlacement], screen_count: int) -> None:
    """Write each screen's placements and exactly one terminator per screen."""
    by_screen = {}
    for p in placements:
        by_screen.setdefault(p.screen, []).append(p)
    for screen in range(screen_count):
        for p in by_screen.pop(screen, []):
            f.write(bytes([p.type & 0xFF, p.image & 0xFF, p.unused & 0xFF,
                           p.x & 0xFF, p.y & 0xFF]))
        write_u8(f, SPRITE_INFO_TERMINATOR)
    for screen, dropped in by_screen.items():
        logger.warning(f"Dropping {len(dropped)} sprite placements on missing screen {screen}")


def parse_screen(lines: list[str], screen_id: int,
                 window: Window) -> tuple[Screen, list[SpritePlacement]]:
    """Build a screen from a DEFINESCREEN definition.

    Each body line is one row of block ids; SPRITEPOSITION lines
    (type image x y) place sprites on the new screen.
    """
    grid = []
    placements = []
    for line in lines[1:]:
        if line.upper().startswith('SPRITEPOSITION'):
            values = parse_numbers(line)
            if len(values) < 4:
                logger.debug(f"Skipping malformed sprite position: {line!r}")
                continue
            sprite_type, image, x, y = values[:4]
            placements.append(SpritePlacement(type=sprite_type, image=image,
                                              screen=screen_id, x=x, y=y))
            continue
        row = parse_numbers(line)
        if row:
            grid.append(row)
    if len(grid) != window.height:
        logger.warning(f"Screen {screen_id}: {len(grid)} rows, window height is {window.height}")
    screen = Screen(id=screen_id, grid=fit_grid(grid, window.height, window.width))
    return screen, placements


def shift_cells(screen: Screen, offset: int) -> None:
    """Add offset to every block id on the screen, wrapping at a byte."""
    screen.grid = [[(cell + offset) & 0xFF for cell in row] for row in screen.grid]
