"""World map: the grid of screen ids the player moves between.

Binary section layout:
  height, width, start row, start column (1 byte each)
  height x width screen ids (255 = no screen)

The start screen itself is not stored; it is the screen id found at the
start row and column.
"""

import logging
from dataclasses import dataclass, field

from .constants import (
    NO_SCREEN, DEFAULT_MAP_HEIGHT, DEFAULT_MAP_WIDTH, DEFAULT_MAP_START_ROW,
    DEFAULT_MAP_START_COL, DEFAULT_MAP_START_SCREEN,
)
from .fileutil import read_exact, chunk_grid, fit_grid, flatten_grid, parse_numbers

logger = logging.getLogger(__name__)


@dataclass
class GameMap:
    height: int = 0
    width: int = 0
    start_row: int = 0
    start_col: int = 0
    start_screen: int = NO_SCREEN
    grid: list[list[int]] = field(default_factory=list)

    def cell(self, row: int, col: int) -> int:
        if 0 <= row < len(self.grid) and 0 <= col < len(self.grid[row]):
            return self.grid[row][col]
        return NO_SCREEN

    def locate(self, screen_id: int) -> tuple[int, int] | None:
        """Row and column of the first cell holding screen_id (row-major)."""
        for r, row in enumerate(self.grid):
            for c, cell in enumerate(row):
                if cell == screen_id:
                    return r, c
        return None

    def to_dict(self) -> dict:
        return {
            'height': self.height, 'width': self.width,
            'start_row': self.start_row, 'start_col': self.start_col,
            'start_screen': self.start_screen,
            'grid': [list(row) for row in self.grid],
        }

    def display(self) -> None:
        print(f"  Map {self.height}x{self.width}  start screen {self.start_screen} "
              f"at row {self.start_row}, col {self.start_col}")
        for row in self.grid:
            print('    ' + ' '.join('  .' if c == NO_SCREEN else f'{c:3d}' for c in row))


def default_map() -> GameMap:
    grid = fit_grid([], DEFAULT_MAP_HEIGHT, DEFAULT_MAP_WIDTH, fill=NO_SCREEN)
    grid[DEFAULT_MAP_START_ROW][DEFAULT_MAP_START_COL] = DEFAULT_MAP_START_SCREEN
    return GameMap(DEFAULT_MAP_HEIGHT, DEFAULT_MAP_WIDTH, DEFAULT_MAP_START_ROW,
                   DEFAULT_MAP_START_COL, DEFAULT_MAP_START_SCREEN, grid)


def decode_map(f) -> GameMap:
    height, width, start_row, start_col = read_exact(f, 4)
    grid = chunk_grid(read_exact(f, height * width), height, width)
    game_map = GameMap(height, width, start_row, start_col, NO_SCREEN, grid)
    game_map.start_screen = game_map.cell(start_row, start_col)
    return game_map


def encode_map(f, game_map: GameMap) -> None:
    f.write(bytes([game_map.height & 0xFF, game_map.width & 0xFF,
                   game_map.start_row & 0xFF, game_map.start_col & 0xFF]))
    f.write(flatten_grid(fit_grid(game_map.grid, game_map.height, game_map.width,
                                  fill=NO_SCREEN)))


def parse_map(lines: list[str]) -> GameMap:
    """Build the map from a MAP ... ENDMAP definition.

    Recognized lines: 'MAP WIDTH w', 'STARTSCREEN s', rows of screen ids
    and 'ENDMAP'. The start row and column are where the start screen
    first appears.
    """
    width = None
    start_screen = 0
    rows = []
    for line in lines:
        text = line.strip()
        if text.upper().startswith('MAP'):
            text = text[3:].strip()
        key = text.upper()
        if not text:
            continue
        if key.startswith('ENDMAP'):
            break
        if key.startswith('WIDTH'):
            values = parse_numbers(text[5:])
            width = values[0] if values else width
        elif key.startswith('STARTSCREEN'):
            values = parse_numbers(text[11:])
            start_screen = values[0] if values else start_screen
        else:
            row = parse_numbers(text)
            if row:
                rows.append(row)
    if width is None:
        width = max((len(r) for r in rows), default=0)
    grid = fit_grid(rows, len(rows), width, fill=NO_SCREEN)
    game_map = GameMap(len(grid), width, 0, 0, start_screen, grid)
    where = game_map.locate(start_screen)
    if where is None:
        logger.warning(f"Start screen {start_screen} does not appear on the map")
    else:
        game_map.start_row, game_map.start_col = where
    return game_map
