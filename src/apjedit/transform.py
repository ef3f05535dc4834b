"""Structural edits: 90-degree rotation and reordering.

Rotation works on the Spectrum pixel data (8x8 blocks, 16x16 sprite
frames). Reordering moves records to new indices and rewrites every
reference to them: screen cells for blocks, sprite positions for
sprites, and the map plus sprite positions for screens.
"""

import logging

from .blocks import Block
from .constants import BLOCK_ROWS, BLOCK_ATTR_INDEX, SPRITE_SIZE, MAX_COUNT
from .fileutil import fit_bytes
from .sprites import blank_sprite, calc_offsets

logger = logging.getLogger(__name__)


# ============================================================================
# Rotation
# ============================================================================

def bits_to_grid(data: bytes, size: int) -> list[list[int]]:
    """Unpack a 1-bpp square image (MSB leftmost) into a size x size grid."""
    row_bytes = size // 8
    grid = []
    for y in range(size):
        row = []
        for x in range(size):
            b = data[y * row_bytes + x // 8]
            row.append((b >> (7 - x % 8)) & 1)
        grid.append(row)
    return grid


def grid_to_bits(grid: list[list[int]]) -> bytes:
    out = bytearray()
    for row in grid:
        for i in range(0, len(row), 8):
            b = 0
            for bit in row[i:i + 8]:
                b = (b << 1) | bit
            out.append(b)
    return bytes(out)


def rotate_grid(grid: list[list[int]], clockwise: bool) -> list[list[int]]:
    """Rotate a square grid a quarter turn.

    Counter-clockwise moves (x, y) to row n-1-x, column y; clockwise
    moves it to row x, column n-1-y.
    """
    n = len(grid)
    rotated = [[0] * n for _ in range(n)]
    for y in range(n):
        for x in range(n):
            if clockwise:
                rotated[x][n - 1 - y] = grid[y][x]
            else:
                rotated[n - 1 - x][y] = grid[y][x]
    return rotated


def rotate_tile(data: bytes, clockwise: bool = False) -> bytes:
    """Rotate an 8x8 block image; the trailing attribute byte is kept."""
    data = fit_bytes(data, BLOCK_ATTR_INDEX + 1)
    pixels = rotate_grid(bits_to_grid(data[:BLOCK_ROWS], 8), clockwise)
    return grid_to_bits(pixels) + data[BLOCK_ATTR_INDEX:]


def rotate_sprite_frame(data: bytes, clockwise: bool = False) -> bytes:
    """Rotate a 16x16 sprite frame (two bytes per row)."""
    data = fit_bytes(data, SPRITE_SIZE * 2)
    return grid_to_bits(rotate_grid(bits_to_grid(data, SPRITE_SIZE), clockwise))


def _check_index(index: int, count: int, what: str) -> None:
    if not 0 <= index < count:
        raise IndexError(f"{what} index out of range: {index} (have {count})")


def _check_room(count: int, what: str) -> None:
    if count >= MAX_COUNT:
        raise ValueError(f"Cannot add another {what}: project already holds {count}")


def rotate_block(project, index: int, clockwise: bool = False, retain: bool = False) -> int:
    """Rotate a block. Returns the index holding the rotated image.

    With retain, the original is kept and the rotation is appended as a
    new block whose other platform data is blank.
    """
    _check_index(index, len(project.blocks), 'Block')
    source = project.blocks[index]
    rotated = rotate_tile(source.spectrum, clockwise)
    if not retain:
        source.spectrum = rotated
        return index
    _check_room(len(project.blocks), 'block')
    new_index = len(project.blocks)
    project.blocks.append(Block(id=new_index, block_type=source.block_type, spectrum=rotated))
    return new_index


def rotate_sprite(project, index: int, clockwise: bool = False, retain: bool = False) -> int:
    """Rotate every frame of a sprite. Returns the index holding the rotated frames."""
    _check_index(index, len(project.sprites), 'Sprite')
    source = project.sprites[index]
    frames = [rotate_sprite_frame(source.frame('spectrum', i), clockwise)
              for i in range(source.frames)]
    if not retain:
        source.spectrum = frames
        return index
    _check_room(len(project.sprites), 'sprite')
    new_index = len(project.sprites)
    sprite = blank_sprite(new_index, source.frames)
    sprite.spectrum = frames
    project.sprites.append(sprite)
    calc_offsets(project.sprites)
    return new_index


# ============================================================================
# Reordering
# ============================================================================

def reindex(items: list, order: list[int], offset: int = 0) -> tuple[list, dict[int, int]]:
    """Reorder items after the first offset entries.

    order lists positions relative to offset; the named items come first
    in that order, the rest follow in their original order. Returns the
    new list and the old index -> new index mapping.
    """
    count = len(items)
    if not 0 <= offset <= count:
        raise IndexError(f"Offset out of range: {offset} (have {count})")
    seen = set()
    for i in order:
        if not 0 <= i < count - offset:
            raise IndexError(f"Index out of range: {i} (have {count - offset} after offset {offset})")
        if i in seen:
            raise IndexError(f"Index listed twice: {i}")
        seen.add(i)

    positions = list(range(offset))
    positions += [offset + i for i in order]
    positions += [offset + i for i in range(count - offset) if i not in seen]
    mapping = {old: new for new, old in enumerate(positions)}
    return [items[old] for old in positions], mapping


def _renumber(items: list) -> None:
    for i, item in enumerate(items):
        item.id = i


def reorder_blocks(project, order: list[int], offset: int = 0) -> dict[int, int]:
    """Reorder blocks and remap every screen cell to the moved block ids."""
    project.blocks, mapping = reindex(project.blocks, order, offset)
    _renumber(project.blocks)
    for screen in project.screens:
        screen.grid = [[mapping.get(cell, cell) for cell in row] for row in screen.grid]
    logger.debug(f"Reordered {len(project.blocks)} blocks")
    return mapping


def reorder_sprites(project, order: list[int], offset: int = 0) -> dict[int, int]:
    """Reorder sprites and remap the image of every sprite position."""
    project.sprites, mapping = reindex(project.sprites, order, offset)
    _renumber(project.sprites)
    calc_offsets(project.sprites)
    for p in project.placements:
        p.image = mapping.get(p.image, p.image)
    return mapping


def reorder_screens(project, order: list[int], offset: int = 0) -> dict[int, int]:
    """Reorder screens, remapping the map grid, start screen and sprite positions."""
    project.screens, mapping = reindex(project.screens, order, offset)
    _renumber(project.screens)
    game_map = project.game_map
    game_map.grid = [[mapping.get(cell, cell) for cell in row] for row in game_map.grid]
    game_map.start_screen = mapping.get(game_map.start_screen, game_map.start_screen)
    for p in project.placements:
        p.screen = mapping.get(p.screen, p.screen)
    project.placements.sort(key=lambda p: p.screen)
    return mapping
