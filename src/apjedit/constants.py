"""AGD project file constants.

Section sizes, platform tables and default values for the .apj binary
format. Every multi-platform family is written platform-grouped in the
order given by its platform table.
"""

# ============================================================================
# Header
# ============================================================================

HEADER_MAGIC = b'AGD*'
HEADER_VERSION = 10

# ============================================================================
# Window / keys / lives+score
# ============================================================================

DEFAULT_WINDOW = (1, 2, 22, 22)     # top, left, height, width

LIVES_SCORE_SIZE = 10
LIVES_SCORE_FIELDS = (
    'score_top', 'score_left',
    'lives_top', 'lives_left',
    'high_top', 'high_left',
    'time_top', 'time_left',
    'energy_top', 'energy_left',
)
DEFAULT_LIVES_SCORE = (2, 25, 6, 25, 10, 25, 25, 25, 237, 25)

KEYS_SIZE = 11
KEY_NAMES = (
    'up', 'down', 'left', 'right', 'fire',
    'fire2', 'fire3', 'option1', 'option2', 'option3', 'option4',
)
DEFAULT_KEYS = (87, 83, 65, 68, 32, 74, 72, 49, 50, 51, 52)

# ============================================================================
# Blocks
# ============================================================================

# Per-platform block data sizes, in write order.
BLOCK_PLATFORMS = (
    ('spectrum', 9),
    ('timex', 16),
    ('cpc', 24),
    ('atom', 8),
    ('msx', 16),
    ('atom_colour', 8),
)
BLOCK_ROWS = 8
BLOCK_ATTR_INDEX = 8
DEFAULT_BLOCK_ATTR = 71

BLOCK_TYPES = {
    0: 'EMPTYBLOCK',
    1: 'PLATFORMBLOCK',
    2: 'WALLBLOCK',
    3: 'LADDERBLOCK',
    4: 'FODDERBLOCK',
    5: 'DEADLYBLOCK',
}
BLOCK_TYPE_CODES = {name: code for code, name in BLOCK_TYPES.items()}

# ============================================================================
# Sprites
# ============================================================================

# Per-platform bytes per sprite frame, in write order.
SPRITE_PLATFORMS = (
    ('spectrum', 32),
    ('timex', 32),
    ('cpc', 80),
    ('atom', 32),
    ('atom_colour', 32),
    ('vz_colour', 16),
)
SPRITE_SIZE = 16          # 16x16 pixels, two bytes per row

# ============================================================================
# Objects
# ============================================================================

OBJECT_PLATFORMS = (
    ('spectrum', 36),
    ('timex', 35),
    ('cpc', 67),
    ('atom', 35),
    ('msx', 67),
    ('atom_colour', 35),
    ('vz_colour', 19),
)
OBJECT_HEADER_FIELDS = ('attr', 'room', 'x', 'y')

# ============================================================================
# Screens / map / sprite placements
# ============================================================================

NO_SCREEN = 0xFF
DEFAULT_MAP_HEIGHT = 10
DEFAULT_MAP_WIDTH = 16
DEFAULT_MAP_START_ROW = 4
DEFAULT_MAP_START_COL = 7
DEFAULT_MAP_START_SCREEN = 0

SPRITE_INFO_ENTRY_SIZE = 5   # type, image, unused, x, y
SPRITE_INFO_TERMINATOR = 0xFF
SPRITE_INFO_UNUSED_DEFAULT = 15

# ============================================================================
# Font / palette / trailer
# ============================================================================

FONT_GLYPHS = 96
FONT_GLYPH_SIZE = 8

PALETTE_SIZE = 16
DEFAULT_ULA_PALETTE = (0, 66, 24, 146, 195, 152, 252, 109,
                       0, 44, 156, 15, 195, 131, 190, 253)

ASM_PATH_SIZE = 256

MAX_COUNT = 255


def block_type_name(code: int) -> str:
    """Return the AGD name for a block type code."""
    return BLOCK_TYPES.get(code, f'Unknown({code})')


def pixel_rows(data: bytes, row_bytes: int = 1) -> list[str]:
    """Render 1-bpp pixel rows as '#'/'.' strings, MSB leftmost."""
    rows = []
    for i in range(0, len(data) - row_bytes + 1, row_bytes):
        row = ''
        for b in data[i:i + row_bytes]:
            row += ''.join('#' if b & (0x80 >> bit) else '.' for bit in range(8))
        rows.append(row)
    return rows
