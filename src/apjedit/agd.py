"""AGD source (.agd) import: merge text definitions into a project.

The source is read line by line. A directive keyword opens a definition;
its body lines are buffered until the next directive, a blank line, or
the message/event sections, at which point the buffer is parsed into the
matching family. Window and controls definitions are single lines and
are applied immediately.

Each family can be ignored, or overwritten (cleared the first time the
source touches it) instead of appended to. When blocks are appended,
screens imported afterwards have their block ids shifted past the blocks
that were already in the project.
"""

import logging
from collections import Counter
from dataclasses import dataclass, field
from enum import Enum

from .blocks import parse_block
from .font import apply_font, apply_palette, default_font, default_palette
from .map import GameMap, parse_map
from .objects import parse_object
from .screens import parse_screen, shift_cells
from .sprites import parse_sprite, calc_offsets
from .window import Window, Keys, parse_window, parse_controls

logger = logging.getLogger(__name__)


class Family(Enum):
    WINDOW = 'window'
    KEYS = 'keys'
    BLOCKS = 'blocks'
    SPRITES = 'sprites'
    OBJECTS = 'objects'
    SCREENS = 'screens'
    MAP = 'map'
    FONT = 'font'
    PALETTE = 'palette'


# (keyword, family, matched as prefix rather than anywhere in the line)
DIRECTIVES = (
    ('DEFINEWINDOW', Family.WINDOW, False),
    ('DEFINECONTROLS', Family.KEYS, False),
    ('DEFINEBLOCK', Family.BLOCKS, False),
    ('DEFINESPRITE', Family.SPRITES, False),
    ('DEFINEOBJECT', Family.OBJECTS, False),
    ('DEFINESCREEN', Family.SCREENS, False),
    ('MAP', Family.MAP, True),
    ('DEFINEFONT', Family.FONT, True),
    ('DEFINEPALETTE', Family.PALETTE, True),
)
TERMINATORS = ('DEFINEMESSAGES', 'EVENT')
SINGLE_LINE = {Family.WINDOW, Family.KEYS}


def directive_family(line: str) -> Family | None:
    """The family whose definition this line opens, if any."""
    for keyword, family, prefix in DIRECTIVES:
        if line.startswith(keyword) if prefix else keyword in line:
            return family
    return None


def parse_family(name: str) -> Family:
    try:
        return Family(name.lower())
    except ValueError:
        valid = ', '.join(f.value for f in Family)
        raise ValueError(f"Unknown family '{name}'. Valid: {valid}") from None


@dataclass
class FamilyOptions:
    ignore: bool = False
    overwrite: bool = False


@dataclass
class ImportOptions:
    families: dict[Family, FamilyOptions] = field(
        default_factory=lambda: {family: FamilyOptions() for family in Family})

    def __getitem__(self, family: Family) -> FamilyOptions:
        return self.families[family]

    @classmethod
    def build(cls, overwrite: bool = False, only=None, skip=None) -> 'ImportOptions':
        """Options from family names: import only / skip the named families."""
        options = cls()
        keep = {parse_family(n) for n in only} if only else set(Family)
        drop = {parse_family(n) for n in skip} if skip else set()
        for family in Family:
            options.families[family] = FamilyOptions(
                ignore=family not in keep or family in drop, overwrite=overwrite)
        return options


@dataclass
class Buffering:
    """A definition being collected: its family and the lines seen so far."""
    family: Family
    lines: list[str] = field(default_factory=list)
    ignored: bool = False


class AgdImporter:
    """Feeds AGD source lines into a project."""

    def __init__(self, project, options: ImportOptions | None = None):
        self.project = project
        self.options = options or ImportOptions()
        self.state: Buffering | None = None
        self.touched: set[Family] = set()
        self.block_offset = 0
        self.counts: Counter = Counter()

    def feed(self, raw_line: str) -> None:
        line = raw_line.strip()
        if line.startswith(TERMINATORS):
            self.flush()
            return

        family = directive_family(line)
        if family is not None:
            self.flush()
            if self.options[family].ignore:
                logger.debug(f"Ignoring {family.value} definition: {line!r}")
                self.state = Buffering(family, ignored=True)
            elif family in SINGLE_LINE:
                self.first_touch(family)
                self.apply(family, [line])
            else:
                self.first_touch(family)
                self.state = Buffering(family, [line])
            return

        if line and self.state is not None and not self.state.ignored:
            self.state.lines.append(line)
        else:
            self.flush()

    def flush(self) -> None:
        state, self.state = self.state, None
        if state is None or state.ignored or not state.lines:
            return
        self.apply(state.family, state.lines)

    def finish(self) -> Counter:
        """Flush the pending definition and fill in defaults for untouched families."""
        self.flush()
        self.project.populate_defaults()
        calc_offsets(self.project.sprites)
        return self.counts

    def first_touch(self, family: Family) -> None:
        if family in self.touched:
            return
        self.touched.add(family)
        opts = self.options[family]
        logger.info(f"Importing {family.value} ({'overwrite' if opts.overwrite else 'merge'})")
        if opts.overwrite:
            self.reset(family)
        elif family is Family.BLOCKS:
            self.block_offset = len(self.project.blocks)

    def reset(self, family: Family) -> None:
        project = self.project
        if family is Family.WINDOW:
            project.window = Window()
        elif family is Family.KEYS:
            project.keys = Keys()
        elif family is Family.BLOCKS:
            project.blocks = []
        elif family is Family.SPRITES:
            project.sprites = []
        elif family is Family.OBJECTS:
            project.objects = []
        elif family is Family.SCREENS:
            project.screens = []
            project.placements = []
        elif family is Family.MAP:
            project.game_map = GameMap()
        elif family is Family.FONT:
            project.font = default_font()
        elif family is Family.PALETTE:
            project.palette = default_palette()

    def apply(self, family: Family, lines: list[str]) -> None:
        """Parse one complete definition into the project."""
        project = self.project
        state = project.state

        if family is Family.WINDOW:
            window = parse_window(lines[0])
            if window is None:
                return
            project.window = window
            project.screens = []
            project.placements = []
            state.window = True
            state.screens = False

        elif family is Family.KEYS:
            project.keys = parse_controls(lines[0])
            state.keys = True

        elif family is Family.BLOCKS:
            block = parse_block(lines, len(project.blocks))
            if block is None:
                return
            project.blocks.append(block)
            state.blocks = True

        elif family is Family.SPRITES:
            sprite = parse_sprite(lines, len(project.sprites))
            if sprite is None:
                return
            project.sprites.append(sprite)
            calc_offsets(project.sprites)
            state.sprites = True

        elif family is Family.OBJECTS:
            obj = parse_object(lines, len(project.objects))
            if obj is None:
                return
            project.objects.append(obj)
            state.objects = True

        elif family is Family.SCREENS:
            screen, placements = parse_screen(lines, len(project.screens), project.window)
            if self.block_offset and not self.options[Family.BLOCKS].overwrite:
                shift_cells(screen, self.block_offset)
            project.screens.append(screen)
            project.placements.extend(placements)
            state.screens = True
            state.placements = True

        elif family is Family.MAP:
            project.game_map = parse_map(lines)
            state.map = True

        elif family is Family.FONT:
            project.font = apply_font(project.font, lines)
            state.font = True

        elif family is Family.PALETTE:
            project.palette = apply_palette(project.palette, lines)
            state.palette = True

        self.counts[family] += 1

    def run(self, lines) -> Counter:
        for line in lines:
            self.feed(line)
        return self.finish()


def import_agd_text(project, text: str, options: ImportOptions | None = None) -> Counter:
    """Merge AGD source text into project. Returns definitions imported per family."""
    return AgdImporter(project, options).run(text.splitlines())


def import_agd(project, path: str, options: ImportOptions | None = None) -> Counter:
    """Merge an AGD source file into project."""
    with open(path, 'r', encoding='latin-1') as f:
        return AgdImporter(project, options).run(f)
