"""AGD project (.apj) model, codec and project-level commands.

Section order in the file:
  header, window, lives/score, keys, blocks, sprites, objects, screens,
  map, sprite placements, font, palette, enterprise bias, asm path
"""

import argparse
import io
import logging
import os
import shutil
import sys
from dataclasses import dataclass, field, fields

from .agd import ImportOptions, import_agd
from .blocks import Block, decode_blocks, encode_blocks, default_block
from .fileutil import backup_file
from .font import decode_font, encode_font, decode_palette, encode_palette, default_font, default_palette
from .header import (
    Header, LivesScore, decode_header, encode_header, decode_lives_score,
    encode_lives_score, decode_enterprise_bias, encode_enterprise_bias,
    decode_asm_path, encode_asm_path,
)
from .json_export import export_json
from .map import GameMap, decode_map, encode_map, default_map
from .objects import GameObject, decode_objects, encode_objects
from .screens import (
    Screen, SpritePlacement, decode_screens, encode_screens, decode_placements,
    encode_placements, blank_screen,
)
from .sprites import Sprite, decode_sprites, encode_sprites, blank_sprite, calc_offsets
from .window import Window, Keys, decode_window, encode_window, decode_keys, encode_keys

logger = logging.getLogger(__name__)


@dataclass
class ProjectState:
    """Which families have been populated by a decode or import session."""
    header: bool = False
    window: bool = False
    lives_score: bool = False
    keys: bool = False
    blocks: bool = False
    sprites: bool = False
    objects: bool = False
    screens: bool = False
    map: bool = False
    placements: bool = False
    font: bool = False
    palette: bool = False
    enterprise_bias: bool = False
    asm_path: bool = False

    def mark_all(self) -> None:
        for f in fields(self):
            setattr(self, f.name, True)


@dataclass
class Project:
    header: Header = field(default_factory=Header)
    window: Window = field(default_factory=Window)
    lives_score: LivesScore = field(default_factory=LivesScore)
    keys: Keys = field(default_factory=Keys)
    blocks: list[Block] = field(default_factory=list)
    sprites: list[Sprite] = field(default_factory=list)
    objects: list[GameObject] = field(default_factory=list)
    screens: list[Screen] = field(default_factory=list)
    game_map: GameMap = field(default_factory=GameMap)
    placements: list[SpritePlacement] = field(default_factory=list)
    font: list[bytes] = field(default_factory=default_font)
    palette: list[int] = field(default_factory=default_palette)
    enterprise_bias: int = 0
    asm_path: str = ''
    state: ProjectState = field(default_factory=ProjectState, compare=False, repr=False)

    @classmethod
    def blank(cls) -> 'Project':
        """A new project holding one default block, sprite, object and screen."""
        project = cls()
        project.populate_defaults()
        return project

    def populate_defaults(self) -> None:
        """Give every family that was never populated its default content."""
        if not self.state.screens and not self.screens:
            self.screens.append(blank_screen(self.window))
        if not self.state.map and not self.game_map.grid:
            self.game_map = default_map()
        if not self.state.objects and not self.objects:
            self.objects.append(GameObject())
        if not self.state.sprites and not self.sprites:
            self.sprites.append(blank_sprite())
        if not self.state.blocks and not self.blocks:
            self.blocks.append(default_block())
        calc_offsets(self.sprites)

    def stats(self) -> dict:
        return {
            'version': self.header.version,
            'window': f'{self.window.height}x{self.window.width}',
            'blocks': len(self.blocks),
            'sprites': len(self.sprites),
            'sprite_frames': sum(s.frames for s in self.sprites),
            'objects': len(self.objects),
            'screens': len(self.screens),
            'sprite_positions': len(self.placements),
            'map': f'{self.game_map.height}x{self.game_map.width}',
        }

    def to_dict(self) -> dict:
        return {
            'header': self.header.to_dict(),
            'window': self.window.to_dict(),
            'lives_score': self.lives_score.to_dict(),
            'keys': self.keys.to_dict(),
            'blocks': [b.to_dict() for b in self.blocks],
            'sprites': [s.to_dict() for s in self.sprites],
            'objects': [o.to_dict() for o in self.objects],
            'screens': [s.to_dict() for s in self.screens],
            'map': self.game_map.to_dict(),
            'sprite_positions': [p.to_dict() for p in self.placements],
            'font': [list(g) for g in self.font],
            'palette': list(self.palette),
            'enterprise_bias': self.enterprise_bias,
            'asm_path': self.asm_path,
        }


# ============================================================================
# Codec
# ============================================================================

def decode(f) -> Project:
    """Read a whole project from a binary stream."""
    project = Project()
    project.header = decode_header(f)
    project.window = decode_window(f)
    project.lives_score = decode_lives_score(f)
    project.keys = decode_keys(f)
    project.blocks = decode_blocks(f)
    project.sprites = decode_sprites(f)
    project.objects = decode_objects(f)
    project.screens = decode_screens(f, project.window)
    project.game_map = decode_map(f)
    project.placements = decode_placements(f, len(project.screens))
    project.font = decode_font(f)
    project.palette = decode_palette(f)
    project.enterprise_bias = decode_enterprise_bias(f)
    project.asm_path = decode_asm_path(f)
    project.state.mark_all()
    return project


def encode(project: Project, f) -> None:
    """Write a whole project to a binary stream, in file section order."""
    encode_header(f, project.header)
    encode_window(f, project.window)
    encode_lives_score(f, project.lives_score)
    encode_keys(f, project.keys)
    encode_blocks(f, project.blocks)
    encode_sprites(f, project.sprites)
    encode_objects(f, project.objects)
    encode_screens(f, project.screens, project.window)
    encode_map(f, project.game_map)
    encode_placements(f, project.placements, len(project.screens))
    encode_font(f, project.font)
    encode_palette(f, project.palette)
    encode_enterprise_bias(f, project.enterprise_bias)
    encode_asm_path(f, project.asm_path)


def decode_bytes(data: bytes) -> Project:
    return decode(io.BytesIO(data))


def encode_bytes(project: Project) -> bytes:
    buf = io.BytesIO()
    encode(project, buf)
    return buf.getvalue()


def load_project(path: str) -> Project:
    with open(path, 'rb') as f:
        project = decode(f)
    logger.debug(f"Loaded {path}: {project.stats()}")
    return project


def save_project(project: Project, path: str) -> None:
    data = encode_bytes(project)
    with open(path, 'wb') as f:
        f.write(data)


def write_project(project: Project, path: str, args) -> None:
    """Save honouring the --dry-run / --backup / --output options."""
    if getattr(args, 'dry_run', False):
        print("  (dry run - no file written)")
        return
    output = getattr(args, 'output', None) or path
    if getattr(args, 'backup', False) and output == path and os.path.isfile(path):
        backup_file(path)
    save_project(project, output)
    print(f"  Written: {output}")


def open_project(path: str) -> Project:
    """Load a project for a CLI command, exiting with an error message on failure."""
    if not os.path.isfile(path):
        print(f"Error: project file not found: {path}", file=sys.stderr)
        sys.exit(1)
    try:
        return load_project(path)
    except EOFError as e:
        print(f"Error: {path} is truncated or not an AGD project ({e})", file=sys.stderr)
        sys.exit(1)


# ============================================================================
# Commands
# ============================================================================

def cmd_view(args) -> None:
    project = open_project(args.file)
    if args.json:
        export_json(project.to_dict(), args.output)
        return

    print(f"\n=== AGD Project: {os.path.basename(args.file)} ===\n")
    print(f"  Magic:    {project.header.magic!r}  version {project.header.version}")
    w = project.window
    print(f"  Window:   top={w.top} left={w.left} height={w.height} width={w.width}")
    print(f"  Asm path: {project.asm_path or '(none)'}")
    print(f"\n  --- Lives / Score ---")
    project.lives_score.display()
    print(f"\n  --- Controls ---")
    project.keys.display()
    print(f"\n  --- Contents ---")
    for key, value in project.stats().items():
        print(f"  {key:<17s} {value}")
    print()
    project.game_map.display()
    print()


def cmd_stats(args) -> None:
    project = open_project(args.file)
    stats = project.stats()
    if args.json:
        export_json(stats, args.output)
        return
    for key, value in stats.items():
        print(f"  {key:<17s} {value}")


def cmd_create(args) -> None:
    if os.path.exists(args.file) and not args.force:
        print(f"Error: {args.file} already exists (use --force)", file=sys.stderr)
        sys.exit(1)
    save_project(Project.blank(), args.file)
    print(f"  Created: {args.file}")


def cmd_import(args) -> None:
    """Merge an AGD source file into a project, creating the project when missing."""
    if not os.path.isfile(args.source):
        print(f"Error: source file not found: {args.source}", file=sys.stderr)
        sys.exit(1)

    try:
        project = load_project(args.file)
    except (OSError, EOFError) as e:
        print(f"  Warning: starting from a blank project ({e})", file=sys.stderr)
        project = Project()

    try:
        options = ImportOptions.build(overwrite=args.replace, only=args.only, skip=args.skip)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    counts = import_agd(project, args.source, options)
    print(f"  Imported {args.source}:")
    for family, count in counts.items():
        print(f"    {family.value:<10s} {count}")
    for key, value in project.stats().items():
        print(f"  {key:<17s} {value}")
    write_project(project, args.file, args)


def cmd_backup(args) -> None:
    if not os.path.isfile(args.file):
        print(f"Error: project file not found: {args.file}", file=sys.stderr)
        sys.exit(1)
    print(f"  Backup: {backup_file(args.file)}")


def cmd_restore(args) -> None:
    bak = args.file + '.bak'
    if not os.path.isfile(bak):
        print(f"Error: no backup found: {bak}", file=sys.stderr)
        sys.exit(1)
    shutil.copy2(bak, args.file)
    print(f"  Restored {args.file} from {bak}")


def _add_project_commands(sub) -> None:
    p_view = sub.add_parser('view', help='Show project summary')
    p_view.add_argument('file', help='Project (.apj) file')
    p_view.add_argument('--json', action='store_true', help='Output as JSON')
    p_view.add_argument('--output', '-o', help='Output file (for --json)')

    p_stats = sub.add_parser('stats', help='Count project contents')
    p_stats.add_argument('file', help='Project (.apj) file')
    p_stats.add_argument('--json', action='store_true', help='Output as JSON')
    p_stats.add_argument('--output', '-o', help='Output file (for --json)')

    p_create = sub.add_parser('create', help='Create a blank project')
    p_create.add_argument('file', help='Project (.apj) file to create')
    p_create.add_argument('--force', action='store_true', help='Overwrite an existing file')

    p_import = sub.add_parser('import', help='Merge an AGD source file into the project')
    p_import.add_argument('file', help='Project (.apj) file')
    p_import.add_argument('source', help='AGD source file')
    p_import.add_argument('--output', '-o', help='Output file (default: overwrite project)')
    p_import.add_argument('--replace', action='store_true',
                          help='Replace each imported family instead of appending')
    p_import.add_argument('--only', nargs='+', metavar='FAMILY',
                          help='Import only these families')
    p_import.add_argument('--skip', nargs='+', metavar='FAMILY',
                          help='Do not import these families')
    p_import.add_argument('--backup', action='store_true', help='Create .bak backup')
    p_import.add_argument('--dry-run', action='store_true', help='Show changes only')

    p_backup = sub.add_parser('backup', help='Copy the project to <file>.bak')
    p_backup.add_argument('file', help='Project (.apj) file')

    p_restore = sub.add_parser('restore', help='Restore the project from <file>.bak')
    p_restore.add_argument('file', help='Project (.apj) file')


def register_parser(subparsers) -> None:
    p = subparsers.add_parser('project', help='Project viewer / importer')
    _add_project_commands(p.add_subparsers(dest='project_command'))


def dispatch(args) -> None:
    commands = {
        'view': cmd_view,
        'stats': cmd_stats,
        'create': cmd_create,
        'import': cmd_import,
        'backup': cmd_backup,
        'restore': cmd_restore,
    }
    handler = commands.get(args.project_command)
    if handler:
        handler(args)
    else:
        print("Usage: apjedit project {view|stats|create|import|backup|restore} ...",
              file=sys.stderr)


def main() -> None:
    parser = argparse.ArgumentParser(description='AGD project viewer / importer')
    _add_project_commands(parser.add_subparsers(dest='project_command'))
    args = parser.parse_args()
    dispatch(args)


if __name__ == '__main__':
    main()
