"""Block, sprite and screen tools: view, rotate, reorder.

    apjedit blocks view <file> [--start N] [--end N]
    apjedit blocks rotate <file> [index] [--start N] [--end N] [--cw] [--add] [--repeat N]
    apjedit blocks reorder <file> <order> [--offset N]
    apjedit sprites view|rotate|reorder ...
    apjedit screens view <file> [index]
    apjedit screens reorder <file> <order> [--offset N]
"""

import sys

from .fileutil import parse_index_list
from .json_export import export_json
from .project import open_project, write_project
from .transform import (
    rotate_block, rotate_sprite, reorder_blocks, reorder_sprites, reorder_screens,
)

ROTATORS = {
    'blocks': rotate_block,
    'sprites': rotate_sprite,
}
REORDERERS = {
    'blocks': reorder_blocks,
    'sprites': reorder_sprites,
    'screens': reorder_screens,
}


def cmd_view(args) -> None:
    project = open_project(args.file)
    items = getattr(project, args.tool)
    if getattr(args, 'index', None) is not None:
        if not 0 <= args.index < len(items):
            print(f"Error: {args.tool} index out of range: {args.index} "
                  f"(have {len(items)})", file=sys.stderr)
            sys.exit(1)
        selected = [items[args.index]]
    else:
        start = getattr(args, 'start', None) or 0
        end = getattr(args, 'end', None)
        selected = items[start:end]

    if args.json:
        export_json([item.to_dict() for item in selected], args.output)
        return

    print(f"\n=== {args.tool.capitalize()}: {len(items)} ===\n")
    for item in selected:
        item.display()
        if args.tool == 'screens':
            for p in project.placements:
                if p.screen == item.id:
                    print(f"    sprite type={p.type} image={p.image} x={p.x} y={p.y}")
    print()


def _rotate_targets(args, count: int) -> list[int]:
    start = getattr(args, 'start', None)
    end = getattr(args, 'end', None)
    if start is None and end is None:
        if args.index is None:
            raise IndexError("give an index or --start/--end")
        return [args.index]
    start = start or 0
    end = count if end is None else end
    if not 0 <= start < end <= count:
        raise IndexError(f"{args.tool} range {start}..{end} out of range (have {count})")
    return list(range(start, end))


def cmd_rotate(args) -> None:
    project = open_project(args.file)
    rotate = ROTATORS[args.tool]
    direction = 'clockwise' if args.cw else 'counter-clockwise'
    turns = max(1, args.repeat)
    noun = args.tool[:-1]
    try:
        for target in _rotate_targets(args, len(getattr(project, args.tool))):
            index = target
            for _ in range(turns):
                previous = index
                index = rotate(project, index, clockwise=args.cw, retain=args.add)
                if args.add:
                    print(f"  Rotated {noun} {previous} {direction} -> new {noun} {index}")
            if not args.add:
                print(f"  Rotated {noun} {index} {direction} x{turns}")
    except (IndexError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    write_project(project, args.file, args)


def cmd_reorder(args) -> None:
    project = open_project(args.file)
    try:
        order = parse_index_list(args.order)
        mapping = REORDERERS[args.tool](project, order, args.offset)
    except ValueError as e:
        print(f"Error: invalid order list '{args.order}': {e}", file=sys.stderr)
        sys.exit(1)
    except IndexError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    moved = {old: new for old, new in mapping.items() if old != new}
    print(f"  Reordered {args.tool}: {len(moved)} moved")
    for old, new in sorted(moved.items()):
        print(f"    {old:3d} -> {new:3d}")
    write_project(project, args.file, args)


def _add_write_options(p) -> None:
    p.add_argument('--output', '-o', help='Output file (default: overwrite project)')
    p.add_argument('--backup', action='store_true', help='Create .bak backup')
    p.add_argument('--dry-run', action='store_true', help='Show changes only')


def register_parser(subparsers) -> None:
    for tool, label in (('blocks', 'Block'), ('sprites', 'Sprite')):
        p = subparsers.add_parser(tool, help=f'{label} viewer / rotate / reorder')
        sub = p.add_subparsers(dest='command')

        p_view = sub.add_parser('view', help=f'Show {tool}')
        p_view.add_argument('file', help='Project (.apj) file')
        p_view.add_argument('--start', type=int, help='First index')
        p_view.add_argument('--end', type=int, help='Stop before this index')
        p_view.add_argument('--json', action='store_true', help='Output as JSON')
        p_view.add_argument('--output', '-o', help='Output file (for --json)')

        p_rot = sub.add_parser('rotate', help=f'Rotate a {label.lower()} 90 degrees')
        p_rot.add_argument('file', help='Project (.apj) file')
        p_rot.add_argument('index', type=int, nargs='?', help=f'{label} index')
        p_rot.add_argument('--cw', action='store_true',
                           help='Rotate clockwise (default: counter-clockwise)')
        p_rot.add_argument('--add', action='store_true',
                           help=f'Keep the original and append the rotated {label.lower()}')
        p_rot.add_argument('--repeat', type=int, default=1, help='Quarter turns (default 1)')
        p_rot.add_argument('--start', type=int, help=f'First {label.lower()} of a range')
        p_rot.add_argument('--end', type=int, help='Stop before this index')
        _add_write_options(p_rot)

        p_ord = sub.add_parser('reorder', help=f'Reorder {tool}')
        p_ord.add_argument('file', help='Project (.apj) file')
        p_ord.add_argument('order', help='Comma separated indices, e.g. 2,0,1')
        p_ord.add_argument('--offset', type=int, default=0,
                           help='Leave this many leading entries in place')
        _add_write_options(p_ord)

    p = subparsers.add_parser('screens', help='Screen viewer / reorder')
    sub = p.add_subparsers(dest='command')
    p_view = sub.add_parser('view', help='Show screens')
    p_view.add_argument('file', help='Project (.apj) file')
    p_view.add_argument('index', type=int, nargs='?', help='Screen index (default: all)')
    p_view.add_argument('--json', action='store_true', help='Output as JSON')
    p_view.add_argument('--output', '-o', help='Output file (for --json)')

    p_ord = sub.add_parser('reorder', help='Reorder screens')
    p_ord.add_argument('file', help='Project (.apj) file')
    p_ord.add_argument('order', help='Comma separated indices, e.g. 2,0,1')
    p_ord.add_argument('--offset', type=int, default=0,
                       help='Leave this many leading entries in place')
    _add_write_options(p_ord)


def dispatch(args) -> None:
    if args.command == 'view':
        cmd_view(args)
    elif args.command == 'rotate' and args.tool in ROTATORS:
        cmd_rotate(args)
    elif args.command == 'reorder':
        cmd_reorder(args)
    else:
        usage = '{view|reorder}' if args.tool == 'screens' else '{view|rotate|reorder}'
        print(f"Usage: apjedit {args.tool} {usage} ...", file=sys.stderr)
