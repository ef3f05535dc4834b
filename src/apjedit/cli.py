"""Unified CLI for apjedit: AGD project toolkit.

Dispatches to all tool modules via a single entry point:
    apjedit project view <file>
    apjedit project import <file> <source.agd>
    apjedit blocks rotate <file> <index>
    apjedit sprites reorder <file> <order>
    apjedit screens view <file>
    apjedit diff <file_a> <file_b>
    apjedit edit <file>
"""

import argparse
import logging
import sys

from . import __version__
from . import project
from . import editors
from . import diff
from .tui import app


def main() -> None:
    parser = argparse.ArgumentParser(
        prog='apjedit',
        description='AGD project file toolkit',
    )
    parser.add_argument('--version', action='version', version=f'apjedit {__version__}')
    parser.add_argument('--verbose', '-v', action='store_true', help='Debug logging')

    subparsers = parser.add_subparsers(dest='tool', help='Tool to run')

    # Register all tool modules
    project.register_parser(subparsers)
    editors.register_parser(subparsers)
    diff.register_parser(subparsers)
    app.register_parser(subparsers)

    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format='%(levelname)s %(name)s: %(message)s')

    if not args.tool:
        parser.print_help()
        sys.exit(0)

    dispatchers = {
        'project': project.dispatch,
        'blocks': editors.dispatch,
        'sprites': editors.dispatch,
        'screens': editors.dispatch,
        'diff': diff.dispatch,
        'edit': app.dispatch,
    }

    handler = dispatchers.get(args.tool)
    if handler:
        handler(args)
    else:
        parser.print_help()


if __name__ == '__main__':
    main()
