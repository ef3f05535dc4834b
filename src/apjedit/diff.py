"""Compare two AGD projects field by field.

    apjedit diff <file_a> <file_b> [--json]
"""

from .json_export import export_json
from .project import Project, open_project


def diff_dicts(a, b, path: str = '') -> list[tuple[str, object, object]]:
    """Recursively list (path, old, new) for every differing leaf value."""
    changes = []
    if isinstance(a, dict) and isinstance(b, dict):
        for key in list(a) + [k for k in b if k not in a]:
            sub = f'{path}.{key}' if path else str(key)
            if key not in b:
                changes.append((sub, a[key], None))
            elif key not in a:
                changes.append((sub, None, b[key]))
            else:
                changes.extend(diff_dicts(a[key], b[key], sub))
    elif isinstance(a, list) and isinstance(b, list) and not _is_flat(a, b):
        for i in range(max(len(a), len(b))):
            sub = f'{path}[{i}]'
            if i >= len(b):
                changes.append((sub, a[i], None))
            elif i >= len(a):
                changes.append((sub, None, b[i]))
            else:
                changes.extend(diff_dicts(a[i], b[i], sub))
    elif a != b:
        changes.append((path, a, b))
    return changes


def _is_flat(a: list, b: list) -> bool:
    """Byte/int lists are compared whole rather than element by element."""
    return all(isinstance(v, int) for v in a + b)


def diff_projects(a: Project, b: Project) -> list[tuple[str, object, object]]:
    return diff_dicts(a.to_dict(), b.to_dict())


def cmd_diff(args) -> None:
    a = open_project(args.file_a)
    b = open_project(args.file_b)
    changes = diff_projects(a, b)

    if args.json:
        export_json([{'path': p, 'old': old, 'new': new} for p, old, new in changes],
                    args.output)
        return

    if not changes:
        print("  Projects are identical.")
        return
    print(f"\n=== {len(changes)} difference(s) ===\n")
    for path, old, new in changes:
        print(f"  {path}")
        print(f"    - {_short(old)}")
        print(f"    + {_short(new)}")
    print()


def _short(value, limit: int = 60) -> str:
    text = repr(value)
    return text if len(text) <= limit else text[:limit - 3] + '...'


def register_parser(subparsers) -> None:
    p = subparsers.add_parser('diff', help='Compare two projects')
    p.add_argument('file_a', help='First project (.apj) file')
    p.add_argument('file_b', help='Second project (.apj) file')
    p.add_argument('--json', action='store_true', help='Output as JSON')
    p.add_argument('--output', '-o', help='Output file (for --json)')


def dispatch(args) -> None:
    cmd_diff(args)
