"""JSON export helper shared by the view commands."""

import json
import sys


def export_json(data, output_path: str | None = None) -> None:
    """Write data as indented JSON to a file, or to stdout when no path is given."""
    text = json.dumps(data, indent=2)
    if output_path:
        with open(output_path, 'w', encoding='utf-8') as f:
            f.write(text + '\n')
        print(f"Exported to {output_path}", file=sys.stderr)
    else:
        print(text)
