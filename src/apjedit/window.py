"""Play-area window and control keys.

The window fixes the dimensions of every screen grid; importing a new
window therefore invalidates the existing screens.
"""

import logging
import re
from dataclasses import dataclass, field

from .constants import DEFAULT_WINDOW, DEFAULT_KEYS, KEYS_SIZE, KEY_NAMES
from .fileutil import read_exact, write_fixed

logger = logging.getLogger(__name__)

WINDOW_RE = re.compile(r'^DEFINEWINDOW\s+(\d+)\s+(\d+)\s+(\d+)\s+(\d+)$', re.ASCII)
CONTROL_TOKEN_RE = re.compile(r"'([^']*)'|\b(\d+)\b", re.ASCII)


@dataclass
class Window:
    top: int = DEFAULT_WINDOW[0]
    left: int = DEFAULT_WINDOW[1]
    height: int = DEFAULT_WINDOW[2]
    width: int = DEFAULT_WINDOW[3]

    @property
    def cells(self) -> int:
        return self.height * self.width

    def to_dict(self) -> dict:
        return {'top': self.top, 'left': self.left,
                'height': self.height, 'width': self.width}


def decode_window(f) -> Window:
    return Window(*read_exact(f, 4))


def encode_window(f, window: Window) -> None:
    write_fixed(f, [window.top, window.left, window.height, window.width], 4)


def parse_window(line: str) -> Window | None:
    """Parse 'DEFINEWINDOW top left height width'. Returns None when malformed."""
    m = WINDOW_RE.match(line.strip())
    if not m:
        logger.debug(f"Skipping malformed window line: {line!r}")
        return None
    return Window(*(int(v) & 0xFF for v in m.groups()))


@dataclass
class Keys:
    """The eleven control key codes."""
    codes: list[int] = field(default_factory=lambda: list(DEFAULT_KEYS))

    def to_dict(self) -> dict:
        return dict(zip(KEY_NAMES, self.codes))

    def display(self) -> None:
        for name, code in zip(KEY_NAMES, self.codes):
            ch = chr(code) if 32 < code < 127 else ''
            print(f"  {name:<8s} {code:3d} {ch}")


def decode_keys(f) -> Keys:
    return Keys(list(read_exact(f, KEYS_SIZE)))


def encode_keys(f, keys: Keys) -> None:
    write_fixed(f, keys.codes, KEYS_SIZE)


def parse_controls(line: str) -> Keys:
    """Parse a DEFINECONTROLS line.

    Tokens are either quoted characters ('W'), taken as their character
    code, or plain decimal numbers.
    """
    codes = []
    for quoted, number in CONTROL_TOKEN_RE.findall(line):
        if number:
            codes.append(int(number) & 0xFF)
        elif quoted:
            codes.append(ord(quoted[0]) & 0xFF)
        else:
            logger.debug(f"Skipping empty control token in {line!r}")
    if len(codes) != KEYS_SIZE:
        logger.warning(f"DEFINECONTROLS lists {len(codes)} keys, expected {KEYS_SIZE}")
    return Keys(codes[:KEYS_SIZE] + list(DEFAULT_KEYS[len(codes):]))
