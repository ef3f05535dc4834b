"""Objects: collectable items placed in rooms.

Binary section layout:
  count (1 byte)
  then, platform by platform, every object's data:
    Spectrum 36, Timex 35, CPC 67, Atom 35, MSX 67, Atom colour 35, VZ colour 19

The Spectrum record starts with attribute, room, x and y followed by the
32-byte image. The other platform records are kept opaque.
"""

import logging
import re
from dataclasses import dataclass, field

from .constants import OBJECT_PLATFORMS, OBJECT_HEADER_FIELDS, pixel_rows
from .fileutil import read_exact, read_u8, write_count, write_fixed, fit_bytes, parse_numbers

logger = logging.getLogger(__name__)

OBJECT_RE = re.compile(r'DEFINEOBJECT\s+(\d+)\s+(\d+)\s+(\d+)\s+(\d+)', re.ASCII)
PLATFORM_SIZES = dict(OBJECT_PLATFORMS)


def _zeros(name):
    return field(default_factory=lambda: bytes(PLATFORM_SIZES[name]))


@dataclass
class GameObject:
    id: int = 0
    spectrum: bytes = _zeros('spectrum')
    timex: bytes = _zeros('timex')
    cpc: bytes = _zeros('cpc')
    atom: bytes = _zeros('atom')
    msx: bytes = _zeros('msx')
    atom_colour: bytes = _zeros('atom_colour')
    vz_colour: bytes = _zeros('vz_colour')

    @property
    def header(self) -> dict:
        return dict(zip(OBJECT_HEADER_FIELDS, self.spectrum[:4]))

    def to_dict(self) -> dict:
        d = {'id': self.id, **self.header}
        for name, _ in OBJECT_PLATFORMS:
            d[name] = list(getattr(self, name))
        return d

    def display(self) -> None:
        h = self.header
        print(f"  Object {self.id:3d}  room={h['room']:3d} "
              f"x={h['x']:3d} y={h['y']:3d} attr={h['attr']}")
        for row in pixel_rows(self.spectrum[4:], 2):
            print(f"    {row}")


def decode_objects(f) -> list[GameObject]:
    count = read_u8(f)
    objects = [GameObject(id=i) for i in range(count)]
    for name, size in OBJECT_PLATFORMS:
        for obj in objects:
            setattr(obj, name, read_exact(f, size))
    logger.debug(f"Decoded {count} objects")
    return objects


def encode_objects(f, objects: list[GameObject]) -> None:
    write_count(f, len(objects), 'objects')
    for name, size in OBJECT_PLATFORMS:
        for obj in objects:
            write_fixed(f, getattr(obj, name), size)


def parse_object(lines: list[str], object_id: int) -> GameObject | None:
    """Build an object from 'DEFINEOBJECT attr room x y' plus its image lines."""
    m = OBJECT_RE.search(lines[0])
    if not m:
        logger.debug(f"Skipping malformed object header: {lines[0]!r}")
        return None
    data = [int(v) & 0xFF for v in m.groups()] + parse_numbers(lines[1:])
    size = PLATFORM_SIZES['spectrum']
    if len(data) != size:
        logger.warning(f"Object {object_id}: {len(data)} data values, expected {size}")
    return GameObject(id=object_id, spectrum=fit_bytes(data, size))
