"""Shared binary helpers: exact reads, fixed-width writes, chunking, backups."""

import logging
import os
import shutil
import struct

logger = logging.getLogger(__name__)


def read_exact(f, size: int) -> bytes:
    """Read exactly size bytes from a binary stream.

    Raises EOFError on a short read.
    """
    data = f.read(size)
    if len(data) != size:
        raise EOFError(f"Short read: wanted {size} bytes, got {len(data)}")
    return data


def read_u8(f) -> int:
    return read_exact(f, 1)[0]


def read_u32(f) -> int:
    return struct.unpack('<I', read_exact(f, 4))[0]


def write_u8(f, value: int) -> None:
    f.write(bytes([value & 0xFF]))


def write_u32(f, value: int) -> None:
    f.write(struct.pack('<I', value & 0xFFFFFFFF))


def fit_bytes(data, size: int, fill: int = 0) -> bytes:
    """Zero-pad or truncate data to exactly size bytes."""
    data = bytes(data[:size])
    if len(data) < size:
        data += bytes([fill]) * (size - len(data))
    return data


def write_fixed(f, data, size: int) -> None:
    f.write(fit_bytes(data, size))


def write_count(f, count: int, what: str) -> None:
    """Write a one-byte collection count; counts above 255 cannot be stored."""
    if count > 0xFF:
        raise ValueError(f"Too many {what}: {count} (max 255)")
    write_u8(f, count)


def chunk(data: bytes, size: int) -> list[bytes]:
    """Split data into size-byte pieces (the last piece may be short)."""
    return [bytes(data[i:i + size]) for i in range(0, len(data), size)]


def chunk_grid(data: bytes, height: int, width: int) -> list[list[int]]:
    """Split a flat row-major byte run into a height x width grid."""
    return [list(data[r * width:(r + 1) * width]) for r in range(height)]


def fit_grid(grid: list[list[int]], height: int, width: int,
             fill: int = 0) -> list[list[int]]:
    """Pad or truncate a grid to exactly height rows of width cells."""
    rows = [list(row[:width]) + [fill] * max(0, width - len(row))
            for row in grid[:height]]
    while len(rows) < height:
        rows.append([fill] * width)
    return rows


def flatten_grid(grid: list[list[int]]) -> bytes:
    return bytes(cell for row in grid for cell in row)


def backup_file(path: str) -> str:
    """Copy path to path.bak before an in-place write. Returns the backup path."""
    if not os.path.isfile(path):
        raise FileNotFoundError(f"Cannot back up missing file: {path}")
    bak = path + '.bak'
    shutil.copy2(path, bak)
    return bak


def parse_index_list(text: str) -> list[int]:
    """Parse a comma separated list of indices ('2,0,1')."""
    return [int(part) for part in text.replace(' ', '').split(',') if part]


def parse_numbers(lines) -> list[int]:
    """Collect the decimal byte values from definition body lines.

    Text after ';' is a comment. Tokens that are not numbers are skipped.
    """
    if isinstance(lines, str):
        lines = [lines]
    values = []
    for line in lines:
        for token in line.split(';', 1)[0].replace(',', ' ').split():
            if token.isascii() and token.isdigit():
                values.append(int(token) & 0xFF)
            else:
                logger.debug(f"Skipping non-numeric token {token!r}")
    return values
