"""Fixed-size scalar sections: header, lives/score layout, enterprise bias, asm path."""

from dataclasses import dataclass, field

from .constants import (
    HEADER_MAGIC, HEADER_VERSION, LIVES_SCORE_FIELDS, LIVES_SCORE_SIZE,
    DEFAULT_LIVES_SCORE, ASM_PATH_SIZE,
)
from .fileutil import read_exact, read_u8, read_u32, write_u8, write_u32, write_fixed


@dataclass
class Header:
    """4-byte magic followed by the format version (u32 LE)."""
    magic: bytes = HEADER_MAGIC
    version: int = HEADER_VERSION

    def to_dict(self) -> dict:
        return {'magic': self.magic.decode('latin-1'), 'version': self.version}


def decode_header(f) -> Header:
    magic = read_exact(f, 4)
    return Header(magic=magic, version=read_u32(f))


def encode_header(f, header: Header) -> None:
    write_fixed(f, header.magic, 4)
    write_u32(f, header.version)


@dataclass
class LivesScore:
    """Screen positions of the score, lives, high score, time and energy panels."""
    values: list[int] = field(default_factory=lambda: list(DEFAULT_LIVES_SCORE))

    def __getattr__(self, name: str) -> int:
        if name in LIVES_SCORE_FIELDS:
            return self.values[LIVES_SCORE_FIELDS.index(name)]
        raise AttributeError(name)

    def to_dict(self) -> dict:
        return dict(zip(LIVES_SCORE_FIELDS, self.values))

    def display(self) -> None:
        for label in ('score', 'lives', 'high', 'time', 'energy'):
            top = getattr(self, f'{label}_top')
            left = getattr(self, f'{label}_left')
            print(f"  {label.capitalize():<8s} top={top:3d} left={left:3d}")


def decode_lives_score(f) -> LivesScore:
    return LivesScore(list(read_exact(f, LIVES_SCORE_SIZE)))


def encode_lives_score(f, lives: LivesScore) -> None:
    write_fixed(f, lives.values, LIVES_SCORE_SIZE)


def decode_enterprise_bias(f) -> int:
    return read_u8(f)


def encode_enterprise_bias(f, bias: int) -> None:
    write_u8(f, bias)


def decode_asm_path(f) -> str:
    """Read the 256-byte assembler path; trailing NULs are dropped."""
    return read_exact(f, ASM_PATH_SIZE).rstrip(b'\x00').decode('latin-1')


def encode_asm_path(f, path: str) -> None:
    write_fixed(f, path.encode('latin-1', errors='replace'), ASM_PATH_SIZE)
