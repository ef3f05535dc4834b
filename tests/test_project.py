"""Tests for the whole-project codec."""

import io
import os
import struct

import pytest

from apjedit.constants import DEFAULT_KEYS, DEFAULT_LIVES_SCORE, DEFAULT_ULA_PALETTE
from apjedit.project import (
    Project, decode, decode_bytes, encode_bytes, load_project, save_project,
)


def single_screen_file() -> bytes:
    """A hand-built file: window 10x16, one record in every family."""
    out = bytearray()
    out += b'AGD*' + struct.pack('<I', 10)
    out += bytes([0, 0, 10, 16])                       # window
    out += bytes(DEFAULT_LIVES_SCORE)
    out += bytes(DEFAULT_KEYS)
    out += bytes([1, 2])                               # one WALLBLOCK
    for n in (9, 16, 24, 8, 16, 8):
        out += bytes((i + n) % 256 for i in range(n))
    out += bytes([1, 0, 1])                            # one sprite, one frame
    for n in (32, 32, 80, 32, 32, 16):
        out += bytes((i * 3 + n) % 256 for i in range(n))
    out += bytes([1])                                  # one object
    for n in (36, 35, 67, 35, 67, 35, 19):
        out += bytes((i * 5 + n) % 256 for i in range(n))
    out += bytes([1]) + bytes([0] * 160)               # one 10x16 screen
    out += bytes([1, 1, 0, 0, 0])                      # 1x1 map
    out += bytes([0, 0, 15, 40, 50, 255])              # one sprite position
    out += bytes(i % 256 for i in range(768))          # font
    out += bytes(DEFAULT_ULA_PALETTE)
    out += bytes([7])                                  # enterprise bias
    out += b'game.asm'.ljust(256, b'\x00')
    return bytes(out)


class TestRoundTrip:
    def test_sample_project(self, sample_project):
        assert decode_bytes(encode_bytes(sample_project)) == sample_project

    def test_blank_project(self):
        project = Project.blank()
        assert decode_bytes(encode_bytes(project)) == project

    def test_single_screen_file_byte_identical(self):
        data = single_screen_file()
        project = decode_bytes(data)
        assert encode_bytes(project) == data

    def test_single_screen_file_contents(self):
        project = decode_bytes(single_screen_file())
        assert project.window.height == 10
        assert project.window.width == 16
        assert project.blocks[0].block_type == 2
        assert project.game_map.start_screen == 0
        assert project.placements[0].x == 40
        assert project.enterprise_bias == 7
        assert project.asm_path == 'game.asm'


class TestSectionOrder:
    def test_sections_in_file_order(self, sample_project):
        data = encode_bytes(sample_project)
        assert data[:4] == b'AGD*'
        assert data[8:12] == bytes([1, 2, 2, 3])
        # blocks start right after header, window, lives/score and keys
        assert data[8 + 4 + 10 + 11] == 3
        assert data.endswith(b'C:\\AGD\\game.asm'.ljust(256, b'\x00'))
        assert data[-257] == 3

    def test_screens_sized_by_window(self, sample_project):
        sample_project.window.width = 4
        project = decode_bytes(encode_bytes(sample_project))
        assert project.screens[0].grid == [[0, 1, 1, 0], [2, 0, 1, 0]]


class TestErrors:
    def test_truncated_file(self, sample_project):
        data = encode_bytes(sample_project)
        with pytest.raises(EOFError):
            decode_bytes(data[:-10])

    def test_empty_stream(self):
        with pytest.raises(EOFError):
            decode(io.BytesIO(b''))

    def test_missing_file(self, tmp_dir):
        with pytest.raises(FileNotFoundError):
            load_project(os.path.join(tmp_dir, 'missing.apj'))


class TestDefaults:
    def test_blank_contents(self):
        project = Project.blank()
        assert len(project.blocks) == 1
        assert project.blocks[0].attribute == 71
        assert len(project.sprites) == 1
        assert len(project.objects) == 1
        assert len(project.screens) == 1
        assert project.screens[0].grid == [[0] * 22 for _ in range(22)]
        assert project.keys.codes == list(DEFAULT_KEYS)
        assert project.palette == list(DEFAULT_ULA_PALETTE)
        assert project.header.version == 10

    def test_populated_families_untouched(self, sample_project):
        sample_project.state.mark_all()
        sample_project.screens = []
        sample_project.populate_defaults()
        assert sample_project.screens == []

    def test_decode_marks_state(self, sample_project):
        project = decode_bytes(encode_bytes(sample_project))
        assert project.state.blocks
        assert project.state.asm_path


class TestFiles:
    def test_save_and_load(self, tmp_dir, sample_project):
        path = os.path.join(tmp_dir, 'game.apj')
        save_project(sample_project, path)
        assert load_project(path) == sample_project

    def test_stats(self, sample_project):
        stats = sample_project.stats()
        assert stats['blocks'] == 3
        assert stats['sprite_frames'] == 3
        assert stats['sprite_positions'] == 3
        assert stats['window'] == '2x3'
