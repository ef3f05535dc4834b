"""Shared fixtures for apjedit tests."""

import os
import shutil
import tempfile

import pytest

from apjedit.blocks import Block
from apjedit.map import GameMap
from apjedit.objects import GameObject
from apjedit.project import Project, save_project
from apjedit.screens import Screen, SpritePlacement
from apjedit.sprites import blank_sprite, calc_offsets
from apjedit.window import Window


def make_block(block_id: int, block_type: int = 0, fill: int = 0) -> Block:
    """Block whose Spectrum rows are all `fill`, attribute 70 + id."""
    return Block(id=block_id, block_type=block_type,
                 spectrum=bytes([fill] * 8 + [70 + block_id]))


@pytest.fixture
def tmp_dir():
    """Provide a temporary directory, cleaned up after test."""
    d = tempfile.mkdtemp(prefix='test_apjedit_')
    yield d
    shutil.rmtree(d, ignore_errors=True)


@pytest.fixture
def sample_project():
    """A small project: 2x3 window, 3 blocks, 2 sprites, 2 screens, 2x2 map."""
    project = Project()
    project.window = Window(1, 2, 2, 3)
    project.blocks = [make_block(0, 0, 0x00), make_block(1, 2, 0xFF), make_block(2, 3, 0x81)]

    walker = blank_sprite(0, 1)
    walker.spectrum = [bytes(range(32))]
    bat = blank_sprite(1, 2)
    bat.spectrum = [bytes([0xAA] * 32), bytes([0x55] * 32)]
    project.sprites = [walker, bat]
    calc_offsets(project.sprites)

    project.objects = [GameObject(id=0, spectrum=bytes([5, 1, 40, 50] + [0x3C] * 32))]
    project.screens = [
        Screen(id=0, grid=[[0, 1, 1], [2, 0, 1]]),
        Screen(id=1, grid=[[1, 1, 1], [0, 0, 2]]),
    ]
    project.game_map = GameMap(height=2, width=2, start_row=0, start_col=1,
                               start_screen=1, grid=[[0, 1], [255, 255]])
    project.placements = [
        SpritePlacement(type=0, image=0, unused=15, screen=0, x=8, y=16),
        SpritePlacement(type=1, image=1, unused=15, screen=1, x=64, y=32),
        SpritePlacement(type=1, image=1, unused=15, screen=1, x=96, y=32),
    ]
    project.asm_path = 'C:\\AGD\\game.asm'
    project.enterprise_bias = 3
    return project


@pytest.fixture
def sample_apj_file(tmp_dir, sample_project):
    path = os.path.join(tmp_dir, 'game.apj')
    save_project(sample_project, path)
    return path


SAMPLE_AGD = """\
DEFINEWINDOW 1 2 2 3

DEFINECONTROLS 'Q' 'A' 'O' 'P' ' ' 'M' 'N' '1' '2' '3' '4'

DEFINEBLOCK WALLBLOCK
 255 129 129 129 129 129 129 255 66

DEFINEBLOCK LADDERBLOCK
 66 126 66 66 126 66 66 126 69

DEFINESPRITE 1
 1 128 2 64 4 32 8 16 16 8 32 4 64 2 128 1
 1 128 2 64 4 32 8 16 16 8 32 4 64 2 128 1

DEFINESCREEN
 0 1 0
 1 1 1
SPRITEPOSITION 0 0 16 24

DEFINESCREEN
 1 0 1
 0 0 0

DEFINEOBJECT 6 1 72 96
 0 0 3 192 7 224 15 240 15 240 7 224 3 192 0 0
 0 0 3 192 7 224 15 240 15 240 7 224 3 192 0 0

MAP WIDTH 3
    STARTSCREEN 1
255 0 255
255 1 255
ENDMAP

DEFINEMESSAGES
"You win"

EVENT PLAYER
IF KEY 0
  SPRITEUP
ENDIF
"""


@pytest.fixture
def sample_agd_text():
    return SAMPLE_AGD


@pytest.fixture
def sample_agd_file(tmp_dir):
    path = os.path.join(tmp_dir, 'game.agd')
    with open(path, 'w') as f:
        f.write(SAMPLE_AGD)
    return path
