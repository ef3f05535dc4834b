"""Tests for TUI editor logic (no terminal needed)."""

import os

from apjedit.blocks import default_block
from apjedit.project import load_project
from apjedit.tui.app import ProjectApp
from apjedit.tui.project_editor import (
    BlockEditor, SpriteEditor, ScreenViewer,
    make_block_editor, make_sprite_editor, make_screen_viewer,
)


class TestBlockEditor:
    def test_name_and_clean(self, sample_project):
        editor = BlockEditor(sample_project)
        assert editor.name == 'Blocks'
        assert not editor.is_dirty

    def test_select_clamped(self, sample_project):
        editor = BlockEditor(sample_project)
        editor.select(-1)
        assert editor.selected_index == 0
        editor.select(10)
        assert editor.selected_index == 2

    def test_rotate_marks_dirty(self, sample_project):
        editor = BlockEditor(sample_project)
        editor.select(2)
        before = sample_project.blocks[2].spectrum
        editor.rotate_selected(clockwise=True)
        assert editor.is_dirty
        assert sample_project.blocks[2].spectrum != before

    def test_rotated_copy_selected(self, sample_project):
        editor = BlockEditor(sample_project)
        editor.rotate_selected(retain=True)
        assert editor.selected_index == 3
        assert len(sample_project.blocks) == 4

    def test_preview(self, sample_project):
        editor = BlockEditor(sample_project)
        editor.select(1)
        lines = editor.preview_lines()
        assert 'WALLBLOCK' in lines[0]
        assert len(lines) == 9

    def test_save_callback(self, sample_project):
        saved = []
        editor = make_block_editor(sample_project, saved.append)
        editor.rotate_selected()
        editor.save()
        assert saved == [sample_project]
        assert not editor.is_dirty

    def test_full_project_reports_error(self, sample_project):
        sample_project.blocks = [default_block(i) for i in range(255)]
        editor = BlockEditor(sample_project)
        editor.rotate_selected(retain=True)
        assert len(sample_project.blocks) == 255
        assert not editor.is_dirty
        assert 'already holds 255' in editor.message
        editor.rotate_selected()
        assert editor.message == ''
        assert editor.is_dirty

    def test_empty_project(self, sample_project):
        sample_project.blocks = []
        editor = BlockEditor(sample_project)
        editor.rotate_selected()
        assert not editor.is_dirty
        assert editor.preview_lines() == ['(no blocks)']


class TestSpriteEditor:
    def test_frame_stepping_wraps(self, sample_project):
        editor = SpriteEditor(sample_project)
        editor.select(1)
        editor.step_frame(1)
        assert editor.frame_index == 1
        editor.step_frame(1)
        assert editor.frame_index == 0

    def test_preview_rows(self, sample_project):
        editor = make_sprite_editor(sample_project, None)
        lines = editor.preview_lines()
        assert lines[0].startswith('Sprite 0')
        assert len(lines) == 17
        assert len(lines[1]) == 16

    def test_rotate(self, sample_project):
        editor = SpriteEditor(sample_project)
        editor.rotate_selected()
        assert editor.is_dirty
        assert len(sample_project.sprites) == 2


class TestScreenViewer:
    def test_read_only(self, sample_project):
        viewer = make_screen_viewer(sample_project)
        assert viewer.name == 'Screens'
        assert not viewer.is_dirty

    def test_grid_lines_include_sprites(self, sample_project):
        viewer = ScreenViewer(sample_project)
        viewer.select(1)
        lines = viewer.grid_lines()
        assert lines[0] == 'Screen 1'
        assert lines[1] == '  1   1   1'
        assert sum('sprite' in line for line in lines) == 2


class TestProjectApp:
    def test_tabs(self, sample_apj_file):
        app = ProjectApp(sample_apj_file, load_project(sample_apj_file))
        assert [t.name for t in app.tabs] == ['Blocks', 'Sprites', 'Screens']
        app.switch(-1)
        assert app.current == 2

    def test_save_all_writes_file(self, tmp_dir, sample_apj_file):
        app = ProjectApp(sample_apj_file, load_project(sample_apj_file))
        app.tabs[0].rotate_selected(retain=True)
        assert app.is_dirty
        app.save_all()
        assert not app.is_dirty
        assert app.saved == 1
        assert len(load_project(sample_apj_file).blocks) == 4

    def test_save_all_writes_once(self, sample_apj_file):
        app = ProjectApp(sample_apj_file, load_project(sample_apj_file))
        app.tabs[0].rotate_selected(retain=True)
        app.tabs[1].rotate_selected()
        app.save_all()
        assert app.saved == 1
        assert not app.is_dirty
        app.save_all()
        assert app.saved == 1

    def test_tab_labels_mark_dirty(self, sample_apj_file):
        app = ProjectApp(sample_apj_file, load_project(sample_apj_file))
        app.tabs[1].rotate_selected()
        labels = [text for _, text in app.tab_labels()]
        assert labels[1] == ' Sprites* '
        assert os.path.isfile(sample_apj_file)
