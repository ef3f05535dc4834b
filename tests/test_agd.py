"""Tests for AGD source import and merge options."""

import pytest

from apjedit.agd import (
    AgdImporter, Family, ImportOptions, directive_family, import_agd, import_agd_text,
)
from apjedit.blocks import default_block
from apjedit.project import Project, decode_bytes, encode_bytes
from apjedit.window import Window


class TestDirectives:
    def test_contains_match(self):
        assert directive_family('  DEFINEBLOCK WALLBLOCK'.strip()) is Family.BLOCKS

    def test_prefix_match(self):
        assert directive_family('MAP WIDTH 16') is Family.MAP
        assert directive_family('ENDMAP') is None

    def test_sprite_position_is_not_a_directive(self):
        assert directive_family('SPRITEPOSITION 0 1 2 3') is None


class TestImportIntoEmpty:
    def test_families(self, sample_agd_text):
        project = Project()
        counts = import_agd_text(project, sample_agd_text)
        assert counts[Family.BLOCKS] == 2
        assert counts[Family.SCREENS] == 2
        assert project.window == Window(1, 2, 2, 3)
        assert project.keys.codes == [81, 65, 79, 80, 32, 77, 78, 49, 50, 51, 52]
        assert [b.block_type for b in project.blocks] == [2, 3]
        assert len(project.sprites) == 1
        assert len(project.objects) == 1
        assert project.objects[0].header['room'] == 1

    def test_screens_and_positions(self, sample_agd_text):
        project = Project()
        import_agd_text(project, sample_agd_text)
        assert project.screens[0].grid == [[0, 1, 0], [1, 1, 1]]
        assert project.screens[1].grid == [[1, 0, 1], [0, 0, 0]]
        assert len(project.placements) == 1
        p = project.placements[0]
        assert (p.screen, p.type, p.image, p.x, p.y, p.unused) == (0, 0, 0, 16, 24, 15)

    def test_map(self, sample_agd_text):
        project = Project()
        import_agd_text(project, sample_agd_text)
        game_map = project.game_map
        assert (game_map.height, game_map.width) == (2, 3)
        assert game_map.start_screen == 1
        assert (game_map.start_row, game_map.start_col) == (1, 1)

    def test_events_and_messages_skipped(self, sample_agd_text):
        project = Project()
        counts = import_agd_text(project, sample_agd_text + 'DEFINEBLOCK EMPTYBLOCK\n')
        # a block after the event section still opens a definition
        assert counts[Family.BLOCKS] == 3
        assert len(project.blocks) == 3

    def test_import_file(self, sample_agd_file):
        project = Project()
        import_agd(project, sample_agd_file)
        assert len(project.screens) == 2


class TestMerge:
    def test_blocks_appended_and_screens_shifted(self, sample_project, sample_agd_text):
        import_agd_text(sample_project, sample_agd_text)
        assert len(sample_project.blocks) == 5
        assert [b.id for b in sample_project.blocks] == [0, 1, 2, 3, 4]
        assert sample_project.blocks[3].block_type == 2
        # the window directive cleared the old screens
        assert len(sample_project.screens) == 2
        assert sample_project.screens[0].grid == [[3, 4, 3], [4, 4, 4]]
        assert sample_project.screens[1].grid == [[4, 3, 4], [3, 3, 3]]

    def test_sprites_appended_with_offsets(self, sample_project, sample_agd_text):
        import_agd_text(sample_project, sample_agd_text)
        assert len(sample_project.sprites) == 3
        assert sample_project.sprites[2].id == 2
        assert sample_project.sprites[2].offset == 3

    def test_overwrite_replaces(self, sample_project, sample_agd_text):
        import_agd_text(sample_project, sample_agd_text, ImportOptions.build(overwrite=True))
        assert len(sample_project.blocks) == 2
        assert len(sample_project.sprites) == 1
        assert sample_project.screens[0].grid == [[0, 1, 0], [1, 1, 1]]

    def test_block_overwrite_disables_shift(self, sample_project, sample_agd_text):
        options = ImportOptions()
        options[Family.BLOCKS].overwrite = True
        import_agd_text(sample_project, sample_agd_text, options)
        assert sample_project.screens[0].grid == [[0, 1, 0], [1, 1, 1]]

    def test_ignore_blocks(self, sample_project, sample_agd_text):
        import_agd_text(sample_project, sample_agd_text, ImportOptions.build(skip=['blocks']))
        assert len(sample_project.blocks) == 3
        assert sample_project.screens[0].grid == [[0, 1, 0], [1, 1, 1]]

    def test_ignored_body_not_merged_into_previous(self):
        text = ('DEFINEBLOCK WALLBLOCK\n1 2 3 4 5 6 7 8 9\n'
                'DEFINESPRITE 1\n' + ' '.join(['200'] * 16) + '\n' + ' '.join(['201'] * 16) + '\n')
        project = Project()
        import_agd_text(project, text, ImportOptions.build(skip=['sprites']))
        assert project.blocks[0].spectrum == bytes(range(1, 10))
        assert len(project.sprites) == 1
        assert project.sprites[0].spectrum == [bytes(32)]

    def test_only_screens_without_window(self, sample_project, sample_agd_text):
        import_agd_text(sample_project, sample_agd_text, ImportOptions.build(only=['screens']))
        assert sample_project.window == Window(1, 2, 2, 3)
        assert len(sample_project.screens) == 4
        assert len(sample_project.blocks) == 3

    def test_unknown_family_rejected(self):
        with pytest.raises(ValueError):
            ImportOptions.build(only=['tiles'])


class TestWindowClearsScreens:
    def test_defaults_restored_after_window_only(self, sample_project):
        import_agd_text(sample_project, 'DEFINEWINDOW 0 0 4 5\n')
        assert sample_project.window == Window(0, 0, 4, 5)
        assert len(sample_project.screens) == 1
        assert sample_project.screens[0].grid == [[0] * 5 for _ in range(4)]
        assert sample_project.placements == []


class TestParserState:
    def test_blank_line_ends_definition(self):
        project = Project()
        importer = AgdImporter(project)
        importer.feed('DEFINEBLOCK WALLBLOCK')
        assert importer.state.family is Family.BLOCKS
        importer.feed('1 2 3 4 5 6 7 8 9')
        importer.feed('')
        assert importer.state is None
        assert project.blocks[0].spectrum == bytes(range(1, 10))

    def test_stray_lines_ignored_when_idle(self):
        project = Project()
        importer = AgdImporter(project)
        importer.feed('10 20 30')
        assert importer.state is None
        importer.finish()
        assert len(project.blocks) == 1

    def test_first_touch_only_once(self, sample_project):
        text = 'DEFINEBLOCK WALLBLOCK\n1 1 1 1 1 1 1 1 1\n\nDEFINEBLOCK WALLBLOCK\n2 2 2 2 2 2 2 2 2\n'
        import_agd_text(sample_project, text, ImportOptions.build(overwrite=True))
        assert len(sample_project.blocks) == 2

    def test_non_ascii_digit_token_skipped(self):
        project = Project()
        import_agd_text(project, 'DEFINEBLOCK WALLBLOCK\n1 2 3 4 5 6 7 8 9 \xb2\n')
        assert project.blocks[0].block_type == 2
        assert project.blocks[0].spectrum == bytes(range(1, 10))


class TestBlockShiftWraps:
    def test_shifted_cells_stay_bytes(self, sample_project):
        sample_project.blocks = [default_block(i) for i in range(250)]
        text = ('DEFINEBLOCK WALLBLOCK\n1 2 3 4 5 6 7 8 9\n\n'
                'DEFINESCREEN\n10 10 10\n0 1 10\n')
        import_agd_text(sample_project, text)
        assert len(sample_project.blocks) == 251
        assert sample_project.screens[2].grid == [[4, 4, 4], [250, 251, 4]]
        reloaded = decode_bytes(encode_bytes(sample_project))
        assert reloaded.screens[2].grid == [[4, 4, 4], [250, 251, 4]]
