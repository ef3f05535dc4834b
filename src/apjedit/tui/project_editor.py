"""TUI editors for AGD project graphics.

Provides three tabs for the project editor app:
- BlockEditor: browse blocks, rotate the selected block
- SpriteEditor: browse sprites and frames, rotate the selected sprite
- ScreenViewer: read-only grid of block ids for each screen
"""

from ..constants import block_type_name
from ..transform import rotate_block, rotate_sprite


class BlockEditor:
    """Block list with a pixel preview.

    Up/Down selects a block, 'r' rotates it counter-clockwise, 'R'
    clockwise, 'c' appends a rotated copy.
    """

    def __init__(self, project, save_callback=None):
        self.project = project
        self.selected_index = 0
        self.dirty = False
        self.save_callback = save_callback
        self.message = ''

    @property
    def name(self):
        return 'Blocks'

    @property
    def is_dirty(self):
        return self.dirty

    def select(self, delta: int) -> None:
        if self.project.blocks:
            self.selected_index = max(0, min(len(self.project.blocks) - 1,
                                             self.selected_index + delta))

    def rotate_selected(self, clockwise: bool = False, retain: bool = False) -> None:
        if not self.project.blocks:
            return
        try:
            self.selected_index = rotate_block(self.project, self.selected_index,
                                               clockwise=clockwise, retain=retain)
        except (IndexError, ValueError) as e:
            self.message = str(e)
            return
        self.message = ''
        self.dirty = True

    def preview_lines(self) -> list[str]:
        if not self.project.blocks:
            return ['(no blocks)']
        block = self.project.blocks[self.selected_index]
        lines = [f'Block {block.id}  {block_type_name(block.block_type)}  '
                 f'attr={block.attribute}']
        lines += [' '.join(row) for row in block.pixels]
        return lines

    def build_ui(self):
        from prompt_toolkit.layout import HSplit, VSplit, Window, FormattedTextControl
        from prompt_toolkit.layout.controls import UIControl, UIContent
        from prompt_toolkit.key_binding import KeyBindings

        editor = self

        class BlockListControl(UIControl):
            def create_content(self, width, height):
                lines = [[('class:palette-header',
                           f' Blocks - {len(editor.project.blocks)} '.ljust(width))]]
                for i, block in enumerate(editor.project.blocks):
                    label = f' [{i:3d}] {block_type_name(block.block_type):<14s}'
                    style = ('class:palette-selected' if i == editor.selected_index
                             else 'class:palette-normal')
                    lines.append([(style, label.ljust(width))])
                return UIContent(
                    get_line=lambda i: lines[i] if i < len(lines) else [],
                    line_count=len(lines),
                )

        def get_preview():
            return [('class:palette-normal', '\n'.join(editor.preview_lines()))]

        def get_status():
            dirty = ' [MODIFIED]' if editor.dirty else ''
            return [('class:status', f' Block Editor | {editor.selected_index}/'
                                     f'{len(editor.project.blocks)}'),
                    ('class:status-dirty' if editor.dirty else 'class:status', dirty),
                    ('class:status-dirty', f' {editor.message}' if editor.message else '')]

        def get_help():
            return [
                ('class:help-key', ' Up/Down'), ('class:help-text', '=select '),
                ('class:help-key', 'r/R'), ('class:help-text', '=rotate ccw/cw '),
                ('class:help-key', 'c'), ('class:help-text', '=rotated copy '),
            ]

        root = HSplit([
            VSplit([
                Window(content=BlockListControl(), width=24, wrap_lines=False),
                Window(content=FormattedTextControl(get_preview)),
            ]),
            Window(content=FormattedTextControl(get_status), height=1),
            Window(content=FormattedTextControl(get_help), height=1),
        ])

        kb = KeyBindings()

        @kb.add('up')
        def _up(event):
            editor.select(-1)

        @kb.add('down')
        def _down(event):
            editor.select(1)

        @kb.add('r')
        def _ccw(event):
            editor.rotate_selected(clockwise=False)

        @kb.add('R')
        def _cw(event):
            editor.rotate_selected(clockwise=True)

        @kb.add('c')
        def _copy(event):
            editor.rotate_selected(clockwise=False, retain=True)

        return root, kb

    def save(self):
        if self.save_callback:
            self.save_callback(self.project)
        self.dirty = False


class SpriteEditor:
    """Sprite list with a frame preview.

    Up/Down selects a sprite, Left/Right steps through its frames,
    'r'/'R' rotate every frame.
    """

    def __init__(self, project, save_callback=None):
        self.project = project
        self.selected_index = 0
        self.frame_index = 0
        self.dirty = False
        self.save_callback = save_callback
        self.message = ''

    @property
    def name(self):
        return 'Sprites'

    @property
    def is_dirty(self):
        return self.dirty

    def select(self, delta: int) -> None:
        if self.project.sprites:
            self.selected_index = max(0, min(len(self.project.sprites) - 1,
                                             self.selected_index + delta))
            self.frame_index = 0

    def step_frame(self, delta: int) -> None:
        if self.project.sprites:
            frames = self.project.sprites[self.selected_index].frames
            if frames:
                self.frame_index = (self.frame_index + delta) % frames

    def rotate_selected(self, clockwise: bool = False) -> None:
        if not self.project.sprites:
            return
        try:
            rotate_sprite(self.project, self.selected_index, clockwise=clockwise)
        except IndexError as e:
            self.message = str(e)
            return
        self.message = ''
        self.dirty = True

    def preview_lines(self) -> list[str]:
        if not self.project.sprites:
            return ['(no sprites)']
        sprite = self.project.sprites[self.selected_index]
        lines = [f'Sprite {sprite.id}  frame {self.frame_index + 1}/{sprite.frames}']
        if sprite.frames:
            lines += sprite.frame_pixels(self.frame_index)
        return lines

    def build_ui(self):
        from prompt_toolkit.layout import HSplit, Window, FormattedTextControl
        from prompt_toolkit.key_binding import KeyBindings

        editor = self

        def get_preview():
            return [('class:palette-normal', '\n'.join(editor.preview_lines()))]

        def get_status():
            dirty = ' [MODIFIED]' if editor.dirty else ''
            return [('class:status', f' Sprite Editor | {editor.selected_index}/'
                                     f'{len(editor.project.sprites)}'),
                    ('class:status-dirty' if editor.dirty else 'class:status', dirty),
                    ('class:status-dirty', f' {editor.message}' if editor.message else '')]

        def get_help():
            return [
                ('class:help-key', ' Up/Down'), ('class:help-text', '=sprite '),
                ('class:help-key', 'Left/Right'), ('class:help-text', '=frame '),
                ('class:help-key', 'r/R'), ('class:help-text', '=rotate ccw/cw '),
            ]

        root = HSplit([
            Window(content=FormattedTextControl(get_preview)),
            Window(content=FormattedTextControl(get_status), height=1),
            Window(content=FormattedTextControl(get_help), height=1),
        ])

        kb = KeyBindings()

        @kb.add('up')
        def _up(event):
            editor.select(-1)

        @kb.add('down')
        def _down(event):
            editor.select(1)

        @kb.add('left')
        def _prev(event):
            editor.step_frame(-1)

        @kb.add('right')
        def _next(event):
            editor.step_frame(1)

        @kb.add('r')
        def _ccw(event):
            editor.rotate_selected(clockwise=False)

        @kb.add('R')
        def _cw(event):
            editor.rotate_selected(clockwise=True)

        return root, kb

    def save(self):
        if self.save_callback:
            self.save_callback(self.project)
        self.dirty = False


class ScreenViewer:
    """Read-only display of screen block grids."""

    def __init__(self, project):
        self.project = project
        self.selected_index = 0

    @property
    def name(self):
        return 'Screens'

    @property
    def is_dirty(self):
        return False

    def select(self, delta: int) -> None:
        if self.project.screens:
            self.selected_index = max(0, min(len(self.project.screens) - 1,
                                             self.selected_index + delta))

    def grid_lines(self) -> list[str]:
        if not self.project.screens:
            return ['(no screens)']
        screen = self.project.screens[self.selected_index]
        lines = [f'Screen {screen.id}']
        lines += [' '.join(f'{cell:3d}' for cell in row) for row in screen.grid]
        for p in self.project.placements:
            if p.screen == screen.id:
                lines.append(f'sprite type={p.type} image={p.image} at ({p.x}, {p.y})')
        return lines

    def build_ui(self):
        from prompt_toolkit.layout import HSplit, Window, FormattedTextControl
        from prompt_toolkit.key_binding import KeyBindings

        viewer = self

        def get_grid():
            return [('class:palette-normal', '\n'.join(viewer.grid_lines()))]

        def get_status():
            return [('class:status', f' Screen Viewer (read-only) | '
                                     f'{viewer.selected_index}/{len(viewer.project.screens)}')]

        def get_help():
            return [('class:help-key', ' Left/Right'), ('class:help-text', '=screen ')]

        root = HSplit([
            Window(content=FormattedTextControl(get_grid)),
            Window(content=FormattedTextControl(get_status), height=1),
            Window(content=FormattedTextControl(get_help), height=1),
        ])

        kb = KeyBindings()

        @kb.add('left')
        def _prev(event):
            viewer.select(-1)

        @kb.add('right')
        def _next(event):
            viewer.select(1)

        return root, kb

    def save(self):
        pass


def make_block_editor(project, save_callback):
    """Factory: create BlockEditor tab."""
    return BlockEditor(project, save_callback=save_callback)


def make_sprite_editor(project, save_callback):
    """Factory: create SpriteEditor tab."""
    return SpriteEditor(project, save_callback=save_callback)


def make_screen_viewer(project):
    """Factory: create ScreenViewer tab."""
    return ScreenViewer(project)
