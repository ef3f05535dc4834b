"""Full-screen project editor hosting the block, sprite and screen tabs.

    apjedit edit <file>

Tab / Shift-Tab switch tabs, Ctrl-S saves, Ctrl-Q quits.
"""

from ..project import open_project, save_project
from .project_editor import make_block_editor, make_sprite_editor, make_screen_viewer

STYLE = {
    'tab': 'bg:#444444 #ffffff',
    'tab-active': 'bg:#00aaaa #000000 bold',
    'palette-header': 'bold',
    'palette-normal': '',
    'palette-selected': 'reverse',
    'status': 'bg:#222222 #aaaaaa',
    'status-dirty': 'bg:#222222 #ff5555 bold',
    'help-key': 'bold #00aaaa',
    'help-text': '#aaaaaa',
}


class ProjectApp:
    """Tab host for one project file."""

    def __init__(self, path: str, project):
        self.path = path
        self.project = project
        self.tabs = [
            make_block_editor(project, self.save_project),
            make_sprite_editor(project, self.save_project),
            make_screen_viewer(project),
        ]
        self.current = 0
        self.saved = 0

    @property
    def is_dirty(self):
        return any(tab.is_dirty for tab in self.tabs)

    def switch(self, delta: int) -> None:
        self.current = (self.current + delta) % len(self.tabs)

    def save_project(self, project) -> None:
        save_project(project, self.path)
        self.saved += 1

    def save_all(self) -> None:
        """Write the shared project once for every modified tab."""
        dirty = [tab for tab in self.tabs if tab.is_dirty]
        if not dirty:
            return
        self.save_project(self.project)
        for tab in dirty:
            tab.dirty = False

    def tab_labels(self) -> list[tuple[str, str]]:
        labels = []
        for i, tab in enumerate(self.tabs):
            mark = '*' if tab.is_dirty else ''
            style = 'class:tab-active' if i == self.current else 'class:tab'
            labels.append((style, f' {tab.name}{mark} '))
        return labels

    def build_app(self):
        from prompt_toolkit import Application
        from prompt_toolkit.key_binding import KeyBindings, merge_key_bindings
        from prompt_toolkit.key_binding.key_bindings import DynamicKeyBindings
        from prompt_toolkit.layout import HSplit, Layout, Window, FormattedTextControl
        from prompt_toolkit.layout.containers import DynamicContainer
        from prompt_toolkit.styles import Style

        built = [tab.build_ui() for tab in self.tabs]
        app_state = self

        kb = KeyBindings()

        @kb.add('tab')
        def _next(event):
            app_state.switch(1)

        @kb.add('s-tab')
        def _prev(event):
            app_state.switch(-1)

        @kb.add('c-s')
        def _save(event):
            app_state.save_all()

        @kb.add('c-q')
        def _quit(event):
            event.app.exit()

        root = HSplit([
            Window(content=FormattedTextControl(self.tab_labels), height=1),
            DynamicContainer(lambda: built[app_state.current][0]),
        ])
        bindings = merge_key_bindings([
            kb, DynamicKeyBindings(lambda: built[app_state.current][1]),
        ])
        return Application(layout=Layout(root), key_bindings=bindings,
                           style=Style.from_dict(STYLE), full_screen=True)

    def run(self) -> None:
        self.build_app().run()


def cmd_edit(args) -> None:
    app = ProjectApp(args.file, open_project(args.file))
    app.run()
    if app.is_dirty:
        print("  Unsaved changes discarded.")


def register_parser(subparsers) -> None:
    p = subparsers.add_parser('edit', help='Interactive project editor')
    p.add_argument('file', help='Project (.apj) file')


def dispatch(args) -> None:
    cmd_edit(args)
