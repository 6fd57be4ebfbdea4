"""Interactive Textual browser/editor for one skill package."""

from __future__ import annotations

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal
from textual.widgets import Footer, Header, OptionList, Static, TextArea
from textual.widgets.option_list import Option

from skillforge.workflow.editor import PackageEditor


class PackageBrowserApp(App[bool]):
    """Lists the package files and edits the active one.

    Exits with True when at least one save was committed.
    """

    TITLE = "Skill Package"
    CSS = """
    Screen {
        layout: vertical;
    }
    #info {
        height: 3;
        content-align: center middle;
        padding: 0 1;
    }
    #files {
        width: 36;
        height: 1fr;
    }
    #content {
        height: 1fr;
    }
    """

    BINDINGS = [
        Binding("ctrl+s", "save", "Save"),
        Binding("ctrl+r", "revert", "Revert"),
        Binding("ctrl+q", "quit_app", "Quit", priority=True),
    ]

    def __init__(self, editor: PackageEditor) -> None:
        super().__init__()
        self._editor = editor
        self._saved = False

    @property
    def editor(self) -> PackageEditor:
        return self._editor

    def _info_text(self) -> str:
        package = self._editor.package
        dirty = " | unsaved changes" if self._editor.is_dirty else ""
        return (
            f"{package.frontmatter.name} | "
            f"Files: {package.file_count} | "
            f"Active: {self._editor.active_file}{dirty}"
        )

    def compose(self) -> ComposeResult:
        yield Header()
        yield Static(self._info_text(), id="info", markup=False)
        with Horizontal():
            yield OptionList(
                *[Option(name, id=name) for name in self._editor.file_names()],
                id="files",
            )
            yield TextArea(
                self._editor.content_of(self._editor.active_file), id="content"
            )
        yield Footer()

    def on_mount(self) -> None:
        self.query_one("#files", OptionList).highlighted = 0

    def _refresh_info(self) -> None:
        self.query_one("#info", Static).update(self._info_text())

    def _load_active(self) -> None:
        text_area = self.query_one("#content", TextArea)
        text_area.load_text(self._editor.content_of(self._editor.active_file))
        self._refresh_info()

    def select_file(self, name: str) -> None:
        path = self._editor.resolve(name)
        index = self._editor.file_names().index(path)
        self.query_one("#files", OptionList).highlighted = index

    def on_option_list_option_highlighted(
        self, event: OptionList.OptionHighlighted
    ) -> None:
        name = event.option.id
        if name is None or name == self._editor.active_file:
            return
        self._editor.set_active_file(name)
        self._load_active()

    def on_text_area_changed(self, event: TextArea.Changed) -> None:
        active = self._editor.active_file
        text = event.text_area.text
        if text != self._editor.content_of(active):
            self._editor.edit_content(active, text)
        self._refresh_info()

    def action_save(self) -> None:
        if not self._editor.is_dirty:
            self.notify("Nothing to save")
            return
        self._editor.commit()
        self._saved = True
        self._refresh_info()
        self.notify("Saved")

    def action_revert(self) -> None:
        self._editor.revert()
        self._load_active()

    def action_quit_app(self) -> None:
        self.exit(self._saved)
