"""Interactive TUI for choosing which ingredients go on the shopping list."""

from dataclasses import dataclass

from textual import on
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.widgets import Button, DataTable, Footer, Header, Static

from .shopping import PreviewItem, deselect_all, select_all, toggle_preview_item


@dataclass
class PreviewResult:
    """Result from the interactive preview."""

    confirmed: bool
    items: list[PreviewItem]


class PreviewScreen(App[PreviewResult]):
    """Interactive screen for selecting preview items."""

    CSS = """
    Screen {
        background: $surface;
    }

    #main-container {
        height: 100%;
        padding: 1;
    }

    #summary {
        height: 3;
        padding: 0 1;
        background: $primary-background;
        color: $text;
        content-align: center middle;
    }

    #preview-table {
        height: 1fr;
        margin: 1 0;
    }

    #button-bar {
        height: 3;
        align: center middle;
        padding: 0 1;
    }

    #button-bar Button {
        margin: 0 1;
    }
    """

    BINDINGS = [
        Binding("space", "toggle", "Toggle"),
        Binding("a", "select_all", "All"),
        Binding("n", "deselect_all", "None"),
        Binding("c", "confirm", "Confirm"),
        Binding("q", "quit_cancel", "Cancel"),
        Binding("escape", "quit_cancel", "Cancel"),
    ]

    def __init__(
        self,
        items: list[PreviewItem],
        recipe_title: str | None = None,
    ) -> None:
        super().__init__()
        self.items = list(items)
        self.recipe_title = recipe_title or "Add to Shopping List"

    def compose(self) -> ComposeResult:
        yield Header()
        with Vertical(id="main-container"):
            yield Static(self._get_summary(), id="summary")
            table = DataTable(id="preview-table")
            table.cursor_type = "row"
            table.add_columns("", "Item", "From recipe line")
            yield table
            with Horizontal(id="button-bar"):
                yield Button("Add selected (c)", variant="success", id="btn-confirm")
                yield Button("Cancel (q)", variant="error", id="btn-cancel")
        yield Footer()

    def on_mount(self) -> None:
        self.title = self.recipe_title
        self._refresh_table()

    def _get_summary(self) -> str:
        selected = sum(1 for item in self.items if item.selected)
        return f"Items: {len(self.items)} | Selected: {selected}"

    def _refresh_table(self) -> None:
        table = self.query_one("#preview-table", DataTable)
        cursor = table.cursor_row
        table.clear()

        for item in self.items:
            table.add_row(
                "[x]" if item.selected else "[ ]",
                item.name[:30],
                item.original_text[:50],
            )

        if cursor is not None and 0 <= cursor < len(self.items):
            table.move_cursor(row=cursor)

        summary = self.query_one("#summary", Static)
        summary.update(self._get_summary())

    def action_toggle(self) -> None:
        table = self.query_one("#preview-table", DataTable)
        if table.cursor_row is not None and 0 <= table.cursor_row < len(self.items):
            self.items = toggle_preview_item(self.items, table.cursor_row)
            self._refresh_table()

    def action_select_all(self) -> None:
        self.items = select_all(self.items)
        self._refresh_table()

    def action_deselect_all(self) -> None:
        self.items = deselect_all(self.items)
        self._refresh_table()

    def action_confirm(self) -> None:
        self.exit(PreviewResult(confirmed=True, items=self.items))

    def action_quit_cancel(self) -> None:
        self.exit(PreviewResult(confirmed=False, items=self.items))

    @on(DataTable.RowSelected)
    def on_row_selected(self, event: DataTable.RowSelected) -> None:
        """Enter or click toggles the row."""
        self.action_toggle()

    @on(Button.Pressed, "#btn-confirm")
    def on_confirm_button(self) -> None:
        self.action_confirm()

    @on(Button.Pressed, "#btn-cancel")
    def on_cancel_button(self) -> None:
        self.action_quit_cancel()


def interactive_preview(
    items: list[PreviewItem],
    recipe_title: str | None = None,
) -> PreviewResult:
    """
    Launch interactive TUI for selecting preview items.

    Args:
        items: Preview items to choose from
        recipe_title: Optional title for the screen

    Returns:
        PreviewResult with confirmed status and the final selection
    """
    app = PreviewScreen(items, recipe_title)
    result = app.run()
    # Handle case where app exits without explicit result (e.g., crash)
    if result is None:
        return PreviewResult(confirmed=False, items=items)
    return result
