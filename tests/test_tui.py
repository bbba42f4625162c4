"""Tests for TUI module."""

from unittest.mock import patch

from family_plate.shopping import PreviewItem, toggle_preview_item
from family_plate.tui import PreviewResult, PreviewScreen, interactive_preview


def make_item(name: str, selected: bool = True) -> PreviewItem:
    """Create a PreviewItem for testing."""
    return PreviewItem(
        name=name,
        original_text=f"1 cup {name.lower()}",
        recipe_name="Test Recipe",
        selected=selected,
    )


class TestPreviewResult:
    """Tests for PreviewResult dataclass."""

    def test_confirmed_result(self):
        result = PreviewResult(confirmed=True, items=[make_item("Flour")])

        assert result.confirmed is True
        assert result.items[0].name == "Flour"

    def test_cancelled_result(self):
        result = PreviewResult(confirmed=False, items=[make_item("Flour")])

        assert result.confirmed is False
        assert len(result.items) == 1


class TestPreviewScreen:
    """Tests for PreviewScreen app."""

    def test_screen_initialization(self):
        app = PreviewScreen([make_item("Flour"), make_item("Salt")], "Pancakes")

        assert len(app.items) == 2
        assert app.recipe_title == "Pancakes"

    def test_screen_copies_items(self):
        """Ensure the screen makes a copy of the item list."""
        items = [make_item("Flour")]
        app = PreviewScreen(items, "Test")

        items.append(make_item("Salt"))

        assert len(app.items) == 1

    def test_default_title(self):
        app = PreviewScreen([], None)
        assert app.recipe_title == "Add to Shopping List"

    def test_get_summary_all_selected(self):
        app = PreviewScreen([make_item("Flour"), make_item("Salt")], "Test")

        assert app._get_summary() == "Items: 2 | Selected: 2"

    def test_get_summary_partial(self):
        app = PreviewScreen([make_item("Flour"), make_item("Salt", selected=False)], "Test")

        summary = app._get_summary()

        assert "Items: 2" in summary
        assert "Selected: 1" in summary

    def test_get_summary_empty(self):
        assert PreviewScreen([], "Test")._get_summary() == "Items: 0 | Selected: 0"


class TestPreviewScreenIntegration:
    """Integration tests for PreviewScreen (without actually running the app)."""

    def test_items_can_be_toggled(self):
        app = PreviewScreen([make_item("Flour"), make_item("Salt")], "Test")

        app.items = toggle_preview_item(app.items, 1)

        assert [item.selected for item in app.items] == [True, False]
        assert app._get_summary() == "Items: 2 | Selected: 1"

    def test_original_items_untouched_by_toggle(self):
        items = [make_item("Flour")]
        app = PreviewScreen(items, "Test")

        app.items = toggle_preview_item(app.items, 0)

        assert items[0].selected is True


class TestInteractivePreview:
    """Tests for interactive_preview function."""

    def test_returns_app_result(self):
        items = [make_item("Flour")]
        expected = PreviewResult(confirmed=True, items=items)

        with patch.object(PreviewScreen, "run", return_value=expected):
            assert interactive_preview(items, "Test") is expected

    def test_no_result_counts_as_cancel(self):
        items = [make_item("Flour")]

        with patch.object(PreviewScreen, "run", return_value=None):
            result = interactive_preview(items, "Test")

        assert result.confirmed is False
        assert result.items == items
