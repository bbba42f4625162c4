"""Shopping list: preview ingredients from a recipe and merge them into the list."""

import uuid
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any

from .normalizer import normalize_ingredient
from .recipe import Recipe

IdFactory = Callable[[], str]


@dataclass(frozen=True)
class Source:
    """Which recipe and which original line contributed to a list item."""

    recipe_name: str
    original_text: str

    def to_dict(self) -> dict[str, str]:
        return {"recipeName": self.recipe_name, "originalText": self.original_text}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Source":
        return cls(
            recipe_name=data.get("recipeName") or "",
            original_text=data.get("originalText") or "",
        )


@dataclass
class ShoppingListItem:
    """An item on the shopping list, keyed by its canonical name."""

    id: str
    name: str
    checked: bool = False
    sources: list[Source] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "checked": self.checked,
            "sources": [s.to_dict() for s in self.sources],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ShoppingListItem":
        return cls(
            id=str(data["id"]),
            name=str(data["name"]),
            checked=bool(data.get("checked", False)),
            sources=[Source.from_dict(s) for s in data.get("sources") or []],
        )


@dataclass
class PreviewItem:
    """A candidate list entry awaiting confirmation."""

    name: str
    original_text: str
    recipe_name: str
    selected: bool = True


def new_item_id() -> str:
    """Generate a list item id: milliseconds since epoch plus a random suffix."""
    millis = int(datetime.now().timestamp() * 1000)
    return f"{millis}-{uuid.uuid4().hex[:8]}"


# ============================================================================
# Preview
# ============================================================================


def build_preview(recipe: Recipe) -> list[PreviewItem]:
    """
    Build the selectable preview for a recipe's ingredients.

    Lines from every section are flattened in display order and normalized.
    Lines whose canonical name is empty are dropped.
    """
    preview: list[PreviewItem] = []
    for original in recipe.all_ingredients():
        name = normalize_ingredient(original)
        if name:
            preview.append(
                PreviewItem(name=name, original_text=original, recipe_name=recipe.title)
            )
    return preview


def toggle_preview_item(items: list[PreviewItem], index: int) -> list[PreviewItem]:
    """
    Flip ``selected`` on the item at ``index``.

    Raises:
        IndexError: If index is outside the list (negative indices included)
    """
    if not 0 <= index < len(items):
        raise IndexError(f"Preview index {index} out of range (0-{len(items) - 1})")
    return [
        replace(item, selected=not item.selected) if i == index else replace(item)
        for i, item in enumerate(items)
    ]


def select_all(items: list[PreviewItem]) -> list[PreviewItem]:
    return [replace(item, selected=True) for item in items]


def deselect_all(items: list[PreviewItem]) -> list[PreviewItem]:
    return [replace(item, selected=False) for item in items]


def selected_items(items: list[PreviewItem]) -> list[PreviewItem]:
    return [item for item in items if item.selected]


# ============================================================================
# Shopping list operations
# ============================================================================


def _copy_item(item: ShoppingListItem) -> ShoppingListItem:
    return replace(item, sources=list(item.sources))


def merge_into_shopping_list(
    existing: list[ShoppingListItem],
    items: list[PreviewItem],
    id_factory: IdFactory = new_item_id,
) -> list[ShoppingListItem]:
    """
    Merge selected preview items into a shopping list.

    Items are matched by case-insensitive name. A match gains the preview
    item's source unless that exact (recipe, line) pair is already recorded.
    An unmatched item becomes a new unchecked entry. Matching also applies to
    entries created earlier in the same batch, so the first selected item
    decides the entry's name.

    Args:
        existing: Current shopping list (not modified)
        items: Preview items; unselected ones are ignored
        id_factory: Callable producing ids for new entries

    Returns:
        The merged list
    """
    merged = [_copy_item(item) for item in existing]
    index: dict[str, ShoppingListItem] = {}
    for entry in merged:
        index.setdefault(entry.name.lower(), entry)

    for preview in items:
        if not preview.selected:
            continue

        source = Source(recipe_name=preview.recipe_name, original_text=preview.original_text)
        key = preview.name.lower()
        entry = index.get(key)

        if entry is not None:
            if source not in entry.sources:
                entry.sources.append(source)
        else:
            entry = ShoppingListItem(id=id_factory(), name=preview.name, sources=[source])
            merged.append(entry)
            index[key] = entry

    return merged


def toggle_checked(items: list[ShoppingListItem], item_id: str) -> list[ShoppingListItem]:
    """Flip ``checked`` on the item with ``item_id``; unknown ids change nothing."""
    return [
        replace(_copy_item(item), checked=not item.checked)
        if item.id == item_id
        else _copy_item(item)
        for item in items
    ]


def delete_item(items: list[ShoppingListItem], item_id: str) -> list[ShoppingListItem]:
    """Remove the item with ``item_id``; unknown ids change nothing."""
    return [_copy_item(item) for item in items if item.id != item_id]


def clear(items: list[ShoppingListItem]) -> list[ShoppingListItem]:
    return []


def find_item(items: list[ShoppingListItem], item_id: str) -> ShoppingListItem | None:
    return next((item for item in items if item.id == item_id), None)


def format_sources(item: ShoppingListItem) -> str:
    """Comma-separated recipe names an item came from, without repeats."""
    names: list[str] = []
    for source in item.sources:
        if source.recipe_name not in names:
            names.append(source.recipe_name)
    return ", ".join(names)


def summarize(items: list[ShoppingListItem]) -> dict[str, int]:
    checked = sum(1 for item in items if item.checked)
    return {"total": len(items), "checked": checked, "remaining": len(items) - checked}
