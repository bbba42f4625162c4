"""Key-value persistence for recipes and the shopping list."""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Protocol

from .recipe import Recipe, RecipeFormatError
from .shopping import (
    IdFactory,
    PreviewItem,
    ShoppingListItem,
    merge_into_shopping_list,
    new_item_id,
)

logger = logging.getLogger(__name__)

RECIPE_PREFIX = "recipe:"
SHOPPING_LIST_KEY = "shopping-list"


class StoreError(Exception):
    """Exception raised when the store cannot be read or written."""

    pass


class RecipeNotFoundError(StoreError):
    """Exception raised when a recipe id is not in the store."""

    pass


class KeyValueStore(Protocol):
    """String keys to string values, with prefix listing."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...

    def list_keys(self, prefix: str) -> list[str]: ...


class MemoryStore:
    """In-memory store."""

    def __init__(self, data: dict[str, str] | None = None):
        self.data: dict[str, str] = dict(data or {})

    def get(self, key: str) -> str | None:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        self.data[key] = value

    def delete(self, key: str) -> None:
        self.data.pop(key, None)

    def list_keys(self, prefix: str) -> list[str]:
        return [k for k in self.data if k.startswith(prefix)]


class JsonFileStore:
    """Store kept as a single JSON object on disk."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def _load(self) -> dict[str, str]:
        if not self.path.exists():
            return {}

        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise StoreError(f"Failed to read store {self.path}: {e}") from e

        if not isinstance(data, dict):
            raise StoreError(f"Store {self.path} does not contain a JSON object")
        return data

    def _save(self, data: dict[str, str]) -> None:
        """Write the whole store, replacing the file only once the write succeeded."""
        tmp_path: Path | None = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=self.path.parent,
                prefix=f".{self.path.name}.",
                suffix=".tmp",
                delete=False,
            ) as f:
                tmp_path = Path(f.name)
                json.dump(data, f, indent=2, ensure_ascii=False)
            os.replace(tmp_path, self.path)
        except (OSError, TypeError, ValueError) as e:
            if tmp_path is not None:
                tmp_path.unlink(missing_ok=True)
            raise StoreError(f"Failed to write store {self.path}: {e}") from e

    def get(self, key: str) -> str | None:
        return self._load().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        self._save(data)

    def delete(self, key: str) -> None:
        data = self._load()
        if key in data:
            del data[key]
            self._save(data)

    def list_keys(self, prefix: str) -> list[str]:
        return [k for k in self._load() if k.startswith(prefix)]


def recipe_key(recipe_id: int) -> str:
    return f"{RECIPE_PREFIX}{recipe_id}"


class RecipeBook:
    """Recipes and the shopping list on top of a key-value store."""

    def __init__(self, store: KeyValueStore):
        self.store = store

    # Recipes

    def load_recipes(self) -> list[Recipe]:
        """
        Load every stored recipe, newest first.

        Entries that cannot be parsed are skipped with a warning.
        """
        recipes: list[Recipe] = []
        for key in self.store.list_keys(RECIPE_PREFIX):
            raw = self.store.get(key)
            if not raw:
                continue
            try:
                recipes.append(Recipe.from_dict(json.loads(raw)))
            except (json.JSONDecodeError, RecipeFormatError) as e:
                logger.warning("Skipping unreadable recipe %s: %s", key, e)

        recipes.sort(key=lambda r: r.id, reverse=True)
        return recipes

    def get_recipe(self, recipe_id: int) -> Recipe:
        """
        Get a recipe by id.

        Raises:
            RecipeNotFoundError: If no recipe is stored under the id
            StoreError: If the stored record cannot be parsed
        """
        raw = self.store.get(recipe_key(recipe_id))
        if not raw:
            raise RecipeNotFoundError(f"Recipe {recipe_id} not found")

        try:
            return Recipe.from_dict(json.loads(raw))
        except (json.JSONDecodeError, RecipeFormatError) as e:
            raise StoreError(f"Recipe {recipe_id} is unreadable: {e}") from e

    def save_recipe(self, recipe: Recipe) -> None:
        self.store.set(recipe_key(recipe.id), json.dumps(recipe.to_dict(), ensure_ascii=False))
        logger.debug("Saved recipe %s (%s)", recipe.id, recipe.title)

    def delete_recipe(self, recipe_id: int) -> None:
        """
        Delete a recipe by id.

        Raises:
            RecipeNotFoundError: If no recipe is stored under the id
        """
        key = recipe_key(recipe_id)
        if self.store.get(key) is None:
            raise RecipeNotFoundError(f"Recipe {recipe_id} not found")
        self.store.delete(key)
        logger.debug("Deleted recipe %s", recipe_id)

    # Shopping list

    def load_shopping_list(self) -> list[ShoppingListItem]:
        """
        Load the shopping list; an absent list is empty.

        Raises:
            StoreError: If the stored list is not a JSON array
        """
        raw = self.store.get(SHOPPING_LIST_KEY)
        if not raw:
            return []

        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            raise StoreError(f"Shopping list is unreadable: {e}") from e
        if not isinstance(data, list):
            raise StoreError("Shopping list is not a list")

        items: list[ShoppingListItem] = []
        for entry in data:
            try:
                items.append(ShoppingListItem.from_dict(entry))
            except (KeyError, TypeError, AttributeError) as e:
                logger.warning("Skipping unreadable shopping list item %r: %s", entry, e)
        return items

    def save_shopping_list(self, items: list[ShoppingListItem]) -> None:
        self.store.set(
            SHOPPING_LIST_KEY,
            json.dumps([item.to_dict() for item in items], ensure_ascii=False),
        )

    def add_to_shopping_list(
        self,
        preview: list[PreviewItem],
        id_factory: IdFactory = new_item_id,
    ) -> list[ShoppingListItem]:
        """Merge selected preview items into the stored list and save it."""
        merged = merge_into_shopping_list(self.load_shopping_list(), preview, id_factory)
        self.save_shopping_list(merged)
        return merged
