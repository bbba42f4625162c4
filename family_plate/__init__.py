"""FamilyPlate - digitize handwritten recipes and build shopping lists."""

__version__ = "1.0.0"

from .extraction import ExtractionClient, ExtractionError, recipe_from_extraction
from .normalizer import normalize_ingredient
from .postprocess import post_process_sections
from .recipe import IngredientLine, IngredientSection, Recipe, Story
from .shopping import (
    PreviewItem,
    ShoppingListItem,
    Source,
    build_preview,
    merge_into_shopping_list,
)
from .store import JsonFileStore, MemoryStore, RecipeBook, StoreError

__all__ = [
    "Recipe",
    "IngredientSection",
    "IngredientLine",
    "Story",
    "normalize_ingredient",
    "post_process_sections",
    "build_preview",
    "merge_into_shopping_list",
    "PreviewItem",
    "ShoppingListItem",
    "Source",
    "RecipeBook",
    "MemoryStore",
    "JsonFileStore",
    "StoreError",
    "ExtractionClient",
    "ExtractionError",
    "recipe_from_extraction",
]
