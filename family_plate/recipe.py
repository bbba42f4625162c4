"""Recipe data model and serialization."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

# Library filter categories
CATEGORIES: tuple[str, ...] = (
    "Breakfast",
    "Lunch",
    "Dinner",
    "Dessert",
    "Snacks",
    "Appetizers",
    "Sides",
    "Drinks",
    "Holiday",
    "Quick Meals",
)

# Prefix marking a time that was estimated rather than read from the recipe
APPROX_MARKER = "~"

DEFAULT_TITLE = "Untitled"


class RecipeFormatError(ValueError):
    """Exception raised when a stored recipe record cannot be read."""

    pass


@dataclass
class IngredientLine:
    """One ingredient line as displayed and stored."""

    text: str
    modified: bool = False  # True when a substitution rewrote the line


@dataclass
class IngredientSection:
    """A named or unnamed group of ingredient lines."""

    title: str = ""
    items: list[IngredientLine] = field(default_factory=list)

    @property
    def texts(self) -> list[str]:
        return [line.text for line in self.items]

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "items": self.texts,
            "uncertain": [line.modified for line in self.items],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "IngredientSection":
        """
        Create a section, accepting plain strings or {text, modified} records.

        Raises:
            RecipeFormatError: If ``items`` or ``uncertain`` is not a list
        """
        if not isinstance(data, dict):
            raise RecipeFormatError(f"Expected a section object, got {type(data).__name__}")

        raw_items = data.get("items") or []
        flags = data.get("uncertain") or []
        if not isinstance(raw_items, list) or not isinstance(flags, list):
            raise RecipeFormatError("Section items and flags must be lists")

        items: list[IngredientLine] = []
        for i, raw in enumerate(raw_items):
            if isinstance(raw, dict):
                items.append(
                    IngredientLine(
                        text=str(raw.get("text", "")), modified=bool(raw.get("modified"))
                    )
                )
            else:
                modified = bool(flags[i]) if i < len(flags) else False
                items.append(IngredientLine(text=str(raw), modified=modified))

        return cls(title=str(data.get("title") or ""), items=items)


@dataclass
class Story:
    """Family story attached to a recipe."""

    text: str = ""
    creator: str = ""
    origin: str = ""
    occasions: str = ""

    def to_dict(self) -> dict[str, str]:
        return {
            "text": self.text,
            "creator": self.creator,
            "origin": self.origin,
            "occasions": self.occasions,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "Story":
        data = data or {}
        if not isinstance(data, dict):
            raise RecipeFormatError(f"Expected a story object, got {type(data).__name__}")
        return cls(
            text=str(data.get("text") or ""),
            creator=str(data.get("creator") or ""),
            origin=str(data.get("origin") or ""),
            occasions=str(data.get("occasions") or ""),
        )


@dataclass
class Recipe:
    """A digitized recipe."""

    id: int
    title: str = DEFAULT_TITLE
    image: str = ""  # data URL of the photographed recipe
    ingredient_sections: list[IngredientSection] = field(default_factory=list)
    instructions: list[str] = field(default_factory=list)
    servings: str = ""
    prep_time: str = ""
    cook_time: str = ""
    date_added: str = ""
    category: str = ""
    tags: list[str] = field(default_factory=list)
    story: Story = field(default_factory=Story)

    def all_ingredients(self) -> list[str]:
        """All ingredient lines across sections, in display order."""
        return [line.text for section in self.ingredient_sections for line in section.items]

    def to_dict(self) -> dict[str, Any]:
        """Convert recipe to dictionary for serialization."""
        return {
            "id": self.id,
            "title": self.title,
            "image": self.image,
            "ingredientSections": [s.to_dict() for s in self.ingredient_sections],
            "instructions": list(self.instructions),
            "servings": self.servings,
            "prepTime": self.prep_time,
            "cookTime": self.cook_time,
            "dateAdded": self.date_added,
            "category": self.category,
            "tags": list(self.tags),
            "story": self.story.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Any) -> "Recipe":
        """
        Create recipe from a stored dictionary.

        Fields added in later revisions (category, tags, story) and the
        uncertain flags are optional. Records with a flat ``ingredients`` list
        are read as a single unnamed section.

        Raises:
            RecipeFormatError: If the record is not a mapping, lacks an id,
                or has a field of the wrong shape
        """
        if not isinstance(data, dict):
            raise RecipeFormatError(f"Expected a recipe object, got {type(data).__name__}")

        try:
            recipe_id = int(data["id"])
        except (KeyError, TypeError, ValueError) as e:
            raise RecipeFormatError(f"Recipe has no usable id: {e}") from e

        raw_sections = data.get("ingredientSections")
        if raw_sections is None:
            raw_sections = [{"title": "", "items": data.get("ingredients") or []}]
        if not isinstance(raw_sections, list):
            raise RecipeFormatError("ingredientSections must be a list")
        sections = [IngredientSection.from_dict(s) for s in raw_sections]

        instructions = data.get("instructions") or []
        tags = data.get("tags") or []
        for name, value in (("instructions", instructions), ("tags", tags)):
            if not isinstance(value, list):
                raise RecipeFormatError(f"{name} must be a list, got {type(value).__name__}")

        return cls(
            id=recipe_id,
            title=str(data.get("title") or DEFAULT_TITLE),
            image=str(data.get("image") or ""),
            ingredient_sections=sections,
            instructions=[str(step) for step in instructions],
            servings=str(data.get("servings") or ""),
            prep_time=str(data.get("prepTime") or ""),
            cook_time=str(data.get("cookTime") or ""),
            date_added=str(data.get("dateAdded") or ""),
            category=str(data.get("category") or ""),
            tags=[str(tag) for tag in tags],
            story=Story.from_dict(data.get("story")),
        )


def new_recipe_id() -> int:
    """Generate a recipe id from the current time in milliseconds."""
    return int(datetime.now().timestamp() * 1000)


def today_string() -> str:
    """Date string shown as the recipe's added date."""
    return datetime.now().strftime("%Y-%m-%d")


def mark_estimated(value: str) -> str:
    """Prefix a machine-estimated time with the approximate marker."""
    if value.startswith(APPROX_MARKER):
        return value
    return f"{APPROX_MARKER}{value}"


def filter_by_category(recipes: list[Recipe], category: str | None) -> list[Recipe]:
    """
    Filter recipes by category (case-insensitive).

    ``None``, empty or ``"all"`` returns every recipe.
    """
    if not category or category.lower() == "all":
        return list(recipes)
    wanted = category.lower()
    return [r for r in recipes if r.category.lower() == wanted]
