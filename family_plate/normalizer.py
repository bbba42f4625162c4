"""Ingredient line normalization.

Reduces a freeform ingredient line such as ``"2 cups flour, sifted"`` to the
grocery item it names (``"Flour"``). The result is used as the shopping list
key; the stored recipe line is never touched.
"""

import re

# Units of measure, packaging, sizes and filler words stripped from a line
UNIT_WORDS: tuple[str, ...] = (
    # Volume
    "cup",
    "cups",
    "tablespoon",
    "tablespoons",
    "tbsp",
    "tbs",
    "teaspoon",
    "teaspoons",
    "tsp",
    "pint",
    "pints",
    "pt",
    "quart",
    "quarts",
    "qt",
    "gallon",
    "gallons",
    "gal",
    "ml",
    "milliliter",
    "milliliters",
    "l",
    "liter",
    "liters",
    # Weight
    "ounce",
    "ounces",
    "oz",
    "pound",
    "pounds",
    "lb",
    "lbs",
    "g",
    "gram",
    "grams",
    "kg",
    "kilogram",
    "kilograms",
    # Count and packaging
    "can",
    "cans",
    "package",
    "packages",
    "pkg",
    "pkgs",
    "stick",
    "sticks",
    "clove",
    "cloves",
    "head",
    "heads",
    "bunch",
    "bunches",
    "slice",
    "slices",
    "piece",
    "pieces",
    "pinch",
    "pinches",
    "dash",
    "dashes",
    "sprig",
    "sprigs",
    # Sizes
    "large",
    "medium",
    "small",
    "halves",
    "halved",
    "half",
    "and",
)

# Preparation and state descriptors
DESCRIPTOR_WORDS: tuple[str, ...] = (
    # Cutting
    "chopped",
    "minced",
    "diced",
    "sliced",
    "grated",
    "shredded",
    "cubed",
    "julienned",
    "crushed",
    "ground",
    "quartered",
    "thinly sliced",
    "finely chopped",
    "finely minced",
    "roughly chopped",
    "coarsely chopped",
    # Temperature and texture
    "melted",
    "softened",
    "room temperature",
    "at room temperature",
    "cold",
    "warm",
    "hot",
    "thawed",
    "chilled",
    "warmed",
    "toasted",
    "untoasted",
    "blanched",
    "unblanched",
    "dried",
    "whole",
    # Doneness
    "cooked",
    "raw",
    # Packing
    "firmly packed",
    "loosely packed",
    "packed",
    "sifted",
    "unsifted",
    # Mixing
    "beaten",
    "lightly beaten",
    "well beaten",
    "divided",
    "separated",
    # Usage
    "optional",
    "to taste",
    "as needed",
    "for garnish",
    "for serving",
    # Cleaning and trimming
    "peeled",
    "cored",
    "seeded",
    "deveined",
    "trimmed",
    "rinsed",
    "drained",
    "pitted",
)


def _word_pattern(words: tuple[str, ...]) -> re.Pattern[str]:
    """Compile a whole-word, case-insensitive alternation, longest phrase first."""
    alternation = "|".join(re.escape(w) for w in sorted(set(words), key=len, reverse=True))
    return re.compile(rf"\b(?:{alternation})\b", re.IGNORECASE)


_LEADING_QUANTITY = re.compile(r"^[\d\s/.\-]+")
_STRAY_FRACTION = re.compile(r"^/\s*\d+\s*")
_UNITS = _word_pattern(UNIT_WORDS)
_PARENTHETICAL = re.compile(r"\([^)]*\)")
_DESCRIPTORS = _word_pattern(DESCRIPTOR_WORDS)
_LEADING_DOTS = re.compile(r"^[.\s]+")
_TRAILING_DOTS = re.compile(r"[.\s]+$")
_WHITESPACE = re.compile(r"\s+")
_LEADING_OF = re.compile(r"^of\s+", re.IGNORECASE)
_TRAILING_OF = re.compile(r"\s+of$", re.IGNORECASE)


def normalize_ingredient(raw: str) -> str:
    """
    Reduce a raw ingredient line to its canonical grocery item name.

    Examples:
        "2 cups flour, sifted" -> "Flour"
        "1/2 tsp. shortening (melted)" -> "Shortening"
        "1 tsp salt" -> "Salt"
        "" -> ""

    Args:
        raw: Ingredient line as extracted from the recipe

    Returns:
        Canonical name with its first character capitalized, or "" when
        nothing is left after stripping
    """
    text = raw or ""

    text = _LEADING_QUANTITY.sub("", text)
    text = _STRAY_FRACTION.sub("", text)
    text = _UNITS.sub("", text)
    text = _PARENTHETICAL.sub("", text)
    text = _DESCRIPTORS.sub("", text)
    text = _LEADING_DOTS.sub("", text)
    text = _TRAILING_DOTS.sub("", text)
    text = text.replace(",", "")
    text = _WHITESPACE.sub(" ", text).strip()
    text = _LEADING_OF.sub("", text)
    text = _TRAILING_OF.sub("", text)

    if not text:
        return ""
    return text[0].upper() + text[1:]
