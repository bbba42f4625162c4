"""Substitution of deprecated ingredient names in extracted recipes."""

import re

from .recipe import IngredientLine, IngredientSection

# Deprecated or regional term -> modern equivalent
SUBSTITUTIONS: dict[str, str] = {
    "oleo": "margarine",
    "crisco": "shortening",
}

_PATTERNS: list[tuple[re.Pattern[str], str]] = [
    (re.compile(rf"\b{re.escape(old)}\b", re.IGNORECASE), new)
    for old, new in SUBSTITUTIONS.items()
]


def substitute_line(text: str) -> IngredientLine:
    """
    Replace every deprecated term in a line.

    Examples:
        "1/2 tsp. Crisco (melted)" -> IngredientLine("1/2 tsp. shortening (melted)", True)
        "2 cups flour" -> IngredientLine("2 cups flour", False)
    """
    modified = False
    for pattern, replacement in _PATTERNS:
        text, count = pattern.subn(replacement, text)
        if count:
            modified = True
    return IngredientLine(text=text, modified=modified)


def post_process_sections(sections: list[IngredientSection]) -> list[IngredientSection]:
    """
    Apply substitutions to every line of every section.

    Returns new sections; the input is left unchanged. A line is flagged as
    modified only when a substitution fired on it.
    """
    return [
        IngredientSection(
            title=section.title,
            items=[substitute_line(line.text) for line in section.items],
        )
        for section in sections
    ]
