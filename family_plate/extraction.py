"""Client for the recipe extraction proxy and handling of its output."""

import base64
import json
import logging
import mimetypes
import re
from collections.abc import Callable
from dataclasses import replace
from pathlib import Path
from typing import Any

import httpx

from .config import get_api_url, get_timeout
from .postprocess import post_process_sections
from .recipe import (
    DEFAULT_TITLE,
    IngredientSection,
    Recipe,
    mark_estimated,
    new_recipe_id,
    today_string,
)

logger = logging.getLogger(__name__)

DEFAULT_PREP_ESTIMATE = "15 minutes"
DEFAULT_COOK_ESTIMATE = "30 minutes"

EXTRACTION_PROMPT = """Extract this recipe as JSON with these fields: title, servings, prepTime, cookTime, ingredientSections, instructions.

CRITICAL for ingredientSections:
- Look carefully for ANY section headers/labels in the ingredients area (e.g., "Ingredients", "Dressing", "Sauce", "Filling", "Crust", "Topping", "For the...", "Marinade", etc.)
- If you see multiple labeled groups (like "INGREDIENTS" followed by "DRESSING"), create separate sections for each with appropriate titles
- If the recipe has headers like "INGREDIENTS" and "DRESSING" as two separate labeled lists, that means TWO sections
- Only combine into a single section (with empty title) if there are truly NO section labels at all
- Preserve the exact section names from the recipe

Format:
{
  "title": "Recipe Name",
  "servings": "4",
  "prepTime": "15 minutes",
  "cookTime": "30 minutes",
  "ingredientSections": [
    {"title": "Ingredients", "items": ["item 1", "item 2"]},
    {"title": "Dressing", "items": ["item 1", "item 2"]}
  ],
  "instructions": ["step 1", "step 2"]
}

Return only valid JSON, no markdown or explanation."""

_FENCE_OPEN = re.compile(r"```json\n?")
_FENCE = re.compile(r"```")


class ExtractionError(Exception):
    """Exception raised when recipe extraction or time estimation fails."""

    pass


def strip_code_fences(text: str) -> str:
    """Remove markdown code fences the model wraps around JSON."""
    return _FENCE.sub("", _FENCE_OPEN.sub("", text)).strip()


def parse_model_response(payload: dict[str, Any]) -> dict[str, Any]:
    """
    Read the JSON object from a messages-API style response.

    Args:
        payload: Response body, e.g. {"content": [{"type": "text", "text": "{...}"}]}

    Returns:
        The decoded JSON object

    Raises:
        ExtractionError: If the response carries an error, has no text block,
            or the text is not a JSON object
    """
    if payload.get("error"):
        error = payload["error"]
        message = error.get("message") if isinstance(error, dict) else error
        raise ExtractionError(str(message))

    text = next(
        (
            block.get("text")
            for block in payload.get("content") or []
            if isinstance(block, dict) and block.get("type") == "text"
        ),
        None,
    )
    if not text:
        raise ExtractionError("Response contained no text")

    try:
        data = json.loads(strip_code_fences(text))
    except json.JSONDecodeError as e:
        raise ExtractionError(f"Response was not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise ExtractionError("Response JSON was not an object")
    return data


def _as_list(value: Any) -> list[Any]:
    """A single string becomes a one-item list; other non-lists become empty."""
    if isinstance(value, str):
        return [value] if value.strip() else []
    if isinstance(value, list):
        return value
    return []


def _sections_from_extraction(data: dict[str, Any]) -> list[IngredientSection]:
    raw_sections = data.get("ingredientSections")
    if not isinstance(raw_sections, list):
        raw_sections = [{"title": "", "items": data.get("ingredients")}]

    return [
        IngredientSection.from_dict(
            {"title": s.get("title"), "items": _as_list(s.get("items"))}
        )
        for s in raw_sections
        if isinstance(s, dict)
    ]


def recipe_from_extraction(
    data: dict[str, Any],
    image: str = "",
    id_factory: Callable[[], int] = new_recipe_id,
    today: str | None = None,
) -> Recipe:
    """
    Build a new recipe from extracted fields.

    Every missing field gets an empty default. Deprecated ingredient names
    are substituted and flagged.

    Args:
        data: Decoded model output
        image: Data URL of the source photo
        id_factory: Callable producing the recipe id
        today: Added-date string (defaults to today)

    Returns:
        Recipe ready to be reviewed and saved
    """
    sections = post_process_sections(_sections_from_extraction(data))
    instructions = _as_list(data.get("instructions"))

    return Recipe(
        id=id_factory(),
        title=str(data.get("title") or DEFAULT_TITLE),
        image=image,
        ingredient_sections=sections,
        instructions=[str(step) for step in instructions],
        servings=str(data.get("servings") or ""),
        prep_time=str(data.get("prepTime") or ""),
        cook_time=str(data.get("cookTime") or ""),
        date_added=today if today is not None else today_string(),
    )


def needs_time_estimate(recipe: Recipe) -> bool:
    return not recipe.prep_time or not recipe.cook_time


def apply_time_estimates(recipe: Recipe, times: dict[str, Any]) -> Recipe:
    """
    Fill empty prep/cook times with estimates marked as approximate.

    Times already present on the recipe are kept.
    """
    prep = recipe.prep_time or mark_estimated(str(times.get("prepTime") or DEFAULT_PREP_ESTIMATE))
    cook = recipe.cook_time or mark_estimated(str(times.get("cookTime") or DEFAULT_COOK_ESTIMATE))
    return replace(recipe, prep_time=prep, cook_time=cook)


def encode_image(path: str | Path) -> tuple[str, str]:
    """
    Read an image file as base64.

    Returns:
        Tuple of (base64_data, media_type)
    """
    path = Path(path)
    media_type = mimetypes.guess_type(path.name)[0] or "image/jpeg"
    try:
        data = path.read_bytes()
    except OSError as e:
        raise ExtractionError(f"Failed to read image {path}: {e}") from e
    return base64.b64encode(data).decode("ascii"), media_type


class ExtractionClient:
    """Client for the hosted extraction proxy."""

    def __init__(self, base_url: str | None = None, timeout: float | None = None):
        self.base_url = (base_url or get_api_url()).rstrip("/")
        self.client = httpx.Client(
            timeout=timeout if timeout is not None else get_timeout(),
            headers={"Content-Type": "application/json", "Accept": "application/json"},
        )

    def close(self) -> None:
        self.client.close()

    def __enter__(self) -> "ExtractionClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def _post(self, endpoint: str, body: dict[str, Any]) -> dict[str, Any]:
        url = f"{self.base_url}/{endpoint}"
        logger.debug("POST %s", url)
        try:
            response = self.client.post(url, json=body)
        except httpx.HTTPError as e:
            raise ExtractionError(f"Request to {endpoint} failed: {e}") from e

        try:
            payload = response.json()
        except ValueError:
            payload = None

        if response.is_error:
            detail = payload.get("error") if isinstance(payload, dict) else None
            raise ExtractionError(
                f"{endpoint} returned {response.status_code}: {detail or response.text[:200]}"
            )
        if not isinstance(payload, dict):
            raise ExtractionError(f"{endpoint} returned a non-JSON response")
        return payload

    def extract_recipe(self, image_path: str | Path) -> Recipe:
        """
        Extract a recipe from a photo.

        Args:
            image_path: Path to the recipe photo

        Returns:
            The new, unsaved recipe

        Raises:
            ExtractionError: If the image cannot be read or extraction fails
        """
        image_data, media_type = encode_image(image_path)
        payload = self._post(
            "extract-recipe",
            {"image": image_data, "type": media_type, "prompt": EXTRACTION_PROMPT},
        )
        data = parse_model_response(payload)
        logger.info("Extracted recipe %r", data.get("title"))
        return recipe_from_extraction(data, image=f"data:{media_type};base64,{image_data}")

    def estimate_times(self, recipe: Recipe) -> Recipe:
        """
        Ask the model for missing prep/cook times.

        Returns:
            A copy of the recipe with empty times filled in

        Raises:
            ExtractionError: If the estimate call fails
        """
        payload = self._post(
            "estimate-times",
            {
                "title": recipe.title,
                "ingredients": ", ".join(recipe.all_ingredients()),
                "instructions": " ".join(recipe.instructions),
            },
        )
        return apply_time_estimates(recipe, parse_model_response(payload))
