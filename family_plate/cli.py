"""CLI entry point for FamilyPlate."""

import logging
from typing import NoReturn

import click

from . import __version__
from .config import get_log_level, get_store_path
from .extraction import ExtractionClient, ExtractionError, needs_time_estimate
from .normalizer import normalize_ingredient
from .recipe import CATEGORIES, Recipe, Story, filter_by_category
from .shopping import (
    ShoppingListItem,
    build_preview,
    clear,
    delete_item,
    find_item,
    format_sources,
    summarize,
    toggle_checked,
    toggle_preview_item,
)
from .store import JsonFileStore, RecipeBook, StoreError
from .tui import interactive_preview

# Shared instances
_book: RecipeBook | None = None
_client: ExtractionClient | None = None


def get_book() -> RecipeBook:
    """Get or create the recipe book backed by the JSON store."""
    global _book
    if _book is None:
        _book = RecipeBook(JsonFileStore(get_store_path()))
    return _book


def get_client() -> ExtractionClient:
    """Get or create the extraction client."""
    global _client
    if _client is None:
        _client = ExtractionClient()
    return _client


def configure_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else getattr(logging, get_log_level(), logging.WARNING)
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def fail(message: str) -> NoReturn:
    click.echo(f"✗ {message}", err=True)
    raise SystemExit(1)


def display_recipe(recipe: Recipe) -> None:
    """Display a recipe."""
    click.echo()
    click.echo("=" * 60)
    click.echo(f"RECIPE: {recipe.title}")
    click.echo("=" * 60)
    click.echo(f"Id: {recipe.id}")

    if recipe.servings:
        click.echo(f"Servings: {recipe.servings}")
    if recipe.prep_time:
        click.echo(f"Prep: {recipe.prep_time}")
    if recipe.cook_time:
        click.echo(f"Cook: {recipe.cook_time}")
    if recipe.category:
        click.echo(f"Category: {recipe.category}")
    if recipe.tags:
        click.echo(f"Tags: {', '.join(recipe.tags)}")
    if recipe.date_added:
        click.echo(f"Added: {recipe.date_added}")

    has_modified = False
    for section in recipe.ingredient_sections:
        click.echo(f"\n{section.title or 'Ingredients'}:")
        for line in section.items:
            marker = " *" if line.modified else ""
            has_modified = has_modified or line.modified
            click.echo(f"  • {line.text}{marker}")
    if has_modified:
        click.echo("\n  * ingredient name was modernized, check against the original")

    if recipe.instructions:
        click.echo("\nInstructions:")
        for i, step in enumerate(recipe.instructions, 1):
            click.echo(f"  {i}. {step}")

    story = recipe.story
    if story.text or story.creator or story.origin or story.occasions:
        click.echo("\nStory:")
        if story.creator:
            click.echo(f"  From: {story.creator}")
        if story.origin:
            click.echo(f"  Origin: {story.origin}")
        if story.occasions:
            click.echo(f"  Occasions: {story.occasions}")
        if story.text:
            click.echo(f"  {story.text}")

    click.echo()


def display_shopping_list(items: list[ShoppingListItem]) -> None:
    """Display the shopping list."""
    if not items:
        click.echo("Your shopping list is empty.")
        click.echo("\nUse 'family-plate shop add <recipe-id>' to add ingredients.")
        return

    click.echo()
    click.echo("SHOPPING LIST")
    click.echo("=" * 60)
    for i, item in enumerate(items, 1):
        box = "[x]" if item.checked else "[ ]"
        click.echo(f"{i:>3}. {box} {item.name}  ({format_sources(item)})")
        for source in item.sources:
            click.echo(f"          - {source.original_text}")
    click.echo("-" * 60)
    stats = summarize(items)
    click.echo(f"Items: {stats['total']} | Checked: {stats['checked']}")


def resolve_item_id(items: list[ShoppingListItem], ref: str) -> str | None:
    """Resolve an item id or a 1-based list position to an item id."""
    if find_item(items, ref) is not None:
        return ref
    if ref.isdigit() and 1 <= int(ref) <= len(items):
        return items[int(ref) - 1].id
    return None


# ============================================================================
# Main CLI Group
# ============================================================================


@click.group()
@click.version_option(version=__version__, prog_name="family-plate")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def cli(verbose: bool):
    """FamilyPlate: digitize family recipes and build shopping lists.

    Photograph a recipe, extract it into a structured record, browse your
    library, and collect ingredients into one shopping list.
    """
    configure_logging(verbose)


# ============================================================================
# Extraction
# ============================================================================


@cli.command()
@click.argument("image", type=click.Path(exists=True, dir_okay=False))
@click.option(
    "--estimate/--no-estimate", default=True, help="Estimate missing prep/cook times"
)
@click.option("--save/--no-save", default=True, help="Save the recipe to the library")
@click.option("--category", type=click.Choice(CATEGORIES, case_sensitive=False), help="Category")
def extract(image: str, estimate: bool, save: bool, category: str | None):
    """Extract a recipe from a photo.

    Examples:

    \b
        family-plate extract grandmas-pie.jpg
        family-plate extract card.png --category Dessert --no-estimate
    """
    client = get_client()

    try:
        click.echo(f"Extracting recipe from: {image}")
        recipe = client.extract_recipe(image)

        if estimate and needs_time_estimate(recipe):
            click.echo("Estimating missing times...")
            try:
                recipe = client.estimate_times(recipe)
            except ExtractionError as e:
                click.echo(f"⚠️  Could not estimate times: {e}", err=True)
    except ExtractionError as e:
        fail(f"Extraction failed: {e}")

    if category:
        recipe.category = category

    display_recipe(recipe)

    if save:
        try:
            get_book().save_recipe(recipe)
        except StoreError as e:
            fail(f"Failed to save recipe: {e}")
        click.echo(f"✓ Saved as recipe {recipe.id}")


# ============================================================================
# Recipe Library
# ============================================================================


@cli.group()
def recipes():
    """Browse and manage saved recipes."""
    pass


@recipes.command("list")
@click.option("--category", "-c", help="Only show recipes in this category")
def list_recipes(category: str | None):
    """List saved recipes, newest first."""
    try:
        all_recipes = get_book().load_recipes()
    except StoreError as e:
        fail(str(e))

    shown = filter_by_category(all_recipes, category)
    if not shown:
        click.echo("No recipes found.")
        if not all_recipes:
            click.echo("\nUse 'family-plate extract <image>' to add one.")
        return

    click.echo(f"\n{'Id':<15} {'Title':<35} {'Category':<12} Added")
    click.echo("-" * 75)
    for recipe in shown:
        click.echo(
            f"{recipe.id:<15} {recipe.title[:35]:<35} {recipe.category[:12]:<12} "
            f"{recipe.date_added}"
        )
    click.echo(f"\n{len(shown)} recipe(s)")


@recipes.command("show")
@click.argument("recipe_id", type=int)
def show_recipe(recipe_id: int):
    """Show a saved recipe."""
    try:
        recipe = get_book().get_recipe(recipe_id)
    except StoreError as e:
        fail(str(e))
    display_recipe(recipe)


@recipes.command("edit")
@click.argument("recipe_id", type=int)
@click.option("--title", help="Recipe title")
@click.option("--servings", help="Servings")
@click.option("--prep-time", help="Prep time")
@click.option("--cook-time", help="Cook time")
@click.option("--category", type=click.Choice(CATEGORIES, case_sensitive=False), help="Category")
@click.option("--tag", "tags", multiple=True, help="Tag (repeat to set several)")
@click.option("--story-text", help="The story behind the recipe")
@click.option("--story-creator", help="Who created the recipe")
@click.option("--story-origin", help="Where the recipe comes from")
@click.option("--story-occasions", help="When the recipe is made")
def edit_recipe(
    recipe_id: int,
    title: str | None,
    servings: str | None,
    prep_time: str | None,
    cook_time: str | None,
    category: str | None,
    tags: tuple[str, ...],
    story_text: str | None,
    story_creator: str | None,
    story_origin: str | None,
    story_occasions: str | None,
):
    """Edit fields of a saved recipe."""
    book = get_book()
    try:
        recipe = book.get_recipe(recipe_id)
    except StoreError as e:
        fail(str(e))

    if title is not None:
        recipe.title = title
    if servings is not None:
        recipe.servings = servings
    if prep_time is not None:
        recipe.prep_time = prep_time
    if cook_time is not None:
        recipe.cook_time = cook_time
    if category is not None:
        recipe.category = category
    if tags:
        recipe.tags = list(tags)

    story = recipe.story
    recipe.story = Story(
        text=story_text if story_text is not None else story.text,
        creator=story_creator if story_creator is not None else story.creator,
        origin=story_origin if story_origin is not None else story.origin,
        occasions=story_occasions if story_occasions is not None else story.occasions,
    )

    try:
        book.save_recipe(recipe)
    except StoreError as e:
        fail(f"Failed to save recipe: {e}")
    click.echo(f"✓ Updated '{recipe.title}'")


@recipes.command("delete")
@click.argument("recipe_id", type=int)
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation")
def delete_recipe_cmd(recipe_id: int, yes: bool):
    """Delete a saved recipe."""
    book = get_book()
    try:
        recipe = book.get_recipe(recipe_id)
    except StoreError as e:
        fail(str(e))

    if not yes and not click.confirm(f"Delete '{recipe.title}'?"):
        click.echo("Cancelled.")
        return

    try:
        book.delete_recipe(recipe_id)
    except StoreError as e:
        fail(str(e))
    click.echo(f"✓ Deleted '{recipe.title}'")


# ============================================================================
# Shopping List
# ============================================================================


@cli.group()
def shop():
    """Manage the shopping list."""
    pass


@shop.command("add")
@click.argument("recipe_id", type=int)
@click.option(
    "--exclude", "-x", type=int, multiple=True, help="Preview number to leave out (repeatable)"
)
@click.option("--interactive", "-i", is_flag=True, help="Choose items in an interactive TUI")
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation")
def shop_add(recipe_id: int, exclude: tuple[int, ...], interactive: bool, yes: bool):
    """Add a recipe's ingredients to the shopping list.

    Examples:

    \b
        family-plate shop add 1718000000000
        family-plate shop add 1718000000000 --exclude 3 --exclude 5
        family-plate shop add 1718000000000 --interactive
    """
    book = get_book()
    try:
        recipe = book.get_recipe(recipe_id)
    except StoreError as e:
        fail(str(e))

    preview = build_preview(recipe)
    if not preview:
        click.echo("No ingredients to add.")
        return

    for number in sorted(set(exclude)):
        try:
            preview = toggle_preview_item(preview, number - 1)
        except IndexError:
            fail(f"No preview item {number} (1-{len(preview)})")

    if interactive:
        result = interactive_preview(preview, recipe.title)
        if not result.confirmed:
            click.echo("Cancelled.")
            return
        preview = result.items
    else:
        click.echo(f"\nFrom '{recipe.title}':")
        for i, item in enumerate(preview, 1):
            box = "[x]" if item.selected else "[ ]"
            click.echo(f"  {i:>2}. {box} {item.name}  ({item.original_text})")
        click.echo()
        if not yes and not click.confirm("Add selected items to the shopping list?", default=True):
            click.echo("Cancelled.")
            return

    count = sum(1 for item in preview if item.selected)
    if count == 0:
        click.echo("Nothing selected.")
        return

    try:
        merged = book.add_to_shopping_list(preview)
    except StoreError as e:
        fail(f"Failed to update shopping list: {e}")
    click.echo(f"✓ Added {count} item(s); the list now has {len(merged)}")


@shop.command("list")
def shop_list():
    """Show the shopping list."""
    try:
        items = get_book().load_shopping_list()
    except StoreError as e:
        fail(str(e))
    display_shopping_list(items)


@shop.command("check")
@click.argument("item")
def shop_check(item: str):
    """Check or uncheck an item (by id or list number)."""
    book = get_book()
    try:
        items = book.load_shopping_list()
        item_id = resolve_item_id(items, item)
        if item_id is None:
            click.echo(f"No item '{item}' on the list.")
            return
        items = toggle_checked(items, item_id)
        book.save_shopping_list(items)
    except StoreError as e:
        fail(str(e))

    updated = find_item(items, item_id)
    if updated is not None:
        state = "Checked" if updated.checked else "Unchecked"
        click.echo(f"✓ {state} {updated.name}")


@shop.command("remove")
@click.argument("item")
def shop_remove(item: str):
    """Remove an item (by id or list number)."""
    book = get_book()
    try:
        items = book.load_shopping_list()
        item_id = resolve_item_id(items, item)
        if item_id is None:
            click.echo(f"No item '{item}' on the list.")
            return
        removed = find_item(items, item_id)
        book.save_shopping_list(delete_item(items, item_id))
    except StoreError as e:
        fail(str(e))

    if removed is not None:
        click.echo(f"✓ Removed {removed.name}")


@shop.command("clear")
@click.option("--yes", "-y", is_flag=True, help="Skip confirmation")
def shop_clear(yes: bool):
    """Remove every item from the shopping list."""
    if not yes and not click.confirm("Clear the whole shopping list?"):
        click.echo("Cancelled.")
        return

    book = get_book()
    try:
        items = book.load_shopping_list()
        book.save_shopping_list(clear(items))
    except StoreError as e:
        fail(str(e))
    click.echo(f"✓ Shopping list cleared ({len(items)} item(s) removed)")


# ============================================================================
# Utilities
# ============================================================================


@cli.command()
@click.argument("lines", nargs=-1, required=True)
def normalize(lines: tuple[str, ...]):
    """Show the shopping list name for ingredient lines.

    Example:

    \b
        family-plate normalize "2 cups flour, sifted" "1 tsp salt"
    """
    for line in lines:
        name = normalize_ingredient(line)
        click.echo(f"{line} → {name or '(dropped)'}")


if __name__ == "__main__":
    cli()
