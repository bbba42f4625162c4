"""Unit tests for the postprocess module."""

from family_plate.normalizer import normalize_ingredient
from family_plate.postprocess import SUBSTITUTIONS, post_process_sections, substitute_line
from family_plate.recipe import IngredientLine, IngredientSection


def make_section(title: str, *lines: str) -> IngredientSection:
    """Build a section from plain ingredient lines."""
    return IngredientSection(title=title, items=[IngredientLine(text=line) for line in lines])


class TestSubstituteLine:
    """Tests for substitute_line function."""

    def test_crisco_replaced(self):
        line = substitute_line("1/2 tsp. Crisco (melted)")
        assert line.text == "1/2 tsp. shortening (melted)"
        assert line.modified is True

    def test_oleo_replaced(self):
        line = substitute_line("1 stick OLEO")
        assert line.text == "1 stick margarine"
        assert line.modified is True

    def test_all_occurrences_replaced(self):
        line = substitute_line("oleo or more oleo")
        assert line.text == "margarine or more margarine"

    def test_both_terms_in_one_line(self):
        line = substitute_line("crisco or oleo")
        assert line.text == "shortening or margarine"
        assert line.modified is True

    def test_unchanged_line_not_flagged(self):
        line = substitute_line("2 cups flour")
        assert line == IngredientLine(text="2 cups flour", modified=False)

    def test_whole_words_only(self):
        line = substitute_line("1 cup oleomargarine")
        assert line.text == "1 cup oleomargarine"
        assert line.modified is False

    def test_empty_line(self):
        assert substitute_line("") == IngredientLine(text="", modified=False)

    def test_substitution_table(self):
        assert SUBSTITUTIONS["oleo"] == "margarine"
        assert SUBSTITUTIONS["crisco"] == "shortening"


class TestPostProcessSections:
    """Tests for post_process_sections function."""

    def test_flags_per_line(self):
        sections = [make_section("", "2 cups flour", "1/2 tsp. Crisco (melted)")]

        result = post_process_sections(sections)

        assert result[0].texts == ["2 cups flour", "1/2 tsp. shortening (melted)"]
        assert [line.modified for line in result[0].items] == [False, True]

    def test_titles_and_order_preserved(self):
        sections = [
            make_section("Crust", "1 cup oleo"),
            make_section("Filling", "3 apples"),
        ]

        result = post_process_sections(sections)

        assert [s.title for s in result] == ["Crust", "Filling"]
        assert result[0].texts == ["1 cup margarine"]
        assert result[1].texts == ["3 apples"]

    def test_input_not_mutated(self):
        sections = [make_section("", "Crisco")]

        post_process_sections(sections)

        assert sections[0].items[0].text == "Crisco"

    def test_serialized_flags_match_items(self):
        result = post_process_sections([make_section("", "oleo", "sugar", "crisco")])

        data = result[0].to_dict()

        assert len(data["items"]) == len(data["uncertain"])
        assert data["uncertain"] == [True, False, True]

    def test_empty_sections(self):
        assert post_process_sections([]) == []
        assert post_process_sections([IngredientSection()]) == [IngredientSection()]

    def test_substituted_line_normalizes(self):
        result = post_process_sections([make_section("", "1/2 tsp. Crisco (melted)")])

        assert normalize_ingredient(result[0].items[0].text) == "Shortening"
