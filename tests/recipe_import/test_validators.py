"""
Tests for content validators and duplicate removal.
"""

from larder.recipe_import.validators import (
    MAX_CUISINE_LENGTH,
    clean_text,
    is_valid_ingredient,
    is_valid_instruction,
    is_valid_label,
    remove_duplicates,
)


class TestCleanText:
    def test_removes_scale_widget_and_entities(self):
        assert clean_text("1x2x3x  Hello&nbsp;&amp; world") == "Hello & world"

    def test_collapses_whitespace(self):
        assert clean_text("  2 cups\n\t flour ") == "2 cups flour"

    def test_empty(self):
        assert clean_text("") == ""


class TestIsValidIngredient:
    def test_accepts_ingredient_lines(self):
        assert is_valid_ingredient("2 cups flour")
        assert is_valid_ingredient("salt to taste")

    def test_rejects_headings_and_labels(self):
        assert not is_valid_ingredient("Ingredients")
        assert not is_valid_ingredient("Serves 4")
        assert not is_valid_ingredient("4 servings")
        assert not is_valid_ingredient("Advertisement")
        assert not is_valid_ingredient("For the sauce:")
        assert not is_valid_ingredient("Prep time: 10 minutes")

    def test_rejects_fragments(self):
        assert not is_valid_ingredient("12")
        assert not is_valid_ingredient("ab")

    def test_rejects_long_blocks(self):
        assert not is_valid_ingredient("x" * 151)


class TestIsValidInstruction:
    def test_accepts_steps(self):
        assert is_valid_instruction("Preheat the oven to 350F.")

    def test_rejects_short_and_headings(self):
        assert not is_valid_instruction("Short")
        assert not is_valid_instruction("Notes")
        assert not is_valid_instruction("Instructions: do the thing")
        assert not is_valid_instruction("Chef's notes")

    def test_rejects_long_blocks(self):
        assert not is_valid_instruction("Stir. " * 100)


class TestIsValidLabel:
    def test_length_bound(self):
        assert is_valid_label("Italian", MAX_CUISINE_LENGTH)
        assert not is_valid_label("x" * (MAX_CUISINE_LENGTH + 1), MAX_CUISINE_LENGTH)
        assert not is_valid_label("   ", MAX_CUISINE_LENGTH)


class TestRemoveDuplicates:
    """Exact and container/child duplicate removal."""

    def test_exact_duplicates(self):
        assert remove_duplicates(["2 cups flour", "2 cups flour"]) == ["2 cups flour"]

    def test_container_child_duplicates(self):
        assert remove_duplicates(["2 cups flour", "flour"]) == ["2 cups flour"]

    def test_case_and_whitespace_insensitive(self):
        assert remove_duplicates(["2 Cups  Flour", "2 cups flour"]) == ["2 Cups  Flour"]

    def test_keeps_close_length_containment(self):
        items = ["1 cup whole milk", "1 cup whole milk, cold"]
        assert remove_duplicates(items) == items

    def test_keeps_distinct_lines_in_order(self):
        items = ["1 cup sugar", "2 cups flour", "3 eggs"]
        assert remove_duplicates(items) == items
