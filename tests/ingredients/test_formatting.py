"""
Tests for leading measurement splitting.
"""

from larder.ingredients import split_leading_measurement


class TestSplitLeadingMeasurement:
    def test_mixed_number_and_unit(self):
        assert split_leading_measurement("1 1/2 cups flour") == ("1 1/2 cups", "flour")

    def test_range(self):
        assert split_leading_measurement("1-2 tbsp oil") == ("1-2 tbsp", "oil")

    def test_unicode_fraction(self):
        assert split_leading_measurement("½ tsp salt") == ("½ tsp", "salt")

    def test_amount_without_unit(self):
        assert split_leading_measurement("1 garlic clove") == ("1", "garlic clove")

    def test_no_measurement(self):
        assert split_leading_measurement("salt to taste") is None
