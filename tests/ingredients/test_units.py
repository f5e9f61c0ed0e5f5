"""
Tests for unit aliases, families and conversion.
"""

import pytest

from larder.ingredients import UnitFamily, canonical_unit, convert_unit, unit_family


class TestCanonicalUnit:
    def test_aliases(self):
        assert canonical_unit("Cups") == "cup"
        assert canonical_unit("tablespoons") == "tbsp"
        assert canonical_unit("lbs") == "lb"
        assert canonical_unit("Grams") == "g"

    def test_unknown_passes_through_lowercased(self):
        assert canonical_unit("Pinch") == "pinch"


class TestUnitFamily:
    def test_families(self):
        assert unit_family("cups") is UnitFamily.VOLUME
        assert unit_family("ml") is UnitFamily.VOLUME
        assert unit_family("grams") is UnitFamily.MASS
        assert unit_family("oz") is UnitFamily.MASS
        assert unit_family("cans") is UnitFamily.COUNT
        assert unit_family("cloves") is UnitFamily.COUNT
        assert unit_family("pinch") is UnitFamily.OTHER
        assert unit_family("handful") is UnitFamily.OTHER


class TestConvertUnit:
    """Same-family conversion through teaspoons and ounces."""

    def test_volume(self):
        amount, unit = convert_unit(3, "tsp", "tbsp")
        assert amount == pytest.approx(1.0)
        assert unit == "tbsp"

    def test_mass(self):
        amount, unit = convert_unit(1, "lb", "oz")
        assert amount == pytest.approx(16)
        assert unit == "oz"

    def test_metric_mass(self):
        amount, _ = convert_unit(1000, "g", "kg")
        assert amount == pytest.approx(1.0)

    def test_metric_volume(self):
        amount, _ = convert_unit(1, "cup", "ml")
        assert amount == pytest.approx(236.59, abs=0.01)

    def test_cross_family_passes_through(self):
        assert convert_unit(1, "cup", "g") == (1, "cup")

    def test_unknown_unit_passes_through(self):
        assert convert_unit(2, "handful", "cup") == (2, "handful")
