"""Data models for ingredient parsing and normalization."""

from dataclasses import dataclass
from typing import Literal

UnitSystem = Literal["imperial", "metric"]
AmountFormat = Literal["decimal", "fraction"]


@dataclass
class ParsedIngredient:
    """An ingredient line split into amount, unit and name.

    ``amount`` is 0 when the line has no leading quantity. That is a
    "no quantity" marker, not a real zero.
    """

    amount: float
    unit: str
    ingredient: str
    original_text: str


@dataclass(frozen=True)
class NormalizationOptions:
    """Caller-supplied rendering policy for canonical ingredients."""

    unit_system: UnitSystem = "imperial"
    amount_format: AmountFormat = "fraction"
    round_to_fraction: float | None = 0.125  # 1/8
    decimals: int | None = None


@dataclass
class CanonicalIngredient:
    """Normalized, unit-converted, display-ready ingredient line."""

    amount: float | None
    unit: str
    name: str
    original_text: str
    display: str
    amount_min: float | None = None
    amount_max: float | None = None
    notes: str | None = None  # "no-quantity" for qualitative lines


DEFAULT_OPTIONS = NormalizationOptions()
