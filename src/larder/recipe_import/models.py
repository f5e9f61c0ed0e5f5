"""Data models for recipe import."""

from dataclasses import dataclass, field, fields
from enum import Enum


class ExtractionSource(str, Enum):
    """Where a field's value came from."""

    LD_JSON = "ld-json"
    SELECTOR = "selector"


class ContentMode(str, Enum):
    """How fetched content must be parsed."""

    HTML = "html"
    READABLE_TEXT = "readable-text"


class FetchStrategy(str, Enum):
    """Retrieval strategy that produced the page content."""

    DIRECT = "direct"
    AMP = "amp"
    READER = "reader"
    DOUBLE_READER = "double-reader"


@dataclass
class SelectorResult:
    """Extraction outcome for one recipe field, with provenance."""

    value: str | list[str] = ""
    selector: str | None = None
    source: ExtractionSource = ExtractionSource.SELECTOR

    @property
    def is_filled(self) -> bool:
        if isinstance(self.value, list):
            return len(self.value) > 0
        return bool(self.value and self.value.strip())


@dataclass
class ExtractionStats:
    """Counts of filled fields by provenance."""

    total: int
    successful: int
    from_ld_json: int
    from_selectors: int


def _empty_list_result() -> SelectorResult:
    return SelectorResult(value=[])


@dataclass
class ScrapingResults:
    """One SelectorResult per recipe field. Created fresh for every scrape."""

    title: SelectorResult = field(default_factory=SelectorResult)
    description: SelectorResult = field(default_factory=SelectorResult)
    ingredients: SelectorResult = field(default_factory=_empty_list_result)
    instructions: SelectorResult = field(default_factory=_empty_list_result)
    prep_time: SelectorResult = field(default_factory=SelectorResult)
    cook_time: SelectorResult = field(default_factory=SelectorResult)
    servings: SelectorResult = field(default_factory=SelectorResult)
    image: SelectorResult = field(default_factory=SelectorResult)
    cuisine: SelectorResult = field(default_factory=SelectorResult)
    nutrition: SelectorResult = field(default_factory=_empty_list_result)

    @classmethod
    def field_names(cls) -> list[str]:
        return [f.name for f in fields(cls)]

    def items(self) -> list[tuple[str, SelectorResult]]:
        return [(name, getattr(self, name)) for name in self.field_names()]

    def update(self, found: dict[str, SelectorResult]) -> None:
        """Overwrite fields with the given results."""
        for name, result in found.items():
            setattr(self, name, result)

    def stats(self) -> ExtractionStats:
        filled = [result for _, result in self.items() if result.is_filled]
        from_ld_json = sum(1 for r in filled if r.source == ExtractionSource.LD_JSON)
        return ExtractionStats(
            total=len(self.field_names()),
            successful=len(filled),
            from_ld_json=from_ld_json,
            from_selectors=len(filled) - from_ld_json,
        )


# Fields a domain can carry a learned selector for
SELECTOR_FIELDS = (
    "title",
    "description",
    "ingredients",
    "instructions",
    "prep_time",
    "cook_time",
    "servings",
    "image",
    "cuisine",
)


@dataclass
class DomainSelectorSet:
    """Per-domain selector overrides, one CSS selector per field at most."""

    domain: str
    title: str | None = None
    description: str | None = None
    ingredients: str | None = None
    instructions: str | None = None
    prep_time: str | None = None
    cook_time: str | None = None
    servings: str | None = None
    image: str | None = None
    cuisine: str | None = None

    def as_overrides(self) -> dict[str, list[str]]:
        """Selector lists for the fields that are set."""
        overrides = {}
        for name in SELECTOR_FIELDS:
            selector = getattr(self, name)
            if selector:
                overrides[name] = [selector]
        return overrides


@dataclass
class FetchedPage:
    """Retrieved page content, tagged with how it must be parsed."""

    url: str
    content: str
    mode: ContentMode
    strategy: FetchStrategy


@dataclass
class RecipeData:
    """Assembled recipe fields."""

    title: str
    source_url: str
    description: str = ""
    ingredients: list[str] = field(default_factory=list)
    instructions: list[str] = field(default_factory=list)
    prep_time: str | None = None
    cook_time: str | None = None
    servings: str | None = None
    image_url: str = ""
    cuisine: str = ""
    nutrition: dict[str, str] | None = None


@dataclass
class ScrapeOutcome:
    """Recipe data plus per-field extraction results."""

    data: RecipeData
    results: ScrapingResults


@dataclass
class ImportOutcome:
    """Result of a full import, including selector learning."""

    data: RecipeData
    results: ScrapingResults
    used_custom_selectors: bool
    stats: ExtractionStats
    learned_selectors: dict[str, str] = field(default_factory=dict)
