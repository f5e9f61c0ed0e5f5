"""Exceptions raised during recipe import."""


class RecipeImportError(Exception):
    """Base class for recipe import errors."""


class InvalidRecipeUrl(RecipeImportError):
    """The URL cannot be scraped (missing, not http(s), no host)."""


class RetrievalFailure(RecipeImportError):
    """Page content could not be retrieved by any strategy."""

    def __init__(self, url: str, attempts: list[str], reason: str | None = None):
        self.url = url
        self.attempts = attempts
        self.reason = reason
        message = f"Failed to load page content for {url}"
        if reason:
            message = f"{message}: {reason}"
        if attempts:
            message = f"{message} (tried: {', '.join(attempts)})"
        super().__init__(message)


class MalformedStructuredData(RecipeImportError):
    """An LD+JSON block could not be parsed, even after repair."""


class SelectorEvaluationError(RecipeImportError):
    """A CSS selector could not be evaluated."""

    def __init__(self, selector: str, cause: Exception | None = None):
        self.selector = selector
        super().__init__(f"Invalid selector {selector!r}: {cause}")
