"""Exceptions raised by the recipe importer.

Parsing helpers never raise on bad input; only fetching, URL validation,
raw payload import and the dispatcher do.
"""


class RecipeImportError(Exception):
    """Base class for all recipe import errors."""


class InvalidUrlError(RecipeImportError):
    """The URL cannot be fetched (missing, wrong scheme, no host)."""


class FetchError(RecipeImportError):
    """Network error, timeout or non-2xx response while fetching a page."""

    def __init__(self, url: str, message: str, status_code: int | None = None):
        self.url = url
        self.status_code = status_code
        super().__init__(f"Failed to fetch {url}: {message}")


class NoRecipeFoundError(RecipeImportError):
    """A structured-data payload contains no Recipe node."""


class ExtractionError(RecipeImportError):
    """Extraction failed, including the one-shot generic fallback."""

    def __init__(
        self,
        message: str,
        *,
        strategy: str | None = None,
        original_error: Exception | None = None,
        fallback_error: Exception | None = None,
    ):
        self.strategy = strategy
        self.original_error = original_error
        self.fallback_error = fallback_error
        super().__init__(message)
