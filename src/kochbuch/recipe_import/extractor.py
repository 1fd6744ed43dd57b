"""Recipe extraction dispatch.

The registry holds (predicate, strategy) routes in registration order plus
one generic fallback strategy. Selection picks the first matching route,
or the fallback. Extraction runs the selected strategy and, when it fails
and was not already the generic one, retries exactly once with the
generic strategy.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Callable
from urllib.parse import urlparse

from .capabilities import JSON_LD_IMPORT_WARNING, build_import_warnings
from .errors import ExtractionError, InvalidUrlError
from .formatter import convert_to_recipe_format
from .models import ExtractedRecipeData, ImportResult, StrategyKind
from .strategies import Fetcher, Strategy
from .strategies import chefkoch, gaumenfreundin, generic, lecker

logger = logging.getLogger(__name__)

Predicate = Callable[[str], bool]


@dataclass(frozen=True)
class ExtractorPreview:
    """Which strategy a URL would use and what it can extract."""

    name: str
    kind: StrategyKind
    domains: tuple[str, ...]
    description: str
    capabilities: dict[str, dict[str, str]] = field(default_factory=dict)
    is_specific: bool = False


def validate_url(url: str | None) -> str | None:
    """
    Validate URL format.

    Returns error message if invalid, None if valid.
    """
    if not url or not url.strip():
        return "URL is required"

    url = url.strip()

    if not re.match(r"^https?://", url, re.IGNORECASE):
        return "URL must start with http:// or https://"

    try:
        parsed = urlparse(url)
    except ValueError:
        return "Invalid URL format"
    if not parsed.netloc or not parsed.hostname:
        return "Invalid URL format"

    return None


class ExtractorRegistry:
    """Ordered strategy routes plus the generic fallback."""

    def __init__(
        self,
        strategies: list[Strategy] | tuple[Strategy, ...] = (),
        fallback: Strategy = generic.STRATEGY,
        fetch: Fetcher | None = None,
    ):
        self._routes: list[tuple[Predicate, Strategy]] = []
        self.fallback = fallback
        self.fetch = fetch
        for strategy in strategies:
            self.register(strategy)

    def register(self, strategy: Strategy, predicate: Predicate | None = None) -> None:
        """Add a route. Without a predicate the strategy's domain match is used."""
        self._routes.append((predicate or strategy.matches, strategy))

    @property
    def strategies(self) -> list[Strategy]:
        return [strategy for _, strategy in self._routes]

    # =========================================================================
    # Selection
    # =========================================================================

    def get_extractor_for_url(self, url: str) -> Strategy:
        for predicate, strategy in self._routes:
            if predicate(url):
                logger.debug(f"Selected {strategy.name} for {url}")
                return strategy
        logger.debug(f"No site strategy for {url}, using {self.fallback.name}")
        return self.fallback

    def can_extract_from_url(self, url: str | None) -> bool:
        return validate_url(url) is None

    def get_supported_sites(self) -> list[dict[str, Any]]:
        return [
            {"name": strategy.name, "domains": list(strategy.domains)}
            for strategy in self.strategies
        ]

    def get_extractor_preview(self, url: str) -> ExtractorPreview:
        strategy = self.get_extractor_for_url(url)
        return ExtractorPreview(
            name=strategy.name,
            kind=strategy.kind,
            domains=strategy.domains,
            description=strategy.description,
            capabilities=strategy.get_capabilities().as_dict(),
            is_specific=strategy is not self.fallback,
        )

    # =========================================================================
    # Extraction
    # =========================================================================

    def _run(
        self,
        url: str,
        attempt: Callable[[Strategy], ExtractedRecipeData],
    ) -> tuple[Strategy, ExtractedRecipeData]:
        strategy = self.get_extractor_for_url(url)
        logger.info(f"Extracting {url} with {strategy.name}")
        try:
            return strategy, attempt(strategy)
        except Exception as original_error:
            if strategy is self.fallback or strategy.is_generic:
                raise ExtractionError(
                    f"{strategy.name} failed: {original_error}",
                    strategy=strategy.name,
                    original_error=original_error,
                ) from original_error

            logger.warning(
                f"{strategy.name} failed for {url} ({original_error}), "
                f"retrying with {self.fallback.name}"
            )
            try:
                return self.fallback, attempt(self.fallback)
            except Exception as fallback_error:
                raise ExtractionError(
                    f"{strategy.name} failed: {original_error}; "
                    f"fallback {self.fallback.name} failed: {fallback_error}",
                    strategy=strategy.name,
                    original_error=original_error,
                    fallback_error=fallback_error,
                ) from fallback_error

    def _require_valid(self, url: str) -> str:
        error = validate_url(url)
        if error:
            raise InvalidUrlError(error)
        return url.strip()

    def extract_recipe(self, url: str) -> ExtractedRecipeData:
        """
        Fetch and extract a recipe.

        Raises:
            InvalidUrlError: If the URL is not an http(s) URL with a host
            ExtractionError: If the strategy (and the generic retry) failed
        """
        url = self._require_valid(url)
        _, data = self._run(url, lambda strategy: strategy.extract_recipe(url, self.fetch))
        return data

    def extract_from_html(self, url: str, html: str) -> ExtractedRecipeData:
        """Extract from markup the caller already has; nothing is fetched."""
        url = self._require_valid(url)
        _, data = self._run(url, lambda strategy: strategy.parse(html, url))
        return data

    def extract_from_json_ld(self, payload, source_url: str = "") -> ExtractedRecipeData:
        """
        Extract from a raw JSON-LD payload (object, array or JSON string).

        Raises:
            NoRecipeFoundError: If the payload holds no Recipe node
        """
        return generic.parse_json_ld_payload(payload, source_url)

    def import_recipe(self, url: str) -> ImportResult:
        """Extract, format and attach advisory warnings."""
        url = self._require_valid(url)
        strategy, data = self._run(
            url, lambda candidate: candidate.extract_recipe(url, self.fetch)
        )
        return self._result(strategy, data)

    def import_json_ld(self, payload, source_url: str = "") -> ImportResult:
        data = self.extract_from_json_ld(payload, source_url)
        result = self._result(self.fallback, data)
        result.warnings.append(JSON_LD_IMPORT_WARNING)
        return result

    def _result(self, strategy: Strategy, data: ExtractedRecipeData) -> ImportResult:
        return ImportResult(
            data=data,
            payload=convert_to_recipe_format(data),
            strategy_name=strategy.name,
            strategy_kind=strategy.kind,
            warnings=build_import_warnings(
                strategy.get_capabilities(), data, generic=strategy.is_generic
            ),
        )


def create_default_registry(fetch: Fetcher | None = None) -> ExtractorRegistry:
    """Registry with every site strategy, most specific first."""
    return ExtractorRegistry(
        strategies=[chefkoch.STRATEGY, lecker.STRATEGY, gaumenfreundin.STRATEGY],
        fallback=generic.STRATEGY,
        fetch=fetch,
    )


default_registry = create_default_registry()


def get_extractor_for_url(url: str) -> Strategy:
    return default_registry.get_extractor_for_url(url)


def can_extract_from_url(url: str | None) -> bool:
    return default_registry.can_extract_from_url(url)


def get_supported_sites() -> list[dict[str, Any]]:
    return default_registry.get_supported_sites()


def get_extractor_preview(url: str) -> ExtractorPreview:
    return default_registry.get_extractor_preview(url)


def extract_recipe(url: str) -> ExtractedRecipeData:
    return default_registry.extract_recipe(url)


def extract_from_html(url: str, html: str) -> ExtractedRecipeData:
    return default_registry.extract_from_html(url, html)


def extract_from_json_ld(payload, source_url: str = "") -> ExtractedRecipeData:
    return default_registry.extract_from_json_ld(payload, source_url)


def import_recipe(url: str) -> ImportResult:
    return default_registry.import_recipe(url)


def import_json_ld(payload, source_url: str = "") -> ImportResult:
    return default_registry.import_json_ld(payload, source_url)
