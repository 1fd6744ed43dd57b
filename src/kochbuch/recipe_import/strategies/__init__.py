"""Extraction strategies.

A Strategy is plain data: which source family it handles, which domains
it claims, what it can extract, and a parse function turning page markup
into ExtractedRecipeData. The dispatcher picks one by URL.
"""

import logging
from dataclasses import dataclass
from typing import Callable
from urllib.parse import urlparse

from ..capabilities import ExtractorCapabilities
from ..fetch import fetch_html
from ..models import ExtractedRecipeData, StrategyKind

logger = logging.getLogger(__name__)

Fetcher = Callable[[str], str]
Parser = Callable[[str, str], ExtractedRecipeData]


def domain_matches(url: str, domains: tuple[str, ...]) -> bool:
    """
    True when the URL's host is one of the domains, a subdomain of one,
    or contains one as a substring.
    """
    try:
        host = (urlparse(url).hostname or "").lower()
    except ValueError:
        return False
    if not host:
        return False
    return any(
        host == domain or host.endswith("." + domain) or domain in host
        for domain in (d.lower() for d in domains)
    )


@dataclass(frozen=True)
class Strategy:
    """One way of turning a recipe page into ExtractedRecipeData."""

    kind: StrategyKind
    name: str
    domains: tuple[str, ...]
    description: str
    capabilities: ExtractorCapabilities
    parse: Parser

    @property
    def is_generic(self) -> bool:
        return self.kind is StrategyKind.GENERIC_JSON_LD

    def matches(self, url: str) -> bool:
        return domain_matches(url, self.domains)

    def get_capabilities(self) -> ExtractorCapabilities:
        return self.capabilities

    def extract_recipe(self, url: str, fetch: Fetcher | None = None) -> ExtractedRecipeData:
        """Fetch the page and parse it. Fetch errors propagate."""
        html = (fetch or fetch_html)(url)
        data = self.parse(html, url)
        logger.info(
            f"{self.name} extracted {data.title!r}: "
            f"{len(data.ingredients)} ingredients, {len(data.instructions)} steps"
        )
        return data
