"""Page fetching.

One attempt per call with a bounded timeout; retries are the
dispatcher's business, not this module's.
"""

import logging

import httpx

from ..config import settings
from .errors import FetchError

logger = logging.getLogger(__name__)


def request_headers() -> dict[str, str]:
    """Browser-like headers; several recipe sites reject bare clients."""
    return {
        "User-Agent": settings.kochbuch_user_agent,
        "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
        "Accept-Language": settings.kochbuch_accept_language,
    }


def fetch_html(url: str, client: httpx.Client | None = None) -> str:
    """
    Fetch a page and return its HTML.

    Args:
        url: Page to fetch
        client: Optional preconfigured client (tests pass one with a mock transport)

    Raises:
        FetchError: On timeout, connection problems or a non-2xx status
    """
    logger.debug(f"Fetching {url}")
    try:
        if client is not None:
            return _get(client, url)
        with httpx.Client(
            follow_redirects=True,
            timeout=settings.kochbuch_fetch_timeout,
        ) as own_client:
            return _get(own_client, url)
    except httpx.TimeoutException as e:
        raise FetchError(url, "request timed out") from e
    except httpx.HTTPStatusError as e:
        status = e.response.status_code
        raise FetchError(url, f"HTTP {status}", status_code=status) from e
    except httpx.HTTPError as e:
        raise FetchError(url, str(e) or type(e).__name__) from e


def _get(client: httpx.Client, url: str) -> str:
    response = client.get(url, headers=request_headers())
    response.raise_for_status()
    return response.text
