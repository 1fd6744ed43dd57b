"""HTML helpers shared by the extraction strategies."""

import re
from urllib.parse import urljoin

from bs4 import BeautifulSoup, Tag

from .normalizer import clean_text


def make_soup(html: str) -> BeautifulSoup:
    return BeautifulSoup(html or "", "html.parser")


def element_text(element: Tag | None) -> str:
    """Visible text of an element with whitespace collapsed."""
    if element is None:
        return ""
    return clean_text(element.get_text(" "))


def select_texts(
    soup: BeautifulSoup | Tag,
    selectors: list[str] | tuple[str, ...],
    *,
    min_length: int = 1,
    limit: int | None = None,
) -> list[str]:
    """
    Texts of the elements matched by the first selector that finds any.

    Selectors are tried in order; shorter texts than min_length are dropped.
    """
    for selector in selectors:
        texts = [element_text(el) for el in soup.select(selector)]
        texts = [t for t in texts if len(t) >= min_length]
        if texts:
            return texts[:limit] if limit else texts
    return []


def meta_content(soup: BeautifulSoup, key: str) -> str | None:
    """Content of <meta name=key> or <meta property=key>."""
    tag = soup.find("meta", attrs={"property": key}) or soup.find("meta", attrs={"name": key})
    if tag and tag.get("content"):
        return clean_text(tag["content"]) or None
    return None


def page_title(soup: BeautifulSoup) -> str | None:
    """First non-empty of og:title, <h1>, <title>."""
    title = meta_content(soup, "og:title") or element_text(soup.find("h1"))
    if not title and soup.title:
        title = element_text(soup.title)
    return title or None


def absolute_url(url: str | None, base_url: str) -> str | None:
    if not url:
        return None
    url = url.strip()
    if url.startswith("//"):
        return "https:" + url
    return urljoin(base_url, url)


def first_image_src(soup: BeautifulSoup, pattern: str = r"\.(?:jpe?g|png|webp)") -> str | None:
    """src (or data-src) of the first <img> whose URL matches pattern."""
    regex = re.compile(pattern, re.IGNORECASE)
    for img in soup.find_all("img"):
        for attr in ("src", "data-src", "data-lazy-src"):
            src = img.get(attr)
            if src and regex.search(src) and not src.startswith("data:"):
                return src
    return None


def page_text(soup: BeautifulSoup) -> str:
    """Whole-page text, one line per block element."""
    return soup.get_text("\n")
