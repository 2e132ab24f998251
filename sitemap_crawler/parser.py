"""HTML parsing and link extraction."""

from __future__ import annotations

import logging
from typing import Iterable, List
from urllib.parse import urljoin

from bs4 import BeautifulSoup

from .filters import is_document_url, normalize_url, page_path, same_origin

logger = logging.getLogger(__name__)

_SKIP_SCHEMES = ("javascript:", "mailto:", "tel:", "#")


class Parser:
    """Parse HTML and extract crawlable links."""

    @staticmethod
    def parse(html: str) -> BeautifulSoup:
        return BeautifulSoup(html, "html.parser")

    @staticmethod
    def extract_links(soup: BeautifulSoup, origin: str, current_url: str) -> List[str]:
        """Return same-origin content links found in ``soup``.

        Links are resolved against ``current_url``, stripped of fragments and
        deduplicated in document order. Self-links and links to non-document
        resources are dropped; malformed hrefs are skipped.
        """
        hrefs: List[str] = []
        for tag in soup.find_all("a", href=True):
            href = tag["href"].strip()
            if not href or href.lower().startswith(_SKIP_SCHEMES):
                continue
            try:
                hrefs.append(urljoin(current_url, href))
            except ValueError:
                logger.debug("Discarding malformed href %r on %s", href, current_url)
        return Parser.filter_links(hrefs, origin, current_url)

    @staticmethod
    def filter_links(urls: Iterable[str], origin: str, current_url: str) -> List[str]:
        """Apply origin, self-link and resource filters to absolute URLs."""
        current_path = page_path(current_url)
        links: List[str] = []
        seen: set[str] = set()
        for url in urls:
            try:
                clean = normalize_url(url)
            except ValueError:
                logger.debug("Discarding malformed link %r", url)
                continue
            if not same_origin(clean, origin) or page_path(clean) == current_path:
                continue
            if not is_document_url(clean) or clean in seen:
                continue
            seen.add(clean)
            links.append(clean)
        return links
