"""URL filtering: origin restriction, resource denylist, robots, dedup."""

from __future__ import annotations

import logging
from typing import Optional, Set
from urllib.parse import urlparse, urlsplit

from .errors import InvalidSiteURL
from .robots import RobotsPolicy

logger = logging.getLogger(__name__)

_DEFAULT_PORTS = {"http": 80, "https": 443}

# Non-document resources never listed in a sitemap
SKIP_EXTENSIONS = (
    # images
    ".jpg", ".jpeg", ".png", ".gif", ".webp", ".svg", ".ico", ".avif", ".bmp", ".tif", ".tiff",
    # stylesheets and scripts
    ".css", ".js", ".mjs", ".map",
    # documents and archives
    ".pdf", ".zip", ".gz", ".tgz", ".tar", ".rar", ".7z", ".bz2", ".dmg", ".exe",
    # audio and video
    ".mp4", ".mp3", ".webm", ".avi", ".mov", ".mkv", ".wav", ".ogg", ".m4a", ".flac",
    # fonts
    ".woff", ".woff2", ".ttf", ".otf", ".eot",
)


def origin_of(url: str) -> str:
    """Return ``scheme://host[:port]`` for an absolute http(s) URL.

    Default ports are dropped so ``https://x.com:443`` and ``https://x.com``
    share an origin. Raises InvalidSiteURL for anything else.
    """
    try:
        parsed = urlparse(url.strip())
        port = parsed.port
    except ValueError as exc:
        raise InvalidSiteURL(f"Malformed URL: {url!r}") from exc
    scheme = parsed.scheme.lower()
    if scheme not in _DEFAULT_PORTS or not parsed.hostname:
        raise InvalidSiteURL(f"Not an absolute http(s) URL: {url!r}")
    host = parsed.hostname.lower()
    if ":" in host:
        host = f"[{host}]"
    if port is None or port == _DEFAULT_PORTS[scheme]:
        return f"{scheme}://{host}"
    return f"{scheme}://{host}:{port}"


def same_origin(url: str, origin: str) -> bool:
    try:
        return origin_of(url) == origin
    except InvalidSiteURL:
        return False


def normalize_url(url: str) -> str:
    """Return the canonical form of an absolute URL.

    The host is lowercased, a default port and the fragment are dropped, and
    an empty path becomes `/`. Raises InvalidSiteURL (a ValueError) for
    non-http(s) or malformed URLs.
    """
    parts = urlsplit(url.strip())
    query = f"?{parts.query}" if parts.query else ""
    return origin_of(url) + (parts.path or "/") + query


def page_path(url: str) -> str:
    return urlparse(url).path or "/"


def is_document_url(url: str) -> bool:
    """Return False for URLs that point at images, scripts, archives, etc."""
    path = urlparse(url).path.lower()
    return not path.endswith(SKIP_EXTENSIONS)


class URLFilter:
    """Decide which discovered links enter the frontier.

    Owns the visited set: a URL is marked seen when it is admitted and is
    never admitted twice.
    """

    def __init__(self, origin: str, robots: Optional[RobotsPolicy] = None) -> None:
        self._origin = origin
        self._robots = robots
        self._seen: Set[str] = set()

    def admit(self, url: str) -> bool:
        """Mark ``url`` seen and return True if it may be crawled."""
        if url in self._seen:
            return False
        if not same_origin(url, self._origin):
            logger.debug("Skipping off-origin link: %s", url)
            return False
        if self._robots is not None and not self._robots.is_allowed(url):
            logger.info("Blocked by robots.txt: %s", url)
            return False
        self._seen.add(url)
        return True

    def mark_seen(self, url: str) -> None:
        self._seen.add(url)
