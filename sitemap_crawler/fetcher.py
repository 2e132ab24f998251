"""Page fetching: plain HTTP first, headless browser as fallback."""

from __future__ import annotations

import asyncio
import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Mapping, Optional

import requests
from bs4 import ParserRejectedMarkup
from dateutil.parser import parse as parse_date
from requests.structures import CaseInsensitiveDict

from .browser import PlaywrightRenderer, Renderer
from .classifier import needs_browser_render
from .config import CrawlConfig
from .errors import RenderError
from .models import FetchResult, utc_now
from .parser import Parser

logger = logging.getLogger(__name__)


@dataclass
class HttpPage:
    """A raw HTTP response."""

    url: str
    status_code: int
    text: str
    headers: Mapping[str, str] = field(default_factory=CaseInsensitiveDict)
    fetched_at: datetime = field(default_factory=utc_now)

    @property
    def is_html(self) -> bool:
        content_type = self.headers.get("Content-Type", "")
        return not content_type or "html" in content_type.lower()

    @property
    def last_modified(self) -> datetime:
        """The Last-Modified header in UTC, or the fetch time without one."""
        header = self.headers.get("Last-Modified")
        if header:
            try:
                value = parse_date(header)
            except (ValueError, OverflowError):
                logger.debug("Unparseable Last-Modified %r for %s", header, self.url)
            else:
                if value.tzinfo is None:
                    value = value.replace(tzinfo=timezone.utc)
                return value.astimezone(timezone.utc)
        return self.fetched_at


class HttpClient:
    """Blocking HTTP GETs, one requests session per worker thread."""

    def __init__(self, user_agent: str, timeout: float = 10) -> None:
        self._user_agent = user_agent
        self._timeout = timeout
        self._local = threading.local()
        self._sessions: List[requests.Session] = []
        self._sessions_lock = threading.Lock()

    @property
    def session(self) -> requests.Session:
        """The calling thread's session, created on first use."""
        session = getattr(self._local, "session", None)
        if session is None:
            session = requests.Session()
            session.headers.update({"User-Agent": self._user_agent})
            self._local.session = session
            with self._sessions_lock:
                self._sessions.append(session)
        return session

    def get(self, url: str) -> HttpPage:
        """GET ``url``. Raises requests.RequestException on failure or HTTP error."""
        logger.debug("Fetching %s", url)
        resp = self.session.get(url, timeout=self._timeout)
        resp.raise_for_status()
        return HttpPage(
            url=url,
            status_code=resp.status_code,
            text=resp.text,
            headers=resp.headers,
        )

    def close(self) -> None:
        with self._sessions_lock:
            sessions, self._sessions = self._sessions, []
        for session in sessions:
            session.close()


class PageFetcher:
    """Fetch a page and list its links, rendering it in a browser when needed."""

    def __init__(
        self,
        config: CrawlConfig,
        origin: str,
        http: Optional[HttpClient] = None,
        renderer: Optional[Renderer] = None,
    ) -> None:
        self._config = config
        self._origin = origin
        self._http = http or HttpClient(config.user_agent, config.timeout)
        self._renderer = renderer or PlaywrightRenderer(
            config.browser,
            root_selectors=config.render.root_selectors,
            user_agent=config.user_agent,
        )

    async def fetch(self, url: str) -> FetchResult:
        """Return the links and last-modified time of ``url``.

        Per-page failures are logged and produce an empty result stamped with
        the current time. BrowserLaunchError is not caught.
        """
        try:
            page = await asyncio.to_thread(self._http.get, url)
        except requests.RequestException as exc:
            logger.warning("Request failed for %s: %s", url, exc)
            return FetchResult(url=url, error=str(exc))

        if not page.is_html:
            logger.debug("Skipping non-HTML content: %s", page.headers.get("Content-Type"))
            return FetchResult(url=url, last_modified=page.last_modified)

        try:
            soup = Parser.parse(page.text)
        except ParserRejectedMarkup as exc:
            logger.warning("Could not parse %s: %s", url, exc)
            return FetchResult(url=url, error=str(exc))

        is_csr = needs_browser_render(page.text, soup, self._config.render)
        links: List[str] = [] if is_csr else Parser.extract_links(soup, self._origin, url)

        if not is_csr and links:
            return FetchResult(url=url, links=links, last_modified=page.last_modified)

        if is_csr:
            logger.info("Client-side rendering detected; rendering %s", url)
        else:
            logger.info("No links via HTTP; rendering %s", url)
        try:
            rendered = await self._renderer.collect_links(url, self._origin)
        except RenderError as exc:
            logger.warning("%s", exc)
            return FetchResult(url=url, error=str(exc))

        merged = Parser.filter_links([*links, *rendered], self._origin, url)
        return FetchResult(url=url, links=merged, last_modified=page.last_modified, rendered=True)

    async def close(self) -> None:
        try:
            await self._renderer.close()
        finally:
            self._http.close()
