"""Entry points: crawl a site and return or stream its sitemap."""

from __future__ import annotations

import asyncio
import contextlib
from dataclasses import replace
from typing import AsyncIterator, Optional

from .config import CrawlConfig
from .engine import CrawlEngine, ProgressCallback
from .fetcher import PageFetcher
from .models import CrawlProgress, CrawlResult
from .robots import RobotsPolicy
from .sitemap import render_sitemap


def build_config(
    site_url: str,
    max_pages: Optional[int] = None,
    config: Optional[CrawlConfig] = None,
) -> CrawlConfig:
    if config is None:
        return CrawlConfig(seed_url=site_url, max_pages=100 if max_pages is None else max_pages)
    return replace(config, seed_url=site_url, max_pages=config.max_pages if max_pages is None else max_pages)


async def crawl_site(
    site_url: str,
    max_pages: Optional[int] = None,
    on_progress: Optional[ProgressCallback] = None,
    config: Optional[CrawlConfig] = None,
    fetcher: Optional[PageFetcher] = None,
    robots: Optional[RobotsPolicy] = None,
) -> CrawlResult:
    """Crawl ``site_url`` from its origin and return the raw result."""
    engine = CrawlEngine(
        build_config(site_url, max_pages, config),
        progress_callback=on_progress,
        fetcher=fetcher,
        robots=robots,
    )
    return await engine.run()


async def create_sitemap(
    site_url: str,
    max_pages: Optional[int] = None,
    on_progress: Optional[ProgressCallback] = None,
    config: Optional[CrawlConfig] = None,
    fetcher: Optional[PageFetcher] = None,
    robots: Optional[RobotsPolicy] = None,
) -> str:
    """Crawl ``site_url`` and return its XML sitemap.

    Raises InvalidSiteURL for a malformed URL and BrowserLaunchError when a
    page needs the browser and it cannot be started. Every other failure is
    per page and only makes the sitemap less complete.
    """
    result = await crawl_site(site_url, max_pages, on_progress, config, fetcher, robots)
    return render_sitemap(result.entries)


def generate_sitemap(
    site_url: str,
    max_pages: Optional[int] = None,
    on_progress: Optional[ProgressCallback] = None,
    config: Optional[CrawlConfig] = None,
) -> str:
    """Blocking wrapper around create_sitemap."""
    return asyncio.run(create_sitemap(site_url, max_pages, on_progress, config))


async def stream_sitemap(
    site_url: str,
    max_pages: Optional[int] = None,
    config: Optional[CrawlConfig] = None,
    fetcher: Optional[PageFetcher] = None,
    robots: Optional[RobotsPolicy] = None,
) -> AsyncIterator[CrawlProgress]:
    """Yield a progress event per dispatched page, then a "done" event.

    The "done" event carries the finished document in ``sitemap``. Errors
    from the crawl are raised to the consumer after pending events.
    """
    config = build_config(site_url, max_pages, config)
    events: asyncio.Queue = asyncio.Queue()

    def on_progress(url: str, pages_so_far: int) -> None:
        events.put_nowait(CrawlProgress(
            pages_crawled=pages_so_far,
            max_pages=config.max_pages,
            current_url=url,
        ))

    async def crawl() -> CrawlResult:
        try:
            return await crawl_site(site_url, None, on_progress, config, fetcher, robots)
        finally:
            events.put_nowait(None)

    task = asyncio.ensure_future(crawl())
    try:
        while True:
            event = await events.get()
            if event is None:
                break
            yield event
        result = await task
    finally:
        if not task.done():
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task

    yield CrawlProgress(
        pages_crawled=result.total_crawled,
        max_pages=config.max_pages,
        event_type="done",
        sitemap=render_sitemap(result.entries),
    )
