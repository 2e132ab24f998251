"""Batched breadth-first crawl engine: the core orchestrator."""

from __future__ import annotations

import asyncio
import logging
from collections import deque
from typing import Callable, Deque, List, Optional

from .config import CrawlConfig
from .fetcher import HttpClient, PageFetcher
from .filters import URLFilter, origin_of
from .models import CrawlResult, CrawlTask, FetchResult, SitemapEntry
from .robots import RobotsPolicy

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str, int], None]


class CrawlEngine:
    """Crawl a site breadth-first in bounded concurrent batches.

    The frontier and the visited set are only touched between batches, while
    no fetch is in flight.
    """

    def __init__(
        self,
        config: CrawlConfig,
        progress_callback: Optional[ProgressCallback] = None,
        fetcher: Optional[PageFetcher] = None,
        robots: Optional[RobotsPolicy] = None,
    ) -> None:
        self._config = config
        self._origin = origin_of(config.seed_url)
        self._progress_callback = progress_callback
        self._http: Optional[HttpClient] = None
        if fetcher is None:
            self._http = HttpClient(config.user_agent, config.timeout)
            fetcher = PageFetcher(config, self._origin, http=self._http)
        self._fetcher = fetcher
        self._robots = robots

    async def run(self) -> CrawlResult:
        try:
            robots = await asyncio.to_thread(self._load_robots)
            result = CrawlResult(
                seed_url=self._config.seed_url,
                origin=self._origin,
                disallowed_paths=robots.disallowed_paths,
            )
            url_filter = URLFilter(self._origin, robots if self._config.respect_robots else None)

            seed = CrawlTask(self._origin + "/", 0)
            frontier: Deque[CrawlTask] = deque([seed])
            url_filter.mark_seen(seed.url)

            while frontier and result.total_crawled < self._config.max_pages:
                remaining = self._config.max_pages - result.total_crawled
                batch = [frontier.popleft() for _ in range(min(self._config.concurrency, remaining, len(frontier)))]
                fetched = await self._dispatch(batch, result.total_crawled)
                for task, page in zip(batch, fetched):
                    self._record(task, page, result, url_filter, frontier)
        finally:
            await self._fetcher.close()

        logger.info(
            "Crawled %d pages (%d failed, %d rendered in browser)",
            result.total_crawled,
            result.total_failed,
            len(result.rendered_urls),
        )
        return result

    def _load_robots(self) -> RobotsPolicy:
        if self._robots is not None:
            return self._robots
        if not self._config.respect_robots:
            return RobotsPolicy()
        session = self._http.session if self._http is not None else None
        return RobotsPolicy.load(self._origin, session=session, timeout=self._config.timeout)

    async def _dispatch(self, batch: List[CrawlTask], pages_so_far: int) -> List[FetchResult]:
        """Fetch every task of the batch concurrently and wait for all of them."""
        for i, task in enumerate(batch):
            logger.info("Crawling: %s (depth: %d)", task.url, task.depth)
            if self._progress_callback:
                try:
                    self._progress_callback(task.url, pages_so_far + i + 1)
                except Exception:
                    logger.exception("Progress callback failed for %s", task.url)

        outcomes = await asyncio.gather(
            *(self._fetcher.fetch(task.url) for task in batch),
            return_exceptions=True,
        )
        for outcome in outcomes:
            if isinstance(outcome, BaseException):
                raise outcome
        return outcomes

    def _record(
        self,
        task: CrawlTask,
        page: FetchResult,
        result: CrawlResult,
        url_filter: URLFilter,
        frontier: Deque[CrawlTask],
    ) -> None:
        max_pages = self._config.max_pages
        if result.total_crawled >= max_pages:
            return

        result.entries[task.url] = SitemapEntry.for_task(task, page.last_modified)
        if page.failed:
            result.failed_urls.append({"url": task.url, "error": page.error})
        if page.rendered:
            result.rendered_urls.append(task.url)
        logger.debug(
            "[%d/%d] depth=%d %s (%d links)",
            result.total_crawled, max_pages, task.depth, task.url, len(page.links),
        )

        max_depth = self._config.max_depth
        if max_depth is not None and task.depth >= max_depth:
            return
        for link in page.links:
            if result.total_crawled >= max_pages:
                break
            if url_filter.admit(link):
                frontier.append(CrawlTask(link, task.depth + 1))
