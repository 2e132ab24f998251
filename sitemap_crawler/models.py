"""Data models for crawl results."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple


def priority_for_depth(depth: int) -> float:
    """Sitemap priority of a page found at ``depth`` links from the seed."""
    return max(0.1, round(1.0 - depth * 0.1, 1))


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class CrawlTask:
    """A frontier entry: one URL waiting to be fetched."""

    url: str
    depth: int = 0


@dataclass(frozen=True)
class SitemapEntry:
    """Metadata recorded for a crawled page."""

    url: str
    last_modified: datetime
    priority: float

    @classmethod
    def for_task(cls, task: CrawlTask, last_modified: datetime) -> "SitemapEntry":
        return cls(
            url=task.url,
            last_modified=last_modified,
            priority=priority_for_depth(task.depth),
        )

    def to_dict(self) -> dict:
        return {
            "url": self.url,
            "last_modified": self.last_modified.isoformat(),
            "priority": self.priority,
        }


@dataclass
class FetchResult:
    """Outcome of fetching a single page."""

    url: str
    links: List[str] = field(default_factory=list)
    last_modified: datetime = field(default_factory=utc_now)
    rendered: bool = False
    error: Optional[str] = None

    @property
    def failed(self) -> bool:
        return self.error is not None


@dataclass
class CrawlProgress:
    """Progress update from the crawl engine."""

    pages_crawled: int
    max_pages: int
    current_url: str = ""
    event_type: str = "progress"  # "progress" or "done"
    sitemap: Optional[str] = None


@dataclass
class CrawlResult:
    """Aggregated result of a crawl session."""

    seed_url: str
    origin: str
    entries: Dict[str, SitemapEntry] = field(default_factory=dict)
    failed_urls: List[dict] = field(default_factory=list)
    rendered_urls: List[str] = field(default_factory=list)
    disallowed_paths: Tuple[str, ...] = ()

    @property
    def total_crawled(self) -> int:
        return len(self.entries)

    @property
    def total_failed(self) -> int:
        return len(self.failed_urls)

    def to_dict(self) -> dict:
        return {
            "seed_url": self.seed_url,
            "origin": self.origin,
            "total_crawled": self.total_crawled,
            "total_failed": self.total_failed,
            "disallowed_paths": list(self.disallowed_paths),
            "rendered_urls": self.rendered_urls,
            "entries": [e.to_dict() for e in self.entries.values()],
            "failed_urls": self.failed_urls,
        }
