"""Crawl configuration."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple


@dataclass(frozen=True)
class RenderConfig:
    """Thresholds used to decide whether a page needs a browser render."""

    min_content_length: int = 200
    min_body_children: int = 5
    script_count_threshold: int = 10
    min_content_script_ratio: float = 1000.0
    # Mount points of typical client-rendering frameworks (React, Next.js)
    root_selectors: Tuple[str, ...] = ("#root", "#__next")
    loading_markers: Tuple[str, ...] = ("loading", "spinner")


@dataclass(frozen=True)
class BrowserConfig:
    """Headless browser settings. Timeouts are in seconds."""

    navigation_timeout: float = 60.0
    selector_timeout: float = 10.0
    wait_until: str = "networkidle"
    headless: bool = True


@dataclass
class CrawlConfig:
    """Configuration for a sitemap crawl."""

    seed_url: str
    max_pages: int = 100
    max_depth: Optional[int] = None
    concurrency: int = 2
    timeout: int = 10
    respect_robots: bool = True
    user_agent: str = "SitemapCrawler/1.0 (+https://github.com/example/sitemap-crawler)"
    output_dir: str = "output"
    output_path: Optional[str] = None
    output_format: str = "xml"  # "xml", "json" or "both"
    verbose: bool = False
    render: RenderConfig = field(default_factory=RenderConfig)
    browser: BrowserConfig = field(default_factory=BrowserConfig)

    def __post_init__(self) -> None:
        if self.max_pages < 1:
            raise ValueError(f"max_pages must be positive, got {self.max_pages}")
        if self.concurrency < 1:
            raise ValueError(f"concurrency must be positive, got {self.concurrency}")
