"""Command-line interface for the sitemap crawler."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from . import __version__
from .config import BrowserConfig, CrawlConfig
from .errors import SitemapError
from .generator import crawl_site
from .sitemap import render_sitemap
from .storage import Storage

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="sitemap-crawler",
        description="Crawl a website and generate an XML sitemap",
    )
    p.add_argument("url", help="Website URL; crawling starts at its origin")
    p.add_argument(
        "-n", "--max-pages", type=int, default=100,
        help="Maximum pages in the sitemap (default: 100)",
    )
    p.add_argument(
        "-d", "--max-depth", type=int, default=None,
        help="Maximum link depth (default: unlimited)",
    )
    p.add_argument(
        "-c", "--concurrency", type=int, default=2,
        help="Pages fetched at the same time (default: 2)",
    )
    p.add_argument(
        "--timeout", type=int, default=10,
        help="HTTP request timeout in seconds (default: 10)",
    )
    p.add_argument(
        "--nav-timeout", type=float, default=60.0,
        help="Browser navigation timeout in seconds (default: 60)",
    )
    p.add_argument(
        "--selector-timeout", type=float, default=10.0,
        help="Browser wait for links/mount points in seconds (default: 10)",
    )
    p.add_argument(
        "--no-robots", action="store_true",
        help="Ignore robots.txt",
    )
    p.add_argument(
        "-f", "--format", choices=["xml", "json", "both"], default="xml",
        help="Output: sitemap XML, JSON crawl report, or both (default: xml)",
    )
    p.add_argument(
        "-o", "--output-dir", default="output",
        help="Output directory (default: output)",
    )
    p.add_argument(
        "--output", default=None,
        help="Write the sitemap to this file instead of a timestamped one",
    )
    p.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable verbose logging",
    )
    p.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}",
    )
    return p


def config_from_args(args: argparse.Namespace) -> CrawlConfig:
    return CrawlConfig(
        seed_url=args.url,
        max_pages=args.max_pages,
        max_depth=args.max_depth,
        concurrency=args.concurrency,
        timeout=args.timeout,
        respect_robots=not args.no_robots,
        output_dir=args.output_dir,
        output_path=args.output,
        output_format=args.format,
        verbose=args.verbose,
        browser=BrowserConfig(
            navigation_timeout=args.nav_timeout,
            selector_timeout=args.selector_timeout,
        ),
    )


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%H:%M:%S",
    )

    try:
        config = config_from_args(args)
        result = asyncio.run(crawl_site(config.seed_url, config=config))
    except (SitemapError, ValueError) as exc:
        logger.error("Sitemap generation failed: %s", exc)
        sys.exit(1)

    storage = Storage(config.output_dir)
    fmt = config.output_format.lower()
    if fmt in ("xml", "both"):
        storage.save_sitemap(render_sitemap(result.entries), config.output_path)
    if fmt in ("json", "both"):
        storage.save_json(result)

    print(f"\nCrawl complete: {result.total_crawled} pages, {result.total_failed} failed")


if __name__ == "__main__":
    main()
