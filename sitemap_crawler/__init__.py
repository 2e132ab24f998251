"""Crawl a website and generate an XML sitemap."""

__version__ = "1.0.0"

from .generator import create_sitemap, generate_sitemap, stream_sitemap  # noqa: E402

__all__ = ["__version__", "create_sitemap", "generate_sitemap", "stream_sitemap"]
