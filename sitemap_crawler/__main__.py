"""Allow running as `python -m sitemap_crawler`."""

from .cli import main

main()
