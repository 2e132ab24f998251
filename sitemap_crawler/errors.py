"""Exceptions raised by the sitemap crawler."""


class SitemapError(Exception):
    """Base class for sitemap generation failures."""


class InvalidSiteURL(SitemapError, ValueError):
    """Raised when the site URL is not an absolute http(s) URL."""


class BrowserLaunchError(SitemapError):
    """Raised when the headless browser cannot be started.

    Fatal to the crawl: client-rendered pages cannot be discovered without it.
    """


class RenderError(SitemapError):
    """Raised when a single page fails to render in the browser."""
