from datetime import datetime, timezone

import pytest
import requests
from bs4 import ParserRejectedMarkup
from requests.structures import CaseInsensitiveDict

from sitemap_crawler.errors import RenderError
from sitemap_crawler.fetcher import HttpPage
from sitemap_crawler.models import FetchResult
from sitemap_crawler.parser import Parser

FIXED_TIME = datetime(2024, 1, 2, 3, 4, 5, 678000, tzinfo=timezone.utc)


def ssr_html(links, title="Page"):
    """A server-rendered page: long enough, several body children, no mount point."""
    anchors = "".join(f'<li><a href="{href}">{href}</a></li>' for href in links)
    filler = "<p>Lorem ipsum dolor sit amet, consectetur adipiscing elit.</p>" * 4
    return (
        f"<html><head><title>{title}</title></head><body>"
        f"<header>Site header</header>{filler}<ul>{anchors}</ul><footer>Footer</footer>"
        "</body></html>"
    )


def csr_html():
    return (
        '<html><head><title>App</title></head><body><div id="root"></div>'
        + '<script src="/static/chunk.js"></script>' * 11
        + "</body></html>"
    )


class StubHttp:
    """HttpClient stand-in serving canned pages keyed by URL."""

    def __init__(self, pages=None, headers=None):
        self.pages = pages or {}
        self.headers = headers or {}
        self.calls = []
        self.closed = False

    def get(self, url):
        self.calls.append(url)
        page = self.pages.get(url)
        if page is None:
            raise requests.HTTPError(f"404 Client Error: Not Found for url: {url}")
        if isinstance(page, Exception):
            raise page
        headers = CaseInsensitiveDict({"Content-Type": "text/html; charset=utf-8"})
        headers.update(self.headers.get(url, {}))
        return HttpPage(url=url, status_code=200, text=page, headers=headers)

    def close(self):
        self.closed = True


class StubRenderer:
    """Renderer stand-in returning canned link lists."""

    def __init__(self, links=None, error=None):
        self.links = links or {}
        self.error = error
        self.calls = []
        self.closed = False

    async def collect_links(self, url, origin):
        self.calls.append(url)
        if self.error is not None:
            raise self.error
        return list(self.links.get(url, []))

    async def close(self):
        self.closed = True


class StubFetcher:
    """PageFetcher stand-in walking an in-memory link graph."""

    def __init__(self, graph, failing=(), error=None):
        self.graph = graph
        self.failing = set(failing)
        self.error = error
        self.fetched = []
        self.closed = False

    async def fetch(self, url):
        self.fetched.append(url)
        if self.error is not None:
            raise self.error
        if url in self.failing:
            return FetchResult(url=url, error="boom")
        return FetchResult(url=url, links=list(self.graph.get(url, [])), last_modified=FIXED_TIME)

    async def close(self):
        self.closed = True


def reject_markup(monkeypatch, marker):
    """Make Parser.parse reject any document containing ``marker``."""
    original = Parser.parse

    def parse(html):
        if marker in html:
            raise ParserRejectedMarkup("html.parser could not parse the document")
        return original(html)

    monkeypatch.setattr(Parser, "parse", staticmethod(parse))


@pytest.fixture
def render_error():
    return RenderError("Rendering failed for https://example.com/: Timeout 60000ms exceeded")
