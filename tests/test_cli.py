import os

import pytest

from sitemap_crawler import cli
from sitemap_crawler.errors import BrowserLaunchError
from sitemap_crawler.models import CrawlResult, SitemapEntry

from conftest import FIXED_TIME


def test_parser_defaults():
    args = cli.build_parser().parse_args(["https://example.com"])
    config = cli.config_from_args(args)
    assert config.max_pages == 100
    assert config.concurrency == 2
    assert config.respect_robots is True
    assert config.output_format == "xml"
    assert config.browser.navigation_timeout == 60.0
    assert config.browser.selector_timeout == 10.0


def test_parser_options():
    args = cli.build_parser().parse_args([
        "https://example.com", "-n", "5", "-d", "3", "-c", "4", "--no-robots",
        "--nav-timeout", "30", "--selector-timeout", "2.5", "-f", "both",
    ])
    config = cli.config_from_args(args)
    assert (config.max_pages, config.max_depth, config.concurrency) == (5, 3, 4)
    assert config.respect_robots is False
    assert config.browser.selector_timeout == 2.5
    assert config.output_format == "both"


def fake_result(url):
    result = CrawlResult(seed_url=url, origin="https://example.com")
    result.entries["https://example.com/"] = SitemapEntry("https://example.com/", FIXED_TIME, 1.0)
    return result


def test_main_writes_sitemap_and_report(tmp_path, monkeypatch, capsys):
    async def fake_crawl(url, config=None):
        return fake_result(url)

    monkeypatch.setattr(cli, "crawl_site", fake_crawl)
    out = tmp_path / "site" / "sitemap.xml"
    cli.main(["https://example.com", "-o", str(tmp_path), "--output", str(out), "-f", "both"])

    assert out.read_bytes().startswith(b'<?xml version="1.0" encoding="UTF-8"?>')
    assert b"<loc>https://example.com/</loc>" in out.read_bytes()
    reports = [name for name in os.listdir(tmp_path) if name.startswith("crawl_")]
    assert len(reports) == 1
    assert "Crawl complete: 1 pages, 0 failed" in capsys.readouterr().out


def test_main_exits_on_fatal_error(tmp_path, monkeypatch):
    async def failing_crawl(url, config=None):
        raise BrowserLaunchError("no chromium")

    monkeypatch.setattr(cli, "crawl_site", failing_crawl)
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["https://example.com", "-o", str(tmp_path)])
    assert excinfo.value.code == 1
