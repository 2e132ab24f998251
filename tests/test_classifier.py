from bs4 import BeautifulSoup

from sitemap_crawler.classifier import needs_browser_render
from sitemap_crawler.config import RenderConfig

from conftest import csr_html, ssr_html


def classify(html, config=RenderConfig()):
    return needs_browser_render(html, BeautifulSoup(html, "html.parser"), config)


def test_server_rendered_page_is_not_flagged():
    assert classify(ssr_html(["/a", "/b"])) is False


def test_short_document_is_flagged():
    assert classify("<html><body><p>hi</p></body></html>") is True


def test_root_mount_with_many_scripts_is_flagged():
    html = "<html><body><div id=\"root\"></div>" + "<script>var a = 1;</script>" * 11 + "</body></html>"
    assert classify(html) is True
    assert classify(csr_html()) is True


def test_empty_body_with_many_scripts_is_flagged():
    scripts = '<script src="/static/a.js"></script>' * 11
    html = f"<html><head>{scripts}</head><body><main>{'x' * 300}</main></body></html>"
    assert classify(html) is True


def test_script_threshold_is_exclusive():
    scripts = '<script src="/static/a.js"></script>' * 10
    html = f"<html><head>{scripts}</head><body><main>{'x' * 600}</main></body></html>"
    assert classify(html) is False


def test_root_mount_with_loading_indicator_is_flagged():
    html = ssr_html(["/a"]).replace("<footer>", '<div id="__next"><span class="spinner"></span></div><footer>')
    assert classify(html) is True


def test_loading_word_without_mount_point_is_ignored():
    html = ssr_html(["/a"]).replace("Footer", "Footer loading")
    assert classify(html) is False


def test_thresholds_come_from_config():
    html = ssr_html(["/a"])
    assert classify(html, RenderConfig(min_content_length=len(html) + 1)) is True
    strict = RenderConfig(root_selectors=("header",), min_body_children=50)
    assert classify(html, strict) is True
