from datetime import datetime, timedelta, timezone
from xml.etree import ElementTree as ET

from sitemap_crawler.models import SitemapEntry, priority_for_depth
from sitemap_crawler.sitemap import SITEMAP_NS, format_lastmod, render_sitemap, to_bytes

NS = {"sm": SITEMAP_NS}


def make_entries():
    when = datetime(2024, 1, 2, 3, 4, 5, 678901, tzinfo=timezone.utc)
    return {
        "https://x.com/": SitemapEntry("https://x.com/", when, priority_for_depth(0)),
        "https://x.com/b?x=1&y=2": SitemapEntry("https://x.com/b?x=1&y=2", when, priority_for_depth(3)),
        "https://x.com/a": SitemapEntry("https://x.com/a", when, priority_for_depth(20)),
    }


def test_priority_for_depth():
    assert priority_for_depth(0) == 1.0
    assert priority_for_depth(1) == 0.9
    assert priority_for_depth(3) == 0.7
    assert priority_for_depth(5) == 0.5
    assert priority_for_depth(9) == 0.1
    assert priority_for_depth(20) == 0.1
    for depth in range(30):
        assert priority_for_depth(depth) == max(0.1, round(1.0 - 0.1 * depth, 1))


def test_format_lastmod_is_utc_with_milliseconds():
    plus_two = timezone(timedelta(hours=2))
    assert format_lastmod(datetime(2024, 1, 2, 5, 4, 5, 678901, tzinfo=plus_two)) == "2024-01-02T03:04:05.678Z"
    assert format_lastmod(datetime(2024, 1, 2, 3, 4, 5)) == "2024-01-02T03:04:05.000Z"


def test_document_layout():
    xml = render_sitemap(make_entries())
    assert xml.startswith('<?xml version="1.0" encoding="UTF-8"?>\n<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">')
    assert "    <loc>https://x.com/b?x=1&amp;y=2</loc>" in xml
    assert "    <lastmod>2024-01-02T03:04:05.678Z</lastmod>" in xml
    assert "    <priority>0.7</priority>" in xml
    assert xml.endswith("</urlset>")


def test_entries_keep_insertion_order():
    root = ET.fromstring(to_bytes(render_sitemap(make_entries())))
    locs = [el.text for el in root.findall("sm:url/sm:loc", NS)]
    assert locs == ["https://x.com/", "https://x.com/b?x=1&y=2", "https://x.com/a"]
    priorities = [el.text for el in root.findall("sm:url/sm:priority", NS)]
    assert priorities == ["1.0", "0.7", "0.1"]


def test_rendering_is_deterministic():
    entries = make_entries()
    assert to_bytes(render_sitemap(entries)) == to_bytes(render_sitemap(entries))
    assert render_sitemap(entries) == render_sitemap(list(entries.values()))


def test_empty_sitemap():
    assert render_sitemap({}) == (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        '<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">\n'
        "</urlset>"
    )
