"""XML sitemap serialization."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Iterable, List, Mapping, Union
from xml.sax.saxutils import escape

from .models import SitemapEntry

SITEMAP_NS = "http://www.sitemaps.org/schemas/sitemap/0.9"
XML_HEADER = '<?xml version="1.0" encoding="UTF-8"?>'


def format_lastmod(value: datetime) -> str:
    """ISO-8601 in UTC with millisecond precision, e.g. 2024-01-02T03:04:05.678Z."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    utc = value.astimezone(timezone.utc).replace(tzinfo=None)
    return utc.isoformat(timespec="milliseconds") + "Z"


def render_sitemap(entries: Union[Mapping[str, SitemapEntry], Iterable[SitemapEntry]]) -> str:
    """Render entries as a sitemap document, in the order given."""
    if isinstance(entries, Mapping):
        entries = entries.values()

    lines: List[str] = [XML_HEADER, f'<urlset xmlns="{SITEMAP_NS}">']
    for entry in entries:
        lines.append("  <url>")
        lines.append(f"    <loc>{escape(entry.url)}</loc>")
        lines.append(f"    <lastmod>{format_lastmod(entry.last_modified)}</lastmod>")
        lines.append(f"    <priority>{entry.priority:.1f}</priority>")
        lines.append("  </url>")
    lines.append("</urlset>")
    return "\n".join(lines)


def to_bytes(document: str) -> bytes:
    return document.encode("utf-8")
