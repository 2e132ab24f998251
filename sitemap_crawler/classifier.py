"""Heuristics for spotting client-side rendered pages."""

from __future__ import annotations

import logging

from bs4 import BeautifulSoup

from .config import RenderConfig

logger = logging.getLogger(__name__)


def needs_browser_render(html: str, soup: BeautifulSoup, config: RenderConfig = RenderConfig()) -> bool:
    """Return True if the page looks like it must be rendered in a browser.

    Any one of the following is enough:

    1. the document is shorter than ``min_content_length``;
    2. a framework mount point is present and the body is nearly empty or
       shows a loading indicator;
    3. the body is nearly empty and the page carries many scripts;
    4. there is little markup per script tag and a mount point is present.

    This is a best-effort signal. Pages misclassified as server-rendered
    usually yield no links and get rendered anyway.
    """
    body = soup.body
    body_children = len(body.contents) if body is not None else 0
    script_count = len(soup.find_all("script"))

    is_short = len(html) < config.min_content_length
    has_empty_body = body_children < config.min_body_children
    has_many_scripts = script_count > config.script_count_threshold
    low_content_ratio = len(html) / max(script_count, 1) < config.min_content_script_ratio
    has_root = any(soup.select_one(selector) is not None for selector in config.root_selectors)
    has_loading = any(marker in html for marker in config.loading_markers)

    verdict = (
        is_short
        or (has_root and (has_empty_body or has_loading))
        or (has_empty_body and has_many_scripts)
        or (low_content_ratio and has_root)
    )
    logger.debug(
        "CSR check: len=%d body_children=%d scripts=%d root=%s loading=%s -> %s",
        len(html), body_children, script_count, has_root, has_loading, verdict,
    )
    return verdict
