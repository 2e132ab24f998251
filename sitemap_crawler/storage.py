"""Save sitemaps and crawl reports to disk."""

from __future__ import annotations

import json
import logging
import os
from datetime import datetime
from typing import Optional

from .models import CrawlResult
from .sitemap import to_bytes

logger = logging.getLogger(__name__)


class Storage:
    """Persist crawl output to disk."""

    def __init__(self, output_dir: str = "output") -> None:
        self._output_dir = output_dir
        os.makedirs(output_dir, exist_ok=True)

    def save_sitemap(self, document: str, path: Optional[str] = None) -> str:
        """Write the sitemap document; a timestamped name is used if no path is given."""
        if path is None:
            path = self._make_path("sitemap", "xml")
        else:
            parent = os.path.dirname(path)
            if parent:
                os.makedirs(parent, exist_ok=True)
        with open(path, "wb") as f:
            f.write(to_bytes(document))
        logger.info("Saved sitemap → %s", path)
        return path

    def save_json(self, result: CrawlResult) -> str:
        path = self._make_path("crawl", "json")
        with open(path, "w", encoding="utf-8") as f:
            json.dump(result.to_dict(), f, ensure_ascii=False, indent=2)
        logger.info("Saved JSON → %s", path)
        return path

    def _make_path(self, prefix: str, ext: str) -> str:
        ts = datetime.now().strftime("%Y%m%d_%H%M%S")
        return os.path.join(self._output_dir, f"{prefix}_{ts}.{ext}")
