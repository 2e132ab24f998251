"""robots.txt loading and disallow-rule checks."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple
from urllib.parse import urlparse

import requests

logger = logging.getLogger(__name__)


def parse_robots_txt(content: str) -> Tuple[str, ...]:
    """Return the Disallow prefixes that apply to the ``*`` user agent.

    Consecutive User-agent lines form one group; a group applies when any of
    its agents is ``*``. Other directives and other agents are ignored.
    """
    disallowed: List[str] = []
    applies = False
    in_agent_lines = False

    for raw_line in content.splitlines():
        line = raw_line.split("#", 1)[0].strip()
        if not line or ":" not in line:
            continue
        key, _, value = line.partition(":")
        key = key.strip().lower()
        value = value.strip()

        if key == "user-agent":
            if not in_agent_lines:
                applies = False
                in_agent_lines = True
            if value == "*":
                applies = True
            continue

        in_agent_lines = False
        if key == "disallow" and applies and value and value not in disallowed:
            disallowed.append(value)

    return tuple(disallowed)


@dataclass(frozen=True)
class RobotsPolicy:
    """Disallowed path prefixes for the crawl origin."""

    disallowed_paths: Tuple[str, ...] = ()

    @classmethod
    def load(
        cls,
        origin: str,
        session: Optional[requests.Session] = None,
        timeout: float = 5,
    ) -> "RobotsPolicy":
        """Fetch ``<origin>/robots.txt``. Any failure yields an empty policy."""
        robots_url = f"{origin}/robots.txt"
        logger.info("Fetching robots.txt from %s", robots_url)
        http = session or requests
        try:
            resp = http.get(robots_url, timeout=timeout)
        except requests.RequestException as exc:
            logger.warning("Could not fetch %s: %s", robots_url, exc)
            return cls()

        if resp.status_code == 404:
            logger.info("No robots.txt found. Crawling all pages.")
            return cls()
        if not 200 <= resp.status_code < 300:
            logger.warning("robots.txt returned status %d; ignoring it", resp.status_code)
            return cls()

        policy = cls(parse_robots_txt(resp.text))
        logger.info("Found %d disallowed rules.", len(policy.disallowed_paths))
        return policy

    def is_allowed(self, url: str) -> bool:
        """Return False if the URL path falls under a disallowed prefix."""
        path = urlparse(url).path or "/"
        return not any(_prefix_matches(prefix, path) for prefix in self.disallowed_paths)


def _prefix_matches(prefix: str, path: str) -> bool:
    # /admin covers /admin and /admin/..., not /admin2
    if not path.startswith(prefix):
        return False
    if len(path) == len(prefix) or prefix.endswith("/"):
        return True
    return path[len(prefix)] == "/"
