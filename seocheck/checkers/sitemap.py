from __future__ import annotations

import re
from typing import Any, Dict, Optional, Set
from urllib.parse import urlparse

from ..errors import CategorizedError
from ..fetcher import looks_like_sitemap, robots_url, sitemap_candidates
from ..models import CheckResult
from .base import BaseChecker

_LOC_RE = re.compile(r"<loc>", re.IGNORECASE)


class SitemapChecker(BaseChecker):
    category = "sitemap"
    RULES = {
        "sitemap-exists": "check_exists",
        "sitemap-in-robots-txt": "check_in_robots",
    }

    def __init__(self, context):
        super().__init__(context)
        self._found: Optional[Dict[str, Any]] = None

    async def robots_text(self) -> str:
        r = await self.handler.fetch_once(robots_url(self.url), "robots-txt")
        return r.text if r.status_code == 200 else ""

    async def locate(self) -> Dict[str, Any]:
        """First candidate that answers 200 with sitemap XML; tried in order."""
        if self._found is not None:
            return self._found
        tried = []
        unreachable: Set[str] = set()
        for candidate in sitemap_candidates(self.url, await self.robots_text()):
            host = urlparse(candidate).netloc
            if host in unreachable:
                tried.append({"url": candidate, "skipped": True})
                continue
            try:
                r = await self.handler.fetch_once(candidate, "sitemap-exists")
            except CategorizedError as e:
                # one failed retry sequence per host is enough
                unreachable.add(host)
                tried.append({"url": candidate, "error": e.message})
                continue
            tried.append({"url": candidate, "status": r.status_code})
            if r.ok and looks_like_sitemap(r.text):
                self._found = {"url": r.final_url, "entries": len(_LOC_RE.findall(r.text)), "tried": tried}
                return self._found
        self._found = {"url": None, "entries": 0, "tried": tried}
        return self._found

    async def check_exists(self) -> CheckResult:
        found = await self.locate()
        if not found["url"]:
            return self.result("sitemap-exists", False, "XML sitemap not found", tried=found["tried"])
        return self.result(
            "sitemap-exists", True, f"XML sitemap found at {found['url']} ({found['entries']} entries)",
            url=found["url"], entries=found["entries"],
        )

    async def check_in_robots(self) -> CheckResult:
        text = await self.robots_text()
        lines = [ln.strip() for ln in text.splitlines() if ln.strip().lower().startswith("sitemap:")]
        if lines:
            return self.result("sitemap-in-robots-txt", True, f"Sitemap referenced in robots.txt ({len(lines)})", sitemaps=lines)
        return self.result("sitemap-in-robots-txt", False, "Sitemap not referenced in robots.txt")
