from __future__ import annotations

from ..fetcher import FetchResult, robots_url
from ..models import CheckResult
from .base import BaseChecker


def disallows_everything(content: str) -> bool:
    """True when a `Disallow: /` line sits under `User-agent: *`."""
    agent_all = False
    for raw in content.splitlines():
        line = raw.split("#", 1)[0].strip().lower()
        if not line:
            continue
        if line.startswith("user-agent:"):
            agent_all = line.split(":", 1)[1].strip() == "*"
        elif agent_all and line.replace(" ", "") == "disallow:/":
            return True
    return False


class RobotsTxtChecker(BaseChecker):
    category = "robotsTxt"
    RULES = {
        "robots-txt-exists": "check_exists",
        "robots-txt-valid": "check_valid",
    }

    async def robots(self) -> FetchResult:
        return await self.handler.fetch_once(robots_url(self.url), "robots-txt")

    async def check_exists(self) -> CheckResult:
        r = await self.robots()
        if r.status_code == 200:
            low = r.text.lower()
            return self.result(
                "robots-txt-exists", True, "robots.txt file exists and is accessible",
                url=r.url, status=r.status_code,
                hasUserAgent="user-agent:" in low, hasDisallow="disallow:" in low, size=len(r.text),
            )
        if r.status_code == 404:
            return self.result("robots-txt-exists", False, "robots.txt file not found (404)", url=r.url, status=r.status_code)
        return self.result("robots-txt-exists", False, f"robots.txt returned unexpected status: {r.status_code}", url=r.url, status=r.status_code)

    async def check_valid(self) -> CheckResult:
        r = await self.robots()
        if r.status_code != 200:
            return self.result("robots-txt-valid", True, "robots.txt validation skipped (file not found)")

        issues = []
        if disallows_everything(r.text):
            issues.append('robots.txt contains "Disallow: /" which blocks all crawlers')
        has_sitemap = "sitemap:" in r.text.lower()
        if not has_sitemap:
            issues.append("Consider adding a sitemap reference to robots.txt")

        return self.result(
            "robots-txt-valid", not issues,
            "robots.txt is properly configured" if not issues else "robots.txt has potential issues",
            issues=issues, hasSitemapReference=has_sitemap, content=r.text[:500],
        )
