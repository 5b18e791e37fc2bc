from __future__ import annotations

from collections import Counter

from ..models import CheckResult
from .base import BaseChecker


class TechnicalChecker(BaseChecker):
    category = "technical"
    RULES = {
        "response-code-ok": "check_response_code",
        "redirect-chain-short": "check_redirects",
        "page-size-acceptable": "check_page_size",
        "compression-enabled": "check_compression",
        "no-duplicate-headings": "check_duplicate_headings",
        "indexable": "check_indexable",
    }

    def check_response_code(self) -> CheckResult:
        status = self.navigation.status
        if status is None:
            return self.result("response-code-ok", False, "No HTTP status captured")
        if 200 <= status < 300:
            return self.result("response-code-ok", True, f"Page returned HTTP {status}", status=status)
        if 300 <= status < 400:
            return self.result("response-code-ok", False, f"Page returned redirect status {status}", status=status)
        if 400 <= status < 500:
            return self.result("response-code-ok", False, f"Page returned client error {status}", status=status)
        return self.result("response-code-ok", False, f"Page returned server error {status}", status=status)

    def check_redirects(self) -> CheckResult:
        rule = "redirect-chain-short"
        max_hops = int(self.option(rule, "maxRedirects", 1))
        n = self.navigation.redirect_count
        chain = self.navigation.redirect_chain + [self.navigation.final_url]
        if n == 0:
            return self.result(rule, True, "No redirects")
        if n > max_hops:
            return self.result(rule, False, f"Redirect chain too long ({n} redirects)", chain=chain)
        return self.result(rule, True, f"{n} redirect(s) before final URL", chain=chain)

    def check_page_size(self) -> CheckResult:
        rule = "page-size-acceptable"
        kb = round(self.snapshot.html_size / 1024, 1)
        limit = float(self.option(rule, "maxKB", 200))
        if kb > limit:
            return self.result(rule, False, f"HTML is large ({kb} KB). Recommended: < {limit:g} KB", htmlSizeKB=kb)
        if kb > limit / 2:
            return self.result(rule, True, f"HTML size is acceptable ({kb} KB)", htmlSizeKB=kb)
        return self.result(rule, True, f"HTML size is good ({kb} KB)", htmlSizeKB=kb)

    def check_compression(self) -> CheckResult:
        encoding = (self.navigation.headers.get("content-encoding") or "").lower()
        if any(e in encoding for e in ("gzip", "br", "deflate", "zstd")):
            return self.result("compression-enabled", True, f"Response is compressed ({encoding})", encoding=encoding)
        return self.result("compression-enabled", False, "Response is not compressed (no gzip/brotli)")

    def check_duplicate_headings(self) -> CheckResult:
        counts = Counter(h["text"].lower() for h in self.body.get("headings") or [] if h["level"] == 1 and h["text"])
        dupes = [t for t, n in counts.items() if n > 1]
        title = (self.head.get("title") or "").strip().lower()
        if dupes:
            return self.result("no-duplicate-headings", False, f"Duplicate H1 headings: {', '.join(dupes)}", duplicates=dupes)
        return self.result(
            "no-duplicate-headings", True, "No duplicate H1 headings",
            h1MatchesTitle=bool(title) and title in counts,
        )

    def check_indexable(self) -> CheckResult:
        robots = self.head.get("meta_robots") or ""
        x_robots = (self.navigation.headers.get("x-robots-tag") or "").lower()
        if "noindex" in robots or "noindex" in x_robots:
            return self.result("indexable", False, "Page is excluded from indexing (noindex)", metaRobots=robots, xRobotsTag=x_robots)
        return self.result("indexable", True, "Page is indexable")
