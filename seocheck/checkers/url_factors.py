from __future__ import annotations

import re
from urllib.parse import parse_qs, unquote, urlparse

from ..models import CheckResult
from .base import BaseChecker

SESSION_PARAMS = {"sid", "sessionid", "session_id", "phpsessid", "jsessionid"}
_STOPWORDS = {"the", "and", "for", "with", "your", "from", "that", "this", "are", "you"}


class URLFactorsChecker(BaseChecker):
    category = "urlFactors"
    RULES = {
        "url-length": "check_length",
        "url-readability": "check_readability",
        "url-keywords": "check_keywords",
        "url-lowercase": "check_case",
        "url-parameters": "check_parameters",
        "url-depth": "check_depth",
    }

    @property
    def parsed(self):
        return urlparse(self.url)

    def check_length(self) -> CheckResult:
        n = len(self.url)
        if n > 100:
            return self.result("url-length", False, f"URL is too long ({n} characters). Recommended: under 75 characters", length=n)
        if n > 75:
            return self.result("url-length", True, f"URL length is acceptable ({n} characters) but could be shorter", length=n)
        return self.result("url-length", True, f"URL length is optimal ({n} characters)", length=n)

    def check_readability(self) -> CheckResult:
        path = unquote(self.parsed.path)
        issues = []
        if "_" in path:
            issues.append("uses underscores instead of hyphens")
        if re.search(r"\d{5,}", path):
            issues.append("contains long numeric IDs")
        if re.search(r"%[0-9a-f]{2}", self.parsed.path, re.IGNORECASE):
            issues.append("contains encoded characters")
        if issues:
            return self.result("url-readability", False, f"URL readability issues: {', '.join(issues)}", issues=issues)
        return self.result("url-readability", True, "URL is human-readable" + (" and SEO-friendly" if "-" in path else ""))

    def check_keywords(self) -> CheckResult:
        title = (self.head.get("title") or "").lower()
        words = {w for w in re.findall(r"[a-z0-9]{3,}", title) if w not in _STOPWORDS}
        path = unquote(self.parsed.path).lower()
        if path in ("", "/"):
            return self.result("url-keywords", True, "Root URL; keyword check not applicable")
        matches = sorted(w for w in words if w in path)
        if not matches:
            return self.result("url-keywords", False, "URL does not contain keywords from page title")
        return self.result("url-keywords", True, f"URL contains {len(matches)} keyword(s) from title", keywords=matches)

    def check_case(self) -> CheckResult:
        if self.parsed.path != self.parsed.path.lower():
            return self.result("url-lowercase", False, "URL contains uppercase letters (lowercase is recommended)")
        return self.result("url-lowercase", True, "URL uses lowercase letters")

    def check_parameters(self) -> CheckResult:
        rule = "url-parameters"
        params = parse_qs(self.parsed.query, keep_blank_values=True)
        if any(k.lower() in SESSION_PARAMS for k in params):
            return self.result(rule, False, "URL contains session parameters (can cause duplicate content)")
        limit = int(self.option(rule, "maxParams", 3))
        if len(params) > limit:
            return self.result(rule, False, f"URL has many parameters ({len(params)}). Consider cleaner URLs", count=len(params))
        if not params:
            return self.result(rule, True, "Clean URL with no parameters")
        return self.result(rule, True, f"URL has {len(params)} parameter(s)", count=len(params))

    def check_depth(self) -> CheckResult:
        rule = "url-depth"
        depth = len([seg for seg in self.parsed.path.split("/") if seg])
        limit = int(self.option(rule, "maxDepth", 3))
        if depth > limit:
            return self.result(rule, False, f"URL depth is too deep ({depth} levels). Recommended: {limit} or fewer", depth=depth)
        return self.result(rule, True, f"URL depth is acceptable ({depth} levels)", depth=depth)
