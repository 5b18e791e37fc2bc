from __future__ import annotations

from typing import Any, Dict, List

from ..models import CheckResult
from .base import BaseChecker


class HeadingsChecker(BaseChecker):
    category = "headings"
    RULES = {
        "h1-exists": "check_h1_exists",
        "h1-count-valid": "check_h1_count",
        "heading-hierarchy-valid": "check_hierarchy",
        "heading-text-quality": "check_text_quality",
    }

    @property
    def headings(self) -> List[Dict[str, Any]]:
        return self.body.get("headings") or []

    def check_h1_exists(self) -> CheckResult:
        if int(self.body.get("h1_count") or 0) == 0:
            return self.result("h1-exists", False, "No H1 heading found")
        return self.result("h1-exists", True, "H1 heading found")

    def check_h1_count(self) -> CheckResult:
        n = int(self.body.get("h1_count") or 0)
        if n > 1:
            return self.result("h1-count-valid", False, f"Multiple H1 headings found ({n}). Recommended: exactly one", count=n)
        return self.result("h1-count-valid", True, f"H1 count is valid ({n})", count=n)

    def check_hierarchy(self) -> CheckResult:
        issues = []
        prev = 0
        for h in self.headings:
            level = h["level"]
            if prev and level > prev + 1:
                issues.append(f"H{prev} followed by H{level}")
            prev = level
        if self.headings and self.headings[0]["level"] != 1:
            issues.insert(0, f"first heading is H{self.headings[0]['level']}")
        if issues:
            return self.result("heading-hierarchy-valid", False, f"Heading hierarchy issues: {', '.join(issues)}", issues=issues)
        return self.result("heading-hierarchy-valid", True, "Heading hierarchy is valid")

    def check_text_quality(self) -> CheckResult:
        rule = "heading-text-quality"
        max_len = int(self.option(rule, "maxLength", 70))
        empty = [h["tag"] for h in self.headings if not h["text"]]
        too_long = [h["text"] for h in self.headings if len(h["text"]) > max_len]
        if empty or too_long:
            parts = []
            if empty:
                parts.append(f"{len(empty)} empty heading(s)")
            if too_long:
                parts.append(f"{len(too_long)} heading(s) are too long (>{max_len} characters)")
            return self.result(rule, False, ", ".join(parts), empty=len(empty), tooLong=len(too_long))
        return self.result(rule, True, "Heading text is descriptive and concise")
