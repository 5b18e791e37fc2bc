from __future__ import annotations

from typing import Any, Dict

from ..models import CheckResult
from .base import BaseChecker

_A11Y_JS = """() => {
    const landmarks = document.querySelectorAll('main, nav, header, footer, [role="main"], [role="navigation"]').length;
    const skip = Array.from(document.querySelectorAll('a[href^="#"]'))
        .filter((a) => /skip|jump to/i.test(a.textContent || '')).length;
    const tab = Array.from(document.querySelectorAll('[tabindex]')).map((el) => parseInt(el.getAttribute('tabindex'), 10));
    return {
        landmarks,
        skipLinks: skip,
        positiveTabIndex: tab.filter((t) => t > 0).length,
        negativeTabIndex: tab.filter((t) => t < 0).length,
    };
}"""


class AccessibilityChecker(BaseChecker):
    category = "accessibility"
    RULES = {
        "aria-labels": "check_aria",
        "form-labels": "check_form_labels",
        "skip-links": "check_skip_links",
        "tab-index": "check_tab_index",
        "html-lang": "check_html_lang",
    }

    def __init__(self, context):
        super().__init__(context)
        self._dom = None

    async def dom(self) -> Dict[str, Any]:
        if self._dom is None:
            self._dom = await self.handler.execute_page_evaluation(lambda: self.page.evaluate(_A11Y_JS), "dom") or {}
        return self._dom

    async def check_aria(self) -> CheckResult:
        data = await self.dom()
        empty_buttons = int(self.body.get("empty_buttons") or 0)
        issues = []
        if empty_buttons:
            issues.append(f"{empty_buttons} buttons without accessible name")
        if not data.get("landmarks"):
            issues.append("no landmark regions")
        if issues:
            return self.result("aria-labels", False, f"Accessibility issues: {', '.join(issues)}", issues=issues)
        return self.result("aria-labels", True, "Interactive elements are labelled", landmarks=data.get("landmarks"))

    def check_form_labels(self) -> CheckResult:
        unlabeled = self.body.get("unlabeled_inputs") or []
        if unlabeled:
            return self.result("form-labels", False, f"{len(unlabeled)} form fields without labels", fields=unlabeled[:10])
        return self.result("form-labels", True, "All form fields have labels")

    async def check_skip_links(self) -> CheckResult:
        data = await self.dom()
        if data.get("skipLinks"):
            return self.result("skip-links", True, "Skip navigation link found")
        return self.result("skip-links", False, "No skip navigation link found")

    async def check_tab_index(self) -> CheckResult:
        data = await self.dom()
        issues = []
        if int(data.get("negativeTabIndex") or 0) > 5:
            issues.append(f"{data['negativeTabIndex']} elements removed from tab order")
        if int(data.get("positiveTabIndex") or 0) > 0:
            issues.append(f"{data['positiveTabIndex']} elements with positive tabindex")
        if issues:
            return self.result("tab-index", False, f"Tab order issues: {', '.join(issues)}", issues=issues)
        return self.result("tab-index", True, "Tab order is natural")

    def check_html_lang(self) -> CheckResult:
        lang = self.head.get("html_lang")
        if not lang:
            return self.result("html-lang", False, "Missing lang attribute on <html>")
        return self.result("html-lang", True, f"Page language declared ({lang})", lang=lang)
