from __future__ import annotations

from ..models import CheckResult
from .base import BaseChecker


class UIElementsChecker(BaseChecker):
    category = "uiElements"
    RULES = {
        "favicon-exists": "check_favicon",
        "breadcrumbs-present": "check_breadcrumbs",
        "language-tags": "check_language",
        "mobile-viewport-valid": "check_mobile_viewport",
    }

    def check_favicon(self) -> CheckResult:
        fav = self.head.get("favicon")
        if not fav:
            return self.result("favicon-exists", False, "No favicon declared")
        return self.result("favicon-exists", True, "Favicon found", favicon=fav)

    def check_breadcrumbs(self) -> CheckResult:
        jsonld = "BreadcrumbList" in (self.snapshot.jsonld.get("jsonld_types") or [])
        microdata = any("BreadcrumbList" in t for t in self.body.get("microdata_types") or [])
        html = bool(self.body.get("has_breadcrumbs"))
        found = jsonld or microdata or html
        return self.result(
            "breadcrumbs-present", found,
            "Breadcrumb navigation found" if found else "No breadcrumb navigation found",
            hasJsonLd=jsonld, hasMicrodata=microdata, hasHtmlBreadcrumbs=html,
        )

    def check_language(self) -> CheckResult:
        lang = self.head.get("html_lang") or ""
        hreflangs = self.head.get("hreflangs") or []
        issues = []
        if not lang:
            issues.append("missing lang attribute on <html>")
        if hreflangs and not any(h["hreflang"].lower() == "x-default" for h in hreflangs):
            issues.append("hreflang set without x-default")
        if issues:
            return self.result("language-tags", False, f"Language tag issues: {', '.join(issues)}", lang=lang, hreflang=len(hreflangs))
        return self.result("language-tags", True, f"Language declared ({lang})", lang=lang, hreflang=len(hreflangs))

    def check_mobile_viewport(self) -> CheckResult:
        vp = (self.head.get("viewport") or "").lower().replace(" ", "")
        if not vp:
            return self.result("mobile-viewport-valid", False, "No viewport meta tag")
        issues = []
        if "width=device-width" not in vp:
            issues.append("width=device-width missing")
        if "user-scalable=no" in vp or "user-scalable=0" in vp:
            issues.append("zoom disabled (user-scalable=no)")
        if "maximum-scale=1" in vp and "maximum-scale=1." not in vp:
            issues.append("maximum-scale=1 restricts zoom")
        if issues:
            return self.result("mobile-viewport-valid", False, f"Viewport issues: {', '.join(issues)}", viewport=vp)
        return self.result("mobile-viewport-valid", True, "Viewport is mobile friendly", viewport=vp)
