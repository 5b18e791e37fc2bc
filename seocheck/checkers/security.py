from __future__ import annotations

from typing import List
from urllib.parse import urlparse

from ..models import CheckResult
from .base import BaseChecker

SECURITY_HEADERS = (
    "strict-transport-security",
    "x-content-type-options",
    "x-frame-options",
    "content-security-policy",
)


class SecurityChecker(BaseChecker):
    category = "security"
    RULES = {
        "https-enabled": "check_https",
        "mixed-content-check": "check_mixed_content",
        "security-headers": "check_security_headers",
    }

    def check_https(self) -> CheckResult:
        scheme = urlparse(self.url).scheme.lower()
        if scheme != "https":
            return self.result("https-enabled", False, "Page is not served over HTTPS", url=self.url, scheme=scheme)
        return self.result("https-enabled", True, "Page is served over HTTPS", url=self.url)

    def _insecure_resources(self) -> List[str]:
        body = self.body
        resources = (
            [img["src"] for img in body.get("images") or []]
            + list(body.get("scripts") or [])
            + list(body.get("stylesheets") or [])
            + list(body.get("iframes") or [])
        )
        return [r for r in resources if r.lower().startswith("http://")]

    def check_mixed_content(self) -> CheckResult:
        if urlparse(self.url).scheme.lower() != "https":
            return self.result("mixed-content-check", True, "Mixed content check skipped (page is not HTTPS)")
        insecure = self._insecure_resources()
        if insecure:
            return self.result(
                "mixed-content-check", False,
                f"Found {len(insecure)} insecure (HTTP) resources on HTTPS page",
                resources=insecure[:10],
            )
        return self.result("mixed-content-check", True, "No mixed content detected")

    def check_security_headers(self) -> CheckResult:
        rule = "security-headers"
        required = self.option(rule, "headers", list(SECURITY_HEADERS))
        headers = self.navigation.headers
        present = {h: h in headers for h in required}
        missing = [h for h, ok in present.items() if not ok]
        if missing:
            return self.result(rule, False, f"Missing security headers: {', '.join(missing)}", headers=present)
        return self.result(rule, True, "All recommended security headers are present", headers=present)
