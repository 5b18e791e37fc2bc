from __future__ import annotations

from typing import Any, Dict, List, Tuple
from urllib.parse import urljoin, urlparse

from ..models import CheckResult
from ..utils import is_http_url, same_host
from .base import BaseChecker

GENERIC_ANCHORS = {"click here", "here", "read more", "more", "link", "this", "learn more"}


class LinksChecker(BaseChecker):
    category = "links"
    RULES = {
        "link-structure": "check_structure",
        "internal-links": "check_internal",
        "external-links": "check_external",
        "anchor-text-descriptive": "check_anchor_text",
    }

    def _split(self) -> Tuple[List[Dict[str, Any]], List[Dict[str, Any]]]:
        internal, external = [], []
        for ln in self.body.get("links") or []:
            href = ln["href"]
            if not href or href.startswith(("#", "javascript:", "mailto:", "tel:")):
                continue
            absolute = urljoin(self.url, href)
            if not is_http_url(absolute):
                continue
            (internal if same_host(absolute, self.url) else external).append({**ln, "absolute": absolute})
        return internal, external

    def check_structure(self) -> CheckResult:
        internal, external = self._split()
        total = len(internal) + len(external)
        if total == 0:
            return self.result("link-structure", False, "No links found on page")
        return self.result(
            "link-structure", True,
            f"Good link structure ({total} links: {len(internal)} internal, {len(external)} external)",
            total=total, internal=len(internal), external=len(external),
        )

    def check_internal(self) -> CheckResult:
        internal, _ = self._split()
        if not internal:
            return self.result("internal-links", False, "No internal links found - important for SEO and site navigation")
        without_text = [ln["href"] for ln in internal if not ln["text"] and not ln["has_aria_label"]]
        if without_text:
            return self.result("internal-links", False, f"{len(without_text)} internal links missing descriptive text", links=without_text[:10])
        return self.result("internal-links", True, f"{len(internal)} internal links with descriptive text")

    def check_external(self) -> CheckResult:
        _, external = self._split()
        if not external:
            return self.result("external-links", True, "No external links found")
        hosts = sorted({urlparse(ln["absolute"]).netloc for ln in external})
        without_text = [ln["href"] for ln in external if not ln["text"] and not ln["has_aria_label"]]
        if without_text:
            return self.result("external-links", False, f"{len(without_text)} external links missing descriptive text", links=without_text[:10])
        return self.result("external-links", True, f"{len(external)} external links properly configured", hosts=hosts[:20])

    def check_anchor_text(self) -> CheckResult:
        generic = [ln["text"] for ln in self.body.get("links") or [] if ln["text"].strip().lower() in GENERIC_ANCHORS]
        if generic:
            return self.result("anchor-text-descriptive", False, f"{len(generic)} links use generic anchor text", examples=generic[:5])
        return self.result("anchor-text-descriptive", True, "Anchor text is descriptive")
