from __future__ import annotations

from ..models import CheckResult
from .base import BaseChecker


class MetaTagsChecker(BaseChecker):
    category = "metaTags"
    RULES = {
        "title-exists": "check_title_exists",
        "title-length-valid": "check_title_length",
        "meta-description-exists": "check_description_exists",
        "meta-description-length-valid": "check_description_length",
        "viewport-meta-exists": "check_viewport",
        "canonical-url-exists": "check_canonical",
        "robots-meta-appropriate": "check_robots_meta",
        "og-title-exists": "check_og_title",
        "og-description-exists": "check_og_description",
        "og-image-exists": "check_og_image",
        "twitter-card-exists": "check_twitter_card",
        "charset-declared": "check_charset",
    }

    def check_title_exists(self) -> CheckResult:
        title = self.head.get("title") or ""
        if not title:
            return self.result("title-exists", False, "Page title is missing")
        return self.result("title-exists", True, f"Page title found: {title}", title=title)

    def check_title_length(self) -> CheckResult:
        rule = "title-length-valid"
        title = self.head.get("title") or ""
        lo = int(self.option(rule, "minLength", 30))
        hi = int(self.option(rule, "maxLength", 60))
        n = len(title)
        if n < lo:
            return self.result(rule, False, f"Title is too short ({n} characters). Recommended: {lo}-{hi} characters", length=n)
        if n > hi:
            return self.result(rule, False, f"Title is too long ({n} characters). Recommended: {lo}-{hi} characters", length=n)
        return self.result(rule, True, f"Title length is optimal ({n} characters)", length=n)

    def check_description_exists(self) -> CheckResult:
        desc = self.head.get("meta_description") or ""
        if not desc:
            return self.result("meta-description-exists", False, "Meta description is missing")
        return self.result("meta-description-exists", True, "Meta description found", description=desc)

    def check_description_length(self) -> CheckResult:
        rule = "meta-description-length-valid"
        desc = self.head.get("meta_description") or ""
        lo = int(self.option(rule, "minLength", 120))
        hi = int(self.option(rule, "maxLength", 160))
        n = len(desc)
        if n < lo:
            return self.result(rule, False, f"Meta description is too short ({n} characters). Recommended: {lo}-{hi} characters", length=n)
        if n > hi:
            return self.result(rule, False, f"Meta description is too long ({n} characters). Recommended: {lo}-{hi} characters", length=n)
        return self.result(rule, True, f"Meta description length is optimal ({n} characters)", length=n)

    def check_viewport(self) -> CheckResult:
        vp = self.head.get("viewport") or ""
        if not vp:
            return self.result("viewport-meta-exists", False, "Viewport meta tag is missing (important for mobile)")
        return self.result("viewport-meta-exists", True, "Viewport meta tag found", viewport=vp)

    def check_canonical(self) -> CheckResult:
        canonicals = self.head.get("canonicals") or []
        if not canonicals:
            return self.result("canonical-url-exists", False, "Canonical URL is missing")
        if len(canonicals) > 1:
            return self.result("canonical-url-exists", False, f"Multiple canonical URLs found ({len(canonicals)})", canonicals=canonicals)
        return self.result("canonical-url-exists", True, f"Canonical URL found: {canonicals[0]}", canonical=canonicals[0])

    def check_robots_meta(self) -> CheckResult:
        robots = self.head.get("meta_robots") or ""
        if "noindex" in robots:
            return self.result("robots-meta-appropriate", False, "Page is set to noindex", robots=robots)
        if "nofollow" in robots:
            return self.result("robots-meta-appropriate", False, "Page is set to nofollow", robots=robots)
        return self.result("robots-meta-appropriate", True, "Robots meta allows indexing", robots=robots)

    def _og(self, rule: str, prop: str, label: str) -> CheckResult:
        value = (self.head.get("og") or {}).get(prop)
        if not value:
            return self.result(rule, False, f"{label} is missing")
        return self.result(rule, True, f"{label} found", value=value)

    def check_og_title(self) -> CheckResult:
        return self._og("og-title-exists", "og:title", "og:title")

    def check_og_description(self) -> CheckResult:
        return self._og("og-description-exists", "og:description", "og:description")

    def check_og_image(self) -> CheckResult:
        return self._og("og-image-exists", "og:image", "og:image")

    def check_twitter_card(self) -> CheckResult:
        card = (self.head.get("twitter") or {}).get("twitter:card")
        if not card:
            return self.result("twitter-card-exists", False, "twitter:card is missing")
        return self.result("twitter-card-exists", True, f"Twitter card found: {card}", card=card)

    def check_charset(self) -> CheckResult:
        charset = self.head.get("charset") or ""
        if not charset:
            return self.result("charset-declared", False, "Character encoding is not declared")
        return self.result("charset-declared", charset.lower() in ("utf-8", "utf8"), f"Character encoding: {charset}", charset=charset)
