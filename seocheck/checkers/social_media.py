from __future__ import annotations

from ..models import CheckResult
from .base import BaseChecker

OG_REQUIRED = ("og:title", "og:description", "og:image", "og:url", "og:type")
TWITTER_REQUIRED = ("twitter:card", "twitter:title", "twitter:description", "twitter:image")


class SocialMediaChecker(BaseChecker):
    category = "socialMedia"
    RULES = {
        "open-graph-complete": "check_open_graph",
        "twitter-cards-complete": "check_twitter_cards",
        "facebook-tags": "check_facebook",
    }

    def check_open_graph(self) -> CheckResult:
        og = self.head.get("og") or {}
        missing = [p for p in OG_REQUIRED if not og.get(p)]
        if len(missing) == len(OG_REQUIRED):
            return self.result("open-graph-complete", False, "No Open Graph tags found")
        if missing:
            return self.result("open-graph-complete", False, f"Missing Open Graph tags: {', '.join(missing)}", missing=missing)
        return self.result("open-graph-complete", True, "All essential Open Graph tags present")

    def check_twitter_cards(self) -> CheckResult:
        tw = self.head.get("twitter") or {}
        og = self.head.get("og") or {}
        # Twitter falls back to og:* for title, description and image
        missing = [
            t for t in TWITTER_REQUIRED
            if not tw.get(t) and not (t != "twitter:card" and og.get("og:" + t.split(":", 1)[1]))
        ]
        if "twitter:card" in missing:
            return self.result("twitter-cards-complete", False, "twitter:card is missing", missing=missing)
        if missing:
            return self.result("twitter-cards-complete", False, f"Missing Twitter Card tags: {', '.join(missing)}", missing=missing)
        return self.result("twitter-cards-complete", True, f"Twitter Card configured ({tw.get('twitter:card')})")

    def check_facebook(self) -> CheckResult:
        og = self.head.get("og") or {}
        if not og:
            return self.result("facebook-tags", False, "No Facebook sharing tags found")
        return self.result("facebook-tags", True, "Facebook sharing tags present", tags=sorted(og))
