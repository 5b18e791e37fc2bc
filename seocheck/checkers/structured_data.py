from __future__ import annotations

from ..models import CheckResult
from .base import BaseChecker

BENEFICIAL_TYPES = {
    "Organization", "WebSite", "WebPage", "Article", "NewsArticle", "BlogPosting",
    "Product", "BreadcrumbList", "FAQPage", "LocalBusiness", "Person", "Event",
    "Recipe", "Review", "HowTo", "VideoObject",
}


class StructuredDataChecker(BaseChecker):
    category = "structuredData"
    RULES = {
        "json-ld-valid": "check_jsonld",
        "microdata-present": "check_microdata",
        "schema-types-beneficial": "check_schema_types",
    }

    def check_jsonld(self) -> CheckResult:
        count = int(self.snapshot.jsonld.get("jsonld_count") or 0)
        errors = int(self.snapshot.jsonld.get("jsonld_parse_errors") or 0)
        if count == 0:
            return self.result("json-ld-valid", False, "No JSON-LD structured data found")
        if errors:
            return self.result("json-ld-valid", False, f"{errors} of {count} JSON-LD blocks failed to parse", count=count, errors=errors)
        return self.result("json-ld-valid", True, f"Found {count} valid JSON-LD block(s)", count=count)

    def check_microdata(self) -> CheckResult:
        types = self.body.get("microdata_types") or []
        if not types:
            # JSON-LD covers the same need
            has_jsonld = bool(self.snapshot.jsonld.get("jsonld_types"))
            return self.result("microdata-present", has_jsonld, "No microdata found" + (" (JSON-LD present)" if has_jsonld else ""))
        return self.result("microdata-present", True, f"Found {len(types)} microdata item(s)", types=types[:10])

    def check_schema_types(self) -> CheckResult:
        found = set(self.snapshot.jsonld.get("jsonld_types") or [])
        for t in self.body.get("microdata_types") or []:
            found.add(t.rstrip("/").rsplit("/", 1)[-1])
        beneficial = sorted(found & BENEFICIAL_TYPES)
        if not beneficial:
            return self.result("schema-types-beneficial", False, "No recognised schema.org types found", types=sorted(found))
        return self.result("schema-types-beneficial", True, f"Schema types found: {', '.join(beneficial)}", types=beneficial)
