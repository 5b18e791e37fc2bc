from __future__ import annotations

import re
from typing import Any, Dict, List
from urllib.parse import urlparse

from ..models import CheckResult
from .base import BaseChecker

_GENERIC_ALT = {"image", "picture", "photo", "img", "graphic", "logo", "icon", "untitled", "placeholder"}
_FILENAME_RE = re.compile(r"\.(jpe?g|png|gif|webp|svg|avif)$|^(img|dsc|image)[_-]?\d+", re.IGNORECASE)


class ImagesChecker(BaseChecker):
    category = "images"
    RULES = {
        "images-have-alt": "check_alt_present",
        "alt-text-quality": "check_alt_quality",
        "alt-text-not-redundant": "check_alt_redundant",
        "image-dimensions-set": "check_dimensions",
        "lazy-loading-used": "check_lazy_loading",
    }

    @property
    def images(self) -> List[Dict[str, Any]]:
        return self.body.get("images") or []

    def check_alt_present(self) -> CheckResult:
        if not self.images:
            return self.result("images-have-alt", True, "No images found on page")
        missing = [img["src"] for img in self.images if not img["has_alt"]]
        if missing:
            return self.result(
                "images-have-alt", False,
                f"{len(missing)} of {len(self.images)} images missing alt text",
                missing=missing[:10],
            )
        return self.result("images-have-alt", True, f"All {len(self.images)} images have alt text")

    def check_alt_quality(self) -> CheckResult:
        rule = "alt-text-quality"
        max_len = int(self.option(rule, "maxLength", 125))
        poor = []
        for img in self.images:
            alt = (img["alt"] or "").strip()
            if not alt:
                continue
            if alt.lower() in _GENERIC_ALT or _FILENAME_RE.search(alt) or len(alt) > max_len:
                poor.append(alt)
        if poor:
            return self.result(rule, False, f"{len(poor)} images have generic or overly long alt text", examples=poor[:5])
        return self.result(rule, True, "Alt text looks descriptive")

    def check_alt_redundant(self) -> CheckResult:
        redundant = []
        for img in self.images:
            alt = (img["alt"] or "").strip().lower()
            if not alt:
                continue
            if alt.startswith(("image of", "picture of", "photo of")):
                redundant.append(alt)
                continue
            name = urlparse(img["src"]).path.rsplit("/", 1)[-1].lower()
            if name and alt == name:
                redundant.append(alt)
        if redundant:
            return self.result("alt-text-not-redundant", False, f"{len(redundant)} images have redundant alt text", examples=redundant[:5])
        return self.result("alt-text-not-redundant", True, "No redundant alt text found")

    def check_dimensions(self) -> CheckResult:
        missing = [img["src"] for img in self.images if not (img["width"] and img["height"])]
        if missing:
            return self.result(
                "image-dimensions-set", False,
                f"{len(missing)} images have no explicit width/height (layout shift risk)",
                missing=missing[:10],
            )
        return self.result("image-dimensions-set", True, "All images declare width and height")

    def check_lazy_loading(self) -> CheckResult:
        rule = "lazy-loading-used"
        threshold = int(self.option(rule, "minImages", 5))
        if len(self.images) < threshold:
            return self.result(rule, True, f"Only {len(self.images)} images; lazy loading not required")
        lazy = sum(1 for img in self.images if img["loading"] == "lazy")
        if lazy == 0:
            return self.result(rule, False, f"None of {len(self.images)} images use loading=\"lazy\"")
        return self.result(rule, True, f"{lazy} of {len(self.images)} images use lazy loading", lazy=lazy)
