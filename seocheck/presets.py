"""
Built-in rule presets.

Pure data in the raw config shape (camelCase keys, bool-or-mapping checker
entries). `get_preset` hands out deep copies so the module-level dicts are
never mutated by a resolve.
"""
from __future__ import annotations

import copy
from typing import Any, Dict, List

BASIC: Dict[str, Any] = {
    "severity": "warning",
    "rules": {
        "metaTags": {
            "title-exists": True,
            "meta-description-exists": True,
            "viewport-meta-exists": True,
            "canonical-url-exists": False,
            "og-title-exists": False,
            "og-description-exists": False,
            "og-image-exists": False,
            "twitter-card-exists": False,
        },
        "headings": {
            "h1-exists": True,
            "h1-count-valid": True,
            "heading-hierarchy-valid": {"enabled": True, "severity": "info"},
        },
        "images": {
            "images-have-alt": True,
            "alt-text-quality": {"enabled": True, "severity": "info"},
        },
        "performance": {
            "load-time-acceptable": True,
        },
        "security": {
            "https-enabled": {"enabled": True, "severity": "error"},
        },
        # advanced checkers stay off in basic
        "structuredData": False,
        "socialMedia": False,
        # no registered checker for the categories below: resolved as config, never run
        "spamDetection": False,
        "pageQuality": False,
        "advancedImages": False,
        "multimedia": False,
        "coreWebVitals": False,
        "analytics": False,
        "mobileUX": False,
        "schemaValidation": False,
        "resourceOptimization": False,
        "legalCompliance": False,
        "ecommerce": False,
        "internationalization": False,
    },
}

ADVANCED: Dict[str, Any] = {
    "severity": "warning",
    "rules": {
        "metaTags": {
            "title-exists": {"enabled": True, "severity": "error"},
            "title-length-valid": {"enabled": True, "severity": "warning"},
            "meta-description-exists": {"enabled": True, "severity": "error"},
            "meta-description-length-valid": {"enabled": True, "severity": "warning"},
            "viewport-meta-exists": {"enabled": True, "severity": "warning"},
            "canonical-url-exists": {"enabled": True, "severity": "warning"},
            "robots-meta-appropriate": {"enabled": True, "severity": "info"},
        },
        "headings": {
            "h1-exists": {"enabled": True, "severity": "error"},
            "h1-count-valid": {"enabled": True, "severity": "warning"},
            "heading-hierarchy-valid": {"enabled": True, "severity": "warning"},
        },
        "images": {
            "images-have-alt": {"enabled": True, "severity": "warning"},
            "alt-text-quality": {"enabled": True, "severity": "info"},
        },
        "performance": {
            "load-time-acceptable": {"enabled": True, "severity": "warning"},
        },
        "robotsTxt": True,
        "sitemap": True,
        "security": {
            "https-enabled": {"enabled": True, "severity": "error"},
            "mixed-content-check": {"enabled": True, "severity": "warning"},
        },
        "structuredData": True,
        "socialMedia": True,
        "content": True,
        "links": True,
        "uiElements": True,
        "technical": True,
        "accessibility": True,
        "urlFactors": True,
        # pass-through only, as in BASIC
        "spamDetection": True,
        "pageQuality": True,
        "advancedImages": True,
        "multimedia": True,
        "coreWebVitals": {"enabled": True, "severity": "warning"},
        "analytics": {"enabled": True, "severity": "info"},
        "mobileUX": True,
        "schemaValidation": True,
        "resourceOptimization": True,
        "legalCompliance": {"enabled": True, "severity": "info"},
        "ecommerce": {"enabled": True, "severity": "info"},
        "internationalization": {"enabled": True, "severity": "info"},
    },
}

STRICT: Dict[str, Any] = {
    "severity": "error",
    "rules": {
        "metaTags": {
            "title-exists": {"enabled": True, "severity": "error"},
            "title-length-valid": {"enabled": True, "severity": "error"},
            "title-unique": {"enabled": True, "severity": "error"},
            "meta-description-exists": {"enabled": True, "severity": "error"},
            "meta-description-length-valid": {"enabled": True, "severity": "error"},
            "meta-description-unique": {"enabled": True, "severity": "error"},
            "viewport-meta-exists": {"enabled": True, "severity": "error"},
            "canonical-url-exists": {"enabled": True, "severity": "error"},
            "robots-meta-appropriate": {"enabled": True, "severity": "warning"},
            "og-title-exists": {"enabled": True, "severity": "error"},
            "og-description-exists": {"enabled": True, "severity": "error"},
            "og-image-exists": {"enabled": True, "severity": "error"},
            "twitter-card-exists": {"enabled": True, "severity": "error"},
        },
        "headings": {
            "h1-exists": {"enabled": True, "severity": "error"},
            "h1-count-valid": {"enabled": True, "severity": "error"},
            "heading-hierarchy-valid": {"enabled": True, "severity": "error"},
            "heading-text-quality": {"enabled": True, "severity": "warning"},
        },
        "images": {
            "images-have-alt": {"enabled": True, "severity": "error"},
            "alt-text-quality": {"enabled": True, "severity": "warning"},
            "alt-text-not-redundant": {"enabled": True, "severity": "warning"},
        },
        "performance": {
            "load-time-acceptable": {"enabled": True, "severity": "error"},
            "dom-size-acceptable": {"enabled": True, "severity": "warning"},
        },
        "robotsTxt": {"enabled": True, "severity": "error"},
        "sitemap": {"enabled": True, "severity": "error"},
        "security": {
            "https-enabled": {"enabled": True, "severity": "error"},
            "mixed-content-check": {"enabled": True, "severity": "error"},
            "security-headers": {"enabled": True, "severity": "error"},
        },
        "structuredData": {"enabled": True, "severity": "error"},
        "socialMedia": {"enabled": True, "severity": "error"},
        "content": {"enabled": True, "severity": "warning"},
        "links": {"enabled": True, "severity": "error"},
        "uiElements": {"enabled": True, "severity": "warning"},
        "technical": {"enabled": True, "severity": "error"},
        "accessibility": {"enabled": True, "severity": "error"},
        "urlFactors": {"enabled": True, "severity": "warning"},
        # pass-through only, as in BASIC
        "spamDetection": {"enabled": True, "severity": "error"},
        "pageQuality": {"enabled": True, "severity": "warning"},
        "advancedImages": {"enabled": True, "severity": "warning"},
        "multimedia": {"enabled": True, "severity": "warning"},
        "coreWebVitals": {"enabled": True, "severity": "error"},
        "analytics": {"enabled": True, "severity": "warning"},
        "mobileUX": {"enabled": True, "severity": "error"},
        "schemaValidation": {"enabled": True, "severity": "error"},
        "resourceOptimization": {"enabled": True, "severity": "warning"},
        "legalCompliance": {"enabled": True, "severity": "error"},
        "ecommerce": {"enabled": True, "severity": "warning"},
        "internationalization": {"enabled": True, "severity": "warning"},
    },
}

_PRESETS: Dict[str, Dict[str, Any]] = {
    "basic": BASIC,
    "advanced": ADVANCED,
    "strict": STRICT,
}


def preset_names() -> List[str]:
    return list(_PRESETS.keys())


def has_preset(name: str) -> bool:
    return name in _PRESETS


def get_preset(name: str) -> Dict[str, Any]:
    # KeyError on unknown names; config_loader turns that into a ConfigError
    return copy.deepcopy(_PRESETS[name])
