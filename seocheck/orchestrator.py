"""
Fan-out / fan-in over the registered checker categories.

Every enabled checker runs concurrently against the same AuditContext. The
page is only read: navigation data was captured before the fan-out, so no
checker navigates while others read the DOM. Each checker is bounded by a
timeout and wrapped in graceful degradation, so one crash never loses
another category's results.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import replace
from typing import Any, Dict, List, Optional, Type

from .checkers.accessibility import AccessibilityChecker
from .checkers.base import AuditContext
from .checkers.content import ContentChecker
from .checkers.headings import HeadingsChecker
from .checkers.images import ImagesChecker
from .checkers.links import LinksChecker
from .checkers.meta_tags import MetaTagsChecker
from .checkers.performance import PerformanceChecker
from .checkers.robots_txt import RobotsTxtChecker
from .checkers.security import SecurityChecker
from .checkers.sitemap import SitemapChecker
from .checkers.social_media import SocialMediaChecker
from .checkers.structured_data import StructuredDataChecker
from .checkers.technical import TechnicalChecker
from .checkers.ui_elements import UIElementsChecker
from .checkers.url_factors import URLFactorsChecker
from .config_loader import SEOConfig, checker_severity, get_rule_config, is_checker_enabled
from .graceful import GracefulOptions, with_timeout
from .models import CheckResult

log = logging.getLogger(__name__)

DEFAULT_CHECK_TIMEOUT_MS = 30_000

# report order
CHECKER_REGISTRY: Dict[str, Type[Any]] = {
    "metaTags": MetaTagsChecker,
    "headings": HeadingsChecker,
    "images": ImagesChecker,
    "performance": PerformanceChecker,
    "robotsTxt": RobotsTxtChecker,
    "sitemap": SitemapChecker,
    "security": SecurityChecker,
    "structuredData": StructuredDataChecker,
    "socialMedia": SocialMediaChecker,
    "content": ContentChecker,
    "links": LinksChecker,
    "uiElements": UIElementsChecker,
    "technical": TechnicalChecker,
    "accessibility": AccessibilityChecker,
    "urlFactors": URLFactorsChecker,
}


class Orchestrator:
    def __init__(
        self,
        config: SEOConfig,
        registry: Optional[Dict[str, Type[Any]]] = None,
        check_timeout_ms: int = DEFAULT_CHECK_TIMEOUT_MS,
        logger: Optional[logging.Logger] = None,
    ):
        self.config = config
        self.registry = dict(CHECKER_REGISTRY if registry is None else registry)
        self.check_timeout_ms = check_timeout_ms
        self.logger = logger or log

    async def _run_category(self, category: str, checker_cls: Type[Any], context: AuditContext) -> List[CheckResult]:
        async def _check_all() -> List[CheckResult]:
            checker = checker_cls(context)
            return list(await checker.check_all())

        out = await with_timeout(
            _check_all,
            self.check_timeout_ms,
            category,
            GracefulOptions(category=category, logger=self.logger),
        )
        # a degraded checker comes back as a single result
        if isinstance(out, CheckResult):
            return [out]
        return out

    async def run_all(self, context: AuditContext) -> Dict[str, List[CheckResult]]:
        enabled = [c for c in self.registry if is_checker_enabled(self.config, c)]
        self.logger.info(f"Running {len(enabled)} of {len(self.registry)} checkers")

        gathered = await asyncio.gather(
            *(self._run_category(c, self.registry[c], context) for c in enabled)
        )
        by_category = dict(zip(enabled, gathered))

        results: Dict[str, List[CheckResult]] = {}
        for category in self.registry:
            results[category] = self.finalize(category, by_category.get(category, []))
        return results

    def finalize(self, category: str, results: List[CheckResult]) -> List[CheckResult]:
        """
        Post-processing after the join: drops results of disabled rules and
        stamps category and severity on results that carry none. Degraded
        results whose severity is listed in `failOnError` are turned into
        failures.
        """
        out: List[CheckResult] = []
        for r in results:
            if r.rule:
                rule_cfg = get_rule_config(self.config, category, r.rule)
                if not rule_cfg.enabled:
                    continue
                severity = r.severity or rule_cfg.severity
            else:
                severity = r.severity or checker_severity(self.config, category)

            passed = r.passed
            if r.degraded and severity in self.config.fail_on_error:
                passed = False
            out.append(replace(r, category=r.category or category, severity=severity, passed=passed))
        return out
