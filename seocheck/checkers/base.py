from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..checker_helpers import CheckerErrorHandler
from ..config_loader import RuleConfig, SEOConfig, get_rule_config
from ..models import CheckResult, NavigationCapture
from ..parser import PageSnapshot
from ..retry import RetryOptions


@dataclass(frozen=True)
class AuditContext:
    """
    Everything a checker may look at for one run.

    `navigation` and `snapshot` are captured once before any checker starts;
    checkers read them instead of navigating the shared page again.
    """
    page: Any
    navigation: NavigationCapture
    snapshot: PageSnapshot
    fetcher: Any = None
    config: SEOConfig = field(default_factory=SEOConfig)
    logger: Optional[logging.Logger] = None
    # retry policy for side-channel fetches (robots.txt, sitemaps); None uses the default
    fetch_retry: Optional[RetryOptions] = None


class BaseChecker:
    """
    One audit category. Subclasses set `category` and list their rules in
    `RULES` (rule id -> method name, in report order). Each rule method
    returns one CheckResult, sync or async.
    """

    category: str = ""
    RULES: Dict[str, str] = {}

    def __init__(self, context: AuditContext):
        self.context = context
        self.page = context.page
        self.navigation = context.navigation
        self.snapshot = context.snapshot
        self.logger = context.logger or logging.getLogger(f"seocheck.checkers.{self.category}")
        self.handler = CheckerErrorHandler(
            context.page,
            self.category,
            fetcher=context.fetcher,
            url=context.navigation.final_url,
            logger=self.logger,
            retry_options=context.fetch_retry,
        )

    @property
    def url(self) -> str:
        return self.navigation.final_url

    @property
    def head(self) -> Dict[str, Any]:
        return self.snapshot.head

    @property
    def body(self) -> Dict[str, Any]:
        return self.snapshot.body

    def rule_config(self, rule: str) -> RuleConfig:
        return get_rule_config(self.context.config, self.category, rule)

    def option(self, rule: str, key: str, default: Any) -> Any:
        return self.rule_config(rule).options.get(key, default)

    def result(self, rule: str, passed: bool, message: str, **details: Any) -> CheckResult:
        return CheckResult(
            passed=passed,
            message=message,
            category=self.category,
            details=details,
            rule=rule,
        )

    async def check_all(self) -> List[CheckResult]:
        results: List[CheckResult] = []
        for rule, method_name in self.RULES.items():
            if not self.rule_config(rule).enabled:
                continue
            results.append(await self.handler.execute_check(getattr(self, method_name), rule))
        return results
