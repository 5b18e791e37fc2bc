"""
Helpers checkers use so their failures are handled the same way everywhere.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import replace
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence

from .errors import BrowserError, ErrorKind, NetworkError, as_kind, classify
from .fetcher import FetchResult
from .graceful import GracefulOptions, NamedCheck, with_graceful_degradation, with_graceful_degradation_parallel
from .models import CheckResult
from .retry import RetryOptions, retry

log = logging.getLogger(__name__)


class CheckerErrorHandler:
    def __init__(self, page: Any, checker_name: str, fetcher: Any = None, url: Optional[str] = None,
                 logger: Optional[logging.Logger] = None, retry_options: Optional[RetryOptions] = None):
        self.page = page
        self.checker_name = checker_name
        self.fetcher = fetcher
        self._url = url
        self.logger = logger or log
        self.retry_options = retry_options
        self._fetches: Dict[str, "asyncio.Future[FetchResult]"] = {}

    @property
    def url(self) -> str:
        if self._url:
            return self._url
        return getattr(self.page, "url", "") or ""

    def _full_name(self, check_name: str) -> str:
        return f"{self.checker_name}.{check_name}"

    async def execute_network_request(
        self,
        request_fn: Callable[[], Awaitable[Any]],
        check_name: str,
        options: Optional[RetryOptions] = None,
    ) -> Any:
        """Every failure inside a network request counts as Network, so it is retried."""
        full_name = self._full_name(check_name)
        attempt = {"n": 0}

        async def _attempt() -> Any:
            attempt["n"] += 1
            try:
                return await request_fn()
            except Exception as exc:
                raise as_kind(exc, ErrorKind.NETWORK, {
                    "checkName": full_name,
                    "url": self.url,
                    "retryCount": attempt["n"] - 1,
                }) from exc

        def _on_retry(error: Any, n: int, delay: int) -> None:
            self.logger.info(f"Retrying {full_name} (attempt {n}) after {delay}ms: {error}")

        opts = options or self.retry_options or RetryOptions(logger=self.logger)
        if opts.on_retry is None:
            opts = replace(opts, on_retry=_on_retry)
        return await retry(_attempt, opts)

    async def execute_page_evaluation(
        self,
        evaluation_fn: Callable[[], Awaitable[Any]],
        check_name: str,
        log_error: bool = True,
    ) -> Any:
        try:
            return await evaluation_fn()
        except Exception as exc:
            base = classify(exc)
            err = BrowserError(base.message, {
                **base.context,
                "checkName": self._full_name(check_name),
                "url": self.url,
            })
            if log_error:
                self.logger.warning(f"[Browser] {err.context['checkName']}: {err.message}")
            raise err from exc

    async def execute_check(
        self,
        check_fn: Callable[[], Any],
        check_name: str,
        options: Optional[GracefulOptions] = None,
    ) -> CheckResult:
        opts = options or GracefulOptions(category=self.checker_name, logger=self.logger)
        result = await with_graceful_degradation(check_fn, self._full_name(check_name), opts)
        if result.degraded and result.rule is None:
            # the rule id is the check name for per-rule wrappers
            result = CheckResult(
                passed=result.passed, message=result.message, category=result.category,
                severity=result.severity, details=result.details, rule=check_name, degraded=True,
            )
        return result

    async def execute_checks_parallel(self, checks: Sequence[NamedCheck]) -> List[CheckResult]:
        named = [
            NamedCheck(
                name=self._full_name(c.name),
                fn=c.fn,
                options=c.options or GracefulOptions(category=self.checker_name, logger=self.logger),
            )
            for c in checks
        ]
        return await with_graceful_degradation_parallel(named)

    async def fetch_with_retry(self, url: str, check_name: str, options: Optional[RetryOptions] = None) -> FetchResult:
        if self.fetcher is None:
            raise NetworkError(f"No fetcher available for {url}", {"url": url})
        return await self.execute_network_request(lambda: self.fetcher.fetch(url), check_name, options)

    async def fetch_once(self, url: str, check_name: str) -> FetchResult:
        """
        fetch_with_retry shared by every rule of this checker: one retry
        sequence per URL. A failed fetch is re-raised to later callers, not retried again.
        """
        task = self._fetches.get(url)
        if task is None:
            task = asyncio.ensure_future(self.fetch_with_retry(url, check_name))
            self._fetches[url] = task
        return await task

    def create_skipped_result(self, message: str, check_name: Optional[str] = None, error: Any = None) -> CheckResult:
        full_message = f"{message}: {classify(error).message}" if error is not None else message
        if error is not None and check_name:
            err = classify(error)
            err.context["checkName"] = self._full_name(check_name)
            self.logger.warning(full_message, extra={"seocheck_error": err.to_dict()})
        return CheckResult(passed=True, message=full_message, category=self.checker_name, rule=check_name)

    def create_failed_result(self, message: str, check_name: Optional[str] = None, error: Any = None) -> CheckResult:
        full_message = f"{message}: {classify(error).message}" if error is not None else message
        if error is not None and check_name:
            err = classify(error)
            err.context["checkName"] = self._full_name(check_name)
            self.logger.error(f"[{err.kind.value}] {err.context['checkName']}: {err.message}")
        return CheckResult(passed=False, message=full_message, category=self.checker_name, rule=check_name)
