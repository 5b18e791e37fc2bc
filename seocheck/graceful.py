"""
Graceful degradation: a failing check must never abort the run.

`with_graceful_degradation` is the per-check boundary. Whatever the wrapped
function raises (synchronously or from an awaitable) is classified, logged
and turned into a synthesized CheckResult. Cancellation (BaseException) is
not caught, so a caller-level abort still propagates.
"""
from __future__ import annotations

import asyncio
import inspect
import logging
from dataclasses import dataclass, field, replace
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence, TypeVar, Union

from .errors import CategorizedError, NetworkError, classify
from .models import CheckResult

log = logging.getLogger(__name__)

T = TypeVar("T")

CheckFn = Callable[[], Union[T, Awaitable[T]]]

DEFAULT_MESSAGE_PREFIX = "Check skipped due to error"


@dataclass(frozen=True)
class GracefulOptions:
    pass_on_error: bool = True
    include_error_details: bool = True
    message_prefix: str = DEFAULT_MESSAGE_PREFIX
    log_error: bool = True
    log_level: int = logging.WARNING
    category: Optional[str] = None
    logger: Optional[logging.Logger] = None


@dataclass
class PartialSuccess:
    results: List[Any] = field(default_factory=list)
    failures: List[Dict[str, Any]] = field(default_factory=list)  # {"index": int, "error": CategorizedError}
    success_rate: float = 0.0


@dataclass(frozen=True)
class NamedCheck:
    name: str
    fn: CheckFn
    options: Optional[GracefulOptions] = None


async def _call(fn: CheckFn) -> Any:
    result = fn()
    if inspect.isawaitable(result):
        result = await result
    return result


def _log_error(err: CategorizedError, options: GracefulOptions, level: Optional[int] = None) -> None:
    logger = options.logger or log
    logger.log(
        level if level is not None else options.log_level,
        f"[{err.kind.value}] {err.context.get('checkName', '?')}: {err.message}",
        extra={"seocheck_error": err.to_dict()},
    )


def degraded_result(err: CategorizedError, options: GracefulOptions) -> CheckResult:
    detail = f": {err.message}" if options.include_error_details else ""
    return CheckResult(
        passed=options.pass_on_error,
        message=f"{options.message_prefix}{detail}",
        category=options.category,
        details={"error": err.to_dict()},
        rule=err.context.get("rule"),
        degraded=True,
    )


async def with_graceful_degradation(
    check_fn: CheckFn,
    check_name: str,
    options: Optional[GracefulOptions] = None,
    **overrides: Any,
) -> Any:
    """
    Runs `check_fn`; on any Exception returns a degraded CheckResult
    (passed = options.pass_on_error) instead of raising.
    """
    opts = replace(options or GracefulOptions(), **overrides) if overrides else (options or GracefulOptions())
    try:
        return await _call(check_fn)
    except Exception as exc:
        err = classify(exc)
        err.context["checkName"] = check_name
        if opts.log_error:
            _log_error(err, opts)
        return degraded_result(err, opts)


async def with_graceful_degradation_batch(checks: Sequence[NamedCheck]) -> List[Any]:
    """Sequential; one failure does not stop the rest."""
    results = []
    for check in checks:
        results.append(await with_graceful_degradation(check.fn, check.name, check.options))
    return results


async def with_graceful_degradation_parallel(checks: Sequence[NamedCheck]) -> List[Any]:
    return list(await asyncio.gather(
        *(with_graceful_degradation(c.fn, c.name, c.options) for c in checks)
    ))


async def with_fallback(primary: CheckFn, fallback: CheckFn, check_name: str, logger: Optional[logging.Logger] = None) -> Any:
    logger = logger or log
    try:
        return await _call(primary)
    except Exception as primary_exc:
        primary_err = classify(primary_exc)
        primary_err.context["checkName"] = check_name
        logger.warning(f"Primary check failed for {check_name}, attempting fallback: {primary_err.message}")
        try:
            return await _call(fallback)
        except Exception as fallback_exc:
            fallback_err = classify(fallback_exc)
            fallback_err.context["checkName"] = check_name
            fallback_err.context["primaryError"] = primary_err.message
            logger.error(f"Fallback also failed for {check_name}: {fallback_err.message}")
            if fallback_err is fallback_exc:
                raise
            raise fallback_err from fallback_exc


async def with_partial_success(
    checks: Sequence[CheckFn],
    check_name: str,
    min_success_rate: float = 0.0,
    logger: Optional[logging.Logger] = None,
) -> PartialSuccess:
    """
    Runs `checks` in order, collecting results and per-index failures.
    Logs an error when the success rate ends up below `min_success_rate`.
    """
    logger = logger or log
    out = PartialSuccess()
    for i, fn in enumerate(checks):
        try:
            out.results.append(await _call(fn))
        except Exception as exc:
            err = classify(exc)
            err.context["checkName"] = check_name
            out.failures.append({"index": i, "error": err})

    out.success_rate = (len(out.results) / len(checks)) if checks else 0.0
    if out.success_rate < min_success_rate:
        logger.error(
            f"{check_name}: success rate {out.success_rate * 100:.1f}% below minimum "
            f"{min_success_rate * 100:.1f}% ({len(out.failures)} failures)"
        )
    return out


async def with_timeout(
    fn: CheckFn,
    timeout_ms: int,
    check_name: str,
    options: Optional[GracefulOptions] = None,
    **overrides: Any,
) -> Any:
    """Bounds `fn` to `timeout_ms`; a timeout degrades like any other failure."""

    async def _bounded() -> Any:
        try:
            return await asyncio.wait_for(_call(fn), timeout=timeout_ms / 1000.0)
        except asyncio.TimeoutError as e:
            raise NetworkError(f"Timeout after {timeout_ms}ms", {"timeoutMs": timeout_ms}) from e

    return await with_graceful_degradation(_bounded, check_name, options, **overrides)


async def safe_execute(fn: CheckFn, default: T, check_name: Optional[str] = None, logger: Optional[logging.Logger] = None) -> T:
    try:
        return await _call(fn)
    except Exception as exc:
        if check_name:
            err = classify(exc)
            err.context["checkName"] = check_name
            _log_error(err, GracefulOptions(logger=logger), level=logging.ERROR)
        return default


def create_safe_check(check_fn: CheckFn, check_name: str, options: Optional[GracefulOptions] = None) -> Callable[[], Awaitable[Any]]:
    async def _safe() -> Any:
        return await with_graceful_degradation(check_fn, check_name, options)
    return _safe

