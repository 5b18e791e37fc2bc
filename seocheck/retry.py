"""
Retry with backoff for transient (Network) failures.

Only errors that classify as Network are retried; anything else is re-raised
on the first failure. The delay schedule is a pure function of the attempt
number so runs and tests are reproducible (no jitter).
"""
from __future__ import annotations

import asyncio
import inspect
import logging
from dataclasses import dataclass, replace
from typing import Any, Awaitable, Callable, Optional, TypeVar, Union

from .errors import CategorizedError, classify

log = logging.getLogger(__name__)

T = TypeVar("T")

Operation = Callable[[], Union[T, Awaitable[T]]]
OnRetry = Callable[[CategorizedError, int, int], Any]


@dataclass
class RetryContext:
    attempt: int
    max_attempts: int
    last_delay_ms: int = 0


@dataclass(frozen=True)
class RetryOptions:
    max_attempts: int = 3
    initial_delay_ms: int = 1000
    max_delay_ms: int = 30_000
    backoff_factor: float = 2.0
    # attempt number (1-based, the one that just failed) -> delay in ms
    delay_fn: Optional[Callable[[int], int]] = None
    on_retry: Optional[OnRetry] = None
    sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep
    logger: Optional[logging.Logger] = None


def backoff_delay(attempt: int, options: RetryOptions) -> int:
    if options.delay_fn is not None:
        return max(0, int(options.delay_fn(attempt)))
    delay = options.initial_delay_ms * (options.backoff_factor ** (attempt - 1))
    return int(min(delay, options.max_delay_ms))


def _notify(options: RetryOptions, error: CategorizedError, attempt: int, delay_ms: int, logger: logging.Logger) -> None:
    if options.on_retry is None:
        return
    try:
        options.on_retry(error, attempt, delay_ms)
    except Exception:
        # observer only; its failures never change the retry decision
        logger.exception("on_retry hook raised; continuing with retry")


async def retry(op: Operation, options: Optional[RetryOptions] = None, **overrides: Any) -> T:
    """
    Runs `op` (sync or async) up to `max_attempts` times.

    On exhaustion, or on the first non-Network failure, the CategorizedError is
    raised with `context["retryCount"]` set to the number of retries performed.
    """
    opts = replace(options or RetryOptions(), **overrides) if overrides else (options or RetryOptions())
    if opts.max_attempts < 1:
        raise ValueError("max_attempts must be >= 1")
    logger = opts.logger or log

    ctx = RetryContext(attempt=1, max_attempts=opts.max_attempts)
    while True:
        try:
            result = op()
            if inspect.isawaitable(result):
                result = await result
            return result
        except Exception as exc:
            err = classify(exc)
            err.context["retryCount"] = ctx.attempt - 1

            if not err.retryable or ctx.attempt >= ctx.max_attempts:
                if err is exc:
                    raise
                raise err from exc

            delay_ms = backoff_delay(ctx.attempt, opts)
            ctx.last_delay_ms = delay_ms
            logger.info(
                f"Retrying after {err.kind.value} error (attempt {ctx.attempt}/{ctx.max_attempts}, "
                f"waiting {delay_ms}ms): {err.message}"
            )
            _notify(opts, err, ctx.attempt, delay_ms, logger)
            await opts.sleep(delay_ms / 1000.0)
            ctx.attempt += 1
