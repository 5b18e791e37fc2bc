import asyncio
import logging

import pytest

from seocheck.errors import BrowserError, ErrorKind, NetworkError
from seocheck.graceful import (
    DEFAULT_MESSAGE_PREFIX,
    GracefulOptions,
    NamedCheck,
    create_safe_check,
    safe_execute,
    with_fallback,
    with_graceful_degradation,
    with_graceful_degradation_batch,
    with_graceful_degradation_parallel,
    with_partial_success,
    with_timeout,
)
from seocheck.models import CheckResult


def sync_boom():
    raise RuntimeError("kaput")


async def async_boom():
    await asyncio.sleep(0)
    raise BrowserError("page.evaluate failed")


async def ok():
    return CheckResult(passed=True, message="fine")


@pytest.mark.asyncio
@pytest.mark.parametrize("fn", [sync_boom, async_boom])
async def test_failures_are_contained_and_pass_by_default(fn):
    result = await with_graceful_degradation(fn, "metaTags.title")
    assert isinstance(result, CheckResult)
    assert result.passed is True
    assert result.degraded is True
    assert result.message.startswith(DEFAULT_MESSAGE_PREFIX + ": ")
    assert result.details["error"]["context"]["checkName"] == "metaTags.title"


@pytest.mark.asyncio
async def test_successful_check_is_returned_untouched():
    result = await with_graceful_degradation(ok, "x")
    assert result == CheckResult(passed=True, message="fine")


@pytest.mark.asyncio
async def test_pass_on_error_false_and_custom_prefix():
    result = await with_graceful_degradation(
        sync_boom, "x", pass_on_error=False, message_prefix="Crashed", include_error_details=False
    )
    assert result.passed is False
    assert result.message == "Crashed"


@pytest.mark.asyncio
async def test_degraded_result_carries_category_and_rule():
    async def boom():
        raise NetworkError("timeout", {"rule": "robots-txt-exists"})

    result = await with_graceful_degradation(boom, "robotsTxt", GracefulOptions(category="robotsTxt"))
    assert result.category == "robotsTxt"
    assert result.rule == "robots-txt-exists"
    assert result.details["error"]["kind"] == "Network"


@pytest.mark.asyncio
async def test_degradation_is_logged_to_injected_logger(caplog):
    logger = logging.getLogger("test.graceful.sink")
    with caplog.at_level(logging.WARNING, logger="test.graceful.sink"):
        await with_graceful_degradation(sync_boom, "headings.h1", logger=logger)
    assert any("headings.h1" in r.getMessage() and "kaput" in r.getMessage() for r in caplog.records)


@pytest.mark.asyncio
async def test_log_error_false_stays_quiet(caplog):
    logger = logging.getLogger("test.graceful.quiet")
    with caplog.at_level(logging.DEBUG, logger="test.graceful.quiet"):
        await with_graceful_degradation(sync_boom, "x", logger=logger, log_error=False)
    assert not [r for r in caplog.records if r.name == "test.graceful.quiet"]


@pytest.mark.asyncio
async def test_with_timeout_degrades_slow_checks():
    async def slow():
        await asyncio.sleep(5)

    result = await with_timeout(slow, 20, "performance")
    assert result.degraded
    assert result.passed
    assert "Timeout after 20ms" in result.message
    assert result.details["error"]["kind"] == ErrorKind.NETWORK.value


@pytest.mark.asyncio
async def test_with_timeout_returns_fast_results():
    assert (await with_timeout(ok, 1000, "x")).message == "fine"


@pytest.mark.asyncio
async def test_batch_and_parallel_keep_order():
    checks = [NamedCheck("a", ok), NamedCheck("b", sync_boom), NamedCheck("c", async_boom)]
    for runner in (with_graceful_degradation_batch, with_graceful_degradation_parallel):
        results = await runner(checks)
        assert [r.degraded for r in results] == [False, True, True]
        assert all(r.passed for r in results)


@pytest.mark.asyncio
async def test_partial_success_reports_rate_and_failures(caplog):
    logger = logging.getLogger("test.graceful.partial")
    with caplog.at_level(logging.ERROR, logger="test.graceful.partial"):
        out = await with_partial_success([ok, sync_boom, ok], "batch", min_success_rate=0.9, logger=logger)
    assert len(out.results) == 2
    assert [f["index"] for f in out.failures] == [1]
    assert out.success_rate == pytest.approx(2 / 3)
    assert any("below minimum" in r.getMessage() for r in caplog.records)


@pytest.mark.asyncio
async def test_partial_success_empty_batch():
    out = await with_partial_success([], "empty")
    assert out.success_rate == 0.0


@pytest.mark.asyncio
async def test_fallback_used_when_primary_fails():
    assert (await with_fallback(sync_boom, ok, "x")).message == "fine"


@pytest.mark.asyncio
async def test_fallback_failure_is_raised_with_primary_context():
    with pytest.raises(BrowserError) as exc:
        await with_fallback(sync_boom, async_boom, "x")
    assert exc.value.context["primaryError"] == "kaput"


@pytest.mark.asyncio
async def test_safe_execute_and_safe_check():
    assert await safe_execute(sync_boom, default=42, check_name="x") == 42
    safe = create_safe_check(async_boom, "y")
    result = await safe()
    assert result.degraded and result.passed
