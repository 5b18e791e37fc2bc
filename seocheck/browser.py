"""
Browser session for one audit run.

`open_page` owns the Playwright browser and page: opened once, closed exactly
once on every exit path. `navigate_and_capture` performs the only navigation
of the run and records the status, headers and redirect chain so that no
checker ever has to navigate the shared page again.
"""
from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, List, Optional, Tuple

from playwright.async_api import Page, Response, async_playwright

from .errors import NetworkError
from .models import NavigationCapture
from .retry import RetryOptions, retry

log = logging.getLogger(__name__)


@asynccontextmanager
async def open_page(
    headless: bool = True,
    viewport: Tuple[int, int] = (1920, 1080),
    timeout_ms: int = 30_000,
    user_agent: Optional[str] = None,
) -> AsyncIterator[Page]:
    async with async_playwright() as pw:
        browser = await pw.chromium.launch(headless=headless)
        log.debug(f"Browser launched (headless={headless})")
        try:
            context_kwargs: Dict = {"viewport": {"width": viewport[0], "height": viewport[1]}}
            if user_agent:
                context_kwargs["user_agent"] = user_agent
            context = await browser.new_context(**context_kwargs)
            page = await context.new_page()
            page.set_default_timeout(timeout_ms)
            try:
                yield page
            finally:
                await context.close()
        finally:
            await browser.close()
            log.debug("Browser closed")


def _redirect_chain(response: Response) -> List[str]:
    chain: List[str] = []
    req = response.request.redirected_from
    while req is not None:
        chain.append(req.url)
        req = req.redirected_from
    chain.reverse()
    return chain


async def navigate_and_capture(
    page: Page,
    url: str,
    wait_until: str = "networkidle",
    retry_options: Optional[RetryOptions] = None,
) -> NavigationCapture:
    started = time.perf_counter()

    async def _goto() -> Response:
        response = await page.goto(url, wait_until=wait_until)
        if response is None:
            raise NetworkError(f"No response received for {url}", {"url": url})
        return response

    response = await retry(_goto, retry_options or RetryOptions(), logger=log)
    headers = await response.all_headers()
    return NavigationCapture(
        requested_url=url,
        final_url=page.url or response.url,
        status=response.status,
        headers={k.lower(): v for k, v in headers.items()},
        redirect_chain=_redirect_chain(response),
        elapsed_ms=round((time.perf_counter() - started) * 1000, 2),
    )
