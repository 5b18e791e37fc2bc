"""
Run entry point: one URL in, one SEOReport out.

Setup failures (bad config, bad URL, browser launch, initial navigation) are
fatal and propagate as CategorizedError. Failures inside checks never do;
the orchestrator degrades them into results.
"""
from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from config import CONFIG

from .browser import navigate_and_capture, open_page
from .checkers.base import AuditContext
from .config_loader import SEOConfig, load_config
from .errors import CategorizedError, classify
from .fetcher import HttpFetcher
from .orchestrator import CHECKER_REGISTRY, Orchestrator
from .output import now_iso
from .parser import build_snapshot
from .retry import RetryOptions
from .scoring import aggregate
from .models import SEOReport
from .utils import require_http_url

log = logging.getLogger(__name__)


class RunAborted(Exception):
    pass


class SEOChecker:
    def __init__(
        self,
        url: str,
        headless: bool = True,
        timeout_ms: int = CONFIG.NAVIGATION_TIMEOUT_MS,
        viewport: Tuple[int, int] = CONFIG.VIEWPORT,
        config: Union[Mapping[str, Any], SEOConfig, None] = None,
        config_file: Union[str, Path, None] = None,
        check_timeout_ms: int = CONFIG.CHECK_TIMEOUT_MS,
        user_agent: Optional[str] = None,
        fetcher: Any = None,
        registry: Optional[Dict[str, Any]] = None,
        navigation_retry: Optional[RetryOptions] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.url = url
        self.headless = headless
        self.timeout_ms = timeout_ms
        self.viewport = viewport
        self.check_timeout_ms = check_timeout_ms
        self.user_agent = user_agent
        self.registry = registry if registry is not None else CHECKER_REGISTRY
        self.navigation_retry = navigation_retry
        self.logger = logger or log
        # resolved once, here, so a bad config fails before any browser work
        if isinstance(config, SEOConfig):
            self.config = config
        else:
            self.config = load_config(config, config_file)
        self.fetcher = fetcher or HttpFetcher(
            user_agent or CONFIG.DEFAULT_USER_AGENT,
            CONFIG.REQUEST_TIMEOUT_S,
            CONFIG.MAX_FETCH_BYTES,
        )

    async def check(self, abort_event: Optional[asyncio.Event] = None) -> SEOReport:
        """
        Runs the audit. When `abort_event` is set mid-run, the run is cancelled,
        the browser is still closed, and RunAborted is raised.
        """
        if abort_event is None:
            return await self._run()

        run = asyncio.ensure_future(self._run())
        waiter = asyncio.ensure_future(abort_event.wait())
        try:
            await asyncio.wait({run, waiter}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            if not waiter.done():
                waiter.cancel()
            if not run.done():
                run.cancel()
                # wait for open_page to close the browser
                await asyncio.gather(run, return_exceptions=True)

        if run.cancelled():
            self.logger.warning(f"Audit of {self.url} aborted")
            raise RunAborted(f"Audit of {self.url} aborted")
        return run.result()

    async def _run(self) -> SEOReport:
        url = require_http_url(self.url)
        self.logger.info(f"Auditing {url} ({len(self.registry)} checkers registered)")

        try:
            async with open_page(
                headless=self.headless,
                viewport=self.viewport,
                timeout_ms=self.timeout_ms,
                user_agent=self.user_agent,
            ) as page:
                navigation = await navigate_and_capture(page, url, retry_options=self.navigation_retry)
                html = await page.content()
                snapshot = build_snapshot(navigation.final_url, html)

                context = AuditContext(
                    page=page,
                    navigation=navigation,
                    snapshot=snapshot,
                    fetcher=self.fetcher,
                    config=self.config,
                    logger=self.logger,
                )
                orchestrator = Orchestrator(
                    self.config,
                    registry=self.registry,
                    check_timeout_ms=self.check_timeout_ms,
                    logger=self.logger,
                )
                results = await orchestrator.run_all(context)
        except CategorizedError:
            raise
        except Exception as exc:
            raise classify(exc) from exc

        report = aggregate(results, url=url, timestamp=now_iso())
        self.logger.info(f"Audit of {url} finished: score {report.score}, {report.summary.failed} failed")
        return report


def audit(url: str, **kwargs: Any) -> SEOReport:
    """Synchronous wrapper around SEOChecker(url, **kwargs).check()."""
    return asyncio.run(SEOChecker(url, **kwargs).check())
