"""Pytest configuration for seocheck: no real browser or network in tests."""
import pytest

from fakes import GOOD_HTML, FakeFetcher, FakePage
from seocheck.checkers.base import AuditContext
from seocheck.config_loader import resolve
from seocheck.models import NavigationCapture
from seocheck.parser import build_snapshot


@pytest.fixture
def make_context():
    def _make(
        html=GOOD_HTML,
        url="https://example.com/",
        status=200,
        headers=None,
        redirect_chain=None,
        raw_config=None,
        config=None,
        page=None,
        fetcher=None,
        fetch_retry=None,
    ):
        navigation = NavigationCapture(
            requested_url=url,
            final_url=url,
            status=status,
            headers=dict(headers or {}),
            redirect_chain=list(redirect_chain or []),
            elapsed_ms=900.0,
        )
        return AuditContext(
            page=page or FakePage(url=url, html=html),
            navigation=navigation,
            snapshot=build_snapshot(url, html),
            fetcher=fetcher or FakeFetcher(),
            config=config if config is not None else resolve(raw_config or {}),
            fetch_retry=fetch_retry,
        )
    return _make


@pytest.fixture
def recording_sleep():
    calls = []

    async def _sleep(seconds):
        calls.append(seconds)

    _sleep.calls = calls
    return _sleep
