import pytest
import requests

from seocheck.fetcher import HttpFetcher, looks_like_sitemap, robots_url, sitemap_candidates


class FakeResponse:
    def __init__(self, url, status_code=200, text="", headers=None):
        self.url = url
        self.status_code = status_code
        self.text = text
        self.headers = headers or {}


def test_robots_url():
    assert robots_url("https://Example.com/a/b?x=1") == "https://example.com/robots.txt"


def test_sitemap_candidates_prefer_robots_and_dedupe():
    robots = "User-agent: *\nSitemap: https://example.com/custom.xml\nSitemap: https://example.com/sitemap.xml\n"
    out = sitemap_candidates("https://example.com/page", robots)
    assert out[0] == "https://example.com/custom.xml"
    assert out.count("https://example.com/sitemap.xml") == 1
    assert out[1] == "https://example.com/sitemap.xml"


def test_looks_like_sitemap():
    assert looks_like_sitemap("<?xml version='1.0'?><urlset></urlset>")
    assert looks_like_sitemap("<sitemapindex>")
    assert not looks_like_sitemap("<html></html>")


def test_fetch_sync_normalizes_headers_and_trims(monkeypatch):
    seen = {}

    def fake_get(url, headers, timeout, allow_redirects):
        seen.update(url=url, headers=headers, timeout=timeout)
        return FakeResponse(url + "?final", 200, "x" * 50, {"Content-Type": "text/plain"})

    monkeypatch.setattr(requests, "get", fake_get)
    result = HttpFetcher("TestBot/1.0", 7, 10).fetch_sync("https://example.com/robots.txt")

    assert seen["headers"]["User-Agent"] == "TestBot/1.0"
    assert seen["timeout"] == 7
    assert result.final_url == "https://example.com/robots.txt?final"
    assert result.headers == {"content-type": "text/plain"}
    assert result.text == "x" * 10
    assert result.ok


@pytest.mark.asyncio
async def test_fetch_raises_network_failures(monkeypatch):
    def fake_get(*args, **kwargs):
        raise requests.exceptions.ConnectionError("refused")

    monkeypatch.setattr(requests, "get", fake_get)
    with pytest.raises(requests.exceptions.ConnectionError):
        await HttpFetcher("TestBot/1.0", 1, 100).fetch("https://example.com/robots.txt")
