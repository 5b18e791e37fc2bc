from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Dict, List, Optional
from urllib.parse import urlparse

import requests

from .utils import normalize_url


@dataclass(frozen=True)
class FetchResult:
    url: str
    final_url: str
    status_code: int
    headers: Dict[str, str] = field(default_factory=dict)
    text: str = ""

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


class HttpFetcher:
    """
    Side-channel HTTP fetches (robots.txt, sitemaps) that must not touch the
    shared browser page. Requests run in a worker thread so the event loop
    keeps serving the other checkers.

    Network failures are raised, not swallowed; callers wrap `fetch` in retry.
    """

    def __init__(self, user_agent: str, timeout_s: int, max_bytes: int):
        self.user_agent = user_agent
        self.timeout_s = timeout_s
        self.max_bytes = max_bytes

    def _trim_bytes(self, text: str) -> str:
        if not text:
            return ""
        b = text.encode("utf-8", errors="ignore")
        if len(b) <= self.max_bytes:
            return text
        return b[: self.max_bytes].decode("utf-8", errors="ignore")

    def fetch_sync(self, url: str) -> FetchResult:
        headers = {"User-Agent": self.user_agent, "Accept": "*/*"}
        r = requests.get(url, headers=headers, timeout=self.timeout_s, allow_redirects=True)
        return FetchResult(
            url=url,
            final_url=r.url,
            status_code=r.status_code,
            headers={k.lower(): v for k, v in r.headers.items()},
            text=self._trim_bytes(r.text or ""),
        )

    async def fetch(self, url: str) -> FetchResult:
        return await asyncio.to_thread(self.fetch_sync, url)


def robots_url(page_url: str) -> str:
    p = urlparse(page_url)
    return f"{p.scheme}://{p.netloc.lower()}/robots.txt"


def sitemap_candidates(page_url: str, robots_txt: Optional[str] = None) -> List[str]:
    """Sitemap URLs declared in robots.txt first, then the usual locations."""
    p = urlparse(page_url)
    base = f"{p.scheme}://{p.netloc.lower()}"

    candidates: List[str] = []
    if robots_txt:
        for line in robots_txt.splitlines():
            line = line.strip()
            if line.lower().startswith("sitemap:"):
                sm = line.split(":", 1)[1].strip()
                if sm:
                    candidates.append(sm)

    candidates += [
        f"{base}/sitemap.xml",
        f"{base}/sitemap_index.xml",
        f"{base}/sitemap-index.xml",
        f"{base}/sitemap1.xml",
    ]

    seen = set()
    out = []
    for c in candidates:
        n = normalize_url(c)
        if n not in seen:
            seen.add(n)
            out.append(n)
    return out


def looks_like_sitemap(text: str) -> bool:
    low = (text or "").lower()
    return ("<urlset" in low) or ("<sitemapindex" in low)
