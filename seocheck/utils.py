import re
from urllib.parse import urldefrag, urlparse

from .errors import ValidationError


def normalize_url(url: str) -> str:
    """Canonical form for de-duplicating discovered URLs (sitemaps, links)."""
    url, _frag = urldefrag(url.strip())
    if not url:
        return url
    if "://" not in url:
        url = "https://" + url
    parsed = urlparse(url)
    path = re.sub(r"/{2,}", "/", parsed.path or "/")
    # trailing slash only on the root
    if path != "/" and path.endswith("/"):
        path = path[:-1]
    return parsed._replace(netloc=parsed.netloc.lower(), path=path, params="", fragment="").geturl()


def require_http_url(url: str) -> str:
    """Validates an audit target; bare hosts get https://. Raises ValidationError."""
    if not url or not url.strip():
        raise ValidationError("Invalid URL: empty")
    candidate = url.strip()
    if "://" not in candidate:
        candidate = "https://" + candidate
    p = urlparse(candidate)
    if p.scheme not in ("http", "https"):
        raise ValidationError(f"Invalid URL: unsupported scheme {p.scheme!r}", {"url": url})
    if not p.netloc:
        raise ValidationError(f"Invalid URL: missing host in {url!r}", {"url": url})
    return candidate


def same_host(a: str, b: str) -> bool:
    return urlparse(a).netloc.lower() == urlparse(b).netloc.lower()


def is_http_url(url: str) -> bool:
    return urlparse(url).scheme in ("http", "https")
