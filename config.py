import os
from dataclasses import dataclass, field
from typing import Tuple


@dataclass(frozen=True)
class AppConfig:
    DEFAULT_USER_AGENT: str = field(
        default_factory=lambda: os.environ.get("SEOCHECK_USER_AGENT", "SeoCheckBot/1.0 (+local dev)")
    )
    REQUEST_TIMEOUT_S: int = 5
    NAVIGATION_TIMEOUT_MS: int = 30_000
    # above a full side-channel retry sequence (3 x REQUEST_TIMEOUT_S plus 3s backoff)
    CHECK_TIMEOUT_MS: int = 30_000
    VIEWPORT: Tuple[int, int] = (1920, 1080)
    MAX_FETCH_BYTES: int = 2_000_000  # 2MB cap for robots.txt / sitemap bodies
    DEFAULT_PRESET: str = "advanced"
    LOG_LEVEL: str = field(default_factory=lambda: os.environ.get("SEOCHECK_LOG_LEVEL", "WARNING"))
    LOG_FILE: str = field(default_factory=lambda: os.environ.get("SEOCHECK_LOG_FILE", ""))


CONFIG = AppConfig()
