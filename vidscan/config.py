"""Configuration objects and constants for the video crawler."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

MAX_PAGES = 60
MAX_DEPTH = 3
FETCH_TIMEOUT_MS = 10_000
VIDEO_EXTENSIONS: Tuple[str, ...] = ("mp4", "webm", "mov", "m4v")
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 14_0) "
    "AppleWebKit/605.1.15 (KHTML, like Gecko) Safari/605.1.15"
)


@dataclass
class CrawlConfig:
    """Budgets and policy switches that control a single scan."""

    max_pages: int = MAX_PAGES
    max_depth: int = MAX_DEPTH
    fetch_timeout_ms: int = FETCH_TIMEOUT_MS
    video_extensions: Tuple[str, ...] = VIDEO_EXTENSIONS
    user_agent: str = DEFAULT_USER_AGENT
    # Same-host links that look like video files are also queued as pages.
    crawl_video_links: bool = True
    max_duration: Optional[float] = None
    output_root: Optional[Path] = None
