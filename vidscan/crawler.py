"""Bounded breadth-first crawl that collects video descriptors."""

from __future__ import annotations

import json
import logging
import threading
import time
from collections import deque
from dataclasses import dataclass, field
from functools import partial
from pathlib import Path
from typing import Callable, Deque, List, Optional, Set, Tuple

import requests

from .config import CrawlConfig
from .content import extract_page
from .fetcher import fetch_page
from .markdown import compose_markdown
from .models import PageResponse, ScanReport, VideoDescriptor
from .utils import canonical_url, host_of, normalize_url, slugify

logger = logging.getLogger("vidscan")

Fetcher = Callable[[str, int], Optional[PageResponse]]


class InvalidURLError(ValueError):
    """Raised when the starting address is empty, malformed or not http(s)."""


@dataclass
class CrawlState:
    """Per-invocation traversal state."""

    queue: Deque[Tuple[str, int]] = field(default_factory=deque)
    visited: Set[str] = field(default_factory=set)
    seen_videos: Set[str] = field(default_factory=set)
    results: List[VideoDescriptor] = field(default_factory=list)
    pages_processed: int = 0
    stopped_early: bool = False


def _should_stop(
    config: CrawlConfig,
    started: float,
    cancel_event: Optional[threading.Event],
) -> bool:
    if cancel_event is not None and cancel_event.is_set():
        logger.info("Crawl cancelled; returning partial results")
        return True
    if config.max_duration is not None and time.monotonic() - started > config.max_duration:
        logger.info("Crawl time budget of %.1fs exhausted", config.max_duration)
        return True
    return False


def run_crawl(
    start_url: str,
    config: Optional[CrawlConfig] = None,
    fetcher: Optional[Fetcher] = None,
    cancel_event: Optional[threading.Event] = None,
) -> CrawlState:
    """Traverse same-host pages breadth-first from ``start_url``.

    Pages are marked visited before they are fetched. A page that fails to
    fetch, returns a non-ok status or cannot be parsed contributes nothing
    and the traversal moves on.
    """
    config = config or CrawlConfig()
    if fetcher is None:
        with requests.Session() as session:
            session.headers["User-Agent"] = config.user_agent
            return run_crawl(
                start_url,
                config,
                partial(fetch_page, session=session),
                cancel_event,
            )

    start_url = canonical_url(start_url) or start_url
    allowed_host = host_of(start_url) or ""
    state = CrawlState()
    state.queue.append((start_url, 0))
    started = time.monotonic()

    while state.queue and state.pages_processed < config.max_pages:
        if _should_stop(config, started, cancel_event):
            state.stopped_early = True
            break

        url, depth = state.queue.popleft()
        if url in state.visited or depth > config.max_depth:
            logger.debug("Skipping %s (depth %d)", url, depth)
            continue
        state.visited.add(url)

        response = fetcher(url, config.fetch_timeout_ms)
        if response is None or not response.ok:
            continue
        state.pages_processed += 1
        logger.info("Scanned %s (depth %d, page %d)", url, depth, state.pages_processed)

        parsed = extract_page(
            response.text(),
            canonical_url(response.url or url) or url,
            allowed_host,
            video_extensions=config.video_extensions,
            crawl_video_links=config.crawl_video_links,
        )
        for video in parsed.videos:
            if video.video_url in state.seen_videos:
                continue
            state.seen_videos.add(video.video_url)
            state.results.append(video)

        if depth + 1 > config.max_depth:
            continue
        for link in parsed.next_links:
            if link not in state.visited:
                state.queue.append((link, depth + 1))

    return state


def crawl(
    start_url: str,
    config: Optional[CrawlConfig] = None,
    fetcher: Optional[Fetcher] = None,
    cancel_event: Optional[threading.Event] = None,
) -> List[VideoDescriptor]:
    """Return the deduplicated videos reachable from ``start_url``."""
    return run_crawl(start_url, config, fetcher, cancel_event).results


def scan_site(
    raw_url: str,
    config: Optional[CrawlConfig] = None,
    fetcher: Optional[Fetcher] = None,
    cancel_event: Optional[threading.Event] = None,
) -> ScanReport:
    """Normalize a user-supplied address and crawl it."""
    start_url = normalize_url(raw_url)
    if start_url is None:
        raise InvalidURLError("Please enter a valid http or https URL.")

    overall_start = time.perf_counter()
    state = run_crawl(start_url, config, fetcher, cancel_event)
    report = ScanReport(
        start_url=start_url,
        videos=state.results,
        pages_processed=state.pages_processed,
        total_seconds=time.perf_counter() - overall_start,
        stopped_early=state.stopped_early,
    )
    logger.info(
        "Scanned starting from: %s - Found %d video file(s) across %d page(s) in %.2fs",
        report.start_url,
        len(report.videos),
        report.pages_processed,
        report.total_seconds,
    )
    return report


def build_output_dir(output_root: Path, start_url: str) -> Path:
    """Create an output directory named after the scanned host."""
    domain = slugify(host_of(start_url) or "site", fallback="site")
    output_dir = output_root / domain
    output_dir.mkdir(parents=True, exist_ok=True)
    return output_dir


def write_report(report: ScanReport, output_root: Path) -> Path:
    """Persist a scan as ``videos.md`` and ``videos.json``."""
    output_dir = build_output_dir(output_root, report.start_url)
    markdown_path = output_dir / "videos.md"
    markdown_path.write_text(compose_markdown(report), encoding="utf-8")
    json_path = output_dir / "videos.json"
    json_path.write_text(
        json.dumps([video.to_dict() for video in report.videos], indent=2) + "\n",
        encoding="utf-8",
    )
    logger.info("Saved report to %s", output_dir)
    return output_dir
