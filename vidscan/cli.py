"""Command-line entry point for the video crawler."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Sequence

from .config import FETCH_TIMEOUT_MS, MAX_DEPTH, MAX_PAGES, CrawlConfig
from .crawler import InvalidURLError, scan_site, write_report
from .markdown import compose_markdown

logger = logging.getLogger("vidscan.cli")


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Crawl a website and list the video files it links to.",
    )
    parser.add_argument("url", help="Starting page; https:// is assumed when omitted")
    parser.add_argument(
        "--max-pages",
        type=int,
        default=MAX_PAGES,
        help="Maximum number of pages to fetch",
    )
    parser.add_argument(
        "--max-depth",
        type=int,
        default=MAX_DEPTH,
        help="Maximum link depth from the starting page",
    )
    parser.add_argument(
        "--timeout",
        type=int,
        default=FETCH_TIMEOUT_MS,
        help="Per-page fetch timeout in milliseconds",
    )
    parser.add_argument(
        "--max-duration",
        type=float,
        default=None,
        help="Stop after this many seconds and report what was found so far",
    )
    parser.add_argument(
        "--no-crawl-video-links",
        dest="crawl_video_links",
        action="store_false",
        help="Do not fetch same-host video links as if they were pages",
    )
    parser.add_argument(
        "--format",
        choices=("markdown", "json"),
        default="markdown",
        help="Output format written to STDOUT",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Directory where videos.md and videos.json should be written",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        force=True,
    )

    config = CrawlConfig(
        max_pages=args.max_pages,
        max_depth=args.max_depth,
        fetch_timeout_ms=args.timeout,
        crawl_video_links=args.crawl_video_links,
        max_duration=args.max_duration,
        output_root=Path(args.output).resolve() if args.output else None,
    )

    try:
        report = scan_site(args.url, config)
    except InvalidURLError as exc:
        logger.error("%s", exc)
        raise SystemExit(2) from exc
    except Exception as exc:  # pylint: disable=broad-except
        logger.exception("An unexpected error occurred while scanning.")
        raise SystemExit(1) from exc

    if config.output_root is not None:
        write_report(report, config.output_root)

    if args.format == "json":
        json.dump([video.to_dict() for video in report.videos], sys.stdout, indent=2)
        sys.stdout.write("\n")
    else:
        sys.stdout.write(compose_markdown(report))
    sys.stdout.flush()


if __name__ == "__main__":
    main()
