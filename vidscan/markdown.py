"""Markdown rendering of scan results."""

from __future__ import annotations

import datetime as dt
from typing import List

from .models import ScanReport, VideoDescriptor


def _escape(text: str) -> str:
    """Collapse whitespace so values stay on a single Markdown line."""
    return " ".join(text.split())


def format_video(index: int, video: VideoDescriptor) -> str:
    lines = [
        f"## {index}. {_escape(video.page_title)}",
        "",
        _escape(video.description),
        "",
        f"- File: `{video.filename}`",
        f"- Video: <{video.video_url}>",
        f"- Source page: <{video.page_url}>",
    ]
    return "\n".join(lines)


def compose_markdown(report: ScanReport) -> str:
    """Generate a Markdown report including front matter."""
    timestamp = (
        dt.datetime.now(dt.timezone.utc)
        .replace(microsecond=0)
        .isoformat()
        .replace("+00:00", "Z")
    )
    front_matter_lines = ["---"]
    front_matter_lines.append(f"start_url: {report.start_url}")
    front_matter_lines.append(f"retrieved_at: {timestamp}")
    front_matter_lines.append(f"pages_scanned: {report.pages_processed}")
    front_matter_lines.append(f"videos_found: {len(report.videos)}")
    if report.stopped_early:
        front_matter_lines.append("partial: true")
    front_matter_lines.append("---\n")

    if not report.videos:
        body = "No video files found."
    else:
        sections: List[str] = [
            format_video(index, video)
            for index, video in enumerate(report.videos, start=1)
        ]
        body = "\n\n".join(sections)
    return "\n".join(front_matter_lines) + body + "\n"
