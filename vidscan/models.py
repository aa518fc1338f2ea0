"""Data models used throughout the crawler pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

UNTITLED_PAGE = "Untitled page"
NO_DESCRIPTION = "No description available"
UNKNOWN_FILE = "Unknown file"


@dataclass(frozen=True)
class VideoDescriptor:
    """A discovered video resource and the page it was found on."""

    video_url: str
    page_url: str
    page_title: str
    description: str
    filename: str

    def to_dict(self) -> Dict[str, str]:
        return {
            "videoUrl": self.video_url,
            "pageUrl": self.page_url,
            "pageTitle": self.page_title,
            "description": self.description,
            "filename": self.filename,
        }


@dataclass
class PageResponse:
    """Result of a completed page fetch."""

    url: str
    ok: bool
    status_code: int
    content: bytes = b""
    encoding: Optional[str] = None

    def text(self) -> str:
        """Decode the body, falling back to UTF-8 for unknown charsets."""
        try:
            return self.content.decode(self.encoding or "utf-8", errors="replace")
        except LookupError:
            return self.content.decode("utf-8", errors="replace")


@dataclass
class ParsedPage:
    """Videos and same-host links extracted from one page."""

    videos: List[VideoDescriptor] = field(default_factory=list)
    next_links: List[str] = field(default_factory=list)


@dataclass
class ScanReport:
    """Outcome of a scan started from a user-supplied address."""

    start_url: str
    videos: List[VideoDescriptor]
    pages_processed: int
    total_seconds: float
    stopped_early: bool = False
