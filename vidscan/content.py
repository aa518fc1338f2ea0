"""HTML extraction of video references, metadata and same-host links."""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Optional
from urllib.parse import urljoin, urlsplit

from bs4 import BeautifulSoup

from .config import VIDEO_EXTENSIONS
from .models import (
    NO_DESCRIPTION,
    UNKNOWN_FILE,
    UNTITLED_PAGE,
    ParsedPage,
    VideoDescriptor,
)
from .utils import (
    ALLOWED_SCHEMES,
    canonical_url,
    filename_from_url,
    host_of,
    url_extension,
)

logger = logging.getLogger("vidscan")


def _resolve(raw_url: Optional[str], page_url: str) -> Optional[str]:
    if raw_url is None:
        return None
    try:
        resolved = urljoin(page_url, raw_url.strip())
    except ValueError:
        return None
    return canonical_url(resolved)


def _meta_content(soup: BeautifulSoup, attrs: Dict[str, str]) -> str:
    tag = soup.find("meta", attrs=attrs)
    if tag and tag.get("content"):
        return tag["content"].strip()
    return ""


def extract_title(soup: BeautifulSoup) -> str:
    """Prefer ``og:title``, then the document ``<title>``."""
    title = _meta_content(soup, {"property": "og:title"})
    if not title and soup.title:
        title = soup.title.get_text().strip()
    return title


def extract_description(soup: BeautifulSoup) -> str:
    """Prefer ``og:description``, then the ``description`` meta tag."""
    return _meta_content(soup, {"property": "og:description"}) or _meta_content(
        soup, {"name": "description"}
    )


def build_descriptor(
    video_url: str, page_url: str, page_title: str, page_description: str
) -> VideoDescriptor:
    """Create a descriptor, filling gaps with the filename or placeholders."""
    filename = filename_from_url(video_url)
    return VideoDescriptor(
        video_url=video_url,
        page_url=page_url,
        page_title=page_title or filename or UNTITLED_PAGE,
        description=page_description or filename or NO_DESCRIPTION,
        filename=filename or UNKNOWN_FILE,
    )


def _iter_video_sources(soup: BeautifulSoup) -> Iterable[Optional[str]]:
    for video in soup.find_all("video"):
        yield video.get("src")
        for source in video.find_all("source"):
            yield source.get("src")


def extract_page(
    html: str,
    page_url: str,
    allowed_host: str,
    video_extensions: Iterable[str] = VIDEO_EXTENSIONS,
    crawl_video_links: bool = True,
) -> ParsedPage:
    """Extract video descriptors and same-host outbound links from markup.

    Every ``<video>`` ``src`` and nested ``<source>`` ``src`` becomes a
    descriptor, as does every ``<a href>`` whose path ends in a video
    extension. Anchors on ``allowed_host`` with an http(s) scheme are
    returned as ``next_links`` in order of first appearance. Duplicate
    videos within one page are kept; deduplication is the caller's job.
    """
    try:
        soup = BeautifulSoup(html or "", "html.parser")
    except Exception:  # pylint: disable=broad-except
        logger.warning("Unparseable markup at %s", page_url, exc_info=True)
        return ParsedPage()

    extensions = {ext.lower().lstrip(".") for ext in video_extensions}
    page_title = extract_title(soup)
    page_description = extract_description(soup)

    videos: List[VideoDescriptor] = []

    def add_video(resolved: Optional[str]) -> None:
        if resolved:
            videos.append(
                build_descriptor(resolved, page_url, page_title, page_description)
            )

    for src in _iter_video_sources(soup):
        if src:
            add_video(_resolve(src, page_url))

    next_links: Dict[str, None] = {}
    for anchor in soup.find_all("a", href=True):
        resolved = _resolve(anchor["href"], page_url)
        if resolved is None:
            continue
        is_video = url_extension(resolved) in extensions
        if is_video:
            add_video(resolved)
        if is_video and not crawl_video_links:
            continue
        scheme = urlsplit(resolved).scheme.lower()
        if scheme in ALLOWED_SCHEMES and host_of(resolved) == allowed_host:
            next_links.setdefault(resolved, None)

    return ParsedPage(videos=videos, next_links=list(next_links))
