"""Shared fixtures for crawler tests."""

from __future__ import annotations

from typing import Dict, List, Optional

import pytest

from vidscan.models import PageResponse


class FakeSite:
    """In-memory fetcher that serves canned pages and records requests."""

    def __init__(self, pages: Dict[str, str]) -> None:
        self.pages = dict(pages)
        self.redirects: Dict[str, str] = {}
        self.errors: Dict[str, int] = {}
        self.requested: List[str] = []

    def __call__(self, url: str, timeout_ms: int) -> Optional[PageResponse]:
        self.requested.append(url)
        if url in self.errors:
            return PageResponse(url=url, ok=False, status_code=self.errors[url])
        final_url = self.redirects.get(url, url)
        html = self.pages.get(final_url)
        if html is None:
            return None
        return PageResponse(
            url=final_url,
            ok=True,
            status_code=200,
            content=html.encode("utf-8"),
            encoding="utf-8",
        )


@pytest.fixture
def fake_site():
    """Factory building a FakeSite from a ``{url: html}`` mapping."""
    return FakeSite
