"""Single-shot page retrieval with a hard deadline."""

from __future__ import annotations

import logging
import re
import socket
import threading
import time
from typing import Optional

import requests

from .config import DEFAULT_USER_AGENT, FETCH_TIMEOUT_MS
from .models import PageResponse

logger = logging.getLogger("vidscan")

CHUNK_SIZE = 64 * 1024
CHARSET_PATTERN = re.compile(r"charset=[\"']?([\w.:-]+)", re.IGNORECASE)


def charset_from_content_type(content_type: Optional[str]) -> Optional[str]:
    """Return the explicit charset of a Content-Type header, if any."""
    if not content_type:
        return None
    match = CHARSET_PATTERN.search(content_type)
    return match.group(1) if match else None


def _abort(resp: requests.Response, timed_out: threading.Event) -> None:
    """Unblock a pending body read by shutting down the response socket."""
    timed_out.set()
    connection = getattr(resp.raw, "connection", None)
    sock = getattr(connection, "sock", None)
    if sock is None:
        return
    try:
        sock.shutdown(socket.SHUT_RDWR)
    except OSError:
        pass


def fetch_page(
    url: str,
    timeout_ms: int = FETCH_TIMEOUT_MS,
    session: Optional[requests.Session] = None,
) -> Optional[PageResponse]:
    """GET a page, returning ``None`` on any network failure or timeout.

    Once the response headers arrive, a watchdog shuts the connection down
    when ``timeout_ms`` has elapsed, so a slow body cannot outlive the
    deadline. Non-ok statuses are returned with ``ok=False`` and an empty
    body.
    """
    timeout = timeout_ms / 1000
    deadline = time.monotonic() + timeout
    try:
        if session is None:
            resp = requests.get(
                url,
                headers={"User-Agent": DEFAULT_USER_AGENT},
                timeout=timeout,
                stream=True,
            )
        else:
            resp = session.get(url, timeout=timeout, stream=True)
    except requests.RequestException as exc:
        logger.warning("Failed to fetch %s: %s", url, exc)
        return None

    final_url = resp.url or url
    if not resp.ok:
        logger.warning("Skipping %s: HTTP %s", url, resp.status_code)
        resp.close()
        return PageResponse(url=final_url, ok=False, status_code=resp.status_code)

    remaining = deadline - time.monotonic()
    if remaining <= 0:
        logger.warning("Timed out after %d ms fetching %s", timeout_ms, url)
        resp.close()
        return None

    timed_out = threading.Event()
    watchdog = threading.Timer(remaining, _abort, args=(resp, timed_out))
    watchdog.daemon = True
    watchdog.start()
    chunks = []
    try:
        for chunk in resp.iter_content(chunk_size=CHUNK_SIZE):
            if timed_out.is_set() or time.monotonic() > deadline:
                timed_out.set()
                break
            chunks.append(chunk)
    except requests.RequestException as exc:
        if not timed_out.is_set():
            logger.warning("Failed to read %s: %s", url, exc)
            return None
    finally:
        watchdog.cancel()
        resp.close()

    if timed_out.is_set():
        logger.warning("Timed out after %d ms fetching %s", timeout_ms, url)
        return None

    return PageResponse(
        url=final_url,
        ok=True,
        status_code=resp.status_code,
        content=b"".join(chunks),
        encoding=charset_from_content_type(resp.headers.get("Content-Type")),
    )
