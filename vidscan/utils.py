"""Utility helpers for URL normalization and path handling."""

from __future__ import annotations

import re
from typing import Optional
from urllib.parse import SplitResult, urlsplit, urlunsplit

SLUG_PATTERN = re.compile(r"[^a-z0-9]+")
HTTP_SCHEME_PATTERN = re.compile(r"^https?://", re.IGNORECASE)
ANY_SCHEME_PATTERN = re.compile(r"^[a-z][a-z0-9+.\-]*://", re.IGNORECASE)
ALLOWED_SCHEMES = ("http", "https")
DEFAULT_PORTS = {"http": 80, "https": 443}


def slugify(value: str, fallback: str = "page") -> str:
    """Generate a filesystem-friendly slug using ASCII characters only."""
    normalized = value.encode("ascii", "ignore").decode("ascii")
    normalized = normalized.lower()
    normalized = SLUG_PATTERN.sub("-", normalized).strip("-")
    return normalized or fallback


def _netloc(parts: SplitResult) -> str:
    """Rebuild a netloc with a lowercased host and without a default port."""
    hostname = parts.hostname or ""
    if ":" in hostname:
        hostname = f"[{hostname}]"
    userinfo = ""
    if parts.username is not None:
        userinfo = parts.username
        if parts.password is not None:
            userinfo += f":{parts.password}"
        userinfo += "@"
    port = parts.port
    if port is None or port == DEFAULT_PORTS.get(parts.scheme.lower()):
        return f"{userinfo}{hostname}"
    return f"{userinfo}{hostname}:{port}"


def normalize_url(raw: Optional[str]) -> Optional[str]:
    """Validate a user-supplied address and return its canonical form.

    Addresses without a scheme are assumed to be ``https``. Returns ``None``
    for empty input, malformed addresses and any scheme other than http(s).
    """
    trimmed = (raw or "").strip()
    if not trimmed:
        return None
    if HTTP_SCHEME_PATTERN.match(trimmed):
        candidate = trimmed
    elif ANY_SCHEME_PATTERN.match(trimmed):
        return None
    else:
        candidate = f"https://{trimmed}"

    try:
        parts = urlsplit(candidate)
        _netloc(parts)
    except ValueError:
        return None

    scheme = parts.scheme.lower()
    if scheme not in ALLOWED_SCHEMES:
        return None
    if not parts.hostname or any(ch.isspace() for ch in parts.hostname):
        return None
    return canonical_url(candidate)


def canonical_url(url: str) -> Optional[str]:
    """Lowercase scheme and host, drop a default port and use ``/`` for an empty path.

    URLs without a network location (``mailto:``, ``javascript:``) are returned
    unchanged; ``None`` means the URL could not be parsed.
    """
    try:
        parts = urlsplit(url)
        if not parts.netloc:
            return url
        netloc = _netloc(parts)
    except ValueError:
        return None
    return urlunsplit(
        (parts.scheme.lower(), netloc, parts.path or "/", parts.query, parts.fragment)
    )


def host_of(url: str) -> Optional[str]:
    """Return ``host[:port]`` for a URL, omitting the scheme's default port."""
    try:
        parts = urlsplit(url)
        if not parts.hostname:
            return None
        hostname = parts.hostname
        if ":" in hostname:
            hostname = f"[{hostname}]"
        port = parts.port
    except ValueError:
        return None
    if port is None or port == DEFAULT_PORTS.get(parts.scheme.lower()):
        return hostname
    return f"{hostname}:{port}"


def filename_from_url(url: str) -> str:
    """Last non-empty path segment of a URL, without query or fragment."""
    try:
        path = urlsplit(url).path
    except ValueError:
        return ""
    segments = [segment for segment in path.split("/") if segment]
    return segments[-1] if segments else ""


def url_extension(url: str) -> str:
    """Lowercased text after the last dot of a URL path's final segment."""
    try:
        path = urlsplit(url).path
    except ValueError:
        return ""
    _, dot, extension = path.rpartition(".")
    if not dot or "/" in extension:
        return ""
    return extension.lower()
