"""MCP server exposing the video crawl as a tool."""

from __future__ import annotations

import asyncio
import logging
import threading

from mcp.server.fastmcp import FastMCP

from .config import CrawlConfig
from .crawler import scan_site
from .markdown import compose_markdown

logger = logging.getLogger("vidscan.mcp")
logger.setLevel(logging.ERROR)

mcp = FastMCP(name="vidscan")


@mcp.tool()
async def scan(
    url: str,
) -> str:
    """Crawl a website and return the video files it links to as Markdown."""

    cancel_event = threading.Event()
    try:
        report = await asyncio.to_thread(
            scan_site, url, CrawlConfig(), cancel_event=cancel_event
        )
    except asyncio.CancelledError:
        cancel_event.set()
        raise
    return compose_markdown(report)


def main() -> None:
    """Entry point for running the MCP server."""
    logging.basicConfig(level=logging.ERROR)
    mcp.run()


if __name__ == "__main__":
    main()
