# humble_rss/cli.py
"""
Command line runner for the Humble Bundle RSS service.

- ``serve`` runs the FastAPI app under uvicorn
- ``feed`` renders one RSS feed without starting the server
- ``page`` renders the HTML index without starting the server

One-shot renders exit with status 1 when the upstream page cannot be
turned into items.
"""

from __future__ import annotations
import argparse
import sys
from pathlib import Path
from typing import List, Optional

import uvicorn
from loguru import logger

from .api import app
from .bundle_fetch import fetch_bundles
from .config import FEED_CATEGORIES, HOST, LOG_LEVEL, PORT, PUBLIC_BASE_URL
from .errors import HumbleRssError
from .feed import feed_title, render_rss
from .homepage import render_homepage
from .normalize import filter_by_category

ENDPOINTS = [
    ("/", "Homepage with feed links and current bundles"),
    ("/rss", "RSS feed of all bundles"),
] + [(f"/{c}", f"RSS feed of {c} bundles") for c in FEED_CATEGORIES]


def configure_logging(level: str) -> None:
    logger.remove()
    logger.add(sys.stderr, level=level.upper())


def _write_output(text: str, out: Optional[Path]) -> None:
    if out is None:
        sys.stdout.write(text)
        sys.stdout.write("\n")
        return
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(text, encoding="utf-8")
    logger.info("Wrote {} characters to {}", len(text), out)


def cmd_serve(args: argparse.Namespace) -> int:
    logger.info("Humble Bundle RSS server running at http://localhost:{}", args.port)
    for path, what in ENDPOINTS:
        logger.info("  {:<10} - {}", path, what)
    uvicorn.run(app, host=args.host, port=args.port, log_level=args.log_level.lower())
    return 0


def cmd_feed(args: argparse.Namespace) -> int:
    path = f"/{args.category}" if args.category else "/rss"
    canonical_url = PUBLIC_BASE_URL.rstrip("/") + path
    try:
        items = filter_by_category(fetch_bundles(), args.category)
    except HumbleRssError as e:
        logger.error("Could not build {} feed: {}", path, e)
        return 1
    _write_output(render_rss(items, feed_title(args.category), canonical_url), args.out)
    return 0


def cmd_page(args: argparse.Namespace) -> int:
    try:
        items = fetch_bundles()
    except HumbleRssError as e:
        logger.error("Could not build homepage: {}", e)
        return 1
    _write_output(render_homepage(items), args.out)
    return 0


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="humble-rss", description="Unofficial Humble Bundle RSS feeds")
    ap.add_argument("--log-level", default=LOG_LEVEL, help=f"loguru level (default {LOG_LEVEL})")
    sub = ap.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="run the HTTP server")
    serve.add_argument("--host", default=HOST)
    serve.add_argument("--port", type=int, default=PORT, help=f"listen port (default {PORT}, env PORT)")
    serve.set_defaults(func=cmd_serve)

    feed = sub.add_parser("feed", help="render one RSS feed and exit")
    feed.add_argument("--category", choices=list(FEED_CATEGORIES), default=None)
    feed.add_argument("--out", type=Path, default=None, help="write to a file instead of stdout")
    feed.set_defaults(func=cmd_feed)

    page = sub.add_parser("page", help="render the HTML index and exit")
    page.add_argument("--out", type=Path, default=None, help="write to a file instead of stdout")
    page.set_defaults(func=cmd_page)
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
