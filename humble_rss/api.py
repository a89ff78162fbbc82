from __future__ import annotations

"""
FastAPI application for the Humble Bundle RSS service.

- Fixed routes only: ``/``, ``/rss``, one feed per category and ``/favicon.ico``,
  matched on path whatever the request method
- Every feed or index request performs its own fetch; nothing is cached
- Pipeline failures are logged and returned as a 500 with the error message
- Unknown paths get a plain-text ``Not Found``
"""

from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse, PlainTextResponse, Response
from loguru import logger
from starlette.exceptions import HTTPException as StarletteHTTPException

from .bundle_fetch import fetch_bundles
from .config import CACHE_CONTROL
from .feed import feed_title, render_rss
from .homepage import FAVICON_SVG, render_homepage
from .normalize import filter_by_category

RSS_MEDIA_TYPE = "application/rss+xml; charset=utf-8"
SVG_MEDIA_TYPE = "image/svg+xml"
CACHE_HEADERS = {"Cache-Control": CACHE_CONTROL}
# Routes answer by path alone, whatever the method.
ALL_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]

# =============================================================================
# FastAPI app
# =============================================================================

app = FastAPI(
    title="Humble Bundle RSS",
    docs_url=None,
    redoc_url=None,
    openapi_url=None,
    redirect_slashes=False,
)


@app.exception_handler(StarletteHTTPException)
async def plain_http_error(request: Request, exc: StarletteHTTPException) -> PlainTextResponse:
    return PlainTextResponse(str(exc.detail), status_code=exc.status_code, headers=exc.headers)


def _canonical_url(request: Request) -> str:
    url = request.url
    return f"{url.scheme}://{url.netloc}{url.path}"


def _feed_response(request: Request, category: Optional[str] = None) -> Response:
    try:
        items = filter_by_category(fetch_bundles(), category)
        rss = render_rss(items, feed_title(category), _canonical_url(request))
    except Exception as e:
        logger.exception("Error generating RSS feed ({}): {}", request.url.path, e)
        # no media type: the error body goes out without a Content-Type
        return Response(f"Error generating RSS feed: {e}", status_code=500)
    logger.info("Served {} with {} items", request.url.path, len(items))
    return Response(rss, media_type=RSS_MEDIA_TYPE, headers=CACHE_HEADERS)


# =============================================================================
# Routes
# =============================================================================

@app.api_route("/", methods=ALL_METHODS)
def homepage() -> Response:
    try:
        html = render_homepage(fetch_bundles())
    except Exception as e:
        logger.exception("Error generating homepage: {}", e)
        return PlainTextResponse(f"Error: {e}", status_code=500)
    return HTMLResponse(html, headers=CACHE_HEADERS)


@app.api_route("/rss", methods=ALL_METHODS)
def rss_all(request: Request) -> Response:
    return _feed_response(request)


@app.api_route("/games", methods=ALL_METHODS)
def rss_games(request: Request) -> Response:
    return _feed_response(request, "games")


@app.api_route("/books", methods=ALL_METHODS)
def rss_books(request: Request) -> Response:
    return _feed_response(request, "books")


@app.api_route("/software", methods=ALL_METHODS)
def rss_software(request: Request) -> Response:
    return _feed_response(request, "software")


@app.api_route("/favicon.ico", methods=ALL_METHODS)
def favicon() -> Response:
    return Response(FAVICON_SVG, media_type=SVG_MEDIA_TYPE, headers=CACHE_HEADERS)
