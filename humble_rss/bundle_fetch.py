from __future__ import annotations

"""
Fetcher for the Humble Bundle bundles page.

The bundles page renders client-side from a JSON document embedded in
a ``<script id="landingPage-json-data" type="application/json">``
element.  This module downloads the page with ``httpx``, pulls that
script body out with BeautifulSoup and hands it to
:mod:`humble_rss.normalize`.

There are no retries: any failure is raised straight to the caller as
one of the errors in :mod:`humble_rss.errors`.
"""

from typing import List, Optional

import httpx
from bs4 import BeautifulSoup
from loguru import logger

from .config import (
    FETCH_TIMEOUT,
    HTTP_USER_AGENT,
    LANDING_SCRIPT_ID,
    LANDING_SCRIPT_TYPE,
    SOURCE_URL,
    Item,
)
from .errors import ExtractionError, FetchError
from .normalize import load_items


def _http_client() -> httpx.Client:
    """
    Construct a configured HTTP client for the upstream page.

    ``FETCH_TIMEOUT`` of ``None`` disables every httpx timeout.
    """
    return httpx.Client(
        headers={"User-Agent": HTTP_USER_AGENT},
        follow_redirects=True,
        timeout=httpx.Timeout(FETCH_TIMEOUT),
    )


def _get_text(client: httpx.Client, url: str) -> str:
    try:
        r = client.get(url)
    except httpx.HTTPError as e:
        raise FetchError(f"Failed to fetch Humble Bundle page: {e}") from e
    if not r.is_success:
        raise FetchError(
            f"Failed to fetch Humble Bundle page: {r.status_code}",
            status_code=r.status_code,
        )
    return r.text


def fetch_html(url: str = SOURCE_URL, client: Optional[httpx.Client] = None) -> str:
    """
    Retrieve the HTML of the bundles page.

    Raises ``FetchError`` on transport errors and non-2xx responses.  A
    caller-supplied ``client`` is used as-is and left open.
    """
    logger.info("Fetching bundles page: {}", url)
    if client is not None:
        return _get_text(client, url)
    with _http_client() as own_client:
        return _get_text(own_client, url)


def extract_landing_json(html: str) -> str:
    """
    Return the body of the first ``landingPage-json-data`` script element.

    The body ends at the first closing ``</script>``.  Raises
    ``ExtractionError`` when the element is missing or empty.
    """
    soup = BeautifulSoup(html, "html.parser")
    tag = soup.find("script", attrs={"id": LANDING_SCRIPT_ID, "type": LANDING_SCRIPT_TYPE})
    raw = tag.string if tag is not None else None
    if not raw:
        raise ExtractionError(f"Could not find {LANDING_SCRIPT_ID} script tag")
    return str(raw)


def fetch_bundles(client: Optional[httpx.Client] = None) -> List[Item]:
    """Fetch, extract and normalise the current bundles, newest first."""
    html = fetch_html(SOURCE_URL, client=client)
    raw = extract_landing_json(html)
    logger.info("Extracted {} characters of landing page data", len(raw))
    return load_items(raw)
