import xml.etree.ElementTree as ET

import pytest
from fastapi.testclient import TestClient

from humble_rss import bundle_fetch
from humble_rss.api import app
from humble_rss.errors import FetchError

CACHE = "public, max-age=3600"


@pytest.fixture()
def upstream(monkeypatch):
    """Replace the upstream fetch; set ``state["html"]`` or ``state["error"]``."""
    state = {"html": "", "error": None, "calls": 0}

    def fake_fetch_html(url=bundle_fetch.SOURCE_URL, client=None):
        state["calls"] += 1
        if state["error"] is not None:
            raise state["error"]
        return state["html"]

    monkeypatch.setattr(bundle_fetch, "fetch_html", fake_fetch_html)
    return state


@pytest.fixture()
def client():
    return TestClient(app)


def _items(xml_text):
    return ET.fromstring(xml_text.encode("utf-8")).find("channel").findall("item")


def test_games_feed_end_to_end(client, upstream, sku1_html):
    upstream["html"] = sku1_html
    resp = client.get("/games")
    assert resp.status_code == 200
    assert resp.headers["content-type"] == "application/rss+xml; charset=utf-8"
    assert resp.headers["cache-control"] == CACHE
    items = _items(resp.text)
    assert len(items) == 1
    entry = items[0]
    assert entry.findtext("link") == "https://www.humblebundle.com/games/sku1"
    assert entry.findtext("guid") == "sku1"
    assert entry.findtext("category") == "games"
    assert "<title>Cool &amp; Fun Game</title>" in resp.text
    assert "<title>Humble Bundle - Games Bundles</title>" in resp.text


def test_books_feed_same_payload_is_empty(client, upstream, sku1_html):
    upstream["html"] = sku1_html
    resp = client.get("/books")
    assert resp.status_code == 200
    assert _items(resp.text) == []
    assert "<title>Humble Bundle - Books Bundles</title>" in resp.text


def test_rss_feed_is_unfiltered(client, upstream, product, payload, page_html):
    upstream["html"] = page_html(payload(
        books=[[product("b1", stamp="books")]],
        games=[[product("g1")]],
        software=[[product("s1", stamp="software")]],
    ))
    resp = client.get("/rss")
    assert resp.status_code == 200
    assert len(_items(resp.text)) == 3
    assert "<title>Humble Bundle - All Bundles</title>" in resp.text


def test_software_feed_filters(client, upstream, product, payload, page_html):
    upstream["html"] = page_html(payload(
        games=[[product("g1")]],
        software=[[product("s1", stamp="software"), product("s2", stamp="software")]],
    ))
    guids = [i.findtext("guid") for i in _items(client.get("/software").text)]
    assert guids == ["s1", "s2"]


def test_feed_self_link_is_request_url(client, upstream, sku1_html):
    upstream["html"] = sku1_html
    resp = client.get("/games?utm_source=x")
    assert 'href="http://testserver/games"' in resp.text


def test_each_request_fetches_again(client, upstream, sku1_html):
    upstream["html"] = sku1_html
    client.get("/rss")
    client.get("/rss")
    client.get("/")
    assert upstream["calls"] == 3


def test_homepage(client, upstream, sku1_html):
    upstream["html"] = sku1_html
    resp = client.get("/")
    assert resp.status_code == 200
    assert resp.headers["content-type"] == "text/html; charset=utf-8"
    assert resp.headers["cache-control"] == CACHE
    assert "Cool &amp; Fun Game" in resp.text
    assert 'href="/software"' in resp.text


def test_favicon(client, upstream):
    resp = client.get("/favicon.ico")
    assert resp.status_code == 200
    assert resp.headers["content-type"] == "image/svg+xml"
    assert resp.headers["cache-control"] == CACHE
    assert resp.text.startswith('<?xml version="1.0" encoding="UTF-8"?>\n<svg')
    assert upstream["calls"] == 0


@pytest.mark.parametrize("path", ["/nope", "/rss/", "/Games", "/docs", "/openapi.json"])
def test_unknown_paths_are_404(client, upstream, path):
    resp = client.get(path)
    assert resp.status_code == 404
    assert resp.text == "Not Found"
    assert upstream["calls"] == 0


def test_missing_marker_returns_500_for_feed(client, upstream):
    upstream["html"] = "<html><body>maintenance</body></html>"
    resp = client.get("/rss")
    assert resp.status_code == 500
    assert resp.text == "Error generating RSS feed: Could not find landingPage-json-data script tag"
    assert "content-type" not in resp.headers
    assert "cache-control" not in resp.headers


def test_missing_marker_returns_500_for_homepage(client, upstream):
    upstream["html"] = "<html><body>maintenance</body></html>"
    resp = client.get("/")
    assert resp.status_code == 500
    assert resp.headers["content-type"].startswith("text/plain")
    assert resp.text == "Error: Could not find landingPage-json-data script tag"


def test_upstream_failure_message_includes_status(client, upstream):
    upstream["error"] = FetchError("Failed to fetch Humble Bundle page: 503", status_code=503)
    resp = client.get("/games")
    assert resp.status_code == 500
    assert "503" in resp.text


def test_invalid_payload_returns_500(client, upstream, page_html):
    upstream["html"] = page_html('{"data": {"games": {"mosaic": [{"products": [{}]}]}}}')
    resp = client.get("/games")
    assert resp.status_code == 500
    assert "data.games.mosaic.0.products.0.machine_name" in resp.text


def test_error_does_not_leak_into_next_request(client, upstream, sku1_html):
    upstream["html"] = "<html></html>"
    assert client.get("/rss").status_code == 500
    upstream["html"] = sku1_html
    assert client.get("/rss").status_code == 200


def test_head_rss_is_served(client, upstream, sku1_html):
    upstream["html"] = sku1_html
    resp = client.head("/rss")
    assert resp.status_code == 200
    assert resp.headers["content-type"] == "application/rss+xml; charset=utf-8"
    assert resp.headers["cache-control"] == CACHE


@pytest.mark.parametrize("path, content_type", [
    ("/", "text/html; charset=utf-8"),
    ("/favicon.ico", "image/svg+xml"),
])
def test_head_other_routes(client, upstream, sku1_html, path, content_type):
    upstream["html"] = sku1_html
    resp = client.head(path)
    assert resp.status_code == 200
    assert resp.headers["content-type"] == content_type


@pytest.mark.parametrize("method", ["POST", "PUT", "DELETE", "OPTIONS"])
def test_routes_answer_any_method(client, upstream, sku1_html, method):
    upstream["html"] = sku1_html
    resp = client.request(method, "/games")
    assert resp.status_code == 200
    assert len(_items(resp.text)) == 1


def test_unknown_path_is_404_for_any_method(client, upstream):
    resp = client.post("/nope")
    assert resp.status_code == 404
    assert resp.text == "Not Found"
