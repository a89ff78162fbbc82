import json
import os
import sys

import pytest

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))


def _product(
    machine_name,
    title=None,
    stamp="games",
    start="2024-01-01T00:00:00Z",
    end="2024-01-10T00:00:00Z",
    url=None,
    blurb="<p>Pay what you want.</p>",
    image="https://hb.imgix.net/tile.png",
):
    return {
        "machine_name": machine_name,
        "tile_name": title or machine_name.title(),
        "product_url": url or f"/{stamp}/{machine_name}",
        "detailed_marketing_blurb": blurb,
        "tile_image": image,
        "start_date|datetime": start,
        "end_date|datetime": end,
        "tile_stamp": stamp,
    }


def _payload(books=None, games=None, software=None):
    """Each argument is a list of sections, each section a list of products."""
    data = {}
    for key, sections in (("books", books), ("games", games), ("software", software)):
        if sections is not None:
            data[key] = {"mosaic": [{"products": list(section)} for section in sections]}
    return {"data": data}


def _page_html(payload):
    body = payload if isinstance(payload, str) else json.dumps(payload)
    return (
        "<!DOCTYPE html><html><head><title>Humble Bundle</title></head><body>"
        '<div id="site-xhr-data"></div>'
        f'<script id="landingPage-json-data" type="application/json">{body}</script>'
        "<script>window.models = {};</script>"
        "</body></html>"
    )


@pytest.fixture()
def product():
    return _product


@pytest.fixture()
def payload():
    return _payload


@pytest.fixture()
def page_html():
    return _page_html


@pytest.fixture()
def sku1_html():
    """Single games item used by the end-to-end feed checks."""
    return _page_html(
        _payload(
            games=[[_product(
                "sku1",
                title="Cool & Fun Game",
                url="/games/sku1",
                start="2024-01-01T00:00:00Z",
                end="2024-01-10T00:00:00Z",
            )]]
        )
    )
