from __future__ import annotations

"""
Validation and normalisation of the bundles page payload.

The raw text pulled out of the ``landingPage-json-data`` script tag is
parsed as JSON, validated against the pydantic schemas defined in
:mod:`humble_rss.config` and flattened into a single list of
:class:`~humble_rss.config.Item` objects sorted newest first.

Validation is strict: a single malformed product fails the whole
payload, so a change in the upstream page shape surfaces as an error
instead of a silently shortened feed.
"""

import json
from typing import Iterable, List, Optional, Sequence

import pydantic
from loguru import logger

from .config import CATEGORY_ORDER, Item, LandingPage
from .errors import ParseError, ValidationError


# ---------------------------
# Parsing & validation
# ---------------------------

def _format_loc(loc: Sequence) -> str:
    """Render a pydantic error location as ``data.games.mosaic.0.products``."""
    return ".".join(str(part) for part in loc) or "<root>"


def parse_landing_json(raw: str) -> LandingPage:
    """
    Parse and validate the embedded payload.

    Raises ``ParseError`` when ``raw`` is not JSON and ``ValidationError``
    naming every offending field path when the JSON has the wrong shape.
    """
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ParseError(f"Invalid JSON in landing page data: {e}") from e

    try:
        return LandingPage.model_validate(payload)
    except pydantic.ValidationError as e:
        errors = e.errors(include_url=False)
        problems = "; ".join(f"{_format_loc(err['loc'])}: {err['msg']}" for err in errors)
        raise ValidationError(f"Invalid landing page data: {problems}", errors=errors) from e


# ---------------------------
# Flatten / order / filter
# ---------------------------

def flatten_items(page: LandingPage) -> List[Item]:
    """
    Collect every product in category, then section, then product order.

    Categories missing from the payload are skipped.  Duplicates are
    kept as-is.
    """
    items: List[Item] = []
    for name in CATEGORY_ORDER:
        category = getattr(page.data, name)
        if category is None:
            continue
        for section in category.mosaic:
            items.extend(section.products)
    return items


def sort_by_start(items: Iterable[Item]) -> List[Item]:
    # sorted() is stable with reverse=True, so equal starts keep flatten order
    return sorted(items, key=lambda item: item.start, reverse=True)


def load_items(raw: str) -> List[Item]:
    """Full normalisation pass: parse, validate, flatten and sort."""
    page = parse_landing_json(raw)
    items = sort_by_start(flatten_items(page))
    logger.info("Normalised {} items from landing page data", len(items))
    return items


def filter_by_category(items: List[Item], category: Optional[str] = None) -> List[Item]:
    """Return the items tagged ``category``, or ``items`` itself when no category is given."""
    if category is None:
        return items
    return [item for item in items if item.category == category]
