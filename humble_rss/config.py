"""
Configuration for the Humble Bundle RSS service.
"""

import os
from datetime import datetime, timezone
from typing import List, Optional, Tuple

from pydantic import AnyUrl, BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, field_validator

# Upstream
HUMBLE_ORIGIN = "https://www.humblebundle.com"
SOURCE_URL = f"{HUMBLE_ORIGIN}/bundles"
LANDING_SCRIPT_ID = "landingPage-json-data"
LANDING_SCRIPT_TYPE = "application/json"

# Flattening walks the payload in this order; it also decides ties when sorting.
CATEGORY_ORDER: Tuple[str, ...] = ("books", "games", "software")
# Order the filtered feeds are listed in on the homepage and in the CLI.
FEED_CATEGORIES: Tuple[str, ...] = ("games", "books", "software")

# Server
# Empty values count as unset.
PORT = int(os.getenv("PORT") or "3000")
HOST = os.getenv("HOST") or "0.0.0.0"
LOG_LEVEL = os.getenv("LOG_LEVEL") or "INFO"
PUBLIC_BASE_URL = os.getenv("PUBLIC_BASE_URL") or f"http://localhost:{PORT}"
CACHE_CONTROL = "public, max-age=3600"

# HTTP.  No timeout unless FETCH_TIMEOUT is set: a stalled upstream stalls the request.
_fetch_timeout_raw = (os.getenv("FETCH_TIMEOUT") or "").strip()
FETCH_TIMEOUT: Optional[float] = float(_fetch_timeout_raw) if _fetch_timeout_raw else None
PROJECT_URL = "https://github.com/zeen/humblebundle-rss"
HTTP_USER_AGENT = f"humble-rss/1.0 (+{PROJECT_URL})"

# Feed channel
FEED_DESCRIPTION = "Current bundles available on Humble Bundle"
FEED_LANGUAGE = "en-us"
FEED_TITLE_ALL = "Humble Bundle - All Bundles"


def _as_utc(value: datetime) -> datetime:
    # Upstream timestamps usually carry no offset; they are UTC.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


_ABSOLUTE_URL = TypeAdapter(AnyUrl)


# Pydantic schemas for the landingPage-json-data payload
class Item(BaseModel):
    """One offering on the bundles page (a "product" upstream)."""

    model_config = ConfigDict(populate_by_name=True)

    machine_name: str
    title: str = Field(alias="tile_name")
    url: str = Field(alias="product_url")
    description: str = Field(alias="detailed_marketing_blurb")
    image: str = Field(alias="tile_image")
    start: datetime = Field(alias="start_date|datetime")
    end: datetime = Field(alias="end_date|datetime")
    category: str = Field(alias="tile_stamp")

    @field_validator("image")
    @classmethod
    def _image_is_absolute_url(cls, value: str) -> str:
        try:
            _ABSOLUTE_URL.validate_python(value)
        except ValidationError as e:
            raise ValueError(f"invalid URL {value!r}") from e
        # keep the upstream spelling, AnyUrl would normalise it
        return value

    @field_validator("start", "end", mode="before")
    @classmethod
    def _require_string(cls, value):
        if not isinstance(value, str):
            raise ValueError("expected a date-time string")
        return value

    @field_validator("start", "end")
    @classmethod
    def _normalise_tz(cls, value: datetime) -> datetime:
        return _as_utc(value)

    @property
    def link(self) -> str:
        return f"{HUMBLE_ORIGIN}{self.url}"


class Section(BaseModel):
    products: List[Item]


class Category(BaseModel):
    # upstream calls the list of sections a "mosaic"
    mosaic: List[Section]


class LandingData(BaseModel):
    books: Optional[Category] = None
    games: Optional[Category] = None
    software: Optional[Category] = None


class LandingPage(BaseModel):
    data: LandingData
