"""Failures raised while building a feed from the upstream page.

Every error here is terminal for the request that raised it.  The HTTP
layer and the CLI catch :class:`HumbleRssError`, log it and report its
message; nothing below them retries.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional


class HumbleRssError(RuntimeError):
    """Base class for pipeline failures."""


class FetchError(HumbleRssError):
    """The upstream page could not be retrieved (transport error or non-2xx)."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ExtractionError(HumbleRssError):
    """The embedded JSON script element is missing from the page."""


class ParseError(HumbleRssError):
    """The embedded payload is not valid JSON."""


class ValidationError(HumbleRssError):
    """The payload is JSON but does not have the expected shape."""

    def __init__(self, message: str, errors: Optional[List[Dict[str, Any]]] = None) -> None:
        super().__init__(message)
        self.errors = errors or []
