"""
Top-level package for the unofficial Humble Bundle RSS service.

This package contains modules for fetching the Humble Bundle bundles
page, extracting and validating the JSON payload embedded in it,
rendering RSS feeds and an HTML index from the validated items, and
serving those documents over a small FastAPI application.  There are
no side-effects on import; every request rebuilds its data from a
fresh upstream fetch.
"""
from __future__ import annotations

__version__ = "1.0.0"
