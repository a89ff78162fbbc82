from __future__ import annotations

"""
HTML index page and favicon.

The page lists the available feeds and every current item, coloured by
how soon the item ends.  Interpolated text is escaped for ``& < > "``
only; apostrophes are left alone here, unlike in the RSS output.
"""

from datetime import datetime, timezone
from html import escape
from typing import List, Optional, Sequence

from .config import FEED_CATEGORIES, PROJECT_URL, SOURCE_URL, Item

URGENT_HOURS = 24
SOON_HOURS = 24 * 7

# Derived from https://commons.wikimedia.org/wiki/File:Humble_Bundle_H_logo_red.svg
FAVICON_SVG = """<?xml version="1.0" encoding="UTF-8"?>
<svg width="48" height="48" viewBox="0 0 1024 1024" version="1.1" xmlns="http://www.w3.org/2000/svg">
  <circle cx="50%" cy="50%" r="50%" fill="#D0011B"/>
  <path transform="scale(0.7,0.7) translate(220, 225)" d="M765.201172,820.589844 C620.475426,820.589844 843.283203,0.189453125 843.283203,0.189453125 L694.142578,5.68434189e-14 C694.142578,5.68434189e-14 633.090481,193.090536 592.811289,407.652717 L464.271164,407.652717 C467.639745,363.532521 469.262415,318.878282 468.522971,274.491064 C462.730655,-78.7375255 255.842002,-13.3140749 163.226562,67.7578125 C75.1710315,144.824375 1.42382812,291.240234 0,403.996094 C14.0273437,403.3125 69.4453125,403.074219 69.4453125,403.074219 C69.4453125,403.074219 115.528161,192.837891 260.253906,192.837891 C404.959112,192.837891 181.810547,1013.25 181.810547,1013.25 L331.015625,1013.36133 C331.015625,1013.36133 408.132049,793.724753 446.480469,548.455078 L569.224609,547.75 C562.076645,611.218997 559.803302,681.30885 560.850849,746.400517 C566.663705,1099.62911 772.743935,1023.82674 865.359375,942.775391 C957.974815,861.703503 1027.08594,690.517578 1026.23242,608.322266 C1026.3457,608.228516 955.882812,608.892578 955.037109,608.875 C955.279297,615.365234 909.906377,820.589844 765.201172,820.589844 Z" fill="white"/>
</svg>"""


def escape_html(text: str) -> str:
    return escape(text, quote=False).replace('"', "&quot;")


def urgency_tier(end: datetime, now: datetime) -> str:
    """
    Classify an item by hours left until ``end``.

    ``urgent`` for (0, 24], ``soon`` for (24, 168], ``ok`` otherwise,
    including items that have already ended.
    """
    hours_left = (end - now).total_seconds() / 3600
    if 0 < hours_left <= URGENT_HOURS:
        return "urgent"
    if URGENT_HOURS < hours_left <= SOON_HOURS:
        return "soon"
    return "ok"


def _render_entry(item: Item, now: datetime) -> str:
    tier = urgency_tier(item.end, now)
    title = escape_html(item.title)
    return (
        f'      <li><span class="entry {tier}"><span class="cat">[{escape_html(item.category)}]</span> '
        f'<a href="{escape_html(item.link)}" title="{title}" target="_blank" '
        f'rel="noopener noreferrer nofollow">{title}</a></span></li>'
    )


def render_homepage(items: Sequence[Item], now: Optional[datetime] = None) -> str:
    """Render the index page for ``items`` (unfiltered), using ``now`` for urgency."""
    if now is None:
        now = datetime.now(timezone.utc)
    entries: List[str] = [_render_entry(item, now) for item in items]
    feed_paths = ["/rss"] + [f"/{c}" for c in FEED_CATEGORIES]
    feed_links = "\n".join(f'    <a target="_blank" href="{p}">{p}</a>' for p in feed_paths)
    body = "\n".join(entries)
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>Humble Bundle RSS Feeds</title>
  <meta name="description" content="Unofficial RSS feeds for current Humble Bundle offerings.">
  <link rel="alternate" type="application/rss+xml" title="Humble Bundle RSS" href="/rss">
  <link rel="icon" type="image/svg+xml" href="/favicon.ico">
  <style>
    :root {{
      --bg: #fafafa;
      --fg: #222;
      --muted: #666;
      --link: #0066cc;
      --accent: #b33;
      --border: #ccc;
      --green: #1a7a1a;
      --yellow: #7a6a00;
      --red: #b33;
    }}
    @media (prefers-color-scheme: dark) {{
      :root {{
        --bg: #1a1a1a;
        --fg: #e0e0e0;
        --muted: #888;
        --link: #6cf;
        --accent: #e66;
        --border: #444;
        --green: #5a5;
        --yellow: #ca3;
        --red: #e55;
      }}
    }}
    * {{ box-sizing: border-box; }}
    body {{
      font-family: ui-monospace, "Cascadia Code", "Source Code Pro", Menlo, Consolas, monospace;
      font-size: 14px;
      line-height: 1.6;
      background: var(--bg);
      color: var(--fg);
      max-width: 72ch;
      margin: 0 auto;
      padding: 2rem 1rem;
    }}
    h1 {{ font-size: 1em; font-weight: bold; margin: 0 0 0.5rem 0; }}
    h2 {{ font-size: 1em; font-weight: bold; margin: 1.5rem 0 0.5rem 0; color: var(--accent); }}
    p {{ margin: 0.5rem 0; }}
    a {{ color: var(--link); }}
    a:visited {{ color: var(--link); opacity: 0.8; }}
    .meta {{ color: var(--muted); }}
    .feeds {{ margin: 1rem 0; }}
    .feeds a {{ margin-right: 1.5em; }}
    ol {{ padding-left: 2.5em; margin: 0.5rem 0; }}
    li {{ padding: 0.15rem 0; }}
    .entry {{ display: block; white-space: nowrap; overflow: hidden; text-overflow: ellipsis; }}
    .ok a {{ color: var(--green); }}
    .soon a {{ color: var(--yellow); }}
    .urgent a {{ color: var(--red); }}
  </style>
</head>
<body>
  <h1>HUMBLE BUNDLE RSS FEEDS</h1>
  <p>Unofficial RSS feeds for current Humble Bundle offerings.</p>

  <h2>FEEDS</h2>
  <div class="feeds">
{feed_links}
  </div>
  <p class="meta">Add any feed URL to your RSS reader.</p>

  <h2>CURRENT BUNDLES</h2>
  <div data-nosnippet>
    <ol>
{body}
    </ol>
  </div>

  <p class="meta">Data from <a target="_blank" href="{SOURCE_URL}">humblebundle.com</a></p>
  <p class="meta">See <a target="_blank" href="{PROJECT_URL}">GitHub</a> for bug reports and pull requests.</p>
</body>
</html>"""
