from __future__ import annotations

"""
RSS 2.0 rendering for bundle items.

Element text (titles, links, guids, categories) is escaped for the five
XML metacharacters.  Item descriptions are emitted as raw markup inside
a CDATA section so readers render the image and the marketing blurb;
upstream text is trusted never to contain the ``]]>`` terminator.
"""

from datetime import datetime, timezone
from email.utils import format_datetime
from typing import List, Optional, Sequence
from xml.sax.saxutils import escape

from .config import FEED_DESCRIPTION, FEED_LANGUAGE, FEED_TITLE_ALL, SOURCE_URL, Item

_XML_QUOTES = {'"': "&quot;", "'": "&apos;"}

# Fixed English names so the output does not depend on the host locale.
MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)


def escape_xml(text: str) -> str:
    return escape(text, _XML_QUOTES)


def rfc1123(dt: datetime) -> str:
    """Format ``dt`` as an RFC 1123 date in GMT, e.g. ``Mon, 01 Jan 2024 00:00:00 GMT``."""
    return format_datetime(dt.astimezone(timezone.utc), usegmt=True)


def display_date(dt: datetime) -> str:
    """Long US-style date such as ``January 10, 2024`` (UTC)."""
    dt = dt.astimezone(timezone.utc)
    return f"{MONTH_NAMES[dt.month - 1]} {dt.day}, {dt.year}"


def feed_title(category: Optional[str] = None) -> str:
    if category is None:
        return FEED_TITLE_ALL
    return f"Humble Bundle - {category[:1].upper()}{category[1:]} Bundles"


def _render_item(item: Item) -> str:
    description = (
        f'<img src="{item.image}" /><br/><br/>{item.description}'
        f"<br/><br/><strong>Ends:</strong> {display_date(item.end)}"
    )
    return f"""    <item>
      <title>{escape_xml(item.title)}</title>
      <link>{escape_xml(item.link)}</link>
      <description><![CDATA[{description}]]></description>
      <pubDate>{rfc1123(item.start)}</pubDate>
      <guid isPermaLink="false">{escape_xml(item.machine_name)}</guid>
      <category>{escape_xml(item.category)}</category>
    </item>"""


def render_rss(
    items: Sequence[Item],
    title: str,
    canonical_url: str,
    now: Optional[datetime] = None,
) -> str:
    """
    Render ``items`` as an RSS 2.0 document.

    Parameters
    ----------
    items : Sequence[Item]
        Items in the order they should appear.
    title : str
        Channel title.
    canonical_url : str
        URL the feed is served from, reported via ``atom:link rel="self"``.
    now : datetime, optional
        Build time; defaults to the current UTC time.
    """
    if now is None:
        now = datetime.now(timezone.utc)
    entries: List[str] = [_render_item(item) for item in items]
    body = "\n".join(entries)
    return f"""<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0" xmlns:atom="http://www.w3.org/2005/Atom">
  <channel>
    <title>{escape_xml(title)}</title>
    <link>{SOURCE_URL}</link>
    <description>{FEED_DESCRIPTION}</description>
    <language>{FEED_LANGUAGE}</language>
    <lastBuildDate>{rfc1123(now)}</lastBuildDate>
    <atom:link href="{escape_xml(canonical_url)}" rel="self" type="application/rss+xml"/>
{body}
  </channel>
</rss>"""
