"""Feed generation for a Collected Notes site.

Builds an RSS 2.0 or JSON Feed 1.1 document from a site's first page of
notes, using the HTML bodies rendered by the service.
"""

from __future__ import annotations

import asyncio
import json
from datetime import datetime
from email.utils import format_datetime
from typing import Literal
from xml.sax.saxutils import escape

from collected_notes.api.notes import CollectedNotes
from collected_notes.config import get_settings
from collected_notes.models import CollectedNotesError, ErrorCode, NoteWithBody, Site, User
from collected_notes.utils.logging import get_logger

logger = get_logger("feed")

FeedFormat = Literal["rss", "json"]

JSON_FEED_VERSION = "https://jsonfeed.org/version/1.1"


def _site_url(site: Site, base_url: str) -> str:
    if site.domain:
        return f"https://{site.domain}"
    return f"{base_url}/{site.site_path}"


def _rfc822(timestamp: str) -> str:
    try:
        parsed = datetime.fromisoformat(timestamp.replace("Z", "+00:00"))
    except ValueError as e:
        raise CollectedNotesError(
            code=ErrorCode.INVALID_RESPONSE,
            message=f"Unrecognized timestamp: {timestamp!r}",
            details={"timestamp": timestamp},
        ) from e
    return format_datetime(parsed)


def render_rss(site: Site, user: User, entries: list[NoteWithBody], base_url: str) -> str:
    """Render an RSS 2.0 document."""
    items = []
    for entry in entries:
        note = entry.note
        items.append(
            "    <item>\n"
            f"      <title>{escape(note.title)}</title>\n"
            f"      <link>{escape(note.url)}</link>\n"
            f'      <guid isPermaLink="true">{escape(note.url)}</guid>\n'
            f"      <pubDate>{_rfc822(note.created_at)}</pubDate>\n"
            f"      <description>{escape(note.headline)}</description>\n"
            f"      <content:encoded><![CDATA[{entry.body.replace(']]>', ']]]]><![CDATA[>')}]]></content:encoded>\n"
            "    </item>"
        )

    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        '<rss version="2.0" xmlns:content="http://purl.org/rss/1.0/modules/content/">\n'
        "  <channel>\n"
        f"    <title>{escape(site.name)}</title>\n"
        f"    <link>{escape(_site_url(site, base_url))}</link>\n"
        f"    <description>{escape(site.headline)}</description>\n"
        f"    <managingEditor>{escape(user.email)} ({escape(user.name)})</managingEditor>\n"
        f"    <lastBuildDate>{_rfc822(site.updated_at)}</lastBuildDate>\n"
        + "".join(f"{item}\n" for item in items)
        + "  </channel>\n"
        "</rss>\n"
    )


def render_json_feed(site: Site, user: User, entries: list[NoteWithBody], base_url: str) -> str:
    """Render a JSON Feed 1.1 document."""
    site_url = _site_url(site, base_url)
    feed = {
        "version": JSON_FEED_VERSION,
        "title": site.name,
        "home_page_url": site_url,
        "description": site.headline,
        "authors": [{"name": user.name}],
        "items": [
            {
                "id": str(entry.note.id),
                "url": entry.note.url,
                "title": entry.note.title,
                "summary": entry.note.headline,
                "content_html": entry.body,
                "date_published": entry.note.created_at,
                "date_modified": entry.note.updated_at,
                **({"image": entry.note.poster} if entry.note.poster else {}),
            }
            for entry in entries
        ],
    }
    return json.dumps(feed, ensure_ascii=False, indent=2)


async def build_feed(client: CollectedNotes, site_path: str, format: FeedFormat = "rss") -> str:
    """Build a feed for a site.

    Fetches the site with its first page of notes and the user profile
    concurrently, then every note's rendered body concurrently. A single
    failed request fails the whole feed.

    Args:
        client: Authenticated client (the rendered-body endpoint needs credentials)
        site_path: Path of the site
        format: "rss" or "json"

    Returns:
        The feed document as a string

    Raises:
        CollectedNotesError: INVALID_INPUT for an unknown format, or if any request fails
    """
    if format not in ("rss", "json"):
        raise CollectedNotesError(
            code=ErrorCode.INVALID_INPUT,
            message=f"Unknown feed format: {format!r}. Use 'rss' or 'json'.",
            details={"format": format},
        )

    site_with_notes, user = await asyncio.gather(client.site(site_path), client.me())
    site = site_with_notes.site

    entries = await asyncio.gather(*(client.body(site.id, note.id) for note in site_with_notes.notes))
    logger.debug("Building %s feed for %s with %d notes", format, site_path, len(entries))

    base_url = (client.settings or get_settings()).base_url
    if format == "json":
        return render_json_feed(site, user, list(entries), base_url)
    return render_rss(site, user, list(entries), base_url)
