"""Public read operations for the Collected Notes API.

These endpoints need no credentials: any published note or site can be
read by its path.
"""

from __future__ import annotations

from typing import Literal, overload

import httpx

from collected_notes.api.client import CollectedNotesAPIClient
from collected_notes.config import Settings
from collected_notes.models import (
    SITE_VISIBILITIES,
    CollectedNotesError,
    ErrorCode,
    Note,
    SiteWithNotes,
    Visibility,
    from_api_response,
)

ReadFormat = Literal["json", "md", "txt"]

# File-extension suffix served for each read format
READ_SUFFIXES: dict[str, str] = {
    "json": "json",
    "md": "md",
    "txt": "text",
}


@overload
async def read(
    site_path: str,
    note_path: str,
    format: Literal["json"] = "json",
    *,
    settings: Settings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> Note: ...


@overload
async def read(
    site_path: str,
    note_path: str,
    format: Literal["md", "txt"],
    *,
    settings: Settings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> str: ...


async def read(
    site_path: str,
    note_path: str,
    format: ReadFormat = "json",
    *,
    settings: Settings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> Note | str:
    """Read a public note.

    Args:
        site_path: Path of the site (e.g., "esacrosa")
        note_path: Path of the note within the site (e.g., "suerte")
        format: "json" for a parsed Note, "md" for the markdown source,
            "txt" for the plain-text rendering
        settings: Connection settings (default: read from environment)
        transport: Custom httpx transport

    Returns:
        Note for "json"; the response body, unmodified, for "md" and "txt"

    Raises:
        CollectedNotesError: INVALID_INPUT for an unknown format, or if the
            request fails or the JSON body cannot be parsed
    """
    suffix = READ_SUFFIXES.get(format)
    if suffix is None:
        raise CollectedNotesError(
            code=ErrorCode.INVALID_INPUT,
            message=f"Unknown read format: {format!r}. Use one of: json, md, txt.",
            details={"format": format},
        )

    path = f"/{site_path}/{note_path}.{suffix}"
    async with CollectedNotesAPIClient(settings=settings, transport=transport) as client:
        if format == "json":
            data = await client.get(path)
            return from_api_response(Note, data)
        return await client.get_text(path)


async def site(
    site_path: str,
    page: int = 1,
    visibility: Visibility | str = Visibility.PUBLIC,
    *,
    settings: Settings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> SiteWithNotes:
    """Read a public site and one page of its notes.

    Pages are 1-indexed; a page past the end returns an empty note list.

    Args:
        site_path: Path of the site
        page: Page number (default: 1)
        visibility: PUBLIC (default) or PUBLIC_SITE
        settings: Connection settings (default: read from environment)
        transport: Custom httpx transport

    Returns:
        SiteWithNotes holding the site and the page's notes

    Raises:
        CollectedNotesError: INVALID_INPUT for any other visibility, or if
            the request fails
    """
    visibility_value = visibility.value if isinstance(visibility, Visibility) else visibility
    if visibility_value not in {v.value for v in SITE_VISIBILITIES}:
        raise CollectedNotesError(
            code=ErrorCode.INVALID_INPUT,
            message="Site visibility must be 'public' or 'public_site'.",
            details={"visibility": visibility_value},
        )

    params = {"page": page, "visibility": visibility_value}
    async with CollectedNotesAPIClient(settings=settings, transport=transport) as client:
        data = await client.get(f"/{site_path}.json", params=params)

    return from_api_response(SiteWithNotes, data)
