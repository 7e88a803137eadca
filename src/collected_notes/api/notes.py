"""Authenticated operations for the Collected Notes API.

Provides the CollectedNotes client: sites, notes CRUD, reordering, search,
rendered bodies, link extraction and the user profile, all sent with the
``Authorization: <email> <token>`` header.
"""

from __future__ import annotations

from typing import Any, Literal, overload

import httpx

from collected_notes.api import public
from collected_notes.api.client import CollectedNotesAPIClient
from collected_notes.config import Credentials, Settings
from collected_notes.models import (
    CollectedNotesError,
    ErrorCode,
    Link,
    Note,
    NoteInput,
    NoteWithBody,
    Site,
    SiteWithNotes,
    User,
    Visibility,
    from_api_response,
    validate_note_body,
)

LinksFormat = Literal["json", "html"]


class CollectedNotes:
    """Client for the authenticated Collected Notes endpoints.

    Holds only immutable credentials and settings; every operation opens
    its own HTTP client for a single request, so operations can run
    concurrently with ``asyncio.gather``.

    Attributes:
        credentials: Email and API token pair
        settings: Base URL and timeout
    """

    def __init__(
        self,
        credentials: Credentials,
        settings: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            credentials: Email and API token pair
            settings: Connection settings (default: read from environment)
            transport: Custom httpx transport (e.g., httpx.MockTransport in tests)
        """
        self.credentials = credentials
        self.settings = settings
        self._transport = transport

    def __repr__(self) -> str:
        return f"CollectedNotes(email={self.credentials.email!r})"

    def _api(self) -> CollectedNotesAPIClient:
        return CollectedNotesAPIClient(self.credentials, self.settings, self._transport)

    async def sites(self) -> list[Site]:
        """List the sites owned by the authenticated user."""
        async with self._api() as client:
            data = await client.get("/sites")
        return from_api_response(list[Site], data)

    async def latest_notes(
        self,
        site_id: int,
        page: int = 1,
        visibility: Visibility | None = None,
    ) -> list[Note]:
        """List one page of a site's notes, including private and unlisted ones.

        Args:
            site_id: Site ID
            page: Page number (default: 1)
            visibility: Only return notes with this visibility (optional)
        """
        params: dict[str, Any] = {"page": page}
        if visibility is not None:
            params["visibility"] = Visibility(visibility).value

        async with self._api() as client:
            data = await client.get(f"/sites/{site_id}/notes", params=params)
        return from_api_response(list[Note], data)

    async def create(self, note: NoteInput, site_id: int | None = None) -> Note:
        """Create a note.

        Without a site, the note is added to the user's first site.

        Args:
            note: Body and visibility of the new note
            site_id: Site to create the note in (optional)

        Returns:
            The created Note as served by the API

        Raises:
            CollectedNotesError: INVALID_INPUT if the body does not start
                with ``# `` (no request is sent), or if the request fails
        """
        validate_note_body(note.body)
        path = f"/sites/{site_id}/notes" if site_id is not None else "/notes/add"

        async with self._api() as client:
            data = await client.post(path, json=note.to_api_request())
        return from_api_response(Note, data)

    async def update(self, site_id: int, note_id: int, note: NoteInput) -> Note:
        """Replace the body and visibility of an existing note.

        Raises:
            CollectedNotesError: INVALID_INPUT if the body does not start
                with ``# `` (no request is sent), or if the request fails
        """
        validate_note_body(note.body)

        async with self._api() as client:
            data = await client.post(f"/sites/{site_id}/notes/{note_id}", json=note.to_api_request())
        return from_api_response(Note, data)

    async def destroy(self, site_id: int, note_id: int) -> httpx.Response:
        """Delete a note.

        The response is returned as-is, whatever its status or body, so
        callers can check ``response.is_success``.
        """
        async with self._api() as client:
            return await client.delete(f"/sites/{site_id}/notes/{note_id}")

    async def me(self) -> User:
        """Get the authenticated user's profile."""
        async with self._api() as client:
            data = await client.get("/accounts/me")
        return from_api_response(User, data)

    async def reorder(self, site_id: int, note_ids: list[int]) -> list[int]:
        """Set the order of a site's notes.

        Args:
            site_id: Site ID
            note_ids: Note IDs in the desired order

        Returns:
            The order as persisted by the service
        """
        async with self._api() as client:
            data = await client.post(f"/sites/{site_id}/notes/reorder", json={"ids": list(note_ids)})
        return from_api_response(list[int], data)

    async def search(
        self,
        site: int | str,
        term: str,
        page: int = 1,
        visibility: Visibility | None = None,
    ) -> list[Note]:
        """Search a site's notes.

        Args:
            site: Site ID or site path
            term: Free-text search term
            page: Page number (default: 1)
            visibility: Only return notes with this visibility (optional)
        """
        params: dict[str, Any] = {"term": term, "page": page}
        if visibility is not None:
            params["visibility"] = Visibility(visibility).value

        async with self._api() as client:
            data = await client.get(f"/sites/{site}/notes/search", params=params)
        return from_api_response(list[Note], data)

    async def body(self, site_id: int, note_id: int) -> NoteWithBody:
        """Get a note together with its body rendered as HTML."""
        async with self._api() as client:
            data = await client.get(f"/sites/{site_id}/notes/{note_id}/body")
        return from_api_response(NoteWithBody, data)

    @overload
    async def links(self, site_id: int, note_id: int, format: Literal["json"] = "json") -> list[Link]: ...

    @overload
    async def links(self, site_id: int, note_id: int, format: Literal["html"]) -> str: ...

    async def links(self, site_id: int, note_id: int, format: LinksFormat = "json") -> list[Link] | str:
        """Get the links found in a note.

        Args:
            site_id: Site ID
            note_id: Note ID
            format: "json" for Link models, "html" for a rendered HTML fragment

        Raises:
            CollectedNotesError: INVALID_INPUT for an unknown format, or if
                the request fails
        """
        path = f"/sites/{site_id}/notes/{note_id}/links"
        if format == "json":
            async with self._api() as client:
                data = await client.get(f"{path}.json")
            return from_api_response(list[Link], data)
        if format == "html":
            async with self._api() as client:
                return await client.get_text(path)
        raise CollectedNotesError(
            code=ErrorCode.INVALID_INPUT,
            message=f"Unknown links format: {format!r}. Use 'json' or 'html'.",
            details={"format": format},
        )

    @overload
    async def read(self, site_path: str, note_path: str, format: Literal["json"] = "json") -> Note: ...

    @overload
    async def read(self, site_path: str, note_path: str, format: Literal["md", "txt"]) -> str: ...

    async def read(self, site_path: str, note_path: str, format: public.ReadFormat = "json") -> Note | str:
        """Read a public note; see :func:`collected_notes.api.public.read`."""
        return await public.read(site_path, note_path, format, settings=self.settings, transport=self._transport)  # type: ignore[call-overload]

    async def site(
        self,
        site_path: str,
        page: int = 1,
        visibility: Visibility | str = Visibility.PUBLIC,
    ) -> SiteWithNotes:
        """Read a public site; see :func:`collected_notes.api.public.site`."""
        return await public.site(site_path, page, visibility, settings=self.settings, transport=self._transport)


def collected_notes(
    email: str,
    token: str,
    settings: Settings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> CollectedNotes:
    """Create an authenticated client.

    Args:
        email: Account email
        token: API token from the account settings page
        settings: Connection settings (default: read from environment)
        transport: Custom httpx transport

    Returns:
        CollectedNotes client bound to the credentials
    """
    return CollectedNotes(Credentials(email=email, token=token), settings, transport)
