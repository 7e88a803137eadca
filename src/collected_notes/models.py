"""Pydantic data models for collected-notes.

This module defines the data shapes served by the Collected Notes API,
the payloads sent to it, the webhook events it emits, and the error types
raised by this package.

All response models are frozen: values are produced by the remote service
and never mutated client-side. Unknown fields are ignored so that new
server-side fields do not break parsing.
"""

from __future__ import annotations

import json
from enum import Enum
from typing import Annotated, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError


class Visibility(str, Enum):
    """Access-control classification of a note.

    PRIVATE is visible only to the authenticated owner, PUBLIC is listed on
    the site, PUBLIC_UNLISTED is reachable by direct link only, and
    PUBLIC_SITE is served through the API only when a custom domain is set.
    """

    PRIVATE = "private"
    PUBLIC = "public"
    PUBLIC_UNLISTED = "public_unlisted"
    PUBLIC_SITE = "public_site"


# Visibilities accepted by the unauthenticated site listing
SITE_VISIBILITIES = frozenset({Visibility.PUBLIC, Visibility.PUBLIC_SITE})


class LinkKind(str, Enum):
    """Whether a link points inside or outside Collected Notes."""

    INTERNAL = "internal"
    EXTERNAL = "external"


class _APIModel(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")


class Note(_APIModel):
    """A single note.

    Attributes:
        id: Note ID
        site_id: ID of the owning site
        user_id: ID of the owning user
        body: Markdown body
        path: URL path segment (slug)
        headline: Derived summary line
        title: Derived title (from the leading heading)
        created_at: Creation timestamp (ISO 8601)
        updated_at: Last update timestamp (ISO 8601)
        visibility: Access-control classification
        url: Canonical URL
        poster: Poster image URL, if any
        curated: Whether the note is curated
        ordering: Position of the note within its site
    """

    id: int
    site_id: int
    user_id: int
    body: str
    path: str
    headline: str
    title: str
    created_at: str
    updated_at: str
    visibility: Visibility
    url: str
    poster: str | None = None
    curated: bool = False
    ordering: int = 0


class Site(_APIModel):
    """A site: a named collection of notes.

    Attributes:
        id: Site ID
        user_id: ID of the owning user
        name: Display name
        headline: Site headline
        about: About text
        host: Custom host, if configured
        created_at: Creation timestamp (ISO 8601)
        updated_at: Last update timestamp (ISO 8601)
        site_path: URL path segment
        published: Whether the site is published
        tinyletter: Newsletter integration name
        domain: Custom domain
        payment_platform: Payment integration, if any
        is_premium: Whether the site has premium features
        total_notes: Number of public notes
        webhook_url: Webhook endpoint configured for the site
    """

    id: int
    user_id: int
    name: str
    headline: str
    about: str
    host: str | None = None
    created_at: str
    updated_at: str
    site_path: str
    published: bool
    tinyletter: str | None = None
    domain: str | None = None
    payment_platform: str | None = None
    is_premium: bool = False
    total_notes: int | None = None
    webhook_url: str | None = None


class User(_APIModel):
    """The authenticated user's profile."""

    id: int
    email: str
    name: str
    role: str
    banned: bool
    avatar_key: str | None = None
    created_at: str
    updated_at: str


class Link(_APIModel):
    """A link found in a note's body.

    Attributes:
        id: Link ID
        note_id: ID of the note containing the link
        url: Target URL
        kind: Internal or external
        host: Host part of the target URL
        title: Title of the target page
        created_at: Creation timestamp (ISO 8601)
        updated_at: Last update timestamp (ISO 8601)
    """

    id: int
    note_id: int
    url: str
    kind: LinkKind
    host: str
    title: str | None = None
    created_at: str
    updated_at: str


class SiteWithNotes(_APIModel):
    """A site together with one page of its notes."""

    site: Site
    notes: list[Note] = []


class NoteWithBody(_APIModel):
    """A note together with its body rendered as HTML."""

    note: Note
    body: str


class NoteInput(BaseModel):
    """Content sent when creating or updating a note.

    Attributes:
        body: Markdown body; must start with a ``# `` heading
        visibility: Visibility to apply (default: private)
    """

    body: str
    visibility: Visibility = Visibility.PRIVATE

    def to_api_request(self) -> dict[str, object]:
        """Wrap the content the way the notes endpoints expect it."""
        return {"note": {"body": self.body, "visibility": self.visibility.value}}


# =============================================================================
# Webhook events
# =============================================================================


class NotePayload(_APIModel):
    note: Note


class NotesPayload(_APIModel):
    notes: list[Note]


class NoteUpdatedEvent(_APIModel):
    event: Literal["note-updated"]
    data: NotePayload


class NoteCreatedEvent(_APIModel):
    event: Literal["note-created"]
    data: NotePayload


class NoteDeletedEvent(_APIModel):
    event: Literal["note-deleted"]
    data: NotePayload


class NotesReorderedEvent(_APIModel):
    event: Literal["note-reordered"]
    data: NotesPayload


WebhookEvent = Annotated[
    NoteUpdatedEvent | NoteCreatedEvent | NoteDeletedEvent | NotesReorderedEvent,
    Field(discriminator="event"),
]

_webhook_adapter: TypeAdapter[WebhookEvent] = TypeAdapter(WebhookEvent)


# =============================================================================
# Errors
# =============================================================================


class ErrorCode(str, Enum):
    """Error codes for collected-notes errors."""

    INVALID_INPUT = "invalid_input"
    NOT_AUTHENTICATED = "not_authenticated"
    NOT_FOUND = "not_found"
    RATE_LIMITED = "rate_limited"
    API_ERROR = "api_error"
    INVALID_RESPONSE = "invalid_response"


class CollectedNotesError(Exception):
    """Exception for Collected Notes client errors.

    INVALID_INPUT marks a problem with the caller's input, detected before
    any request is sent. The other codes describe what the service returned.
    Transport failures are not wrapped and surface as ``httpx`` exceptions.

    Attributes:
        code: Error code
        message: Human-readable error message
        details: Additional error details
    """

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        details: dict[str, object] | None = None,
    ) -> None:
        """Initialize the error.

        Args:
            code: Error code from ErrorCode enum
            message: Human-readable error message
            details: Additional context (e.g., status code, response body)
        """
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)


BODY_HEADING_PREFIX = "# "
INVALID_BODY_MESSAGE = "The body must start with `# ` to correctly detect the title and generate the slug."


def validate_note_body(body: str) -> None:
    """Check that a note body starts with a markdown heading.

    The service derives the note title and URL slug from that heading.

    Raises:
        CollectedNotesError: INVALID_INPUT if the body has no leading heading
    """
    if not body.startswith(BODY_HEADING_PREFIX):
        raise CollectedNotesError(
            code=ErrorCode.INVALID_INPUT,
            message=INVALID_BODY_MESSAGE,
            details={"body_start": body[:20]},
        )


def parse_webhook_event(
    payload: dict[str, object] | str | bytes,
) -> NoteUpdatedEvent | NoteCreatedEvent | NoteDeletedEvent | NotesReorderedEvent:
    """Validate a webhook payload into its event variant.

    Args:
        payload: Decoded JSON object, or the raw request body

    Returns:
        The matching event model, selected by the ``event`` field

    Raises:
        CollectedNotesError: INVALID_INPUT if the payload is not a known event
    """
    try:
        if isinstance(payload, (str, bytes)):
            return _webhook_adapter.validate_json(payload)
        return _webhook_adapter.validate_python(payload)
    except ValidationError as e:
        event = None
        if isinstance(payload, dict):
            event = payload.get("event")
        raise CollectedNotesError(
            code=ErrorCode.INVALID_INPUT,
            message="Invalid webhook payload.",
            details={"event": event, "errors": json.loads(e.json())},
        ) from e


T = TypeVar("T")


def from_api_response(response_type: type[T], data: object) -> T:
    """Validate decoded JSON from the API into a response type.

    Args:
        response_type: Model or generic alias (e.g., ``list[Note]``)
        data: Decoded JSON

    Returns:
        The validated value

    Raises:
        CollectedNotesError: INVALID_RESPONSE if the data does not match
    """
    try:
        return TypeAdapter(response_type).validate_python(data)
    except ValidationError as e:
        raise CollectedNotesError(
            code=ErrorCode.INVALID_RESPONSE,
            message=f"API response does not match {getattr(response_type, '__name__', response_type)}.",
            details={"errors": json.loads(e.json())},
        ) from e
