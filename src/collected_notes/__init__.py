"""Async client for the Collected Notes API.

Public notes and sites can be read without credentials::

    note = await read("esacrosa", "suerte")

Authenticated operations go through a client::

    cn = collected_notes("you@example.com", "api-token")
    sites = await cn.sites()
"""

from collected_notes.api.client import CollectedNotesAPIClient
from collected_notes.api.notes import CollectedNotes, collected_notes
from collected_notes.api.public import read, site
from collected_notes.config import Credentials, Settings
from collected_notes.models import (
    CollectedNotesError,
    ErrorCode,
    Link,
    LinkKind,
    Note,
    NoteCreatedEvent,
    NoteDeletedEvent,
    NoteInput,
    NotesReorderedEvent,
    NoteUpdatedEvent,
    NoteWithBody,
    Site,
    SiteWithNotes,
    User,
    Visibility,
    WebhookEvent,
    parse_webhook_event,
)

__version__ = "0.1.0"

__all__ = [
    "CollectedNotes",
    "CollectedNotesAPIClient",
    "CollectedNotesError",
    "Credentials",
    "ErrorCode",
    "Link",
    "LinkKind",
    "Note",
    "NoteCreatedEvent",
    "NoteDeletedEvent",
    "NoteInput",
    "NoteUpdatedEvent",
    "NoteWithBody",
    "NotesReorderedEvent",
    "Settings",
    "Site",
    "SiteWithNotes",
    "User",
    "Visibility",
    "WebhookEvent",
    "collected_notes",
    "parse_webhook_event",
    "read",
    "site",
]
