"""API module for collected-notes.

Provides the HTTP client, the public read functions and the
authenticated client.
"""

from collected_notes.api.client import CollectedNotesAPIClient
from collected_notes.api.notes import CollectedNotes, collected_notes
from collected_notes.api.public import read, site

__all__ = [
    "CollectedNotes",
    "CollectedNotesAPIClient",
    "collected_notes",
    "read",
    "site",
]
