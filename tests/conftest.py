"""Pytest configuration and shared fixtures for collected-notes tests.

This module provides credentials, settings, and recording httpx transports
that stand in for the network.
"""

from __future__ import annotations

from collections.abc import Callable

import pytest

from collected_notes.api.notes import CollectedNotes
from collected_notes.config import Credentials, Settings
from tests.helpers import BASE_URL, Handler, RecordingTransport

# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def settings() -> Settings:
    return Settings(base_url=BASE_URL, timeout=5)


@pytest.fixture
def credentials() -> Credentials:
    return Credentials(email="your@email.com", token="secret-token")


@pytest.fixture
def make_transport() -> Callable[[Handler], RecordingTransport]:
    """Factory for recording transports."""
    return RecordingTransport


@pytest.fixture
def make_client(
    credentials: Credentials, settings: Settings
) -> Callable[[Handler], tuple[CollectedNotes, RecordingTransport]]:
    """Factory for an authenticated client wired to a recording transport."""

    def factory(handler: Handler) -> tuple[CollectedNotes, RecordingTransport]:
        transport = RecordingTransport(handler)
        return CollectedNotes(credentials, settings, transport), transport

    return factory


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep real credentials and endpoints out of tests."""
    for name in (
        "COLLECTED_NOTES_EMAIL",
        "COLLECTED_NOTES_TOKEN",
        "COLLECTED_NOTES_BASE_URL",
        "COLLECTED_NOTES_TIMEOUT",
    ):
        monkeypatch.delenv(name, raising=False)
