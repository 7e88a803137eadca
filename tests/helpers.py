"""Test helpers: API payload factories and a recording httpx transport."""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import Any

import httpx

BASE_URL = "https://collectednotes.com"

Handler = Callable[[httpx.Request], httpx.Response]


class RecordingTransport(httpx.MockTransport):
    """MockTransport that keeps every request it receives."""

    def __init__(self, handler: Handler) -> None:
        self.requests: list[httpx.Request] = []

        def record(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(record)

    @property
    def last_request(self) -> httpx.Request:
        assert self.requests, "no request was sent"
        return self.requests[-1]


# ============================================================================
# Test Data Factories
# ============================================================================


def create_note_data(**overrides: Any) -> dict[str, Any]:
    """Create a note as served by the API."""
    data: dict[str, Any] = {
        "id": 1,
        "site_id": 1,
        "user_id": 1,
        "body": "# My title\nThis is a **test** note",
        "path": "suerte",
        "headline": "This is a test note",
        "title": "Suerte",
        "created_at": "2020-05-19T23:39:05.496Z",
        "updated_at": "2020-06-05T09:23:27.062Z",
        "visibility": "public",
        "url": "https://collectednotes.com/esacrosa/suerte",
        "poster": None,
        "curated": False,
        "ordering": 0,
    }
    data.update(overrides)
    return data


def create_site_data(**overrides: Any) -> dict[str, Any]:
    """Create a site as served by the API."""
    data: dict[str, Any] = {
        "id": 1,
        "user_id": 1,
        "name": "Alejandro Crosa",
        "headline": "This is a test Collected Notes site",
        "about": "It's all about testing",
        "host": None,
        "created_at": "2020-05-19T23:39:05.496Z",
        "updated_at": "2020-06-05T09:23:27.062Z",
        "site_path": "esacrosa",
        "published": True,
        "tinyletter": "",
        "domain": "",
        "payment_platform": None,
        "is_premium": False,
        "total_notes": 1,
        "webhook_url": None,
    }
    data.update(overrides)
    return data


def create_user_data(**overrides: Any) -> dict[str, Any]:
    """Create a user profile as served by the API."""
    data: dict[str, Any] = {
        "id": 1,
        "email": "your@email.com",
        "name": "Alejandro Crosa",
        "role": "premium",
        "banned": False,
        "avatar_key": "1/avatar",
        "created_at": "2020-05-19T23:39:05.496Z",
        "updated_at": "2020-06-05T09:23:27.062Z",
    }
    data.update(overrides)
    return data


def create_link_data(**overrides: Any) -> dict[str, Any]:
    """Create a link as served by the API."""
    data: dict[str, Any] = {
        "id": 10,
        "note_id": 1,
        "url": "https://example.com/article",
        "kind": "external",
        "host": "example.com",
        "title": "An article",
        "created_at": "2020-05-19T23:39:05.496Z",
        "updated_at": "2020-05-19T23:39:05.496Z",
    }
    data.update(overrides)
    return data


def json_response(data: Any, status_code: int = 200) -> httpx.Response:
    return httpx.Response(status_code, content=json.dumps(data).encode(), headers={"Content-Type": "application/json"})
