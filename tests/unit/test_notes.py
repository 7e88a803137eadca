"""Unit tests for the authenticated client."""

from __future__ import annotations

import asyncio
import json
from collections.abc import Callable

import httpx
import pytest

from collected_notes.api.notes import CollectedNotes, collected_notes
from collected_notes.models import (
    CollectedNotesError,
    ErrorCode,
    Link,
    Note,
    NoteInput,
    NoteWithBody,
    Site,
    User,
    Visibility,
)
from tests.helpers import (
    RecordingTransport,
    create_link_data,
    create_note_data,
    create_site_data,
    create_user_data,
    json_response,
)

MakeClient = Callable[..., tuple[CollectedNotes, RecordingTransport]]

VALID_BODY = "# My title\nThis is a **test** note"


class TestCollectedNotesFactory:
    """Tests for the collected_notes factory."""

    def test_binds_credentials(self) -> None:
        cn = collected_notes("your@email.com", "secret-token")

        assert isinstance(cn, CollectedNotes)
        assert cn.credentials.authorization == "your@email.com secret-token"

    def test_repr_hides_token(self) -> None:
        cn = collected_notes("your@email.com", "secret-token")

        assert "secret-token" not in repr(cn)
        assert "secret-token" not in repr(cn.credentials)


class TestReadOperations:
    """Tests for GET operations."""

    @pytest.mark.asyncio
    async def test_sites(self, make_client: MakeClient) -> None:
        cn, transport = make_client(lambda request: json_response([create_site_data()]))

        sites = await cn.sites()

        assert [s.id for s in sites] == [1]
        assert isinstance(sites[0], Site)
        request = transport.last_request
        assert request.url.path == "/sites"
        assert request.headers["Authorization"] == "your@email.com secret-token"
        assert request.headers["Accept"] == "application/json"

    @pytest.mark.asyncio
    async def test_latest_notes(self, make_client: MakeClient) -> None:
        cn, transport = make_client(lambda request: json_response([create_note_data()]))

        notes = await cn.latest_notes(1)

        assert [note.id for note in notes] == [1]
        url = transport.last_request.url
        assert url.path == "/sites/1/notes"
        assert url.params["page"] == "1"
        assert "visibility" not in url.params

    @pytest.mark.asyncio
    async def test_latest_notes_with_filter(self, make_client: MakeClient) -> None:
        cn, transport = make_client(lambda request: json_response([]))

        notes = await cn.latest_notes(1, page=2, visibility=Visibility.PRIVATE)

        assert notes == []
        url = transport.last_request.url
        assert url.params["page"] == "2"
        assert url.params["visibility"] == "private"

    @pytest.mark.asyncio
    async def test_me(self, make_client: MakeClient) -> None:
        cn, transport = make_client(lambda request: json_response(create_user_data()))

        user = await cn.me()

        assert isinstance(user, User)
        assert user.model_dump(mode="json") == create_user_data()
        assert transport.last_request.url.path == "/accounts/me"

    @pytest.mark.asyncio
    async def test_search_encodes_term(self, make_client: MakeClient) -> None:
        cn, transport = make_client(lambda request: json_response([create_note_data()]))

        notes = await cn.search("esacrosa", "café & más", page=2, visibility=Visibility.PUBLIC)

        assert len(notes) == 1
        url = transport.last_request.url
        assert url.path == "/sites/esacrosa/notes/search"
        assert url.params["term"] == "café & más"
        assert url.params["page"] == "2"
        assert url.params["visibility"] == "public"
        assert b"%26" in url.query

    @pytest.mark.asyncio
    async def test_body(self, make_client: MakeClient) -> None:
        payload = {"note": create_note_data(), "body": "<h1>My title</h1><p>This is a <strong>test</strong> note</p>"}
        cn, transport = make_client(lambda request: json_response(payload))

        result = await cn.body(1, 1)

        assert isinstance(result, NoteWithBody)
        assert result.note.id == 1
        assert result.body.startswith("<h1>")
        assert transport.last_request.url.path == "/sites/1/notes/1/body"

    @pytest.mark.asyncio
    async def test_links_json(self, make_client: MakeClient) -> None:
        cn, transport = make_client(lambda request: json_response([create_link_data()]))

        links = await cn.links(1, 1)

        assert isinstance(links[0], Link)
        assert links[0].host == "example.com"
        assert transport.last_request.url.path == "/sites/1/notes/1/links.json"

    @pytest.mark.asyncio
    async def test_links_html(self, make_client: MakeClient) -> None:
        fragment = '<ul><li><a href="https://example.com/article">An article</a></li></ul>'
        cn, transport = make_client(lambda request: httpx.Response(200, text=fragment))

        result = await cn.links(1, 1, "html")

        assert result == fragment
        assert transport.last_request.url.path == "/sites/1/notes/1/links"

    @pytest.mark.asyncio
    async def test_links_unknown_format(self, make_client: MakeClient) -> None:
        cn, transport = make_client(lambda request: httpx.Response(200))

        with pytest.raises(CollectedNotesError) as exc_info:
            await cn.links(1, 1, "xml")  # type: ignore[call-overload]

        assert exc_info.value.code == ErrorCode.INVALID_INPUT
        assert transport.requests == []

    @pytest.mark.asyncio
    async def test_read_and_site_are_reexposed(self, make_client: MakeClient) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path == "/esacrosa.json":
                return json_response({"site": create_site_data(), "notes": [create_note_data()]})
            return json_response(create_note_data())

        cn, transport = make_client(handler)

        note = await cn.read("esacrosa", "suerte")
        result = await cn.site("esacrosa")

        assert isinstance(note, Note)
        assert result.site.id == 1
        assert [r.url.path for r in transport.requests] == ["/esacrosa/suerte.json", "/esacrosa.json"]

    @pytest.mark.asyncio
    async def test_unauthorized_raises_not_authenticated(self, make_client: MakeClient) -> None:
        cn, _ = make_client(lambda request: httpx.Response(401, text="Unauthorized"))

        with pytest.raises(CollectedNotesError) as exc_info:
            await cn.me()

        assert exc_info.value.code == ErrorCode.NOT_AUTHENTICATED


class TestWriteOperations:
    """Tests for create, update, destroy and reorder."""

    @pytest.mark.asyncio
    async def test_create_in_site(self, make_client: MakeClient) -> None:
        cn, transport = make_client(lambda request: json_response(create_note_data()))

        note = await cn.create(NoteInput(body=VALID_BODY, visibility=Visibility.PUBLIC), site_id=1)

        assert note.id == 1
        request = transport.last_request
        assert request.method == "POST"
        assert request.url.path == "/sites/1/notes"
        assert request.headers["Content-Type"] == "application/json"
        assert json.loads(request.read()) == {"note": {"body": VALID_BODY, "visibility": "public"}}

    @pytest.mark.asyncio
    async def test_create_without_site_uses_first_site(self, make_client: MakeClient) -> None:
        cn, transport = make_client(lambda request: json_response(create_note_data(visibility="private")))

        note = await cn.create(NoteInput(body=VALID_BODY))

        assert note.visibility == Visibility.PRIVATE
        assert transport.last_request.url.path == "/notes/add"
        assert json.loads(transport.last_request.read())["note"]["visibility"] == "private"

    @pytest.mark.asyncio
    async def test_update(self, make_client: MakeClient) -> None:
        cn, transport = make_client(lambda request: json_response(create_note_data()))

        note = await cn.update(1, 1, NoteInput(body=VALID_BODY, visibility=Visibility.PUBLIC))

        assert note.id == 1
        request = transport.last_request
        assert request.method == "POST"
        assert request.url.path == "/sites/1/notes/1"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("body", ["My title\nNo heading", "", "#Title"])
    async def test_create_rejects_body_without_heading(self, body: str, make_client: MakeClient) -> None:
        cn, transport = make_client(lambda request: json_response(create_note_data()))

        with pytest.raises(CollectedNotesError) as exc_info:
            await cn.create(NoteInput(body=body), site_id=1)

        assert exc_info.value.code == ErrorCode.INVALID_INPUT
        assert transport.requests == []

    @pytest.mark.asyncio
    async def test_update_rejects_body_without_heading(self, make_client: MakeClient) -> None:
        cn, transport = make_client(lambda request: json_response(create_note_data()))

        with pytest.raises(CollectedNotesError) as exc_info:
            await cn.update(1, 1, NoteInput(body="no heading"))

        assert exc_info.value.code == ErrorCode.INVALID_INPUT
        assert transport.requests == []

    @pytest.mark.asyncio
    async def test_destroy_returns_response_with_empty_body(self, make_client: MakeClient) -> None:
        cn, transport = make_client(lambda request: httpx.Response(204))

        response = await cn.destroy(1, 1)

        assert isinstance(response, httpx.Response)
        assert response.is_success
        assert response.content == b""
        assert transport.last_request.method == "DELETE"
        assert transport.last_request.url.path == "/sites/1/notes/1"

    @pytest.mark.asyncio
    async def test_destroy_does_not_raise_on_failure(self, make_client: MakeClient) -> None:
        cn, _ = make_client(lambda request: httpx.Response(403, text="Forbidden"))

        response = await cn.destroy(1, 2)

        assert not response.is_success
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_reorder_round_trip(self, make_client: MakeClient) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return json_response(json.loads(request.read())["ids"])

        cn, transport = make_client(handler)

        order = await cn.reorder(1, [2, 3, 1])

        assert order == [2, 3, 1]
        assert transport.last_request.url.path == "/sites/1/notes/reorder"
        assert json.loads(transport.last_request.read()) == {"ids": [2, 3, 1]}

    @pytest.mark.asyncio
    async def test_reorder_returns_what_service_persists(self, make_client: MakeClient) -> None:
        cn, _ = make_client(lambda request: json_response([2, 3, 1]))

        assert await cn.reorder(1, [2, 3, 1]) == [2, 3, 1]


class TestConcurrency:
    """Operations share no mutable state and can run together."""

    @pytest.mark.asyncio
    async def test_concurrent_operations(self, make_client: MakeClient) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path == "/sites":
                return json_response([create_site_data()])
            if request.url.path == "/accounts/me":
                return json_response(create_user_data())
            return json_response(create_note_data())

        cn, transport = make_client(handler)

        sites, user, note = await asyncio.gather(cn.sites(), cn.me(), cn.read("esacrosa", "suerte"))

        assert sites[0].id == 1
        assert user.id == 1
        assert note.id == 1
        assert len(transport.requests) == 3
