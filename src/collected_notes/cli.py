"""Command-line interface for Collected Notes.

Wraps the client operations in typer commands. Results are printed as
JSON, or as raw text for markdown, plain-text and HTML output.
"""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Coroutine
from pathlib import Path
from typing import Annotated, Any, TypeVar

import typer
from pydantic import BaseModel

from collected_notes.api.notes import CollectedNotes
from collected_notes.api.public import read, site
from collected_notes.auth.credentials import CredentialStore, KeyringError
from collected_notes.config import Credentials, get_settings, load_credentials
from collected_notes.feed import build_feed
from collected_notes.models import CollectedNotesError, NoteInput, Visibility
from collected_notes.utils.logging import setup_logging

app = typer.Typer(
    name="collected-notes",
    help="Read and manage notes on Collected Notes",
    no_args_is_help=True,
)


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log HTTP requests")] = False,
) -> None:
    """Read and manage notes on Collected Notes."""
    setup_logging(logging.DEBUG if verbose else logging.WARNING)


T = TypeVar("T")


def _run(coro: Coroutine[Any, Any, T]) -> T:
    """Run a coroutine, turning client errors into a clean exit."""
    try:
        return asyncio.run(coro)
    except CollectedNotesError as e:
        typer.echo(f"Error [{e.code.value}]: {e.message}", err=True)
        raise typer.Exit(code=1) from e
    except KeyringError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(code=1) from e


def _echo_json(value: BaseModel | list[Any]) -> None:
    if isinstance(value, BaseModel):
        data = value.model_dump(mode="json")
    else:
        data = [item.model_dump(mode="json") if isinstance(item, BaseModel) else item for item in value]
    typer.echo(json.dumps(data, ensure_ascii=False, indent=2))


def _client() -> CollectedNotes:
    try:
        credentials = load_credentials()
    except (CollectedNotesError, KeyringError) as e:
        typer.echo(f"Error: {getattr(e, 'message', e)}", err=True)
        raise typer.Exit(code=1) from e
    return CollectedNotes(credentials, get_settings())


def _read_body(path: Path) -> str:
    if str(path) == "-":
        return typer.get_text_stream("stdin").read()
    return path.read_text(encoding="utf-8")


@app.command()
def login(
    email: Annotated[str, typer.Option(prompt=True, help="Account email")],
    token: Annotated[str, typer.Option(prompt=True, hide_input=True, help="API token")],
) -> None:
    """Store your email and API token in the system keyring."""
    credentials = Credentials(email=email, token=token)
    try:
        CredentialStore().save(credentials)
    except KeyringError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(code=1) from e
    typer.echo(f"Saved credentials for {email}.")


@app.command()
def logout() -> None:
    """Remove stored credentials from the system keyring."""
    try:
        removed = CredentialStore().clear()
    except KeyringError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(code=1) from e
    typer.echo("Removed stored credentials." if removed else "No stored credentials.")


@app.command("read")
def read_command(
    site_path: Annotated[str, typer.Argument(help="Path of the site")],
    note_path: Annotated[str, typer.Argument(help="Path of the note")],
    format: Annotated[str, typer.Option("--format", "-f", help="json, md or txt")] = "json",
) -> None:
    """Read a public note."""
    result = _run(read(site_path, note_path, format))  # type: ignore[call-overload]
    if isinstance(result, str):
        typer.echo(result, nl=False)
    else:
        _echo_json(result)


@app.command("site")
def site_command(
    site_path: Annotated[str, typer.Argument(help="Path of the site")],
    page: Annotated[int, typer.Option("--page", "-p", min=1)] = 1,
    visibility: Annotated[str, typer.Option(help="public or public_site")] = Visibility.PUBLIC.value,
) -> None:
    """Show a public site and one page of its notes."""
    _echo_json(_run(site(site_path, page, visibility)))


@app.command()
def sites() -> None:
    """List your sites."""
    _echo_json(_run(_client().sites()))


@app.command()
def me() -> None:
    """Show your profile."""
    _echo_json(_run(_client().me()))


@app.command()
def latest(
    site_id: Annotated[int, typer.Argument(help="Site ID")],
    page: Annotated[int, typer.Option("--page", "-p", min=1)] = 1,
    visibility: Annotated[Visibility | None, typer.Option(help="Filter by visibility")] = None,
) -> None:
    """List a site's latest notes, including private ones."""
    _echo_json(_run(_client().latest_notes(site_id, page, visibility)))


@app.command()
def search(
    site_ref: Annotated[str, typer.Argument(metavar="SITE", help="Site ID or path")],
    term: Annotated[str, typer.Argument(help="Search term")],
    page: Annotated[int, typer.Option("--page", "-p", min=1)] = 1,
    visibility: Annotated[Visibility | None, typer.Option(help="Filter by visibility")] = None,
) -> None:
    """Search a site's notes."""
    _echo_json(_run(_client().search(site_ref, term, page, visibility)))


@app.command()
def create(
    file: Annotated[Path, typer.Argument(help="Markdown file, or - for stdin")],
    site_id: Annotated[int | None, typer.Option("--site", "-s", help="Site ID (default: first site)")] = None,
    visibility: Annotated[Visibility, typer.Option(help="Note visibility")] = Visibility.PRIVATE,
) -> None:
    """Create a note from a markdown file starting with '# Title'."""
    note = NoteInput(body=_read_body(file), visibility=visibility)
    _echo_json(_run(_client().create(note, site_id)))


@app.command()
def update(
    site_id: Annotated[int, typer.Argument(help="Site ID")],
    note_id: Annotated[int, typer.Argument(help="Note ID")],
    file: Annotated[Path, typer.Argument(help="Markdown file, or - for stdin")],
    visibility: Annotated[Visibility, typer.Option(help="Note visibility")] = Visibility.PRIVATE,
) -> None:
    """Replace a note's body and visibility."""
    note = NoteInput(body=_read_body(file), visibility=visibility)
    _echo_json(_run(_client().update(site_id, note_id, note)))


@app.command()
def delete(
    site_id: Annotated[int, typer.Argument(help="Site ID")],
    note_id: Annotated[int, typer.Argument(help="Note ID")],
) -> None:
    """Delete a note."""
    response = _run(_client().destroy(site_id, note_id))
    if not response.is_success:
        typer.echo(f"Failed to delete note {note_id}. Status: {response.status_code}", err=True)
        raise typer.Exit(code=1)
    typer.echo(f"Deleted note {note_id}.")


@app.command()
def reorder(
    site_id: Annotated[int, typer.Argument(help="Site ID")],
    note_ids: Annotated[list[int], typer.Argument(help="Note IDs in the desired order")],
) -> None:
    """Set the order of a site's notes."""
    _echo_json(_run(_client().reorder(site_id, note_ids)))


@app.command()
def links(
    site_id: Annotated[int, typer.Argument(help="Site ID")],
    note_id: Annotated[int, typer.Argument(help="Note ID")],
    html: Annotated[bool, typer.Option("--html", help="Print the rendered HTML fragment")] = False,
) -> None:
    """List the links found in a note."""
    client = _client()
    if html:
        typer.echo(_run(client.links(site_id, note_id, "html")), nl=False)
    else:
        _echo_json(_run(client.links(site_id, note_id)))


@app.command()
def feed(
    site_path: Annotated[str, typer.Argument(help="Path of the site")],
    format: Annotated[str, typer.Option("--format", "-f", help="rss or json")] = "rss",
) -> None:
    """Print an RSS or JSON feed for one of your sites."""
    typer.echo(_run(build_feed(_client(), site_path, format)))  # type: ignore[arg-type]


@app.command()
def serve(
    http: Annotated[bool, typer.Option("--http", help="Use HTTP transport instead of stdio")] = False,
    host: Annotated[str, typer.Option(help="Host to bind the HTTP server")] = "127.0.0.1",
    port: Annotated[int, typer.Option(help="Port for the HTTP transport")] = 9000,
) -> None:
    """Run the MCP server exposing the client operations as tools."""
    from collected_notes.server import mcp

    if http:
        mcp.run(transport="http", host=host, port=port)
    else:
        mcp.run()
