"""FastMCP server for Collected Notes.

Exposes the Collected Notes client operations as MCP tools.
"""

import json
from typing import Annotated, Literal

from fastmcp import FastMCP

from collected_notes.api.notes import CollectedNotes
from collected_notes.api.public import read, site
from collected_notes.decorators import handle_api_error, require_client
from collected_notes.models import Note, NoteInput, Visibility

# Create MCP server instance
mcp = FastMCP("collected-notes")


def _format_note_line(note: Note) -> str:
    return f"- [{note.id}] {note.title} ({note.visibility.value}) {note.url}"


def _format_notes(notes: list[Note]) -> str:
    if not notes:
        return "No notes found."
    return "\n".join(_format_note_line(note) for note in notes)


@mcp.tool()
@handle_api_error
async def cn_read(
    site_path: Annotated[str, "Path of the site, e.g. 'esacrosa'"],
    note_path: Annotated[str, "Path of the note within the site"],
    format: Annotated[Literal["json", "md", "txt"], "Output format"] = "md",
) -> str:
    """Read a public note as markdown, plain text or JSON."""
    if format == "json":
        note = await read(site_path, note_path, "json")
        return note.model_dump_json(indent=2)
    return await read(site_path, note_path, format)


@mcp.tool()
@handle_api_error
async def cn_site(
    site_path: Annotated[str, "Path of the site"],
    page: Annotated[int, "Page number, starting at 1"] = 1,
) -> str:
    """Show a public site and one page of its notes."""
    result = await site(site_path, page)
    return f"{result.site.name} ({result.site.site_path})\n{result.site.headline}\n\n{_format_notes(result.notes)}"


@mcp.tool()
@handle_api_error
@require_client
async def cn_sites(client: CollectedNotes) -> str:
    """List the sites of the authenticated user."""
    sites = await client.sites()
    if not sites:
        return "No sites found."
    return "\n".join(f"- [{s.id}] {s.name} ({s.site_path})" for s in sites)


@mcp.tool()
@handle_api_error
@require_client
async def cn_latest_notes(
    client: CollectedNotes,
    site_id: Annotated[int, "Site ID"],
    page: Annotated[int, "Page number, starting at 1"] = 1,
) -> str:
    """List a site's latest notes, including private ones."""
    return _format_notes(await client.latest_notes(site_id, page))


@mcp.tool()
@handle_api_error
@require_client
async def cn_search(
    client: CollectedNotes,
    site: Annotated[str, "Site ID or site path"],
    term: Annotated[str, "Search term"],
    page: Annotated[int, "Page number, starting at 1"] = 1,
) -> str:
    """Search a site's notes."""
    return _format_notes(await client.search(site, term, page))


@mcp.tool()
@handle_api_error
@require_client
async def cn_create_note(
    client: CollectedNotes,
    body: Annotated[str, "Markdown body; must start with '# Title'"],
    visibility: Annotated[Visibility, "Note visibility"] = Visibility.PRIVATE,
    site_id: Annotated[int | None, "Site ID (default: first site)"] = None,
) -> str:
    """Create a note."""
    note = await client.create(NoteInput(body=body, visibility=visibility), site_id)
    return f"Created note {note.id}: {note.url}"


@mcp.tool()
@handle_api_error
@require_client
async def cn_update_note(
    client: CollectedNotes,
    site_id: Annotated[int, "Site ID"],
    note_id: Annotated[int, "Note ID"],
    body: Annotated[str, "Markdown body; must start with '# Title'"],
    visibility: Annotated[Visibility, "Note visibility"] = Visibility.PRIVATE,
) -> str:
    """Replace a note's body and visibility."""
    note = await client.update(site_id, note_id, NoteInput(body=body, visibility=visibility))
    return f"Updated note {note.id}: {note.url}"


@mcp.tool()
@handle_api_error
@require_client
async def cn_delete_note(
    client: CollectedNotes,
    site_id: Annotated[int, "Site ID"],
    note_id: Annotated[int, "Note ID"],
) -> str:
    """Delete a note."""
    response = await client.destroy(site_id, note_id)
    if response.is_success:
        return f"Deleted note {note_id}."
    return f"Failed to delete note {note_id}. Status: {response.status_code}"


@mcp.tool()
@handle_api_error
@require_client
async def cn_reorder_notes(
    client: CollectedNotes,
    site_id: Annotated[int, "Site ID"],
    note_ids: Annotated[list[int], "Note IDs in the desired order"],
) -> str:
    """Set the order of a site's notes."""
    order = await client.reorder(site_id, note_ids)
    return f"New order: {', '.join(str(i) for i in order)}"


@mcp.tool()
@handle_api_error
@require_client
async def cn_links(
    client: CollectedNotes,
    site_id: Annotated[int, "Site ID"],
    note_id: Annotated[int, "Note ID"],
) -> str:
    """List the links found in a note."""
    links = await client.links(site_id, note_id)
    if not links:
        return "No links found."
    return "\n".join(f"- [{link.kind.value}] {link.title or link.host}: {link.url}" for link in links)


@mcp.tool()
@handle_api_error
@require_client
async def cn_me(client: CollectedNotes) -> str:
    """Show the authenticated user's profile."""
    user = await client.me()
    return json.dumps(user.model_dump(mode="json"), indent=2)
