"""Entry point for the collected-notes CLI.

Run with: uv run python -m collected_notes

MCP server (stdio):
    uv run python -m collected_notes serve
"""

from __future__ import annotations

from collected_notes.cli import app


def main() -> None:
    """Run the CLI."""
    app()


if __name__ == "__main__":
    main()
