"""Decorators for MCP tool handlers.

Provides common functionality for MCP tool handlers:
- Client construction from configured credentials
- API error handling

Decorator Order:
    When combining decorators, apply in this order (outermost first):

        @handle_api_error   # Catches CollectedNotesError from the inner function
        @require_client     # Builds the client before calling handler
        async def handler(client: CollectedNotes, ...) -> str:
            ...
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Callable
from functools import wraps
from typing import Concatenate, ParamSpec

from collected_notes.api.notes import CollectedNotes
from collected_notes.auth.credentials import KeyringError
from collected_notes.config import get_settings, load_credentials
from collected_notes.models import CollectedNotesError

logger = logging.getLogger(__name__)

NOT_AUTHENTICATED_MESSAGE = (
    "No credentials configured. Set COLLECTED_NOTES_EMAIL and COLLECTED_NOTES_TOKEN, "
    "or run `collected-notes login`."
)


P = ParamSpec("P")


def require_client(
    func: Callable[Concatenate[CollectedNotes, P], Awaitable[str]],
) -> Callable[P, Awaitable[str]]:
    """Decorator to build an authenticated client before executing handler.

    Loads credentials from the environment or keyring. If found, a
    CollectedNotes client is passed as the first argument to the decorated
    function; otherwise an error message is returned.

    Usage:
        @require_client
        async def my_handler(client: CollectedNotes, arg1: str) -> str:
            return str(await client.me())
    """

    @wraps(func)
    async def wrapper(*args: P.args, **kwargs: P.kwargs) -> str:
        try:
            credentials = load_credentials()
        except CollectedNotesError:
            return NOT_AUTHENTICATED_MESSAGE
        except KeyringError as e:
            logger.warning("Keyring unavailable: %s", e.message)
            return NOT_AUTHENTICATED_MESSAGE
        client = CollectedNotes(credentials, get_settings())
        return await func(client, *args, **kwargs)

    # Hide the injected client from signature-based tool registration
    signature = inspect.signature(func)
    injected, *parameters = signature.parameters.values()
    wrapper.__signature__ = signature.replace(parameters=parameters)  # type: ignore[attr-defined]
    wrapper.__annotations__ = {k: v for k, v in func.__annotations__.items() if k != injected.name}
    return wrapper


def handle_api_error(
    func: Callable[P, Awaitable[str]],
) -> Callable[P, Awaitable[str]]:
    """Decorator to catch and format CollectedNotesError exceptions.

    If CollectedNotesError is raised, returns a formatted error message.
    Other exceptions are propagated.
    """

    @wraps(func)
    async def wrapper(*args: P.args, **kwargs: P.kwargs) -> str:
        try:
            return await func(*args, **kwargs)
        except CollectedNotesError as e:
            logger.error(
                "CollectedNotesError in %s: code=%s, message=%s",
                func.__name__,
                e.code.value,
                e.message,
                exc_info=True,
            )
            return f"Error [{e.code.value}]: {e.message}"

    return wrapper
