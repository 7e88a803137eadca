"""Collected Notes API client using httpx.

Provides access to the Collected Notes HTTP endpoints, with or without
credentials, and maps failed responses to CollectedNotesError.
"""

from __future__ import annotations

from types import TracebackType
from typing import Any, Self

import httpx

from collected_notes.config import Credentials, Settings, get_settings
from collected_notes.models import CollectedNotesError, ErrorCode
from collected_notes.utils.logging import get_logger

logger = get_logger("api")

USER_AGENT = "collected-notes-python/0.1.0"


class CollectedNotesAPIClient:
    """HTTP client for the Collected Notes API.

    Issues requests with the Authorization header when credentials are set.
    Use as async context manager for proper resource management; each
    context owns its own ``httpx.AsyncClient``.

    Attributes:
        credentials: Email and token pair (None for public endpoints)
        settings: Base URL and timeout
    """

    def __init__(
        self,
        credentials: Credentials | None = None,
        settings: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize API client.

        Args:
            credentials: Credentials for authenticated endpoints (optional for public ones)
            settings: Connection settings (default: read from environment)
            transport: Custom httpx transport (e.g., httpx.MockTransport in tests)
        """
        self.credentials = credentials
        self.settings = settings or get_settings()
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> Self:
        self._client = httpx.AsyncClient(
            base_url=self.settings.base_url,
            timeout=httpx.Timeout(self.settings.timeout),
            transport=self._transport,
        )
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    def _build_headers(self, with_body: bool = False) -> dict[str, str]:
        """Build request headers.

        Args:
            with_body: Whether the request carries a JSON body

        Returns:
            Headers with Accept, and Authorization if credentials exist
        """
        headers: dict[str, str] = {
            "Accept": "application/json",
            "User-Agent": USER_AGENT,
        }
        if self.credentials is not None:
            headers["Authorization"] = self.credentials.authorization
        if with_body:
            headers["Content-Type"] = "application/json"
        return headers

    def _handle_error_response(self, response: httpx.Response) -> None:
        """Raise CollectedNotesError for a failed response.

        Raises:
            CollectedNotesError: With a code matching the status
        """
        status = response.status_code
        details: dict[str, object] = {
            "status_code": status,
            "url": str(response.request.url),
            "response": response.text[:500],
        }

        if status == 401:
            raise CollectedNotesError(
                code=ErrorCode.NOT_AUTHENTICATED,
                message="Authentication failed. Check your email and API token.",
                details=details,
            )
        if status == 404:
            raise CollectedNotesError(
                code=ErrorCode.NOT_FOUND,
                message="Resource not found.",
                details=details,
            )
        if status == 429:
            raise CollectedNotesError(
                code=ErrorCode.RATE_LIMITED,
                message="Rate limit exceeded. Please wait before making more requests.",
                details=details,
            )
        if status >= 500:
            raise CollectedNotesError(
                code=ErrorCode.API_ERROR,
                message="Server error. Please try again later.",
                details=details,
            )
        raise CollectedNotesError(
            code=ErrorCode.API_ERROR,
            message=f"API request failed with status {status}.",
            details=details,
        )

    async def _request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        json_body: Any = None,
    ) -> httpx.Response:
        if self._client is None:
            raise RuntimeError("Client not initialized. Use 'async with' context manager.")

        headers = self._build_headers(with_body=json_body is not None)
        response = await self._client.request(
            method,
            path,
            headers=headers,
            params=params,
            json=json_body,
        )
        logger.debug("%s %s -> %d", method, path, response.status_code)
        return response

    def _decode_json(self, response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise CollectedNotesError(
                code=ErrorCode.INVALID_RESPONSE,
                message="Response body is not valid JSON.",
                details={
                    "status_code": response.status_code,
                    "url": str(response.request.url),
                    "response": response.text[:500],
                },
            ) from e

    async def get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        """Make a GET request and decode the JSON response.

        Args:
            path: API endpoint path (e.g., "/sites")
            params: Query parameters

        Returns:
            Decoded JSON (object or array)

        Raises:
            CollectedNotesError: If the status is not 2xx or the body is not JSON
        """
        response = await self._request("GET", path, params=params)
        if not response.is_success:
            self._handle_error_response(response)
        return self._decode_json(response)

    async def get_text(self, path: str, params: dict[str, Any] | None = None) -> str:
        """Make a GET request and return the body as text, unmodified.

        Raises:
            CollectedNotesError: If the status is not 2xx
        """
        response = await self._request("GET", path, params=params)
        if not response.is_success:
            self._handle_error_response(response)
        return response.text

    async def post(self, path: str, json: Any = None) -> Any:
        """Make a POST request with a JSON body and decode the JSON response.

        Args:
            path: API endpoint path
            json: JSON body

        Raises:
            CollectedNotesError: If the status is not 2xx or the body is not JSON
        """
        response = await self._request("POST", path, json_body=json)
        if not response.is_success:
            self._handle_error_response(response)
        return self._decode_json(response)

    async def delete(self, path: str) -> httpx.Response:
        """Make a DELETE request.

        The status is not checked; callers inspect the returned response.

        Returns:
            The raw HTTP response
        """
        return await self._request("DELETE", path)
