"""Configuration for collected-notes.

Settings and credentials are read from environment variables. Credentials
fall back to the keyring store when the environment does not provide them.
"""

from __future__ import annotations

import os

from pydantic import BaseModel, ConfigDict

from collected_notes.models import CollectedNotesError, ErrorCode

# Environment variable names
EMAIL_ENV_VAR = "COLLECTED_NOTES_EMAIL"
TOKEN_ENV_VAR = "COLLECTED_NOTES_TOKEN"
BASE_URL_ENV_VAR = "COLLECTED_NOTES_BASE_URL"
TIMEOUT_ENV_VAR = "COLLECTED_NOTES_TIMEOUT"

DEFAULT_BASE_URL = "https://collectednotes.com"
DEFAULT_TIMEOUT = 30.0


class Settings(BaseModel):
    """Connection settings.

    Attributes:
        base_url: Root URL of the Collected Notes service
        timeout: Request timeout in seconds
    """

    model_config = ConfigDict(frozen=True)

    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT


class Credentials(BaseModel):
    """Email and API token pair used for authenticated requests.

    The token is created on the service's account settings page.
    """

    model_config = ConfigDict(frozen=True)

    email: str
    token: str

    @property
    def authorization(self) -> str:
        """Value of the Authorization header."""
        return f"{self.email} {self.token}"

    def __repr__(self) -> str:
        return f"Credentials(email={self.email!r}, token='[MASKED]')"

    __str__ = __repr__


def get_settings() -> Settings:
    """Build settings from COLLECTED_NOTES_BASE_URL and COLLECTED_NOTES_TIMEOUT.

    Raises:
        CollectedNotesError: INVALID_INPUT if the timeout is not a number
    """
    base_url = os.environ.get(BASE_URL_ENV_VAR, DEFAULT_BASE_URL).rstrip("/")
    raw_timeout = os.environ.get(TIMEOUT_ENV_VAR)
    if raw_timeout is None:
        return Settings(base_url=base_url)

    try:
        timeout = float(raw_timeout)
    except ValueError as e:
        raise CollectedNotesError(
            code=ErrorCode.INVALID_INPUT,
            message=f"{TIMEOUT_ENV_VAR} must be a number of seconds.",
            details={"value": raw_timeout},
        ) from e
    return Settings(base_url=base_url, timeout=timeout)


def credentials_from_env() -> Credentials | None:
    """Read credentials from COLLECTED_NOTES_EMAIL and COLLECTED_NOTES_TOKEN.

    Returns:
        Credentials if both variables are set and non-empty, None otherwise
    """
    email = os.environ.get(EMAIL_ENV_VAR, "").strip()
    token = os.environ.get(TOKEN_ENV_VAR, "").strip()
    if not email or not token:
        return None
    return Credentials(email=email, token=token)


def load_credentials() -> Credentials:
    """Resolve credentials from the environment, then the keyring.

    Returns:
        Credentials to authenticate with

    Raises:
        CollectedNotesError: NOT_AUTHENTICATED if no credentials are configured
        KeyringError: If the keyring backend fails
    """
    credentials = credentials_from_env()
    if credentials is not None:
        return credentials

    from collected_notes.auth.credentials import CredentialStore

    credentials = CredentialStore().load()
    if credentials is None:
        raise CollectedNotesError(
            code=ErrorCode.NOT_AUTHENTICATED,
            message=(
                f"No credentials configured. Set {EMAIL_ENV_VAR} and {TOKEN_ENV_VAR}, "
                "or run `collected-notes login`."
            ),
        )
    return credentials
