"""Credential storage with keyring.

Stores the email and API token pair in the system keyring.
Failures name the keyring backend and point at the environment-variable
alternative.
"""

from __future__ import annotations

import json

import keyring
from keyring.errors import PasswordDeleteError
from pydantic import ValidationError

from collected_notes.config import EMAIL_ENV_VAR, TOKEN_ENV_VAR, Credentials

ENV_HINT = f"Set {EMAIL_ENV_VAR} and {TOKEN_ENV_VAR} to skip the keyring."


class KeyringError(Exception):
    """Exception raised when keyring operations fail.

    Attributes:
        message: Human-readable error message
        backend: Name of the active keyring backend, if it could be determined
    """

    def __init__(self, message: str, backend: str | None = None) -> None:
        self.message = message
        self.backend = backend
        summary = f"{message} (backend: {backend})" if backend else message
        super().__init__(f"{summary}\n{ENV_HINT}")


def _keyring_error(action: str, error: Exception) -> KeyringError:
    try:
        backend: str | None = type(keyring.get_keyring()).__name__
    except Exception:
        backend = None
    return KeyringError(f"Failed to {action} credentials in keyring: {error}", backend)


class CredentialStore:
    """Stores Collected Notes credentials in the system keyring.

    Attributes:
        service_name: The keyring service name used for storage
    """

    DEFAULT_SERVICE_NAME = "collected-notes"
    CREDENTIALS_KEY = "credentials"

    def __init__(self, service_name: str | None = None) -> None:
        self.service_name = service_name or self.DEFAULT_SERVICE_NAME

    def save(self, credentials: Credentials) -> None:
        """Save credentials to keyring.

        Raises:
            KeyringError: If keyring operation fails
        """
        try:
            keyring.set_password(
                self.service_name,
                self.CREDENTIALS_KEY,
                json.dumps(credentials.model_dump()),
            )
        except Exception as e:
            raise _keyring_error("save", e) from e

    def load(self) -> Credentials | None:
        """Load credentials from keyring.

        Returns:
            Credentials if stored and readable, None otherwise

        Raises:
            KeyringError: If keyring operation fails (not including missing credentials)
        """
        try:
            stored = keyring.get_password(self.service_name, self.CREDENTIALS_KEY)
        except Exception as e:
            raise _keyring_error("load", e) from e

        if stored is None:
            return None

        try:
            return Credentials.model_validate_json(stored)
        except ValidationError:
            # Corrupted entry; treat as absent so `login` can overwrite it
            return None

    def clear(self) -> bool:
        """Remove stored credentials.

        Returns:
            True if credentials were removed, False if none were stored

        Raises:
            KeyringError: If keyring operation fails
        """
        try:
            keyring.delete_password(self.service_name, self.CREDENTIALS_KEY)
        except PasswordDeleteError:
            return False
        except Exception as e:
            raise _keyring_error("clear", e) from e
        return True
