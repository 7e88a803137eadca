"""Authentication module for collected-notes.

Provides keyring storage for the email and API token pair.
"""

from collected_notes.auth.credentials import CredentialStore, KeyringError

__all__ = ["CredentialStore", "KeyringError"]
