"""
Credential storage and resolution for canny-cli.

Secrets live in the OS credential store through ``keyring`` (macOS Keychain,
Windows Credential Locker, Secret Service on Linux). The store is injectable
so resolution can be exercised without touching the real keychain.
"""

from typing import Protocol

import keyring
import keyring.errors

from canny_cli import config
from canny_cli.exceptions import SetupError

MISSING_KEY_MESSAGE = (
    "API key not found. Run `canny auth` to configure, "
    "or provide --api-key / set CANNY_API_KEY."
)


class CredentialStore(Protocol):
    def get(self, service: str, account: str) -> str | None: ...

    def set(self, service: str, account: str, secret: str) -> None: ...

    def delete(self, service: str, account: str) -> bool: ...


class KeyringStore:
    """CredentialStore backed by the active ``keyring`` backend."""

    def get(self, service: str, account: str) -> str | None:
        try:
            return keyring.get_password(service, account)
        except keyring.errors.KeyringError as e:
            raise SetupError(f"Credential store unavailable: {e}") from e

    def set(self, service: str, account: str, secret: str) -> None:
        # keyring replaces an existing entry in place
        try:
            keyring.set_password(service, account, secret)
        except keyring.errors.KeyringError as e:
            raise SetupError(f"Failed to store {account} in credential store: {e}") from e

    def delete(self, service: str, account: str) -> bool:
        """Delete an entry. Returns False when there was nothing to delete."""
        try:
            keyring.delete_password(service, account)
        except keyring.errors.PasswordDeleteError:
            return False
        except keyring.errors.KeyringError as e:
            raise SetupError(f"Credential store unavailable: {e}") from e
        return True


def _store(store):
    return store if store is not None else KeyringStore()


# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------


def resolve_api_key(explicit=None, store=None):
    """Return the API key from --api-key, CANNY_API_KEY, or the credential store.

    Raises SetupError when none of them has one.
    """
    if explicit:
        return explicit
    if config.API_KEY:
        return config.API_KEY
    stored = _store(store).get(config.KEYCHAIN_SERVICE, config.KEYCHAIN_ACCOUNT_API_KEY)
    if stored:
        return stored
    raise SetupError(MISSING_KEY_MESSAGE)


def resolve_api_url(explicit=None, store=None):
    """Return the API URL from --api-url, CANNY_API_URL, the store, or the default."""
    if explicit:
        return explicit
    if config.API_URL:
        return config.API_URL
    stored = _store(store).get(config.KEYCHAIN_SERVICE, config.KEYCHAIN_ACCOUNT_API_URL)
    return stored or config.DEFAULT_API_URL


# ---------------------------------------------------------------------------
# Persistence
# ---------------------------------------------------------------------------


def store_api_key(api_key, store=None):
    _store(store).set(config.KEYCHAIN_SERVICE, config.KEYCHAIN_ACCOUNT_API_KEY, api_key)


def store_api_url(api_url, store=None):
    _store(store).set(config.KEYCHAIN_SERVICE, config.KEYCHAIN_ACCOUNT_API_URL, api_url)


def clear_stored_credentials(store=None):
    """Delete the stored key and URL, plus the pre-auth ``default`` entry.

    Raises SetupError only when neither the key nor the URL was stored.
    """
    store = _store(store)
    removed_key = store.delete(config.KEYCHAIN_SERVICE, config.KEYCHAIN_ACCOUNT_API_KEY)
    removed_url = store.delete(config.KEYCHAIN_SERVICE, config.KEYCHAIN_ACCOUNT_API_URL)
    store.delete(config.KEYCHAIN_SERVICE, config.KEYCHAIN_ACCOUNT_LEGACY)
    if not removed_key and not removed_url:
        raise SetupError("No stored credentials to clear")
