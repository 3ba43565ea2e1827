"""
Shared test fixtures for canny-cli tests.
Patches the config module and credential store so no test reads the real
.env, touches the OS keychain, or makes network calls.
"""

import json

import pytest

from canny_cli import config, credentials
from canny_cli.client import CannyClient


class MemoryStore:
    """In-memory CredentialStore."""

    def __init__(self):
        self.data = {}

    def get(self, service, account):
        return self.data.get((service, account))

    def set(self, service, account, secret):
        self.data[(service, account)] = secret

    def delete(self, service, account):
        return self.data.pop((service, account), None) is not None


class FakeTransport:
    """Records (url, payload) calls and serves queued (status, body) responses."""

    def __init__(self):
        self.calls = []
        self.responses = []

    def queue(self, body, status=200):
        text = body if isinstance(body, str) else json.dumps(body)
        self.responses.append((status, text))

    def __call__(self, url, payload):
        self.calls.append((url, payload))
        return self.responses.pop(0)

    @property
    def last_payload(self):
        return self.calls[-1][1]

    @property
    def last_url(self):
        return self.calls[-1][0]


@pytest.fixture(autouse=True)
def _isolate_config(monkeypatch):
    """Ensure every test starts with a clean config state."""
    monkeypatch.setattr(config, "env", {})
    monkeypatch.setattr(config, "API_KEY", "")
    monkeypatch.setattr(config, "API_URL", "")
    monkeypatch.setattr(config, "HTTP_LOG_ENABLED", False)
    monkeypatch.setattr(config, "HTTP_LOG_SAMPLE_RATE", 1.0)


@pytest.fixture(autouse=True)
def memory_store(monkeypatch):
    """Replace the keyring-backed store with an in-memory one."""
    store = MemoryStore()
    monkeypatch.setattr(credentials, "KeyringStore", lambda: store)
    return store


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def client(transport):
    return CannyClient("https://acme.canny.io/api/v1", "secret-key", transport=transport)
