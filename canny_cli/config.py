"""
canny-cli shared configuration, constants, and module-level state.
Standalone module — no imports from other project files.
"""

import os

# ---------------------------------------------------------------------------
# .env path and helpers
# ---------------------------------------------------------------------------

_PACKAGE_DIR = os.path.dirname(os.path.abspath(__file__))
_PROJECT_ROOT = os.path.dirname(_PACKAGE_DIR)

ENV_PATH = os.path.join(_PROJECT_ROOT, ".env")

# Keys that may also come from the process environment (which wins over .env).
_ENV_KEYS = (
    "CANNY_API_KEY",
    "CANNY_API_URL",
    "CANNY_HTTP_TIMEOUT_SECONDS",
    "CANNY_HTTP_MAX_RESPONSE_BYTES",
    "CANNY_HTTP_LOG",
    "CANNY_HTTP_LOG_SAMPLE_RATE",
)


def load_env():
    env = {}
    if os.path.exists(ENV_PATH):
        with open(ENV_PATH) as f:
            for line in f:
                line = line.strip()
                if line and not line.startswith("#") and "=" in line:
                    key, val = line.split("=", 1)
                    env[key.strip()] = val.strip()
    for key in _ENV_KEYS:
        value = os.environ.get(key)
        if value is not None:
            env[key] = value
    return env


def _env_bool(key, default=False):
    """Parse common boolean env formats."""
    raw = env.get(key)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(key, default):
    """Parse integer env values with fallback."""
    raw = env.get(key)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(key, default):
    """Parse float env values with fallback."""
    raw = env.get(key)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

VERSION = "0.3.0"

DEFAULT_API_URL = "https://canny.io/api/v1"

KEYCHAIN_SERVICE = "canny-cli"
KEYCHAIN_ACCOUNT_API_KEY = "api-key"
KEYCHAIN_ACCOUNT_API_URL = "api-url"
# Account name used before `canny auth` stored key and URL separately.
KEYCHAIN_ACCOUNT_LEGACY = "default"

# users/list (v2) rejects larger pages.
USERS_PAGE_SIZE = 100
MAX_DEPAGINATED_RECORDS = 100_000

POST_SORTS = ("newest", "oldest", "relevance", "score", "statusChanged", "trending")
ENTRY_SORTS = ("created", "lastSaved", "nonPublishedFirst", "publishedAt")

# ---------------------------------------------------------------------------
# Module-level state (loaded from .env / environment)
# ---------------------------------------------------------------------------

env = load_env()

API_KEY = env.get("CANNY_API_KEY", "")
API_URL = env.get("CANNY_API_URL", "")
HTTP_TIMEOUT_SECONDS = _env_int("CANNY_HTTP_TIMEOUT_SECONDS", 30)
HTTP_MAX_RESPONSE_BYTES = _env_int("CANNY_HTTP_MAX_RESPONSE_BYTES", 5_000_000)
HTTP_LOG_ENABLED = _env_bool("CANNY_HTTP_LOG", False)
HTTP_LOG_SAMPLE_RATE = min(1.0, max(0.0, _env_float("CANNY_HTTP_LOG_SAMPLE_RATE", 1.0)))
