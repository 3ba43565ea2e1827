"""
canny-cli exception hierarchy.

All custom exceptions live here to avoid circular imports.
"""


class CliError(Exception):
    """Exit code 1 — validation, network, API, and parse errors."""

    exit_code = 1


class SetupError(CliError):
    """Exit code 2 — no API key configured, credential store unavailable."""

    exit_code = 2


class ValidationError(CliError):
    """Bad input detected locally before any request is sent."""


class TransportError(CliError):
    """The request never produced an HTTP response (connection, timeout, size)."""


class ApiError(CliError):
    """The server answered with a non-2xx status.

    The raw body is kept verbatim; it may hold a machine-readable error
    payload that this layer does not interpret.
    """

    def __init__(self, status, body, detail=None):
        self.status = status
        self.body = body
        super().__init__(f"API error ({status}): {body if detail is None else detail}")


class DecodeError(CliError):
    """A 2xx response whose body does not match the expected shape."""

    def __init__(self, cause, context=None):
        self.cause = cause
        self.context = context
        prefix = f"Failed to parse {context} response" if context else "Failed to parse response"
        super().__init__(f"{prefix}: {cause}")
