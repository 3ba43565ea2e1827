"""
HTTP transport, request building, and response decoding for canny-cli.
"""

import hashlib
import json
import re
import sys
import time
import urllib.error
import urllib.parse
import urllib.request
import uuid

from canny_cli import config
from canny_cli.exceptions import ApiError, DecodeError, TransportError, ValidationError
from canny_cli.models import (
    CursorPage,
    EmptyListing,
    ItemsListing,
    LegacyListing,
    ListingPayload,
    ObjectPayload,
    OffsetPage,
)

# ---------------------------------------------------------------------------
# Security helpers
# ---------------------------------------------------------------------------


def _mask_api_key(api_key):
    """Show the first and last 4 chars of a key, or nothing for short keys."""
    if len(api_key) > 8:
        return f"{api_key[:4]}...{api_key[-4:]}"
    return "****"


def _safe_json_parse(text, context="input"):
    """Parse JSON with friendly error message on failure."""
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise ValidationError(
            f"Invalid JSON for {context}: {e.msg} at position {e.pos}"
        ) from None


def parse_custom_fields(text, flag="--custom-fields"):
    """Parse a --custom-fields argument into a JSON object, or None if unset."""
    if text is None:
        return None
    return ObjectPayload.from_value(_safe_json_parse(text, flag), flag).data


def _sanitize_error(body, max_len=500):
    """Truncate and clean error body for safe display."""
    if not body:
        return ""
    cleaned = re.sub(r"<[^>]+>", "", body)
    cleaned = re.sub(r"\s+", " ", cleaned).strip()
    if len(cleaned) > max_len:
        return cleaned[:max_len] + "... [truncated]"
    return cleaned


# ---------------------------------------------------------------------------
# HTTP logging
# ---------------------------------------------------------------------------


def _path_for_log(url):
    """Drop scheme, host, and query; the path is enough to identify the call."""
    return urllib.parse.urlsplit(url).path


def _log_http_event(**fields):
    """Emit structured HTTP logs to stderr when enabled."""
    if not config.HTTP_LOG_ENABLED:
        return
    print("[HTTP] " + json.dumps(fields, ensure_ascii=False, sort_keys=True), file=sys.stderr)


def _is_sampled_request(request_id):
    """Decide if a request should be logged based on sample rate."""
    rate = config.HTTP_LOG_SAMPLE_RATE
    if rate <= 0:
        return False
    if rate >= 1:
        return True
    if not request_id:
        return False
    digest = hashlib.sha256(request_id.encode("utf-8")).digest()
    bucket = int.from_bytes(digest[:4], "big") / 4294967295.0
    return bucket < rate


# ---------------------------------------------------------------------------
# Transport
# ---------------------------------------------------------------------------


def http_post(url, payload):
    """POST a JSON body and return ``(status, body_text)``.

    Non-2xx statuses are returned, not raised; the decoder decides what they
    mean. Raises TransportError when no HTTP response is obtained.
    """
    body = json.dumps(payload).encode("utf-8")
    request_id = str(uuid.uuid4())
    headers = {
        "Content-Type": "application/json",
        "Accept": "application/json",
        "X-Request-Id": request_id,
    }
    safe_path = _path_for_log(url)
    sampled = _is_sampled_request(request_id)
    timeout = max(1, config.HTTP_TIMEOUT_SECONDS)
    start = time.perf_counter()
    req = urllib.request.Request(url, data=body, headers=headers, method="POST")
    if sampled:
        _log_http_event(
            phase="request",
            method="POST",
            path=safe_path,
            request_id=request_id,
            timeout_seconds=timeout,
        )
    try:
        with urllib.request.urlopen(req, timeout=timeout) as resp:
            status = getattr(resp, "status", 200)
            raw = resp.read(config.HTTP_MAX_RESPONSE_BYTES + 1)
    except urllib.error.HTTPError as e:
        status = e.code
        raw = e.read(config.HTTP_MAX_RESPONSE_BYTES + 1) if e.fp else b""
    except TimeoutError as e:
        if sampled:
            _log_http_event(
                phase="network_error", path=safe_path, error="timeout", request_id=request_id
            )
        raise TransportError(
            f"Request timed out after {timeout} seconds. Is the Canny API reachable?"
        ) from e
    except urllib.error.URLError as e:
        if sampled:
            _log_http_event(
                phase="network_error",
                path=safe_path,
                error=f"url_error: {e.reason}",
                request_id=request_id,
            )
        raise TransportError(f"Failed to send request: {e.reason}") from e

    if len(raw) > config.HTTP_MAX_RESPONSE_BYTES:
        raise TransportError(
            f"Response too large from Canny API (>{config.HTTP_MAX_RESPONSE_BYTES} bytes)."
        )
    if sampled:
        _log_http_event(
            phase="response",
            method="POST",
            path=safe_path,
            status=status,
            bytes=len(raw),
            latency_ms=round((time.perf_counter() - start) * 1000, 2),
            request_id=request_id,
        )
    return status, raw.decode("utf-8", errors="replace")


def versioned_url(api_url, path, api_version="v1"):
    """Join *path* onto the base URL, swapping its ``/v1`` segment if needed."""
    base = api_url.rstrip("/")
    if api_version != "v1":
        base = re.sub(r"/v1(?=/|$)", f"/{api_version}", base)
    return f"{base}/{path}"


# ---------------------------------------------------------------------------
# Request building
# ---------------------------------------------------------------------------


def build_body(required, optional=None):
    """Return *required* plus every *optional* field whose value is not None.

    Absent optionals are omitted rather than sent as null so the server's own
    defaults apply.
    """
    body = dict(required)
    for key, value in (optional or {}).items():
        if value is not None:
            body[key] = value
    return body


# ---------------------------------------------------------------------------
# Response decoding
# ---------------------------------------------------------------------------


def check_status(status, text):
    """Raise ApiError for a non-2xx status, keeping the body verbatim."""
    if not 200 <= status < 300:
        raise ApiError(status, text, detail=_sanitize_error(text))


def decode_json(status, text, context):
    """Check the status and parse the body. ApiError on non-2xx, DecodeError on bad JSON."""
    check_status(status, text)
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise DecodeError(f"{e.msg} at position {e.pos}", context) from None


def expect_object(value, context):
    """Ensure a response is a JSON object (dict)."""
    if isinstance(value, dict):
        return value
    raise DecodeError(f"expected object, got {type(value).__name__}", context)


def decode_records(values, record_cls, context):
    if not isinstance(values, list):
        raise DecodeError(f"expected array, got {type(values).__name__}", context)
    return [record_cls.from_json(v, context) for v in values]


def decode_retrieve(value, key, record_cls, context):
    """Unwrap ``{"<key>": record | null}``; a null or absent record means not found."""
    inner = expect_object(value, context).get(key)
    if inner is None:
        return None
    return record_cls.from_json(inner, context)


def decode_created_id(value, context):
    created_id = expect_object(value, context).get("id")
    if not isinstance(created_id, str):
        raise DecodeError("missing field 'id'", context)
    return created_id


def _require_bool(obj, key, context):
    flag = obj.get(key)
    if not isinstance(flag, bool):
        raise DecodeError(f"missing field '{key}'", context)
    return flag


def decode_offset_page(value, plural, record_cls, context):
    """Decode ``{"hasMore": bool, "<plural>": [...]}``."""
    obj = expect_object(value, context)
    has_more = _require_bool(obj, "hasMore", context)
    if plural not in obj:
        raise DecodeError(f"missing field '{plural}'", context)
    return OffsetPage(items=decode_records(obj[plural], record_cls, context), has_more=has_more)


def _optional_cursor(obj, context):
    cursor = obj.get("cursor")
    if cursor is not None and not isinstance(cursor, str):
        raise DecodeError(f"field 'cursor': expected str, got {type(cursor).__name__}", context)
    return cursor


def decode_cursor_page(value, plural, record_cls, context):
    """Decode a v1 cursor listing: ``{"hasMore": bool, "cursor": str?, "<plural>": [...]}``."""
    obj = expect_object(value, context)
    has_more = _require_bool(obj, "hasMore", context)
    if plural not in obj:
        raise DecodeError(f"missing field '{plural}'", context)
    return CursorPage(
        items=decode_records(obj[plural], record_cls, context),
        has_next_page=has_more,
        cursor=_optional_cursor(obj, context),
    )


def extract_listing(obj, legacy_key) -> ListingPayload:
    """Find the element array of a v2 listing: ``items`` first, then *legacy_key*."""
    if obj.get("items") is not None:
        return ItemsListing(items=obj["items"])
    if obj.get(legacy_key) is not None:
        return LegacyListing(key=legacy_key, items=obj[legacy_key])
    return EmptyListing()


def decode_listing_page(value, legacy_key, record_cls, context):
    """Decode a v2 listing.

    Shape: ``{"items"|"<legacy_key>": [...], "hasNextPage": bool?, "cursor": str?}``.
    """
    obj = expect_object(value, context)
    listing = extract_listing(obj, legacy_key)
    has_next = obj.get("hasNextPage")
    cursor = obj.get("cursor")
    return CursorPage(
        items=decode_records(listing.items, record_cls, context),
        has_next_page=has_next if isinstance(has_next, bool) else False,
        cursor=cursor if isinstance(cursor, str) else None,
    )
