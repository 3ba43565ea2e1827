"""
Typed records and page shapes for Canny API responses.

Records decode from the service's camelCase JSON and encode back to it for
``--json`` output. Unknown keys are ignored; optional keys default to None.
"""

from __future__ import annotations

import dataclasses
import types
import typing
from dataclasses import dataclass, field
from typing import Any

from canny_cli.exceptions import DecodeError, ValidationError

_SUFFIX_CAPS = {"id": "ID", "ids": "IDs", "url": "URL", "urls": "URLs"}


def _json_key(name):
    """Map a snake_case field name to the service key (post_id -> postID)."""
    head, *rest = name.split("_")
    return head + "".join(_SUFFIX_CAPS.get(part, part.capitalize()) for part in rest)


def _field_key(f):
    return f.metadata.get("key") or _json_key(f.name)


def _unwrap_optional(hint):
    if typing.get_origin(hint) in (typing.Union, types.UnionType):
        args = [a for a in typing.get_args(hint) if a is not type(None)]
        return args[0] if len(args) == 1 else Any
    return hint


def _coerce(value, hint, key, context):
    hint = _unwrap_optional(hint)
    if hint is Any:
        return value
    if isinstance(hint, type) and issubclass(hint, Record):
        return hint.from_json(value, context)
    if hint is bool:
        ok = isinstance(value, bool)
    elif hint is int:
        ok = isinstance(value, int) and not isinstance(value, bool)
    elif hint is float:
        ok = isinstance(value, (int, float)) and not isinstance(value, bool)
        value = float(value) if ok else value
    elif hint is str:
        ok = isinstance(value, str)
    else:
        ok = True
    if not ok:
        raise DecodeError(
            f"field '{key}': expected {hint.__name__}, got {type(value).__name__}", context
        )
    return value


class Record:
    """Mixin for frozen dataclasses that mirror one service resource."""

    @classmethod
    def from_json(cls, value, context=None):
        if not isinstance(value, dict):
            raise DecodeError(f"expected object, got {type(value).__name__}", context)
        hints = typing.get_type_hints(cls)
        kwargs = {}
        for f in dataclasses.fields(cls):  # type: ignore[arg-type]
            key = _field_key(f)
            raw = value.get(key)
            if raw is None:
                if f.default is dataclasses.MISSING and f.default_factory is dataclasses.MISSING:
                    raise DecodeError(f"missing field '{key}'", context)
                continue
            kwargs[f.name] = _coerce(raw, hints[f.name], key, context)
        return cls(**kwargs)

    def to_dict(self):
        out = {}
        for f in dataclasses.fields(self):  # type: ignore[arg-type]
            val = getattr(self, f.name)
            out[_field_key(f)] = val.to_dict() if isinstance(val, Record) else val
        return out


# ---------------------------------------------------------------------------
# Resources
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class User(Record):
    """User as embedded in posts, comments, votes, and status changes."""

    id: str
    name: str
    email: str | None = None
    avatar_url: str | None = None


@dataclass(frozen=True)
class Category(Record):
    id: str
    name: str
    post_count: int | None = None
    url: str | None = None


@dataclass(frozen=True)
class Post(Record):
    id: str
    title: str
    url: str
    details: str | None = None
    status: str | None = None
    comment_count: int = 0
    score: int = 0
    created: str | None = None
    author: User | None = None
    category: Category | None = None
    custom_fields: Any = None


@dataclass(frozen=True)
class Comment(Record):
    id: str
    value: str
    created: str
    author: User | None = None
    post: Post | None = None
    parent_id: str | None = None
    pinned: bool | None = None


@dataclass(frozen=True)
class Board(Record):
    id: str
    name: str
    url: str | None = None
    post_count: int | None = None
    is_private: bool | None = None
    private_comments: bool | None = None
    token: str | None = None
    created: str | None = None


@dataclass(frozen=True)
class UserFull(Record):
    """User as returned by the users endpoints."""

    id: str
    name: str | None = None
    email: str | None = None
    avatar_url: str | None = None
    created: str | None = None
    is_admin: bool | None = None
    last_activity: str | None = None
    user_id: str | None = None
    url: str | None = None
    custom_fields: Any = None


@dataclass(frozen=True)
class Tag(Record):
    id: str
    name: str
    board_id: str | None = None
    created: str | None = None
    post_count: int | None = None
    url: str | None = None


@dataclass(frozen=True)
class Company(Record):
    id: str
    name: str | None = None
    created: str | None = None
    monthly_spend: float | None = None
    user_count: int | None = None
    custom_fields: Any = None


@dataclass(frozen=True)
class Vote(Record):
    id: str
    post_id: str | None = None
    voter: User | None = None
    created: str | None = None


@dataclass(frozen=True)
class StatusChange(Record):
    id: str
    post_id: str | None = None
    status: str | None = None
    created: str | None = None
    changer: User | None = None


@dataclass(frozen=True)
class Entry(Record):
    """Changelog entry."""

    id: str
    title: str | None = None
    details: str | None = None
    created: str | None = None
    published_at: str | None = None
    status: str | None = None
    entry_type: str | None = field(default=None, metadata={"key": "type"})
    url: str | None = None


@dataclass(frozen=True)
class Opportunity(Record):
    id: str
    name: str | None = None
    opportunity_id: str | None = None
    value: float | None = None
    won: bool | None = None
    closed: bool | None = None
    salesforce_opportunity_id: str | None = None


@dataclass(frozen=True)
class Group(Record):
    id: str
    name: str | None = None
    url: str | None = None
    created: str | None = None
    member_count: int | None = None


@dataclass(frozen=True)
class Idea(Record):
    id: str
    name: str | None = None
    description: str | None = None
    url: str | None = None
    created: str | None = None
    post_count: int | None = None


@dataclass(frozen=True)
class Insight(Record):
    id: str
    title: str | None = None
    description: str | None = None
    url: str | None = None
    created: str | None = None


# ---------------------------------------------------------------------------
# Pages
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class OffsetPage:
    """One page of a skip/limit listing."""

    items: list
    has_more: bool

    def next_skip(self, skip, limit):
        """Offset of the following page, or None when this page is the last.

        Advances by the requested limit, not by the number of items returned.
        """
        return skip + limit if self.has_more else None


@dataclass(frozen=True)
class CursorPage:
    """One page of a cursor listing."""

    items: list
    has_next_page: bool
    cursor: str | None = None

    @property
    def next_cursor(self):
        if self.has_next_page and self.cursor:
            return self.cursor
        return None


# ---------------------------------------------------------------------------
# v2 listing payloads: the element array lives under "items" or, on older
# deployments, under the resource's plural name.
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ItemsListing:
    items: list


@dataclass(frozen=True)
class LegacyListing:
    key: str
    items: list


@dataclass(frozen=True)
class EmptyListing:
    items: list = field(default_factory=list)


ListingPayload = ItemsListing | LegacyListing | EmptyListing


# ---------------------------------------------------------------------------
# Input payloads
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ObjectPayload:
    """Typed wrapper for a raw JSON object supplied on the command line."""

    data: dict

    @classmethod
    def from_value(cls, value, context):
        if isinstance(value, dict):
            return cls(data=value)
        raise ValidationError(
            f"Invalid JSON for {context}: expected object, got {type(value).__name__}."
        )
