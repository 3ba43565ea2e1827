"""Tests for pagination.py — cursor depagination and its stop conditions."""

import json

import pytest

from canny_cli import config
from canny_cli.exceptions import ApiError
from canny_cli.models import CursorPage
from canny_cli.pagination import depaginate


def _pager(pages):
    """Return a fetch_page that serves *pages* in order and records its calls."""
    calls = []

    def fetch_page(cursor, limit):
        calls.append((cursor, limit))
        return pages[len(calls) - 1]

    return fetch_page, calls


class TestDepaginate:
    def test_follows_cursor_to_the_end(self):
        fetch, calls = _pager(
            [
                CursorPage(items=["A", "B"], has_next_page=True, cursor="c1"),
                CursorPage(items=["C"], has_next_page=False),
            ]
        )
        progress = []
        result = depaginate(fetch, page_size=2, on_progress=progress.append)
        assert result == ["A", "B", "C"]
        assert calls == [(None, 2), ("c1", 2)]
        assert progress == [2, 3]

    def test_single_page(self):
        fetch, calls = _pager([CursorPage(items=["A"], has_next_page=False, cursor="ignored")])
        assert depaginate(fetch) == ["A"]
        assert len(calls) == 1

    def test_default_page_size(self):
        fetch, calls = _pager([CursorPage(items=["A"], has_next_page=False)])
        depaginate(fetch)
        assert calls == [(None, config.USERS_PAGE_SIZE)]

    def test_empty_page_stops_despite_has_next(self):
        fetch, calls = _pager(
            [
                CursorPage(items=["A"], has_next_page=True, cursor="c1"),
                CursorPage(items=[], has_next_page=True, cursor="c2"),
            ]
        )
        progress = []
        assert depaginate(fetch, on_progress=progress.append) == ["A"]
        assert len(calls) == 2
        assert progress == [1]

    def test_empty_first_page(self):
        fetch, calls = _pager([CursorPage(items=[], has_next_page=True, cursor="c1")])
        progress = []
        assert depaginate(fetch, on_progress=progress.append) == []
        assert progress == []
        assert len(calls) == 1

    def test_has_next_without_cursor_stops(self):
        fetch, calls = _pager([CursorPage(items=["A"], has_next_page=True, cursor=None)])
        assert depaginate(fetch) == ["A"]
        assert len(calls) == 1

    def test_ceiling_may_overshoot_by_one_page(self):
        calls = []

        def endless(cursor, limit):
            calls.append(cursor)
            return CursorPage(items=["x"] * limit, has_next_page=True, cursor=f"c{len(calls)}")

        progress = []
        result = depaginate(endless, page_size=3, max_records=5, on_progress=progress.append)
        # 3 records is under the ceiling, 6 exceeds it
        assert len(result) == 6
        assert len(calls) == 2
        assert progress == [3, 6]

    def test_ceiling_not_reached_at_exact_limit(self):
        fetch, calls = _pager(
            [
                CursorPage(items=["A", "B"], has_next_page=True, cursor="c1"),
                CursorPage(items=["C", "D"], has_next_page=True, cursor="c2"),
                CursorPage(items=["E"], has_next_page=False),
            ]
        )
        assert depaginate(fetch, page_size=2, max_records=4) == ["A", "B", "C", "D", "E"]
        assert len(calls) == 3

    def test_default_ceiling(self, monkeypatch):
        monkeypatch.setattr(config, "MAX_DEPAGINATED_RECORDS", 1)
        fetch, calls = _pager(
            [
                CursorPage(items=["A", "B"], has_next_page=True, cursor="c1"),
                CursorPage(items=["C"], has_next_page=False),
            ]
        )
        assert depaginate(fetch) == ["A", "B"]
        assert len(calls) == 1

    def test_error_propagates_without_partial_result(self):
        def failing(cursor, limit):
            if cursor is None:
                return CursorPage(items=["A"], has_next_page=True, cursor="c1")
            raise ApiError(500, "boom")

        with pytest.raises(ApiError):
            depaginate(failing)

    def test_page_events_logged(self, monkeypatch, capsys):
        monkeypatch.setattr(config, "HTTP_LOG_ENABLED", True)
        fetch, _ = _pager([CursorPage(items=["A", "B"], has_next_page=False)])
        depaginate(fetch)
        event = json.loads(capsys.readouterr().err.strip()[len("[HTTP] ") :])
        assert event["phase"] == "page"
        assert event["total"] == 2
