"""Core output dispatchers shared by every command."""

import json

from canny_cli.models import Record


def to_plain(data):
    """Convert records (or lists of them) into JSON-ready dicts."""
    if isinstance(data, Record):
        return data.to_dict()
    if isinstance(data, list):
        return [to_plain(item) for item in data]
    return data


def pretty_print(data):
    print(json.dumps(to_plain(data), indent=2, ensure_ascii=False))


def output(data, formatter=None, fmt="json", hint=None):
    """Output data in requested format.

    In text mode *hint* (a "More ... available" line) is printed after a
    blank line. JSON output never carries hints.
    """
    if fmt == "text" and formatter:
        print(formatter(data))
        if hint:
            print(f"\n{hint}")
    else:
        pretty_print(data)


def skip_hint(resource, next_skip):
    """Follow-up hint for offset listings, or None on the last page."""
    if next_skip is None:
        return None
    return f"More {resource} available. Use --skip {next_skip} to see more."


def cursor_hint(resource, next_cursor):
    """Follow-up hint for cursor listings, or None on the last page."""
    if not next_cursor:
        return None
    return f"More {resource} available. Use --cursor {next_cursor} to see more."


def mutation_response(message, fmt="json"):
    """Print a mutation confirmation."""
    if fmt == "json":
        print(json.dumps({"success": True}))
    else:
        print(f"✓ {message}")


def created_response(resource, new_id, fmt="json", verb="Created"):
    """Print the ID of a newly created resource."""
    if fmt == "json":
        print(json.dumps({"id": new_id}))
    else:
        print(f"✓ {verb} {resource} with ID: {new_id}")
