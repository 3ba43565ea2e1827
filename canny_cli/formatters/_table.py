"""Low-level text rendering helpers (stdlib only)."""

import re

_CONTROL_RE = re.compile(r"\x1b\[[0-9;]*[A-Za-z]|[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")

RULE = "─" * 60


def _trunc(s, maxlen):
    """Truncate string with ellipsis indicator."""
    if not s:
        return ""
    return s[: maxlen - 1] + "…" if len(s) > maxlen else s


def _sanitize_str(s):
    """Strip ANSI escape sequences and control chars from server-supplied text.
    Preserves newlines (\\n) and tabs (\\t)."""
    if not s:
        return s
    return _CONTROL_RE.sub("", str(s))


def _table(columns, rows):
    """Build a fixed-width table string.
    columns: list of (name, width) tuples. Last column has no width (fills).
    rows: list of tuples matching columns."""
    header = " ".join(
        name if i == len(columns) - 1 else f"{name:<{width}}"
        for i, (name, width) in enumerate(columns)
    )
    lines = [header, "-" * max(len(header), 60)]
    for row in rows:
        cells = []
        for i, val in enumerate(row):
            safe = _sanitize_str(val) if isinstance(val, str) else str(val)
            cells.append(safe if i == len(columns) - 1 else f"{safe:<{columns[i][1]}}")
        lines.append(" ".join(cells).rstrip())
    return "\n".join(lines)


def _detail(title, fields, body_label=None, body=None):
    """Render a titled record with ``Label: value`` lines.

    fields: list of (label, value) pairs; pairs whose value is None or "" are
    skipped. body, when present, is printed under *body_label* after a blank
    line.
    """
    lines = ["", _sanitize_str(title) or "", RULE]
    for label, value in fields:
        if value is None or value == "":
            continue
        lines.append(f"{label}: {_sanitize_str(value) if isinstance(value, str) else value}")
    if body:
        lines.append("")
        lines.append(f"{body_label}:")
        lines.append(_sanitize_str(body))
    return "\n".join(lines)
