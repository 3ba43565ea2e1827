"""Formatters for users, boards, companies, and groups."""

import json

from canny_cli.formatters._table import _detail, _sanitize_str


def format_users(users):
    """Format the full user listing.

    Accepts list of UserFull from CannyClient.list_users().
    """
    if not users:
        return "No users found."
    lines = [f"Users: ({len(users)} total)"]
    for u in users:
        badge = " [ADMIN]" if u.is_admin else ""
        lines.append("")
        lines.append(f"  {u.id} {_sanitize_str(u.name or '(no name)')}{badge}")
        if u.email:
            lines.append(f"    Email: {_sanitize_str(u.email)}")
    return "\n".join(lines)


def format_user_detail(user):
    return _detail(
        user.name or "(no name)",
        [
            ("ID", user.id),
            ("Email", user.email),
            ("Role", "Admin" if user.is_admin else None),
            ("Created", user.created),
            ("Last Activity", user.last_activity),
            ("URL", user.url),
            ("User ID", user.user_id),
        ],
    )


def format_boards(boards):
    if not boards:
        return "No boards found."
    lines = [f"Boards: ({len(boards)} total)"]
    for b in boards:
        badge = " [PRIVATE]" if b.is_private else ""
        lines.append("")
        lines.append(f"  {b.id} {_sanitize_str(b.name)}{badge}")
        lines.append(f"    Posts: {b.post_count or 0}")
        if b.url:
            lines.append(f"    URL: {b.url}")
    return "\n".join(lines)


def format_board_detail(board):
    return _detail(
        board.name,
        [
            ("ID", board.id),
            ("Posts", board.post_count or 0),
            ("Private", "Yes" if board.is_private else None),
            ("Private Comments", "Yes" if board.private_comments else None),
            ("Created", board.created),
            ("URL", board.url),
        ],
    )


def _money(amount):
    return None if amount is None else f"${amount:.2f}"


def format_companies(companies):
    if not companies:
        return "No companies found."
    lines = [f"Companies: ({len(companies)} returned)"]
    for c in companies:
        lines.append("")
        lines.append(f"  {c.id} {_sanitize_str(c.name or '(no name)')}")
        lines.append(f"    Users: {c.user_count or 0}")
        if c.monthly_spend is not None:
            lines.append(f"    Monthly Spend: {_money(c.monthly_spend)}")
        if c.created:
            lines.append(f"    Created: {c.created}")
    return "\n".join(lines)


def format_company_detail(company):
    custom = None
    if company.custom_fields is not None:
        custom = json.dumps(company.custom_fields, indent=2, ensure_ascii=False)
    return _detail(
        company.name or "(no name)",
        [
            ("ID", company.id),
            ("Users", company.user_count or 0),
            ("Monthly Spend", _money(company.monthly_spend)),
            ("Created", company.created),
            ("Custom Fields", custom),
        ],
    )


def format_groups(groups):
    if not groups:
        return "No groups found."
    lines = ["Groups:"]
    for g in groups:
        lines.append("")
        lines.append(f"  {g.id} {_sanitize_str(g.name or '(no name)')}")
        lines.append(f"    Members: {g.member_count or 0}")
        if g.url:
            lines.append(f"    URL: {g.url}")
        if g.created:
            lines.append(f"    Created: {g.created}")
    return "\n".join(lines)


def format_group_detail(group):
    return _detail(
        group.name or "(no name)",
        [
            ("ID", group.id),
            ("Members", group.member_count or 0),
            ("URL", group.url),
            ("Created", group.created),
        ],
    )
