"""Output formatting package for canny-cli.

Re-exports all public names so consumers can do:
    from canny_cli.formatters import format_posts
"""

from canny_cli.formatters._accounts import (
    format_board_detail,
    format_boards,
    format_companies,
    format_company_detail,
    format_group_detail,
    format_groups,
    format_user_detail,
    format_users,
)
from canny_cli.formatters._core import (
    created_response,
    cursor_hint,
    mutation_response,
    output,
    pretty_print,
    skip_hint,
    to_plain,
)
from canny_cli.formatters._feedback import (
    format_categories,
    format_category_detail,
    format_comment_detail,
    format_comments,
    format_post_detail,
    format_posts,
    format_status_changes,
    format_tag_detail,
    format_tags,
    format_vote_detail,
    format_votes,
)
from canny_cli.formatters._roadmap import (
    format_entries,
    format_entry_detail,
    format_idea_detail,
    format_ideas,
    format_insight_detail,
    format_insights,
    format_opportunities,
)
from canny_cli.formatters._table import (
    _CONTROL_RE,
    _sanitize_str,
    _table,
    _trunc,
)

__all__ = [
    "_CONTROL_RE",
    "_sanitize_str",
    "_table",
    "_trunc",
    "created_response",
    "cursor_hint",
    "format_board_detail",
    "format_boards",
    "format_categories",
    "format_category_detail",
    "format_comment_detail",
    "format_comments",
    "format_companies",
    "format_company_detail",
    "format_entries",
    "format_entry_detail",
    "format_group_detail",
    "format_groups",
    "format_idea_detail",
    "format_ideas",
    "format_insight_detail",
    "format_insights",
    "format_opportunities",
    "format_post_detail",
    "format_posts",
    "format_status_changes",
    "format_tag_detail",
    "format_tags",
    "format_user_detail",
    "format_users",
    "format_vote_detail",
    "format_votes",
    "mutation_response",
    "output",
    "pretty_print",
    "skip_hint",
    "to_plain",
]
