"""
Command implementations for canny-cli.
Each cmd_*() function receives an argparse.Namespace and handles one CLI command.

Request building and decoding live in client.py (CannyClient). These thin
wrappers handle argparse -> keyword args, format selection, and formatter
dispatch.
"""

import sys

from canny_cli import credentials
from canny_cli.api import parse_custom_fields
from canny_cli.client import CannyClient
from canny_cli.exceptions import CliError
from canny_cli.formatters import (
    created_response,
    cursor_hint,
    format_board_detail,
    format_boards,
    format_categories,
    format_category_detail,
    format_comment_detail,
    format_comments,
    format_companies,
    format_company_detail,
    format_entries,
    format_entry_detail,
    format_group_detail,
    format_groups,
    format_idea_detail,
    format_ideas,
    format_insight_detail,
    format_insights,
    format_opportunities,
    format_post_detail,
    format_posts,
    format_status_changes,
    format_tag_detail,
    format_tags,
    format_user_detail,
    format_users,
    format_vote_detail,
    format_votes,
    mutation_response,
    output,
    skip_hint,
)


def _get_client(ns):
    """Build a CannyClient from --api-key/--api-url, the environment, or the store."""
    api_key = credentials.resolve_api_key(getattr(ns, "api_key", None))
    api_url = credentials.resolve_api_url(getattr(ns, "api_url", None))
    return CannyClient(api_url, api_key)


def _found(record, resource):
    if record is None:
        raise CliError(f"{resource} not found.")
    return record


def _offset_list(ns, page, formatter, resource):
    hint = skip_hint(resource, page.next_skip(ns.skip, ns.limit)) if page.items else None
    output(page.items, formatter, ns.format, hint=hint)


def _cursor_list(ns, page, formatter, resource):
    hint = cursor_hint(resource, page.next_cursor) if page.items else None
    output(page.items, formatter, ns.format, hint=hint)


# ---------------------------------------------------------------------------
# Posts
# ---------------------------------------------------------------------------


def cmd_posts_list(ns):
    page = _get_client(ns).list_posts(
        ns.board_id,
        limit=ns.limit,
        skip=ns.skip,
        sort=ns.sort,
        status=",".join(ns.status) if ns.status else None,
        author_id=ns.author_id,
        search=ns.search,
        company_id=ns.company_id,
        tag_ids=ns.tag_id,
    )
    _offset_list(ns, page, format_posts, "posts")


def cmd_posts_get(ns):
    post = _get_client(ns).get_post(post_id=ns.id, url_name=ns.url_name, board_id=ns.board_id)
    output(_found(post, "Post"), format_post_detail, ns.format)


def cmd_posts_create(ns):
    post_id = _get_client(ns).create_post(
        ns.board_id,
        ns.author_id,
        ns.title,
        details=ns.details,
        category_id=ns.category_id,
        by_id=ns.by_id,
        custom_fields=parse_custom_fields(ns.custom_fields),
        eta=ns.eta,
        eta_public=ns.eta_public,
        owner_id=ns.owner_id,
        image_urls=ns.image_url,
        created_at=ns.created_at,
    )
    created_response("post", post_id, ns.format)


def cmd_posts_status(ns):
    _get_client(ns).change_post_status(
        ns.id,
        ns.changer_id,
        ns.status,
        notify_voters=ns.notify,
        comment=ns.comment,
        comment_image_urls=ns.comment_image_url,
    )
    mutation_response(f"Status changed to: {ns.status}", ns.format)


def cmd_posts_category(ns):
    _get_client(ns).change_post_category(ns.id, ns.category_id)
    mutation_response("Category updated.", ns.format)


def cmd_posts_update(ns):
    _get_client(ns).update_post(
        ns.id,
        title=ns.title,
        details=ns.details,
        image_urls=ns.image_url,
        eta=ns.eta,
        eta_public=ns.eta_public,
        custom_fields=parse_custom_fields(ns.custom_fields),
    )
    mutation_response("Post updated.", ns.format)


def cmd_posts_delete(ns):
    _get_client(ns).delete_post(ns.id)
    mutation_response("Post deleted.", ns.format)


def cmd_posts_add_tag(ns):
    _get_client(ns).add_post_tag(ns.id, ns.tag_id)
    mutation_response("Tag added to post.", ns.format)


def cmd_posts_remove_tag(ns):
    _get_client(ns).remove_post_tag(ns.id, ns.tag_id)
    mutation_response("Tag removed from post.", ns.format)


def cmd_posts_link_jira(ns):
    _get_client(ns).link_post_jira(ns.id, ns.issue_key)
    mutation_response(f"Jira issue {ns.issue_key} linked to post.", ns.format)


def cmd_posts_unlink_jira(ns):
    _get_client(ns).unlink_post_jira(ns.id, ns.issue_key)
    mutation_response(f"Jira issue {ns.issue_key} unlinked from post.", ns.format)


# ---------------------------------------------------------------------------
# Comments
# ---------------------------------------------------------------------------


def cmd_comments_list(ns):
    page = _get_client(ns).list_comments(
        post_id=ns.post_id,
        author_id=ns.author_id,
        board_id=ns.board_id,
        company_id=ns.company_id,
        limit=ns.limit,
        skip=ns.skip,
    )
    _offset_list(ns, page, format_comments, "comments")


def cmd_comments_create(ns):
    # Flags are only sent when set so the server default applies otherwise
    comment_id = _get_client(ns).create_comment(
        ns.post_id,
        ns.author_id,
        ns.value,
        parent_id=ns.parent_id,
        created_at=ns.created_at,
        image_urls=ns.image_url,
        internal=True if ns.internal else None,
        notify_voters=True if ns.notify_voters else None,
    )
    created_response("comment", comment_id, ns.format)


def cmd_comments_get(ns):
    comment = _get_client(ns).get_comment(ns.id)
    output(_found(comment, "Comment"), format_comment_detail, ns.format)


def cmd_comments_delete(ns):
    _get_client(ns).delete_comment(ns.id)
    mutation_response("Comment deleted.", ns.format)


# ---------------------------------------------------------------------------
# Categories
# ---------------------------------------------------------------------------


def cmd_categories_list(ns):
    page = _get_client(ns).list_categories(ns.board_id, limit=ns.limit, skip=ns.skip)
    _offset_list(ns, page, format_categories, "categories")


def cmd_categories_get(ns):
    category = _get_client(ns).get_category(ns.id)
    output(_found(category, "Category"), format_category_detail, ns.format)


def cmd_categories_create(ns):
    category_id = _get_client(ns).create_category(
        ns.board_id, ns.name, parent_id=ns.parent_id, subscribe_admins=ns.subscribe_admins
    )
    created_response("category", category_id, ns.format)


def cmd_categories_delete(ns):
    _get_client(ns).delete_category(ns.id)
    mutation_response("Category deleted.", ns.format)


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------


def _print_progress(count):
    print(f"\rFetching users... {count}", end="", file=sys.stderr, flush=True)


def cmd_users_list(ns):
    text = ns.format == "text"
    users = _get_client(ns).list_users(on_progress=_print_progress if text else None)
    if text:
        print("\r\x1b[K", end="", file=sys.stderr, flush=True)
    output(users, format_users, ns.format)


def cmd_users_get(ns):
    user = _get_client(ns).get_user(user_id=ns.id, email=ns.email)
    output(_found(user, "User"), format_user_detail, ns.format)


def cmd_users_create(ns):
    canny_id = _get_client(ns).create_or_update_user(
        ns.user_id,
        ns.email,
        id=ns.id,
        name=ns.name,
        avatar_url=ns.avatar_url,
        company_id=ns.company_id,
        custom_fields=parse_custom_fields(ns.custom_fields),
    )
    created_response("user", canny_id, ns.format, verb="Created/updated")


def cmd_users_delete(ns):
    _get_client(ns).delete_user(ns.id)
    mutation_response("User deleted.", ns.format)


def cmd_users_find(ns):
    user = _get_client(ns).find_user(user_id=ns.user_id, email=ns.email, name=ns.name)
    output(_found(user, "User"), format_user_detail, ns.format)


def cmd_users_remove_from_company(ns):
    _get_client(ns).remove_user_from_company(ns.user_id, ns.company_id)
    mutation_response("User removed from company.", ns.format)


# ---------------------------------------------------------------------------
# Boards
# ---------------------------------------------------------------------------


def cmd_boards_list(ns):
    output(_get_client(ns).list_boards(), format_boards, ns.format)


def cmd_boards_get(ns):
    board = _get_client(ns).get_board(ns.id)
    output(_found(board, "Board"), format_board_detail, ns.format)


def cmd_boards_create(ns):
    created_response("board", _get_client(ns).create_board(ns.name), ns.format)


def cmd_boards_delete(ns):
    _get_client(ns).delete_board(ns.id)
    mutation_response("Board deleted.", ns.format)


# ---------------------------------------------------------------------------
# Tags
# ---------------------------------------------------------------------------


def cmd_tags_list(ns):
    page = _get_client(ns).list_tags(ns.board_id, limit=ns.limit, skip=ns.skip)
    _offset_list(ns, page, format_tags, "tags")


def cmd_tags_get(ns):
    tag = _get_client(ns).get_tag(ns.id)
    output(_found(tag, "Tag"), format_tag_detail, ns.format)


def cmd_tags_create(ns):
    created_response("tag", _get_client(ns).create_tag(ns.board_id, ns.name), ns.format)


def cmd_tags_delete(ns):
    _get_client(ns).delete_tag(ns.id)
    mutation_response("Tag deleted.", ns.format)


# ---------------------------------------------------------------------------
# Companies
# ---------------------------------------------------------------------------


def cmd_companies_list(ns):
    page = _get_client(ns).list_companies(
        limit=ns.limit, cursor=ns.cursor, search=ns.search, segment=ns.segment
    )
    _cursor_list(ns, page, format_companies, "companies")


def cmd_companies_get(ns):
    company = _get_client(ns).get_company(ns.id)
    output(_found(company, "Company"), format_company_detail, ns.format)


def cmd_companies_update(ns):
    _get_client(ns).update_company(
        ns.id,
        name=ns.name,
        monthly_spend=ns.monthly_spend,
        custom_fields=parse_custom_fields(ns.custom_fields),
        created=ns.created,
    )
    mutation_response("Company updated.", ns.format)


def cmd_companies_delete(ns):
    _get_client(ns).delete_company(ns.id)
    mutation_response("Company deleted.", ns.format)


# ---------------------------------------------------------------------------
# Votes
# ---------------------------------------------------------------------------


def cmd_votes_list(ns):
    page = _get_client(ns).list_votes(
        post_id=ns.post_id, user_id=ns.user_id, limit=ns.limit, skip=ns.skip
    )
    _offset_list(ns, page, format_votes, "votes")


def cmd_votes_get(ns):
    vote = _get_client(ns).get_vote(ns.id)
    output(_found(vote, "Vote"), format_vote_detail, ns.format)


def cmd_votes_create(ns):
    _get_client(ns).create_vote(ns.post_id, ns.user_id)
    mutation_response("Vote created.", ns.format)


def cmd_votes_delete(ns):
    _get_client(ns).delete_vote(ns.id)
    mutation_response("Vote deleted.", ns.format)


# ---------------------------------------------------------------------------
# Status changes, changelog, opportunities
# ---------------------------------------------------------------------------


def cmd_status_changes_list(ns):
    page = _get_client(ns).list_status_changes(ns.board_id, limit=ns.limit, skip=ns.skip)
    _offset_list(ns, page, format_status_changes, "status changes")


def cmd_changelog_list(ns):
    page = _get_client(ns).list_entries(
        limit=ns.limit,
        skip=ns.skip,
        entry_type=ns.type,
        label_ids=ns.label_id,
        sort=ns.sort,
    )
    _offset_list(ns, page, format_entries, "entries")


def cmd_changelog_create(ns):
    entry_id = _get_client(ns).create_entry(
        ns.title,
        details=ns.details,
        entry_type=ns.type,
        published=ns.published,
        notify=ns.notify,
        post_ids=ns.post_id,
        label_ids=ns.label_id,
        published_on=ns.published_on,
        scheduled_for=ns.scheduled_for,
    )
    created_response("changelog entry", entry_id, ns.format)


def cmd_changelog_get(ns):
    entry = _get_client(ns).get_entry(ns.id)
    output(_found(entry, "Changelog entry"), format_entry_detail, ns.format)


def cmd_changelog_update(ns):
    _get_client(ns).update_entry(
        ns.id,
        title=ns.title,
        details=ns.details,
        entry_type=ns.type,
        published=ns.published,
        notify=ns.notify,
        label_ids=ns.label_id,
    )
    mutation_response("Changelog entry updated.", ns.format)


def cmd_changelog_delete(ns):
    _get_client(ns).delete_entry(ns.id)
    mutation_response("Changelog entry deleted.", ns.format)


def cmd_opportunities_list(ns):
    page = _get_client(ns).list_opportunities(ns.post_id, limit=ns.limit, skip=ns.skip)
    _offset_list(ns, page, format_opportunities, "opportunities")


# ---------------------------------------------------------------------------
# Groups, insights, ideas
# ---------------------------------------------------------------------------


def cmd_groups_list(ns):
    page = _get_client(ns).list_groups(limit=ns.limit, cursor=ns.cursor)
    _cursor_list(ns, page, format_groups, "groups")


def cmd_groups_get(ns):
    group = _get_client(ns).get_group(group_id=ns.id, url_name=ns.url_name)
    output(_found(group, "Group"), format_group_detail, ns.format)


def cmd_insights_list(ns):
    page = _get_client(ns).list_insights(limit=ns.limit, cursor=ns.cursor, idea_id=ns.idea_id)
    _cursor_list(ns, page, format_insights, "insights")


def cmd_insights_get(ns):
    insight = _get_client(ns).get_insight(ns.id)
    output(_found(insight, "Insight"), format_insight_detail, ns.format)


def cmd_ideas_list(ns):
    page = _get_client(ns).list_ideas(
        limit=ns.limit, cursor=ns.cursor, parent_id=ns.parent_id, search=ns.search
    )
    _cursor_list(ns, page, format_ideas, "ideas")


def cmd_ideas_get(ns):
    idea = _get_client(ns).get_idea(idea_id=ns.id, url_name=ns.url_name)
    output(_found(idea, "Idea"), format_idea_detail, ns.format)


# ---------------------------------------------------------------------------
# Autopilot
# ---------------------------------------------------------------------------


def cmd_autopilot_enqueue(ns):
    item_id = _get_client(ns).enqueue_autopilot_feedback(
        ns.feedback, ns.user_id, source_url=ns.source_url
    )
    created_response("feedback", item_id, ns.format, verb="Enqueued")
