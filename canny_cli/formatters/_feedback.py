"""Formatters for posts, comments, categories, tags, votes, and status changes."""

from canny_cli.formatters._table import _detail, _sanitize_str, _table, _trunc


def _name_of(user, default="Unknown"):
    return user.name if user is not None else default


def format_posts(posts):
    """Format a page of posts as summary blocks.

    Accepts list of Post from CannyClient.list_posts().
    """
    if not posts:
        return "No posts found."
    lines = []
    for p in posts:
        status = (p.status or "unknown").upper()
        lines.append("")
        lines.append(f"{p.id} {_sanitize_str(p.title)}")
        lines.append(f"  {status} | {p.score} votes | {p.comment_count} comments")
        if p.category is not None:
            lines.append(f"  Category: {_sanitize_str(p.category.name)}")
    return "\n".join(lines)


def format_post_detail(post):
    return _detail(
        post.title,
        [
            ("Status", post.status.upper() if post.status else None),
            ("Votes", post.score),
            ("Comments", post.comment_count),
            ("Author", post.author.name if post.author else None),
            ("Category", post.category.name if post.category else None),
            ("Created", post.created),
            ("URL", post.url),
            ("ID", post.id),
        ],
        "Description",
        post.details,
    )


def format_comments(comments):
    """Format comments in server order; replies are indented with an arrow."""
    if not comments:
        return "No comments found."
    lines = []
    for c in comments:
        prefix = "  ↳ " if c.parent_id else ""
        pinned = " [PINNED]" if c.pinned else ""
        lines.append("")
        lines.append(f"{prefix}{_sanitize_str(_name_of(c.author))} {c.created}{pinned}")
        lines.append(f"{prefix}{_sanitize_str(c.value)}")
        lines.append(f"{prefix}ID: {c.id}")
    return "\n".join(lines)


def format_comment_detail(comment):
    return _detail(
        "Comment",
        [
            ("ID", comment.id),
            ("Author", _name_of(comment.author)),
            ("Created", comment.created),
            ("Post ID", comment.post.id if comment.post else None),
            ("Post", comment.post.title if comment.post else None),
            ("Parent ID", f"{comment.parent_id} (reply)" if comment.parent_id else None),
            ("Pinned", "Yes" if comment.pinned else None),
        ],
        "Content",
        comment.value,
    )


def format_categories(categories):
    if not categories:
        return "No categories found."
    cols = [("ID", 26), ("Name", 40), ("Posts", 0)]
    rows = [(c.id, _trunc(c.name, 40), c.post_count or 0) for c in categories]
    return "Categories:\n" + _table(cols, rows)


def format_category_detail(category):
    return _detail(
        category.name,
        [("ID", category.id), ("Posts", category.post_count or 0), ("URL", category.url)],
    )


def format_tags(tags):
    if not tags:
        return "No tags found."
    cols = [("ID", 26), ("Name", 40), ("Posts", 0)]
    rows = [(t.id, _trunc(t.name, 40), t.post_count or 0) for t in tags]
    return "Tags:\n" + _table(cols, rows)


def format_tag_detail(tag):
    return _detail(
        tag.name,
        [
            ("ID", tag.id),
            ("Posts", tag.post_count or 0),
            ("Board ID", tag.board_id),
            ("Created", tag.created),
            ("URL", tag.url),
        ],
    )


def format_votes(votes):
    if not votes:
        return "No votes found."
    cols = [("ID", 26), ("Voter", 30), ("Created", 0)]
    rows = [(v.id, _trunc(_name_of(v.voter), 30), v.created or "") for v in votes]
    return "Votes:\n" + _table(cols, rows)


def format_vote_detail(vote):
    return _detail(
        "Vote",
        [
            ("ID", vote.id),
            ("Voter", vote.voter.name if vote.voter else None),
            ("Email", vote.voter.email if vote.voter else None),
            ("Post ID", vote.post_id),
            ("Created", vote.created),
        ],
    )


def format_status_changes(changes):
    if not changes:
        return "No status changes found."
    lines = ["Status Changes:"]
    for sc in changes:
        status = (sc.status or "unknown").upper()
        lines.append("")
        lines.append(
            f"  {sc.id} Status -> {status} by {_sanitize_str(_name_of(sc.changer))} "
            f"{sc.created or ''}".rstrip()
        )
        if sc.post_id:
            lines.append(f"    Post ID: {sc.post_id}")
    return "\n".join(lines)
