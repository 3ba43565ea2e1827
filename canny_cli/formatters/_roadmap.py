"""Formatters for changelog entries, opportunities, ideas, and insights."""

from canny_cli.formatters._table import _detail, _sanitize_str


def format_entries(entries):
    if not entries:
        return "No changelog entries found."
    lines = ["Changelog Entries:"]
    for e in entries:
        badge = f" [{e.entry_type.upper()}]" if e.entry_type else ""
        lines.append("")
        lines.append(f"  {e.id} {_sanitize_str(e.title or '(no title)')}{badge}")
        lines.append(f"    Status: {(e.status or 'draft').upper()}")
        if e.published_at:
            lines.append(f"    Published: {e.published_at}")
        if e.created:
            lines.append(f"    Created: {e.created}")
        if e.url:
            lines.append(f"    URL: {e.url}")
    return "\n".join(lines)


def format_entry_detail(entry):
    return _detail(
        entry.title or "(no title)",
        [
            ("ID", entry.id),
            ("Type", entry.entry_type),
            ("Status", entry.status.upper() if entry.status else None),
            ("Published", entry.published_at),
            ("Created", entry.created),
            ("URL", entry.url),
        ],
        "Details",
        entry.details,
    )


def _opportunity_state(opp):
    if not opp.closed:
        return "OPEN"
    return "WON" if opp.won else "LOST"


def format_opportunities(opportunities):
    if not opportunities:
        return "No opportunities found."
    lines = ["Opportunities:"]
    for o in opportunities:
        lines.append("")
        lines.append(f"  {o.id} {_sanitize_str(o.name or '(no name)')}")
        lines.append(f"    Status: {_opportunity_state(o)}")
        if o.value is not None:
            lines.append(f"    Value: ${o.value:.2f}")
        if o.opportunity_id:
            lines.append(f"    Opportunity ID: {o.opportunity_id}")
        if o.salesforce_opportunity_id:
            lines.append(f"    Salesforce ID: {o.salesforce_opportunity_id}")
    return "\n".join(lines)


def format_ideas(ideas):
    if not ideas:
        return "No ideas found."
    lines = ["Ideas:"]
    for i in ideas:
        lines.append("")
        lines.append(f"  {i.id} {_sanitize_str(i.name or '(no name)')}")
        if i.post_count is not None:
            lines.append(f"    Posts: {i.post_count}")
        if i.url:
            lines.append(f"    URL: {i.url}")
        if i.created:
            lines.append(f"    Created: {i.created}")
    return "\n".join(lines)


def format_idea_detail(idea):
    return _detail(
        idea.name or "(no name)",
        [("ID", idea.id), ("Posts", idea.post_count), ("URL", idea.url), ("Created", idea.created)],
        "Description",
        idea.description,
    )


def format_insights(insights):
    if not insights:
        return "No insights found."
    lines = ["Insights:"]
    for i in insights:
        lines.append("")
        lines.append(f"  {i.id} {_sanitize_str(i.title or '(no title)')}")
        if i.url:
            lines.append(f"    URL: {i.url}")
        if i.created:
            lines.append(f"    Created: {i.created}")
    return "\n".join(lines)


def format_insight_detail(insight):
    return _detail(
        insight.title or "(no title)",
        [("ID", insight.id), ("URL", insight.url), ("Created", insight.created)],
        "Description",
        insight.description,
    )
