"""
canny-cli — command-line client for the Canny feedback service
"""

import argparse
import json
import sys

from canny_cli import commands, config
from canny_cli.auth import cmd_auth
from canny_cli.exceptions import (
    ApiError,
    CliError,
    DecodeError,
    SetupError,
    TransportError,
    ValidationError,
)

HELP_TEXT = """\
Usage: canny [global flags] <resource> <action> [flags...]

Global flags (accepted anywhere on the line):
  --json                  Output JSON instead of readable text
  --api-key <key>         API key (default: CANNY_API_KEY, then the stored key)
  --api-url <url>         API base URL (default: CANNY_API_URL, then the stored
                          URL, then https://canny.io/api/v1)
  --verbose, -v           Log HTTP requests to stderr
  --version               Show version number

Resources and actions:
  auth [--reset]          Show and verify credentials, or prompt for new ones
  posts                   list | get | create | status | category | update |
                          delete | add-tag | remove-tag | link-jira | unlink-jira
  comments                list | create | get | delete
  categories              list | get | create | delete
  users                   list | get | create | delete | find | remove-from-company
  boards                  list | get | create | delete
  tags                    list | get | create | delete
  companies               list | get | update | delete
  votes                   list | get | create | delete
  status-changes          list
  changelog               list | create | get | update | delete
  opportunities           list
  groups                  list | get
  insights                list | get
  ideas                   list | get
  autopilot               enqueue

Run `canny <resource> <action> --help` for the flags of one action.

Listings show one page. Follow the "Use --skip N" or "Use --cursor C" hint
printed after a page to fetch the next one. `users list` fetches every user.
"""


# ---------------------------------------------------------------------------
# Global flag extraction (before argparse, so --json works after the action)
# ---------------------------------------------------------------------------

_VALUE_FLAGS = {"--api-key": "api_key", "--api-url": "api_url"}


def _extract_global_flags(argv):
    """Extract global flags from argv regardless of position.

    Returns (format_str, verbose, values, remaining_argv), where values maps
    api_key/api_url to their string or None. Handles --version directly.
    """
    fmt = "text"
    verbose = False
    values = {"api_key": None, "api_url": None}
    remaining = []
    i = 0
    while i < len(argv):
        arg = argv[i]
        flag, eq, inline = arg.partition("=")
        if arg == "--version":
            print(f"canny-cli {config.VERSION}")
            sys.exit(0)
        elif arg == "--json":
            fmt = "json"
        elif arg in ("--verbose", "-v"):
            verbose = True
        elif flag in _VALUE_FLAGS and eq:
            values[_VALUE_FLAGS[flag]] = inline
        elif arg in _VALUE_FLAGS:
            if i + 1 >= len(argv):
                raise ValidationError(f"{arg} requires a value")
            values[_VALUE_FLAGS[arg]] = argv[i + 1]
            i += 1
        else:
            remaining.append(arg)
        i += 1
    return fmt, verbose, values, remaining


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------


class _SubcommandParser(argparse.ArgumentParser):
    """Parser that raises ValidationError instead of exiting with usage text."""

    def error(self, message):
        raise ValidationError(f"{self.prog}: {message}")


def _positive_int(value):
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError("must be a positive integer") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("must be a positive integer")
    return parsed


def _non_negative_int(value):
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError("must be a non-negative integer") from exc
    if parsed < 0:
        raise argparse.ArgumentTypeError("must be a non-negative integer")
    return parsed


def _bool_value(value):
    """Parse an explicit true/false flag value."""
    lowered = value.strip().lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    raise argparse.ArgumentTypeError("must be true or false")


def _offset_args(p, limit):
    p.add_argument("--limit", type=_positive_int, default=limit)
    p.add_argument("--skip", type=_non_negative_int, default=0)


def _cursor_args(p, limit):
    p.add_argument("--limit", type=_positive_int, default=limit)
    p.add_argument("--cursor")


def _action(group, name, func, help_text=None):
    p = group.add_parser(name, help=help_text)
    p.set_defaults(func=func)
    return p


def _resource(sub, name, help_text):
    p = sub.add_parser(name, help=help_text)
    p.set_defaults(func=None)
    return p.add_subparsers(dest="action", parser_class=_SubcommandParser)


def _add_posts(sub):
    g = _resource(sub, "posts", "Feedback posts")

    p = _action(g, "list", commands.cmd_posts_list, "List posts on a board")
    p.add_argument("--board-id", required=True)
    _offset_args(p, 10)
    p.add_argument("--sort", choices=config.POST_SORTS, default="newest")
    p.add_argument("--status", action="append")  # repeatable, joined with ","
    p.add_argument("--author-id")
    p.add_argument("--search")
    p.add_argument("--company-id")
    p.add_argument("--tag-id", action="append")

    p = _action(g, "get", commands.cmd_posts_get, "Show one post by --id or --url-name")
    p.add_argument("--id")
    p.add_argument("--url-name")
    p.add_argument("--board-id")

    p = _action(g, "create", commands.cmd_posts_create, "Create a post")
    p.add_argument("--board-id", required=True)
    p.add_argument("--author-id", required=True)
    p.add_argument("--title", required=True)
    p.add_argument("--details")
    p.add_argument("--category-id")
    p.add_argument("--by-id")
    p.add_argument("--custom-fields", metavar="JSON")
    p.add_argument("--eta", metavar="MM/YYYY")
    p.add_argument("--eta-public", type=_bool_value, metavar="true|false")
    p.add_argument("--owner-id")
    p.add_argument("--image-url", action="append")
    p.add_argument("--created-at")

    p = _action(g, "status", commands.cmd_posts_status, "Change a post's status")
    p.add_argument("--id", required=True)
    p.add_argument("--changer-id", required=True)
    p.add_argument("--status", required=True)
    p.add_argument("--notify", action="store_true")
    p.add_argument("--comment")
    p.add_argument("--comment-image-url", action="append")

    p = _action(g, "category", commands.cmd_posts_category, "Move a post to a category")
    p.add_argument("--id", required=True)
    p.add_argument("--category-id", required=True)

    p = _action(g, "update", commands.cmd_posts_update, "Update a post")
    p.add_argument("--id", required=True)
    p.add_argument("--title")
    p.add_argument("--details")
    p.add_argument("--image-url", action="append")
    p.add_argument("--eta", metavar="MM/YYYY")
    p.add_argument("--eta-public", type=_bool_value, metavar="true|false")
    p.add_argument("--custom-fields", metavar="JSON")

    p = _action(g, "delete", commands.cmd_posts_delete, "Delete a post")
    p.add_argument("--id", required=True)

    for name, func in (
        ("add-tag", commands.cmd_posts_add_tag),
        ("remove-tag", commands.cmd_posts_remove_tag),
    ):
        p = _action(g, name, func)
        p.add_argument("--id", required=True)
        p.add_argument("--tag-id", required=True)

    for name, func in (
        ("link-jira", commands.cmd_posts_link_jira),
        ("unlink-jira", commands.cmd_posts_unlink_jira),
    ):
        p = _action(g, name, func)
        p.add_argument("--id", required=True)
        p.add_argument("--issue-key", required=True)


def _add_comments(sub):
    g = _resource(sub, "comments", "Comments on posts")

    p = _action(g, "list", commands.cmd_comments_list)
    p.add_argument("--post-id")
    p.add_argument("--author-id")
    p.add_argument("--board-id")
    p.add_argument("--company-id")
    _offset_args(p, 10)

    p = _action(g, "create", commands.cmd_comments_create)
    p.add_argument("--post-id", required=True)
    p.add_argument("--author-id", required=True)
    p.add_argument("--value", required=True)
    p.add_argument("--parent-id")
    p.add_argument("--created-at")
    p.add_argument("--image-url", action="append")
    p.add_argument("--internal", action="store_true")
    p.add_argument("--notify-voters", action="store_true")

    _action(g, "get", commands.cmd_comments_get).add_argument("--id", required=True)
    _action(g, "delete", commands.cmd_comments_delete).add_argument("--id", required=True)


def _add_categories(sub):
    g = _resource(sub, "categories", "Board categories")

    p = _action(g, "list", commands.cmd_categories_list)
    p.add_argument("--board-id", required=True)
    _offset_args(p, 100)

    _action(g, "get", commands.cmd_categories_get).add_argument("--id", required=True)

    p = _action(g, "create", commands.cmd_categories_create)
    p.add_argument("--board-id", required=True)
    p.add_argument("--name", required=True)
    p.add_argument("--parent-id")
    p.add_argument(
        "--subscribe-admins", type=_bool_value, default=True, metavar="true|false"
    )

    _action(g, "delete", commands.cmd_categories_delete).add_argument("--id", required=True)


def _add_users(sub):
    g = _resource(sub, "users", "End users")

    _action(g, "list", commands.cmd_users_list, "List every user")

    p = _action(g, "get", commands.cmd_users_get, "Show one user by --id or --email")
    p.add_argument("--id")
    p.add_argument("--email")

    p = _action(g, "create", commands.cmd_users_create, "Create or update a user")
    p.add_argument("--user-id", required=True)
    p.add_argument("--email", required=True)
    p.add_argument("--id")
    p.add_argument("--name")
    p.add_argument("--avatar-url")
    p.add_argument("--company-id")
    p.add_argument("--custom-fields", metavar="JSON")

    _action(g, "delete", commands.cmd_users_delete).add_argument("--id", required=True)

    p = _action(g, "find", commands.cmd_users_find)
    p.add_argument("--user-id")
    p.add_argument("--email")
    p.add_argument("--name")

    p = _action(g, "remove-from-company", commands.cmd_users_remove_from_company)
    p.add_argument("--user-id", required=True)
    p.add_argument("--company-id", required=True)


def _add_boards_and_tags(sub):
    g = _resource(sub, "boards", "Feedback boards")
    _action(g, "list", commands.cmd_boards_list)
    _action(g, "get", commands.cmd_boards_get).add_argument("--id", required=True)
    _action(g, "create", commands.cmd_boards_create).add_argument("--name", required=True)
    _action(g, "delete", commands.cmd_boards_delete).add_argument("--id", required=True)

    g = _resource(sub, "tags", "Post tags")
    p = _action(g, "list", commands.cmd_tags_list)
    p.add_argument("--board-id", required=True)
    _offset_args(p, 100)
    _action(g, "get", commands.cmd_tags_get).add_argument("--id", required=True)
    p = _action(g, "create", commands.cmd_tags_create)
    p.add_argument("--board-id", required=True)
    p.add_argument("--name", required=True)
    _action(g, "delete", commands.cmd_tags_delete).add_argument("--id", required=True)


def _add_companies_and_votes(sub):
    g = _resource(sub, "companies", "Customer companies")
    p = _action(g, "list", commands.cmd_companies_list)
    _cursor_args(p, 100)
    p.add_argument("--search")
    p.add_argument("--segment")
    _action(g, "get", commands.cmd_companies_get).add_argument("--id", required=True)
    p = _action(g, "update", commands.cmd_companies_update)
    p.add_argument("--id", required=True)
    p.add_argument("--name")
    p.add_argument("--monthly-spend", type=float)
    p.add_argument("--custom-fields", metavar="JSON")
    p.add_argument("--created")
    _action(g, "delete", commands.cmd_companies_delete).add_argument("--id", required=True)

    g = _resource(sub, "votes", "Votes on posts")
    p = _action(g, "list", commands.cmd_votes_list)
    p.add_argument("--post-id")
    p.add_argument("--user-id")
    _offset_args(p, 10)
    _action(g, "get", commands.cmd_votes_get).add_argument("--id", required=True)
    p = _action(g, "create", commands.cmd_votes_create)
    p.add_argument("--post-id", required=True)
    p.add_argument("--user-id", required=True)
    _action(g, "delete", commands.cmd_votes_delete).add_argument("--id", required=True)


def _add_changelog(sub):
    g = _resource(sub, "status-changes", "Post status history")
    p = _action(g, "list", commands.cmd_status_changes_list)
    p.add_argument("--board-id", required=True)
    _offset_args(p, 10)

    g = _resource(sub, "changelog", "Changelog entries")
    p = _action(g, "list", commands.cmd_changelog_list)
    _offset_args(p, 10)
    p.add_argument("--type")
    p.add_argument("--label-id", action="append")
    p.add_argument("--sort", choices=config.ENTRY_SORTS)

    p = _action(g, "create", commands.cmd_changelog_create)
    p.add_argument("--title", required=True)
    p.add_argument("--details")
    p.add_argument("--type")
    p.add_argument("--published", type=_bool_value, metavar="true|false")
    p.add_argument("--notify", type=_bool_value, metavar="true|false")
    p.add_argument("--post-id", action="append")
    p.add_argument("--label-id", action="append")
    p.add_argument("--published-on")
    p.add_argument("--scheduled-for")

    _action(g, "get", commands.cmd_changelog_get).add_argument("--id", required=True)
    _action(g, "delete", commands.cmd_changelog_delete).add_argument("--id", required=True)

    p = _action(g, "update", commands.cmd_changelog_update)
    p.add_argument("--id", required=True)
    p.add_argument("--title")
    p.add_argument("--details")
    p.add_argument("--type")
    p.add_argument("--published", type=_bool_value, metavar="true|false")
    p.add_argument("--notify", type=_bool_value, metavar="true|false")
    p.add_argument("--label-id", action="append")

    g = _resource(sub, "opportunities", "CRM opportunities linked to posts")
    p = _action(g, "list", commands.cmd_opportunities_list)
    p.add_argument("--post-id", required=True)
    _offset_args(p, 10)


def _add_discovery(sub):
    g = _resource(sub, "groups", "User groups")
    _cursor_args(_action(g, "list", commands.cmd_groups_list), 10)
    p = _action(g, "get", commands.cmd_groups_get)
    p.add_argument("--id")
    p.add_argument("--url-name")

    g = _resource(sub, "insights", "Autopilot insights")
    p = _action(g, "list", commands.cmd_insights_list)
    _cursor_args(p, 10)
    p.add_argument("--idea-id")
    _action(g, "get", commands.cmd_insights_get).add_argument("--id", required=True)

    g = _resource(sub, "ideas", "Ideas")
    p = _action(g, "list", commands.cmd_ideas_list)
    _cursor_args(p, 10)
    p.add_argument("--parent-id")
    p.add_argument("--search")
    p = _action(g, "get", commands.cmd_ideas_get)
    p.add_argument("--id")
    p.add_argument("--url-name")

    g = _resource(sub, "autopilot", "Autopilot feedback queue")
    p = _action(g, "enqueue", commands.cmd_autopilot_enqueue)
    p.add_argument("--feedback", required=True)
    p.add_argument("--user-id", required=True)
    p.add_argument("--source-url")


def build_parser():
    parser = _SubcommandParser(
        prog="canny",
        description="Command-line client for the Canny feedback service",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        add_help=False,
    )
    parser.add_argument("--help", "-h", action="store_true", dest="show_help")
    sub = parser.add_subparsers(dest="command", parser_class=_SubcommandParser)

    p = sub.add_parser("auth", help="Show, verify, or store credentials")
    p.add_argument("--reset", action="store_true")
    p.set_defaults(func=cmd_auth)

    _add_posts(sub)
    _add_comments(sub)
    _add_categories(sub)
    _add_users(sub)
    _add_boards_and_tags(sub)
    _add_companies_and_votes(sub)
    _add_changelog(sub)
    _add_discovery(sub)
    return parser


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

_ERROR_TYPES = (
    (SetupError, "setup"),
    (ValidationError, "validation"),
    (TransportError, "transport"),
    (ApiError, "api"),
    (DecodeError, "decode"),
)


def _error_type(err):
    for cls, name in _ERROR_TYPES:
        if isinstance(err, cls):
            return name
    return "error"


def _emit_cli_error(err, fmt):
    msg = str(err)
    if fmt == "json":
        payload = {
            "ok": False,
            "error": {
                "type": _error_type(err),
                "message": msg,
                "exit_code": getattr(err, "exit_code", 1),
            },
        }
        if isinstance(err, ApiError):
            payload["error"]["status"] = err.status
        print(json.dumps(payload, ensure_ascii=False), file=sys.stderr)
        return
    print(msg, file=sys.stderr)


def main(argv=None):
    if hasattr(sys.stdout, "reconfigure"):
        sys.stdout.reconfigure(encoding="utf-8", errors="replace")

    argv = sys.argv[1:] if argv is None else argv
    fmt = "text"
    try:
        # Extract global flags from anywhere in argv
        fmt, verbose, values, remaining_argv = _extract_global_flags(argv)
        if verbose:
            config.HTTP_LOG_ENABLED = True

        if not remaining_argv:
            print(HELP_TEXT)
            sys.exit(0)

        parser = build_parser()
        ns = parser.parse_args(remaining_argv)
        ns.format = fmt
        ns.api_key = values["api_key"]
        ns.api_url = values["api_url"]

        if ns.show_help or not ns.command:
            print(HELP_TEXT)
            sys.exit(0)

        handler = getattr(ns, "func", None)
        if handler is None:
            raise ValidationError(
                f"Missing action for '{ns.command}'. Run `canny {ns.command} --help`."
            )
        handler(ns)

    except CliError as e:
        _emit_cli_error(e, fmt)
        sys.exit(e.exit_code)


if __name__ == "__main__":
    main()
