"""canny-cli — command-line client and Python API for the Canny feedback service."""

from canny_cli.client import CannyClient
from canny_cli.config import VERSION
from canny_cli.exceptions import (
    ApiError,
    CliError,
    DecodeError,
    SetupError,
    TransportError,
    ValidationError,
)
from canny_cli.models import (
    Board,
    Category,
    Comment,
    Company,
    CursorPage,
    Entry,
    Group,
    Idea,
    Insight,
    OffsetPage,
    Opportunity,
    Post,
    StatusChange,
    Tag,
    User,
    UserFull,
    Vote,
)

__all__ = [
    "VERSION",
    "CannyClient",
    "CliError",
    "SetupError",
    "ValidationError",
    "TransportError",
    "ApiError",
    "DecodeError",
    "Board",
    "Category",
    "Comment",
    "Company",
    "CursorPage",
    "Entry",
    "Group",
    "Idea",
    "Insight",
    "OffsetPage",
    "Opportunity",
    "Post",
    "StatusChange",
    "Tag",
    "User",
    "UserFull",
    "Vote",
]
