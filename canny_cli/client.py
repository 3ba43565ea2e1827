"""
CannyClient — public Python API for the Canny feedback service.

One method per REST action. Each builds a JSON body, posts it through the
transport, and decodes the response into typed records.
"""

from __future__ import annotations

from typing import Any

from canny_cli import config
from canny_cli.api import (
    build_body,
    check_status,
    decode_created_id,
    decode_cursor_page,
    decode_json,
    decode_listing_page,
    decode_offset_page,
    decode_records,
    decode_retrieve,
    expect_object,
    http_post,
    versioned_url,
)
from canny_cli.exceptions import ValidationError
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
    UserFull,
    Vote,
)
from canny_cli.pagination import depaginate


def _require_one_of(**candidates):
    """Raise ValidationError unless at least one keyword has a value."""
    if all(value is None for value in candidates.values()):
        flags = [f"--{name.replace('_', '-')}" for name in candidates]
        if len(flags) == 2:
            raise ValidationError(f"Either {flags[0]} or {flags[1]} must be provided")
        raise ValidationError(
            f"At least one of {', '.join(flags[:-1])}, or {flags[-1]} must be provided"
        )


class CannyClient:
    """Client for one Canny account.

    Instances are reusable across calls but must not be shared by concurrent
    callers. Methods raise TransportError, ApiError, DecodeError, or
    ValidationError (all CliError subclasses) on failure.
    """

    def __init__(self, api_url: str, api_key: str, *, transport=None):
        """Initialize the client.

        Args:
            api_url: Base URL ending in the API version, e.g.
                ``https://acme.canny.io/api/v1``.
            api_key: Secret API key, sent as ``apiKey`` in every body.
            transport: ``transport(url, payload) -> (status, text)``.
                Defaults to ``api.http_post``.
        """
        self.api_url = api_url
        self.api_key = api_key
        self._transport = transport or http_post

    # -------------------------------------------------------------------
    # Internal helpers
    # -------------------------------------------------------------------

    def _body(self, required=None, optional=None) -> dict[str, Any]:
        return build_body({"apiKey": self.api_key, **(required or {})}, optional)

    def _post(self, path: str, body: dict[str, Any], *, api_version: str = "v1") -> Any:
        status, text = self._transport(versioned_url(self.api_url, path, api_version), body)
        return decode_json(status, text, path)

    def _send(self, path: str, body: dict[str, Any]) -> None:
        # Mutations answer with "success" or an arbitrary body; only the status matters
        status, text = self._transport(versioned_url(self.api_url, path), body)
        check_status(status, text)

    def _mutate(self, path: str, required: dict[str, Any]) -> None:
        self._send(path, self._body(required))

    # -------------------------------------------------------------------
    # Posts
    # -------------------------------------------------------------------

    def list_posts(
        self,
        board_id: str,
        *,
        limit: int | None = None,
        skip: int | None = None,
        sort: str | None = None,
        status: str | None = None,
        author_id: str | None = None,
        search: str | None = None,
        company_id: str | None = None,
        tag_ids: list[str] | None = None,
    ) -> OffsetPage:
        """List one page of posts from a board.

        Args:
            board_id: Board to list from.
            limit: Page size.
            skip: Number of posts to skip.
            sort: One of config.POST_SORTS.
            status: Comma-separated status filter.
            author_id: Filter by author.
            search: Full-text search over title and details.
            company_id: Filter by company.
            tag_ids: Filter by tags.

        Returns:
            OffsetPage of Post records.
        """
        body = self._body(
            {"boardID": board_id},
            {
                "limit": limit,
                "skip": skip,
                "sort": sort,
                "status": status,
                "authorID": author_id,
                "search": search,
                "companyID": company_id,
                "tagIDs": tag_ids or None,
            },
        )
        return decode_offset_page(self._post("posts/list", body), "posts", Post, "posts/list")

    def get_post(
        self,
        *,
        post_id: str | None = None,
        url_name: str | None = None,
        board_id: str | None = None,
    ) -> Post | None:
        """Retrieve a post by ID, or by URL name within a board. None if absent."""
        _require_one_of(id=post_id, url_name=url_name)
        body = self._body(optional={"id": post_id, "urlName": url_name, "boardID": board_id})
        return decode_retrieve(self._post("posts/retrieve", body), "post", Post, "posts/retrieve")

    def create_post(
        self,
        board_id: str,
        author_id: str,
        title: str,
        *,
        details: str | None = None,
        category_id: str | None = None,
        by_id: str | None = None,
        custom_fields: dict[str, Any] | None = None,
        eta: str | None = None,
        eta_public: bool | None = None,
        owner_id: str | None = None,
        image_urls: list[str] | None = None,
        created_at: str | None = None,
    ) -> str:
        """Create a post and return its new ID."""
        body = self._body(
            {"boardID": board_id, "authorID": author_id, "title": title},
            {
                "details": details,
                "categoryID": category_id,
                "byID": by_id,
                "customFields": custom_fields,
                "eta": eta,
                "etaPublic": eta_public,
                "ownerID": owner_id,
                "imageURLs": image_urls or None,
                "createdAt": created_at,
            },
        )
        return decode_created_id(self._post("posts/create", body), "posts/create")

    def change_post_status(
        self,
        post_id: str,
        changer_id: str,
        status: str,
        *,
        notify_voters: bool = False,
        comment: str | None = None,
        comment_image_urls: list[str] | None = None,
    ) -> None:
        body = self._body(
            {
                "postID": post_id,
                "changerID": changer_id,
                "status": status,
                "shouldNotifyVoters": notify_voters,
            },
            {"commentValue": comment, "commentImageURLs": comment_image_urls or None},
        )
        self._send("posts/change_status", body)

    def update_post(
        self,
        post_id: str,
        *,
        title: str | None = None,
        details: str | None = None,
        image_urls: list[str] | None = None,
        eta: str | None = None,
        eta_public: bool | None = None,
        custom_fields: dict[str, Any] | None = None,
    ) -> None:
        body = self._body(
            {"postID": post_id},
            {
                "title": title,
                "details": details,
                "imageURLs": image_urls or None,
                "eta": eta,
                "etaPublic": eta_public,
                "customFields": custom_fields,
            },
        )
        self._send("posts/update", body)

    def delete_post(self, post_id: str) -> None:
        self._mutate("posts/delete", {"postID": post_id})

    def change_post_category(self, post_id: str, category_id: str) -> None:
        self._mutate("posts/change_category", {"postID": post_id, "categoryID": category_id})

    def add_post_tag(self, post_id: str, tag_id: str) -> None:
        self._mutate("posts/add_tag", {"postID": post_id, "tagID": tag_id})

    def remove_post_tag(self, post_id: str, tag_id: str) -> None:
        self._mutate("posts/remove_tag", {"postID": post_id, "tagID": tag_id})

    def link_post_jira(self, post_id: str, issue_key: str) -> None:
        self._mutate("posts/link_jira", {"postID": post_id, "issueKey": issue_key})

    def unlink_post_jira(self, post_id: str, issue_key: str) -> None:
        self._mutate("posts/unlink_jira", {"postID": post_id, "issueKey": issue_key})

    # -------------------------------------------------------------------
    # Comments
    # -------------------------------------------------------------------

    def list_comments(
        self,
        *,
        post_id: str | None = None,
        author_id: str | None = None,
        board_id: str | None = None,
        company_id: str | None = None,
        limit: int | None = None,
        skip: int | None = None,
    ) -> OffsetPage:
        """List one page of comments, optionally filtered by post, author, board, or company."""
        body = self._body(
            optional={
                "postID": post_id,
                "authorID": author_id,
                "boardID": board_id,
                "companyID": company_id,
                "limit": limit,
                "skip": skip,
            }
        )
        return decode_offset_page(
            self._post("comments/list", body), "comments", Comment, "comments/list"
        )

    def create_comment(
        self,
        post_id: str,
        author_id: str,
        value: str,
        *,
        parent_id: str | None = None,
        created_at: str | None = None,
        image_urls: list[str] | None = None,
        internal: bool | None = None,
        notify_voters: bool | None = None,
    ) -> str:
        body = self._body(
            {"postID": post_id, "authorID": author_id, "value": value},
            {
                "parentID": parent_id,
                "createdAt": created_at,
                "imageURLs": image_urls or None,
                "internal": internal,
                "shouldNotifyVoters": notify_voters,
            },
        )
        return decode_created_id(self._post("comments/create", body), "comments/create")

    def get_comment(self, comment_id: str) -> Comment | None:
        body = self._body({"id": comment_id})
        return decode_retrieve(
            self._post("comments/retrieve", body), "comment", Comment, "comments/retrieve"
        )

    def delete_comment(self, comment_id: str) -> None:
        self._mutate("comments/delete", {"commentID": comment_id})

    # -------------------------------------------------------------------
    # Categories
    # -------------------------------------------------------------------

    def list_categories(
        self, board_id: str, *, limit: int | None = None, skip: int | None = None
    ) -> OffsetPage:
        body = self._body({"boardID": board_id}, {"limit": limit, "skip": skip})
        return decode_offset_page(
            self._post("categories/list", body), "categories", Category, "categories/list"
        )

    def get_category(self, category_id: str) -> Category | None:
        body = self._body({"id": category_id})
        return decode_retrieve(
            self._post("categories/retrieve", body), "category", Category, "categories/retrieve"
        )

    def create_category(
        self,
        board_id: str,
        name: str,
        *,
        parent_id: str | None = None,
        subscribe_admins: bool = True,
    ) -> str:
        body = self._body(
            {"boardID": board_id, "name": name, "subscribeAdmins": subscribe_admins},
            {"parentID": parent_id},
        )
        return decode_created_id(self._post("categories/create", body), "categories/create")

    def delete_category(self, category_id: str) -> None:
        self._mutate("categories/delete", {"categoryID": category_id})

    # -------------------------------------------------------------------
    # Users
    # -------------------------------------------------------------------

    def fetch_users_page(self, cursor: str | None, limit: int) -> CursorPage:
        """Fetch one page of users from the v2 cursor listing."""
        body = self._body({"limit": limit}, {"cursor": cursor})
        value = self._post("users/list", body, api_version="v2")
        return decode_listing_page(value, "users", UserFull, "users/list")

    def list_users(self, on_progress=None) -> list[UserFull]:
        """List every user in the account, following cursors to the end.

        Args:
            on_progress: Optional callback receiving the running total after
                each non-empty page.

        Returns:
            list of UserFull in server order. Stops early (by at most one page
            past the limit) after config.MAX_DEPAGINATED_RECORDS users.
        """
        return depaginate(
            self.fetch_users_page,
            page_size=config.USERS_PAGE_SIZE,
            on_progress=on_progress,
            max_records=config.MAX_DEPAGINATED_RECORDS,
        )

    def get_user(self, *, user_id: str | None = None, email: str | None = None) -> UserFull | None:
        """Retrieve a user by Canny ID or email. None if absent.

        users/retrieve answers with the user object itself rather than a
        wrapper. A null body, or an object carrying only an ``error`` key,
        means not found; anything else that fails to decode is a DecodeError.
        """
        _require_one_of(id=user_id, email=email)
        body = self._body(optional={"id": user_id, "email": email})
        value = self._post("users/retrieve", body)
        if value is None:
            return None
        obj = expect_object(value, "users/retrieve")
        if "id" not in obj and "error" in obj:
            return None
        return UserFull.from_json(obj, "users/retrieve")

    def create_or_update_user(
        self,
        user_id: str,
        email: str,
        *,
        id: str | None = None,
        name: str | None = None,
        avatar_url: str | None = None,
        created: str | None = None,
        company_id: str | None = None,
        custom_fields: dict[str, Any] | None = None,
    ) -> str:
        """Create a user, or update the one matching *user_id*. Returns the Canny ID."""
        body = self._body(
            {"userID": user_id, "email": email},
            {
                "id": id,
                "name": name,
                "avatarURL": avatar_url,
                "created": created,
                "companyID": company_id,
                "customFields": custom_fields,
            },
        )
        return decode_created_id(
            self._post("users/create_or_update", body), "users/create_or_update"
        )

    def delete_user(self, user_id: str) -> None:
        self._mutate("users/delete", {"userID": user_id})

    def find_user(
        self,
        *,
        user_id: str | None = None,
        email: str | None = None,
        name: str | None = None,
    ) -> UserFull | None:
        _require_one_of(user_id=user_id, email=email, name=name)
        body = self._body(optional={"userID": user_id, "email": email, "name": name})
        return decode_retrieve(self._post("users/find", body), "user", UserFull, "users/find")

    def remove_user_from_company(self, user_id: str, company_id: str) -> None:
        self._mutate("users/remove_from_company", {"userID": user_id, "companyID": company_id})

    # -------------------------------------------------------------------
    # Boards
    # -------------------------------------------------------------------

    def list_boards(self) -> list[Board]:
        """List all boards. The service does not paginate this endpoint."""
        obj = expect_object(self._post("boards/list", self._body()), "boards/list")
        return decode_records(obj.get("boards") or [], Board, "boards/list")

    def get_board(self, board_id: str) -> Board | None:
        body = self._body({"id": board_id})
        return decode_retrieve(
            self._post("boards/retrieve", body), "board", Board, "boards/retrieve"
        )

    def create_board(self, name: str) -> str:
        body = self._body({"name": name})
        return decode_created_id(self._post("boards/create", body), "boards/create")

    def delete_board(self, board_id: str) -> None:
        self._mutate("boards/delete", {"id": board_id})

    # -------------------------------------------------------------------
    # Tags
    # -------------------------------------------------------------------

    def list_tags(
        self, board_id: str, *, limit: int | None = None, skip: int | None = None
    ) -> OffsetPage:
        body = self._body({"boardID": board_id}, {"limit": limit, "skip": skip})
        return decode_offset_page(self._post("tags/list", body), "tags", Tag, "tags/list")

    def get_tag(self, tag_id: str) -> Tag | None:
        body = self._body({"id": tag_id})
        return decode_retrieve(self._post("tags/retrieve", body), "tag", Tag, "tags/retrieve")

    def create_tag(self, board_id: str, name: str) -> str:
        body = self._body({"boardID": board_id, "name": name})
        return decode_created_id(self._post("tags/create", body), "tags/create")

    def delete_tag(self, tag_id: str) -> None:
        self._mutate("tags/delete", {"tagID": tag_id})

    # -------------------------------------------------------------------
    # Companies
    # -------------------------------------------------------------------

    def list_companies(
        self,
        *,
        limit: int | None = None,
        cursor: str | None = None,
        search: str | None = None,
        segment: str | None = None,
    ) -> CursorPage:
        """List one page of companies from the v2 cursor listing.

        Args:
            limit: Page size.
            cursor: Cursor returned by the previous page.
            search: Filter by company name.
            segment: Segment URL name.
        """
        body = self._body(
            optional={"limit": limit, "cursor": cursor, "search": search, "segment": segment}
        )
        value = self._post("companies/list", body, api_version="v2")
        return decode_listing_page(value, "companies", Company, "companies/list")

    def get_company(self, company_id: str) -> Company | None:
        body = self._body({"id": company_id})
        return decode_retrieve(
            self._post("companies/retrieve", body), "company", Company, "companies/retrieve"
        )

    def update_company(
        self,
        company_id: str,
        *,
        name: str | None = None,
        monthly_spend: float | None = None,
        custom_fields: dict[str, Any] | None = None,
        created: str | None = None,
    ) -> None:
        body = self._body(
            {"id": company_id},
            {
                "name": name,
                "monthlySpend": monthly_spend,
                "customFields": custom_fields,
                "created": created,
            },
        )
        self._send("companies/update", body)

    def delete_company(self, company_id: str) -> None:
        self._mutate("companies/delete", {"id": company_id})

    # -------------------------------------------------------------------
    # Votes
    # -------------------------------------------------------------------

    def list_votes(
        self,
        *,
        post_id: str | None = None,
        user_id: str | None = None,
        limit: int | None = None,
        skip: int | None = None,
    ) -> OffsetPage:
        body = self._body(
            optional={"postID": post_id, "userID": user_id, "limit": limit, "skip": skip}
        )
        return decode_offset_page(self._post("votes/list", body), "votes", Vote, "votes/list")

    def get_vote(self, vote_id: str) -> Vote | None:
        body = self._body({"id": vote_id})
        return decode_retrieve(self._post("votes/retrieve", body), "vote", Vote, "votes/retrieve")

    def create_vote(self, post_id: str, user_id: str) -> None:
        self._mutate("votes/create", {"postID": post_id, "userID": user_id})

    def delete_vote(self, vote_id: str) -> None:
        self._mutate("votes/delete", {"voteID": vote_id})

    # -------------------------------------------------------------------
    # Status changes
    # -------------------------------------------------------------------

    def list_status_changes(
        self, board_id: str, *, limit: int | None = None, skip: int | None = None
    ) -> OffsetPage:
        body = self._body({"boardID": board_id}, {"limit": limit, "skip": skip})
        return decode_offset_page(
            self._post("status_changes/list", body),
            "statusChanges",
            StatusChange,
            "status_changes/list",
        )

    # -------------------------------------------------------------------
    # Changelog entries
    # -------------------------------------------------------------------

    def list_entries(
        self,
        *,
        limit: int | None = None,
        skip: int | None = None,
        entry_type: str | None = None,
        label_ids: list[str] | None = None,
        sort: str | None = None,
    ) -> OffsetPage:
        body = self._body(
            optional={
                "limit": limit,
                "skip": skip,
                "type": entry_type,
                "labelIDs": label_ids or None,
                "sort": sort,
            }
        )
        return decode_offset_page(
            self._post("entries/list", body), "entries", Entry, "entries/list"
        )

    def get_entry(self, entry_id: str) -> Entry | None:
        body = self._body({"id": entry_id})
        return decode_retrieve(
            self._post("entries/retrieve", body), "entry", Entry, "entries/retrieve"
        )

    def create_entry(
        self,
        title: str,
        *,
        details: str | None = None,
        entry_type: str | None = None,
        published: bool | None = None,
        notify: bool | None = None,
        post_ids: list[str] | None = None,
        label_ids: list[str] | None = None,
        published_on: str | None = None,
        scheduled_for: str | None = None,
    ) -> str:
        """Create a changelog entry and return its ID.

        Args:
            title: Entry title.
            details: Markdown body.
            entry_type: "new", "improved", or "fixed".
            published: Publish immediately.
            notify: Notify subscribed users.
            post_ids: Posts to link.
            label_ids: Labels to assign.
            published_on: ISO 8601 date for a backdated publication.
            scheduled_for: ISO 8601 date for a scheduled publication.
        """
        body = self._body(
            {"title": title},
            {
                "details": details,
                "type": entry_type,
                "published": published,
                "notify": notify,
                "postIDs": post_ids or None,
                "labelIDs": label_ids or None,
                "publishedOn": published_on,
                "scheduledFor": scheduled_for,
            },
        )
        return decode_created_id(self._post("entries/create", body), "entries/create")

    def update_entry(
        self,
        entry_id: str,
        *,
        title: str | None = None,
        details: str | None = None,
        entry_type: str | None = None,
        published: bool | None = None,
        notify: bool | None = None,
        label_ids: list[str] | None = None,
    ) -> None:
        body = self._body(
            {"entryID": entry_id},
            {
                "title": title,
                "details": details,
                "type": entry_type,
                "published": published,
                "notify": notify,
                "labelIDs": label_ids or None,
            },
        )
        self._send("entries/update", body)

    def delete_entry(self, entry_id: str) -> None:
        self._mutate("entries/delete", {"entryID": entry_id})

    # -------------------------------------------------------------------
    # Opportunities
    # -------------------------------------------------------------------

    def list_opportunities(
        self, post_id: str, *, limit: int | None = None, skip: int | None = None
    ) -> OffsetPage:
        body = self._body({"postID": post_id}, {"limit": limit, "skip": skip})
        return decode_offset_page(
            self._post("opportunities/list", body),
            "opportunities",
            Opportunity,
            "opportunities/list",
        )

    # -------------------------------------------------------------------
    # Groups, insights, ideas (v1 cursor listings)
    # -------------------------------------------------------------------

    def list_groups(self, *, limit: int | None = None, cursor: str | None = None) -> CursorPage:
        body = self._body(optional={"limit": limit, "cursor": cursor})
        return decode_cursor_page(self._post("groups/list", body), "groups", Group, "groups/list")

    def get_group(
        self, *, group_id: str | None = None, url_name: str | None = None
    ) -> Group | None:
        _require_one_of(id=group_id, url_name=url_name)
        body = self._body(optional={"id": group_id, "urlName": url_name})
        return decode_retrieve(
            self._post("groups/retrieve", body), "group", Group, "groups/retrieve"
        )

    def list_insights(
        self,
        *,
        limit: int | None = None,
        cursor: str | None = None,
        idea_id: str | None = None,
    ) -> CursorPage:
        body = self._body(optional={"limit": limit, "cursor": cursor, "ideaID": idea_id})
        return decode_cursor_page(
            self._post("insights/list", body), "insights", Insight, "insights/list"
        )

    def get_insight(self, insight_id: str) -> Insight | None:
        body = self._body({"id": insight_id})
        return decode_retrieve(
            self._post("insights/retrieve", body), "insight", Insight, "insights/retrieve"
        )

    def list_ideas(
        self,
        *,
        limit: int | None = None,
        cursor: str | None = None,
        parent_id: str | None = None,
        search: str | None = None,
    ) -> CursorPage:
        body = self._body(
            optional={"limit": limit, "cursor": cursor, "parentID": parent_id, "search": search}
        )
        return decode_cursor_page(self._post("ideas/list", body), "ideas", Idea, "ideas/list")

    def get_idea(self, *, idea_id: str | None = None, url_name: str | None = None) -> Idea | None:
        _require_one_of(id=idea_id, url_name=url_name)
        body = self._body(optional={"id": idea_id, "urlName": url_name})
        return decode_retrieve(self._post("ideas/retrieve", body), "idea", Idea, "ideas/retrieve")

    # -------------------------------------------------------------------
    # Autopilot
    # -------------------------------------------------------------------

    def enqueue_autopilot_feedback(
        self, feedback: str, user_id: str, *, source_url: str | None = None
    ) -> str:
        """Queue feedback text for autopilot processing. Returns the queue item ID."""
        body = self._body({"feedback": feedback, "userID": user_id}, {"sourceURL": source_url})
        return decode_created_id(self._post("autopilot/enqueue", body), "autopilot/enqueue")
