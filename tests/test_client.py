"""Tests for client.py — CannyClient request bodies, endpoints, and decoding.
Uses the FakeTransport fixture from conftest; no network.
"""

import pytest

from canny_cli.exceptions import ApiError, DecodeError, ValidationError
from canny_cli.models import Board, UserFull

BASE = "https://acme.canny.io/api/v1"
POST = {"id": "p1", "title": "Dark mode", "url": "https://acme.canny.io/p/dark-mode"}


class TestPosts:
    def test_list_posts_minimal_body(self, client, transport):
        transport.queue({"hasMore": False, "posts": []})
        client.list_posts("b1")
        assert transport.last_url == f"{BASE}/posts/list"
        assert transport.last_payload == {"apiKey": "secret-key", "boardID": "b1"}

    def test_list_posts_all_filters(self, client, transport):
        transport.queue({"hasMore": True, "posts": [POST]})
        page = client.list_posts(
            "b1",
            limit=10,
            skip=20,
            sort="score",
            status="open,planned",
            author_id="u1",
            search="dark",
            company_id="co1",
            tag_ids=["t1", "t2"],
        )
        assert transport.last_payload == {
            "apiKey": "secret-key",
            "boardID": "b1",
            "limit": 10,
            "skip": 20,
            "sort": "score",
            "status": "open,planned",
            "authorID": "u1",
            "search": "dark",
            "companyID": "co1",
            "tagIDs": ["t1", "t2"],
        }
        assert page.has_more is True
        assert page.items[0].title == "Dark mode"
        assert page.next_skip(20, 10) == 30

    def test_empty_tag_list_omitted(self, client, transport):
        transport.queue({"hasMore": False, "posts": []})
        client.list_posts("b1", tag_ids=[])
        assert "tagIDs" not in transport.last_payload

    def test_get_post_needs_identifier(self, client, transport):
        with pytest.raises(ValidationError, match="Either --id or --url-name"):
            client.get_post()
        assert transport.calls == []

    def test_get_post_by_url_name(self, client, transport):
        transport.queue({"post": POST})
        post = client.get_post(url_name="dark-mode", board_id="b1")
        assert post.id == "p1"
        assert transport.last_payload == {
            "apiKey": "secret-key",
            "urlName": "dark-mode",
            "boardID": "b1",
        }

    def test_get_post_not_found(self, client, transport):
        transport.queue({"post": None})
        assert client.get_post(post_id="missing") is None

    def test_get_post_api_error(self, client, transport):
        transport.queue({"error": "invalid id"}, status=400)
        with pytest.raises(ApiError) as exc_info:
            client.get_post(post_id="bad")
        assert exc_info.value.status == 400

    def test_create_post(self, client, transport):
        transport.queue({"id": "p9"})
        new_id = client.create_post(
            "b1",
            "u1",
            "Title",
            custom_fields={"priority": "high"},
            eta="06/2025",
            eta_public=False,
            image_urls=["https://img/1.png"],
        )
        assert new_id == "p9"
        assert transport.last_payload == {
            "apiKey": "secret-key",
            "boardID": "b1",
            "authorID": "u1",
            "title": "Title",
            "customFields": {"priority": "high"},
            "eta": "06/2025",
            "etaPublic": False,
            "imageURLs": ["https://img/1.png"],
        }

    def test_custom_fields_survive_create_and_retrieve(self, client, transport):
        fields = {
            "a": [1, 2.5, None, {"b": "é"}],
            "z": False,
            "plan": "enterprise",
            "seats": 40,
        }
        transport.queue({"id": "p9"})
        new_id = client.create_post("b1", "u1", "Title", custom_fields=fields)
        sent = transport.last_payload["customFields"]
        transport.queue({"post": {**POST, "id": new_id, "customFields": sent}})
        post = client.get_post(post_id=new_id)
        assert post.custom_fields == fields
        assert post.to_dict()["customFields"] == fields

    def test_change_status_always_sends_notify(self, client, transport):
        transport.queue({})
        client.change_post_status("p1", "u1", "planned")
        assert transport.last_payload == {
            "apiKey": "secret-key",
            "postID": "p1",
            "changerID": "u1",
            "status": "planned",
            "shouldNotifyVoters": False,
        }

    def test_change_status_with_comment(self, client, transport):
        transport.queue({})
        client.change_post_status(
            "p1", "u1", "complete", notify_voters=True, comment="Shipped!",
            comment_image_urls=["https://img/2.png"],
        )
        body = transport.last_payload
        assert body["shouldNotifyVoters"] is True
        assert body["commentValue"] == "Shipped!"
        assert body["commentImageURLs"] == ["https://img/2.png"]

    @pytest.mark.parametrize(
        "method,args,path,fields",
        [
            ("delete_post", ("p1",), "posts/delete", {"postID": "p1"}),
            ("change_post_category", ("p1", "c1"), "posts/change_category",
             {"postID": "p1", "categoryID": "c1"}),
            ("add_post_tag", ("p1", "t1"), "posts/add_tag", {"postID": "p1", "tagID": "t1"}),
            ("remove_post_tag", ("p1", "t1"), "posts/remove_tag",
             {"postID": "p1", "tagID": "t1"}),
            ("link_post_jira", ("p1", "ENG-1"), "posts/link_jira",
             {"postID": "p1", "issueKey": "ENG-1"}),
            ("unlink_post_jira", ("p1", "ENG-1"), "posts/unlink_jira",
             {"postID": "p1", "issueKey": "ENG-1"}),
            ("delete_comment", ("cm1",), "comments/delete", {"commentID": "cm1"}),
            ("delete_category", ("c1",), "categories/delete", {"categoryID": "c1"}),
            ("delete_user", ("u1",), "users/delete", {"userID": "u1"}),
            ("remove_user_from_company", ("u1", "co1"), "users/remove_from_company",
             {"userID": "u1", "companyID": "co1"}),
            ("delete_board", ("b1",), "boards/delete", {"id": "b1"}),
            ("delete_tag", ("t1",), "tags/delete", {"tagID": "t1"}),
            ("delete_company", ("co1",), "companies/delete", {"id": "co1"}),
            ("create_vote", ("p1", "u1"), "votes/create", {"postID": "p1", "userID": "u1"}),
            ("delete_vote", ("v1",), "votes/delete", {"voteID": "v1"}),
            ("delete_entry", ("e1",), "entries/delete", {"entryID": "e1"}),
        ],
    )
    def test_unit_mutations(self, client, transport, method, args, path, fields):
        transport.queue("success")
        assert getattr(client, method)(*args) is None
        assert transport.last_url == f"{BASE}/{path}"
        assert transport.last_payload == {"apiKey": "secret-key", **fields}

    def test_mutation_error_status(self, client, transport):
        transport.queue("post not found", status=404)
        with pytest.raises(ApiError) as exc_info:
            client.delete_post("p1")
        assert exc_info.value.body == "post not found"

    def test_update_ignores_body(self, client, transport):
        transport.queue("<html>ok</html>")
        assert client.update_post("p1", details="x") is None

    def test_update_post_sends_only_given_fields(self, client, transport):
        transport.queue({})
        client.update_post("p1", title="New")
        assert transport.last_payload == {"apiKey": "secret-key", "postID": "p1", "title": "New"}


class TestComments:
    def test_list_without_filters(self, client, transport):
        transport.queue({"hasMore": False, "comments": []})
        page = client.list_comments()
        assert transport.last_payload == {"apiKey": "secret-key"}
        assert page.items == []

    def test_create_flags(self, client, transport):
        transport.queue({"id": "cm1"})
        assert client.create_comment("p1", "u1", "Nice", internal=True) == "cm1"
        assert transport.last_payload == {
            "apiKey": "secret-key",
            "postID": "p1",
            "authorID": "u1",
            "value": "Nice",
            "internal": True,
        }

    def test_retrieve_uses_id(self, client, transport):
        transport.queue({"comment": {"id": "cm1", "value": "hi", "created": "2024-01-01"}})
        comment = client.get_comment("cm1")
        assert comment.value == "hi"
        assert transport.last_payload == {"apiKey": "secret-key", "id": "cm1"}


class TestCategoriesTagsBoards:
    def test_create_category_subscribes_admins_by_default(self, client, transport):
        transport.queue({"id": "c1"})
        client.create_category("b1", "UI")
        assert transport.last_payload["subscribeAdmins"] is True
        assert "parentID" not in transport.last_payload

    def test_list_boards(self, client, transport):
        transport.queue({"boards": [{"id": "b1", "name": "Features", "postCount": 4}]})
        assert client.list_boards() == [Board(id="b1", name="Features", post_count=4)]
        assert transport.last_payload == {"apiKey": "secret-key"}

    def test_list_boards_missing_key(self, client, transport):
        transport.queue({})
        assert client.list_boards() == []

    def test_tags_list(self, client, transport):
        transport.queue({"hasMore": False, "tags": [{"id": "t1", "name": "bug"}]})
        page = client.list_tags("b1", limit=100, skip=0)
        assert transport.last_payload == {
            "apiKey": "secret-key", "boardID": "b1", "limit": 100, "skip": 0,
        }
        assert page.items[0].name == "bug"

    def test_create_board_returns_id(self, client, transport):
        transport.queue({"id": "b2"})
        assert client.create_board("Bugs") == "b2"


class TestUsers:
    def test_fetch_users_page_uses_v2(self, client, transport):
        transport.queue({"items": [{"id": "u1"}], "hasNextPage": False})
        client.fetch_users_page(None, 100)
        assert transport.last_url == "https://acme.canny.io/api/v2/users/list"
        assert transport.last_payload == {"apiKey": "secret-key", "limit": 100}

    def test_list_users_depaginates(self, client, transport):
        transport.queue({"items": [{"id": "A"}, {"id": "B"}], "hasNextPage": True, "cursor": "c1"})
        transport.queue({"items": [{"id": "C"}], "hasNextPage": False})
        progress = []
        users = client.list_users(on_progress=progress.append)
        assert [u.id for u in users] == ["A", "B", "C"]
        assert len(transport.calls) == 2
        assert transport.calls[1][1]["cursor"] == "c1"
        assert transport.calls[1][1]["limit"] == 100
        assert progress == [2, 3]

    def test_list_users_legacy_key(self, client, transport):
        transport.queue({"users": [{"id": "A"}], "hasNextPage": False})
        assert [u.id for u in client.list_users()] == ["A"]

    def test_get_user_needs_identifier(self, client):
        with pytest.raises(ValidationError, match="Either --id or --email"):
            client.get_user()

    def test_get_user_record(self, client, transport):
        transport.queue({"id": "u1", "email": "ada@example.com", "isAdmin": True})
        user = client.get_user(email="ada@example.com")
        assert user == UserFull(id="u1", email="ada@example.com", is_admin=True)
        assert transport.last_payload == {"apiKey": "secret-key", "email": "ada@example.com"}

    def test_get_user_null(self, client, transport):
        transport.queue("null")
        assert client.get_user(user_id="u1") is None

    def test_get_user_error_object(self, client, transport):
        transport.queue({"error": "user not found"})
        assert client.get_user(user_id="u1") is None

    def test_get_user_malformed(self, client, transport):
        transport.queue({"id": 12})
        with pytest.raises(DecodeError):
            client.get_user(user_id="u1")

    def test_create_or_update(self, client, transport):
        transport.queue({"id": "canny-u1"})
        canny_id = client.create_or_update_user(
            "ext-1", "ada@example.com", name="Ada", avatar_url="https://a/x.png",
            custom_fields={"plan": "pro"},
        )
        assert canny_id == "canny-u1"
        assert transport.last_payload == {
            "apiKey": "secret-key",
            "userID": "ext-1",
            "email": "ada@example.com",
            "name": "Ada",
            "avatarURL": "https://a/x.png",
            "customFields": {"plan": "pro"},
        }

    def test_find_user(self, client, transport):
        transport.queue({"user": {"id": "u1", "name": "Ada"}})
        assert client.find_user(name="Ada").name == "Ada"

    def test_find_user_needs_identifier(self, client):
        with pytest.raises(ValidationError, match="At least one of"):
            client.find_user()


class TestCompanies:
    def test_list_uses_v2_and_legacy_key(self, client, transport):
        transport.queue(
            {"companies": [{"id": "co1", "monthlySpend": 10}], "hasNextPage": True, "cursor": "n"}
        )
        page = client.list_companies(limit=100, search="acme")
        assert transport.last_url == "https://acme.canny.io/api/v2/companies/list"
        assert transport.last_payload == {"apiKey": "secret-key", "limit": 100, "search": "acme"}
        assert page.items[0].monthly_spend == 10.0
        assert page.next_cursor == "n"

    def test_update_custom_fields_sent_verbatim(self, client, transport):
        fields = {"tier": "gold", "seats": 40, "nested": {"a": [1, 2]}}
        transport.queue({})
        client.update_company("co1", monthly_spend=99.5, custom_fields=fields)
        assert transport.last_payload == {
            "apiKey": "secret-key",
            "id": "co1",
            "monthlySpend": 99.5,
            "customFields": fields,
        }

    def test_get_company_not_found(self, client, transport):
        transport.queue({"company": None})
        assert client.get_company("co1") is None


class TestOtherListings:
    def test_status_changes_plural_key(self, client, transport):
        transport.queue({"hasMore": False, "statusChanges": [{"id": "s1", "status": "open"}]})
        page = client.list_status_changes("b1")
        assert page.items[0].status == "open"

    def test_entries_use_type_key(self, client, transport):
        transport.queue({"hasMore": False, "entries": [{"id": "e1", "type": "new"}]})
        page = client.list_entries(entry_type="new", label_ids=["l1"], sort="created")
        assert transport.last_payload == {
            "apiKey": "secret-key", "type": "new", "labelIDs": ["l1"], "sort": "created",
        }
        assert page.items[0].entry_type == "new"

    def test_create_entry(self, client, transport):
        transport.queue({"id": "e2"})
        assert client.create_entry("v2.0", published=True, notify=False, post_ids=["p1"]) == "e2"
        assert transport.last_payload == {
            "apiKey": "secret-key",
            "title": "v2.0",
            "published": True,
            "notify": False,
            "postIDs": ["p1"],
        }

    def test_update_entry(self, client, transport):
        transport.queue({})
        client.update_entry("e1", details="Fixed", entry_type="fixed")
        assert transport.last_payload == {
            "apiKey": "secret-key", "entryID": "e1", "details": "Fixed", "type": "fixed",
        }

    def test_opportunities(self, client, transport):
        transport.queue(
            {"hasMore": False, "opportunities": [{"id": "o1", "value": 1200, "won": True}]}
        )
        page = client.list_opportunities("p1", limit=10, skip=0)
        assert transport.last_payload["postID"] == "p1"
        assert page.items[0].value == 1200.0

    def test_groups_cursor_listing(self, client, transport):
        transport.queue({"hasMore": True, "cursor": "g2", "groups": [{"id": "g1"}]})
        page = client.list_groups(limit=10)
        assert page.next_cursor == "g2"

    def test_get_group_by_url_name(self, client, transport):
        transport.queue({"group": {"id": "g1", "name": "Beta"}})
        assert client.get_group(url_name="beta").name == "Beta"
        assert transport.last_payload == {"apiKey": "secret-key", "urlName": "beta"}

    def test_insights_filter(self, client, transport):
        transport.queue({"hasMore": False, "insights": []})
        client.list_insights(idea_id="i1", cursor="c")
        assert transport.last_payload == {"apiKey": "secret-key", "cursor": "c", "ideaID": "i1"}

    def test_ideas_and_retrieve(self, client, transport):
        transport.queue({"hasMore": False, "ideas": [{"id": "i1", "name": "Search"}]})
        transport.queue({"idea": None})
        assert client.list_ideas(search="s").items[0].name == "Search"
        assert client.get_idea(idea_id="i1") is None

    def test_get_idea_needs_identifier(self, client):
        with pytest.raises(ValidationError):
            client.get_idea()

    def test_insight_retrieve(self, client, transport):
        transport.queue({"insight": {"id": "n1", "title": "Pricing"}})
        assert client.get_insight("n1").title == "Pricing"


class TestAutopilot:
    def test_enqueue(self, client, transport):
        transport.queue({"id": "q1"})
        item_id = client.enqueue_autopilot_feedback(
            "Users want dark mode", "u1", source_url="https://support/1"
        )
        assert item_id == "q1"
        assert transport.last_url == f"{BASE}/autopilot/enqueue"
        assert transport.last_payload == {
            "apiKey": "secret-key",
            "feedback": "Users want dark mode",
            "userID": "u1",
            "sourceURL": "https://support/1",
        }
