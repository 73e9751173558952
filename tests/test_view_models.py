"""Tests for the client view models and their reconciliation rules."""

import httpx
import pytest

from tests.conftest import auth_headers
from zoovie_social.client import (
    FriendActionsViewModel,
    FriendRequestsViewModel,
    FriendsApiClient,
    FriendsApiError,
)
from zoovie_social.domain.friend_status import FriendStatus, RelationshipStatus

BASE_URL = "http://testserver/api/v1"


@pytest.fixture
def api_for(app):
    """Factory of API clients talking to the in-process app as a given user"""
    def make(user_id: str) -> FriendsApiClient:
        http = httpx.AsyncClient(
            transport=httpx.ASGITransport(app=app),
            base_url=BASE_URL,
            headers=auth_headers(user_id),
        )
        return FriendsApiClient(http)

    return make


def mock_api(handler) -> FriendsApiClient:
    return FriendsApiClient(
        httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url=BASE_URL)
    )


class TestSendFriendRequest:

    async def test_optimistic_status_before_response(self):
        seen = {}

        async def handler(request):
            seen["status"] = view_model.friend_status.status
            return httpx.Response(201, json={"id": "edge-9", "status": "pending"})

        view_model = FriendActionsViewModel(mock_api(handler), "u-2")
        await view_model.send_friend_request()

        assert seen["status"] == FriendStatus.PENDING_SENT
        assert view_model.friend_status == RelationshipStatus(FriendStatus.PENDING_SENT, "edge-9")
        assert view_model.error is None
        assert view_model.is_loading is False

    async def test_created_adopts_server_edge_id(self, api_for):
        view_model = FriendActionsViewModel(api_for("u-1"), "u-2")

        await view_model.send_friend_request()

        server_view = await api_for("u-1").get_status("u-2")
        assert view_model.friend_status == server_view
        assert server_view.status == FriendStatus.PENDING_SENT

    async def test_conflict_is_kept_as_sent(self, api_for):
        await api_for("u-2").send_request("u-1")
        view_model = FriendActionsViewModel(api_for("u-1"), "u-2")

        await view_model.send_friend_request()

        assert view_model.friend_status.status == FriendStatus.PENDING_SENT
        assert view_model.error is None

    async def test_server_error_rolls_back(self):
        async def handler(request):
            return httpx.Response(500, json={"detail": "boom"})

        view_model = FriendActionsViewModel(mock_api(handler), "u-2")
        await view_model.send_friend_request()

        assert view_model.friend_status.status == FriendStatus.NONE
        assert view_model.error == "boom"

    async def test_network_error_rolls_back(self):
        async def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        changes = []
        view_model = FriendActionsViewModel(mock_api(handler), "u-2", on_status_change=changes.append)
        await view_model.send_friend_request()

        assert view_model.friend_status.status == FriendStatus.NONE
        assert view_model.error == "Failed to send friend request"
        assert [c.status for c in changes] == [FriendStatus.PENDING_SENT, FriendStatus.NONE]

    async def test_non_json_success_rolls_back(self):
        async def handler(request):
            return httpx.Response(200, text="<html>portal</html>")

        view_model = FriendActionsViewModel(mock_api(handler), "u-2")
        await view_model.send_friend_request()

        assert view_model.friend_status.status == FriendStatus.NONE
        assert view_model.error == "Failed to send friend request"
        assert view_model.is_loading is False

    async def test_self_request_rolls_back_with_server_message(self, api_for):
        view_model = FriendActionsViewModel(api_for("u-1"), "u-1")

        await view_model.send_friend_request()

        assert view_model.friend_status.status == FriendStatus.NONE
        assert view_model.error == "You cannot send a friend request to yourself"

    async def test_click_ignored_while_loading(self):
        calls = []

        async def handler(request):
            calls.append(request)
            return httpx.Response(201, json={"id": "edge-1"})

        view_model = FriendActionsViewModel(mock_api(handler), "u-2")
        view_model.is_loading = True
        await view_model.send_friend_request()

        assert calls == []
        assert view_model.friend_status.status == FriendStatus.NONE


class TestAcceptDecline:

    async def test_accept_refetches_server_state(self, api_for):
        await api_for("u-1").send_request("u-2")
        initial = await api_for("u-2").get_status("u-1")
        view_model = FriendActionsViewModel(api_for("u-2"), "u-1", initial_status=initial)

        await view_model.accept_pending_request()

        assert view_model.friend_status == RelationshipStatus(FriendStatus.FRIENDS, initial.friendship_id)
        assert (await api_for("u-1").get_status("u-2")).status == FriendStatus.FRIENDS

    async def test_accept_failure_adopts_server_state(self, api_for):
        sender = api_for("u-1")
        edge = await sender.send_request("u-2")
        stale = RelationshipStatus(FriendStatus.PENDING_RECEIVED, edge["id"])
        await api_for("u-2").respond(edge["id"], "decline")

        view_model = FriendActionsViewModel(api_for("u-2"), "u-1", initial_status=stale)
        await view_model.accept_pending_request()

        assert view_model.error == "Friend request not found"
        assert view_model.friend_status.status == FriendStatus.NONE

    async def test_accept_is_not_optimistic(self):
        seen = []

        async def handler(request):
            seen.append((request.method, view_model.friend_status.status))
            if request.method == "PATCH":
                return httpx.Response(200, json={"id": "edge-1", "status": "accepted"})
            return httpx.Response(200, json={"userId": "u-1", "status": "friends", "friendshipId": "edge-1"})

        view_model = FriendActionsViewModel(
            mock_api(handler), "u-1",
            initial_status=RelationshipStatus(FriendStatus.PENDING_RECEIVED, "edge-1"),
        )
        await view_model.accept_pending_request()

        assert seen == [
            ("PATCH", FriendStatus.PENDING_RECEIVED),
            ("GET", FriendStatus.PENDING_RECEIVED),
        ]
        assert view_model.friend_status.status == FriendStatus.FRIENDS

    async def test_accept_requires_received_request(self):
        async def handler(request):
            raise AssertionError("no request expected")

        view_model = FriendActionsViewModel(
            mock_api(handler), "u-1",
            initial_status=RelationshipStatus(FriendStatus.PENDING_SENT, "edge-1"),
        )
        await view_model.accept_pending_request()

        assert view_model.friend_status.status == FriendStatus.PENDING_SENT

    async def test_decline(self, api_for):
        await api_for("u-1").send_request("u-2")
        initial = await api_for("u-2").get_status("u-1")
        view_model = FriendActionsViewModel(api_for("u-2"), "u-1", initial_status=initial)

        await view_model.decline_pending_request()

        assert view_model.friend_status.status == FriendStatus.NONE


class TestRemoveFriend:

    async def test_remove_then_none(self, api_for):
        edge = await api_for("u-1").send_request("u-2")
        await api_for("u-2").respond(edge["id"], "accept")
        view_model = FriendActionsViewModel(
            api_for("u-1"), "u-2", initial_status=RelationshipStatus(FriendStatus.FRIENDS, edge["id"])
        )

        await view_model.handle_button_click()

        assert view_model.friend_status.status == FriendStatus.NONE
        assert (await api_for("u-2").get_status("u-1")).status == FriendStatus.NONE

    async def test_remove_failure_refetches(self, api_for):
        view_model = FriendActionsViewModel(
            api_for("u-1"), "u-2", initial_status=RelationshipStatus(FriendStatus.FRIENDS, "gone")
        )

        await view_model.remove_friend()

        assert view_model.error is not None
        assert view_model.friend_status.status == FriendStatus.NONE


class TestButtonAffordances:

    @pytest.mark.parametrize(
        "status, label, disabled",
        [
            (FriendStatus.NONE, "Add Friend", False),
            (FriendStatus.PENDING_SENT, "Request Sent", True),
            (FriendStatus.PENDING_RECEIVED, "Accept Request", False),
            (FriendStatus.FRIENDS, "Remove Friend", False),
            (FriendStatus.BLOCKED, "Blocked", True),
        ],
    )
    def test_label_and_disabled(self, status, label, disabled):
        view_model = FriendActionsViewModel(
            mock_api(lambda request: httpx.Response(200)), "u-2",
            initial_status=RelationshipStatus(status, "edge-1"),
        )

        assert view_model.button_label == label
        assert view_model.is_button_disabled is disabled

    async def test_click_on_none_sends_request(self, api_for):
        view_model = FriendActionsViewModel(api_for("u-3"), "u-4")

        await view_model.handle_button_click()

        assert view_model.friend_status.status == FriendStatus.PENDING_SENT
        assert view_model.friend_status.friendship_id is not None


class TestFriendRequestsViewModel:

    async def test_refetch_and_accept(self, api_for):
        await api_for("u-1").send_request("u-3")
        await api_for("u-2").send_request("u-3")
        panel = FriendRequestsViewModel(api_for("u-3"))

        await panel.refetch()
        assert panel.count == 2
        assert {r["requester"]["id"] for r in panel.requests} == {"u-1", "u-2"}

        target = next(r for r in panel.requests if r["requester"]["id"] == "u-1")
        assert await panel.accept(target["id"]) is True

        assert [r["requester"]["id"] for r in panel.requests] == ["u-2"]
        assert (await api_for("u-1").get_status("u-3")).status == FriendStatus.FRIENDS

    async def test_decline_of_resolved_request_reports_error(self, api_for):
        edge = await api_for("u-1").send_request("u-3")
        panel = FriendRequestsViewModel(api_for("u-3"))
        await panel.refetch()
        await api_for("u-1").respond(edge["id"], "decline")

        assert await panel.decline(edge["id"]) is False

        assert panel.error == "Friend request not found"
        assert panel.requests == []

    async def test_refetch_failure_clears_list(self):
        async def handler(request):
            return httpx.Response(503, json={"detail": {"error": "down", "code": "UNAVAILABLE"}})

        panel = FriendRequestsViewModel(mock_api(handler))
        panel.requests = [{"id": "stale"}]
        await panel.refetch()

        assert panel.requests == []
        assert panel.error == "down"
        assert panel.loading is False


class TestFriendsApiClient:

    async def test_status_page_that_is_not_json(self):
        async def handler(request):
            return httpx.Response(200, text="<html>portal</html>")

        with pytest.raises(FriendsApiError) as exc_info:
            await mock_api(handler).get_status("u-2")

        assert exc_info.value.status_code == 200
        assert exc_info.value.message == "Failed to load friend status"

    async def test_error_carries_status_and_code(self, api_for):
        with pytest.raises(FriendsApiError) as exc_info:
            await api_for("u-1").send_request("u-1")

        assert exc_info.value.status_code == 400
        assert exc_info.value.code == "CANNOT_FRIEND_SELF"
        assert exc_info.value.is_conflict is False
