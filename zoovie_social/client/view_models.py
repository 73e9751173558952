"""
Client-side view models for friend actions.

Reconciliation rule: apply intent locally, adopt server state on any
authoritative response, last server write wins. Only sending a request is
optimistic; accept and decline always refetch because they change two
users' views at once.
"""
import logging
from typing import Any, Callable, Dict, List, Optional

from zoovie_social.client.api import FriendsApiClient, FriendsApiError
from zoovie_social.domain.friend_status import FriendStatus, RelationshipStatus

logger = logging.getLogger(__name__)

StatusListener = Callable[[RelationshipStatus], None]

BUTTON_LABELS = {
    FriendStatus.NONE: "Add Friend",
    FriendStatus.PENDING_SENT: "Request Sent",
    FriendStatus.PENDING_RECEIVED: "Accept Request",
    FriendStatus.FRIENDS: "Remove Friend",
    FriendStatus.BLOCKED: "Blocked",
}


class FriendActionsViewModel:
    """Friend status and actions for one other user, e.g. on a profile card"""

    def __init__(
        self,
        api: FriendsApiClient,
        user_id: str,
        initial_status: Optional[RelationshipStatus] = None,
        on_status_change: Optional[StatusListener] = None,
    ):
        self.api = api
        self.user_id = user_id
        self.friend_status = initial_status or RelationshipStatus(status=FriendStatus.NONE)
        self.on_status_change = on_status_change
        self.is_loading = False
        self.error: Optional[str] = None

    def _set_status(self, new_status: RelationshipStatus) -> None:
        self.friend_status = new_status
        if self.on_status_change is not None:
            self.on_status_change(new_status)

    async def refresh(self) -> RelationshipStatus:
        """Adopt the server's view of the relationship"""
        try:
            self._set_status(await self.api.get_status(self.user_id))
        except FriendsApiError as e:
            self.error = e.message
        return self.friend_status

    async def send_friend_request(self) -> None:
        """Show the request as sent immediately, then reconcile with the response"""
        if self.is_loading:
            return

        previous = self.friend_status
        self.is_loading = True
        self.error = None
        self._set_status(RelationshipStatus(status=FriendStatus.PENDING_SENT))

        try:
            edge = await self.api.send_request(self.user_id)
        except FriendsApiError as e:
            if e.is_conflict:
                # The pair already has an edge on the server; the button's goal holds
                logger.info(f"Friend request to {self.user_id} already exists, keeping pending_sent")
            else:
                logger.warning(f"Friend request to {self.user_id} failed, rolling back: {e.message}")
                self.error = e.message
                self._set_status(previous)
        else:
            self._set_status(
                RelationshipStatus(status=FriendStatus.PENDING_SENT, friendship_id=edge.get("id"))
            )
        finally:
            self.is_loading = False

    async def _respond(self, action: str) -> None:
        if self.is_loading:
            return
        if self.friend_status.status != FriendStatus.PENDING_RECEIVED or not self.friend_status.friendship_id:
            return

        self.is_loading = True
        self.error = None
        try:
            await self.api.respond(self.friend_status.friendship_id, action)
        except FriendsApiError as e:
            self.error = e.message
        finally:
            try:
                await self.refresh()
            finally:
                self.is_loading = False

    async def accept_pending_request(self) -> None:
        await self._respond("accept")

    async def decline_pending_request(self) -> None:
        await self._respond("decline")

    async def remove_friend(self) -> None:
        """Unfriend; the status only changes once the server confirms"""
        if self.is_loading or not self.friend_status.friendship_id:
            return

        self.is_loading = True
        self.error = None
        try:
            await self.api.remove(self.friend_status.friendship_id)
        except FriendsApiError as e:
            self.error = e.message
            await self.refresh()
        else:
            self._set_status(RelationshipStatus(status=FriendStatus.NONE))
        finally:
            self.is_loading = False

    @property
    def button_label(self) -> str:
        return BUTTON_LABELS[self.friend_status.status]

    @property
    def is_button_disabled(self) -> bool:
        return self.is_loading or self.friend_status.status in (
            FriendStatus.PENDING_SENT,
            FriendStatus.BLOCKED,
        )

    async def handle_button_click(self) -> None:
        status = self.friend_status.status
        if status == FriendStatus.NONE:
            await self.send_friend_request()
        elif status == FriendStatus.FRIENDS:
            await self.remove_friend()
        elif status == FriendStatus.PENDING_RECEIVED:
            await self.accept_pending_request()


class FriendRequestsViewModel:
    """Incoming friend requests panel"""

    def __init__(self, api: FriendsApiClient):
        self.api = api
        self.requests: List[Dict[str, Any]] = []
        self.loading = False
        self.error: Optional[str] = None

    @property
    def count(self) -> int:
        return len(self.requests)

    async def refetch(self) -> List[Dict[str, Any]]:
        self.loading = True
        self.error = None
        try:
            self.requests = await self.api.get_pending_requests()
        except FriendsApiError as e:
            self.error = e.message
            self.requests = []
        finally:
            self.loading = False
        return self.requests

    async def _respond(self, request_id: str, action: str) -> bool:
        succeeded = True
        try:
            await self.api.respond(request_id, action)
        except FriendsApiError as e:
            succeeded = False
            self.error = e.message
        error = self.error
        await self.refetch()
        # Keep the action error visible after a successful refetch
        self.error = self.error or error
        return succeeded

    async def accept(self, request_id: str) -> bool:
        return await self._respond(request_id, "accept")

    async def decline(self, request_id: str) -> bool:
        return await self._respond(request_id, "decline")
