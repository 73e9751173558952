"""
Async HTTP client for the friends API
"""
import logging
from typing import Any, Dict, List, Optional

import httpx

from zoovie_social.domain.friend_status import FriendStatus, RelationshipStatus

logger = logging.getLogger(__name__)


class FriendsApiError(Exception):
    """A friends API call failed.

    ``status_code`` is None when the request never got a response
    (connection refused, timeout, ...).
    """

    def __init__(self, message: str, status_code: Optional[int] = None, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.code = code

    @property
    def is_conflict(self) -> bool:
        return self.status_code == 409


class FriendsApiClient:
    """
    Thin wrapper over the gateway routes.

    The httpx client must already carry the caller's bearer token and a
    base URL pointing at the API prefix (e.g. ``http://host/api/v1``).
    """

    def __init__(self, http: httpx.AsyncClient):
        self.http = http

    async def _request(self, method: str, url: str, fallback: str, **kwargs) -> httpx.Response:
        try:
            response = await self.http.request(method, url, **kwargs)
        except httpx.HTTPError as e:
            logger.warning(f"{method} {url} failed: {e}")
            raise FriendsApiError(fallback) from e

        if response.is_success:
            return response

        message, code = fallback, None
        try:
            body = response.json()
        except ValueError:
            body = None
        detail = body.get("detail") if isinstance(body, dict) else None
        if isinstance(detail, dict):
            message = detail.get("error") or fallback
            code = detail.get("code")
        elif isinstance(detail, str):
            message = detail
        raise FriendsApiError(message, status_code=response.status_code, code=code)

    async def _request_json(self, method: str, url: str, fallback: str, **kwargs) -> Dict[str, Any]:
        """Like _request, but a success whose body is not a JSON object is a failure too"""
        response = await self._request(method, url, fallback, **kwargs)
        try:
            body = response.json()
        except ValueError:
            body = None
        if not isinstance(body, dict):
            logger.warning(f"{method} {url} returned {response.status_code} without a JSON object")
            raise FriendsApiError(fallback, status_code=response.status_code)
        return body

    async def send_request(self, receiver_id: str) -> Dict[str, Any]:
        return await self._request_json(
            "POST", "/friends", "Failed to send friend request",
            json={"receiverId": receiver_id},
        )

    async def respond(self, request_id: str, action: str) -> Dict[str, Any]:
        return await self._request_json(
            "PATCH", f"/friends/{request_id}", f"Failed to {action} friend request",
            json={"action": action},
        )

    async def remove(self, friendship_id: str) -> None:
        await self._request("DELETE", f"/friends/{friendship_id}", "Failed to remove friend")

    async def get_status(self, user_id: str) -> RelationshipStatus:
        data = await self._request_json(
            "GET", f"/friends/status/{user_id}", "Failed to load friend status"
        )
        try:
            status = FriendStatus(data["status"])
        except (KeyError, ValueError) as e:
            raise FriendsApiError("Failed to load friend status") from e
        return RelationshipStatus(status=status, friendship_id=data.get("friendshipId"))

    async def get_pending_requests(self) -> List[Dict[str, Any]]:
        data = await self._request_json(
            "GET", "/friends/requests", "Failed to fetch friend requests"
        )
        return data.get("requests", [])
