"""
Edge statuses and the viewer-relative friend status derived from them
"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional


class EdgeStatus(str, Enum):
    """Status persisted on a friendship edge"""
    PENDING = "pending"
    ACCEPTED = "accepted"
    BLOCKED = "blocked"


class FriendStatus(str, Enum):
    """How one participant sees an edge"""
    NONE = "none"
    PENDING_SENT = "pending_sent"
    PENDING_RECEIVED = "pending_received"
    FRIENDS = "friends"
    BLOCKED = "blocked"


@dataclass(frozen=True)
class RelationshipStatus:
    """Derived status plus the edge id it was derived from"""
    status: FriendStatus
    friendship_id: Optional[str] = None


# (edge status, viewer is requester) -> derived status
_DERIVATION = {
    (EdgeStatus.ACCEPTED, True): FriendStatus.FRIENDS,
    (EdgeStatus.ACCEPTED, False): FriendStatus.FRIENDS,
    (EdgeStatus.BLOCKED, True): FriendStatus.BLOCKED,
    (EdgeStatus.BLOCKED, False): FriendStatus.BLOCKED,
    (EdgeStatus.PENDING, True): FriendStatus.PENDING_SENT,
    (EdgeStatus.PENDING, False): FriendStatus.PENDING_RECEIVED,
}


def derive_friend_status(edge, viewer_id: str) -> RelationshipStatus:
    """
    Project a stored edge onto the viewer.

    Args:
        edge: Any object with ``id``, ``status`` and ``requester_id``, or None
        viewer_id: User asking for the status

    Returns:
        RelationshipStatus, ``none`` without an id when there is no edge
    """
    if edge is None:
        return RelationshipStatus(status=FriendStatus.NONE)

    key = (EdgeStatus(edge.status), edge.requester_id == viewer_id)
    return RelationshipStatus(status=_DERIVATION[key], friendship_id=edge.id)
