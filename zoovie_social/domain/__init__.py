from zoovie_social.domain.friend_status import (
    EdgeStatus,
    FriendStatus,
    RelationshipStatus,
    derive_friend_status,
)

__all__ = [
    "EdgeStatus",
    "FriendStatus",
    "RelationshipStatus",
    "derive_friend_status",
]
