"""
Social and friends schemas

Field names are snake_case in Python and camelCase on the wire.
"""
from datetime import datetime
from typing import List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from zoovie_social.domain.friend_status import EdgeStatus, FriendStatus


class CamelModel(BaseModel):
    """Base model that serializes with camelCase aliases"""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class FriendRequestCreate(CamelModel):
    """Create friend request"""
    receiver_id: str = Field(..., min_length=1, max_length=64)


class FriendRequestAction(CamelModel):
    """Accept or decline a pending request"""
    action: Literal["accept", "decline"]


class EdgeResponse(CamelModel):
    """A stored friendship edge"""
    id: str
    requester_id: str
    receiver_id: str
    status: EdgeStatus
    created_at: datetime
    updated_at: Optional[datetime] = None


class RequesterInfo(CamelModel):
    """Profile summary of whoever sent a request"""
    id: str
    display_name: Optional[str] = None
    avatar_url: Optional[str] = None


class FriendRequestInfo(CamelModel):
    """Incoming friend request with requester profile"""
    id: str
    requester: RequesterInfo
    created_at: datetime


class PendingRequestsResponse(CamelModel):
    """Response with incoming pending friend requests"""
    requests: List[FriendRequestInfo]
    count: int


class FriendInfo(CamelModel):
    """Friend basic info"""
    id: str
    username: Optional[str] = None
    display_name: Optional[str] = None
    avatar_url: Optional[str] = None


class FriendProfile(CamelModel):
    """Friend with friendship metadata"""
    friendship_id: str
    since: datetime
    friend: FriendInfo


class FriendListResponse(CamelModel):
    """Response with list of friends"""
    friends: List[FriendProfile]
    count: int


class FriendStatusResponse(CamelModel):
    """Viewer-relative status towards another user"""
    user_id: str
    status: FriendStatus
    friendship_id: Optional[str] = None


class FriendActionResponse(CamelModel):
    """Response after an action that leaves no edge behind"""
    success: bool
    message: str
