"""
Friends API endpoints
"""
import logging
from typing import NoReturn, Union

from fastapi import APIRouter, Depends, HTTPException, Response, status

from zoovie_social.core.dependencies import get_current_user_id, get_relationship_service
from zoovie_social.core.exceptions import (
    DuplicateRelationError,
    ForbiddenError,
    NotFoundError,
    RelationshipError,
    SelfRelationError,
)
from zoovie_social.schemas.social import (
    EdgeResponse,
    FriendActionResponse,
    FriendListResponse,
    FriendRequestAction,
    FriendRequestCreate,
    FriendStatusResponse,
    PendingRequestsResponse,
)
from zoovie_social.services.relationship_service import RelationshipService

router = APIRouter(prefix="/friends")
logger = logging.getLogger(__name__)

ERROR_STATUS_CODES = {
    SelfRelationError: status.HTTP_400_BAD_REQUEST,
    DuplicateRelationError: status.HTTP_409_CONFLICT,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    ForbiddenError: status.HTTP_403_FORBIDDEN,
}


def raise_http_error(exc: RelationshipError) -> NoReturn:
    """Translate a service error into the matching HTTP response"""
    status_code = ERROR_STATUS_CODES.get(type(exc), exc.status_code)
    logger.info(f"Friend action rejected with {status_code} {exc.code}")
    raise HTTPException(
        status_code=status_code,
        detail={"error": exc.message, "code": exc.code}
    ) from exc


@router.get("", response_model=FriendListResponse)
async def get_friends(
    current_user_id: str = Depends(get_current_user_id),
    service: RelationshipService = Depends(get_relationship_service)
):
    """Get current user's friends list"""
    friends = service.get_friends(current_user_id)
    return FriendListResponse(friends=friends, count=len(friends))


@router.post(
    "",
    response_model=EdgeResponse,
    status_code=status.HTTP_201_CREATED
)
async def send_friend_request(
    request: FriendRequestCreate,
    current_user_id: str = Depends(get_current_user_id),
    service: RelationshipService = Depends(get_relationship_service)
):
    """Send a friend request to another user"""
    try:
        edge = service.send_request(current_user_id, request.receiver_id)
    except RelationshipError as e:
        raise_http_error(e)
    return EdgeResponse.model_validate(edge)


@router.get("/requests", response_model=PendingRequestsResponse)
async def get_pending_requests(
    current_user_id: str = Depends(get_current_user_id),
    service: RelationshipService = Depends(get_relationship_service)
):
    """Get incoming pending friend requests"""
    requests = service.get_pending_requests(current_user_id)
    return PendingRequestsResponse(requests=requests, count=len(requests))


@router.get("/status/{user_id}", response_model=FriendStatusResponse)
async def get_friend_status(
    user_id: str,
    current_user_id: str = Depends(get_current_user_id),
    service: RelationshipService = Depends(get_relationship_service)
):
    """Get the current user's relationship status towards another user"""
    derived = service.get_status(current_user_id, user_id)
    return FriendStatusResponse(
        user_id=user_id,
        status=derived.status,
        friendship_id=derived.friendship_id
    )


@router.patch(
    "/{request_id}",
    response_model=Union[EdgeResponse, FriendActionResponse]
)
async def respond_to_friend_request(
    request_id: str,
    body: FriendRequestAction,
    current_user_id: str = Depends(get_current_user_id),
    service: RelationshipService = Depends(get_relationship_service)
):
    """Accept or decline a friend request"""
    try:
        if body.action == "accept":
            edge = service.accept_request(request_id, acting_user_id=current_user_id)
            return EdgeResponse.model_validate(edge)

        service.decline_request(request_id, acting_user_id=current_user_id)
    except RelationshipError as e:
        raise_http_error(e)

    return FriendActionResponse(success=True, message="Friend request declined")


@router.delete("/users/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_friend_by_user(
    user_id: str,
    current_user_id: str = Depends(get_current_user_id),
    service: RelationshipService = Depends(get_relationship_service)
):
    """Remove a friend by their user id"""
    try:
        service.remove_friend_by_user(current_user_id, user_id)
    except RelationshipError as e:
        raise_http_error(e)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/{friendship_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_friend(
    friendship_id: str,
    current_user_id: str = Depends(get_current_user_id),
    service: RelationshipService = Depends(get_relationship_service)
):
    """Remove a friend by friendship id"""
    try:
        service.remove_friend(friendship_id, current_user_id)
    except RelationshipError as e:
        raise_http_error(e)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
