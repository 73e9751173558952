"""
Relationship service - friend request lifecycle and viewer-relative status
"""
import logging
from typing import List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from zoovie_social.core.exceptions import (
    DuplicateRelationError,
    ForbiddenError,
    NotFoundError,
    SelfRelationError,
)
from zoovie_social.domain.friend_status import EdgeStatus, RelationshipStatus, derive_friend_status
from zoovie_social.models.social import Friendship
from zoovie_social.repositories.relationship_store import RelationshipStore
from zoovie_social.schemas.social import (
    FriendInfo,
    FriendProfile,
    FriendRequestInfo,
    RequesterInfo,
)

logger = logging.getLogger(__name__)


class RelationshipService:
    """
    Enforces the friendship invariants on top of a RelationshipStore.

    Every mutation runs in the store's session and is committed here; any
    failure rolls the session back and propagates as a typed error.
    """

    def __init__(self, db: Session, store: Optional[RelationshipStore] = None):
        self.db = db
        self.store = store or RelationshipStore(db)

    def send_request(self, requester_id: str, receiver_id: str) -> Friendship:
        """
        Send a friend request.

        Raises:
            SelfRelationError: requester and receiver are the same user
            DuplicateRelationError: any edge already joins the pair
        """
        if requester_id == receiver_id:
            logger.warning(f"User {requester_id} tried to friend themselves")
            raise SelfRelationError()

        existing = self.store.find_by_pair(requester_id, receiver_id)
        if existing is not None:
            logger.warning(
                f"Friend request {requester_id}->{receiver_id} rejected, "
                f"edge {existing.id} is {existing.status}"
            )
            raise DuplicateRelationError(details={"friendship_id": existing.id})

        try:
            edge = self.store.insert(requester_id, receiver_id, EdgeStatus.PENDING)
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            # Lost a race against a concurrent request for the same pair
            if self.store.find_by_pair(requester_id, receiver_id) is not None:
                raise DuplicateRelationError()
            raise

        logger.info(f"Friend request {edge.id} sent: {requester_id} -> {receiver_id}")
        return edge

    def get_status(self, viewer_id: str, other_id: str) -> RelationshipStatus:
        """Status of the pair as seen by viewer_id"""
        edge = self.store.find_by_pair(viewer_id, other_id)
        return derive_friend_status(edge, viewer_id)

    def accept_request(self, request_id: str, acting_user_id: Optional[str] = None) -> Friendship:
        """
        Accept a pending request.

        When acting_user_id is given only the receiver may accept. Unknown,
        already resolved and foreign requests all raise NotFoundError.
        """
        try:
            edge = self.store.update_status_where(
                request_id,
                expected_status=EdgeStatus.PENDING,
                new_status=EdgeStatus.ACCEPTED,
                receiver_id=acting_user_id,
            )
            if edge is None:
                raise NotFoundError()
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info(f"Friend request {request_id} accepted")
        return edge

    def decline_request(self, request_id: str, acting_user_id: Optional[str] = None) -> None:
        """
        Decline a pending request by deleting it.

        When acting_user_id is given it must be one of the participants; a
        requester declining withdraws their own request.
        """
        try:
            deleted = self.store.delete_where(
                request_id,
                expected_status=EdgeStatus.PENDING,
                participant_id=acting_user_id,
            )
            if not deleted:
                raise NotFoundError()
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info(f"Friend request {request_id} declined")

    def remove_friend(self, friendship_id: str, acting_user_id: str) -> None:
        """
        Remove an accepted friendship by its edge id.

        Raises:
            NotFoundError: no accepted edge with that id
            ForbiddenError: acting user is not part of the friendship
        """
        try:
            edge = self.store.find_by_id(friendship_id)
            if edge is None or edge.status != EdgeStatus.ACCEPTED.value:
                raise NotFoundError("Friendship not found")
            if acting_user_id not in (edge.requester_id, edge.receiver_id):
                logger.warning(f"User {acting_user_id} tried to remove friendship {friendship_id}")
                raise ForbiddenError()

            if not self.store.delete_where(friendship_id, expected_status=EdgeStatus.ACCEPTED):
                raise NotFoundError("Friendship not found")
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info(f"Friendship {friendship_id} removed by {acting_user_id}")

    def remove_friend_by_user(self, user_id: str, other_id: str) -> None:
        """Remove the accepted friendship between two users"""
        try:
            if not self.store.delete_by_pair_where(user_id, other_id, EdgeStatus.ACCEPTED):
                raise NotFoundError("Friendship not found")
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info(f"Friendship {user_id} <-> {other_id} removed by {user_id}")

    def get_pending_requests(self, user_id: str) -> List[FriendRequestInfo]:
        """Incoming pending requests, newest first"""
        return [
            FriendRequestInfo(
                id=edge.id,
                requester=RequesterInfo(
                    id=profile.id,
                    display_name=profile.display_name,
                    avatar_url=profile.avatar_url,
                ),
                created_at=edge.created_at,
            )
            for edge, profile in self.store.list_pending_for_receiver(user_id)
        ]

    def get_friends(self, user_id: str) -> List[FriendProfile]:
        """Accepted friends of a user, most recent first"""
        return [
            FriendProfile(
                friendship_id=edge.id,
                since=edge.updated_at or edge.created_at,
                friend=FriendInfo(
                    id=profile.id,
                    username=profile.username,
                    display_name=profile.display_name,
                    avatar_url=profile.avatar_url,
                ),
            )
            for edge, profile in self.store.list_accepted_for_user(user_id)
        ]
