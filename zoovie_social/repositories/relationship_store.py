"""
Relationship store - SQLAlchemy access to friendship edges

Contains only database access, no business rules. Mutations are single
predicate-guarded statements (``... WHERE id = ? AND status = ?``) and never
commit; the caller owns the transaction.
"""
import logging
from typing import List, Optional, Tuple

from sqlalchemy import and_, delete, or_, select, update
from sqlalchemy.orm import Session, aliased

from zoovie_social.domain.friend_status import EdgeStatus
from zoovie_social.models.social import Friendship, canonical_pair
from zoovie_social.models.user import UserProfile
from zoovie_social.utils.time_utils import utc_now

logger = logging.getLogger(__name__)


def _pair_clause(user_a: str, user_b: str):
    user_low, user_high = canonical_pair(user_a, user_b)
    return and_(Friendship.user_low == user_low, Friendship.user_high == user_high)


class RelationshipStore:
    """Persistence for friendship edges"""

    def __init__(self, db: Session):
        self.db = db

    def insert(
        self,
        requester_id: str,
        receiver_id: str,
        status: EdgeStatus = EdgeStatus.PENDING
    ) -> Friendship:
        """Insert a new edge and flush it so the id and timestamps are populated"""
        user_low, user_high = canonical_pair(requester_id, receiver_id)
        edge = Friendship(
            requester_id=requester_id,
            receiver_id=receiver_id,
            user_low=user_low,
            user_high=user_high,
            status=EdgeStatus(status).value,
        )
        self.db.add(edge)
        self.db.flush()
        self.db.refresh(edge)
        return edge

    def find_by_id(self, edge_id: str) -> Optional[Friendship]:
        return self.db.get(Friendship, edge_id, populate_existing=True)

    def find_by_pair(self, user_a: str, user_b: str) -> Optional[Friendship]:
        """Edge between two users in either direction, regardless of status"""
        stmt = (
            select(Friendship)
            .where(_pair_clause(user_a, user_b))
            .execution_options(populate_existing=True)
        )
        return self.db.execute(stmt).scalars().first()

    def list_pending_for_receiver(self, user_id: str) -> List[Tuple[Friendship, UserProfile]]:
        """Incoming pending requests joined with the requester's profile, newest first"""
        stmt = (
            select(Friendship, UserProfile)
            .join(UserProfile, UserProfile.id == Friendship.requester_id)
            .where(
                Friendship.receiver_id == user_id,
                Friendship.status == EdgeStatus.PENDING.value,
            )
            .order_by(Friendship.created_at.desc(), Friendship.id)
        )
        return [(edge, profile) for edge, profile in self.db.execute(stmt).all()]

    def list_accepted_for_user(self, user_id: str) -> List[Tuple[Friendship, UserProfile]]:
        """Accepted edges of a user joined with the other party's profile"""
        friend = aliased(UserProfile)
        stmt = (
            select(Friendship, friend)
            .join(
                friend,
                or_(
                    and_(Friendship.requester_id == user_id, friend.id == Friendship.receiver_id),
                    and_(Friendship.receiver_id == user_id, friend.id == Friendship.requester_id),
                ),
            )
            .where(Friendship.status == EdgeStatus.ACCEPTED.value)
            .order_by(Friendship.updated_at.desc(), Friendship.id)
        )
        return [(edge, profile) for edge, profile in self.db.execute(stmt).all()]

    def update_status_where(
        self,
        edge_id: str,
        expected_status: EdgeStatus,
        new_status: EdgeStatus,
        receiver_id: Optional[str] = None
    ) -> Optional[Friendship]:
        """
        Move an edge to new_status only if it currently has expected_status.

        Args:
            edge_id: Edge to update
            expected_status: Status the row must have for the update to apply
            new_status: Status to write
            receiver_id: When given, the row must also be addressed to this user

        Returns:
            The updated edge, or None when no row matched
        """
        conditions = [
            Friendship.id == edge_id,
            Friendship.status == EdgeStatus(expected_status).value,
        ]
        if receiver_id is not None:
            conditions.append(Friendship.receiver_id == receiver_id)

        stmt = (
            update(Friendship)
            .where(*conditions)
            .values(status=EdgeStatus(new_status).value, updated_at=utc_now())
        )
        result = self.db.execute(stmt)
        if result.rowcount != 1:
            logger.debug(f"No {expected_status} edge {edge_id} to move to {new_status}")
            return None

        edge = self.db.get(Friendship, edge_id, populate_existing=True)
        return edge

    def delete_where(
        self,
        edge_id: str,
        expected_status: EdgeStatus,
        participant_id: Optional[str] = None
    ) -> bool:
        """Delete an edge only if it has expected_status (and, optionally, includes participant_id)"""
        conditions = [
            Friendship.id == edge_id,
            Friendship.status == EdgeStatus(expected_status).value,
        ]
        if participant_id is not None:
            conditions.append(
                or_(
                    Friendship.requester_id == participant_id,
                    Friendship.receiver_id == participant_id,
                )
            )

        stmt = delete(Friendship).where(*conditions)
        result = self.db.execute(stmt)
        if result.rowcount != 1:
            logger.debug(f"No {expected_status} edge {edge_id} to delete")
            return False
        return True

    def delete_by_pair_where(self, user_a: str, user_b: str, expected_status: EdgeStatus) -> bool:
        """Delete the pair's edge only if it has expected_status"""
        stmt = (
            delete(Friendship)
            .where(
                _pair_clause(user_a, user_b),
                Friendship.status == EdgeStatus(expected_status).value,
            )
        )
        result = self.db.execute(stmt)
        return result.rowcount == 1
