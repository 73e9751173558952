"""
Social features models - friendship edges
"""
from typing import Tuple
from uuid import uuid4
from sqlalchemy import Column, String, DateTime, ForeignKey, CheckConstraint, UniqueConstraint
from sqlalchemy.orm import relationship
from zoovie_social.database import Base
from zoovie_social.utils.time_utils import utc_now


def canonical_pair(user_a: str, user_b: str) -> Tuple[str, str]:
    """The two user ids of an unordered pair, smaller first"""
    first, second = sorted((user_a, user_b))
    return first, second


class Friendship(Base):
    """A single relationship edge between two users"""
    __tablename__ = "friends"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))
    requester_id = Column(String(64), ForeignKey("user_profiles.id", ondelete="CASCADE"), nullable=False, index=True)
    receiver_id = Column(String(64), ForeignKey("user_profiles.id", ondelete="CASCADE"), nullable=False, index=True)

    # One row per unordered pair, whichever side asked first
    user_low = Column(String(64), nullable=False)
    user_high = Column(String(64), nullable=False)

    # Status: 'pending', 'accepted', 'blocked'
    status = Column(String(20), nullable=False, default="pending")

    # Timestamps
    created_at = Column(DateTime, default=utc_now, index=True)
    updated_at = Column(DateTime, default=utc_now, onupdate=utc_now)

    __table_args__ = (
        UniqueConstraint('user_low', 'user_high', name='unique_friend_pair'),
        CheckConstraint('requester_id <> receiver_id', name='no_self_friendship'),
        CheckConstraint("status IN ('pending', 'accepted', 'blocked')", name='valid_friend_status'),
    )

    # Relationships
    requester = relationship("UserProfile", foreign_keys=[requester_id])
    receiver = relationship("UserProfile", foreign_keys=[receiver_id])

    def other_party(self, user_id: str) -> str:
        """Id of the participant that is not user_id"""
        return self.receiver_id if self.requester_id == user_id else self.requester_id

    def __repr__(self) -> str:
        return f"<Friendship {self.id} {self.requester_id}->{self.receiver_id} {self.status}>"
