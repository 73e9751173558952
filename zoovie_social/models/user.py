"""
User profile model - the read-only projection joined into friend listings
"""
from sqlalchemy import Column, String, Boolean, DateTime, Text
from zoovie_social.database import Base
from zoovie_social.utils.time_utils import utc_now


class UserProfile(Base):
    """Public profile of a user, keyed by the identity provider's user id"""
    __tablename__ = "user_profiles"

    id = Column(String(64), primary_key=True)
    username = Column(String(30), unique=True, nullable=True, index=True)
    display_name = Column(String(255), nullable=True)
    avatar_url = Column(Text, nullable=True)
    is_public = Column(Boolean, default=True)

    # Timestamps
    created_at = Column(DateTime, default=utc_now)
    updated_at = Column(DateTime, default=utc_now, onupdate=utc_now)
