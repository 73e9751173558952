"""
Database models for Zoovie Social

All models should be imported here for Alembic to detect them.
"""
from zoovie_social.models.user import UserProfile
from zoovie_social.models.social import Friendship, canonical_pair

__all__ = [
    # Profiles
    "UserProfile",
    # Social
    "Friendship",
    "canonical_pair",
]
