"""
API v1 routes aggregation
"""
from fastapi import APIRouter
from zoovie_social.api.v1 import friends

api_router = APIRouter()

# Social/Friends
api_router.include_router(friends.router, tags=["friends"])
