from zoovie_social.client.api import FriendsApiClient, FriendsApiError
from zoovie_social.client.view_models import FriendActionsViewModel, FriendRequestsViewModel

__all__ = [
    "FriendsApiClient",
    "FriendsApiError",
    "FriendActionsViewModel",
    "FriendRequestsViewModel",
]
