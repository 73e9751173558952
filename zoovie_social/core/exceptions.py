"""
Typed errors raised by the relationship service.

Each error carries a stable ``code`` that the HTTP layer echoes back to
clients, and the HTTP status it maps to.
"""


class RelationshipError(Exception):
    """Base exception for all friend relationship errors."""

    code = "RELATIONSHIP_ERROR"
    status_code = 500
    default_message = "Friend relationship operation failed"

    def __init__(self, message: str | None = None, details: dict | None = None):
        """Initialize exception with message and optional details.

        Args:
            message: Human-readable error message
            details: Optional dictionary with additional error context
        """
        self.message = message or self.default_message
        super().__init__(self.message)
        self.details = details


class SelfRelationError(RelationshipError):
    """A user tried to send a friend request to themselves."""

    code = "CANNOT_FRIEND_SELF"
    status_code = 400
    default_message = "You cannot send a friend request to yourself"


class DuplicateRelationError(RelationshipError):
    """An edge already exists for the pair, in either direction."""

    code = "FRIEND_REQUEST_ALREADY_EXISTS"
    status_code = 409
    default_message = "A friend request or friendship already exists"


class NotFoundError(RelationshipError):
    """No edge matched the id together with its expected status.

    Raised both for ids that never existed and for requests that were
    already resolved by someone else.
    """

    code = "FRIEND_REQUEST_NOT_FOUND"
    status_code = 404
    default_message = "Friend request not found"


class ForbiddenError(RelationshipError):
    """The acting user is not a participant of the edge."""

    code = "FORBIDDEN"
    status_code = 403
    default_message = "You are not part of this friendship"
