"""
Domain errors raised by the stores and the authorization gate.

Each error carries the HTTP status it maps to; ``main.py`` renders them as
``{"detail": message}`` so routers never have to translate them by hand.
"""

from fastapi import status


class PortalError(Exception):
    """Base exception for all PoetPortal errors."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    message = "Internal server error"

    def __init__(self, message=None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


# Authentication

class Unauthenticated(PortalError):
    status_code = status.HTTP_401_UNAUTHORIZED
    message = "Could not validate credentials"


class TokenError(Unauthenticated):
    """The bearer token could not be accepted."""


class TokenExpired(TokenError):
    message = "Token has expired"


class TokenInvalid(TokenError):
    message = "Malformed token or invalid signature"


class AccountSuspended(PortalError):
    status_code = status.HTTP_403_FORBIDDEN
    message = "Account is suspended"


# Authorization / lookup

class Forbidden(PortalError):
    status_code = status.HTTP_403_FORBIDDEN
    message = "You do not have permission to perform this action"


class NotFound(PortalError):
    status_code = status.HTTP_404_NOT_FOUND
    message = "Resource not found"


class NotFollowing(NotFound):
    message = "You are not following this user"


class NotLiked(NotFound):
    message = "You have not liked this item"


# Conflicts

class Conflict(PortalError):
    status_code = status.HTTP_409_CONFLICT
    message = "Resource already exists"


class AlreadyFollowing(Conflict):
    message = "You are already following this user"


class AlreadyLiked(Conflict):
    message = "You have already liked this item"


class UsernameTaken(Conflict):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Username already exists"


# Validation

class ValidationFailed(PortalError):
    status_code = status.HTTP_400_BAD_REQUEST
    message = "Invalid request"


class EmptyContent(ValidationFailed):
    message = "Content must not be empty"


class SelfFollow(ValidationFailed):
    message = "You cannot follow yourself"


class SelfLike(ValidationFailed):
    message = "You cannot like your own content"


class InvalidParent(ValidationFailed):
    message = "Parent comment does not belong to this post"
