"""Domain errors raised by services and rendered by the API layer."""

from fastapi import status


class CMSError(Exception):
    """Base class for errors that map onto an HTTP status."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidInputError(CMSError):
    """A field is present but violates a domain rule."""

    status_code = status.HTTP_400_BAD_REQUEST


class PermissionDeniedError(CMSError):
    """The principal is authenticated but not allowed to act."""

    status_code = status.HTTP_403_FORBIDDEN


class NotFoundError(CMSError):
    """An entity addressed by id, slug or key does not exist."""

    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(CMSError):
    """A unique value (slug, email) is already taken.

    Raised both by the optimistic pre-checks and when the store's unique index
    rejects a write that slipped past them.
    """

    status_code = status.HTTP_409_CONFLICT
