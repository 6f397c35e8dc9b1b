"""
Error types shared by the API and the client modules.

Server handlers raise the StorefrontError subclasses; main.py turns them
into ``{"detail": message}`` responses with the matching status code.
"""


class StorefrontError(Exception):
    status_code = 500

    def __init__(self, message: str, status_code: int = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(StorefrontError):
    status_code = 400


class NotFoundError(StorefrontError):
    status_code = 404


class ConflictError(StorefrontError):
    status_code = 409


class AuthError(StorefrontError):
    status_code = 401


class ForbiddenError(StorefrontError):
    status_code = 403


class PersistenceError(StorefrontError):
    status_code = 500


# Client side

class ApiError(StorefrontError):
    """Non-2xx response from the store API."""


class TransientNetworkError(StorefrontError):
    """The API could not be reached. Safe to retry by hand."""

    status_code = 503
