"""
Exception types raised by the backend query layer.
"""

from typing import Optional


class KiranaAdminError(Exception):
    """Base class for all admin panel errors."""


class NotAuthenticatedError(KiranaAdminError):
    """No user is signed in."""

    def __init__(self, message: str = "User not authenticated"):
        super().__init__(message)


class StoreNotFoundError(KiranaAdminError):
    """The signed-in user is not attached to a store."""

    def __init__(self, message: str = "Store not found"):
        super().__init__(message)


class BackendError(KiranaAdminError):
    """A Supabase / PostgREST request failed."""

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[str] = None,
        hint: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details
        self.hint = hint

    @classmethod
    def from_api_error(cls, error: Exception) -> 'BackendError':
        """Build from a postgrest ``APIError`` (or anything shaped like one)."""
        return cls(
            getattr(error, "message", None) or str(error),
            code=getattr(error, "code", None),
            details=getattr(error, "details", None),
            hint=getattr(error, "hint", None),
        )


class ImageValidationError(KiranaAdminError):
    """An image upload was rejected before reaching storage."""


class RegistrationError(KiranaAdminError):
    """Store or admin creation failed during registration."""
