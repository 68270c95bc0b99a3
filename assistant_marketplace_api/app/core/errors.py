"""
Error taxonomy shared by the service layer and the HTTP handlers.

Services raise these exceptions; ``main.create_app`` registers a
handler that turns any ``MarketplaceError`` into a JSON response with
the class's ``status_code`` and a body of the form
``{"detail": <message>, "error": <code>}``.
"""

from fastapi import status


class MarketplaceError(ValueError):
    """Base class for user-visible marketplace errors."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    error: str = "error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(MarketplaceError):
    """Malformed or missing input."""

    status_code = status.HTTP_400_BAD_REQUEST
    error = "validation_error"


class NotFoundError(MarketplaceError):
    """A referenced identifier does not resolve."""

    status_code = status.HTTP_404_NOT_FOUND
    error = "not_found"


class AuthenticationError(MarketplaceError):
    """No valid session accompanies the request."""

    status_code = status.HTTP_401_UNAUTHORIZED
    error = "not_authenticated"


class AuthorizationError(MarketplaceError):
    """Valid session but insufficient privilege or ownership."""

    status_code = status.HTTP_403_FORBIDDEN
    error = "forbidden"


class ConflictError(MarketplaceError):
    """Uniqueness violation such as a duplicate username or email.

    Reported with status 400 so that registration clients see the same
    status for every rejected payload.
    """

    status_code = status.HTTP_400_BAD_REQUEST
    error = "conflict"
