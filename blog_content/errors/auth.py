"""Shared-secret authentication errors."""

from starlette.status import HTTP_401_UNAUTHORIZED, HTTP_500_INTERNAL_SERVER_ERROR

from blog_content.errors.base import BaseAppError, create_exception_handler
from blog_content.monitoring import get_logger

logger = get_logger(__name__)


class AuthError(BaseAppError):
    """Base exception for authentication errors."""


class InvalidCredentialError(AuthError):
    """Raised when the supplied shared secret is missing or wrong."""

    def __init__(self, detail: str = "Invalid password") -> None:
        super().__init__(detail=detail, status_code=HTTP_401_UNAUTHORIZED)


class ServerConfigurationError(AuthError):
    """Raised when the server has no shared secret provisioned."""

    def __init__(self, detail: str = "Server configuration error") -> None:
        super().__init__(detail=detail, status_code=HTTP_500_INTERNAL_SERVER_ERROR)


auth_exception_handler = create_exception_handler(logger)
