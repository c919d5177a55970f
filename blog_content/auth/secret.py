"""Shared-secret authentication for mutating blog endpoints."""

from secrets import compare_digest
from typing import Annotated

from fastapi import Depends, Header
from pydantic import SecretStr

from blog_content.configs.settings import Settings, settings
from blog_content.errors.auth import InvalidCredentialError, ServerConfigurationError
from blog_content.monitoring import get_logger

logger = get_logger(__name__)

UPLOAD_PASSWORD_HEADER = "X-Upload-Password"


def verify_upload_secret(password: str | None, expected: SecretStr | None) -> None:
    """
    Check a caller-supplied secret against the server-held one.

    The comparison runs in constant time.

    Args:
        password: Secret supplied by the caller
        expected: Secret provisioned on the server

    Raises:
        ServerConfigurationError: If no server secret is provisioned
        InvalidCredentialError: If the caller's secret is missing or wrong
    """
    if expected is None or not expected.get_secret_value():
        logger.error("SECRET_UPLOAD_PASSWORD is not configured")
        raise ServerConfigurationError
    if not password:
        raise InvalidCredentialError
    if not compare_digest(password.encode("utf-8"), expected.get_secret_value().encode("utf-8")):
        raise InvalidCredentialError


def get_settings() -> Settings:
    return settings


async def require_upload_secret(
    app_settings: Annotated[Settings, Depends(get_settings)],
    password: Annotated[
        str | None,
        Header(alias=UPLOAD_PASSWORD_HEADER, description="Shared upload secret"),
    ] = None,
) -> None:
    """
    Dependency guarding mutating endpoints.

    Example:
        @router.delete("/delete", dependencies=[Depends(require_upload_secret)])
        async def delete_route(...): ...
    """
    verify_upload_secret(password, app_settings.SECRET_UPLOAD_PASSWORD)
