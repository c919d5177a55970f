# tests/errors/test_base.py
"""Tests for blog_content/errors/base.py module."""

from unittest.mock import MagicMock

import pytest

from blog_content.errors import BaseAppError, create_exception_handler


class TestBaseAppError:
    """Tests for BaseAppError exception."""

    def test_default_values(self) -> None:
        """Test default initialization values."""
        error = BaseAppError()
        assert error.detail == "Internal Server Error"
        assert error.status_code == 500

    def test_custom_values(self) -> None:
        """Test custom initialization values."""
        error = BaseAppError(detail="Custom error", status_code=400)
        assert error.detail == "Custom error"
        assert error.status_code == 400

    def test_str_representation(self) -> None:
        """Test string representation returns the detail."""
        error = BaseAppError(detail="Test error")
        assert str(error) == "Test error"


class TestCreateExceptionHandler:
    """Tests for create_exception_handler factory function."""

    @pytest.fixture
    def request_mock(self) -> MagicMock:
        request = MagicMock()
        request.client.host = "192.168.1.1"
        request.url.path = "/api/test"
        return request

    @pytest.mark.asyncio
    async def test_handler_with_base_app_error(self, request_mock: MagicMock) -> None:
        """Test handler with BaseAppError exception."""
        logger = MagicMock()
        handler = create_exception_handler(logger)

        response = await handler(request_mock, BaseAppError(detail="Test error", status_code=400))

        assert response.status_code == 400
        assert response.body == b'{"detail":"Test error"}'
        logger.warning.assert_called_once_with(
            "Test error for ip: 192.168.1.1 for endpoint /api/test",
        )

    @pytest.mark.asyncio
    async def test_handler_with_generic_exception(self, request_mock: MagicMock) -> None:
        """Test handler with generic Python exception."""
        handler = create_exception_handler(MagicMock())

        response = await handler(request_mock, ValueError("Something went wrong"))

        assert response.status_code == 500
        assert response.body == b'{"detail":"Internal Server Error"}'

    @pytest.mark.asyncio
    async def test_public_attributes_are_included(self, request_mock: MagicMock) -> None:
        """Extra public attributes travel with the detail; private ones do not."""
        error = BaseAppError(detail="Conflict", status_code=409)
        error.slug = "hello-world"
        error._internal = "hidden"
        handler = create_exception_handler(MagicMock())

        response = await handler(request_mock, error)

        assert response.body == b'{"detail":"Conflict","slug":"hello-world"}'
