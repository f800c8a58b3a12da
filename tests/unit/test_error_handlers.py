"""Tests for mapping errors to HTTP responses."""

import asyncio
import json

import pytest

from showcase.errors import (
    AccessDeniedError,
    AuthenticationError,
    DuplicateIdError,
    DuplicateSlugError,
    InvalidPayloadError,
    NotFoundError,
    StorageUnavailableError,
    ValidationError,
)
from showcase.web.error_handlers import general_exception_handler, storage_unavailable_handler, user_error_handler


def respond(handler, exc):
    response = asyncio.run(handler(None, exc))
    return response.status_code, json.loads(response.body)


class TestUserErrorHandler:
    """Tests for user_error_handler."""

    @pytest.mark.parametrize(
        ("exc", "status_code", "error_type"),
        [
            (AuthenticationError(), 401, "authentication_error"),
            (AccessDeniedError("Admin privileges required"), 403, "access_denied"),
            (NotFoundError("Event not found: 7"), 404, "not_found"),
            (DuplicateSlugError("my-first-event"), 409, "duplicate"),
            (DuplicateIdError(3), 409, "duplicate"),
            (ValidationError("Field 'title' is required"), 400, "validation_error"),
        ],
    )
    def test_status_codes(self, exc, status_code, error_type):
        """Test that each error kind maps to its status code and type."""
        code, body = respond(user_error_handler, exc)
        assert code == status_code
        assert body["type"] == error_type
        assert body["message"] == str(exc)
        assert "field" not in body

    def test_invalid_payload_names_field(self):
        """Test that decoding errors carry the offending field."""
        code, body = respond(user_error_handler, InvalidPayloadError("is_published", "Field 'is_published' must be true or false"))
        assert code == 400
        assert body == {
            "message": "Field 'is_published' must be true or false",
            "type": "invalid_payload",
            "field": "is_published",
        }


class TestServerErrorHandlers:
    """Tests for non-user errors."""

    def test_storage_unavailable(self):
        """Test that store outages are 503 without internal details."""
        code, body = respond(storage_unavailable_handler, StorageUnavailableError("Document store unavailable: refused"))
        assert code == 503
        assert body["type"] == "storage_unavailable"
        assert "refused" not in body["message"]

    def test_unexpected_error(self):
        """Test that anything else is a generic 500."""
        code, body = respond(general_exception_handler, RuntimeError("boom"))
        assert code == 500
        assert body == {"message": "An unexpected error occurred.", "type": "internal_server_error"}
