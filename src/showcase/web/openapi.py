from typing import Any

from fastapi import FastAPI
from fastapi.openapi.utils import get_openapi
from pydantic import BaseModel, Field

# Resource path prefixes, readable without authentication via list and get-by-key endpoints
PUBLIC_RESOURCES = ("/blogs", "/events", "/gallery", "/works", "/services", "/hero-sliders")


def public_endpoints() -> set[tuple[str, str]]:
    endpoints = {
        ("GET", "/health"),
        ("GET", "/media/{folder}/{filename}"),
        ("POST", "/api/v1/auth/register"),
        ("POST", "/api/v1/auth/login"),
        ("POST", "/api/v1/auth/admin/login"),
        ("POST", "/api/v1/auth/forgot-password"),
        ("POST", "/api/v1/auth/reset-password"),
        ("GET", "/api/v1/hero-sliders/all"),
    }
    for prefix in PUBLIC_RESOURCES:
        endpoints.add(("GET", f"/api/v1{prefix}"))
        endpoints.add(("GET", f"/api/v1{prefix}/{{key}}"))
    return endpoints


def set_custom_openapi(app: FastAPI) -> None:
    def custom_openapi() -> dict[str, Any]:
        if app.openapi_schema:
            return app.openapi_schema

        openapi_schema = get_openapi(
            title="Showcase API",
            version="0.1.0",
            summary="Content management backend for blogs, events, gallery, works, services and hero slides",
            routes=app.routes,
        )

        # Add security schemes
        openapi_schema.setdefault("components", {})["securitySchemes"] = {
            "BearerAuth": {
                "type": "http",
                "scheme": "bearer",
                "bearerFormat": "JWT",
                "description": "JWT returned by the login and register endpoints",
            },
        }

        # Apply security globally (will be overridden for public endpoints)
        openapi_schema["security"] = [{"BearerAuth": []}]

        # Remove security from public endpoints
        public = public_endpoints()
        for path, path_item in openapi_schema["paths"].items():
            for method, operation in path_item.items():
                if (method.upper(), path) in public:
                    # Mark as public endpoint (no security required)
                    operation["security"] = []

        app.openapi_schema = openapi_schema
        return app.openapi_schema

    app.openapi = custom_openapi  # type: ignore[method-assign]


class ErrorResponse(BaseModel):
    """Standard error response format."""

    message: str = Field(..., description="Human-readable error message")
    type: str = Field(..., description="Machine-readable error type")
    field: str | None = Field(None, description="Offending payload field, for invalid_payload errors")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"message": "Invalid email or password", "type": "authentication_error"},
                {"message": "Event not found: 7", "type": "not_found"},
                {"message": "A record with slug 'my-first-event' already exists", "type": "duplicate"},
                {"message": "Field 'is_published' must be true or false", "type": "invalid_payload", "field": "is_published"},
            ]
        }
    }
