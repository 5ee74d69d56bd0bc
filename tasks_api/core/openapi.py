"""OpenAPI customization.

Adds the ``X-API-Key`` security scheme, tag descriptions, the 429 response
every route can return, and exempts ``/health`` from auth in the docs.
"""

from __future__ import annotations

from typing import Any

from fastapi import FastAPI

TAGS = [
    {
        "name": "AI",
        "description": "Task content, super prompt and prompt improvement generation.",
    },
    {
        "name": "Health",
        "description": "Liveness check and provider configuration status.",
    },
]

RATE_LIMITED_RESPONSE = {
    "description": "Rate limit exceeded for the client address.",
    "headers": {
        "Retry-After": {"schema": {"type": "integer"}},
        "X-RateLimit-Limit": {"schema": {"type": "integer"}},
        "X-RateLimit-Remaining": {"schema": {"type": "integer"}},
        "X-RateLimit-Reset": {"schema": {"type": "integer"}},
    },
}


def apply_openapi_customizations(app: FastAPI) -> None:
    """Patch the app's OpenAPI generation with security, tags and 429 docs."""

    original_openapi = app.openapi

    def custom_openapi() -> dict[str, Any]:
        schema = original_openapi()

        security_schemes = schema.setdefault("components", {}).setdefault("securitySchemes", {})
        security_schemes.setdefault(
            "ApiKeyAuth",
            {"type": "apiKey", "in": "header", "name": "X-API-Key"},
        )
        schema.setdefault("security", [{"ApiKeyAuth": []}])

        tags = schema.setdefault("tags", [])
        known = {t.get("name") for t in tags}
        tags.extend(tag for tag in TAGS if tag["name"] not in known)

        for path, methods in schema.get("paths", {}).items():
            for operation in methods.values():
                if not isinstance(operation, dict):
                    continue
                operation.setdefault("responses", {}).setdefault("429", RATE_LIMITED_RESPONSE)
                if path.endswith("/health"):
                    operation["security"] = []

        return schema

    app.openapi = custom_openapi  # type: ignore[assignment]
