"""OpenAPI metadata and customization utilities.

Adds tags metadata and the ``X-API-Key`` security scheme. Only the admin
operations are marked as requiring the key; public blog, contact and system
endpoints stay open (system endpoints check a query token instead).
"""

from __future__ import annotations

from typing import Any, Dict

from fastapi import FastAPI

ADMIN_PATH_PREFIX = "/admin"

TAGS_METADATA = [
    {"name": "Blog", "description": "Published columns and category pages."},
    {"name": "Contact", "description": "Contact form submission (rate limited)."},
    {"name": "Admin", "description": "Post and category management. Requires X-API-Key."},
    {"name": "System", "description": "Cache revalidation and diagnostics (token protected)."},
    {"name": "Health", "description": "Liveness checks."},
]


def apply_openapi_customizations(app: FastAPI) -> None:
    """Patch FastAPI's OpenAPI generation to add tags and admin security."""

    original_openapi = app.openapi

    def custom_openapi() -> Dict[str, Any]:
        schema = original_openapi()

        components = schema.setdefault("components", {})
        security_schemes = components.setdefault("securitySchemes", {})
        security_schemes.setdefault(
            "AdminApiKey",
            {
                "type": "apiKey",
                "in": "header",
                "name": "X-API-Key",
                "description": "Admin API key (APP_ADMIN_API_KEYS).",
            },
        )

        tags = schema.setdefault("tags", [])
        existing_tag_names = {t.get("name") for t in tags}
        for tag in TAGS_METADATA:
            if tag["name"] not in existing_tag_names:
                tags.append(tag)

        for path, methods in schema.get("paths", {}).items():
            if not path.startswith(ADMIN_PATH_PREFIX):
                continue
            for method_obj in methods.values():
                if isinstance(method_obj, dict):
                    method_obj["security"] = [{"AdminApiKey": []}]

        return schema

    app.openapi = custom_openapi  # type: ignore[assignment]
