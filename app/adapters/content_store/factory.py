"""Factory for creating content store instances."""

from app.adapters.content_store.base import AbstractContentStore
from app.adapters.content_store.in_memory import InMemoryContentStore
from app.adapters.content_store.supabase_client import SupabaseContentStore
from app.core.config import settings
from app.core.errors import ValidationAppError


def create_content_store() -> AbstractContentStore:
    """Instantiate the content store for the configured provider.

    Reads configuration from app.core.config.settings (Pydantic Settings).

    Returns:
        AbstractContentStore: Configured store instance.

    Raises:
        ValidationAppError: If provider-specific requirements are not met.
    """
    provider = settings.content_store.provider.lower()

    if provider == "supabase":
        if not settings.content_store.url or not settings.content_store.api_key:
            raise ValidationAppError(
                code="content_store_not_configured",
                message=(
                    "Supabase provider requires CONTENT_STORE_URL and "
                    "CONTENT_STORE_API_KEY environment variables"
                ),
                details={"provider": provider},
            )
        return SupabaseContentStore(
            url=settings.content_store.url,
            api_key=settings.content_store.api_key,
            timeout_seconds=settings.content_store.timeout_seconds,
        )

    # Local development and tests
    if provider == "memory":
        return InMemoryContentStore()

    raise ValidationAppError(
        code="content_store_unknown_provider",
        message=(
            f"Unknown content store provider: '{provider}'. "
            "Supported providers: supabase, memory"
        ),
        details={"provider": provider},
    )
