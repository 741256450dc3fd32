"""Content store adapter layer - abstracts over the hosted database."""

from app.adapters.content_store.base import AbstractContentStore, SlugMatch
from app.adapters.content_store.factory import create_content_store
from app.adapters.content_store.in_memory import InMemoryContentStore
from app.adapters.content_store.supabase_client import SupabaseContentStore

__all__ = [
    "AbstractContentStore",
    "InMemoryContentStore",
    "SlugMatch",
    "SupabaseContentStore",
    "create_content_store",
]
