# src/storage/__init__.py
"""Persistence collaborators for the journal."""

from src.storage.base import JournalRepository
from src.storage.local_cache import CachedPreferences, LocalCache
from src.storage.local_repository import LocalRepository
from src.storage.settings import StorageSettings, SupabaseConfig
from src.storage.supabase_repository import SupabaseRepository

__all__ = [
    "CachedPreferences",
    "JournalRepository",
    "LocalCache",
    "LocalRepository",
    "StorageSettings",
    "SupabaseConfig",
    "SupabaseRepository",
]
