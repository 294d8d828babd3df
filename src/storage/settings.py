# src/storage/settings.py
"""Settings for the storage module."""
from typing import Literal

from pydantic import BaseModel, Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseModel):
    """Which repository backs the journal.

    Attributes:
        backend: "local" for the on-disk JSON journal, "supabase" for the
            hosted database.
        timeout_seconds: Timeout applied to every remote call.
    """

    backend: Literal["local", "supabase"] = "local"
    timeout_seconds: float = Field(default=15.0, gt=0, le=120)


class SupabaseConfig(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="SUPABASE_")

    url: str = ""
    anon_key: str = ""

    @computed_field
    @property
    def is_configured(self) -> bool:
        return bool(self.url and self.anon_key)
