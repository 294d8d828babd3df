# src/config/settings.py
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from src.backup.settings import BackupSettings, GitHubConfig
from src.coach.settings import AnthropicConfig, CoachSettings
from src.dashboard.settings import DashboardSettings
from src.journal.settings import JournalSettings
from src.storage.settings import StorageSettings, SupabaseConfig


class SystemConfig(BaseModel):
    name: str = "TradeMind Journal"
    version: str = "1.0.0"
    timezone: str | None = None
    log_level: str = "INFO"

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.strip().upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level: {v}")
        return level


class AdminBootstrapConfig(BaseSettings):
    """First-run administrator, created only when no account exists."""

    model_config = SettingsConfigDict(env_prefix="TRADEMIND_ADMIN_")

    username: str = ""
    password: str = ""


class Settings(BaseModel):
    system: SystemConfig = Field(default_factory=SystemConfig)
    journal: JournalSettings = Field(default_factory=JournalSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    coach: CoachSettings = Field(default_factory=CoachSettings)
    backup: BackupSettings = Field(default_factory=BackupSettings)
    dashboard: DashboardSettings = Field(default_factory=DashboardSettings)
    anthropic: AnthropicConfig = Field(default_factory=AnthropicConfig)
    supabase: SupabaseConfig = Field(default_factory=SupabaseConfig)
    github: GitHubConfig = Field(default_factory=GitHubConfig)
    admin: AdminBootstrapConfig = Field(default_factory=AdminBootstrapConfig)

    @classmethod
    def from_yaml(cls, path: Path) -> "Settings":
        """Load settings from YAML file with env var overrides."""
        with open(path) as f:
            data = yaml.safe_load(f) or {}

        return cls(
            **data,
            anthropic=AnthropicConfig(),
            supabase=SupabaseConfig(),
            github=GitHubConfig(),
            admin=AdminBootstrapConfig(),
        )
