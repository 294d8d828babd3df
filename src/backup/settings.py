# src/backup/settings.py
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class BackupSettings(BaseModel):
    """Settings for gist backups."""

    api_url: str = "https://api.github.com"
    filename: str = "trademind_backup.json"
    description: str = "TradeMind Journal Backup (Private)"
    timeout_seconds: float = Field(default=15.0, gt=0, le=120)


class GitHubConfig(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="GITHUB_")

    token: str = ""
    gist_id: str = ""
