# src/coach/settings.py
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Shorter keys are placeholders, not credentials.
MIN_API_KEY_LENGTH = 10


class CoachSettings(BaseModel):
    """Settings for the AI trading coach."""

    enabled: bool = True
    model: str = "claude-sonnet-4-20250514"
    max_tokens: int = Field(default=1000, ge=100, le=4096)
    max_trades: int = Field(default=10, ge=1, le=50)
    temperature: float = Field(default=0.8, ge=0.0, le=1.0)
    timeout_seconds: float = Field(default=60.0, gt=0, le=300)


class AnthropicConfig(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="ANTHROPIC_")

    api_key: str = ""

    @property
    def is_configured(self) -> bool:
        key = self.api_key.strip()
        return len(key) >= MIN_API_KEY_LENGTH and key != "undefined"
