# src/journal/settings.py
"""Settings for the journal module."""
from pydantic import BaseModel, Field, field_validator

from src.journal.constants import DEFAULT_SETUP_OPTIONS, DEFAULT_SYMBOL_OPTIONS
from src.journal.models import TimeWindow


class JournalSettings(BaseModel):
    """Configuration settings for the trading journal.

    Attributes:
        data_dir: Directory holding the local journal and option cache.
        setup_options: Initial setup tags offered in the trade form.
        symbol_options: Initial symbols offered in the trade form.
        default_window: Window the dashboard opens with.
        default_starting_balance: Equity baseline for new accounts.
    """

    data_dir: str = "data/journal"

    setup_options: list[str] = Field(default_factory=lambda: list(DEFAULT_SETUP_OPTIONS))
    symbol_options: list[str] = Field(default_factory=lambda: list(DEFAULT_SYMBOL_OPTIONS))

    default_window: TimeWindow = TimeWindow.MONTHLY
    default_starting_balance: float = Field(default=0.0, ge=0)

    @field_validator("setup_options", "symbol_options")
    @classmethod
    def validate_options(cls, v: list[str]) -> list[str]:
        """Strip blanks and duplicates, keeping order."""
        cleaned: list[str] = []
        for option in v:
            option = option.strip()
            if option and option not in cleaned:
                cleaned.append(option)
        return cleaned
