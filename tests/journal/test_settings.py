# tests/journal/test_settings.py
"""Tests for journal settings."""
import pytest

from src.journal.constants import DEFAULT_SETUP_OPTIONS, DEFAULT_SYMBOL_OPTIONS
from src.journal.models import TimeWindow
from src.journal.settings import JournalSettings


class TestJournalSettings:
    """Tests for JournalSettings."""

    def test_default_settings(self):
        """Default settings should have sensible values."""
        settings = JournalSettings()

        assert settings.data_dir == "data/journal"
        assert settings.setup_options == DEFAULT_SETUP_OPTIONS
        assert settings.symbol_options == DEFAULT_SYMBOL_OPTIONS
        assert settings.default_window == TimeWindow.MONTHLY
        assert settings.default_starting_balance == 0.0

    def test_defaults_are_not_shared(self):
        """Each instance should own its option lists."""
        first = JournalSettings()
        first.setup_options.append("Custom")

        assert "Custom" not in JournalSettings().setup_options
        assert "Custom" not in DEFAULT_SETUP_OPTIONS

    def test_options_are_cleaned(self):
        """Blank and duplicate options should be dropped, order kept."""
        settings = JournalSettings(setup_options=[" Breakout ", "", "Retest", "Breakout"])

        assert settings.setup_options == ["Breakout", "Retest"]

    def test_window_from_string(self):
        settings = JournalSettings(default_window="overall")

        assert settings.default_window == TimeWindow.OVERALL

    def test_negative_balance_rejected(self):
        with pytest.raises(ValueError):
            JournalSettings(default_starting_balance=-1)
