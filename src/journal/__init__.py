# src/journal/__init__.py
"""Journal module: trade model, entry pipeline, filters and metrics."""

from .filters import filter_by_window, scope_trades, search_trades, shift_month
from .journal_manager import JournalManager
from .metrics_calculator import MetricsCalculator, duration_minutes, format_duration
from .models import (
    DashboardReport,
    Direction,
    ErrorCategory,
    Role,
    Screenshot,
    TimeWindow,
    Trade,
    TradingStats,
    User,
)
from .pattern_analyzer import PatternAnalyzer
from .settings import JournalSettings
from .trade_entry import TradeDraft, TradeEntryPipeline, compute_pnl, risk_reward_preview

__all__ = [
    "DashboardReport",
    "Direction",
    "ErrorCategory",
    "JournalManager",
    "JournalSettings",
    "MetricsCalculator",
    "PatternAnalyzer",
    "Role",
    "Screenshot",
    "TimeWindow",
    "Trade",
    "TradeDraft",
    "TradeEntryPipeline",
    "TradingStats",
    "User",
    "compute_pnl",
    "duration_minutes",
    "filter_by_window",
    "format_duration",
    "risk_reward_preview",
    "scope_trades",
    "search_trades",
    "shift_month",
]
