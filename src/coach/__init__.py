# src/coach/__init__.py
"""AI coaching over the Claude API."""

from src.coach.settings import AnthropicConfig, CoachSettings
from src.coach.trade_coach import TradeCoach, select_recent, summarize_trade

__all__ = [
    "AnthropicConfig",
    "CoachSettings",
    "TradeCoach",
    "select_recent",
    "summarize_trade",
]
