"""Streamlit front end for the trading journal."""

from src.dashboard.controller import JournalController
from src.dashboard.models import CoachStatus, Notice, NoticeKind, NoticeLevel
from src.dashboard.settings import DashboardSettings
from src.dashboard.state import AppState

__all__ = [
    "AppState",
    "CoachStatus",
    "DashboardSettings",
    "JournalController",
    "Notice",
    "NoticeKind",
    "NoticeLevel",
]
