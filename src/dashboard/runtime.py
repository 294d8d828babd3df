"""Wiring of settings, collaborators and the controller for the front end."""
import asyncio
import logging
import os
from collections.abc import Coroutine
from pathlib import Path
from typing import Any, TypeVar
from zoneinfo import ZoneInfo

from src.backup.gist_client import GistBackupClient
from src.coach.trade_coach import TradeCoach
from src.config.settings import Settings
from src.dashboard.controller import JournalController
from src.dashboard.state import AppState
from src.storage.base import JournalRepository
from src.storage.local_cache import LocalCache
from src.storage.local_repository import LocalRepository
from src.storage.supabase_repository import SupabaseRepository

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_CONFIG_PATH = Path("config/settings.yaml")


def load_settings(path: Path | None = None) -> Settings:
    """Settings from YAML when the file exists, defaults plus env otherwise."""
    path = path or Path(os.getenv("TRADEMIND_CONFIG", str(DEFAULT_CONFIG_PATH)))
    if path.exists():
        return Settings.from_yaml(path)
    logger.info(f"No config file at {path}, using defaults")
    return Settings()


def build_repository(settings: Settings) -> JournalRepository:
    if settings.storage.backend == "supabase":
        if settings.supabase.is_configured:
            return SupabaseRepository(settings.supabase, settings.storage.timeout_seconds)
        logger.warning("Supabase backend selected but SUPABASE_URL/SUPABASE_ANON_KEY missing, using local storage")
    return LocalRepository(settings.journal.data_dir)


def build_controller(settings: Settings) -> JournalController:
    tz = ZoneInfo(settings.system.timezone) if settings.system.timezone else None
    state = AppState(max_notices=settings.dashboard.max_notices)
    return JournalController(
        state=state,
        repository=build_repository(settings),
        cache=LocalCache(settings.journal.data_dir),
        coach=TradeCoach(settings.anthropic, settings.coach),
        gist_client=GistBackupClient(settings.backup),
        journal_settings=settings.journal,
        github=settings.github,
        tz=tz,
    )


async def start_controller(settings: Settings) -> JournalController:
    controller = build_controller(settings)
    await controller.initialize(settings.admin.username, settings.admin.password)
    return controller


def run(coro: Coroutine[Any, Any, T]) -> T:
    """Run one controller action from synchronous page code."""
    return asyncio.run(coro)
