"""Tests for dashboard wiring."""
from pathlib import Path

import pytest

from src.config.settings import AdminBootstrapConfig, Settings, SystemConfig
from src.dashboard.runtime import build_controller, build_repository, load_settings, start_controller
from src.journal.settings import JournalSettings
from src.storage.local_repository import LocalRepository
from src.storage.settings import StorageSettings, SupabaseConfig
from src.storage.supabase_repository import SupabaseRepository


def make_settings(tmp_path: Path, **overrides) -> Settings:
    values = dict(
        journal=JournalSettings(data_dir=str(tmp_path / "journal")),
        supabase=SupabaseConfig(url="", anon_key=""),
        admin=AdminBootstrapConfig(username="", password=""),
    )
    values.update(overrides)
    return Settings(**values)


class TestRuntime:
    """Tests for settings loading and controller wiring."""

    def test_load_settings_without_file(self, tmp_path: Path) -> None:
        settings = load_settings(tmp_path / "missing.yaml")

        assert settings.system.name == "TradeMind Journal"

    def test_local_backend(self, tmp_path: Path) -> None:
        assert isinstance(build_repository(make_settings(tmp_path)), LocalRepository)

    def test_supabase_backend(self, tmp_path: Path) -> None:
        settings = make_settings(
            tmp_path,
            storage=StorageSettings(backend="supabase"),
            supabase=SupabaseConfig(url="https://demo.supabase.co", anon_key="anon"),
        )

        assert isinstance(build_repository(settings), SupabaseRepository)

    def test_supabase_without_credentials_falls_back(self, tmp_path: Path) -> None:
        settings = make_settings(tmp_path, storage=StorageSettings(backend="supabase"))

        assert isinstance(build_repository(settings), LocalRepository)

    def test_build_controller_uses_timezone(self, tmp_path: Path) -> None:
        settings = make_settings(tmp_path, system=SystemConfig(timezone="Asia/Taipei"))

        controller = build_controller(settings)

        assert str(controller.tz) == "Asia/Taipei"

    @pytest.mark.asyncio
    async def test_start_controller_bootstraps_admin(self, tmp_path: Path) -> None:
        settings = make_settings(
            tmp_path, admin=AdminBootstrapConfig(username="root", password="rootpw")
        )

        controller = await start_controller(settings)

        users = await controller.users.list_users()
        assert [u.username for u in users] == ["root"]
        assert controller.state.setups == settings.journal.setup_options
