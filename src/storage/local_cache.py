# src/storage/local_cache.py
"""Device-local cache: option lists, gist id and pending cascade deletes."""
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path

import aiofiles

from src.models.errors import StorageError

logger = logging.getLogger(__name__)


@dataclass
class CachedPreferences:
    """What the cache file holds. None means "not saved yet"."""

    setups: list[str] | None = None
    symbols: list[str] | None = None
    gist_id: str | None = None
    pending_cascades: list[str] = field(default_factory=list)


class LocalCache:
    """Reads and writes ``{data_dir}/preferences.json`` with aiofiles."""

    FILE_NAME = "preferences.json"

    def __init__(self, data_dir: str | Path) -> None:
        self._data_dir = Path(data_dir)
        self._data_dir.mkdir(parents=True, exist_ok=True)

    @property
    def file_path(self) -> Path:
        return self._data_dir / self.FILE_NAME

    async def load(self) -> CachedPreferences:
        """Load cached preferences; a missing or corrupt file yields defaults."""
        if not self.file_path.exists():
            return CachedPreferences()

        try:
            async with aiofiles.open(self.file_path, "r", encoding="utf-8") as f:
                data = json.loads(await f.read())
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Ignoring unreadable cache {self.file_path}: {e}")
            return CachedPreferences()
        if not isinstance(data, dict):
            logger.warning(f"Ignoring malformed cache {self.file_path}")
            return CachedPreferences()

        return CachedPreferences(
            setups=data.get("setups"),
            symbols=data.get("symbols"),
            gist_id=data.get("gistId"),
            pending_cascades=list(data.get("pendingCascades") or []),
        )

    async def save(self, prefs: CachedPreferences) -> None:
        data = {
            "setups": prefs.setups,
            "symbols": prefs.symbols,
            "gistId": prefs.gist_id,
            "pendingCascades": prefs.pending_cascades,
        }
        try:
            async with aiofiles.open(self.file_path, "w", encoding="utf-8") as f:
                await f.write(json.dumps(data, indent=2, ensure_ascii=False))
        except OSError as e:
            raise StorageError(f"Cannot write {self.file_path}: {e}") from e

    async def clear(self) -> None:
        """Forget every cached preference."""
        await self.save(CachedPreferences())
