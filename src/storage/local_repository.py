# src/storage/local_repository.py
"""Repository persisting the whole journal to one JSON file."""
import json
import logging
import uuid
from pathlib import Path

import aiofiles

from src.journal.filters import latest_first
from src.journal.models import Invitation, Trade, User
from src.journal.serialization import (
    invitation_from_dict,
    invitation_to_dict,
    trade_from_dict,
    trade_to_dict,
    user_from_dict,
    user_to_dict,
)
from src.models.errors import AuthorizationError, StorageError
from src.storage.base import JournalRepository

logger = logging.getLogger(__name__)


class LocalRepository(JournalRepository):
    """Stores trades, profiles and invitations in ``{data_dir}/journal.json``.

    The file is read and rewritten on every operation; journals hold
    hundreds of trades, not millions.
    """

    FILE_NAME = "journal.json"

    def __init__(self, data_dir: str | Path) -> None:
        """Initialize the repository.

        Args:
            data_dir: Directory for the journal file; created if missing.
        """
        super().__init__(name="local")
        self._data_dir = Path(data_dir)
        self._data_dir.mkdir(parents=True, exist_ok=True)

    @property
    def file_path(self) -> Path:
        return self._data_dir / self.FILE_NAME

    async def _read(self) -> dict:
        """Read the journal document, or an empty one."""
        if not self.file_path.exists():
            return {"trades": [], "profiles": [], "invitations": []}

        try:
            async with aiofiles.open(self.file_path, "r", encoding="utf-8") as f:
                content = await f.read()
            data = json.loads(content) if content.strip() else {}
        except (OSError, json.JSONDecodeError) as e:
            raise StorageError(f"Cannot read {self.file_path}: {e}") from e

        data.setdefault("trades", [])
        data.setdefault("profiles", [])
        data.setdefault("invitations", [])
        return data

    async def _write(self, data: dict) -> None:
        """Write the journal document."""
        try:
            async with aiofiles.open(self.file_path, "w", encoding="utf-8") as f:
                await f.write(json.dumps(data, indent=2, ensure_ascii=False))
        except OSError as e:
            raise StorageError(f"Cannot write {self.file_path}: {e}") from e

    async def fetch_trades_for_user(self, user_id: str) -> list[Trade]:
        data = await self._read()
        trades = [trade_from_dict(t) for t in data["trades"]]
        return latest_first([t for t in trades if t.user_id == user_id])

    async def fetch_all_trades(self) -> list[Trade]:
        data = await self._read()
        return latest_first([trade_from_dict(t) for t in data["trades"]])

    async def fetch_trade(self, trade_id: str) -> Trade | None:
        data = await self._read()
        for record in data["trades"]:
            if record.get("id") == trade_id:
                return trade_from_dict(record)
        return None

    async def upsert_trade(self, trade: Trade) -> Trade:
        if not trade.id:
            trade.id = str(uuid.uuid4())

        data = await self._read()
        record = trade_to_dict(trade)
        for index, existing in enumerate(data["trades"]):
            if existing.get("id") == trade.id:
                if existing.get("userId") != trade.user_id:
                    raise AuthorizationError(f"Trade {trade.id} belongs to another user")
                data["trades"][index] = record
                break
        else:
            data["trades"].insert(0, record)

        await self._write(data)
        return trade

    async def replace_trades_for_user(self, user_id: str, trades: list[Trade]) -> list[Trade]:
        """Rewrite the user's trades in one write of the journal file."""
        data = await self._read()
        others = [t for t in data["trades"] if t.get("userId") != user_id]
        taken = {t.get("id") for t in others}

        replaced = []
        for trade in trades:
            trade.user_id = user_id
            if not trade.id or trade.id in taken:
                trade.id = str(uuid.uuid4())
            taken.add(trade.id)
            replaced.append(trade)

        data["trades"] = [trade_to_dict(t) for t in replaced] + others
        await self._write(data)
        logger.info(f"Replaced trades of user {user_id} with {len(replaced)}")
        return replaced

    async def delete_trade(self, trade_id: str) -> None:
        data = await self._read()
        data["trades"] = [t for t in data["trades"] if t.get("id") != trade_id]
        await self._write(data)

    async def delete_trades_for_user(self, user_id: str) -> int:
        data = await self._read()
        kept = [t for t in data["trades"] if t.get("userId") != user_id]
        removed = len(data["trades"]) - len(kept)
        data["trades"] = kept
        await self._write(data)
        logger.info(f"Deleted {removed} trades of user {user_id}")
        return removed

    async def fetch_profile(self, user_id: str) -> User | None:
        data = await self._read()
        for profile in data["profiles"]:
            if profile.get("id") == user_id:
                return user_from_dict(profile)
        return None

    async def upsert_profile(self, user: User) -> None:
        data = await self._read()
        record = user_to_dict(user)
        for index, existing in enumerate(data["profiles"]):
            if existing.get("id") == user.id:
                data["profiles"][index] = record
                break
        else:
            data["profiles"].append(record)
        await self._write(data)

    async def delete_profile(self, user_id: str) -> None:
        data = await self._read()
        data["profiles"] = [p for p in data["profiles"] if p.get("id") != user_id]
        await self._write(data)

    async def fetch_all_profiles(self) -> list[User]:
        data = await self._read()
        return [user_from_dict(p) for p in data["profiles"]]

    async def create_invitation(self, invitation: Invitation) -> None:
        if invitation.id is None:
            invitation.id = str(uuid.uuid4())
        data = await self._read()
        data["invitations"].append(invitation_to_dict(invitation))
        await self._write(data)

    async def find_invitation(self, email: str) -> Invitation | None:
        wanted = email.strip().lower()
        data = await self._read()
        matches = [
            invitation_from_dict(i)
            for i in data["invitations"]
            if str(i.get("email", "")).strip().lower() == wanted
        ]
        return matches[-1] if matches else None

    async def delete_invitations_by_email(self, email: str) -> None:
        wanted = email.strip().lower()
        data = await self._read()
        data["invitations"] = [
            i for i in data["invitations"]
            if str(i.get("email", "")).strip().lower() != wanted
        ]
        await self._write(data)
