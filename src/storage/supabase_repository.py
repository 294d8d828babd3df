# src/storage/supabase_repository.py
"""Repository backed by a hosted Supabase (PostgREST) database."""
import logging
import uuid
from typing import Any

import httpx

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
from src.storage.settings import SupabaseConfig

logger = logging.getLogger(__name__)

TRADES_TABLE = "trades"
PROFILES_TABLE = "user_profiles"
INVITATIONS_TABLE = "user_invitations"


def is_valid_uuid(value: str | None) -> bool:
    if not value:
        return False
    try:
        uuid.UUID(value)
    except ValueError:
        return False
    return True


class SupabaseRepository(JournalRepository):
    """PostgREST client over httpx.

    Every request carries the configured timeout; failures surface as
    StorageError so the caller can offer a retry.
    """

    def __init__(
        self,
        config: SupabaseConfig,
        timeout_seconds: float = 15.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the repository.

        Args:
            config: Project URL and anon key.
            timeout_seconds: Timeout for every request.
            transport: Optional httpx transport (used by tests).
        """
        super().__init__(name="supabase")
        self._base_url = config.url.rstrip("/") + "/rest/v1"
        self._headers = {
            "apikey": config.anon_key,
            "Authorization": f"Bearer {config.anon_key}",
            "Content-Type": "application/json",
        }
        self._timeout = timeout_seconds
        self._transport = transport

    async def _request(
        self,
        method: str,
        table: str,
        params: dict[str, str] | None = None,
        json_body: Any = None,
        prefer: str | None = None,
    ) -> Any:
        """Send one request and return the decoded JSON body (or None)."""
        headers = dict(self._headers)
        if prefer:
            headers["Prefer"] = prefer

        try:
            async with httpx.AsyncClient(
                base_url=self._base_url,
                timeout=self._timeout,
                transport=self._transport,
            ) as http:
                response = await http.request(
                    method, f"/{table}", params=params, json=json_body, headers=headers
                )
                response.raise_for_status()
        except httpx.TimeoutException as e:
            logger.warning(f"Supabase {method} {table} timed out")
            raise StorageError(f"Database request timed out ({table})") from e
        except httpx.HTTPStatusError as e:
            logger.error(f"Supabase {method} {table} failed: {e.response.status_code} {e.response.text}")
            raise StorageError(f"Database request failed ({e.response.status_code})") from e
        except httpx.HTTPError as e:
            logger.error(f"Supabase {method} {table} failed: {e}")
            raise StorageError(f"Database unreachable: {e}") from e

        if not response.content:
            return None
        return response.json()

    async def fetch_trades_for_user(self, user_id: str) -> list[Trade]:
        rows = await self._request(
            "GET",
            TRADES_TABLE,
            params={"select": "*", "user_id": f"eq.{user_id}", "order": "entry_time.desc"},
        )
        return [trade_from_dict(row, style="row") for row in rows or []]

    async def fetch_all_trades(self) -> list[Trade]:
        rows = await self._request(
            "GET", TRADES_TABLE, params={"select": "*", "order": "entry_time.desc"}
        )
        return [trade_from_dict(row, style="row") for row in rows or []]

    async def fetch_trade(self, trade_id: str) -> Trade | None:
        if not is_valid_uuid(trade_id):
            return None
        rows = await self._request(
            "GET", TRADES_TABLE, params={"select": "*", "id": f"eq.{trade_id}"}
        )
        if not rows:
            return None
        return trade_from_dict(rows[0], style="row")

    async def _foreign_ids(self, user_id: str, ids: list[str]) -> set[str]:
        """Ids among ``ids`` that already belong to another user."""
        if not ids:
            return set()
        rows = await self._request(
            "GET",
            TRADES_TABLE,
            params={"select": "id,user_id", "id": f"in.({','.join(ids)})"},
        )
        return {row["id"] for row in rows or [] if row.get("user_id") != user_id}

    async def upsert_trade(self, trade: Trade) -> Trade:
        if not is_valid_uuid(trade.id):
            trade.id = str(uuid.uuid4())
        elif await self._foreign_ids(trade.user_id, [trade.id]):
            raise AuthorizationError(f"Trade {trade.id} belongs to another user")

        rows = await self._request(
            "POST",
            TRADES_TABLE,
            json_body=trade_to_dict(trade, style="row"),
            prefer="resolution=merge-duplicates,return=representation",
        )
        if not rows:
            return trade
        return trade_from_dict(rows[0], style="row")

    async def replace_trades_for_user(self, user_id: str, trades: list[Trade]) -> list[Trade]:
        """Bulk-upsert the new set, then delete the user's stale rows.

        The bulk upsert is one statement. When the stale-row delete fails,
        the rows it added are removed and the previous rows written back
        before the StorageError propagates.
        """
        previous = await self.fetch_trades_for_user(user_id)
        previous_ids = {t.id for t in previous}

        for trade in trades:
            trade.user_id = user_id
            if not is_valid_uuid(trade.id):
                trade.id = str(uuid.uuid4())
        candidates = [t.id for t in trades if t.id not in previous_ids]
        foreign = await self._foreign_ids(user_id, candidates)
        seen: set[str] = set()
        for trade in trades:
            if trade.id in foreign or trade.id in seen:
                trade.id = str(uuid.uuid4())
            seen.add(trade.id)

        if trades:
            await self._request(
                "POST",
                TRADES_TABLE,
                json_body=[trade_to_dict(t, style="row") for t in trades],
                prefer="resolution=merge-duplicates",
            )

        params = {"user_id": f"eq.{user_id}"}
        if seen:
            params["id"] = f"not.in.({','.join(sorted(seen))})"
        try:
            await self._request("DELETE", TRADES_TABLE, params=params)
        except StorageError:
            logger.error(f"Replacing trades of user {user_id} failed, restoring previous set")
            added = sorted(seen - previous_ids)
            if added:
                await self._request(
                    "DELETE", TRADES_TABLE, params={"id": f"in.({','.join(added)})"}
                )
            if previous:
                await self._request(
                    "POST",
                    TRADES_TABLE,
                    json_body=[trade_to_dict(t, style="row") for t in previous],
                    prefer="resolution=merge-duplicates",
                )
            raise

        logger.info(f"Replaced trades of user {user_id} with {len(trades)}")
        return trades

    async def delete_trade(self, trade_id: str) -> None:
        await self._request("DELETE", TRADES_TABLE, params={"id": f"eq.{trade_id}"})

    async def delete_trades_for_user(self, user_id: str) -> int:
        rows = await self._request(
            "DELETE",
            TRADES_TABLE,
            params={"user_id": f"eq.{user_id}"},
            prefer="return=representation",
        )
        return len(rows or [])

    async def fetch_profile(self, user_id: str) -> User | None:
        rows = await self._request(
            "GET", PROFILES_TABLE, params={"select": "*", "id": f"eq.{user_id}"}
        )
        if not rows:
            return None
        return user_from_dict(rows[0], style="row")

    async def upsert_profile(self, user: User) -> None:
        await self._request(
            "POST",
            PROFILES_TABLE,
            json_body=user_to_dict(user, style="row"),
            prefer="resolution=merge-duplicates",
        )

    async def delete_profile(self, user_id: str) -> None:
        await self._request("DELETE", PROFILES_TABLE, params={"id": f"eq.{user_id}"})

    async def fetch_all_profiles(self) -> list[User]:
        rows = await self._request("GET", PROFILES_TABLE, params={"select": "*"})
        return [user_from_dict(row, style="row") for row in rows or []]

    async def create_invitation(self, invitation: Invitation) -> None:
        await self._request("POST", INVITATIONS_TABLE, json_body=[invitation_to_dict(invitation)])

    async def find_invitation(self, email: str) -> Invitation | None:
        rows = await self._request(
            "GET",
            INVITATIONS_TABLE,
            params={"select": "*", "email": f"eq.{email.strip().lower()}"},
        )
        if not rows:
            return None
        return invitation_from_dict(rows[-1])

    async def delete_invitations_by_email(self, email: str) -> None:
        await self._request(
            "DELETE", INVITATIONS_TABLE, params={"email": f"eq.{email.strip().lower()}"}
        )
