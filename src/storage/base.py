# src/storage/base.py
"""Repository interface for trades, profiles and invitations."""

from abc import ABC, abstractmethod

from src.journal.models import Invitation, Trade, User


class JournalRepository(ABC):
    """Abstract persistence collaborator.

    Row-level scoping by user id is the implementation's concern; callers
    only ever pass the authenticated user's id.
    """

    def __init__(self, name: str):
        """Initialize the repository.

        Args:
            name: Identifier used in log messages.
        """
        self.name = name

    @abstractmethod
    async def fetch_trades_for_user(self, user_id: str) -> list[Trade]:
        """Trades owned by one user, most recent entry first."""

    @abstractmethod
    async def fetch_all_trades(self) -> list[Trade]:
        """Every trade, for administrators."""

    @abstractmethod
    async def fetch_trade(self, trade_id: str) -> Trade | None:
        """One trade by id, whoever owns it."""

    @abstractmethod
    async def upsert_trade(self, trade: Trade) -> Trade:
        """Insert or replace a trade; assigns an id when it has none.

        Raises:
            AuthorizationError: The id belongs to another user's trade.
        """

    @abstractmethod
    async def replace_trades_for_user(self, user_id: str, trades: list[Trade]) -> list[Trade]:
        """Swap a user's whole trade set for another one.

        Either every new trade is stored and the old ones are gone, or the
        stored set is left unchanged. Ids that belong to another user are
        replaced with fresh ones.
        """

    @abstractmethod
    async def delete_trade(self, trade_id: str) -> None:
        """Delete one trade."""

    @abstractmethod
    async def delete_trades_for_user(self, user_id: str) -> int:
        """Delete every trade owned by a user and return how many went."""

    @abstractmethod
    async def fetch_profile(self, user_id: str) -> User | None:
        """One profile, or None when it does not exist."""

    @abstractmethod
    async def upsert_profile(self, user: User) -> None:
        """Insert or replace a profile."""

    @abstractmethod
    async def delete_profile(self, user_id: str) -> None:
        """Delete a profile."""

    @abstractmethod
    async def fetch_all_profiles(self) -> list[User]:
        """Every profile."""

    @abstractmethod
    async def create_invitation(self, invitation: Invitation) -> None:
        """Store an invitation."""

    @abstractmethod
    async def find_invitation(self, email: str) -> Invitation | None:
        """Most recent invitation for an email address."""

    @abstractmethod
    async def delete_invitations_by_email(self, email: str) -> None:
        """Remove every invitation for an email address."""
