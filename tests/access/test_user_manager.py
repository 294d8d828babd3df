# tests/access/test_user_manager.py
"""Tests for UserManager."""
from pathlib import Path
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio

from src.access.passwords import verify_password
from src.access.user_manager import UserManager
from src.journal.models import Direction, Role, Trade, User
from src.models.errors import (
    AuthenticationError,
    AuthorizationError,
    StorageError,
    UserValidationError,
)
from src.storage.local_cache import LocalCache
from src.storage.local_repository import LocalRepository


def make_trade(trade_id: str, user_id: str) -> Trade:
    return Trade(
        id=trade_id,
        user_id=user_id,
        symbol="AAPL",
        direction=Direction.LONG,
        entry_time=None,
        exit_time=None,
        pnl_amount=1.0,
    )


@pytest.fixture
def repository(tmp_path: Path) -> LocalRepository:
    return LocalRepository(tmp_path / "journal")


@pytest.fixture
def cache(tmp_path: Path) -> LocalCache:
    return LocalCache(tmp_path / "journal")


@pytest.fixture
def manager(repository: LocalRepository, cache: LocalCache) -> UserManager:
    return UserManager(repository, cache)


@pytest_asyncio.fixture
async def admin(manager: UserManager) -> User:
    return await manager.bootstrap_admin("root", "rootpw")


class TestBootstrap:
    """Tests for bootstrap_admin."""

    @pytest.mark.asyncio
    async def test_creates_first_admin(self, manager: UserManager):
        admin = await manager.bootstrap_admin("root", "rootpw")

        assert admin.role == Role.ADMIN
        assert verify_password("rootpw", admin.password_hash)
        assert [u.username for u in await manager.list_users()] == ["root"]

    @pytest.mark.asyncio
    async def test_skipped_when_accounts_exist(self, manager: UserManager):
        await manager.bootstrap_admin("root", "rootpw")

        assert await manager.bootstrap_admin("other", "pw") is None
        assert len(await manager.list_users()) == 1

    @pytest.mark.asyncio
    async def test_skipped_without_credentials(self, manager: UserManager):
        assert await manager.bootstrap_admin("", "") is None
        assert await manager.list_users() == []


class TestAddUser:
    """Tests for add_user."""

    @pytest.mark.asyncio
    async def test_admin_adds_user(self, manager: UserManager, admin: User):
        user = await manager.add_user(admin, "alice", "pw")

        assert user.role == Role.USER
        assert user.is_active is True
        assert user.created_at is not None

    @pytest.mark.asyncio
    async def test_duplicate_username_rejected(self, manager: UserManager, admin: User):
        await manager.add_user(admin, "alice", "pw")

        with pytest.raises(UserValidationError):
            await manager.add_user(admin, "ALICE", "pw2")

    @pytest.mark.asyncio
    async def test_blank_fields_rejected(self, manager: UserManager, admin: User):
        with pytest.raises(UserValidationError):
            await manager.add_user(admin, "  ", "pw")

    @pytest.mark.asyncio
    async def test_non_admin_rejected(self, manager: UserManager, admin: User):
        alice = await manager.add_user(admin, "alice", "pw")

        with pytest.raises(AuthorizationError):
            await manager.add_user(alice, "bob", "pw")


class TestDeleteUser:
    """Tests for delete_user and cascade recovery."""

    @pytest.mark.asyncio
    async def test_cascade_removes_trades(
        self, manager: UserManager, repository: LocalRepository, admin: User
    ):
        """Deleting a user should delete exactly their trades."""
        alice = await manager.add_user(admin, "alice", "pw")
        bob = await manager.add_user(admin, "bob", "pw")
        await repository.upsert_trade(make_trade("a1", alice.id))
        await repository.upsert_trade(make_trade("a2", alice.id))
        await repository.upsert_trade(make_trade("b1", bob.id))

        removed = await manager.delete_user(admin, alice.id)

        assert removed == 2
        assert await repository.fetch_profile(alice.id) is None
        assert [t.id for t in await repository.fetch_all_trades()] == ["b1"]

    @pytest.mark.asyncio
    async def test_admin_cannot_delete_self(self, manager: UserManager, admin: User):
        with pytest.raises(AuthorizationError):
            await manager.delete_user(admin, admin.id)

        assert len(await manager.list_users()) == 1

    @pytest.mark.asyncio
    async def test_unknown_target_rejected(self, manager: UserManager, admin: User):
        with pytest.raises(UserValidationError):
            await manager.delete_user(admin, "missing")

    @pytest.mark.asyncio
    async def test_interrupted_delete_resumes(
        self,
        manager: UserManager,
        repository: LocalRepository,
        cache: LocalCache,
        admin: User,
    ):
        """A failed profile delete should stay pending and finish on resume."""
        alice = await manager.add_user(admin, "alice", "pw")
        await repository.upsert_trade(make_trade("a1", alice.id))

        original = repository.delete_profile
        repository.delete_profile = AsyncMock(side_effect=StorageError("offline"))
        with pytest.raises(StorageError):
            await manager.delete_user(admin, alice.id)

        assert (await cache.load()).pending_cascades == [alice.id]
        assert await repository.fetch_all_trades() == []
        assert await repository.fetch_profile(alice.id) is not None

        repository.delete_profile = original
        completed = await manager.resume_pending_cascades()

        assert completed == [alice.id]
        assert await repository.fetch_profile(alice.id) is None
        assert (await cache.load()).pending_cascades == []


class TestAccountEdits:
    """Tests for set_active, change_role, reset_password and update_balance."""

    @pytest.mark.asyncio
    async def test_disable_and_enable(self, manager: UserManager, admin: User):
        alice = await manager.add_user(admin, "alice", "pw")

        disabled = await manager.set_active(admin, alice.id, False)

        assert disabled.is_active is False
        with pytest.raises(AuthorizationError):
            await manager.set_active(admin, admin.id, False)

    @pytest.mark.asyncio
    async def test_change_role(self, manager: UserManager, admin: User):
        alice = await manager.add_user(admin, "alice", "pw")

        promoted = await manager.change_role(admin, alice.id, Role.ADMIN)

        assert promoted.role == Role.ADMIN

    @pytest.mark.asyncio
    async def test_reset_password(self, manager: UserManager, admin: User):
        alice = await manager.add_user(admin, "alice", "pw")

        updated = await manager.reset_password(admin, alice.id, "new-pw")

        assert verify_password("new-pw", updated.password_hash)
        with pytest.raises(UserValidationError):
            await manager.reset_password(admin, alice.id, "")

    @pytest.mark.asyncio
    async def test_update_balance(self, manager: UserManager, admin: User):
        alice = await manager.add_user(admin, "alice", "pw")

        updated = await manager.update_balance(alice, 2500.0, True)

        assert updated.initial_balance == 2500.0
        assert updated.use_initial_balance is True
        with pytest.raises(UserValidationError):
            await manager.update_balance(alice, -1.0, True)


class TestInvitations:
    """Tests for invite and register."""

    @pytest.mark.asyncio
    async def test_register_redeems_invitation(
        self, manager: UserManager, repository: LocalRepository, admin: User
    ):
        await manager.invite(admin, "Carol@Example.com", "welcome", Role.USER)

        user = await manager.register("carol@example.com", "welcome")

        assert user.username == "carol@example.com"
        assert verify_password("welcome", user.password_hash)
        assert await repository.find_invitation("carol@example.com") is None

    @pytest.mark.asyncio
    async def test_register_without_invitation(self, manager: UserManager):
        with pytest.raises(UserValidationError):
            await manager.register("nobody@example.com", "pw")

    @pytest.mark.asyncio
    async def test_register_wrong_password(self, manager: UserManager, admin: User):
        await manager.invite(admin, "dave@example.com", "right")

        with pytest.raises(AuthenticationError):
            await manager.register("dave@example.com", "wrong")

    @pytest.mark.asyncio
    async def test_invite_requires_admin(self, manager: UserManager, admin: User):
        alice = await manager.add_user(admin, "alice", "pw")

        with pytest.raises(AuthorizationError):
            await manager.invite(alice, "x@example.com", "pw")
