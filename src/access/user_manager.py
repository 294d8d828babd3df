# src/access/user_manager.py
"""Account management with role checks and cascade delete."""
import logging
import uuid
from datetime import datetime, timezone

from src.access.auth import find_user
from src.access.gate import AccessGate
from src.access.passwords import hash_password, verify_password
from src.journal.models import Invitation, Role, User
from src.models.errors import AuthenticationError, UserValidationError
from src.storage.base import JournalRepository
from src.storage.local_cache import LocalCache

logger = logging.getLogger(__name__)


class UserManager:
    """Creates, edits and deletes accounts through the repository.

    Deleting a user removes their trades too. The delete is recorded as a
    pending intent in the local cache before anything is removed and
    cleared only once both steps succeed, so an interrupted delete can be
    finished later with resume_pending_cascades().
    """

    def __init__(
        self,
        repository: JournalRepository,
        cache: LocalCache,
        gate: AccessGate | None = None,
    ) -> None:
        self._repository = repository
        self._cache = cache
        self._gate = gate or AccessGate()

    async def list_users(self) -> list[User]:
        return await self._repository.fetch_all_profiles()

    async def bootstrap_admin(self, username: str, password: str) -> User | None:
        """Create the first administrator when no account exists yet."""
        if not username or not password:
            return None
        if await self._repository.fetch_all_profiles():
            return None

        admin = self._new_user(username, password, Role.ADMIN)
        await self._repository.upsert_profile(admin)
        logger.info(f"Created initial administrator {admin.username}")
        return admin

    async def add_user(
        self,
        actor: User | None,
        username: str,
        password: str,
        role: Role = Role.USER,
    ) -> User:
        """Create an account (admin only).

        Raises:
            AuthorizationError: Actor is not an administrator.
            UserValidationError: Blank fields or the username is taken.
        """
        self._gate.ensure_admin(actor)
        username = username.strip()
        if not username or not password:
            raise UserValidationError("Username and password are required")

        users = await self._repository.fetch_all_profiles()
        if find_user(users, username) is not None:
            raise UserValidationError(f"Username {username} already exists")

        user = self._new_user(username, password, role)
        await self._repository.upsert_profile(user)
        logger.info(f"{actor.username} created account {user.username} ({role.value})")
        return user

    async def delete_user(self, actor: User | None, target_id: str) -> int:
        """Delete an account and every trade it owns.

        Returns:
            Number of trades removed.

        Raises:
            AuthorizationError: Not an admin, or the target is the actor.
            StorageError: A step failed; the intent stays pending.
        """
        self._gate.ensure_can_manage(actor, target_id, "delete")
        await self._get_user(target_id)

        prefs = await self._cache.load()
        if target_id not in prefs.pending_cascades:
            prefs.pending_cascades.append(target_id)
            await self._cache.save(prefs)

        removed = await self._cascade(target_id)
        logger.info(f"{actor.username} deleted account {target_id} and {removed} trades")
        return removed

    async def resume_pending_cascades(self) -> list[str]:
        """Finish deletes that were interrupted; returns the ids completed."""
        prefs = await self._cache.load()
        completed = []
        for user_id in list(prefs.pending_cascades):
            await self._cascade(user_id)
            completed.append(user_id)
        if completed:
            logger.info(f"Completed {len(completed)} pending account deletions")
        return completed

    async def _cascade(self, user_id: str) -> int:
        # Trades go first: a failure in between leaves the account, never orphans.
        removed = await self._repository.delete_trades_for_user(user_id)
        await self._repository.delete_profile(user_id)

        prefs = await self._cache.load()
        prefs.pending_cascades = [i for i in prefs.pending_cascades if i != user_id]
        await self._cache.save(prefs)
        return removed

    async def set_active(self, actor: User | None, target_id: str, active: bool) -> User:
        """Enable or disable an account other than the actor's own."""
        self._gate.ensure_can_manage(actor, target_id, "disable")
        user = await self._get_user(target_id)
        user.is_active = active
        await self._repository.upsert_profile(user)
        logger.info(f"{actor.username} set {user.username} active={active}")
        return user

    async def change_role(self, actor: User | None, target_id: str, role: Role) -> User:
        self._gate.ensure_can_manage(actor, target_id, "change the role of")
        user = await self._get_user(target_id)
        user.role = role
        await self._repository.upsert_profile(user)
        return user

    async def reset_password(self, actor: User | None, target_id: str, new_password: str) -> User:
        self._gate.ensure_admin(actor)
        if not new_password:
            raise UserValidationError("Password cannot be empty")
        user = await self._get_user(target_id)
        user.password_hash = hash_password(new_password)
        await self._repository.upsert_profile(user)
        logger.info(f"{actor.username} reset the password of {user.username}")
        return user

    async def update_balance(
        self, actor: User, initial_balance: float, use_initial_balance: bool
    ) -> User:
        """Self-service equity baseline settings."""
        if initial_balance < 0:
            raise UserValidationError("Initial balance cannot be negative")
        user = await self._get_user(actor.id)
        user.initial_balance = initial_balance
        user.use_initial_balance = use_initial_balance
        await self._repository.upsert_profile(user)
        return user

    async def invite(
        self, actor: User | None, email: str, password: str, role: Role = Role.USER
    ) -> Invitation:
        """Record an invitation that register() can later redeem."""
        self._gate.ensure_admin(actor)
        email = email.strip().lower()
        if not email or not password:
            raise UserValidationError("Email and password are required")

        invitation = Invitation(email=email, password_hash=hash_password(password), role=role)
        await self._repository.create_invitation(invitation)
        return invitation

    async def register(self, email: str, password: str) -> User:
        """Redeem an invitation and create the account it describes.

        Raises:
            UserValidationError: No invitation exists or the account exists.
            AuthenticationError: The password does not match the invitation.
        """
        email = email.strip().lower()
        invitation = await self._repository.find_invitation(email)
        if invitation is None:
            raise UserValidationError("No invitation found for this email")
        if not verify_password(password, invitation.password_hash):
            raise AuthenticationError("Incorrect username or password")

        users = await self._repository.fetch_all_profiles()
        if find_user(users, email) is not None:
            raise UserValidationError(f"Username {email} already exists")

        user = self._new_user(email, password, invitation.role)
        user.password_hash = invitation.password_hash
        await self._repository.upsert_profile(user)
        await self._repository.delete_invitations_by_email(email)
        logger.info(f"Registered invited account {email} ({invitation.role.value})")
        return user

    async def _get_user(self, user_id: str) -> User:
        user = await self._repository.fetch_profile(user_id)
        if user is None:
            raise UserValidationError(f"Unknown account {user_id}")
        return user

    @staticmethod
    def _new_user(username: str, password: str, role: Role) -> User:
        return User(
            id=str(uuid.uuid4()),
            username=username.strip(),
            password_hash=hash_password(password),
            role=role,
            is_active=True,
            created_at=datetime.now(timezone.utc),
        )
