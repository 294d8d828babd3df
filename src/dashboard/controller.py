"""Named actions over the application state.

Every change to AppState goes through a JournalController method. Each
successful mutation is persisted before the method returns, and every
JournalError raised by a collaborator is turned into a Notice at the
boundary of the action that triggered it.
"""
import logging
from collections.abc import Awaitable
from datetime import tzinfo
from typing import TypeVar

from src.access.auth import authenticate
from src.access.gate import AccessGate, View, visible_views
from src.access.user_manager import UserManager
from src.backup.codec import BackupState, dumps_backup, export_state, import_state
from src.backup.gist_client import GistBackupClient
from src.backup.settings import GitHubConfig
from src.coach.trade_coach import TradeCoach
from src.dashboard.models import NoticeKind, NoticeLevel, classify_error
from src.dashboard.state import AppState
from src.journal.filters import scope_trades, search_trades
from src.journal.filters import shift_month as shift_month_pair
from src.journal.journal_manager import JournalManager
from src.journal.models import DashboardReport, Role, TimeWindow, Trade, User, UserSummary
from src.journal.settings import JournalSettings
from src.journal.trade_entry import TradeDraft, TradeEntryPipeline
from src.models.errors import (
    AuthorizationError,
    CoachKeyInvalidError,
    CoachKeyMissingError,
    JournalError,
    JournalValidationError,
)
from src.storage.base import JournalRepository
from src.storage.local_cache import LocalCache

logger = logging.getLogger(__name__)

T = TypeVar("T")

CONFIRM_IMPORT_MESSAGE = "Importing replaces all of your trades, setups and symbols"
CONFIRM_RESET_MESSAGE = "Resetting deletes all of your trades and options"


class JournalController:
    """Owns AppState and exposes the actions views may trigger."""

    def __init__(
        self,
        state: AppState,
        repository: JournalRepository,
        cache: LocalCache,
        coach: TradeCoach,
        gist_client: GistBackupClient,
        journal_settings: JournalSettings | None = None,
        github: GitHubConfig | None = None,
        tz: tzinfo | None = None,
        gate: AccessGate | None = None,
    ) -> None:
        self.state = state
        self.repository = repository
        self.cache = cache
        self.coach = coach
        self.gist_client = gist_client
        self.journal_settings = journal_settings or JournalSettings()
        self.github = github or GitHubConfig()
        self.tz = tz
        self.gate = gate or AccessGate()
        self.users = UserManager(repository, cache, self.gate)
        self.journal = JournalManager(tz)

    async def _guard(self, title: str, action: Awaitable[T]) -> T | None:
        """Await an action, turning JournalError into a notice."""
        try:
            return await action
        except JournalError as e:
            kind, level = classify_error(e)
            logger.warning(f"{title} failed: {e}")
            self.state.add_notice(
                kind, level, title, str(e), retryable=kind == NoticeKind.SERVICE
            )
            return None

    def _success(self, title: str, message: str) -> None:
        self.state.add_notice(NoticeKind.SUCCESS, NoticeLevel.INFO, title, message)

    def _require_user(self) -> User:
        user = self.state.session_user
        if user is None:
            raise AuthorizationError("Please log in first")
        return user

    async def _save_preferences(self) -> None:
        prefs = await self.cache.load()
        prefs.setups = list(self.state.setups)
        prefs.symbols = list(self.state.symbols)
        prefs.gist_id = self.state.gist_id
        await self.cache.save(prefs)

    async def _load_trades(self, user: User) -> list[Trade]:
        if user.is_admin:
            return await self.repository.fetch_all_trades()
        return await self.repository.fetch_trades_for_user(user.id)

    async def _refresh_users(self) -> None:
        self.state.users = await self.users.list_users()

    async def initialize(self, admin_username: str = "", admin_password: str = "") -> None:
        """Load cached options, finish interrupted deletes, seed the first admin."""

        async def run() -> None:
            prefs = await self.cache.load()
            self.state.setups = (
                prefs.setups if prefs.setups is not None
                else list(self.journal_settings.setup_options)
            )
            self.state.symbols = (
                prefs.symbols if prefs.symbols is not None
                else list(self.journal_settings.symbol_options)
            )
            self.state.gist_id = prefs.gist_id or self.github.gist_id or None
            self.state.window = self.journal_settings.default_window

            await self.users.resume_pending_cascades()
            await self.users.bootstrap_admin(admin_username, admin_password)

        await self._guard("Startup", run())

    async def _start_session(self, user: User) -> None:
        self.state.session_user = user
        self.state.trades = await self._load_trades(user)
        if user.is_admin:
            await self._refresh_users()
        else:
            self.state.users = [user]
        self.state.current_view = View.DASHBOARD
        self.state.log_filter = ""
        logger.info(f"{user.username} logged in ({len(self.state.trades)} trades)")

    async def login(self, username: str, password: str) -> bool:
        async def run() -> bool:
            users = await self.repository.fetch_all_profiles()
            user = authenticate(users, username, password)
            await self._start_session(user)
            return True

        return bool(await self._guard("Login", run()))

    async def register(self, email: str, password: str) -> bool:
        """Redeem an invitation and log into the new account."""

        async def run() -> bool:
            user = await self.users.register(email, password)
            await self._start_session(user)
            self._success("Welcome", f"Account {user.username} created")
            return True

        return bool(await self._guard("Registration", run()))

    def logout(self) -> None:
        if self.state.session_user is not None:
            logger.info(f"{self.state.session_user.username} logged out")
        self.state.session_user = None
        self.state.users = []
        self.state.trades = []
        self.state.log_filter = ""
        self.state.current_view = View.DASHBOARD
        self.state.coach.generation += 1
        self.state.coach.is_loading = False
        self.state.coach.result = None
        self.state.coach.error_kind = None

    def navigation(self) -> tuple[View, ...]:
        user = self.state.session_user
        return visible_views(user.role) if user else ()

    def navigate(self, view: View) -> bool:
        try:
            self.gate.ensure_view(self.state.session_user, view)
        except AuthorizationError as e:
            self.state.add_notice(NoticeKind.AUTHORIZATION, NoticeLevel.WARNING, "Navigation", str(e))
            return False
        self.state.current_view = view
        return True

    def set_window(self, window: TimeWindow) -> None:
        self.state.window = window

    def shift_month(self, offset: int) -> None:
        self.state.year, self.state.month = shift_month_pair(
            self.state.year, self.state.month, offset
        )

    def set_log_filter(self, query: str) -> None:
        self.state.log_filter = query

    def open_day(self, date_label: str) -> None:
        """Jump from a calendar cell to the trade log filtered on that day."""
        self.state.log_filter = date_label
        self.navigate(View.LOGS)

    def report(self) -> DashboardReport | None:
        user = self.state.session_user
        if user is None:
            return None
        return self.journal.build_report(
            self.state.trades, user, self.state.window, self.state.year, self.state.month
        )

    def visible_trades(self) -> list[Trade]:
        """Trades for the log view: user scope plus the free-text filter."""
        user = self.state.session_user
        if user is None:
            return []
        return search_trades(scope_trades(self.state.trades, user), self.state.log_filter, self.tz)

    def user_summaries(self) -> list[UserSummary]:
        user = self.state.session_user
        if user is None or not user.is_admin:
            return []
        return self.journal.patterns.user_summaries(self.state.users, self.state.trades)

    def find_trade(self, trade_id: str) -> Trade | None:
        user = self.state.session_user
        if user is None:
            return None
        return next((t for t in scope_trades(self.state.trades, user) if t.id == trade_id), None)

    async def save_trade(self, draft: TradeDraft) -> Trade | None:
        """Validate, persist and merge a new or edited trade."""

        async def run() -> Trade:
            user = self._require_user()
            self.gate.ensure_view(user, View.ADD_TRADE)
            if draft.id:
                existing = await self.repository.fetch_trade(draft.id)
                if existing is not None and existing.user_id != user.id:
                    raise AuthorizationError("You can only edit your own trades")

            pipeline = TradeEntryPipeline(self.state.setups)
            trade, updated = pipeline.submit(draft, user, self.state.trades)
            saved = await self.repository.upsert_trade(trade)
            self.state.trades = [saved if t is trade else t for t in updated]
            self._success("Trade saved", f"{saved.symbol} {saved.pnl_amount:+.2f}")
            return saved

        return await self._guard("Save trade", run())

    async def delete_trade(self, trade_id: str) -> bool:
        async def run() -> bool:
            user = self._require_user()
            trade = self.find_trade(trade_id)
            if trade is None:
                raise AuthorizationError("Trade not found or not yours")
            await self.repository.delete_trade(trade_id)
            self.state.trades = [t for t in self.state.trades if t.id != trade_id]
            logger.info(f"{user.username} deleted trade {trade_id}")
            return True

        return bool(await self._guard("Delete trade", run()))

    async def _add_option(self, options: list[str], value: str, label: str) -> bool:
        value = value.strip()
        if not value:
            raise JournalValidationError(f"{label} cannot be empty")
        if value in options:
            raise JournalValidationError(f"{label} {value} already exists")
        options.append(value)
        await self._save_preferences()
        return True

    async def _remove_option(self, options: list[str], value: str) -> bool:
        if value not in options:
            return False
        options.remove(value)
        await self._save_preferences()
        return True

    async def add_setup(self, name: str) -> bool:
        return bool(await self._guard("Add setup", self._add_option(self.state.setups, name, "Setup")))

    async def remove_setup(self, name: str) -> bool:
        return bool(await self._guard("Remove setup", self._remove_option(self.state.setups, name)))

    async def add_symbol(self, symbol: str) -> bool:
        return bool(
            await self._guard("Add symbol", self._add_option(self.state.symbols, symbol, "Symbol"))
        )

    async def remove_symbol(self, symbol: str) -> bool:
        return bool(
            await self._guard("Remove symbol", self._remove_option(self.state.symbols, symbol))
        )

    def _owned_trades(self, user: User) -> list[Trade]:
        return [t for t in self.state.trades if t.user_id == user.id]

    def export_backup(self) -> str | None:
        """JSON document with the session user's trades and options."""
        user = self.state.session_user
        if user is None:
            return None
        document = export_state(self._owned_trades(user), self.state.setups, self.state.symbols)
        return dumps_backup(document)

    async def _replace_with(self, user: User, backup: BackupState) -> int:
        """Destructive full replace of the user's trades and options."""
        pipeline = TradeEntryPipeline(backup.setups)
        imported = []
        for trade in backup.trades:
            trade = pipeline.recompute(trade)
            trade.user_id = user.id
            imported.append(trade)

        saved = await self.repository.replace_trades_for_user(user.id, imported)

        others = [t for t in self.state.trades if t.user_id != user.id]
        self.state.trades = saved + others
        self.state.setups = list(backup.setups)
        self.state.symbols = list(backup.symbols)
        await self._save_preferences()
        logger.info(f"Replaced trades of {user.username} with {len(saved)} from backup")
        return len(saved)

    async def import_backup(self, document: str | bytes | dict, confirmed: bool = False) -> int | None:
        """Replace the user's data with a backup file.

        Returns the number of trades imported, or None when refused.
        """

        async def run() -> int:
            user = self._require_user()
            if not confirmed:
                raise JournalValidationError(f"{CONFIRM_IMPORT_MESSAGE}, confirm to continue")
            backup = import_state(document, self.state.setups, self.state.symbols)
            count = await self._replace_with(user, backup)
            self._success("Import complete", f"{count} trades imported")
            return count

        return await self._guard("Import backup", run())

    async def reset_data(self, confirmed: bool = False) -> bool:
        async def run() -> bool:
            user = self._require_user()
            if not confirmed:
                raise JournalValidationError(f"{CONFIRM_RESET_MESSAGE}, confirm to continue")
            await self.repository.delete_trades_for_user(user.id)
            self.state.trades = [t for t in self.state.trades if t.user_id != user.id]
            self.state.setups = list(self.journal_settings.setup_options)
            self.state.symbols = list(self.journal_settings.symbol_options)
            await self._save_preferences()
            self._success("Reset complete", "Trades and options were reset")
            return True

        return bool(await self._guard("Reset data", run()))

    async def push_backup(self, token: str | None = None) -> str | None:
        """Upload a backup to a private gist; returns its id."""

        async def run() -> str:
            user = self._require_user()
            backup = BackupState(
                trades=self._owned_trades(user),
                setups=list(self.state.setups),
                symbols=list(self.state.symbols),
            )
            gist_id = await self.gist_client.push(
                token or self.github.token, self.state.gist_id, backup
            )
            self.state.gist_id = gist_id
            await self._save_preferences()
            self._success("Backup uploaded", f"Saved to gist {gist_id}")
            return gist_id

        return await self._guard("Push backup", run())

    async def pull_backup(
        self,
        token: str | None = None,
        gist_id: str | None = None,
        confirmed: bool = False,
    ) -> int | None:
        async def run() -> int:
            user = self._require_user()
            if not confirmed:
                raise JournalValidationError(f"{CONFIRM_IMPORT_MESSAGE}, confirm to continue")
            target = gist_id or self.state.gist_id or ""
            backup = await self.gist_client.pull(
                token or self.github.token, target, self.state.setups, self.state.symbols
            )
            self.state.gist_id = target
            count = await self._replace_with(user, backup)
            self._success("Backup restored", f"{count} trades restored from gist")
            return count

        return await self._guard("Pull backup", run())

    async def request_coach_analysis(self) -> str | None:
        """Ask the AI coach about the visible trades.

        A second request while one is running is refused. A reply that
        arrives after logout is dropped.
        """
        status = self.state.coach
        if status.is_loading:
            return None

        user = self.state.session_user
        if user is None:
            return None

        generation = status.generation
        status.is_loading = True
        status.error_kind = None
        trades = scope_trades(self.state.trades, user)
        try:
            result = await self.coach.analyze(trades)
        except (CoachKeyMissingError, CoachKeyInvalidError) as e:
            if status.generation == generation:
                status.error_kind = NoticeKind.CREDENTIAL
                self.state.add_notice(
                    NoticeKind.CREDENTIAL, NoticeLevel.ERROR, "AI coach", str(e)
                )
            return None
        except JournalError as e:
            if status.generation == generation:
                status.error_kind = NoticeKind.SERVICE
                self.state.add_notice(
                    NoticeKind.SERVICE, NoticeLevel.ERROR, "AI coach", str(e), retryable=True
                )
            return None
        finally:
            if status.generation == generation:
                status.is_loading = False

        if status.generation != generation:
            logger.info("Discarding coach reply for a closed session")
            return None
        status.result = result
        return result

    async def add_user(self, username: str, password: str, role: Role = Role.USER) -> User | None:
        async def run() -> User:
            user = await self.users.add_user(self.state.session_user, username, password, role)
            await self._refresh_users()
            self._success("User created", f"{user.username} ({role.value})")
            return user

        return await self._guard("Add user", run())

    async def invite_user(self, email: str, password: str, role: Role = Role.USER) -> bool:
        async def run() -> bool:
            invitation = await self.users.invite(self.state.session_user, email, password, role)
            self._success("Invitation created", f"{invitation.email} can now register")
            return True

        return bool(await self._guard("Invite user", run()))

    async def delete_user(self, target_id: str) -> bool:
        async def run() -> bool:
            removed = await self.users.delete_user(self.state.session_user, target_id)
            self.state.trades = [t for t in self.state.trades if t.user_id != target_id]
            await self._refresh_users()
            self._success("User deleted", f"{removed} trades removed with the account")
            return True

        return bool(await self._guard("Delete user", run()))

    async def set_user_active(self, target_id: str, active: bool) -> bool:
        async def run() -> bool:
            await self.users.set_active(self.state.session_user, target_id, active)
            await self._refresh_users()
            return True

        return bool(await self._guard("Update user", run()))

    async def reset_user_password(self, target_id: str, new_password: str) -> bool:
        async def run() -> bool:
            user = await self.users.reset_password(self.state.session_user, target_id, new_password)
            await self._refresh_users()
            self._success("Password reset", f"New password set for {user.username}")
            return True

        return bool(await self._guard("Reset password", run()))

    async def change_user_role(self, target_id: str, role: Role) -> bool:
        async def run() -> bool:
            await self.users.change_role(self.state.session_user, target_id, role)
            await self._refresh_users()
            return True

        return bool(await self._guard("Change role", run()))

    async def update_balance(self, initial_balance: float, use_initial_balance: bool) -> bool:
        async def run() -> bool:
            actor = self._require_user()
            user = await self.users.update_balance(actor, initial_balance, use_initial_balance)
            self.state.session_user = user
            self.state.users = [user if u.id == user.id else u for u in self.state.users]
            return True

        return bool(await self._guard("Update balance", run()))

