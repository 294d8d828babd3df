# src/access/gate.py
"""Role gate: which views a role sees and which account actions are allowed."""
from enum import Enum

from src.journal.models import Role, User
from src.models.errors import AuthorizationError


class View(str, Enum):
    """Navigable views of the application."""

    DASHBOARD = "dashboard"
    MINDSET = "mindset"
    LOGS = "logs"
    ADD_TRADE = "add_trade"
    SETTINGS = "settings"
    USER_MANAGEMENT = "user_management"


# Admins oversee accounts and do not log trades of their own.
_VIEWS_BY_ROLE: dict[Role, tuple[View, ...]] = {
    Role.USER: (
        View.DASHBOARD,
        View.MINDSET,
        View.LOGS,
        View.ADD_TRADE,
        View.SETTINGS,
    ),
    Role.ADMIN: (
        View.DASHBOARD,
        View.MINDSET,
        View.LOGS,
        View.SETTINGS,
        View.USER_MANAGEMENT,
    ),
}


def visible_views(role: Role) -> tuple[View, ...]:
    """Navigation entries for a role, in display order."""
    return _VIEWS_BY_ROLE[role]


def can_view(role: Role, view: View) -> bool:
    return view in _VIEWS_BY_ROLE[role]


class AccessGate:
    """Authorization checks for account-management actions."""

    def ensure_view(self, actor: User | None, view: View) -> None:
        if actor is None or not can_view(actor.role, view):
            raise AuthorizationError(f"Access to {view.value} is not permitted")

    def ensure_admin(self, actor: User | None) -> None:
        if actor is None or not actor.is_admin:
            raise AuthorizationError("Administrator role required")

    def ensure_not_self(self, actor: User, target_id: str, action: str) -> None:
        """Refuse actions that would lock the current session out."""
        if actor.id == target_id:
            raise AuthorizationError(f"You cannot {action} your own account")

    def ensure_can_manage(self, actor: User | None, target_id: str, action: str) -> None:
        """Admin-only action that must not target the acting account."""
        self.ensure_admin(actor)
        self.ensure_not_self(actor, target_id, action)
