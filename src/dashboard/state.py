"""Application state owned by the controller."""
from dataclasses import dataclass, field
from datetime import date, datetime

from src.access.gate import View
from src.dashboard.models import CoachStatus, Notice, NoticeKind, NoticeLevel
from src.journal.models import TimeWindow, Trade, User


def _this_year() -> int:
    return date.today().year


def _this_month() -> int:
    return date.today().month


@dataclass
class AppState:
    """Everything the views render.

    Views read it freely but change it only through JournalController
    actions.
    """

    session_user: User | None = None
    users: list[User] = field(default_factory=list)
    trades: list[Trade] = field(default_factory=list)
    setups: list[str] = field(default_factory=list)
    symbols: list[str] = field(default_factory=list)

    current_view: View = View.DASHBOARD
    window: TimeWindow = TimeWindow.MONTHLY
    year: int = field(default_factory=_this_year)
    month: int = field(default_factory=_this_month)
    log_filter: str = ""

    notices: list[Notice] = field(default_factory=list)
    max_notices: int = 50
    coach: CoachStatus = field(default_factory=CoachStatus)
    gist_id: str | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.session_user is not None

    @property
    def unread_count(self) -> int:
        """Count of unread notices."""
        return sum(1 for notice in self.notices if not notice.read)

    def add_notice(
        self,
        kind: NoticeKind,
        level: NoticeLevel,
        title: str,
        message: str,
        retryable: bool = False,
    ) -> Notice:
        """Add a new notice to history, most recent first."""
        notice = Notice(
            timestamp=datetime.now(),
            kind=kind,
            level=level,
            title=title,
            message=message,
            retryable=retryable,
        )
        self.notices.insert(0, notice)

        if len(self.notices) > self.max_notices:
            self.notices = self.notices[: self.max_notices]
        return notice

    def clear_notices(self) -> None:
        self.notices = []

    def mark_all_read(self) -> None:
        for notice in self.notices:
            notice.read = True
