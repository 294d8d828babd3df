# src/journal/models.py
"""Data models for the trading journal."""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from src.journal.constants import (
    LEGACY_DIRECTION_LABELS,
    LEGACY_ERROR_LABELS,
    UNKNOWN_SETUP,
)


class Direction(str, Enum):
    """Trade direction enumeration."""

    LONG = "long"
    SHORT = "short"

    @classmethod
    def parse(cls, value: object) -> "Direction":
        """Read a direction from storage, accepting legacy labels.

        Unknown values fall back to LONG.
        """
        if isinstance(value, Direction):
            return value
        text = str(value or "").strip().lower()
        text = LEGACY_DIRECTION_LABELS.get(text, text)
        if "short" in text:
            return cls.SHORT
        return cls.LONG


class ErrorCategory(str, Enum):
    """Execution-mistake categories a trade can be filed under."""

    NONE = "none"
    MARKET_VOLATILITY = "market_volatility"
    OVER_TRADING = "over_trading"
    NO_STOP_LOSS = "no_stop_loss"
    FOMO = "fomo"
    EMOTIONAL_TRADING = "emotional_trading"
    REVENGE_TRADING = "revenge_trading"
    BREAKING_RULES = "breaking_rules"

    @classmethod
    def parse(cls, value: object) -> "ErrorCategory":
        """Read a category from storage; unknown values map to NONE."""
        if isinstance(value, ErrorCategory):
            return value
        text = str(value or "").strip()
        text = LEGACY_ERROR_LABELS.get(text.lower(), LEGACY_ERROR_LABELS.get(text, text.lower()))
        try:
            return cls(text)
        except ValueError:
            return cls.NONE


class Role(str, Enum):
    """Account roles."""

    ADMIN = "admin"
    USER = "user"

    @classmethod
    def parse(cls, value: object) -> "Role":
        if isinstance(value, Role):
            return value
        return cls.ADMIN if str(value or "").strip().lower() == "admin" else cls.USER


class TimeWindow(str, Enum):
    """Dashboard time window."""

    OVERALL = "overall"
    MONTHLY = "monthly"


@dataclass
class Screenshot:
    """A chart screenshot attached to a trade."""

    url: str
    description: str = ""


@dataclass
class Trade:
    """One closed position with its psychological metadata.

    pnl_amount, pnl_percentage, risk_reward_ratio and initial_risk are
    computed by the entry pipeline and never edited directly.
    """

    id: str
    user_id: str
    symbol: str
    direction: Direction

    # Timing
    entry_time: datetime | None
    exit_time: datetime | None

    # Market data
    entry_price: float = 0.0
    exit_price: float = 0.0
    size: float = 0.0
    fees: float = 0.0
    slippage: float = 0.0

    # Strategy
    setup: str = UNKNOWN_SETUP
    stop_loss: float | None = None
    take_profit: float | None = None
    initial_risk: float | None = None

    # Psychology
    confidence: int = 0
    emotions: tuple[str, ...] = ()
    pre_trade_mindset: str = ""
    notes_on_execution: str = ""
    summary: str = ""
    improvements: str = ""
    execution_rating: int = 0
    error_category: ErrorCategory = ErrorCategory.NONE

    # Computed
    pnl_amount: float = 0.0
    pnl_percentage: float = 0.0
    risk_reward_ratio: float | None = None

    screenshots: list[Screenshot] = field(default_factory=list)

    @property
    def is_win(self) -> bool:
        return self.pnl_amount > 0

    @property
    def is_loss(self) -> bool:
        return self.pnl_amount < 0


@dataclass
class User:
    """An account. Only a salted hash of the password is ever held."""

    id: str
    username: str
    password_hash: str
    role: Role = Role.USER
    is_active: bool = True
    created_at: datetime | None = None
    initial_balance: float = 0.0
    use_initial_balance: bool = False

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


@dataclass
class Invitation:
    """A pending account invitation."""

    email: str
    password_hash: str
    role: Role = Role.USER
    id: str | None = None


@dataclass
class TradingStats:
    """Aggregate statistics over a list of trades."""

    count: int
    winning_trades: int
    losing_trades: int

    total_pnl: float
    win_rate: float
    avg_win: float
    avg_loss: float
    profit_factor: float

    best_trade: Trade | None
    worst_trade: Trade | None

    long_count: int
    short_count: int
    long_pct: float
    short_pct: float

    avg_duration_minutes: float
    avg_win_duration_minutes: float
    avg_loss_duration_minutes: float


@dataclass
class EquityPoint:
    """A point on the equity curve."""

    label: str
    equity: float


@dataclass
class EquityCurve:
    """Cumulative balance over time."""

    points: list[EquityPoint]
    starting_balance: float
    total_pnl: float
    total_return_pct: float

    @property
    def values(self) -> list[float]:
        return [point.equity for point in self.points]


@dataclass
class HourlyBucket:
    """Performance of trades entered during one hour of the day."""

    hour: int
    count: int
    wins: int
    win_rate: float
    total_pnl: float

    @property
    def label(self) -> str:
        return f"{self.hour:02d}:00"


@dataclass
class EmotionBucket:
    """Average P&L of trades carrying an emotion tag."""

    tag: str
    avg_pnl: float
    count: int
    total_pnl: float


@dataclass
class CalendarDay:
    """One cell of the monthly P&L calendar. day is None for padding."""

    day: int | None
    date_label: str = ""
    pnl: float = 0.0
    count: int = 0

    @property
    def empty(self) -> bool:
        return self.day is None


@dataclass
class UserSummary:
    """Per-account figures for the user management view."""

    user: User
    trade_count: int
    total_pnl: float
    win_rate: float


@dataclass
class DashboardReport:
    """Everything the dashboard and mindset views render."""

    window: TimeWindow
    year: int
    month: int
    trades: list[Trade]
    stats: TradingStats
    equity: EquityCurve
    hourly: list[HourlyBucket]
    emotions: list[EmotionBucket]
    calendar: list[CalendarDay]
    discipline_score: float
