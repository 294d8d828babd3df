# src/journal/pattern_analyzer.py
"""Analyzer for time-of-day, emotion and calendar patterns."""
import calendar
from collections import defaultdict
from datetime import date, tzinfo

from src.journal.models import (
    CalendarDay,
    EmotionBucket,
    HourlyBucket,
    Trade,
    User,
    UserSummary,
)
from src.journal.timeutils import date_label, to_local


class PatternAnalyzer:
    """Analyzes behavioral patterns in a list of trades.

    Args:
        tz: Display timezone for hour-of-day and calendar grouping.
            None uses the system local timezone.
    """

    def __init__(self, tz: tzinfo | None = None) -> None:
        self._tz = tz

    def hourly_win_rate(self, trades: list[Trade]) -> list[HourlyBucket]:
        """Group trades by entry hour.

        Always returns 24 buckets in hour order so chart axes stay stable.
        Trades without an entry time are left out.
        """
        counts = [0] * 24
        wins = [0] * 24
        pnl = [0.0] * 24

        for trade in trades:
            if trade.entry_time is None:
                continue
            hour = to_local(trade.entry_time, self._tz).hour
            counts[hour] += 1
            pnl[hour] += trade.pnl_amount
            if trade.pnl_amount > 0:
                wins[hour] += 1

        return [
            HourlyBucket(
                hour=hour,
                count=counts[hour],
                wins=wins[hour],
                win_rate=wins[hour] / counts[hour] * 100 if counts[hour] else 0.0,
                total_pnl=pnl[hour],
            )
            for hour in range(24)
        ]

    def emotion_pnl(self, trades: list[Trade]) -> list[EmotionBucket]:
        """Average P&L per emotion tag, best first.

        A trade carrying several tags counts toward each of them.
        """
        totals: dict[str, float] = defaultdict(float)
        counts: dict[str, int] = defaultdict(int)

        for trade in trades:
            for tag in dict.fromkeys(trade.emotions):
                totals[tag] += trade.pnl_amount
                counts[tag] += 1

        buckets = [
            EmotionBucket(
                tag=tag,
                avg_pnl=totals[tag] / counts[tag],
                count=counts[tag],
                total_pnl=totals[tag],
            )
            for tag in counts
        ]
        return sorted(buckets, key=lambda b: b.avg_pnl, reverse=True)

    def daily_calendar(self, trades: list[Trade], year: int, month: int) -> list[CalendarDay]:
        """Monday-first month grid of daily P&L.

        Leading cells before the 1st are padding with day=None.
        """
        first_weekday, days_in_month = calendar.monthrange(year, month)

        by_day: dict[str, list[Trade]] = defaultdict(list)
        for trade in trades:
            if trade.entry_time is not None:
                by_day[date_label(trade.entry_time, self._tz)].append(trade)

        cells = [CalendarDay(day=None) for _ in range(first_weekday)]
        for day in range(1, days_in_month + 1):
            label = date(year, month, day).isoformat()
            day_trades = by_day.get(label, [])
            cells.append(
                CalendarDay(
                    day=day,
                    date_label=label,
                    pnl=sum(t.pnl_amount for t in day_trades),
                    count=len(day_trades),
                )
            )
        return cells

    def discipline_score(self, trades: list[Trade]) -> float:
        """Mean execution rating scaled to 0-100."""
        if not trades:
            return 0.0
        return sum(t.execution_rating for t in trades) / len(trades) * 20

    def user_summaries(self, users: list[User], trades: list[Trade]) -> list[UserSummary]:
        """Per-account trade count, total P&L and win rate."""
        by_user: dict[str, list[Trade]] = defaultdict(list)
        for trade in trades:
            by_user[trade.user_id].append(trade)

        summaries = []
        for user in users:
            own = by_user.get(user.id, [])
            wins = sum(1 for t in own if t.pnl_amount > 0)
            summaries.append(
                UserSummary(
                    user=user,
                    trade_count=len(own),
                    total_pnl=sum(t.pnl_amount for t in own),
                    win_rate=wins / len(own) * 100 if own else 0.0,
                )
            )
        return summaries
