# src/journal/filters.py
"""Scope and window filters applied before metrics run."""
from datetime import tzinfo

from src.journal.models import TimeWindow, Trade, User
from src.journal.timeutils import date_label, to_local


def scope_trades(trades: list[Trade], user: User) -> list[Trade]:
    """Trades visible to a user: all for admins, own trades otherwise."""
    if user.is_admin:
        return list(trades)
    return [t for t in trades if t.user_id == user.id]


def filter_by_window(
    trades: list[Trade],
    window: TimeWindow,
    year: int,
    month: int,
    tz: tzinfo | None = None,
) -> list[Trade]:
    """Keep trades entered in the selected calendar month.

    OVERALL passes every trade through. Trades without an entry time never
    fall inside a month.
    """
    if window == TimeWindow.OVERALL:
        return list(trades)

    selected = []
    for trade in trades:
        if trade.entry_time is None:
            continue
        local = to_local(trade.entry_time, tz)
        if local.year == year and local.month == month:
            selected.append(trade)
    return selected


def shift_month(year: int, month: int, offset: int) -> tuple[int, int]:
    """Move a (year, month) pair by offset months."""
    index = year * 12 + (month - 1) + offset
    return index // 12, index % 12 + 1


def search_trades(trades: list[Trade], query: str, tz: tzinfo | None = None) -> list[Trade]:
    """Case-insensitive substring search over symbol, setup and entry date.

    Results are ordered most recent entry first.
    """
    needle = query.strip().lower()
    if needle:
        matches = [
            t
            for t in trades
            if needle in t.symbol.lower()
            or needle in t.setup.lower()
            or needle in date_label(t.entry_time, tz)
        ]
    else:
        matches = list(trades)
    return latest_first(matches)


def latest_first(trades: list[Trade]) -> list[Trade]:
    """Order trades by entry time, newest first; undated trades last."""
    return sorted(
        trades,
        key=lambda t: t.entry_time.timestamp() if t.entry_time else float("-inf"),
        reverse=True,
    )
