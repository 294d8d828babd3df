# src/journal/metrics_calculator.py
"""Calculator for trading performance metrics."""
import math
from datetime import tzinfo

from src.journal.models import (
    Direction,
    EquityCurve,
    EquityPoint,
    Trade,
    TradingStats,
)
from src.journal.timeutils import parse_timestamp, to_local

START_LABEL = "Start"


def duration_minutes(entry_time: object, exit_time: object) -> int:
    """Whole minutes between entry and exit.

    Inverted, missing or malformed timestamps count as zero duration.
    """
    start = parse_timestamp(entry_time)
    end = parse_timestamp(exit_time)
    if start is None or end is None:
        return 0

    seconds = (end - start).total_seconds()
    if not math.isfinite(seconds) or seconds <= 0:
        return 0
    return int(seconds // 60)


def format_duration(minutes: float) -> str:
    """Render a duration as "45m", "2h 5m" or "1d 3h"."""
    if not math.isfinite(minutes) or minutes <= 0:
        return "0m"

    total = int(minutes)
    hours, mins = divmod(total, 60)
    days, hours = divmod(hours, 24)
    if days > 0:
        return f"{days}d {hours}h"
    if hours > 0:
        return f"{hours}h {mins}m"
    return f"{mins}m"


def _percent(part: int, whole: int) -> float:
    return part / whole * 100 if whole > 0 else 0.0


def _mean(values: list[float]) -> float:
    return sum(values) / len(values) if values else 0.0


class MetricsCalculator:
    """Computes aggregate statistics and equity curves from trades.

    Every method recomputes from the list it is given and never mutates it.
    Empty input produces zeros rather than NaN.
    """

    def __init__(self, tz: tzinfo | None = None) -> None:
        self._tz = tz

    def aggregate(self, trades: list[Trade]) -> TradingStats:
        """Calculate summary statistics for a list of trades.

        Args:
            trades: Trades to analyze, usually already scoped and windowed.

        Returns:
            TradingStats with win rate and long/short split as percentages.
        """
        if not trades:
            return self._empty_stats()

        winners = [t for t in trades if t.pnl_amount > 0]
        losers = [t for t in trades if t.pnl_amount < 0]

        count = len(trades)
        gross_profit = sum(t.pnl_amount for t in winners)
        gross_loss = abs(sum(t.pnl_amount for t in losers))

        long_count = sum(1 for t in trades if t.direction == Direction.LONG)
        short_count = count - long_count

        durations = [duration_minutes(t.entry_time, t.exit_time) for t in trades]
        win_durations = [duration_minutes(t.entry_time, t.exit_time) for t in winners]
        loss_durations = [duration_minutes(t.entry_time, t.exit_time) for t in losers]

        return TradingStats(
            count=count,
            winning_trades=len(winners),
            losing_trades=len(losers),
            total_pnl=sum(t.pnl_amount for t in trades),
            win_rate=_percent(len(winners), count),
            avg_win=gross_profit / len(winners) if winners else 0.0,
            avg_loss=gross_loss / len(losers) if losers else 0.0,
            profit_factor=gross_profit / gross_loss if gross_loss > 0 else 0.0,
            best_trade=max(trades, key=lambda t: t.pnl_amount),
            worst_trade=min(trades, key=lambda t: t.pnl_amount),
            long_count=long_count,
            short_count=short_count,
            long_pct=_percent(long_count, count),
            short_pct=_percent(short_count, count),
            avg_duration_minutes=_mean(durations),
            avg_win_duration_minutes=_mean(win_durations),
            avg_loss_duration_minutes=_mean(loss_durations),
        )

    def _empty_stats(self) -> TradingStats:
        """Return stats with zero values for an empty trade list."""
        return TradingStats(
            count=0,
            winning_trades=0,
            losing_trades=0,
            total_pnl=0.0,
            win_rate=0.0,
            avg_win=0.0,
            avg_loss=0.0,
            profit_factor=0.0,
            best_trade=None,
            worst_trade=None,
            long_count=0,
            short_count=0,
            long_pct=0.0,
            short_pct=0.0,
            avg_duration_minutes=0.0,
            avg_win_duration_minutes=0.0,
            avg_loss_duration_minutes=0.0,
        )

    def equity_curve(
        self,
        trades: list[Trade],
        starting_balance: float = 0.0,
        use_baseline: bool = True,
    ) -> EquityCurve:
        """Fold trades, ordered by exit time, into a running balance.

        Args:
            trades: Trades to plot.
            starting_balance: Balance before the first trade.
            use_baseline: When False the curve starts at zero and the
                return percentage is reported as 0.

        Returns:
            EquityCurve whose first point is the synthetic "Start" point.
        """
        baseline = starting_balance if use_baseline else 0.0
        ordered = sorted(trades, key=self._exit_sort_key)

        points = [EquityPoint(label=START_LABEL, equity=baseline)]
        equity = baseline
        for trade in ordered:
            equity += trade.pnl_amount
            points.append(EquityPoint(label=self._point_label(trade), equity=equity))

        total_pnl = equity - baseline
        if use_baseline and starting_balance > 0:
            total_return_pct = total_pnl / starting_balance * 100
        else:
            total_return_pct = 0.0

        return EquityCurve(
            points=points,
            starting_balance=baseline,
            total_pnl=total_pnl,
            total_return_pct=total_return_pct,
        )

    @staticmethod
    def _exit_sort_key(trade: Trade) -> tuple[int, float]:
        # Trades without an exit time go last, in their original order.
        if trade.exit_time is None:
            return (1, 0.0)
        return (0, trade.exit_time.timestamp())

    def _point_label(self, trade: Trade) -> str:
        if trade.exit_time is None:
            return trade.symbol
        return to_local(trade.exit_time, self._tz).strftime("%m/%d %H:%M")

