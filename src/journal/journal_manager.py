# src/journal/journal_manager.py
"""Manager composing scope, window and metrics into a dashboard report."""
from datetime import tzinfo

from src.journal.filters import filter_by_window, scope_trades
from src.journal.metrics_calculator import MetricsCalculator
from src.journal.models import DashboardReport, TimeWindow, Trade, User
from src.journal.pattern_analyzer import PatternAnalyzer


class JournalManager:
    """Runs the read path: user scope, then time window, then every metric.

    Stateless; each report is recomputed from the full trade list.
    """

    def __init__(self, tz: tzinfo | None = None) -> None:
        self._tz = tz
        self._metrics_calculator = MetricsCalculator(tz)
        self._pattern_analyzer = PatternAnalyzer(tz)

    @property
    def metrics(self) -> MetricsCalculator:
        return self._metrics_calculator

    @property
    def patterns(self) -> PatternAnalyzer:
        return self._pattern_analyzer

    def visible_trades(
        self,
        trades: list[Trade],
        user: User,
        window: TimeWindow,
        year: int,
        month: int,
    ) -> list[Trade]:
        """Trades the user may see inside the selected window."""
        scoped = scope_trades(trades, user)
        return filter_by_window(scoped, window, year, month, self._tz)

    def build_report(
        self,
        trades: list[Trade],
        user: User,
        window: TimeWindow,
        year: int,
        month: int,
    ) -> DashboardReport:
        """Build every dashboard and mindset figure for one view state.

        Args:
            trades: The full persisted trade list.
            user: The session user; decides scope and equity baseline.
            window: OVERALL or MONTHLY.
            year: Selected calendar year (used by MONTHLY and the calendar).
            month: Selected calendar month, 1-12.

        Returns:
            DashboardReport for the trades in scope.
        """
        selected = self.visible_trades(trades, user, window, year, month)

        return DashboardReport(
            window=window,
            year=year,
            month=month,
            trades=selected,
            stats=self._metrics_calculator.aggregate(selected),
            equity=self._metrics_calculator.equity_curve(
                selected,
                starting_balance=user.initial_balance,
                use_baseline=user.use_initial_balance,
            ),
            hourly=self._pattern_analyzer.hourly_win_rate(selected),
            emotions=self._pattern_analyzer.emotion_pnl(selected),
            calendar=self._pattern_analyzer.daily_calendar(
                scope_trades(trades, user), year, month
            ),
            discipline_score=self._pattern_analyzer.discipline_score(selected),
        )
