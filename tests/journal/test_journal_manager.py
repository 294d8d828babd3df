# tests/journal/test_journal_manager.py
"""Tests for JournalManager."""
from datetime import datetime, timedelta, timezone

import pytest

from src.journal.journal_manager import JournalManager
from src.journal.models import Direction, Role, TimeWindow, Trade, User


def make_trade(
    trade_id: str,
    user_id: str,
    pnl: float,
    entry: datetime,
    rating: int = 5,
) -> Trade:
    """Create a one-hour trade for testing."""
    return Trade(
        id=trade_id,
        user_id=user_id,
        symbol="NVDA",
        direction=Direction.LONG,
        entry_time=entry,
        exit_time=entry + timedelta(hours=1),
        entry_price=140.0,
        exit_price=141.0,
        size=1.0,
        emotions=("calm",),
        execution_rating=rating,
        pnl_amount=pnl,
    )


@pytest.fixture
def manager() -> JournalManager:
    return JournalManager(tz=timezone.utc)


@pytest.fixture
def trades() -> list[Trade]:
    return [
        make_trade("a-jan", "alice", 100.0, datetime(2026, 1, 10, 9, tzinfo=timezone.utc)),
        make_trade("a-feb", "alice", -40.0, datetime(2026, 2, 3, 15, tzinfo=timezone.utc)),
        make_trade("b-jan", "bob", 70.0, datetime(2026, 1, 12, 9, tzinfo=timezone.utc), rating=1),
    ]


class TestVisibleTrades:
    """Tests for JournalManager.visible_trades."""

    def test_user_scope_then_window(self, manager: JournalManager, trades: list[Trade]) -> None:
        """A user should only see their own trades in the chosen month."""
        alice = User(id="alice", username="alice", password_hash="x")

        visible = manager.visible_trades(trades, alice, TimeWindow.MONTHLY, 2026, 1)

        assert [t.id for t in visible] == ["a-jan"]

    def test_admin_overall_sees_everything(self, manager: JournalManager, trades: list[Trade]) -> None:
        admin = User(id="root", username="root", password_hash="x", role=Role.ADMIN)

        visible = manager.visible_trades(trades, admin, TimeWindow.OVERALL, 2026, 1)

        assert len(visible) == 3


class TestBuildReport:
    """Tests for JournalManager.build_report."""

    def test_report_uses_user_baseline(self, manager: JournalManager, trades: list[Trade]) -> None:
        """The equity curve should start at the user's initial balance."""
        alice = User(
            id="alice",
            username="alice",
            password_hash="x",
            initial_balance=1000.0,
            use_initial_balance=True,
        )

        report = manager.build_report(trades, alice, TimeWindow.OVERALL, 2026, 1)

        assert report.stats.count == 2
        assert report.stats.total_pnl == pytest.approx(60.0)
        assert report.equity.values == [1000.0, 1100.0, 1060.0]
        assert report.equity.total_return_pct == pytest.approx(6.0)
        assert report.discipline_score == pytest.approx(100.0)

    def test_monthly_report_restricts_metrics(self, manager: JournalManager, trades: list[Trade]) -> None:
        admin = User(id="root", username="root", password_hash="x", role=Role.ADMIN)

        report = manager.build_report(trades, admin, TimeWindow.MONTHLY, 2026, 1)

        assert report.window == TimeWindow.MONTHLY
        assert {t.id for t in report.trades} == {"a-jan", "b-jan"}
        assert report.stats.total_pnl == pytest.approx(170.0)
        assert report.hourly[9].count == 2
        assert report.emotions[0].tag == "calm"
        assert report.discipline_score == pytest.approx(60.0)

    def test_calendar_follows_selected_month(self, manager: JournalManager, trades: list[Trade]) -> None:
        """The calendar shows the selected month even in the overall window."""
        alice = User(id="alice", username="alice", password_hash="x")

        report = manager.build_report(trades, alice, TimeWindow.OVERALL, 2026, 2)

        days = {c.day: c for c in report.calendar if not c.empty}
        assert days[3].pnl == pytest.approx(-40.0)
        assert sum(c.count for c in report.calendar) == 1

    def test_empty_journal(self, manager: JournalManager) -> None:
        user = User(id="u", username="u", password_hash="x")

        report = manager.build_report([], user, TimeWindow.MONTHLY, 2026, 1)

        assert report.stats.count == 0
        assert report.equity.values == [0.0]
        assert report.emotions == []
