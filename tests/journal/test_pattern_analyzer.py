# tests/journal/test_pattern_analyzer.py
"""Tests for PatternAnalyzer."""
from datetime import datetime, timedelta, timezone

import pytest

from src.journal.models import Direction, Role, Trade, User
from src.journal.pattern_analyzer import PatternAnalyzer


def make_trade(
    trade_id: str,
    pnl: float,
    hour: int = 10,
    emotions: tuple[str, ...] = (),
    day: int = 15,
    rating: int = 5,
    user_id: str = "u1",
) -> Trade:
    """Create a trade entered at the given UTC hour."""
    return Trade(
        id=trade_id,
        user_id=user_id,
        symbol="BTC/USDT",
        direction=Direction.LONG,
        entry_time=datetime(2026, 3, day, hour, 15, tzinfo=timezone.utc),
        exit_time=datetime(2026, 3, day, hour, 45, tzinfo=timezone.utc),
        emotions=emotions,
        execution_rating=rating,
        pnl_amount=pnl,
    )


def make_user(user_id: str, username: str) -> User:
    return User(id=user_id, username=username, password_hash="x", role=Role.USER)


@pytest.fixture
def analyzer() -> PatternAnalyzer:
    return PatternAnalyzer(tz=timezone.utc)


class TestHourlyWinRate:
    """Tests for hourly_win_rate."""

    def test_empty_gives_24_zero_buckets(self, analyzer: PatternAnalyzer) -> None:
        """hourly_win_rate([]) should return 24 empty buckets."""
        buckets = analyzer.hourly_win_rate([])

        assert len(buckets) == 24
        assert all(b.count == 0 and b.win_rate == 0.0 for b in buckets)
        assert [b.hour for b in buckets] == list(range(24))
        assert buckets[0].label == "00:00"
        assert buckets[23].label == "23:00"

    def test_groups_by_entry_hour(self, analyzer: PatternAnalyzer) -> None:
        """Trades should land in the bucket of their entry hour."""
        trades = [
            make_trade("t1", 10.0, hour=9),
            make_trade("t2", -5.0, hour=9),
            make_trade("t3", 20.0, hour=14),
        ]

        buckets = analyzer.hourly_win_rate(trades)

        assert buckets[9].count == 2
        assert buckets[9].win_rate == pytest.approx(50.0)
        assert buckets[9].total_pnl == pytest.approx(5.0)
        assert buckets[14].win_rate == pytest.approx(100.0)
        assert sum(b.count for b in buckets) == 3

    def test_skips_trades_without_entry(self, analyzer: PatternAnalyzer) -> None:
        """Undated trades should not be counted."""
        trade = make_trade("t1", 10.0)
        trade.entry_time = None

        buckets = analyzer.hourly_win_rate([trade])

        assert sum(b.count for b in buckets) == 0

    def test_edge_of_calendar_entry_does_not_raise(self) -> None:
        """A year-1 entry seen from a western zone is bucketed, not an error."""
        analyzer = PatternAnalyzer(tz=timezone(timedelta(hours=-5)))
        trade = make_trade("t1", 10.0)
        trade.entry_time = datetime(1, 1, 1, 0, 30, tzinfo=timezone.utc)

        buckets = analyzer.hourly_win_rate([trade])

        assert sum(b.count for b in buckets) == 1


class TestEmotionPnl:
    """Tests for emotion_pnl."""

    def test_multi_tag_trades_count_toward_each_tag(self, analyzer: PatternAnalyzer) -> None:
        """A trade tagged 'calm greed' contributes to both buckets."""
        trades = [
            make_trade("t1", 10.0, emotions=("calm",)),
            make_trade("t2", -20.0, emotions=("calm", "greed")),
        ]

        buckets = {b.tag: b for b in analyzer.emotion_pnl(trades)}

        assert buckets["calm"].avg_pnl == pytest.approx(-5.0)
        assert buckets["calm"].count == 2
        assert buckets["greed"].avg_pnl == pytest.approx(-20.0)
        assert buckets["greed"].count == 1

    def test_sorted_by_average_descending(self, analyzer: PatternAnalyzer) -> None:
        """Buckets should be ordered best average first."""
        trades = [
            make_trade("t1", -50.0, emotions=("angry",)),
            make_trade("t2", 30.0, emotions=("calm",)),
            make_trade("t3", 5.0, emotions=("anxious",)),
        ]

        tags = [b.tag for b in analyzer.emotion_pnl(trades)]

        assert tags == ["calm", "anxious", "angry"]

    def test_untagged_trades_are_ignored(self, analyzer: PatternAnalyzer) -> None:
        """A trade with no tags should produce no bucket."""
        assert analyzer.emotion_pnl([make_trade("t1", 10.0)]) == []

    def test_duplicate_tags_counted_once(self, analyzer: PatternAnalyzer) -> None:
        """A repeated tag on one trade should count once."""
        buckets = analyzer.emotion_pnl([make_trade("t1", 10.0, emotions=("calm", "calm"))])

        assert buckets[0].count == 1


class TestDailyCalendar:
    """Tests for daily_calendar."""

    def test_monday_first_padding(self, analyzer: PatternAnalyzer) -> None:
        """March 2026 starts on a Sunday, so six blank cells lead."""
        cells = analyzer.daily_calendar([], 2026, 3)

        assert [c.empty for c in cells[:7]] == [True] * 6 + [False]
        assert cells[6].day == 1
        assert len([c for c in cells if not c.empty]) == 31

    def test_sums_pnl_per_day(self, analyzer: PatternAnalyzer) -> None:
        """Each day should carry the P&L sum and count of its trades."""
        trades = [
            make_trade("t1", 10.0, day=15),
            make_trade("t2", -4.0, day=15),
            make_trade("t3", 7.0, day=16),
        ]

        cells = {c.day: c for c in analyzer.daily_calendar(trades, 2026, 3) if not c.empty}

        assert cells[15].pnl == pytest.approx(6.0)
        assert cells[15].count == 2
        assert cells[15].date_label == "2026-03-15"
        assert cells[16].count == 1
        assert cells[17].count == 0

    def test_ignores_other_months(self, analyzer: PatternAnalyzer) -> None:
        """Trades from another month should not appear."""
        cells = analyzer.daily_calendar([make_trade("t1", 10.0)], 2026, 4)

        assert sum(c.count for c in cells) == 0


class TestDisciplineAndUsers:
    """Tests for discipline_score and user_summaries."""

    def test_discipline_score(self, analyzer: PatternAnalyzer) -> None:
        """Mean rating 4 should score 80."""
        trades = [make_trade("t1", 1.0, rating=5), make_trade("t2", 1.0, rating=3)]

        assert analyzer.discipline_score(trades) == pytest.approx(80.0)
        assert analyzer.discipline_score([]) == 0.0

    def test_user_summaries(self, analyzer: PatternAnalyzer) -> None:
        """Each user should get their own count, P&L and win rate."""
        users = [make_user("a", "alice"), make_user("b", "bob")]
        trades = [
            make_trade("t1", 10.0, user_id="a"),
            make_trade("t2", -5.0, user_id="a"),
        ]

        summaries = {s.user.username: s for s in analyzer.user_summaries(users, trades)}

        assert summaries["alice"].trade_count == 2
        assert summaries["alice"].total_pnl == pytest.approx(5.0)
        assert summaries["alice"].win_rate == pytest.approx(50.0)
        assert summaries["bob"].trade_count == 0
        assert summaries["bob"].win_rate == 0.0
