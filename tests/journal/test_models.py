# tests/journal/test_models.py
"""Tests for journal models."""
import pytest

from src.journal.models import (
    CalendarDay,
    Direction,
    ErrorCategory,
    HourlyBucket,
    Role,
    Trade,
    User,
)


class TestDirection:
    """Tests for Direction.parse."""

    @pytest.mark.parametrize(
        "value, expected",
        [
            ("long", Direction.LONG),
            ("SHORT", Direction.SHORT),
            ("多 (Long)", Direction.LONG),
            ("空", Direction.SHORT),
            ("sideways", Direction.LONG),
            (None, Direction.LONG),
            (Direction.SHORT, Direction.SHORT),
        ],
    )
    def test_parse(self, value, expected: Direction) -> None:
        """Direction.parse should accept legacy labels and default to LONG."""
        assert Direction.parse(value) == expected


class TestErrorCategory:
    """Tests for ErrorCategory.parse."""

    @pytest.mark.parametrize(
        "value, expected",
        [
            ("fomo", ErrorCategory.FOMO),
            ("FOMO (怕錯過)", ErrorCategory.FOMO),
            ("報復性交易", ErrorCategory.REVENGE_TRADING),
            ("no_stop_loss", ErrorCategory.NO_STOP_LOSS),
            ("bad luck", ErrorCategory.NONE),
            ("", ErrorCategory.NONE),
        ],
    )
    def test_parse(self, value, expected: ErrorCategory) -> None:
        """Unknown categories should map to NONE."""
        assert ErrorCategory.parse(value) == expected


class TestTrade:
    """Tests for the Trade dataclass."""

    def make_trade(self, pnl: float) -> Trade:
        return Trade(
            id="t1",
            user_id="u1",
            symbol="AAPL",
            direction=Direction.LONG,
            entry_time=None,
            exit_time=None,
            pnl_amount=pnl,
        )

    def test_win_and_loss_flags(self) -> None:
        """A zero P&L trade is neither a win nor a loss."""
        assert self.make_trade(1.0).is_win is True
        assert self.make_trade(-1.0).is_loss is True
        breakeven = self.make_trade(0.0)
        assert breakeven.is_win is False
        assert breakeven.is_loss is False

    def test_defaults(self) -> None:
        trade = self.make_trade(0.0)

        assert trade.setup == "Unknown"
        assert trade.emotions == ()
        assert trade.error_category == ErrorCategory.NONE
        assert trade.screenshots == []


class TestUserAndBuckets:
    """Tests for User, HourlyBucket and CalendarDay helpers."""

    def test_role_and_admin_flag(self) -> None:
        assert User(id="1", username="root", password_hash="x", role=Role.ADMIN).is_admin
        assert not User(id="2", username="bob", password_hash="x").is_admin
        assert Role.parse("Admin") == Role.ADMIN
        assert Role.parse("guest") == Role.USER

    def test_hour_label(self) -> None:
        bucket = HourlyBucket(hour=7, count=0, wins=0, win_rate=0.0, total_pnl=0.0)

        assert bucket.label == "07:00"

    def test_calendar_padding(self) -> None:
        assert CalendarDay(day=None).empty
        assert not CalendarDay(day=3, date_label="2026-01-03").empty
