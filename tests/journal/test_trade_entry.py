# tests/journal/test_trade_entry.py
"""Tests for the trade entry pipeline."""
from datetime import datetime, timezone

import pytest

from src.journal.models import Direction, ErrorCategory, Role, Screenshot, Trade, User
from src.journal.trade_entry import (
    TradeDraft,
    TradeEntryPipeline,
    compute_pnl,
    risk_reward_preview,
)
from src.models.errors import TradeValidationError


def make_user(user_id: str = "alice-id") -> User:
    return User(id=user_id, username="alice", password_hash="x", role=Role.USER)


def make_draft(**overrides) -> TradeDraft:
    """Create a valid long draft; overrides replace fields."""
    values = dict(
        symbol="BTC/USDT",
        direction=Direction.LONG,
        entry_time="2026-02-02T09:00:00+00:00",
        exit_time="2026-02-02T11:00:00+00:00",
        entry_price="100",
        exit_price="110",
        size="2",
        fees="1.5",
        slippage="0.5",
        setup="Breakout",
        emotions=["calm"],
    )
    values.update(overrides)
    return TradeDraft(**values)


@pytest.fixture
def pipeline() -> TradeEntryPipeline:
    return TradeEntryPipeline(setup_options=["Breakout", "Retest"])


class TestComputePnl:
    """Tests for compute_pnl."""

    def test_long_winner(self) -> None:
        """A long closed above entry should be positive."""
        amount, pct = compute_pnl(Direction.LONG, 100.0, 110.0, 2.0)

        assert amount == pytest.approx(20.0)
        assert pct == pytest.approx(10.0)

    def test_short_reverses_sign(self) -> None:
        """A short closed above entry should lose."""
        amount, pct = compute_pnl(Direction.SHORT, 100.0, 110.0, 2.0)

        assert amount == pytest.approx(-20.0)
        assert pct == pytest.approx(-10.0)

    def test_fees_and_slippage_are_subtracted(self) -> None:
        amount, _ = compute_pnl(Direction.LONG, 100.0, 110.0, 2.0, fees=1.5, slippage=0.5)

        assert amount == pytest.approx(18.0)

    def test_zero_entry_price_gives_zero_percentage(self) -> None:
        """pnl_percentage must be 0 rather than a division error."""
        amount, pct = compute_pnl(Direction.LONG, 0.0, 5.0, 1.0)

        assert amount == pytest.approx(5.0)
        assert pct == 0.0


class TestRiskRewardPreview:
    """Tests for risk_reward_preview."""

    def test_not_ready_without_stop(self) -> None:
        assert risk_reward_preview(100, None, 120, 1).ready is False
        assert risk_reward_preview(0, 95, 120, 1).ready is False

    def test_risk_and_ratio(self) -> None:
        """Risk is |entry-stop| times size; ratio is reward over risk."""
        preview = risk_reward_preview("100", "95", "115", "3")

        assert preview.ready is True
        assert preview.risk_amount == pytest.approx(15.0)
        assert preview.risk_reward == pytest.approx(3.0)

    def test_size_below_one_counts_as_one(self) -> None:
        preview = risk_reward_preview(100, 95, None, 0)

        assert preview.risk_amount == pytest.approx(5.0)
        assert preview.risk_reward is None

    def test_stop_equal_to_entry_has_no_ratio(self) -> None:
        preview = risk_reward_preview(100, 100, 120, 1)

        assert preview.ready is True
        assert preview.risk_reward is None


class TestBuild:
    """Tests for TradeEntryPipeline.build."""

    def test_computes_pnl_from_coerced_fields(self, pipeline: TradeEntryPipeline) -> None:
        """build should parse numeric strings and derive P&L."""
        trade = pipeline.build(make_draft(), make_user())

        assert trade.entry_price == 100.0
        assert trade.pnl_amount == pytest.approx(18.0)
        assert trade.pnl_percentage == pytest.approx(10.0)
        assert trade.entry_time == datetime(2026, 2, 2, 9, 0, tzinfo=timezone.utc)

    def test_unparseable_numbers_become_zero(self, pipeline: TradeEntryPipeline) -> None:
        trade = pipeline.build(make_draft(entry_price="abc", size=""), make_user())

        assert trade.entry_price == 0.0
        assert trade.size == 0.0
        assert trade.pnl_percentage == 0.0

    def test_owner_is_always_the_submitter(self, pipeline: TradeEntryPipeline) -> None:
        """A caller-supplied user_id must be overridden."""
        trade = pipeline.build(make_draft(user_id="mallory-id"), make_user("alice-id"))

        assert trade.user_id == "alice-id"

    def test_strips_empty_screenshots(self, pipeline: TradeEntryPipeline) -> None:
        """Screenshots with blank urls should be dropped."""
        draft = make_draft(
            screenshots=[
                {"url": "", "description": "x"},
                {"url": "http://a", "description": "y"},
                Screenshot(url="   ", description="z"),
            ]
        )

        trade = pipeline.build(draft, make_user())

        assert trade.screenshots == [Screenshot(url="http://a", description="y")]

    def test_blank_symbol_rejected(self, pipeline: TradeEntryPipeline) -> None:
        with pytest.raises(TradeValidationError):
            pipeline.build(make_draft(symbol="  "), make_user())

    def test_blank_setup_becomes_unknown(self, pipeline: TradeEntryPipeline) -> None:
        trade = pipeline.build(make_draft(setup=""), make_user())

        assert trade.setup == "Unknown"

    def test_unknown_setup_rejected(self, pipeline: TradeEntryPipeline) -> None:
        with pytest.raises(TradeValidationError):
            pipeline.build(make_draft(setup="Astrology"), make_user())

    def test_edit_may_keep_removed_setup(self, pipeline: TradeEntryPipeline) -> None:
        """An edited trade keeps a setup that was removed from the options."""
        previous = pipeline.build(make_draft(), make_user())
        previous.setup = "Old Setup"

        trade = pipeline.build(make_draft(id=previous.id, setup="Old Setup"), make_user(), previous)

        assert trade.setup == "Old Setup"

    def test_unknown_emotion_rejected(self, pipeline: TradeEntryPipeline) -> None:
        with pytest.raises(TradeValidationError):
            pipeline.build(make_draft(emotions="calm zen"), make_user())

    def test_emotions_deduplicated_in_order(self, pipeline: TradeEntryPipeline) -> None:
        trade = pipeline.build(make_draft(emotions="anxious calm anxious"), make_user())

        assert trade.emotions == ("anxious", "calm")

    def test_ratings_are_clamped(self, pipeline: TradeEntryPipeline) -> None:
        trade = pipeline.build(make_draft(confidence=42, execution_rating=0), make_user())

        assert trade.confidence == 10
        assert trade.execution_rating == 1

    def test_risk_fields_from_preview(self, pipeline: TradeEntryPipeline) -> None:
        trade = pipeline.build(make_draft(stop_loss="95", take_profit="115"), make_user())

        assert trade.initial_risk == pytest.approx(10.0)
        assert trade.risk_reward_ratio == pytest.approx(3.0)

    def test_risk_fields_empty_when_not_ready(self, pipeline: TradeEntryPipeline) -> None:
        trade = pipeline.build(make_draft(), make_user())

        assert trade.initial_risk is None
        assert trade.risk_reward_ratio is None

    def test_legacy_labels_accepted(self, pipeline: TradeEntryPipeline) -> None:
        trade = pipeline.build(
            make_draft(direction="空 (Short)", error_category="過度交易"), make_user()
        )

        assert trade.direction == Direction.SHORT
        assert trade.error_category == ErrorCategory.OVER_TRADING


class TestSubmit:
    """Tests for TradeEntryPipeline.submit."""

    def test_new_trade_is_prepended(self, pipeline: TradeEntryPipeline) -> None:
        user = make_user()
        first, trades = pipeline.submit(make_draft(symbol="ETH/USDT"), user, [])
        second, trades = pipeline.submit(make_draft(), user, trades)

        assert [t.id for t in trades] == [second.id, first.id]

    def test_existing_id_replaced_in_place(self, pipeline: TradeEntryPipeline) -> None:
        user = make_user()
        a, trades = pipeline.submit(make_draft(symbol="A"), user, [])
        b, trades = pipeline.submit(make_draft(symbol="B"), user, trades)
        c, trades = pipeline.submit(make_draft(symbol="C"), user, trades)

        edited, updated = pipeline.submit(make_draft(id=b.id, symbol="B2"), user, trades)

        assert [t.symbol for t in updated] == ["C", "B2", "A"]
        assert edited.id == b.id
        assert len(updated) == 3

    def test_input_list_not_mutated(self, pipeline: TradeEntryPipeline) -> None:
        trades: list[Trade] = []

        pipeline.submit(make_draft(), make_user(), trades)

        assert trades == []

    def test_draft_from_trade_round_trips(self, pipeline: TradeEntryPipeline) -> None:
        """Editing without changes should reproduce the same trade."""
        user = make_user()
        original = pipeline.build(make_draft(stop_loss=95, take_profit=115), user)

        rebuilt = pipeline.build(TradeDraft.from_trade(original), user, original)

        assert rebuilt == original


class TestRecompute:
    """Tests for TradeEntryPipeline.recompute."""

    def test_untrusted_pnl_is_rederived(self, pipeline: TradeEntryPipeline) -> None:
        trade = Trade(
            id="t1",
            user_id="u1",
            symbol="AAPL",
            direction=Direction.LONG,
            entry_time=None,
            exit_time=None,
            entry_price=10.0,
            exit_price=12.0,
            size=5.0,
            pnl_amount=99999.0,
            pnl_percentage=-1.0,
            screenshots=[Screenshot(url="")],
        )

        fixed = pipeline.recompute(trade)

        assert fixed.pnl_amount == pytest.approx(10.0)
        assert fixed.pnl_percentage == pytest.approx(20.0)
        assert fixed.screenshots == []
        assert trade.pnl_amount == 99999.0
