# src/journal/trade_entry.py
"""Trade entry pipeline: raw form input to a persisted Trade."""
import dataclasses
import logging
import uuid
from collections.abc import Iterable
from dataclasses import dataclass, field

from src.journal.constants import EMOTION_TAGS, UNKNOWN_SETUP
from src.journal.models import Direction, ErrorCategory, Screenshot, Trade, User
from src.journal.serialization import parse_emotions, to_int, to_number
from src.journal.timeutils import parse_timestamp
from src.models.errors import TradeValidationError

logger = logging.getLogger(__name__)


@dataclass
class TradeDraft:
    """Partially filled trade as entered in the form.

    Numeric fields accept strings; anything unparseable counts as 0.
    """

    id: str | None = None
    symbol: str = ""
    direction: object = Direction.LONG
    entry_time: object = None
    exit_time: object = None
    entry_price: object = 0
    exit_price: object = 0
    size: object = 0
    fees: object = 0
    slippage: object = 0
    setup: str = ""
    stop_loss: object = None
    take_profit: object = None
    confidence: object = 7
    emotions: object = ""
    pre_trade_mindset: str = ""
    notes_on_execution: str = ""
    summary: str = ""
    improvements: str = ""
    execution_rating: object = 5
    error_category: object = ErrorCategory.NONE
    screenshots: list = field(default_factory=list)
    user_id: str | None = None

    @classmethod
    def from_trade(cls, trade: Trade) -> "TradeDraft":
        """Prefill the form for editing an existing trade."""
        return cls(
            id=trade.id,
            symbol=trade.symbol,
            direction=trade.direction,
            entry_time=trade.entry_time,
            exit_time=trade.exit_time,
            entry_price=trade.entry_price,
            exit_price=trade.exit_price,
            size=trade.size,
            fees=trade.fees,
            slippage=trade.slippage,
            setup=trade.setup,
            stop_loss=trade.stop_loss,
            take_profit=trade.take_profit,
            confidence=trade.confidence,
            emotions=trade.emotions,
            pre_trade_mindset=trade.pre_trade_mindset,
            notes_on_execution=trade.notes_on_execution,
            summary=trade.summary,
            improvements=trade.improvements,
            execution_rating=trade.execution_rating,
            error_category=trade.error_category,
            screenshots=[dataclasses.replace(s) for s in trade.screenshots],
            user_id=trade.user_id,
        )


@dataclass
class RiskReward:
    """Interactive risk preview. ready is False until entry and stop are set."""

    ready: bool
    risk_amount: float = 0.0
    risk_reward: float | None = None


def risk_reward_preview(
    entry_price: object,
    stop_loss: object,
    take_profit: object,
    size: object,
) -> RiskReward:
    """Risk in currency and reward-to-risk ratio for the entered levels."""
    entry = to_number(entry_price)
    stop = to_number(stop_loss)
    if entry <= 0 or stop <= 0:
        return RiskReward(ready=False)

    risk_per_unit = abs(entry - stop)
    risk_amount = risk_per_unit * max(to_number(size), 1.0)

    target = to_number(take_profit)
    risk_reward = None
    if risk_per_unit > 0 and target > 0:
        risk_reward = abs(target - entry) / risk_per_unit

    return RiskReward(ready=True, risk_amount=risk_amount, risk_reward=risk_reward)


def compute_pnl(
    direction: Direction,
    entry_price: float,
    exit_price: float,
    size: float,
    fees: float = 0.0,
    slippage: float = 0.0,
) -> tuple[float, float]:
    """Realized P&L amount and percentage of entry price.

    The percentage is 0 when the entry price is 0.
    """
    if direction == Direction.LONG:
        price_diff = exit_price - entry_price
    else:
        price_diff = entry_price - exit_price

    pnl_amount = price_diff * size - fees - slippage
    pnl_percentage = price_diff / entry_price * 100 if entry_price != 0 else 0.0
    return pnl_amount, pnl_percentage


def _clean_screenshots(items: Iterable) -> list[Screenshot]:
    cleaned = []
    for item in items:
        if isinstance(item, Screenshot):
            url, description = item.url, item.description
        elif isinstance(item, dict):
            url, description = item.get("url") or "", item.get("description") or ""
        else:
            continue
        url = str(url).strip()
        if url:
            cleaned.append(Screenshot(url=url, description=str(description).strip()))
    return cleaned


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


class TradeEntryPipeline:
    """Validates drafts and derives the computed fields of a Trade.

    Args:
        setup_options: Allowed setup tags. Empty means any setup is accepted.
        emotion_tags: Allowed emotion vocabulary.
    """

    def __init__(
        self,
        setup_options: Iterable[str] = (),
        emotion_tags: Iterable[str] = EMOTION_TAGS,
    ) -> None:
        self._setup_options = list(setup_options)
        self._emotion_tags = set(emotion_tags)

    def build(self, draft: TradeDraft, user: User, previous: Trade | None = None) -> Trade:
        """Turn a draft into a Trade owned by the submitting user.

        Args:
            draft: Form input.
            user: The submitting user; always becomes the owner.
            previous: The stored version when editing, if any.

        Raises:
            TradeValidationError: Blank symbol, unknown setup or emotion tag.
        """
        symbol = (draft.symbol or "").strip()
        if not symbol:
            raise TradeValidationError("Symbol is required")

        setup = self._validate_setup((draft.setup or "").strip(), previous)
        emotions = self._validate_emotions(draft.emotions)

        direction = Direction.parse(draft.direction)
        entry_price = to_number(draft.entry_price)
        exit_price = to_number(draft.exit_price)
        size = to_number(draft.size)
        fees = to_number(draft.fees)
        slippage = to_number(draft.slippage)
        pnl_amount, pnl_percentage = compute_pnl(
            direction, entry_price, exit_price, size, fees, slippage
        )

        stop_loss = to_number(draft.stop_loss) or None
        take_profit = to_number(draft.take_profit) or None
        preview = risk_reward_preview(entry_price, stop_loss, take_profit, size)

        return Trade(
            id=draft.id or str(uuid.uuid4()),
            user_id=user.id,
            symbol=symbol,
            direction=direction,
            entry_time=parse_timestamp(draft.entry_time),
            exit_time=parse_timestamp(draft.exit_time),
            entry_price=entry_price,
            exit_price=exit_price,
            size=size,
            fees=fees,
            slippage=slippage,
            setup=setup,
            stop_loss=stop_loss,
            take_profit=take_profit,
            initial_risk=preview.risk_amount if preview.ready else None,
            confidence=_clamp(to_int(draft.confidence), 1, 10),
            emotions=emotions,
            pre_trade_mindset=draft.pre_trade_mindset.strip(),
            notes_on_execution=draft.notes_on_execution.strip(),
            summary=draft.summary.strip(),
            improvements=draft.improvements.strip(),
            execution_rating=_clamp(to_int(draft.execution_rating), 1, 5),
            error_category=ErrorCategory.parse(draft.error_category),
            pnl_amount=pnl_amount,
            pnl_percentage=pnl_percentage,
            risk_reward_ratio=preview.risk_reward,
            screenshots=_clean_screenshots(draft.screenshots),
        )

    def submit(self, draft: TradeDraft, user: User, trades: list[Trade]) -> tuple[Trade, list[Trade]]:
        """Build a trade and merge it into the trade list.

        An id matching an existing trade replaces it in place; anything
        else is prepended. The input list is not modified.

        Returns:
            The saved trade and the new trade list.
        """
        previous = next((t for t in trades if draft.id and t.id == draft.id), None)
        trade = self.build(draft, user, previous)

        if previous is not None:
            updated = [trade if t.id == trade.id else t for t in trades]
            logger.info(f"Updated trade {trade.id} ({trade.symbol})")
        else:
            updated = [trade, *trades]
            logger.info(f"Logged trade {trade.id} ({trade.symbol})")
        return trade, updated

    def recompute(self, trade: Trade) -> Trade:
        """Rederive the computed fields of a trade read from outside."""
        pnl_amount, pnl_percentage = compute_pnl(
            trade.direction,
            trade.entry_price,
            trade.exit_price,
            trade.size,
            trade.fees,
            trade.slippage,
        )
        preview = risk_reward_preview(
            trade.entry_price, trade.stop_loss, trade.take_profit, trade.size
        )
        return dataclasses.replace(
            trade,
            pnl_amount=pnl_amount,
            pnl_percentage=pnl_percentage,
            initial_risk=preview.risk_amount if preview.ready else None,
            risk_reward_ratio=preview.risk_reward,
            screenshots=_clean_screenshots(trade.screenshots),
        )

    def _validate_setup(self, setup: str, previous: Trade | None) -> str:
        if not setup:
            return UNKNOWN_SETUP
        if not self._setup_options or setup in self._setup_options:
            return setup
        if previous is not None and previous.setup == setup:
            return setup
        raise TradeValidationError(f"Unknown setup: {setup}")

    def _validate_emotions(self, value: object) -> tuple[str, ...]:
        tags = parse_emotions(value)
        unknown = [tag for tag in tags if tag not in self._emotion_tags]
        if unknown:
            raise TradeValidationError(f"Unknown emotion tags: {', '.join(unknown)}")
        return tags
