# src/coach/trade_coach.py
"""AI trading coach: behavioral commentary on recent trades through Claude."""
import asyncio
import json
import logging
from collections.abc import Sequence

import anthropic
from anthropic import AsyncAnthropic

from src.coach.settings import AnthropicConfig, CoachSettings
from src.journal.models import Trade
from src.journal.serialization import format_emotions
from src.models.errors import CoachKeyInvalidError, CoachKeyMissingError, CoachServiceError

logger = logging.getLogger(__name__)

NO_TRADES_MESSAGE = "There are no trades to analyze yet. Log a few trades and ask again."
NO_COMMENT_MESSAGE = "The coach has no comment right now, try again later."

COACH_SYSTEM_PROMPT = """You are a calm, professional trading psychology coach.
You review a trader's most recent trades and speak to them directly.
Be honest and specific, and keep the answer short."""

COACH_PROMPT = """Here are my most recent trades as JSON:

{trades}

Reply in three short sections:
1. Core weakness: the biggest psychological weakness these trades show.
2. Coach's orders: two concrete actions for my next sessions.
3. Reminder: one sentence I should keep in mind."""


def _exit_key(trade: Trade) -> float:
    return trade.exit_time.timestamp() if trade.exit_time else float("-inf")


def select_recent(trades: Sequence[Trade], limit: int) -> list[Trade]:
    """Return up to ``limit`` trades with the latest exit times, oldest first."""
    newest = sorted(trades, key=_exit_key, reverse=True)[:limit]
    return list(reversed(newest))


def summarize_trade(trade: Trade) -> dict:
    """Reduce a trade to the fields the coach sees."""
    return {
        "symbol": trade.symbol,
        "pnl": round(trade.pnl_amount, 2),
        "setup": trade.setup,
        "emotions": format_emotions(trade.emotions),
        "error": trade.error_category.value,
        "execution": trade.execution_rating,
        "summary": trade.summary,
    }


class TradeCoach:
    """Behavioral commentary on recent trades using the Claude API.

    Credential problems raise CoachKeyMissingError or CoachKeyInvalidError
    so the UI can guide the user to fix the key; everything else that goes
    wrong with the call raises CoachServiceError.
    """

    def __init__(
        self,
        config: AnthropicConfig,
        settings: CoachSettings | None = None,
        client: AsyncAnthropic | None = None,
    ):
        self.config = config
        self.settings = settings or CoachSettings()
        self._client = client

    @property
    def is_available(self) -> bool:
        return self.settings.enabled and self.config.is_configured

    async def _create(self, prompt: str):
        request = dict(
            model=self.settings.model,
            max_tokens=self.settings.max_tokens,
            temperature=self.settings.temperature,
            system=COACH_SYSTEM_PROMPT,
            messages=[{"role": "user", "content": prompt}],
        )
        if self._client is not None:
            return await self._client.messages.create(**request)

        # Each UI action runs in its own event loop, so the client lives for one call.
        async with AsyncAnthropic(api_key=self.config.api_key.strip()) as client:
            return await client.messages.create(**request)

    def build_prompt(self, trades: Sequence[Trade]) -> str:
        recent = select_recent(trades, self.settings.max_trades)
        payload = [summarize_trade(t) for t in recent]
        return COACH_PROMPT.format(trades=json.dumps(payload, indent=2, ensure_ascii=False))

    async def analyze(self, trades: Sequence[Trade]) -> str:
        """Ask the coach about the most recent trades.

        Raises:
            CoachKeyMissingError: No usable API key is configured.
            CoachKeyInvalidError: The API rejected the key.
            CoachServiceError: Timeout or any other API failure.
        """
        if not trades:
            return NO_TRADES_MESSAGE
        if not self.config.is_configured:
            raise CoachKeyMissingError("No Anthropic API key is configured")

        prompt = self.build_prompt(trades)
        try:
            response = await asyncio.wait_for(
                self._create(prompt), timeout=self.settings.timeout_seconds
            )
        except asyncio.TimeoutError as e:
            logger.warning(f"Coach request timed out after {self.settings.timeout_seconds}s")
            raise CoachServiceError("The coach did not answer in time") from e
        except (anthropic.AuthenticationError, anthropic.PermissionDeniedError) as e:
            logger.warning(f"Coach request rejected: {e}")
            raise CoachKeyInvalidError("The Anthropic API key was rejected") from e
        except anthropic.APIError as e:
            logger.warning(f"Coach request failed: {e}")
            raise CoachServiceError(f"The coach is unavailable: {e}") from e

        text = "".join(
            getattr(block, "text", "") for block in response.content
        ).strip()
        logger.info(f"Coach analyzed {min(len(trades), self.settings.max_trades)} trades")
        return text or NO_COMMENT_MESSAGE
