# src/journal/serialization.py
"""Conversion between journal models and plain dictionaries.

There is exactly one reader and one writer per entity. Missing fields are
filled from the explicit default tables below, so older documents and
rows keep loading as the schema grows.

Two key styles are supported: ``document`` (camelCase, used by backups
and the local store) and ``row`` (snake_case, used by the database).
"""
import math
import uuid
from collections.abc import Iterable, Mapping
from typing import Any, Literal

from src.access.passwords import hash_password
from src.journal.constants import LEGACY_EMOTION_TAGS, UNKNOWN_SETUP
from src.journal.models import (
    Direction,
    ErrorCategory,
    Invitation,
    Role,
    Screenshot,
    Trade,
    User,
)
from src.journal.timeutils import format_timestamp, parse_timestamp

KeyStyle = Literal["document", "row"]

TRADE_DEFAULTS: dict[str, Any] = {
    "user_id": "",
    "symbol": "",
    "direction": Direction.LONG.value,
    "entry_time": None,
    "exit_time": None,
    "entry_price": 0.0,
    "exit_price": 0.0,
    "size": 0.0,
    "fees": 0.0,
    "slippage": 0.0,
    "setup": UNKNOWN_SETUP,
    "stop_loss": None,
    "take_profit": None,
    "initial_risk": None,
    "confidence": 0,
    "emotions": "",
    "pre_trade_mindset": "",
    "notes_on_execution": "",
    "summary": "",
    "improvements": "",
    "execution_rating": 0,
    "error_category": ErrorCategory.NONE.value,
    "pnl_amount": 0.0,
    "pnl_percentage": 0.0,
    "risk_reward_ratio": None,
    "screenshots": [],
}

USER_DEFAULTS: dict[str, Any] = {
    "username": "",
    "password_hash": "",
    "role": Role.USER.value,
    "is_active": True,
    "created_at": None,
    "initial_balance": 0.0,
    "use_initial_balance": False,
}


def _camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


def _key(name: str, style: KeyStyle) -> str:
    return _camel(name) if style == "document" else name


def _get(data: Mapping, name: str, style: KeyStyle, defaults: Mapping[str, Any]) -> Any:
    value = data.get(_key(name, style))
    if value is None:
        # Accept either key style on input.
        value = data.get(name, data.get(_camel(name)))
    if value is None:
        default = defaults.get(name)
        return list(default) if isinstance(default, list) else default
    return value


def to_number(value: object, default: float = 0.0) -> float:
    """Coerce to float; empty, unparseable and non-finite input gives default."""
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = str(value).strip() if value is not None else ""
        if not text:
            return default
        try:
            number = float(text.replace(",", ""))
        except ValueError:
            return default
    return number if math.isfinite(number) else default


def to_optional_number(value: object) -> float | None:
    """Coerce an optional price; empty and zero mean "not set"."""
    number = to_number(value, default=0.0)
    return number if number != 0 else None


def to_int(value: object, default: int = 0) -> int:
    return int(to_number(value, default=float(default)))


def parse_emotions(value: object) -> tuple[str, ...]:
    """Read emotion tags from a space-delimited string or a list.

    Tags keep first-seen order and appear once.
    """
    if isinstance(value, str):
        raw: Iterable = value.split()
    elif isinstance(value, Iterable):
        raw = (str(item) for item in value)
    else:
        return ()

    tags: list[str] = []
    for item in raw:
        tag = item.strip()
        if not tag:
            continue
        tag = LEGACY_EMOTION_TAGS.get(tag, tag.lower())
        if tag not in tags:
            tags.append(tag)
    return tuple(tags)


def format_emotions(tags: Iterable[str]) -> str:
    return " ".join(tags)


def parse_screenshots(value: object) -> list[Screenshot]:
    if not isinstance(value, list):
        return []
    screenshots = []
    for item in value:
        if isinstance(item, Mapping):
            screenshots.append(
                Screenshot(
                    url=str(item.get("url") or ""),
                    description=str(item.get("description") or ""),
                )
            )
    return screenshots


def trade_from_dict(data: Mapping, style: KeyStyle = "document") -> Trade:
    """Build a Trade from a document or database row."""

    def get(name: str) -> Any:
        return _get(data, name, style, TRADE_DEFAULTS)

    screenshots = parse_screenshots(get("screenshots"))
    for legacy_key in ("screenshotBefore", "screenshotAfter"):
        url = data.get(legacy_key)
        if url:
            screenshots.append(Screenshot(url=str(url)))

    return Trade(
        id=str(data.get("id") or uuid.uuid4()),
        user_id=str(get("user_id")),
        symbol=str(get("symbol")),
        direction=Direction.parse(get("direction")),
        entry_time=parse_timestamp(get("entry_time")),
        exit_time=parse_timestamp(get("exit_time")),
        entry_price=to_number(get("entry_price")),
        exit_price=to_number(get("exit_price")),
        size=to_number(get("size")),
        fees=to_number(get("fees")),
        slippage=to_number(get("slippage")),
        setup=str(get("setup")) or UNKNOWN_SETUP,
        stop_loss=to_optional_number(get("stop_loss")),
        take_profit=to_optional_number(get("take_profit")),
        initial_risk=to_optional_number(get("initial_risk")),
        confidence=to_int(get("confidence")),
        emotions=parse_emotions(get("emotions")),
        pre_trade_mindset=str(get("pre_trade_mindset")),
        notes_on_execution=str(get("notes_on_execution")),
        summary=str(get("summary")),
        improvements=str(get("improvements")),
        execution_rating=to_int(get("execution_rating")),
        error_category=ErrorCategory.parse(get("error_category")),
        pnl_amount=to_number(get("pnl_amount")),
        pnl_percentage=to_number(get("pnl_percentage")),
        risk_reward_ratio=to_optional_number(get("risk_reward_ratio")),
        screenshots=screenshots,
    )


def trade_to_dict(trade: Trade, style: KeyStyle = "document") -> dict[str, Any]:
    """Serialize a Trade; emotions are written in their space-delimited form."""
    values: dict[str, Any] = {
        "id": trade.id,
        "user_id": trade.user_id,
        "entry_time": format_timestamp(trade.entry_time),
        "exit_time": format_timestamp(trade.exit_time),
        "symbol": trade.symbol,
        "direction": trade.direction.value,
        "entry_price": trade.entry_price,
        "exit_price": trade.exit_price,
        "size": trade.size,
        "fees": trade.fees,
        "slippage": trade.slippage,
        "setup": trade.setup,
        "stop_loss": trade.stop_loss,
        "take_profit": trade.take_profit,
        "initial_risk": trade.initial_risk,
        "confidence": trade.confidence,
        "emotions": format_emotions(trade.emotions),
        "pre_trade_mindset": trade.pre_trade_mindset,
        "notes_on_execution": trade.notes_on_execution,
        "summary": trade.summary,
        "improvements": trade.improvements,
        "execution_rating": trade.execution_rating,
        "error_category": trade.error_category.value,
        "pnl_amount": trade.pnl_amount,
        "pnl_percentage": trade.pnl_percentage,
        "risk_reward_ratio": trade.risk_reward_ratio,
        "screenshots": [
            {"url": shot.url, "description": shot.description}
            for shot in trade.screenshots
        ],
    }
    return {_key(name, style): value for name, value in values.items()}


def user_from_dict(data: Mapping, style: KeyStyle = "document") -> User:
    """Build a User from a document or profile row.

    Legacy records holding a plaintext ``password`` are hashed on read.
    """

    def get(name: str) -> Any:
        return _get(data, name, style, USER_DEFAULTS)

    password_hash = str(get("password_hash"))
    if not password_hash and data.get("password"):
        password_hash = hash_password(str(data["password"]))

    return User(
        id=str(data.get("id") or uuid.uuid4()),
        username=str(get("username")),
        password_hash=password_hash,
        role=Role.parse(get("role")),
        is_active=bool(get("is_active")),
        created_at=parse_timestamp(get("created_at")),
        initial_balance=to_number(get("initial_balance")),
        use_initial_balance=bool(get("use_initial_balance")),
    )


def user_to_dict(user: User, style: KeyStyle = "document") -> dict[str, Any]:
    values = {
        "id": user.id,
        "username": user.username,
        "password_hash": user.password_hash,
        "role": user.role.value,
        "is_active": user.is_active,
        "created_at": format_timestamp(user.created_at),
        "initial_balance": user.initial_balance,
        "use_initial_balance": user.use_initial_balance,
    }
    return {_key(name, style): value for name, value in values.items()}


def invitation_from_dict(data: Mapping) -> Invitation:
    password_hash = str(data.get("password_hash") or "")
    if not password_hash and data.get("password"):
        password_hash = hash_password(str(data["password"]))
    return Invitation(
        email=str(data.get("email") or "").strip().lower(),
        password_hash=password_hash,
        role=Role.parse(data.get("role")),
        id=str(data["id"]) if data.get("id") is not None else None,
    )


def invitation_to_dict(invitation: Invitation) -> dict[str, Any]:
    data: dict[str, Any] = {
        "email": invitation.email,
        "password_hash": invitation.password_hash,
        "role": invitation.role.value,
    }
    if invitation.id is not None:
        data["id"] = invitation.id
    return data
