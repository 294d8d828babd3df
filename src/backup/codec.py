# src/backup/codec.py
"""Backup document encoding and decoding.

A backup is a JSON object::

    {"trades": [...], "setups": [...], "symbols": [...],
     "exportDate": "<ISO-8601>", "version": "<string>"}

Trades are written in the camelCase document form. On import only
``trades`` is mandatory; missing option lists fall back to the caller's
current ones.
"""
import json
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from datetime import datetime, timezone

from src.journal.models import Trade
from src.journal.serialization import trade_from_dict, trade_to_dict
from src.journal.timeutils import format_timestamp, parse_timestamp
from src.models.errors import BackupFormatError

BACKUP_VERSION = "1.0"


@dataclass
class BackupState:
    """Decoded content of a backup document."""

    trades: list[Trade] = field(default_factory=list)
    setups: list[str] = field(default_factory=list)
    symbols: list[str] = field(default_factory=list)
    export_date: datetime | None = None
    version: str = BACKUP_VERSION


def export_state(
    trades: Sequence[Trade],
    setups: Sequence[str],
    symbols: Sequence[str],
    now: datetime | None = None,
    version: str = BACKUP_VERSION,
) -> dict:
    """Build the backup document for the given state."""
    return {
        "trades": [trade_to_dict(trade) for trade in trades],
        "setups": list(setups),
        "symbols": list(symbols),
        "exportDate": format_timestamp(now or datetime.now(timezone.utc)),
        "version": version,
    }


def dumps_backup(document: Mapping) -> str:
    return json.dumps(document, indent=2, ensure_ascii=False)


def _option_list(value: object, fallback: Sequence[str]) -> list[str]:
    if not isinstance(value, list):
        return list(fallback)
    cleaned = [str(item).strip() for item in value if item is not None]
    return list(dict.fromkeys(item for item in cleaned if item))


def import_state(
    document: str | bytes | Mapping,
    current_setups: Sequence[str] = (),
    current_symbols: Sequence[str] = (),
) -> BackupState:
    """Decode a backup document.

    Args:
        document: JSON text or an already decoded mapping.
        current_setups: Used when the document has no setup list.
        current_symbols: Used when the document has no symbol list.

    Raises:
        BackupFormatError: Not JSON, not an object, or ``trades`` is
            missing or not a list of objects.
    """
    if isinstance(document, (str, bytes)):
        try:
            document = json.loads(document)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise BackupFormatError(f"Backup is not valid JSON: {e}") from e

    if not isinstance(document, Mapping):
        raise BackupFormatError("Backup must be a JSON object")

    raw_trades = document.get("trades")
    if not isinstance(raw_trades, list):
        raise BackupFormatError("Backup has no trades list")
    if not all(isinstance(item, Mapping) for item in raw_trades):
        raise BackupFormatError("Every trade in the backup must be an object")

    return BackupState(
        trades=[trade_from_dict(item) for item in raw_trades],
        setups=_option_list(document.get("setups"), current_setups),
        symbols=_option_list(document.get("symbols"), current_symbols),
        export_date=parse_timestamp(document.get("exportDate")),
        version=str(document.get("version") or BACKUP_VERSION),
    )
