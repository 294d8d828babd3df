# src/journal/constants.py
"""Fixed vocabularies and default option lists for the journal."""

EMOTION_TAGS: tuple[str, ...] = (
    "calm",
    "anxious",
    "excited",
    "greedy",
    "fearful",
    "angry",
    "disciplined",
    "impulsive",
    "hesitant",
)

DEFAULT_SETUP_OPTIONS: list[str] = [
    "Breakout",
    "Retest",
    "Trend Following",
    "MA Cross",
    "RSI Overbought/Oversold",
    "Support/Resistance Bounce",
    "Mean Reversion",
    "Scalping",
    "News Driven",
]

DEFAULT_SYMBOL_OPTIONS: list[str] = [
    "BTC/USDT",
    "ETH/USDT",
    "SOL/USDT",
    "XAU/USD",
    "AAPL",
    "TSLA",
    "EUR/USD",
    "TX",
]

UNKNOWN_SETUP = "Unknown"

# Labels written by earlier releases of the journal.
LEGACY_DIRECTION_LABELS: dict[str, str] = {
    "多 (long)": "long",
    "空 (short)": "short",
    "多": "long",
    "空": "short",
    "做多": "long",
    "做空": "short",
}

LEGACY_ERROR_LABELS: dict[str, str] = {
    "無 (紀律執行)": "none",
    "無": "none",
    "市場隨機波動": "market_volatility",
    "過度交易": "over_trading",
    "未設止損": "no_stop_loss",
    "fomo (怕錯過)": "fomo",
    "情緒化交易": "emotional_trading",
    "報復性交易": "revenge_trading",
    "違反交易規則": "breaking_rules",
}

LEGACY_EMOTION_TAGS: dict[str, str] = {
    "冷靜": "calm",
    "焦慮": "anxious",
    "興奮": "excited",
    "貪婪": "greedy",
    "恐懼": "fearful",
    "憤怒": "angry",
    "紀律執行": "disciplined",
    "衝動": "impulsive",
    "猶豫": "hesitant",
}
