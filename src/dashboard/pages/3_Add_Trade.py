"""Add Trade page - log a new trade or edit an existing one."""
from datetime import datetime

import streamlit as st

from src.access.gate import View
from src.dashboard.runtime import run
from src.dashboard.session import get_controller, require_view, show_notices, sidebar
from src.journal.constants import EMOTION_TAGS
from src.journal.models import Direction, ErrorCategory, Screenshot
from src.journal.timeutils import from_wall_clock, to_wall_clock
from src.journal.trade_entry import TradeDraft, risk_reward_preview

st.set_page_config(page_title="Add Trade | TradeMind Journal", page_icon="➕", layout="wide")

controller = get_controller()
require_view(controller, View.ADD_TRADE)
sidebar(controller)

editing = controller.find_trade(st.session_state.get("edit_trade_id", ""))
draft = TradeDraft.from_trade(editing) if editing else TradeDraft()

st.title("✏️ Edit Trade" if editing else "➕ Add Trade")
show_notices(controller)

state = controller.state
now = to_wall_clock(datetime.now().astimezone(), controller.tz)


def _at(value: object) -> datetime:
    return to_wall_clock(value, controller.tz) if isinstance(value, datetime) else now


def _index(options: list, value: object) -> int:
    return options.index(value) if value in options else 0


st.subheader("Market")
col1, col2, col3 = st.columns(3)
with col1:
    symbols = list(state.symbols)
    if draft.symbol and draft.symbol not in symbols:
        symbols.insert(0, draft.symbol)
    symbol = st.selectbox("Symbol", options=symbols, index=_index(symbols, draft.symbol))
    direction = st.radio(
        "Direction",
        options=list(Direction),
        format_func=lambda d: d.value.title(),
        index=_index(list(Direction), Direction.parse(draft.direction)),
        horizontal=True,
    )
with col2:
    entry_date = st.date_input("Entry date", value=_at(draft.entry_time).date())
    entry_clock = st.time_input("Entry time", value=_at(draft.entry_time).time())
    exit_date = st.date_input("Exit date", value=_at(draft.exit_time).date())
    exit_clock = st.time_input("Exit time", value=_at(draft.exit_time).time())
with col3:
    setups = list(state.setups)
    if editing and editing.setup not in setups:
        setups.append(editing.setup)
    setup = st.selectbox("Setup", options=setups, index=_index(setups, draft.setup))
    error_category = st.selectbox(
        "Mistake",
        options=list(ErrorCategory),
        format_func=lambda c: c.value.replace("_", " "),
        index=_index(list(ErrorCategory), draft.error_category),
    )

col1, col2, col3, col4 = st.columns(4)
entry_price = col1.number_input("Entry price", value=float(draft.entry_price or 0), min_value=0.0, format="%.4f")
exit_price = col2.number_input("Exit price", value=float(draft.exit_price or 0), min_value=0.0, format="%.4f")
size = col3.number_input("Size", value=float(draft.size or 0), min_value=0.0)
fees = col4.number_input("Fees", value=float(draft.fees or 0), min_value=0.0)

col1, col2, col3, col4 = st.columns(4)
slippage = col1.number_input("Slippage", value=float(draft.slippage or 0), min_value=0.0)
stop_loss = col2.number_input("Stop loss", value=float(draft.stop_loss or 0), min_value=0.0, format="%.4f")
take_profit = col3.number_input("Take profit", value=float(draft.take_profit or 0), min_value=0.0, format="%.4f")

preview = risk_reward_preview(entry_price, stop_loss, take_profit, size)
with col4:
    if preview.ready:
        rr = f"{preview.risk_reward:.2f}" if preview.risk_reward is not None else "-"
        st.metric("Risk / R:R", f"${preview.risk_amount:,.2f}", delta=f"R:R {rr}", delta_color="off")
    else:
        st.caption("Enter entry and stop loss to see risk.")

st.subheader("Mindset")
col1, col2 = st.columns(2)
with col1:
    confidence = st.slider("Confidence", min_value=1, max_value=10, value=int(draft.confidence or 7))
    emotions = st.multiselect(
        "Emotions",
        options=list(EMOTION_TAGS),
        default=[tag for tag in (draft.emotions or ()) if tag in EMOTION_TAGS],
    )
    pre_trade_mindset = st.text_area("Mindset before the trade", value=draft.pre_trade_mindset)
with col2:
    execution_rating = st.slider("Execution rating", min_value=1, max_value=5, value=int(draft.execution_rating or 5))
    notes_on_execution = st.text_area("Execution notes", value=draft.notes_on_execution)

summary = st.text_area("Summary", value=draft.summary)
improvements = st.text_area("What to improve", value=draft.improvements)

st.subheader("Screenshots")
shots = draft.screenshots or []
screenshot_rows = []
for i in range(max(2, len(shots) + 1)):
    existing = shots[i] if i < len(shots) else Screenshot(url="")
    col1, col2 = st.columns([2, 1])
    url = col1.text_input(f"Image URL {i + 1}", value=existing.url)
    description = col2.text_input(f"Caption {i + 1}", value=existing.description)
    screenshot_rows.append({"url": url, "description": description})

if st.button("💾 Save trade", type="primary"):
    submitted = TradeDraft(
        id=draft.id,
        symbol=symbol or "",
        direction=direction,
        entry_time=from_wall_clock(datetime.combine(entry_date, entry_clock), controller.tz),
        exit_time=from_wall_clock(datetime.combine(exit_date, exit_clock), controller.tz),
        entry_price=entry_price,
        exit_price=exit_price,
        size=size,
        fees=fees,
        slippage=slippage,
        setup=setup or "",
        stop_loss=stop_loss,
        take_profit=take_profit,
        confidence=confidence,
        emotions=emotions,
        pre_trade_mindset=pre_trade_mindset,
        notes_on_execution=notes_on_execution,
        summary=summary,
        improvements=improvements,
        execution_rating=execution_rating,
        error_category=error_category,
        screenshots=screenshot_rows,
    )
    if run(controller.save_trade(submitted)) is not None:
        st.session_state.pop("edit_trade_id", None)
        st.switch_page("pages/2_Logs.py")
    show_notices(controller)
