"""Logs page - searchable trade history."""
import pandas as pd
import streamlit as st

from src.access.gate import View
from src.dashboard.runtime import run
from src.dashboard.session import get_controller, require_view, show_notices, sidebar
from src.journal.metrics_calculator import duration_minutes, format_duration
from src.journal.serialization import format_emotions
from src.journal.timeutils import date_label

st.set_page_config(page_title="Logs | TradeMind Journal", page_icon="📒", layout="wide")

controller = get_controller()
user = require_view(controller, View.LOGS)
sidebar(controller)

st.title("📒 Trade Log")
show_notices(controller)

query = st.text_input(
    "Search symbol, setup or date (YYYY-MM-DD)",
    value=controller.state.log_filter,
)
if query != controller.state.log_filter:
    controller.set_log_filter(query)

trades = controller.visible_trades()
st.caption(f"{len(trades)} trades")

if not trades:
    st.info("No trades match.", icon="📭")
    st.stop()

owners = {u.id: u.username for u in controller.state.users}
df = pd.DataFrame(
    [
        {
            "Date": date_label(t.entry_time, controller.tz),
            "Symbol": t.symbol,
            "Side": t.direction.value,
            "Setup": t.setup,
            "P&L": round(t.pnl_amount, 2),
            "P&L %": round(t.pnl_percentage, 2),
            "R:R": round(t.risk_reward_ratio, 2) if t.risk_reward_ratio else None,
            "Held": format_duration(duration_minutes(t.entry_time, t.exit_time)),
            "Emotions": format_emotions(t.emotions),
            "Rating": t.execution_rating,
            **({"Trader": owners.get(t.user_id, t.user_id)} if user.is_admin else {}),
        }
        for t in trades
    ]
)
page_size = st.session_state["settings"].dashboard.page_size
pages = max(1, -(-len(df) // page_size))
page = st.number_input("Page", min_value=1, max_value=pages, value=1) if pages > 1 else 1
start = (page - 1) * page_size
st.dataframe(df.iloc[start:start + page_size], use_container_width=True, hide_index=True)

st.divider()

labels = {t.id: f"{date_label(t.entry_time, controller.tz)} {t.symbol} {t.pnl_amount:+.2f}" for t in trades}
selected_id = st.selectbox("Trade details", options=list(labels), format_func=labels.get)
trade = controller.find_trade(selected_id)

if trade is not None:
    col1, col2 = st.columns(2)
    with col1:
        st.markdown(f"**Mindset before:** {trade.pre_trade_mindset or '-'}")
        st.markdown(f"**Execution notes:** {trade.notes_on_execution or '-'}")
        st.markdown(f"**Mistake:** {trade.error_category.value.replace('_', ' ')}")
    with col2:
        st.markdown(f"**Summary:** {trade.summary or '-'}")
        st.markdown(f"**Improvements:** {trade.improvements or '-'}")
        st.markdown(f"**Confidence:** {trade.confidence}/10")
    for shot in trade.screenshots:
        st.image(shot.url, caption=shot.description or None)

    col1, col2 = st.columns(2)
    with col1:
        if trade.user_id == user.id and st.button("✏️ Edit"):
            st.session_state["edit_trade_id"] = trade.id
            st.switch_page("pages/3_Add_Trade.py")
    with col2:
        confirm = st.checkbox("Confirm delete")
        if st.button("🗑️ Delete", disabled=not confirm):
            if run(controller.delete_trade(trade.id)):
                st.rerun()
            show_notices(controller)
