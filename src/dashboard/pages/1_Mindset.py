"""Mindset page - emotions, discipline and the AI coach."""
import streamlit as st

from src.access.gate import View
from src.dashboard import charts
from src.dashboard.models import NoticeKind
from src.dashboard.runtime import run
from src.dashboard.session import chart_template, get_controller, require_view, show_notices, sidebar
from src.journal.models import ErrorCategory

st.set_page_config(page_title="Mindset | TradeMind Journal", page_icon="🧠", layout="wide")

controller = get_controller()
require_view(controller, View.MINDSET)
sidebar(controller)

st.title("🧠 Mindset Analysis")
show_notices(controller)

report = controller.report()

col1, col2, col3 = st.columns(3)
with col1:
    st.metric("Discipline Score", f"{report.discipline_score:.0f} / 100")
with col2:
    mistakes = [t for t in report.trades if t.error_category != ErrorCategory.NONE]
    st.metric("Trades with Mistakes", str(len(mistakes)))
with col3:
    top = report.emotions[0] if report.emotions else None
    st.metric("Best Emotion", top.tag if top else "-", delta=f"{top.avg_pnl:+.2f}" if top else None)

st.divider()

if report.emotions:
    st.plotly_chart(charts.emotion_figure(report.emotions, chart_template()), use_container_width=True)
else:
    st.info("Tag your trades with emotions to see how they relate to P&L.", icon="🏷️")

if mistakes:
    st.subheader("Mistakes")
    counts: dict[str, int] = {}
    for trade in mistakes:
        label = trade.error_category.value.replace("_", " ")
        counts[label] = counts.get(label, 0) + 1
    st.bar_chart(counts)

st.divider()

st.subheader("🤖 AI Coach")
coach = controller.coach.is_available
status = controller.state.coach

if not coach:
    st.warning("Set ANTHROPIC_API_KEY in your environment to enable the AI coach.")

if st.button(
    "Analyzing..." if status.is_loading else "Ask the coach",
    type="primary",
    disabled=status.is_loading or not coach,
):
    with st.spinner("Reading your recent trades..."):
        run(controller.request_coach_analysis())
    st.rerun()

if status.error_kind == NoticeKind.CREDENTIAL:
    st.error("The API key is missing or was rejected. Check ANTHROPIC_API_KEY and restart.")
elif status.error_kind == NoticeKind.SERVICE:
    st.error("The coach is unavailable right now, try again in a moment.")
elif status.result:
    st.markdown(status.result)
