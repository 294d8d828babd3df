"""Home page - login and performance dashboard."""
from datetime import date

import streamlit as st

from src.access.gate import View
from src.dashboard import charts
from src.dashboard.runtime import run
from src.dashboard.session import chart_template, get_controller, show_notices, sidebar
from src.journal.metrics_calculator import format_duration
from src.journal.models import TimeWindow

st.set_page_config(
    page_title="TradeMind Journal",
    page_icon="📈",
    layout="wide",
)

controller = get_controller()
state = controller.state

if not state.is_authenticated:
    st.title("📈 TradeMind Journal")
    show_notices(controller)

    login_tab, register_tab = st.tabs(["Log in", "Register"])

    with login_tab:
        with st.form("login"):
            username = st.text_input("Username")
            password = st.text_input("Password", type="password")
            if st.form_submit_button("Log in", type="primary"):
                if run(controller.login(username, password)):
                    st.rerun()
                show_notices(controller)

    with register_tab:
        st.caption("Use the email and password from your invitation.")
        with st.form("register"):
            email = st.text_input("Email")
            password = st.text_input("Password", type="password", key="register_password")
            if st.form_submit_button("Create account"):
                if run(controller.register(email, password)):
                    st.rerun()
                show_notices(controller)

    st.stop()

sidebar(controller)
state.current_view = View.DASHBOARD
st.title("📈 Dashboard")
show_notices(controller)

col1, col2, col3 = st.columns([2, 1, 3])

with col1:
    window = st.radio(
        "Period",
        options=[TimeWindow.MONTHLY, TimeWindow.OVERALL],
        format_func=lambda w: "Month" if w == TimeWindow.MONTHLY else "All time",
        index=0 if state.window == TimeWindow.MONTHLY else 1,
        horizontal=True,
    )
    if window != state.window:
        controller.set_window(window)
        st.rerun()

with col2:
    prev_col, next_col = st.columns(2)
    if prev_col.button("◀", use_container_width=True):
        controller.shift_month(-1)
        st.rerun()
    if next_col.button("▶", use_container_width=True):
        controller.shift_month(1)
        st.rerun()

with col3:
    st.subheader(date(state.year, state.month, 1).strftime("%B %Y"))

report = controller.report()
stats = report.stats
template = chart_template()

st.divider()

col1, col2, col3, col4 = st.columns(4)
with col1:
    st.metric("Total P&L", f"${stats.total_pnl:,.2f}")
with col2:
    st.metric("Win Rate", f"{stats.win_rate:.1f}%", delta=f"{stats.count} trades", delta_color="off")
with col3:
    st.metric("Avg Win / Loss", f"${stats.avg_win:,.2f} / ${stats.avg_loss:,.2f}")
with col4:
    if state.session_user.use_initial_balance:
        st.metric("Return", f"{report.equity.total_return_pct:.2f}%")
    else:
        st.metric("Profit Factor", f"{stats.profit_factor:.2f}")

col1, col2, col3, col4 = st.columns(4)
with col1:
    st.metric("Best Trade", f"${stats.best_trade.pnl_amount:,.2f}" if stats.best_trade else "-")
with col2:
    st.metric("Worst Trade", f"${stats.worst_trade.pnl_amount:,.2f}" if stats.worst_trade else "-")
with col3:
    st.metric("Avg Holding", format_duration(stats.avg_duration_minutes))
with col4:
    st.metric("Long / Short", f"{stats.long_pct:.0f}% / {stats.short_pct:.0f}%")

st.divider()

tab1, tab2, tab3 = st.tabs(["Equity Curve", "Win Rate by Hour", "Long / Short"])

with tab1:
    st.plotly_chart(charts.equity_figure(report.equity, template), use_container_width=True)

with tab2:
    st.plotly_chart(charts.hourly_figure(report.hourly, template), use_container_width=True)

with tab3:
    st.plotly_chart(charts.direction_figure(stats, template), use_container_width=True)
    st.caption(
        f"Winners held {format_duration(stats.avg_win_duration_minutes)}, "
        f"losers {format_duration(stats.avg_loss_duration_minutes)} on average."
    )

st.divider()

st.subheader("📅 Calendar")
st.dataframe(charts.calendar_frame(report.calendar), use_container_width=True, hide_index=True)

trading_days = [day for day in report.calendar if day.count]
if trading_days:
    selected = st.selectbox(
        "Open a trading day in the log",
        options=[day.date_label for day in trading_days],
        index=None,
    )
    if selected:
        controller.open_day(selected)
        st.switch_page("pages/2_Logs.py")
