"""Settings page - options, balance and backups."""
import streamlit as st

from src.access.gate import View
from src.dashboard.runtime import run
from src.dashboard.session import get_controller, require_view, show_notices, sidebar

st.set_page_config(page_title="Settings | TradeMind Journal", page_icon="⚙️", layout="wide")

controller = get_controller()
user = require_view(controller, View.SETTINGS)
sidebar(controller)

st.title("⚙️ Settings")
show_notices(controller)

state = controller.state

st.subheader("🎯 Setups and Symbols")

col1, col2 = st.columns(2)

with col1:
    for setup in list(state.setups):
        name_col, remove_col = st.columns([4, 1])
        name_col.write(setup)
        if remove_col.button("✖", key=f"setup_{setup}"):
            run(controller.remove_setup(setup))
            st.rerun()
    new_setup = st.text_input("New setup")
    if st.button("Add setup"):
        run(controller.add_setup(new_setup))
        st.rerun()

with col2:
    for symbol in list(state.symbols):
        name_col, remove_col = st.columns([4, 1])
        name_col.write(symbol)
        if remove_col.button("✖", key=f"symbol_{symbol}"):
            run(controller.remove_symbol(symbol))
            st.rerun()
    new_symbol = st.text_input("New symbol")
    if st.button("Add symbol"):
        run(controller.add_symbol(new_symbol))
        st.rerun()

st.divider()

st.subheader("💰 Starting Balance")

with st.form("balance"):
    balance = st.number_input("Initial balance", min_value=0.0, value=float(user.initial_balance))
    use_balance = st.toggle("Use it as the equity curve baseline", value=user.use_initial_balance)
    if st.form_submit_button("Save"):
        run(controller.update_balance(balance, use_balance))
        st.rerun()

st.divider()

st.subheader("💾 Backup")

col1, col2 = st.columns(2)

with col1:
    st.download_button(
        "⬇️ Export backup",
        data=controller.export_backup() or "",
        file_name="trademind_backup.json",
        mime="application/json",
    )
    uploaded = st.file_uploader("Import backup", type=["json"])
    confirm_import = st.checkbox("I understand importing replaces my trades and options")
    if st.button("⬆️ Import", disabled=uploaded is None):
        run(controller.import_backup(uploaded.getvalue(), confirmed=confirm_import))
        st.rerun()

with col2:
    token = st.text_input(
        "GitHub token (gist scope)",
        type="password",
        help="Leave empty to use GITHUB_TOKEN from the environment.",
    )
    st.caption(f"Gist: {state.gist_id or 'not created yet'}")
    if st.button("☁️ Push to gist"):
        run(controller.push_backup(token or None))
        st.rerun()
    gist_id = st.text_input("Gist id to restore", value=state.gist_id or "")
    confirm_pull = st.checkbox("I understand restoring replaces my trades and options")
    if st.button("☁️ Pull from gist"):
        run(controller.pull_backup(token or None, gist_id or None, confirmed=confirm_pull))
        st.rerun()

st.divider()

st.subheader("🧨 Reset")
confirm_reset = st.checkbox("Delete all of my trades and restore the default options")
if st.button("Reset data", type="primary", disabled=not confirm_reset):
    run(controller.reset_data(confirmed=confirm_reset))
    st.rerun()
