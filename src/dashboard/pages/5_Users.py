"""Users page - account management for administrators."""
import pandas as pd
import streamlit as st

from src.access.gate import View
from src.dashboard.runtime import run
from src.dashboard.session import get_controller, require_view, show_notices, sidebar
from src.journal.models import Role

st.set_page_config(page_title="Users | TradeMind Journal", page_icon="👥", layout="wide")

controller = get_controller()
admin = require_view(controller, View.USER_MANAGEMENT)
sidebar(controller)

st.title("👥 User Management")
show_notices(controller)

summaries = controller.user_summaries()

df = pd.DataFrame(
    [
        {
            "Username": s.user.username,
            "Role": s.user.role.value,
            "Active": s.user.is_active,
            "Trades": s.trade_count,
            "P&L": round(s.total_pnl, 2),
            "Win Rate": f"{s.win_rate:.1f}%",
            "Created": s.user.created_at.date().isoformat() if s.user.created_at else "",
        }
        for s in summaries
    ]
)
st.dataframe(df, use_container_width=True, hide_index=True)

st.divider()

col1, col2 = st.columns(2)

with col1:
    st.subheader("➕ New account")
    with st.form("add_user"):
        username = st.text_input("Username")
        password = st.text_input("Password", type="password")
        role = st.selectbox("Role", options=list(Role), format_func=lambda r: r.value)
        if st.form_submit_button("Create"):
            run(controller.add_user(username, password, role))
            st.rerun()

    st.subheader("✉️ Invitation")
    with st.form("invite"):
        email = st.text_input("Email")
        invite_password = st.text_input("Initial password", type="password")
        invite_role = st.selectbox("Role", options=list(Role), format_func=lambda r: r.value, key="invite_role")
        if st.form_submit_button("Invite"):
            run(controller.invite_user(email, invite_password, invite_role))
            st.rerun()

with col2:
    st.subheader("🛠️ Manage")
    others = [s.user for s in summaries]
    target = st.selectbox("Account", options=others, format_func=lambda u: u.username)

    if target is not None:
        is_self = target.id == admin.id
        if is_self:
            st.caption("You cannot disable, delete or change the role of your own account.")

        if st.button("Disable" if target.is_active else "Enable", disabled=is_self):
            run(controller.set_user_active(target.id, not target.is_active))
            st.rerun()

        new_role = Role.USER if target.is_admin else Role.ADMIN
        if st.button(f"Make {new_role.value}", disabled=is_self):
            run(controller.change_user_role(target.id, new_role))
            st.rerun()

        new_password = st.text_input("New password", type="password")
        if st.button("Reset password"):
            run(controller.reset_user_password(target.id, new_password))
            st.rerun()

        confirm = st.checkbox(f"Delete {target.username} and all of their trades")
        if st.button("Delete account", type="primary", disabled=is_self or not confirm):
            run(controller.delete_user(target.id))
            st.rerun()
