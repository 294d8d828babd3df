"""Streamlit helpers shared by every page."""
import streamlit as st

from src.access.gate import View, can_view
from src.dashboard.controller import JournalController
from src.dashboard.models import NoticeLevel
from src.dashboard.runtime import load_settings, run, start_controller
from src.journal.models import User


def get_controller() -> JournalController:
    """Controller for this browser session, created on first use."""
    if "controller" not in st.session_state:
        settings = load_settings()
        st.session_state["settings"] = settings
        st.session_state["controller"] = run(start_controller(settings))
    return st.session_state["controller"]


def chart_template() -> str:
    settings = st.session_state.get("settings")
    theme = settings.dashboard.theme if settings else "dark"
    return "plotly_dark" if theme == "dark" else "plotly_white"


def require_view(controller: JournalController, view: View) -> User:
    """Stop rendering unless the session user may open the view."""
    user = controller.state.session_user
    if user is None:
        st.warning("Please log in first.")
        st.page_link("Home.py", label="Go to login")
        st.stop()
    if not can_view(user.role, view):
        st.error("This page is not available for your role.")
        st.stop()
    controller.state.current_view = view
    return user


def show_notices(controller: JournalController, limit: int = 3) -> None:
    """Render unread notices once, newest first."""
    for notice in [n for n in controller.state.notices if not n.read][:limit]:
        text = f"**{notice.title}**: {notice.message}"
        if notice.retryable:
            text += " (you can try again)"
        if notice.level == NoticeLevel.ERROR:
            st.error(text)
        elif notice.level == NoticeLevel.WARNING:
            st.warning(text)
        else:
            st.success(text)
    controller.state.mark_all_read()


def sidebar(controller: JournalController) -> None:
    user = controller.state.session_user
    if user is None:
        return
    with st.sidebar:
        st.markdown(f"**{user.username}** ({user.role.value})")
        if st.button("Log out", use_container_width=True):
            controller.logout()
            st.rerun()
