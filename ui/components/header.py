"""Sidebar header: app name, current user and auth actions."""

from __future__ import annotations

import streamlit as st

from ui.state import get_context, navigate, run


def render() -> None:
    """Render the sidebar."""
    ctx = get_context()
    session = ctx.session

    with st.sidebar:
        st.title("📝 Memo App")
        if st.button("All memos", use_container_width=True):
            navigate("list")

        if session.is_authenticated and session.user is not None:
            st.write(f"Hello, **{session.user.username}**!")
            if st.button("✏️ New memo", use_container_width=True):
                navigate("create")
            if st.button("Log out", use_container_width=True):
                run(session.logout())
                navigate("list")
        else:
            if st.button("Log in", use_container_width=True):
                navigate("login")
            if st.button("Sign up", use_container_width=True):
                navigate("register")

        st.divider()
        if ctx.settings.fixture_mode:
            st.caption("🧪 Fixture mode: sample data, nothing is saved remotely")
        else:
            st.caption(f"API: {ctx.settings.api_base_url}")
