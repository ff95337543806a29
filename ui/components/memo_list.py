"""Memo list page: memos grouped by creation day, newest day first."""

from __future__ import annotations

import streamlit as st

from ui.components.memo_card import render_card
from ui.state import get_context, navigate, run

_COLUMNS = 3


def render() -> None:
    """Render the memo list page."""
    ctx = get_context()
    session, memos = ctx.session, ctx.memos

    with st.spinner("Loading memos..."):
        run(memos.fetch_memos())
        run(memos.fetch_templates())

    st.title("📝 My Memos")
    st.write("Write memos with beautiful designs.")

    if session.is_authenticated:
        label = "✏️ New memo"
    else:
        label = "🔒 Log in to write a memo"
    if st.button(label, type="primary"):
        navigate("create" if session.is_authenticated else "login")

    if memos.error:
        # Cached data stays on screen; the failure is informational only
        st.caption(f"⚠️ {memos.error}. Showing the last loaded memos.")

    if not memos.memos:
        _render_empty(session.is_authenticated)
        return

    for day, day_memos in memos.get_memos_by_date().items():
        st.subheader(day)
        cols = st.columns(_COLUMNS)
        for i, memo in enumerate(day_memos):
            with cols[i % _COLUMNS]:
                render_card(memo, memos.template_for(memo), memos.locale, memos.tz)
                if st.button("Open", key=f"open_{memo.id}", use_container_width=True):
                    st.session_state.selected_memo_id = memo.id
                    navigate("detail")


def _render_empty(authenticated: bool) -> None:
    st.markdown("### 📝 No memos yet")
    st.write("Write your first memo!")
    if not authenticated and st.button("Log in", key="empty_login"):
        navigate("login")
