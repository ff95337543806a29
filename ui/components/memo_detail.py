"""Memo detail page. Looks the memo up in the cached collection only."""

from __future__ import annotations

import streamlit as st

from ui.components.memo_card import render_detail
from ui.state import get_context, navigate, run


def render() -> None:
    """Render the detail page for the selected memo."""
    ctx = get_context()
    memos = ctx.memos

    if not memos.templates:
        run(memos.fetch_templates())

    if st.button("← Back to list"):
        navigate("list")

    memo_id = st.session_state.get("selected_memo_id") or st.query_params.get("id")
    memo = memos.get_memo_by_id(memo_id) if memo_id else None
    if memo is None:
        st.header("Memo not found")
        return

    st.title("Memo details")
    render_detail(memo, memos.template_for(memo), memos.locale, memos.tz)
