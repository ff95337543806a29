"""Create-memo page: form with a template picker and live preview."""

from __future__ import annotations

import streamlit as st

from memo_app.errors import ValidationError
from memo_app.validation import parse_memo
from ui.components.memo_card import render_preview
from ui.state import get_context, navigate, run


def render() -> None:
    """Render the create-memo page. Requires a logged-in session."""
    ctx = get_context()
    session, memos = ctx.session, ctx.memos

    if not session.is_authenticated:
        navigate("login")
        return

    if not memos.templates:
        with st.spinner("Loading templates..."):
            run(memos.fetch_templates())

    st.title("✏️ New memo")
    st.write("Pick a design template and write a beautiful memo.")

    templates = {t.id: t for t in memos.templates}
    if not templates:
        st.warning("No templates available. Try again later.")
        return

    # Defaults to the first template
    template_id = st.selectbox(
        "Template",
        options=list(templates),
        format_func=lambda tid: f"{templates[tid].preview} {templates[tid].name}",
    )

    with st.form("create_memo"):
        title = st.text_input("Title", placeholder="Memo title")
        content = st.text_area("Content", placeholder="Write your memo...", height=240)
        submitted = st.form_submit_button("Save memo", type="primary")

    st.caption("Preview")
    render_preview(title, content, templates.get(template_id))

    if not submitted:
        return

    try:
        data = parse_memo(title, content, template_id or "")
    except ValidationError as e:
        for message in e.field_errors.values():
            st.error(message)
        return

    with st.spinner("Saving..."):
        memo = run(memos.create_memo(data))
    if memo is None:
        st.error(memos.error or "Failed to create memo")
        return
    st.session_state.selected_memo_id = memo.id
    navigate("detail")
