"""Memo card and detail rendering styled with the memo's template."""

from __future__ import annotations

import html
from datetime import tzinfo
from typing import Optional

import streamlit as st

from memo_app.memo_store import format_card_date, format_detail_date, truncate_content
from memo_app.models import Memo, Template

_FALLBACK_STYLE = (
    "background-color:#ffffff;color:#333333;"
    "border:1px solid #e0e0e0;box-shadow:0 2px 8px rgba(0,0,0,0.1);"
)


def _style(template: Optional[Template]) -> str:
    if template is None:
        return _FALLBACK_STYLE
    style = (
        f"background-color:{template.background_color};"
        f"color:{template.text_color};"
        f"border:{template.border_style};"
        f"box-shadow:{template.shadow_style};"
    )
    return html.escape(style, quote=True)


def _paragraphs(text: str) -> str:
    return html.escape(text).replace("\n", "<br>")


def render_card(
    memo: Memo, template: Optional[Template], locale: str, tz: tzinfo
) -> None:
    """Compact card used on the list page."""
    name = html.escape(template.name) if template else ""
    preview = html.escape(template.preview) if template else ""
    # Joined without newlines: indented HTML renders as a markdown code block
    parts = [
        f'<div style="{_style(template)}border-radius:12px;'
        'padding:16px;margin-bottom:8px;">',
        '<div style="display:flex;justify-content:space-between;gap:8px;">',
        f"<strong>{html.escape(memo.title)}</strong>",
        f"<small>{format_card_date(memo.created_at, locale, tz)}</small>",
        "</div>",
        f'<p style="margin:12px 0;">{_paragraphs(truncate_content(memo.content))}</p>',
        '<div style="display:flex;justify-content:space-between;opacity:0.8;">',
        f"<small>{name}</small><span>{preview}</span>",
        "</div></div>",
    ]
    st.markdown("".join(parts), unsafe_allow_html=True)


def render_detail(
    memo: Memo, template: Optional[Template], locale: str, tz: tzinfo
) -> None:
    """Full memo body used on the detail page."""
    parts = [
        f'<div style="{_style(template)}border-radius:16px;padding:32px;">',
        f'<h2 style="margin-top:0;color:inherit;">{html.escape(memo.title)}</h2>',
        f"<small>{format_detail_date(memo.created_at, locale, tz)}</small>",
        f'<p style="margin-top:24px;line-height:1.7;">{_paragraphs(memo.content)}</p>',
        "</div>",
    ]
    st.markdown("".join(parts), unsafe_allow_html=True)
    if template is not None:
        st.caption(f"{template.preview} {template.name}")


def render_preview(title: str, content: str, template: Optional[Template]) -> None:
    """Unsaved memo rendered with the selected template."""
    parts = [
        f'<div style="{_style(template)}border-radius:12px;padding:16px;">',
        f"<strong>{html.escape(title or 'Title')}</strong>",
        f'<p style="margin-top:12px;">{_paragraphs(content or "Content")}</p>',
        "</div>",
    ]
    st.markdown("".join(parts), unsafe_allow_html=True)
