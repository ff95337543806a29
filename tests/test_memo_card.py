"""Tests for the template-styled memo card markup."""

from __future__ import annotations

from unittest.mock import patch

from memo_app.models import Template
from ui.components.memo_card import _style, render_preview


def _make_template(**overrides) -> Template:
    fields = {
        "id": "1",
        "name": "Classic",
        "background_color": "#ffffff",
        "text_color": "#333333",
        "border_style": "1px solid #e0e0e0",
        "shadow_style": "0 2px 8px rgba(0,0,0,0.1)",
        "preview": "📝",
    }
    fields.update(overrides)
    return Template(**fields)


class TestStyle:
    def test_plain_values_pass_through(self) -> None:
        style = _style(_make_template())

        assert "background-color:#ffffff;" in style
        assert "box-shadow:0 2px 8px rgba(0,0,0,0.1);" in style

    def test_quote_cannot_break_out_of_attribute(self) -> None:
        template = _make_template(
            background_color='red" onmouseover="alert(1)',
            border_style="<b>",
        )

        style = _style(template)

        assert '"' not in style
        assert "<" not in style
        assert "&quot;" in style

    def test_no_template_uses_fallback(self) -> None:
        assert _style(None).startswith("background-color:#ffffff;")


class TestRenderPreview:
    def test_style_attribute_stays_closed(self) -> None:
        template = _make_template(text_color='#000" data-x="1')

        with patch("ui.components.memo_card.st") as st:
            render_preview("T", "C", template)

        markup = st.markdown.call_args.args[0]
        assert 'data-x="1"' not in markup
        assert 'data-x=&quot;1&quot;' in markup
