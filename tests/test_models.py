"""Unit tests for memo_app.models — wire models and their invariants."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest
from pydantic import ValidationError as SchemaError

from memo_app.models import AuthResult, CreateMemoData, LoginData, Memo, Template, User

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _memo_payload(**overrides) -> dict:
    payload = {
        "id": "1",
        "title": "T",
        "content": "C",
        "templateId": "1",
        "userId": "1",
        "createdAt": "2024-01-15T10:00:00Z",
        "updatedAt": "2024-01-15T10:00:00Z",
    }
    payload.update(overrides)
    return payload


class TestUser:
    def test_numeric_id_becomes_string(self) -> None:
        user = User.model_validate({"id": 42, "username": "bob", "email": "b@x.io"})
        assert user.id == "42"

    def test_empty_username_rejected(self) -> None:
        with pytest.raises(SchemaError):
            User(id="1", username="", email="a@b.c")

    def test_empty_email_rejected(self) -> None:
        with pytest.raises(SchemaError):
            User(id="1", username="alice", email="")

    def test_id_immutable(self) -> None:
        user = User(id="1", username="alice", email="alice@example.com")
        with pytest.raises(SchemaError):
            user.id = "2"


class TestMemo:
    def test_parses_camel_case(self) -> None:
        memo = Memo.model_validate(_memo_payload())
        assert memo.template_id == "1"
        assert memo.user_id == "1"
        assert memo.created_at == datetime(2024, 1, 15, 10, 0, tzinfo=UTC)

    def test_numeric_ids_normalised(self) -> None:
        memo = Memo.model_validate(_memo_payload(id=7, templateId=2, userId=3))
        assert (memo.id, memo.template_id, memo.user_id) == ("7", "2", "3")

    def test_naive_timestamps_assumed_utc(self) -> None:
        memo = Memo.model_validate(
            _memo_payload(createdAt="2024-01-15T10:00:00", updatedAt="2024-01-15T10:00:00")
        )
        assert memo.created_at.tzinfo is not None
        assert memo.created_at.utcoffset().total_seconds() == 0

    def test_created_after_updated_rejected(self) -> None:
        with pytest.raises(SchemaError):
            Memo.model_validate(
                _memo_payload(
                    createdAt="2024-01-16T10:00:00Z", updatedAt="2024-01-15T10:00:00Z"
                )
            )

    def test_to_wire_uses_camel_case(self) -> None:
        wire = Memo.model_validate(_memo_payload()).to_wire()
        assert wire["templateId"] == "1"
        assert "template_id" not in wire
        assert wire["createdAt"].startswith("2024-01-15T10:00:00")


class TestTemplate:
    def test_parses_style_fields(self) -> None:
        template = Template.model_validate(
            {
                "id": 1,
                "name": "Dark",
                "backgroundColor": "#000",
                "textColor": "#fff",
                "borderStyle": "none",
                "shadowStyle": "none",
                "preview": "🌙",
            }
        )
        assert template.id == "1"
        assert template.background_color == "#000"

    def test_frozen(self) -> None:
        template = Template(
            id="1",
            name="A",
            background_color="#fff",
            text_color="#000",
            border_style="none",
            shadow_style="none",
        )
        with pytest.raises(SchemaError):
            template.name = "B"


class TestRequestBodies:
    def test_create_memo_wire(self) -> None:
        data = CreateMemoData(title="T", content="C", template_id="1")
        assert data.to_wire() == {"title": "T", "content": "C", "templateId": "1"}

    def test_password_hidden_from_repr(self) -> None:
        assert "secret" not in repr(LoginData(username="alice", password="secret"))

    def test_auth_result_parses(self) -> None:
        result = AuthResult.model_validate(
            {"user": {"id": 1, "username": "a", "email": "a@b.c"}, "token": "tok"}
        )
        assert result.user.id == "1"
        assert result.token == "tok"
