"""Pydantic models for users, templates and memos.

Attributes are snake_case; the HTTP API speaks camelCase JSON, so every
model accepts and emits camelCase aliases.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


def _id_to_str(value: Any) -> Any:
    """Some backends send numeric ids (SQL), others strings (MongoDB)."""
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return value


class WireModel(BaseModel):
    """Base model mapping snake_case attributes to camelCase JSON."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> dict[str, Any]:
        """JSON-ready dict with camelCase keys."""
        return self.model_dump(mode="json", by_alias=True)


class User(WireModel):
    """An authenticated account."""

    model_config = ConfigDict(frozen=True)

    id: str
    username: str = Field(..., min_length=1)
    email: str = Field(..., min_length=1)

    @field_validator("id", mode="before")
    @classmethod
    def normalize_id(cls, value: Any) -> Any:
        return _id_to_str(value)


class Template(WireModel):
    """A visual style a memo can be rendered with."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    background_color: str
    text_color: str
    border_style: str
    shadow_style: str
    preview: str = ""

    @field_validator("id", mode="before")
    @classmethod
    def normalize_id(cls, value: Any) -> Any:
        return _id_to_str(value)


class Memo(WireModel):
    """A single memo as returned by the API."""

    id: str
    title: str
    content: str
    template_id: str = Field(..., description="Soft reference to a Template id")
    user_id: str = ""
    created_at: datetime
    updated_at: datetime

    @field_validator("id", "template_id", "user_id", mode="before")
    @classmethod
    def normalize_ids(cls, value: Any) -> Any:
        return _id_to_str(value)

    @field_validator("created_at", "updated_at")
    @classmethod
    def assume_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value

    @model_validator(mode="after")
    def check_timestamps(self) -> Memo:
        if self.created_at > self.updated_at:
            raise ValueError("createdAt must not be later than updatedAt")
        return self


# ---------------------------------------------------------------------------
# Request / response bodies
# ---------------------------------------------------------------------------


class LoginData(WireModel):
    """Credentials submitted by the login form."""

    username: str
    password: str = Field(..., repr=False)


class RegisterData(WireModel):
    """Profile submitted by the registration form."""

    username: str
    email: str
    password: str = Field(..., repr=False)


class CreateMemoData(WireModel):
    """Fields submitted by the create-memo form."""

    title: str
    content: str
    template_id: str


class AuthResult(WireModel):
    """Response body of login and register."""

    user: User
    token: str = Field(..., repr=False)
