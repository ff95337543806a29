"""Client-side form validation.

Runs before any gateway call. ``validate_*`` return a field -> message dict
(empty when valid); ``parse_*`` raise ValidationError or return the request
model ready for a store action.
"""

from __future__ import annotations

import re

from memo_app.errors import ValidationError
from memo_app.models import CreateMemoData, LoginData, RegisterData

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
MIN_USERNAME_LENGTH = 3
MIN_PASSWORD_LENGTH = 6


def validate_login(username: str, password: str) -> dict[str, str]:
    errors: dict[str, str] = {}
    if not username.strip():
        errors["username"] = "Please enter your username"
    if not password.strip():
        errors["password"] = "Please enter your password"
    return errors


def validate_register(
    username: str, email: str, password: str, confirm_password: str
) -> dict[str, str]:
    errors: dict[str, str] = {}

    if not username.strip():
        errors["username"] = "Please enter a username"
    elif len(username) < MIN_USERNAME_LENGTH:
        errors["username"] = (
            f"Username must be at least {MIN_USERNAME_LENGTH} characters"
        )

    if not email.strip():
        errors["email"] = "Please enter your email"
    elif not EMAIL_PATTERN.match(email):
        errors["email"] = "Please enter a valid email address"

    if not password.strip():
        errors["password"] = "Please enter a password"
    elif len(password) < MIN_PASSWORD_LENGTH:
        errors["password"] = (
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
        )

    if not confirm_password.strip():
        errors["confirm_password"] = "Please confirm your password"
    elif password != confirm_password:
        errors["confirm_password"] = "Passwords do not match"

    return errors


def validate_memo(title: str, content: str, template_id: str) -> dict[str, str]:
    errors: dict[str, str] = {}
    if not title.strip():
        errors["title"] = "Please enter a title"
    if not content.strip():
        errors["content"] = "Please enter some content"
    if not template_id:
        errors["template_id"] = "Please choose a template"
    return errors


def parse_login(username: str, password: str) -> LoginData:
    errors = validate_login(username, password)
    if errors:
        raise ValidationError(errors)
    return LoginData(username=username, password=password)


def parse_register(
    username: str, email: str, password: str, confirm_password: str
) -> RegisterData:
    errors = validate_register(username, email, password, confirm_password)
    if errors:
        raise ValidationError(errors)
    return RegisterData(username=username, email=email, password=password)


def parse_memo(title: str, content: str, template_id: str) -> CreateMemoData:
    errors = validate_memo(title, content, template_id)
    if errors:
        raise ValidationError(errors)
    return CreateMemoData(title=title, content=content, template_id=template_id)
