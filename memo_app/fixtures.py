"""Seed data served by the gateway in fixture mode."""

from __future__ import annotations

from memo_app.models import Memo, Template

SEED_TEMPLATES: list[dict[str, str]] = [
    {
        "id": "1",
        "name": "Classic White",
        "backgroundColor": "#ffffff",
        "textColor": "#333333",
        "borderStyle": "1px solid #e0e0e0",
        "shadowStyle": "0 2px 8px rgba(0,0,0,0.1)",
        "preview": "🎨",
    },
    {
        "id": "2",
        "name": "Dark Theme",
        "backgroundColor": "#2c3e50",
        "textColor": "#ecf0f1",
        "borderStyle": "1px solid #34495e",
        "shadowStyle": "0 4px 12px rgba(0,0,0,0.3)",
        "preview": "🌙",
    },
    {
        "id": "3",
        "name": "Warm Beige",
        "backgroundColor": "#f5f5dc",
        "textColor": "#8b4513",
        "borderStyle": "2px solid #d2b48c",
        "shadowStyle": "0 3px 10px rgba(139,69,19,0.2)",
        "preview": "☕",
    },
    {
        "id": "4",
        "name": "Ocean Blue",
        "backgroundColor": "#e8f4f8",
        "textColor": "#2c3e50",
        "borderStyle": "1px solid #3498db",
        "shadowStyle": "0 2px 8px rgba(52,152,219,0.2)",
        "preview": "🌊",
    },
]

SEED_MEMOS: list[dict[str, str]] = [
    {
        "id": "1",
        "title": "Welcome to Memo App",
        "content": (
            "This is your first memo. Start creating beautiful notes "
            "with our design templates!"
        ),
        "templateId": "1",
        "userId": "1",
        "createdAt": "2024-01-15T10:00:00Z",
        "updatedAt": "2024-01-15T10:00:00Z",
    },
    {
        "id": "2",
        "title": "Shopping List",
        "content": "1. Groceries\n2. Home supplies\n3. Books\n4. Electronics",
        "templateId": "2",
        "userId": "1",
        "createdAt": "2024-01-14T15:30:00Z",
        "updatedAt": "2024-01-14T15:30:00Z",
    },
    {
        "id": "3",
        "title": "Meeting Notes",
        "content": (
            "Team meeting discussion points:\n- Project timeline\n"
            "- Resource allocation\n- Next steps"
        ),
        "templateId": "3",
        "userId": "1",
        "createdAt": "2024-01-13T09:15:00Z",
        "updatedAt": "2024-01-13T09:15:00Z",
    },
]


def seed_templates() -> list[Template]:
    """Fresh Template objects for a new fixture set."""
    return [Template.model_validate(t) for t in SEED_TEMPLATES]


def seed_memos() -> list[Memo]:
    """Fresh Memo objects for a new fixture set."""
    return [Memo.model_validate(m) for m in SEED_MEMOS]
