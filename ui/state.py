"""Per-browser-session composition root for the Streamlit app.

Builds settings -> snapshot store -> event bus -> gateway -> stores once per
session and drives store coroutines on a session-owned event loop.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, TypeVar

import streamlit as st

from memo_app.config import Settings, settings
from memo_app.events import AUTHORIZATION_EXPIRED, EventBus
from memo_app.gateway import Gateway, create_gateway
from memo_app.memo_store import MemoStore, resolve_timezone
from memo_app.persistence import SessionSnapshot, create_store
from memo_app.session_store import SessionStore

logger = logging.getLogger(__name__)

T = TypeVar("T")

_CONTEXT_KEY = "memo_app_context"
_PAGES_KEY = "memo_app_pages"
_REDIRECT_KEY = "memo_app_redirect_to_login"


@dataclass
class AppContext:
    """Everything a page needs: config, stores and the loop that drives them."""

    settings: Settings
    bus: EventBus
    snapshot: SessionSnapshot
    gateway: Gateway
    session: SessionStore
    memos: MemoStore
    loop: asyncio.AbstractEventLoop


def _request_login_redirect(**_: Any) -> None:
    st.session_state[_REDIRECT_KEY] = True


def _build_context() -> AppContext:
    loop = asyncio.new_event_loop()
    store = loop.run_until_complete(create_store(settings))
    snapshot = SessionSnapshot(store)
    bus = EventBus()
    gateway = create_gateway(settings, snapshot, bus)
    session = SessionStore(gateway, snapshot, bus)
    memos = MemoStore(
        gateway,
        locale=settings.date_locale,
        tz=resolve_timezone(settings.display_timezone),
    )
    # Subscribed after the session store so the session is already cleared
    bus.subscribe(AUTHORIZATION_EXPIRED, _request_login_redirect)
    ctx = AppContext(settings, bus, snapshot, gateway, session, memos, loop)
    loop.run_until_complete(session.restore_from_snapshot())
    logger.info("New browser session (gateway mode: %s)", gateway.mode)
    return ctx


def get_context() -> AppContext:
    """Return this browser session's context, creating it on first use."""
    if _CONTEXT_KEY not in st.session_state:
        st.session_state[_CONTEXT_KEY] = _build_context()
    return st.session_state[_CONTEXT_KEY]


def run(coro: Awaitable[T]) -> T:
    """Run a store coroutine to completion, then honour a pending 401 redirect."""
    ctx = get_context()
    result = ctx.loop.run_until_complete(coro)
    if st.session_state.pop(_REDIRECT_KEY, False):
        st.toast("Your session has expired. Please log in again.")
        navigate("login")
    return result


def register_pages(pages: dict[str, Any]) -> None:
    """Remember the st.Page objects so components can switch between them."""
    st.session_state[_PAGES_KEY] = pages


def navigate(name: str) -> None:
    st.switch_page(st.session_state[_PAGES_KEY][name])
