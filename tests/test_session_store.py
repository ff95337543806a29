"""Unit tests for memo_app.session_store — login, logout, restore, expiry."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from memo_app.errors import AuthError, AuthorizationExpired, NetworkError
from memo_app.events import AUTHORIZATION_EXPIRED, EventBus
from memo_app.gateway import FixtureGateway, Gateway
from memo_app.models import AuthResult, LoginData, RegisterData, User
from memo_app.persistence import (
    AUTH_FLAG_KEY,
    SNAPSHOT_KEYS,
    TOKEN_KEY,
    USER_KEY,
    InMemoryStore,
    JsonFileStore,
    SessionSnapshot,
)
from memo_app.session_store import SessionState, SessionStore

ALICE = User(id="1", username="alice", email="alice@example.com")

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _make_store(gateway: Gateway | None = None):
    """Create a SessionStore over an in-memory snapshot.

    Returns (store, kv, bus).
    """
    kv = InMemoryStore()
    bus = EventBus()
    gateway = gateway or FixtureGateway(latency_scale=0.0)
    return SessionStore(gateway, SessionSnapshot(kv), bus), kv, bus


def _mock_gateway() -> AsyncMock:
    return AsyncMock(spec=Gateway)


class TestLogin:
    @pytest.mark.asyncio
    async def test_fixture_login_authenticates(self):
        store, kv, _ = _make_store()

        ok = await store.login(LoginData(username="alice", password="x"))

        assert ok is True
        assert store.state is SessionState.AUTHENTICATED
        assert store.user == ALICE
        assert store.is_loading is False
        assert await kv.get(AUTH_FLAG_KEY) == "true"
        assert await kv.get(TOKEN_KEY) == "mock-jwt-token"

    @pytest.mark.asyncio
    async def test_rejected_login_returns_false(self):
        gateway = _mock_gateway()
        gateway.login.side_effect = AuthError("rejected")
        store, kv, _ = _make_store(gateway)

        ok = await store.login(LoginData(username="alice", password="bad"))

        assert ok is False
        assert store.state is SessionState.ANONYMOUS
        assert store.is_loading is False
        assert await kv.get(USER_KEY) is None

    @pytest.mark.asyncio
    async def test_network_failure_returns_false(self):
        gateway = _mock_gateway()
        gateway.login.side_effect = NetworkError("down")
        store, _, _ = _make_store(gateway)

        assert await store.login(LoginData(username="alice", password="x")) is False

    @pytest.mark.asyncio
    async def test_authenticating_while_in_flight(self):
        """Listeners observe the authenticating state during the call."""
        store, _, _ = _make_store()
        seen: list[SessionState] = []
        store.subscribe(lambda s: seen.append(s.state))

        await store.login(LoginData(username="alice", password="x"))

        assert seen[0] is SessionState.AUTHENTICATING
        assert seen[-1] is SessionState.AUTHENTICATED

    @pytest.mark.asyncio
    async def test_blank_username_returns_false_and_settles(self):
        store, kv, _ = _make_store()

        ok = await store.login(LoginData(username="", password="x"))

        assert ok is False
        assert store.is_loading is False
        assert store.state is SessionState.ANONYMOUS
        assert await kv.get(TOKEN_KEY) is None

    @pytest.mark.asyncio
    async def test_unexpected_error_returns_false(self):
        gateway = _mock_gateway()
        gateway.login.side_effect = RuntimeError("boom")
        store, _, _ = _make_store(gateway)

        assert await store.login(LoginData(username="alice", password="x")) is False
        assert store.is_loading is False
        assert store.state is SessionState.ANONYMOUS

    @pytest.mark.asyncio
    async def test_unwritable_snapshot_file_does_not_raise(self, tmp_path: Path):
        snapshot = SessionSnapshot(JsonFileStore(tmp_path / "missing_dir" / "s.json"))
        store = SessionStore(FixtureGateway(latency_scale=0.0), snapshot, EventBus())

        assert await store.login(LoginData(username="alice", password="x")) is True
        assert store.state is SessionState.AUTHENTICATED

        await store.logout()

        assert store.state is SessionState.ANONYMOUS
        assert store.is_loading is False


class TestRegister:
    @pytest.mark.asyncio
    async def test_fixture_register_authenticates(self):
        store, kv, _ = _make_store()

        ok = await store.register(
            RegisterData(username="carol", email="carol@mail.io", password="secret1")
        )

        assert ok is True
        assert store.user.email == "carol@mail.io"
        assert await kv.get(TOKEN_KEY) == "mock-jwt-token"

    @pytest.mark.asyncio
    async def test_conflict_returns_false(self):
        gateway = _mock_gateway()
        gateway.register.side_effect = AuthError("taken")
        store, _, _ = _make_store(gateway)

        ok = await store.register(
            RegisterData(username="carol", email="carol@mail.io", password="secret1")
        )

        assert ok is False
        assert store.state is SessionState.ANONYMOUS

    @pytest.mark.asyncio
    async def test_blank_email_returns_false_and_settles(self):
        store, _, _ = _make_store()

        ok = await store.register(
            RegisterData(username="bob", email="", password="secret1")
        )

        assert ok is False
        assert store.is_loading is False
        assert store.state is SessionState.ANONYMOUS


class TestLogout:
    @pytest.mark.asyncio
    async def test_logout_clears_state_and_snapshot(self):
        store, kv, _ = _make_store()
        await store.login(LoginData(username="alice", password="x"))

        await store.logout()

        assert store.state is SessionState.ANONYMOUS
        assert store.is_authenticated is False
        for key in SNAPSHOT_KEYS:
            assert await kv.get(key) is None

    @pytest.mark.asyncio
    async def test_remote_failure_still_clears_locally(self):
        gateway = _mock_gateway()
        gateway.login.return_value = AuthResult(user=ALICE, token="jwt")
        gateway.logout.side_effect = NetworkError("down")
        store, kv, _ = _make_store(gateway)
        await store.login(LoginData(username="alice", password="x"))

        await store.logout()

        assert store.state is SessionState.ANONYMOUS
        assert await kv.get(TOKEN_KEY) is None

    @pytest.mark.asyncio
    async def test_expired_logout_counts_one_teardown(self):
        gateway = _mock_gateway()
        gateway.login.return_value = AuthResult(user=ALICE, token="jwt")
        store, kv, bus = _make_store(gateway)
        await store.login(LoginData(username="alice", password="x"))

        async def _expire():
            await bus.publish(AUTHORIZATION_EXPIRED, source="logout")
            raise AuthorizationExpired("401")

        gateway.logout.side_effect = _expire

        with patch("memo_app.session_store.SESSION_TEARDOWNS") as teardowns:
            await store.logout()

        teardowns.labels.assert_called_once_with(reason="authorization_expired")
        assert store.state is SessionState.ANONYMOUS
        assert store.is_loading is False
        assert await kv.get(TOKEN_KEY) is None


class TestRestore:
    @pytest.mark.asyncio
    async def test_restore_valid_snapshot(self):
        store, kv, _ = _make_store()
        await SessionSnapshot(kv).save(ALICE, "jwt")

        assert await store.restore_from_snapshot() is True
        assert store.state is SessionState.AUTHENTICATED
        assert store.user == ALICE

    @pytest.mark.asyncio
    async def test_restore_corrupt_snapshot(self):
        """A corrupt snapshot never raises; the session stays anonymous."""
        store, kv, _ = _make_store()
        await kv.set(USER_KEY, "{{{")
        await kv.set(AUTH_FLAG_KEY, "true")
        await kv.set(TOKEN_KEY, "jwt")

        assert await store.restore_from_snapshot() is False
        assert store.state is SessionState.ANONYMOUS
        for key in SNAPSHOT_KEYS:
            assert await kv.get(key) is None

    @pytest.mark.asyncio
    async def test_restore_nothing(self):
        store, _, _ = _make_store()
        assert await store.restore_from_snapshot() is False
        assert store.state is SessionState.ANONYMOUS

    def test_adopt_user(self):
        store, _, _ = _make_store()
        listener = MagicMock()
        store.subscribe(listener)

        store.adopt_user(ALICE)

        assert store.state is SessionState.AUTHENTICATED
        assert store.is_authenticated is True
        listener.assert_called_once_with(store)


class TestAuthorizationExpired:
    @pytest.mark.asyncio
    async def test_event_logs_out(self):
        store, kv, bus = _make_store()
        await store.login(LoginData(username="alice", password="x"))

        await bus.publish(AUTHORIZATION_EXPIRED, source="list_memos")

        assert store.state is SessionState.ANONYMOUS
        assert await kv.get(USER_KEY) is None

    @pytest.mark.asyncio
    async def test_expiry_during_login_reports_failure(self):
        gateway = _mock_gateway()
        gateway.login.side_effect = AuthorizationExpired("401")
        store, _, _ = _make_store(gateway)

        assert await store.login(LoginData(username="alice", password="x")) is False
        assert store.state is SessionState.ANONYMOUS
