"""Session Store: the authenticated identity held client-side.

States::

    anonymous --login/register--> authenticating --success--> authenticated
    authenticating --failure--> anonymous
    authenticated --logout--> anonymous            (local teardown always)
    anonymous --restore_from_snapshot--> authenticated

The store also listens for ``AUTHORIZATION_EXPIRED`` on the event bus, so a
401 from any gateway call logs the whole client out.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Optional

from memo_app.errors import GatewayError
from memo_app.events import AUTHORIZATION_EXPIRED, EventBus, Observable
from memo_app.gateway import Gateway
from memo_app.metrics import SESSION_TEARDOWNS, STORE_ERRORS
from memo_app.models import AuthResult, LoginData, RegisterData, User
from memo_app.persistence import SessionSnapshot

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    ANONYMOUS = "anonymous"
    AUTHENTICATING = "authenticating"
    AUTHENTICATED = "authenticated"


class SessionStore(Observable):
    """Holds the current user and the in-flight flag."""

    def __init__(
        self, gateway: Gateway, snapshot: SessionSnapshot, bus: EventBus
    ) -> None:
        super().__init__()
        self._gateway = gateway
        self._snapshot = snapshot
        self.user: Optional[User] = None
        self.is_authenticated = False
        self.is_loading = False
        bus.subscribe(AUTHORIZATION_EXPIRED, self._on_authorization_expired)

    @property
    def state(self) -> SessionState:
        if self.user is not None:
            return SessionState.AUTHENTICATED
        if self.is_loading:
            return SessionState.AUTHENTICATING
        return SessionState.ANONYMOUS

    async def login(self, credential: LoginData) -> bool:
        """Log in. Returns False instead of raising."""
        self._set_loading(True)
        try:
            result = await self._gateway.login(credential)
            await self._establish(result)
        except GatewayError as e:
            logger.warning("Login failed for %s: %s", credential.username, e)
            self._record_failure("login")
            return False
        except Exception:
            logger.exception("Unexpected login failure for %s", credential.username)
            self._record_failure("login")
            return False
        finally:
            self._set_loading(False)
        logger.info("Logged in as %s", result.user.username)
        return True

    async def register(self, profile: RegisterData) -> bool:
        """Register and log in. Returns False instead of raising."""
        self._set_loading(True)
        try:
            result = await self._gateway.register(profile)
            await self._establish(result)
        except GatewayError as e:
            logger.warning("Registration failed for %s: %s", profile.username, e)
            self._record_failure("register")
            return False
        except Exception:
            logger.exception(
                "Unexpected registration failure for %s", profile.username
            )
            self._record_failure("register")
            return False
        finally:
            self._set_loading(False)
        logger.info("Registered %s (id=%s)", result.user.username, result.user.id)
        return True

    async def logout(self) -> None:
        """Log out remotely if possible; local teardown is unconditional."""
        self._set_loading(True)
        try:
            await self._gateway.logout()
        except GatewayError as e:
            logger.warning("Remote logout failed, clearing local session anyway: %s", e)
        finally:
            # A 401 on logout has already torn the session down via the bus
            if self.is_authenticated:
                await self._teardown("logout")
            else:
                await self._snapshot.clear()
                self._set_loading(False)

    async def restore_from_snapshot(self) -> bool:
        """Adopt the persisted identity, if a valid one exists."""
        restored = await self._snapshot.load()
        if restored is None:
            return False
        user, _token = restored
        self.adopt_user(user)
        logger.info("Restored session for %s", user.username)
        return True

    def adopt_user(self, user: User) -> None:
        """Inject an already-authenticated user."""
        self.user = user
        self.is_authenticated = True
        self._notify()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _establish(self, result: AuthResult) -> None:
        await self._snapshot.save(result.user, result.token)
        self.user = result.user
        self.is_authenticated = True
        self._notify()

    def _record_failure(self, operation: str) -> None:
        STORE_ERRORS.labels(store="session", operation=operation).inc()

    async def _teardown(self, reason: str) -> None:
        self.user = None
        self.is_authenticated = False
        self.is_loading = False
        await self._snapshot.clear()
        SESSION_TEARDOWNS.labels(reason=reason).inc()
        self._notify()

    async def _on_authorization_expired(self, source: str = "") -> None:
        logger.warning(
            "Authorization expired (via %s), logging out", source or "unknown"
        )
        await self._teardown("authorization_expired")

    def _set_loading(self, value: bool) -> None:
        self.is_loading = value
        self._notify()
