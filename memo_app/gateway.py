"""Remote Data Gateway.

Single point of contact with the backing service. ``HttpGateway`` talks
JSON over HTTP with httpx; ``FixtureGateway`` serves an in-process seeded
record set with simulated latency when no endpoint is configured. Both
honour the same contract and raise only ``GatewayError`` subclasses.

A 401 from any HTTP call clears the persisted session and publishes
``AUTHORIZATION_EXPIRED`` on the event bus before the error is raised.
"""

from __future__ import annotations

import asyncio
import logging
import time
from abc import ABC, abstractmethod
from datetime import UTC, datetime
from typing import Any, Optional, TypeVar
from urllib.parse import quote

import httpx
from pydantic import TypeAdapter
from pydantic import ValidationError as SchemaError

from memo_app.config import Settings
from memo_app.errors import (
    AuthError,
    AuthorizationExpired,
    NetworkError,
    NotFoundError,
    ServiceError,
)
from memo_app.events import AUTHORIZATION_EXPIRED, EventBus
from memo_app.fixtures import seed_memos, seed_templates
from memo_app.metrics import GATEWAY_DURATION, GATEWAY_REQUESTS
from memo_app.models import (
    AuthResult,
    CreateMemoData,
    LoginData,
    Memo,
    RegisterData,
    Template,
    User,
)
from memo_app.persistence import SessionSnapshot

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_TIMEOUT = 600.0  # seconds
MOCK_TOKEN = "mock-jwt-token"

# Simulated round-trip per operation in fixture mode (seconds)
FIXTURE_LATENCY: dict[str, float] = {
    "login": 1.0,
    "register": 1.0,
    "logout": 0.5,
    "list_memos": 0.5,
    "create_memo": 0.8,
    "get_memo_by_id": 0.3,
    "list_templates": 0.3,
}

_AUTH_RESULT = TypeAdapter(AuthResult)
_MEMO = TypeAdapter(Memo)
_MEMO_LIST = TypeAdapter(list[Memo])
_TEMPLATE_LIST = TypeAdapter(list[Template])


class Gateway(ABC):
    """Contract shared by the HTTP and fixture gateways."""

    mode: str = ""

    @abstractmethod
    async def login(self, credential: LoginData) -> AuthResult:
        """Exchange credentials for a user and token. Raises AuthError."""

    @abstractmethod
    async def register(self, profile: RegisterData) -> AuthResult:
        """Create an account. Raises AuthError on conflict or bad data."""

    @abstractmethod
    async def logout(self) -> None:
        """End the remote session (best-effort)."""

    @abstractmethod
    async def list_memos(self) -> list[Memo]:
        """All memos visible to the current user."""

    @abstractmethod
    async def create_memo(self, data: CreateMemoData) -> Memo:
        """Create a memo; the service assigns id and timestamps."""

    @abstractmethod
    async def get_memo_by_id(self, memo_id: str) -> Memo:
        """A single memo. Raises NotFoundError."""

    @abstractmethod
    async def list_templates(self) -> list[Template]:
        """All design templates."""

    def _record(self, operation: str, outcome: str, start: float) -> None:
        elapsed = time.perf_counter() - start
        GATEWAY_REQUESTS.labels(
            operation=operation, mode=self.mode, outcome=outcome
        ).inc()
        GATEWAY_DURATION.labels(operation=operation, mode=self.mode).observe(elapsed)


# ---------------------------------------------------------------------------
# HTTP
# ---------------------------------------------------------------------------


class HttpGateway(Gateway):
    """Gateway backed by the remote JSON API."""

    mode = "http"

    def __init__(
        self,
        base_url: str,
        snapshot: SessionSnapshot,
        bus: EventBus,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._snapshot = snapshot
        self._bus = bus
        self._timeout = timeout
        self._transport = transport

    async def login(self, credential: LoginData) -> AuthResult:
        logger.info("login username=%s", credential.username)
        response = await self._request(
            "login", "POST", "/auth/login", credential.to_wire()
        )
        self._check_status(response, "login", auth=True)
        return self._parse(response, _AUTH_RESULT, "login")

    async def register(self, profile: RegisterData) -> AuthResult:
        logger.info("register username=%s", profile.username)
        response = await self._request(
            "register", "POST", "/auth/register", profile.to_wire()
        )
        self._check_status(response, "register", auth=True)
        return self._parse(response, _AUTH_RESULT, "register")

    async def logout(self) -> None:
        response = await self._request("logout", "POST", "/auth/logout")
        self._check_status(response, "logout")

    async def list_memos(self) -> list[Memo]:
        response = await self._request("list_memos", "GET", "/memos")
        self._check_status(response, "list_memos")
        memos = self._parse(response, _MEMO_LIST, "list_memos")
        logger.info("Fetched %d memos", len(memos))
        return memos

    async def create_memo(self, data: CreateMemoData) -> Memo:
        body = data.to_wire()
        user = await self._snapshot.user()
        if user is not None:
            body["userId"] = user.id
        response = await self._request("create_memo", "POST", "/memos", body)
        self._check_status(response, "create_memo")
        memo = self._parse(response, _MEMO, "create_memo")
        logger.info("Created memo %s: '%s'", memo.id, memo.title)
        return memo

    async def get_memo_by_id(self, memo_id: str) -> Memo:
        path = f"/memos/{quote(str(memo_id), safe='')}"
        response = await self._request("get_memo_by_id", "GET", path)
        self._check_status(response, "get_memo_by_id")
        return self._parse(response, _MEMO, "get_memo_by_id")

    async def list_templates(self) -> list[Template]:
        response = await self._request("list_templates", "GET", "/templates")
        self._check_status(response, "list_templates")
        return self._parse(response, _TEMPLATE_LIST, "list_templates")

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _request(
        self,
        operation: str,
        method: str,
        path: str,
        body: Optional[dict[str, Any]] = None,
    ) -> httpx.Response:
        """Send one request with the bearer token attached, if any.

        Transport failures become NetworkError. A 401 tears the session
        down and raises AuthorizationExpired.
        """
        headers = {"Content-Type": "application/json"}
        token = await self._snapshot.token()
        if token:
            headers["Authorization"] = f"Bearer {token}"

        start = time.perf_counter()
        try:
            async with httpx.AsyncClient(
                base_url=self._base_url,
                timeout=self._timeout,
                transport=self._transport,
            ) as client:
                response = await client.request(
                    method, path, json=body, headers=headers
                )
        except httpx.TimeoutException as e:
            self._record(operation, "timeout", start)
            logger.warning("%s %s timed out: %s", method, path, e)
            raise NetworkError(f"{method} {path} timed out") from e
        except httpx.HTTPError as e:
            self._record(operation, "transport_error", start)
            logger.warning("%s %s failed: %s", method, path, e)
            raise NetworkError(f"{method} {path} failed: {e}") from e

        self._record(operation, str(response.status_code), start)
        if response.status_code == httpx.codes.UNAUTHORIZED:
            await self._expire_session(operation)
            raise AuthorizationExpired(f"{method} {path} returned 401")
        return response

    async def _expire_session(self, operation: str) -> None:
        logger.warning("%s returned 401, clearing session", operation)
        await self._snapshot.clear()
        await self._bus.publish(AUTHORIZATION_EXPIRED, source=operation)

    @staticmethod
    def _check_status(
        response: httpx.Response, operation: str, auth: bool = False
    ) -> None:
        status = response.status_code
        if response.is_success:
            return
        if auth and 400 <= status < 500:
            raise AuthError(f"{operation} rejected ({status})")
        if status == httpx.codes.NOT_FOUND:
            raise NotFoundError(f"{operation}: not found")
        raise ServiceError(f"{operation} failed ({status})", status_code=status)

    @staticmethod
    def _parse(response: httpx.Response, adapter: TypeAdapter[T], operation: str) -> T:
        try:
            payload = response.json()
        except ValueError as e:
            raise ServiceError(
                f"{operation}: response is not JSON", response.status_code
            ) from e
        try:
            return adapter.validate_python(payload)
        except SchemaError as e:
            logger.error("%s: malformed response: %s", operation, e)
            raise ServiceError(
                f"{operation}: malformed response", response.status_code
            ) from e


# ---------------------------------------------------------------------------
# Fixture mode
# ---------------------------------------------------------------------------


class FixtureGateway(Gateway):
    """In-process gateway seeded with example data.

    Each instance owns its own record set; created memos are prepended so
    a later ``list_memos`` returns them first.
    """

    mode = "fixture"

    def __init__(self, latency_scale: float = 1.0) -> None:
        self._latency_scale = latency_scale
        self._memos: list[Memo] = seed_memos()
        self._templates: list[Template] = seed_templates()

    async def login(self, credential: LoginData) -> AuthResult:
        start = await self._simulate("login")
        try:
            user = User(
                id="1",
                username=credential.username,
                email=f"{credential.username}@example.com",
            )
        except SchemaError as e:
            self._record("login", "rejected", start)
            raise AuthError(
                f"login rejected: {e.error_count()} invalid field(s)"
            ) from e
        self._record("login", "ok", start)
        return AuthResult(user=user, token=MOCK_TOKEN)

    async def register(self, profile: RegisterData) -> AuthResult:
        start = await self._simulate("register")
        try:
            user = User(
                id=str(int(time.time() * 1000)),
                username=profile.username,
                email=profile.email,
            )
        except SchemaError as e:
            self._record("register", "rejected", start)
            raise AuthError(
                f"register rejected: {e.error_count()} invalid field(s)"
            ) from e
        self._record("register", "ok", start)
        return AuthResult(user=user, token=MOCK_TOKEN)

    async def logout(self) -> None:
        start = await self._simulate("logout")
        self._record("logout", "ok", start)

    async def list_memos(self) -> list[Memo]:
        start = await self._simulate("list_memos")
        self._record("list_memos", "ok", start)
        return [m.model_copy() for m in self._memos]

    async def create_memo(self, data: CreateMemoData) -> Memo:
        start = await self._simulate("create_memo")
        now = time.time()
        created = datetime.fromtimestamp(now, UTC)
        memo = Memo(
            id=self._next_id(now),
            title=data.title,
            content=data.content,
            template_id=data.template_id,
            user_id="1",
            created_at=created,
            updated_at=created,
        )
        self._memos.insert(0, memo)
        self._record("create_memo", "ok", start)
        logger.info("Fixture memo %s created: '%s'", memo.id, memo.title)
        return memo.model_copy()

    async def get_memo_by_id(self, memo_id: str) -> Memo:
        start = await self._simulate("get_memo_by_id")
        for memo in self._memos:
            if memo.id == str(memo_id):
                self._record("get_memo_by_id", "ok", start)
                return memo.model_copy()
        self._record("get_memo_by_id", "not_found", start)
        raise NotFoundError(f"Memo {memo_id} not found")

    async def list_templates(self) -> list[Template]:
        start = await self._simulate("list_templates")
        self._record("list_templates", "ok", start)
        return list(self._templates)

    async def _simulate(self, operation: str) -> float:
        """Sleep for the operation's simulated latency; return the start time."""
        start = time.perf_counter()
        delay = FIXTURE_LATENCY[operation] * self._latency_scale
        if delay > 0:
            await asyncio.sleep(delay)
        return start

    def _next_id(self, now: float) -> str:
        """Millisecond timestamp, bumped until unique in the record set."""
        taken = {m.id for m in self._memos}
        candidate = int(now * 1000)
        while str(candidate) in taken:
            candidate += 1
        return str(candidate)


def create_gateway(
    settings: Settings, snapshot: SessionSnapshot, bus: EventBus
) -> Gateway:
    """HTTP gateway when an endpoint is configured, fixture gateway otherwise."""
    if settings.fixture_mode:
        logger.info("No API endpoint configured, using fixture data")
        return FixtureGateway(latency_scale=settings.fixture_latency_scale)
    logger.info("Using API endpoint %s", settings.api_base_url)
    return HttpGateway(
        settings.api_base_url,
        snapshot,
        bus,
        timeout=settings.request_timeout,
    )
