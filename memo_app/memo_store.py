"""Memo Store: cached memos and templates plus the views derived from them."""

from __future__ import annotations

import logging
from datetime import UTC, date, datetime, tzinfo
from typing import Iterable, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from memo_app.errors import GatewayError
from memo_app.events import Observable
from memo_app.gateway import Gateway
from memo_app.metrics import STORE_ERRORS
from memo_app.models import CreateMemoData, Memo, Template

logger = logging.getLogger(__name__)

DEFAULT_LOCALE = "ko-KR"
PREVIEW_LENGTH = 100

_MONTHS = [
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
]


class MemoStore(Observable):
    """Holds the memo and template collections fetched through the gateway."""

    def __init__(
        self,
        gateway: Gateway,
        locale: str = DEFAULT_LOCALE,
        tz: tzinfo = UTC,
    ) -> None:
        super().__init__()
        self._gateway = gateway
        self.locale = locale
        self.tz = tz
        self.memos: list[Memo] = []
        self.templates: list[Template] = []
        self.is_loading = False
        self.error: Optional[str] = None

    async def fetch_memos(self) -> None:
        """Replace the memo collection. On failure keep the previous one."""
        self._begin()
        try:
            memos = await self._gateway.list_memos()
        except GatewayError as e:
            self._fail("fetch_memos", "Failed to fetch memos", e)
            return
        self.memos = list(memos)
        logger.info("Memo store holds %d memos", len(self.memos))
        self._finish()

    async def fetch_templates(self) -> None:
        """Replace the template collection. On failure keep the previous one."""
        self._begin()
        try:
            templates = await self._gateway.list_templates()
        except GatewayError as e:
            self._fail("fetch_templates", "Failed to fetch templates", e)
            return
        self.templates = list(templates)
        self._finish()

    async def create_memo(self, data: CreateMemoData) -> Optional[Memo]:
        """Create a memo and prepend it. Returns None on failure."""
        self._begin()
        try:
            memo = await self._gateway.create_memo(data)
        except GatewayError as e:
            self._fail("create_memo", "Failed to create memo", e)
            return None
        self.memos = [memo, *self.memos]
        self._finish()
        return memo

    def get_memo_by_id(self, memo_id: str) -> Optional[Memo]:
        """Look a memo up in the cached collection; never fetches."""
        wanted = str(memo_id)
        return next((m for m in self.memos if m.id == wanted), None)

    def get_memos_by_date(self) -> dict[str, list[Memo]]:
        """Cached memos grouped by calendar day, newest day first."""
        return group_memos_by_date(self.memos, self.locale, self.tz)

    def template_for(self, memo: Memo) -> Optional[Template]:
        """The memo's template, or the first template if the id is unknown."""
        for template in self.templates:
            if template.id == memo.template_id:
                return template
        return self.templates[0] if self.templates else None

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _begin(self) -> None:
        self.is_loading = True
        self.error = None
        self._notify()

    def _finish(self) -> None:
        self.is_loading = False
        self._notify()

    def _fail(self, operation: str, message: str, exc: Exception) -> None:
        logger.error("%s: %s", message, exc)
        STORE_ERRORS.labels(store="memo", operation=operation).inc()
        self.error = message
        self.is_loading = False
        self._notify()


# ---------------------------------------------------------------------------
# Grouping and display formatting
# ---------------------------------------------------------------------------


def resolve_timezone(name: str) -> tzinfo:
    """ZoneInfo for ``name``; UTC when the zone is unknown."""
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as e:
        logger.warning("Unknown timezone %r, using UTC: %s", name, e)
        return UTC


def _language(locale: str) -> str:
    return locale.replace("_", "-").split("-")[0].lower()


def format_day(moment: datetime, locale: str = DEFAULT_LOCALE) -> str:
    """Year-month-day label, e.g. ``2024년 1월 15일`` or ``January 15, 2024``."""
    lang = _language(locale)
    if lang == "ko":
        return f"{moment.year}년 {moment.month}월 {moment.day}일"
    if lang == "en":
        return f"{_MONTHS[moment.month - 1]} {moment.day}, {moment.year}"
    return moment.date().isoformat()


def _clock(moment: datetime, lang: str) -> str:
    hour = moment.hour % 12 or 12
    if lang == "ko":
        meridiem = "오전" if moment.hour < 12 else "오후"
        return f"{meridiem} {hour:02d}:{moment.minute:02d}"
    meridiem = "AM" if moment.hour < 12 else "PM"
    return f"{hour:02d}:{moment.minute:02d} {meridiem}"


def format_card_date(
    moment: datetime, locale: str = DEFAULT_LOCALE, tz: tzinfo = UTC
) -> str:
    """Short month/day/time label shown on memo cards."""
    local = moment.astimezone(tz)
    lang = _language(locale)
    if lang == "ko":
        return f"{local.month}월 {local.day}일 {_clock(local, lang)}"
    if lang == "en":
        return f"{_MONTHS[local.month - 1][:3]} {local.day}, {_clock(local, lang)}"
    return local.strftime("%m-%d %H:%M")


def format_detail_date(
    moment: datetime, locale: str = DEFAULT_LOCALE, tz: tzinfo = UTC
) -> str:
    """Full date and time label shown on the detail page."""
    local = moment.astimezone(tz)
    lang = _language(locale)
    if lang in ("ko", "en"):
        return f"{format_day(local, locale)} {_clock(local, lang)}"
    return local.strftime("%Y-%m-%d %H:%M")


def truncate_content(content: str, max_length: int = PREVIEW_LENGTH) -> str:
    if len(content) <= max_length:
        return content
    return content[:max_length] + "..."


def group_memos_by_date(
    memos: Iterable[Memo],
    locale: str = DEFAULT_LOCALE,
    tz: tzinfo = UTC,
) -> dict[str, list[Memo]]:
    """Bucket memos by the local calendar day of ``created_at``.

    Keys are locale-formatted day labels ordered newest day first. Memos
    inside a bucket keep their collection order; they are not re-sorted.
    """
    buckets: dict[str, list[Memo]] = {}
    days: dict[str, date] = {}
    for memo in memos:
        local = memo.created_at.astimezone(tz)
        key = format_day(local, locale)
        buckets.setdefault(key, []).append(memo)
        days.setdefault(key, local.date())

    ordered = sorted(buckets, key=lambda k: days[k], reverse=True)
    return {key: buckets[key] for key in ordered}
