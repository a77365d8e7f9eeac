"""Order window rules: deadline urgency, menu visibility and quantity limits.

Every function takes the current instant as an argument so results depend only
on their inputs; callers read the clock once per request.
"""

from __future__ import annotations

import enum
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Protocol

from lunch_app.core.config import settings
from lunch_app.utils.time import end_of_local_day, ensure_aware, local_today

UNSCHEDULED: str = "unscheduled"


class DeadlineState(str, enum.Enum):
    """Urgency band of an item's order deadline."""

    NO_DEADLINE = "no_deadline"
    EXPIRED = "expired"
    URGENT = "urgent"
    SOON = "soon"
    OPEN = "open"

    @property
    def color(self) -> str:
        return _STATE_COLORS[self]


_STATE_COLORS: dict[DeadlineState, str] = {
    DeadlineState.NO_DEADLINE: "muted",
    DeadlineState.EXPIRED: "closed",
    DeadlineState.URGENT: "red",
    DeadlineState.SOON: "orange",
    DeadlineState.OPEN: "green",
}


class ScheduledItem(Protocol):
    is_active: bool
    serve_date: Any
    order_deadline: Any


def parse_serve_date(value: date | str | None) -> date | None:
    """Return a calendar date, or None for missing/malformed input."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip()[:10])
    except ValueError:
        return None


def parse_deadline(value: datetime | str | None) -> datetime | None:
    """Return an aware timestamp, or None for missing/malformed input."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return ensure_aware(value)
    raw = str(value).strip()
    if raw.endswith("Z"):
        raw = raw[:-1] + "+00:00"
    try:
        return ensure_aware(datetime.fromisoformat(raw))
    except ValueError:
        return None


def evaluate_deadline(deadline: datetime | str | None, now: datetime) -> DeadlineState:
    """Classify the order window for ``deadline`` as seen at ``now``."""
    parsed = parse_deadline(deadline)
    if parsed is None:
        return DeadlineState.NO_DEADLINE

    now = ensure_aware(now)
    if now >= parsed:
        return DeadlineState.EXPIRED

    hours_remaining = (parsed - now).total_seconds() / 3600
    if hours_remaining <= settings.urgent_hours:
        return DeadlineState.URGENT
    if hours_remaining <= settings.soon_hours:
        return DeadlineState.SOON
    return DeadlineState.OPEN


def is_expired(deadline: datetime | str | None, now: datetime) -> bool:
    return evaluate_deadline(deadline, now) is DeadlineState.EXPIRED


def can_modify(item: ScheduledItem, now: datetime) -> bool:
    """Orders for an item can be placed until its deadline."""
    return not is_expired(item.order_deadline, now)


def is_visible(item: ScheduledItem, now: datetime) -> bool:
    """Return whether a menu item still shows in the ordering menu.

    Archived items never show. Unscheduled items always show. Otherwise an item
    stays listed until its deadline passes, and after that until the end of
    its serve day so diners can still see what is being served; only ordering
    is disabled.
    """
    if not item.is_active:
        return False

    serve_date = parse_serve_date(item.serve_date)
    if serve_date is None:
        return True

    if not is_expired(item.order_deadline, now):
        return True
    return ensure_aware(now) < end_of_local_day(serve_date)


def is_past_item(item: ScheduledItem, today: date) -> bool:
    """Classify an ordered item for order history (active vs past)."""
    serve_date = parse_serve_date(item.serve_date)
    return not item.is_active or serve_date is None or serve_date < today


def can_edit_order(item: ScheduledItem, now: datetime) -> bool:
    """Whether an existing order for ``item`` may still be edited or deleted.

    Orders in the past part of the history are read-only: archived items,
    unscheduled items and serve dates before today, even without a deadline.
    """
    return not is_past_item(item, local_today(now)) and can_modify(item, now)


def clamp_quantity(value: Any) -> int:
    """Clamp a requested quantity into the allowed range."""
    if isinstance(value, bool):
        return settings.min_quantity
    try:
        quantity = int(Decimal(str(value).strip()))
    except (InvalidOperation, ValueError, OverflowError):
        return settings.min_quantity
    return max(settings.min_quantity, min(settings.max_quantity, quantity))
