"""Grouping of menu items and orders for menu, history and kitchen views."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any

from lunch_app.services.order_window import UNSCHEDULED, is_past_item, parse_deadline, parse_serve_date

SHIFTS: tuple[str, ...] = ("morning", "afternoon", "night")
UNKNOWN_SHIFT: str = "unknown"
UNASSIGNED_SHIFT: str = "unassigned"
UNKNOWN_ITEM_TITLE: str = "Unknown Item"


def _scheduled_item(entry: Any) -> Any | None:
    """Return the menu item behind an order, or the entry itself for menu items."""
    if hasattr(entry, "menu_item"):
        return entry.menu_item
    return entry


def _serve_date_of(entry: Any) -> date | None:
    item = _scheduled_item(entry)
    if item is None:
        return None
    return parse_serve_date(item.serve_date)


def _title_of(entry: Any) -> str:
    item = _scheduled_item(entry)
    return (item.title if item is not None else None) or ""


def serve_date_key(entry: Any) -> str:
    serve_date = _serve_date_of(entry)
    return serve_date.isoformat() if serve_date is not None else UNSCHEDULED


@dataclass
class DateGroup:
    """Entries sharing a serve date."""

    date_key: str
    items: list[Any] = field(default_factory=list)

    @property
    def serve_date(self) -> date | None:
        return None if self.date_key == UNSCHEDULED else date.fromisoformat(self.date_key)

    @property
    def shared_deadline(self) -> datetime | None:
        """First order deadline present in the group, used as the group's cut-off label."""
        for entry in self.items:
            item = _scheduled_item(entry)
            deadline = parse_deadline(item.order_deadline) if item is not None else None
            if deadline is not None:
                return deadline
        return None


def group_by_serve_date(items: Iterable[Any], sort_by_title: bool = False) -> list[DateGroup]:
    """Group menu items or orders by serve date, ascending, unscheduled last."""
    groups: dict[str, DateGroup] = {}
    for entry in items:
        key = serve_date_key(entry)
        if key not in groups:
            groups[key] = DateGroup(date_key=key)
        groups[key].items.append(entry)

    if sort_by_title:
        for group in groups.values():
            group.items.sort(key=_title_of)

    return sorted(groups.values(), key=lambda group: (group.date_key == UNSCHEDULED, group.date_key))


@dataclass
class ShiftUserGroup:
    """One user's orders inside a shift."""

    user_id: Any
    profile: Any | None
    orders: list[Any] = field(default_factory=list)


def shift_of(order: Any) -> str:
    profile = getattr(order, "profile", None)
    shift_type = getattr(profile, "shift_type", None) if profile is not None else None
    return shift_type if shift_type in SHIFTS else UNKNOWN_SHIFT


def group_by_shift_then_user(orders: Iterable[Any], serve_date: date | str) -> dict[str, dict[Any, ShiftUserGroup]]:
    """Bucket the orders served on ``serve_date`` by shift, then by user.

    The three known shifts are always present, in kitchen order. Orders whose
    user has no recognised shift go under ``unknown``, which only appears when
    needed.
    """
    target = parse_serve_date(serve_date)
    grouped: dict[str, dict[Any, ShiftUserGroup]] = {shift: {} for shift in SHIFTS}
    for order in orders:
        if target is None or _serve_date_of(order) != target:
            continue
        shift = shift_of(order)
        users = grouped.setdefault(shift, {})
        if order.user_id not in users:
            users[order.user_id] = ShiftUserGroup(user_id=order.user_id, profile=getattr(order, "profile", None))
        users[order.user_id].orders.append(order)
    return grouped


def summarize_items(shift_users: dict[Any, ShiftUserGroup]) -> dict[str, int]:
    """Total quantity per item title across every user in a shift."""
    summary: dict[str, int] = {}
    for group in shift_users.values():
        for order in group.orders:
            title = _title_of(order) or UNKNOWN_ITEM_TITLE
            summary[title] = summary.get(title, 0) + order.quantity
    return dict(sorted(summary.items()))


def split_active_and_past(orders: Iterable[Any], today: date) -> tuple[list[Any], list[Any]]:
    """Partition order history into upcoming and past, dropping orders without an item."""
    active: list[Any] = []
    past: list[Any] = []
    for order in orders:
        item = _scheduled_item(order)
        if item is None:
            continue
        (past if is_past_item(item, today) else active).append(order)

    active.sort(key=lambda order: _serve_date_of(order) or date.min)
    past.sort(key=lambda order: _serve_date_of(order) or date.min, reverse=True)
    return active, past


@dataclass
class MonthBucket:
    key: str
    orders: list[Any] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.orders)

    @property
    def label(self) -> str:
        if self.key == UNSCHEDULED:
            return "Unscheduled"
        return datetime.strptime(self.key, "%Y-%m").strftime("%B %Y")

    @property
    def range(self) -> str | None:
        dates = [d for d in (_serve_date_of(order) for order in self.orders) if d is not None]
        if dates:
            return f"{_short_day(min(dates))} – {_short_day(max(dates))}"
        if self.orders:
            return "Unscheduled"
        return None


def _short_day(value: date) -> str:
    return f"{value:%b} {value.day}"


def month_key(entry: Any) -> str:
    serve_date = _serve_date_of(entry)
    return f"{serve_date:%Y-%m}" if serve_date is not None else UNSCHEDULED


def bucket_by_month(orders: Iterable[Any]) -> list[MonthBucket]:
    """Bucket orders by serve month, most recent month first, unscheduled last."""
    buckets: dict[str, MonthBucket] = {}
    for order in orders:
        key = month_key(order)
        buckets.setdefault(key, MonthBucket(key=key)).orders.append(order)

    for bucket in buckets.values():
        bucket.orders.sort(key=lambda order: _serve_date_of(order) or date.min, reverse=True)

    dated = sorted((b for b in buckets.values() if b.key != UNSCHEDULED), key=lambda b: b.key, reverse=True)
    if UNSCHEDULED in buckets:
        dated.append(buckets[UNSCHEDULED])
    return dated


@dataclass
class ProfileDirectory:
    by_shift: dict[str, list[Any]]
    admins: list[Any]


def _name_key(profile: Any) -> tuple[str, str]:
    return ((profile.last_name or "").lower(), (profile.first_name or "").lower())


def group_profiles_by_shift(profiles: Sequence[Any]) -> ProfileDirectory:
    """Split profiles into admins and per-shift employee lists, sorted by name."""
    by_shift: dict[str, list[Any]] = {shift: [] for shift in (*SHIFTS, UNASSIGNED_SHIFT)}
    admins: list[Any] = []
    for profile in profiles:
        if profile.is_admin:
            admins.append(profile)
            continue
        shift = profile.shift_type if profile.shift_type in SHIFTS else UNASSIGNED_SHIFT
        by_shift[shift].append(profile)

    for members in by_shift.values():
        members.sort(key=_name_key)
    admins.sort(key=_name_key)
    return ProfileDirectory(by_shift=by_shift, admins=admins)
