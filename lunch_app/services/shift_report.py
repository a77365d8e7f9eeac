"""Kitchen report for one serve date: shifts, users, item counts and totals."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date
from typing import Any

from lunch_app.services.grouping import ShiftUserGroup, group_by_shift_then_user, summarize_items
from lunch_app.services.totals import OrderTotals, calculate_aggregate_totals, order_lines

SHIFT_LABELS: dict[str, str] = {
    "morning": "Morning Shift",
    "afternoon": "Afternoon Shift",
    "night": "Night Shift",
    "unknown": "No Shift",
}


@dataclass
class ShiftSection:
    shift: str
    users: list[ShiftUserGroup]
    item_summary: dict[str, int]
    totals: OrderTotals

    @property
    def label(self) -> str:
        return SHIFT_LABELS.get(self.shift, self.shift.title())

    @property
    def order_count(self) -> int:
        return sum(len(group.orders) for group in self.users)


@dataclass
class ShiftReport:
    serve_date: date
    sections: list[ShiftSection]
    totals: OrderTotals

    @property
    def is_empty(self) -> bool:
        return all(section.order_count == 0 for section in self.sections)


def user_totals(group: ShiftUserGroup) -> OrderTotals:
    return calculate_aggregate_totals(order_lines(group.orders))


def build_shift_report(orders: Iterable[Any], serve_date: date) -> ShiftReport:
    """Group a serve date's orders by shift and user and total each level."""
    orders = list(orders)
    grouped = group_by_shift_then_user(orders, serve_date)

    sections: list[ShiftSection] = []
    all_orders: list[Any] = []
    for shift, users in grouped.items():
        shift_orders = [order for group in users.values() for order in group.orders]
        all_orders.extend(shift_orders)
        sections.append(
            ShiftSection(
                shift=shift,
                users=list(users.values()),
                item_summary=summarize_items(users),
                totals=calculate_aggregate_totals(order_lines(shift_orders)),
            )
        )

    return ShiftReport(
        serve_date=serve_date,
        sections=sections,
        totals=calculate_aggregate_totals(order_lines(all_orders)),
    )
