"""Conversions from ORM rows and core results to response schemas."""

from __future__ import annotations

from datetime import datetime

from lunch_app.models.menu import MenuItem
from lunch_app.models.order import Order
from lunch_app.schemas.menu import MenuDateGroupResponse, MenuEntryResponse, MenuItemResponse
from lunch_app.schemas.order import (
    AdminOrderResponse,
    MonthBucketResponse,
    OrderDateGroupResponse,
    OrderLineResponse,
    OrderProfileSummary,
    TotalsResponse,
)
from lunch_app.services.grouping import DateGroup, MonthBucket
from lunch_app.services.order_window import can_edit_order, can_modify, evaluate_deadline
from lunch_app.services.totals import OrderTotals, calculate_line_totals


def serialize_totals(totals: OrderTotals) -> TotalsResponse:
    return TotalsResponse(**totals.as_strings())


def serialize_menu_item(item: MenuItem) -> MenuItemResponse:
    return MenuItemResponse.model_validate(item)


def serialize_menu_entry(item: MenuItem, now: datetime) -> MenuEntryResponse:
    state = evaluate_deadline(item.order_deadline, now)
    return MenuEntryResponse(
        **serialize_menu_item(item).model_dump(),
        deadline_state=state,
        deadline_color=state.color,
        can_order=item.is_active and can_modify(item, now),
    )


def serialize_menu_group(group: DateGroup, now: datetime) -> MenuDateGroupResponse:
    state = evaluate_deadline(group.shared_deadline, now)
    return MenuDateGroupResponse(
        date_key=group.date_key,
        serve_date=group.serve_date,
        shared_deadline=group.shared_deadline,
        deadline_state=state,
        deadline_color=state.color,
        items=[serialize_menu_entry(item, now) for item in group.items],
    )


def _order_fields(order: Order, now: datetime) -> dict:
    item = order.menu_item
    return {
        "id": order.id,
        "menu_item_id": order.menu_item_id,
        "quantity": order.quantity,
        "unit_price": order.unit_price,
        "status": order.status,
        "created_at": order.created_at,
        "can_modify": item is not None and can_edit_order(item, now),
        "totals": serialize_totals(calculate_line_totals(order.quantity, order.unit_price)),
        "item": serialize_menu_item(item) if item is not None else None,
    }


def serialize_order(order: Order, now: datetime) -> OrderLineResponse:
    return OrderLineResponse(**_order_fields(order, now))


def serialize_admin_order(order: Order, now: datetime) -> AdminOrderResponse:
    profile = order.profile
    return AdminOrderResponse(
        **_order_fields(order, now),
        user_id=order.user_id,
        profile=(
            OrderProfileSummary(
                first_name=profile.first_name,
                last_name=profile.last_name,
                shift_type=profile.shift_type,
            )
            if profile is not None
            else None
        ),
    )


def serialize_order_group(group: DateGroup, now: datetime) -> OrderDateGroupResponse:
    return OrderDateGroupResponse(
        date_key=group.date_key,
        serve_date=group.serve_date,
        orders=[serialize_order(order, now) for order in group.items],
    )


def serialize_month_bucket(bucket: MonthBucket, now: datetime) -> MonthBucketResponse:
    return MonthBucketResponse(
        key=bucket.key,
        label=bucket.label,
        count=bucket.count,
        range=bucket.range,
        orders=[serialize_order(order, now) for order in bucket.orders],
    )
