"""Order API schemas."""

from datetime import date, datetime
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, field_validator

from lunch_app.schemas.menu import MenuEntryResponse, MenuItemResponse
from lunch_app.services.order_window import clamp_quantity


class OrderQuantityPayload(BaseModel):
    """Requested quantity; out-of-range values are clamped, not rejected."""

    quantity: int = 1

    @field_validator("quantity", mode="before")
    @classmethod
    def clamp(cls, value: Any) -> int:
        return clamp_quantity(value)


class TotalsResponse(BaseModel):
    """Two-decimal money strings."""

    subtotal: str
    tax: str
    total: str


class OrderLineResponse(BaseModel):
    """Serialized order with its totals."""

    id: int
    menu_item_id: int
    quantity: int
    unit_price: Decimal
    status: str
    created_at: datetime
    can_modify: bool
    totals: TotalsResponse
    item: MenuItemResponse | None = None


class OrderPlacedResponse(BaseModel):
    created: bool
    order: OrderLineResponse


class MenuItemDetailResponse(BaseModel):
    """Menu item page: the item, its window and the caller's current order."""

    item: MenuEntryResponse
    existing_order: OrderLineResponse | None
    preview_totals: TotalsResponse


class OrderDateGroupResponse(BaseModel):
    date_key: str
    serve_date: date | None
    orders: list[OrderLineResponse]


class MonthBucketResponse(BaseModel):
    key: str
    label: str
    count: int
    range: str | None
    orders: list[OrderLineResponse]


class MyOrdersResponse(BaseModel):
    """A user's order history split into upcoming and past."""

    active: list[OrderDateGroupResponse]
    past: list[MonthBucketResponse]


class OrderProfileSummary(BaseModel):
    first_name: str | None = None
    last_name: str | None = None
    shift_type: str | None = None


class AdminOrderResponse(OrderLineResponse):
    user_id: int
    profile: OrderProfileSummary | None = None


class AdminDayResponse(BaseModel):
    """All orders for one serve date with the day's aggregate totals."""

    date_key: str
    serve_date: date | None
    order_count: int
    totals: TotalsResponse
    orders: list[AdminOrderResponse]


class ShiftUserResponse(BaseModel):
    user_id: int
    name: str
    orders: list[AdminOrderResponse]
    totals: TotalsResponse


class ShiftSectionResponse(BaseModel):
    shift: str
    label: str
    users: list[ShiftUserResponse]
    item_summary: dict[str, int]
    totals: TotalsResponse


class ShiftReportResponse(BaseModel):
    serve_date: date
    sections: list[ShiftSectionResponse]
    totals: TotalsResponse

