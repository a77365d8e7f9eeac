"""Schema exports."""

from lunch_app.schemas.auth import LoginRequest, TokenResponse
from lunch_app.schemas.menu import (
    MenuDateGroupResponse,
    MenuEntryResponse,
    MenuItemPayload,
    MenuItemResponse,
    MenuResponse,
)
from lunch_app.schemas.order import (
    AdminDayResponse,
    AdminOrderResponse,
    MenuItemDetailResponse,
    MonthBucketResponse,
    MyOrdersResponse,
    OrderDateGroupResponse,
    OrderLineResponse,
    OrderPlacedResponse,
    OrderQuantityPayload,
    ShiftReportResponse,
    ShiftSectionResponse,
    ShiftUserResponse,
    TotalsResponse,
)
from lunch_app.schemas.profile import AdminProfileUpdate, ProfileDirectoryResponse, ProfileResponse, ProfileUpdate

__all__ = [
    "LoginRequest",
    "TokenResponse",
    "MenuDateGroupResponse",
    "MenuEntryResponse",
    "MenuItemPayload",
    "MenuItemResponse",
    "MenuResponse",
    "AdminDayResponse",
    "AdminOrderResponse",
    "MenuItemDetailResponse",
    "MonthBucketResponse",
    "MyOrdersResponse",
    "OrderDateGroupResponse",
    "OrderLineResponse",
    "OrderPlacedResponse",
    "OrderQuantityPayload",
    "ShiftReportResponse",
    "ShiftSectionResponse",
    "ShiftUserResponse",
    "TotalsResponse",
    "AdminProfileUpdate",
    "ProfileDirectoryResponse",
    "ProfileResponse",
    "ProfileUpdate",
]
