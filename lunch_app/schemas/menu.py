"""Menu API schemas."""

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from lunch_app.services.order_window import DeadlineState
from lunch_app.utils.time import assume_local, end_of_local_day, ensure_aware


class MenuItemPayload(BaseModel):
    """Admin payload for creating or replacing a menu item."""

    title: str = Field(min_length=2, max_length=255)
    description: str | None = None
    price: Decimal = Field(gt=0, max_digits=10, decimal_places=2)
    serve_date: date | None = None
    order_deadline: datetime | None = None
    image_url: str | None = Field(default=None, max_length=500)
    is_active: bool = True

    @field_validator("title")
    @classmethod
    def strip_title(cls, value: str) -> str:
        value = value.strip()
        if len(value) < 2:
            raise ValueError("Title is required (min 2 characters).")
        return value

    @field_validator("order_deadline")
    @classmethod
    def localize_deadline(cls, value: datetime | None) -> datetime | None:
        return assume_local(value) if value is not None else None

    @model_validator(mode="after")
    def deadline_before_serve_day_ends(self) -> "MenuItemPayload":
        if self.serve_date is not None and self.order_deadline is not None:
            if self.order_deadline > end_of_local_day(self.serve_date):
                raise ValueError("Deadline must be before the end of the serve date.")
        return self


class MenuItemResponse(BaseModel):
    """Serialized menu item."""

    id: int
    title: str
    description: str | None
    price: Decimal
    serve_date: date | None
    order_deadline: datetime | None
    image_url: str | None
    is_active: bool

    model_config = ConfigDict(from_attributes=True)

    @field_validator("order_deadline")
    @classmethod
    def as_utc(cls, value: datetime | None) -> datetime | None:
        return ensure_aware(value) if value is not None else None


class MenuEntryResponse(MenuItemResponse):
    """Menu item with its order window classification."""

    deadline_state: DeadlineState
    deadline_color: str
    can_order: bool


class MenuDateGroupResponse(BaseModel):
    """Menu items served on the same date."""

    date_key: str
    serve_date: date | None
    shared_deadline: datetime | None
    deadline_state: DeadlineState
    deadline_color: str
    items: list[MenuEntryResponse]


class MenuResponse(BaseModel):
    """Diner-facing menu."""

    generated_at: datetime
    refresh_interval_seconds: int
    groups: list[MenuDateGroupResponse]
