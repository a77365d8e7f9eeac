"""Diner-facing menu endpoints."""

from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from lunch_app.api.v1.serializers import serialize_menu_entry, serialize_menu_group, serialize_order, serialize_totals
from lunch_app.core.config import settings
from lunch_app.core.security import get_current_user
from lunch_app.db.session import get_db
from lunch_app.models.menu import MenuItem
from lunch_app.models.user import User
from lunch_app.schemas.menu import MenuResponse
from lunch_app.schemas.order import MenuItemDetailResponse, OrderPlacedResponse, OrderQuantityPayload
from lunch_app.services.grouping import group_by_serve_date
from lunch_app.services.menu_service import get_menu_item, list_visible_menu_items
from lunch_app.services.order_service import (
    DeadlinePassedError,
    MenuItemUnavailableError,
    get_user_order_for_item,
    place_order,
)
from lunch_app.services.totals import calculate_line_totals
from lunch_app.utils import time as time_utils

router: APIRouter = APIRouter()


def _get_item_or_404(db: Session, item_id: int) -> MenuItem:
    item: MenuItem | None = get_menu_item(db, item_id)
    if item is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Menu item not found")
    return item


@router.get("", response_model=MenuResponse)
def get_menu(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> MenuResponse:
    """Return visible menu items grouped by serve date."""
    now: datetime = time_utils.utc_now()
    items = list_visible_menu_items(db, now)
    groups = group_by_serve_date(items, sort_by_title=True)
    return MenuResponse(
        generated_at=now,
        refresh_interval_seconds=settings.refresh_interval_seconds,
        groups=[serialize_menu_group(group, now) for group in groups],
    )


@router.get("/{item_id}", response_model=MenuItemDetailResponse)
def get_menu_item_detail(
    item_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> MenuItemDetailResponse:
    """Return one item with its order window and the caller's existing order."""
    now: datetime = time_utils.utc_now()
    item = _get_item_or_404(db, item_id)
    existing = get_user_order_for_item(db, current_user.id, item.id)
    preview_quantity = existing.quantity if existing is not None else settings.min_quantity
    return MenuItemDetailResponse(
        item=serialize_menu_entry(item, now),
        existing_order=serialize_order(existing, now) if existing is not None else None,
        preview_totals=serialize_totals(calculate_line_totals(preview_quantity, item.price)),
    )


@router.post("/{item_id}/order", response_model=OrderPlacedResponse)
def order_menu_item(
    item_id: int,
    payload: OrderQuantityPayload,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> OrderPlacedResponse:
    """Create or update the caller's order for this item."""
    now: datetime = time_utils.utc_now()
    item = _get_item_or_404(db, item_id)
    try:
        order, created = place_order(db, user=current_user, item=item, quantity=payload.quantity, now=now)
    except MenuItemUnavailableError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Menu item is not available") from exc
    except DeadlinePassedError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Order deadline has passed") from exc

    return OrderPlacedResponse(created=created, order=serialize_order(order, now))
