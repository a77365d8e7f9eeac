"""Menu item helpers shared by the customer and admin routes."""

from __future__ import annotations

import logging
from datetime import date, datetime
from decimal import Decimal
from typing import Any

from sqlalchemy.orm import Session

from lunch_app.models.menu import MenuItem
from lunch_app.services.order_window import is_visible, parse_serve_date
from lunch_app.utils.time import local_today, to_utc

logger = logging.getLogger(__name__)

MENU_FIELDS: tuple[str, ...] = (
    "title",
    "description",
    "price",
    "serve_date",
    "order_deadline",
    "image_url",
    "is_active",
)


def list_admin_menu_items(db: Session) -> list[MenuItem]:
    """Return every menu item, newest serve date first, unscheduled last."""
    return (
        db.query(MenuItem)
        .order_by(MenuItem.serve_date.is_(None), MenuItem.serve_date.desc(), MenuItem.id.desc())
        .all()
    )


def list_visible_menu_items(db: Session, now: datetime) -> list[MenuItem]:
    """Return items a diner should see in the ordering menu right now."""
    today: date = local_today(now)
    visible: list[MenuItem] = []
    for item in db.query(MenuItem).filter(MenuItem.is_active.is_(True)).all():
        serve_date = parse_serve_date(item.serve_date)
        if serve_date is not None and serve_date < today:
            continue
        if is_visible(item, now):
            visible.append(item)
    return visible


def list_serve_dates(db: Session) -> list[date]:
    """Return the distinct serve dates of active items, ascending."""
    rows = (
        db.query(MenuItem.serve_date)
        .filter(MenuItem.is_active.is_(True), MenuItem.serve_date.is_not(None))
        .distinct()
        .order_by(MenuItem.serve_date.asc())
        .all()
    )
    return [row[0] for row in rows]


def get_menu_item(db: Session, item_id: int) -> MenuItem | None:
    return db.get(MenuItem, item_id)


def create_menu_item(
    db: Session,
    *,
    title: str,
    price: Decimal,
    description: str | None = None,
    serve_date: date | None = None,
    order_deadline: datetime | None = None,
    image_url: str | None = None,
    is_active: bool = True,
) -> MenuItem:
    """Create and persist a menu item."""
    item = MenuItem(
        title=title,
        description=description,
        price=price,
        serve_date=serve_date,
        order_deadline=to_utc(order_deadline),
        image_url=image_url or None,
        is_active=is_active,
    )
    db.add(item)
    db.commit()
    db.refresh(item)
    logger.info("Menu item %s created for %s", item.id, item.serve_date or "unscheduled")
    return item


def update_menu_item(db: Session, item: MenuItem, updates: dict[str, Any]) -> MenuItem:
    """Apply field updates to a menu item. Existing orders keep their captured price."""
    for field_name in MENU_FIELDS:
        if field_name in updates:
            setattr(item, field_name, updates[field_name])
    item.order_deadline = to_utc(item.order_deadline)
    if not item.image_url:
        item.image_url = None
    db.add(item)
    db.commit()
    db.refresh(item)
    logger.info("Menu item %s updated", item.id)
    return item


def delete_menu_item(db: Session, item: MenuItem) -> None:
    """Delete a menu item together with its orders."""
    item_id = item.id
    db.delete(item)
    db.commit()
    logger.warning("Menu item %s deleted with its orders", item_id)
