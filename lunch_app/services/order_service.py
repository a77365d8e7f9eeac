"""Order placement and editing, guarded by each item's order deadline."""

from __future__ import annotations

import logging
from datetime import date, datetime

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from lunch_app.models.menu import MenuItem
from lunch_app.models.order import Order
from lunch_app.models.user import User
from lunch_app.services.order_window import can_edit_order, can_modify, clamp_quantity

logger = logging.getLogger(__name__)


class DeadlinePassedError(Exception):
    """Raised when creating or changing an order after the item's deadline."""


class MenuItemUnavailableError(Exception):
    """Raised when ordering an archived menu item."""


class OrderLockedError(Exception):
    """Raised when changing an order whose item is archived or already served."""


class OrderNotFoundError(Exception):
    """Raised when an order does not exist or belongs to someone else."""


def _ensure_modifiable(item: MenuItem, now: datetime) -> None:
    if not can_modify(item, now):
        logger.warning("Order change rejected: item %s deadline %s passed", item.id, item.order_deadline)
        raise DeadlinePassedError


def _ensure_editable(item: MenuItem, now: datetime) -> None:
    _ensure_modifiable(item, now)
    if not can_edit_order(item, now):
        logger.warning("Order change rejected: item %s is archived or past its serve date", item.id)
        raise OrderLockedError


def get_user_orders(db: Session, user_id: int) -> list[Order]:
    """Return a user's orders, active and archived items alike, newest first."""
    return (
        db.query(Order)
        .options(joinedload(Order.menu_item))
        .filter(Order.user_id == user_id)
        .order_by(Order.created_at.desc(), Order.id.desc())
        .all()
    )


def get_user_order_for_item(db: Session, user_id: int, menu_item_id: int) -> Order | None:
    return (
        db.query(Order)
        .filter(Order.user_id == user_id, Order.menu_item_id == menu_item_id)
        .first()
    )


def get_owned_order(db: Session, user_id: int, order_id: int) -> Order:
    order: Order | None = (
        db.query(Order)
        .options(joinedload(Order.menu_item))
        .filter(Order.id == order_id)
        .first()
    )
    if order is None or order.user_id != user_id:
        raise OrderNotFoundError
    return order


def _apply_reorder(order: Order, item: MenuItem, quantity: int) -> int:
    previous_quantity = order.quantity
    order.quantity = quantity
    order.unit_price = item.price
    order.status = "updated"
    return previous_quantity


def place_order(db: Session, *, user: User, item: MenuItem, quantity: int, now: datetime) -> tuple[Order, bool]:
    """Create or update the user's order for an item.

    Returns the order and whether it was newly created. The unit price is taken
    from the item at the time of this call. When a concurrent request inserts
    the same (user, item) order first, this call updates that row instead.
    """
    if not item.is_active:
        raise MenuItemUnavailableError
    _ensure_modifiable(item, now)

    quantity = clamp_quantity(quantity)
    user_id, item_id = user.id, item.id
    order: Order | None = get_user_order_for_item(db, user_id, item_id)
    if order is not None:
        previous_quantity = _apply_reorder(order, item, quantity)
        db.commit()
        db.refresh(order)
        logger.info("Order %s updated: qty %s -> %s", order.id, previous_quantity, quantity)
        return order, False

    order = Order(
        user_id=user_id,
        menu_item_id=item_id,
        quantity=quantity,
        unit_price=item.price,
        status="created",
    )
    db.add(order)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        existing: Order | None = get_user_order_for_item(db, user_id, item_id)
        if existing is None:
            raise
        logger.info("Order for user=%s item=%s was created concurrently; updating it", user_id, item_id)
        previous_quantity = _apply_reorder(existing, item, quantity)
        db.commit()
        db.refresh(existing)
        logger.info("Order %s updated: qty %s -> %s", existing.id, previous_quantity, quantity)
        return existing, False

    db.refresh(order)
    logger.info("Order %s created: user=%s item=%s qty=%s", order.id, user_id, item_id, quantity)
    return order, True


def update_order_quantity(db: Session, order: Order, quantity: int, now: datetime) -> Order:
    """Change an order's quantity and mark it confirmed."""
    _ensure_editable(order.menu_item, now)
    order.quantity = clamp_quantity(quantity)
    order.status = "confirmed"
    db.commit()
    db.refresh(order)
    logger.info("Order %s confirmed with qty %s", order.id, order.quantity)
    return order


def delete_order(db: Session, order: Order, now: datetime) -> None:
    _ensure_editable(order.menu_item, now)
    order_id = order.id
    db.delete(order)
    db.commit()
    logger.info("Order %s deleted", order_id)


def list_all_orders(db: Session) -> list[Order]:
    """Return every order with its item and the ordering user's profile."""
    return (
        db.query(Order)
        .options(joinedload(Order.menu_item), joinedload(Order.profile))
        .order_by(Order.created_at.desc(), Order.id.desc())
        .all()
    )


def list_orders_for_serve_date(db: Session, serve_date: date) -> list[Order]:
    """Return orders for items served on one date, ordered by user."""
    return (
        db.query(Order)
        .join(MenuItem, Order.menu_item_id == MenuItem.id)
        .options(joinedload(Order.menu_item), joinedload(Order.profile))
        .filter(MenuItem.serve_date == serve_date)
        .order_by(Order.user_id.asc(), Order.id.asc())
        .all()
    )
