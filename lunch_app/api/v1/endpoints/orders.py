"""Endpoints for a diner's own orders."""

from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from lunch_app.api.v1.serializers import serialize_month_bucket, serialize_order, serialize_order_group
from lunch_app.core.security import get_current_user
from lunch_app.db.session import get_db
from lunch_app.models.order import Order
from lunch_app.models.user import User
from lunch_app.schemas.order import MyOrdersResponse, OrderLineResponse, OrderQuantityPayload
from lunch_app.services.grouping import bucket_by_month, group_by_serve_date, split_active_and_past
from lunch_app.services.order_service import (
    DeadlinePassedError,
    OrderLockedError,
    OrderNotFoundError,
    delete_order,
    get_owned_order,
    get_user_orders,
    update_order_quantity,
)
from lunch_app.utils import time as time_utils

router: APIRouter = APIRouter()


def _owned_order_or_404(db: Session, user: User, order_id: int) -> Order:
    try:
        return get_owned_order(db, user.id, order_id)
    except OrderNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Order not found") from exc


@router.get("/me", response_model=MyOrdersResponse)
def get_my_orders(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> MyOrdersResponse:
    """Return upcoming orders by serve date and past orders by month."""
    now: datetime = time_utils.utc_now()
    active, past = split_active_and_past(get_user_orders(db, current_user.id), time_utils.local_today(now))
    return MyOrdersResponse(
        active=[serialize_order_group(group, now) for group in group_by_serve_date(active)],
        past=[serialize_month_bucket(bucket, now) for bucket in bucket_by_month(past)],
    )


@router.patch("/{order_id}", response_model=OrderLineResponse)
def update_my_order(
    order_id: int,
    payload: OrderQuantityPayload,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> OrderLineResponse:
    """Change quantity of one of the caller's orders and confirm it."""
    now: datetime = time_utils.utc_now()
    order = _owned_order_or_404(db, current_user, order_id)
    try:
        order = update_order_quantity(db, order, payload.quantity, now)
    except DeadlinePassedError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Order deadline has passed") from exc
    except OrderLockedError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Order is read-only") from exc
    return serialize_order(order, now)


@router.delete("/{order_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_my_order(
    order_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Response:
    """Delete one of the caller's orders while its item is still open."""
    now: datetime = time_utils.utc_now()
    order = _owned_order_or_404(db, current_user, order_id)
    try:
        delete_order(db, order, now)
    except DeadlinePassedError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Order deadline has passed") from exc
    except OrderLockedError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Order is read-only") from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)
