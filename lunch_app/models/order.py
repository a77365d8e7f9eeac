"""Order model: one row per (user, menu item)."""

from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import DateTime, Enum, ForeignKey, Integer, Numeric, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from lunch_app.db.base import Base

ORDER_STATUSES: tuple[str, ...] = ("created", "updated", "confirmed")


class Order(Base):
    """A user's order for a menu item.

    ``unit_price`` is captured when the order is placed so later menu price
    edits do not change what was ordered.
    """

    __tablename__ = "orders"
    __table_args__ = (UniqueConstraint("user_id", "menu_item_id", name="uq_orders_user_menu_item"),)

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)
    menu_item_id: Mapped[int] = mapped_column(ForeignKey("menu_items.id"), nullable=False, index=True)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    unit_price: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    status: Mapped[str] = mapped_column(Enum(*ORDER_STATUSES, name="order_status"), nullable=False, default="created")
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    menu_item: Mapped["MenuItem"] = relationship(back_populates="orders")
    user: Mapped["User"] = relationship(back_populates="orders")
    profile: Mapped["Profile | None"] = relationship(
        primaryjoin="foreign(Order.user_id) == Profile.id",
        viewonly=True,
    )
