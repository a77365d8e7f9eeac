"""Application models package."""

from lunch_app.models.menu import MenuItem
from lunch_app.models.order import Order
from lunch_app.models.user import Profile, User

__all__ = ["MenuItem", "Order", "Profile", "User"]
