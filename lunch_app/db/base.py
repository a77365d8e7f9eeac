"""Shared SQLAlchemy base declarative class and model imports."""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for ORM models."""


# Import model modules so metadata is populated before create_all.
from lunch_app.models import menu as _menu  # noqa: E402,F401
from lunch_app.models import order as _order  # noqa: E402,F401
from lunch_app.models import user as _user  # noqa: E402,F401
