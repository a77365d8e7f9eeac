"""Profile read and update helpers."""

import logging
from typing import Any

from sqlalchemy.orm import Session

from lunch_app.core.config import settings
from lunch_app.models.user import Profile

logger = logging.getLogger(__name__)

ADMIN_PROFILE_FIELDS: tuple[str, ...] = ("first_name", "last_name", "shift_type", "company_name", "is_admin")


def get_profile(db: Session, user_id: int) -> Profile | None:
    return db.get(Profile, user_id)


def list_profiles(db: Session) -> list[Profile]:
    return db.query(Profile).order_by(Profile.id.asc()).all()


def update_own_profile(
    db: Session,
    profile: Profile,
    *,
    first_name: str | None,
    last_name: str | None,
    shift_type: str | None,
) -> Profile:
    """Update name and shift; employees always belong to the default company."""
    profile.first_name = first_name
    profile.last_name = last_name
    profile.shift_type = shift_type
    profile.company_name = settings.default_company_name
    db.commit()
    db.refresh(profile)
    return profile


def update_user_profile(db: Session, profile: Profile, updates: dict[str, Any]) -> Profile:
    """Admin update of any profile, including company and admin flag.

    Only keys present in ``updates`` change. An empty company falls back to the
    default company; a null admin flag leaves the flag as it is.
    """
    for field_name in ADMIN_PROFILE_FIELDS:
        if field_name not in updates:
            continue
        value = updates[field_name]
        if field_name == "company_name":
            value = value or settings.default_company_name
        elif field_name == "is_admin" and value is None:
            continue
        setattr(profile, field_name, value)
    db.commit()
    db.refresh(profile)
    logger.info("Profile %s updated by admin: %s", profile.id, ", ".join(sorted(updates)) or "no fields")
    return profile
