"""Login authentication and default admin bootstrap."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from sqlalchemy import select
from sqlalchemy.orm import Session

from lunch_app.core.config import settings
from lunch_app.core.security import get_password_hash, verify_password
from lunch_app.models import Profile, User

logger = logging.getLogger(__name__)


def get_user_by_email(db: Session, email: str) -> User | None:
    return db.scalar(select(User).where(User.email == email.strip().lower()).limit(1))


def ensure_default_admin(db: Session) -> bool:
    """Ensure the configured admin account exists with an admin profile.

    Returns:
        bool: True when the admin account existed before this call.
    """
    existing_admin = get_user_by_email(db, settings.admin_email)
    if existing_admin is not None:
        updates_applied = False
        if not existing_admin.is_active:
            existing_admin.is_active = True
            updates_applied = True
            logger.info("[BOOTSTRAP] Admin exists but was inactive; account re-activated.")
        if existing_admin.profile is None:
            existing_admin.profile = Profile(is_admin=True, company_name=settings.default_company_name)
            updates_applied = True
        elif not existing_admin.profile.is_admin:
            logger.warning("[BOOTSTRAP] Admin account %s had no admin flag; restoring it.", existing_admin.email)
            existing_admin.profile.is_admin = True
            updates_applied = True

        if updates_applied:
            db.commit()
        logger.info("[BOOTSTRAP] Admin exists")
        return True

    admin = User(
        email=settings.admin_email.strip().lower(),
        password_hash=get_password_hash(settings.admin_password),
        is_active=True,
        profile=Profile(
            first_name="Admin",
            last_name=None,
            company_name=settings.default_company_name,
            is_admin=True,
        ),
    )
    db.add(admin)
    db.commit()
    if settings.admin_password == "change-me":
        logger.warning("[SECURITY] Default admin account created: %s. Change default password immediately.", admin.email)
    return False


def authenticate_user(db: Session, email: str, password: str) -> User | None:
    user = get_user_by_email(db, email)
    if user is None or not user.is_active:
        return None
    if not verify_password(password, user.password_hash):
        return None
    user.last_login_at = datetime.now(timezone.utc)
    db.commit()
    return user
