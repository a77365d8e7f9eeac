"""Self-service profile endpoints."""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from lunch_app.core.security import get_current_user
from lunch_app.db.session import get_db
from lunch_app.models.user import Profile, User
from lunch_app.schemas.profile import ProfileResponse, ProfileUpdate
from lunch_app.services.profile_service import get_profile, update_own_profile

router: APIRouter = APIRouter()


def _own_profile_or_404(db: Session, user: User) -> Profile:
    profile: Profile | None = get_profile(db, user.id)
    if profile is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Profile not found")
    return profile


@router.get("", response_model=ProfileResponse)
def read_profile(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Profile:
    """Return the caller's profile."""
    return _own_profile_or_404(db, current_user)


@router.put("", response_model=ProfileResponse)
def update_profile(
    payload: ProfileUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> Profile:
    """Update the caller's name and shift."""
    profile = _own_profile_or_404(db, current_user)
    return update_own_profile(
        db,
        profile,
        first_name=payload.first_name.strip(),
        last_name=payload.last_name.strip(),
        shift_type=payload.shift_type,
    )
