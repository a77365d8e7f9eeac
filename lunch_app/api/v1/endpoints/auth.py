"""Authentication endpoints."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from lunch_app.core.security import create_access_token
from lunch_app.db.session import get_db
from lunch_app.models.user import User
from lunch_app.schemas.auth import LoginRequest, TokenResponse
from lunch_app.services.account_service import authenticate_user

router: APIRouter = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/login", response_model=TokenResponse)
def login(payload: LoginRequest, db: Session = Depends(get_db)) -> TokenResponse:
    """Authenticate with email and password and return a bearer token."""
    user: User | None = authenticate_user(db=db, email=payload.email, password=payload.password)
    if user is None:
        logger.warning("Failed login for %s", payload.email)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
        )

    token: str = create_access_token({"sub": str(user.id)})
    is_admin = bool(user.profile is not None and user.profile.is_admin)
    return TokenResponse(access_token=token, is_admin=is_admin)
