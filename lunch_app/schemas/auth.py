"""Authentication API schemas."""

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    """Login payload."""

    email: str = Field(min_length=3)
    password: str = Field(min_length=1)


class TokenResponse(BaseModel):
    """Bearer token response."""

    access_token: str
    token_type: str = "bearer"
    is_admin: bool = False
