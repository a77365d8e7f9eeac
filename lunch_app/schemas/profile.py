"""Profile API schemas."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

ShiftType = Literal["morning", "afternoon", "night"]


class ProfileResponse(BaseModel):
    """Serialized profile."""

    id: int
    first_name: str | None
    last_name: str | None
    shift_type: str | None
    company_name: str | None
    is_admin: bool

    model_config = ConfigDict(from_attributes=True)


class ProfileUpdate(BaseModel):
    """Self-service profile update."""

    first_name: str = Field(min_length=1, max_length=128)
    last_name: str = Field(min_length=1, max_length=128)
    shift_type: ShiftType


class AdminProfileUpdate(BaseModel):
    """Admin profile update. Only fields present in the request are applied; shift may be cleared with null."""

    first_name: str | None = Field(default=None, max_length=128)
    last_name: str | None = Field(default=None, max_length=128)
    shift_type: ShiftType | None = None
    company_name: str | None = Field(default=None, max_length=255)
    is_admin: bool | None = None


class ProfileDirectoryResponse(BaseModel):
    """Profiles grouped by shift, admins listed separately."""

    by_shift: dict[str, list[ProfileResponse]]
    admins: list[ProfileResponse]
