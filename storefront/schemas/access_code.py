"""Access Code Schemas — code management, login and the code filter."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from storefront.schemas.common import EntityFilter


class AccessCodeCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    code: str = Field(min_length=1, max_length=64)
    discount: float = Field(0.0, ge=0)
    assigned_to: str = Field(min_length=1, max_length=100)

    @field_validator("code")
    @classmethod
    def strip_code(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("code cannot be empty or whitespace")
        return v


class AccessCodeUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    code: str | None = Field(None, min_length=1, max_length=64)
    discount: float | None = Field(None, ge=0)
    assigned_to: str | None = Field(None, min_length=1, max_length=100)


class AccessCodeResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    code: str
    discount: float
    assigned_to: str
    created_at: datetime
    updated_at: datetime


class LoginRequest(BaseModel):
    code: str


class LoginResponse(BaseModel):
    """The code itself is the bearer credential."""
    access_token: str
    token_type: str = "bearer"
    assigned_to: str
    discount: float


class AccessCodeFilter(EntityFilter):
    code: str | None = None
    discount: float | None = None
    assigned_to: str | None = None
