from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import EmailStr, Field, field_validator

from app.core.config import settings
from app.schemas.common import APIModel, blank_to_none


# ============ Role Schemas ============

class RoleCreate(APIModel):
    code: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    description: Optional[str] = None

    @field_validator("description", mode="before")
    @classmethod
    def _blank_is_none(cls, v):
        return blank_to_none(v)


class RoleResponse(APIModel):
    id: UUID
    tenant_id: UUID
    code: str
    name: str
    description: Optional[str] = None
    created_at: datetime
    updated_at: datetime


# ============ User Schemas ============

class UserCreate(APIModel):
    employee_id: UUID
    email: EmailStr
    display_name: Optional[str] = None
    password: str = Field(..., min_length=1)

    @field_validator("display_name", mode="before")
    @classmethod
    def _blank_is_none(cls, v):
        return blank_to_none(v)

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        if len(v) < settings.MIN_PASSWORD_LENGTH:
            raise ValueError(f"Password must be at least {settings.MIN_PASSWORD_LENGTH} characters long")
        return v


class UserResponse(APIModel):
    """Never carries the password hash."""
    id: UUID
    tenant_id: UUID
    employee_id: UUID
    email: str
    display_name: Optional[str] = None
    created_at: datetime
    updated_at: datetime


# ============ User Role Assignment ============

class UserRoleAssign(APIModel):
    role_id: UUID
