from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import Field, field_validator

from app.schemas.common import APIModel, blank_to_none


# ============ Business Unit Schemas ============

class BusinessUnitCreate(APIModel):
    code: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)


class BusinessUnitResponse(APIModel):
    id: UUID
    tenant_id: UUID
    code: str
    name: str
    created_at: datetime
    updated_at: datetime


# ============ Department Schemas ============

class DepartmentCreate(APIModel):
    code: Optional[str] = None
    name: str = Field(..., min_length=1)
    parent_department_id: Optional[UUID] = None

    @field_validator("code", "parent_department_id", mode="before")
    @classmethod
    def _blank_is_none(cls, v):
        return blank_to_none(v)


class DepartmentResponse(APIModel):
    id: UUID
    tenant_id: UUID
    parent_department_id: Optional[UUID] = None
    code: Optional[str] = None
    name: str
    created_at: datetime
    updated_at: datetime


# ============ Job Title Schemas ============

class JobTitleCreate(APIModel):
    code: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    grade: Optional[str] = None

    @field_validator("grade", mode="before")
    @classmethod
    def _blank_is_none(cls, v):
        return blank_to_none(v)


class JobTitleResponse(APIModel):
    id: UUID
    tenant_id: UUID
    code: str
    name: str
    grade: Optional[str] = None
    created_at: datetime
    updated_at: datetime
