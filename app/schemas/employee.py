from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import EmailStr, Field, field_validator

from app.schemas.common import APIModel, blank_to_none


class EmployeeBase(APIModel):
    employee_no: str = Field(..., min_length=1)
    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    display_name: Optional[str] = None
    business_unit_id: Optional[UUID] = None
    department_id: Optional[UUID] = None
    job_title_id: Optional[UUID] = None
    manager_id: Optional[UUID] = None

    @field_validator(
        "display_name", "business_unit_id", "department_id", "job_title_id", "manager_id",
        mode="before",
    )
    @classmethod
    def _blank_is_none(cls, v):
        return blank_to_none(v)


class EmployeeCreate(EmployeeBase):
    work_email: Optional[EmailStr] = None

    @field_validator("work_email", mode="before")
    @classmethod
    def _blank_email_is_none(cls, v):
        return blank_to_none(v)


class EmployeeResponse(APIModel):
    id: UUID
    tenant_id: UUID
    employee_no: str
    first_name: str
    last_name: str
    display_name: Optional[str] = None
    work_email: Optional[str] = None
    business_unit_id: Optional[UUID] = None
    department_id: Optional[UUID] = None
    job_title_id: Optional[UUID] = None
    manager_id: Optional[UUID] = None
    status: str
    is_active: bool
    created_at: datetime
    updated_at: datetime


# ============ Nested summaries for detail views ============

class BusinessUnitSummary(APIModel):
    id: UUID
    code: Optional[str] = None
    name: Optional[str] = None


class DepartmentSummary(APIModel):
    id: UUID
    code: Optional[str] = None
    name: Optional[str] = None


class JobTitleSummary(APIModel):
    id: UUID
    code: Optional[str] = None
    name: Optional[str] = None
    grade: Optional[str] = None


class ManagerSummary(APIModel):
    id: UUID
    employee_no: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    display_name: Optional[str] = None


class EmployeeDetail(APIModel):
    id: UUID
    tenant_id: UUID
    employee_no: str
    first_name: str
    last_name: str
    display_name: Optional[str] = None
    work_email: Optional[str] = None
    status: str
    is_active: bool
    created_at: datetime
    updated_at: datetime
    business_unit: Optional[BusinessUnitSummary] = None
    department: Optional[DepartmentSummary] = None
    job_title: Optional[JobTitleSummary] = None
    manager: Optional[ManagerSummary] = None
