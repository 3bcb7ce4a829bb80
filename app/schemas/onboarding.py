from uuid import UUID

from pydantic import EmailStr, Field, field_validator

from app.core.config import settings
from app.schemas.employee import EmployeeBase
from app.schemas.common import APIModel


class OnboardRequest(EmployeeBase):
    """Employee profile plus the login identity and initial role to provision."""
    work_email: EmailStr
    password: str = Field(..., min_length=1)
    initial_role_id: UUID

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        if len(v) < settings.MIN_PASSWORD_LENGTH:
            raise ValueError(f"Password must be at least {settings.MIN_PASSWORD_LENGTH} characters long")
        return v


class OnboardingResult(APIModel):
    employee_id: UUID
    user_id: UUID
    email: str
