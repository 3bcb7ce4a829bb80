from datetime import datetime
from uuid import UUID

from pydantic import Field

from app.schemas.common import APIModel


class TenantCreate(APIModel):
    code: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)


class TenantResponse(APIModel):
    id: UUID
    code: str
    name: str
    created_at: datetime
    updated_at: datetime
