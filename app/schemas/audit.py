import json
from datetime import datetime
from typing import Any, Optional
from uuid import UUID

from pydantic import field_validator

from app.schemas.common import APIModel


class AuditLogResponse(APIModel):
    id: UUID
    tenant_id: UUID
    actor_id: Optional[UUID] = None
    action: str
    entity_type: str
    entity_id: UUID
    changes: Optional[Any] = None
    created_at: datetime

    @field_validator("changes", mode="before")
    @classmethod
    def _decode_changes(cls, v):
        if isinstance(v, (str, bytes)):
            return json.loads(v)
        return v
