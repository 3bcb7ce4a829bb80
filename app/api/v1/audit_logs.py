from typing import Any, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import RequestContext, get_db, get_request_context
from app.api.pagination import PaginationParams, build_page, get_pagination
from app.schemas.audit import AuditLogResponse
from app.schemas.common import PaginatedResponse
from app.services.audit_service import AuditService, get_audit_service

router = APIRouter()


@router.get("", response_model=PaginatedResponse[AuditLogResponse])
async def list_audit_logs(
    entity_type: Optional[str] = Query(None, alias="entityType"),
    action: Optional[str] = Query(None),
    params: PaginationParams = Depends(get_pagination),
    ctx: RequestContext = Depends(get_request_context),
    db: AsyncSession = Depends(get_db),
    audit: AuditService = Depends(get_audit_service),
) -> Any:
    """
    Audit trail for the caller's tenant, newest first.
    """
    items, total = await audit.list_logs(db, ctx.tenant_id, params, entity_type=entity_type, action=action)
    return build_page(items, params, total)
