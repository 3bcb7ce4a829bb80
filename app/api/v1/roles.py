from typing import Any, List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import RequestContext, get_db, get_request_context, parse_uuid, require_admin
from app.schemas.iam import RoleCreate, RoleResponse
from app.services.role_service import RoleService, get_role_service

router = APIRouter()


@router.get("", response_model=List[RoleResponse])
async def list_roles(
    ctx: RequestContext = Depends(get_request_context),
    db: AsyncSession = Depends(get_db),
    service: RoleService = Depends(get_role_service),
) -> Any:
    return await service.list_roles(db, ctx.tenant_id)


@router.post("", response_model=RoleResponse, status_code=status.HTTP_201_CREATED)
async def create_role(
    role_in: RoleCreate,
    ctx: RequestContext = Depends(require_admin()),
    db: AsyncSession = Depends(get_db),
    service: RoleService = Depends(get_role_service),
) -> Any:
    return await service.create_role(db, ctx.tenant_id, ctx.user_id, role_in)


@router.get("/{role_id}", response_model=RoleResponse)
async def get_role(
    role_id: str,
    ctx: RequestContext = Depends(get_request_context),
    db: AsyncSession = Depends(get_db),
    service: RoleService = Depends(get_role_service),
) -> Any:
    return await service.get_role(db, ctx.tenant_id, parse_uuid(role_id, "role"))
