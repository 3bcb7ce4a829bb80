from typing import Any

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import RequestContext, get_db, get_request_context, parse_uuid
from app.api.pagination import PaginationParams, build_page, get_pagination
from app.schemas.common import PaginatedResponse
from app.schemas.org import DepartmentCreate, DepartmentResponse
from app.services.org_service import OrgService, get_org_service

router = APIRouter()


@router.get("", response_model=PaginatedResponse[DepartmentResponse])
async def list_departments(
    params: PaginationParams = Depends(get_pagination),
    ctx: RequestContext = Depends(get_request_context),
    db: AsyncSession = Depends(get_db),
    service: OrgService = Depends(get_org_service),
) -> Any:
    items, total = await service.list_departments(db, ctx.tenant_id, params)
    return build_page(items, params, total)


@router.post("", response_model=DepartmentResponse, status_code=status.HTTP_201_CREATED)
async def create_department(
    department_in: DepartmentCreate,
    ctx: RequestContext = Depends(get_request_context),
    db: AsyncSession = Depends(get_db),
    service: OrgService = Depends(get_org_service),
) -> Any:
    """Create a department; a parent, when given, must belong to the caller's tenant."""
    return await service.create_department(db, ctx.tenant_id, department_in)


@router.get("/{department_id}", response_model=DepartmentResponse)
async def get_department(
    department_id: str,
    ctx: RequestContext = Depends(get_request_context),
    db: AsyncSession = Depends(get_db),
    service: OrgService = Depends(get_org_service),
) -> Any:
    return await service.get_department(db, ctx.tenant_id, parse_uuid(department_id, "department"))
