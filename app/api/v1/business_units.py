from typing import Any

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import RequestContext, get_db, get_request_context, parse_uuid
from app.api.pagination import PaginationParams, build_page, get_pagination
from app.schemas.common import PaginatedResponse
from app.schemas.org import BusinessUnitCreate, BusinessUnitResponse
from app.services.org_service import OrgService, get_org_service

router = APIRouter()


@router.get("", response_model=PaginatedResponse[BusinessUnitResponse])
async def list_business_units(
    params: PaginationParams = Depends(get_pagination),
    ctx: RequestContext = Depends(get_request_context),
    db: AsyncSession = Depends(get_db),
    service: OrgService = Depends(get_org_service),
) -> Any:
    items, total = await service.list_business_units(db, ctx.tenant_id, params)
    return build_page(items, params, total)


@router.post("", response_model=BusinessUnitResponse, status_code=status.HTTP_201_CREATED)
async def create_business_unit(
    unit_in: BusinessUnitCreate,
    ctx: RequestContext = Depends(get_request_context),
    db: AsyncSession = Depends(get_db),
    service: OrgService = Depends(get_org_service),
) -> Any:
    return await service.create_business_unit(db, ctx.tenant_id, unit_in)


@router.get("/{unit_id}", response_model=BusinessUnitResponse)
async def get_business_unit(
    unit_id: str,
    ctx: RequestContext = Depends(get_request_context),
    db: AsyncSession = Depends(get_db),
    service: OrgService = Depends(get_org_service),
) -> Any:
    return await service.get_business_unit(db, ctx.tenant_id, parse_uuid(unit_id, "business unit"))
