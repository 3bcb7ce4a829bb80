from typing import Any, List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_db, parse_uuid
from app.schemas.tenancy import TenantCreate, TenantResponse
from app.services.tenancy_service import TenancyService, get_tenancy_service

router = APIRouter()


@router.get("", response_model=List[TenantResponse])
async def list_tenants(
    db: AsyncSession = Depends(get_db),
    service: TenancyService = Depends(get_tenancy_service),
) -> Any:
    return await service.list_tenants(db)


@router.post("", response_model=TenantResponse, status_code=status.HTTP_201_CREATED)
async def create_tenant(
    tenant_in: TenantCreate,
    db: AsyncSession = Depends(get_db),
    service: TenancyService = Depends(get_tenancy_service),
) -> Any:
    return await service.create_tenant(db, tenant_in)


@router.get("/{tenant_id}", response_model=TenantResponse)
async def get_tenant(
    tenant_id: str,
    db: AsyncSession = Depends(get_db),
    service: TenancyService = Depends(get_tenancy_service),
) -> Any:
    return await service.get_tenant(db, parse_uuid(tenant_id, "tenant"))
