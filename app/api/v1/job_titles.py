from typing import Any

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import RequestContext, get_db, get_request_context, parse_uuid
from app.api.pagination import PaginationParams, build_page, get_pagination
from app.schemas.common import PaginatedResponse
from app.schemas.org import JobTitleCreate, JobTitleResponse
from app.services.org_service import OrgService, get_org_service

router = APIRouter()


@router.get("", response_model=PaginatedResponse[JobTitleResponse])
async def list_job_titles(
    params: PaginationParams = Depends(get_pagination),
    ctx: RequestContext = Depends(get_request_context),
    db: AsyncSession = Depends(get_db),
    service: OrgService = Depends(get_org_service),
) -> Any:
    items, total = await service.list_job_titles(db, ctx.tenant_id, params)
    return build_page(items, params, total)


@router.post("", response_model=JobTitleResponse, status_code=status.HTTP_201_CREATED)
async def create_job_title(
    job_title_in: JobTitleCreate,
    ctx: RequestContext = Depends(get_request_context),
    db: AsyncSession = Depends(get_db),
    service: OrgService = Depends(get_org_service),
) -> Any:
    return await service.create_job_title(db, ctx.tenant_id, job_title_in)


@router.get("/{job_title_id}", response_model=JobTitleResponse)
async def get_job_title(
    job_title_id: str,
    ctx: RequestContext = Depends(get_request_context),
    db: AsyncSession = Depends(get_db),
    service: OrgService = Depends(get_org_service),
) -> Any:
    return await service.get_job_title(db, ctx.tenant_id, parse_uuid(job_title_id, "job title"))
