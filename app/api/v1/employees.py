from typing import Any, List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import RequestContext, get_db, get_request_context, parse_uuid
from app.api.pagination import PaginationParams, build_page, get_pagination
from app.schemas.common import PaginatedResponse
from app.schemas.employee import EmployeeCreate, EmployeeDetail, EmployeeResponse
from app.services.employee_service import EmployeeService, get_employee_service

router = APIRouter()


@router.get("", response_model=PaginatedResponse[EmployeeDetail])
async def list_employees(
    params: PaginationParams = Depends(get_pagination),
    ctx: RequestContext = Depends(get_request_context),
    db: AsyncSession = Depends(get_db),
    service: EmployeeService = Depends(get_employee_service),
) -> Any:
    """
    List employees with their business unit, department, job title and manager.
    """
    items, total = await service.list_employees(db, ctx.tenant_id, params)
    return build_page(items, params, total)


@router.post("", response_model=EmployeeResponse, status_code=status.HTTP_201_CREATED)
async def create_employee(
    employee_in: EmployeeCreate,
    ctx: RequestContext = Depends(get_request_context),
    db: AsyncSession = Depends(get_db),
    service: EmployeeService = Depends(get_employee_service),
) -> Any:
    return await service.create_employee(db, ctx.tenant_id, ctx.user_id, employee_in)


@router.get("/{employee_id}", response_model=EmployeeDetail)
async def get_employee(
    employee_id: str,
    ctx: RequestContext = Depends(get_request_context),
    db: AsyncSession = Depends(get_db),
    service: EmployeeService = Depends(get_employee_service),
) -> Any:
    return await service.get_employee(db, ctx.tenant_id, parse_uuid(employee_id, "employee"))


@router.get("/{employee_id}/hierarchy", response_model=List[EmployeeResponse])
async def get_employee_hierarchy(
    employee_id: str,
    ctx: RequestContext = Depends(get_request_context),
    db: AsyncSession = Depends(get_db),
    service: EmployeeService = Depends(get_employee_service),
) -> Any:
    """
    The employee first, then all direct and indirect reports.
    """
    return await service.get_employee_hierarchy(db, ctx.tenant_id, parse_uuid(employee_id, "employee"))
