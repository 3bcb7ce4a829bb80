from typing import Any, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import RequestContext, get_db, get_request_context, parse_uuid, require_admin
from app.api.pagination import PaginationParams, build_page, get_pagination
from app.schemas.common import MessageResponse, PaginatedResponse
from app.schemas.iam import UserCreate, UserResponse, UserRoleAssign
from app.services.user_service import UserService, get_user_service

router = APIRouter()


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    user_in: UserCreate,
    ctx: RequestContext = Depends(require_admin()),
    db: AsyncSession = Depends(get_db),
    service: UserService = Depends(get_user_service),
) -> Any:
    return await service.create_user(db, ctx.tenant_id, ctx.user_id, user_in)


@router.get("", response_model=PaginatedResponse[UserResponse])
async def list_users(
    params: PaginationParams = Depends(get_pagination),
    ctx: RequestContext = Depends(get_request_context),
    db: AsyncSession = Depends(get_db),
    service: UserService = Depends(get_user_service),
) -> Any:
    items, total = await service.list_users(db, ctx.tenant_id, params)
    return build_page(items, params, total)


# Declared before /{user_id} so "by-email" is not parsed as an id
@router.get("/by-email", response_model=UserResponse)
async def get_user_by_email(
    email: Optional[str] = Query(None),
    ctx: RequestContext = Depends(get_request_context),
    db: AsyncSession = Depends(get_db),
    service: UserService = Depends(get_user_service),
) -> Any:
    if not email or not email.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email query parameter is required",
        )
    return await service.get_user_by_email(db, ctx.tenant_id, email.strip())


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: str,
    ctx: RequestContext = Depends(get_request_context),
    db: AsyncSession = Depends(get_db),
    service: UserService = Depends(get_user_service),
) -> Any:
    return await service.get_user(db, ctx.tenant_id, parse_uuid(user_id, "user"))


@router.post("/{user_id}/roles", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
async def assign_user_role(
    user_id: str,
    assignment: UserRoleAssign,
    ctx: RequestContext = Depends(require_admin()),
    db: AsyncSession = Depends(get_db),
    service: UserService = Depends(get_user_service),
) -> Any:
    await service.assign_role(db, ctx.tenant_id, ctx.user_id, parse_uuid(user_id, "user"), assignment.role_id)
    return MessageResponse(message="Role assigned successfully")


@router.delete("/{user_id}/roles/{role_id}", response_model=MessageResponse)
async def revoke_user_role(
    user_id: str,
    role_id: str,
    ctx: RequestContext = Depends(require_admin()),
    db: AsyncSession = Depends(get_db),
    service: UserService = Depends(get_user_service),
) -> Any:
    await service.revoke_role(
        db, ctx.tenant_id, ctx.user_id, parse_uuid(user_id, "user"), parse_uuid(role_id, "role")
    )
    return MessageResponse(message="Role revoked successfully")
