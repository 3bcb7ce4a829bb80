from typing import Any

from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_db
from app.core.config import settings
from app.core.rate_limiter import limiter
from app.schemas.common import ErrorMessage
from app.schemas.token import LoginRequest, LoginResponse
from app.services.auth_service import AuthService, get_auth_service

router = APIRouter()


@router.post(
    "/login",
    response_model=LoginResponse,
    responses={401: {"model": ErrorMessage}},
)
@limiter.limit(settings.LOGIN_RATE_LIMIT)
async def login(
    request: Request,
    response: Response,
    credentials: LoginRequest,
    db: AsyncSession = Depends(get_db),
    auth_service: AuthService = Depends(get_auth_service),
) -> Any:
    """
    Exchange email and password for a bearer token.

    The token carries the user id, tenant id and role codes and is valid for
    ACCESS_TOKEN_EXPIRE_HOURS.
    """
    token = await auth_service.authenticate_user(db, str(credentials.email), credentials.password)
    return LoginResponse(token=token)
