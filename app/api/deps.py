import logging
from dataclasses import dataclass, field
from typing import AsyncGenerator, Callable, List, Optional
from uuid import UUID

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError

from app.core.config import settings
from app.core.security import decode_access_token
from app.db.session import AsyncSessionLocal

logger = logging.getLogger("hrcore.deps")

# auto_error=False so a missing header yields our own 401 message
oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.API_V1_STR}/auth/login", auto_error=False)


async def get_db() -> AsyncGenerator:
    async with AsyncSessionLocal() as session:
        yield session


@dataclass(frozen=True)
class RequestContext:
    """Identity of the caller, taken from verified token claims only."""
    tenant_id: UUID
    user_id: UUID
    roles: List[str] = field(default_factory=list)

    def has_role(self, *codes: str) -> bool:
        return any(code in self.roles for code in codes)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_request_context(token: Optional[str] = Depends(oauth2_scheme)) -> RequestContext:
    """
    Authenticate the bearer token and build the request context.

    Raises:
        HTTPException: 401 if the token is missing, invalid, expired or carries
            identifiers that are not UUIDs
    """
    if not token:
        raise _unauthorized("Authorization header required")

    try:
        payload = decode_access_token(token)
    except JWTError as exc:
        logger.debug(f"Rejected token: {exc}")
        raise _unauthorized("Invalid or expired token")

    try:
        user_id = UUID(str(payload.get("userId")))
    except ValueError:
        raise _unauthorized("Invalid token subject format")

    try:
        tenant_id = UUID(str(payload.get("tenantId")))
    except ValueError:
        raise _unauthorized("Invalid token tenant format")

    roles = payload.get("roles") or []
    if not isinstance(roles, list):
        roles = []
    return RequestContext(tenant_id=tenant_id, user_id=user_id, roles=[str(r) for r in roles])


def require_role(*codes: str) -> Callable:
    """
    Dependency factory that requires the caller to hold at least one of the role codes.

    Usage:
        @router.post("/roles")
        async def create_role(ctx: RequestContext = Depends(require_role("ADMIN"))):
            ...
    """
    async def role_checker(ctx: RequestContext = Depends(get_request_context)) -> RequestContext:
        if not ctx.has_role(*codes):
            logger.warning(f"User {ctx.user_id} denied; requires one of {', '.join(codes)}")
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Forbidden: insufficient permissions",
            )
        return ctx

    return role_checker


def require_admin() -> Callable:
    return require_role(settings.ADMIN_ROLE_CODE)


def parse_uuid(value: str, label: str) -> UUID:
    """Parse a path identifier, answering 400 "Invalid <label> ID format" when malformed."""
    try:
        return UUID(value)
    except (TypeError, ValueError):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid {label} ID format",
        )
