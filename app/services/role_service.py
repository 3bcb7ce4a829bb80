"""
Tenant-scoped role definitions.
"""

import logging
import uuid
from typing import List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import NotFoundError, translate_db_error
from app.db.tenant_scope import get_in_tenant, tenant_predicate
from app.models.role import Role
from app.schemas.iam import RoleCreate
from app.services.audit_service import AuditService, get_audit_service

logger = logging.getLogger("hrcore.roles")


class RoleService:
    def __init__(self, audit: Optional[AuditService] = None):
        self.audit = audit or get_audit_service()

    async def list_roles(self, db: AsyncSession, tenant_id: UUID) -> List[Role]:
        result = await db.execute(
            select(Role).where(tenant_predicate(Role, tenant_id)).order_by(Role.code)
        )
        return list(result.scalars().all())

    async def create_role(self, db: AsyncSession, tenant_id: UUID, actor_id: UUID, data: RoleCreate) -> Role:
        role = Role(
            id=uuid.uuid4(),
            tenant_id=tenant_id,
            code=data.code,
            name=data.name,
            description=data.description,
        )
        db.add(role)
        try:
            await db.commit()
        except SQLAlchemyError as exc:
            await db.rollback()
            raise translate_db_error(exc) from exc

        logger.info(f"Created role {role.code} ({role.id}) in tenant {tenant_id}")
        await self.audit.log(tenant_id, actor_id, "CREATE", "Roles", role.id, {
            "code": data.code,
            "name": data.name,
        })
        return role

    async def get_role(self, db: AsyncSession, tenant_id: UUID, role_id: UUID) -> Role:
        role = await get_in_tenant(db, Role, tenant_id, role_id)
        if role is None:
            raise NotFoundError(f"role {role_id} not found", public_message="Role not found")
        return role


# Global service instance
_role_service: Optional[RoleService] = None


def get_role_service() -> RoleService:
    """Get the global role service instance."""
    global _role_service
    if _role_service is None:
        _role_service = RoleService()
    return _role_service
