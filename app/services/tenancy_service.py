"""
Tenant registry. Tenants are the isolation boundary for every other record.
"""

import logging
import uuid
from typing import List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import NotFoundError, translate_db_error
from app.models.tenant import Tenant
from app.schemas.tenancy import TenantCreate

logger = logging.getLogger("hrcore.tenancy")


class TenancyService:
    async def create_tenant(self, db: AsyncSession, data: TenantCreate) -> Tenant:
        tenant = Tenant(id=uuid.uuid4(), code=data.code, name=data.name)
        db.add(tenant)
        try:
            await db.commit()
        except SQLAlchemyError as exc:
            await db.rollback()
            raise translate_db_error(exc) from exc
        logger.info(f"Created tenant {tenant.code} ({tenant.id})")
        return tenant

    async def list_tenants(self, db: AsyncSession) -> List[Tenant]:
        result = await db.execute(select(Tenant).order_by(Tenant.name, Tenant.id))
        return list(result.scalars().all())

    async def get_tenant(self, db: AsyncSession, tenant_id: UUID) -> Tenant:
        tenant = await db.get(Tenant, tenant_id)
        if tenant is None:
            raise NotFoundError(f"tenant {tenant_id} not found", public_message="Tenant not found")
        return tenant


# Global service instance
_tenancy_service: Optional[TenancyService] = None


def get_tenancy_service() -> TenancyService:
    """Get the global tenancy service instance."""
    global _tenancy_service
    if _tenancy_service is None:
        _tenancy_service = TenancyService()
    return _tenancy_service
