"""
Organisational structure: business units, departments and job titles.
"""

import logging
import uuid
from typing import Any, List, Optional, Tuple, Type
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.pagination import PaginationParams
from app.core.errors import InvalidReferenceError, NotFoundError, translate_db_error
from app.db.tenant_scope import fetch_page, get_in_tenant, search_clause, tenant_predicate
from app.models.org import BusinessUnit, Department, JobTitle
from app.schemas.org import BusinessUnitCreate, DepartmentCreate, JobTitleCreate

logger = logging.getLogger("hrcore.org")


class OrgService:
    async def _save(self, db: AsyncSession, entity: Any) -> Any:
        db.add(entity)
        try:
            await db.commit()
        except SQLAlchemyError as exc:
            await db.rollback()
            raise translate_db_error(exc) from exc
        logger.info(f"Created {entity.__tablename__} row {entity.id} in tenant {entity.tenant_id}")
        return entity

    async def _list(
        self,
        db: AsyncSession,
        model: Type[Any],
        tenant_id: UUID,
        params: PaginationParams,
        *search_columns,
    ) -> Tuple[List[Any], int]:
        query = select(model).where(tenant_predicate(model, tenant_id))
        if params.search:
            query = query.where(search_clause(params.search, *search_columns))
        query = query.order_by(model.name, model.id)
        return await fetch_page(db, query, params)

    async def _get(self, db: AsyncSession, model: Type[Any], tenant_id: UUID, entity_id: UUID, label: str) -> Any:
        entity = await get_in_tenant(db, model, tenant_id, entity_id)
        if entity is None:
            raise NotFoundError(f"{label} {entity_id} not found", public_message=f"{label} not found")
        return entity

    # ============ Business Units ============

    async def create_business_unit(self, db: AsyncSession, tenant_id: UUID, data: BusinessUnitCreate) -> BusinessUnit:
        return await self._save(db, BusinessUnit(
            id=uuid.uuid4(),
            tenant_id=tenant_id,
            code=data.code,
            name=data.name,
        ))

    async def list_business_units(
        self, db: AsyncSession, tenant_id: UUID, params: PaginationParams
    ) -> Tuple[List[BusinessUnit], int]:
        return await self._list(db, BusinessUnit, tenant_id, params, BusinessUnit.code, BusinessUnit.name)

    async def get_business_unit(self, db: AsyncSession, tenant_id: UUID, unit_id: UUID) -> BusinessUnit:
        return await self._get(db, BusinessUnit, tenant_id, unit_id, "Business unit")

    # ============ Departments ============

    async def create_department(self, db: AsyncSession, tenant_id: UUID, data: DepartmentCreate) -> Department:
        """
        Create a department, optionally nested under a parent in the same tenant.

        Raises:
            InvalidReferenceError: Parent department is missing or belongs to another tenant
        """
        if data.parent_department_id is not None:
            if await get_in_tenant(db, Department, tenant_id, data.parent_department_id) is None:
                raise InvalidReferenceError(
                    f"parent department {data.parent_department_id} not found in tenant {tenant_id}",
                    public_message="Parent department does not exist or is inaccessible",
                )

        return await self._save(db, Department(
            id=uuid.uuid4(),
            tenant_id=tenant_id,
            parent_department_id=data.parent_department_id,
            code=data.code,
            name=data.name,
        ))

    async def list_departments(
        self, db: AsyncSession, tenant_id: UUID, params: PaginationParams
    ) -> Tuple[List[Department], int]:
        return await self._list(db, Department, tenant_id, params, Department.code, Department.name)

    async def get_department(self, db: AsyncSession, tenant_id: UUID, department_id: UUID) -> Department:
        return await self._get(db, Department, tenant_id, department_id, "Department")

    # ============ Job Titles ============

    async def create_job_title(self, db: AsyncSession, tenant_id: UUID, data: JobTitleCreate) -> JobTitle:
        return await self._save(db, JobTitle(
            id=uuid.uuid4(),
            tenant_id=tenant_id,
            code=data.code,
            name=data.name,
            grade=data.grade,
        ))

    async def list_job_titles(
        self, db: AsyncSession, tenant_id: UUID, params: PaginationParams
    ) -> Tuple[List[JobTitle], int]:
        return await self._list(db, JobTitle, tenant_id, params, JobTitle.code, JobTitle.name, JobTitle.grade)

    async def get_job_title(self, db: AsyncSession, tenant_id: UUID, job_title_id: UUID) -> JobTitle:
        return await self._get(db, JobTitle, tenant_id, job_title_id, "Job title")


# Global service instance
_org_service: Optional[OrgService] = None


def get_org_service() -> OrgService:
    """Get the global org service instance."""
    global _org_service
    if _org_service is None:
        _org_service = OrgService()
    return _org_service
