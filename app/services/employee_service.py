"""
Employee records, their organisational placement and reporting lines.
"""

import logging
import uuid
from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy import case, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased, joinedload

from app.api.pagination import PaginationParams
from app.core.errors import InvalidReferenceError, NotFoundError, translate_db_error
from app.db.tenant_scope import fetch_page, get_in_tenant, search_clause, tenant_predicate
from app.models.employee import Employee
from app.models.org import BusinessUnit, Department, JobTitle
from app.schemas.employee import EmployeeBase, EmployeeCreate
from app.services.audit_service import AuditService, get_audit_service

logger = logging.getLogger("hrcore.employees")

# Loader options for the nested summaries in detail views
DETAIL_OPTIONS = (
    joinedload(Employee.business_unit),
    joinedload(Employee.department),
    joinedload(Employee.job_title),
    joinedload(Employee.manager),
)


async def validate_employee_references(db: AsyncSession, tenant_id: UUID, data: EmployeeBase) -> None:
    """
    Ensure every organisational and manager reference resolves inside the tenant.

    Raises:
        InvalidReferenceError: If a reference is missing or belongs to another tenant
    """
    if data.manager_id is not None:
        if await get_in_tenant(db, Employee, tenant_id, data.manager_id) is None:
            raise InvalidReferenceError(
                f"manager {data.manager_id} not found in tenant {tenant_id}",
                public_message="Designated manager does not exist or is inaccessible",
            )

    references = (
        (BusinessUnit, data.business_unit_id, "Business unit"),
        (Department, data.department_id, "Department"),
        (JobTitle, data.job_title_id, "Job title"),
    )
    for model, ref_id, label in references:
        if ref_id is not None and await get_in_tenant(db, model, tenant_id, ref_id) is None:
            raise InvalidReferenceError(
                f"{label} {ref_id} not found in tenant {tenant_id}",
                public_message=f"{label} does not exist or is inaccessible",
            )


def build_employee(tenant_id: UUID, data: EmployeeBase, work_email: Optional[str]) -> Employee:
    return Employee(
        id=uuid.uuid4(),
        tenant_id=tenant_id,
        employee_no=data.employee_no,
        first_name=data.first_name,
        last_name=data.last_name,
        display_name=data.display_name,
        work_email=work_email,
        business_unit_id=data.business_unit_id,
        department_id=data.department_id,
        job_title_id=data.job_title_id,
        manager_id=data.manager_id,
    )


class EmployeeService:
    def __init__(self, audit: Optional[AuditService] = None):
        self.audit = audit or get_audit_service()

    async def create_employee(
        self,
        db: AsyncSession,
        tenant_id: UUID,
        actor_id: UUID,
        data: EmployeeCreate,
    ) -> Employee:
        """
        Create an employee after checking that the manager and org references live in the tenant.

        Raises:
            InvalidReferenceError: Manager or org reference outside the tenant
            ConflictError: Duplicate employee number within the tenant
        """
        await validate_employee_references(db, tenant_id, data)

        employee = build_employee(tenant_id, data, data.work_email)
        db.add(employee)
        try:
            await db.commit()
        except SQLAlchemyError as exc:
            await db.rollback()
            raise translate_db_error(exc) from exc

        logger.info(f"Created employee {employee.employee_no} ({employee.id}) in tenant {tenant_id}")
        await self.audit.log(tenant_id, actor_id, "CREATE", "Employees", employee.id, {
            "employee_no": data.employee_no,
            "first_name": data.first_name,
            "last_name": data.last_name,
            "work_email": data.work_email,
        })
        return employee

    async def list_employees(
        self,
        db: AsyncSession,
        tenant_id: UUID,
        params: PaginationParams,
    ) -> Tuple[List[Employee], int]:
        query = select(Employee).where(tenant_predicate(Employee, tenant_id))
        if params.search:
            query = query.where(search_clause(
                params.search,
                Employee.employee_no,
                Employee.first_name,
                Employee.last_name,
                Employee.display_name,
                Employee.work_email,
            ))
        query = query.order_by(Employee.last_name, Employee.first_name, Employee.id)
        return await fetch_page(db, query, params, options=DETAIL_OPTIONS)

    async def get_employee(self, db: AsyncSession, tenant_id: UUID, employee_id: UUID) -> Employee:
        employee = await get_in_tenant(db, Employee, tenant_id, employee_id, options=DETAIL_OPTIONS)
        if employee is None:
            raise NotFoundError(f"employee {employee_id} not found", public_message="Employee not found")
        return employee

    async def get_employee_hierarchy(
        self,
        db: AsyncSession,
        tenant_id: UUID,
        employee_id: UUID,
    ) -> List[Employee]:
        """
        Return the employee followed by every direct and indirect report.

        The recursive query uses UNION rather than UNION ALL, so a cycle in
        the manager chain terminates instead of recursing forever.
        """
        tree = (
            select(Employee.id)
            .where(tenant_predicate(Employee, tenant_id), Employee.id == employee_id)
            .cte("reporting_tree", recursive=True)
        )
        report = aliased(Employee)
        tree = tree.union(
            select(report.id)
            .join(tree, report.manager_id == tree.c.id)
            .where(tenant_predicate(report, tenant_id))
        )

        result = await db.execute(
            select(Employee)
            .join(tree, tree.c.id == Employee.id)
            .order_by(case((Employee.id == employee_id, 0), else_=1), Employee.employee_no)
        )
        employees = list(result.scalars().all())
        if not employees:
            raise NotFoundError(f"employee {employee_id} not found", public_message="Hierarchy not found")
        return employees


# Global service instance
_employee_service: Optional[EmployeeService] = None


def get_employee_service() -> EmployeeService:
    """Get the global employee service instance."""
    global _employee_service
    if _employee_service is None:
        _employee_service = EmployeeService()
    return _employee_service
