"""
Onboarding: provision an employee, their login and an initial role as one unit.

All three rows are written inside a single transaction. If any step fails
the transaction rolls back and nothing is left behind; the audit event is
only queued after the commit succeeds.
"""

import asyncio
import logging
import uuid
from typing import Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import InvalidReferenceError, OnboardingError
from app.core.security import get_password_hash
from app.db.tenant_scope import get_in_tenant
from app.models.role import Role, UserRole
from app.models.user import User
from app.schemas.onboarding import OnboardingResult, OnboardRequest
from app.services.audit_service import AuditService, get_audit_service
from app.services.employee_service import build_employee, validate_employee_references

logger = logging.getLogger("hrcore.onboarding")


class OnboardingService:
    def __init__(self, audit: Optional[AuditService] = None):
        self.audit = audit or get_audit_service()

    async def execute_onboarding(
        self,
        db: AsyncSession,
        tenant_id: UUID,
        actor_id: UUID,
        request: OnboardRequest,
    ) -> OnboardingResult:
        """
        Create Employee, User and UserRole atomically.

        Raises:
            OnboardingError: Wraps the failing step; its status follows the cause
                (400 invalid reference, 409 duplicate, 500 otherwise)
        """
        email = str(request.work_email)

        async with db.begin():
            try:
                await validate_employee_references(db, tenant_id, request)
                employee = build_employee(tenant_id, request, email)
                db.add(employee)
                await db.flush()
            except Exception as exc:
                raise OnboardingError("failed to create employee", exc) from exc

            try:
                password_hash = await asyncio.to_thread(get_password_hash, request.password)
                user = User(
                    id=uuid.uuid4(),
                    tenant_id=tenant_id,
                    employee_id=employee.id,
                    email=email,
                    display_name=request.display_name,
                    password_hash=password_hash,
                )
                db.add(user)
                await db.flush()
            except Exception as exc:
                raise OnboardingError("failed to create user", exc) from exc

            try:
                role = await get_in_tenant(db, Role, tenant_id, request.initial_role_id)
                if role is None:
                    raise InvalidReferenceError(
                        f"role {request.initial_role_id} not found in tenant {tenant_id}",
                        public_message="Role does not exist or is inaccessible",
                    )
                db.add(UserRole(
                    tenant_id=tenant_id,
                    user_id=user.id,
                    role_id=role.id,
                    business_unit_id=request.business_unit_id,
                    department_id=request.department_id,
                    granted_by_user_id=actor_id,
                ))
                await db.flush()
            except Exception as exc:
                raise OnboardingError("failed to assign role", exc) from exc

        logger.info(f"Onboarded employee {request.employee_no} as user {user.id} in tenant {tenant_id}")
        await self.audit.log(tenant_id, actor_id, "ONBOARD", "Users", user.id, {
            "action": "Complete Onboarding Flow",
            "employee_no": request.employee_no,
            "target_role_id": str(request.initial_role_id),
        })
        return OnboardingResult(employee_id=employee.id, user_id=user.id, email=email)


# Global service instance
_onboarding_service: Optional[OnboardingService] = None


def get_onboarding_service() -> OnboardingService:
    """Get the global onboarding service instance."""
    global _onboarding_service
    if _onboarding_service is None:
        _onboarding_service = OnboardingService()
    return _onboarding_service
