"""
Login identities and their role grants.
"""

import asyncio
import logging
import uuid
from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.pagination import PaginationParams
from app.core.errors import InvalidReferenceError, NotFoundError, translate_db_error
from app.core.security import get_password_hash
from app.db.tenant_scope import fetch_page, get_in_tenant, search_clause, tenant_predicate
from app.models.employee import Employee
from app.models.role import Role, UserRole
from app.models.user import User
from app.schemas.iam import UserCreate
from app.services.audit_service import AuditService, get_audit_service

logger = logging.getLogger("hrcore.users")


class UserService:
    def __init__(self, audit: Optional[AuditService] = None):
        self.audit = audit or get_audit_service()

    async def _commit(self, db: AsyncSession) -> None:
        try:
            await db.commit()
        except SQLAlchemyError as exc:
            await db.rollback()
            raise translate_db_error(exc) from exc

    async def create_user(self, db: AsyncSession, tenant_id: UUID, actor_id: UUID, data: UserCreate) -> User:
        """
        Create a login for an existing employee of the tenant.

        Raises:
            InvalidReferenceError: Employee missing or in another tenant
            ConflictError: Email already used in the tenant, or the employee already has a login
        """
        if await get_in_tenant(db, Employee, tenant_id, data.employee_id) is None:
            raise InvalidReferenceError(
                f"employee {data.employee_id} not found in tenant {tenant_id}",
                public_message="Employee does not exist or is inaccessible",
            )

        password_hash = await asyncio.to_thread(get_password_hash, data.password)
        user = User(
            id=uuid.uuid4(),
            tenant_id=tenant_id,
            employee_id=data.employee_id,
            email=str(data.email),
            display_name=data.display_name,
            password_hash=password_hash,
        )
        db.add(user)
        await self._commit(db)

        logger.info(f"Created user {user.id} in tenant {tenant_id}")
        await self.audit.log(tenant_id, actor_id, "CREATE", "Users", user.id, {
            "email": user.email,
            "employee_id": data.employee_id,
        })
        return user

    async def list_users(
        self, db: AsyncSession, tenant_id: UUID, params: PaginationParams
    ) -> Tuple[List[User], int]:
        query = select(User).where(tenant_predicate(User, tenant_id))
        if params.search:
            query = query.where(search_clause(params.search, User.email, User.display_name))
        query = query.order_by(User.email, User.id)
        return await fetch_page(db, query, params)

    async def get_user(self, db: AsyncSession, tenant_id: UUID, user_id: UUID) -> User:
        user = await get_in_tenant(db, User, tenant_id, user_id)
        if user is None:
            raise NotFoundError(f"user {user_id} not found", public_message="User not found")
        return user

    async def get_user_by_email(self, db: AsyncSession, tenant_id: UUID, email: str) -> User:
        result = await db.execute(
            select(User).where(tenant_predicate(User, tenant_id), User.email == email)
        )
        user = result.scalar_one_or_none()
        if user is None:
            raise NotFoundError(f"user {email} not found", public_message="User not found")
        return user

    async def assign_role(
        self,
        db: AsyncSession,
        tenant_id: UUID,
        actor_id: UUID,
        user_id: UUID,
        role_id: UUID,
    ) -> UserRole:
        """
        Grant a tenant role to a tenant user.

        Raises:
            NotFoundError: User or role not in the tenant
            ConflictError: The user already holds the role
        """
        await self.get_user(db, tenant_id, user_id)
        if await get_in_tenant(db, Role, tenant_id, role_id) is None:
            raise NotFoundError(f"role {role_id} not found", public_message="Role not found")

        grant = UserRole(
            tenant_id=tenant_id,
            user_id=user_id,
            role_id=role_id,
            granted_by_user_id=actor_id,
        )
        db.add(grant)
        await self._commit(db)

        logger.info(f"Granted role {role_id} to user {user_id} in tenant {tenant_id}")
        await self.audit.log(tenant_id, actor_id, "ASSIGN_ROLE", "UserRoles", user_id, {"role_id": role_id})
        return grant

    async def revoke_role(
        self,
        db: AsyncSession,
        tenant_id: UUID,
        actor_id: UUID,
        user_id: UUID,
        role_id: UUID,
    ) -> bool:
        """Remove a role grant. Revoking a grant that does not exist is not an error."""
        result = await db.execute(
            delete(UserRole).where(
                tenant_predicate(UserRole, tenant_id),
                UserRole.user_id == user_id,
                UserRole.role_id == role_id,
            )
        )
        await self._commit(db)

        removed = result.rowcount > 0
        if removed:
            logger.info(f"Revoked role {role_id} from user {user_id} in tenant {tenant_id}")
            await self.audit.log(tenant_id, actor_id, "REVOKE_ROLE", "UserRoles", user_id, {"role_id": role_id})
        return removed


# Global service instance
_user_service: Optional[UserService] = None


def get_user_service() -> UserService:
    """Get the global user service instance."""
    global _user_service
    if _user_service is None:
        _user_service = UserService()
    return _user_service
