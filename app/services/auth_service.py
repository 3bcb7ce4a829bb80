"""
Credential verification and access token issuance.
"""

import asyncio
import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import AuthenticationError
from app.core.security import create_access_token, get_password_hash, verify_password
from app.models.role import Role, UserRole
from app.models.user import User

logger = logging.getLogger("hrcore.auth")

# Same cost factor as real hashes, so a miss takes as long as a wrong password
_DUMMY_PASSWORD_HASH = get_password_hash("hrcore-login-timing-equaliser")


class AuthService:
    """Resolves a login identity by email and issues signed tokens."""

    async def get_user_for_login(self, db: AsyncSession, email: str) -> Optional[User]:
        # Email resolves identity before the tenant is known; the oldest account wins
        result = await db.execute(
            select(User)
            .where(User.email == email)
            .order_by(User.created_at, User.id)
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def get_role_codes(self, db: AsyncSession, tenant_id: UUID, user_id: UUID) -> List[str]:
        result = await db.execute(
            select(Role.code)
            .join(UserRole, UserRole.role_id == Role.id)
            .where(
                UserRole.tenant_id == tenant_id,
                UserRole.user_id == user_id,
                Role.tenant_id == tenant_id,
            )
            .order_by(Role.code)
        )
        return [row[0] for row in result.all()]

    async def authenticate_user(self, db: AsyncSession, email: str, password: str) -> str:
        """
        Verify credentials and return a signed access token.

        Unknown email, missing password hash and wrong password all raise the
        same AuthenticationError so callers cannot enumerate accounts.

        Raises:
            AuthenticationError: If the credentials are invalid
        """
        user = await self.get_user_for_login(db, email)
        known = user is not None and bool(user.password_hash)

        # bcrypt is CPU-bound; keep it off the event loop. Unknown logins are
        # checked against a dummy hash so both paths cost one bcrypt round trip.
        stored_hash = user.password_hash if known else _DUMMY_PASSWORD_HASH
        valid = await asyncio.to_thread(verify_password, password, stored_hash)
        if not known or not valid:
            raise AuthenticationError("invalid credentials")

        try:
            roles = await self.get_role_codes(db, user.tenant_id, user.id)
        except SQLAlchemyError as exc:
            logger.warning(f"Could not load roles for user {user.id}, issuing token without roles: {exc}")
            roles = []

        logger.info(f"User {user.id} authenticated for tenant {user.tenant_id}")
        return create_access_token(user.id, user.tenant_id, roles)


# Global service instance
_auth_service: Optional[AuthService] = None


def get_auth_service() -> AuthService:
    """Get the global auth service instance."""
    global _auth_service
    if _auth_service is None:
        _auth_service = AuthService()
    return _auth_service
