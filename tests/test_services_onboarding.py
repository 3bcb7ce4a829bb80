"""
Tests for app/services/onboarding_service.py - Atomic employee + user + role provisioning.
"""
import json
import uuid

import pytest
from sqlalchemy import func, select

from conftest import seed_tenant


def _request(role_id, **overrides):
    from app.schemas.onboarding import OnboardRequest

    data = {
        "employee_no": "UK-00042",
        "first_name": "Rezan",
        "last_name": "Ahmed",
        "display_name": "Rezan A.",
        "work_email": "rezan.ahmed@inova.krd",
        "password": "s3cure-passw0rd",
        "initial_role_id": role_id,
    }
    data.update(overrides)
    return OnboardRequest(**data)


async def _count(session_factory, model, **filters):
    async with session_factory() as session:
        query = select(func.count()).select_from(model)
        for column, value in filters.items():
            query = query.where(getattr(model, column) == value)
        return (await session.execute(query)).scalar_one()


async def _onboard(session_factory, audit_service, seeded, request):
    from app.services.onboarding_service import OnboardingService

    async with session_factory() as db:
        return await OnboardingService(audit_service).execute_onboarding(
            db, seeded.tenant_id, seeded.admin_user_id, request
        )


class TestExecuteOnboarding:
    """Test the happy path."""

    @pytest.mark.asyncio
    async def test_creates_employee_user_and_grant(self, session_factory, audit_service):
        from app.core.security import verify_password
        from app.models.employee import Employee
        from app.models.role import UserRole
        from app.models.user import User

        seeded = await seed_tenant(session_factory)

        result = await _onboard(session_factory, audit_service, seeded, _request(seeded.viewer_role_id))

        assert result.employee_id != result.user_id
        assert result.email == "rezan.ahmed@inova.krd"

        async with session_factory() as session:
            employee = await session.get(Employee, result.employee_id)
            user = await session.get(User, result.user_id)
            grant = (await session.execute(
                select(UserRole).where(UserRole.user_id == result.user_id)
            )).scalar_one()

        assert employee.tenant_id == seeded.tenant_id
        assert employee.work_email == "rezan.ahmed@inova.krd"
        assert employee.status == "ACTIVE"
        assert user.employee_id == employee.id
        assert user.display_name == "Rezan A."
        assert verify_password("s3cure-passw0rd", user.password_hash)
        assert grant.role_id == seeded.viewer_role_id
        assert grant.granted_by_user_id == seeded.admin_user_id

    @pytest.mark.asyncio
    async def test_audit_event_emitted_after_commit(self, session_factory, audit_service, db_session):
        from app.api.pagination import parse_pagination

        seeded = await seed_tenant(session_factory)

        result = await _onboard(session_factory, audit_service, seeded, _request(seeded.viewer_role_id))
        await audit_service.flush()

        logs, total = await audit_service.list_logs(db_session, seeded.tenant_id, parse_pagination(), action="ONBOARD")
        assert total == 1
        assert logs[0].entity_type == "Users"
        assert logs[0].entity_id == result.user_id
        assert logs[0].actor_id == seeded.admin_user_id
        assert json.loads(logs[0].changes) == {
            "action": "Complete Onboarding Flow",
            "employee_no": "UK-00042",
            "target_role_id": str(seeded.viewer_role_id),
        }

    @pytest.mark.asyncio
    async def test_manager_in_same_tenant_is_accepted(self, session_factory, audit_service):
        from app.models.employee import Employee

        seeded = await seed_tenant(session_factory)

        result = await _onboard(
            session_factory, audit_service, seeded,
            _request(seeded.viewer_role_id, manager_id=seeded.admin_employee_id),
        )

        async with session_factory() as session:
            employee = await session.get(Employee, result.employee_id)
        assert employee.manager_id == seeded.admin_employee_id


class TestOnboardingAtomicity:
    """Any failing step leaves no Employee, User or grant behind."""

    @pytest.mark.asyncio
    async def test_foreign_role_rolls_back_everything(self, session_factory, audit_service):
        from app.core.errors import OnboardingError
        from app.models.employee import Employee
        from app.models.user import User

        seeded = await seed_tenant(session_factory, code="ALPHA")
        other = await seed_tenant(session_factory, code="BETA")

        with pytest.raises(OnboardingError) as exc_info:
            await _onboard(session_factory, audit_service, seeded, _request(other.viewer_role_id))

        assert exc_info.value.status_code == 400
        assert await _count(session_factory, Employee, employee_no="UK-00042") == 0
        assert await _count(session_factory, User, email="rezan.ahmed@inova.krd") == 0

    @pytest.mark.asyncio
    async def test_missing_role_rolls_back_everything(self, session_factory, audit_service):
        from app.core.errors import OnboardingError
        from app.models.employee import Employee

        seeded = await seed_tenant(session_factory)

        with pytest.raises(OnboardingError) as exc_info:
            await _onboard(session_factory, audit_service, seeded, _request(uuid.uuid4()))

        assert exc_info.value.status_code == 400
        assert exc_info.value.step == "failed to assign role"
        assert await _count(session_factory, Employee, tenant_id=seeded.tenant_id) == 1

    @pytest.mark.asyncio
    async def test_no_audit_event_on_failure(self, session_factory, audit_service, db_session):
        from app.api.pagination import parse_pagination
        from app.core.errors import OnboardingError

        seeded = await seed_tenant(session_factory)

        with pytest.raises(OnboardingError):
            await _onboard(session_factory, audit_service, seeded, _request(uuid.uuid4()))
        await audit_service.flush()

        _, total = await audit_service.list_logs(db_session, seeded.tenant_id, parse_pagination())
        assert total == 0

    @pytest.mark.asyncio
    async def test_missing_manager_is_rejected(self, session_factory, audit_service):
        from app.core.errors import OnboardingError
        from app.models.employee import Employee

        seeded = await seed_tenant(session_factory)

        with pytest.raises(OnboardingError) as exc_info:
            await _onboard(
                session_factory, audit_service, seeded,
                _request(seeded.viewer_role_id, manager_id=uuid.uuid4()),
            )

        assert exc_info.value.status_code == 400
        assert exc_info.value.public_message == "Designated manager does not exist or is inaccessible"
        assert await _count(session_factory, Employee, employee_no="UK-00042") == 0

    @pytest.mark.asyncio
    async def test_manager_from_another_tenant_is_rejected(self, session_factory, audit_service):
        from app.core.errors import OnboardingError

        seeded = await seed_tenant(session_factory, code="ALPHA")
        other = await seed_tenant(session_factory, code="BETA")

        with pytest.raises(OnboardingError) as exc_info:
            await _onboard(
                session_factory, audit_service, seeded,
                _request(seeded.viewer_role_id, manager_id=other.admin_employee_id),
            )

        assert exc_info.value.status_code == 400

    @pytest.mark.asyncio
    async def test_duplicate_employee_no_is_conflict(self, session_factory, audit_service):
        from app.core.errors import OnboardingError
        from app.models.user import User

        seeded = await seed_tenant(session_factory)
        await _onboard(session_factory, audit_service, seeded, _request(seeded.viewer_role_id))

        with pytest.raises(OnboardingError) as exc_info:
            await _onboard(
                session_factory, audit_service, seeded,
                _request(seeded.viewer_role_id, work_email="someone.else@inova.krd"),
            )

        assert exc_info.value.status_code == 409
        assert exc_info.value.public_message == "A record with this value already exists"
        assert await _count(session_factory, User, email="someone.else@inova.krd") == 0

    @pytest.mark.asyncio
    async def test_duplicate_email_rolls_back_employee(self, session_factory, audit_service):
        from app.core.errors import OnboardingError
        from app.models.employee import Employee

        seeded = await seed_tenant(session_factory)

        with pytest.raises(OnboardingError) as exc_info:
            await _onboard(
                session_factory, audit_service, seeded,
                _request(seeded.viewer_role_id, employee_no="UK-00043", work_email=seeded.admin_email),
            )

        assert exc_info.value.status_code == 409
        assert exc_info.value.step == "failed to create user"
        assert await _count(session_factory, Employee, employee_no="UK-00043") == 0
