"""
Tests for app/core/errors.py - Service error types and database error translation.
"""
from sqlalchemy.exc import IntegrityError, OperationalError


class _PgError(Exception):
    """Stand-in for an asyncpg error carrying a SQLSTATE."""

    def __init__(self, message, sqlstate):
        super().__init__(message)
        self.sqlstate = sqlstate


def _integrity(orig):
    return IntegrityError("INSERT ...", {}, orig)


class TestTranslateDbError:
    """Test mapping of persistence errors to client-visible errors."""

    def test_unique_violation_by_sqlstate(self):
        from app.core.errors import ConflictError, translate_db_error

        err = translate_db_error(_integrity(_PgError("dup", "23505")))

        assert isinstance(err, ConflictError)
        assert err.status_code == 409
        assert err.public_message == "A record with this value already exists"

    def test_foreign_key_violation_by_sqlstate(self):
        from app.core.errors import InvalidReferenceError, translate_db_error

        err = translate_db_error(_integrity(_PgError("fk", "23503")))

        assert isinstance(err, InvalidReferenceError)
        assert err.status_code == 400
        assert err.public_message == "Invalid reference to a related record"

    def test_sqlite_messages_are_classified(self):
        from app.core.errors import translate_db_error

        unique = translate_db_error(_integrity(Exception("UNIQUE constraint failed: employees.employee_no")))
        fk = translate_db_error(_integrity(Exception("FOREIGN KEY constraint failed")))

        assert unique.status_code == 409
        assert fk.status_code == 400

    def test_other_errors_are_generic_500(self):
        from app.core.errors import translate_db_error

        err = translate_db_error(OperationalError("SELECT 1", {}, Exception("connection refused")))

        assert err.status_code == 500
        assert err.public_message == "Internal server error"
        assert "connection refused" not in err.public_message

    def test_service_errors_pass_through(self):
        from app.core.errors import NotFoundError, translate_db_error

        original = NotFoundError("missing", public_message="Employee not found")

        assert translate_db_error(original) is original


class TestOnboardingError:
    """Test that onboarding failures keep the status of their cause."""

    def test_wraps_service_error(self):
        from app.core.errors import InvalidReferenceError, OnboardingError

        cause = InvalidReferenceError("role x not found", public_message="Role does not exist or is inaccessible")
        err = OnboardingError("failed to assign role", cause)

        assert err.status_code == 400
        assert err.public_message == "Role does not exist or is inaccessible"
        assert err.step == "failed to assign role"
        assert "failed to assign role" in str(err)

    def test_wraps_integrity_error(self):
        from app.core.errors import OnboardingError

        err = OnboardingError("failed to create user", _integrity(_PgError("dup", "23505")))

        assert err.status_code == 409

    def test_wraps_unexpected_error(self):
        from app.core.errors import OnboardingError

        err = OnboardingError("failed to create user", RuntimeError("boom"))

        assert err.status_code == 500
        assert err.public_message == "Internal server error"


class TestServiceError:
    def test_internal_message_never_becomes_public(self):
        from app.core.errors import ConflictError

        err = ConflictError('duplicate key value violates unique constraint "uq_users_email"')

        assert err.public_message == "A record with this value already exists"
        assert "uq_users_email" in str(err)
