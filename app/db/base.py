# Import all the models, so that Base has them before being
# imported by Alembic
from app.db.base_class import Base  # noqa

from app.models.tenant import Tenant  # noqa
from app.models.org import BusinessUnit, Department, JobTitle  # noqa
from app.models.employee import Employee  # noqa
from app.models.user import User  # noqa
from app.models.role import Role, UserRole  # noqa
from app.models.audit import AuditLog  # noqa
