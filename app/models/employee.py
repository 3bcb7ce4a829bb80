from sqlalchemy import Boolean, Column, ForeignKey, Index, String, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship

from app.db.base_class import Base, TimestampMixin, UUIDPrimaryKeyMixin


class Employee(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "employees"

    tenant_id = Column(Uuid, ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False)
    employee_no = Column(String, nullable=False)
    first_name = Column(String, nullable=False)
    last_name = Column(String, nullable=False)
    display_name = Column(String, nullable=True)
    work_email = Column(String, nullable=True)
    business_unit_id = Column(Uuid, ForeignKey("business_units.id"), nullable=True)
    department_id = Column(Uuid, ForeignKey("departments.id"), nullable=True)
    job_title_id = Column(Uuid, ForeignKey("job_titles.id"), nullable=True)
    # Self-reference; the chain is not guarded against cycles
    manager_id = Column(Uuid, ForeignKey("employees.id"), nullable=True)
    status = Column(String, nullable=False, default="ACTIVE")
    is_active = Column(Boolean, nullable=False, default=True)

    # Relationships (always loaded explicitly; async sessions cannot lazy load)
    business_unit = relationship("BusinessUnit", lazy="raise")
    department = relationship("Department", lazy="raise")
    job_title = relationship("JobTitle", lazy="raise")
    manager = relationship("Employee", remote_side="Employee.id", lazy="raise")

    __table_args__ = (
        UniqueConstraint("tenant_id", "employee_no", name="uq_employees_tenant_employee_no"),
        Index("idx_employees_tenant_id", "tenant_id"),
        Index("idx_employees_manager_id", "manager_id"),
    )

    def __repr__(self) -> str:
        return f"<Employee {self.employee_no}: {self.first_name} {self.last_name}>"
