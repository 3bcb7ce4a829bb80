from sqlalchemy import Column, String, ForeignKey, Index, UniqueConstraint, Uuid

from app.db.base_class import Base, TimestampMixin, UUIDPrimaryKeyMixin


class BusinessUnit(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "business_units"

    tenant_id = Column(Uuid, ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False)
    code = Column(String, nullable=False)
    name = Column(String, nullable=False)

    __table_args__ = (
        UniqueConstraint("tenant_id", "code", name="uq_business_units_tenant_code"),
        Index("idx_business_units_tenant_id", "tenant_id"),
    )


class Department(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "departments"

    tenant_id = Column(Uuid, ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False)
    parent_department_id = Column(Uuid, ForeignKey("departments.id"), nullable=True)
    code = Column(String, nullable=True)
    name = Column(String, nullable=False)

    __table_args__ = (
        UniqueConstraint("tenant_id", "code", name="uq_departments_tenant_code"),
        Index("idx_departments_tenant_id", "tenant_id"),
    )


class JobTitle(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "job_titles"

    tenant_id = Column(Uuid, ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False)
    code = Column(String, nullable=False)
    name = Column(String, nullable=False)
    grade = Column(String, nullable=True)

    __table_args__ = (
        UniqueConstraint("tenant_id", "code", name="uq_job_titles_tenant_code"),
        Index("idx_job_titles_tenant_id", "tenant_id"),
    )
