from sqlalchemy import Column, DateTime, ForeignKey, Index, PrimaryKeyConstraint, String, Text, UniqueConstraint, Uuid

from app.db.base_class import Base, TimestampMixin, UUIDPrimaryKeyMixin, utcnow


class Role(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    __tablename__ = "roles"

    tenant_id = Column(Uuid, ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False)
    code = Column(String, nullable=False)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)

    __table_args__ = (
        UniqueConstraint("tenant_id", "code", name="uq_roles_tenant_code"),
    )


class UserRole(Base):
    __tablename__ = "user_roles"

    tenant_id = Column(Uuid, ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    role_id = Column(Uuid, ForeignKey("roles.id", ondelete="CASCADE"), nullable=False)
    # Scope is recorded but not consulted by authorization checks
    business_unit_id = Column(Uuid, ForeignKey("business_units.id"), nullable=True)
    department_id = Column(Uuid, ForeignKey("departments.id"), nullable=True)
    granted_by_user_id = Column(Uuid, ForeignKey("users.id"), nullable=True)
    granted_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    __table_args__ = (
        PrimaryKeyConstraint("tenant_id", "user_id", "role_id"),
        Index("idx_user_roles_user_id", "user_id"),
        Index("idx_user_roles_role_id", "role_id"),
    )
