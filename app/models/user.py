from sqlalchemy import Column, ForeignKey, Index, String, UniqueConstraint, Uuid

from app.db.base_class import Base, TimestampMixin, UUIDPrimaryKeyMixin


class User(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """Login identity layered 1:1 on top of an employee."""
    __tablename__ = "users"

    tenant_id = Column(Uuid, ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False)
    employee_id = Column(Uuid, ForeignKey("employees.id"), nullable=False, unique=True)
    email = Column(String, nullable=False)
    display_name = Column(String, nullable=True)
    password_hash = Column(String, nullable=True)

    __table_args__ = (
        UniqueConstraint("tenant_id", "email", name="uq_users_tenant_email"),
        Index("idx_users_email", "email"),
    )

    def __repr__(self) -> str:
        return f"<User {self.email}>"
