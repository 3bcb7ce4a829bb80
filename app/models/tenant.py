from sqlalchemy import Column, String

from app.db.base_class import Base, TimestampMixin, UUIDPrimaryKeyMixin


class Tenant(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """Root of data isolation; every other record belongs to exactly one tenant."""
    __tablename__ = "tenants"

    code = Column(String, unique=True, nullable=False)
    name = Column(String, nullable=False)

    def __repr__(self) -> str:
        return f"<Tenant {self.code}>"
