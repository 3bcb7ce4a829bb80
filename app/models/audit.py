from sqlalchemy import Column, DateTime, ForeignKey, Index, String, Text, Uuid

from app.db.base_class import Base, UUIDPrimaryKeyMixin, utcnow


class AuditLog(UUIDPrimaryKeyMixin, Base):
    """Append-only record of a mutating action"""
    __tablename__ = "audit_logs"

    tenant_id = Column(Uuid, ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False)
    actor_id = Column(Uuid, nullable=True)
    action = Column(String, nullable=False)  # e.g. "CREATE", "ONBOARD"
    entity_type = Column(String, nullable=False)  # e.g. "Employees", "Users"
    entity_id = Column(Uuid, nullable=False)
    changes = Column(Text, nullable=True)  # JSON payload describing the change
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    __table_args__ = (
        Index('idx_audit_tenant_created', 'tenant_id', 'created_at'),
        Index('idx_audit_entity', 'entity_type', 'entity_id'),
        Index('idx_audit_action', 'action'),
    )

    def __repr__(self):
        return f"<AuditLog {self.id}: {self.action} {self.entity_type}/{self.entity_id}>"
