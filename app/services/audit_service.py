"""
Asynchronous audit trail.

Producers call `AuditService.log()`, which places an event on a bounded
in-process queue. A single consumer task persists events one at a time in
FIFO order, each in its own database session, so audit writes never share a
transaction with the request that produced them.

Backpressure: when the queue is full `log()` waits for a free slot rather
than dropping the event. Delivery is best-effort; events still queued when
the process dies are lost.
"""

import asyncio
import json
import logging
import uuid
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Callable, List, Optional, Tuple
from uuid import UUID

from sqlalchemy import desc, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.pagination import PaginationParams
from app.core.config import settings
from app.db.base_class import utcnow
from app.db.tenant_scope import fetch_page, tenant_predicate
from app.models.audit import AuditLog

logger = logging.getLogger("hrcore.audit")


@dataclass
class AuditEvent:
    tenant_id: UUID
    actor_id: Optional[UUID]
    action: str
    entity_type: str
    entity_id: UUID
    changes: Any = None
    occurred_at: datetime = field(default_factory=utcnow)


def _json_default(value: Any) -> Any:
    if isinstance(value, UUID):
        return str(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def serialize_changes(changes: Any) -> Optional[str]:
    """Serialize an audit payload; raises TypeError/ValueError for unserializable data."""
    if changes is None:
        return None
    return json.dumps(changes, default=_json_default)


class AuditService:
    """Bounded audit queue with exactly one background consumer."""

    def __init__(
        self,
        session_factory: Callable[[], AsyncSession],
        maxsize: Optional[int] = None,
    ):
        self._session_factory = session_factory
        self._maxsize = maxsize or settings.AUDIT_QUEUE_SIZE
        self._queue: Optional[asyncio.Queue] = None
        self._worker: Optional[asyncio.Task] = None

    @property
    def queue(self) -> asyncio.Queue:
        # Created lazily so the queue binds to the running event loop
        if self._queue is None:
            self._queue = asyncio.Queue(maxsize=self._maxsize)
        return self._queue

    @property
    def running(self) -> bool:
        return self._worker is not None and not self._worker.done()

    @property
    def pending(self) -> int:
        return self.queue.qsize()

    def start(self) -> None:
        """Start the consumer task. Calling start() twice is a no-op."""
        if self.running:
            return
        self._worker = asyncio.create_task(self._consume(), name="audit-consumer")
        logger.info(f"Audit consumer started (queue capacity {self._maxsize})")

    async def stop(self, timeout: Optional[float] = None) -> None:
        """Drain queued events (bounded by `timeout`), then cancel the consumer."""
        if self._worker is None:
            return

        timeout = settings.AUDIT_SHUTDOWN_TIMEOUT if timeout is None else timeout
        try:
            await asyncio.wait_for(self.queue.join(), timeout=timeout)
        except asyncio.TimeoutError:
            logger.warning(f"Audit queue not drained before shutdown; dropping {self.pending} events")

        self._worker.cancel()
        await asyncio.gather(self._worker, return_exceptions=True)
        self._worker = None
        logger.info("Audit consumer stopped")

    async def flush(self) -> None:
        """Wait until every event queued so far has been processed."""
        await self.queue.join()

    async def log(
        self,
        tenant_id: UUID,
        actor_id: Optional[UUID],
        action: str,
        entity_type: str,
        entity_id: UUID,
        changes: Any = None,
    ) -> None:
        """Queue an audit event. Waits only while the queue is full."""
        await self.queue.put(
            AuditEvent(
                tenant_id=tenant_id,
                actor_id=actor_id,
                action=action,
                entity_type=entity_type,
                entity_id=entity_id,
                changes=changes,
            )
        )

    async def _consume(self) -> None:
        while True:
            event = await self.queue.get()
            try:
                await self._persist(event)
            except Exception:
                logger.exception(f"Audit consumer failed on {event.action} {event.entity_type}/{event.entity_id}")
            finally:
                self.queue.task_done()

    async def _persist(self, event: AuditEvent) -> None:
        try:
            payload = serialize_changes(event.changes)
        except (TypeError, ValueError) as exc:
            logger.error(f"Audit event {event.action} {event.entity_type} discarded, changes not serializable: {exc}")
            return

        entry = AuditLog(
            id=uuid.uuid4(),
            tenant_id=event.tenant_id,
            actor_id=event.actor_id,
            action=event.action,
            entity_type=event.entity_type,
            entity_id=event.entity_id,
            changes=payload,
            created_at=event.occurred_at,
        )

        async with self._session_factory() as db:
            try:
                db.add(entry)
                await db.commit()
            except SQLAlchemyError as exc:
                await db.rollback()
                logger.error(f"Audit log write failed for {event.action} {event.entity_type}: {exc}")

    async def list_logs(
        self,
        db: AsyncSession,
        tenant_id: UUID,
        params: PaginationParams,
        entity_type: Optional[str] = None,
        action: Optional[str] = None,
    ) -> Tuple[List[AuditLog], int]:
        """List a tenant's audit logs, newest first, optionally filtered by entity type and action."""
        query = select(AuditLog).where(tenant_predicate(AuditLog, tenant_id))
        if entity_type:
            query = query.where(AuditLog.entity_type == entity_type)
        if action:
            query = query.where(AuditLog.action == action)
        query = query.order_by(desc(AuditLog.created_at), desc(AuditLog.id))
        return await fetch_page(db, query, params)


# Global service instance
_audit_service: Optional[AuditService] = None


def get_audit_service() -> AuditService:
    """Get the global audit service instance."""
    global _audit_service
    if _audit_service is None:
        from app.db.session import AsyncSessionLocal
        _audit_service = AuditService(AsyncSessionLocal)
    return _audit_service
