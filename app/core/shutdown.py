"""
Startup and graceful shutdown for the HR core API.

On startup the audit consumer is started. Shutdown runs when the server
exits the lifespan (uvicorn keeps its own SIGTERM/SIGINT handling): in-flight
requests are given time to finish, queued audit events are drained, and
database connections are released, in that order. The audit consumer lives
for the whole serving period.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Awaitable, Callable, List, Optional

logger = logging.getLogger("hrcore.shutdown")


class GracefulShutdownManager:
    """
    Tracks in-flight requests and runs cleanup callbacks once they settle.
    """

    def __init__(self, timeout: float = 30):
        self._shutdown_requested = False
        self._timeout = timeout
        self._shutdown_callbacks: List[Callable[[], Awaitable[None]]] = []
        self._request_count = 0
        self._lock = asyncio.Lock()

    @property
    def shutdown_requested(self) -> bool:
        return self._shutdown_requested

    @property
    def pending_requests(self) -> int:
        return self._request_count

    async def increment_requests(self) -> None:
        async with self._lock:
            self._request_count += 1

    async def decrement_requests(self) -> None:
        async with self._lock:
            self._request_count -= 1

    def add_shutdown_callback(self, callback: Callable[[], Awaitable[None]]) -> None:
        """Register a coroutine function to run during shutdown, in registration order."""
        self._shutdown_callbacks.append(callback)

    async def shutdown(self) -> None:
        if self._shutdown_requested:
            return

        self._shutdown_requested = True
        logger.info("Graceful shutdown initiated...")

        loop = asyncio.get_running_loop()
        deadline = loop.time() + self._timeout
        while self._request_count > 0:
            if loop.time() > deadline:
                logger.warning(f"Shutdown timeout reached with {self._request_count} pending requests")
                break
            logger.info(f"Waiting for {self._request_count} pending requests...")
            await asyncio.sleep(0.5)

        for callback in self._shutdown_callbacks:
            try:
                await callback()
            except Exception as e:
                logger.error(f"Error in shutdown callback {callback.__name__}: {e}")

        logger.info("Graceful shutdown complete")


# Global shutdown manager instance
_shutdown_manager: Optional[GracefulShutdownManager] = None


def get_shutdown_manager() -> GracefulShutdownManager:
    """Get the global shutdown manager instance."""
    global _shutdown_manager
    if _shutdown_manager is None:
        _shutdown_manager = GracefulShutdownManager()
    return _shutdown_manager


@asynccontextmanager
async def lifespan_manager(app):
    """
    FastAPI lifespan: start the audit consumer, then tear everything down in order.

    Usage:
        app = FastAPI(lifespan=lifespan_manager)
    """
    from app.db.session import engine
    from app.services.audit_service import get_audit_service

    logger.info("Application starting up...")
    shutdown_manager = get_shutdown_manager()

    audit = get_audit_service()
    audit.start()

    async def drain_audit_queue():
        await audit.stop()

    async def dispose_engine():
        logger.info("Closing database connections...")
        await engine.dispose()

    shutdown_manager.add_shutdown_callback(drain_audit_queue)
    shutdown_manager.add_shutdown_callback(dispose_engine)

    logger.info("Application startup complete")
    try:
        yield
    finally:
        logger.info("Application shutting down...")
        await shutdown_manager.shutdown()


class RequestTrackingMiddleware:
    """
    Counts in-flight requests and rejects new ones with 503 once shutdown starts.
    """

    def __init__(self, app):
        self.app = app
        self.shutdown_manager = get_shutdown_manager()

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        if self.shutdown_manager.shutdown_requested:
            await send({
                "type": "http.response.start",
                "status": 503,
                "headers": [
                    [b"content-type", b"application/json"],
                    [b"connection", b"close"],
                ],
            })
            await send({
                "type": "http.response.body",
                "body": b'{"error": "Service is shutting down"}',
            })
            return

        await self.shutdown_manager.increment_requests()
        try:
            await self.app(scope, receive, send)
        finally:
            await self.shutdown_manager.decrement_requests()
