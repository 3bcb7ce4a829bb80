"""
Tests for app/main.py - FastAPI application, health checks and error envelopes.
"""
import json
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi import status


class TestHealthEndpoint:
    """Test application health check endpoint."""

    @pytest.mark.asyncio
    async def test_health_check_healthy(self):
        """Health check should return healthy when DB is connected."""
        from app.main import health_check

        with patch("app.main.check_db_connection", new_callable=AsyncMock) as mock_db:
            mock_db.return_value = True

            response = await health_check()

        assert response.status == "healthy"
        assert response.service == "hrcore-api"
        assert response.checks["database"] is True

    @pytest.mark.asyncio
    async def test_health_check_unavailable_when_db_down(self):
        from fastapi.responses import JSONResponse

        from app.main import health_check

        with patch("app.main.check_db_connection", new_callable=AsyncMock) as mock_db:
            mock_db.return_value = False

            response = await health_check()

        assert isinstance(response, JSONResponse)
        assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
        assert json.loads(response.body) == {"error": "Database unavailable"}

    @pytest.mark.asyncio
    async def test_health_response_carries_security_headers(self, client):
        with patch("app.main.check_db_connection", new_callable=AsyncMock, return_value=True):
            response = await client.get("/health")

        assert response.status_code == 200
        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["X-Frame-Options"] == "DENY"


class TestCheckDbConnection:
    @pytest.mark.asyncio
    async def test_check_db_connection_success(self):
        from app.db.session import check_db_connection

        mock_engine = MagicMock()
        mock_connection = AsyncMock()
        mock_engine.connect = MagicMock(return_value=mock_connection)
        mock_connection.__aenter__ = AsyncMock(return_value=mock_connection)
        mock_connection.__aexit__ = AsyncMock(return_value=None)
        mock_connection.execute = AsyncMock()

        with patch("app.db.session.engine", mock_engine):
            result = await check_db_connection()

        assert result is True

    @pytest.mark.asyncio
    async def test_check_db_connection_failure(self):
        from app.db.session import check_db_connection

        mock_engine = MagicMock()
        mock_engine.connect = MagicMock(side_effect=Exception("Connection refused"))

        with patch("app.db.session.engine", mock_engine):
            result = await check_db_connection()

        assert result is False


class TestGlobalExceptionHandler:
    """Test the last-resort error envelope."""

    @pytest.mark.asyncio
    async def test_development_includes_exception_details(self):
        from app.main import global_exception_handler

        request = MagicMock()
        request.method = "GET"
        request.url.path = "/api/v1/employees"

        response = await global_exception_handler(request, ValueError("boom"))

        body = json.loads(response.body)
        assert response.status_code == 500
        assert body["error"] == "ValueError"
        assert body["detail"] == "boom"
        assert body["path"] == "/api/v1/employees"

    @pytest.mark.asyncio
    async def test_production_hides_details_behind_reference_id(self):
        from app.main import global_exception_handler

        request = MagicMock()
        request.method = "GET"
        request.url.path = "/api/v1/employees"

        with patch("app.main.settings", MagicMock(IS_PRODUCTION=True)):
            response = await global_exception_handler(request, ValueError("secret table name"))

        body = json.loads(response.body)
        assert body["error"] == "Internal server error"
        assert "secret table name" not in body["detail"]
        assert "Reference ID" in body["detail"]


class TestServiceErrorHandler:
    @pytest.mark.asyncio
    async def test_renders_public_message_only(self):
        from app.core.errors import ConflictError
        from app.main import service_error_handler

        request = MagicMock()
        exc = ConflictError('duplicate key value violates unique constraint "uq_users_email"')

        response = await service_error_handler(request, exc)

        assert response.status_code == 409
        assert json.loads(response.body) == {"error": "A record with this value already exists"}


class TestGracefulShutdown:
    @pytest.mark.asyncio
    async def test_callbacks_run_in_order_once(self):
        from app.core.shutdown import GracefulShutdownManager

        calls = []
        manager = GracefulShutdownManager(timeout=1)

        async def first():
            calls.append("audit")

        async def second():
            calls.append("engine")

        manager.add_shutdown_callback(first)
        manager.add_shutdown_callback(second)

        await manager.shutdown()
        await manager.shutdown()

        assert calls == ["audit", "engine"]
        assert manager.shutdown_requested is True

    @pytest.mark.asyncio
    async def test_failing_callback_does_not_block_the_rest(self):
        from app.core.shutdown import GracefulShutdownManager

        calls = []
        manager = GracefulShutdownManager(timeout=1)

        async def broken():
            raise RuntimeError("queue already closed")

        async def dispose():
            calls.append("engine")

        manager.add_shutdown_callback(broken)
        manager.add_shutdown_callback(dispose)

        await manager.shutdown()

        assert calls == ["engine"]

    @pytest.mark.asyncio
    async def test_requests_rejected_after_shutdown_starts(self):
        from app.core.shutdown import GracefulShutdownManager, RequestTrackingMiddleware

        inner = AsyncMock()
        middleware = RequestTrackingMiddleware(inner)
        middleware.shutdown_manager = GracefulShutdownManager(timeout=0)
        await middleware.shutdown_manager.shutdown()

        sent = []

        async def send(message):
            sent.append(message)

        await middleware({"type": "http"}, AsyncMock(), send)

        inner.assert_not_called()
        assert sent[0]["status"] == 503
        assert json.loads(sent[1]["body"]) == {"error": "Service is shutting down"}


class TestLifespan:
    """The audit consumer runs for the whole serving period and stops only on lifespan exit."""

    @pytest.mark.asyncio
    async def test_audit_stopped_only_on_lifespan_exit(self):
        import asyncio

        from app.core.shutdown import GracefulShutdownManager, lifespan_manager

        audit = MagicMock()
        audit.stop = AsyncMock()
        engine = MagicMock()
        engine.dispose = AsyncMock()
        loop = asyncio.get_running_loop()

        with patch("app.services.audit_service.get_audit_service", return_value=audit), \
                patch("app.db.session.engine", engine), \
                patch("app.core.shutdown.get_shutdown_manager", return_value=GracefulShutdownManager(timeout=1)), \
                patch.object(loop, "add_signal_handler") as add_signal_handler:
            async with lifespan_manager(MagicMock()):
                audit.start.assert_called_once()
                audit.stop.assert_not_awaited()
                engine.dispose.assert_not_awaited()

            audit.stop.assert_awaited_once()
            engine.dispose.assert_awaited_once()

        add_signal_handler.assert_not_called()


class TestRunEntryPoint:
    def test_serves_on_configured_port_with_trusted_proxies(self):
        from app.core.config import settings
        from app.main import run

        with patch("app.main.uvicorn.run") as serve:
            run()

        kwargs = serve.call_args.kwargs
        assert serve.call_args.args == ("app.main:app",)
        assert kwargs["port"] == settings.API_PORT == 8081
        assert kwargs["proxy_headers"] is True
        assert kwargs["forwarded_allow_ips"] == settings.FORWARDED_ALLOW_IPS
