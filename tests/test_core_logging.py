"""
Tests for app/core/logging_config.py - Log formatting.
"""
import json
import logging
import sys


def _record(msg="Created employee UK-00001", level=logging.INFO, exc_info=None, **extra):
    record = logging.LogRecord("hrcore.employees", level, "employee_service.py", 42, msg, None, exc_info)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJSONFormatter:
    def test_emits_one_json_object(self):
        from app.core.logging_config import JSONFormatter

        data = json.loads(JSONFormatter().format(_record()))

        assert data["message"] == "Created employee UK-00001"
        assert data["level"] == "INFO"
        assert data["logger"] == "hrcore.employees"
        assert data["service"] == "hrcore-api"
        assert data["source"]["line"] == 42

    def test_extra_fields_nested(self):
        from app.core.logging_config import JSONFormatter

        data = json.loads(JSONFormatter().format(_record(request_id="ab12cd34", status=201)))

        assert data["extra"] == {"request_id": "ab12cd34", "status": 201}

    def test_exception_details_included(self):
        from app.core.logging_config import JSONFormatter

        try:
            raise RuntimeError("audit insert failed")
        except RuntimeError:
            record = _record(level=logging.ERROR, exc_info=sys.exc_info())

        data = json.loads(JSONFormatter().format(record))

        assert data["exception"]["type"] == "RuntimeError"
        assert data["exception"]["message"] == "audit insert failed"


class TestColoredFormatter:
    def test_single_line_with_level_and_logger(self):
        from app.core.logging_config import ColoredFormatter

        line = ColoredFormatter().format(_record(level=logging.WARNING, msg="Queue full"))

        assert "WARNING" in line
        assert "hrcore.employees" in line
        assert "Queue full" in line
        assert "\n" not in line


class TestGenerateRequestId:
    def test_short_hex_ids_are_unique(self):
        from app.core.logging_config import generate_request_id

        ids = {generate_request_id() for _ in range(50)}

        assert len(ids) == 50
        assert all(len(i) == 8 for i in ids)
