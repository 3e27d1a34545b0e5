"""Unit tests for structured JSON logging"""

import json
import logging
from fintrack_gateway.config import settings
from fintrack_gateway.infrastructure.observability.logging import CustomJsonFormatter


def test_formatter_uses_configured_service_name(monkeypatch):
    monkeypatch.setattr(settings, "service_name", "fintrack-test")
    formatter = CustomJsonFormatter("%(timestamp)s %(level)s %(name)s %(message)s")
    record = logging.LogRecord("fintrack", logging.INFO, __file__, 1, "SMS import completed", None, None)
    record.request_id = "req-1"

    payload = json.loads(formatter.format(record))

    assert payload["service"] == "fintrack-test"
    assert payload["level"] == "INFO"
    assert payload["request_id"] == "req-1"
    assert payload["message"] == "SMS import completed"
