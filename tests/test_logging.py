import json
import logging

from supportdesk.shared.infrastructure.logging import CustomJsonFormatter, log_latency


def _record(message, **extra):
    record = logging.LogRecord("supportdesk.test", logging.INFO, __file__, 1, message, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_formatter_emits_json_with_context_and_redaction():
    formatter = CustomJsonFormatter(fmt="%(name)s %(levelname)s %(message)s", environment="test")
    payload = json.loads(formatter.format(_record(
        "Reply generated",
        branch="faq",
        api_key="sk-123",
        max_tokens="2048",
        correlation_id="abc-123",
    )))

    assert payload["message"] == "Reply generated"
    assert payload["branch"] == "faq"
    assert payload["environment"] == "test"
    assert payload["correlation_id"] == "abc-123"
    assert payload["api_key"] == "***REDACTED***"
    assert payload["max_tokens"] == "2048"
    assert payload["timestamp"]


def test_log_latency_reports_operation(caplog):
    logger = logging.getLogger("supportdesk.test")
    with caplog.at_level(logging.INFO, logger="supportdesk.test"):
        with log_latency(logger, "reply_assembly", candidates=3):
            pass

    record = caplog.records[-1]
    assert record.getMessage() == "reply_assembly completed"
    assert record.operation == "reply_assembly"
    assert record.candidates == 3
