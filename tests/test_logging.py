"""Tests for the structured logging system (budget_kernel/logging_config.py)."""

import json
import logging
from decimal import Decimal
from io import StringIO

import pytest

from budget_kernel.domain.types import BudgetStatus
from budget_kernel.exceptions import InvalidStatusTransitionError
from budget_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    get_logger,
    reset_logging,
)


@pytest.fixture(autouse=True)
def _clean_logging():
    """Reset logging state around each test, then restore the suite config."""
    reset_logging()
    LogContext.clear()
    yield
    LogContext.clear()
    reset_logging()
    configure_logging(level=logging.DEBUG)


def _make_handler() -> tuple[logging.Handler, StringIO]:
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    return handler, stream


def _parse_all_logs(stream: StringIO) -> list[dict]:
    return [json.loads(line) for line in stream.getvalue().splitlines() if line]


class TestStructuredFormatter:

    def test_basic_json_output(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        get_logger("test").info("hello")

        (record,) = _parse_all_logs(stream)
        assert record["level"] == "INFO"
        assert record["message"] == "hello"
        assert record["logger"] == "budget_kernel.test"
        assert "ts" in record

    def test_extra_fields_and_types(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        get_logger("test").info(
            "budget_saved",
            extra={"budget_id": 7, "total": Decimal("330.00"), "status": BudgetStatus.DRAFT},
        )

        (record,) = _parse_all_logs(stream)
        assert record["budget_id"] == 7
        assert record["total"] == "330.00"
        assert record["status"] == "draft"

    def test_exception_fields(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        try:
            raise InvalidStatusTransitionError("draft", "sent")
        except InvalidStatusTransitionError:
            get_logger("test").error("transition_failed", exc_info=True)

        (record,) = _parse_all_logs(stream)
        assert record["exc_type"] == "InvalidStatusTransitionError"
        assert record["exc_code"] == "INVALID_STATUS_TRANSITION"
        assert record["exc_from_status"] == "draft"
        assert "traceback" in record


class TestLogContext:

    def test_context_fields_included(self):
        handler, stream = _make_handler()
        configure_logging(handler=handler)
        LogContext.set(user="office", correlation_id="abc")
        get_logger("test").info("hello")

        (record,) = _parse_all_logs(stream)
        assert record["user"] == "office"
        assert record["correlation_id"] == "abc"

    def test_bind_restores_previous_values(self):
        LogContext.set(user="outer")
        with LogContext.bind(user="inner", entity_type="budget"):
            assert LogContext.get_all() == {"user": "inner", "entity_type": "budget"}
        assert LogContext.get_all() == {"user": "outer"}

    def test_clear(self):
        LogContext.set(entity_id="3")
        LogContext.clear()
        assert LogContext.get_all() == {}


class TestConfigureLogging:

    def test_idempotent(self):
        handler, stream = _make_handler()
        second = logging.StreamHandler(StringIO())
        configure_logging(handler=handler)
        configure_logging(handler=second)
        handlers = logging.getLogger("budget_kernel").handlers
        assert handler in handlers
        assert second not in handlers

    def test_level_filters(self):
        handler, stream = _make_handler()
        configure_logging(level="WARNING", handler=handler)
        get_logger("test").info("quiet")
        get_logger("test").warning("loud")
        assert [r["message"] for r in _parse_all_logs(stream)] == ["loud"]

    def test_does_not_propagate_to_root(self):
        configure_logging(handler=logging.NullHandler())
        assert logging.getLogger("budget_kernel").propagate is False
