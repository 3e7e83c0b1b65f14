"""Tests for structured logging."""

import io
import json
import logging
from decimal import Decimal

import pytest

from projectledger.domain.entities import Role
from projectledger.domain.errors import ForbiddenError
from projectledger.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    get_logger,
)


def _lines(stream):
    return [json.loads(line) for line in stream.getvalue().splitlines()]


def test_get_logger_namespace():
    assert get_logger("transactions").name == "projectledger.transactions"


def test_formatter_includes_context_and_extras():
    """Context fields and extras land in the JSON envelope."""
    record = logging.LogRecord("projectledger.x", logging.INFO, __file__, 1, "hello", (), None)
    record.amount = Decimal("1.50")
    record.role = Role.MANAGER

    with LogContext.bind(actor_id=7, operation="approve"):
        payload = json.loads(StructuredFormatter().format(record))

    assert payload["message"] == "hello"
    assert payload["level"] == "INFO"
    assert payload["actor_id"] == "7"
    assert payload["operation"] == "approve"
    assert payload["amount"] == "1.50"
    assert payload["role"] == "manager"
    assert LogContext.get_all() == {}


def test_configure_logging_is_idempotent():
    first = io.StringIO()
    second = io.StringIO()
    configure_logging(level="info", stream=first)
    configure_logging(level="debug", stream=second)

    get_logger("test").info("once")

    assert [line["message"] for line in _lines(first)] == ["once"]
    assert second.getvalue() == ""


def test_configure_logging_rejects_unknown_level():
    with pytest.raises(ValueError, match="Unknown log level"):
        configure_logging(level="chatty")


def test_service_logs_approval(transaction_service, add_transaction, users):
    """Approvals are logged at INFO with the actor bound."""
    stream = io.StringIO()
    configure_logging(level="INFO", stream=stream)
    txn = add_transaction(users["user"])

    transaction_service.approve_transaction(users["manager"], txn.id)

    approved = [line for line in _lines(stream) if line["message"] == "transaction_approved"]
    assert len(approved) == 1
    assert approved[0]["transaction_id"] == txn.id
    assert approved[0]["actor_id"] == str(users["manager"].id)
    assert approved[0]["actor_role"] == "manager"


def test_denied_update_logged_as_warning(transaction_service, add_transaction, users):
    stream = io.StringIO()
    configure_logging(level="WARNING", stream=stream)
    txn = add_transaction(users["other_user"])

    with pytest.raises(ForbiddenError):
        transaction_service.update_transaction(users["user"], txn.id, notes="x")

    lines = _lines(stream)
    assert [line["message"] for line in lines] == ["transaction_update_denied"]
    assert lines[0]["level"] == "WARNING"
