"""Tests for transaction export."""

import csv
import io
from datetime import date
from decimal import Decimal

import pytest

from projectledger.domain.errors import ValidationError
from projectledger.domain.export import EXPORT_FIELDS, to_csv


def test_json_records(export_service, add_transaction, users, company, projects):
    """Records resolve references to names in a fixed field order."""
    txn = add_transaction(users["user"], amount="42.50", notes="n")

    records = export_service.export_transactions(users["user"], fmt="json")

    assert len(records) == 1
    record = records[0]
    assert tuple(record) == EXPORT_FIELDS
    assert record["id"] == txn.id
    assert record["amount"] == Decimal("42.50")
    assert record["project"] == "Website"
    assert record["company"] == "Acme"
    assert record["created_by"] == "Uma User (uma@example.com)"
    assert record["approved_by"] == "Not Approved"
    assert record["status"] == "pending"


def test_export_uses_list_scope(export_service, add_transaction, users):
    """Export covers the same set as listing, whatever the status."""
    add_transaction(users["user"])
    add_transaction(users["other_user"])
    add_transaction(users["admin"])

    assert len(export_service.export_transactions(users["user"])) == 1
    assert len(export_service.export_transactions(users["admin"])) == 3


def test_placeholders_for_deleted_references(
    export_service, project_service, company_service, add_transaction, users, company, projects
):
    """Deleted projects and companies export as placeholders."""
    add_transaction(users["admin"])
    project_service.delete_project(users["admin"], projects["managed"].id)
    company_service.delete_company(users["admin"], company.id)

    record = export_service.export_transactions(users["admin"])[0]
    assert record["project"] == "Unknown Project"
    assert record["company"] == "Unknown Company"
    assert record["approved_by"] == "Ada Admin (ada@example.com)"


def test_csv_round_trip(export_service, add_transaction, users):
    """Fields with commas, quotes and newlines survive csv.reader."""
    add_transaction(
        users["user"],
        description='Chairs, desks and "lamps"',
        notes="line one\nline two",
        date=date(2024, 4, 2),
    )

    text = export_service.export_transactions(users["user"], fmt="csv")
    rows = list(csv.reader(io.StringIO(text)))

    assert rows[0] == list(EXPORT_FIELDS)
    assert len(rows) == 2
    row = dict(zip(rows[0], rows[1]))
    assert row["description"] == 'Chairs, desks and "lamps"'
    assert row["notes"] == "line one\nline two"
    assert row["date"] == "2024-04-02"
    assert row["amount"] == "100.00"
    assert row["approved_by"] == "Not Approved"


def test_csv_empty_set(export_service, users):
    """No transactions yields an empty document."""
    assert export_service.export_transactions(users["user"], fmt="csv") == ""
    assert to_csv([]) == ""


def test_unsupported_format(export_service, users):
    with pytest.raises(ValidationError, match="Unsupported export format 'xml'"):
        export_service.export_transactions(users["user"], fmt="xml")
