"""Transaction export as structured records or CSV text."""

import csv
import io
from enum import StrEnum
from typing import Any, Iterable, Optional
from projectledger.database.base import Database
from projectledger.domain import errors
from projectledger.domain.entities import (
    Principal,
    Transaction as TransactionEntity,
    TransactionFilters,
)
from projectledger.domain.transaction import TransactionService
from projectledger.logging_config import get_logger

logger = get_logger("export")

EXPORT_FIELDS = (
    "id",
    "type",
    "amount",
    "description",
    "date",
    "category",
    "project",
    "company",
    "status",
    "created_by",
    "approved_by",
    "notes",
    "created_at",
    "updated_at",
)

UNKNOWN_PROJECT = "Unknown Project"
UNKNOWN_COMPANY = "Unknown Company"
UNKNOWN_USER = "Unknown User"
NOT_APPROVED = "Not Approved"


class ExportFormat(StrEnum):
    JSON = "json"
    CSV = "csv"


class ExportService:
    """Service for exporting the transactions a principal can list."""

    def __init__(self, db: Database):
        """Initialize export service.

        Args:
            db: Database instance
        """
        self.db = db
        self.transactions = TransactionService(db)

    def build_export_records(
        self, transactions: Iterable[TransactionEntity]
    ) -> list[dict[str, Any]]:
        """Render transactions as flat records with references resolved.

        Projects and companies become their names and people become
        ``"name (email)"``. A reference that no longer resolves, such as a
        deleted project, is replaced by a placeholder.
        """
        projects: dict[int, Optional[str]] = {}
        companies: dict[int, Optional[str]] = {}
        users: dict[int, Optional[str]] = {}

        def project_name(project_id):
            if project_id not in projects:
                project = self.db.get_project(project_id)
                projects[project_id] = project.name if project else None
            return projects[project_id]

        def company_name(company_id):
            if company_id not in companies:
                company = self.db.get_company(company_id)
                companies[company_id] = company.name if company else None
            return companies[company_id]

        def user_name(user_id):
            if user_id is None:
                return None
            if user_id not in users:
                user = self.db.get_user(user_id)
                users[user_id] = user.display_name if user else None
            return users[user_id]

        records = []
        for txn in transactions:
            records.append(
                {
                    "id": txn.id,
                    "type": txn.type.value,
                    "amount": txn.amount,
                    "description": txn.description,
                    "date": txn.date,
                    "category": txn.category.value,
                    "project": project_name(txn.project_id) or UNKNOWN_PROJECT,
                    "company": company_name(txn.company_id) or UNKNOWN_COMPANY,
                    "status": txn.status.value,
                    "created_by": user_name(txn.created_by) or UNKNOWN_USER,
                    "approved_by": user_name(txn.approved_by) or NOT_APPROVED,
                    "notes": txn.notes,
                    "created_at": txn.created_at,
                    "updated_at": txn.updated_at,
                }
            )
        return records

    def export_transactions(
        self,
        principal: Principal,
        filters: Optional[TransactionFilters] = None,
        fmt: ExportFormat | str = ExportFormat.JSON,
    ) -> list[dict[str, Any]] | str:
        """Export the transactions ``principal`` can list.

        Args:
            principal: Acting principal
            filters: Optional caller filters, as for listing
            fmt: ``json`` for a list of records, ``csv`` for a text table

        Returns:
            List of records for JSON, CSV text otherwise

        Raises:
            ValidationError: If the format is not supported
        """
        try:
            fmt = ExportFormat(fmt)
        except ValueError:
            raise errors.ValidationError(f"Unsupported export format '{fmt}'") from None

        transactions = self.transactions.list_transactions(principal, filters)
        records = self.build_export_records(transactions)
        logger.info(
            "transactions_exported",
            extra={"actor_id": principal.id, "format": fmt, "count": len(records)},
        )
        if fmt == ExportFormat.CSV:
            return to_csv(records)
        return records


def _csv_value(value: Any) -> str:
    if value is None:
        return ""
    if hasattr(value, "isoformat"):
        return value.isoformat()
    return str(value)


def to_csv(records: list[dict[str, Any]]) -> str:
    """Render records as CSV with a header row.

    Values holding the delimiter, a quote or a newline are quoted with
    embedded quotes doubled. No records means an empty document with no
    header.
    """
    if not records:
        return ""
    output = io.StringIO()
    writer = csv.writer(output, quoting=csv.QUOTE_MINIMAL, lineterminator="\n")
    writer.writerow(EXPORT_FIELDS)
    for record in records:
        writer.writerow([_csv_value(record[field]) for field in EXPORT_FIELDS])
    return output.getvalue()
