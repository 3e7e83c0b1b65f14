"""Financial summary aggregation.

Summaries cover approved transactions only, whatever status filter the
caller passes. The per-status counts are the exception: they come from a
separate, unfiltered scope (see :meth:`ScopeResolver.resolve_status_counts`).
"""

from decimal import Decimal
from typing import Any, Iterable, Optional
from projectledger.database.base import Database
from projectledger.domain.entities import (
    FinancialSummary,
    FinancialTotals,
    GroupTotal,
    MonthlyTotal,
    Principal,
    ResourceKind,
    StatusCount,
    TransactionCategory,
    TransactionFilters,
    TransactionStatus,
    TransactionType,
)
from projectledger.domain.scope import ScopeResolver

INCOME_TYPES = (TransactionType.PAYMENT, TransactionType.INCOME)


def compute_totals(by_type: Iterable[GroupTotal]) -> FinancialTotals:
    """Derive income, expenses and balance from per-type totals.

    Payments and income both count as income. Types with no rows
    contribute zero.
    """
    income = Decimal("0")
    expenses = Decimal("0")
    for group in by_type:
        if group.key == TransactionType.EXPENSE:
            expenses += group.total
        elif group.key in INCOME_TYPES:
            income += group.total
    return FinancialTotals(income=income, expenses=expenses)


def summary_filters(filters: Optional[TransactionFilters]) -> TransactionFilters:
    """Keep the company, project and date filters and force approved status."""
    filters = filters or TransactionFilters()
    return TransactionFilters(
        project_id=filters.project_id,
        company_id=filters.company_id,
        start_date=filters.start_date,
        end_date=filters.end_date,
        status=TransactionStatus.APPROVED,
    )


class SummaryService:
    """Service for building financial summaries under role scoping."""

    def __init__(self, db: Database):
        """Initialize summary service.

        Args:
            db: Database instance
        """
        self.db = db
        self.scopes = ScopeResolver(db)

    def build_summary(
        self, principal: Principal, filters: Optional[TransactionFilters] = None
    ) -> FinancialSummary:
        """Build the financial summary visible to ``principal``.

        Args:
            principal: Acting principal
            filters: Optional company, project and date range filters. Any
                other filter, including status, is ignored.

        Returns:
            FinancialSummary with per-type, per-category, monthly and
            per-status breakdowns plus overall totals
        """
        predicate = self.scopes.resolve(principal, ResourceKind.TRANSACTION)
        approved = summary_filters(filters)

        by_type = tuple(
            GroupTotal(key=TransactionType(row["type"]), total=row["total"], count=row["count"])
            for row in self.db.aggregate_transactions(predicate, approved, group_by=("type",))
        )
        by_category = tuple(
            GroupTotal(
                key=TransactionCategory(row["category"]), total=row["total"], count=row["count"]
            )
            for row in self.db.aggregate_transactions(predicate, approved, group_by=("category",))
        )
        monthly = tuple(
            MonthlyTotal(
                year=int(row["year"]),
                month=int(row["month"]),
                type=TransactionType(row["type"]),
                total=row["total"],
            )
            for row in self.db.aggregate_transactions(
                predicate, approved, group_by=("year", "month", "type")
            )
        )

        status_predicate = self.scopes.resolve_status_counts(principal)
        by_status = tuple(
            StatusCount(status=TransactionStatus(status), count=count)
            for status, count in sorted(
                self.db.count_transactions_by_status(status_predicate).items()
            )
        )

        return FinancialSummary(
            by_type=by_type,
            by_category=by_category,
            monthly=monthly,
            by_status=by_status,
            totals=compute_totals(by_type),
        )


def summary_to_dict(summary: FinancialSummary) -> dict[str, Any]:
    """Render a summary as plain data for JSON output."""
    totals = summary.totals
    return {
        "summary": {
            "by_type": [
                {"type": str(g.key), "total": g.total, "count": g.count} for g in summary.by_type
            ],
            "by_category": [
                {"category": str(g.key), "total": g.total, "count": g.count}
                for g in summary.by_category
            ],
            "monthly": [
                {"year": m.year, "month": m.month, "type": str(m.type), "total": m.total}
                for m in summary.monthly
            ],
            "by_status": [{"status": str(s.status), "count": s.count} for s in summary.by_status],
        },
        "totals": {
            "income": totals.income,
            "expenses": totals.expenses,
            "balance": totals.balance,
        },
    }
