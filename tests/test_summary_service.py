"""Tests for the financial summary."""

from datetime import date
from decimal import Decimal

from hypothesis import given, strategies as st

from projectledger.domain.entities import (
    FinancialSummary,
    GroupTotal,
    TransactionCategory,
    TransactionFilters,
    TransactionStatus,
    TransactionType,
)
from projectledger.domain.summary import compute_totals, summary_filters, summary_to_dict

money = st.decimals(min_value=0, max_value=10**6, places=2, allow_nan=False, allow_infinity=False)


@given(expense=money, payment=money, income=money)
def test_totals_invariants(expense, payment, income):
    """Income covers payments and income; balance is income minus expenses."""
    totals = compute_totals(
        [
            GroupTotal(TransactionType.EXPENSE, expense, 1),
            GroupTotal(TransactionType.PAYMENT, payment, 1),
            GroupTotal(TransactionType.INCOME, income, 1),
        ]
    )

    assert totals.expenses == expense
    assert totals.income == payment + income
    assert totals.balance == totals.income - totals.expenses


def test_totals_missing_types_are_zero():
    totals = compute_totals([GroupTotal(TransactionType.INCOME, Decimal("5"), 1)])
    assert totals.expenses == Decimal("0")
    assert totals.balance == Decimal("5")


def test_summary_filters_force_approved():
    """Requested status and other filters are dropped."""
    filters = summary_filters(
        TransactionFilters(
            company_id=1,
            status=TransactionStatus.PENDING,
            type=TransactionType.EXPENSE,
            min_amount=Decimal("5"),
        )
    )
    assert filters == TransactionFilters(company_id=1, status=TransactionStatus.APPROVED)


class TestBuildSummary:
    """Tests for SummaryService.build_summary."""

    def test_empty_set(self, summary_service, users):
        """No transactions yields zero totals and empty groups."""
        summary = summary_service.build_summary(users["admin"])

        assert summary == FinancialSummary()
        assert summary.totals.balance == Decimal("0")

    def test_only_approved_counted(self, summary_service, transaction_service, add_transaction, users):
        """Pending and rejected transactions stay out of the totals."""
        add_transaction(users["admin"], type="income", amount="1000")
        add_transaction(users["admin"], type="payment", amount="250")
        add_transaction(users["admin"], type="expense", amount="400", category="software")
        add_transaction(users["user"], type="expense", amount="999")
        rejected = add_transaction(users["user"], type="expense", amount="50")
        transaction_service.reject_transaction(users["manager"], rejected.id, "no")

        summary = summary_service.build_summary(
            users["admin"], TransactionFilters(status=TransactionStatus.PENDING)
        )

        assert summary.totals.income == Decimal("1250.00")
        assert summary.totals.expenses == Decimal("400.00")
        assert summary.totals.balance == Decimal("850.00")
        assert {g.key: g.count for g in summary.by_type} == {
            "expense": 1,
            "income": 1,
            "payment": 1,
        }
        assert {g.key: g.total for g in summary.by_category} == {
            "equipment": Decimal("1250.00"),
            "software": Decimal("400.00"),
        }
        assert all(isinstance(g.key, TransactionCategory) for g in summary.by_category)

    def test_monthly_sorted(self, summary_service, add_transaction, users):
        add_transaction(users["admin"], type="income", amount="10", date=date(2024, 3, 1))
        add_transaction(users["admin"], type="expense", amount="5", date=date(2023, 12, 31))
        add_transaction(users["admin"], type="expense", amount="7", date=date(2024, 3, 20))

        monthly = summary_service.build_summary(users["admin"]).monthly

        assert [(m.year, m.month, m.type) for m in monthly] == [
            (2023, 12, TransactionType.EXPENSE),
            (2024, 3, TransactionType.EXPENSE),
            (2024, 3, TransactionType.INCOME),
        ]
        assert monthly[1].total == Decimal("7.00")

    def test_company_project_and_date_filters(self, summary_service, add_transaction, users, projects):
        add_transaction(users["admin"], amount="10", project="managed", date=date(2024, 1, 5))
        add_transaction(users["admin"], amount="20", project="unmanaged", date=date(2024, 1, 5))
        add_transaction(users["admin"], amount="40", project="managed", date=date(2024, 5, 5))

        summary = summary_service.build_summary(
            users["admin"],
            TransactionFilters(project_id=projects["managed"].id, end_date=date(2024, 1, 31)),
        )
        assert summary.totals.expenses == Decimal("10.00")

    def test_manager_scope(self, summary_service, add_transaction, users):
        """Managers total only transactions of their projects or their own."""
        add_transaction(users["admin"], amount="10", project="managed")
        add_transaction(users["admin"], amount="20", project="unmanaged")

        summary = summary_service.build_summary(users["manager"])
        assert summary.totals.expenses == Decimal("10.00")

    def test_status_counts_bypass_manager_scope(self, summary_service, transaction_service, add_transaction, users):
        """Manager status counts cover every transaction in the system."""
        add_transaction(users["other_user"], project="unmanaged")
        add_transaction(users["other_user"], project="unmanaged")
        add_transaction(users["admin"], project="unmanaged")

        by_status = summary_service.build_summary(users["manager"]).by_status
        assert {c.status: c.count for c in by_status} == {"approved": 1, "pending": 2}

    def test_status_counts_for_user_are_own(self, summary_service, add_transaction, users):
        add_transaction(users["user"])
        add_transaction(users["other_user"])

        by_status = summary_service.build_summary(users["user"]).by_status
        assert [(c.status, c.count) for c in by_status] == [(TransactionStatus.PENDING, 1)]

    def test_status_counts_ignore_filters(self, summary_service, add_transaction, users):
        add_transaction(users["admin"], date=date(2020, 1, 1))
        summary = summary_service.build_summary(
            users["admin"], TransactionFilters(start_date=date(2024, 1, 1))
        )
        assert summary.totals.expenses == Decimal("0")
        assert [c.count for c in summary.by_status] == [1]


def test_summary_to_dict(summary_service, add_transaction, users):
    add_transaction(users["admin"], type="income", amount="30")
    data = summary_to_dict(summary_service.build_summary(users["admin"]))

    assert data["totals"] == {
        "income": Decimal("30.00"),
        "expenses": Decimal("0"),
        "balance": Decimal("30.00"),
    }
    assert data["summary"]["by_type"] == [{"type": "income", "total": Decimal("30.00"), "count": 1}]
    assert data["summary"]["monthly"][0]["month"] == 3
