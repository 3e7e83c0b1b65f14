"""Transaction domain service."""

from datetime import date
from decimal import Decimal
from typing import Any, Optional
from projectledger.database.base import Database
from projectledger.domain import errors, lifecycle
from projectledger.domain.entities import (
    Principal,
    ResourceKind,
    Transaction as TransactionEntity,
    TransactionCategory,
    TransactionFilters,
    TransactionType,
)
from projectledger.domain.permissions import Action, enforce, require_role
from projectledger.domain.scope import ScopeResolver
from projectledger.domain.validation import parse_amount_value, parse_choice, require_value
from projectledger.logging_config import LogContext, get_logger

logger = get_logger("transactions")


class TransactionService:
    """Service for managing transactions and their approval lifecycle."""

    def __init__(self, db: Database):
        """Initialize transaction service.

        Args:
            db: Database instance
        """
        self.db = db
        self.scopes = ScopeResolver(db)

    def _load(self, transaction_id: int) -> TransactionEntity:
        transaction = self.db.get_transaction(transaction_id)
        if transaction is None:
            raise errors.NotFoundError(errors.not_found("transaction", transaction_id))
        return transaction

    def list_transactions(
        self, principal: Principal, filters: Optional[TransactionFilters] = None
    ) -> list[TransactionEntity]:
        """List transactions visible to ``principal``, newest first.

        Args:
            principal: Acting principal
            filters: Optional caller filters ANDed onto the access scope

        Returns:
            List of transaction entities
        """
        predicate = self.scopes.resolve(principal, ResourceKind.TRANSACTION)
        return self.db.find_transactions(predicate, filters)

    def get_transaction(self, principal: Principal, transaction_id: int) -> TransactionEntity:
        """Get a single transaction.

        Managers may read any transaction by ID, even one outside the
        projects their list is scoped to.

        Raises:
            NotFoundError: If the transaction doesn't exist
            ForbiddenError: If a user asks for someone else's transaction
        """
        transaction = self._load(transaction_id)
        enforce(principal, Action.READ, transaction)
        return transaction

    def create_transaction(
        self,
        principal: Principal,
        type: TransactionType | str,
        amount: Decimal | str,
        description: str,
        category: TransactionCategory | str,
        project_id: int,
        date: Optional[date] = None,
        notes: Optional[str] = None,
    ) -> TransactionEntity:
        """Create a transaction against a project.

        The company is copied from the project. Admin-created transactions
        start approved by their creator; all others start pending.

        Args:
            principal: Acting principal, recorded as the creator
            type: expense, payment or income
            amount: Non-negative amount
            description: Description
            category: Spending category
            project_id: Project ID
            date: Transaction date (defaults to today)
            notes: Optional free-form notes

        Returns:
            Created transaction entity

        Raises:
            ValidationError: If a field is missing or invalid, or the project
                doesn't exist
        """
        txn_type = parse_choice(TransactionType, require_value(type, "type"), "type")
        amount = parse_amount_value(require_value(amount, "amount"))
        description = require_value(description, "description")
        txn_category = parse_choice(
            TransactionCategory, require_value(category, "category"), "category"
        )
        require_value(project_id, "project")

        project = self.db.get_project(project_id)
        if project is None:
            raise errors.ValidationError(errors.not_found("project", project_id))

        status, approved_by = lifecycle.initial_state(principal)
        transaction = self.db.create_transaction(
            type=txn_type.value,
            amount=amount,
            description=description,
            category=txn_category.value,
            project_id=project.id,
            company_id=project.company_id,
            status=status.value,
            created_by=principal.id,
            date=date or date_today(),
            approved_by=approved_by,
            notes=notes,
        )
        with LogContext.bind(actor_id=principal.id, actor_role=principal.role):
            logger.info(
                "transaction_created",
                extra={
                    "transaction_id": transaction.id,
                    "project_id": transaction.project_id,
                    "status": transaction.status,
                },
            )
        return transaction

    def update_transaction(
        self, principal: Principal, transaction_id: int, **fields: Any
    ) -> TransactionEntity:
        """Edit a transaction.

        Only type, amount, description, date, category and notes are
        editable; falsy values leave the stored value unchanged. A non-admin
        edit sends the transaction back to pending.

        Raises:
            NotFoundError: If the transaction doesn't exist
            ForbiddenError: If a user edits someone else's transaction
            InvalidTransitionError: If a non-admin edits a decided transaction
            ValidationError: If a field is not editable or invalid
            ConflictError: If the transaction changed since it was loaded
        """
        transaction = self._load(transaction_id)
        decision_context = {"transaction_id": transaction.id, "status": transaction.status}
        with LogContext.bind(actor_id=principal.id, actor_role=principal.role, operation="update"):
            try:
                enforce(principal, Action.UPDATE, transaction)
            except errors.DomainError:
                logger.warning("transaction_update_denied", extra=decision_context)
                raise
            edited = lifecycle.edit(transaction, principal, fields)
            saved = self.db.save_transaction(edited)
            logger.info(
                "transaction_updated",
                extra={"transaction_id": saved.id, "status": saved.status},
            )
        return saved

    def delete_transaction(self, principal: Principal, transaction_id: int) -> None:
        """Delete a transaction.

        Raises:
            ForbiddenError: If the principal's role may not delete transactions
            NotFoundError: If the transaction doesn't exist
        """
        require_role(principal, ResourceKind.TRANSACTION, Action.DELETE)
        transaction = self._load(transaction_id)
        enforce(principal, Action.DELETE, transaction)
        self.db.delete_transaction(transaction.id)
        with LogContext.bind(actor_id=principal.id, actor_role=principal.role):
            logger.info("transaction_deleted", extra={"transaction_id": transaction.id})

    def approve_transaction(self, principal: Principal, transaction_id: int) -> TransactionEntity:
        """Approve a pending transaction.

        Any admin or manager may approve any transaction; there is no
        per-project check.

        Raises:
            ForbiddenError: If the principal's role may not approve
            NotFoundError: If the transaction doesn't exist
            InvalidTransitionError: If the transaction is not pending
            ConflictError: If the transaction changed since it was loaded
        """
        require_role(principal, ResourceKind.TRANSACTION, Action.APPROVE)
        transaction = self._load(transaction_id)
        approved = lifecycle.approve(transaction, principal)
        saved = self.db.save_transaction(approved)
        with LogContext.bind(actor_id=principal.id, actor_role=principal.role):
            logger.info(
                "transaction_approved",
                extra={"transaction_id": saved.id, "amount": saved.amount},
            )
        return saved

    def reject_transaction(
        self, principal: Principal, transaction_id: int, reason: Optional[str] = None
    ) -> TransactionEntity:
        """Reject a pending transaction, appending the reason to its notes.

        Raises:
            ForbiddenError: If the principal's role may not reject
            NotFoundError: If the transaction doesn't exist
            InvalidTransitionError: If the transaction is not pending
            ConflictError: If the transaction changed since it was loaded
        """
        require_role(principal, ResourceKind.TRANSACTION, Action.REJECT)
        transaction = self._load(transaction_id)
        rejected = lifecycle.reject(transaction, principal, "" if reason is None else reason)
        saved = self.db.save_transaction(rejected)
        with LogContext.bind(actor_id=principal.id, actor_role=principal.role):
            logger.info("transaction_rejected", extra={"transaction_id": saved.id})
        return saved


def date_today() -> date:
    return date.today()
