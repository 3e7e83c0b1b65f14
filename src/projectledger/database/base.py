"""Abstract database interface."""

from abc import ABC, abstractmethod
from typing import Optional, Any, Sequence
from datetime import date
from decimal import Decimal

# Import domain modules directly to avoid circular import through domain/__init__.py
from projectledger.domain.entities import (
    User,
    Company,
    Project,
    Transaction,
    ProjectFilters,
    TransactionFilters,
)
from projectledger.domain.scope import ScopePredicate

GROUP_KEYS = ("type", "category", "status", "year", "month")


class Database(ABC):
    """Abstract database interface for projectledger.

    ``find_*`` methods take a :class:`ScopePredicate` built by the access
    scope resolver; caller filters are ANDed on top of it.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # User operations
    @abstractmethod
    def create_user(self, name: str, email: str, role: str) -> User:
        """Create a user."""
        pass

    @abstractmethod
    def get_user(self, user_id: int) -> Optional[User]:
        """Get user by ID."""
        pass

    @abstractmethod
    def get_user_by_email(self, email: str) -> Optional[User]:
        """Get user by email address."""
        pass

    @abstractmethod
    def list_users(self) -> list[User]:
        """List all users."""
        pass

    # Company operations
    @abstractmethod
    def create_company(
        self, name: str, description: str, created_by: int, managers: Sequence[int] = ()
    ) -> Company:
        """Create a company."""
        pass

    @abstractmethod
    def get_company(self, company_id: int) -> Optional[Company]:
        """Get company by ID."""
        pass

    @abstractmethod
    def find_companies(self, predicate: ScopePredicate) -> list[Company]:
        """List companies matching the scope predicate."""
        pass

    @abstractmethod
    def save_company(self, company: Company) -> Company:
        """Persist changes to an existing company."""
        pass

    @abstractmethod
    def delete_company(self, company_id: int) -> None:
        """Delete a company. Its projects are left in place."""
        pass

    # Project operations
    @abstractmethod
    def create_project(
        self,
        name: str,
        description: str,
        company_id: int,
        start_date: date,
        created_by: int,
        end_date: Optional[date] = None,
        status: Optional[str] = None,
        budget: Optional[Decimal] = None,
        managers: Sequence[int] = (),
        team: Sequence[int] = (),
    ) -> Project:
        """Create a project."""
        pass

    @abstractmethod
    def get_project(self, project_id: int) -> Optional[Project]:
        """Get project by ID."""
        pass

    @abstractmethod
    def find_projects(
        self, predicate: ScopePredicate, filters: Optional[ProjectFilters] = None
    ) -> list[Project]:
        """List projects matching the scope predicate and filters."""
        pass

    @abstractmethod
    def find_project_ids(self, predicate: ScopePredicate) -> list[int]:
        """List only the IDs of projects matching the scope predicate."""
        pass

    @abstractmethod
    def save_project(self, project: Project) -> Project:
        """Persist changes to an existing project."""
        pass

    @abstractmethod
    def delete_project(self, project_id: int) -> None:
        """Delete a project. Its transactions are left in place."""
        pass

    # Transaction operations
    @abstractmethod
    def create_transaction(
        self,
        type: str,
        amount: Decimal,
        description: str,
        category: str,
        project_id: int,
        company_id: int,
        status: str,
        created_by: int,
        date: date,
        approved_by: Optional[int] = None,
        notes: Optional[str] = None,
    ) -> Transaction:
        """Create a transaction."""
        pass

    @abstractmethod
    def get_transaction(self, transaction_id: int) -> Optional[Transaction]:
        """Get transaction by ID."""
        pass

    @abstractmethod
    def find_transactions(
        self, predicate: ScopePredicate, filters: Optional[TransactionFilters] = None
    ) -> list[Transaction]:
        """List transactions matching the scope predicate and filters, newest first."""
        pass

    @abstractmethod
    def save_transaction(self, transaction: Transaction) -> Transaction:
        """Persist changes to an existing transaction.

        The stored version must equal ``transaction.version``; the saved
        entity carries the next version.

        Raises:
            ConflictError: If the transaction was modified since it was loaded
        """
        pass

    @abstractmethod
    def delete_transaction(self, transaction_id: int) -> None:
        """Delete a transaction."""
        pass

    @abstractmethod
    def aggregate_transactions(
        self,
        predicate: ScopePredicate,
        filters: Optional[TransactionFilters] = None,
        group_by: Sequence[str] = ("type",),
    ) -> list[dict[str, Any]]:
        """Group matching transactions and sum their amounts.

        ``group_by`` names keys from ``GROUP_KEYS``. Returns one dictionary per
        group holding the group keys plus ``total`` (Decimal) and ``count``,
        ordered ascending by the group keys.
        """
        pass

    def count_transactions_by_status(self, predicate: ScopePredicate) -> dict[str, int]:
        """Count transactions per status within the scope predicate."""
        rows = self.aggregate_transactions(predicate, group_by=("status",))
        return {row["status"]: row["count"] for row in rows}
