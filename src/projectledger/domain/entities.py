"""Domain model entities for projectledger.

These are pure data classes representing business concepts, independent of
database schema. Services and the authorization components only ever see
these types; the SQLAlchemy models stay behind the database layer.
"""

from dataclasses import dataclass, field
from datetime import datetime, date
from decimal import Decimal
from enum import StrEnum
from typing import Optional


class Role(StrEnum):
    """Role tier of a principal."""

    ADMIN = "admin"
    MANAGER = "manager"
    USER = "user"


class ResourceKind(StrEnum):
    """Kinds of records the access scope and permission gate reason about."""

    COMPANY = "company"
    PROJECT = "project"
    TRANSACTION = "transaction"


class TransactionType(StrEnum):
    EXPENSE = "expense"
    PAYMENT = "payment"
    INCOME = "income"


class TransactionStatus(StrEnum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    COMPLETED = "completed"


class TransactionCategory(StrEnum):
    SALARY = "salary"
    EQUIPMENT = "equipment"
    SOFTWARE = "software"
    CONSULTING = "consulting"
    OFFICE = "office"
    TRAVEL = "travel"
    MARKETING = "marketing"
    UTILITIES = "utilities"
    TAXES = "taxes"
    OTHER = "other"


class ProjectStatus(StrEnum):
    PLANNING = "planning"
    IN_PROGRESS = "in-progress"
    ON_HOLD = "on-hold"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class Principal:
    """Authenticated actor performing a request."""

    id: int
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


@dataclass(frozen=True)
class User:
    """Person record a principal is resolved from."""

    id: int
    name: str
    email: str
    role: Role
    created_at: datetime

    def as_principal(self) -> Principal:
        return Principal(id=self.id, role=self.role)

    @property
    def display_name(self) -> str:
        return f"{self.name} ({self.email})"


@dataclass(frozen=True)
class Company:
    """Company domain entity."""

    id: int
    name: str
    description: str
    created_by: int
    managers: frozenset[int]
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class Project:
    """Project domain entity. Belongs to exactly one company."""

    id: int
    name: str
    description: str
    company_id: int
    start_date: date
    end_date: Optional[date]
    status: ProjectStatus
    budget: Decimal
    created_by: int
    managers: frozenset[int]
    team: frozenset[int]
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class Transaction:
    """Transaction domain entity.

    ``company_id`` is copied from the project at creation time. ``version``
    increases by one on every save and guards against lost updates.
    """

    id: int
    type: TransactionType
    amount: Decimal
    description: str
    category: TransactionCategory
    project_id: int
    company_id: int
    status: TransactionStatus
    created_by: int
    approved_by: Optional[int]
    date: date
    notes: Optional[str]
    version: int
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class TransactionFilters:
    """Caller-supplied filters ANDed onto the access scope."""

    project_id: Optional[int] = None
    company_id: Optional[int] = None
    type: Optional[TransactionType] = None
    status: Optional[TransactionStatus] = None
    category: Optional[TransactionCategory] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    min_amount: Optional[Decimal] = None
    max_amount: Optional[Decimal] = None


@dataclass(frozen=True)
class ProjectFilters:
    """Caller-supplied project list filters."""

    company_id: Optional[int] = None
    status: Optional[ProjectStatus] = None


@dataclass(frozen=True)
class GroupTotal:
    """Sum and count of approved transactions sharing one key."""

    key: TransactionType | TransactionCategory
    total: Decimal
    count: int


@dataclass(frozen=True)
class MonthlyTotal:
    year: int
    month: int
    type: TransactionType
    total: Decimal


@dataclass(frozen=True)
class StatusCount:
    status: TransactionStatus
    count: int


@dataclass(frozen=True)
class FinancialTotals:
    income: Decimal = Decimal("0")
    expenses: Decimal = Decimal("0")

    @property
    def balance(self) -> Decimal:
        return self.income - self.expenses


@dataclass(frozen=True)
class FinancialSummary:
    """Grouped financial summary over a scoped transaction set."""

    by_type: tuple[GroupTotal, ...] = ()
    by_category: tuple[GroupTotal, ...] = ()
    monthly: tuple[MonthlyTotal, ...] = ()
    by_status: tuple[StatusCount, ...] = ()
    totals: FinancialTotals = field(default_factory=FinancialTotals)
