"""SQLAlchemy models for projectledger database.

References between companies, projects, transactions and users are plain
indexed integer columns rather than foreign keys: deleting a parent leaves
its children in place on every backend.
"""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Date,
    Numeric,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()


def _now() -> datetime:
    return datetime.now(UTC)


class User(Base):
    """User model."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, nullable=False)
    role = Column(String, nullable=False, default="user")
    created_at = Column(DateTime, default=_now, nullable=False)


class CompanyManager(Base):
    """Membership of a user in a company's manager list."""

    __tablename__ = "company_managers"

    company_id = Column(Integer, ForeignKey("companies.id", ondelete="CASCADE"), primary_key=True)
    user_id = Column(Integer, primary_key=True)


class Company(Base):
    """Company model."""

    __tablename__ = "companies"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    description = Column(String, nullable=False, default="")
    created_by = Column(Integer, nullable=False, index=True)
    created_at = Column(DateTime, default=_now, nullable=False)
    updated_at = Column(DateTime, default=_now, onupdate=_now, nullable=False)

    # Relationships
    manager_links = relationship(
        "CompanyManager", cascade="all, delete-orphan", lazy="selectin", order_by="CompanyManager.user_id"
    )


class ProjectManager(Base):
    """Membership of a user in a project's manager list."""

    __tablename__ = "project_managers"

    project_id = Column(Integer, ForeignKey("projects.id", ondelete="CASCADE"), primary_key=True)
    user_id = Column(Integer, primary_key=True)


class ProjectTeamMember(Base):
    """Membership of a user in a project's team."""

    __tablename__ = "project_team"

    project_id = Column(Integer, ForeignKey("projects.id", ondelete="CASCADE"), primary_key=True)
    user_id = Column(Integer, primary_key=True)


class Project(Base):
    """Project model."""

    __tablename__ = "projects"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    description = Column(String, nullable=False)
    company_id = Column(Integer, nullable=False, index=True)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=True)
    status = Column(String, nullable=False, default="planning")
    budget = Column(Numeric(12, 2), nullable=False, default=0)
    created_by = Column(Integer, nullable=False, index=True)
    created_at = Column(DateTime, default=_now, nullable=False)
    updated_at = Column(DateTime, default=_now, onupdate=_now, nullable=False)

    # Relationships
    manager_links = relationship(
        "ProjectManager", cascade="all, delete-orphan", lazy="selectin", order_by="ProjectManager.user_id"
    )
    team_links = relationship(
        "ProjectTeamMember", cascade="all, delete-orphan", lazy="selectin", order_by="ProjectTeamMember.user_id"
    )


class Transaction(Base):
    """Transaction model."""

    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True)
    type = Column(String, nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    description = Column(String, nullable=False)
    date = Column(Date, nullable=False, index=True)
    category = Column(String, nullable=False)
    project_id = Column(Integer, nullable=False, index=True)
    company_id = Column(Integer, nullable=False, index=True)
    status = Column(String, nullable=False, default="pending")
    created_by = Column(Integer, nullable=False, index=True)
    approved_by = Column(Integer, nullable=True)
    notes = Column(String, nullable=True)
    version = Column(Integer, nullable=False)
    created_at = Column(DateTime, default=_now, nullable=False)
    updated_at = Column(DateTime, default=_now, onupdate=_now, nullable=False)

    # UPDATE statements carry "WHERE version = ?" and bump the counter
    __mapper_args__ = {"version_id_col": version}


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
