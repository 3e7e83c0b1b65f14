"""User domain service."""

from typing import Optional
from projectledger.database.base import Database
from projectledger.domain import errors
from projectledger.domain.entities import Principal, Role, User as UserEntity
from projectledger.domain.validation import parse_choice, require_value
from projectledger.logging_config import get_logger

logger = get_logger("users")


class UserService:
    """Service for managing users and resolving the acting principal."""

    def __init__(self, db: Database):
        """Initialize user service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_user(self, name: str, email: str, role: Role | str = Role.USER) -> UserEntity:
        """Create a user.

        Args:
            name: Display name
            email: Email address, unique across users
            role: Role tier (admin, manager or user)

        Returns:
            Created user entity

        Raises:
            ValidationError: If a field is missing or the role is unknown
            ConflictError: If the email address is already taken
        """
        name = require_value(name, "name").strip()
        email = require_value(email, "email").strip().lower()
        role = parse_choice(Role, role, "role")

        if self.db.get_user_by_email(email) is not None:
            raise errors.ConflictError(f"User with email '{email}' already exists")

        user = self.db.create_user(name=name, email=email, role=role.value)
        logger.info("user_created", extra={"user_id": user.id, "role": user.role})
        return user

    def get_user(self, user_id: int) -> Optional[UserEntity]:
        """Get user by ID.

        Args:
            user_id: User ID

        Returns:
            User entity or None if not found
        """
        return self.db.get_user(user_id)

    def list_users(self) -> list[UserEntity]:
        """List all users."""
        return self.db.list_users()

    def resolve_user(self, identifier: str | int) -> UserEntity:
        """Resolve a user ID or email address to a user.

        Raises:
            NotFoundError: If no user matches
        """
        if isinstance(identifier, int):
            user = self.db.get_user(identifier)
            if user is None:
                raise errors.NotFoundError(errors.not_found("user", identifier))
            return user

        identifier = identifier.strip()
        try:
            user_id = int(identifier)
        except ValueError:
            user_id = None

        if user_id is not None:
            user = self.db.get_user(user_id)
            if user is None:
                raise errors.NotFoundError(errors.not_found("user", user_id))
            return user

        user = self.db.get_user_by_email(identifier.lower())
        if user is None:
            raise errors.NotFoundError(f"User '{identifier}' not found")
        return user

    def resolve_principal(self, identifier: str | int) -> Principal:
        """Resolve the acting principal for a request."""
        return self.resolve_user(identifier).as_principal()
