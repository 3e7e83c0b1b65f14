"""Tests for user service."""

import pytest

from projectledger.domain.entities import Principal, Role
from projectledger.domain.errors import ConflictError, NotFoundError, ValidationError


def test_create_user(user_service):
    """Test creating a user normalizes the email."""
    user = user_service.create_user("Ada", "  Ada@Example.com ", "admin")

    assert user.id is not None
    assert user.email == "ada@example.com"
    assert user.role == Role.ADMIN
    assert user.display_name == "Ada (ada@example.com)"


def test_create_user_defaults_to_user_role(user_service):
    assert user_service.create_user("Uma", "uma@example.com").role == Role.USER


def test_create_user_duplicate_email(user_service):
    """Test that email addresses are unique."""
    user_service.create_user("Ada", "ada@example.com")
    with pytest.raises(ConflictError, match="already exists"):
        user_service.create_user("Ada Again", "ADA@example.com")


def test_create_user_invalid_role(user_service):
    with pytest.raises(ValidationError, match="Invalid role 'owner'"):
        user_service.create_user("Ada", "ada@example.com", "owner")


def test_create_user_requires_name(user_service):
    with pytest.raises(ValidationError, match="name is required"):
        user_service.create_user("  ", "ada@example.com")


def test_list_users(user_service, users):
    names = [user.name for user in user_service.list_users()]
    assert names == sorted(names)
    assert len(names) == 5


def test_resolve_principal_by_id_and_email(user_service, users):
    """Both IDs and email addresses resolve to the same principal."""
    admin = users["admin"]

    assert user_service.resolve_principal(admin.id) == admin
    assert user_service.resolve_principal(str(admin.id)) == admin
    assert user_service.resolve_principal("ADA@example.com") == Principal(admin.id, Role.ADMIN)


def test_resolve_principal_unknown(user_service):
    with pytest.raises(NotFoundError, match="User 42 not found"):
        user_service.resolve_principal("42")
    with pytest.raises(NotFoundError, match="nobody@example.com"):
        user_service.resolve_principal("nobody@example.com")
