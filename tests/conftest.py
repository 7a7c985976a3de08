"""Pytest configuration and shared fixtures for FinTrack tests.

This module provides database fixtures, test data factories, and helper utilities
for testing domain logic, repositories, services and the HTTP surface without
touching the real app database.
"""

from __future__ import annotations

import pytest

from fintrack import create_app
from fintrack.config import TestConfig
from fintrack.context import create_app_context
from fintrack.models import Account, Budget, Category, User
from fintrack.services import accounts, budgeting, categories

# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture
def env(monkeypatch: pytest.MonkeyPatch, tmp_path):
    """Point configuration at a throwaway data directory and database file."""

    data_dir = tmp_path / "instance"
    db_path = tmp_path / "fintrack-test.db"
    monkeypatch.setenv("FINTRACK_DATA_DIR", str(data_dir))
    monkeypatch.setenv("FINTRACK_DATABASE_URL", f"sqlite:///{db_path}")
    monkeypatch.setenv("FINTRACK_SECRET_KEY", "test-secret-key-with-enough-length-1234")
    monkeypatch.setenv("FINTRACK_DEV_MODE", "true")
    return tmp_path


@pytest.fixture
def ctx(env):
    """Application context with a fresh SQLite schema for each test.

    Yields:
        AppContext: engine, session factory and repositories
    """
    context = create_app_context(TestConfig())
    yield context
    context.dispose()


@pytest.fixture
def session_factory(ctx):
    """Unit-of-work session factory bound to the test database."""

    return ctx.session_factory


# =============================================================================
# Test Data Factories
# =============================================================================


@pytest.fixture
def user_factory(ctx):
    """Factory for creating users without going through password hashing."""

    counter = {"n": 0}

    def _create_user(email: str | None = None, role: str = "user") -> User:
        counter["n"] += 1
        return ctx.user_repo.create(
            User(
                firstname="Test",
                lastname=f"User{counter['n']}",
                email=email or f"user{counter['n']}@example.com",
                password_hash="dummy-hash",
                role=role,
            )
        )

    return _create_user


@pytest.fixture
def user(user_factory) -> User:
    """Default user for scoping data."""

    return user_factory("tester@example.com")


@pytest.fixture
def other_user(user_factory) -> User:
    """A second user used to exercise ownership rules."""

    return user_factory("intruder@example.com")


@pytest.fixture
def account_factory(ctx, user):
    """Factory for creating test accounts.

    Returns:
        Callable: Function that creates and persists Account instances
    """

    def _create_account(
        name: str = "Test Account",
        account_type: str = "Bank",
        balance: float = 0.0,
        owner: User | None = None,
    ) -> Account:
        owner = owner or user
        return accounts.create_account(
            ctx.account_repo,
            user_id=owner.id,
            name=name,
            account_type=account_type,
            balance=balance,
        )

    return _create_account


@pytest.fixture
def category_factory(ctx, user):
    """Factory for creating test categories.

    Returns:
        Callable: Function that creates and persists Category instances
    """

    def _create_category(
        name: str = "Test Category",
        category_type: str = "Expense",
        parent_id: int | None = None,
        owner: User | None = None,
    ) -> Category:
        owner = owner or user
        return categories.create_category(
            ctx.category_repo,
            user_id=owner.id,
            name=name,
            category_type=category_type,
            parent_id=parent_id,
        )

    return _create_category


@pytest.fixture
def budget_factory(ctx, user):
    """Factory for creating budgets on Expense categories."""

    def _create_budget(category_id: int, limit: float = 100.0, owner: User | None = None) -> Budget:
        owner = owner or user
        return budgeting.create_budget(
            ctx.budget_repo,
            ctx.category_repo,
            user_id=owner.id,
            category_id=category_id,
            limit=limit,
        )

    return _create_budget


# =============================================================================
# HTTP Fixtures
# =============================================================================


@pytest.fixture
def app(env):
    """Flask app wired to the throwaway database."""

    application = create_app("testing")
    yield application
    application.extensions["fintrack"].dispose()


@pytest.fixture
def client(app):
    with app.test_client() as test_client:
        yield test_client


@pytest.fixture
def register(client):
    """Register a user through the API and return ``(payload, auth_headers)``."""

    counter = {"n": 0}

    def _register(email: str | None = None, password: str = "s3cret-pass"):
        counter["n"] += 1
        response = client.post(
            "/users/register",
            json={
                "firstname": "Ada",
                "lastname": "Lovelace",
                "email": email or f"api{counter['n']}@example.com",
                "password": password,
            },
        )
        assert response.status_code == 201, response.get_json()
        payload = response.get_json()
        return payload, {"Authorization": f"Bearer {payload['token']}"}

    return _register


@pytest.fixture
def auth_headers(register):
    _, headers = register()
    return headers


# =============================================================================
# Helper Functions
# =============================================================================


def assert_float_equal(actual: float, expected: float, tolerance: float = 0.01):
    """Assert that two floats are equal within a tolerance.

    Args:
        actual: Actual value
        expected: Expected value
        tolerance: Maximum allowed difference (default 0.01 = 1 cent)

    Raises:
        AssertionError: If values differ by more than tolerance
    """
    assert abs(actual - expected) <= tolerance, (
        f"Expected {expected}, got {actual} (diff: {abs(actual - expected)})"
    )
