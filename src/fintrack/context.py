"""Application context for dependency injection."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from flask import current_app
from sqlalchemy.engine import Engine

from .config import BaseConfig
from .infra.database import SessionFactory, bootstrap_database
from .infra.repositories import (
    SQLModelAccountRepository,
    SQLModelBudgetRepository,
    SQLModelCategoryRepository,
    SQLModelTransactionRepository,
    SQLModelUserRepository,
)

EXTENSION_KEY = "fintrack"


@dataclass
class AppContext:
    """Centralized application context with services and state."""

    # Configuration
    config: BaseConfig

    # Database
    engine: Engine
    session_factory: SessionFactory

    # Repositories
    user_repo: SQLModelUserRepository
    account_repo: SQLModelAccountRepository
    category_repo: SQLModelCategoryRepository
    budget_repo: SQLModelBudgetRepository
    transaction_repo: SQLModelTransactionRepository

    def dispose(self) -> None:
        """Release pooled connections (tests drop the database file afterwards)."""
        self.engine.dispose()


def create_app_context(config: Optional[BaseConfig] = None) -> AppContext:
    """Create the engine, initialise the schema and build repositories."""

    if config is None:
        config = BaseConfig()

    engine, session_factory = bootstrap_database(config)

    return AppContext(
        config=config,
        engine=engine,
        session_factory=session_factory,
        user_repo=SQLModelUserRepository(session_factory),
        account_repo=SQLModelAccountRepository(session_factory),
        category_repo=SQLModelCategoryRepository(session_factory),
        budget_repo=SQLModelBudgetRepository(session_factory),
        transaction_repo=SQLModelTransactionRepository(session_factory),
    )


def get_context() -> AppContext:
    """Return the context attached to the running Flask app."""

    ctx = current_app.extensions.get(EXTENSION_KEY)
    if ctx is None:  # pragma: no cover - create_app always attaches one
        raise RuntimeError("FinTrack context not initialized")
    return ctx
