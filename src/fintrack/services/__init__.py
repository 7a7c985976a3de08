"""Service layer modules for FinTrack."""

from . import accounts, auth, budgeting, categories, ledger_service, reports

__all__ = ["accounts", "auth", "budgeting", "categories", "ledger_service", "reports"]
