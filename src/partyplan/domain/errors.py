"""Shared domain error messages and error types."""

from typing import Iterable, Optional


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic.

    Carries the individual messages in ``errors`` so callers can render
    them one per line.
    """

    def __init__(self, message: str, errors: Optional[Iterable[object]] = None):
        super().__init__(message)
        self.errors = [str(error) for error in errors] if errors else [message]


class CSVHeaderError(ValidationError):
    """CSV header does not match the expected columns."""


class ImportRejectedError(ValidationError):
    """One or more CSV rows failed validation; nothing was imported."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class StorageError(DomainError):
    """The record store failed to complete an operation."""


def guest_not_found(guest_id: int) -> str:
    """Return message for missing guest."""
    return f"Guest {guest_id} not found"


def expense_not_found(expense_id: int) -> str:
    """Return message for missing expense."""
    return f"Expense {expense_id} not found"


def invalid_status(status: str, allowed: Iterable[str]) -> str:
    """Return message for an unknown guest status."""
    return f"Invalid status '{status}'. Must be one of: {', '.join(allowed)}"


def invalid_payer(paid_by: str, payers: Iterable[str]) -> str:
    """Return message for a payer outside the configured pair."""
    return f"Invalid payer '{paid_by}'. Must be one of: {', '.join(payers)}"


def import_rejected(error_count: int, valid_count: int) -> str:
    """Return summary message for a rejected import batch."""
    if valid_count == 0:
        return "No valid guests to import"
    return (
        f"Import rejected: {error_count} invalid row{'s' if error_count != 1 else ''}. "
        "Fix them and try again."
    )
