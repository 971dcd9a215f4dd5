"""Validation rules shared by interactive edits and bulk import.

Validators are pure: they inspect a draft and return the list of problems
found. An empty list means the draft is acceptable.
"""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Sequence

from partyplan.domain.entities import (
    DEFAULT_PAYERS,
    ExpenseDraft,
    GuestDraft,
    GuestStatus,
)
from partyplan.domain.errors import ValidationError, invalid_payer, invalid_status


@dataclass(frozen=True)
class FieldError:
    """A validation problem attached to a single field."""

    field: str
    message: str

    def __str__(self) -> str:
        return self.message

    def at_row(self, row_num: int) -> str:
        """Return the message addressed to a CSV row."""
        return f"Row {row_num}: {self.message}"


def validate_guest(draft: GuestDraft, check_status: bool = True) -> list[FieldError]:
    """Validate a guest draft.

    Args:
        draft: Candidate guest
        check_status: Whether to check the status against the closed set

    Returns:
        List of field errors, empty when the draft is valid
    """
    errors = []

    if not draft.name or not draft.name.strip():
        errors.append(FieldError("name", "Guest name is required"))

    if draft.adults < 0 or draft.children < 0:
        errors.append(
            FieldError("adults", "Adults and children must be non-negative")
        )
    elif draft.adults == 0 and draft.children > 0:
        errors.append(
            FieldError("adults", "At least one adult is required when children attend")
        )
    elif draft.adults + draft.children == 0:
        errors.append(
            FieldError("adults", "At least one attendee (adult or child) is required")
        )

    if check_status and draft.status not in GuestStatus.values():
        errors.append(
            FieldError("status", invalid_status(draft.status, GuestStatus.values()))
        )

    return errors


def validate_expense(
    draft: ExpenseDraft, payers: Sequence[str] = DEFAULT_PAYERS
) -> list[FieldError]:
    """Validate an expense draft.

    Args:
        draft: Candidate expense
        payers: The two configured payers

    Returns:
        List of field errors, empty when the draft is valid
    """
    errors = []

    if not draft.concept or not draft.concept.strip():
        errors.append(FieldError("concept", "Concept is required"))

    amount = draft.amount
    if (
        not isinstance(amount, (Decimal, int))
        or isinstance(amount, bool)
        or not Decimal(amount).is_finite()
        or amount <= 0
    ):
        errors.append(FieldError("amount", "Amount must be a positive number"))
    elif Decimal(amount).normalize().as_tuple().exponent < -2:
        # Stored amounts keep whole cents only
        errors.append(FieldError("amount", "Amount must have at most 2 decimal places"))

    # datetime is a date subclass but carries a time component
    if not isinstance(draft.payment_date, date) or isinstance(
        draft.payment_date, datetime
    ):
        errors.append(FieldError("payment_date", "Payment date must be a valid date"))

    if draft.paid_by not in payers:
        errors.append(FieldError("paid_by", invalid_payer(draft.paid_by, payers)))

    return errors


def require_valid_guest(draft: GuestDraft, check_status: bool = True) -> None:
    """Raise ValidationError if the guest draft is invalid."""
    errors = validate_guest(draft, check_status=check_status)
    if errors:
        raise ValidationError("; ".join(str(e) for e in errors), errors)


def require_valid_expense(
    draft: ExpenseDraft, payers: Sequence[str] = DEFAULT_PAYERS
) -> None:
    """Raise ValidationError if the expense draft is invalid."""
    errors = validate_expense(draft, payers)
    if errors:
        raise ValidationError("; ".join(str(e) for e in errors), errors)
