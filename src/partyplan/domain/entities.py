"""Domain model entities for partyplan.

These are pure data classes representing business concepts, independent of
the storage backend. Both the SQLAlchemy tables and the local JSON cache are
mapped onto these types, so the services and the statistics never see a
storage-specific object.
"""

from dataclasses import dataclass, field
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional


class GuestStatus(str, Enum):
    """RSVP status of a guest entry."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    DECLINED = "declined"

    @classmethod
    def values(cls) -> tuple[str, ...]:
        return tuple(member.value for member in cls)


DEFAULT_PAYERS: tuple[str, str] = ("Eli", "Pan")


@dataclass(frozen=True)
class Guest:
    """Guest domain entity: one invitation for a party of attendees."""

    id: int
    name: str
    status: str
    adults: int
    children: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def attendees(self) -> int:
        return self.adults + self.children


@dataclass(frozen=True)
class Expense:
    """Expense domain entity: one shared-cost ledger entry."""

    id: int
    concept: str
    amount: Decimal
    payment_date: date
    paid_by: str
    is_reimbursed: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class GuestDraft:
    """Candidate guest record, before the store assigns an ID."""

    name: str
    adults: int
    children: int
    status: str = GuestStatus.PENDING.value


@dataclass(frozen=True)
class ExpenseDraft:
    """Candidate expense record, before the store assigns an ID."""

    concept: str
    amount: Decimal
    payment_date: date
    paid_by: str
    is_reimbursed: bool = False


@dataclass(frozen=True)
class GuestStats:
    """Headcount figures derived from a guest collection."""

    confirmed_adults: int = 0
    confirmed_children: int = 0
    pending_count: int = 0
    pending_adults: int = 0
    pending_children: int = 0
    declined_count: int = 0

    @property
    def confirmed_total(self) -> int:
        return self.confirmed_adults + self.confirmed_children

    @property
    def pending_attendees(self) -> int:
        return self.pending_adults + self.pending_children


@dataclass(frozen=True)
class ExpenseStats:
    """Ledger figures derived from an expense collection.

    ``payer_owing`` is the payer who contributed less and owes
    ``amount_owed`` to ``payer_owed``. Both are None when the two
    contributions are exactly equal.
    """

    total: Decimal
    by_payer: dict[str, Decimal]
    reimbursed_total: Decimal
    pending_total: Decimal
    difference: Decimal
    amount_owed: Decimal
    payer_owing: Optional[str] = None
    payer_owed: Optional[str] = None
    unassigned_total: Decimal = field(default_factory=lambda: Decimal("0"))

    @property
    def is_settled(self) -> bool:
        return self.payer_owing is None
