"""
Ledger model - One row in a person's book.

Design principles:
- Append-only: entries are never deleted or edited
- Only status moves, and only forward:
  pending -> approved | rejected, approved -> archived
- Self-notes (no counterparty) are approved on creation
- Collaborative entries are mirrored on the counterparty's book and
  linked both ways through counterpart_id
- All amounts in integer minor units, dates in nanoseconds
"""

from enum import Enum
from typing import Optional
from datetime import datetime, timezone
from pydantic import BaseModel, Field, ConfigDict

from app.core.exceptions import InvalidTransition

ANONYMOUS_COUNTERPARTY = "anonymous"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TransactionType(str, Enum):
    DEBIT = "debit"    # money lent out
    CREDIT = "credit"  # money received / repaid

    def opposite(self) -> "TransactionType":
        if self is TransactionType.DEBIT:
            return TransactionType.CREDIT
        return TransactionType.DEBIT


class LedgerStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    ARCHIVED = "archived"


ALLOWED_TRANSITIONS = {
    LedgerStatus.PENDING: {LedgerStatus.APPROVED, LedgerStatus.REJECTED},
    LedgerStatus.APPROVED: {LedgerStatus.ARCHIVED},
    LedgerStatus.REJECTED: set(),
    LedgerStatus.ARCHIVED: set(),
}


def is_self_note(counterparty: Optional[str]) -> bool:
    """Blank or anonymous counterparty means a personal note."""
    if counterparty is None:
        return True
    value = counterparty.strip()
    return value == "" or value == ANONYMOUS_COUNTERPARTY


class LedgerEntry(BaseModel):
    """
    A debit or credit recorded against a person profile.

    Invariants:
    - amount > 0
    - everything except status/updated_at is fixed at creation
    - counterpart_id, when set, points at the mirror entry on the
      counterparty's book and never changes
    """
    model_config = ConfigDict(populate_by_name=True, use_enum_values=False)

    id: int = Field(validation_alias="_id", serialization_alias="_id")

    # References
    person_id: int
    owner_id: str       # whose book this entry lives in
    created_by: str     # who recorded it
    counterparty: str = ANONYMOUS_COUNTERPARTY
    counterpart_id: Optional[int] = None

    # Financial
    transaction_type: TransactionType
    amount: int = Field(gt=0)
    currency: str = "USD"

    # Tracking
    status: LedgerStatus = LedgerStatus.PENDING
    date: int              # nanoseconds since epoch
    description: str = ""

    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)

    @property
    def is_collaborative(self) -> bool:
        return not is_self_note(self.counterparty)

    def can_transition(self, target: LedgerStatus) -> bool:
        return target in ALLOWED_TRANSITIONS[self.status]

    def transition(self, target: LedgerStatus) -> "LedgerEntry":
        """Return a copy of this entry in the target status."""
        if not self.can_transition(target):
            raise InvalidTransition(self.status.value, target.value)
        return self.model_copy(update={"status": target, "updated_at": _utcnow()})

    def approve(self) -> "LedgerEntry":
        return self.transition(LedgerStatus.APPROVED)

    def reject(self) -> "LedgerEntry":
        return self.transition(LedgerStatus.REJECTED)

    def archive(self) -> "LedgerEntry":
        return self.transition(LedgerStatus.ARCHIVED)

    def to_document(self) -> dict:
        doc = self.model_dump(by_alias=True)
        doc["transaction_type"] = self.transaction_type.value
        doc["status"] = self.status.value
        return doc
