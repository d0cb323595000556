"""
Travel group model - shared trip expenses split equally.

A group document embeds its members and expenses. Members are display
names, not registered users. Amounts are integer minor units.
"""

from typing import List, Optional
from datetime import datetime, timezone
from pydantic import BaseModel, Field, ConfigDict


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class GroupMember(BaseModel):
    id: int
    name: str
    joined_at: datetime = Field(default_factory=_utcnow)


class GroupExpense(BaseModel):
    id: int
    member_id: int          # who paid
    amount: int = Field(gt=0)
    description: str
    created_at: datetime = Field(default_factory=_utcnow)


class TravelGroup(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int = Field(validation_alias="_id", serialization_alias="_id")
    owner_id: str
    name: str
    description: str = ""
    currency: str = "USD"
    members: List[GroupMember] = Field(default_factory=list)
    expenses: List[GroupExpense] = Field(default_factory=list)

    # Last ids handed out; never decremented, so removed ids are not reused
    member_seq: int = 0
    expense_seq: int = 0

    is_deleted: bool = False
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)

    def find_member(self, member_id: int) -> Optional[GroupMember]:
        for member in self.members:
            if member.id == member_id:
                return member
        return None

    def find_expense(self, expense_id: int) -> Optional[GroupExpense]:
        for expense in self.expenses:
            if expense.id == expense_id:
                return expense
        return None

    def next_member_id(self) -> int:
        self.member_seq = max(self.member_seq, *(m.id for m in self.members), 0) + 1
        return self.member_seq

    def next_expense_id(self) -> int:
        self.expense_seq = max(self.expense_seq, *(e.id for e in self.expenses), 0) + 1
        return self.expense_seq

    def total_expenses(self) -> int:
        return sum(expense.amount for expense in self.expenses)


class GroupSettlement(BaseModel):
    """One transfer that moves a group toward equal shares."""
    from_member_id: int
    to_member_id: int
    amount: int
