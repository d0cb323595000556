from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field

from app.models.group import GroupExpense, GroupMember, GroupSettlement, TravelGroup


class GroupCreate(BaseModel):
    name: str
    description: str = Field("", max_length=500)
    currency: Optional[str] = None


class MemberAdd(BaseModel):
    name: str


class MemberUpdate(BaseModel):
    name: str


class ExpenseCreate(BaseModel):
    member_id: int
    amount: int = Field(..., description="Amount in minor currency units")
    description: str = Field(..., max_length=500)


class ExpenseUpdate(BaseModel):
    member_id: Optional[int] = None
    amount: Optional[int] = None
    description: Optional[str] = Field(None, max_length=500)


class GroupResponse(BaseModel):
    id: int
    name: str
    description: str
    currency: str
    members: List[GroupMember]
    expenses: List[GroupExpense]
    total_expenses: int
    equal_share: int
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_group(cls, group: TravelGroup) -> "GroupResponse":
        total = group.total_expenses()
        return cls(
            id=group.id,
            name=group.name,
            description=group.description,
            currency=group.currency,
            members=group.members,
            expenses=group.expenses,
            total_expenses=total,
            equal_share=total // len(group.members) if group.members else 0,
            created_at=group.created_at,
            updated_at=group.updated_at
        )


class GroupSettlementResponse(BaseModel):
    group_id: int
    currency: str
    settlements: List[GroupSettlement]
