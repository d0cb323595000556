from datetime import datetime
from typing import Optional
from pydantic import BaseModel

from app.models.person import PersonProfile
from app.schemas.ledger import BalanceSummaryResponse
from app.utils.balance import BalanceSummary


class PersonCreate(BaseModel):
    name: str


class PersonUpdate(BaseModel):
    name: str


class ApprovalStatusUpdate(BaseModel):
    approval_status: bool


class PersonResponse(BaseModel):
    id: int
    name: str
    approval_status: bool
    linked_user_id: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    balance: Optional[BalanceSummaryResponse] = None

    @classmethod
    def from_person(
        cls,
        person: PersonProfile,
        balance: Optional[BalanceSummary] = None
    ) -> "PersonResponse":
        return cls(
            id=person.id,
            name=person.name,
            approval_status=person.approval_status,
            linked_user_id=person.linked_user_id,
            created_at=person.created_at,
            updated_at=person.updated_at,
            balance=BalanceSummaryResponse.from_summary(balance) if balance is not None else None
        )
