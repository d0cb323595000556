from typing import List
from fastapi import APIRouter, Depends, status

from app.api.deps import get_ledger_service, get_person_service
from app.core.auth import get_current_user
from app.models.user import UserResponse
from app.schemas.ledger import (
    BalanceSummaryResponse,
    HistoryTotalsResponse,
    LedgerEntryCreate,
    LedgerEntryCreatedResponse,
    LedgerEntryResponse,
)
from app.schemas.person import (
    ApprovalStatusUpdate,
    PersonCreate,
    PersonResponse,
    PersonUpdate,
)
from app.services.ledger_service import LedgerService
from app.services.person_service import PersonService

router = APIRouter()


@router.post("", response_model=PersonResponse, status_code=status.HTTP_201_CREATED)
async def create_person(
    payload: PersonCreate,
    current_user: UserResponse = Depends(get_current_user),
    person_service: PersonService = Depends(get_person_service)
):
    """Create a person profile."""
    person = await person_service.create_person(current_user.id, payload.name)
    return PersonResponse.from_person(person)


@router.get("", response_model=List[PersonResponse])
async def list_people(
    current_user: UserResponse = Depends(get_current_user),
    person_service: PersonService = Depends(get_person_service)
):
    """List the caller's people with their live balances."""
    people = await person_service.list_people(current_user.id)
    return [PersonResponse.from_person(person, balance) for person, balance in people]


@router.get("/{person_id}", response_model=PersonResponse)
async def get_person(
    person_id: int,
    current_user: UserResponse = Depends(get_current_user),
    person_service: PersonService = Depends(get_person_service)
):
    person = await person_service.get_person(current_user.id, person_id)
    balance = await person_service.get_balance(person)
    return PersonResponse.from_person(person, balance)


@router.patch("/{person_id}", response_model=PersonResponse)
async def rename_person(
    person_id: int,
    payload: PersonUpdate,
    current_user: UserResponse = Depends(get_current_user),
    person_service: PersonService = Depends(get_person_service)
):
    person = await person_service.rename_person(current_user.id, person_id, payload.name)
    return PersonResponse.from_person(person)


@router.delete("/{person_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_person(
    person_id: int,
    current_user: UserResponse = Depends(get_current_user),
    person_service: PersonService = Depends(get_person_service)
):
    """Remove a person from the list. Their ledger entries are kept."""
    await person_service.delete_person(current_user.id, person_id)


@router.put("/{person_id}/approval", response_model=PersonResponse)
async def set_approval_status(
    person_id: int,
    payload: ApprovalStatusUpdate,
    current_user: UserResponse = Depends(get_current_user),
    person_service: PersonService = Depends(get_person_service)
):
    """Mark a person settled (only at zero balance) or unsettled."""
    person = await person_service.set_approval_status(
        current_user.id, person_id, payload.approval_status
    )
    return PersonResponse.from_person(person)


@router.get("/{person_id}/balance", response_model=BalanceSummaryResponse)
async def get_balance(
    person_id: int,
    current_user: UserResponse = Depends(get_current_user),
    ledger_service: LedgerService = Depends(get_ledger_service)
):
    summary = await ledger_service.get_balance(current_user.id, person_id)
    return BalanceSummaryResponse.from_summary(summary)


@router.post(
    "/{person_id}/entries",
    response_model=LedgerEntryCreatedResponse,
    status_code=status.HTTP_201_CREATED
)
async def create_entry(
    person_id: int,
    payload: LedgerEntryCreate,
    current_user: UserResponse = Depends(get_current_user),
    ledger_service: LedgerService = Depends(get_ledger_service)
):
    """Record a transaction. Personal notes are approved at once, shared ones wait for the counterparty."""
    entry, counterpart_id = await ledger_service.create_entry(current_user, person_id, payload)
    return LedgerEntryCreatedResponse(
        entry=LedgerEntryResponse.from_entry(entry),
        counterpart_id=counterpart_id
    )


@router.get("/{person_id}/entries", response_model=List[LedgerEntryResponse])
async def list_entries(
    person_id: int,
    current_user: UserResponse = Depends(get_current_user),
    ledger_service: LedgerService = Depends(get_ledger_service)
):
    """Transaction history, archived and rejected entries included."""
    entries = await ledger_service.list_entries(current_user.id, person_id)
    return [LedgerEntryResponse.from_entry(entry) for entry in entries]


@router.get("/{person_id}/history", response_model=HistoryTotalsResponse)
async def get_history(
    person_id: int,
    current_user: UserResponse = Depends(get_current_user),
    ledger_service: LedgerService = Depends(get_ledger_service)
):
    totals = await ledger_service.get_history(current_user.id, person_id)
    return HistoryTotalsResponse.from_totals(totals)
