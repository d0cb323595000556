from typing import List
from fastapi import APIRouter, Depends

from app.api.deps import get_ledger_service
from app.core.auth import get_current_user
from app.models.user import UserResponse
from app.schemas.ledger import (
    BalanceSummaryResponse,
    LedgerEntryResponse,
    PortfolioAnalyticsResponse,
)
from app.services.ledger_service import LedgerService

router = APIRouter()
dashboard_router = APIRouter()


@router.get("/pending", response_model=List[LedgerEntryResponse])
async def list_pending(
    current_user: UserResponse = Depends(get_current_user),
    ledger_service: LedgerService = Depends(get_ledger_service)
):
    """Entries recorded by someone else that wait for the caller's decision"""
    entries = await ledger_service.list_pending(current_user.id)
    return [LedgerEntryResponse.from_entry(entry) for entry in entries]


@router.post("/{entry_id}/approve", response_model=LedgerEntryResponse)
async def approve_entry(
    entry_id: int,
    current_user: UserResponse = Depends(get_current_user),
    ledger_service: LedgerService = Depends(get_ledger_service)
):
    entry = await ledger_service.approve_entry(current_user.id, entry_id)
    return LedgerEntryResponse.from_entry(entry)


@router.post("/{entry_id}/reject", response_model=LedgerEntryResponse)
async def reject_entry(
    entry_id: int,
    current_user: UserResponse = Depends(get_current_user),
    ledger_service: LedgerService = Depends(get_ledger_service)
):
    entry = await ledger_service.reject_entry(current_user.id, entry_id)
    return LedgerEntryResponse.from_entry(entry)


@router.post("/{entry_id}/archive", response_model=LedgerEntryResponse)
async def archive_entry(
    entry_id: int,
    current_user: UserResponse = Depends(get_current_user),
    ledger_service: LedgerService = Depends(get_ledger_service)
):
    """Take an approved entry out of the live balance"""
    entry = await ledger_service.archive_entry(current_user.id, entry_id)
    return LedgerEntryResponse.from_entry(entry)


@dashboard_router.get("/summary", response_model=BalanceSummaryResponse)
async def get_summary(
    current_user: UserResponse = Depends(get_current_user),
    ledger_service: LedgerService = Depends(get_ledger_service)
):
    """Balance across every person"""
    summary = await ledger_service.get_dashboard(current_user.id)
    return BalanceSummaryResponse.from_summary(summary)


@dashboard_router.get("/analytics", response_model=PortfolioAnalyticsResponse)
async def get_analytics(
    current_user: UserResponse = Depends(get_current_user),
    ledger_service: LedgerService = Depends(get_ledger_service)
):
    """Active and settled profiles, recovery rate and outstanding ratio"""
    analytics = await ledger_service.get_analytics(current_user.id)
    return PortfolioAnalyticsResponse.from_analytics(analytics)
