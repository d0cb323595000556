from datetime import datetime
from typing import Dict, Optional
from pydantic import BaseModel, Field, ConfigDict

from app.models.ledger import LedgerEntry, LedgerStatus, TransactionType
from app.utils.balance import BalanceSummary, HistoryTotals, PortfolioAnalytics


class LedgerEntryCreate(BaseModel):
    """Request body to record a transaction with a person."""
    amount: int = Field(..., description="Amount in minor currency units")
    transaction_type: TransactionType
    currency: Optional[str] = None
    date: Optional[int] = Field(None, description="Transaction time in nanoseconds")
    description: str = Field("", max_length=500)
    counterparty: Optional[str] = Field(
        None, description="User id of the other party; leave empty for a personal note"
    )


class LedgerEntryResponse(BaseModel):
    id: int
    person_id: int
    transaction_type: TransactionType
    status: LedgerStatus
    amount: int
    currency: str
    date: int
    description: str
    counterparty: str
    counterpart_id: Optional[int] = None
    created_by: str
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def from_entry(cls, entry: LedgerEntry) -> "LedgerEntryResponse":
        return cls.model_validate(entry)


class LedgerEntryCreatedResponse(BaseModel):
    entry: LedgerEntryResponse
    counterpart_id: Optional[int] = None


class BalanceSummaryResponse(BaseModel):
    total_lent: int
    total_repaid: int
    total_owed: int
    remaining_due: int

    @classmethod
    def from_summary(cls, summary: BalanceSummary) -> "BalanceSummaryResponse":
        return cls(
            total_lent=summary.total_lent,
            total_repaid=summary.total_repaid,
            total_owed=summary.total_owed,
            remaining_due=summary.remaining_due
        )


class PortfolioAnalyticsResponse(BaseModel):
    total_lent: int
    total_repaid: int
    remaining_due: int
    active_profiles: int
    settled_profiles: int
    recovery_rate: float = Field(..., description="Percent of lent money repaid")
    outstanding_ratio: float = Field(..., description="Percent of lent money still due")

    model_config = ConfigDict(from_attributes=True)

    @classmethod
    def from_analytics(cls, analytics: PortfolioAnalytics) -> "PortfolioAnalyticsResponse":
        return cls.model_validate(analytics)


class HistoryTotalsResponse(BaseModel):
    total_lent: int
    total_repaid: int
    status_counts: Dict[str, int]

    @classmethod
    def from_totals(cls, totals: HistoryTotals) -> "HistoryTotalsResponse":
        return cls(
            total_lent=totals.total_lent,
            total_repaid=totals.total_repaid,
            status_counts=dict(totals.status_counts)
        )
