"""
Balance projection over ledger entries.

Only approved entries count toward a live balance. Pending, rejected and
archived entries stay visible in history but are excluded here.
"""
from dataclasses import dataclass, field
from typing import Dict, Iterable, Mapping

from app.models.ledger import LedgerEntry, LedgerStatus, TransactionType
from app.models.person import PersonProfile


@dataclass(frozen=True)
class BalanceSummary:
    total_lent: int = 0
    total_repaid: int = 0
    total_owed: int = 0
    remaining_due: int = 0

    @property
    def is_settled(self) -> bool:
        return self.remaining_due == 0


@dataclass(frozen=True)
class PortfolioAnalytics:
    """
    Portfolio view over every person on the caller's book.

    Rates are percentages of total_lent and are 0 when nothing was lent.
    """
    total_lent: int = 0
    total_repaid: int = 0
    remaining_due: int = 0
    active_profiles: int = 0
    settled_profiles: int = 0
    recovery_rate: float = 0.0
    outstanding_ratio: float = 0.0


@dataclass(frozen=True)
class HistoryTotals:
    """Totals over everything that was ever approved, archived included."""
    total_lent: int = 0
    total_repaid: int = 0
    status_counts: Dict[str, int] = field(default_factory=dict)


def summarize(entries: Iterable[LedgerEntry]) -> BalanceSummary:
    """
    Reduce one person's entries into a live balance.

    remaining_due = total_lent - total_repaid, signed. A negative value
    means the caller owes the other side; total_owed is that amount.
    """
    total_lent = 0
    total_repaid = 0

    for entry in entries:
        if entry.status != LedgerStatus.APPROVED:
            continue
        if entry.transaction_type == TransactionType.DEBIT:
            total_lent += entry.amount
        else:
            total_repaid += entry.amount

    remaining_due = total_lent - total_repaid
    return BalanceSummary(
        total_lent=total_lent,
        total_repaid=total_repaid,
        total_owed=max(0, -remaining_due),
        remaining_due=remaining_due
    )


def summarize_history(entries: Iterable[LedgerEntry]) -> HistoryTotals:
    total_lent = 0
    total_repaid = 0
    counts = {status.value: 0 for status in LedgerStatus}

    for entry in entries:
        counts[entry.status.value] += 1
        if entry.status not in (LedgerStatus.APPROVED, LedgerStatus.ARCHIVED):
            continue
        if entry.transaction_type == TransactionType.DEBIT:
            total_lent += entry.amount
        else:
            total_repaid += entry.amount

    return HistoryTotals(
        total_lent=total_lent,
        total_repaid=total_repaid,
        status_counts=counts
    )


def summarize_dashboard(entries_by_person: Mapping[int, Iterable[LedgerEntry]]) -> BalanceSummary:
    """
    Aggregate every person's balance.

    total_owed is summed per person, so money one person owes the caller
    does not cancel out what the caller owes someone else.
    """
    total_lent = 0
    total_repaid = 0
    total_owed = 0

    for entries in entries_by_person.values():
        summary = summarize(entries)
        total_lent += summary.total_lent
        total_repaid += summary.total_repaid
        total_owed += summary.total_owed

    return BalanceSummary(
        total_lent=total_lent,
        total_repaid=total_repaid,
        total_owed=total_owed,
        remaining_due=total_lent - total_repaid
    )


def summarize_portfolio(
    people: Iterable[PersonProfile],
    entries_by_person: Mapping[int, Iterable[LedgerEntry]]
) -> PortfolioAnalytics:
    """
    Active and settled profile counts plus recovery and outstanding rates.

    A profile is active while its live balance is nonzero. It counts as
    settled once the balance is zero, nothing is pending and it has been
    marked settled.
    """
    total_lent = 0
    total_repaid = 0
    active = 0
    settled = 0

    for person in people:
        entries = list(entries_by_person.get(person.id, []))
        summary = summarize(entries)
        total_lent += summary.total_lent
        total_repaid += summary.total_repaid

        if summary.remaining_due != 0:
            active += 1
            continue
        has_pending = any(e.status == LedgerStatus.PENDING for e in entries)
        if person.approval_status and not has_pending:
            settled += 1

    remaining_due = total_lent - total_repaid
    if total_lent == 0:
        return PortfolioAnalytics(
            total_repaid=total_repaid,
            remaining_due=remaining_due,
            active_profiles=active,
            settled_profiles=settled
        )
    return PortfolioAnalytics(
        total_lent=total_lent,
        total_repaid=total_repaid,
        remaining_due=remaining_due,
        active_profiles=active,
        settled_profiles=settled,
        recovery_rate=total_repaid / total_lent * 100,
        outstanding_ratio=remaining_due / total_lent * 100
    )
