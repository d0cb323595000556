"""
Tests for the balance projection.

Covers:
- Only approved entries count toward the live balance
- Remaining due sign convention
- Archival vs history totals
- Dashboard aggregation
- Portfolio analytics
"""

import pytest

from app.models.ledger import LedgerEntry, LedgerStatus, TransactionType
from app.models.person import PersonProfile
from app.utils.balance import (
    BalanceSummary,
    summarize,
    summarize_dashboard,
    summarize_history,
    summarize_portfolio,
)

_next_id = iter(range(1, 10_000))


def make_entry(transaction_type, amount, status, person_id=1):
    return LedgerEntry(
        id=next(_next_id),
        person_id=person_id,
        owner_id="owner",
        created_by="owner",
        transaction_type=TransactionType(transaction_type),
        amount=amount,
        status=LedgerStatus(status),
        date=1_700_000_000_000_000_000
    )


def test_empty_entries_yield_zero_summary():
    assert summarize([]) == BalanceSummary(0, 0, 0, 0)


def test_pending_entries_are_excluded():
    entries = [
        make_entry("debit", 500, "approved"),
        make_entry("credit", 200, "approved"),
        make_entry("debit", 100, "pending"),
    ]

    summary = summarize(entries)

    assert summary.total_lent == 500
    assert summary.total_repaid == 200
    assert summary.remaining_due == 300
    assert summary.total_owed == 0


def test_rejected_and_archived_entries_are_excluded():
    entries = [
        make_entry("debit", 1000, "approved"),
        make_entry("debit", 700, "rejected"),
        make_entry("credit", 400, "archived"),
    ]

    summary = summarize(entries)

    assert summary.total_lent == 1000
    assert summary.total_repaid == 0
    assert summary.remaining_due == 1000


def test_remaining_due_can_go_negative():
    """Repaid more than lent: the caller owes the difference."""
    entries = [
        make_entry("debit", 100, "approved"),
        make_entry("credit", 250, "approved"),
    ]

    summary = summarize(entries)

    assert summary.remaining_due == -150
    assert summary.total_owed == 150
    assert not summary.is_settled


def test_remaining_due_is_lent_minus_repaid_for_mixed_statuses():
    entries = [
        make_entry(kind, amount, status)
        for kind in ("debit", "credit")
        for amount in (1, 40, 999)
        for status in ("pending", "approved", "rejected", "archived")
    ]

    summary = summarize(entries)

    assert summary.remaining_due == summary.total_lent - summary.total_repaid
    assert summary.total_lent == 1040
    assert summary.total_repaid == 1040
    assert summary.is_settled


def test_archiving_removes_entry_from_live_balance_but_not_history():
    approved = make_entry("debit", 300, "approved")
    others = [make_entry("debit", 500, "approved"), make_entry("credit", 100, "approved")]

    before_live = summarize([approved] + others)
    before_history = summarize_history([approved] + others)

    archived = approved.archive()
    after_live = summarize([archived] + others)
    after_history = summarize_history([archived] + others)

    assert before_live.remaining_due == 700
    assert after_live.remaining_due == 400
    assert after_history.total_lent == before_history.total_lent == 800
    assert after_history.total_repaid == before_history.total_repaid == 100


def test_history_counts_every_status():
    entries = [
        make_entry("debit", 10, "pending"),
        make_entry("debit", 10, "approved"),
        make_entry("credit", 10, "rejected"),
        make_entry("credit", 10, "archived"),
        make_entry("credit", 10, "archived"),
    ]

    history = summarize_history(entries)

    assert history.status_counts == {
        "pending": 1,
        "approved": 1,
        "rejected": 1,
        "archived": 2,
    }
    assert history.total_lent == 10
    assert history.total_repaid == 20


def test_dashboard_keeps_what_caller_owes_per_person():
    entries_by_person = {
        1: [make_entry("debit", 500, "approved", person_id=1)],
        2: [
            make_entry("debit", 100, "approved", person_id=2),
            make_entry("credit", 300, "approved", person_id=2),
        ],
        3: [],
    }

    summary = summarize_dashboard(entries_by_person)

    assert summary.total_lent == 600
    assert summary.total_repaid == 300
    assert summary.remaining_due == 300
    # Person 2 is owed 200 even though the overall balance is positive
    assert summary.total_owed == 200


def person(person_id, approval_status=False):
    return PersonProfile(
        id=person_id, owner_id="owner", name=f"P{person_id}", approval_status=approval_status
    )


def test_portfolio_counts_active_and_settled_profiles():
    people = [person(1), person(2, approval_status=True), person(3, approval_status=True), person(4)]
    entries_by_person = {
        1: [make_entry("debit", 1000, "approved", person_id=1)],
        2: [
            make_entry("debit", 400, "approved", person_id=2),
            make_entry("credit", 400, "approved", person_id=2),
        ],
        # Zero balance and flagged, but still waiting on a decision
        3: [make_entry("debit", 50, "pending", person_id=3)],
        # Zero balance but never marked settled
        4: [],
    }

    analytics = summarize_portfolio(people, entries_by_person)

    assert analytics.active_profiles == 1
    assert analytics.settled_profiles == 1
    assert analytics.total_lent == 1400
    assert analytics.total_repaid == 400
    assert analytics.remaining_due == 1000
    assert analytics.recovery_rate == pytest.approx(400 / 1400 * 100)
    assert analytics.outstanding_ratio == pytest.approx(1000 / 1400 * 100)


def test_portfolio_rates_are_zero_without_lending():
    people = [person(1)]
    entries_by_person = {1: [make_entry("credit", 300, "approved", person_id=1)]}

    analytics = summarize_portfolio(people, entries_by_person)

    assert analytics.recovery_rate == 0
    assert analytics.outstanding_ratio == 0
    assert analytics.remaining_due == -300
    assert analytics.active_profiles == 1
