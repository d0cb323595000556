import logging
import time
from typing import Dict, List, Optional, Tuple

from app.core.config import settings
from app.core.exceptions import (
    AuthorizationError,
    InvalidTransition,
    NotFoundError,
    ValidationError,
)
from app.models.ledger import LedgerEntry, LedgerStatus, is_self_note
from app.models.person import PersonProfile
from app.models.user import UserResponse
from app.repositories.ledger_repo import LedgerRepository
from app.repositories.person_repo import PersonRepository
from app.repositories.user_repo import UserRepository
from app.schemas.ledger import LedgerEntryCreate
from app.utils.balance import (
    BalanceSummary,
    HistoryTotals,
    PortfolioAnalytics,
    summarize,
    summarize_dashboard,
    summarize_history,
    summarize_portfolio,
)
from app.utils.ledger_validation import (
    is_valid_identity,
    normalize_counterparty,
    validate_amount,
    validate_currency,
)

logger = logging.getLogger(__name__)


def _now_ns() -> int:
    return time.time_ns()


class LedgerService:
    """
    Ledger entries and the approval workflow.

    - Self-notes are approved on creation and never mirrored.
    - Collaborative entries start pending, get a mirror on the counterparty's
      book, and can only be decided by the side that did not record them.
    - Archival is the owner's bookkeeping and touches one book only.
    """

    def __init__(
        self,
        ledger_repo: LedgerRepository,
        person_repo: PersonRepository,
        user_repo: UserRepository
    ):
        self.ledger_repo = ledger_repo
        self.person_repo = person_repo
        self.user_repo = user_repo

    async def _get_person(self, person_id: int, owner_id: str) -> PersonProfile:
        person = await self.person_repo.get_person(person_id, owner_id)
        if person is None:
            raise NotFoundError("Person not found")
        return person

    async def create_entry(
        self,
        caller: UserResponse,
        person_id: int,
        data: LedgerEntryCreate
    ) -> Tuple[LedgerEntry, Optional[int]]:
        """
        Record a transaction with a person.

        Returns the new entry and the id of its mirror, if one was written.
        """
        person = await self._get_person(person_id, caller.id)
        amount = validate_amount(data.amount)
        currency = validate_currency(
            data.currency, caller.currency_preference or settings.DEFAULT_CURRENCY
        )
        counterparty = normalize_counterparty(data.counterparty)
        date = data.date if data.date is not None else _now_ns()
        description = (data.description or "").strip()

        if is_self_note(counterparty):
            entry_id, = await self.ledger_repo.allocate_ids(1)
            entry = LedgerEntry(
                id=entry_id,
                person_id=person.id,
                owner_id=caller.id,
                created_by=caller.id,
                counterparty=counterparty,
                transaction_type=data.transaction_type,
                amount=amount,
                currency=currency,
                status=LedgerStatus.APPROVED,
                date=date,
                description=description
            )
            await self.ledger_repo.insert_entries([entry])
            logger.info("Self-note %s recorded for person %s", entry.id, person.id)
            return entry, None

        if not is_valid_identity(counterparty):
            raise AuthorizationError("Invalid counterparty identity")
        if counterparty == caller.id:
            raise ValidationError("Counterparty must be someone other than yourself")

        other = await self.user_repo.get_user_by_id(counterparty)
        if other is None:
            raise AuthorizationError("Counterparty is not a registered user")

        mirror_person = await self.person_repo.find_linked_person(counterparty, caller.id)
        if mirror_person is None:
            mirror_person = await self.person_repo.create_person(
                counterparty, caller.name, linked_user_id=caller.id
            )

        entry_id, mirror_id = await self.ledger_repo.allocate_ids(2)
        entry = LedgerEntry(
            id=entry_id,
            person_id=person.id,
            owner_id=caller.id,
            created_by=caller.id,
            counterparty=counterparty,
            counterpart_id=mirror_id,
            transaction_type=data.transaction_type,
            amount=amount,
            currency=currency,
            status=LedgerStatus.PENDING,
            date=date,
            description=description
        )
        mirror = LedgerEntry(
            id=mirror_id,
            person_id=mirror_person.id,
            owner_id=counterparty,
            created_by=caller.id,
            counterparty=caller.id,
            counterpart_id=entry_id,
            transaction_type=data.transaction_type.opposite(),
            amount=amount,
            currency=currency,
            status=LedgerStatus.PENDING,
            date=date,
            description=description
        )
        await self.ledger_repo.insert_entries([entry, mirror])
        logger.info(
            "Entry %s recorded for person %s, mirrored as %s on %s's book",
            entry.id, person.id, mirror.id, counterparty
        )
        return entry, mirror.id

    async def list_entries(self, caller_id: str, person_id: int) -> List[LedgerEntry]:
        """Every entry for the person, archived and rejected included."""
        await self._get_person(person_id, caller_id)
        return await self.ledger_repo.list_for_person(person_id)

    async def get_balance(self, caller_id: str, person_id: int) -> BalanceSummary:
        entries = await self.list_entries(caller_id, person_id)
        return summarize(entries)

    async def get_history(self, caller_id: str, person_id: int) -> HistoryTotals:
        entries = await self.list_entries(caller_id, person_id)
        return summarize_history(entries)

    async def list_pending(self, caller_id: str) -> List[LedgerEntry]:
        return await self.ledger_repo.list_awaiting_decision(caller_id)

    async def _entries_by_person(
        self, caller_id: str
    ) -> Tuple[List[PersonProfile], Dict[int, List[LedgerEntry]]]:
        people = await self.person_repo.list_people(caller_id)
        entries = await self.ledger_repo.list_for_people([p.id for p in people])

        entries_by_person: Dict[int, List[LedgerEntry]] = {p.id: [] for p in people}
        for entry in entries:
            entries_by_person.setdefault(entry.person_id, []).append(entry)
        return people, entries_by_person

    async def get_dashboard(self, caller_id: str) -> BalanceSummary:
        _, entries_by_person = await self._entries_by_person(caller_id)
        return summarize_dashboard(entries_by_person)

    async def get_analytics(self, caller_id: str) -> PortfolioAnalytics:
        people, entries_by_person = await self._entries_by_person(caller_id)
        return summarize_portfolio(people, entries_by_person)

    async def _get_visible_entry(self, caller_id: str, entry_id: int) -> LedgerEntry:
        entry = await self.ledger_repo.get_entry(entry_id)
        if entry is None or caller_id not in (entry.owner_id, entry.counterparty):
            raise NotFoundError("Ledger entry not found")
        return entry

    async def _decide(self, caller_id: str, entry_id: int, target: LedgerStatus) -> LedgerEntry:
        entry = await self._get_visible_entry(caller_id, entry_id)
        if entry.created_by == caller_id:
            raise AuthorizationError("Entries must be approved or rejected by the counterparty")

        decided = entry.transition(target)
        # Both sides of a pair are claimed lowest id first, so racing
        # decisions on the same pair contend on the same document.
        first, *rest = sorted(filter(None, [entry.id, entry.counterpart_id]))

        moved = await self.ledger_repo.transition_status([first], LedgerStatus.PENDING, target)
        if moved == 0:
            # Someone else decided first
            current = await self.ledger_repo.get_entry(first)
            raise InvalidTransition(current.status.value, target.value)

        for other_id in rest:
            moved = await self.ledger_repo.transition_status(
                [other_id], LedgerStatus.PENDING, target
            )
            if moved == 0:
                # The other side was already decided: follow it so both books agree
                current = await self.ledger_repo.get_entry(other_id)
                await self.ledger_repo.transition_status([first], target, current.status)
                logger.warning(
                    "Entry %s lost a decision race to %s (%s); realigned",
                    first, other_id, current.status.value
                )
                raise InvalidTransition(current.status.value, target.value)

        logger.info("Entry %s %s by %s", entry.id, target.value, caller_id)
        return decided

    async def approve_entry(self, caller_id: str, entry_id: int) -> LedgerEntry:
        return await self._decide(caller_id, entry_id, LedgerStatus.APPROVED)

    async def reject_entry(self, caller_id: str, entry_id: int) -> LedgerEntry:
        return await self._decide(caller_id, entry_id, LedgerStatus.REJECTED)

    async def archive_entry(self, caller_id: str, entry_id: int) -> LedgerEntry:
        """Take an approved entry out of the live balance without deleting it."""
        entry = await self._get_visible_entry(caller_id, entry_id)
        if entry.owner_id != caller_id:
            raise AuthorizationError("Only the owner of an entry can archive it")

        archived = entry.archive()
        moved = await self.ledger_repo.transition_status(
            [entry.id], LedgerStatus.APPROVED, LedgerStatus.ARCHIVED
        )
        if moved == 0:
            current = await self.ledger_repo.get_entry(entry.id)
            raise InvalidTransition(current.status.value, LedgerStatus.ARCHIVED.value)

        logger.info("Entry %s archived by %s", entry.id, caller_id)
        return archived
