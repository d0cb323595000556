import logging
from typing import List, Tuple

from app.core.exceptions import InvariantViolation, NotFoundError
from app.models.person import PersonProfile
from app.repositories.ledger_repo import LedgerRepository
from app.repositories.person_repo import PersonRepository
from app.utils.balance import BalanceSummary, summarize
from app.utils.ledger_validation import validate_name

logger = logging.getLogger(__name__)


class PersonService:
    """Person profiles and the settled-flag gate."""

    def __init__(self, person_repo: PersonRepository, ledger_repo: LedgerRepository):
        self.person_repo = person_repo
        self.ledger_repo = ledger_repo

    async def create_person(self, owner_id: str, name: str) -> PersonProfile:
        person = await self.person_repo.create_person(owner_id, validate_name(name))
        logger.info("Person %s created for %s", person.id, owner_id)
        return person

    async def get_person(self, owner_id: str, person_id: int) -> PersonProfile:
        person = await self.person_repo.get_person(person_id, owner_id)
        if person is None:
            raise NotFoundError("Person not found")
        return person

    async def get_balance(self, person: PersonProfile) -> BalanceSummary:
        entries = await self.ledger_repo.list_for_person(person.id)
        return summarize(entries)

    async def list_people(self, owner_id: str) -> List[Tuple[PersonProfile, BalanceSummary]]:
        """Every live profile with its current balance."""
        people = await self.person_repo.list_people(owner_id)
        entries = await self.ledger_repo.list_for_people([p.id for p in people])

        by_person = {p.id: [] for p in people}
        for entry in entries:
            by_person[entry.person_id].append(entry)
        return [(p, summarize(by_person[p.id])) for p in people]

    async def rename_person(self, owner_id: str, person_id: int, name: str) -> PersonProfile:
        trimmed = validate_name(name)
        person = await self.person_repo.update_person(person_id, owner_id, {"name": trimmed})
        if person is None:
            raise NotFoundError("Person not found")
        return person

    async def delete_person(self, owner_id: str, person_id: int) -> None:
        """Soft delete; the person's ledger entries stay on record."""
        deleted = await self.person_repo.soft_delete_person(person_id, owner_id)
        if not deleted:
            raise NotFoundError("Person not found")
        logger.info("Person %s deleted by %s", person_id, owner_id)

    async def set_approval_status(self, owner_id: str, person_id: int, status: bool) -> PersonProfile:
        """
        Mark a person settled or unsettled.

        Settling requires a zero remaining balance over approved entries,
        recomputed here. Revoking is unconditional.
        """
        person = await self.get_person(owner_id, person_id)
        if status:
            balance = await self.get_balance(person)
            if balance.remaining_due != 0:
                logger.warning(
                    "Refused to settle person %s with remaining due %s",
                    person_id, balance.remaining_due
                )
                raise InvariantViolation(
                    f"Cannot approve settlement: remaining balance is {balance.remaining_due}, not zero"
                )

        updated = await self.person_repo.update_person(
            person_id, owner_id, {"approval_status": status}
        )
        if updated is None:
            raise NotFoundError("Person not found")
        return updated
