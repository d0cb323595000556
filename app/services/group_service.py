import logging
from typing import List, Optional

from app.core.config import settings
from app.core.exceptions import InvariantViolation, NotFoundError, ValidationError
from app.models.group import (
    GroupExpense,
    GroupMember,
    GroupSettlement,
    TravelGroup,
)
from app.repositories.group_repo import GroupRepository
from app.utils.group_settlement import calculate_settlements
from app.utils.ledger_validation import validate_amount, validate_currency, validate_name

logger = logging.getLogger(__name__)


class GroupService:
    """Travel groups: members, shared expenses and equal-split settlement."""

    def __init__(self, group_repo: GroupRepository):
        self.group_repo = group_repo

    async def create_group(
        self,
        owner_id: str,
        name: str,
        description: str = "",
        currency: Optional[str] = None
    ) -> TravelGroup:
        group = await self.group_repo.create_group(
            owner_id,
            validate_name(name, "group name"),
            description.strip(),
            validate_currency(currency, settings.DEFAULT_CURRENCY)
        )
        logger.info("Group %s created for %s", group.id, owner_id)
        return group

    async def list_groups(self, owner_id: str) -> List[TravelGroup]:
        return await self.group_repo.list_groups(owner_id)

    async def get_group(self, owner_id: str, group_id: int) -> TravelGroup:
        group = await self.group_repo.get_group(group_id, owner_id)
        if group is None:
            raise NotFoundError("Group not found")
        return group

    async def delete_group(self, owner_id: str, group_id: int) -> None:
        if not await self.group_repo.soft_delete_group(group_id, owner_id):
            raise NotFoundError("Group not found")
        logger.info("Group %s deleted by %s", group_id, owner_id)

    # ===== MEMBERS =====

    async def add_member(self, owner_id: str, group_id: int, name: str) -> TravelGroup:
        group = await self.get_group(owner_id, group_id)
        member = GroupMember(id=group.next_member_id(), name=validate_name(name, "member name"))
        group.members.append(member)
        return await self.group_repo.save_group(group)

    async def rename_member(self, owner_id: str, group_id: int, member_id: int, name: str) -> TravelGroup:
        group = await self.get_group(owner_id, group_id)
        member = group.find_member(member_id)
        if member is None:
            raise NotFoundError("Member not found")
        member.name = validate_name(name, "member name")
        return await self.group_repo.save_group(group)

    async def remove_member(self, owner_id: str, group_id: int, member_id: int) -> TravelGroup:
        group = await self.get_group(owner_id, group_id)
        if group.find_member(member_id) is None:
            raise NotFoundError("Member not found")
        if any(expense.member_id == member_id for expense in group.expenses):
            raise InvariantViolation("Cannot remove a member who has paid expenses")
        group.members = [m for m in group.members if m.id != member_id]
        return await self.group_repo.save_group(group)

    # ===== EXPENSES =====

    async def add_expense(
        self,
        owner_id: str,
        group_id: int,
        member_id: int,
        amount: int,
        description: str
    ) -> TravelGroup:
        group = await self.get_group(owner_id, group_id)
        if group.find_member(member_id) is None:
            raise ValidationError("Expense must be paid by a group member")
        expense = GroupExpense(
            id=group.next_expense_id(),
            member_id=member_id,
            amount=validate_amount(amount),
            description=validate_name(description, "description")
        )
        group.expenses.append(expense)
        logger.info("Expense %s added to group %s", expense.id, group.id)
        return await self.group_repo.save_group(group)

    async def update_expense(
        self,
        owner_id: str,
        group_id: int,
        expense_id: int,
        member_id: Optional[int] = None,
        amount: Optional[int] = None,
        description: Optional[str] = None
    ) -> TravelGroup:
        group = await self.get_group(owner_id, group_id)
        expense = group.find_expense(expense_id)
        if expense is None:
            raise NotFoundError("Expense not found")

        if member_id is not None:
            if group.find_member(member_id) is None:
                raise ValidationError("Expense must be paid by a group member")
            expense.member_id = member_id
        if amount is not None:
            expense.amount = validate_amount(amount)
        if description is not None:
            expense.description = validate_name(description, "description")
        return await self.group_repo.save_group(group)

    async def delete_expense(self, owner_id: str, group_id: int, expense_id: int) -> TravelGroup:
        group = await self.get_group(owner_id, group_id)
        if group.find_expense(expense_id) is None:
            raise NotFoundError("Expense not found")
        group.expenses = [e for e in group.expenses if e.id != expense_id]
        return await self.group_repo.save_group(group)

    async def calculate_settlements(self, owner_id: str, group_id: int) -> List[GroupSettlement]:
        group = await self.get_group(owner_id, group_id)
        if not group.members:
            raise ValidationError("Add members before calculating settlements")
        return calculate_settlements(group)
