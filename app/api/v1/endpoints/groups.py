from typing import List
from fastapi import APIRouter, Depends, status

from app.api.deps import get_group_service
from app.core.auth import get_current_user
from app.models.user import UserResponse
from app.schemas.group import (
    ExpenseCreate,
    ExpenseUpdate,
    GroupCreate,
    GroupResponse,
    GroupSettlementResponse,
    MemberAdd,
    MemberUpdate,
)
from app.services.group_service import GroupService

router = APIRouter()


@router.post("", response_model=GroupResponse, status_code=status.HTTP_201_CREATED)
async def create_group(
    payload: GroupCreate,
    current_user: UserResponse = Depends(get_current_user),
    group_service: GroupService = Depends(get_group_service)
):
    group = await group_service.create_group(
        current_user.id, payload.name, payload.description,
        payload.currency or current_user.currency_preference
    )
    return GroupResponse.from_group(group)


@router.get("", response_model=List[GroupResponse])
async def list_groups(
    current_user: UserResponse = Depends(get_current_user),
    group_service: GroupService = Depends(get_group_service)
):
    groups = await group_service.list_groups(current_user.id)
    return [GroupResponse.from_group(group) for group in groups]


@router.get("/{group_id}", response_model=GroupResponse)
async def get_group(
    group_id: int,
    current_user: UserResponse = Depends(get_current_user),
    group_service: GroupService = Depends(get_group_service)
):
    group = await group_service.get_group(current_user.id, group_id)
    return GroupResponse.from_group(group)


@router.delete("/{group_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_group(
    group_id: int,
    current_user: UserResponse = Depends(get_current_user),
    group_service: GroupService = Depends(get_group_service)
):
    await group_service.delete_group(current_user.id, group_id)


@router.post("/{group_id}/members", response_model=GroupResponse, status_code=status.HTTP_201_CREATED)
async def add_member(
    group_id: int,
    payload: MemberAdd,
    current_user: UserResponse = Depends(get_current_user),
    group_service: GroupService = Depends(get_group_service)
):
    group = await group_service.add_member(current_user.id, group_id, payload.name)
    return GroupResponse.from_group(group)


@router.patch("/{group_id}/members/{member_id}", response_model=GroupResponse)
async def rename_member(
    group_id: int,
    member_id: int,
    payload: MemberUpdate,
    current_user: UserResponse = Depends(get_current_user),
    group_service: GroupService = Depends(get_group_service)
):
    group = await group_service.rename_member(current_user.id, group_id, member_id, payload.name)
    return GroupResponse.from_group(group)


@router.delete("/{group_id}/members/{member_id}", response_model=GroupResponse)
async def remove_member(
    group_id: int,
    member_id: int,
    current_user: UserResponse = Depends(get_current_user),
    group_service: GroupService = Depends(get_group_service)
):
    group = await group_service.remove_member(current_user.id, group_id, member_id)
    return GroupResponse.from_group(group)


@router.post("/{group_id}/expenses", response_model=GroupResponse, status_code=status.HTTP_201_CREATED)
async def add_expense(
    group_id: int,
    payload: ExpenseCreate,
    current_user: UserResponse = Depends(get_current_user),
    group_service: GroupService = Depends(get_group_service)
):
    group = await group_service.add_expense(
        current_user.id, group_id, payload.member_id, payload.amount, payload.description
    )
    return GroupResponse.from_group(group)


@router.patch("/{group_id}/expenses/{expense_id}", response_model=GroupResponse)
async def update_expense(
    group_id: int,
    expense_id: int,
    payload: ExpenseUpdate,
    current_user: UserResponse = Depends(get_current_user),
    group_service: GroupService = Depends(get_group_service)
):
    group = await group_service.update_expense(
        current_user.id, group_id, expense_id,
        member_id=payload.member_id,
        amount=payload.amount,
        description=payload.description
    )
    return GroupResponse.from_group(group)


@router.delete("/{group_id}/expenses/{expense_id}", response_model=GroupResponse)
async def delete_expense(
    group_id: int,
    expense_id: int,
    current_user: UserResponse = Depends(get_current_user),
    group_service: GroupService = Depends(get_group_service)
):
    group = await group_service.delete_expense(current_user.id, group_id, expense_id)
    return GroupResponse.from_group(group)


@router.get("/{group_id}/settlements", response_model=GroupSettlementResponse)
async def calculate_settlements(
    group_id: int,
    current_user: UserResponse = Depends(get_current_user),
    group_service: GroupService = Depends(get_group_service)
):
    """Transfers that even everyone out to an equal share"""
    group = await group_service.get_group(current_user.id, group_id)
    settlements = await group_service.calculate_settlements(current_user.id, group_id)
    return GroupSettlementResponse(
        group_id=group.id,
        currency=group.currency,
        settlements=settlements
    )
