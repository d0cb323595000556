"""
Equal-split settlement for travel groups.

Core algorithm:
1. Each member's fair share is total / members, remainder cents going to
   the first members in join order
2. Net position = paid - share (positive: is owed, negative: owes)
3. Greedily match debtors with creditors, largest first
"""

from typing import Dict, List

from app.models.group import GroupSettlement, TravelGroup


def calculate_shares(group: TravelGroup) -> Dict[int, int]:
    """
    What each member should have paid.

    Returns: { member_id: share }
    """
    shares = {member.id: 0 for member in group.members}
    if not group.members:
        return shares

    total = group.total_expenses()
    per_member = total // len(group.members)
    remainder = total % len(group.members)

    for i, member in enumerate(group.members):
        # Distribute remainder to first few members
        extra = 1 if i < remainder else 0
        shares[member.id] = per_member + extra

    return shares


def calculate_payments(group: TravelGroup) -> Dict[int, int]:
    """Total paid by each member."""
    payments = {member.id: 0 for member in group.members}
    for expense in group.expenses:
        payments[expense.member_id] = payments.get(expense.member_id, 0) + expense.amount
    return payments


def calculate_net_positions(group: TravelGroup) -> Dict[int, int]:
    """
    Net position for each member (paid - share).

    Positive = is owed money
    Negative = owes money
    Zero = settled up
    """
    shares = calculate_shares(group)
    payments = calculate_payments(group)
    return {
        member_id: payments.get(member_id, 0) - share
        for member_id, share in shares.items()
    }


def calculate_settlements(group: TravelGroup) -> List[GroupSettlement]:
    """
    Transfers that bring every member to their fair share.

    Simple greedy matching, largest amounts first. Net positions always
    sum to zero, so every debtor is fully matched.
    """
    net_positions = calculate_net_positions(group)

    debtors = sorted(
        [(mid, -amt) for mid, amt in net_positions.items() if amt < 0],
        key=lambda pair: pair[1],
        reverse=True
    )
    creditors = sorted(
        [(mid, amt) for mid, amt in net_positions.items() if amt > 0],
        key=lambda pair: pair[1],
        reverse=True
    )

    settlements = []
    debtor_idx = 0
    creditor_idx = 0

    while debtor_idx < len(debtors) and creditor_idx < len(creditors):
        debtor_id, debtor_amt = debtors[debtor_idx]
        creditor_id, creditor_amt = creditors[creditor_idx]

        match_amt = min(debtor_amt, creditor_amt)
        settlements.append(GroupSettlement(
            from_member_id=debtor_id,
            to_member_id=creditor_id,
            amount=match_amt
        ))

        debtor_amt -= match_amt
        creditor_amt -= match_amt

        if debtor_amt == 0:
            debtor_idx += 1
        else:
            debtors[debtor_idx] = (debtor_id, debtor_amt)

        if creditor_amt == 0:
            creditor_idx += 1
        else:
            creditors[creditor_idx] = (creditor_id, creditor_amt)

    return settlements
