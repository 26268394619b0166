from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence

from splitledger.services.balances import GroupOverview
from splitledger.services.errors import NothingToSettle
from splitledger.utils.parse import normalize_address


@dataclass(slots=True)
class OutstandingBill:
    bill_id: int
    memo: str
    amount_owed: int


@dataclass(slots=True)
class SettlePlan:
    group_id: int
    creditor: str
    bill_ids: list[int]
    amounts: list[int]

    @property
    def total(self) -> int:
        return sum(self.amounts)


def outstanding_bills(overview: GroupOverview, viewer: str, creditor: str) -> List[OutstandingBill]:
    viewer = normalize_address(viewer)
    creditor = normalize_address(creditor)

    result: list[OutstandingBill] = []
    for bill in overview.bills:
        if bill.payer != creditor or bill.payer == viewer:
            continue
        status = bill.status_for(viewer)
        if status is None or status.is_paid or status.outstanding <= 0:
            continue
        result.append(OutstandingBill(bill_id=bill.bill_id, memo=bill.memo, amount_owed=status.outstanding))
    return result


def plan_settlement(
    overview: GroupOverview,
    viewer: str,
    creditor: str,
    bill_ids: Optional[Sequence[int]] = None,
) -> SettlePlan:
    """Готовит погашение: суммы равны текущему долгу по каждому счёту, ни больше ни меньше."""
    available = {item.bill_id: item for item in outstanding_bills(overview, viewer, creditor)}

    if bill_ids is None:
        selected = list(available.values())
    else:
        selected = []
        for bill_id in dict.fromkeys(bill_ids):
            item = available.get(bill_id)
            if item is None:
                raise NothingToSettle(f"По счёту #{bill_id} нечего погашать")
            selected.append(item)

    if not selected:
        raise NothingToSettle("Нет непогашенных счетов перед этим участником")

    return SettlePlan(
        group_id=overview.group_id,
        creditor=normalize_address(creditor),
        bill_ids=[item.bill_id for item in selected],
        amounts=[item.amount_owed for item in selected],
    )
