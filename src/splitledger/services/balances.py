from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Optional, Sequence

from splitledger.ledger.models import Bill, Group
from splitledger.logging import get_logger
from splitledger.services.errors import InvalidAmount, InvalidSplitSum, StaleOrMissingGroup
from splitledger.services.split import is_paid, owed_amount, split_amount
from splitledger.utils.parse import decode_memo, normalize_address

log = get_logger(__name__)


@dataclass(slots=True, frozen=True)
class DebtorStatus:
    debtor: str
    share: int
    paid: int
    owed: int
    is_paid: bool
    implicit: bool = False

    @property
    def outstanding(self) -> int:
        # Переплата не превращается в долг плательщика перед должником.
        return max(self.owed, 0)

    @property
    def paid_toward_share(self) -> int:
        return self.share - self.outstanding


@dataclass(slots=True, frozen=True)
class BillOverview:
    bill_id: int
    payer: str
    total_amount: int
    memo: str
    # Доля первого должника, только для отображения: доли по bp могут отличаться.
    per_share_amount: int
    debtors: tuple[DebtorStatus, ...]

    def status_for(self, address: str) -> Optional[DebtorStatus]:
        for status in self.debtors:
            if status.debtor == address:
                return status
        return None


@dataclass(slots=True)
class GroupOverview:
    group_id: int
    admin: str
    members: tuple[str, ...]
    bills: list[BillOverview]
    total_owed_by_you: int = 0
    total_owed_to_you: int = 0
    total_paid_by_you: int = 0
    total_paid_to_you: int = 0
    user_owes: dict[str, int] = field(default_factory=dict)
    user_is_owed: dict[str, int] = field(default_factory=dict)
    # Счета из леджера с некорректной разбивкой: в балансы не попадают.
    rejected_bills: list[int] = field(default_factory=list)

    @property
    def net_balance(self) -> int:
        return self.total_owed_to_you - self.total_owed_by_you


@dataclass(slots=True)
class BillStatus:
    paid_debtors: list[DebtorStatus]
    unpaid_debtors: list[DebtorStatus]
    paid_sum: int
    unpaid_sum: int
    is_mine: bool

    @property
    def has_unpaid(self) -> bool:
        return bool(self.unpaid_debtors)


@dataclass(slots=True)
class DashboardTotals:
    owed_by_you: int = 0
    owed_to_you: int = 0
    paid_by_you: int = 0
    paid_to_you: int = 0

    @property
    def net_balance(self) -> int:
        return self.owed_to_you - self.owed_by_you


def reconcile_bill(bill: Bill) -> BillOverview:
    if not len(bill.debtors) == len(bill.shares_bp) == len(bill.debtors_paid):
        raise InvalidSplitSum("Списки должников, долей и оплат разной длины")
    shares = split_amount(bill.total_amount, bill.shares_bp)
    debtors = tuple(
        DebtorStatus(
            debtor=debtor,
            share=share,
            paid=paid,
            owed=owed_amount(share, paid),
            is_paid=is_paid(share, paid),
        )
        for debtor, share, paid in zip(bill.debtors, shares, bill.debtors_paid)
    )
    return BillOverview(
        bill_id=bill.bill_id,
        payer=bill.payer,
        total_amount=bill.total_amount,
        memo=decode_memo(bill.memo),
        per_share_amount=shares[0] if shares else 0,
        debtors=debtors,
    )


def _add(mapping: dict[str, int], key: str, amount: int) -> None:
    mapping[key] = mapping.get(key, 0) + amount


def reconcile_group(group: Group, viewer: str) -> GroupOverview:
    """Сворачивает счета группы в балансы с точки зрения ``viewer``. Чистая функция."""
    viewer = normalize_address(viewer)
    overview = GroupOverview(
        group_id=group.group_id,
        admin=group.admin,
        members=group.members,
        bills=[],
    )
    for raw_bill in group.bills:
        try:
            overview.bills.append(reconcile_bill(raw_bill))
        except (InvalidSplitSum, InvalidAmount) as exc:
            log.warning(
                "reconcile.bill_rejected",
                group_id=group.group_id,
                bill_id=raw_bill.bill_id,
                error=str(exc),
            )
            overview.rejected_bills.append(raw_bill.bill_id)

    for bill in overview.bills:
        if bill.payer == viewer:
            for status in bill.debtors:
                if status.debtor == viewer:
                    continue
                if not status.is_paid:
                    overview.total_owed_to_you += status.outstanding
                    _add(overview.user_is_owed, status.debtor, status.outstanding)
                overview.total_paid_to_you += status.paid_toward_share
            continue

        mine = bill.status_for(viewer)
        if mine is None:
            continue
        if not mine.is_paid:
            overview.total_owed_by_you += mine.outstanding
            _add(overview.user_owes, bill.payer, mine.outstanding)
        overview.total_paid_by_you += mine.paid_toward_share

    log.debug(
        "reconcile.group",
        group_id=group.group_id,
        bills=len(overview.bills),
        net_balance=overview.net_balance,
    )
    return overview


def reconcile_groups(groups: Iterable[Group], viewer: str) -> list[GroupOverview]:
    return [reconcile_group(group, viewer) for group in groups]


def bill_status(bill: BillOverview, members: Sequence[str], viewer: str) -> BillStatus:
    rows = list(bill.debtors)
    recorded = {status.debtor for status in rows}
    for member in members:
        if member == bill.payer or member in recorded:
            continue
        # Участник не попал в разбивку счёта: считаем, что он ничего не должен.
        rows.append(
            DebtorStatus(
                debtor=member,
                share=bill.per_share_amount,
                paid=0,
                owed=bill.per_share_amount,
                is_paid=True,
                implicit=True,
            )
        )

    paid = [row for row in rows if row.is_paid]
    unpaid = [row for row in rows if not row.is_paid]
    return BillStatus(
        paid_debtors=paid,
        unpaid_debtors=unpaid,
        paid_sum=sum(row.paid_toward_share for row in paid if not row.implicit),
        unpaid_sum=sum(row.outstanding for row in unpaid),
        is_mine=bill.payer == normalize_address(viewer),
    )


def find_group(overviews: Iterable[GroupOverview], group_id: int) -> GroupOverview:
    for overview in overviews:
        if overview.group_id == group_id:
            return overview
    raise StaleOrMissingGroup(f"Группа #{group_id} не найдена")


def find_bill(overview: GroupOverview, bill_id: int) -> BillOverview:
    for bill in overview.bills:
        if bill.bill_id == bill_id:
            return bill
    raise StaleOrMissingGroup(f"Счёт #{bill_id} не найден в группе #{overview.group_id}")


def summarize_groups(overviews: Iterable[GroupOverview]) -> DashboardTotals:
    totals = DashboardTotals()
    for overview in overviews:
        totals.owed_by_you += overview.total_owed_by_you
        totals.owed_to_you += overview.total_owed_to_you
        totals.paid_by_you += overview.total_paid_by_you
        totals.paid_to_you += overview.total_paid_to_you
    return totals
