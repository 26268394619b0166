from __future__ import annotations

from html import escape
from typing import Iterable, Optional, Sequence

from splitledger.services.balances import BillOverview, BillStatus, DashboardTotals, GroupOverview
from splitledger.services.settlement import SettlePlan
from splitledger.services.split import bp_to_percent_label
from splitledger.services.weights import Allocation
from splitledger.utils.parse import format_amount, short_address

CURRENCY = "APT"


def amount_label(octas: int) -> str:
    return f"{format_amount(octas)} {CURRENCY}"


def balance_label(balance: int) -> str:
    if balance >= 0:
        return f"Вам должны: {amount_label(balance)}"
    return f"Вы должны: {amount_label(-balance)}"


def _label(address: str, viewer: Optional[str]) -> str:
    if viewer is not None and address == viewer:
        return "вы"
    return short_address(address)


def format_dashboard(totals: DashboardTotals) -> str:
    lines = [
        "<b>Итого по всем группам</b>",
        balance_label(totals.net_balance),
        f"Вам должны: {amount_label(totals.owed_to_you)}",
        f"Вы должны: {amount_label(totals.owed_by_you)}",
        f"Вам вернули: {amount_label(totals.paid_to_you)}",
        f"Вы вернули: {amount_label(totals.paid_by_you)}",
    ]
    return "\n".join(lines)


def format_group_card(overview: GroupOverview) -> str:
    return (
        f"Группа #{overview.group_id} · владелец {short_address(overview.admin)} · "
        f"{len(overview.members)} участн.\n{balance_label(overview.net_balance)}"
    )


def format_group_balances(overview: GroupOverview, viewer: str) -> str:
    lines = [f"<b>Группа #{overview.group_id}</b>", balance_label(overview.net_balance)]

    lines.append("\nВы должны:")
    if overview.user_owes:
        for address, amount in overview.user_owes.items():
            lines.append(f"• {_label(address, viewer)}: {amount_label(amount)}")
    else:
        lines.append("• никому")

    lines.append("\nВам должны:")
    if overview.user_is_owed:
        for address, amount in overview.user_is_owed.items():
            lines.append(f"• {_label(address, viewer)}: {amount_label(amount)}")
    else:
        lines.append("• никто")
    if overview.rejected_bills:
        ids = ", ".join(f"#{bill_id}" for bill_id in overview.rejected_bills)
        lines.append(f"\nНе учтены счета с некорректной разбивкой: {ids}")
    return "\n".join(lines)


def format_bill_list(bills: Iterable[BillOverview], viewer: str) -> str:
    lines = ["<b>Счета</b>"]
    for bill in bills:
        lines.append(
            f"• #{bill.bill_id} {escape(bill.memo)} — {amount_label(bill.total_amount)} (платил {_label(bill.payer, viewer)})"
        )
    if len(lines) == 1:
        lines.append("• пока нет счетов")
    return "\n".join(lines)


def format_members(overview: GroupOverview, viewer: str) -> str:
    lines = ["<b>Участники</b>"]
    for member in overview.members:
        suffix = " (владелец)" if member == overview.admin else ""
        lines.append(f"• {_label(member, viewer)}{suffix}")
    return "\n".join(lines)


def format_bill_status(bill: BillOverview, status: BillStatus, viewer: str) -> str:
    lines = [
        f"<b>Счёт #{bill.bill_id}</b> {escape(bill.memo)}",
        f"Сумма: {amount_label(bill.total_amount)}, платил {_label(bill.payer, viewer)}",
    ]
    if status.unpaid_debtors:
        lines.append(f"\nНе оплатили ({amount_label(status.unpaid_sum)}):")
        for row in status.unpaid_debtors:
            lines.append(f"• {_label(row.debtor, viewer)}: {amount_label(row.outstanding)} из {amount_label(row.share)}")
    if status.paid_debtors:
        lines.append(f"\nОплатили ({amount_label(status.paid_sum)}):")
        for row in status.paid_debtors:
            note = " (не участвует в счёте)" if row.implicit else ""
            lines.append(f"• {_label(row.debtor, viewer)}{note}")
    return "\n".join(lines)


def format_allocation_preview(allocation: Allocation, shares: Sequence[int]) -> str:
    lines = ["Разбивка:"]
    for debtor, bp, share in zip(allocation.debtors, allocation.shares_bp, shares):
        lines.append(f"• {short_address(debtor)}: {bp_to_percent_label(bp)} — {amount_label(share)}")
    lines.append(f"Итого: {bp_to_percent_label(allocation.total_bp)}")
    return "\n".join(lines)


def format_settle_plan(plan: SettlePlan) -> str:
    lines = [f"Погашение перед {short_address(plan.creditor)} в группе #{plan.group_id}:"]
    for bill_id, amount in zip(plan.bill_ids, plan.amounts):
        lines.append(f"• счёт #{bill_id}: {amount_label(amount)}")
    lines.append(f"Итого: {amount_label(plan.total)}")
    return "\n".join(lines)
