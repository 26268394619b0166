from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Sequence

from splitledger.services.errors import InvalidAmount, SplitLedgerError
from splitledger.services.settlement import SettlePlan
from splitledger.services.weights import Allocation
from splitledger.utils.parse import encode_memo, normalize_address


@dataclass(slots=True)
class EntryFunctionPayload:
    function: str
    arguments: list[Any]
    type_arguments: list[str] = field(default_factory=list)

    def as_dict(self) -> dict[str, Any]:
        return {
            "function": self.function,
            "type_arguments": list(self.type_arguments),
            "arguments": list(self.arguments),
        }


def _u64(value: int) -> str:
    return str(int(value))


def create_group_payload(module_id: str, members: Sequence[str]) -> EntryFunctionPayload:
    cleaned = [normalize_address(member) for member in members if member.strip()]
    if not cleaned:
        raise SplitLedgerError("Добавьте хотя бы одного участника")
    if len(set(cleaned)) != len(cleaned):
        raise SplitLedgerError("Адреса участников не должны повторяться")
    return EntryFunctionPayload(function=f"{module_id}::create_group", arguments=[cleaned])


def add_expense_payload(
    module_id: str,
    group_id: int,
    total_amount: int,
    memo: str,
    allocation: Allocation,
) -> EntryFunctionPayload:
    if total_amount <= 0:
        raise InvalidAmount("Сумма должна быть больше нуля")
    memo_bytes = encode_memo(memo)
    if not memo_bytes:
        raise SplitLedgerError("Добавьте описание расхода")
    allocation.validate()

    return EntryFunctionPayload(
        function=f"{module_id}::add_expense",
        arguments=[
            _u64(group_id),
            _u64(total_amount),
            list(memo_bytes),
            list(allocation.debtors),
            [_u64(bp) for bp in allocation.shares_bp],
        ],
    )


def settle_debt_payload(module_id: str, plan: SettlePlan) -> EntryFunctionPayload:
    return EntryFunctionPayload(
        function=f"{module_id}::settle_debt",
        arguments=[
            _u64(plan.group_id),
            plan.creditor,
            [_u64(bill_id) for bill_id in plan.bill_ids],
            [_u64(amount) for amount in plan.amounts],
        ],
    )
