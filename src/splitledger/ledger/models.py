from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(slots=True, frozen=True)
class Bill:
    bill_id: int
    payer: str
    total_amount: int
    memo: bytes
    debtors: tuple[str, ...]
    shares_bp: tuple[int, ...]
    debtors_paid: tuple[int, ...]

    def paid_by(self, debtor: str) -> int:
        try:
            return self.debtors_paid[self.debtors.index(debtor)]
        except ValueError:
            return 0


@dataclass(slots=True, frozen=True)
class Group:
    group_id: int
    admin: str
    members: tuple[str, ...]
    bills: tuple[Bill, ...] = field(default_factory=tuple)
