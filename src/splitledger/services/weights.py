from __future__ import annotations

from dataclasses import dataclass, field, replace
from decimal import ROUND_FLOOR, ROUND_HALF_UP, Decimal, InvalidOperation
from enum import Enum
from typing import Any, Sequence

from splitledger.services.errors import InvalidSplitSum, NoValidWeights

BASIS_POINTS_TOTAL = 10_000


class SplitMode(str, Enum):
    SHARES = "shares"
    PERCENT = "percent"


@dataclass(slots=True)
class MemberWeight:
    address: str
    selected: bool = True
    value: Any = 1


@dataclass(slots=True)
class Allocation:
    debtors: list[str]
    shares_bp: list[int] = field(default_factory=list)

    @property
    def total_bp(self) -> int:
        return sum(self.shares_bp)

    def validate(self) -> None:
        if len(self.debtors) != len(self.shares_bp):
            raise InvalidSplitSum("Число должников не совпадает с числом долей")
        validate_split_sum(self.shares_bp)


def distribute_remainder(n: int, remainder: int) -> list[int]:
    """Раздаёт остаток по одной единице, начиная с первого участника и по кругу."""
    if remainder < 0:
        raise ValueError("remainder must be non-negative")
    if n <= 0:
        if remainder:
            raise ValueError("cannot distribute a remainder over zero members")
        return []
    full_rounds, extra = divmod(remainder, n)
    return [full_rounds + (1 if idx < extra else 0) for idx in range(n)]


def apportion(total: int, weights: Sequence[int]) -> list[int]:
    """Делит целое ``total`` пропорционально весам без потерь: сумма результата равна ``total``."""
    if total < 0:
        raise ValueError("total must be non-negative")
    if any(weight < 0 for weight in weights):
        raise ValueError("weights must be non-negative")
    weight_sum = sum(weights)
    if weight_sum <= 0:
        raise ValueError("weights must have a positive sum")

    base = [total * weight // weight_sum for weight in weights]
    increments = distribute_remainder(len(base), total - sum(base))
    return [amount + bump for amount, bump in zip(base, increments)]


def _to_decimal(value: Any) -> Decimal:
    if value is None or isinstance(value, bool):
        return Decimal(0)
    if isinstance(value, float):
        value = str(value)
    try:
        result = Decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        return Decimal(0)
    if not result.is_finite():
        return Decimal(0)
    return result


def clamp_share(value: Any) -> int:
    return max(0, int(_to_decimal(value).to_integral_value(rounding=ROUND_FLOOR)))


def percent_to_bp(value: Any) -> int:
    return int((_to_decimal(value) * 100).quantize(Decimal(1), rounding=ROUND_HALF_UP))


def shares_to_basis_points(values: Sequence[Any]) -> list[int]:
    shares = [clamp_share(value) for value in values]
    if sum(shares) <= 0:
        raise NoValidWeights("Сумма долей должна быть больше нуля")
    return apportion(BASIS_POINTS_TOTAL, shares)


def percent_to_basis_points(values: Sequence[Any]) -> list[int]:
    # Сумму не подгоняем под 10000: пользователь сам доводит проценты до 100.00%.
    return [percent_to_bp(value) for value in values]


def equal_split_basis_points(n: int) -> list[int]:
    if n <= 0:
        raise NoValidWeights("Не выбран ни один участник")
    base = BASIS_POINTS_TOTAL // n
    return [base + bump for bump in distribute_remainder(n, BASIS_POINTS_TOTAL - base * n)]


def split_equally(members: Sequence[MemberWeight], mode: SplitMode) -> list[MemberWeight]:
    selected = [member for member in members if member.selected]
    if mode == SplitMode.SHARES:
        return [replace(member, value=1) if member.selected else member for member in members]

    percents = iter(Decimal(bp) / 100 for bp in equal_split_basis_points(max(1, len(selected))))
    return [replace(member, value=next(percents)) if member.selected else member for member in members]


def validate_split_sum(shares_bp: Sequence[int]) -> None:
    if any(not isinstance(bp, int) or isinstance(bp, bool) or bp < 0 for bp in shares_bp):
        raise InvalidSplitSum("Доли должны быть неотрицательными целыми числами")
    total = sum(shares_bp)
    if total != BASIS_POINTS_TOTAL:
        raise InvalidSplitSum(f"Сумма долей должна быть 100.00%, сейчас {Decimal(total) / 100:.2f}%")


def compute_allocation(members: Sequence[MemberWeight], mode: SplitMode) -> Allocation:
    selected = [member for member in members if member.selected]
    if not selected:
        raise NoValidWeights("Не выбран ни один участник")

    values = [member.value for member in selected]
    if mode == SplitMode.PERCENT:
        shares_bp = percent_to_basis_points(values)
    else:
        shares_bp = shares_to_basis_points(values)
    return Allocation(debtors=[member.address for member in selected], shares_bp=shares_bp)
