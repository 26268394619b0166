from __future__ import annotations

from typing import Sequence

from splitledger.ledger.models import Bill
from splitledger.services.errors import InvalidAmount, NoValidWeights
from splitledger.services.weights import BASIS_POINTS_TOTAL, apportion, validate_split_sum


def split_amount(total_amount: int, shares_bp: Sequence[int]) -> list[int]:
    """
    Делит ``total_amount`` (octas) между должниками по базисным пунктам.

    Каждому достаётся ``floor(total * bp / 10000)``, недостача (не больше n-1 octas)
    раздаётся первым должникам по порядку, так что сумма долей всегда равна ``total_amount``.
    """
    if total_amount < 0:
        raise InvalidAmount("total_amount must be non-negative")
    validate_split_sum(shares_bp)

    # Сумма bp ровно 10000, поэтому apportion даёт ровно floor(total * bp / 10000) + остаток.
    return apportion(total_amount, list(shares_bp))


def split_by_weights(total_amount: int, weights: Sequence[int]) -> list[int]:
    if total_amount < 0:
        raise InvalidAmount("total_amount must be non-negative")
    if not weights or sum(max(0, weight) for weight in weights) <= 0:
        raise NoValidWeights("Сумма долей должна быть больше нуля")
    return apportion(total_amount, [max(0, weight) for weight in weights])


def debtor_shares(bill: Bill) -> dict[str, int]:
    shares = split_amount(bill.total_amount, bill.shares_bp)
    return {debtor: share for debtor, share in zip(bill.debtors, shares)}


def owed_amount(share: int, paid: int) -> int:
    return share - paid


def is_paid(share: int, paid: int) -> bool:
    return paid >= share


def bp_to_percent_label(bp: int) -> str:
    whole, frac = divmod(bp, BASIS_POINTS_TOTAL // 100)
    return f"{whole}.{frac:02d}%"
