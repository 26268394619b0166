from decimal import Decimal

import pytest

from splitledger.services.errors import InvalidSplitSum, NoValidWeights
from splitledger.services.weights import (
    Allocation,
    MemberWeight,
    SplitMode,
    compute_allocation,
    distribute_remainder,
    equal_split_basis_points,
    percent_to_basis_points,
    shares_to_basis_points,
    split_equally,
    validate_split_sum,
)


def test_distribute_remainder_first_members_win():
    assert distribute_remainder(3, 2) == [1, 1, 0]
    assert distribute_remainder(4, 0) == [0, 0, 0, 0]


def test_distribute_remainder_cycles_when_remainder_exceeds_members():
    assert distribute_remainder(3, 5) == [2, 2, 1]
    assert sum(distribute_remainder(7, 123)) == 123


def test_distribute_remainder_invalid():
    assert distribute_remainder(0, 0) == []
    with pytest.raises(ValueError):
        distribute_remainder(0, 1)
    with pytest.raises(ValueError):
        distribute_remainder(2, -1)


def test_shares_equal_weights():
    assert shares_to_basis_points([1, 1, 1]) == [3334, 3333, 3333]


@pytest.mark.parametrize(
    "weights",
    [[1], [1, 2], [1, 2, 3, 7], [5, 0, 5], [3] * 7, [1, 9999], [13, 17, 19, 23, 29, 31]],
)
def test_shares_always_sum_to_10000(weights):
    assert sum(shares_to_basis_points(weights)) == 10_000


def test_shares_clamp_fractional_and_negative():
    # 2.7 -> 2, -1 -> 0, "1" -> 1
    assert shares_to_basis_points([2.7, -1, "1"]) == [6667, 0, 3333]


def test_shares_without_positive_weight():
    with pytest.raises(NoValidWeights):
        shares_to_basis_points([0, 0])
    with pytest.raises(NoValidWeights):
        shares_to_basis_points([-3, 0.5])


def test_percent_is_not_auto_corrected():
    basis_points = percent_to_basis_points(["33.33", "33.33", "33.33"])
    assert basis_points == [3333, 3333, 3333]
    with pytest.raises(InvalidSplitSum):
        validate_split_sum(basis_points)


def test_percent_rounding():
    assert percent_to_basis_points([Decimal("33.34"), 33.33, "33.33"]) == [3334, 3333, 3333]
    assert percent_to_basis_points(["12.345", "87.655"]) == [1235, 8766]


def test_percent_all_zero_is_returned_as_is():
    assert percent_to_basis_points([0, "abc", None]) == [0, 0, 0]

    allocation = compute_allocation([MemberWeight("0xa", value=0), MemberWeight("0xb", value=0)], SplitMode.PERCENT)
    assert allocation.shares_bp == [0, 0]
    assert allocation.total_bp == 0
    with pytest.raises(InvalidSplitSum):
        allocation.validate()


def test_equal_split_three_members():
    assert equal_split_basis_points(3) == [3334, 3333, 3333]
    assert sum(equal_split_basis_points(7)) == 10_000


def test_split_equally_percent_mode():
    members = [
        MemberWeight("0xa"),
        MemberWeight("0xb", selected=False, value=5),
        MemberWeight("0xc"),
        MemberWeight("0xd"),
    ]
    result = split_equally(members, SplitMode.PERCENT)
    assert [m.value for m in result] == [Decimal("33.34"), 5, Decimal("33.33"), Decimal("33.33")]

    allocation = compute_allocation(result, SplitMode.PERCENT)
    assert allocation.debtors == ["0xa", "0xc", "0xd"]
    assert allocation.shares_bp == [3334, 3333, 3333]
    allocation.validate()


def test_split_equally_shares_mode():
    members = [MemberWeight("0xa", value=4), MemberWeight("0xb", selected=False, value=0)]
    result = split_equally(members, SplitMode.SHARES)
    assert [m.value for m in result] == [1, 0]


def test_compute_allocation_skips_unselected():
    members = [
        MemberWeight("0xa", value=2),
        MemberWeight("0xb", selected=False, value=100),
        MemberWeight("0xc", value=1),
    ]
    allocation = compute_allocation(members, SplitMode.SHARES)
    assert allocation.debtors == ["0xa", "0xc"]
    assert allocation.shares_bp == [6667, 3333]


def test_compute_allocation_nobody_selected():
    with pytest.raises(NoValidWeights):
        compute_allocation([MemberWeight("0xa", selected=False)], SplitMode.SHARES)


def test_allocation_validate():
    with pytest.raises(InvalidSplitSum):
        Allocation(debtors=["0xa", "0xb"], shares_bp=[10_000]).validate()
    with pytest.raises(InvalidSplitSum):
        Allocation(debtors=["0xa", "0xb"], shares_bp=[10_001, -1]).validate()
    Allocation(debtors=["0xa", "0xb"], shares_bp=[1, 9999]).validate()
