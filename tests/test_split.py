import pytest

from splitledger.ledger.models import Bill
from splitledger.services.errors import InvalidAmount, InvalidSplitSum, NoValidWeights
from splitledger.services.split import (
    bp_to_percent_label,
    debtor_shares,
    is_paid,
    owed_amount,
    split_amount,
    split_by_weights,
)


def test_split_amount_even():
    assert split_amount(1000, [2500, 2500, 2500, 2500]) == [250, 250, 250, 250]


def test_split_amount_remainder_goes_to_first_debtors():
    shares = split_amount(1001, [3334, 3333, 3333])
    assert shares == [334, 334, 333]
    assert sum(shares) == 1001


def test_split_amount_one_unit_three_ways():
    shares = split_amount(100_000_000, [3334, 3333, 3333])
    assert shares == [33_340_000, 33_330_000, 33_330_000]
    assert sum(shares) == 100_000_000


def test_split_amount_skewed():
    shares = split_amount(12345, [1, 9999])
    assert shares == [2, 12343]
    assert sum(shares) == 12345


@pytest.mark.parametrize("total", [0, 1, 7, 9999, 10_001, 99_999_999, 100_000_003, 10**18 + 7])
@pytest.mark.parametrize(
    "shares_bp",
    [[10_000], [1, 9999], [3334, 3333, 3333], [1, 1, 1, 9997], [1250] * 8, [7, 13, 4980, 5000]],
)
def test_split_amount_never_leaks(total, shares_bp):
    shares = split_amount(total, shares_bp)
    assert sum(shares) == total
    assert all(share >= 0 for share in shares)


def test_split_amount_rejects_bad_input():
    with pytest.raises(InvalidSplitSum):
        split_amount(100, [3333, 3333, 3333])
    with pytest.raises(InvalidAmount):
        split_amount(-1, [10_000])


def test_split_by_weights_equal_shares():
    shares = split_by_weights(100_000_000, [1, 1, 1])
    assert shares == [33_333_334, 33_333_333, 33_333_333]
    assert sum(shares) == 100_000_000


def test_split_by_weights_requires_positive_total_weight():
    with pytest.raises(NoValidWeights):
        split_by_weights(100, [0, 0])


def test_debtor_shares_and_status():
    bill = Bill(
        bill_id=1,
        payer="0xa",
        total_amount=100,
        memo=b"",
        debtors=("0xb", "0xc"),
        shares_bp=(2500, 7500),
        debtors_paid=(25, 10),
    )
    shares = debtor_shares(bill)
    assert shares == {"0xb": 25, "0xc": 75}

    assert owed_amount(shares["0xb"], bill.paid_by("0xb")) == 0
    assert is_paid(shares["0xb"], bill.paid_by("0xb"))
    assert owed_amount(shares["0xc"], bill.paid_by("0xc")) == 65
    assert not is_paid(shares["0xc"], bill.paid_by("0xc"))
    assert bill.paid_by("0xz") == 0


def test_bp_to_percent_label():
    assert bp_to_percent_label(3334) == "33.34%"
    assert bp_to_percent_label(10_000) == "100.00%"
    assert bp_to_percent_label(5) == "0.05%"
