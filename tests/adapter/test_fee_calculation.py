"""Pending fee maths without an adapter."""

import pytest

from eth_fee_adapter.adapter.errors import FeeAccrualError, FeeConfigurationError
from eth_fee_adapter.adapter.fee import (
    NO_PENDING_FEES,
    calculate_pending_fees,
    calculate_pending_fees_in_shares,
    validate_fee_pct,
)
from eth_fee_adapter.fixed_point import ONE, to_wad


def test_pending_fees_breakdown():
    """100 shares, assets 100 -> 300, 10% fee."""
    fees = calculate_pending_fees(
        current_total_assets=to_wad(300),
        previous_total_assets=to_wad(100),
        fee_pct=to_wad("0.1"),
        raw_supply=to_wad(100),
    )
    assert fees.gain == to_wad(200)
    assert fees.fee_assets == to_wad(20)
    assert fees.share_value == to_wad("2.8")
    assert fees.fee_shares == to_wad(20) * ONE // to_wad("2.8")


@pytest.mark.parametrize(
    "current, previous",
    [
        (to_wad(100), to_wad(100)),
        (to_wad(99), to_wad(100)),
        (0, to_wad(100)),
    ],
)
def test_no_fees_without_gain(current, previous):
    fees = calculate_pending_fees(current, previous, to_wad("0.1"), to_wad(100))
    assert fees == NO_PENDING_FEES
    assert calculate_pending_fees_in_shares(current, previous, to_wad("0.1"), to_wad(100)) == 0


def test_share_value_rounds_up():
    """The post-fee price is rounded up, so fewer fee shares are minted."""
    fees = calculate_pending_fees(
        current_total_assets=10,
        previous_total_assets=0,
        fee_pct=to_wad("0.5"),
        raw_supply=3,
    )
    assert fees.fee_assets == 5
    # 5 / 3 = 1.666...
    assert fees.share_value == 1666666666666666667
    # 5 / 1.666...7 = 2.999... rounds down to 2
    assert fees.fee_shares == 2


def test_zero_supply_with_gain_is_fatal():
    with pytest.raises(FeeAccrualError):
        calculate_pending_fees(to_wad(10), 0, to_wad("0.1"), 0)


def test_zero_supply_dust_gain_is_fatal():
    """Even a gain too small to produce any fee needs a share supply."""
    with pytest.raises(FeeAccrualError):
        calculate_pending_fees_in_shares(5, 0, to_wad("0.1"), 0)


def test_first_fee_pct():
    validate_fee_pct(0, 1)
    validate_fee_pct(0, ONE - 1)

    with pytest.raises(FeeConfigurationError):
        validate_fee_pct(0, ONE)

    with pytest.raises(FeeConfigurationError):
        validate_fee_pct(0, 0)


def test_subsequent_fee_pct():
    current = to_wad("0.2")
    validate_fee_pct(current, current - 1)

    with pytest.raises(FeeConfigurationError):
        validate_fee_pct(current, current)

    with pytest.raises(FeeConfigurationError):
        validate_fee_pct(current, to_wad("0.3"))

    with pytest.raises(FeeConfigurationError):
        validate_fee_pct(current, 0)
