"""Fixed point rounding directions."""

from decimal import Decimal

import pytest

from eth_fee_adapter.fixed_point import ONE, Rounding, div_down, div_up, from_wad, mul_div, mul_down, to_wad


def test_mul():
    assert mul_down(to_wad(3), to_wad("0.5")) == to_wad("1.5")
    assert mul_down(1, 1) == 0


def test_div():
    assert div_down(ONE, 3 * ONE) == 333333333333333333
    assert div_up(ONE, 3 * ONE) == 333333333333333334
    assert div_up(0, 5) == 0
    assert div_down(6 * ONE, 2 * ONE) == 3 * ONE
    assert div_up(6 * ONE, 2 * ONE) == 3 * ONE


def test_div_by_zero():
    with pytest.raises(ZeroDivisionError):
        div_down(1, 0)

    with pytest.raises(ZeroDivisionError):
        div_up(1, 0)

    with pytest.raises(ZeroDivisionError):
        mul_div(1, 1, 0)


def test_mul_div():
    assert mul_div(10, 10, 3) == 33
    assert mul_div(10, 10, 3, Rounding.up) == 34
    assert mul_div(9, 10, 3, Rounding.up) == 30
    # No overflow in the intermediate product
    assert mul_div(2**255, 2**255, 2**255) == 2**255


def test_wad_conversion():
    assert to_wad(Decimal("0.1")) == 10**17
    assert to_wad("2.8") == 28 * 10**17
    assert to_wad(100) == 100 * ONE
    assert from_wad(15 * 10**17) == Decimal("1.5")
