"""18 decimal fixed point math.

- All token amounts are raw ``uint256`` integers
- Fractions (fee percentage, share price) are scaled by :py:data:`ONE`
- Every helper states its rounding direction in its name, so callers
  decide who absorbs the truncation dust

Example:

.. code-block:: python

    fee_pct = to_wad(Decimal("0.1"))
    fee_assets = mul_down(200 * ONE, fee_pct)
    assert fee_assets == 20 * ONE
"""

import enum
from decimal import Decimal

#: 1.0 as 18 decimal fixed point
ONE = 10**18

#: Largest value a Solidity uint256 can hold
MAX_UINT256 = 2**256 - 1


class Rounding(enum.Enum):
    """Rounding direction for integer division."""

    #: Truncate towards zero
    down = "down"

    #: Round towards infinity
    up = "up"


def mul_down(a: int, b: int) -> int:
    """Multiply two fixed point numbers, rounding down."""
    assert a >= 0 and b >= 0, f"Negative fixed point operand: {a}, {b}"
    return a * b // ONE


def div_down(a: int, b: int) -> int:
    """Divide two fixed point numbers, rounding down.

    :raise ZeroDivisionError:
        If ``b`` is zero
    """
    assert a >= 0 and b >= 0, f"Negative fixed point operand: {a}, {b}"
    if b == 0:
        raise ZeroDivisionError(f"Fixed point division of {a} by zero")
    return a * ONE // b


def div_up(a: int, b: int) -> int:
    """Divide two fixed point numbers, rounding up.

    :raise ZeroDivisionError:
        If ``b`` is zero
    """
    assert a >= 0 and b >= 0, f"Negative fixed point operand: {a}, {b}"
    if b == 0:
        raise ZeroDivisionError(f"Fixed point division of {a} by zero")
    if a == 0:
        return 0
    return (a * ONE - 1) // b + 1


def mul_div(a: int, b: int, denominator: int, rounding: Rounding = Rounding.down) -> int:
    """Calculate ``a * b / denominator`` with full precision.

    Same as OpenZeppelin ``Math.mulDiv()``.
    Python integers do not overflow, so the intermediate product is exact.
    """
    assert isinstance(rounding, Rounding), f"Got {type(rounding)}"
    assert a >= 0 and b >= 0, f"Negative operand: {a}, {b}"
    if denominator == 0:
        raise ZeroDivisionError(f"mul_div() of {a} * {b} by zero")
    result, remainder = divmod(a * b, denominator)
    if rounding == Rounding.up and remainder > 0:
        result += 1
    return result


def to_wad(value: Decimal | int | str) -> int:
    """Convert human-readable number to 18 decimal fixed point.

    .. code-block:: python

        assert to_wad(Decimal("0.1")) == 10**17
    """
    return int(Decimal(value) * ONE)


def from_wad(raw: int) -> Decimal:
    """Convert 18 decimal fixed point to human-readable decimal."""
    assert type(raw) == int, f"Got {type(raw)}: {raw}"
    return Decimal(raw) / Decimal(ONE)
