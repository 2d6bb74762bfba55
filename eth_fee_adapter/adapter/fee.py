"""Performance fee accrual.

The adapter takes ``fee_pct`` of any growth of its total assets.
The fee is never transferred as assets. Instead the fee collector is
minted new shares, diluting everybody else, worth exactly the fee.

Deriving the number of minted shares ``M``: the collector must own the
fee share of the vault after the mint,

.. code-block:: text

    M / (supply + M) = fee_assets / current_assets

    M = fee_assets / ((current_assets - fee_assets) / supply)

so the fee assets are divided by the post-fee share price computed against
the supply before the mint. Fee assets are rounded down and the share price
up, so truncation dust always stays with the existing shareholders.
"""

import logging
from dataclasses import dataclass

from eth_fee_adapter.adapter.errors import FeeAccrualError, FeeConfigurationError
from eth_fee_adapter.fixed_point import ONE, div_down, div_up, from_wad, mul_down

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class PendingFees:
    """Breakdown of fees accrued since the last settlement."""

    #: Asset gain above the baseline, zero on loss
    gain: int

    #: Fee share of the gain, in assets
    fee_assets: int

    #: Post-fee price of one share, 18 decimal fixed point
    share_value: int

    #: Shares to mint to the fee collector
    fee_shares: int


NO_PENDING_FEES = PendingFees(gain=0, fee_assets=0, share_value=0, fee_shares=0)


def calculate_pending_fees(
    current_total_assets: int,
    previous_total_assets: int,
    fee_pct: int,
    raw_supply: int,
) -> PendingFees:
    """Calculate the fee accrued since the baseline.

    :param current_total_assets:
        Adapter assets now, not including anything for unminted fee shares

    :param previous_total_assets:
        Baseline from the last settlement

    :param fee_pct:
        Fee as 18 decimal fixed point

    :param raw_supply:
        Minted share supply, not including pending fee shares

    :raise FeeAccrualError:
        Assets grew while the raw supply is zero
    """
    if current_total_assets <= previous_total_assets:
        # Losses never produce negative fees
        return NO_PENDING_FEES

    gain = current_total_assets - previous_total_assets
    fee_assets = mul_down(gain, fee_pct)
    if raw_supply == 0:
        raise FeeAccrualError(f"Assets grew by {gain} with zero share supply, cannot price {fee_assets} of fees in shares")

    if fee_assets == 0:
        return PendingFees(gain=gain, fee_assets=0, share_value=0, fee_shares=0)

    share_value = div_up(current_total_assets - fee_assets, raw_supply)
    fee_shares = div_down(fee_assets, share_value)
    return PendingFees(gain=gain, fee_assets=fee_assets, share_value=share_value, fee_shares=fee_shares)


def calculate_pending_fees_in_shares(
    current_total_assets: int,
    previous_total_assets: int,
    fee_pct: int,
    raw_supply: int,
) -> int:
    """Shares owed to the fee collector but not yet minted.

    See :py:func:`calculate_pending_fees`.
    """
    return calculate_pending_fees(current_total_assets, previous_total_assets, fee_pct, raw_supply).fee_shares


def validate_fee_pct(current_pct: int, new_pct: int):
    """Check a fee percentage change.

    - The first fee must be a fraction below 100%
    - After that the fee can only go down

    :raise FeeConfigurationError:
        If the change is not allowed
    """
    if new_pct == 0:
        raise FeeConfigurationError("ERC4626Adapter: fee pct zero")

    if current_pct == 0:
        if new_pct >= ONE:
            raise FeeConfigurationError(f"ERC4626Adapter: fee pct above one: {from_wad(new_pct)}")
    elif new_pct >= current_pct:
        raise FeeConfigurationError(f"ERC4626Adapter: fee pct above previous, {from_wad(new_pct)} >= {from_wad(current_pct)}")
