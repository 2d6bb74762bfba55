"""ERC-4626 share/asset conversion.

OpenZeppelin 4.9 ``ERC4626`` formulas with a decimals offset of zero:
one virtual share and one virtual asset are added to the totals, so that
an empty vault converts 1:1 and the first depositor cannot be inflated.

These are pure functions of the vault totals. Both the adapter and the
in-memory underlying vault compose them instead of inheriting them.
"""

from eth_fee_adapter.fixed_point import Rounding, mul_div

#: ``10 ** _decimalsOffset()`` with offset zero
VIRTUAL_SHARES = 1

VIRTUAL_ASSETS = 1


def convert_to_shares(assets: int, total_assets: int, total_supply: int, rounding: Rounding = Rounding.down) -> int:
    """How many shares ``assets`` is worth."""
    return mul_div(assets, total_supply + VIRTUAL_SHARES, total_assets + VIRTUAL_ASSETS, rounding)


def convert_to_assets(shares: int, total_assets: int, total_supply: int, rounding: Rounding = Rounding.down) -> int:
    """How many assets ``shares`` is worth."""
    return mul_div(shares, total_assets + VIRTUAL_ASSETS, total_supply + VIRTUAL_SHARES, rounding)


def preview_deposit(assets: int, total_assets: int, total_supply: int) -> int:
    return convert_to_shares(assets, total_assets, total_supply, Rounding.down)


def preview_mint(shares: int, total_assets: int, total_supply: int) -> int:
    return convert_to_assets(shares, total_assets, total_supply, Rounding.up)


def preview_withdraw(assets: int, total_assets: int, total_supply: int) -> int:
    return convert_to_shares(assets, total_assets, total_supply, Rounding.up)


def preview_redeem(shares: int, total_assets: int, total_supply: int) -> int:
    return convert_to_assets(shares, total_assets, total_supply, Rounding.down)
