"""Underlying vault interface.

The adapter never looks inside the vault it deposits into.
It only talks to it through :py:class:`UnderlyingVault`, so the vault can be

- :py:class:`eth_fee_adapter.erc_4626.mock.InMemoryERC4626Vault` for tests and simulations
- :py:class:`eth_fee_adapter.erc_4626.onchain.OnChainSharePriceVault` to replay a live vault share price
"""

from abc import ABC, abstractmethod
from typing import Any

from eth_typing import HexAddress

from eth_fee_adapter.token import TokenLedger


class UnderlyingVault(ABC):
    """What the adapter needs from the vault it wraps.

    Calls mirror the ERC-4626 functions of the same name.
    The ``sender`` argument is the calling account (``msg.sender``).
    """

    @property
    @abstractmethod
    def address(self) -> HexAddress:
        """Vault contract address."""

    @abstractmethod
    def asset(self) -> TokenLedger:
        """The token the vault accounts in."""

    @abstractmethod
    def share_token(self) -> TokenLedger:
        """The ERC-20 share token of the vault itself."""

    @abstractmethod
    def total_assets(self) -> int:
        """Total raw assets managed by the vault."""

    @abstractmethod
    def balance_of(self, account: HexAddress) -> int:
        """Raw vault shares held by an account."""

    @abstractmethod
    def convert_to_assets(self, shares: int) -> int:
        """Value of vault shares, rounded down."""

    @abstractmethod
    def max_withdraw(self, account: HexAddress) -> int:
        """How many assets the account can withdraw right now."""

    @abstractmethod
    def deposit(self, assets: int, on_behalf_of: HexAddress, sender: HexAddress) -> int:
        """Pull ``assets`` from ``sender`` and mint vault shares to ``on_behalf_of``.

        :return:
            Vault shares minted
        """

    @abstractmethod
    def withdraw(self, assets: int, to: HexAddress, from_: HexAddress, sender: HexAddress) -> int:
        """Burn shares of ``from_`` and send ``assets`` to ``to``.

        :return:
            Vault shares burnt
        """

    @abstractmethod
    def snapshot(self) -> Any:
        """Capture the vault state so a reverted adapter call can roll it back."""

    @abstractmethod
    def restore(self, snapshot: Any):
        """Roll back to a state captured with :py:meth:`snapshot`."""
