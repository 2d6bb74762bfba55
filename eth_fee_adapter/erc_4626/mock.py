"""In-memory ERC-4626 vault.

- Stand-in for a real yield-bearing vault in tests and simulations
- Yield and losses are simulated by minting or burning the asset held by the vault
- Can cap withdrawals to model illiquid vaults
- Can call back into arbitrary code in the middle of a deposit or withdraw,
  to model a malicious or hook-carrying vault

Example:

.. code-block:: python

    usdc = create_token("USD Coin", "USDC", decimals=6)
    vault = InMemoryERC4626Vault.create(usdc)
    vault.simulate_yield(usdc.convert_to_raw(Decimal(10)))
"""

import logging
from typing import Callable

from eth_typing import HexAddress

from eth_fee_adapter.erc_4626 import math
from eth_fee_adapter.erc_4626.underlying import UnderlyingVault
from eth_fee_adapter.token import TokenLedger, make_address

logger = logging.getLogger(__name__)


#: Called in the middle of a vault deposit/withdraw
Callback = Callable[[], None]


class VaultLimitExceeded(Exception):
    """Tried to withdraw more than the vault lets out."""


class InMemoryERC4626Vault(UnderlyingVault):
    """ERC-4626 vault whose total assets is its asset balance."""

    def __init__(
        self,
        address: HexAddress,
        asset: TokenLedger,
        shares: TokenLedger,
    ):
        assert isinstance(asset, TokenLedger), f"Got {type(asset)}"
        assert isinstance(shares, TokenLedger), f"Got {type(shares)}"
        self._address = address
        self._asset = asset
        self._shares = shares

        #: If set, cap :py:meth:`max_withdraw` to this many raw assets
        self.withdraw_limit: int | None = None

        #: Called after assets are pulled in by deposit
        self.on_deposit: Callback | None = None

        #: Called before assets are sent out by withdraw
        self.on_withdraw: Callback | None = None

    def __repr__(self):
        return f"<InMemoryERC4626Vault {self._shares.symbol} at {self._address}, total assets {self.total_assets()}>"

    @classmethod
    def create(cls, asset: TokenLedger, symbol: str | None = None) -> "InMemoryERC4626Vault":
        """Create a vault for an asset with a share token named after it."""
        symbol = symbol or f"v{asset.symbol}"
        address = make_address(f"vault:{symbol}")
        shares = TokenLedger(
            address=address,
            name=f"{asset.name} Vault",
            symbol=symbol,
            decimals=asset.decimals,
            event_log=asset.event_log,
        )
        return cls(address, asset, shares)

    @property
    def address(self) -> HexAddress:
        return self._address

    def asset(self) -> TokenLedger:
        return self._asset

    def share_token(self) -> TokenLedger:
        return self._shares

    def total_assets(self) -> int:
        return self._asset.balance_of(self._address)

    def total_supply(self) -> int:
        return self._shares.total_supply

    def balance_of(self, account: HexAddress) -> int:
        return self._shares.balance_of(account)

    def convert_to_assets(self, shares: int) -> int:
        return math.convert_to_assets(shares, self.total_assets(), self.total_supply())

    def convert_to_shares(self, assets: int) -> int:
        return math.convert_to_shares(assets, self.total_assets(), self.total_supply())

    def max_withdraw(self, account: HexAddress) -> int:
        claim = self.convert_to_assets(self.balance_of(account))
        if self.withdraw_limit is not None:
            return min(claim, self.withdraw_limit)
        return claim

    def deposit(self, assets: int, on_behalf_of: HexAddress, sender: HexAddress) -> int:
        shares = math.preview_deposit(assets, self.total_assets(), self.total_supply())
        self._asset.transfer_from(sender, self._address, assets, sender=self._address)
        if self.on_deposit:
            self.on_deposit()
        self._shares.mint(on_behalf_of, shares)
        logger.debug("Vault %s deposit %d assets for %d shares to %s", self._shares.symbol, assets, shares, on_behalf_of)
        return shares

    def withdraw(self, assets: int, to: HexAddress, from_: HexAddress, sender: HexAddress) -> int:
        max_assets = self.max_withdraw(from_)
        if assets > max_assets:
            raise VaultLimitExceeded(f"ERC4626: withdraw more than max, {assets} > {max_assets} for {from_}")
        shares = math.preview_withdraw(assets, self.total_assets(), self.total_supply())
        if sender != from_:
            self._shares.spend_allowance(from_, sender, shares)
        if self.on_withdraw:
            self.on_withdraw()
        self._shares.burn(from_, shares)
        self._asset.transfer(to, assets, sender=self._address)
        logger.debug("Vault %s withdraw %d assets for %d shares from %s", self._shares.symbol, assets, shares, from_)
        return shares

    def simulate_yield(self, assets: int):
        """Vault earns ``assets`` of profit, shared by all its shareholders."""
        logger.info("Vault %s earns %d assets", self._shares.symbol, assets)
        self._asset.mint(self._address, assets)

    def simulate_loss(self, assets: int):
        """Vault loses ``assets``, e.g. a bad debt event."""
        logger.info("Vault %s loses %d assets", self._shares.symbol, assets)
        self._asset.burn(self._address, assets)

    def snapshot(self) -> tuple:
        """Capture the vault share ledger.

        The asset ledger is shared with other parties and captured by the caller.
        """
        return self._shares.snapshot()

    def restore(self, snapshot: tuple):
        self._shares.restore(snapshot)
