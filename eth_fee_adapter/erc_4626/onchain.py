"""Replay a live ERC-4626 vault share price.

- The adapter position is kept in memory
- The growth of the position follows the share price of a real vault,
  read with ``convertToAssets()`` at historical blocks
- Lets us see what the adapter fee would have taken on top of a real vault

Example:

.. code-block:: python

    web3 = Web3(Web3.HTTPProvider(os.environ["JSON_RPC_BASE"]))
    feed = create_share_price_feed(web3, "0x45aa96f0b3188d47a1dafdbefce1db6b37f58216")
    vault = OnChainSharePriceVault.create_for_feed(feed, block_identifier=start_block)

    adapter = ERC4626FeeAdapter(vault, fee_pct, collector, owner)
    ...
    vault.advance_to_block(start_block + 10_000)
"""

import logging
from decimal import Decimal
from functools import cached_property

from eth_typing import BlockIdentifier, HexAddress
from web3 import Web3
from web3.contract import Contract

from eth_fee_adapter.erc_4626.abi import ERC4626_ABI
from eth_fee_adapter.erc_4626.mock import InMemoryERC4626Vault
from eth_fee_adapter.fixed_point import Rounding, mul_div
from eth_fee_adapter.token import TokenLedger, make_address

logger = logging.getLogger(__name__)


class OnChainSharePriceFeed:
    """Read the share price of a deployed ERC-4626 vault."""

    def __init__(self, vault_contract: Contract, asset_contract: Contract):
        self.vault_contract = vault_contract
        self.asset_contract = asset_contract

    def __repr__(self):
        return f"<OnChainSharePriceFeed {self.vault_contract.address}>"

    @property
    def address(self) -> HexAddress:
        return self.vault_contract.address

    @cached_property
    def share_decimals(self) -> int:
        return self.vault_contract.functions.decimals().call()

    @cached_property
    def asset_decimals(self) -> int:
        return self.asset_contract.functions.decimals().call()

    def fetch_raw_share_price(self, block_identifier: BlockIdentifier = "latest") -> int:
        """Raw assets one whole share converts to."""
        one_share = 10**self.share_decimals
        try:
            return self.vault_contract.functions.convertToAssets(one_share).call(block_identifier=block_identifier)
        except Exception as e:
            raise RuntimeError(f"convertToAssets() failed at vault {self.address} @ {block_identifier}") from e

    def fetch_share_price(self, block_identifier: BlockIdentifier = "latest") -> Decimal:
        """Human-readable share price in the asset."""
        raw_price = self.fetch_raw_share_price(block_identifier)
        return Decimal(raw_price) / Decimal(10**self.asset_decimals)

    def create_asset_ledger(self) -> TokenLedger:
        """In-memory mirror of the vault asset token, at the same address."""
        functions = self.asset_contract.functions
        return TokenLedger(
            address=self.asset_contract.address,
            name=functions.name().call(),
            symbol=functions.symbol().call(),
            decimals=self.asset_decimals,
        )


def create_share_price_feed(web3: Web3, address: HexAddress | str) -> OnChainSharePriceFeed:
    """Bind to a deployed ERC-4626 vault and its asset."""
    assert isinstance(web3, Web3), f"Got {type(web3)}"
    vault_contract = web3.eth.contract(address=Web3.to_checksum_address(address), abi=ERC4626_ABI)
    asset_address = vault_contract.functions.asset().call()
    asset_contract = web3.eth.contract(address=Web3.to_checksum_address(asset_address), abi=ERC4626_ABI)
    return OnChainSharePriceFeed(vault_contract, asset_contract)


class OnChainSharePriceVault(InMemoryERC4626Vault):
    """In-memory vault that earns what a live vault earns.

    Moving forward in blocks books the relative change of the live
    share price as yield or loss on the in-memory position.
    """

    def __init__(
        self,
        address: HexAddress,
        asset: TokenLedger,
        shares: TokenLedger,
        feed: OnChainSharePriceFeed,
        block_identifier: BlockIdentifier,
    ):
        super().__init__(address, asset, shares)
        self.feed = feed
        self.block_identifier = block_identifier
        self.last_raw_share_price = feed.fetch_raw_share_price(block_identifier)
        logger.info("Replaying %s from block %s, share price %d", feed, block_identifier, self.last_raw_share_price)

    @classmethod
    def create_for_feed(cls, feed: OnChainSharePriceFeed, block_identifier: BlockIdentifier = "latest") -> "OnChainSharePriceVault":
        asset = feed.create_asset_ledger()
        address = make_address(f"replay:{feed.address}")
        shares = TokenLedger(
            address=address,
            name=f"{asset.name} Replay Vault",
            symbol=f"r{asset.symbol}",
            decimals=feed.share_decimals,
        )
        return cls(address, asset, shares, feed, block_identifier)

    def fetch_share_price(self) -> Decimal:
        return self.feed.fetch_share_price(self.block_identifier)

    def advance_to_block(self, block_identifier: BlockIdentifier) -> int:
        """Book the share price change since the last block as yield or loss.

        :return:
            Raw asset change of the in-memory position, negative on loss
        """
        raw_share_price = self.feed.fetch_raw_share_price(block_identifier)
        previous = self.last_raw_share_price
        self.block_identifier = block_identifier
        self.last_raw_share_price = raw_share_price

        current_assets = self.total_assets()
        if current_assets == 0 or previous == 0:
            return 0

        target_assets = mul_div(current_assets, raw_share_price, previous, Rounding.down)
        change = target_assets - current_assets
        if change > 0:
            self.simulate_yield(change)
        elif change < 0:
            self.simulate_loss(-change)

        logger.info("Advanced %s to block %s, share price %d -> %d, position change %d", self.feed, block_identifier, previous, raw_share_price, change)
        return change
