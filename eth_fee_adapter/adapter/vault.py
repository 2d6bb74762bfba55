"""ERC-4626 adapter taking a performance fee.

- Users deposit the asset and receive adapter shares
- The adapter deposits the asset into an underlying ERC-4626 vault and holds the whole position
- ``fee_pct`` of the growth of the position goes to the fee collector
  as newly minted adapter shares, see :py:mod:`eth_fee_adapter.adapter.fee`

Fees are settled on every state-changing call. Between calls, read functions
behave as if pending fee shares were already minted: :py:meth:`ERC4626FeeAdapter.total_supply`
and the fee collector :py:meth:`ERC4626FeeAdapter.balance_of` include them.

Example:

.. code-block:: python

    usdc = create_token("USD Coin", "USDC", decimals=6)
    underlying = InMemoryERC4626Vault.create(usdc)
    adapter = ERC4626FeeAdapter(
        underlying,
        fee_pct=to_wad(Decimal("0.1")),
        fee_collector=treasury,
        owner=admin,
    )

    usdc.approve(adapter.address, raw_amount, sender=user)
    shares = adapter.deposit(raw_amount, user, sender=user)
"""

import logging
from decimal import Decimal
from typing import Any

from eth_typing import HexAddress

from eth_fee_adapter.adapter.errors import AdapterError, ExceedsMaxError, FeeConfigurationError, RescueError
from eth_fee_adapter.adapter.fee import PendingFees, calculate_pending_fees, validate_fee_pct
from eth_fee_adapter.adapter.guard import non_reentrant, only_owner, settles_fees, vault_operation
from eth_fee_adapter.adapter.state import AdapterState
from eth_fee_adapter.erc_4626 import math
from eth_fee_adapter.erc_4626.underlying import UnderlyingVault
from eth_fee_adapter.event import (
    Deposit,
    EventLog,
    FeeCollectorSet,
    FeePctSet,
    FeesSettled,
    FundsRescued,
    OwnershipTransferred,
    Withdraw,
)
from eth_fee_adapter.fixed_point import MAX_UINT256, from_wad
from eth_fee_adapter.token import ZERO_ADDRESS, TokenLedger, make_address

logger = logging.getLogger(__name__)


class ERC4626FeeAdapter:
    """ERC-4626 vault wrapping another ERC-4626 vault, with a performance fee."""

    def __init__(
        self,
        underlying: UnderlyingVault,
        fee_pct: int,
        fee_collector: HexAddress,
        owner: HexAddress,
        address: HexAddress | None = None,
        event_log: EventLog | None = None,
    ):
        """Create the adapter.

        :param underlying:
            The vault we deposit into

        :param fee_pct:
            Performance fee as 18 decimal fixed point, must be below 100%

        :param fee_collector:
            Account receiving the fee shares

        :param owner:
            Administrator who can lower the fee, change the collector and rescue funds

        :param address:
            Adapter account. Derived from the underlying vault address if not given.

        :param event_log:
            Where to emit events
        """
        assert isinstance(underlying, UnderlyingVault), f"Got {type(underlying)}"
        assert type(fee_pct) == int, f"Fee must be raw 18 decimal fixed point, got {type(fee_pct)}: {fee_pct}"
        if owner == ZERO_ADDRESS:
            raise AdapterError("Ownable: new owner is the zero address")

        self.underlying = underlying
        self.address = address or make_address(f"adapter:{underlying.address}")
        self.event_log = event_log if event_log is not None else EventLog()

        asset = underlying.asset()
        self.shares = TokenLedger(
            address=self.address,
            name=f"ERC4626 Fee Adapter {asset.symbol}",
            symbol=f"fa{asset.symbol}",
            decimals=asset.decimals,
            event_log=self.event_log,
        )
        self.state = AdapterState()

        self._set_fee_pct(fee_pct)
        self._set_fee_collector(fee_collector)
        self._transfer_ownership(owner)

    def __repr__(self):
        return f"<ERC4626FeeAdapter {self.symbol} at {self.address}, fee {from_wad(self.state.fee_pct):%}, total assets {self.total_assets()}>"

    @property
    def name(self) -> str:
        return self.shares.name

    @property
    def symbol(self) -> str:
        return self.shares.symbol

    @property
    def decimals(self) -> int:
        return self.shares.decimals

    @property
    def fee_pct(self) -> int:
        return self.state.fee_pct

    @property
    def fee_collector(self) -> HexAddress:
        return self.state.fee_collector

    @property
    def previous_total_assets(self) -> int:
        return self.state.previous_total_assets

    @property
    def owner(self) -> HexAddress:
        return self.state.owner

    def asset(self) -> TokenLedger:
        return self.underlying.asset()

    def get_journal_participants(self) -> list[Any]:
        """Everything a reverted call must roll back."""
        return [
            self.state,
            self.shares,
            self.asset(),
            self.underlying,
            self.event_log,
        ]

    #
    # Fee accrual
    #

    def pending_fees(self) -> PendingFees:
        """Fees accrued since the last settlement, with the calculation breakdown."""
        return calculate_pending_fees(
            self.total_assets(),
            self.state.previous_total_assets,
            self.state.fee_pct,
            self.shares.total_supply,
        )

    def pending_fees_in_shares(self) -> int:
        """Shares owed to the fee collector but not yet minted."""
        return self.pending_fees().fee_shares

    def _settle_fees(self):
        fees = self.pending_fees()
        if fees.fee_shares == 0:
            return

        collector = self.state.fee_collector
        self.shares.mint(collector, fees.fee_shares)
        self.event_log.append(FeesSettled(collector, fees.fee_shares))
        logger.info(
            "Settled fees of %s: gain %d, fee assets %d, minted %d shares to %s",
            self.symbol,
            fees.gain,
            fees.fee_assets,
            fees.fee_shares,
            collector,
        )

    #
    # ERC-20 views
    #

    def total_supply(self) -> int:
        """Share supply including pending fee shares."""
        return self.shares.total_supply + self.pending_fees_in_shares()

    def balance_of(self, account: HexAddress) -> int:
        """Share balance, the fee collector balance includes pending fee shares."""
        balance = self.shares.balance_of(account)
        if account == self.state.fee_collector:
            return balance + self.pending_fees_in_shares()
        return balance

    def allowance(self, owner: HexAddress, spender: HexAddress) -> int:
        return self.shares.allowance(owner, spender)

    #
    # ERC-20 mutators, these do not settle fees
    #

    def transfer(self, to: HexAddress, amount: int, *, sender: HexAddress) -> bool:
        return self.shares.transfer(to, amount, sender=sender)

    def approve(self, spender: HexAddress, amount: int, *, sender: HexAddress) -> bool:
        return self.shares.approve(spender, amount, sender=sender)

    def transfer_from(self, from_: HexAddress, to: HexAddress, amount: int, *, sender: HexAddress) -> bool:
        return self.shares.transfer_from(from_, to, amount, sender=sender)

    #
    # ERC-4626 views
    #

    def total_assets(self) -> int:
        """Value of our whole position in the underlying vault."""
        return self.underlying.convert_to_assets(self.underlying.balance_of(self.address))

    def convert_to_shares(self, assets: int) -> int:
        return math.convert_to_shares(assets, self.total_assets(), self.total_supply())

    def convert_to_assets(self, shares: int) -> int:
        return math.convert_to_assets(shares, self.total_assets(), self.total_supply())

    def share_price(self) -> Decimal:
        """Human-readable value of one share in the asset."""
        one_share = 10**self.decimals
        return self.asset().convert_to_decimals(self.convert_to_assets(one_share))

    def preview_deposit(self, assets: int) -> int:
        return math.preview_deposit(assets, self.total_assets(), self.total_supply())

    def preview_mint(self, shares: int) -> int:
        return math.preview_mint(shares, self.total_assets(), self.total_supply())

    def preview_withdraw(self, assets: int) -> int:
        return math.preview_withdraw(assets, self.total_assets(), self.total_supply())

    def preview_redeem(self, shares: int) -> int:
        return math.preview_redeem(shares, self.total_assets(), self.total_supply())

    def max_deposit(self, receiver: HexAddress) -> int:
        return MAX_UINT256

    def max_mint(self, receiver: HexAddress) -> int:
        return MAX_UINT256

    def max_withdraw(self, owner: HexAddress) -> int:
        """Owner claim, capped by what the underlying vault lets out."""
        claim = self.convert_to_assets(self.balance_of(owner))
        return min(claim, self.underlying.max_withdraw(self.address))

    def max_redeem(self, owner: HexAddress) -> int:
        """Owner shares, capped by the share value of what the underlying vault lets out."""
        capacity = self.convert_to_shares(self.underlying.max_withdraw(self.address))
        return min(self.balance_of(owner), capacity)

    #
    # ERC-4626 mutators
    #

    @vault_operation
    def deposit(self, assets: int, receiver: HexAddress, *, sender: HexAddress) -> int:
        """Deposit assets and mint shares to the receiver.

        :return:
            Shares minted
        """
        max_assets = self.max_deposit(receiver)
        if assets > max_assets:
            raise ExceedsMaxError(f"ERC4626: deposit more than max, {assets} > {max_assets}")
        shares = self.preview_deposit(assets)
        self._deposit(sender, receiver, assets, shares)
        return shares

    @vault_operation
    def mint(self, shares: int, receiver: HexAddress, *, sender: HexAddress) -> int:
        """Mint exact shares to the receiver.

        :return:
            Assets pulled from the sender
        """
        max_shares = self.max_mint(receiver)
        if shares > max_shares:
            raise ExceedsMaxError(f"ERC4626: mint more than max, {shares} > {max_shares}")
        assets = self.preview_mint(shares)
        self._deposit(sender, receiver, assets, shares)
        return assets

    @vault_operation
    def withdraw(self, assets: int, receiver: HexAddress, owner: HexAddress, *, sender: HexAddress) -> int:
        """Withdraw exact assets to the receiver, burning the owner shares.

        :return:
            Shares burnt
        """
        max_assets = self.max_withdraw(owner)
        if assets > max_assets:
            raise ExceedsMaxError(f"ERC4626: withdraw more than max, {assets} > {max_assets} for {owner}")
        shares = self.preview_withdraw(assets)
        self._withdraw(sender, receiver, owner, assets, shares)
        return shares

    @vault_operation
    def redeem(self, shares: int, receiver: HexAddress, owner: HexAddress, *, sender: HexAddress) -> int:
        """Burn exact owner shares and send the assets to the receiver.

        :return:
            Assets sent
        """
        max_shares = self.max_redeem(owner)
        if shares > max_shares:
            raise ExceedsMaxError(f"ERC4626: redeem more than max, {shares} > {max_shares} for {owner}")
        assets = self.preview_redeem(shares)
        self._withdraw(sender, receiver, owner, assets, shares)
        return assets

    def _deposit(self, caller: HexAddress, receiver: HexAddress, assets: int, shares: int):
        asset = self.asset()
        asset.transfer_from(caller, self.address, assets, sender=self.address)
        self.shares.mint(receiver, shares)
        self.event_log.append(Deposit(self.address, caller, receiver, assets, shares))

        # Local shares exist before the assets reach the underlying vault
        asset.approve(self.underlying.address, assets, sender=self.address)
        self.underlying.deposit(assets, self.address, sender=self.address)

    def _withdraw(self, caller: HexAddress, receiver: HexAddress, owner: HexAddress, assets: int, shares: int):
        # Assets leave the underlying vault before local shares are burnt
        self.underlying.withdraw(assets, self.address, self.address, sender=self.address)

        if caller != owner:
            self.shares.spend_allowance(owner, caller, shares)
        self.shares.burn(owner, shares)
        self.asset().transfer(receiver, assets, sender=self.address)
        self.event_log.append(Withdraw(self.address, caller, receiver, owner, assets, shares))

    #
    # Administration
    #

    @only_owner
    @non_reentrant
    @settles_fees
    def set_fee_pct(self, pct: int, *, sender: HexAddress):
        """Lower the fee.

        Fees accrued so far are settled at the old rate.
        """
        self._set_fee_pct(pct)

    @only_owner
    @non_reentrant
    @settles_fees
    def set_fee_collector(self, collector: HexAddress, *, sender: HexAddress):
        """Change the fee collector.

        Fees accrued so far are settled to the old collector.
        """
        self._set_fee_collector(collector)

    @only_owner
    @non_reentrant
    def rescue_funds(self, token: TokenLedger | None, recipient: HexAddress, amount: int, *, sender: HexAddress):
        """Send out a token that ended up in the adapter by accident.

        The underlying vault shares back the adapter shares and cannot be rescued.
        """
        if token is None or token.address == ZERO_ADDRESS:
            raise RescueError("ERC4626Adapter: token zero")
        if token.address == self.underlying.share_token().address:
            raise RescueError(f"ERC4626Adapter: cannot rescue the underlying vault token {token.symbol}")
        if recipient == ZERO_ADDRESS:
            raise RescueError("ERC4626Adapter: recipient zero")
        if amount == 0:
            raise RescueError("ERC4626Adapter: amount zero")

        token.transfer(recipient, amount, sender=self.address)
        self.event_log.append(FundsRescued(token.address, recipient, amount))
        logger.info("Rescued %d %s to %s", amount, token.symbol, recipient)

    @only_owner
    def transfer_ownership(self, new_owner: HexAddress, *, sender: HexAddress):
        if new_owner == ZERO_ADDRESS:
            raise AdapterError("Ownable: new owner is the zero address")
        self._transfer_ownership(new_owner)

    def _set_fee_pct(self, pct: int):
        validate_fee_pct(self.state.fee_pct, pct)
        self.state.fee_pct = pct
        self.event_log.append(FeePctSet(pct))
        logger.info("Fee of %s set to %s", self.symbol, from_wad(pct))

    def _set_fee_collector(self, collector: HexAddress):
        if collector == ZERO_ADDRESS:
            raise FeeConfigurationError("ERC4626Adapter: collector zero")
        self.state.fee_collector = collector
        self.event_log.append(FeeCollectorSet(collector))
        logger.info("Fee collector of %s set to %s", self.symbol, collector)

    def _transfer_ownership(self, new_owner: HexAddress):
        previous = self.state.owner
        self.state.owner = new_owner
        self.event_log.append(OwnershipTransferred(previous, new_owner))
