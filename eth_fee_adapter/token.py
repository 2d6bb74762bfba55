"""In-memory ERC-20 token ledger.

- A helper class to model ERC-20 tokens without a chain
- Raw ``uint256`` balances, human-readable decimal conversions as in
  :py:class:`TokenLedger.convert_to_decimals`
- Used for the underlying asset, the underlying vault shares and the adapter shares

Example:

.. code-block:: python

    usdc = create_token("USD Coin", "USDC", decimals=6)
    usdc.mint(user, usdc.convert_to_raw(Decimal(100)))
    assert usdc.convert_to_decimals(usdc.balance_of(user)) == Decimal(100)
"""

import copy
import logging
from dataclasses import dataclass, field
from decimal import Decimal

from eth_typing import HexAddress
from eth_utils import keccak, to_checksum_address

from eth_fee_adapter.event import Approval, EventLog, Transfer
from eth_fee_adapter.fixed_point import MAX_UINT256

logger = logging.getLogger(__name__)


#: The null account
ZERO_ADDRESS: HexAddress = "0x0000000000000000000000000000000000000000"


class TokenLedgerError(Exception):
    """ERC-20 operation reverted."""


class InsufficientBalance(TokenLedgerError):
    """Transfer or burn more than the balance."""


class InsufficientAllowance(TokenLedgerError):
    """``transferFrom()`` more than approved."""


def make_address(seed: str) -> HexAddress:
    """Generate a deterministic checksummed address from a seed string.

    Used to give in-memory contracts and test accounts stable identities.
    """
    return to_checksum_address(keccak(text=seed)[-20:])


@dataclass
class TokenLedger:
    """ERC-20 balances, allowances and supply.

    - Mutators take the caller account explicitly as ``sender``,
      the in-memory equivalent of ``msg.sender``
    - Failed calls raise and do not modify the ledger
    """

    #: Contract address of the token
    address: HexAddress

    #: Token name e.g. ``USD Circle``
    name: str

    #: Token symbol e.g. ``USDC``
    symbol: str

    #: Number of decimals
    decimals: int = 18

    #: Where to emit Transfer and Approval events
    event_log: EventLog | None = None

    balances: dict[HexAddress, int] = field(default_factory=dict)

    allowances: dict[tuple[HexAddress, HexAddress], int] = field(default_factory=dict)

    total_supply: int = 0

    def __repr__(self):
        return f"<{self.name} ({self.symbol}) at {self.address}, {self.decimals} decimals>"

    def convert_to_decimals(self, raw_amount: int) -> Decimal:
        """Convert raw token units to decimals."""
        assert type(raw_amount) == int, f"Got {type(raw_amount)}, expected int: {raw_amount}"
        return Decimal(raw_amount) / Decimal(10**self.decimals)

    def convert_to_raw(self, decimal_amount: Decimal) -> int:
        """Convert decimalised token amount to raw uint256."""
        return int(decimal_amount * 10**self.decimals)

    def balance_of(self, account: HexAddress) -> int:
        return self.balances.get(account, 0)

    def allowance(self, owner: HexAddress, spender: HexAddress) -> int:
        return self.allowances.get((owner, spender), 0)

    def transfer(self, to: HexAddress, amount: int, sender: HexAddress) -> bool:
        self._transfer(sender, to, amount)
        return True

    def approve(self, spender: HexAddress, amount: int, sender: HexAddress) -> bool:
        if spender == ZERO_ADDRESS:
            raise TokenLedgerError("ERC20: approve to the zero address")
        assert 0 <= amount <= MAX_UINT256, f"Bad approve amount {amount}"
        self.allowances[(sender, spender)] = amount
        self._emit(Approval(self.address, sender, spender, amount))
        return True

    def transfer_from(self, from_: HexAddress, to: HexAddress, amount: int, sender: HexAddress) -> bool:
        self.spend_allowance(from_, sender, amount)
        self._transfer(from_, to, amount)
        return True

    def spend_allowance(self, owner: HexAddress, spender: HexAddress, amount: int):
        """Decrease the allowance, infinite approvals are never decreased."""
        current = self.allowance(owner, spender)
        if current == MAX_UINT256:
            return
        if current < amount:
            raise InsufficientAllowance(f"{self.symbol}: {spender} has allowance {current} from {owner}, needs {amount}")
        self.allowances[(owner, spender)] = current - amount

    def mint(self, to: HexAddress, amount: int):
        if to == ZERO_ADDRESS:
            raise TokenLedgerError("ERC20: mint to the zero address")
        assert amount >= 0, f"Negative mint {amount}"
        self.total_supply += amount
        self.balances[to] = self.balance_of(to) + amount
        self._emit(Transfer(self.address, ZERO_ADDRESS, to, amount))

    def burn(self, from_: HexAddress, amount: int):
        if from_ == ZERO_ADDRESS:
            raise TokenLedgerError("ERC20: burn from the zero address")
        assert amount >= 0, f"Negative burn {amount}"
        balance = self.balance_of(from_)
        if balance < amount:
            raise InsufficientBalance(f"{self.symbol}: burn amount {amount} exceeds balance {balance} of {from_}")
        self.balances[from_] = balance - amount
        self.total_supply -= amount
        self._emit(Transfer(self.address, from_, ZERO_ADDRESS, amount))

    def snapshot(self) -> tuple:
        """Capture balances for a revert."""
        return copy.copy(self.balances), copy.copy(self.allowances), self.total_supply

    def restore(self, snapshot: tuple):
        self.balances, self.allowances, self.total_supply = snapshot

    def _transfer(self, from_: HexAddress, to: HexAddress, amount: int):
        if from_ == ZERO_ADDRESS:
            raise TokenLedgerError("ERC20: transfer from the zero address")
        if to == ZERO_ADDRESS:
            raise TokenLedgerError("ERC20: transfer to the zero address")
        assert amount >= 0, f"Negative transfer {amount}"
        balance = self.balance_of(from_)
        if balance < amount:
            raise InsufficientBalance(f"{self.symbol}: transfer amount {amount} exceeds balance {balance} of {from_}")
        self.balances[from_] = balance - amount
        self.balances[to] = self.balance_of(to) + amount
        self._emit(Transfer(self.address, from_, to, amount))

    def _emit(self, event):
        if self.event_log is not None:
            self.event_log.append(event)


def create_token(
    name: str,
    symbol: str,
    decimals: int = 18,
    event_log: EventLog | None = None,
) -> TokenLedger:
    """Create a new token with a deterministic address derived from its symbol."""
    address = make_address(f"token:{symbol}")
    logger.info("Created token %s (%s) at %s", name, symbol, address)
    return TokenLedger(
        address=address,
        name=name,
        symbol=symbol,
        decimals=decimals,
        event_log=event_log,
    )
