"""Adapter storage."""

import dataclasses
from dataclasses import dataclass

from eth_typing import HexAddress

from eth_fee_adapter.token import ZERO_ADDRESS


@dataclass(slots=True)
class AdapterState:
    """Mutable fee accounting state of one adapter.

    - Share balances live in the adapter share :py:class:`~eth_fee_adapter.token.TokenLedger`
    - Mutated only by the guarded adapter calls
    """

    #: Performance fee as 18 decimal fixed point.
    #:
    #: Zero only before the constructor sets it.
    fee_pct: int = 0

    #: Account receiving minted fee shares
    fee_collector: HexAddress = ZERO_ADDRESS

    #: Adapter total assets at the last settlement.
    #:
    #: Fees are taken on the growth above this baseline.
    previous_total_assets: int = 0

    #: Administrator account
    owner: HexAddress = ZERO_ADDRESS

    #: Reentrancy lock, held for the duration of a guarded call
    locked: bool = False

    def snapshot(self) -> "AdapterState":
        return dataclasses.replace(self)

    def restore(self, snapshot: "AdapterState"):
        for f in dataclasses.fields(self):
            setattr(self, f.name, getattr(snapshot, f.name))
