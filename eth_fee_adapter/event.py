"""Adapter notifications.

- Each Solidity event the adapter would emit is a slotted dataclass
- Events are collected into an :py:class:`EventLog` so off-process indexers
  and tests can audit what happened
"""

import logging
from dataclasses import dataclass, field
from typing import Iterator, Type, TypeVar

from eth_typing import HexAddress

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class Transfer:
    """ERC-20 ``Transfer``. Mints come from and burns go to the zero address."""

    token: HexAddress
    from_: HexAddress
    to: HexAddress
    value: int


@dataclass(slots=True, frozen=True)
class Approval:
    token: HexAddress
    owner: HexAddress
    spender: HexAddress
    value: int


@dataclass(slots=True, frozen=True)
class Deposit:
    """ERC-4626 ``Deposit``."""

    vault: HexAddress
    sender: HexAddress
    owner: HexAddress
    assets: int
    shares: int


@dataclass(slots=True, frozen=True)
class Withdraw:
    """ERC-4626 ``Withdraw``."""

    vault: HexAddress
    sender: HexAddress
    receiver: HexAddress
    owner: HexAddress
    assets: int
    shares: int


@dataclass(slots=True, frozen=True)
class FeePctSet:
    #: New fee percentage as 18 decimal fixed point
    pct: int


@dataclass(slots=True, frozen=True)
class FeeCollectorSet:
    collector: HexAddress


@dataclass(slots=True, frozen=True)
class FeesSettled:
    """Pending fee shares were minted to the collector."""

    collector: HexAddress

    #: Raw amount of shares minted
    amount: int


@dataclass(slots=True, frozen=True)
class FundsRescued:
    token: HexAddress
    recipient: HexAddress
    amount: int


@dataclass(slots=True, frozen=True)
class OwnershipTransferred:
    previous_owner: HexAddress
    new_owner: HexAddress


EventType = TypeVar("EventType")


@dataclass
class EventLog:
    """Append-only list of emitted events.

    Example:

    .. code-block:: python

        log = EventLog()
        adapter = ERC4626FeeAdapter(underlying, fee_pct, collector, owner, event_log=log)
        adapter.deposit(100 * ONE, user, sender=user)
        settled = log.filter(FeesSettled)
    """

    events: list = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.events)

    def __iter__(self) -> Iterator:
        return iter(self.events)

    def append(self, event):
        logger.debug("Event %s", event)
        self.events.append(event)

    def filter(self, event_type: Type[EventType]) -> list[EventType]:
        """Get all events of a certain type, in the emit order."""
        return [e for e in self.events if isinstance(e, event_type)]

    def last(self, event_type: Type[EventType]) -> EventType | None:
        """Get the latest event of a certain type.

        :return:
            None if no such event has been emitted
        """
        matches = self.filter(event_type)
        return matches[-1] if matches else None

    def snapshot(self) -> int:
        return len(self.events)

    def restore(self, snapshot: int):
        """Drop events emitted after the snapshot was taken.

        Reverted calls do not leave events behind.
        """
        del self.events[snapshot:]
