"""Call guards for the adapter entry points.

Every state-changing adapter call runs as

1. settle pending fees
2. the actual mutation, which hands control to the underlying vault
3. re-anchor the fee baseline to the fresh total assets

Steps 1 and 3 are not atomic with step 2. A call re-entering the adapter
from inside the underlying vault would settle against a stale baseline,
so all guarded calls share one lock and a nested call fails immediately.

A guarded call is all-or-nothing: if it raises, every participant is
rolled back to the state it had before the call.

Read functions are not guarded. While the underlying vault holds control
during a deposit it already has the new assets, but the adapter has no
vault shares for them yet and the baseline is not re-anchored. Views read
in that window count the deposit as a gain, so ``total_supply()`` and the
fee collector balance include fee shares that are never minted.
"""

import functools
import logging
from contextlib import contextmanager
from typing import Any, Callable, Iterable, Protocol

from eth_fee_adapter.adapter.errors import ReentrancyError, Unauthorised

logger = logging.getLogger(__name__)


class Snapshottable(Protocol):
    """Anything whose state can be captured and rolled back."""

    def snapshot(self) -> Any: ...

    def restore(self, snapshot: Any): ...


@contextmanager
def atomic(participants: Iterable[Snapshottable]):
    """Roll back all participants if the block raises.

    The exception is re-raised after the rollback.
    """
    participants = list(participants)
    snapshots = [p.snapshot() for p in participants]
    try:
        yield
    except Exception as e:
        logger.info("Reverting call, %s: %s", type(e).__name__, e)
        for participant, snapshot in zip(participants, snapshots):
            participant.restore(snapshot)
        raise


def non_reentrant(func: Callable) -> Callable:
    """Hold the adapter lock for the call and revert everything on failure."""

    @functools.wraps(func)
    def wrapper(self, *args, **kwargs):
        state = self.state
        if state.locked:
            raise ReentrancyError(f"ReentrancyGuard: reentrant call to {func.__name__}()")

        with atomic(self.get_journal_participants()):
            state.locked = True
            try:
                return func(self, *args, **kwargs)
            finally:
                state.locked = False

    return wrapper


def settles_fees(func: Callable) -> Callable:
    """Settle fees before the call and re-anchor the baseline after it."""

    @functools.wraps(func)
    def wrapper(self, *args, **kwargs):
        self._settle_fees()
        result = func(self, *args, **kwargs)
        self.state.previous_total_assets = self.total_assets()
        return result

    return wrapper


def vault_operation(func: Callable) -> Callable:
    """Guard for deposit, mint, withdraw and redeem.

    The same settle-mutate-re-anchor sequence and the same lock
    for all four operations.
    """
    return non_reentrant(settles_fees(func))


def only_owner(func: Callable) -> Callable:
    """Reject callers other than the adapter owner.

    The wrapped function must take the caller as keyword argument ``sender``.
    The check runs before the lock is taken or any state is read.
    """

    @functools.wraps(func)
    def wrapper(self, *args, **kwargs):
        sender = kwargs.get("sender")
        if sender != self.state.owner:
            raise Unauthorised(f"Ownable: caller {sender} is not the owner {self.state.owner}")
        return func(self, *args, **kwargs)

    return wrapper
