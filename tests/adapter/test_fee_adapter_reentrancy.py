"""A malicious underlying vault tries to call back into the adapter."""

import pytest

from eth_fee_adapter.adapter.errors import ReentrancyError
from eth_fee_adapter.adapter.vault import ERC4626FeeAdapter
from eth_fee_adapter.erc_4626.mock import InMemoryERC4626Vault
from eth_fee_adapter.event import EventLog
from eth_fee_adapter.fixed_point import to_wad


def capture(adapter: ERC4626FeeAdapter, token, underlying: InMemoryERC4626Vault, accounts: list) -> tuple:
    """Everything a reverted call must leave untouched."""
    return (
        adapter.state.snapshot(),
        adapter.shares.snapshot(),
        token.snapshot(),
        underlying.snapshot(),
        tuple(adapter.balance_of(a) for a in accounts),
    )


@pytest.fixture()
def earning_adapter(adapter: ERC4626FeeAdapter, underlying: InMemoryERC4626Vault, user_a) -> ERC4626FeeAdapter:
    adapter.deposit(to_wad(100), user_a, sender=user_a)
    underlying.simulate_yield(to_wad(50))
    return adapter


@pytest.mark.parametrize(
    "reentry",
    [
        "deposit",
        "mint",
        "withdraw",
        "redeem",
        "set_fee_pct",
        "set_fee_collector",
    ],
)
def test_reentrant_deposit_reverts_everything(
    earning_adapter: ERC4626FeeAdapter,
    underlying: InMemoryERC4626Vault,
    token,
    event_log: EventLog,
    user_a,
    user_b,
    owner,
    reentry: str,
):
    """Any guarded call from inside the underlying vault deposit fails the whole deposit."""
    adapter = earning_adapter

    calls = {
        "deposit": lambda: adapter.deposit(to_wad(1), user_b, sender=user_b),
        "mint": lambda: adapter.mint(to_wad(1), user_b, sender=user_b),
        "withdraw": lambda: adapter.withdraw(to_wad(1), user_a, user_a, sender=user_a),
        "redeem": lambda: adapter.redeem(to_wad(1), user_a, user_a, sender=user_a),
        "set_fee_pct": lambda: adapter.set_fee_pct(to_wad("0.01"), sender=owner),
        "set_fee_collector": lambda: adapter.set_fee_collector(user_b, sender=owner),
    }

    underlying.on_deposit = calls[reentry]

    before = capture(adapter, token, underlying, [user_a, user_b, adapter.fee_collector])
    events_before = len(event_log)

    with pytest.raises(ReentrancyError):
        adapter.deposit(to_wad(10), user_b, sender=user_b)

    assert capture(adapter, token, underlying, [user_a, user_b, adapter.fee_collector]) == before
    assert len(event_log) == events_before
    assert not adapter.state.locked

    # The adapter keeps working once the vault behaves
    underlying.on_deposit = None
    adapter.deposit(to_wad(10), user_b, sender=user_b)
    assert adapter.balance_of(user_b) > 0


def test_reentrant_withdraw_reverts_everything(
    earning_adapter: ERC4626FeeAdapter,
    underlying: InMemoryERC4626Vault,
    token,
    user_a,
    user_b,
):
    adapter = earning_adapter
    underlying.on_withdraw = lambda: adapter.deposit(to_wad(1), user_b, sender=user_b)

    before = capture(adapter, token, underlying, [user_a, user_b, adapter.fee_collector])
    with pytest.raises(ReentrancyError):
        adapter.redeem(to_wad(10), user_a, user_a, sender=user_a)

    assert capture(adapter, token, underlying, [user_a, user_b, adapter.fee_collector]) == before


def test_swallowed_reentry_does_not_mutate(
    earning_adapter: ERC4626FeeAdapter,
    underlying: InMemoryERC4626Vault,
    user_a,
    user_b,
):
    """If the vault catches the failure, the nested call still did nothing."""
    adapter = earning_adapter
    failures = []

    def reenter():
        try:
            adapter.deposit(to_wad(1), user_b, sender=user_b)
        except ReentrancyError as e:
            failures.append(e)

    underlying.on_deposit = reenter
    shares = adapter.deposit(to_wad(10), user_a, sender=user_a)

    assert len(failures) == 1
    assert adapter.balance_of(user_b) == 0
    assert adapter.balance_of(user_a) == to_wad(100) + shares
    assert adapter.previous_total_assets == adapter.total_assets()


def test_views_allowed_during_operation(
    earning_adapter: ERC4626FeeAdapter,
    underlying: InMemoryERC4626Vault,
    user_a,
):
    """Read functions are not guarded, but they see a half-done deposit."""
    adapter = earning_adapter
    seen = []

    def read_views():
        seen.append((adapter.total_supply(), adapter.pending_fees()))

    underlying.on_deposit = read_views
    adapter.deposit(to_wad(10), user_a, sender=user_a)

    assert len(seen) == 1
    window_supply, window_fees = seen[0]

    # The deposited principal shows up as a gain
    assert window_fees.gain >= to_wad(10)
    assert window_fees.fee_shares > 0
    assert window_supply > adapter.total_supply()

    # None of it was minted
    assert adapter.pending_fees_in_shares() == 0
    assert adapter.total_supply() == adapter.shares.total_supply
