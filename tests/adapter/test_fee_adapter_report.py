"""Adapter snapshots and DataFrame export."""

import datetime
from decimal import Decimal

import pytest

from eth_fee_adapter.adapter.report import snapshots_to_dataframe, take_snapshot
from eth_fee_adapter.adapter.vault import ERC4626FeeAdapter
from eth_fee_adapter.erc_4626.mock import InMemoryERC4626Vault
from eth_fee_adapter.fixed_point import to_wad


def test_take_snapshot(adapter: ERC4626FeeAdapter, underlying: InMemoryERC4626Vault, user_a):
    """Snapshot shows pending fees without settling them."""
    adapter.deposit(to_wad(100), user_a, sender=user_a)
    underlying.simulate_yield(to_wad(100))

    timestamp = datetime.datetime(2025, 1, 1)
    snapshot = take_snapshot(adapter, 1, timestamp)

    assert snapshot.block_identifier == 1
    assert snapshot.timestamp == timestamp
    assert snapshot.total_assets == Decimal(200)
    assert snapshot.previous_total_assets == Decimal(100)
    assert snapshot.pending_fee_shares > 0
    assert snapshot.fee_collector_shares == snapshot.pending_fee_shares
    assert snapshot.fee_collector_assets == pytest.approx(Decimal(10))
    assert snapshot.share_price == pytest.approx(Decimal("1.9"))

    # Nothing was minted
    assert adapter.shares.balance_of(adapter.fee_collector) == 0
    assert adapter.previous_total_assets == to_wad(100)


def test_snapshots_to_dataframe(adapter: ERC4626FeeAdapter, underlying: InMemoryERC4626Vault, user_a):
    adapter.deposit(to_wad(100), user_a, sender=user_a)
    snapshots = [take_snapshot(adapter, 1)]

    underlying.simulate_yield(to_wad(50))
    snapshots.append(take_snapshot(adapter, 2))

    adapter.deposit(0, user_a, sender=user_a)
    snapshots.append(take_snapshot(adapter, 3))

    df = snapshots_to_dataframe(snapshots)
    assert list(df.index) == [1, 2, 3]
    assert df["total_assets"].dtype == float
    assert df.loc[1, "share_price"] == pytest.approx(1.0)
    assert df.loc[2, "pending_fee_shares"] > 0
    assert df.loc[3, "pending_fee_shares"] == 0
    assert df.loc[3, "previous_total_assets"] == pytest.approx(150)
    assert df.loc[2, "fee_collector_assets"] == pytest.approx(df.loc[3, "fee_collector_assets"])
    assert df.loc[3, "fee_collector_assets"] == pytest.approx(5)
