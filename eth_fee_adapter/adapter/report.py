"""Adapter state snapshots for analysis.

Collect :py:class:`AdapterSnapshot` rows while simulating or replaying
an adapter and turn them into a :py:class:`pandas.DataFrame`.
"""

import datetime
from dataclasses import asdict, dataclass
from decimal import Decimal

import pandas as pd
from eth_typing import BlockIdentifier

from eth_fee_adapter.adapter.vault import ERC4626FeeAdapter


@dataclass(slots=True, frozen=True)
class AdapterSnapshot:
    """Human-readable adapter state at one point of time."""

    #: Block or step label
    block_identifier: BlockIdentifier | None

    total_assets: Decimal

    #: Including pending fee shares
    total_supply: Decimal

    share_price: Decimal

    previous_total_assets: Decimal

    pending_fee_shares: Decimal

    #: Minted and pending
    fee_collector_shares: Decimal

    #: Value of the fee collector shares in the asset
    fee_collector_assets: Decimal

    timestamp: datetime.datetime | None = None


def take_snapshot(
    adapter: ERC4626FeeAdapter,
    block_identifier: BlockIdentifier | None = None,
    timestamp: datetime.datetime | None = None,
) -> AdapterSnapshot:
    """Read the adapter state, does not settle fees."""
    asset = adapter.asset()
    shares = adapter.shares
    collector_shares = adapter.balance_of(adapter.fee_collector)
    return AdapterSnapshot(
        block_identifier=block_identifier,
        total_assets=asset.convert_to_decimals(adapter.total_assets()),
        total_supply=shares.convert_to_decimals(adapter.total_supply()),
        share_price=adapter.share_price(),
        previous_total_assets=asset.convert_to_decimals(adapter.previous_total_assets),
        pending_fee_shares=shares.convert_to_decimals(adapter.pending_fees_in_shares()),
        fee_collector_shares=shares.convert_to_decimals(collector_shares),
        fee_collector_assets=asset.convert_to_decimals(adapter.convert_to_assets(collector_shares)),
        timestamp=timestamp,
    )


def snapshots_to_dataframe(snapshots: list[AdapterSnapshot]) -> pd.DataFrame:
    """Convert snapshots to a DataFrame indexed by the block identifier.

    Decimal columns are converted to floats for plotting.
    """
    df = pd.DataFrame([asdict(s) for s in snapshots])
    if len(df) == 0:
        return df

    decimal_columns = [
        "total_assets",
        "total_supply",
        "share_price",
        "previous_total_assets",
        "pending_fee_shares",
        "fee_collector_shares",
        "fee_collector_assets",
    ]
    df[decimal_columns] = df[decimal_columns].astype(float)
    return df.set_index("block_identifier")
