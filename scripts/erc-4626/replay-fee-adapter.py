#!/usr/bin/env python
"""Replay the fee adapter on top of a live ERC-4626 vault.

- Deposit into an in-memory adapter at the start block
- Follow the share price of the live vault block by block
- Settle fees at each step and print what the fee collector made

Usage:

.. code-block:: shell

    export JSON_RPC_URL=...
    export VAULT_ADDRESS=0x45aa96f0b3188d47a1dafdbefce1db6b37f58216
    export START_BLOCK=27975506
    poetry run python scripts/erc-4626/replay-fee-adapter.py

Environment variables:
    JSON_RPC_URL: Archive node for the chain of the vault
    VAULT_ADDRESS: ERC-4626 vault to follow
    START_BLOCK: First block of the replay
    END_BLOCK: Last block of the replay, default latest
    STEP: Blocks between settlements, default 43200
    FEE_PCT: Adapter performance fee, default 0.1
    DEPOSIT: Human-readable initial deposit, default 10000
    LOG_LEVEL: Python logging level, default info
"""

import os
from decimal import Decimal

from tabulate import tabulate
from web3 import Web3

from eth_fee_adapter.adapter.report import snapshots_to_dataframe, take_snapshot
from eth_fee_adapter.adapter.vault import ERC4626FeeAdapter
from eth_fee_adapter.erc_4626.onchain import OnChainSharePriceVault, create_share_price_feed
from eth_fee_adapter.fixed_point import to_wad
from eth_fee_adapter.token import make_address
from eth_fee_adapter.utils import setup_console_logging


def main():
    setup_console_logging(default_log_level="info")

    web3 = Web3(Web3.HTTPProvider(os.environ["JSON_RPC_URL"]))
    vault_address = os.environ["VAULT_ADDRESS"]
    start_block = int(os.environ["START_BLOCK"])
    end_block = int(os.environ.get("END_BLOCK", web3.eth.block_number))
    step = int(os.environ.get("STEP", 43_200))
    fee_pct = to_wad(os.environ.get("FEE_PCT", "0.1"))
    deposit = Decimal(os.environ.get("DEPOSIT", "10000"))

    print(f"Connected to chain {web3.eth.chain_id}, replaying {vault_address} blocks {start_block:,} - {end_block:,}")

    feed = create_share_price_feed(web3, vault_address)
    vault = OnChainSharePriceVault.create_for_feed(feed, block_identifier=start_block)
    asset = vault.asset()

    depositor = make_address("replay:depositor")
    collector = make_address("replay:collector")
    owner = make_address("replay:owner")

    adapter = ERC4626FeeAdapter(vault, fee_pct=fee_pct, fee_collector=collector, owner=owner)

    raw_deposit = asset.convert_to_raw(deposit)
    asset.mint(depositor, raw_deposit)
    asset.approve(adapter.address, raw_deposit, sender=depositor)
    adapter.deposit(raw_deposit, depositor, sender=depositor)

    snapshots = [take_snapshot(adapter, start_block)]
    for block_number in range(start_block + step, end_block + 1, step):
        vault.advance_to_block(block_number)
        # Poke the adapter so the fees get minted
        adapter.deposit(0, depositor, sender=depositor)
        snapshots.append(take_snapshot(adapter, block_number))

    df = snapshots_to_dataframe(snapshots)
    print(tabulate(df, headers="keys", tablefmt="rounded_outline"))

    last = snapshots[-1]
    print(f"Fee collector made {last.fee_collector_assets:,.4f} {asset.symbol} on a {deposit:,} {asset.symbol} deposit")


if __name__ == "__main__":
    main()
