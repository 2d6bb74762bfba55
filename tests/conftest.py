"""Shared fixtures: an asset token, an in-memory underlying vault and a 10% fee adapter."""

from decimal import Decimal

import pytest
from eth_typing import HexAddress

from eth_fee_adapter.adapter.vault import ERC4626FeeAdapter
from eth_fee_adapter.erc_4626.mock import InMemoryERC4626Vault
from eth_fee_adapter.event import EventLog
from eth_fee_adapter.fixed_point import to_wad
from eth_fee_adapter.token import TokenLedger, create_token, make_address


@pytest.fixture()
def event_log() -> EventLog:
    return EventLog()


@pytest.fixture()
def owner() -> HexAddress:
    return make_address("test:owner")


@pytest.fixture()
def fee_collector() -> HexAddress:
    return make_address("test:fee_collector")


@pytest.fixture()
def user_a() -> HexAddress:
    return make_address("test:user_a")


@pytest.fixture()
def user_b() -> HexAddress:
    return make_address("test:user_b")


@pytest.fixture()
def token(event_log, user_a, user_b) -> TokenLedger:
    """18 decimals asset, both users hold 10,000."""
    token = create_token("Test Token", "TKN", decimals=18, event_log=event_log)
    token.mint(user_a, to_wad(10_000))
    token.mint(user_b, to_wad(10_000))
    return token


@pytest.fixture()
def underlying(token) -> InMemoryERC4626Vault:
    return InMemoryERC4626Vault.create(token)


@pytest.fixture()
def fee_pct() -> int:
    return to_wad(Decimal("0.1"))


@pytest.fixture()
def adapter(underlying, fee_pct, fee_collector, owner, event_log, token, user_a, user_b) -> ERC4626FeeAdapter:
    """10% fee adapter, both users have given it an unlimited approval."""
    adapter = ERC4626FeeAdapter(
        underlying,
        fee_pct=fee_pct,
        fee_collector=fee_collector,
        owner=owner,
        event_log=event_log,
    )
    for user in (user_a, user_b):
        token.approve(adapter.address, 2**256 - 1, sender=user)
    return adapter
