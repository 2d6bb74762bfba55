"""ERC-4626 adapter with a performance fee taken by dilutive share minting.

See :py:class:`eth_fee_adapter.adapter.vault.ERC4626FeeAdapter`.
"""
