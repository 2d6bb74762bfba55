"""eth_fee_adapter package root.

Accounting engine for an ERC-4626 adapter that takes a performance fee
by minting dilutive shares to a fee collector.

- :py:mod:`eth_fee_adapter.adapter` for the adapter itself
- :py:mod:`eth_fee_adapter.erc_4626` for the underlying vault interface and conversion math
- :py:mod:`eth_fee_adapter.token` for the in-memory ERC-20 ledger
"""

import sys


#: Minimum required Python version to run this package
MIN_PYTHON_VERSION = (3, 10)


def _check_python_version():
    """Try early abort if the Python version is too old."""

    # Use Python tuple comparison for version numbers
    if sys.version_info < MIN_PYTHON_VERSION:
        raise RuntimeError(f"erc4626-fee-adapter needs Python {MIN_PYTHON_VERSION[0]}.{MIN_PYTHON_VERSION[1]} or later")


_check_python_version()
