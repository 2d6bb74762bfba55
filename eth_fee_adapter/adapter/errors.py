"""Adapter revert reasons.

Every failed call aborts as a whole, see :py:func:`eth_fee_adapter.adapter.guard.vault_operation`.
"""


class AdapterError(Exception):
    """Adapter call reverted."""


class FeeConfigurationError(AdapterError):
    """Bad fee percentage or fee collector."""


class Unauthorised(AdapterError):
    """Non-owner called an owner-only function."""


class ReentrancyError(AdapterError):
    """Guarded function entered while another guarded call is running."""


class RescueError(AdapterError):
    """Refused to rescue funds."""


class ExceedsMaxError(AdapterError):
    """Deposit, mint, withdraw or redeem above the allowed maximum."""


class FeeAccrualError(AdapterError):
    """Pending fees cannot be computed.

    Assets grew while there are no shares to dilute.
    """
