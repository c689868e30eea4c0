"""Vault error taxonomy.

- Every mutating vault operation is all-or-nothing: any of these
  exceptions means the vault ledger was left as it was before the call

- Exceptions raised by the external collaborators (web3 reverts, RPC errors)
  are wrapped in :py:class:`ExternalCallFailed`, the original exception is kept as ``__cause__``
"""

from eth_typing import HexAddress


class VaultError(Exception):
    """Base class for all vault failures."""


class AlreadyInitialized(VaultError):
    """initialize() was called twice."""


class NotInitialized(VaultError):
    """Vault operation attempted before initialize()."""


class ZeroAmount(VaultError):
    """Deposit, withdraw or redeem with a zero amount."""


class ZeroShares(VaultError):
    """Deposit too small to be worth a single share at the current share price."""

    def __init__(self, assets: int, total_assets: int, total_shares: int):
        self.assets = assets
        self.total_assets = total_assets
        self.total_shares = total_shares
        super().__init__(f"Deposit of {assets} would mint zero shares, pool has {total_assets} assets for {total_shares} shares")


class InsufficientBalance(VaultError):
    """Holder tries to burn or move more shares than they have."""

    def __init__(self, holder: HexAddress | str, requested: int, available: int):
        self.holder = holder
        self.requested = requested
        self.available = available
        super().__init__(f"Holder {holder} has {available} shares, needs {requested}")


class InsufficientLiquidity(VaultError):
    """External sources could not return the requested asset amount."""

    def __init__(self, requested: int, available: int):
        self.requested = requested
        self.available = available
        super().__init__(f"Could free only {available} assets, {requested} requested")


class Unauthorized(VaultError):
    """Caller is not allowed to perform the operation."""

    def __init__(self, caller: HexAddress | str, action: str):
        self.caller = caller
        self.action = action
        super().__init__(f"{caller} is not allowed to {action}")


class ExternalCallFailed(VaultError):
    """Call to a collaborator failed.

    :param source:
        Which collaborator failed: ``asset``, ``yield``, ``boost``, ``swap`` or ``arithmetic``
    """

    def __init__(self, source: str, message: str = ""):
        self.source = source
        super().__init__(f"External call to {source} failed: {message}" if message else f"External call to {source} failed")


class ArithmeticOverflow(ExternalCallFailed):
    """Share or asset math went outside uint256 or divided by an empty pool."""

    def __init__(self, message: str):
        super().__init__("arithmetic", message)
