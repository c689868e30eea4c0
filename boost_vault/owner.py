"""Single owner authorization."""

import logging

from eth_typing import HexAddress

from boost_vault.errors import AlreadyInitialized, NotInitialized, Unauthorized
from boost_vault.ledger import normalise_holder


logger = logging.getLogger(__name__)


class OwnerGate:
    """Owner is set once and never changes.

    - Uninitialized until :py:meth:`initialize`

    - No ownership transfer
    """

    def __init__(self):
        self._owner: HexAddress | None = None

    @property
    def owner(self) -> HexAddress | None:
        return self._owner

    def is_initialized(self) -> bool:
        return self._owner is not None

    def initialize(self, owner: HexAddress | str):
        if self._owner is not None:
            raise AlreadyInitialized(f"Owner already set to {self._owner}")
        self._owner = normalise_holder(owner)
        logger.info("Owner set to %s", self._owner)

    def check(self, caller: HexAddress | str, action: str = "call this"):
        """Raise unless `caller` is the owner."""
        if self._owner is None:
            raise NotInitialized("Owner not set")
        if normalise_holder(caller) != self._owner:
            raise Unauthorized(caller, action)
