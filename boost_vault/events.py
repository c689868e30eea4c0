"""Vault notifications.

- Mirror the events of an ERC-4626 vault: ``Deposit``, ``Withdraw`` plus ``Harvested``

- Collected into :py:class:`EventLog` in the order they were emitted
"""

import logging
from dataclasses import dataclass
from typing import Iterator, Type, TypeVar

from eth_typing import HexAddress


logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class VaultEvent:
    """Base class for vault events."""


@dataclass(slots=True, frozen=True)
class Deposit(VaultEvent):
    #: Address the assets were pulled from
    sender: HexAddress

    #: Address the shares were minted to
    owner: HexAddress

    assets: int

    shares: int


@dataclass(slots=True, frozen=True)
class Withdraw(VaultEvent):
    #: Address who initiated the withdrawal
    sender: HexAddress

    #: Address receiving the assets
    receiver: HexAddress

    #: Address whose shares were burned
    owner: HexAddress

    assets: int

    shares: int


@dataclass(slots=True, frozen=True)
class Harvested(VaultEvent):
    """Rewards were claimed and reinvested.

    - Emitted also when there was nothing to claim, with zero amount
    """

    #: Base asset amount put back to work, after any reward swap
    amount: int

    #: Reward token amount claimed from the boost
    reward_amount: int


EventT = TypeVar("EventT", bound=VaultEvent)


class EventLog:
    """Append-only list of emitted events."""

    def __init__(self):
        self._events: list[VaultEvent] = []

    def __len__(self):
        return len(self._events)

    def __iter__(self) -> Iterator[VaultEvent]:
        return iter(list(self._events))

    def emit(self, event: VaultEvent):
        assert isinstance(event, VaultEvent), f"Got {type(event)}"
        self._events.append(event)
        logger.info("Event %s", event)

    def filter(self, event_type: Type[EventT]) -> list[EventT]:
        return [e for e in self._events if isinstance(e, event_type)]
