"""Interfaces of the external collaborators the vault drives.

- :py:class:`AssetToken`: the base asset depositors bring in
- :py:class:`YieldSource`: base yield vault, takes the asset and returns a position (receipt token)
- :py:class:`BoostSource`: staking layer where positions earn extra rewards
- :py:class:`RewardSwapper`: turns boost rewards into the base asset when they are a different token

All amounts are raw token units. Implementations act on behalf of the vault:
the vault address is the holder of the positions and the boost stake.
"""

from abc import ABC, abstractmethod

from eth_typing import HexAddress


class AssetToken(ABC):
    """Base asset transfer mechanics."""

    @property
    @abstractmethod
    def address(self) -> HexAddress:
        """Token address, used as the asset identifier."""

    @property
    @abstractmethod
    def decimals(self) -> int:
        """Token decimals, only needed for human readable output."""

    @abstractmethod
    def balance_of(self, holder: HexAddress) -> int:
        pass

    @abstractmethod
    def transfer_from(self, sender: HexAddress, recipient: HexAddress, amount: int):
        """Pull tokens from `sender`.

        Must fail with an exception if the allowance or the balance is not enough.
        """

    @abstractmethod
    def transfer(self, recipient: HexAddress, amount: int):
        """Send tokens held by the vault to `recipient`."""


class YieldSource(ABC):
    """Base yield vault.

    - Positions are the receipt tokens of the yield vault, e.g. Beefy mooTokens

    - Position value in the base asset grows as the yield vault compounds
    """

    @property
    @abstractmethod
    def address(self) -> HexAddress:
        pass

    @property
    @abstractmethod
    def underlying(self) -> HexAddress:
        """Address of the asset this vault takes in."""

    @abstractmethod
    def deposit(self, assets: int) -> int:
        """Deposit base asset held by the vault.

        :return:
            Position amount received
        """

    @abstractmethod
    def withdraw(self, position: int) -> int:
        """Burn a position.

        :return:
            Base asset amount received
        """

    @abstractmethod
    def balance_of(self, holder: HexAddress) -> int:
        """Base asset value of the positions `holder` holds directly."""

    @abstractmethod
    def position_of(self, holder: HexAddress) -> int:
        """Position amount `holder` holds directly, staked positions not included."""

    @abstractmethod
    def convert_to_assets(self, position: int) -> int:
        """Base asset value of a position amount, rounded down."""

    @abstractmethod
    def convert_to_position(self, assets: int, round_up=False) -> int:
        """Position amount needed to be worth `assets`."""

    def max_withdraw(self) -> int | None:
        """Largest base asset amount a single withdrawal can pay out.

        :return:
            None when the yield vault has no withdrawal cap
        """
        return None


class BoostSource(ABC):
    """Staking layer on top of :py:class:`YieldSource` positions."""

    @property
    @abstractmethod
    def address(self) -> HexAddress:
        pass

    @property
    @abstractmethod
    def reward_token(self) -> HexAddress:
        """Address of the token :py:meth:`claim_rewards` pays out."""

    @abstractmethod
    def stake(self, position: int):
        pass

    @abstractmethod
    def unstake(self, position: int) -> int:
        """Take staked positions back.

        :return:
            Position amount received
        """

    @abstractmethod
    def claim_rewards(self) -> int:
        """Claim all accrued rewards to the vault.

        :return:
            Reward token amount received, zero if nothing had accrued
        """

    @abstractmethod
    def balance_of(self, holder: HexAddress) -> int:
        """Staked position amount of `holder`."""

    @abstractmethod
    def reward_balance_of(self, holder: HexAddress) -> int:
        """Reward token balance of `holder`.

        - Includes rewards claimed earlier that were never swapped
        """


class RewardSwapper(ABC):
    """Convert boost rewards to the base asset.

    - The swap path is up to the implementation, the vault does not assume one
    """

    @abstractmethod
    def swap(self, reward_token: HexAddress, amount: int) -> int:
        """Swap `amount` of `reward_token` held by the vault.

        :return:
            Base asset amount received by the vault
        """
