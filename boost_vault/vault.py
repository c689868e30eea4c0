"""Boosted yield vault.

- Depositors bring in the base asset and get shares

- The vault deposits the assets into a yield vault and stakes the resulting
  position in a boost contract

- The owner harvests boost rewards and reinvests them without minting shares,
  so every share becomes worth more

Example:

.. code-block:: python

    vault = BoostedVault(vault_address)
    vault.initialize(owner, usdc, yield_source, boost_source)

    shares = vault.deposit(1000 * 10**6, receiver=depositor)
    vault.harvest(owner)
    burned = vault.withdraw(500 * 10**6, receiver=depositor, owner=depositor)

The ledger and the collaborators do not share a transaction, so each operation
orders its steps so that shares are minted or burned only after all external
calls went through, and undoes the external steps that already happened
when a later one fails.
"""

import datetime
import logging
import threading
from dataclasses import dataclass
from decimal import Decimal

from eth_typing import HexAddress

from boost_vault.errors import (
    AlreadyInitialized,
    ExternalCallFailed,
    InsufficientBalance,
    InsufficientLiquidity,
    NotInitialized,
    Unauthorized,
    VaultError,
    ZeroAmount,
    ZeroShares,
)
from boost_vault.events import Deposit, EventLog, Harvested, Withdraw
from boost_vault.ledger import ShareLedger, normalise_holder
from boost_vault.owner import OwnerGate
from boost_vault.source import AssetToken, BoostSource, RewardSwapper, YieldSource


logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class VaultStatus:
    """Snapshot of where the vault assets are."""

    #: Naive datetime in UTC
    timestamp: datetime.datetime

    total_shares: int

    #: Base asset sitting in the vault itself
    idle_assets: int

    #: Value of positions held directly in the yield vault
    yield_assets: int

    #: Value of positions staked in the boost
    boosted_assets: int

    #: Staked position amount in the boost
    boosted_position: int

    #: Human readable share price in base asset
    share_price: Decimal

    @property
    def total_assets(self) -> int:
        return self.idle_assets + self.yield_assets + self.boosted_assets


class BoostedVault:
    """Vault routing one base asset through a yield source and a boost source.

    - Construct, then call :py:meth:`initialize` once to wire the collaborators

    - All operations are serialised through one lock, reads included,
      so a read never sees a half applied mutation
    """

    def __init__(self, address: HexAddress | str):
        """
        :param address:
            The vault identity towards the collaborators.
            Positions, stake and idle assets are held by this address.
        """
        self.address = normalise_holder(address)
        self.ledger = ShareLedger()
        self.owner_gate = OwnerGate()
        self.events = EventLog()
        self._lock = threading.RLock()

        self.asset: AssetToken | None = None
        self.yield_source: YieldSource | None = None
        self.boost_source: BoostSource | None = None
        self.swapper: RewardSwapper | None = None

    def __repr__(self):
        asset = self.asset.address if self.asset else None
        return f"<BoostedVault {self.address} asset {asset} shares {self.ledger.total_shares:,}>"

    @property
    def owner(self) -> HexAddress | None:
        return self.owner_gate.owner

    @property
    def underlying_asset(self) -> HexAddress | None:
        return self.asset.address if self.asset else None

    def initialize(
        self,
        caller: HexAddress | str,
        underlying_asset: AssetToken,
        yield_source: YieldSource,
        boost_source: BoostSource,
        swapper: RewardSwapper | None = None,
    ):
        """Wire the collaborators and make `caller` the owner.

        :param swapper:
            Needed when the boost pays rewards in another token than the base asset.

        :raise AlreadyInitialized:
            Called twice
        """
        assert isinstance(underlying_asset, AssetToken), f"Got {type(underlying_asset)}"
        assert isinstance(yield_source, YieldSource), f"Got {type(yield_source)}"
        assert isinstance(boost_source, BoostSource), f"Got {type(boost_source)}"

        with self._lock:
            if self.owner_gate.is_initialized():
                raise AlreadyInitialized(f"Vault {self.address} already initialised by {self.owner}")

            if yield_source.underlying.lower() != underlying_asset.address.lower():
                raise ValueError(f"Yield source {yield_source.address} takes {yield_source.underlying}, not {underlying_asset.address}")

            if boost_source.reward_token.lower() != underlying_asset.address.lower() and swapper is None:
                raise ValueError(f"Boost {boost_source.address} pays rewards in {boost_source.reward_token}, a RewardSwapper is needed")

            self.owner_gate.initialize(caller)
            self.asset = underlying_asset
            self.yield_source = yield_source
            self.boost_source = boost_source
            self.swapper = swapper

            logger.info(
                "Initialised vault %s, asset %s, yield source %s, boost %s, owner %s",
                self.address,
                underlying_asset.address,
                yield_source.address,
                boost_source.address,
                self.owner,
            )

    def is_initialized(self) -> bool:
        return self.asset is not None

    def _check_initialized(self):
        if self.asset is None:
            raise NotInitialized(f"Vault {self.address} has not been initialised")

    def _call(self, source: str, func, *args):
        """Call a collaborator and turn any failure into :py:class:`ExternalCallFailed`."""
        try:
            return func(*args)
        except VaultError:
            raise
        except Exception as e:
            raise ExternalCallFailed(source, f"{getattr(func, '__name__', func)}{args}: {e}") from e

    #
    # Read-only views
    #

    def _read_holdings(self) -> tuple[int, int, int, int]:
        """Read (idle assets, yield source assets, staked position, staked position value)."""
        idle = self._call("asset", self.asset.balance_of, self.address)
        in_yield = self._call("yield", self.yield_source.balance_of, self.address)
        staked = self._call("boost", self.boost_source.balance_of, self.address)
        boosted = self._call("yield", self.yield_source.convert_to_assets, staked) if staked else 0
        return idle, in_yield, staked, boosted

    def total_managed_assets(self) -> int:
        """Base asset value held idle, in the yield source and staked in the boost.

        - Read from the collaborators on every call, never cached
        """
        self._check_initialized()
        with self._lock:
            idle, in_yield, _, boosted = self._read_holdings()
            return idle + in_yield + boosted

    def balance_of(self, holder: HexAddress | str) -> int:
        with self._lock:
            return self.ledger.balance_of(holder)

    def total_supply(self) -> int:
        with self._lock:
            return self.ledger.total_shares

    def convert_to_shares(self, assets: int) -> int:
        with self._lock:
            return self.ledger.convert_to_shares(assets, self.total_managed_assets())

    def convert_to_assets(self, shares: int) -> int:
        with self._lock:
            return self.ledger.convert_to_assets(shares, self.total_managed_assets())

    def preview_deposit(self, assets: int) -> int:
        """Shares minted for a deposit of `assets`, rounded down."""
        return self.convert_to_shares(assets)

    def preview_withdraw(self, assets: int) -> int:
        """Shares burned to withdraw exactly `assets`, rounded up."""
        with self._lock:
            return self.ledger.convert_to_shares(assets, self.total_managed_assets(), round_up=True)

    def preview_redeem(self, shares: int) -> int:
        """Assets paid out for burning `shares`, rounded down."""
        return self.convert_to_assets(shares)

    def max_withdraw(self, owner: HexAddress | str) -> int:
        with self._lock:
            return self.convert_to_assets(self.ledger.balance_of(owner))

    def max_redeem(self, owner: HexAddress | str) -> int:
        return self.balance_of(owner)

    def fetch_status(self) -> VaultStatus:
        """Break down the managed assets."""
        self._check_initialized()
        with self._lock:
            idle, in_yield, staked, boosted = self._read_holdings()
            total_shares = self.ledger.total_shares
            total_assets = idle + in_yield + boosted
            if total_shares:
                share_price = Decimal(total_assets) / Decimal(total_shares)
            else:
                share_price = Decimal(1)
            return VaultStatus(
                timestamp=datetime.datetime.now(datetime.timezone.utc).replace(tzinfo=None),
                total_shares=total_shares,
                idle_assets=idle,
                yield_assets=in_yield,
                boosted_assets=boosted,
                boosted_position=staked,
                share_price=share_price,
            )

    #
    # Moving assets in and out of the external sources
    #

    def _put_to_work(self, assets: int) -> int:
        """Deposit idle assets into the yield source and stake the position.

        - If staking fails the fresh position is withdrawn back to idle assets

        :return:
            Position amount staked
        """
        position = self._call("yield", self.yield_source.deposit, assets)
        try:
            self._call("boost", self.boost_source.stake, position)
        except ExternalCallFailed:
            logger.warning("Staking %d positions failed, withdrawing them back from the yield source", position)
            try:
                self._call("yield", self.yield_source.withdraw, position)
            except ExternalCallFailed:
                logger.exception("Could not unwind yield position %d, it stays with the vault", position)
            raise
        logger.info("Put %d assets to work as %d staked positions", assets, position)
        return position

    def _free_liquidity(self, assets: int) -> tuple[int, int]:
        """Withdraw enough to have `assets` idle in the vault.

        - Idle assets first, then positions the vault holds directly in the yield source,
          then staked positions

        :return:
            Tuple (idle assets after the operation, assets freed from the external sources)
        """
        idle = self._call("asset", self.asset.balance_of, self.address)
        if idle >= assets:
            return idle, 0

        shortfall = assets - idle
        cap = self._call("yield", self.yield_source.max_withdraw)
        if cap is not None and shortfall > cap:
            raise InsufficientLiquidity(assets, idle + cap)

        freed = 0
        direct = self._call("yield", self.yield_source.position_of, self.address)
        if direct:
            position = min(self._call("yield", self.yield_source.convert_to_position, shortfall, True), direct)
            freed = self._call("yield", self.yield_source.withdraw, position)
            logger.info("Freed %d assets from %d unstaked positions", freed, position)

        if freed < shortfall:
            try:
                freed += self._free_staked(shortfall - freed)
            except ExternalCallFailed:
                self._return_freed(freed)
                raise

        return idle + freed, freed

    def _free_staked(self, shortfall: int) -> int:
        """Unstake and withdraw positions worth `shortfall`.

        :return:
            Assets received
        """
        staked = self._call("boost", self.boost_source.balance_of, self.address)
        position = min(self._call("yield", self.yield_source.convert_to_position, shortfall, True), staked)
        if position == 0:
            return 0

        unstaked = self._call("boost", self.boost_source.unstake, position)
        try:
            freed = self._call("yield", self.yield_source.withdraw, unstaked)
        except ExternalCallFailed:
            logger.warning("Withdrawing %d positions failed, staking them back", unstaked)
            self._restake_position(unstaked)
            raise

        logger.info("Freed %d assets by unstaking %d positions, shortfall was %d", freed, unstaked, shortfall)
        return freed

    def _restake_position(self, position: int):
        try:
            self._call("boost", self.boost_source.stake, position)
        except ExternalCallFailed:
            logger.exception("Could not stake %d positions back, they stay in the vault", position)

    def _return_freed(self, freed: int):
        """Put assets freed by a failed withdraw back to work."""
        if freed == 0:
            return
        try:
            self._put_to_work(freed)
        except ExternalCallFailed:
            logger.exception("Could not reinvest %d freed assets, they stay idle in the vault", freed)

    #
    # Mutating operations
    #

    def deposit(self, assets: int, receiver: HexAddress | str, from_: HexAddress | str | None = None) -> int:
        """Deposit base asset and mint shares.

        - The share price is fixed before the incoming assets are counted in the pool

        :param from_:
            Address the assets are pulled from. Defaults to `receiver`.

        :return:
            Number of shares minted to `receiver`
        """
        assert type(assets) is int, f"Got {type(assets)}"
        self._check_initialized()
        if assets <= 0:
            raise ZeroAmount(f"Cannot deposit {assets}")

        receiver = normalise_holder(receiver)
        from_ = normalise_holder(from_) if from_ else receiver

        with self._lock:
            idle_before, in_yield, _, boosted = self._read_holdings()
            total_assets = idle_before + in_yield + boosted
            shares = self.ledger.convert_to_shares(assets, total_assets)
            if shares == 0:
                raise ZeroShares(assets, total_assets, self.ledger.total_shares)

            logger.info("Depositing %d assets from %s for %d shares to %s, pool has %d assets", assets, from_, shares, receiver, total_assets)

            self._call("asset", self.asset.transfer_from, from_, self.address, assets)

            try:
                self._put_to_work(assets)
            except ExternalCallFailed:
                self._refund(from_, assets, idle_before)
                raise

            self.ledger.mint(receiver, shares)
            self.events.emit(Deposit(sender=from_, owner=receiver, assets=assets, shares=shares))
            return shares

    def _refund(self, recipient: HexAddress, assets: int, idle_before: int):
        """Send back what a failed deposit left idle.

        - Capped at the idle growth since the pull, pool assets idle before it are not touched
        """
        idle = self._call("asset", self.asset.balance_of, self.address)
        refund = min(max(idle - idle_before, 0), assets)
        if refund < assets:
            logger.warning("Only %d of %d assets came back, refunding that to %s", refund, assets, recipient)
        if refund == 0:
            return
        try:
            self._call("asset", self.asset.transfer, recipient, refund)
        except ExternalCallFailed:
            logger.exception("Refund of %d assets to %s failed, assets stay idle in the vault", refund, recipient)

    def withdraw(
        self,
        assets: int,
        receiver: HexAddress | str,
        owner: HexAddress | str,
        caller: HexAddress | str | None = None,
    ) -> int:
        """Withdraw an exact base asset amount.

        - Burns the shares needed rounded up, so rounding never drains the pool

        :param caller:
            Who initiates the withdrawal. Defaults to `owner`, must be `owner`.

        :return:
            Number of shares burned
        """
        assert type(assets) is int, f"Got {type(assets)}"
        self._check_initialized()
        if assets <= 0:
            raise ZeroAmount(f"Cannot withdraw {assets}")

        receiver = normalise_holder(receiver)
        owner = normalise_holder(owner)
        caller = normalise_holder(caller) if caller else owner
        if caller != owner:
            raise Unauthorized(caller, f"withdraw on behalf of {owner}")

        with self._lock:
            shares = self.preview_withdraw(assets)
            self._pay_out(assets, shares, receiver, owner, caller)
            return shares

    def redeem(
        self,
        shares: int,
        receiver: HexAddress | str,
        owner: HexAddress | str,
        caller: HexAddress | str | None = None,
    ) -> int:
        """Burn an exact share amount.

        :return:
            Base asset amount sent to `receiver`
        """
        assert type(shares) is int, f"Got {type(shares)}"
        self._check_initialized()
        if shares <= 0:
            raise ZeroAmount(f"Cannot redeem {shares} shares")

        receiver = normalise_holder(receiver)
        owner = normalise_holder(owner)
        caller = normalise_holder(caller) if caller else owner
        if caller != owner:
            raise Unauthorized(caller, f"redeem on behalf of {owner}")

        with self._lock:
            assets = self.preview_redeem(shares)
            if assets == 0:
                raise ZeroAmount(f"{shares} shares are worth zero assets")
            self._pay_out(assets, shares, receiver, owner, caller)
            return assets

    def _pay_out(self, assets: int, shares: int, receiver: HexAddress, owner: HexAddress, caller: HexAddress):
        """Common part of withdraw and redeem. Lock must be held."""
        balance = self.ledger.balance_of(owner)
        if shares > balance:
            raise InsufficientBalance(owner, shares, balance)

        logger.info("Paying out %d assets for %d shares of %s to %s", assets, shares, owner, receiver)

        available, freed = self._free_liquidity(assets)
        if available < assets:
            self._return_freed(freed)
            raise InsufficientLiquidity(assets, available)

        try:
            self._call("asset", self.asset.transfer, receiver, assets)
        except ExternalCallFailed:
            self._return_freed(freed)
            raise

        self.ledger.burn(owner, shares)
        self.events.emit(Withdraw(sender=caller, receiver=receiver, owner=owner, assets=assets, shares=shares))

    def transfer(self, sender: HexAddress | str, recipient: HexAddress | str, shares: int):
        """Move shares between holders."""
        assert type(shares) is int, f"Got {type(shares)}"
        if shares <= 0:
            raise ZeroAmount(f"Cannot transfer {shares} shares")
        with self._lock:
            self.ledger.transfer(sender, recipient, shares)

    def harvest(self, caller: HexAddress | str) -> int:
        """Claim boost rewards and reinvest them.

        - Owner only

        - No shares are minted, so the reinvested amount raises the value of every share

        - A harvest with nothing to claim succeeds and emits ``Harvested`` with zero amount

        - Foreign reward tokens are swapped from the vault's whole reward token balance,
          so a harvest after a failed swap picks up the stranded rewards

        :return:
            Base asset amount reinvested
        """
        self._check_initialized()
        with self._lock:
            self.owner_gate.check(caller, "harvest")

            reward_amount = self._call("boost", self.boost_source.claim_rewards)
            reward_token = self.boost_source.reward_token

            if reward_token.lower() != self.asset.address.lower():
                # Whole balance, rewards left over from an earlier failed swap included
                reward_amount = self._call("boost", self.boost_source.reward_balance_of, self.address)
                amount = self._call("swap", self.swapper.swap, reward_token, reward_amount) if reward_amount else 0
            else:
                amount = reward_amount

            logger.info("Harvested %d of reward token %s, reinvesting %d assets", reward_amount, reward_token, amount)

            if amount:
                # Claimed rewards cannot be returned: if this fails they stay idle and are still counted
                self._put_to_work(amount)

            self.events.emit(Harvested(amount=amount, reward_amount=reward_amount))
            return amount
