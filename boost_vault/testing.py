"""In-memory collaborators for simulations and unit tests.

- :py:class:`MockToken`: ERC-20 like balances and allowances
- :py:class:`MockYieldSource`: share based yield vault, yield is simulated with :py:meth:`MockYieldSource.accrue`
- :py:class:`MockBoostSource`: staking contract, rewards are funded with :py:meth:`MockBoostSource.add_rewards`
- :py:class:`FixedRateSwapper`: swaps reward token to base asset at a fixed rate

Any method can be told to revert with ``fail_on("method_name")``, to exercise
the vault unwinding logic.

Example:

.. code-block:: python

    usdc = MockToken("0x...", "USDC", decimals=6)
    yield_source = MockYieldSource("0x...", usdc, operator=vault_address)
    boost = MockBoostSource("0x...", yield_source, reward_token=usdc, operator=vault_address)

    vault = BoostedVault(vault_address)
    vault.initialize(owner, usdc, yield_source, boost)
"""

import logging

from eth_typing import HexAddress

from boost_vault.ledger import normalise_holder
from boost_vault.source import AssetToken, BoostSource, RewardSwapper, YieldSource


logger = logging.getLogger(__name__)


class MockRevert(Exception):
    """Simulated smart contract revert."""


class _FailureInjection:
    """Make chosen methods revert."""

    def __init__(self):
        self._failing: set[str] = set()

    def fail_on(self, *methods: str):
        self._failing.update(methods)

    def clear_failures(self):
        self._failing.clear()

    def _check(self, method: str):
        if method in self._failing:
            raise MockRevert(f"{self.__class__.__name__}.{method}() reverted")


class MockToken(_FailureInjection, AssetToken):
    """ERC-20 token in memory.

    - :py:meth:`transfer_from` and :py:meth:`transfer` act as the token is seen by the vault:
      pulls need an allowance for the recipient, pushes are sent by :py:attr:`operator`
    """

    def __init__(self, address: HexAddress | str, symbol: str, decimals=18, operator: HexAddress | str | None = None):
        super().__init__()
        self._address = normalise_holder(address)
        self.symbol = symbol
        self._decimals = decimals
        self.operator = normalise_holder(operator) if operator else None
        self.balances: dict[HexAddress, int] = {}
        self.allowances: dict[tuple[HexAddress, HexAddress], int] = {}
        self.total_supply = 0

    def __repr__(self):
        return f"<MockToken {self.symbol} at {self._address}>"

    @property
    def address(self) -> HexAddress:
        return self._address

    @property
    def decimals(self) -> int:
        return self._decimals

    def balance_of(self, holder: HexAddress | str) -> int:
        self._check("balance_of")
        return self.balances.get(normalise_holder(holder), 0)

    def mint(self, holder: HexAddress | str, amount: int):
        holder = normalise_holder(holder)
        self.balances[holder] = self.balances.get(holder, 0) + amount
        self.total_supply += amount

    def burn(self, holder: HexAddress | str, amount: int):
        holder = normalise_holder(holder)
        balance = self.balances.get(holder, 0)
        if amount > balance:
            raise MockRevert(f"Burn amount {amount} exceeds balance {balance} of {holder}")
        self.balances[holder] = balance - amount
        self.total_supply -= amount

    def approve(self, owner: HexAddress | str, spender: HexAddress | str, amount: int):
        self.allowances[(normalise_holder(owner), normalise_holder(spender))] = amount

    def allowance(self, owner: HexAddress | str, spender: HexAddress | str) -> int:
        return self.allowances.get((normalise_holder(owner), normalise_holder(spender)), 0)

    def move(self, sender: HexAddress | str, recipient: HexAddress | str, amount: int):
        """Plain balance move, used by the other mocks."""
        sender = normalise_holder(sender)
        recipient = normalise_holder(recipient)
        balance = self.balances.get(sender, 0)
        if amount > balance:
            raise MockRevert(f"ERC20: transfer amount {amount} exceeds balance {balance} of {sender}")
        self.balances[sender] = balance - amount
        self.balances[recipient] = self.balances.get(recipient, 0) + amount

    def transfer_from(self, sender: HexAddress | str, recipient: HexAddress | str, amount: int):
        self._check("transfer_from")
        key = (normalise_holder(sender), normalise_holder(recipient))
        allowance = self.allowances.get(key, 0)
        if amount > allowance:
            raise MockRevert(f"ERC20: insufficient allowance {allowance} for {amount}")
        self.move(sender, recipient, amount)
        self.allowances[key] = allowance - amount

    def transfer(self, recipient: HexAddress | str, amount: int):
        self._check("transfer")
        assert self.operator, "MockToken.transfer() needs an operator"
        self.move(self.operator, recipient, amount)


class MockYieldSource(_FailureInjection, YieldSource):
    """Yield vault in memory.

    - Positions are priced as the token balance of the yield vault divided by the position supply

    - :py:attr:`withdraw_cap` limits the assets a single withdrawal can pay
    """

    def __init__(self, address: HexAddress | str, token: MockToken, operator: HexAddress | str):
        super().__init__()
        self._address = normalise_holder(address)
        self.token = token
        self.operator = normalise_holder(operator)
        self.positions: dict[HexAddress, int] = {}
        self.total_positions = 0
        self.withdraw_cap: int | None = None

        #: Share of a withdrawal kept by the yield vault, in basis points
        self.withdraw_fee_bps = 0

    @property
    def address(self) -> HexAddress:
        return self._address

    @property
    def underlying(self) -> HexAddress:
        return self.token.address

    @property
    def total_assets(self) -> int:
        return self.token.balances.get(self._address, 0)

    def accrue(self, amount: int):
        """Simulate yield: assets appear in the vault without new positions."""
        self.token.mint(self._address, amount)

    def move_position(self, sender: HexAddress | str, recipient: HexAddress | str, amount: int):
        sender = normalise_holder(sender)
        recipient = normalise_holder(recipient)
        balance = self.positions.get(sender, 0)
        if amount > balance:
            raise MockRevert(f"Position transfer {amount} exceeds balance {balance} of {sender}")
        self.positions[sender] = balance - amount
        self.positions[recipient] = self.positions.get(recipient, 0) + amount

    def convert_to_assets(self, position: int) -> int:
        if self.total_positions == 0:
            return position
        return position * self.total_assets // self.total_positions

    def convert_to_position(self, assets: int, round_up=False) -> int:
        if self.total_positions == 0:
            return assets
        position, remainder = divmod(assets * self.total_positions, self.total_assets)
        if round_up and remainder:
            position += 1
        return position

    def max_withdraw(self) -> int | None:
        return self.withdraw_cap

    def deposit(self, assets: int) -> int:
        self._check("deposit")
        position = self.convert_to_position(assets)
        if position == 0:
            raise MockRevert(f"Deposit of {assets} too small")
        self.token.move(self.operator, self._address, assets)
        self.positions[self.operator] = self.positions.get(self.operator, 0) + position
        self.total_positions += position
        return position

    def withdraw(self, position: int) -> int:
        self._check("withdraw")
        balance = self.positions.get(self.operator, 0)
        if position > balance:
            raise MockRevert(f"Withdraw {position} exceeds position {balance}")
        assets = self.convert_to_assets(position)
        if self.withdraw_cap is not None and assets > self.withdraw_cap:
            raise MockRevert(f"Withdraw {assets} over cap {self.withdraw_cap}")
        fee = assets * self.withdraw_fee_bps // 10_000
        self.positions[self.operator] = balance - position
        self.total_positions -= position
        self.token.move(self._address, self.operator, assets - fee)
        return assets - fee

    def balance_of(self, holder: HexAddress | str) -> int:
        self._check("balance_of")
        return self.convert_to_assets(self.positions.get(normalise_holder(holder), 0))

    def position_of(self, holder: HexAddress | str) -> int:
        self._check("position_of")
        return self.positions.get(normalise_holder(holder), 0)


class MockBoostSource(_FailureInjection, BoostSource):
    """Staking contract in memory.

    - Rewards added with :py:meth:`add_rewards` are split between stakers pro rata
    """

    def __init__(
        self,
        address: HexAddress | str,
        yield_source: MockYieldSource,
        reward_token: MockToken,
        operator: HexAddress | str,
    ):
        super().__init__()
        self._address = normalise_holder(address)
        self.yield_source = yield_source
        self._reward_token = reward_token
        self.operator = normalise_holder(operator)
        self.staked: dict[HexAddress, int] = {}
        self.earned: dict[HexAddress, int] = {}

    @property
    def address(self) -> HexAddress:
        return self._address

    @property
    def reward_token(self) -> HexAddress:
        return self._reward_token.address

    @property
    def total_staked(self) -> int:
        return sum(self.staked.values())

    def add_rewards(self, amount: int):
        """Fund rewards and distribute them to the current stakers."""
        total = self.total_staked
        assert total > 0, "Nobody to reward"
        self._reward_token.mint(self._address, amount)
        for holder, stake in self.staked.items():
            self.earned[holder] = self.earned.get(holder, 0) + amount * stake // total

    def stake(self, position: int):
        self._check("stake")
        self.yield_source.move_position(self.operator, self._address, position)
        self.staked[self.operator] = self.staked.get(self.operator, 0) + position

    def unstake(self, position: int) -> int:
        self._check("unstake")
        balance = self.staked.get(self.operator, 0)
        if position > balance:
            raise MockRevert(f"Unstake {position} exceeds stake {balance}")
        self.staked[self.operator] = balance - position
        self.yield_source.move_position(self._address, self.operator, position)
        return position

    def claim_rewards(self) -> int:
        self._check("claim_rewards")
        amount = self.earned.pop(self.operator, 0)
        if amount:
            self._reward_token.move(self._address, self.operator, amount)
        return amount

    def balance_of(self, holder: HexAddress | str) -> int:
        self._check("balance_of")
        return self.staked.get(normalise_holder(holder), 0)

    def reward_balance_of(self, holder: HexAddress | str) -> int:
        return self._reward_token.balance_of(holder)


class FixedRateSwapper(_FailureInjection, RewardSwapper):
    """Swap reward token to base asset at ``numerator / denominator`` base asset per reward token."""

    def __init__(self, reward_token: MockToken, asset: MockToken, operator: HexAddress | str, numerator: int, denominator: int = 1):
        super().__init__()
        self.reward_token = reward_token
        self.asset = asset
        self.operator = normalise_holder(operator)
        self.numerator = numerator
        self.denominator = denominator

    def swap(self, reward_token: HexAddress, amount: int) -> int:
        self._check("swap")
        assert reward_token.lower() == self.reward_token.address.lower(), f"Cannot swap {reward_token}"
        out = amount * self.numerator // self.denominator
        self.reward_token.burn(self.operator, amount)
        self.asset.mint(self.operator, out)
        logger.info("Swapped %d %s to %d %s", amount, self.reward_token.symbol, out, self.asset.symbol)
        return out
