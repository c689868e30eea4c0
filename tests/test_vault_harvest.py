"""Harvesting boost rewards."""

import pytest

from boost_vault.errors import ExternalCallFailed, Unauthorized
from boost_vault.events import Harvested
from boost_vault.testing import FixedRateSwapper, MockBoostSource, MockToken
from boost_vault.vault import BoostedVault


def test_harvest_raises_share_value(vault: BoostedVault, owner, alice, bob, boost):
    vault.deposit(1000, alice)
    boost.add_rewards(100)

    reinvested = vault.harvest(owner)

    assert reinvested == 100
    assert vault.total_supply() == 1000
    assert vault.total_managed_assets() == 1100
    assert vault.max_withdraw(alice) == 1100
    assert vault.events.filter(Harvested) == [Harvested(amount=100, reward_amount=100)]

    # New money prices against the harvested pool
    assert vault.deposit(110, bob) == 100


def test_harvest_by_non_owner(vault: BoostedVault, alice, boost):
    vault.deposit(1000, alice)
    boost.add_rewards(100)

    with pytest.raises(Unauthorized):
        vault.harvest(alice)

    assert vault.total_managed_assets() == 1000
    assert boost.earned[vault.address] == 100
    assert vault.events.filter(Harvested) == []


def test_harvest_twice_is_noop(vault: BoostedVault, owner, alice, boost):
    vault.deposit(1000, alice)
    boost.add_rewards(100)
    vault.harvest(owner)

    total_assets = vault.total_managed_assets()
    assert vault.harvest(owner) == 0
    assert vault.total_managed_assets() == total_assets
    assert vault.total_supply() == 1000


def test_harvest_nothing_emits_zero_event(vault: BoostedVault, owner, alice):
    vault.deposit(1000, alice)
    assert vault.harvest(owner) == 0
    assert vault.events.filter(Harvested) == [Harvested(amount=0, reward_amount=0)]


def test_harvest_swaps_foreign_reward(vault_address, owner, alice, usdc, yield_source):
    bifi = MockToken("0x6000000000000000000000000000000000000006", "BIFI", operator=vault_address)
    boost = MockBoostSource("0x8000000000000000000000000000000000000008", yield_source, reward_token=bifi, operator=vault_address)
    swapper = FixedRateSwapper(bifi, usdc, operator=vault_address, numerator=2)

    vault = BoostedVault(vault_address)
    vault.initialize(owner, usdc, yield_source, boost, swapper=swapper)
    vault.deposit(1000, alice)
    boost.add_rewards(50)

    assert vault.harvest(owner) == 100
    assert bifi.balance_of(vault_address) == 0
    assert vault.total_managed_assets() == 1100
    assert vault.events.filter(Harvested) == [Harvested(amount=100, reward_amount=50)]


def test_harvest_reinvest_fails(vault: BoostedVault, owner, alice, usdc, boost, yield_source):
    """Claimed rewards stay idle and keep counting towards the pool."""
    vault.deposit(1000, alice)
    boost.add_rewards(100)
    yield_source.fail_on("deposit")

    with pytest.raises(ExternalCallFailed) as exc_info:
        vault.harvest(owner)

    assert exc_info.value.source == "yield"
    assert usdc.balance_of(vault.address) == 100
    assert vault.total_managed_assets() == 1100
    assert vault.total_supply() == 1000
    assert vault.events.filter(Harvested) == []


def test_harvest_claim_fails(vault: BoostedVault, owner, alice, boost):
    vault.deposit(1000, alice)
    boost.add_rewards(100)
    boost.fail_on("claim_rewards")

    with pytest.raises(ExternalCallFailed) as exc_info:
        vault.harvest(owner)

    assert exc_info.value.source == "boost"
    assert vault.total_managed_assets() == 1000
    assert boost.earned[vault.address] == 100


def test_harvest_retries_failed_swap(vault_address, owner, alice, usdc, yield_source):
    """Rewards stranded by a failed swap are swapped by the next harvest."""
    bifi = MockToken("0x6000000000000000000000000000000000000006", "BIFI", operator=vault_address)
    boost = MockBoostSource("0x8000000000000000000000000000000000000008", yield_source, reward_token=bifi, operator=vault_address)
    swapper = FixedRateSwapper(bifi, usdc, operator=vault_address, numerator=2)

    vault = BoostedVault(vault_address)
    vault.initialize(owner, usdc, yield_source, boost, swapper=swapper)
    vault.deposit(1000, alice)
    boost.add_rewards(50)
    swapper.fail_on("swap")

    with pytest.raises(ExternalCallFailed) as exc_info:
        vault.harvest(owner)

    assert exc_info.value.source == "swap"
    assert bifi.balance_of(vault_address) == 50
    assert vault.total_managed_assets() == 1000
    assert vault.events.filter(Harvested) == []

    swapper.clear_failures()
    assert vault.harvest(owner) == 100
    assert bifi.balance_of(vault_address) == 0
    assert vault.total_managed_assets() == 1100
    assert vault.events.filter(Harvested) == [Harvested(amount=100, reward_amount=50)]
