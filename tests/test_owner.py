"""Owner gate and vault initialisation."""

import pytest

from boost_vault.errors import AlreadyInitialized, NotInitialized, Unauthorized
from boost_vault.owner import OwnerGate
from boost_vault.testing import MockBoostSource, MockToken
from boost_vault.vault import BoostedVault


def test_owner_gate():
    gate = OwnerGate()
    assert not gate.is_initialized()

    with pytest.raises(NotInitialized):
        gate.check("0x2000000000000000000000000000000000000002")

    gate.initialize("0x2000000000000000000000000000000000000002")
    gate.check("0x2000000000000000000000000000000000000002")

    with pytest.raises(Unauthorized):
        gate.check("0x3000000000000000000000000000000000000003", "harvest")

    with pytest.raises(AlreadyInitialized):
        gate.initialize("0x3000000000000000000000000000000000000003")

    assert gate.owner == "0x2000000000000000000000000000000000000002"


def test_initialize_twice(vault, owner, alice, usdc, yield_source, boost):
    with pytest.raises(AlreadyInitialized):
        vault.initialize(alice, usdc, yield_source, boost)
    assert vault.owner == owner


def test_operations_before_initialize(vault_address, alice):
    vault = BoostedVault(vault_address)
    assert not vault.is_initialized()

    with pytest.raises(NotInitialized):
        vault.deposit(100, alice)

    with pytest.raises(NotInitialized):
        vault.total_managed_assets()

    with pytest.raises(NotInitialized):
        vault.harvest(alice)


def test_foreign_reward_token_needs_swapper(vault_address, owner, usdc, yield_source):
    bifi = MockToken("0x6000000000000000000000000000000000000006", "BIFI", operator=vault_address)
    boost = MockBoostSource("0x8000000000000000000000000000000000000008", yield_source, reward_token=bifi, operator=vault_address)
    vault = BoostedVault(vault_address)
    with pytest.raises(ValueError):
        vault.initialize(owner, usdc, yield_source, boost)


def test_yield_source_must_take_the_asset(vault_address, owner, usdc, yield_source, boost):
    dai = MockToken("0x9000000000000000000000000000000000000009", "DAI", operator=vault_address)
    vault = BoostedVault(vault_address)
    with pytest.raises(ValueError):
        vault.initialize(owner, dai, yield_source, boost)
