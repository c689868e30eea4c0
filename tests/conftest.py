"""Shared fixtures: a boosted vault wired to in-memory collaborators."""

import pytest

from boost_vault.testing import MockBoostSource, MockToken, MockYieldSource
from boost_vault.vault import BoostedVault


@pytest.fixture()
def vault_address() -> str:
    return "0x1000000000000000000000000000000000000001"


@pytest.fixture()
def owner() -> str:
    return "0x2000000000000000000000000000000000000002"


@pytest.fixture()
def alice() -> str:
    return "0x3000000000000000000000000000000000000003"


@pytest.fixture()
def bob() -> str:
    return "0x4000000000000000000000000000000000000004"


@pytest.fixture()
def usdc(vault_address, alice, bob) -> MockToken:
    """Base asset, both depositors hold 100k and have approved the vault."""
    token = MockToken("0x5000000000000000000000000000000000000005", "USDC", decimals=6, operator=vault_address)
    for holder in (alice, bob):
        token.mint(holder, 100_000)
        token.approve(holder, vault_address, 100_000)
    return token


@pytest.fixture()
def yield_source(usdc, vault_address) -> MockYieldSource:
    return MockYieldSource("0x7000000000000000000000000000000000000007", usdc, operator=vault_address)


@pytest.fixture()
def boost(yield_source, usdc, vault_address) -> MockBoostSource:
    """Boost paying rewards in the base asset."""
    return MockBoostSource("0x8000000000000000000000000000000000000008", yield_source, reward_token=usdc, operator=vault_address)


@pytest.fixture()
def vault(vault_address, owner, usdc, yield_source, boost) -> BoostedVault:
    vault = BoostedVault(vault_address)
    vault.initialize(owner, usdc, yield_source, boost)
    return vault
