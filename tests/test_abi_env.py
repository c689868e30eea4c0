"""Bundled ABI files and environment configuration."""

import pytest
from web3 import Web3

from boost_vault.abi import get_abi_by_filename, get_contract, get_deployed_contract
from boost_vault.beefy.boost import BeefyBoostSource
from boost_vault.beefy.constants import BEEFY_BOOST, BEEFY_VAULT, MATICX_BBA_WMATIC_WHALE
from boost_vault.beefy.vault import BeefyYieldSource
from boost_vault.env import get_json_rpc_env, read_json_rpc_url, read_json_rpc_urls


def _function_names(abi: list) -> set[str]:
    return {item["name"] for item in abi if item["type"] == "function"}


def test_bundled_abis():
    assert {"deposit", "withdraw", "getPricePerFullShare", "want", "balance"} <= _function_names(get_abi_by_filename("beefy/BeefyVaultV7.json"))
    assert {"stake", "withdraw", "getReward", "earned", "rewardToken", "stakedToken"} <= _function_names(get_abi_by_filename("beefy/BeefyBoost.json"))
    assert {"transfer", "transferFrom", "approve", "balanceOf"} <= _function_names(get_abi_by_filename("ERC20.json"))


def test_contract_proxies_without_connection():
    """Contract proxies can be built offline, calls only happen when used."""
    web3 = Web3()
    assert get_contract(web3, "ERC20.json") is get_contract(web3, "ERC20.json")

    contract = get_deployed_contract(web3, "ERC20.json", BEEFY_VAULT.lower())
    assert contract.address == BEEFY_VAULT

    yield_source = BeefyYieldSource(web3, BEEFY_VAULT, operator=MATICX_BBA_WMATIC_WHALE)
    boost = BeefyBoostSource(web3, BEEFY_BOOST, operator=MATICX_BBA_WMATIC_WHALE)
    assert yield_source.address == BEEFY_VAULT
    assert boost.address == BEEFY_BOOST
    assert yield_source.operator == Web3.to_checksum_address(MATICX_BBA_WMATIC_WHALE)


def test_json_rpc_env(monkeypatch):
    assert get_json_rpc_env(137) == "JSON_RPC_POLYGON"

    monkeypatch.setenv("JSON_RPC_POLYGON", "http://localhost:8545")
    assert read_json_rpc_url(137) == "http://localhost:8545"

    monkeypatch.delenv("JSON_RPC_POLYGON")
    with pytest.raises(ValueError):
        read_json_rpc_url(137)


def test_json_rpc_configuration_line(monkeypatch):
    """Several endpoints, broadcast-only entries skipped for reads."""
    monkeypatch.setenv("JSON_RPC_POLYGON", "mev+https://relay.example https://a.example  https://b.example https://a.example")
    assert read_json_rpc_urls(137) == ["https://a.example", "https://b.example"]
    assert read_json_rpc_url(137) == "https://a.example"

    monkeypatch.setenv("JSON_RPC_POLYGON", "mev+https://relay.example")
    with pytest.raises(ValueError):
        read_json_rpc_urls(137)
