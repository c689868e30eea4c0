"""ABI loading from the bundled JSON files.

- ABI files live in ``boost_vault/abi/`` as Etherscan style lists

- Loaded ABIs and contract classes are cached in the process memory
"""

import json
import logging
from functools import lru_cache
from pathlib import Path
from typing import Type

from eth_typing import HexAddress
from hexbytes import HexBytes
from web3 import Web3
from web3.contract.contract import Contract, ContractFunction
from web3.types import TxReceipt

from boost_vault.errors import ExternalCallFailed


logger = logging.getLogger(__name__)

# How big are our ABI and contract caches
_CACHE_SIZE = 64


@lru_cache(maxsize=_CACHE_SIZE)
def get_abi_by_filename(fname: str) -> list:
    """Read a bundled ABI file.

    Example::

        abi = get_abi_by_filename("beefy/BeefyVaultV7.json")
    """
    here = Path(__file__).resolve().parent
    abi_path = here / "abi" / Path(fname)
    with open(abi_path, "rt", encoding="utf-8") as f:
        abi = json.load(f)
    assert type(abi) == list, f"{fname} is not an ABI list"
    return abi


@lru_cache(maxsize=_CACHE_SIZE)
def get_contract(web3: Web3, fname: str) -> Type[Contract]:
    """Get Contract proxy class from a bundled ABI file.

    Web3 connection is part of the cache key.
    """
    abi = get_abi_by_filename(fname)
    return web3.eth.contract(abi=abi)


def get_deployed_contract(web3: Web3, fname: str, address: HexAddress | str) -> Contract:
    """Get a Contract proxy object for a contract deployed at a specific address.

    :param fname:
        Bundled ABI file, e.g. ``ERC20.json``

    :param address:
        Address of the deployed contract, any case
    """
    assert isinstance(web3, Web3), f"Got {type(web3)} instead of Web3"
    assert address, "get_deployed_contract() address was None"

    Contract = get_contract(web3, fname)
    return Contract(Web3.to_checksum_address(address))


def transact_and_confirm(func: ContractFunction, operator: HexAddress, source: str) -> TxReceipt:
    """Send a bound contract call from `operator` and wait for the receipt.

    - The operator account must be unlocked in the node, like with Anvil forks
      or a node managed wallet

    :param source:
        Collaborator name used in the error when the transaction reverts

    :raise ExternalCallFailed:
        Transaction reverted
    """
    web3 = func.w3
    tx_hash: HexBytes = func.transact({"from": operator})
    receipt = web3.eth.wait_for_transaction_receipt(tx_hash)
    if receipt["status"] != 1:
        raise ExternalCallFailed(source, f"Transaction {tx_hash.hex()} reverted, function {func.fn_name}")
    logger.debug("%s: %s() confirmed in block %d, gas used %d", source, func.fn_name, receipt["blockNumber"], receipt["gasUsed"])
    return receipt
