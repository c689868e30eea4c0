"""Show Beefy vault and boost state for a holder.

Read-only, no transactions are sent.

Usage:

.. code-block:: shell

    export JSON_RPC_POLYGON=...
    HOLDER=0x... python scripts/beefy-boost-status.py

"""

import os

from tabulate import tabulate
from web3 import HTTPProvider, Web3

from boost_vault.beefy.boost import BeefyBoostSource
from boost_vault.beefy.constants import BEEFY_BOOST, BEEFY_VAULT, MATICX_BBA_WMATIC_WHALE, POLYGON_CHAIN_ID
from boost_vault.beefy.token import ERC20AssetToken
from boost_vault.beefy.vault import BeefyYieldSource
from boost_vault.env import read_json_rpc_url
from boost_vault.utils import setup_console_logging


def main():
    setup_console_logging(default_log_level="info", simplified_logging=True)

    web3 = Web3(HTTPProvider(read_json_rpc_url(POLYGON_CHAIN_ID)))
    assert web3.eth.chain_id == POLYGON_CHAIN_ID, f"Connected to wrong chain {web3.eth.chain_id}"

    holder = Web3.to_checksum_address(os.environ.get("HOLDER", MATICX_BBA_WMATIC_WHALE))

    yield_source = BeefyYieldSource(web3, os.environ.get("BEEFY_VAULT", BEEFY_VAULT), operator=holder)
    boost = BeefyBoostSource(web3, os.environ.get("BEEFY_BOOST", BEEFY_BOOST), operator=holder)
    want = ERC20AssetToken(web3, yield_source.underlying, operator=holder)
    reward = boost.reward_erc20

    staked = boost.balance_of(holder)
    rows = [
        ["Block", f"{web3.eth.block_number:,}"],
        ["Holder", holder],
        ["Want token", f"{want.symbol} {want.address}"],
        ["Reward token", f"{reward.symbol} {reward.address}"],
        ["Price per full share", yield_source.fetch_price_per_full_share()],
        ["Idle want", want.balance_of(holder)],
        ["mooTokens held", yield_source.position_of(holder)],
        ["mooTokens held, in want", yield_source.balance_of(holder)],
        ["mooTokens staked", staked],
        ["mooTokens staked, in want", yield_source.convert_to_assets(staked)],
        ["Earned rewards", boost.fetch_earned(holder)],
    ]
    print(tabulate(rows, tablefmt="fancy_grid"))


if __name__ == "__main__":
    main()
