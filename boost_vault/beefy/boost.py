"""Beefy boost as the boost source.

- Boosts stake mooTokens and stream a reward token, often another token than the vault want

- https://github.com/beefyfinance/beefy-contracts/blob/master/contracts/BIFI/infra/BeefyLaunchpool.sol
"""

import logging
from functools import cached_property

from eth_typing import HexAddress
from web3 import Web3
from web3.contract import Contract

from boost_vault.abi import get_deployed_contract, transact_and_confirm
from boost_vault.beefy.token import ERC20AssetToken
from boost_vault.source import BoostSource


logger = logging.getLogger(__name__)


class BeefyBoostSource(BoostSource):
    """Stake mooTokens to a Beefy boost on behalf of the operator account."""

    def __init__(self, web3: Web3, address: HexAddress | str, operator: HexAddress | str):
        self.web3 = web3
        self.contract: Contract = get_deployed_contract(web3, "beefy/BeefyBoost.json", address)
        self.operator = Web3.to_checksum_address(operator)

    def __repr__(self):
        return f"<BeefyBoostSource {self.address}>"

    @property
    def address(self) -> HexAddress:
        return self.contract.address

    @cached_property
    def reward_token(self) -> HexAddress:
        return self.contract.functions.rewardToken().call()

    @cached_property
    def staked_token(self) -> ERC20AssetToken:
        """mooToken of the vault this boost belongs to."""
        return ERC20AssetToken(self.web3, self.contract.functions.stakedToken().call(), self.operator)

    @cached_property
    def reward_erc20(self) -> ERC20AssetToken:
        return ERC20AssetToken(self.web3, self.reward_token, self.operator)

    def fetch_earned(self, holder: HexAddress) -> int:
        """Claimable rewards of a holder."""
        return self.contract.functions.earned(Web3.to_checksum_address(holder)).call()

    def balance_of(self, holder: HexAddress) -> int:
        return self.contract.functions.balanceOf(Web3.to_checksum_address(holder)).call()

    def reward_balance_of(self, holder: HexAddress) -> int:
        return self.reward_erc20.balance_of(holder)

    def stake(self, position: int):
        self.staked_token.ensure_allowance(self.address, position, source="boost")
        transact_and_confirm(self.contract.functions.stake(position), self.operator, "boost")
        logger.info("Staked %d mooTokens to boost %s", position, self.address)

    def unstake(self, position: int) -> int:
        before = self.staked_token.balance_of(self.operator)
        transact_and_confirm(self.contract.functions.withdraw(position), self.operator, "boost")
        return self.staked_token.balance_of(self.operator) - before

    def claim_rewards(self) -> int:
        before = self.reward_erc20.balance_of(self.operator)
        transact_and_confirm(self.contract.functions.getReward(), self.operator, "boost")
        claimed = self.reward_erc20.balance_of(self.operator) - before
        logger.info("Claimed %d of reward token %s from boost %s", claimed, self.reward_token, self.address)
        return claimed
