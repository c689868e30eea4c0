"""Beefy vault as the yield source.

- Beefy vaults take a want token and mint mooTokens

- mooToken value is ``balance() / totalSupply()`` of want token, growing
  as the strategy harvests and compounds

- https://github.com/beefyfinance/beefy-contracts/blob/master/contracts/BIFI/vaults/BeefyVaultV7.sol
"""

import logging
from decimal import Decimal
from functools import cached_property

from eth_typing import BlockIdentifier, HexAddress
from web3 import Web3
from web3.contract import Contract

from boost_vault.abi import get_deployed_contract, transact_and_confirm
from boost_vault.beefy.token import ERC20AssetToken
from boost_vault.source import YieldSource


logger = logging.getLogger(__name__)


class BeefyYieldSource(YieldSource):
    """Deposit want tokens to a Beefy vault on behalf of the operator account."""

    def __init__(self, web3: Web3, address: HexAddress | str, operator: HexAddress | str):
        self.web3 = web3
        self.contract: Contract = get_deployed_contract(web3, "beefy/BeefyVaultV7.json", address)
        self.operator = Web3.to_checksum_address(operator)

    def __repr__(self):
        return f"<BeefyYieldSource {self.address}>"

    @property
    def address(self) -> HexAddress:
        return self.contract.address

    @cached_property
    def underlying(self) -> HexAddress:
        return self.contract.functions.want().call()

    @cached_property
    def want_token(self) -> ERC20AssetToken:
        return ERC20AssetToken(self.web3, self.underlying, self.operator)

    def fetch_price_per_full_share(self, block_identifier: BlockIdentifier = "latest") -> Decimal:
        """mooToken price in want token, human readable."""
        raw = self.contract.functions.getPricePerFullShare().call(block_identifier=block_identifier)
        return Decimal(raw) / Decimal(10**18)

    def position_of(self, holder: HexAddress) -> int:
        """mooTokens held directly by a holder."""
        return self.contract.functions.balanceOf(Web3.to_checksum_address(holder)).call()

    def _fetch_pool(self) -> tuple[int, int]:
        balance = self.contract.functions.balance().call()
        total_supply = self.contract.functions.totalSupply().call()
        return balance, total_supply

    def convert_to_assets(self, position: int) -> int:
        balance, total_supply = self._fetch_pool()
        if total_supply == 0:
            return position
        return position * balance // total_supply

    def convert_to_position(self, assets: int, round_up=False) -> int:
        balance, total_supply = self._fetch_pool()
        if total_supply == 0 or balance == 0:
            return assets
        position, remainder = divmod(assets * total_supply, balance)
        if round_up and remainder:
            position += 1
        return position

    def balance_of(self, holder: HexAddress) -> int:
        position = self.position_of(holder)
        if position == 0:
            return 0
        return self.convert_to_assets(position)

    def deposit(self, assets: int) -> int:
        self.want_token.ensure_allowance(self.address, assets, source="yield")
        before = self.position_of(self.operator)
        transact_and_confirm(self.contract.functions.deposit(assets), self.operator, "yield")
        position = self.position_of(self.operator) - before
        logger.info("Deposited %d want to Beefy vault %s, got %d mooTokens", assets, self.address, position)
        return position

    def withdraw(self, position: int) -> int:
        before = self.want_token.balance_of(self.operator)
        transact_and_confirm(self.contract.functions.withdraw(position), self.operator, "yield")
        assets = self.want_token.balance_of(self.operator) - before
        logger.info("Withdrew %d mooTokens from Beefy vault %s, got %d want", position, self.address, assets)
        return assets
