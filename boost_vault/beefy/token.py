"""ERC-20 base asset on a live chain."""

import logging
from functools import cached_property

from eth_typing import HexAddress
from web3 import Web3
from web3.contract import Contract

from boost_vault.abi import get_deployed_contract, transact_and_confirm
from boost_vault.source import AssetToken


logger = logging.getLogger(__name__)


class ERC20AssetToken(AssetToken):
    """ERC-20 token moved by the vault operator account.

    - :py:meth:`transfer_from` needs the sender to have approved the operator
    """

    def __init__(self, web3: Web3, address: HexAddress | str, operator: HexAddress | str):
        self.web3 = web3
        self.contract: Contract = get_deployed_contract(web3, "ERC20.json", address)
        self.operator = Web3.to_checksum_address(operator)

    def __repr__(self):
        return f"<ERC20AssetToken {self.symbol} at {self.address}>"

    @property
    def address(self) -> HexAddress:
        return self.contract.address

    @cached_property
    def decimals(self) -> int:
        return self.contract.functions.decimals().call()

    @cached_property
    def symbol(self) -> str:
        return self.contract.functions.symbol().call()

    def balance_of(self, holder: HexAddress) -> int:
        return self.contract.functions.balanceOf(Web3.to_checksum_address(holder)).call()

    def allowance(self, owner: HexAddress, spender: HexAddress) -> int:
        return self.contract.functions.allowance(Web3.to_checksum_address(owner), Web3.to_checksum_address(spender)).call()

    def ensure_allowance(self, spender: HexAddress, amount: int, source="asset"):
        """Approve `spender` to pull `amount` from the operator if not already."""
        if self.allowance(self.operator, spender) < amount:
            logger.info("Approving %s to spend %d %s of %s", spender, amount, self.symbol, self.operator)
            transact_and_confirm(self.contract.functions.approve(Web3.to_checksum_address(spender), amount), self.operator, source)

    def transfer_from(self, sender: HexAddress, recipient: HexAddress, amount: int):
        func = self.contract.functions.transferFrom(
            Web3.to_checksum_address(sender),
            Web3.to_checksum_address(recipient),
            amount,
        )
        transact_and_confirm(func, self.operator, "asset")

    def transfer(self, recipient: HexAddress, amount: int):
        transact_and_confirm(self.contract.functions.transfer(Web3.to_checksum_address(recipient), amount), self.operator, "asset")
