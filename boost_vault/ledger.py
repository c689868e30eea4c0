"""Share accounting.

- Keeps track of the issued shares and who holds them

- Converts between asset and share amounts at a given pool value.
  The pool value is not known to the ledger, the vault measures it
  from the collaborators and passes it in.

- All amounts are raw integers in token base units, bounded to uint256
"""

import logging
from typing import Iterable

from eth_typing import HexAddress
from eth_utils import is_address, to_checksum_address

from boost_vault.errors import ArithmeticOverflow, InsufficientBalance


logger = logging.getLogger(__name__)


#: Largest amount the accounting can hold
MAX_UINT256 = 2**256 - 1


def normalise_holder(holder: HexAddress | str) -> HexAddress:
    """Use the checksummed form as the ledger key.

    Ethereum services mix lowercased and checksummed addresses,
    both spellings must map to the same holder.
    """
    assert isinstance(holder, str), f"Holder must be an address string, got {type(holder)}"
    assert is_address(holder), f"Not an Ethereum address: {holder}"
    return to_checksum_address(holder)


def check_uint256(value: int, what: str = "value") -> int:
    """Abort on values outside uint256 instead of wrapping."""
    if value < 0 or value > MAX_UINT256:
        raise ArithmeticOverflow(f"{what} out of uint256 range: {value}")
    return value


def mul_div(x: int, y: int, denominator: int, round_up=False) -> int:
    """Calculate x * y / denominator with explicit rounding.

    :param round_up:
        Round towards positive infinity instead of truncating.
    """
    if denominator == 0:
        raise ArithmeticOverflow(f"Division by zero in {x} * {y} / 0")
    product = check_uint256(x * y, "intermediate product")
    result, remainder = divmod(product, denominator)
    if round_up and remainder:
        result += 1
    return check_uint256(result, "result")


class ShareLedger:
    """Total supply and per holder share balances.

    - Invariant: :py:attr:`total_shares` equals the sum of all balances

    - A holder with zero balance is not stored
    """

    def __init__(self):
        self._balances: dict[HexAddress, int] = {}
        self._total_shares = 0

    def __repr__(self):
        return f"<ShareLedger total shares {self._total_shares:,} across {len(self._balances)} holders>"

    @property
    def total_shares(self) -> int:
        return self._total_shares

    def balance_of(self, holder: HexAddress | str) -> int:
        return self._balances.get(normalise_holder(holder), 0)

    def holders(self) -> Iterable[HexAddress]:
        return list(self._balances.keys())

    def convert_to_shares(self, assets: int, total_assets: int, round_up=False) -> int:
        """How many shares an asset amount is worth.

        - The first deposit into an empty pool is priced 1:1

        - Rounds down by default, so the pool never gives away more than it gets
        """
        assert type(assets) is int, f"Got {type(assets)}"
        check_uint256(assets, "assets")
        if self._total_shares == 0:
            return assets
        return mul_div(assets, self._total_shares, total_assets, round_up=round_up)

    def convert_to_assets(self, shares: int, total_assets: int, round_up=False) -> int:
        """How many assets a share amount is worth.

        - Rounds down by default, so a redeemer never gets more than the proportional claim
        """
        assert type(shares) is int, f"Got {type(shares)}"
        check_uint256(shares, "shares")
        if self._total_shares == 0:
            return shares
        return mul_div(shares, total_assets, self._total_shares, round_up=round_up)

    def mint(self, holder: HexAddress | str, shares: int):
        assert type(shares) is int and shares > 0, f"Cannot mint {shares}"
        holder = normalise_holder(holder)
        new_total = check_uint256(self._total_shares + shares, "total shares")
        self._balances[holder] = self._balances.get(holder, 0) + shares
        self._total_shares = new_total
        logger.debug("Minted %d shares to %s, total %d", shares, holder, new_total)

    def burn(self, holder: HexAddress | str, shares: int):
        """Remove shares from a holder.

        :raise InsufficientBalance:
            The holder has less than `shares`. Nothing is changed.
        """
        assert type(shares) is int and shares > 0, f"Cannot burn {shares}"
        holder = normalise_holder(holder)
        balance = self._balances.get(holder, 0)
        if shares > balance:
            raise InsufficientBalance(holder, shares, balance)

        if balance == shares:
            del self._balances[holder]
        else:
            self._balances[holder] = balance - shares
        self._total_shares -= shares
        logger.debug("Burned %d shares from %s, total %d", shares, holder, self._total_shares)

    def transfer(self, sender: HexAddress | str, recipient: HexAddress | str, shares: int):
        """Move shares between holders. Total supply does not change."""
        assert type(shares) is int and shares > 0, f"Cannot transfer {shares}"
        sender = normalise_holder(sender)
        recipient = normalise_holder(recipient)
        balance = self._balances.get(sender, 0)
        if shares > balance:
            raise InsufficientBalance(sender, shares, balance)

        if balance == shares:
            del self._balances[sender]
        else:
            self._balances[sender] = balance - shares
        self._balances[recipient] = self._balances.get(recipient, 0) + shares
