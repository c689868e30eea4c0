"""Share ledger bookkeeping and rounding."""

import pytest

from boost_vault.errors import ArithmeticOverflow, InsufficientBalance
from boost_vault.ledger import MAX_UINT256, ShareLedger, mul_div


ALICE = "0x3000000000000000000000000000000000000003"
BOB = "0x4000000000000000000000000000000000000004"


def test_empty_pool_converts_one_to_one():
    ledger = ShareLedger()
    assert ledger.convert_to_shares(1000, total_assets=0) == 1000
    assert ledger.convert_to_assets(1000, total_assets=0) == 1000


def test_conversion_rounds_down_by_default():
    ledger = ShareLedger()
    ledger.mint(ALICE, 1000)
    # 10 * 1000 / 1100 = 9.09
    assert ledger.convert_to_shares(10, total_assets=1100) == 9
    assert ledger.convert_to_shares(10, total_assets=1100, round_up=True) == 10
    # 7 * 1100 / 1000 = 7.7
    assert ledger.convert_to_assets(7, total_assets=1100) == 7
    assert ledger.convert_to_assets(7, total_assets=1100, round_up=True) == 8


def test_second_depositor_after_yield():
    ledger = ShareLedger()
    ledger.mint(ALICE, 1000)
    assert ledger.convert_to_shares(110, total_assets=1100) == 100


def test_mint_burn_keeps_total():
    ledger = ShareLedger()
    ledger.mint(ALICE, 300)
    ledger.mint(BOB, 200)
    ledger.burn(ALICE, 100)
    assert ledger.total_shares == 400
    assert ledger.total_shares == sum(ledger.balance_of(h) for h in ledger.holders())


def test_burn_full_balance_removes_holder():
    ledger = ShareLedger()
    ledger.mint(ALICE, 300)
    ledger.burn(ALICE, 300)
    assert ledger.balance_of(ALICE) == 0
    assert list(ledger.holders()) == []
    assert ledger.total_shares == 0


def test_burn_more_than_balance():
    ledger = ShareLedger()
    ledger.mint(ALICE, 300)

    with pytest.raises(InsufficientBalance) as exc_info:
        ledger.burn(ALICE, 400)

    assert exc_info.value.requested == 400
    assert exc_info.value.available == 300
    assert ledger.balance_of(ALICE) == 300
    assert ledger.total_shares == 300


def test_holder_address_case_does_not_matter():
    ledger = ShareLedger()
    lower = "0x52908400098527886e0f7030069857d2e4169ee7"
    ledger.mint(lower, 10)
    assert ledger.balance_of(lower.upper().replace("0X", "0x")) == 10
    assert ledger.balance_of("0x52908400098527886E0F7030069857D2E4169EE7") == 10


def test_transfer():
    ledger = ShareLedger()
    ledger.mint(ALICE, 300)
    ledger.transfer(ALICE, BOB, 300)
    assert ledger.balance_of(BOB) == 300
    assert ALICE not in ledger.holders()
    assert ledger.total_shares == 300

    with pytest.raises(InsufficientBalance):
        ledger.transfer(ALICE, BOB, 1)


def test_overflow_aborts():
    ledger = ShareLedger()
    ledger.mint(ALICE, MAX_UINT256)

    with pytest.raises(ArithmeticOverflow):
        ledger.mint(BOB, 1)

    with pytest.raises(ArithmeticOverflow):
        ledger.convert_to_assets(MAX_UINT256, total_assets=2)

    assert ledger.balance_of(BOB) == 0
    assert ledger.total_shares == MAX_UINT256


def test_empty_pool_value_with_shares_outstanding():
    """All assets lost but shares remain: no silent division by zero."""
    ledger = ShareLedger()
    ledger.mint(ALICE, 1000)
    with pytest.raises(ArithmeticOverflow):
        ledger.convert_to_shares(100, total_assets=0)


def test_mul_div_rounding():
    assert mul_div(10, 10, 3) == 33
    assert mul_div(10, 10, 3, round_up=True) == 34
    assert mul_div(9, 10, 3, round_up=True) == 30
