"""Run a boosted vault against in-memory collaborators and print the share price after each step.

Usage:

.. code-block:: shell

    LOG_LEVEL=info python scripts/simulate-boosted-vault.py

"""

from tabulate import tabulate

from boost_vault.testing import FixedRateSwapper, MockBoostSource, MockToken, MockYieldSource
from boost_vault.utils import setup_console_logging
from boost_vault.vault import BoostedVault

VAULT = "0x1000000000000000000000000000000000000001"
OWNER = "0x2000000000000000000000000000000000000002"
ALICE = "0x3000000000000000000000000000000000000003"
BOB = "0x4000000000000000000000000000000000000004"


def main():
    setup_console_logging()

    usdc = MockToken("0x5000000000000000000000000000000000000005", "USDC", decimals=6, operator=VAULT)
    bifi = MockToken("0x6000000000000000000000000000000000000006", "BIFI", decimals=18, operator=VAULT)
    yield_source = MockYieldSource("0x7000000000000000000000000000000000000007", usdc, operator=VAULT)
    boost = MockBoostSource("0x8000000000000000000000000000000000000008", yield_source, reward_token=bifi, operator=VAULT)
    # 1 BIFI = 400 USDC
    swapper = FixedRateSwapper(bifi, usdc, operator=VAULT, numerator=400 * 10**6, denominator=10**18)

    vault = BoostedVault(VAULT)
    vault.initialize(OWNER, usdc, yield_source, boost, swapper=swapper)

    for holder in (ALICE, BOB):
        usdc.mint(holder, 10_000 * 10**6)
        usdc.approve(holder, VAULT, 10_000 * 10**6)

    rows = []

    def record(step: str):
        status = vault.fetch_status()
        rows.append([step, status.total_shares, status.total_assets, status.boosted_position, f"{status.share_price:.6f}"])

    vault.deposit(1_000 * 10**6, ALICE)
    record("Alice deposits 1000 USDC")

    yield_source.accrue(50 * 10**6)
    record("Yield vault earns 50 USDC")

    vault.deposit(2_000 * 10**6, BOB)
    record("Bob deposits 2000 USDC")

    boost.add_rewards(10**17)
    vault.harvest(OWNER)
    record("Harvest 0.1 BIFI")

    vault.withdraw(500 * 10**6, receiver=ALICE, owner=ALICE)
    record("Alice withdraws 500 USDC")

    vault.redeem(vault.balance_of(BOB), receiver=BOB, owner=BOB)
    record("Bob redeems all shares")

    print(tabulate(rows, headers=["Step", "Shares", "Assets", "Staked position", "Share price"], tablefmt="fancy_grid"))


if __name__ == "__main__":
    main()
