"""boost_vault package root.

Share accounting and harvest reinvestment for a vault that routes a single
base asset into a yield vault and a boost staking contract layered on top of it.

- See :py:class:`boost_vault.vault.BoostedVault` to get started

- In-memory collaborators for simulation and tests live in :py:mod:`boost_vault.testing`

- Beefy vault and boost adapters live in :py:mod:`boost_vault.beefy`
"""

import sys


#: Minimum required Python version to run this package
MIN_PYTHON_VERSION = (3, 10)


def _check_python_version():
    """Try early abort if the Python version is too old."""
    if sys.version_info < MIN_PYTHON_VERSION:
        raise RuntimeError(f"boost-vault needs Python {MIN_PYTHON_VERSION[0]}.{MIN_PYTHON_VERSION[1]} or later")


_check_python_version()
