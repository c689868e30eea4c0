"""Beefy vault and boost adapters.

- :py:class:`boost_vault.beefy.vault.BeefyYieldSource`: Beefy vault, positions are mooTokens
- :py:class:`boost_vault.beefy.boost.BeefyBoostSource`: Beefy boost staking mooTokens
- :py:class:`boost_vault.beefy.token.ERC20AssetToken`: the vault want token

- https://docs.beefy.finance/developer-documentation/vault-contract
"""
