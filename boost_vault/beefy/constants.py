"""Beefy deployments we have tested against."""

from eth_typing import HexAddress

#: Polygon chain id
POLYGON_CHAIN_ID = 137

#: Balancer MaticX/bb-a-WMATIC pool token on Polygon, the want token of the vault below
MATICX_BBA_WMATIC: HexAddress = "0xE78b25c06dB117fdF8F98583CDaaa6c92B79E917"

#: Beefy vault for MaticX/bb-a-WMATIC on Polygon
BEEFY_VAULT: HexAddress = "0x4C98CB046c3eb7e3ae7Eb49a33D6f3386Ec2b9D9"

#: Beefy boost staking the mooTokens of :py:data:`BEEFY_VAULT`
BEEFY_BOOST: HexAddress = "0x2e5598608A4436dBb9c34CE6862B5AF882F49a6B"

#: Holds MaticX/bb-a-WMATIC pool tokens, used in fork testing
MATICX_BBA_WMATIC_WHALE: HexAddress = "0xd00297757a4bf8cca6305a45898be5791d642f79"
