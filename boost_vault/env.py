"""JSON-RPC configuration from environment variables.

- Each chain has its own ``JSON_RPC_<NAME>`` variable, e.g. ``JSON_RPC_POLYGON``

- The variable holds a configuration line of one or more space separated URLs.
  ``mev+`` prefixed entries are transaction broadcast endpoints and are never used for reads.
"""

import os


#: Chain id to the name used in ``JSON_RPC_<NAME>`` environment variables
CHAIN_NAMES = {
    1: "ethereum",
    56: "binance",
    137: "polygon",
    8453: "base",
    42161: "arbitrum",
}


def get_json_rpc_env(chain: int) -> str:
    """Map chain id to the environment variable holding its JSON-RPC URL."""
    chain_name = CHAIN_NAMES.get(chain)
    assert chain_name, f"CHAIN_NAMES not configured for chain {chain}"
    return f"JSON_RPC_{chain_name.upper()}"


def read_json_rpc_urls(chain: int) -> list[str]:
    """Parse the configuration line of a chain into read endpoints.

    :return:
        Endpoints in the configured order, duplicates dropped

    :raise ValueError:
        The variable is unset, or holds only ``mev+`` entries
    """
    assert type(chain) is int, f"Chain id must be int, got {type(chain)}"
    env_var = get_json_rpc_env(chain)
    configuration_line = os.environ.get(env_var, "")

    urls = []
    for item in configuration_line.split():
        if item.startswith("mev+"):
            continue
        assert "://" in item, f"{env_var}: not an URL: {item}"
        if item not in urls:
            urls.append(item)

    if not urls:
        raise ValueError(f"{env_var} has no read endpoints for chain {chain}, got '{configuration_line}'")
    return urls


def read_json_rpc_url(chain: int) -> str:
    """First read endpoint of a chain."""
    return read_json_rpc_urls(chain)[0]
