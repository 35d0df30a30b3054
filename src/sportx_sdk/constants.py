"""Protocol constants for the SportX relayer."""

from enum import Enum


class Environments(str, Enum):
    """Relayer deployments a client can target."""

    PRODUCTION = "production"
    SPORTX_DEV = "sportx_dev"


class MainchainNetworks(str, Enum):
    MAIN = "main"
    GOERLI = "goerli"


class SidechainNetworks(str, Enum):
    MATIC = "matic"
    MUMBAI = "mumbai"


class Tokens(str, Enum):
    DAI = "DAI"
    WETH = "WETH"
    USDC = "USDC"


# Seconds allowed for a relayer connection or call before it is abandoned
RELAYER_TIMEOUT = 5.0

RELAYER_URLS = {
    Environments.PRODUCTION: "https://app.api.sportx.bet",
    Environments.SPORTX_DEV: "https://dev.api.sportx.bet",
}

LEGACY_RELAYER_URLS = {
    Environments.PRODUCTION: "https://api.sportx.bet",
    Environments.SPORTX_DEV: "https://dev-legacy.api.sportx.bet",
}

RELAYER_HTTP_ENDPOINTS = {
    "METADATA": "/metadata",
    "LEAGUES": "/leagues/active",
    "SPORTS": "/sports",
    "ACTIVE_MARKETS": "/markets/active",
    "HISTORICAL_MARKETS": "/markets/find",
    "NEW_ORDER": "/orders/new",
    "CANCEL_ORDERS": "/orders/cancel",
    "FILL_ORDERS": "/orders/fill/meta",
    "SUGGEST_ORDERS": "/orders/suggest",
    "ORDERS": "/orders",
    "PENDING_BETS": "/trades/pending",
    "TRADES": "/trades",
    "DAI_APPROVAL": "/user/approve-proxy-dai",
    "REALTIME_TOKEN": "/user/token",
}

LEGACY_HTTP_ENDPOINTS = {
    "LEAGUES": "/leagues",
    "SPORTS": "/sports",
    "PENDING_BETS": "/pending-bets",
    "ORDERS": "/orders",
    "ACTIVE_ORDERS": "/active-orders",
}

LEGACY_SOCKET_KEYS = {
    "METADATA": "metadata",
    "ACTIVE_MARKETS": "active_markets",
    "NEW_ORDER": "new_order",
    "CANCEL_ORDER": "cancel_order",
}

MAINCHAIN_NETWORKS = {
    Environments.PRODUCTION: MainchainNetworks.MAIN,
    Environments.SPORTX_DEV: MainchainNetworks.GOERLI,
}

SIDECHAIN_NETWORKS = {
    Environments.PRODUCTION: SidechainNetworks.MATIC,
    Environments.SPORTX_DEV: SidechainNetworks.MUMBAI,
}

TOKEN_ADDRESSES = {
    MainchainNetworks.MAIN: {
        Tokens.DAI: "0x6B175474E89094C44Da98b954EedeAC495271d0F",
        Tokens.WETH: "0xC02aaA39b223FE8D0A0e5C4F27eAD9083C756Cc2",
        Tokens.USDC: "0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48",
    },
    MainchainNetworks.GOERLI: {
        Tokens.DAI: "0xdc31ee1784292379fbb2964b3b9c4124d8f89c60",
        Tokens.WETH: "0xb4fbf271143f4fbf7b91a5ded31805e42b2208d6",
    },
    SidechainNetworks.MATIC: {
        Tokens.DAI: "0x8f3Cf7ad23Cd3CaDbD9735AFf958023239c6A063",
        Tokens.WETH: "0x7ceB23fD6bC0adD59E62ac25578270cFf1b9f619",
        Tokens.USDC: "0x2791Bca1f2de4661ED88A30C99A7a9449Aa84174",
    },
    SidechainNetworks.MUMBAI: {
        Tokens.DAI: "0x001b3b4d0f3714ca98ba10f6042daebf0b1b7b6f",
        Tokens.WETH: "0xa6fa4fb5f76172d178d61b04b0ecd319c5d1c0aa",
    },
}

# percentageOdds are fixed point with 20 decimals; 10**20 means certainty
ODDS_PRECISION = 10**20

DAI_PERMIT_ABI = [
    {
        "constant": True,
        "inputs": [{"name": "", "type": "address"}],
        "name": "nonces",
        "outputs": [{"name": "", "type": "uint256"}],
        "stateMutability": "view",
        "type": "function",
    },
    {
        "constant": True,
        "inputs": [{"name": "account", "type": "address"}],
        "name": "balanceOf",
        "outputs": [{"name": "", "type": "uint256"}],
        "stateMutability": "view",
        "type": "function",
    },
]

ERC20_ABI = [
    {
        "constant": True,
        "inputs": [{"name": "account", "type": "address"}],
        "name": "balanceOf",
        "outputs": [{"name": "", "type": "uint256"}],
        "stateMutability": "view",
        "type": "function",
    },
]
