"""EIP-712 type definitions for SportX payloads."""

EIP712_DOMAIN_TYPE = [
    {"name": "name", "type": "string"},
    {"name": "version", "type": "string"},
    {"name": "chainId", "type": "uint256"},
    {"name": "verifyingContract", "type": "address"},
]

# Cancellations are not bound to a contract
EIP712_DOMAIN_TYPE_NO_CONTRACT = [
    {"name": "name", "type": "string"},
    {"name": "version", "type": "string"},
    {"name": "chainId", "type": "uint256"},
]

SPORTX_DOMAIN_NAME = "SportX"
SPORTX_DOMAIN_VERSION = "1.0"

DAI_DOMAIN_NAME = "Dai Stablecoin"
DAI_DOMAIN_VERSION = "1"

ORDER_TYPE = [
    {"name": "marketHash", "type": "bytes32"},
    {"name": "baseToken", "type": "address"},
    {"name": "totalBetSize", "type": "uint256"},
    {"name": "percentageOdds", "type": "uint256"},
    {"name": "expiry", "type": "uint256"},
    {"name": "salt", "type": "uint256"},
    {"name": "maker", "type": "address"},
    {"name": "executor", "type": "address"},
    {"name": "isMakerBettingOutcomeOne", "type": "bool"},
]

FILL_ORDER_TYPES = {
    "Details": [
        {"name": "action", "type": "string"},
        {"name": "market", "type": "string"},
        {"name": "betting", "type": "string"},
        {"name": "stake", "type": "string"},
        {"name": "odds", "type": "string"},
        {"name": "returning", "type": "string"},
        {"name": "fills", "type": "FillObject"},
    ],
    "FillObject": [
        {"name": "orders", "type": "Order[]"},
        {"name": "makerSigs", "type": "bytes[]"},
        {"name": "takerAmounts", "type": "uint256[]"},
        {"name": "fillSalt", "type": "uint256"},
    ],
    "Order": ORDER_TYPE,
}

CANCEL_ORDER_TYPES = {
    "Details": [
        {"name": "message", "type": "string"},
        {"name": "orders", "type": "string[]"},
    ],
}

DAI_PERMIT_TYPES = {
    "Permit": [
        {"name": "holder", "type": "address"},
        {"name": "spender", "type": "address"},
        {"name": "nonce", "type": "uint256"},
        {"name": "expiry", "type": "uint256"},
        {"name": "allowed", "type": "bool"},
    ],
}

# abi.encodePacked layout of an order, in hashing order
ORDER_HASH_TYPES = [
    "bytes32",
    "address",
    "uint256",
    "uint256",
    "uint256",
    "uint256",
    "address",
    "address",
    "bool",
]

LEGACY_ORDER_HASH_TYPES = [
    "bytes32",
    "address",
    "uint256",
    "uint256",
    "uint256",
    "uint256",
    "address",
    "address",
    "address",
    "uint256",
    "uint256",
    "bool",
]
