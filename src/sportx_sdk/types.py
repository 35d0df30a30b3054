"""Types for the SportX relayer.

Wire types keep the relayer's camelCase keys and are TypedDicts so they can
be posted as-is. Values that get hashed or signed are dataclasses.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, TypedDict


class NewOrder(TypedDict):
    """Caller intent for a new maker order."""

    marketHash: str
    totalBetSize: str
    """Base token amount in its smallest unit, as a decimal string."""

    percentageOdds: str
    """Implied odds scaled by 10**20, as a decimal string."""

    expiry: int
    """Unix timestamp in seconds."""

    isMakerBettingOutcomeOne: bool
    baseToken: str


class RelayerMakerOrder(TypedDict):
    marketHash: str
    maker: str
    totalBetSize: str
    percentageOdds: str
    expiry: str
    executor: str
    baseToken: str
    salt: str
    isMakerBettingOutcomeOne: bool


class SignedRelayerMakerOrder(RelayerMakerOrder):
    signature: str


class LegacyRelayerMakerOrder(RelayerMakerOrder):
    relayer: str
    relayerMakerFee: str
    relayerTakerFee: str


class SignedLegacyRelayerMakerOrder(LegacyRelayerMakerOrder):
    signature: str


class FillDetailsMetadata(TypedDict, total=False):
    """Human-readable summary shown to the taker when signing a fill."""

    action: str
    market: str
    betting: str
    stake: str
    odds: str
    returning: str


DEFAULT_FILL_DETAILS_METADATA: FillDetailsMetadata = {
    "action": "N/A",
    "market": "N/A",
    "betting": "N/A",
    "stake": "N/A",
    "odds": "N/A",
    "returning": "N/A",
}


class ApproveProxyPayload(TypedDict):
    owner: str
    spender: str
    tokenAddress: str
    amount: str
    signature: str


class PendingBetsRequest(TypedDict, total=False):
    bettor: str
    startDate: int
    endDate: int


class GetTradesRequest(TypedDict, total=False):
    startDate: int
    endDate: int
    bettor: str
    settled: bool
    marketHashes: List[str]
    baseToken: str
    maker: bool
    affiliate: str
    pageSize: int
    paginationKey: str


class Metadata(TypedDict, total=False):
    """Relayer-wide configuration snapshot."""

    executorAddress: str
    relayerAddress: str
    relayerMakerFee: str
    relayerTakerFee: str
    minimumOrderSize: str
    oddsLadderStepSize: int


class RelayerResponse(TypedDict, total=False):
    status: str
    data: Any
    reason: str


@dataclass
class ContractOrder:
    """On-chain representation of a maker order."""

    market_hash: str
    base_token: str
    total_bet_size: int
    percentage_odds: int
    expiry: int
    salt: int
    maker: str
    executor: str
    is_maker_betting_outcome_one: bool

    def to_eip712(self) -> Dict[str, Any]:
        """Message form used inside EIP-712 payloads."""
        return {
            "marketHash": self.market_hash,
            "baseToken": self.base_token,
            "totalBetSize": self.total_bet_size,
            "percentageOdds": self.percentage_odds,
            "expiry": self.expiry,
            "salt": self.salt,
            "maker": self.maker,
            "executor": self.executor,
            "isMakerBettingOutcomeOne": self.is_maker_betting_outcome_one,
        }


@dataclass
class LegacyContractOrder(ContractOrder):
    relayer: str = ""
    relayer_maker_fee: int = 0
    relayer_taker_fee: int = 0


@dataclass
class Fills:
    orders: List[ContractOrder]
    maker_sigs: List[str]
    taker_amounts: List[int]
    fill_salt: int

    def __post_init__(self):
        if not (len(self.orders) == len(self.maker_sigs) == len(self.taker_amounts)):
            raise ValueError(
                "orders, maker_sigs and taker_amounts must have the same length"
            )


@dataclass
class FillDetails:
    """Everything the taker signs when filling a batch of orders."""

    fills: Fills
    metadata: FillDetailsMetadata = field(
        default_factory=lambda: dict(DEFAULT_FILL_DETAILS_METADATA)
    )

    def to_eip712(self) -> Dict[str, Any]:
        return {
            **DEFAULT_FILL_DETAILS_METADATA,
            **self.metadata,
            "fills": {
                "orders": [order.to_eip712() for order in self.fills.orders],
                "makerSigs": list(self.fills.maker_sigs),
                "takerAmounts": list(self.fills.taker_amounts),
                "fillSalt": self.fills.fill_salt,
            },
        }


@dataclass
class CancelDetails:
    orders: List[str]
    message: str = "N/A"


@dataclass
class Permit:
    """DAI-style permit granting the transfer proxy an allowance."""

    holder: str
    spender: str
    nonce: int
    expiry: int
    allowed: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "holder": self.holder,
            "spender": self.spender,
            "nonce": self.nonce,
            "expiry": self.expiry,
            "allowed": self.allowed,
        }

