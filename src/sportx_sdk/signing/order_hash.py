"""Order hashing for SportX.

An order hash is keccak256 over the tightly packed order fields. The maker
signs that hash with the plain message scheme, so the same hash is what the
relayer and the executor contract recompute.
"""

import secrets
from typing import Any, List, Mapping

from eth_abi.packed import encode_packed
from eth_utils import decode_hex, keccak, to_checksum_address

from ..types import ContractOrder, LegacyContractOrder
from .types import LEGACY_ORDER_HASH_TYPES, ORDER_HASH_TYPES


def convert_to_contract_order(order: Mapping[str, Any]) -> ContractOrder:
    """Convert a relayer order (string numbers) to its on-chain form."""
    return ContractOrder(
        market_hash=order["marketHash"],
        base_token=to_checksum_address(order["baseToken"]),
        total_bet_size=int(order["totalBetSize"]),
        percentage_odds=int(order["percentageOdds"]),
        expiry=int(order["expiry"]),
        salt=int(order["salt"]),
        maker=to_checksum_address(order["maker"]),
        executor=to_checksum_address(order["executor"]),
        is_maker_betting_outcome_one=order["isMakerBettingOutcomeOne"],
    )


def convert_to_legacy_contract_order(order: Mapping[str, Any]) -> LegacyContractOrder:
    base = convert_to_contract_order(order)
    return LegacyContractOrder(
        market_hash=base.market_hash,
        base_token=base.base_token,
        total_bet_size=base.total_bet_size,
        percentage_odds=base.percentage_odds,
        expiry=base.expiry,
        salt=base.salt,
        maker=base.maker,
        executor=base.executor,
        is_maker_betting_outcome_one=base.is_maker_betting_outcome_one,
        relayer=to_checksum_address(order["relayer"]),
        relayer_maker_fee=int(order["relayerMakerFee"]),
        relayer_taker_fee=int(order["relayerTakerFee"]),
    )


def _bytes32(value: str) -> bytes:
    raw = decode_hex(value)
    if len(raw) != 32:
        raise ValueError(f"Expected 32 bytes, got {len(raw)}: {value}")
    return raw


def get_order_hash(order: ContractOrder) -> str:
    """Hash an order the way the executor contract does.

    Args:
        order: Order in its on-chain form

    Returns:
        bytes32 hex string

    Raises:
        ValueError: If the market hash is not 32 bytes
    """
    encoded = encode_packed(
        ORDER_HASH_TYPES,
        [
            _bytes32(order.market_hash),
            order.base_token,
            order.total_bet_size,
            order.percentage_odds,
            order.expiry,
            order.salt,
            order.maker,
            order.executor,
            order.is_maker_betting_outcome_one,
        ],
    )
    return "0x" + keccak(encoded).hex()


def get_legacy_order_hash(order: LegacyContractOrder) -> str:
    """Hash an order for the legacy relayer, which also commits to fees."""
    encoded = encode_packed(
        LEGACY_ORDER_HASH_TYPES,
        [
            _bytes32(order.market_hash),
            order.base_token,
            order.total_bet_size,
            order.percentage_odds,
            order.expiry,
            order.salt,
            order.maker,
            order.executor,
            order.relayer,
            order.relayer_maker_fee,
            order.relayer_taker_fee,
            order.is_maker_betting_outcome_one,
        ],
    )
    return "0x" + keccak(encoded).hex()


def get_legacy_cancel_hash(order_hashes: List[str]) -> bytes:
    """keccak256(hash_1 || ... || hash_n || true), signed as a plain message.

    Only the legacy relayer accepts this; the current relayer expects an
    EIP-712 cancellation instead.
    """
    encoded = encode_packed(
        ["bytes32"] * len(order_hashes) + ["bool"],
        [_bytes32(order_hash) for order_hash in order_hashes] + [True],
    )
    return keccak(encoded)


def generate_salt() -> str:
    """Fresh random 256-bit salt as a decimal string."""
    return str(int.from_bytes(secrets.token_bytes(32), "big"))
