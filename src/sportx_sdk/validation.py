"""Request validation for the SportX relayer.

Validators return the string ``"OK"`` or a human-readable description of the
first violation found. Callers turn anything other than ``"OK"`` into an
``APISchemaError`` before any signing or network work.
"""

import re
import time
from typing import Any, Mapping

from eth_utils import is_address as _is_eth_address

from .constants import ODDS_PRECISION

OK = "OK"

_HEX_STRING = re.compile(r"0x[0-9a-fA-F]*")
_BYTES32 = re.compile(r"0x[0-9a-fA-F]{64}")
_DECIMAL_STRING = re.compile(r"[0-9]+")

_RELAYER_ORDER_FIELDS = (
    "marketHash",
    "maker",
    "totalBetSize",
    "percentageOdds",
    "expiry",
    "executor",
    "baseToken",
    "salt",
    "isMakerBettingOutcomeOne",
)

_FILL_DETAILS_METADATA_FIELDS = (
    "action",
    "market",
    "betting",
    "stake",
    "odds",
    "returning",
)


def is_hex_string(value: Any) -> bool:
    return isinstance(value, str) and bool(_HEX_STRING.fullmatch(value))


def is_bytes32(value: Any) -> bool:
    """True for a 0x-prefixed hex string of exactly 32 bytes."""
    return isinstance(value, str) and bool(_BYTES32.fullmatch(value))


def is_address(value: Any) -> bool:
    """True for a hex address; mixed-case input must carry a valid checksum."""
    return isinstance(value, str) and _is_eth_address(value)


def is_boolean(value: Any) -> bool:
    return isinstance(value, bool)


def is_integer(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def is_big_number(value: Any) -> bool:
    """True for a non-negative integer written as a decimal string."""
    return isinstance(value, str) and bool(_DECIMAL_STRING.fullmatch(value))


def is_positive_big_number(value: Any) -> bool:
    return is_big_number(value) and int(value) > 0


def is_hex_string_list(value: Any) -> bool:
    return isinstance(value, list) and all(is_hex_string(item) for item in value)


def is_bytes32_list(value: Any) -> bool:
    return isinstance(value, list) and all(is_bytes32(item) for item in value)


def validate_new_order_schema(order: Any) -> str:
    if not isinstance(order, Mapping):
        return "order is not an object"
    if not is_bytes32(order.get("marketHash")):
        return "marketHash is not a 32-byte hex string"
    if not is_positive_big_number(order.get("totalBetSize")):
        return "totalBetSize as a number is not positive"
    percentage_odds = order.get("percentageOdds")
    if not is_positive_big_number(percentage_odds):
        return "percentageOdds as a number is not positive"
    if int(percentage_odds) >= ODDS_PRECISION:
        return f"percentageOdds must be less than {ODDS_PRECISION}"
    expiry = order.get("expiry")
    if not is_integer(expiry):
        return "expiry is not an integer"
    if expiry <= int(time.time()):
        return "expiry is in the past"
    if not is_boolean(order.get("isMakerBettingOutcomeOne")):
        return "isMakerBettingOutcomeOne is not a boolean"
    if not is_address(order.get("baseToken")):
        return "baseToken is not a valid address"
    return OK


def validate_signed_relayer_maker_order(order: Any) -> str:
    if not isinstance(order, Mapping):
        return "order is not an object"
    missing = [name for name in _RELAYER_ORDER_FIELDS if name not in order]
    if missing:
        return f"order is missing fields: {', '.join(missing)}"
    if not is_bytes32(order["marketHash"]):
        return "marketHash is not a 32-byte hex string"
    for name in ("maker", "executor", "baseToken"):
        if not is_address(order[name]):
            return f"{name} is not a valid address"
    for name in ("totalBetSize", "percentageOdds", "salt"):
        if not is_big_number(order[name]):
            return f"{name} is not a valid number string"
    if not is_big_number(order["expiry"]):
        return "expiry is not a valid number string"
    if not is_boolean(order["isMakerBettingOutcomeOne"]):
        return "isMakerBettingOutcomeOne is not a boolean"
    signature = order.get("signature")
    if not is_hex_string(signature) or len(signature) % 2:
        return "signature is not a hex string"
    return OK


def validate_fill_details_metadata(metadata: Any) -> str:
    if not isinstance(metadata, Mapping):
        return "fillDetailsMetadata is not an object"
    for name in _FILL_DETAILS_METADATA_FIELDS:
        if name in metadata and not isinstance(metadata[name], str):
            return f"{name} is not a string"
    return OK


def validate_approve_proxy_payload(payload: Any) -> str:
    if not isinstance(payload, Mapping):
        return "approveProxyPayload is not an object"
    for name in ("owner", "spender", "tokenAddress"):
        if not is_address(payload.get(name)):
            return f"approveProxyPayload.{name} is not a valid address"
    if not is_big_number(payload.get("amount")):
        return "approveProxyPayload.amount is not a valid number string"
    if not is_hex_string(payload.get("signature")):
        return "approveProxyPayload.signature is not a hex string"
    return OK


def validate_pending_bets_request(request: Any) -> str:
    if not isinstance(request, Mapping):
        return "request is not an object"
    if not is_address(request.get("bettor")):
        return "bettor is not a valid address"
    for name in ("startDate", "endDate"):
        if name in request and not is_integer(request[name]):
            return f"{name} is not an integer"
    return OK


def validate_get_trades_request(request: Any) -> str:
    if not isinstance(request, Mapping):
        return "request is not an object"
    for name in ("startDate", "endDate", "pageSize"):
        if name in request and not is_integer(request[name]):
            return f"{name} is not an integer"
    if "pageSize" in request and not 0 < request["pageSize"] <= 1000:
        return "pageSize must be between 1 and 1000"
    for name in ("bettor", "baseToken", "affiliate"):
        if name in request and not is_address(request[name]):
            return f"{name} is not a valid address"
    for name in ("settled", "maker"):
        if name in request and not is_boolean(request[name]):
            return f"{name} is not a boolean"
    if "marketHashes" in request and not is_hex_string_list(request["marketHashes"]):
        return "marketHashes is not a list of hex strings"
    if "paginationKey" in request and not isinstance(request["paginationKey"], str):
        return "paginationKey is not a string"
    return OK
