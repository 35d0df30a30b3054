"""EIP-712 payload construction for SportX.

Payloads are full typed-data documents (types, primaryType, domain,
message) so they can be signed locally with eth_account or forwarded to a
wallet over JSON-RPC unchanged.
"""

from typing import Any, Dict, Optional, TypedDict

from eth_account import Account
from eth_account.messages import encode_defunct, encode_typed_data
from eth_utils import is_address, to_checksum_address

from ..types import CancelDetails, FillDetails, Permit
from .types import (
    CANCEL_ORDER_TYPES,
    DAI_DOMAIN_NAME,
    DAI_DOMAIN_VERSION,
    DAI_PERMIT_TYPES,
    EIP712_DOMAIN_TYPE,
    EIP712_DOMAIN_TYPE_NO_CONTRACT,
    FILL_ORDER_TYPES,
    SPORTX_DOMAIN_NAME,
    SPORTX_DOMAIN_VERSION,
)


class EIP712Domain(TypedDict, total=False):
    """EIP-712 domain separator."""

    name: str
    version: str
    chainId: int
    verifyingContract: str


def create_eip712_domain(
    name: str,
    version: str,
    chain_id: int,
    verifying_contract: Optional[str] = None,
) -> EIP712Domain:
    """Create an EIP-712 domain.

    Args:
        name: Domain name
        version: Domain version
        chain_id: Chain ID of the mainchain network
        verifying_contract: Contract that verifies the signature (optional)

    Returns:
        EIP-712 domain dictionary

    Raises:
        ValueError: If the verifying contract address is invalid
    """
    domain: EIP712Domain = {
        "name": name,
        "version": version,
        "chainId": chain_id,
    }
    if verifying_contract is not None:
        if not is_address(verifying_contract):
            raise ValueError(f"Invalid verifying contract: {verifying_contract}")
        domain["verifyingContract"] = to_checksum_address(verifying_contract)
    return domain


def get_fill_order_eip712_payload(
    fill_details: FillDetails,
    chain_id: int,
    fill_hasher_address: str,
) -> Dict[str, Any]:
    """Typed data the taker signs to fill a batch of orders.

    Args:
        fill_details: Orders, maker signatures, taker amounts and fill salt
        chain_id: Mainchain chain ID
        fill_hasher_address: EIP-712 fill hasher contract for the environment

    Returns:
        Full EIP-712 typed-data document
    """
    return {
        "types": {
            "EIP712Domain": EIP712_DOMAIN_TYPE,
            **FILL_ORDER_TYPES,
        },
        "primaryType": "Details",
        "domain": create_eip712_domain(
            SPORTX_DOMAIN_NAME,
            SPORTX_DOMAIN_VERSION,
            chain_id,
            fill_hasher_address,
        ),
        "message": fill_details.to_eip712(),
    }


def get_cancel_order_eip712_payload(
    cancel_details: CancelDetails,
    chain_id: int,
) -> Dict[str, Any]:
    """Typed data a maker signs to cancel orders on the current relayer."""
    return {
        "types": {
            "EIP712Domain": EIP712_DOMAIN_TYPE_NO_CONTRACT,
            **CANCEL_ORDER_TYPES,
        },
        "primaryType": "Details",
        "domain": create_eip712_domain(
            SPORTX_DOMAIN_NAME, SPORTX_DOMAIN_VERSION, chain_id
        ),
        "message": {
            "message": cancel_details.message,
            "orders": list(cancel_details.orders),
        },
    }


def get_dai_permit_eip712_payload(
    permit: Permit,
    chain_id: int,
    dai_address: str,
) -> Dict[str, Any]:
    """Typed data for a DAI permit, verified by the DAI contract itself."""
    return {
        "types": {
            "EIP712Domain": EIP712_DOMAIN_TYPE,
            **DAI_PERMIT_TYPES,
        },
        "primaryType": "Permit",
        "domain": create_eip712_domain(
            DAI_DOMAIN_NAME, DAI_DOMAIN_VERSION, chain_id, dai_address
        ),
        "message": permit.to_dict(),
    }


def _signature_bytes(signature: str) -> bytes:
    return bytes.fromhex(signature[2:] if signature.startswith("0x") else signature)


def recover_typed_data_signer(payload: Dict[str, Any], signature: str) -> str:
    """Recover the address that produced an EIP-712 signature (EOA only)."""
    signable_message = encode_typed_data(full_message=payload)
    return Account.recover_message(
        signable_message, signature=_signature_bytes(signature)
    )


def recover_message_signer(message: bytes, signature: str) -> str:
    """Recover the address that signed raw bytes with the plain message scheme."""
    signable_message = encode_defunct(primitive=message)
    return Account.recover_message(
        signable_message, signature=_signature_bytes(signature)
    )


def verify_typed_data_signature(
    payload: Dict[str, Any],
    signature: str,
    expected_signer: str,
) -> bool:
    """Verify an EIP-712 signature locally.

    Note: This only works for EOA signatures. Contract wallets verify
    on-chain via EIP-1271.

    Args:
        payload: Full EIP-712 typed-data document
        signature: Signature hex string
        expected_signer: Expected signer address

    Returns:
        True if signature is valid and from expected signer
    """
    try:
        recovered = recover_typed_data_signer(payload, signature)
        return recovered.lower() == expected_signer.lower()
    except Exception:
        return False
