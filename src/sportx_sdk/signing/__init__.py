"""SportX Signing Module.

Key components:
- Order hashing (packed keccak256, signed as a plain message)
- EIP-712 payloads for fills, cancellations and DAI permits
- Signers for private keys and delegated web3 providers

Example usage:
    ```python
    from sportx_sdk.signing import (
        CancelDetails,
        create_signer,
        get_cancel_order_eip712_payload,
    )

    signer = create_signer(private_key="0x...")
    payload = get_cancel_order_eip712_payload(
        CancelDetails(orders=["0x..."], message="Cancel my bets"),
        chain_id=1,
    )
    signature = await signer.sign_typed_data(payload)
    ```
"""

from ..types import CancelDetails, FillDetails, Fills, Permit
from .order_hash import (
    convert_to_contract_order,
    convert_to_legacy_contract_order,
    generate_salt,
    get_legacy_cancel_hash,
    get_legacy_order_hash,
    get_order_hash,
)
from .payloads import (
    create_eip712_domain,
    get_cancel_order_eip712_payload,
    get_dai_permit_eip712_payload,
    get_fill_order_eip712_payload,
    recover_message_signer,
    recover_typed_data_signer,
    verify_typed_data_signature,
)
from .signers import (
    PrivateKeySigner,
    ProviderSigner,
    TypedDataSigner,
    create_signer,
    provider_is_metamask,
)
from .types import (
    CANCEL_ORDER_TYPES,
    DAI_PERMIT_TYPES,
    FILL_ORDER_TYPES,
)

__all__ = [
    # Types
    "CancelDetails",
    "FillDetails",
    "Fills",
    "Permit",
    "CANCEL_ORDER_TYPES",
    "DAI_PERMIT_TYPES",
    "FILL_ORDER_TYPES",
    # Order hashing
    "convert_to_contract_order",
    "convert_to_legacy_contract_order",
    "generate_salt",
    "get_order_hash",
    "get_legacy_order_hash",
    "get_legacy_cancel_hash",
    # Payloads
    "create_eip712_domain",
    "get_fill_order_eip712_payload",
    "get_cancel_order_eip712_payload",
    "get_dai_permit_eip712_payload",
    "recover_typed_data_signer",
    "recover_message_signer",
    "verify_typed_data_signature",
    # Signers
    "TypedDataSigner",
    "PrivateKeySigner",
    "ProviderSigner",
    "create_signer",
    "provider_is_metamask",
]
