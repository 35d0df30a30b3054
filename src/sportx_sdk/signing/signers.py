"""Signers for SportX payloads.

Works with two kinds of credential, picked once when the client is built:
- a raw private key (signed locally with eth_account)
- a web3 provider that signs out of process (wallet extensions, remote
  signers, nodes with unlocked accounts)
"""

import json
from typing import Any, Dict, Optional, Protocol

import structlog
from eth_account import Account
from eth_account.messages import encode_defunct
from eth_utils import to_checksum_address, to_hex

from ..errors import ConfigurationError, SigningError

logger = structlog.get_logger(__name__)

SIGN_TYPED_DATA_V4 = "eth_signTypedData_v4"
SIGN_TYPED_DATA = "eth_signTypedData"
PERSONAL_SIGN = "personal_sign"


class TypedDataSigner(Protocol):
    """Protocol for signers that can sign SportX payloads."""

    async def get_address(self) -> str:
        """Get the signer's address."""
        ...

    async def sign_typed_data(self, payload: Dict[str, Any]) -> str:
        """Sign EIP-712 typed data.

        Args:
            payload: Dict with types, primaryType, domain and message

        Returns:
            Signature as hex string
        """
        ...

    async def sign_message(self, message: bytes) -> str:
        """Sign raw bytes with the EIP-191 personal message scheme."""
        ...


class PrivateKeySigner:
    """Signs locally with a private key, no provider involved."""

    def __init__(self, private_key: str):
        try:
            self._account = Account.from_key(private_key)
        except (ValueError, TypeError) as e:
            raise ConfigurationError(f"Invalid private key: {e}") from e

    @property
    def address(self) -> str:
        return self._account.address

    async def get_address(self) -> str:
        return self._account.address

    async def sign_typed_data(self, payload: Dict[str, Any]) -> str:
        signed_message = self._account.sign_typed_data(full_message=payload)
        return to_hex(signed_message.signature)

    async def sign_message(self, message: bytes) -> str:
        signed_message = self._account.sign_message(encode_defunct(primitive=message))
        return to_hex(signed_message.signature)


def _json_safe(value: Any) -> Any:
    """Render integers as decimal strings so 256-bit values survive JSON."""
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return str(value)
    if isinstance(value, dict):
        return {key: _json_safe(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_json_safe(item) for item in value]
    return value


def provider_is_metamask(web3: Any) -> bool:
    provider = getattr(web3, "provider", None)
    return bool(
        getattr(provider, "is_metamask", False) or getattr(provider, "isMetaMask", False)
    )


class ProviderSigner:
    """Forwards signing requests to a web3 provider.

    MetaMask-compatible providers get ``eth_signTypedData_v4`` with a JSON
    string; anything else gets the older ``eth_signTypedData`` with the
    payload object.
    """

    def __init__(self, web3: Any, account_index: int = 0):
        self._web3 = web3
        self._account_index = account_index
        self._address: Optional[str] = None
        self.typed_data_method = (
            SIGN_TYPED_DATA_V4 if provider_is_metamask(web3) else SIGN_TYPED_DATA
        )

    async def get_address(self) -> str:
        if self._address is None:
            accounts = await self._web3.eth.accounts
            if len(accounts) <= self._account_index:
                raise SigningError(
                    f"Provider exposes no account at index {self._account_index}"
                )
            self._address = to_checksum_address(accounts[self._account_index])
        return self._address

    async def _request(self, method: str, params: list) -> str:
        response = await self._web3.provider.make_request(method, params)
        if response.get("error"):
            error = response["error"]
            message = error.get("message") if isinstance(error, dict) else error
            raise SigningError(f"{method} failed: {message}")
        return response["result"]

    async def sign_typed_data(self, payload: Dict[str, Any]) -> str:
        address = await self.get_address()
        data = _json_safe(payload)
        logger.debug("provider_sign_typed_data", method=self.typed_data_method)
        if self.typed_data_method == SIGN_TYPED_DATA_V4:
            return await self._request(self.typed_data_method, [address, json.dumps(data)])
        return await self._request(self.typed_data_method, [address, data])

    async def sign_message(self, message: bytes) -> str:
        address = await self.get_address()
        return await self._request(PERSONAL_SIGN, [to_hex(message), address])


def create_signer(
    private_key: Optional[str] = None,
    web3: Any = None,
) -> TypedDataSigner:
    """Pick the signer for a credential.

    Args:
        private_key: Hex private key; wins when both are given
        web3: AsyncWeb3 whose provider signs on the caller's behalf

    Returns:
        A TypedDataSigner

    Raises:
        ConfigurationError: If neither credential is usable
    """
    if private_key:
        return PrivateKeySigner(private_key)
    if web3 is not None:
        return ProviderSigner(web3)
    raise ConfigurationError("Neither private_key nor a signing provider provided.")
