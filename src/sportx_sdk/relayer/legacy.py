"""Legacy SportX relayer client.

The legacy relayer speaks Socket.IO for metadata, markets, new orders and
cancellations, and plain HTTP for read-only queries. Orders and
cancellations are signed as plain messages over packed keccak256 hashes;
nothing here uses EIP-712.
"""

import asyncio
from typing import Any, Dict, List, Optional

import socketio
from socketio import exceptions as socketio_exceptions
import structlog
from eth_utils import decode_hex

from ..config import LegacySportXConfig, resolve_legacy_config
from ..constants import LEGACY_HTTP_ENDPOINTS, LEGACY_SOCKET_KEYS
from ..errors import APIError, APISchemaError, APITimeoutError, ConfigurationError
from ..signing import (
    convert_to_legacy_contract_order,
    create_signer,
    generate_salt,
    get_legacy_cancel_hash,
    get_legacy_order_hash,
)
from ..types import Metadata, NewOrder, RelayerResponse, SignedLegacyRelayerMakerOrder
from ..validation import (
    OK,
    is_address,
    is_bytes32,
    is_bytes32_list,
    validate_new_order_schema,
)
from .http import RelayerHTTPClient, unwrap

logger = structlog.get_logger(__name__)

SUCCESS = "success"


class LegacySportX:
    """Client for the legacy SportX relayer.

    Example:
        ```python
        sportx = await new_legacy_sportx({
            "env": "production",
            "private_key": "0x...",
        })
        metadata = await sportx.get_metadata()
        await sportx.cancel_order(["0x..."])
        ```
    """

    def __init__(self, config: Optional[LegacySportXConfig] = None):
        config = config or {}
        self._config = resolve_legacy_config(config)
        self._signer = create_signer(
            private_key=self._config.private_key, web3=config.get("provider")
        )
        self._http = RelayerHTTPClient(
            self._config.relayer_url,
            timeout=self._config.timeout,
            http_client=config.get("http_client"),
        )
        self._socket = config.get("socket_client")
        if self._socket is None:
            self._socket = socketio.AsyncClient(reconnection=False)
        self._pushed: Dict[str, List[asyncio.Future]] = {}
        self._metadata: Optional[Metadata] = None
        self._initialized = False

    @property
    def metadata(self) -> Metadata:
        self._require_initialized()
        return dict(self._metadata)

    async def init(self) -> None:
        """Open the socket and cache metadata.

        Raises:
            ConfigurationError: If called twice
            APITimeoutError: If the socket does not connect in time
        """
        if self._initialized:
            raise ConfigurationError("Already initialized")

        for key in LEGACY_SOCKET_KEYS.values():
            self._socket.on(key, self._push_handler(key))
        try:
            await asyncio.wait_for(
                self._socket.connect(
                    self._config.relayer_url,
                    transports=["websocket"],
                    # Outlasts the deadline below so a slow handshake is a timeout
                    wait_timeout=self._config.timeout + 1,
                ),
                self._config.timeout,
            )
        except asyncio.TimeoutError:
            await self._socket.disconnect()
            raise APITimeoutError(
                f"Socket connection not established within {self._config.timeout}s"
            ) from None
        except socketio_exceptions.ConnectionError as e:
            await self._socket.disconnect()
            raise APIError(None, f"Can't connect to relayer: {e}") from e

        try:
            self._metadata = await self.get_metadata()
        except Exception:
            await self._socket.disconnect()
            raise
        self._initialized = True
        logger.info("legacy_sportx_initialized", env=self._config.env.value)

    async def close(self) -> None:
        await self._socket.disconnect()
        await self._http.close()

    def _require_initialized(self) -> None:
        if not self._initialized:
            raise ConfigurationError(
                "LegacySportX client is not initialized. Call init() first."
            )

    def _push_handler(self, key: str):
        async def handler(data: Any) -> None:
            for future in self._pushed.get(key, []):
                if not future.done():
                    future.set_result(data)

        return handler

    async def _emit_and_wait(self, key: str, payload: Any = None) -> RelayerResponse:
        """Emit ``key`` and wait for whichever settles first: the
        acknowledgement, a server push of the same event, or the deadline.
        The losers are cancelled.
        """
        pushed = asyncio.get_running_loop().create_future()
        self._pushed.setdefault(key, []).append(pushed)
        ack = asyncio.ensure_future(
            self._socket.call(key, payload, timeout=self._config.timeout)
        )
        try:
            done, _ = await asyncio.wait(
                {ack, pushed},
                timeout=self._config.timeout,
                return_when=asyncio.FIRST_COMPLETED,
            )
        finally:
            for future in (ack, pushed):
                if not future.done():
                    future.cancel()
            self._pushed[key].remove(pushed)

        if not done:
            raise APITimeoutError(
                f"Relayer did not answer '{key}' within {self._config.timeout}s"
            )
        try:
            response = done.pop().result()
        except socketio_exceptions.TimeoutError:
            raise APITimeoutError(
                f"Relayer did not answer '{key}' within {self._config.timeout}s"
            ) from None
        except socketio_exceptions.SocketIOError as e:
            raise APIError(None, f"Socket call '{key}' failed: {e}") from e

        logger.debug("relayer_socket_response", key=key)
        if not isinstance(response, dict) or response.get("status") != SUCCESS:
            reason = response.get("reason") if isinstance(response, dict) else None
            raise APIError(response, reason or f"Relayer rejected '{key}'")
        return response

    async def get_metadata(self) -> Metadata:
        response = await self._emit_and_wait(LEGACY_SOCKET_KEYS["METADATA"])
        return unwrap(response)

    async def get_active_markets(self) -> List[Dict[str, Any]]:
        response = await self._emit_and_wait(LEGACY_SOCKET_KEYS["ACTIVE_MARKETS"])
        return unwrap(response)

    async def get_leagues(self) -> List[Dict[str, Any]]:
        result = await self._http.get(LEGACY_HTTP_ENDPOINTS["LEAGUES"], "Can't fetch leagues")
        return unwrap(result)

    async def get_sports(self) -> List[Dict[str, Any]]:
        result = await self._http.get(LEGACY_HTTP_ENDPOINTS["SPORTS"], "Can't fetch sports")
        return unwrap(result)

    async def new_order(self, order: NewOrder) -> RelayerResponse:
        """Sign and submit a maker order, fees and relayer taken from metadata.

        Raises:
            APISchemaError: If the order is malformed or below the minimum size
        """
        validation = validate_new_order_schema(order)
        if validation != OK:
            raise APISchemaError(validation)
        self._require_initialized()
        minimum = self._metadata.get("minimumOrderSize")
        if minimum is not None and int(order["totalBetSize"]) < int(minimum):
            raise APISchemaError(
                f"totalBetSize is below the minimum order size of {minimum}"
            )

        api_maker_order = {
            "marketHash": order["marketHash"],
            "maker": await self._signer.get_address(),
            "totalBetSize": str(int(order["totalBetSize"])),
            "percentageOdds": order["percentageOdds"],
            "expiry": str(order["expiry"]),
            "executor": self._metadata["executorAddress"],
            "relayer": self._metadata["relayerAddress"],
            "relayerMakerFee": str(self._metadata.get("relayerMakerFee", "0")),
            "relayerTakerFee": str(self._metadata.get("relayerTakerFee", "0")),
            "baseToken": order["baseToken"],
            "salt": generate_salt(),
            "isMakerBettingOutcomeOne": order["isMakerBettingOutcomeOne"],
        }
        order_hash = get_legacy_order_hash(convert_to_legacy_contract_order(api_maker_order))
        signature = await self._signer.sign_message(decode_hex(order_hash))
        signed_order: SignedLegacyRelayerMakerOrder = {
            **api_maker_order,
            "signature": signature,
        }
        logger.debug("legacy_new_order_signed", order_hash=order_hash)
        return await self._emit_and_wait(LEGACY_SOCKET_KEYS["NEW_ORDER"], signed_order)

    async def cancel_order(self, order_hashes: List[str]) -> RelayerResponse:
        """Cancel orders with a plain-message signature over their hashes."""
        if not isinstance(order_hashes, list):
            raise APISchemaError("orderHashes is not a list")
        if not is_bytes32_list(order_hashes):
            raise APISchemaError("orderHashes has some invalid order hashes.")
        self._require_initialized()

        cancel_hash = get_legacy_cancel_hash(order_hashes)
        cancel_signature = await self._signer.sign_message(cancel_hash)
        return await self._emit_and_wait(
            LEGACY_SOCKET_KEYS["CANCEL_ORDER"],
            {"orderHashes": order_hashes, "cancelSignature": cancel_signature},
        )

    async def get_pending_bets(self, bettor: Optional[str] = None) -> List[Dict[str, Any]]:
        if bettor is not None and not is_address(bettor):
            raise APISchemaError("bettor is not a valid address")
        bettor = bettor or await self._signer.get_address()
        result = await self._http.get(
            f"{LEGACY_HTTP_ENDPOINTS['PENDING_BETS']}/{bettor}",
            "Can't get pending bets",
        )
        return unwrap(result)

    async def get_orders(self, market_hash: str) -> List[Dict[str, Any]]:
        if not is_bytes32(market_hash):
            raise APISchemaError("marketHash is not a 32-byte hex string")
        result = await self._http.get(
            f"{LEGACY_HTTP_ENDPOINTS['ORDERS']}/{market_hash}", "Can't get orders"
        )
        return unwrap(result)

    async def get_active_orders(self, maker: Optional[str] = None) -> List[Dict[str, Any]]:
        if maker is not None and not is_address(maker):
            raise APISchemaError("maker is not a valid address")
        maker = maker or await self._signer.get_address()
        result = await self._http.get(
            f"{LEGACY_HTTP_ENDPOINTS['ACTIVE_ORDERS']}/{maker}",
            "Can't get active orders",
        )
        return unwrap(result)


async def new_legacy_sportx(config: LegacySportXConfig) -> LegacySportX:
    """Build a LegacySportX client and initialize it."""
    sportx = LegacySportX(config)
    await sportx.init()
    return sportx
