"""SportX relayer client.

Talks to the current relayer: an Ably realtime connection for liveness, and
plain HTTP for every query and mutation. Each mutating call:
1. Validates its arguments locally (APISchemaError, nothing sent)
2. Builds the canonical payload from cached metadata and the signer
3. Signs it (plain message for orders, EIP-712 for fills, cancels, permits)
4. Posts it and returns the relayer's JSON, or raises APIError
"""

import asyncio
from typing import Any, Dict, List, Optional

import structlog
from ably import AblyRealtime
from eth_utils import decode_hex, to_checksum_address
from web3 import AsyncHTTPProvider, AsyncWeb3

from ..config import SportXConfig, resolve_sportx_config
from ..constants import (
    DAI_PERMIT_ABI,
    ERC20_ABI,
    MAINCHAIN_NETWORKS,
    RELAYER_HTTP_ENDPOINTS,
    SIDECHAIN_NETWORKS,
    TOKEN_ADDRESSES,
    Tokens,
)
from ..errors import APIError, APISchemaError, APITimeoutError, ConfigurationError
from ..signing import (
    CancelDetails,
    FillDetails,
    Fills,
    Permit,
    convert_to_contract_order,
    create_signer,
    generate_salt,
    get_cancel_order_eip712_payload,
    get_dai_permit_eip712_payload,
    get_fill_order_eip712_payload,
    get_order_hash,
)
from ..types import (
    DEFAULT_FILL_DETAILS_METADATA,
    ApproveProxyPayload,
    FillDetailsMetadata,
    GetTradesRequest,
    Metadata,
    NewOrder,
    PendingBetsRequest,
    RelayerResponse,
    SignedRelayerMakerOrder,
)
from ..validation import (
    OK,
    is_address,
    is_boolean,
    is_hex_string,
    is_hex_string_list,
    is_positive_big_number,
    validate_approve_proxy_payload,
    validate_fill_details_metadata,
    validate_get_trades_request,
    validate_new_order_schema,
    validate_pending_bets_request,
    validate_signed_relayer_maker_order,
)
from .http import RelayerHTTPClient, unwrap

logger = structlog.get_logger(__name__)

CONNECTED = "connected"


def _ably_realtime(auth_url: str) -> AblyRealtime:
    return AblyRealtime(auth_url=auth_url)


def _check(validation: str) -> None:
    if validation != OK:
        raise APISchemaError(validation)


class SportX:
    """Client for the current SportX relayer.

    Example:
        ```python
        sportx = await new_sportx({
            "env": "production",
            "private_key": "0x...",
            "mainchain_provider_url": "https://mainnet.infura.io/v3/...",
            "sidechain_provider_url": "https://polygon-rpc.com",
            "fill_hasher_address": "0x...",
            "transfer_proxy_address": "0x...",
        })
        markets = await sportx.get_active_markets()
        await sportx.new_order({
            "marketHash": markets[0]["marketHash"],
            "totalBetSize": "10000000000000000000",
            "percentageOdds": "50000000000000000000",
            "expiry": int(time.time()) + 3600,
            "isMakerBettingOutcomeOne": True,
            "baseToken": "0x...",
        })
        ```
    """

    def __init__(self, config: Optional[SportXConfig] = None):
        """Initialize the client. No network traffic happens here.

        Args:
            config: Client configuration

        Raises:
            ConfigurationError: On an unknown environment or missing credentials
        """
        config = config or {}
        self._config = resolve_sportx_config(config)

        self._mainchain = config.get("mainchain_provider")
        if self._mainchain is None:
            self._mainchain = AsyncWeb3(
                AsyncHTTPProvider(self._config.mainchain_provider_url)
            )
        self._sidechain = config.get("sidechain_provider")
        if self._sidechain is None:
            self._sidechain = AsyncWeb3(
                AsyncHTTPProvider(self._config.sidechain_provider_url)
            )
        self._signer = create_signer(
            private_key=self._config.private_key,
            web3=config.get("mainchain_provider"),
        )
        self._http = RelayerHTTPClient(
            self._config.relayer_url,
            timeout=self._config.timeout,
            http_client=config.get("http_client"),
        )
        self._realtime_factory = config.get("realtime_factory", _ably_realtime)
        self._mainchain_network = MAINCHAIN_NETWORKS[self._config.env]
        self._sidechain_network = SIDECHAIN_NETWORKS[self._config.env]

        self._realtime: Any = None
        self._metadata: Optional[Metadata] = None
        self._mainchain_chain_id: Optional[int] = None
        self._base_token_wrappers: Dict[str, Any] = {}
        self._initialized = False

    @property
    def metadata(self) -> Metadata:
        """Metadata cached at init (a copy)."""
        self._require_initialized()
        return dict(self._metadata)

    async def init(self) -> None:
        """Connect, then cache metadata, chain ID and token wrappers.

        Raises:
            ConfigurationError: If called twice
            APITimeoutError: If the realtime connection is not up in time
        """
        if self._initialized:
            raise ConfigurationError("Already initialized")

        self._realtime = self._realtime_factory(
            f"{self._config.relayer_url}{RELAYER_HTTP_ENDPOINTS['REALTIME_TOKEN']}"
        )
        try:
            await asyncio.wait_for(self._wait_connected(), self._config.timeout)
        except asyncio.TimeoutError:
            await self._close_realtime()
            raise APITimeoutError(
                f"Realtime connection not established within {self._config.timeout}s"
            ) from None

        try:
            self._metadata = await self.get_metadata()
            self._mainchain_chain_id = await self._mainchain.eth.chain_id
            self._build_token_wrappers()
        except Exception:
            await self._close_realtime()
            raise

        self._initialized = True
        logger.info(
            "sportx_initialized",
            env=self._config.env.value,
            chain_id=self._mainchain_chain_id,
        )

    def _build_token_wrappers(self) -> None:
        for symbol, address in TOKEN_ADDRESSES[self._mainchain_network].items():
            address = to_checksum_address(address)
            abi = DAI_PERMIT_ABI if symbol == Tokens.DAI else ERC20_ABI
            self._base_token_wrappers[address] = self._mainchain.eth.contract(
                address=address, abi=abi
            )
        for address in TOKEN_ADDRESSES[self._sidechain_network].values():
            address = to_checksum_address(address)
            self._base_token_wrappers[address] = self._sidechain.eth.contract(
                address=address, abi=ERC20_ABI
            )

    async def _wait_connected(self) -> None:
        connection = self._realtime.connection
        if connection.state == CONNECTED:
            return
        await connection.once_async(CONNECTED)

    async def _close_realtime(self) -> None:
        if self._realtime is not None:
            await self._realtime.close()
            self._realtime = None

    async def close(self) -> None:
        """Close the realtime connection and the owned HTTP client."""
        await self._close_realtime()
        await self._http.close()

    def _require_initialized(self) -> None:
        if not self._initialized:
            raise ConfigurationError(
                "SportX client is not initialized. Call init() first."
            )

    def get_realtime_connection(self) -> Any:
        return self._realtime

    async def get_eip712_signature(self, payload: Dict[str, Any]) -> str:
        """Sign typed data with whichever credential this client holds."""
        return await self._signer.sign_typed_data(payload)

    async def get_metadata(self) -> Metadata:
        logger.debug("get_metadata")
        result = await self._http.get(
            RELAYER_HTTP_ENDPOINTS["METADATA"], "Can't fetch metadata"
        )
        return unwrap(result)

    async def get_leagues(self) -> List[Dict[str, Any]]:
        logger.debug("get_leagues")
        result = await self._http.get(
            RELAYER_HTTP_ENDPOINTS["LEAGUES"], "Can't fetch leagues"
        )
        return unwrap(result)

    async def get_sports(self) -> List[Dict[str, Any]]:
        logger.debug("get_sports")
        result = await self._http.get(
            RELAYER_HTTP_ENDPOINTS["SPORTS"], "Can't fetch sports"
        )
        return unwrap(result)

    async def get_active_markets(self) -> List[Dict[str, Any]]:
        logger.debug("get_active_markets")
        result = await self._http.get(
            RELAYER_HTTP_ENDPOINTS["ACTIVE_MARKETS"], "Can't fetch active markets"
        )
        return unwrap(result, "markets")

    async def market_lookup(self, market_hashes: List[str]) -> List[Dict[str, Any]]:
        logger.debug("market_lookup")
        if not is_hex_string_list(market_hashes):
            raise APISchemaError("marketHashes is not a list of hex strings")
        result = await self._http.post(
            RELAYER_HTTP_ENDPOINTS["HISTORICAL_MARKETS"],
            {"marketHashes": market_hashes},
            "Can't lookup markets",
        )
        return unwrap(result)

    async def new_order(self, order: NewOrder) -> RelayerResponse:
        """Sign and submit a maker order.

        The maker comes from the signer, the executor from cached metadata,
        and the salt is drawn fresh for every order.
        """
        logger.debug("new_order")
        _check(validate_new_order_schema(order))
        self._require_initialized()

        api_maker_order = {
            "marketHash": order["marketHash"],
            "maker": await self._signer.get_address(),
            "totalBetSize": str(int(order["totalBetSize"])),
            "percentageOdds": order["percentageOdds"],
            "expiry": str(order["expiry"]),
            "executor": self._metadata["executorAddress"],
            "baseToken": order["baseToken"],
            "salt": generate_salt(),
            "isMakerBettingOutcomeOne": order["isMakerBettingOutcomeOne"],
        }
        order_hash = get_order_hash(convert_to_contract_order(api_maker_order))
        signature = await self._signer.sign_message(decode_hex(order_hash))
        signed_order: SignedRelayerMakerOrder = {**api_maker_order, "signature": signature}
        logger.debug("new_order_signed", order_hash=order_hash)

        return await self._http.post(
            RELAYER_HTTP_ENDPOINTS["NEW_ORDER"],
            {"orders": [signed_order]},
            "Can't submit new order",
        )

    async def suggest_orders(
        self,
        market_hash: str,
        bet_size: str,
        taker_direction_outcome_one: bool,
        taker: str,
        base_token: str,
    ) -> RelayerResponse:
        logger.debug("suggest_orders", market_hash=market_hash)
        if not is_hex_string(market_hash):
            raise APISchemaError("marketHash is not a hex string")
        if not is_positive_big_number(bet_size):
            raise APISchemaError("betSize as a number is not positive")
        if not is_boolean(taker_direction_outcome_one):
            raise APISchemaError("takerDirectionOutcomeOne is not a boolean")
        if not is_address(taker):
            raise APISchemaError("taker is not a valid address")
        if not is_address(base_token):
            raise APISchemaError("baseToken is not a valid address")
        payload = {
            "marketHash": market_hash,
            "takerPayAmount": bet_size,
            "takerDirection": "outcomeOne" if taker_direction_outcome_one else "outcomeTwo",
            "taker": taker,
            "baseToken": base_token,
        }
        return await self._http.post(
            RELAYER_HTTP_ENDPOINTS["SUGGEST_ORDERS"],
            payload,
            "Can't get suggested orders",
        )

    async def fill_orders(
        self,
        orders: List[SignedRelayerMakerOrder],
        taker_amounts: List[str],
        fill_details_metadata: Optional[FillDetailsMetadata] = None,
        affiliate_address: Optional[str] = None,
        approve_proxy_payload: Optional[ApproveProxyPayload] = None,
    ) -> RelayerResponse:
        """Fill maker orders through a signed meta-transaction.

        The taker signs the whole FillDetails structure; the relayer receives
        order hashes, not full orders.

        Args:
            orders: Signed maker orders to fill
            taker_amounts: Amount to fill per order, same length as orders
            fill_details_metadata: Summary shown to the taker; fields default to "N/A"
            affiliate_address: Affiliate to credit (optional)
            approve_proxy_payload: Signed proxy approval to forward (optional)
        """
        logger.debug("fill_orders")
        if not isinstance(orders, list) or not orders:
            raise APISchemaError("orders is not a non-empty list")
        for order in orders:
            _check(validate_signed_relayer_maker_order(order))
        if affiliate_address is not None and not is_address(affiliate_address):
            raise APISchemaError("Affiliate address malformed.")
        if fill_details_metadata is not None:
            _check(validate_fill_details_metadata(fill_details_metadata))
        if not isinstance(taker_amounts, list):
            raise APISchemaError("takerAmounts is not a list")
        if not all(is_positive_big_number(amount) for amount in taker_amounts):
            raise APISchemaError("takerAmounts has some invalid number strings")
        if len(taker_amounts) != len(orders):
            raise APISchemaError("orders and takerAmounts have different lengths")
        if approve_proxy_payload is not None:
            _check(validate_approve_proxy_payload(approve_proxy_payload))
        self._require_initialized()

        fill_salt = int(generate_salt())
        contract_orders = [convert_to_contract_order(order) for order in orders]
        order_hashes = [get_order_hash(order) for order in contract_orders]
        final_metadata: FillDetailsMetadata = {
            **DEFAULT_FILL_DETAILS_METADATA,
            **(fill_details_metadata or {}),
        }
        fill_details = FillDetails(
            fills=Fills(
                orders=contract_orders,
                maker_sigs=[order["signature"] for order in orders],
                taker_amounts=[int(amount) for amount in taker_amounts],
                fill_salt=fill_salt,
            ),
            metadata=final_metadata,
        )
        fill_order_payload = get_fill_order_eip712_payload(
            fill_details,
            self._mainchain_chain_id,
            self._config.fill_hasher_address,
        )
        taker_signature = await self.get_eip712_signature(fill_order_payload)

        payload: Dict[str, Any] = {
            "orderHashes": order_hashes,
            "takerAmounts": taker_amounts,
            "taker": await self._signer.get_address(),
            "takerSig": taker_signature,
            "fillSalt": str(fill_salt),
            **final_metadata,
        }
        if affiliate_address is not None:
            payload["affiliateAddress"] = affiliate_address
        if approve_proxy_payload is not None:
            payload["approveProxyPayload"] = approve_proxy_payload
        logger.debug("fill_orders_payload", order_hashes=order_hashes)

        return await self._http.post(
            RELAYER_HTTP_ENDPOINTS["FILL_ORDERS"], payload, "Can't fill orders."
        )

    async def cancel_order(
        self, order_hashes: List[str], message: Optional[str] = None
    ) -> RelayerResponse:
        """Cancel orders with an EIP-712 signed cancellation.

        Args:
            order_hashes: Hashes of the orders to cancel
            message: Human-readable note shown when signing. Default: "N/A"
        """
        logger.debug("cancel_order")
        if not isinstance(order_hashes, list):
            raise APISchemaError("orderHashes is not a list")
        if not is_hex_string_list(order_hashes):
            raise APISchemaError("orderHashes has some invalid order hashes.")
        if message is not None and not isinstance(message, str):
            raise APISchemaError("message is not a string")
        self._require_initialized()

        cancel_details = CancelDetails(orders=order_hashes, message=message or "N/A")
        cancel_order_payload = get_cancel_order_eip712_payload(
            cancel_details, self._mainchain_chain_id
        )
        cancel_signature = await self.get_eip712_signature(cancel_order_payload)
        payload = {
            "orders": cancel_details.orders,
            "message": cancel_details.message,
            "cancelSignature": cancel_signature,
        }
        return await self._http.post(
            RELAYER_HTTP_ENDPOINTS["CANCEL_ORDERS"], payload, "Can't cancel orders."
        )

    async def get_pending_or_failed_bets(
        self, request: PendingBetsRequest
    ) -> List[Dict[str, Any]]:
        logger.debug("get_pending_or_failed_bets")
        _check(validate_pending_bets_request(request))
        result = await self._http.post(
            RELAYER_HTTP_ENDPOINTS["PENDING_BETS"],
            request,
            "Can't get recent pending bets",
        )
        return unwrap(result, "bets")

    async def get_trades(self, request: GetTradesRequest) -> List[Dict[str, Any]]:
        logger.debug("get_trades")
        _check(validate_get_trades_request(request))
        result = await self._http.post(
            RELAYER_HTTP_ENDPOINTS["TRADES"], request, "Can't get trades"
        )
        return unwrap(result, "trades")

    async def get_orders(
        self,
        market_hashes: Optional[List[str]] = None,
        maker: Optional[str] = None,
        base_token: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        logger.debug("get_orders")
        if market_hashes is not None and not is_hex_string_list(market_hashes):
            raise APISchemaError(
                "One of the supplied market hashes is not a valid hex string."
            )
        if maker is not None and not is_address(maker):
            raise APISchemaError("maker is not a valid address")
        if base_token is not None and not is_address(base_token):
            raise APISchemaError("baseToken is not a valid address")
        payload: Dict[str, Any] = {}
        if market_hashes:
            payload["marketHashes"] = market_hashes
        if maker:
            payload["maker"] = maker
        if base_token:
            payload["baseToken"] = base_token
        result = await self._http.post(
            RELAYER_HTTP_ENDPOINTS["ORDERS"], payload, "Can't get orders"
        )
        return unwrap(result)

    async def approve_sportx_contracts_dai(self) -> RelayerResponse:
        """Grant the token transfer proxy an unlimited, non-expiring DAI permit."""
        logger.debug("approve_sportx_contracts_dai")
        self._require_initialized()
        holder = await self._signer.get_address()
        dai_address = to_checksum_address(
            TOKEN_ADDRESSES[self._mainchain_network][Tokens.DAI]
        )
        nonce = await self._base_token_wrappers[dai_address].functions.nonces(holder).call()
        permit = Permit(
            holder=holder,
            spender=to_checksum_address(self._config.transfer_proxy_address),
            nonce=int(nonce),
            expiry=0,
            allowed=True,
        )
        sign_payload = get_dai_permit_eip712_payload(
            permit, self._mainchain_chain_id, dai_address
        )
        signature = await self.get_eip712_signature(sign_payload)
        return await self._http.post(
            RELAYER_HTTP_ENDPOINTS["DAI_APPROVAL"],
            {**permit.to_dict(), "signature": signature},
            "Can't approve SportX contracts",
        )

    async def get_token_balance(
        self, token_address: str, owner: Optional[str] = None
    ) -> int:
        """Balance of a known base token on whichever chain it lives on."""
        if not is_address(token_address):
            raise APISchemaError("token_address is not a valid address")
        if owner is not None and not is_address(owner):
            raise APISchemaError("owner is not a valid address")
        self._require_initialized()
        wrapper = self._base_token_wrappers.get(to_checksum_address(token_address))
        if wrapper is None:
            raise APISchemaError(f"{token_address} is not a known base token")
        owner = to_checksum_address(owner or await self._signer.get_address())
        return int(await wrapper.functions.balanceOf(owner).call())


async def new_sportx(config: SportXConfig) -> SportX:
    """Build a SportX client and initialize it."""
    sportx = SportX(config)
    await sportx.init()
    return sportx
