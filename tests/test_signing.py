"""Tests for the signing module."""

import asyncio
import json

import pytest
from eth_account import Account
from eth_utils import decode_hex, keccak

from sportx_sdk.errors import ConfigurationError, SigningError
from sportx_sdk.signing import (
    CancelDetails,
    FillDetails,
    Fills,
    Permit,
    PrivateKeySigner,
    ProviderSigner,
    convert_to_contract_order,
    convert_to_legacy_contract_order,
    create_eip712_domain,
    create_signer,
    generate_salt,
    get_cancel_order_eip712_payload,
    get_dai_permit_eip712_payload,
    get_fill_order_eip712_payload,
    get_legacy_cancel_hash,
    get_legacy_order_hash,
    get_order_hash,
    recover_message_signer,
    recover_typed_data_signer,
    verify_typed_data_signature,
)
from sportx_sdk.signing.signers import _json_safe


# Test wallet (DO NOT use in production)
TEST_PRIVATE_KEY = "0x" + "ab" * 32  # Deterministic test key
TEST_ACCOUNT = Account.from_key(TEST_PRIVATE_KEY)
TEST_ADDRESS = TEST_ACCOUNT.address

MARKET_HASH = "0x" + "aa" * 32
DAI = "0x6B175474E89094C44Da98b954EedeAC495271d0F"
EXECUTOR = "0x" + "11" * 20
RELAYER = "0x" + "22" * 20
FILL_HASHER = "0x" + "33" * 20


def relayer_order(**overrides):
    order = {
        "marketHash": MARKET_HASH,
        "maker": TEST_ADDRESS,
        "totalBetSize": "10000000000000000000",
        "percentageOdds": "50000000000000000000",
        "expiry": "1900000000",
        "executor": EXECUTOR,
        "baseToken": DAI,
        "salt": "123456789",
        "isMakerBettingOutcomeOne": True,
    }
    order.update(overrides)
    return order


def legacy_relayer_order(**overrides):
    order = relayer_order(
        relayer=RELAYER, relayerMakerFee="0", relayerTakerFee="25"
    )
    order.update(overrides)
    return order


class TestOrderHash:
    """Tests for order hashing."""

    def test_order_hash_format(self):
        """Test that an order hash is a bytes32 hex string."""
        order_hash = get_order_hash(convert_to_contract_order(relayer_order()))

        assert order_hash.startswith("0x")
        assert len(order_hash) == 66

    def test_order_hash_deterministic(self):
        """Test that the same order always hashes the same."""
        order = convert_to_contract_order(relayer_order())

        assert get_order_hash(order) == get_order_hash(order)

    def test_order_hash_depends_on_salt(self):
        """Test that orders differing only in salt hash differently."""
        hash_1 = get_order_hash(convert_to_contract_order(relayer_order(salt="1")))
        hash_2 = get_order_hash(convert_to_contract_order(relayer_order(salt="2")))

        assert hash_1 != hash_2

    def test_order_hash_depends_on_outcome(self):
        """Test that the betting outcome is committed to."""
        hash_1 = get_order_hash(convert_to_contract_order(relayer_order()))
        hash_2 = get_order_hash(
            convert_to_contract_order(relayer_order(isMakerBettingOutcomeOne=False))
        )

        assert hash_1 != hash_2

    def test_order_hash_ignores_address_case(self):
        """Test that lowercase and checksummed addresses hash the same."""
        hash_1 = get_order_hash(convert_to_contract_order(relayer_order()))
        hash_2 = get_order_hash(
            convert_to_contract_order(relayer_order(baseToken=DAI.lower()))
        )

        assert hash_1 == hash_2

    def test_convert_to_contract_order_numbers(self):
        """Test that string amounts become integers."""
        order = convert_to_contract_order(relayer_order())

        assert order.total_bet_size == 10 * 10**18
        assert order.percentage_odds == 50 * 10**18
        assert order.expiry == 1900000000
        assert order.salt == 123456789

    def test_invalid_market_hash_length(self):
        """Test that a market hash that is not 32 bytes is rejected."""
        with pytest.raises(ValueError):
            get_order_hash(convert_to_contract_order(relayer_order(marketHash="0xabcd")))

    def test_legacy_order_hash_commits_to_fees(self):
        """Test that the legacy hash changes with the relayer fees."""
        hash_1 = get_legacy_order_hash(
            convert_to_legacy_contract_order(legacy_relayer_order())
        )
        hash_2 = get_legacy_order_hash(
            convert_to_legacy_contract_order(legacy_relayer_order(relayerTakerFee="26"))
        )

        assert hash_1 != hash_2

    def test_legacy_order_hash_differs_from_current(self):
        """Test that the legacy layout does not collide with the current one."""
        order = legacy_relayer_order()

        assert get_legacy_order_hash(
            convert_to_legacy_contract_order(order)
        ) != get_order_hash(convert_to_contract_order(order))

    def test_legacy_cancel_hash_layout(self):
        """Test that the cancel hash is keccak of the hashes followed by true."""
        order_hashes = ["0x" + "01" * 32, "0x" + "02" * 32]

        expected = keccak(
            decode_hex(order_hashes[0]) + decode_hex(order_hashes[1]) + b"\x01"
        )

        assert get_legacy_cancel_hash(order_hashes) == expected

    def test_generate_salt_unique(self):
        """Test that salts are fresh 256-bit decimal strings."""
        salts = {generate_salt() for _ in range(20)}

        assert len(salts) == 20
        for salt in salts:
            assert salt.isdigit()
            assert int(salt) < 2**256


class TestPayloads:
    """Tests for EIP-712 payload construction."""

    def fill_details(self):
        order = convert_to_contract_order(relayer_order())
        return FillDetails(
            fills=Fills(
                orders=[order],
                maker_sigs=["0x" + "12" * 65],
                taker_amounts=[10**18],
                fill_salt=42,
            ),
            metadata={"action": "N/A", "market": "Team A vs Team B"},
        )

    def test_create_domain_without_contract(self):
        """Test a domain with no verifying contract."""
        domain = create_eip712_domain("SportX", "1.0", 1)

        assert domain == {"name": "SportX", "version": "1.0", "chainId": 1}

    def test_create_domain_checksums_contract(self):
        """Test that the verifying contract is checksummed."""
        domain = create_eip712_domain("Dai Stablecoin", "1", 1, DAI.lower())

        assert domain["verifyingContract"] == DAI

    def test_create_domain_invalid_contract(self):
        """Test that a malformed verifying contract is rejected."""
        with pytest.raises(ValueError):
            create_eip712_domain("SportX", "1.0", 1, "0x1234")

    def test_fill_payload_shape(self):
        """Test the fill payload domain, primary type and message."""
        payload = get_fill_order_eip712_payload(self.fill_details(), 1, FILL_HASHER)

        assert payload["primaryType"] == "Details"
        assert payload["domain"]["name"] == "SportX"
        assert payload["domain"]["version"] == "1.0"
        assert payload["domain"]["chainId"] == 1
        assert payload["domain"]["verifyingContract"].lower() == FILL_HASHER
        assert set(payload["types"]) == {"EIP712Domain", "Details", "FillObject", "Order"}

        message = payload["message"]
        assert message["market"] == "Team A vs Team B"
        assert message["returning"] == "N/A"
        assert message["fills"]["fillSalt"] == 42
        assert message["fills"]["takerAmounts"] == [10**18]
        assert message["fills"]["orders"][0]["marketHash"] == MARKET_HASH

    def test_fill_payload_sign_and_recover(self):
        """Test that a locally signed fill payload recovers to the taker."""
        payload = get_fill_order_eip712_payload(self.fill_details(), 1, FILL_HASHER)
        signature = asyncio.run(PrivateKeySigner(TEST_PRIVATE_KEY).sign_typed_data(payload))

        assert recover_typed_data_signer(payload, signature) == TEST_ADDRESS

    def test_fills_length_mismatch(self):
        """Test that fills with unequal list lengths are rejected."""
        order = convert_to_contract_order(relayer_order())
        with pytest.raises(ValueError):
            Fills(orders=[order], maker_sigs=[], taker_amounts=[1], fill_salt=1)

    def test_cancel_payload_shape(self):
        """Test that cancellations are not bound to a contract."""
        payload = get_cancel_order_eip712_payload(
            CancelDetails(orders=["0x" + "01" * 32], message="test"), 137
        )

        assert "verifyingContract" not in payload["domain"]
        assert [f["name"] for f in payload["types"]["EIP712Domain"]] == [
            "name",
            "version",
            "chainId",
        ]
        assert payload["message"] == {"message": "test", "orders": ["0x" + "01" * 32]}

    def test_cancel_default_message(self):
        """Test that the cancel message defaults to N/A."""
        payload = get_cancel_order_eip712_payload(
            CancelDetails(orders=["0x" + "01" * 32]), 1
        )

        assert payload["message"]["message"] == "N/A"

    def test_dai_permit_payload(self):
        """Test the DAI permit domain and message."""
        permit = Permit(
            holder=TEST_ADDRESS, spender=RELAYER, nonce=3, expiry=0, allowed=True
        )
        payload = get_dai_permit_eip712_payload(permit, 1, DAI)

        assert payload["primaryType"] == "Permit"
        assert payload["domain"] == {
            "name": "Dai Stablecoin",
            "version": "1",
            "chainId": 1,
            "verifyingContract": DAI,
        }
        assert payload["message"] == {
            "holder": TEST_ADDRESS,
            "spender": RELAYER,
            "nonce": 3,
            "expiry": 0,
            "allowed": True,
        }

    def test_verify_typed_data_signature(self):
        """Test signature verification against the expected signer."""
        permit = Permit(
            holder=TEST_ADDRESS, spender=RELAYER, nonce=0, expiry=0, allowed=True
        )
        payload = get_dai_permit_eip712_payload(permit, 1, DAI)
        signature = asyncio.run(PrivateKeySigner(TEST_PRIVATE_KEY).sign_typed_data(payload))

        assert verify_typed_data_signature(payload, signature, TEST_ADDRESS)
        assert not verify_typed_data_signature(payload, signature, RELAYER)

    def test_verify_garbage_signature(self):
        """Test that an unparseable signature does not verify."""
        payload = get_cancel_order_eip712_payload(CancelDetails(orders=[]), 1)

        assert not verify_typed_data_signature(payload, "0x1234", TEST_ADDRESS)


class FakeProvider:
    def __init__(self, metamask=False, result="0xsig", error=None):
        if metamask:
            self.is_metamask = True
        self.result = result
        self.error = error
        self.requests = []

    async def make_request(self, method, params):
        self.requests.append((method, params))
        if self.error:
            return {"jsonrpc": "2.0", "id": 1, "error": self.error}
        return {"jsonrpc": "2.0", "id": 1, "result": self.result}


class FakeEth:
    def __init__(self, accounts):
        self._accounts = accounts

    @property
    def accounts(self):
        return asyncio.sleep(0, result=self._accounts)


class FakeWeb3:
    def __init__(self, provider, accounts=(TEST_ADDRESS,)):
        self.provider = provider
        self.eth = FakeEth(list(accounts))


class TestSigners:
    """Tests for signer selection and delegated signing."""

    @pytest.mark.asyncio
    async def test_private_key_signer_address(self):
        """Test that the signer address is derived from the key."""
        signer = PrivateKeySigner(TEST_PRIVATE_KEY)

        assert signer.address == TEST_ADDRESS
        assert await signer.get_address() == TEST_ADDRESS

    def test_private_key_signer_rejects_bad_key(self):
        """Test that a malformed key is a configuration error."""
        with pytest.raises(ConfigurationError):
            PrivateKeySigner("0x1234")

    @pytest.mark.asyncio
    async def test_sign_message_recovers(self):
        """Test that an order hash signed as a message recovers to the maker."""
        order_hash = get_order_hash(convert_to_contract_order(relayer_order()))
        signer = PrivateKeySigner(TEST_PRIVATE_KEY)

        signature = await signer.sign_message(decode_hex(order_hash))

        assert len(decode_hex(signature)) == 65
        assert recover_message_signer(decode_hex(order_hash), signature) == TEST_ADDRESS

    def test_create_signer_prefers_private_key(self):
        """Test that a private key wins over a provider."""
        signer = create_signer(
            private_key=TEST_PRIVATE_KEY, web3=FakeWeb3(FakeProvider())
        )

        assert isinstance(signer, PrivateKeySigner)

    def test_create_signer_provider(self):
        """Test that a provider is used when there is no key."""
        signer = create_signer(web3=FakeWeb3(FakeProvider()))

        assert isinstance(signer, ProviderSigner)

    def test_create_signer_no_credentials(self):
        """Test that a signer needs at least one credential."""
        with pytest.raises(ConfigurationError):
            create_signer()

    @pytest.mark.asyncio
    async def test_metamask_provider_uses_v4(self):
        """Test that MetaMask gets eth_signTypedData_v4 with a JSON string."""
        provider = FakeProvider(metamask=True)
        signer = ProviderSigner(FakeWeb3(provider))
        payload = get_cancel_order_eip712_payload(
            CancelDetails(orders=["0x" + "01" * 32]), 1
        )

        signature = await signer.sign_typed_data(payload)

        assert signature == "0xsig"
        method, params = provider.requests[0]
        assert method == "eth_signTypedData_v4"
        assert params[0] == TEST_ADDRESS
        assert json.loads(params[1])["domain"]["chainId"] == "1"

    @pytest.mark.asyncio
    async def test_other_provider_uses_v1(self):
        """Test that other providers get eth_signTypedData with the object."""
        provider = FakeProvider()
        signer = ProviderSigner(FakeWeb3(provider))
        payload = get_cancel_order_eip712_payload(
            CancelDetails(orders=["0x" + "01" * 32]), 1
        )

        await signer.sign_typed_data(payload)

        method, params = provider.requests[0]
        assert method == "eth_signTypedData"
        assert isinstance(params[1], dict)
        assert params[1]["primaryType"] == "Details"

    @pytest.mark.asyncio
    async def test_provider_sign_message_uses_personal_sign(self):
        """Test that messages go through personal_sign."""
        provider = FakeProvider()
        signer = ProviderSigner(FakeWeb3(provider))

        await signer.sign_message(b"\x01\x02")

        assert provider.requests[0] == ("personal_sign", ["0x0102", TEST_ADDRESS])

    @pytest.mark.asyncio
    async def test_provider_error_raises(self):
        """Test that a wallet error becomes a SigningError."""
        provider = FakeProvider(error={"code": 4001, "message": "User rejected"})
        signer = ProviderSigner(FakeWeb3(provider))

        with pytest.raises(SigningError, match="User rejected"):
            await signer.sign_message(b"\x01")

    @pytest.mark.asyncio
    async def test_provider_without_accounts(self):
        """Test that a provider exposing no accounts cannot sign."""
        signer = ProviderSigner(FakeWeb3(FakeProvider(), accounts=()))

        with pytest.raises(SigningError):
            await signer.get_address()

    def test_json_safe_stringifies_integers(self):
        """Test that integers become strings and booleans survive."""
        value = {"a": 2**255, "b": [1, True], "c": "x"}

        assert _json_safe(value) == {"a": str(2**255), "b": ["1", True], "c": "x"}
