"""Client configuration.

Configs are plain dicts (TypedDicts) passed to the client constructor and
resolved once, with defaults applied, before anything touches the network.
"""

import os
from dataclasses import dataclass
from typing import Any, Callable, Optional, TypedDict

import httpx
from dotenv import load_dotenv

from .constants import (
    LEGACY_RELAYER_URLS,
    RELAYER_TIMEOUT,
    RELAYER_URLS,
    Environments,
)
from .errors import ConfigurationError
from .validation import is_address, is_hex_string


class SportXConfig(TypedDict, total=False):
    """Configuration for the current relayer client."""

    env: str
    """Environment name. Required."""

    sidechain_provider_url: str
    """JSON-RPC URL of the sidechain. Required unless sidechain_provider is given."""

    private_key: str
    """Hex private key. Signs locally when set."""

    mainchain_provider_url: str
    """JSON-RPC URL of the mainchain. Required with private_key unless mainchain_provider is given."""

    mainchain_provider: Any
    """AsyncWeb3 for the mainchain; signs on the caller's behalf when no private_key is set."""

    sidechain_provider: Any
    """AsyncWeb3 for the sidechain."""

    timeout: float
    """Seconds before a relayer call is abandoned. Default: RELAYER_TIMEOUT"""

    relayer_url: str
    """Override the relayer base URL for the environment."""

    fill_hasher_address: str
    """EIP-712 fill hasher contract of the deployment. Required."""

    transfer_proxy_address: str
    """Token transfer proxy of the deployment, the spender of DAI permits. Required."""

    http_client: httpx.AsyncClient
    """Shared HTTP client. The SDK creates and owns one when omitted."""

    realtime_factory: Callable[[str], Any]
    """Builds the realtime client from a token auth URL. Default: ably.AblyRealtime"""


class LegacySportXConfig(TypedDict, total=False):
    """Configuration for the legacy relayer client."""

    env: str
    private_key: str
    provider: Any
    """AsyncWeb3 that signs on the caller's behalf when no private_key is set."""

    timeout: float
    relayer_url: str
    http_client: httpx.AsyncClient
    socket_client: Any
    """socketio.AsyncClient to use. The SDK creates one when omitted."""


@dataclass
class ResolvedSportXConfig:
    """Resolved configuration with all defaults applied."""

    env: Environments
    relayer_url: str
    timeout: float
    fill_hasher_address: str
    transfer_proxy_address: str
    private_key: Optional[str]
    mainchain_provider_url: Optional[str]
    sidechain_provider_url: Optional[str]


@dataclass
class ResolvedLegacySportXConfig:
    env: Environments
    relayer_url: str
    timeout: float
    private_key: Optional[str]


def resolve_environment(env: Any) -> Environments:
    try:
        return Environments(env)
    except ValueError:
        raise ConfigurationError(f"Invalid environment: {env}") from None


def _check_private_key(private_key: Optional[str]) -> None:
    if private_key is not None and not is_hex_string(private_key):
        raise ConfigurationError("private_key is not a valid hex private key.")


def resolve_sportx_config(config: SportXConfig) -> ResolvedSportXConfig:
    """Apply defaults and reject unusable configs.

    Raises:
        ConfigurationError: On an unknown environment or missing credentials
    """
    env = resolve_environment(config.get("env"))

    if not config.get("sidechain_provider_url") and config.get("sidechain_provider") is None:
        raise ConfigurationError("sidechain_provider_url not provided")

    private_key = config.get("private_key")
    _check_private_key(private_key)
    if private_key:
        if (
            not config.get("mainchain_provider_url")
            and config.get("mainchain_provider") is None
        ):
            raise ConfigurationError(
                "mainchain_provider_url is not provided. Required for initialization via private key"
            )
    elif config.get("mainchain_provider") is None:
        raise ConfigurationError("Neither private_key nor mainchain_provider provided.")

    fill_hasher_address = config.get("fill_hasher_address")
    transfer_proxy_address = config.get("transfer_proxy_address")
    for name, address in (
        ("fill_hasher_address", fill_hasher_address),
        ("transfer_proxy_address", transfer_proxy_address),
    ):
        if not address:
            raise ConfigurationError(f"{name} not provided")
        if not is_address(address):
            raise ConfigurationError(f"{name} is not a valid address")

    return ResolvedSportXConfig(
        env=env,
        relayer_url=config.get("relayer_url", RELAYER_URLS[env]),
        timeout=config.get("timeout", RELAYER_TIMEOUT),
        fill_hasher_address=fill_hasher_address,
        transfer_proxy_address=transfer_proxy_address,
        private_key=private_key,
        mainchain_provider_url=config.get("mainchain_provider_url"),
        sidechain_provider_url=config.get("sidechain_provider_url"),
    )


def resolve_legacy_config(config: LegacySportXConfig) -> ResolvedLegacySportXConfig:
    env = resolve_environment(config.get("env"))
    private_key = config.get("private_key")
    _check_private_key(private_key)
    if not private_key and config.get("provider") is None:
        raise ConfigurationError("Neither private_key nor provider provided.")
    return ResolvedLegacySportXConfig(
        env=env,
        relayer_url=config.get("relayer_url", LEGACY_RELAYER_URLS[env]),
        timeout=config.get("timeout", RELAYER_TIMEOUT),
        private_key=private_key,
    )


def config_from_env() -> SportXConfig:
    """Build a SportXConfig from the environment (and a .env file if present).

    Reads SPORTX_ENV, SPORTX_PRIVATE_KEY, SPORTX_MAINCHAIN_PROVIDER_URL,
    SPORTX_SIDECHAIN_PROVIDER_URL, SPORTX_FILL_HASHER_ADDRESS,
    SPORTX_TRANSFER_PROXY_ADDRESS and SPORTX_TIMEOUT.
    """
    load_dotenv()
    config: SportXConfig = {"env": os.environ.get("SPORTX_ENV", Environments.PRODUCTION.value)}
    for key, var in (
        ("private_key", "SPORTX_PRIVATE_KEY"),
        ("mainchain_provider_url", "SPORTX_MAINCHAIN_PROVIDER_URL"),
        ("sidechain_provider_url", "SPORTX_SIDECHAIN_PROVIDER_URL"),
        ("fill_hasher_address", "SPORTX_FILL_HASHER_ADDRESS"),
        ("transfer_proxy_address", "SPORTX_TRANSFER_PROXY_ADDRESS"),
    ):
        value = os.environ.get(var)
        if value:
            config[key] = value
    timeout = os.environ.get("SPORTX_TIMEOUT")
    if timeout:
        try:
            config["timeout"] = float(timeout)
        except ValueError:
            raise ConfigurationError(f"SPORTX_TIMEOUT is not a number: {timeout}") from None
    return config
