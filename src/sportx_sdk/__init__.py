"""SportX SDK.

Client for the SportX sports-betting relayer: discover markets, sign and
submit maker orders, cancel them, fill existing orders through EIP-712
meta-transactions, and grant the transfer proxy a DAI permit.
"""

from .config import (
    LegacySportXConfig,
    ResolvedLegacySportXConfig,
    ResolvedSportXConfig,
    SportXConfig,
    config_from_env,
)
from .constants import RELAYER_TIMEOUT, Environments, Tokens
from .errors import (
    APIError,
    APISchemaError,
    APITimeoutError,
    ConfigurationError,
    SigningError,
    SportXError,
)
from .log import setup_logging
from .relayer import (
    LegacySportX,
    SportX,
    SportXClient,
    new_legacy_sportx,
    new_sportx,
)
from .signing import (
    PrivateKeySigner,
    ProviderSigner,
    TypedDataSigner,
    create_signer,
)
from .types import (
    ApproveProxyPayload,
    FillDetailsMetadata,
    GetTradesRequest,
    Metadata,
    NewOrder,
    PendingBetsRequest,
    RelayerResponse,
    SignedRelayerMakerOrder,
)

__all__ = [
    # Clients
    "SportXClient",
    "SportX",
    "LegacySportX",
    "new_sportx",
    "new_legacy_sportx",
    # Config
    "SportXConfig",
    "LegacySportXConfig",
    "ResolvedSportXConfig",
    "ResolvedLegacySportXConfig",
    "config_from_env",
    "Environments",
    "Tokens",
    "RELAYER_TIMEOUT",
    # Errors
    "SportXError",
    "APIError",
    "APISchemaError",
    "APITimeoutError",
    "ConfigurationError",
    "SigningError",
    # Signing
    "TypedDataSigner",
    "PrivateKeySigner",
    "ProviderSigner",
    "create_signer",
    # Types
    "NewOrder",
    "SignedRelayerMakerOrder",
    "FillDetailsMetadata",
    "ApproveProxyPayload",
    "PendingBetsRequest",
    "GetTradesRequest",
    "Metadata",
    "RelayerResponse",
    # Logging
    "setup_logging",
]
