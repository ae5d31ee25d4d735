"""
Story Protocol SDK - Python client for the Story Protocol IP registry.
"""
from .client import StoryClient
from .config import ChainConfig, ContractAddresses, NetworkConfig
from .constants import ZERO_ADDRESS, ZERO_HASH
from .exceptions import (
    ConfirmationTimeoutError,
    DecodingError,
    NetworkError,
    SimulationError,
    StoryProtocolError,
    SubmissionError,
    TransactionRevertedError,
    WaitCancelledError,
)
from .models import (
    AccessPermission,
    EncodedTxData,
    PermissionSignatureRequest,
    PermissionSignatureResponse,
    TxOptions,
)
from .pil import PIL_TYPE, get_license_term_by_type
from .resources import (
    DisputeClient,
    IPAccountClient,
    IPAssetClient,
    LicenseClient,
    NftClient,
    PermissionClient,
    RoyaltyClient,
)
from .sign import get_permission_signature
from .signer import LocalSigner, Signer
from .version import __version__

# Aliases matching the protocol's TypeScript SDK exports
AddressZero = ZERO_ADDRESS
HashZero = ZERO_HASH

__all__ = [
    "StoryClient",
    "ChainConfig",
    "ContractAddresses",
    "NetworkConfig",
    "DisputeClient",
    "IPAccountClient",
    "IPAssetClient",
    "LicenseClient",
    "NftClient",
    "PermissionClient",
    "RoyaltyClient",
    "LocalSigner",
    "Signer",
    "AccessPermission",
    "EncodedTxData",
    "TxOptions",
    "PermissionSignatureRequest",
    "PermissionSignatureResponse",
    "get_permission_signature",
    "PIL_TYPE",
    "get_license_term_by_type",
    "ZERO_ADDRESS",
    "ZERO_HASH",
    "AddressZero",
    "HashZero",
    "StoryProtocolError",
    "SimulationError",
    "SubmissionError",
    "TransactionRevertedError",
    "ConfirmationTimeoutError",
    "WaitCancelledError",
    "DecodingError",
    "NetworkError",
    "__version__",
]
