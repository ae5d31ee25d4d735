"""
Per-domain resource clients.
"""
from .base import ResourceClient
from .dispute import DisputeClient
from .ip_account import IPAccountClient
from .ip_asset import IPAssetClient
from .license import LicenseClient
from .nft import NftClient
from .permission import PermissionClient
from .royalty import RoyaltyClient

__all__ = [
    "ResourceClient",
    "DisputeClient",
    "IPAccountClient",
    "IPAssetClient",
    "LicenseClient",
    "NftClient",
    "PermissionClient",
    "RoyaltyClient",
]
