"""
Network configuration for the Story Protocol SDK.

Supported networks and their contract addresses ship with the package in
``networks.json``. RPC URLs can be overridden per network through the
``<NETWORK>_RPC_URL`` environment variable (e.g. ``ILIAD_RPC_URL``).
"""
import importlib.resources
import json
import logging
import os
from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, Field, field_validator

from .exceptions import NetworkError
from .utils import validate_address

logger = logging.getLogger(__name__)

DEFAULT_NETWORK = "iliad"


class ContractAddresses(BaseModel):
    """Deployed protocol contract addresses for a single chain"""
    access_controller: str = Field(..., alias="accessController")
    arbitration_policy_sp: str = Field(..., alias="arbitrationPolicySP")
    core_metadata_module: str = Field(..., alias="coreMetadataModule")
    dispute_module: str = Field(..., alias="disputeModule")
    ip_asset_registry: str = Field(..., alias="ipAssetRegistry")
    license_registry: str = Field(..., alias="licenseRegistry")
    license_token: str = Field(..., alias="licenseToken")
    licensing_module: str = Field(..., alias="licensingModule")
    pi_license_template: str = Field(..., alias="piLicenseTemplate")
    royalty_module: str = Field(..., alias="royaltyModule")
    royalty_policy_lap: str = Field(..., alias="royaltyPolicyLAP")
    spg: str

    @field_validator("*")
    @classmethod
    def _checksum(cls, value: str, info) -> str:
        return validate_address(value, info.field_name)

    class Config:
        populate_by_name = True
        frozen = True


class ChainConfig(BaseModel):
    """Immutable chain settings shared by every resource client"""
    name: str
    chain_id: int = Field(..., alias="chainId")
    rpc_url: str = Field(..., alias="rpc")
    contracts: ContractAddresses

    class Config:
        populate_by_name = True
        frozen = True


class NetworkConfig:
    """
    Lookup helpers for the bundled network definitions.

    The parsed ``networks.json`` is cached at class level after the first load.
    """

    _networks_cache: Optional[Dict[str, Any]] = None

    @classmethod
    def load_networks(cls) -> Dict[str, Any]:
        """
        Load all network definitions.

        Returns:
            Mapping of network name to its raw configuration
        """
        if cls._networks_cache is None:
            resource = importlib.resources.files("story_protocol_sdk").joinpath("networks.json")
            with resource.open("r", encoding="utf-8") as f:
                cls._networks_cache = json.load(f)
            logger.debug(f"Loaded {len(cls._networks_cache)} network definitions")
        return cls._networks_cache

    @classmethod
    def get_network(cls, network: str) -> Dict[str, Any]:
        """
        Get the raw configuration for a network.

        Raises:
            NetworkError: If the network is unknown
        """
        networks = cls.load_networks()
        if network not in networks:
            available = ", ".join(sorted(networks))
            raise NetworkError(f"Unknown network: {network}. Available networks: {available}")
        return networks[network]

    @classmethod
    def get_rpc_url(cls, network: str, override: Optional[str] = None) -> str:
        """
        Resolve the RPC URL for a network.

        Precedence: explicit override, then ``<NETWORK>_RPC_URL``, then the
        bundled default.
        """
        if override:
            return override
        env_var = f"{network.upper().replace('-', '_')}_RPC_URL"
        env_url = os.environ.get(env_var)
        if env_url:
            logger.debug(f"Using RPC URL from {env_var}")
            return env_url
        return cls.get_network(network)["rpc"]

    @classmethod
    def get_chain_id(cls, network: str) -> int:
        return int(cls.get_network(network)["chainId"])

    @classmethod
    def get_contract_addresses(cls, network: str) -> Dict[str, str]:
        return dict(cls.get_network(network)["contracts"])

    @classmethod
    def get_chain_config(
        cls,
        network: str = DEFAULT_NETWORK,
        rpc_url: Optional[str] = None,
        contracts: Optional[Mapping[str, str]] = None,
    ) -> ChainConfig:
        """
        Build a ChainConfig for a network.

        Args:
            network: Network name from networks.json
            rpc_url: Optional RPC URL override
            contracts: Optional per-contract address overrides, keyed by either
                the snake_case field name or the camelCase alias

        Returns:
            Frozen ChainConfig
        """
        addresses = ContractAddresses.model_validate(cls.get_contract_addresses(network))
        if contracts:
            merged = addresses.model_dump()
            for key, value in contracts.items():
                field = _field_for_key(key)
                merged[field] = value
            addresses = ContractAddresses.model_validate(merged)
        return ChainConfig(
            name=network,
            chain_id=cls.get_chain_id(network),
            rpc_url=cls.get_rpc_url(network, override=rpc_url),
            contracts=addresses,
        )


def _field_for_key(key: str) -> str:
    fields = ContractAddresses.model_fields
    if key in fields:
        return key
    for name, info in fields.items():
        if info.alias == key:
            return name
    raise ValueError(f"Unknown contract name: {key}")
