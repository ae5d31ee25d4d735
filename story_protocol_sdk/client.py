"""
StoryClient - Main entry point for the Story Protocol SDK.
"""
import logging
import urllib.parse
from typing import Any, Mapping, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry
from web3 import Web3

from .config import DEFAULT_NETWORK, ChainConfig, NetworkConfig
from .constants import DEFAULT_CONFIRMATION_TIMEOUT, DEFAULT_POLL_INTERVAL
from .exceptions import NetworkError
from .resources import (
    DisputeClient,
    IPAccountClient,
    IPAssetClient,
    LicenseClient,
    NftClient,
    PermissionClient,
    RoyaltyClient,
)
from .signer import LocalSigner, Signer
from .tx import TransactionHandler


class StoryClient:
    """
    Client for interacting with the Story Protocol contracts.

    Exposes one resource client per protocol domain:

    - ``ip_asset``: register IP assets and derivatives
    - ``license``: register PIL terms, attach them, mint license tokens
    - ``dispute``: raise, cancel and resolve disputes
    - ``royalty``: royalty vault snapshots, claims and payments
    - ``permission``: IP account permissions
    - ``ip_account``: execute calls from an IP account
    - ``nft``: create SPG NFT collections

    Write methods return as soon as the transaction is submitted unless
    ``txOptions.waitForTransaction`` is set.
    """

    def __init__(
        self,
        network: str = DEFAULT_NETWORK,
        rpc_url: Optional[str] = None,
        priv_key: Optional[str] = None,
        signer: Optional[Signer] = None,
        contracts: Optional[Mapping[str, str]] = None,
        retry_count: int = 3,
        timeout: int = 30,
        confirmation_timeout: float = DEFAULT_CONFIRMATION_TIMEOUT,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize the StoryClient

        Args:
            network: Network name from the bundled network config (e.g. "iliad")
            rpc_url: RPC endpoint URL; overrides the network default and
                the ``<NETWORK>_RPC_URL`` environment variable
            priv_key: Private key for the signing wallet (ignored if signer is given)
            signer: Custom signer object; read-only use is possible without one
            contracts: Optional contract address overrides
            retry_count: Number of retries for RPC HTTP requests
            timeout: Timeout for RPC HTTP requests in seconds
            confirmation_timeout: Default seconds to wait for a receipt
            poll_interval: Default seconds between receipt polls
            logger: Optional logger instance to use for debug/info logging

        Raises:
            NetworkError: If the network is unknown
            ValueError: If the RPC URL doesn't use https (unless it's localhost/127.0.0.1)
        """
        self.logger = logger or logging.getLogger(__name__)
        self.chain: ChainConfig = NetworkConfig.get_chain_config(network, rpc_url=rpc_url, contracts=contracts)
        self.rpc_url = self.chain.rpc_url
        _validate_rpc_url(self.rpc_url)

        if signer is None and priv_key:
            signer = LocalSigner(priv_key)
        self.signer = signer

        # Setup HTTP session with retries
        self.session = requests.Session()
        retries = Retry(
            total=retry_count,
            backoff_factor=0.5,
            status_forcelist=[500, 502, 503, 504],
            allowed_methods=["POST"],
            raise_on_status=False,
            connect=retry_count,
            read=retry_count,
        )
        self.session.mount("http://", HTTPAdapter(max_retries=retries))
        self.session.mount("https://", HTTPAdapter(max_retries=retries))
        self.timeout = timeout

        self.w3 = Web3(Web3.HTTPProvider(
            self.rpc_url,
            request_kwargs={"timeout": timeout},
            session=self.session,
        ))

        self.tx = TransactionHandler(
            self.w3,
            self.signer,
            timeout=confirmation_timeout,
            poll_interval=poll_interval,
            logger=self.logger,
        )

        self._ip_asset: Optional[IPAssetClient] = None
        self._license: Optional[LicenseClient] = None
        self._dispute: Optional[DisputeClient] = None
        self._royalty: Optional[RoyaltyClient] = None
        self._permission: Optional[PermissionClient] = None
        self._ip_account: Optional[IPAccountClient] = None
        self._nft: Optional[NftClient] = None

    @property
    def address(self) -> str:
        """
        Get the wallet address

        Raises:
            ValueError: If no signer is available
        """
        if self.signer is None:
            raise ValueError("No signer available")
        return self.signer.address

    def assert_chain_id(self) -> None:
        """
        Verify the RPC endpoint serves the configured chain.

        Raises:
            NetworkError: If the chain ID differs or cannot be read
        """
        try:
            actual = self.w3.eth.chain_id
        except Exception as e:
            raise NetworkError(f"Failed to validate chain ID: {e}") from e
        if actual != self.chain.chain_id:
            raise NetworkError(
                f"Chain ID mismatch for network {self.chain.name}: "
                f"expected {self.chain.chain_id}, got {actual}"
            )

    def _resource_kwargs(self) -> dict:
        return {
            "w3": self.w3,
            "chain": self.chain,
            "signer": self.signer,
            "tx_handler": self.tx,
            "logger": self.logger,
        }

    @property
    def ip_asset(self) -> IPAssetClient:
        if self._ip_asset is None:
            self._ip_asset = IPAssetClient(**self._resource_kwargs())
        return self._ip_asset

    @property
    def license(self) -> LicenseClient:
        if self._license is None:
            self._license = LicenseClient(**self._resource_kwargs())
        return self._license

    @property
    def dispute(self) -> DisputeClient:
        if self._dispute is None:
            self._dispute = DisputeClient(**self._resource_kwargs())
        return self._dispute

    @property
    def royalty(self) -> RoyaltyClient:
        if self._royalty is None:
            self._royalty = RoyaltyClient(**self._resource_kwargs())
        return self._royalty

    @property
    def permission(self) -> PermissionClient:
        if self._permission is None:
            self._permission = PermissionClient(**self._resource_kwargs())
        return self._permission

    @property
    def ip_account(self) -> IPAccountClient:
        if self._ip_account is None:
            self._ip_account = IPAccountClient(**self._resource_kwargs())
        return self._ip_account

    @property
    def nft(self) -> NftClient:
        if self._nft is None:
            self._nft = NftClient(**self._resource_kwargs())
        return self._nft


def _validate_rpc_url(url: Any) -> None:
    parsed = urllib.parse.urlparse(url)
    host = parsed.hostname or ""
    is_local = host in ("localhost", "127.0.0.1")
    if parsed.scheme != "https" and not is_local:
        raise ValueError(f"rpc_url must use https:// for security (got: {parsed.scheme}://)")
