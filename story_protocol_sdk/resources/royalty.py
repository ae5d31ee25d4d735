"""
Royalty client: vault snapshots, revenue claims and royalty payments.
"""
from typing import Any, Mapping, Union

from ..abi import IP_ASSET_REGISTRY_ABI, IP_ROYALTY_VAULT_ABI, ROYALTY_MODULE_ABI, ROYALTY_POLICY_LAP_ABI
from ..constants import ZERO_ADDRESS
from ..events import decode_revenue_token_claimed, decode_royalty_tokens_collected, decode_snapshot_completed
from ..models import (
    ClaimableRevenueRequest,
    ClaimRevenueRequest,
    ClaimRevenueResponse,
    CollectRoyaltyTokensRequest,
    CollectRoyaltyTokensResponse,
    PayRoyaltyOnBehalfRequest,
    PayRoyaltyOnBehalfResponse,
    SnapshotRequest,
    SnapshotResponse,
    coerce_request,
)
from ..utils import validate_address
from .base import ResourceClient


class RoyaltyClient(ResourceClient):

    @property
    def royalty_module(self) -> Any:
        return self._contract(self.contracts.royalty_module, ROYALTY_MODULE_ABI)

    @property
    def royalty_policy_lap(self) -> Any:
        return self._contract(self.contracts.royalty_policy_lap, ROYALTY_POLICY_LAP_ABI)

    @property
    def ip_asset_registry(self) -> Any:
        return self._contract(self.contracts.ip_asset_registry, IP_ASSET_REGISTRY_ABI)

    def get_royalty_vault_address(self, royalty_vault_ip_id: str) -> str:
        """
        Look up the royalty vault deployed for an IP asset.

        Raises:
            ValueError: If the IP is not registered or has no royalty vault yet
        """
        ip_id = validate_address(royalty_vault_ip_id, "royaltyVaultIpId")
        if not self.ip_asset_registry.functions.isRegistered(ip_id).call():
            raise ValueError(f"The royalty vault IP with id {ip_id} is not registered")
        data = self.royalty_policy_lap.functions.getRoyaltyData(ip_id).call()
        vault = data[1]
        if not vault or vault == ZERO_ADDRESS:
            raise ValueError(f"The royalty vault IP with id {ip_id} address is not set")
        return vault

    def _vault(self, royalty_vault_ip_id: str) -> Any:
        return self._contract(self.get_royalty_vault_address(royalty_vault_ip_id), IP_ROYALTY_VAULT_ABI)

    def collect_royalty_tokens(
        self, request: Union[CollectRoyaltyTokensRequest, Mapping[str, Any]]
    ) -> CollectRoyaltyTokensResponse:
        """Collect the royalty tokens a parent IP is owed by a derivative's vault."""
        req = coerce_request(CollectRoyaltyTokensRequest, request)
        if not self.ip_asset_registry.functions.isRegistered(req.parent_ip_id).call():
            raise ValueError(f"The parent IP with id {req.parent_ip_id} is not registered")
        vault = self._vault(req.royalty_vault_ip_id)

        result = self._execute(vault, "collectRoyaltyTokens", (req.parent_ip_id,), req.tx_options)
        if result.receipt is None:
            return CollectRoyaltyTokensResponse(tx_hash=result.tx_hash, encoded_tx_data=result.encoded_tx_data)

        event = decode_royalty_tokens_collected(vault, result.receipt)
        return CollectRoyaltyTokensResponse(
            tx_hash=result.tx_hash, royalty_tokens_collected=event.royalty_tokens_collected
        )

    def pay_royalty_on_behalf(
        self, request: Union[PayRoyaltyOnBehalfRequest, Mapping[str, Any]]
    ) -> PayRoyaltyOnBehalfResponse:
        """Pay royalties to ``receiver_ip_id`` on behalf of ``payer_ip_id``."""
        req = coerce_request(PayRoyaltyOnBehalfRequest, request)
        if req.amount <= 0:
            raise ValueError("amount must be positive")
        for ip_id in (req.receiver_ip_id, req.payer_ip_id):
            if not self.ip_asset_registry.functions.isRegistered(ip_id).call():
                raise ValueError(f"The IP with id {ip_id} is not registered")

        result = self._execute(
            self.royalty_module,
            "payRoyaltyOnBehalf",
            (req.receiver_ip_id, req.payer_ip_id, req.token, req.amount),
            req.tx_options,
        )
        return PayRoyaltyOnBehalfResponse(tx_hash=result.tx_hash, encoded_tx_data=result.encoded_tx_data)

    def claimable_revenue(self, request: Union[ClaimableRevenueRequest, Mapping[str, Any]]) -> int:
        """Read the revenue ``account`` can claim from a vault snapshot."""
        req = coerce_request(ClaimableRevenueRequest, request)
        vault = self._vault(req.royalty_vault_ip_id)
        return vault.functions.claimableRevenue(req.account, req.snapshot_id, req.token).call()

    def claim_revenue(self, request: Union[ClaimRevenueRequest, Mapping[str, Any]]) -> ClaimRevenueResponse:
        """Claim revenue across a batch of snapshots."""
        req = coerce_request(ClaimRevenueRequest, request)
        vault = self._vault(req.royalty_vault_ip_id)

        result = self._execute(vault, "claimRevenueBySnapshotBatch", (req.snapshot_ids, req.token), req.tx_options)
        if result.receipt is None:
            return ClaimRevenueResponse(tx_hash=result.tx_hash, encoded_tx_data=result.encoded_tx_data)

        event = decode_revenue_token_claimed(vault, result.receipt)
        return ClaimRevenueResponse(tx_hash=result.tx_hash, claimable_token=event.amount)

    def snapshot(self, request: Union[SnapshotRequest, Mapping[str, Any]]) -> SnapshotResponse:
        """Take a revenue snapshot of an IP's royalty vault."""
        req = coerce_request(SnapshotRequest, request)
        vault = self._vault(req.royalty_vault_ip_id)

        result = self._execute(vault, "snapshot", (), req.tx_options)
        if result.receipt is None:
            return SnapshotResponse(tx_hash=result.tx_hash, encoded_tx_data=result.encoded_tx_data)

        event = decode_snapshot_completed(vault, result.receipt)
        return SnapshotResponse(tx_hash=result.tx_hash, snapshot_id=event.snapshot_id)
