"""
IP account client.
"""
from typing import Any, Mapping, Union

from ..abi import IP_ACCOUNT_IMPL_ABI
from ..models import (
    IPAccountExecuteRequest,
    IPAccountExecuteResponse,
    IPAccountExecuteWithSigRequest,
    TokenResponse,
    coerce_request,
)
from ..utils import validate_address
from .base import ResourceClient


class IPAccountClient(ResourceClient):
    """Execute calls from, and read state of, an IP asset's account."""

    def ip_account(self, ip_id: str) -> Any:
        return self._contract(validate_address(ip_id, "ipId"), IP_ACCOUNT_IMPL_ABI)

    def execute(self, request: Union[IPAccountExecuteRequest, Mapping[str, Any]]) -> IPAccountExecuteResponse:
        """Execute an arbitrary call from the IP account (caller must own it)."""
        req = coerce_request(IPAccountExecuteRequest, request)
        result = self._execute(
            self.ip_account(req.ip_id),
            "execute",
            (req.to, req.value, req.data),
            req.tx_options,
            value=req.value,
        )
        return IPAccountExecuteResponse(tx_hash=result.tx_hash, encoded_tx_data=result.encoded_tx_data)

    def execute_with_sig(
        self, request: Union[IPAccountExecuteWithSigRequest, Mapping[str, Any]]
    ) -> IPAccountExecuteResponse:
        """
        Execute a call from the IP account authorised by an off-chain signature.

        The signature must be produced by ``signer`` over the IP account's
        current state and ``deadline``.
        """
        req = coerce_request(IPAccountExecuteWithSigRequest, request)
        result = self._execute(
            self.ip_account(req.ip_id),
            "executeWithSig",
            (req.to, req.value, req.data, req.signer, req.deadline, req.signature),
            req.tx_options,
            value=req.value,
        )
        return IPAccountExecuteResponse(tx_hash=result.tx_hash, encoded_tx_data=result.encoded_tx_data)

    def get_ip_account_nonce(self, ip_id: str) -> Any:
        """Read the IP account's state nonce, used when building execute signatures."""
        return self.ip_account(ip_id).functions.state().call()

    def get_token(self, ip_id: str) -> TokenResponse:
        """Read the NFT that owns the IP account."""
        chain_id, token_contract, token_id = self.ip_account(ip_id).functions.token().call()
        return TokenResponse(chain_id=chain_id, token_contract=token_contract, token_id=token_id)
