"""
Dispute module client.
"""
from typing import Any, Mapping, Union

from ..abi import DISPUTE_MODULE_ABI
from ..events import decode_dispute_raised
from ..models import (
    CancelDisputeRequest,
    CancelDisputeResponse,
    RaiseDisputeRequest,
    RaiseDisputeResponse,
    ResolveDisputeRequest,
    ResolveDisputeResponse,
    coerce_request,
)
from ..utils import string_to_bytes32, validate_address
from .base import ResourceClient


class DisputeClient(ResourceClient):
    """Raise, cancel and resolve disputes against IP assets."""

    @property
    def dispute_module(self) -> Any:
        return self._contract(self.contracts.dispute_module, DISPUTE_MODULE_ABI)

    def raise_dispute(self, request: Union[RaiseDisputeRequest, Mapping[str, Any]]) -> RaiseDisputeResponse:
        """
        Raise a dispute against an IP asset.

        Args:
            request: Target IP, evidence link, dispute tag (e.g. "PLAGIARISM") and tx options

        Returns:
            Response with the tx hash; ``dispute_id`` is set when the
            transaction was awaited

        Raises:
            ValueError: If the tag does not fit in 32 bytes
            SimulationError: If the dispute module would reject the call
            SubmissionError: If signing or broadcasting fails
            ConfirmationTimeoutError: If the receipt does not arrive in time
            DecodingError: If the receipt carries no DisputeRaised event
        """
        req = coerce_request(RaiseDisputeRequest, request)
        result = self._execute(
            self.dispute_module,
            "raiseDispute",
            (req.target_ip_id, req.link_to_dispute_evidence, string_to_bytes32(req.target_tag), req.data),
            req.tx_options,
        )
        if result.receipt is None:
            return RaiseDisputeResponse(tx_hash=result.tx_hash, encoded_tx_data=result.encoded_tx_data)

        event = decode_dispute_raised(self.dispute_module, result.receipt)
        self.logger.info(f"Dispute {event.dispute_id} raised against {event.target_ip_id}")
        return RaiseDisputeResponse(tx_hash=result.tx_hash, dispute_id=event.dispute_id)

    def cancel_dispute(self, request: Union[CancelDisputeRequest, Mapping[str, Any]]) -> CancelDisputeResponse:
        """Cancel a dispute raised by the caller."""
        req = coerce_request(CancelDisputeRequest, request)
        result = self._execute(self.dispute_module, "cancelDispute", (req.dispute_id, req.data), req.tx_options)
        return CancelDisputeResponse(tx_hash=result.tx_hash, encoded_tx_data=result.encoded_tx_data)

    def resolve_dispute(self, request: Union[ResolveDisputeRequest, Mapping[str, Any]]) -> ResolveDisputeResponse:
        """Resolve a dispute once arbitration has concluded."""
        req = coerce_request(ResolveDisputeRequest, request)
        result = self._execute(self.dispute_module, "resolveDispute", (req.dispute_id, req.data), req.tx_options)
        return ResolveDisputeResponse(tx_hash=result.tx_hash, encoded_tx_data=result.encoded_tx_data)

    # Read functions return the contract's decoded value unmodified.

    def read_disputes(self, dispute_id: int) -> Any:
        return self.dispute_module.functions.disputes(dispute_id).call()

    def read_is_whitelisted_arbitration_policy(self, arbitration_policy: str) -> bool:
        policy = validate_address(arbitration_policy, "arbitrationPolicy")
        return self.dispute_module.functions.isWhitelistedArbitrationPolicy(policy).call()

    def read_is_whitelisted_dispute_tag(self, tag: str) -> bool:
        return self.dispute_module.functions.isWhitelistedDisputeTag(string_to_bytes32(tag)).call()

    def read_base_arbitration_policy(self) -> str:
        return self.dispute_module.functions.baseArbitrationPolicy().call()

    def read_dispute_id(self) -> int:
        return self.dispute_module.functions.disputeCounter().call()

    def read_name(self) -> str:
        return self.dispute_module.functions.name().call()
