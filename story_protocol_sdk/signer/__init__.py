"""
Signer interfaces for the Story Protocol SDK.
"""
from typing import Any, Dict, Protocol, runtime_checkable

from .local import LocalSigner


@runtime_checkable
class Signer(Protocol):
    """Protocol for custom signers (hardware wallets, KMS, etc.)"""
    address: str

    def sign_transaction(self, transaction_dict: Dict[str, Any]) -> Any:
        """Sign transaction and return a signed tx object exposing ``raw_transaction``"""
        ...

    def sign_typed_data(
        self,
        domain_data: Dict[str, Any],
        message_types: Dict[str, Any],
        message_data: Dict[str, Any],
    ) -> Any:
        """Sign EIP-712 typed data and return a signed message exposing ``signature``"""
        ...


__all__ = ["Signer", "LocalSigner"]
