"""
Local private-key signer.
"""
from typing import Any, Dict

from eth_account import Account
from eth_account.signers.local import LocalAccount


class LocalSigner:
    """Signs transactions and typed data with an in-process private key."""

    def __init__(self, private_key: str):
        """
        Args:
            private_key: Hex-encoded secp256k1 private key (with or without 0x)

        Raises:
            ValueError: If the key is malformed
        """
        self._account: LocalAccount = Account.from_key(private_key)

    @property
    def address(self) -> str:
        return self._account.address

    def sign_transaction(self, transaction_dict: Dict[str, Any]) -> Any:
        return self._account.sign_transaction(transaction_dict)

    def sign_typed_data(
        self,
        domain_data: Dict[str, Any],
        message_types: Dict[str, Any],
        message_data: Dict[str, Any],
    ) -> Any:
        return self._account.sign_typed_data(
            domain_data=domain_data,
            message_types=message_types,
            message_data=message_data,
        )

    def __repr__(self) -> str:
        return f"LocalSigner(address={self.address})"
