"""
Shared plumbing for resource clients.
"""
import logging
from typing import Any, Dict, Optional, Sequence

from web3 import Web3

from ..config import ChainConfig
from ..constants import DEFAULT_SIGNATURE_DEADLINE
from ..models import TxOptions
from ..signer import Signer
from ..tx import ContractCall, TransactionHandler, TxResult


class ResourceClient:
    """
    Base class for the per-domain clients.

    Holds the immutable handles every call needs (web3 connection, signer,
    chain configuration) and a TransactionHandler for writes. Contract objects
    are cached by address.
    """

    def __init__(
        self,
        w3: Web3,
        chain: ChainConfig,
        signer: Optional[Signer] = None,
        tx_handler: Optional[TransactionHandler] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.w3 = w3
        self.chain = chain
        self.signer = signer
        self.logger = logger or logging.getLogger(__name__)
        self.tx = tx_handler or TransactionHandler(w3, signer, logger=self.logger)
        self._contracts: Dict[str, Any] = {}

    @property
    def contracts(self):
        return self.chain.contracts

    def _contract(self, address: str, abi: Sequence[Dict[str, Any]]) -> Any:
        if address not in self._contracts:
            self._contracts[address] = self.w3.eth.contract(address=address, abi=abi)
        return self._contracts[address]

    def _execute(
        self,
        contract: Any,
        function_name: str,
        args: Sequence[Any] = (),
        tx_options: Optional[TxOptions] = None,
        value: int = 0,
    ) -> TxResult:
        call = ContractCall(contract=contract, function_name=function_name, args=tuple(args), value=value)
        return self.tx.execute(call, tx_options)

    def _wallet_address(self) -> str:
        if self.signer is None:
            raise ValueError("No signer available")
        return self.signer.address

    def _signature_deadline(self, seconds: Optional[int] = None) -> int:
        """Absolute deadline ``seconds`` past the latest block timestamp."""
        seconds = DEFAULT_SIGNATURE_DEADLINE if seconds is None else seconds
        if seconds < 0:
            raise ValueError(f"deadline must not be negative, got: {seconds}")
        return int(self.w3.eth.get_block("latest")["timestamp"]) + seconds
