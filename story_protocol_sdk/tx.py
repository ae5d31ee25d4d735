"""
Transaction pipeline: simulate, submit, and optionally wait for confirmation.

Every write call made by a resource client goes through
``TransactionHandler.execute``, which sequences the three stages below. No stage
retries on its own; failures surface to the caller as SDK exceptions chained to
the underlying web3 error.
"""
import logging
import threading
import time
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Tuple

from web3 import Web3
from web3.exceptions import ContractLogicError, TimeExhausted, TransactionNotFound, Web3Exception

from .constants import DEFAULT_CONFIRMATION_TIMEOUT, DEFAULT_POLL_INTERVAL, GAS_ESTIMATE_BUFFER
from .exceptions import (
    ConfirmationTimeoutError,
    SimulationError,
    SubmissionError,
    TransactionRevertedError,
    WaitCancelledError,
)
from .models import EncodedTxData, TxOptions
from .signer import Signer
from .utils import to_hex_hash


@dataclass(frozen=True)
class ContractCall:
    """A single contract method invocation: target, method name, and arguments."""
    contract: Any
    function_name: str
    args: Tuple[Any, ...] = ()
    value: int = 0

    @property
    def address(self) -> str:
        return self.contract.address

    def function(self) -> Any:
        return getattr(self.contract.functions, self.function_name)(*self.args)

    def encode(self) -> EncodedTxData:
        data = self.contract.encode_abi(self.function_name, args=list(self.args))
        return EncodedTxData(to=self.address, data=data, value=self.value)


@dataclass
class TxResult:
    tx_hash: Optional[str] = None
    receipt: Optional[Mapping[str, Any]] = None
    encoded_tx_data: Optional[EncodedTxData] = None


class ContractCallAdapter:
    """Validates a call against the node and builds an executable request."""

    def __init__(self, w3: Web3, logger: Optional[logging.Logger] = None):
        self.w3 = w3
        self.logger = logger or logging.getLogger(__name__)

    def simulate(self, call: ContractCall, sender: Optional[str] = None) -> Dict[str, Any]:
        """
        Simulate ``call`` with eth_call and build the transaction request.

        Args:
            call: The contract call to validate
            sender: Address the call is simulated from

        Returns:
            Transaction dict ready to be signed (gas already estimated)

        Raises:
            SimulationError: If the node reports the call would revert or is malformed
        """
        params: Dict[str, Any] = {"value": call.value}
        if sender:
            params["from"] = sender

        self.logger.debug(f"Simulating {call.function_name} on {call.address}")
        try:
            fn = call.function()
            fn.call(params)
            request = dict(fn.build_transaction(params))
        except ContractLogicError as e:
            reason = getattr(e, "message", None) or str(e)
            self.logger.error(f"Simulation of {call.function_name} reverted: {reason}")
            raise SimulationError(f"Simulation of {call.function_name} reverted: {reason}", reason=reason) from e
        except (Web3Exception, ValueError, TypeError) as e:
            self.logger.error(f"Simulation of {call.function_name} failed: {e}")
            raise SimulationError(f"Simulation of {call.function_name} failed: {e}", reason=str(e)) from e

        if "gas" in request:
            request["gas"] = int(request["gas"] * GAS_ESTIMATE_BUFFER)
            self.logger.debug(f"Estimated gas (with buffer): {request['gas']}")
        return request


class TransactionSubmitter:
    """Signs a simulated request and broadcasts it."""

    def __init__(self, w3: Web3, signer: Optional[Signer] = None, logger: Optional[logging.Logger] = None):
        self.w3 = w3
        self.signer = signer
        self.logger = logger or logging.getLogger(__name__)

    def submit(self, request: Mapping[str, Any]) -> str:
        """
        Sign and send a transaction request.

        Args:
            request: Transaction dict produced by ContractCallAdapter.simulate

        Returns:
            Transaction hash as a 0x-prefixed hex string

        Raises:
            SubmissionError: If no signer is configured, signing fails, or the
                node rejects the transaction
        """
        if self.signer is None:
            raise SubmissionError("No signer configured; cannot submit transaction")

        tx = dict(request)
        tx.setdefault("from", self.signer.address)
        try:
            if "nonce" not in tx:
                tx["nonce"] = self.w3.eth.get_transaction_count(self.signer.address, "pending")
        except (Web3Exception, ValueError) as e:
            self.logger.error(f"Failed to fetch nonce: {e}")
            raise SubmissionError(f"Failed to fetch nonce: {e}") from e

        try:
            signed_tx = self.signer.sign_transaction(tx)
        except Exception as e:
            self.logger.error(f"Transaction signing failed: {e}")
            raise SubmissionError(f"Failed to sign transaction: {e}") from e

        try:
            tx_hash = self.w3.eth.send_raw_transaction(signed_tx.raw_transaction)
        except (Web3Exception, ValueError) as e:
            self.logger.error(f"Failed to send transaction: {e}")
            raise SubmissionError(f"Failed to send transaction: {e}") from e

        tx_hash_hex = to_hex_hash(tx_hash)
        self.logger.info(f"Transaction sent: {tx_hash_hex}")
        return tx_hash_hex


class ConfirmationWaiter:
    """Waits for a transaction receipt, optionally cancellable."""

    def __init__(
        self,
        w3: Web3,
        timeout: float = DEFAULT_CONFIRMATION_TIMEOUT,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        logger: Optional[logging.Logger] = None,
    ):
        self.w3 = w3
        self.timeout = timeout
        self.poll_interval = poll_interval
        self.logger = logger or logging.getLogger(__name__)

    def wait(
        self,
        tx_hash: str,
        timeout: Optional[float] = None,
        poll_interval: Optional[float] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> Mapping[str, Any]:
        """
        Block until the receipt for ``tx_hash`` is available.

        Without ``cancel_event`` the wait is handed to web3's
        ``wait_for_transaction_receipt``. web3 offers no way to interrupt that
        call, so a cancellable wait polls ``get_transaction_receipt`` itself and
        checks the event between lookups.

        Args:
            tx_hash: Hash returned by the submitter
            timeout: Seconds to wait before giving up (defaults to the waiter's policy)
            poll_interval: Seconds between receipt lookups
            cancel_event: Optional event; setting it aborts the wait

        Returns:
            The transaction receipt

        Raises:
            ConfirmationTimeoutError: If no receipt arrives within ``timeout``
            WaitCancelledError: If ``cancel_event`` is set before a receipt arrives
            TransactionRevertedError: If the transaction was mined with a failed status
        """
        timeout = self.timeout if timeout is None else timeout
        poll_interval = self.poll_interval if poll_interval is None else poll_interval

        self.logger.debug(f"Waiting up to {timeout}s for receipt of {tx_hash}")
        if cancel_event is None:
            try:
                receipt = self.w3.eth.wait_for_transaction_receipt(
                    tx_hash,
                    timeout=timeout,
                    poll_latency=poll_interval,
                )
            except TimeExhausted as e:
                self.logger.error(f"Transaction {tx_hash} not confirmed within {timeout}s")
                raise ConfirmationTimeoutError(
                    f"Transaction {tx_hash} not confirmed within {timeout}s", tx_hash=tx_hash
                ) from e
        else:
            receipt = self._poll_until_mined(tx_hash, timeout, poll_interval, cancel_event)

        if receipt.get("status") == 0:
            self.logger.error(f"Transaction {tx_hash} reverted")
            raise TransactionRevertedError(f"Transaction {tx_hash} reverted", tx_hash=tx_hash)

        self.logger.debug(f"Transaction {tx_hash} mined in block {receipt.get('blockNumber')}")
        return receipt

    def _poll_until_mined(
        self,
        tx_hash: str,
        timeout: float,
        poll_interval: float,
        cancel_event: threading.Event,
    ) -> Mapping[str, Any]:
        deadline = time.monotonic() + timeout
        while True:
            if cancel_event.is_set():
                raise WaitCancelledError(f"Wait for transaction {tx_hash} was cancelled", tx_hash=tx_hash)

            receipt = self._fetch_receipt(tx_hash)
            if receipt is not None:
                return receipt

            if time.monotonic() >= deadline:
                self.logger.error(f"Transaction {tx_hash} not confirmed within {timeout}s")
                raise ConfirmationTimeoutError(
                    f"Transaction {tx_hash} not confirmed within {timeout}s", tx_hash=tx_hash
                )

            cancel_event.wait(poll_interval)

    def _fetch_receipt(self, tx_hash: str) -> Optional[Mapping[str, Any]]:
        try:
            return self.w3.eth.get_transaction_receipt(tx_hash)
        except TransactionNotFound:
            return None


class TransactionHandler:
    """
    Runs a contract write through simulation, submission and confirmation.

    Holds no per-call state; a single handler is shared by all resource clients
    built from the same StoryClient.
    """

    def __init__(
        self,
        w3: Web3,
        signer: Optional[Signer] = None,
        timeout: float = DEFAULT_CONFIRMATION_TIMEOUT,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        logger: Optional[logging.Logger] = None,
    ):
        self.logger = logger or logging.getLogger(__name__)
        self.signer = signer
        self.adapter = ContractCallAdapter(w3, self.logger)
        self.submitter = TransactionSubmitter(w3, signer, self.logger)
        self.waiter = ConfirmationWaiter(w3, timeout, poll_interval, self.logger)

    @property
    def sender(self) -> Optional[str]:
        return self.signer.address if self.signer is not None else None

    def execute(self, call: ContractCall, tx_options: Optional[TxOptions] = None) -> TxResult:
        """
        Execute a contract write.

        Args:
            call: The contract call
            tx_options: Wait/encode options for this call

        Returns:
            TxResult with the hash, plus the receipt when waiting was requested,
            or only the encoded call data in encode-only mode
        """
        options = tx_options or TxOptions()
        if options.encoded_tx_data_only:
            return TxResult(encoded_tx_data=call.encode())

        request = self.adapter.simulate(call, self.sender)
        tx_hash = self.submitter.submit(request)
        if not options.wait_for_transaction:
            return TxResult(tx_hash=tx_hash)

        receipt = self.waiter.wait(
            tx_hash,
            timeout=options.timeout,
            poll_interval=options.poll_interval,
            cancel_event=options.cancel_event,
        )
        return TxResult(tx_hash=tx_hash, receipt=receipt)
