"""
Pytest fixtures for the Story Protocol SDK tests.
"""
import time
from unittest.mock import MagicMock

import pytest
from hexbytes import HexBytes
from web3 import Web3
from web3.exceptions import TimeExhausted, TransactionNotFound

from story_protocol_sdk.config import NetworkConfig
from story_protocol_sdk.tx import TransactionHandler

from tests.test_helpers import TEST_SENDER, TEST_TX_HASH_BYTES


# Make time.sleep instantaneous so receipt polling doesn't slow the suite down
@pytest.fixture(autouse=True)
def _fast_sleep(monkeypatch):
    monkeypatch.setattr(time, "sleep", lambda *_a, **_kw: None)


@pytest.fixture(autouse=True)
def _reset_network_cache():
    """Keep tests that poke the network cache from leaking into each other."""
    NetworkConfig._networks_cache = None
    yield
    NetworkConfig._networks_cache = None


@pytest.fixture
def mock_w3():
    """
    Mock Web3 instance.

    ``eth.contract`` hands back one MagicMock per address so a test can reach
    the same contract object the client under test uses and configure its
    functions, events and ``encode_abi``.
    """
    w3 = MagicMock(spec=Web3)
    eth = MagicMock()
    eth.chain_id = 1513
    eth.get_transaction_count = MagicMock(return_value=7)
    eth.send_raw_transaction = MagicMock(return_value=TEST_TX_HASH_BYTES)
    eth.get_transaction_receipt = MagicMock(return_value={"status": 1, "blockNumber": 100, "logs": []})
    eth.wait_for_transaction_receipt = MagicMock(return_value={"status": 1, "blockNumber": 100, "logs": []})
    eth.get_block = MagicMock(return_value={"number": 100, "timestamp": 1700000000})

    contracts = {}

    def contract(address, abi):
        if address not in contracts:
            contract_mock = MagicMock()
            contract_mock.address = address
            contract_mock.abi = abi
            contract_mock.encode_abi = MagicMock(return_value="0xdeadbeef")
            contracts[address] = contract_mock
        return contracts[address]

    eth.contract = MagicMock(side_effect=contract)
    w3.eth = eth
    w3.contracts = contracts
    return w3


@pytest.fixture
def mock_signer():
    """Signer double exposing the same surface as LocalSigner."""
    signer = MagicMock()
    signer.address = TEST_SENDER
    signed = MagicMock()
    signed.raw_transaction = b"\x01\x02\x03"
    signer.sign_transaction = MagicMock(return_value=signed)
    typed = MagicMock()
    typed.signature = HexBytes(b"\x11" * 65)
    signer.sign_typed_data = MagicMock(return_value=typed)
    return signer


@pytest.fixture
def tx_handler(mock_w3, mock_signer):
    return TransactionHandler(mock_w3, mock_signer, timeout=5, poll_interval=0.01)


@pytest.fixture
def pending_receipt(mock_w3):
    """Make the node report the transaction as not yet mined."""
    mock_w3.eth.get_transaction_receipt.side_effect = TransactionNotFound("not found")
    mock_w3.eth.wait_for_transaction_receipt.side_effect = TimeExhausted("not mined")
    return mock_w3
