"""
Shared constants and helpers for the test suite.
"""
from .client_creator import (
    TEST_CURRENCY,
    TEST_IP_ID,
    TEST_NFT_CONTRACT,
    TEST_OTHER_IP_ID,
    TEST_PRIV_KEY,
    TEST_RPC_URL,
    TEST_SENDER,
    TEST_TX_HASH,
    TEST_TX_HASH_BYTES,
    create_resource,
    create_test_client,
    stub_read,
    stub_write,
)

__all__ = [
    "TEST_CURRENCY",
    "TEST_IP_ID",
    "TEST_NFT_CONTRACT",
    "TEST_OTHER_IP_ID",
    "TEST_PRIV_KEY",
    "TEST_RPC_URL",
    "TEST_SENDER",
    "TEST_TX_HASH",
    "TEST_TX_HASH_BYTES",
    "create_resource",
    "create_test_client",
    "stub_read",
    "stub_write",
]
