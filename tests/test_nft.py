"""
Tests for the NftClient.
"""
import pytest

from story_protocol_sdk.constants import ZERO_ADDRESS
from story_protocol_sdk.resources import NftClient

from tests.test_helpers import TEST_CURRENCY, TEST_NFT_CONTRACT, TEST_SENDER, TEST_TX_HASH, create_resource, stub_write


@pytest.fixture
def client(mock_w3, mock_signer):
    return create_resource(NftClient, mock_w3, mock_signer)


def test_create_collection_and_wait(client):
    fn = stub_write(client.spg, "createCollection")
    client.spg.events.CollectionCreated.return_value.process_receipt.return_value = [
        {"address": client.spg.address, "args": {"nftContract": TEST_NFT_CONTRACT}}
    ]

    response = client.create_nft_collection({
        "name": "Test Collection",
        "symbol": "TC",
        "txOptions": {"waitForTransaction": True},
    })

    assert response.tx_hash == TEST_TX_HASH
    assert response.nft_contract == TEST_NFT_CONTRACT
    fn.assert_called_with("Test Collection", "TC", 0, 0, ZERO_ADDRESS, TEST_SENDER)


def test_create_collection_with_mint_fee(client):
    fn = stub_write(client.spg, "createCollection")

    client.create_nft_collection({
        "name": "Paid",
        "symbol": "PD",
        "maxSupply": 100,
        "mintFee": 10,
        "mintFeeToken": TEST_CURRENCY,
    })

    fn.assert_called_with("Paid", "PD", 100, 10, TEST_CURRENCY, TEST_SENDER)


def test_mint_fee_requires_token(client):
    with pytest.raises(ValueError, match="provided together"):
        client.create_nft_collection({"name": "X", "symbol": "X", "mintFee": 1})


def test_negative_mint_fee(client):
    with pytest.raises(ValueError, match="non-negative"):
        client.create_nft_collection({"name": "X", "symbol": "X", "mintFee": -1, "mintFeeToken": TEST_CURRENCY})


def test_owner_required_without_signer(mock_w3):
    client = create_resource(NftClient, mock_w3, None)
    with pytest.raises(ValueError, match="No signer"):
        client.create_nft_collection({"name": "X", "symbol": "X"})
