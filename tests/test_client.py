"""
Tests for the StoryClient facade.
"""
import logging

import pytest

from story_protocol_sdk import StoryClient
from story_protocol_sdk.exceptions import NetworkError
from story_protocol_sdk.resources import (
    DisputeClient,
    IPAccountClient,
    IPAssetClient,
    LicenseClient,
    NftClient,
    PermissionClient,
    RoyaltyClient,
)
from story_protocol_sdk.signer import LocalSigner

from tests.test_helpers import TEST_PRIV_KEY, TEST_RPC_URL, create_test_client


def _rpc_result(result):
    def callback(request, context):
        return {"jsonrpc": "2.0", "id": request.json()["id"], "result": result}
    return callback


class TestInit:
    def test_priv_key_creates_local_signer(self):
        client = create_test_client()
        assert isinstance(client.signer, LocalSigner)
        assert client.address == LocalSigner(TEST_PRIV_KEY).address

    def test_custom_signer_wins_over_priv_key(self, mock_signer):
        client = create_test_client(signer=mock_signer)
        assert client.signer is mock_signer

    def test_read_only_client(self):
        client = create_test_client(priv_key=None)
        assert client.signer is None
        with pytest.raises(ValueError, match="No signer"):
            _ = client.address

    def test_uses_bundled_network(self, monkeypatch):
        monkeypatch.delenv("ILIAD_RPC_URL", raising=False)
        client = StoryClient(network="iliad")
        assert client.chain.chain_id == 1513
        assert client.rpc_url == "https://testnet.storyrpc.io"

    def test_env_rpc_override(self, monkeypatch):
        monkeypatch.setenv("ILIAD_RPC_URL", "https://env.example.com")
        client = StoryClient(network="iliad")
        assert client.rpc_url == "https://env.example.com"

    def test_unknown_network(self):
        with pytest.raises(NetworkError, match="Available networks"):
            StoryClient(network="mainnet-nope")

    def test_http_rpc_rejected(self):
        with pytest.raises(ValueError, match="https"):
            create_test_client(rpc_url="http://rpc.example.com")

    @pytest.mark.parametrize("url", ["http://localhost:8545", "http://127.0.0.1:8545"])
    def test_http_localhost_allowed(self, url):
        client = create_test_client(rpc_url=url)
        assert client.rpc_url == url

    def test_contract_override(self):
        override = "0x8888888888888888888888888888888888888888"
        client = create_test_client(contracts={"disputeModule": override})
        assert client.chain.contracts.dispute_module == override
        assert client.dispute.dispute_module.address == override

    def test_custom_logger_is_shared(self):
        logger = logging.getLogger("my-app")
        client = create_test_client(logger=logger)
        assert client.tx.logger is logger
        assert client.license.logger is logger


class TestResources:
    @pytest.mark.parametrize(
        "attr, cls",
        [
            ("dispute", DisputeClient),
            ("license", LicenseClient),
            ("ip_asset", IPAssetClient),
            ("royalty", RoyaltyClient),
            ("permission", PermissionClient),
            ("ip_account", IPAccountClient),
            ("nft", NftClient),
        ],
    )
    def test_lazy_resource_clients(self, attr, cls):
        client = create_test_client()
        resource = getattr(client, attr)
        assert isinstance(resource, cls)
        assert getattr(client, attr) is resource
        assert resource.tx is client.tx
        assert resource.chain is client.chain


class TestChainId:
    def test_assert_chain_id_matches(self, requests_mock):
        requests_mock.post(TEST_RPC_URL, json=_rpc_result("0x5e9"))
        client = create_test_client()
        client.assert_chain_id()

    def test_assert_chain_id_mismatch(self, requests_mock):
        requests_mock.post(TEST_RPC_URL, json=_rpc_result("0x1"))
        client = create_test_client()
        with pytest.raises(NetworkError, match="expected 1513, got 1"):
            client.assert_chain_id()

    def test_assert_chain_id_rpc_failure(self, requests_mock):
        requests_mock.post(TEST_RPC_URL, status_code=404)
        client = create_test_client(retry_count=0)
        with pytest.raises(NetworkError, match="Failed to validate chain ID"):
            client.assert_chain_id()
