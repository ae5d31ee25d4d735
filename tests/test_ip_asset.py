"""
Tests for the IPAssetClient.
"""
import pytest
from eth_abi import decode
from hexbytes import HexBytes
from pydantic import ValidationError

from story_protocol_sdk.constants import DEFAULT_SIGNATURE_DEADLINE, ZERO_HASH
from story_protocol_sdk.models import AccessPermission
from story_protocol_sdk.pil import PIL_TYPE
from story_protocol_sdk.resources import IPAssetClient
from story_protocol_sdk.sign import next_account_state
from story_protocol_sdk.utils import function_selector

from tests.test_helpers import (
    TEST_CURRENCY,
    TEST_IP_ID,
    TEST_NFT_CONTRACT,
    TEST_OTHER_IP_ID,
    TEST_SENDER,
    TEST_TX_HASH,
    create_resource,
    stub_read,
    stub_write,
)


@pytest.fixture
def client(mock_w3, mock_signer):
    return create_resource(IPAssetClient, mock_w3, mock_signer)


@pytest.fixture
def registry(client):
    return client.ip_asset_registry


def _emit_ip_registered(registry, ip_id=TEST_IP_ID, token_id=3):
    registry.events.IPRegistered.return_value.process_receipt.return_value = [{
        "address": registry.address,
        "args": {"ipId": ip_id, "chainId": 1513, "tokenContract": TEST_NFT_CONTRACT, "tokenId": token_id}
    }]


class TestRegister:
    def test_register_and_wait(self, client, registry):
        stub_read(registry, "ipId", TEST_IP_ID)
        stub_read(registry, "isRegistered", False)
        fn = stub_write(registry, "register")
        _emit_ip_registered(registry)

        response = client.register({
            "nftContract": TEST_NFT_CONTRACT,
            "tokenId": 3,
            "txOptions": {"waitForTransaction": True},
        })

        assert response.tx_hash == TEST_TX_HASH
        assert response.ip_id == TEST_IP_ID
        assert response.token_id == 3
        fn.assert_called_with(1513, TEST_NFT_CONTRACT, 3)

    def test_already_registered_skips_transaction(self, client, registry, mock_w3):
        stub_read(registry, "ipId", TEST_IP_ID)
        stub_read(registry, "isRegistered", True)

        response = client.register({"nftContract": TEST_NFT_CONTRACT, "tokenId": 3})

        assert response.ip_id == TEST_IP_ID
        assert response.tx_hash is None
        mock_w3.eth.send_raw_transaction.assert_not_called()

    def test_get_ip_id_uses_chain_id(self, client, registry):
        fn = stub_read(registry, "ipId", TEST_IP_ID)
        assert client.get_ip_id(TEST_NFT_CONTRACT, 9) == TEST_IP_ID
        fn.assert_called_with(1513, TEST_NFT_CONTRACT, 9)


class TestRegisterDerivative:
    def _request(self, **overrides):
        request = {
            "childIpId": TEST_IP_ID,
            "parentIpIds": [TEST_OTHER_IP_ID],
            "licenseTermsIds": [1],
        }
        request.update(overrides)
        return request

    def test_register_derivative_defaults_template(self, client, registry):
        stub_read(registry, "isRegistered", True)
        fn = stub_write(client.licensing_module, "registerDerivative")

        response = client.register_derivative(self._request())

        assert response.tx_hash == TEST_TX_HASH
        fn.assert_called_with(
            TEST_IP_ID, [TEST_OTHER_IP_ID], [1], client.contracts.pi_license_template, "0x"
        )

    def test_unregistered_parent(self, client, registry):
        stub_read(registry, "isRegistered", side_effect=lambda ip_id: ip_id == TEST_IP_ID)

        with pytest.raises(ValueError, match=TEST_OTHER_IP_ID):
            client.register_derivative(self._request())

    def test_length_mismatch(self, client):
        with pytest.raises(ValueError, match="same length"):
            client.register_derivative(self._request(licenseTermsIds=[1, 2]))

    def test_empty_license_terms(self, client):
        with pytest.raises(ValidationError):
            client.register_derivative(self._request(licenseTermsIds=[]))

    def test_with_license_tokens(self, client, registry):
        stub_read(registry, "isRegistered", True)
        fn = stub_write(client.licensing_module, "registerDerivativeWithLicenseTokens")

        response = client.register_derivative_with_license_tokens(
            {"childIpId": TEST_IP_ID, "licenseTokenIds": [4, 5]}
        )

        assert response.tx_hash == TEST_TX_HASH
        fn.assert_called_with(TEST_IP_ID, [4, 5], "0x")

    def test_with_no_license_tokens(self, client):
        with pytest.raises(ValueError, match="licenseTokenIds"):
            client.register_derivative_with_license_tokens({"childIpId": TEST_IP_ID, "licenseTokenIds": []})


class TestCreateIpAssetWithPilTerms:
    def test_mint_register_and_attach(self, client, registry):
        fn = stub_write(client.spg, "mintAndRegisterIpAndAttachPILTerms")
        _emit_ip_registered(registry, token_id=8)
        stub_read(client.license_template, "getLicenseTermsId", 2)

        response = client.create_ip_asset_with_pil_terms({
            "nftContract": TEST_NFT_CONTRACT,
            "pilType": PIL_TYPE.COMMERCIAL_USE,
            "mintingFee": 100,
            "currency": TEST_CURRENCY,
            "txOptions": {"waitForTransaction": True},
        })

        assert response.ip_id == TEST_IP_ID
        assert response.token_id == 8
        assert response.license_terms_id == 2
        nft_contract, recipient, metadata, terms = fn.call_args[0]
        assert nft_contract == TEST_NFT_CONTRACT
        assert recipient == TEST_SENDER
        assert metadata == ("", "0x" + "00" * 32, "0x" + "00" * 32)
        assert terms[2] == 100

    def test_commercial_type_requires_fee(self, client):
        with pytest.raises(ValueError, match="mintingFee"):
            client.create_ip_asset_with_pil_terms({
                "nftContract": TEST_NFT_CONTRACT,
                "pilType": PIL_TYPE.COMMERCIAL_REMIX,
            })


def _decode_set_permission(data):
    return decode(["address", "address", "address", "bytes4", "uint8"], bytes(HexBytes(data))[4:])


class TestRegisterIpAndAttachPilTerms:
    @pytest.fixture
    def unregistered(self, registry):
        stub_read(registry, "ipId", TEST_IP_ID)
        stub_read(registry, "isRegistered", False)

    def test_register_attach_and_wait(self, client, registry, unregistered, mock_signer):
        fn = stub_write(client.spg, "registerIpAndAttachPILTerms")
        _emit_ip_registered(registry)
        stub_read(client.license_template, "getLicenseTermsId", 2)

        response = client.register_ip_and_attach_pil_terms({
            "nftContract": TEST_NFT_CONTRACT,
            "tokenId": 3,
            "pilType": PIL_TYPE.NON_COMMERCIAL_REMIX,
            "deadline": 500,
            "txOptions": {"waitForTransaction": True},
        })

        assert response.tx_hash == TEST_TX_HASH
        assert response.ip_id == TEST_IP_ID
        assert response.license_terms_id == 2
        nft_contract, token_id, metadata, terms, sig_metadata, sig_attach = fn.call_args[0]
        assert (nft_contract, token_id) == (TEST_NFT_CONTRACT, 3)
        assert sig_metadata == (TEST_SENDER, 1700000500, "0x" + "11" * 65)
        assert sig_attach == (TEST_SENDER, 1700000500, "0x" + "11" * 65)
        assert mock_signer.sign_typed_data.call_count == 2

    def test_signatures_chain_account_state(self, client, registry, unregistered, mock_signer):
        stub_write(client.spg, "registerIpAndAttachPILTerms")

        client.register_ip_and_attach_pil_terms({
            "nftContract": TEST_NFT_CONTRACT,
            "tokenId": 3,
            "pilType": PIL_TYPE.NON_COMMERCIAL_REMIX,
        })

        first, second = [c.kwargs for c in mock_signer.sign_typed_data.call_args_list]
        assert first["domain_data"]["verifyingContract"] == TEST_IP_ID
        assert first["message_data"]["to"] == client.contracts.access_controller
        assert first["message_data"]["deadline"] == 1700000000 + DEFAULT_SIGNATURE_DEADLINE

        first_nonce = next_account_state(ZERO_HASH, first["message_data"]["data"])
        assert first["message_data"]["nonce"] == HexBytes(first_nonce)
        assert second["message_data"]["nonce"] == HexBytes(
            next_account_state(first_nonce, second["message_data"]["data"])
        )

        ip_account, spg, to, func, permission = _decode_set_permission(first["message_data"]["data"])
        assert ip_account.lower() == TEST_IP_ID.lower()
        assert spg.lower() == client.contracts.spg.lower()
        assert to.lower() == client.contracts.core_metadata_module.lower()
        assert func == bytes(HexBytes(function_selector("setAll(address,string,bytes32,bytes32)")))
        assert permission == AccessPermission.ALLOW

        _, _, to, func, _ = _decode_set_permission(second["message_data"]["data"])
        assert to.lower() == client.contracts.licensing_module.lower()
        assert func == bytes(HexBytes(function_selector("attachLicenseTerms(address,address,uint256)")))

    def test_already_registered(self, client, registry, mock_w3, mock_signer):
        stub_read(registry, "ipId", TEST_IP_ID)
        stub_read(registry, "isRegistered", True)

        with pytest.raises(ValueError, match="already registered"):
            client.register_ip_and_attach_pil_terms({
                "nftContract": TEST_NFT_CONTRACT,
                "tokenId": 3,
                "pilType": PIL_TYPE.NON_COMMERCIAL_REMIX,
            })
        mock_signer.sign_typed_data.assert_not_called()
        mock_w3.eth.send_raw_transaction.assert_not_called()

    def test_requires_signer(self, mock_w3):
        client = create_resource(IPAssetClient, mock_w3, None)
        stub_read(client.ip_asset_registry, "ipId", TEST_IP_ID)
        stub_read(client.ip_asset_registry, "isRegistered", False)

        with pytest.raises(ValueError, match="No signer"):
            client.register_ip_and_attach_pil_terms({
                "nftContract": TEST_NFT_CONTRACT,
                "tokenId": 3,
                "pilType": PIL_TYPE.NON_COMMERCIAL_REMIX,
            })


class TestRegisterIpAndMakeDerivative:
    def _request(self, **deriv_overrides):
        deriv = {"parentIpIds": [TEST_OTHER_IP_ID], "licenseTermsIds": [1]}
        deriv.update(deriv_overrides)
        return {
            "nftContract": TEST_NFT_CONTRACT,
            "tokenId": 3,
            "derivData": deriv,
            "txOptions": {"waitForTransaction": True},
        }

    @pytest.fixture
    def new_child(self, client, registry):
        stub_read(registry, "ipId", TEST_IP_ID)
        stub_read(registry, "isRegistered", side_effect=lambda ip_id: ip_id == TEST_OTHER_IP_ID)
        return stub_read(client.license_registry, "hasIpAttachedLicenseTerms", True)

    def test_register_as_derivative(self, client, registry, new_child, mock_signer):
        fn = stub_write(client.spg, "registerIpAndMakeDerivative")
        _emit_ip_registered(registry)

        response = client.register_ip_and_make_derivative(self._request())

        assert response.ip_id == TEST_IP_ID
        nft_contract, token_id, deriv, metadata, sig_metadata, sig_register = fn.call_args[0]
        assert (nft_contract, token_id) == (TEST_NFT_CONTRACT, 3)
        assert deriv == ([TEST_OTHER_IP_ID], client.contracts.pi_license_template, [1], "0x")
        assert sig_register[0] == TEST_SENDER
        new_child.assert_called_with(TEST_OTHER_IP_ID, client.contracts.pi_license_template, 1)

        second = mock_signer.sign_typed_data.call_args_list[1].kwargs
        _, _, to, func, _ = _decode_set_permission(second["message_data"]["data"])
        assert to.lower() == client.contracts.licensing_module.lower()
        assert func == bytes(HexBytes(
            function_selector("registerDerivative(address,address[],uint256[],address,bytes)")
        ))

    def test_parent_without_terms(self, client, new_child, mock_w3):
        new_child.return_value.call.return_value = False

        with pytest.raises(ValueError, match="must be attached"):
            client.register_ip_and_make_derivative(self._request())
        mock_w3.eth.send_raw_transaction.assert_not_called()

    def test_unregistered_parent(self, client, registry):
        stub_read(registry, "ipId", TEST_IP_ID)
        stub_read(registry, "isRegistered", False)

        with pytest.raises(ValueError, match=TEST_OTHER_IP_ID):
            client.register_ip_and_make_derivative(self._request())

    def test_length_mismatch(self, client):
        with pytest.raises(ValidationError, match="same length"):
            client.register_ip_and_make_derivative(self._request(licenseTermsIds=[1, 2]))


class TestMintAndRegisterIpAndMakeDerivative:
    def test_mint_and_register(self, client, registry, mock_signer):
        stub_read(registry, "isRegistered", True)
        stub_read(client.license_registry, "hasIpAttachedLicenseTerms", True)
        fn = stub_write(client.spg, "mintAndRegisterIpAndMakeDerivative")
        _emit_ip_registered(registry, token_id=8)

        response = client.mint_and_register_ip_and_make_derivative({
            "nftContract": TEST_NFT_CONTRACT,
            "derivData": {
                "parentIpIds": [TEST_OTHER_IP_ID],
                "licenseTermsIds": [4],
                "licenseTemplate": TEST_CURRENCY,
            },
            "txOptions": {"waitForTransaction": True},
        })

        assert response.ip_id == TEST_IP_ID
        assert response.token_id == 8
        fn.assert_called_with(
            TEST_NFT_CONTRACT,
            ([TEST_OTHER_IP_ID], TEST_CURRENCY, [4], "0x"),
            ("", "0x" + "00" * 32, "0x" + "00" * 32),
            TEST_SENDER,
        )
        mock_signer.sign_typed_data.assert_not_called()

    def test_without_wait_returns_hash(self, client, registry):
        stub_read(registry, "isRegistered", True)
        stub_read(client.license_registry, "hasIpAttachedLicenseTerms", True)
        stub_write(client.spg, "mintAndRegisterIpAndMakeDerivative")

        response = client.mint_and_register_ip_and_make_derivative({
            "nftContract": TEST_NFT_CONTRACT,
            "derivData": {"parentIpIds": [TEST_OTHER_IP_ID], "licenseTermsIds": [4]},
            "recipient": TEST_CURRENCY,
        })

        assert response.tx_hash == TEST_TX_HASH
        assert response.ip_id is None
        assert client.spg.functions.mintAndRegisterIpAndMakeDerivative.call_args[0][3] == TEST_CURRENCY

    def test_empty_parents(self, client):
        with pytest.raises(ValidationError, match="parent_ip_ids"):
            client.mint_and_register_ip_and_make_derivative({
                "nftContract": TEST_NFT_CONTRACT,
                "derivData": {"parentIpIds": [], "licenseTermsIds": []},
            })
