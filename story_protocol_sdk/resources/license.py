"""
Licensing client: register PIL terms, attach them to IP assets and mint license tokens.
"""
from typing import Any, Dict, Mapping, Optional, Union

from ..abi import IP_ASSET_REGISTRY_ABI, LICENSE_REGISTRY_ABI, LICENSING_MODULE_ABI, PI_LICENSE_TEMPLATE_ABI
from ..events import decode_license_terms_registered, decode_license_tokens_minted
from ..models import (
    AttachLicenseTermsRequest,
    AttachLicenseTermsResponse,
    MintLicenseTokensRequest,
    MintLicenseTokensResponse,
    RegisterCommercialRemixPILRequest,
    RegisterCommercialUsePILRequest,
    RegisterNonComSocialRemixingPILRequest,
    RegisterPILResponse,
    TxOptions,
    coerce_request,
)
from ..pil import PIL_TYPE, get_license_term_by_type, terms_to_tuple
from .base import ResourceClient


class LicenseClient(ResourceClient):

    @property
    def license_template(self) -> Any:
        return self._contract(self.contracts.pi_license_template, PI_LICENSE_TEMPLATE_ABI)

    @property
    def licensing_module(self) -> Any:
        return self._contract(self.contracts.licensing_module, LICENSING_MODULE_ABI)

    @property
    def license_registry(self) -> Any:
        return self._contract(self.contracts.license_registry, LICENSE_REGISTRY_ABI)

    @property
    def ip_asset_registry(self) -> Any:
        return self._contract(self.contracts.ip_asset_registry, IP_ASSET_REGISTRY_ABI)

    def register_non_com_social_remixing_pil(
        self, request: Optional[Union[RegisterNonComSocialRemixingPILRequest, Mapping[str, Any]]] = None
    ) -> RegisterPILResponse:
        """Register the non-commercial social remixing preset."""
        req = coerce_request(RegisterNonComSocialRemixingPILRequest, request)
        terms = get_license_term_by_type(PIL_TYPE.NON_COMMERCIAL_REMIX)
        return self._register_pil_terms(terms, req.tx_options)

    def register_commercial_use_pil(
        self, request: Union[RegisterCommercialUsePILRequest, Mapping[str, Any]]
    ) -> RegisterPILResponse:
        """Register the commercial use preset with the given minting fee and currency."""
        req = coerce_request(RegisterCommercialUsePILRequest, request)
        terms = get_license_term_by_type(
            PIL_TYPE.COMMERCIAL_USE,
            royalty_policy=self.contracts.royalty_policy_lap,
            minting_fee=req.minting_fee,
            currency=req.currency,
        )
        return self._register_pil_terms(terms, req.tx_options)

    def register_commercial_remix_pil(
        self, request: Union[RegisterCommercialRemixPILRequest, Mapping[str, Any]]
    ) -> RegisterPILResponse:
        """Register the commercial remix preset with a revenue share percentage."""
        req = coerce_request(RegisterCommercialRemixPILRequest, request)
        terms = get_license_term_by_type(
            PIL_TYPE.COMMERCIAL_REMIX,
            royalty_policy=self.contracts.royalty_policy_lap,
            minting_fee=req.minting_fee,
            currency=req.currency,
            commercial_rev_share=req.commercial_rev_share,
        )
        return self._register_pil_terms(terms, req.tx_options)

    def _register_pil_terms(self, terms: Dict[str, Any], tx_options: TxOptions) -> RegisterPILResponse:
        terms_tuple = terms_to_tuple(terms)
        existing_id = self.license_template.functions.getLicenseTermsId(terms_tuple).call()
        if existing_id:
            self.logger.info(f"License terms already registered with id {existing_id}")
            return RegisterPILResponse(license_terms_id=existing_id)

        result = self._execute(self.license_template, "registerLicenseTerms", (terms_tuple,), tx_options)
        if result.receipt is None:
            return RegisterPILResponse(tx_hash=result.tx_hash, encoded_tx_data=result.encoded_tx_data)

        event = decode_license_terms_registered(self.license_template, result.receipt)
        return RegisterPILResponse(tx_hash=result.tx_hash, license_terms_id=event.license_terms_id)

    def attach_license_terms(
        self, request: Union[AttachLicenseTermsRequest, Mapping[str, Any]]
    ) -> AttachLicenseTermsResponse:
        """
        Attach registered license terms to an IP asset.

        Returns ``success=False`` without sending a transaction when the terms
        are already attached.

        Raises:
            ValueError: If the IP is not registered or the license terms don't exist
        """
        req = coerce_request(AttachLicenseTermsRequest, request)
        template = req.license_template or self.contracts.pi_license_template

        if not self.ip_asset_registry.functions.isRegistered(req.ip_id).call():
            raise ValueError(f"The IP with id {req.ip_id} is not registered")
        if not self.license_template.functions.exists(req.license_terms_id).call():
            raise ValueError(f"License terms id {req.license_terms_id} do not exist")
        attached = self.license_registry.functions.hasIpAttachedLicenseTerms(
            req.ip_id, template, req.license_terms_id
        ).call()
        if attached:
            self.logger.info(f"License terms {req.license_terms_id} already attached to {req.ip_id}")
            return AttachLicenseTermsResponse(success=False)

        result = self._execute(
            self.licensing_module,
            "attachLicenseTerms",
            (req.ip_id, template, req.license_terms_id),
            req.tx_options,
        )
        if result.receipt is None:
            return AttachLicenseTermsResponse(tx_hash=result.tx_hash, encoded_tx_data=result.encoded_tx_data)
        return AttachLicenseTermsResponse(tx_hash=result.tx_hash, success=True)

    def mint_license_tokens(
        self, request: Union[MintLicenseTokensRequest, Mapping[str, Any]]
    ) -> MintLicenseTokensResponse:
        """
        Mint license tokens for the given licensor IP and license terms.

        Returns:
            Response with the tx hash; ``license_token_ids`` is set when the
            transaction was awaited
        """
        req = coerce_request(MintLicenseTokensRequest, request)
        template = req.license_template or self.contracts.pi_license_template
        receiver = req.receiver or self._wallet_address()

        if not self.ip_asset_registry.functions.isRegistered(req.licensor_ip_id).call():
            raise ValueError(f"The licensor IP with id {req.licensor_ip_id} is not registered")
        if not self.license_template.functions.exists(req.license_terms_id).call():
            raise ValueError(f"License terms id {req.license_terms_id} do not exist")

        result = self._execute(
            self.licensing_module,
            "mintLicenseTokens",
            (req.licensor_ip_id, template, req.license_terms_id, req.amount, receiver, "0x"),
            req.tx_options,
        )
        if result.receipt is None:
            return MintLicenseTokensResponse(tx_hash=result.tx_hash, encoded_tx_data=result.encoded_tx_data)

        event = decode_license_tokens_minted(self.licensing_module, result.receipt)
        return MintLicenseTokensResponse(tx_hash=result.tx_hash, license_token_ids=event.license_token_ids)

    def get_license_terms(self, license_terms_id: int) -> Any:
        """Read the PIL terms registered under ``license_terms_id``."""
        return self.license_template.functions.getLicenseTerms(license_terms_id).call()
