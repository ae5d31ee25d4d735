"""
IP asset registration client.
"""
from typing import Any, Mapping, Optional, Sequence, Tuple, Union

from ..abi import (
    IP_ASSET_REGISTRY_ABI,
    LICENSE_REGISTRY_ABI,
    LICENSING_MODULE_ABI,
    PI_LICENSE_TEMPLATE_ABI,
    SPG_ABI,
)
from ..constants import ZERO_HASH
from ..events import decode_ip_registered
from ..models import (
    AccessPermission,
    CreateIpAssetWithPilTermsRequest,
    CreateIpAssetWithPilTermsResponse,
    MintAndRegisterIpAndMakeDerivativeRequest,
    MintAndRegisterIpAndMakeDerivativeResponse,
    PermissionSignatureResponse,
    RegisterDerivativeRequest,
    RegisterDerivativeResponse,
    RegisterDerivativeWithLicenseTokensRequest,
    RegisterDerivativeWithLicenseTokensResponse,
    RegisterIpAndAttachPilTermsRequest,
    RegisterIpAndAttachPilTermsResponse,
    RegisterIpAndMakeDerivativeRequest,
    RegisterIpAndMakeDerivativeResponse,
    RegisterIpResponse,
    RegisterRequest,
    coerce_request,
)
from ..pil import get_license_term_by_type, terms_to_tuple
from ..sign import get_permission_signature
from ..utils import function_selector, validate_address
from .base import ResourceClient

# Module functions the SPG calls on a new IP account's behalf
SET_ALL_METADATA_SIGNATURE = "setAll(address,string,bytes32,bytes32)"
ATTACH_LICENSE_TERMS_SIGNATURE = "attachLicenseTerms(address,address,uint256)"
REGISTER_DERIVATIVE_SIGNATURE = "registerDerivative(address,address[],uint256[],address,bytes)"


class IPAssetClient(ResourceClient):
    """Register NFTs as IP assets and link derivatives to their parents."""

    @property
    def ip_asset_registry(self) -> Any:
        return self._contract(self.contracts.ip_asset_registry, IP_ASSET_REGISTRY_ABI)

    @property
    def licensing_module(self) -> Any:
        return self._contract(self.contracts.licensing_module, LICENSING_MODULE_ABI)

    @property
    def license_registry(self) -> Any:
        return self._contract(self.contracts.license_registry, LICENSE_REGISTRY_ABI)

    @property
    def license_template(self) -> Any:
        return self._contract(self.contracts.pi_license_template, PI_LICENSE_TEMPLATE_ABI)

    @property
    def spg(self) -> Any:
        return self._contract(self.contracts.spg, SPG_ABI)

    def get_ip_id(self, nft_contract: str, token_id: int) -> str:
        """Compute the deterministic IP ID for an NFT on this chain."""
        nft_contract = validate_address(nft_contract, "nftContract")
        return self.ip_asset_registry.functions.ipId(self.chain.chain_id, nft_contract, token_id).call()

    def is_registered(self, ip_id: str) -> bool:
        return self.ip_asset_registry.functions.isRegistered(validate_address(ip_id, "ipId")).call()

    def register(self, request: Union[RegisterRequest, Mapping[str, Any]]) -> RegisterIpResponse:
        """
        Register an NFT as an IP asset.

        If the NFT is already registered no transaction is sent and only the
        existing ``ip_id`` is returned.

        Args:
            request: NFT contract, token ID and tx options

        Returns:
            Response with the tx hash; ``ip_id`` is set when the transaction
            was awaited or the asset was already registered
        """
        req = coerce_request(RegisterRequest, request)
        ip_id = self.get_ip_id(req.nft_contract, req.token_id)
        if self.is_registered(ip_id):
            self.logger.info(f"NFT {req.nft_contract}#{req.token_id} already registered as {ip_id}")
            return RegisterIpResponse(ip_id=ip_id)

        result = self._execute(
            self.ip_asset_registry,
            "register",
            (self.chain.chain_id, req.nft_contract, req.token_id),
            req.tx_options,
        )
        if result.receipt is None:
            return RegisterIpResponse(tx_hash=result.tx_hash, encoded_tx_data=result.encoded_tx_data)

        event = decode_ip_registered(self.ip_asset_registry, result.receipt)[0]
        return RegisterIpResponse(tx_hash=result.tx_hash, ip_id=event.ip_id, token_id=event.token_id)

    def register_derivative(
        self, request: Union[RegisterDerivativeRequest, Mapping[str, Any]]
    ) -> RegisterDerivativeResponse:
        """
        Register an IP asset as a derivative of one or more parents.

        Raises:
            ValueError: If the child or a parent is not registered, or the parent
                and license term lists differ in length
        """
        req = coerce_request(RegisterDerivativeRequest, request)
        if len(req.parent_ip_ids) != len(req.license_terms_ids):
            raise ValueError("parentIpIds and licenseTermsIds must have the same length")
        self._require_registered(req.child_ip_id)
        for parent_ip_id in req.parent_ip_ids:
            self._require_registered(parent_ip_id)

        template = req.license_template or self.contracts.pi_license_template
        result = self._execute(
            self.licensing_module,
            "registerDerivative",
            (req.child_ip_id, req.parent_ip_ids, req.license_terms_ids, template, "0x"),
            req.tx_options,
        )
        return RegisterDerivativeResponse(tx_hash=result.tx_hash, encoded_tx_data=result.encoded_tx_data)

    def register_derivative_with_license_tokens(
        self, request: Union[RegisterDerivativeWithLicenseTokensRequest, Mapping[str, Any]]
    ) -> RegisterDerivativeWithLicenseTokensResponse:
        """Register a derivative by burning license tokens minted from the parents."""
        req = coerce_request(RegisterDerivativeWithLicenseTokensRequest, request)
        if not req.license_token_ids:
            raise ValueError("licenseTokenIds must not be empty")
        self._require_registered(req.child_ip_id)

        result = self._execute(
            self.licensing_module,
            "registerDerivativeWithLicenseTokens",
            (req.child_ip_id, req.license_token_ids, "0x"),
            req.tx_options,
        )
        return RegisterDerivativeWithLicenseTokensResponse(
            tx_hash=result.tx_hash, encoded_tx_data=result.encoded_tx_data
        )

    def create_ip_asset_with_pil_terms(
        self, request: Union[CreateIpAssetWithPilTermsRequest, Mapping[str, Any]]
    ) -> CreateIpAssetWithPilTermsResponse:
        """
        Mint an NFT from an SPG collection, register it as an IP asset and
        attach preset PIL terms in a single transaction.

        Returns:
            Response with the tx hash; ``ip_id``, ``token_id`` and
            ``license_terms_id`` are set when the transaction was awaited
        """
        req = coerce_request(CreateIpAssetWithPilTermsRequest, request)
        terms = terms_to_tuple(get_license_term_by_type(
            req.pil_type,
            royalty_policy=self.contracts.royalty_policy_lap,
            minting_fee=req.minting_fee,
            currency=req.currency,
            commercial_rev_share=req.commercial_rev_share,
        ))
        recipient = req.recipient or self._wallet_address()

        result = self._execute(
            self.spg,
            "mintAndRegisterIpAndAttachPILTerms",
            (req.nft_contract, recipient, req.ip_metadata.as_tuple(), terms),
            req.tx_options,
        )
        if result.receipt is None:
            return CreateIpAssetWithPilTermsResponse(tx_hash=result.tx_hash, encoded_tx_data=result.encoded_tx_data)

        event = decode_ip_registered(self.ip_asset_registry, result.receipt)[0]
        license_terms_id = self.license_template.functions.getLicenseTermsId(terms).call()
        return CreateIpAssetWithPilTermsResponse(
            tx_hash=result.tx_hash,
            ip_id=event.ip_id,
            token_id=event.token_id,
            license_terms_id=license_terms_id,
        )

    def register_ip_and_attach_pil_terms(
        self, request: Union[RegisterIpAndAttachPilTermsRequest, Mapping[str, Any]]
    ) -> RegisterIpAndAttachPilTermsResponse:
        """
        Register an existing NFT as an IP asset and attach preset PIL terms in
        a single SPG transaction.

        The SPG acts on the new IP account with two permission signatures from
        the wallet: one for the core metadata module, one for attaching terms
        through the licensing module.

        Raises:
            ValueError: If the NFT is already registered
        """
        req = coerce_request(RegisterIpAndAttachPilTermsRequest, request)
        ip_id = self._require_unregistered(req.nft_contract, req.token_id)
        terms = terms_to_tuple(get_license_term_by_type(
            req.pil_type,
            royalty_policy=self.contracts.royalty_policy_lap,
            minting_fee=req.minting_fee,
            currency=req.currency,
            commercial_rev_share=req.commercial_rev_share,
        ))
        sig_metadata, sig_attach = self._spg_signatures(
            ip_id, req.deadline, self.contracts.licensing_module, ATTACH_LICENSE_TERMS_SIGNATURE
        )

        result = self._execute(
            self.spg,
            "registerIpAndAttachPILTerms",
            (req.nft_contract, req.token_id, req.ip_metadata.as_tuple(), terms, sig_metadata, sig_attach),
            req.tx_options,
        )
        if result.receipt is None:
            return RegisterIpAndAttachPilTermsResponse(tx_hash=result.tx_hash, encoded_tx_data=result.encoded_tx_data)

        event = decode_ip_registered(self.ip_asset_registry, result.receipt)[0]
        license_terms_id = self.license_template.functions.getLicenseTermsId(terms).call()
        return RegisterIpAndAttachPilTermsResponse(
            tx_hash=result.tx_hash, ip_id=event.ip_id, license_terms_id=license_terms_id
        )

    def register_ip_and_make_derivative(
        self, request: Union[RegisterIpAndMakeDerivativeRequest, Mapping[str, Any]]
    ) -> RegisterIpAndMakeDerivativeResponse:
        """
        Register an existing NFT as an IP asset and link it to its parents in
        a single SPG transaction.

        Raises:
            ValueError: If the NFT is already registered, a parent is not
                registered, or a parent lacks the given license terms
        """
        req = coerce_request(RegisterIpAndMakeDerivativeRequest, request)
        ip_id = self._require_unregistered(req.nft_contract, req.token_id)
        template = req.deriv_data.license_template or self.contracts.pi_license_template
        self._require_derivable_parents(req.deriv_data.parent_ip_ids, req.deriv_data.license_terms_ids, template)
        sig_metadata, sig_register = self._spg_signatures(
            ip_id, req.deadline, self.contracts.licensing_module, REGISTER_DERIVATIVE_SIGNATURE
        )

        result = self._execute(
            self.spg,
            "registerIpAndMakeDerivative",
            (
                req.nft_contract,
                req.token_id,
                req.deriv_data.as_tuple(template),
                req.ip_metadata.as_tuple(),
                sig_metadata,
                sig_register,
            ),
            req.tx_options,
        )
        if result.receipt is None:
            return RegisterIpAndMakeDerivativeResponse(tx_hash=result.tx_hash, encoded_tx_data=result.encoded_tx_data)

        event = decode_ip_registered(self.ip_asset_registry, result.receipt)[0]
        return RegisterIpAndMakeDerivativeResponse(tx_hash=result.tx_hash, ip_id=event.ip_id)

    def mint_and_register_ip_and_make_derivative(
        self, request: Union[MintAndRegisterIpAndMakeDerivativeRequest, Mapping[str, Any]]
    ) -> MintAndRegisterIpAndMakeDerivativeResponse:
        """
        Mint an NFT from an SPG collection, register it as an IP asset and link
        it to its parents in a single transaction.

        Raises:
            ValueError: If a parent is not registered or lacks the given
                license terms
        """
        req = coerce_request(MintAndRegisterIpAndMakeDerivativeRequest, request)
        template = req.deriv_data.license_template or self.contracts.pi_license_template
        self._require_derivable_parents(req.deriv_data.parent_ip_ids, req.deriv_data.license_terms_ids, template)
        recipient = req.recipient or self._wallet_address()

        result = self._execute(
            self.spg,
            "mintAndRegisterIpAndMakeDerivative",
            (req.nft_contract, req.deriv_data.as_tuple(template), req.ip_metadata.as_tuple(), recipient),
            req.tx_options,
        )
        if result.receipt is None:
            return MintAndRegisterIpAndMakeDerivativeResponse(
                tx_hash=result.tx_hash, encoded_tx_data=result.encoded_tx_data
            )

        event = decode_ip_registered(self.ip_asset_registry, result.receipt)[0]
        return MintAndRegisterIpAndMakeDerivativeResponse(
            tx_hash=result.tx_hash, ip_id=event.ip_id, token_id=event.token_id
        )

    def _spg_signatures(
        self, ip_id: str, deadline: Optional[int], module: str, module_function: str
    ) -> Tuple[tuple, tuple]:
        # The SPG sets metadata first, then calls ``module``; the second
        # signature is made over the state the first one leaves behind.
        wallet = self._wallet_address()
        expires = self._signature_deadline(deadline)

        def _sign(state: str, to: str, func_signature: str) -> PermissionSignatureResponse:
            return get_permission_signature(
                {
                    "ipId": ip_id,
                    "state": state,
                    "deadline": expires,
                    "chainId": self.chain.chain_id,
                    "accessController": self.contracts.access_controller,
                    "permissions": [{
                        "ipId": ip_id,
                        "signer": self.contracts.spg,
                        "to": to,
                        "func": function_selector(func_signature),
                        "permission": AccessPermission.ALLOW,
                    }],
                },
                self.signer,
            )

        metadata = _sign(ZERO_HASH, self.contracts.core_metadata_module, SET_ALL_METADATA_SIGNATURE)
        second = _sign(metadata.nonce, module, module_function)
        return (wallet, expires, metadata.signature), (wallet, expires, second.signature)

    def _require_unregistered(self, nft_contract: str, token_id: int) -> str:
        ip_id = self.get_ip_id(nft_contract, token_id)
        if self.is_registered(ip_id):
            raise ValueError(f"The NFT with id {token_id} is already registered as IP")
        return ip_id

    def _require_derivable_parents(
        self, parent_ip_ids: Sequence[str], license_terms_ids: Sequence[int], template: str
    ) -> None:
        for parent_ip_id, license_terms_id in zip(parent_ip_ids, license_terms_ids):
            self._require_registered(parent_ip_id)
            attached = self.license_registry.functions.hasIpAttachedLicenseTerms(
                parent_ip_id, template, license_terms_id
            ).call()
            if not attached:
                raise ValueError(
                    f"License terms id {license_terms_id} must be attached to the parent ipId "
                    f"{parent_ip_id} before registering derivative"
                )

    def _require_registered(self, ip_id: str) -> None:
        if not self.is_registered(ip_id):
            raise ValueError(f"The IP with id {ip_id} is not registered")
