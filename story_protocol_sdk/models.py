"""
Data models for the Story Protocol SDK.

Requests accept either snake_case field names or the camelCase aliases used by
the protocol's other SDKs, so a plain mapping such as
``{"targetIpId": ..., "txOptions": {"waitForTransaction": True}}`` validates.
"""
import threading
from enum import IntEnum
from typing import Annotated, Any, List, Optional

from hexbytes import HexBytes
from pydantic import AfterValidator, BaseModel, Field, field_validator, model_validator

from .constants import ZERO_FUNC
from .utils import to_hex_hash, validate_address

Address = Annotated[str, AfterValidator(validate_address)]


class _Model(BaseModel):
    class Config:
        populate_by_name = True
        arbitrary_types_allowed = True


# ---------------------------------------------------------------------------
# Transaction plumbing
# ---------------------------------------------------------------------------

class TxOptions(_Model):
    """Per-call transaction options"""
    wait_for_transaction: bool = Field(False, alias="waitForTransaction")
    encoded_tx_data_only: bool = Field(False, alias="encodedTxDataOnly")
    timeout: Optional[float] = None
    poll_interval: Optional[float] = Field(None, alias="pollingInterval")
    cancel_event: Optional[threading.Event] = Field(None, exclude=True)


class EncodedTxData(_Model):
    """Unsigned call data for callers that submit transactions themselves"""
    to: str
    data: str
    value: int = 0


class TxRequest(_Model):
    tx_options: TxOptions = Field(default_factory=TxOptions, alias="txOptions")


class TxResponse(_Model):
    tx_hash: Optional[str] = Field(None, alias="txHash")
    encoded_tx_data: Optional[EncodedTxData] = Field(None, alias="encodedTxData")


# ---------------------------------------------------------------------------
# Dispute
# ---------------------------------------------------------------------------

class RaiseDisputeRequest(TxRequest):
    target_ip_id: Address = Field(..., alias="targetIpId")
    link_to_dispute_evidence: str = Field(..., alias="linkToDisputeEvidence")
    target_tag: str = Field(..., alias="targetTag")
    data: str = "0x"


class RaiseDisputeResponse(TxResponse):
    dispute_id: Optional[int] = Field(None, alias="disputeId")


class CancelDisputeRequest(TxRequest):
    dispute_id: int = Field(..., alias="disputeId")
    data: str = "0x"


class ResolveDisputeRequest(TxRequest):
    dispute_id: int = Field(..., alias="disputeId")
    data: str = "0x"


class CancelDisputeResponse(TxResponse):
    pass


class ResolveDisputeResponse(TxResponse):
    pass


# ---------------------------------------------------------------------------
# IP asset
# ---------------------------------------------------------------------------

class IpMetadata(_Model):
    """Metadata URIs and hashes attached when minting through the SPG"""
    metadata_uri: str = Field("", alias="metadataURI")
    metadata_hash: str = Field("0x" + "00" * 32, alias="metadataHash")
    nft_metadata_hash: str = Field("0x" + "00" * 32, alias="nftMetadataHash")

    def as_tuple(self) -> tuple:
        return (self.metadata_uri, self.metadata_hash, self.nft_metadata_hash)


class RegisterRequest(TxRequest):
    nft_contract: Address = Field(..., alias="nftContract")
    token_id: int = Field(..., alias="tokenId")


class RegisterIpResponse(TxResponse):
    ip_id: Optional[str] = Field(None, alias="ipId")
    token_id: Optional[int] = Field(None, alias="tokenId")


class RegisterDerivativeRequest(TxRequest):
    child_ip_id: Address = Field(..., alias="childIpId")
    parent_ip_ids: List[Address] = Field(..., alias="parentIpIds")
    license_terms_ids: List[int] = Field(..., alias="licenseTermsIds")
    license_template: Optional[Address] = Field(None, alias="licenseTemplate")

    @field_validator("license_terms_ids")
    @classmethod
    def _non_empty(cls, value: List[int]) -> List[int]:
        if not value:
            raise ValueError("licenseTermsIds must not be empty")
        return value


class RegisterDerivativeResponse(TxResponse):
    pass


class RegisterDerivativeWithLicenseTokensRequest(TxRequest):
    child_ip_id: Address = Field(..., alias="childIpId")
    license_token_ids: List[int] = Field(..., alias="licenseTokenIds")


class RegisterDerivativeWithLicenseTokensResponse(TxResponse):
    pass


class CreateIpAssetWithPilTermsRequest(TxRequest):
    nft_contract: Address = Field(..., alias="nftContract")
    pil_type: int = Field(..., alias="pilType")
    recipient: Optional[Address] = None
    minting_fee: Optional[int] = Field(None, alias="mintingFee")
    currency: Optional[Address] = None
    commercial_rev_share: Optional[float] = Field(None, alias="commercialRevShare")
    ip_metadata: IpMetadata = Field(default_factory=IpMetadata, alias="ipMetadata")


class CreateIpAssetWithPilTermsResponse(TxResponse):
    ip_id: Optional[str] = Field(None, alias="ipId")
    token_id: Optional[int] = Field(None, alias="tokenId")
    license_terms_id: Optional[int] = Field(None, alias="licenseTermsId")


class DerivativeData(_Model):
    """Parents and license terms a new derivative is registered under"""
    parent_ip_ids: List[Address] = Field(..., alias="parentIpIds")
    license_terms_ids: List[int] = Field(..., alias="licenseTermsIds")
    license_template: Optional[Address] = Field(None, alias="licenseTemplate")

    @field_validator("parent_ip_ids", "license_terms_ids")
    @classmethod
    def _non_empty(cls, value: List[Any], info) -> List[Any]:
        if not value:
            raise ValueError(f"{info.field_name} must not be empty")
        return value

    @model_validator(mode="after")
    def _same_length(self) -> "DerivativeData":
        if len(self.parent_ip_ids) != len(self.license_terms_ids):
            raise ValueError("parentIpIds and licenseTermsIds must have the same length")
        return self

    def as_tuple(self, default_template: str) -> tuple:
        template = self.license_template or default_template
        return (self.parent_ip_ids, template, self.license_terms_ids, "0x")


class RegisterIpAndAttachPilTermsRequest(TxRequest):
    nft_contract: Address = Field(..., alias="nftContract")
    token_id: int = Field(..., alias="tokenId")
    pil_type: int = Field(..., alias="pilType")
    minting_fee: Optional[int] = Field(None, alias="mintingFee")
    currency: Optional[Address] = None
    commercial_rev_share: Optional[float] = Field(None, alias="commercialRevShare")
    ip_metadata: IpMetadata = Field(default_factory=IpMetadata, alias="ipMetadata")
    deadline: Optional[int] = None


class RegisterIpAndAttachPilTermsResponse(TxResponse):
    ip_id: Optional[str] = Field(None, alias="ipId")
    license_terms_id: Optional[int] = Field(None, alias="licenseTermsId")


class RegisterIpAndMakeDerivativeRequest(TxRequest):
    nft_contract: Address = Field(..., alias="nftContract")
    token_id: int = Field(..., alias="tokenId")
    deriv_data: DerivativeData = Field(..., alias="derivData")
    ip_metadata: IpMetadata = Field(default_factory=IpMetadata, alias="ipMetadata")
    deadline: Optional[int] = None


class RegisterIpAndMakeDerivativeResponse(TxResponse):
    ip_id: Optional[str] = Field(None, alias="ipId")


class MintAndRegisterIpAndMakeDerivativeRequest(TxRequest):
    nft_contract: Address = Field(..., alias="nftContract")
    deriv_data: DerivativeData = Field(..., alias="derivData")
    ip_metadata: IpMetadata = Field(default_factory=IpMetadata, alias="ipMetadata")
    recipient: Optional[Address] = None


class MintAndRegisterIpAndMakeDerivativeResponse(TxResponse):
    ip_id: Optional[str] = Field(None, alias="ipId")
    token_id: Optional[int] = Field(None, alias="tokenId")


# ---------------------------------------------------------------------------
# License
# ---------------------------------------------------------------------------

class RegisterNonComSocialRemixingPILRequest(TxRequest):
    pass


class RegisterCommercialUsePILRequest(TxRequest):
    minting_fee: int = Field(..., alias="mintingFee")
    currency: Address


class RegisterCommercialRemixPILRequest(TxRequest):
    minting_fee: int = Field(..., alias="mintingFee")
    currency: Address
    commercial_rev_share: float = Field(..., alias="commercialRevShare")


class RegisterPILResponse(TxResponse):
    license_terms_id: Optional[int] = Field(None, alias="licenseTermsId")


class AttachLicenseTermsRequest(TxRequest):
    ip_id: Address = Field(..., alias="ipId")
    license_terms_id: int = Field(..., alias="licenseTermsId")
    license_template: Optional[Address] = Field(None, alias="licenseTemplate")


class AttachLicenseTermsResponse(TxResponse):
    success: Optional[bool] = None


class MintLicenseTokensRequest(TxRequest):
    licensor_ip_id: Address = Field(..., alias="licensorIpId")
    license_terms_id: int = Field(..., alias="licenseTermsId")
    license_template: Optional[Address] = Field(None, alias="licenseTemplate")
    amount: int = 1
    receiver: Optional[Address] = None

    @field_validator("amount")
    @classmethod
    def _positive(cls, value: int) -> int:
        if value < 1:
            raise ValueError("amount must be at least 1")
        return value


class MintLicenseTokensResponse(TxResponse):
    license_token_ids: Optional[List[int]] = Field(None, alias="licenseTokenIds")


# ---------------------------------------------------------------------------
# Royalty
# ---------------------------------------------------------------------------

class CollectRoyaltyTokensRequest(TxRequest):
    parent_ip_id: Address = Field(..., alias="parentIpId")
    royalty_vault_ip_id: Address = Field(..., alias="royaltyVaultIpId")


class CollectRoyaltyTokensResponse(TxResponse):
    royalty_tokens_collected: Optional[int] = Field(None, alias="royaltyTokensCollected")


class PayRoyaltyOnBehalfRequest(TxRequest):
    receiver_ip_id: Address = Field(..., alias="receiverIpId")
    payer_ip_id: Address = Field(..., alias="payerIpId")
    token: Address
    amount: int


class PayRoyaltyOnBehalfResponse(TxResponse):
    pass


class ClaimableRevenueRequest(_Model):
    royalty_vault_ip_id: Address = Field(..., alias="royaltyVaultIpId")
    account: Address
    snapshot_id: int = Field(..., alias="snapshotId")
    token: Address


class ClaimRevenueRequest(TxRequest):
    snapshot_ids: List[int] = Field(..., alias="snapshotIds")
    token: Address
    royalty_vault_ip_id: Address = Field(..., alias="royaltyVaultIpId")


class ClaimRevenueResponse(TxResponse):
    claimable_token: Optional[int] = Field(None, alias="claimableToken")


class SnapshotRequest(TxRequest):
    royalty_vault_ip_id: Address = Field(..., alias="royaltyVaultIpId")


class SnapshotResponse(TxResponse):
    snapshot_id: Optional[int] = Field(None, alias="snapshotId")


# ---------------------------------------------------------------------------
# Permission
# ---------------------------------------------------------------------------

class AccessPermission(IntEnum):
    """Permission levels understood by the AccessController"""
    ABSTAIN = 0
    ALLOW = 1
    DENY = 2


class SetPermissionsRequest(TxRequest):
    ip_id: Address = Field(..., alias="ipId")
    signer: Address
    to: Address
    permission: AccessPermission
    func: str = ZERO_FUNC


class SetAllPermissionsRequest(TxRequest):
    ip_id: Address = Field(..., alias="ipId")
    signer: Address
    permission: AccessPermission


class PermissionEntry(_Model):
    ip_id: Address = Field(..., alias="ipId")
    signer: Address
    to: Address
    permission: AccessPermission
    func: str = ZERO_FUNC

    def as_tuple(self) -> tuple:
        return (self.ip_id, self.signer, self.to, self.func, int(self.permission))


class SetBatchPermissionsRequest(TxRequest):
    ip_id: Address = Field(..., alias="ipId")
    permissions: List[PermissionEntry]


class SetPermissionsResponse(TxResponse):
    success: Optional[bool] = None


class CreateSetPermissionSignatureRequest(SetPermissionsRequest):
    # seconds past the latest block timestamp
    deadline: Optional[int] = None


class CreateBatchPermissionSignatureRequest(SetBatchPermissionsRequest):
    deadline: Optional[int] = None


class PermissionSignatureRequest(_Model):
    """Inputs for an EIP-712 signature over an IP account permission change"""
    ip_id: Address = Field(..., alias="ipId")
    state: str
    deadline: int
    chain_id: int = Field(..., alias="chainId")
    access_controller: Address = Field(..., alias="accessController")
    permissions: List[PermissionEntry]

    @field_validator("state", mode="before")
    @classmethod
    def _bytes32_hex(cls, value: Any) -> str:
        raw = HexBytes(value)
        if len(raw) != 32:
            raise ValueError(f"state must be 32 bytes, got {len(raw)}")
        return to_hex_hash(bytes(raw))

    @field_validator("permissions")
    @classmethod
    def _non_empty(cls, value: List[PermissionEntry]) -> List[PermissionEntry]:
        if not value:
            raise ValueError("permissions must not be empty")
        return value


class PermissionSignatureResponse(_Model):
    signature: str
    nonce: str
    deadline: int


# ---------------------------------------------------------------------------
# IP account
# ---------------------------------------------------------------------------

class IPAccountExecuteRequest(TxRequest):
    ip_id: Address = Field(..., alias="ipId")
    to: Address
    value: int = 0
    data: str = "0x"


class IPAccountExecuteWithSigRequest(IPAccountExecuteRequest):
    signer: Address
    deadline: int
    signature: str


class IPAccountExecuteResponse(TxResponse):
    pass


class TokenResponse(_Model):
    chain_id: int = Field(..., alias="chainId")
    token_contract: str = Field(..., alias="tokenContract")
    token_id: int = Field(..., alias="tokenId")


# ---------------------------------------------------------------------------
# NFT
# ---------------------------------------------------------------------------

class CreateNFTCollectionRequest(TxRequest):
    name: str
    symbol: str
    max_supply: int = Field(0, alias="maxSupply")
    mint_fee: Optional[int] = Field(None, alias="mintFee")
    mint_fee_token: Optional[Address] = Field(None, alias="mintFeeToken")
    owner: Optional[Address] = None


class CreateNFTCollectionResponse(TxResponse):
    nft_contract: Optional[str] = Field(None, alias="nftContract")


def coerce_request(model_cls: Any, request: Any) -> Any:
    """Validate a mapping into ``model_cls``; pass instances through untouched."""
    if isinstance(request, model_cls):
        return request
    return model_cls.model_validate(request or {})
