"""
Contract ABI fragments used by the Story Protocol SDK.

Only the functions and events the resource clients touch are included.
"""
from typing import Any, Dict, List, Optional, Sequence, Tuple

Param = Tuple[str, str]


def _params(params: Sequence[Param], indexed: Optional[Sequence[str]] = None) -> List[Dict[str, Any]]:
    # Event inputs carry an "indexed" flag; function inputs must not.
    result = []
    for type_, name in params:
        if type_ in ("tuple", "tuple[]"):
            entry = _tuple_param(name, type_)
        else:
            entry = {"internalType": type_, "name": name, "type": type_}
        if indexed is not None:
            entry["indexed"] = name in indexed
        result.append(entry)
    return result


def _tuple_param(name: str, type_: str) -> Dict[str, Any]:
    components = _TUPLES[name]
    return {
        "internalType": f"struct {name}",
        "name": name,
        "type": type_,
        "components": [{"internalType": t, "name": n, "type": t} for t, n in components],
    }


def _function(
    name: str,
    inputs: Sequence[Param] = (),
    outputs: Sequence[Param] = (),
    state_mutability: str = "nonpayable",
) -> Dict[str, Any]:
    return {
        "type": "function",
        "name": name,
        "inputs": _params(inputs),
        "outputs": _params(outputs),
        "stateMutability": state_mutability,
    }


def _view(name: str, inputs: Sequence[Param] = (), outputs: Sequence[Param] = ()) -> Dict[str, Any]:
    return _function(name, inputs, outputs, "view")


def _event(name: str, inputs: Sequence[Param], indexed: Optional[Sequence[str]] = None) -> Dict[str, Any]:
    return {
        "type": "event",
        "name": name,
        "inputs": _params(inputs, tuple(indexed or ())),
        "anonymous": False,
    }


PIL_TERMS_COMPONENTS: List[Param] = [
    ("bool", "transferable"),
    ("address", "royaltyPolicy"),
    ("uint256", "mintingFee"),
    ("uint256", "expiration"),
    ("bool", "commercialUse"),
    ("bool", "commercialAttribution"),
    ("address", "commercializerChecker"),
    ("bytes", "commercializerCheckerData"),
    ("uint32", "commercialRevShare"),
    ("uint256", "commercialRevCeiling"),
    ("bool", "derivativesAllowed"),
    ("bool", "derivativesAttribution"),
    ("bool", "derivativesApproval"),
    ("bool", "derivativesReciprocal"),
    ("uint256", "derivativeRevCeiling"),
    ("address", "currency"),
    ("string", "uri"),
]

IP_METADATA_COMPONENTS: List[Param] = [
    ("string", "metadataURI"),
    ("bytes32", "metadataHash"),
    ("bytes32", "nftMetadataHash"),
]

PERMISSION_COMPONENTS: List[Param] = [
    ("address", "ipAccount"),
    ("address", "signer"),
    ("address", "to"),
    ("bytes4", "func"),
    ("uint8", "permission"),
]

SIGNATURE_DATA_COMPONENTS: List[Param] = [
    ("address", "signer"),
    ("uint256", "deadline"),
    ("bytes", "signature"),
]

MAKE_DERIVATIVE_COMPONENTS: List[Param] = [
    ("address[]", "parentIpIds"),
    ("address", "licenseTemplate"),
    ("uint256[]", "licenseTermsIds"),
    ("bytes", "royaltyContext"),
]

_TUPLES: Dict[str, List[Param]] = {
    "terms": PIL_TERMS_COMPONENTS,
    "ipMetadata": IP_METADATA_COMPONENTS,
    "permissions": PERMISSION_COMPONENTS,
    "sigMetadata": SIGNATURE_DATA_COMPONENTS,
    "sigAttach": SIGNATURE_DATA_COMPONENTS,
    "sigRegister": SIGNATURE_DATA_COMPONENTS,
    "derivData": MAKE_DERIVATIVE_COMPONENTS,
}


DISPUTE_MODULE_ABI = [
    _function(
        "raiseDispute",
        [("address", "targetIpId"), ("string", "linkToDisputeEvidence"), ("bytes32", "targetTag"), ("bytes", "data")],
        [("uint256", "disputeId")],
    ),
    _function("cancelDispute", [("uint256", "disputeId"), ("bytes", "data")]),
    _function("resolveDispute", [("uint256", "disputeId"), ("bytes", "data")]),
    _view(
        "disputes",
        [("uint256", "disputeId")],
        [
            ("address", "targetIpId"),
            ("address", "disputeInitiator"),
            ("address", "arbitrationPolicy"),
            ("bytes32", "linkToDisputeEvidence"),
            ("bytes32", "targetTag"),
            ("bytes32", "currentTag"),
        ],
    ),
    _view("isWhitelistedArbitrationPolicy", [("address", "arbitrationPolicy")], [("bool", "allowed")]),
    _view("isWhitelistedDisputeTag", [("bytes32", "tag")], [("bool", "allowed")]),
    _view("baseArbitrationPolicy", [], [("address", "")]),
    _view("disputeCounter", [], [("uint256", "")]),
    _view("name", [], [("string", "")]),
    _event(
        "DisputeRaised",
        [
            ("uint256", "disputeId"),
            ("address", "targetIpId"),
            ("address", "disputeInitiator"),
            ("address", "arbitrationPolicy"),
            ("bytes32", "linkToDisputeEvidence"),
            ("bytes32", "targetTag"),
            ("bytes", "data"),
        ],
    ),
    _event("DisputeCancelled", [("uint256", "disputeId"), ("bytes", "data")]),
    _event("DisputeResolved", [("uint256", "disputeId")]),
]

IP_ASSET_REGISTRY_ABI = [
    _function(
        "register",
        [("uint256", "chainid"), ("address", "tokenContract"), ("uint256", "tokenId")],
        [("address", "")],
    ),
    _view(
        "ipId",
        [("uint256", "chainId"), ("address", "tokenContract"), ("uint256", "tokenId")],
        [("address", "")],
    ),
    _view("isRegistered", [("address", "id")], [("bool", "")]),
    _event(
        "IPRegistered",
        [
            ("address", "ipId"),
            ("uint256", "chainId"),
            ("address", "tokenContract"),
            ("uint256", "tokenId"),
            ("string", "name"),
            ("string", "uri"),
            ("uint256", "registrationDate"),
        ],
        indexed=["chainId", "tokenContract", "tokenId"],
    ),
]

LICENSING_MODULE_ABI = [
    _function(
        "attachLicenseTerms",
        [("address", "ipId"), ("address", "licenseTemplate"), ("uint256", "licenseTermsId")],
    ),
    _function(
        "mintLicenseTokens",
        [
            ("address", "licensorIpId"),
            ("address", "licenseTemplate"),
            ("uint256", "licenseTermsId"),
            ("uint256", "amount"),
            ("address", "receiver"),
            ("bytes", "royaltyContext"),
        ],
        [("uint256", "startLicenseTokenId")],
    ),
    _function(
        "registerDerivative",
        [
            ("address", "childIpId"),
            ("address[]", "parentIpIds"),
            ("uint256[]", "licenseTermsIds"),
            ("address", "licenseTemplate"),
            ("bytes", "royaltyContext"),
        ],
    ),
    _function(
        "registerDerivativeWithLicenseTokens",
        [("address", "childIpId"), ("uint256[]", "licenseTokenIds"), ("bytes", "royaltyContext")],
    ),
    _event(
        "LicenseTokensMinted",
        [
            ("address", "caller"),
            ("address", "licensorIpId"),
            ("address", "licenseTemplate"),
            ("uint256", "licenseTermsId"),
            ("uint256", "amount"),
            ("address", "receiver"),
            ("uint256", "startLicenseTokenId"),
        ],
        indexed=["caller", "licensorIpId", "licenseTermsId"],
    ),
]

LICENSE_REGISTRY_ABI = [
    _view(
        "hasIpAttachedLicenseTerms",
        [("address", "ipId"), ("address", "licenseTemplate"), ("uint256", "licenseTermsId")],
        [("bool", "")],
    ),
]

PI_LICENSE_TEMPLATE_ABI = [
    _function("registerLicenseTerms", [("tuple", "terms")], [("uint256", "selectedLicenseTermsId")]),
    _view("getLicenseTermsId", [("tuple", "terms")], [("uint256", "selectedLicenseTermsId")]),
    _view("getLicenseTerms", [("uint256", "selectedLicenseTermsId")], [("tuple", "terms")]),
    _view("exists", [("uint256", "licenseTermsId")], [("bool", "")]),
    _event(
        "LicenseTermsRegistered",
        [("uint256", "licenseTermsId"), ("address", "licenseTemplate"), ("bytes", "licenseTerms")],
        indexed=["licenseTermsId", "licenseTemplate"],
    ),
]

ROYALTY_MODULE_ABI = [
    _function(
        "payRoyaltyOnBehalf",
        [("address", "receiverIpId"), ("address", "payerIpId"), ("address", "token"), ("uint256", "amount")],
    ),
]

ROYALTY_POLICY_LAP_ABI = [
    _view(
        "getRoyaltyData",
        [("address", "ipId")],
        [
            ("bool", "isUnlinkableToParents"),
            ("address", "ipRoyaltyVault"),
            ("uint32", "royaltyStack"),
            ("address[]", "ancestorsAddresses"),
            ("uint32[]", "ancestorsRoyalties"),
        ],
    ),
]

IP_ROYALTY_VAULT_ABI = [
    _function("collectRoyaltyTokens", [("address", "ancestorIpId")]),
    _function("claimRevenueBySnapshotBatch", [("uint256[]", "snapshotIds"), ("address", "token")]),
    _function("snapshot", [], [("uint256", "")]),
    _view(
        "claimableRevenue",
        [("address", "account"), ("uint256", "snapshotId"), ("address", "token")],
        [("uint256", "")],
    ),
    _event("RoyaltyTokensCollected", [("address", "ancestorIpId"), ("uint256", "royaltyTokensCollected")]),
    _event("RevenueTokenClaimed", [("address", "claimer"), ("address", "token"), ("uint256", "amount")]),
    _event(
        "SnapshotCompleted",
        [("uint256", "snapshotId"), ("uint256", "snapshotTimestamp"), ("uint32", "unclaimedTokens")],
    ),
]

ACCESS_CONTROLLER_ABI = [
    _function(
        "setPermission",
        [
            ("address", "ipAccount"),
            ("address", "signer"),
            ("address", "to"),
            ("bytes4", "func"),
            ("uint8", "permission"),
        ],
    ),
    _function(
        "setAllPermissions",
        [("address", "ipAccount"), ("address", "signer"), ("uint8", "permission")],
    ),
    _function("setBatchPermissions", [("tuple[]", "permissions")]),
    _view(
        "getPermission",
        [("address", "ipAccount"), ("address", "signer"), ("address", "to"), ("bytes4", "func")],
        [("uint8", "")],
    ),
    _event(
        "PermissionSet",
        [
            ("address", "ipAccountOwner"),
            ("address", "ipAccount"),
            ("address", "signer"),
            ("address", "to"),
            ("bytes4", "func"),
            ("uint8", "permission"),
        ],
        indexed=["ipAccount", "signer", "to"],
    ),
]

IP_ACCOUNT_IMPL_ABI = [
    _function(
        "execute",
        [("address", "to"), ("uint256", "value"), ("bytes", "data")],
        [("bytes", "result")],
        "payable",
    ),
    _function(
        "executeWithSig",
        [
            ("address", "to"),
            ("uint256", "value"),
            ("bytes", "data"),
            ("address", "signer"),
            ("uint256", "deadline"),
            ("bytes", "signature"),
        ],
        [("bytes", "result")],
        "payable",
    ),
    _view("state", [], [("bytes32", "result")]),
    _view("token", [], [("uint256", ""), ("address", ""), ("uint256", "")]),
]

SPG_ABI = [
    _function(
        "createCollection",
        [
            ("string", "name"),
            ("string", "symbol"),
            ("uint32", "maxSupply"),
            ("uint256", "mintFee"),
            ("address", "mintFeeToken"),
            ("address", "owner"),
        ],
        [("address", "nftContract")],
    ),
    _function(
        "mintAndRegisterIpAndAttachPILTerms",
        [("address", "nftContract"), ("address", "recipient"), ("tuple", "ipMetadata"), ("tuple", "terms")],
        [("address", "ipId"), ("uint256", "tokenId"), ("uint256", "licenseTermsId")],
    ),
    _function(
        "registerIpAndAttachPILTerms",
        [
            ("address", "nftContract"),
            ("uint256", "tokenId"),
            ("tuple", "ipMetadata"),
            ("tuple", "terms"),
            ("tuple", "sigMetadata"),
            ("tuple", "sigAttach"),
        ],
        [("address", "ipId"), ("uint256", "licenseTermsId")],
    ),
    _function(
        "registerIpAndMakeDerivative",
        [
            ("address", "nftContract"),
            ("uint256", "tokenId"),
            ("tuple", "derivData"),
            ("tuple", "ipMetadata"),
            ("tuple", "sigMetadata"),
            ("tuple", "sigRegister"),
        ],
        [("address", "ipId")],
    ),
    _function(
        "mintAndRegisterIpAndMakeDerivative",
        [("address", "nftContract"), ("tuple", "derivData"), ("tuple", "ipMetadata"), ("address", "recipient")],
        [("address", "ipId"), ("uint256", "tokenId")],
    ),
    _event("CollectionCreated", [("address", "nftContract")], indexed=["nftContract"]),
]
