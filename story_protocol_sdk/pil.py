"""
Programmable IP License (PIL) term presets.
"""
from enum import IntEnum
from typing import Any, Dict, Optional, Tuple

from .abi import PIL_TERMS_COMPONENTS
from .constants import MAX_REV_SHARE_PERCENT, REV_SHARE_PRECISION, ZERO_ADDRESS
from .utils import validate_address

NON_COMMERCIAL_SOCIAL_REMIXING_URI = (
    "https://github.com/piplabs/pil-document/blob/998c13e6ee1d04eb817aefd1fe16dfe8be3cd7a2/"
    "off-chain-terms/NCSR.json"
)
COMMERCIAL_USE_URI = (
    "https://github.com/piplabs/pil-document/blob/9a1f803fcf8101a8a78f1dcc929e6014e144ab56/"
    "off-chain-terms/CommercialUse.json"
)
COMMERCIAL_REMIX_URI = (
    "https://github.com/piplabs/pil-document/blob/ad67bb632a310d2557f8abcccd428e4c9c798db1/"
    "off-chain-terms/CommercialRemix.json"
)


class PIL_TYPE(IntEnum):
    NON_COMMERCIAL_REMIX = 0
    COMMERCIAL_USE = 1
    COMMERCIAL_REMIX = 2


def _base_terms() -> Dict[str, Any]:
    return {
        "transferable": True,
        "royaltyPolicy": ZERO_ADDRESS,
        "mintingFee": 0,
        "expiration": 0,
        "commercialUse": False,
        "commercialAttribution": False,
        "commercializerChecker": ZERO_ADDRESS,
        "commercializerCheckerData": "0x",
        "commercialRevShare": 0,
        "commercialRevCeiling": 0,
        "derivativesAllowed": True,
        "derivativesAttribution": True,
        "derivativesApproval": False,
        "derivativesReciprocal": True,
        "derivativeRevCeiling": 0,
        "currency": ZERO_ADDRESS,
        "uri": NON_COMMERCIAL_SOCIAL_REMIXING_URI,
    }


def scale_rev_share(percent: float) -> int:
    """
    Convert a revenue share percentage into its on-chain representation.

    Raises:
        ValueError: If the percentage is outside 0-100
    """
    if percent < 0 or percent > MAX_REV_SHARE_PERCENT:
        raise ValueError(f"commercialRevShare must be between 0 and {MAX_REV_SHARE_PERCENT}, got: {percent}")
    return int(round(percent * REV_SHARE_PRECISION))


def get_license_term_by_type(
    pil_type: int,
    royalty_policy: Optional[str] = None,
    minting_fee: Optional[int] = None,
    currency: Optional[str] = None,
    commercial_rev_share: Optional[float] = None,
) -> Dict[str, Any]:
    """
    Build the PIL terms for one of the preset license flavours.

    Args:
        pil_type: One of PIL_TYPE
        royalty_policy: Royalty policy address (required for commercial types)
        minting_fee: Fee to mint a license token (required for commercial types)
        currency: ERC-20 token the fee is paid in (required for commercial types)
        commercial_rev_share: Percent of derivative revenue owed (commercial remix only)

    Returns:
        Mapping of PIL term field name to value

    Raises:
        ValueError: If a required argument is missing or invalid
    """
    pil_type = PIL_TYPE(pil_type)
    terms = _base_terms()
    if pil_type == PIL_TYPE.NON_COMMERCIAL_REMIX:
        return terms

    if minting_fee is None or currency is None or royalty_policy is None:
        raise ValueError("mintingFee, currency and royaltyPolicy are required for commercial PIL types")
    if minting_fee < 0:
        raise ValueError("mintingFee must be non-negative")

    terms.update(
        royaltyPolicy=validate_address(royalty_policy, "royaltyPolicy"),
        mintingFee=minting_fee,
        commercialUse=True,
        commercialAttribution=True,
        currency=validate_address(currency, "currency"),
    )
    if pil_type == PIL_TYPE.COMMERCIAL_USE:
        terms.update(
            derivativesAllowed=False,
            derivativesAttribution=False,
            derivativesReciprocal=False,
            uri=COMMERCIAL_USE_URI,
        )
        return terms

    if commercial_rev_share is None:
        raise ValueError("commercialRevShare is required for the commercial remix PIL type")
    terms.update(
        commercialRevShare=scale_rev_share(commercial_rev_share),
        uri=COMMERCIAL_REMIX_URI,
    )
    return terms


def terms_to_tuple(terms: Dict[str, Any]) -> Tuple[Any, ...]:
    """Order a terms mapping into the tuple layout the contracts expect."""
    return tuple(terms[name] for _, name in PIL_TERMS_COMPONENTS)
