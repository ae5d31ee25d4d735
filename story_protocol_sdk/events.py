"""
Receipt event decoders.

Each ``decode_*`` function pulls one event type out of a transaction receipt
and returns a typed record, or raises DecodingError when the receipt holds no
matching log.
"""
import logging
from dataclasses import dataclass
from typing import Any, Callable, List, Mapping, TypeVar

from web3.logs import DISCARD

from .exceptions import DecodingError

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class DisputeRaisedEvent:
    dispute_id: int
    target_ip_id: str
    dispute_initiator: str
    arbitration_policy: str
    target_tag: bytes


@dataclass(frozen=True)
class IPRegisteredEvent:
    ip_id: str
    chain_id: int
    token_contract: str
    token_id: int


@dataclass(frozen=True)
class LicenseTermsRegisteredEvent:
    license_terms_id: int
    license_template: str


@dataclass(frozen=True)
class LicenseTokensMintedEvent:
    licensor_ip_id: str
    license_terms_id: int
    amount: int
    start_license_token_id: int

    @property
    def license_token_ids(self) -> List[int]:
        return list(range(self.start_license_token_id, self.start_license_token_id + self.amount))


@dataclass(frozen=True)
class RoyaltyTokensCollectedEvent:
    ancestor_ip_id: str
    royalty_tokens_collected: int


@dataclass(frozen=True)
class RevenueTokenClaimedEvent:
    claimer: str
    token: str
    amount: int


@dataclass(frozen=True)
class SnapshotCompletedEvent:
    snapshot_id: int
    snapshot_timestamp: int
    unclaimed_tokens: int


@dataclass(frozen=True)
class PermissionSetEvent:
    ip_account: str
    signer: str
    to: str
    func: bytes
    permission: int


@dataclass(frozen=True)
class CollectionCreatedEvent:
    nft_contract: str


def process_event_logs(contract: Any, event_name: str, receipt: Mapping[str, Any]) -> List[Any]:
    """
    Decode every log in ``receipt`` that matches ``event_name`` on ``contract``.

    Logs for other events are skipped, and so are logs emitted from any address
    other than ``contract.address``: a foreign contract can emit an event with
    the same signature.

    Returns:
        List of decoded web3 event records (possibly empty)
    """
    event = getattr(contract.events, event_name)()
    return [
        log for log in event.process_receipt(receipt, errors=DISCARD)
        if log.get("address") == contract.address
    ]


def _decode_all(
    contract: Any,
    event_name: str,
    receipt: Mapping[str, Any],
    build: Callable[[Mapping[str, Any]], T],
) -> List[T]:
    logs = process_event_logs(contract, event_name, receipt)
    if not logs:
        raise DecodingError(f"No {event_name} event found in transaction receipt")
    try:
        return [build(log["args"]) for log in logs]
    except (KeyError, TypeError, ValueError) as e:
        logger.error(f"Malformed {event_name} event: {e}")
        raise DecodingError(f"Malformed {event_name} event: {e}") from e


def decode_dispute_raised(contract: Any, receipt: Mapping[str, Any]) -> DisputeRaisedEvent:
    return _decode_all(contract, "DisputeRaised", receipt, lambda a: DisputeRaisedEvent(
        dispute_id=int(a["disputeId"]),
        target_ip_id=a["targetIpId"],
        dispute_initiator=a["disputeInitiator"],
        arbitration_policy=a["arbitrationPolicy"],
        target_tag=bytes(a["targetTag"]),
    ))[0]


def decode_ip_registered(contract: Any, receipt: Mapping[str, Any]) -> List[IPRegisteredEvent]:
    return _decode_all(contract, "IPRegistered", receipt, lambda a: IPRegisteredEvent(
        ip_id=a["ipId"],
        chain_id=int(a["chainId"]),
        token_contract=a["tokenContract"],
        token_id=int(a["tokenId"]),
    ))


def decode_license_terms_registered(contract: Any, receipt: Mapping[str, Any]) -> LicenseTermsRegisteredEvent:
    return _decode_all(contract, "LicenseTermsRegistered", receipt, lambda a: LicenseTermsRegisteredEvent(
        license_terms_id=int(a["licenseTermsId"]),
        license_template=a["licenseTemplate"],
    ))[0]


def decode_license_tokens_minted(contract: Any, receipt: Mapping[str, Any]) -> LicenseTokensMintedEvent:
    return _decode_all(contract, "LicenseTokensMinted", receipt, lambda a: LicenseTokensMintedEvent(
        licensor_ip_id=a["licensorIpId"],
        license_terms_id=int(a["licenseTermsId"]),
        amount=int(a["amount"]),
        start_license_token_id=int(a["startLicenseTokenId"]),
    ))[0]


def decode_royalty_tokens_collected(contract: Any, receipt: Mapping[str, Any]) -> RoyaltyTokensCollectedEvent:
    return _decode_all(contract, "RoyaltyTokensCollected", receipt, lambda a: RoyaltyTokensCollectedEvent(
        ancestor_ip_id=a["ancestorIpId"],
        royalty_tokens_collected=int(a["royaltyTokensCollected"]),
    ))[0]


def decode_revenue_token_claimed(contract: Any, receipt: Mapping[str, Any]) -> RevenueTokenClaimedEvent:
    return _decode_all(contract, "RevenueTokenClaimed", receipt, lambda a: RevenueTokenClaimedEvent(
        claimer=a["claimer"],
        token=a["token"],
        amount=int(a["amount"]),
    ))[0]


def decode_snapshot_completed(contract: Any, receipt: Mapping[str, Any]) -> SnapshotCompletedEvent:
    return _decode_all(contract, "SnapshotCompleted", receipt, lambda a: SnapshotCompletedEvent(
        snapshot_id=int(a["snapshotId"]),
        snapshot_timestamp=int(a["snapshotTimestamp"]),
        unclaimed_tokens=int(a["unclaimedTokens"]),
    ))[0]


def decode_permission_set(contract: Any, receipt: Mapping[str, Any]) -> List[PermissionSetEvent]:
    return _decode_all(contract, "PermissionSet", receipt, lambda a: PermissionSetEvent(
        ip_account=a["ipAccount"],
        signer=a["signer"],
        to=a["to"],
        func=bytes(a["func"]),
        permission=int(a["permission"]),
    ))


def decode_collection_created(contract: Any, receipt: Mapping[str, Any]) -> CollectionCreatedEvent:
    return _decode_all(contract, "CollectionCreated", receipt, lambda a: CollectionCreatedEvent(
        nft_contract=a["nftContract"],
    ))[0]
