"""
EIP-712 signatures that let an IP account change its own permissions.

An IP account runs ``executeWithSig`` for any caller holding a signature from
an address it trusts. The signed ``Execute`` message commits to the call
(target, value, data), to a nonce derived from the account's current state,
and to a deadline. Executing the call moves the account to that nonce, so a
chain of signatures is built by feeding each returned ``nonce`` in as the next
``state``.
"""
from typing import Any, Dict, List, Mapping, Sequence, Union

from eth_abi import encode
from hexbytes import HexBytes
from web3 import Web3

from .models import PermissionEntry, PermissionSignatureRequest, PermissionSignatureResponse, coerce_request
from .utils import function_selector

IP_ACCOUNT_DOMAIN_NAME = "Story Protocol IP Account"
IP_ACCOUNT_DOMAIN_VERSION = "1"

EXECUTE_TYPES: Dict[str, List[Dict[str, str]]] = {
    "Execute": [
        {"name": "to", "type": "address"},
        {"name": "value", "type": "uint256"},
        {"name": "data", "type": "bytes"},
        {"name": "nonce", "type": "bytes32"},
        {"name": "deadline", "type": "uint256"},
    ],
}

_PERMISSION_TYPES = ["address", "address", "address", "bytes4", "uint8"]
_PERMISSION_TUPLE = f"({','.join(_PERMISSION_TYPES)})"

SET_PERMISSION_SIGNATURE = f"setPermission({','.join(_PERMISSION_TYPES)})"
SET_BATCH_PERMISSIONS_SIGNATURE = f"setBatchPermissions({_PERMISSION_TUPLE}[])"


def encode_permission_call(permissions: Sequence[PermissionEntry]) -> str:
    """
    Encode the AccessController call that applies ``permissions``.

    One entry encodes ``setPermission``; more encode ``setBatchPermissions``.

    Returns:
        0x-prefixed call data
    """
    if not permissions:
        raise ValueError("permissions must not be empty")
    rows = [
        (entry.ip_id, entry.signer, entry.to, HexBytes(entry.func), int(entry.permission))
        for entry in permissions
    ]
    if len(rows) == 1:
        selector = function_selector(SET_PERMISSION_SIGNATURE)
        args = encode(_PERMISSION_TYPES, list(rows[0]))
    else:
        selector = function_selector(SET_BATCH_PERMISSIONS_SIGNATURE)
        args = encode([f"{_PERMISSION_TUPLE}[]"], [rows])
    return selector + args.hex()


def next_account_state(state: Union[bytes, str], data: Union[bytes, str]) -> str:
    """State an IP account holds after executing ``data``: keccak256(abi.encode(state, data))."""
    return Web3.to_hex(Web3.keccak(encode(["bytes32", "bytes"], [HexBytes(state), HexBytes(data)])))


def get_permission_signature(
    request: Union[PermissionSignatureRequest, Mapping[str, Any]],
    signer: Any,
) -> PermissionSignatureResponse:
    """
    Sign an ``Execute`` message authorising the IP account to apply ``permissions``.

    Args:
        request: IP account, its current state, deadline, chain ID,
            AccessController address and the permission entries
        signer: Object exposing ``sign_typed_data`` (e.g. LocalSigner)

    Returns:
        The 0x-prefixed signature, the nonce it commits to, and the deadline

    Raises:
        ValueError: If the signer cannot sign typed data
    """
    req = coerce_request(PermissionSignatureRequest, request)
    if not callable(getattr(signer, "sign_typed_data", None)):
        raise ValueError("Signer does not support EIP-712 typed data signing")

    data = encode_permission_call(req.permissions)
    nonce = next_account_state(req.state, data)
    signed = signer.sign_typed_data(
        domain_data={
            "name": IP_ACCOUNT_DOMAIN_NAME,
            "version": IP_ACCOUNT_DOMAIN_VERSION,
            "chainId": req.chain_id,
            "verifyingContract": req.ip_id,
        },
        message_types=EXECUTE_TYPES,
        message_data={
            "to": req.access_controller,
            "value": 0,
            "data": HexBytes(data),
            "nonce": HexBytes(nonce),
            "deadline": req.deadline,
        },
    )
    return PermissionSignatureResponse(
        signature=Web3.to_hex(signed.signature),
        nonce=nonce,
        deadline=req.deadline,
    )
