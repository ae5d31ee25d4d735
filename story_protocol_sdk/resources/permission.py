"""
Permission client.

Permission changes are made by the IP account itself, so every write here is
encoded as an AccessController call and routed through the IP account: the
plain variants call ``execute`` (the wallet must own the IP), the signature
variants sign an EIP-712 ``Execute`` message and call ``executeWithSig``.
"""
from typing import Any, List, Mapping, Optional, Sequence, Union

from ..abi import ACCESS_CONTROLLER_ABI, IP_ACCOUNT_IMPL_ABI, IP_ASSET_REGISTRY_ABI
from ..constants import ZERO_FUNC
from ..events import decode_permission_set
from ..models import (
    CreateBatchPermissionSignatureRequest,
    CreateSetPermissionSignatureRequest,
    PermissionEntry,
    SetAllPermissionsRequest,
    SetBatchPermissionsRequest,
    SetPermissionsRequest,
    SetPermissionsResponse,
    TxOptions,
    coerce_request,
)
from ..sign import encode_permission_call, get_permission_signature
from ..tx import TxResult
from ..utils import validate_address
from .base import ResourceClient


class PermissionClient(ResourceClient):

    @property
    def access_controller(self) -> Any:
        return self._contract(self.contracts.access_controller, ACCESS_CONTROLLER_ABI)

    @property
    def ip_asset_registry(self) -> Any:
        return self._contract(self.contracts.ip_asset_registry, IP_ASSET_REGISTRY_ABI)

    def set_permission(self, request: Union[SetPermissionsRequest, Mapping[str, Any]]) -> SetPermissionsResponse:
        """
        Grant, deny or clear ``signer``'s permission to call ``func`` on ``to``
        on behalf of the IP account.
        """
        req = coerce_request(SetPermissionsRequest, request)
        args = (req.ip_id, req.signer, req.to, req.func, int(req.permission))
        return self._execute_via_ip_account(req.ip_id, "setPermission", args, req.tx_options)

    def set_all_permissions(
        self, request: Union[SetAllPermissionsRequest, Mapping[str, Any]]
    ) -> SetPermissionsResponse:
        """Set ``signer``'s permission for every module and function of the IP account."""
        req = coerce_request(SetAllPermissionsRequest, request)
        args = (req.ip_id, req.signer, int(req.permission))
        return self._execute_via_ip_account(req.ip_id, "setAllPermissions", args, req.tx_options)

    def set_batch_permissions(
        self, request: Union[SetBatchPermissionsRequest, Mapping[str, Any]]
    ) -> SetPermissionsResponse:
        """Apply several permission entries in one transaction."""
        req = coerce_request(SetBatchPermissionsRequest, request)
        self._check_batch(req.ip_id, req.permissions)
        entries = [entry.as_tuple() for entry in req.permissions]
        return self._execute_via_ip_account(req.ip_id, "setBatchPermissions", (entries,), req.tx_options)

    def create_set_permission_signature(
        self, request: Union[CreateSetPermissionSignatureRequest, Mapping[str, Any]]
    ) -> SetPermissionsResponse:
        """
        Set one permission through ``executeWithSig``, signed by the wallet.

        ``deadline`` is the number of seconds past the latest block the
        signature stays valid (1000 by default).
        """
        req = coerce_request(CreateSetPermissionSignatureRequest, request)
        entry = PermissionEntry(
            ip_id=req.ip_id, signer=req.signer, to=req.to, func=req.func, permission=req.permission
        )
        return self._execute_with_signature(req.ip_id, [entry], req.deadline, req.tx_options)

    def create_batch_permission_signature(
        self, request: Union[CreateBatchPermissionSignatureRequest, Mapping[str, Any]]
    ) -> SetPermissionsResponse:
        """Apply several permission entries through ``executeWithSig``, signed by the wallet."""
        req = coerce_request(CreateBatchPermissionSignatureRequest, request)
        self._check_batch(req.ip_id, req.permissions)
        return self._execute_with_signature(req.ip_id, req.permissions, req.deadline, req.tx_options)

    def get_permission(self, ip_id: str, signer: str, to: str, func: str = ZERO_FUNC) -> int:
        return self.access_controller.functions.getPermission(
            validate_address(ip_id, "ipId"),
            validate_address(signer, "signer"),
            validate_address(to, "to"),
            func,
        ).call()

    def _check_batch(self, ip_id: str, permissions: Sequence[PermissionEntry]) -> None:
        if not permissions:
            raise ValueError("permissions must not be empty")
        for entry in permissions:
            if entry.ip_id != ip_id:
                raise ValueError(f"Permission entry for {entry.ip_id} does not match IP account {ip_id}")

    def _require_registered(self, ip_id: str) -> None:
        if not self.ip_asset_registry.functions.isRegistered(ip_id).call():
            raise ValueError(f"The IP with id {ip_id} is not registered")

    def _execute_via_ip_account(
        self,
        ip_id: str,
        function_name: str,
        args: Sequence[Any],
        tx_options: TxOptions,
    ) -> SetPermissionsResponse:
        self._require_registered(ip_id)

        data = self.access_controller.encode_abi(function_name, args=list(args))
        ip_account = self._contract(ip_id, IP_ACCOUNT_IMPL_ABI)
        result = self._execute(ip_account, "execute", (self.access_controller.address, 0, data), tx_options)
        return self._permission_response(result)

    def _execute_with_signature(
        self,
        ip_id: str,
        permissions: List[PermissionEntry],
        deadline: Optional[int],
        tx_options: TxOptions,
    ) -> SetPermissionsResponse:
        self._require_registered(ip_id)
        wallet = self._wallet_address()

        ip_account = self._contract(ip_id, IP_ACCOUNT_IMPL_ABI)
        state = ip_account.functions.state().call()
        expires = self._signature_deadline(deadline)
        signature = get_permission_signature(
            {
                "ipId": ip_id,
                "state": state,
                "deadline": expires,
                "chainId": self.chain.chain_id,
                "accessController": self.access_controller.address,
                "permissions": permissions,
            },
            self.signer,
        )

        data = encode_permission_call(permissions)
        result = self._execute(
            ip_account,
            "executeWithSig",
            (self.access_controller.address, 0, data, wallet, expires, signature.signature),
            tx_options,
        )
        return self._permission_response(result)

    def _permission_response(self, result: TxResult) -> SetPermissionsResponse:
        if result.receipt is None:
            return SetPermissionsResponse(tx_hash=result.tx_hash, encoded_tx_data=result.encoded_tx_data)

        decode_permission_set(self.access_controller, result.receipt)
        return SetPermissionsResponse(tx_hash=result.tx_hash, success=True)
