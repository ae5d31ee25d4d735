"""
NFT collection client.
"""
from typing import Any, Mapping, Union

from ..abi import SPG_ABI
from ..constants import ZERO_ADDRESS
from ..events import decode_collection_created
from ..models import CreateNFTCollectionRequest, CreateNFTCollectionResponse, coerce_request
from .base import ResourceClient


class NftClient(ResourceClient):

    @property
    def spg(self) -> Any:
        return self._contract(self.contracts.spg, SPG_ABI)

    def create_nft_collection(
        self, request: Union[CreateNFTCollectionRequest, Mapping[str, Any]]
    ) -> CreateNFTCollectionResponse:
        """
        Create an SPG NFT collection that IP assets can be minted from.

        Raises:
            ValueError: If only one of ``mint_fee``/``mint_fee_token`` is given,
                or the mint fee is negative
        """
        req = coerce_request(CreateNFTCollectionRequest, request)
        if (req.mint_fee is None) != (req.mint_fee_token is None):
            raise ValueError("mintFee and mintFeeToken must be provided together")
        if req.mint_fee is not None and req.mint_fee < 0:
            raise ValueError("mintFee must be non-negative")

        owner = req.owner or self._wallet_address()
        args = (
            req.name,
            req.symbol,
            req.max_supply,
            req.mint_fee or 0,
            req.mint_fee_token or ZERO_ADDRESS,
            owner,
        )
        result = self._execute(self.spg, "createCollection", args, req.tx_options)
        if result.receipt is None:
            return CreateNFTCollectionResponse(tx_hash=result.tx_hash, encoded_tx_data=result.encoded_tx_data)

        event = decode_collection_created(self.spg, result.receipt)
        return CreateNFTCollectionResponse(tx_hash=result.tx_hash, nft_contract=event.nft_contract)
