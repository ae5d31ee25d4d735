"""
Utility functions for the Story Protocol SDK.
"""
from typing import Union

from hexbytes import HexBytes
from web3 import Web3


def validate_address(address: str, field: str = "address") -> str:
    """
    Validate an Ethereum address and return it in checksum form.

    Args:
        address: 0x-prefixed hex address, all lowercase, all uppercase or EIP-55 mixed case
        field: Field name for the error message

    Returns:
        Checksummed address

    Raises:
        ValueError: If the address is not a valid 20-byte hex string, or its
            mixed-case form fails the EIP-55 checksum
    """
    if not isinstance(address, str) or not Web3.is_address(address):
        raise ValueError(f"{field} must be a valid Ethereum address, got: {address!r}")
    return Web3.to_checksum_address(address.lower())


def string_to_bytes32(value: str) -> bytes:
    """
    Encode a string as UTF-8 and right-pad it to 32 bytes.

    Args:
        value: String to encode (e.g. a dispute tag such as "PLAGIARISM")

    Returns:
        32-byte value suitable for a bytes32 contract argument

    Raises:
        ValueError: If the encoded string is longer than 32 bytes
    """
    encoded = value.encode("utf-8")
    if len(encoded) > 32:
        raise ValueError(f"String exceeds 32 bytes when encoded: {value!r}")
    return encoded.ljust(32, b"\x00")


def bytes32_to_string(value: Union[bytes, str]) -> str:
    """Decode a right-padded bytes32 value back into a string."""
    return bytes(HexBytes(value)).rstrip(b"\x00").decode("utf-8")


def function_selector(signature: str) -> str:
    """
    Compute the 4-byte selector for a function signature.

    Args:
        signature: Canonical signature, e.g. "transfer(address,uint256)"

    Returns:
        0x-prefixed hex selector
    """
    return Web3.to_hex(Web3.keccak(text=signature)[:4])


def to_hex_hash(tx_hash: Union[bytes, str]) -> str:
    """Normalise a transaction hash returned by the node into a 0x hex string."""
    if isinstance(tx_hash, str):
        return tx_hash if tx_hash.startswith("0x") else "0x" + tx_hash
    return Web3.to_hex(tx_hash)
