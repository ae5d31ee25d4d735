"""
Tests for utility functions.
"""
import pytest
from hypothesis import given, strategies as st

from story_protocol_sdk.utils import (
    bytes32_to_string,
    function_selector,
    string_to_bytes32,
    to_hex_hash,
    validate_address,
)


def test_validate_address_checksums():
    """Lowercase input comes back in checksum form"""
    result = validate_address("0xeb7b1dd43b81a7be1fa427515a2b173b454a9832")
    assert result.lower() == "0xeb7b1dd43b81a7be1fa427515a2b173b454a9832"
    assert result != result.lower()
    assert validate_address(result.upper().replace("0X", "0x")) == result


def test_validate_address_rejects_bad_checksum():
    # every letter has the opposite case to its EIP-55 form
    with pytest.raises(ValueError, match="targetIpId"):
        validate_address("0x5AaEB6053f3e94c9B9a09F33669435e7eF1bEaED", "targetIpId")


def test_validate_address_accepts_valid_checksum():
    address = "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed"
    assert validate_address(address) == address


@pytest.mark.parametrize("bad", ["", "0x1234", "not-an-address", None, 123])
def test_validate_address_rejects(bad):
    with pytest.raises(ValueError, match="targetIpId"):
        validate_address(bad, "targetIpId")


def test_string_to_bytes32_pads_right():
    result = string_to_bytes32("PLAGIARISM")
    assert len(result) == 32
    assert result.startswith(b"PLAGIARISM")
    assert result[10:] == b"\x00" * 22


def test_string_to_bytes32_too_long():
    with pytest.raises(ValueError, match="32 bytes"):
        string_to_bytes32("a" * 33)


def test_string_to_bytes32_counts_utf8_bytes():
    # 11 three-byte characters exceed 32 bytes
    with pytest.raises(ValueError):
        string_to_bytes32("€" * 11)


@given(st.text(max_size=8).filter(lambda s: "\x00" not in s))
def test_bytes32_roundtrip(value):
    assert bytes32_to_string(string_to_bytes32(value)) == value


def test_bytes32_to_string_accepts_hex():
    assert bytes32_to_string("0x" + b"IMPROPER_REGISTRATION".hex().ljust(64, "0")) == "IMPROPER_REGISTRATION"


def test_function_selector():
    assert function_selector("transfer(address,uint256)") == "0xa9059cbb"


@pytest.mark.parametrize(
    "value, expected",
    [
        (bytes.fromhex("ab" * 32), "0x" + "ab" * 32),
        ("0x" + "cd" * 32, "0x" + "cd" * 32),
        ("ef" * 32, "0x" + "ef" * 32),
    ],
)
def test_to_hex_hash(value, expected):
    assert to_hex_hash(value) == expected
