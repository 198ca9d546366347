"""Tests for the PyCryptodome reference oracle."""

import secrets

import pytest
from Crypto.Cipher import AES

from aes_avalanche.errors import InvalidBlockLength, InvalidKeyLength
from aes_avalanche.golden import (
    FIPS_197_TEST_VECTORS,
    compare_with_golden,
    golden_decrypt,
    golden_encrypt,
)


class TestGoldenOracle:
    """Tests for golden_encrypt / golden_decrypt."""

    @pytest.mark.parametrize("vec", FIPS_197_TEST_VECTORS)
    def test_vectors(self, vec: dict) -> None:
        assert golden_encrypt(vec["key"], vec["plaintext"]) == vec["ciphertext"]
        assert golden_decrypt(vec["key"], vec["ciphertext"]) == vec["plaintext"]

    def test_matches_pycryptodome_directly(self) -> None:
        key = secrets.token_bytes(16)
        pt = secrets.token_bytes(16)

        assert golden_encrypt(key, pt) == AES.new(key, AES.MODE_ECB).encrypt(pt)

    def test_rejects_wider_keys(self) -> None:
        """AES-192/256 keys are not accepted even though PyCryptodome would."""
        with pytest.raises(InvalidKeyLength):
            golden_encrypt(bytes(24), bytes(16))

    def test_rejects_bad_block(self) -> None:
        with pytest.raises(InvalidBlockLength):
            golden_decrypt(bytes(16), bytes(15))


class TestCompareWithGolden:
    """Tests for compare_with_golden."""

    def test_match(self) -> None:
        vec = FIPS_197_TEST_VECTORS[1]
        assert compare_with_golden(vec["key"], vec["plaintext"], vec["ciphertext"]) == (True, "")

    def test_single_bit_difference_fails(self) -> None:
        vec = FIPS_197_TEST_VECTORS[1]
        wrong = bytearray(vec["ciphertext"])
        wrong[0] ^= 0x01

        ok, detail = compare_with_golden(vec["key"], vec["plaintext"], bytes(wrong))

        assert ok is False
        assert "expected 69c4e0d8" in detail
