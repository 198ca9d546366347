"""Independent AES-128 oracle backed by PyCryptodome.

Used by ``aes-avalanche validate`` and by the test suite to cross-check
the hand-written cipher on known-answer and random vectors.
"""

from __future__ import annotations

from Crypto.Cipher import AES

from .errors import InvalidBlockLength, InvalidKeyLength


def _ecb(key: bytes, block: bytes):
    if len(key) != 16:
        raise InvalidKeyLength(len(key))
    if len(block) != 16:
        raise InvalidBlockLength(len(block))
    return AES.new(key, AES.MODE_ECB)


def golden_encrypt(key: bytes, plaintext: bytes) -> bytes:
    """Encrypt one block with PyCryptodome."""
    return _ecb(key, plaintext).encrypt(plaintext)


def golden_decrypt(key: bytes, ciphertext: bytes) -> bytes:
    """Decrypt one block with PyCryptodome."""
    return _ecb(key, ciphertext).decrypt(ciphertext)


def compare_with_golden(
    key: bytes, plaintext: bytes, candidate_ciphertext: bytes
) -> tuple[bool, str]:
    """Compare a candidate ciphertext with the oracle.

    Returns:
        Tuple of (matches, mismatch detail or empty string)
    """
    expected = golden_encrypt(key, plaintext)
    if candidate_ciphertext == expected:
        return True, ""
    return False, (
        f"expected {expected.hex()}, got {candidate_ciphertext.hex()}"
    )


# FIPS-197 and NIST known-answer vectors for AES-128
FIPS_197_TEST_VECTORS = [
    # FIPS-197 Appendix B (cipher example)
    {
        "key": bytes.fromhex("2b7e151628aed2a6abf7158809cf4f3c"),
        "plaintext": bytes.fromhex("3243f6a8885a308d313198a2e0370734"),
        "ciphertext": bytes.fromhex("3925841d02dc09fbdc118597196a0b32"),
    },
    # FIPS-197 Appendix C.1
    {
        "key": bytes.fromhex("000102030405060708090a0b0c0d0e0f"),
        "plaintext": bytes.fromhex("00112233445566778899aabbccddeeff"),
        "ciphertext": bytes.fromhex("69c4e0d86a7b0430d8cdb78070b4c55a"),
    },
    {
        "key": bytes(16),
        "plaintext": bytes(16),
        "ciphertext": bytes.fromhex("66e94bd4ef8a2c3b884cfa59ca342b2e"),
    },
    {
        "key": bytes(16),
        "plaintext": bytes.fromhex("f34481ec3cc627bacd5dc3fb08f273e6"),
        "ciphertext": bytes.fromhex("0336763e966d92595a567cc9ce537f5e"),
    },
    {
        "key": bytes([0xff] * 16),
        "plaintext": bytes([0xff] * 16),
        "ciphertext": bytes.fromhex("bcbf217cb280cf30b2517052193ab979"),
    },
]
