"""Tests for message framing and key/ciphertext files."""

import random

import pytest

from aes_avalanche.cipher import encrypt_block
from aes_avalanche.errors import InvalidBlockLength, KeyFileError
from aes_avalanche.golden import golden_encrypt
from aes_avalanche.key_schedule import expand_key
from aes_avalanche.message import (
    decrypt_message,
    encrypt_message,
    iter_blocks,
    pad_message,
    parse_key_hex,
    read_binary,
    read_key_file,
    strip_padding,
    write_binary,
)


KEY = bytes.fromhex("2b7e151628aed2a6abf7158809cf4f3c")
KEY_SPACED = "2b 7e 15 16 28 ae d2 a6 ab f7 15 88 09 cf 4f 3c"


class TestPadding:
    """Tests for zero padding."""

    @pytest.mark.parametrize("length,padded", [(0, 0), (1, 16), (15, 16), (16, 16), (17, 32)])
    def test_padded_length(self, length: int, padded: int) -> None:
        assert len(pad_message(b"a" * length)) == padded

    def test_padding_is_zero_bytes(self) -> None:
        assert pad_message(b"abc") == b"abc" + bytes(13)

    def test_strip_padding(self) -> None:
        assert strip_padding(pad_message(b"hello world")) == b"hello world"


class TestIterBlocks:
    """Tests for block splitting."""

    def test_splits_in_order(self) -> None:
        data = bytes(range(48))
        blocks = list(iter_blocks(data))

        assert len(blocks) == 3
        assert b"".join(blocks) == data

    def test_empty_buffer(self) -> None:
        assert list(iter_blocks(b"")) == []

    def test_rejects_unaligned(self) -> None:
        with pytest.raises(InvalidBlockLength, match="multiple of 16"):
            list(iter_blocks(bytes(20)))


class TestMessageCipher:
    """Tests for block-at-a-time message encryption."""

    def test_each_block_encrypted_independently(self) -> None:
        message = b"Two blocks of text, zero padded."
        ciphertext = encrypt_message(message, KEY)

        assert len(ciphertext) == 32
        for i, block in enumerate(iter_blocks(pad_message(message))):
            assert ciphertext[16 * i:16 * (i + 1)] == golden_encrypt(KEY, block)

    def test_identical_blocks_give_identical_ciphertext(self) -> None:
        ciphertext = encrypt_message(b"A" * 32, KEY)
        assert ciphertext[:16] == ciphertext[16:]

    def test_round_trip(self) -> None:
        rng = random.Random(3)
        for length in (1, 15, 16, 33, 100):
            message = bytes(rng.randint(1, 255) for _ in range(length))
            assert strip_padding(decrypt_message(encrypt_message(message, KEY), KEY)) == message

    def test_ciphertext_with_newlines_and_zeros_survives_file(self, tmp_path) -> None:
        """Raw binary files keep every byte of the ciphertext."""
        xk = expand_key(KEY)
        # Search for a plaintext whose ciphertext holds 0x0a or 0x00
        for i in range(1000):
            block = i.to_bytes(16, "big")
            ct = encrypt_block(block, xk)
            if b"\n" in ct or b"\x00" in ct:
                break
        path = write_binary(tmp_path / "out" / "message.aes", ct)

        assert read_binary(path) == ct
        assert decrypt_message(read_binary(path), KEY) == block

    def test_decrypt_rejects_unaligned(self) -> None:
        with pytest.raises(InvalidBlockLength):
            decrypt_message(bytes(17), KEY)


class TestKeyParsing:
    """Tests for hex key parsing and key files."""

    def test_spaced_hex(self) -> None:
        assert parse_key_hex(KEY_SPACED) == KEY

    def test_contiguous_hex(self) -> None:
        assert parse_key_hex(KEY.hex()) == KEY

    def test_surrounding_whitespace(self) -> None:
        assert parse_key_hex(f"  {KEY.hex()}\n") == KEY

    @pytest.mark.parametrize("text", ["", "2b 7e", KEY.hex() + "00", "zz" * 16])
    def test_invalid(self, text: str) -> None:
        with pytest.raises(KeyFileError):
            parse_key_hex(text)

    def test_read_key_file_first_line(self, tmp_path) -> None:
        path = tmp_path / "keyfile"
        path.write_text(KEY_SPACED + "\nignored second line\n")

        assert read_key_file(path) == KEY

    def test_missing_key_file(self, tmp_path) -> None:
        with pytest.raises(KeyFileError, match="Unable to open key file"):
            read_key_file(tmp_path / "nope")

    def test_empty_key_file(self, tmp_path) -> None:
        path = tmp_path / "keyfile"
        path.write_text("")

        with pytest.raises(KeyFileError):
            read_key_file(path)
