"""
Tests for the block cipher collaborators.
"""

import secrets

import pytest

from bloc.crypto_constructor import FeistelCipher, aes_cbc, feistel_cbc, feistel_ecb, sym_cipher
from bloc.utils import chunks, find_dup_blocks


class TestFeistel:
    """Tests for the variable block size Feistel primitive."""

    @pytest.mark.parametrize("blocksize", [2, 8, 16, 24, 64])
    def test_block_roundtrip(self, blocksize):
        f = FeistelCipher(secrets.token_bytes(16), blocksize=blocksize)
        for _ in range(10):
            block = secrets.token_bytes(blocksize)
            assert f.decrypt_block(f.encrypt_block(block)) == block

    def test_key_dependent(self):
        block = b'0123456789abcdef'
        a = FeistelCipher(b'key one', blocksize=16).encrypt_block(block)
        b = FeistelCipher(b'key two', blocksize=16).encrypt_block(block)
        assert a != b

    @pytest.mark.parametrize("blocksize", [0, 7, 66])
    def test_unsupported_block_size(self, blocksize):
        with pytest.raises(ValueError):
            FeistelCipher(b'key', blocksize=blocksize)


class TestModes:
    """Tests for ECB and CBC on top of the primitives."""

    @pytest.mark.parametrize("blocksize", [8, 24])
    def test_ecb_repeats(self, blocksize):
        c = feistel_ecb(blocksize=blocksize)
        out = c.encrypt(b'\x00' * blocksize * 4)
        assert find_dup_blocks(out, blocksize) == [(4, tuple(out[:blocksize]))]
        assert c.decrypt(out) == b'\x00' * blocksize * 4

    @pytest.mark.parametrize("blocksize", [8, 24])
    def test_cbc_roundtrip_without_repeats(self, blocksize):
        c = feistel_cbc(blocksize=blocksize)
        plain = b'\x00' * blocksize * 4
        out = c.encrypt(plain)
        assert len(set(chunks(out, blocksize))) == 4
        assert c.decrypt(out) == plain

    def test_cbc_iv_is_used(self):
        key = secrets.token_bytes(16)
        a = feistel_cbc(key=key, iv=b'\x00' * 8, blocksize=8).encrypt(b'A' * 8)
        b = feistel_cbc(key=key, iv=b'\x01' * 8, blocksize=8).encrypt(b'A' * 8)
        assert a != b

    def test_rejects_partial_blocks(self):
        with pytest.raises(ValueError):
            feistel_ecb(blocksize=8).encrypt(b'123')

    def test_sym_cipher_dispatch(self):
        assert sym_cipher('ecb').alg_name == 'AES'
        assert sym_cipher('cbc', blocksize=24).alg_name == 'Feistel'
        assert sym_cipher('cbc', blocksize=24).block_size == 24

        with pytest.raises(ValueError):
            sym_cipher('ctr')

    def test_aes_cbc_keeps_parameters(self):
        c = aes_cbc()
        assert len(c.key) == 16
        assert len(c.iv) == 16
        assert aes_cbc(key=c.key, iv=c.iv).decrypt(c.encrypt(b'Y' * 32)) == b'Y' * 32
