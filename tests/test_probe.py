"""
Tests for block size and mode discovery.
"""

import pytest

from bloc.attacks.sym.probe import find_block_size, is_ecb_mode, probe_block_cipher, require_mode
from bloc.errors import ModeMismatch, ProbeExhausted
from bloc.oracles import EcbOrCbcOracle, KnownInfixCBCOracle, KnownInfixECBOracle, random_head


BLOCK_SIZES = [8, 16, 24]


class TestBlockSize:
    """Tests for `find_block_size`."""

    @pytest.mark.parametrize("blocksize", BLOCK_SIZES)
    @pytest.mark.parametrize("tail_len", [0, 1, 7, 16, 35])
    def test_ecb(self, blocksize, tail_len, random_bytes):
        oracle = KnownInfixECBOracle(head=random_head(), tail=random_bytes(tail_len), blocksize=blocksize)
        assert find_block_size(oracle) == blocksize

    @pytest.mark.parametrize("blocksize", BLOCK_SIZES)
    def test_cbc(self, blocksize):
        assert find_block_size(KnownInfixCBCOracle(blocksize=blocksize)) == blocksize

    def test_constant_output_is_exhausted(self):
        with pytest.raises(ProbeExhausted):
            find_block_size(lambda data: b'\x00' * 32, max_blocksize=64)

    def test_unpadded_growth_is_rejected(self):
        def oracle(data):
            return b'\x00' * (10 + 16 * ((len(data) + 1) // 4))

        with pytest.raises(ProbeExhausted):
            find_block_size(oracle)


class TestMode:
    """Tests for ECB detection."""

    @pytest.mark.parametrize("blocksize", BLOCK_SIZES)
    def test_fixed_modes(self, blocksize):
        ecb = KnownInfixECBOracle(head=random_head(), blocksize=blocksize)
        cbc = KnownInfixCBCOracle(head=random_head(), blocksize=blocksize)
        assert is_ecb_mode(ecb, blocksize=blocksize)
        assert not is_ecb_mode(cbc, blocksize=blocksize)

    def test_randomising_oracle(self):
        oracle = EcbOrCbcOracle()
        score = 0
        for _ in range(1000):
            if oracle.check_answer(is_ecb_mode(oracle, blocksize=16)):
                score += 1

        assert score >= 990

    def test_probe_block_cipher(self):
        assert probe_block_cipher(KnownInfixECBOracle(blocksize=8)) == (8, True)
        assert probe_block_cipher(KnownInfixCBCOracle(blocksize=24)) == (24, False)

    def test_require_mode(self):
        require_mode(KnownInfixECBOracle(), 16, ecb=True)
        require_mode(KnownInfixCBCOracle(), 16, ecb=False)

        with pytest.raises(ModeMismatch):
            require_mode(KnownInfixCBCOracle(), 16, ecb=True)
        with pytest.raises(ModeMismatch):
            require_mode(KnownInfixECBOracle(), 16, ecb=False)
