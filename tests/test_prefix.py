"""
Tests for locating the unknown prefix.
"""

import pytest

from bloc.attacks.sym.prefix import ecb_guess_block_layout, find_ecb_prefix_len, find_prefix_len
from bloc.errors import ModeMismatch, PrefixLengthIndeterminate
from bloc.oracles import CommentCBCOracle, KnownInfixCBCOracle, KnownInfixECBOracle


BLOCK_SIZES = [8, 16, 24]


def prefix_lengths(blocksize):
    return sorted({0, 1, 9, blocksize - 1, blocksize, blocksize + 1, 2 * blocksize - 1, 2 * blocksize})


class TestEcbPrefix:
    """Tests for `find_ecb_prefix_len`."""

    @pytest.mark.parametrize("blocksize", BLOCK_SIZES)
    def test_all_lengths(self, blocksize, random_bytes):
        for n in prefix_lengths(blocksize):
            oracle = KnownInfixECBOracle(head=random_bytes(n), tail=random_bytes(blocksize + 5), blocksize=blocksize)
            assert find_ecb_prefix_len(oracle, blocksize=blocksize) == n

    @pytest.mark.parametrize("n", [0, 16, 32])
    def test_block_multiples_with_probing(self, n, random_bytes):
        oracle = KnownInfixECBOracle(head=random_bytes(n), tail=random_bytes(20))
        assert find_ecb_prefix_len(oracle) == n

    @pytest.mark.parametrize("tail", [b'', b'\x00' * 40, b'\x01' * 40, b'\x00\x01' * 20, b'\x01\x01\x01rest'])
    def test_tail_resembling_filler(self, tail):
        for n in (0, 5, 16, 21):
            oracle = KnownInfixECBOracle(head=b'\x00' * n, tail=tail)
            assert find_ecb_prefix_len(oracle, blocksize=16) == n

    def test_nine_byte_prefix(self, random_bytes, rollin):
        oracle = KnownInfixECBOracle(head=random_bytes(9), tail=rollin)
        assert find_ecb_prefix_len(oracle) == 9

    def test_cbc_is_rejected(self):
        with pytest.raises(ModeMismatch):
            find_ecb_prefix_len(KnownInfixCBCOracle(head=b'prefix'))

    def test_constant_oracle(self):
        with pytest.raises(PrefixLengthIndeterminate):
            find_ecb_prefix_len(lambda data: b'\x00' * 64, blocksize=16)

    def test_fillers_have_to_differ(self):
        with pytest.raises(ValueError):
            find_ecb_prefix_len(KnownInfixECBOracle(), blocksize=16, fillers=(b'A', b'A'))


class TestAnyModePrefix:
    """Tests for the mode agnostic `find_prefix_len`."""

    @pytest.mark.parametrize("blocksize", BLOCK_SIZES)
    @pytest.mark.parametrize("cls", [KnownInfixECBOracle, KnownInfixCBCOracle])
    def test_all_lengths(self, cls, blocksize, random_bytes):
        for n in prefix_lengths(blocksize):
            oracle = cls(head=random_bytes(n), tail=random_bytes(7), blocksize=blocksize)
            assert find_prefix_len(oracle, blocksize) == n

    def test_comment_oracle(self):
        assert find_prefix_len(CommentCBCOracle(), 16) == len(CommentCBCOracle.prefix)

    def test_constant_oracle(self):
        with pytest.raises(PrefixLengthIndeterminate):
            find_prefix_len(lambda data: b'\x00' * 64, 16)


class TestLayout:
    """Tests for `ecb_guess_block_layout`."""

    @pytest.mark.parametrize("n,layout", [(0, (16, 0, 0)), (10, (16, 1, 10)), (16, (16, 1, 0)), (26, (16, 2, 10))])
    def test_layout(self, n, layout):
        assert ecb_guess_block_layout(KnownInfixECBOracle(head=b'p' * n)) == layout

    def test_layout_small_blocks(self):
        assert ecb_guess_block_layout(KnownInfixECBOracle(head=b'p' * 11, blocksize=8)) == (8, 2, 3)
