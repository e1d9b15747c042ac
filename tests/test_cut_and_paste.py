"""
Tests for forging ECB tokens by rearranging blocks.
"""

import pytest

from bloc.attacks.sym.cut_and_paste import craft_ecb_admin_token
from bloc.errors import ModeMismatch
from bloc.oracles import KnownInfixCBCOracle, ProfileECBOracle


class TestCutAndPaste:
    """Tests for `craft_ecb_admin_token`."""

    def test_grants_admin(self):
        for _ in range(10):
            oracle = ProfileECBOracle()
            assert oracle.is_admin(craft_ecb_admin_token(oracle))

    def test_forged_record(self):
        oracle = ProfileECBOracle()
        profile = oracle.decrypt(craft_ecb_admin_token(oracle, blocksize=16))

        # email=AAAAAAAAAAAAA&uid=10&role=admin&uid=10&rolrole=user
        assert profile == {b'email': b'A' * 13, b'uid': b'10', b'role': b'admin', b'rolrole': b'user'}

    def test_small_blocks(self):
        oracle = ProfileECBOracle(blocksize=8)
        token = craft_ecb_admin_token(oracle)
        assert oracle.is_admin(token)
        assert oracle.decrypt(token)[b'email'] == b'AAAAA'

    def test_other_role(self):
        oracle = ProfileECBOracle()
        assert oracle.decrypt(craft_ecb_admin_token(oracle, value=b'root'))[b'role'] == b'root'

    def test_value_has_to_be_isolated(self):
        with pytest.raises(ValueError):
            craft_ecb_admin_token(ProfileECBOracle(blocksize=24))

    @pytest.mark.parametrize("value", [b'admin&uid=0', b'admin=1'])
    def test_metacharacters_in_value(self, value):
        with pytest.raises(ValueError):
            craft_ecb_admin_token(ProfileECBOracle(), value=value)

    def test_cbc_is_rejected(self):
        with pytest.raises(ModeMismatch):
            craft_ecb_admin_token(KnownInfixCBCOracle(head=b'email=', tail=b'&uid=10&role=user'))
