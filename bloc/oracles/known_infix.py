import secrets

from bloc.oracles._base import _EncryptionOracle


__all__ = [ 'KnownInfixECBOracle', 'KnownInfixCBCOracle', 'random_head' ]


def random_head(lo=5, hi=25):
    """Random bytes of random length in `[lo, hi)`, suitable as secret head."""
    return secrets.token_bytes(lo + secrets.randbelow(hi - lo))


class _KnownInfixOracle(_EncryptionOracle):
    """An oracle which encrypts `head + <attacker data> + tail` under a fixed key.

    Head and tail are unknown to the attacker. If no tail is given a random one is generated.
    """
    def __init__(self, mode, head=None, tail=None, key=None, keysize=128, blocksize=16, iv=None):
        super().__init__(mode, key=key, keysize=keysize, blocksize=blocksize, iv=iv)

        if tail is None:
            tail = secrets.token_bytes(35)
        if head is None:
            head = b''

        self.tail = bytes(tail)
        self.head = bytes(head)

    def encrypt(self, infix):
        return self._encrypt(self.head, infix, self.tail)

    def decrypt(self, msg):
        return self._decrypt_unpadded(msg)

    def check_answer(self, suffix_guess):
        """Checks if the secret tail has been correctly determined."""
        return bytes(suffix_guess) == self.tail

    def __call__(self, infix):
        return self.encrypt(infix)


class KnownInfixECBOracle(_KnownInfixOracle):
    r"""Encrypts `head + <attacker data> + tail` in ECB mode.

    Example:
    ```python
    >>> o = KnownInfixECBOracle(tail=b'secret')
    >>> len(o(b'')), len(o(b'A' * 10))
    (16, 32)
    >>> o.decrypt(o(b'hi '))
    b'hi secret'

    ```
    """
    def __init__(self, head=None, tail=None, key=None, keysize=128, blocksize=16):
        super().__init__('ECB', head=head, tail=tail, key=key, keysize=keysize, blocksize=blocksize)


class KnownInfixCBCOracle(_KnownInfixOracle):
    """Encrypts `head + <attacker data> + tail` in CBC mode with a fixed IV."""
    def __init__(self, head=None, tail=None, key=None, keysize=128, blocksize=16, iv=None):
        if iv is None:
            iv = secrets.token_bytes(blocksize)

        super().__init__('CBC', head=head, tail=tail, key=key, keysize=keysize, blocksize=blocksize, iv=iv)
        self.iv = iv
