import secrets

from bloc.crypto_constructor import sym_cipher
from bloc.utils import pad_sym


__all__ = [ 'EcbOrCbcOracle' ]


def _random_padding(min=5, max=10):
    return secrets.token_bytes(min + secrets.randbelow(max - min + 1))


class EcbOrCbcOracle(object):
    """An oracle encrypting under a fresh random key and a randomly chosen mode on every call.

    Before encryption 5 to 10 random bytes are added to both ends of the input.
    The mode used last is remembered, so a guess can be checked using `check_answer`.

    Keyword Arguments:
        blocksize {int} -- The block size of the cipher (default: {16})
        noise {(int, int)} -- Inclusive bounds for the number of random bytes added to each end (default: {(5, 10)})

    Usage:
    ```python
    >>> oracle = EcbOrCbcOracle()
    >>> c = oracle(b'\\x00' * 64)
    >>> oracle.last_mode in ('ECB', 'CBC')
    True
    >>> oracle.check_answer(oracle.last_mode == 'ECB')
    True

    ```
    """
    def __init__(self, blocksize=16, noise=(5, 10)):
        self.blocksize = blocksize
        self.noise = noise
        self.last_mode = None

    def encrypt(self, byteslike):
        mode = secrets.choice(['CBC', 'ECB'])
        cipher = sym_cipher(mode, blocksize=self.blocksize)

        head = _random_padding(*self.noise)
        tail = _random_padding(*self.noise)

        self.last_mode = mode
        return cipher.encrypt(pad_sym(head, byteslike, tail, blocksize=self.blocksize))

    def check_answer(self, is_ecb):
        """Check whether the previous encryption was (not) in ECB mode."""
        return (self.last_mode == 'ECB') == bool(is_ecb)

    def __call__(self, byteslike):
        return self.encrypt(byteslike)
