from bloc.crypto_constructor import sym_cipher
from bloc.utils import pad_sym, unpad_sym


class Oracle(object):
    r"""Uniform view on an encryption oracle.

    Attacks only ever talk to an oracle through this adapter. The target may be
    any object exposing `encrypt(bytes) -> bytes` or a plain callable with the
    same signature.

    Example:
    ```python
    >>> o = Oracle(lambda data: data[::-1], default_prefix=b'id=')
    >>> o(b'abc')
    b'cba=di'
    >>> o.queries
    1

    ```

    Arguments:
        target {callable or object} -- The encryption oracle

    Keyword Arguments:
        default_prefix {bytes} -- A prefix which will be prepended before any attack data (default: {None})
    """

    def __init__(self, target, default_prefix=None):
        encrypt = getattr(target, 'encrypt', None)
        if encrypt is None:
            if not callable(target):
                raise TypeError(f"{target!r} is neither callable nor does it provide `encrypt`")
            encrypt = target

        if default_prefix is None:
            default_prefix = b''

        self._encrypt = encrypt
        self.default_prefix = bytes(default_prefix)
        self.queries = 0

    def __call__(self, byteslike=b''):
        self.queries += 1
        return bytes(self._encrypt(self.default_prefix + bytes(byteslike)))

    encrypt = __call__


def as_oracle(oracle):
    if isinstance(oracle, Oracle):
        return oracle
    return Oracle(oracle)


class _EncryptionOracle(object):
    """Base for oracles encrypting under a fixed, secret key.

    The last plaintext and ciphertext are kept in `plain` and `msg` for
    inspection by the caller. Attacks must not read them.
    """

    def __init__(self, mode, key=None, keysize=128, blocksize=16, iv=None):
        self.cipher = sym_cipher(mode, key=key, iv=iv, blocksize=blocksize, keysize=keysize)
        self.key = self.cipher.key
        self.blocksize = blocksize
        self.plain = None
        self.msg = None

    def _encrypt(self, *parts):
        self.plain = pad_sym(*parts, blocksize=self.blocksize)
        self.msg = self.cipher.encrypt(self.plain)

        return self.msg

    def _decrypt(self, msg):
        return self.cipher.decrypt(bytes(msg))

    def _decrypt_unpadded(self, msg):
        return unpad_sym(self._decrypt(msg), blocksize=self.blocksize)
