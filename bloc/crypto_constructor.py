"""This module exposes interfaces which can be used to easily encrypt/decrypt
data with a block cipher in ECB or CBC mode.

The purpose is ease of use. It comes at the cost of no flexibility.

AES is taken from the cryptography module and only supports 16 byte blocks.
In order to exercise attacks against other block sizes a toy Feistel network
is provided which accepts any even block size. It is a keyed permutation and
nothing more, do not use it for anything but testing.
"""

from cryptography.hazmat.primitives.ciphers import Cipher
from cryptography.hazmat.backends import default_backend
from cryptography.hazmat.primitives.ciphers import algorithms, modes
from cryptography.hazmat.primitives import hashes, hmac

import secrets

from bloc.utils import chunks, xor

__all__ = ['aes_ecb', 'aes_cbc', 'feistel_ecb', 'feistel_cbc', 'sym_cipher', 'FeistelCipher']


class SimpleSymCipherInterface(object):
    def __init__(self, cipher, alg_name, mode_name, **kvargs):
        self.cipher = cipher
        self.alg_name = alg_name
        self.mode_name = mode_name

        for k in kvargs:
            setattr(self, k, kvargs[k])

    def encrypt(self, plaintext):
        enc = self.cipher.encryptor()
        return enc.update(plaintext) + enc.finalize()

    def decrypt(self, ciphertext):
        dec = self.cipher.decryptor()
        return dec.update(ciphertext) + dec.finalize()

    def __str__(self):
        return repr(self)

    def __repr__(self):
        return f"<SimpleSymCipherInterface {self.alg_name} | {self.mode_name}>"


class FeistelCipher(object):
    """A balanced Feistel network operating on blocks of `blocksize` bytes.

    Each round function is HMAC-SHA256 over the round index and the right half,
    truncated to the half size. Hence the block size is limited to 64 bytes.

    Example:
    ```python
    >>> f = FeistelCipher(b'YELLOW SUBMARINE', blocksize=8)
    >>> c = f.encrypt_block(b'ABCDEFGH')
    >>> len(c), c != b'ABCDEFGH'
    (8, True)
    >>> f.decrypt_block(c)
    b'ABCDEFGH'

    ```

    Arguments:
        key {bytes} -- The secret key

    Keyword Arguments:
        blocksize {int} -- Block size in bytes. Has to be even (default: {16})
        rounds {int} -- Number of Feistel rounds (default: {4})
    """

    def __init__(self, key, blocksize=16, rounds=4):
        if blocksize % 2 != 0 or not 2 <= blocksize <= 64:
            raise ValueError(f"Unsupported block size {blocksize}: needs to be even and between 2 and 64")

        self.key = key
        self.blocksize = blocksize
        self.rounds = rounds

    def _round(self, i, half):
        h = hmac.HMAC(self.key, hashes.SHA256(), backend=default_backend())
        h.update(bytes([i]) + half)
        return h.finalize()[:len(half)]

    def encrypt_block(self, block):
        n = self.blocksize // 2
        left, right = bytes(block[:n]), bytes(block[n:])
        for i in range(self.rounds):
            left, right = right, xor(left, self._round(i, right))
        return left + right

    def decrypt_block(self, block):
        n = self.blocksize // 2
        left, right = bytes(block[:n]), bytes(block[n:])
        for i in reversed(range(self.rounds)):
            left, right = xor(right, self._round(i, left)), left
        return left + right


class _ModeContext(object):
    """Mimics the encryptor / decryptor contexts of the cryptography module."""

    def __init__(self, transform, blocksize, iv=None, encrypting=True):
        self.transform = transform
        self.blocksize = blocksize
        self.chain = iv
        self.encrypting = encrypting

    def update(self, data):
        if len(data) % self.blocksize != 0:
            raise ValueError(f"The length of the provided data is not a multiple of the block length ({self.blocksize})")

        out = []
        for block in chunks(data, self.blocksize):
            block = bytes(block)

            if self.chain is None:
                # ECB
                out.append(self.transform(block))
            elif self.encrypting:
                self.chain = self.transform(xor(block, self.chain))
                out.append(self.chain)
            else:
                out.append(xor(self.transform(block), self.chain))
                self.chain = block

        return b''.join(out)

    def finalize(self):
        return b''


class _FeistelModeCipher(object):
    def __init__(self, primitive, iv=None):
        self.primitive = primitive
        self.iv = iv

    def encryptor(self):
        return _ModeContext(self.primitive.encrypt_block, self.primitive.blocksize, iv=self.iv)

    def decryptor(self):
        return _ModeContext(self.primitive.decrypt_block, self.primitive.blocksize, iv=self.iv, encrypting=False)


def aes_ecb(key=None, keysize=128):
    if key is None:
        key = secrets.token_bytes(keysize // 8)

    c = Cipher(algorithms.AES(key), modes.ECB(), default_backend())
    return SimpleSymCipherInterface(c, 'AES', 'ECB', key=key, block_size=16)


def aes_cbc(key=None, iv=None, keysize=128):
    if key is None:
        key = secrets.token_bytes(keysize // 8)
    if iv is None:
        iv = secrets.token_bytes(16)

    c = Cipher(algorithms.AES(key), modes.CBC(iv), default_backend())
    return SimpleSymCipherInterface(c, 'AES', 'CBC', key=key, iv=iv, block_size=16)


def feistel_ecb(key=None, blocksize=16, keysize=128):
    if key is None:
        key = secrets.token_bytes(keysize // 8)

    c = _FeistelModeCipher(FeistelCipher(key, blocksize=blocksize))
    return SimpleSymCipherInterface(c, 'Feistel', 'ECB', key=key, block_size=blocksize)


def feistel_cbc(key=None, iv=None, blocksize=16, keysize=128):
    if key is None:
        key = secrets.token_bytes(keysize // 8)
    if iv is None:
        iv = secrets.token_bytes(blocksize)

    c = _FeistelModeCipher(FeistelCipher(key, blocksize=blocksize), iv=iv)
    return SimpleSymCipherInterface(c, 'Feistel', 'CBC', key=key, iv=iv, block_size=blocksize)


def sym_cipher(mode, key=None, iv=None, blocksize=16, keysize=128):
    """Construct a block cipher for the given mode and block size.

    AES is used for 16 byte blocks, the Feistel network for everything else.

    Example:
    ```python
    >>> sym_cipher('ecb')
    <SimpleSymCipherInterface AES | ECB>
    >>> sym_cipher('CBC', blocksize=8)
    <SimpleSymCipherInterface Feistel | CBC>

    ```

    Arguments:
        mode {str} -- Either 'ECB' or 'CBC', case insensitive

    Returns:
        SimpleSymCipherInterface -- The cipher
    """
    mode = mode.upper()
    if mode not in ('ECB', 'CBC'):
        raise ValueError(f"Unsupported mode of operation: {mode}")

    if blocksize == 16:
        if mode == 'ECB':
            return aes_ecb(key=key, keysize=keysize)
        return aes_cbc(key=key, iv=iv, keysize=keysize)

    if mode == 'ECB':
        return feistel_ecb(key=key, blocksize=blocksize, keysize=keysize)
    return feistel_cbc(key=key, iv=iv, blocksize=blocksize, keysize=keysize)
