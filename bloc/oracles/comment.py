import secrets

from bloc.oracles._base import _EncryptionOracle


__all__ = [ 'CommentCBCOracle' ]


class CommentCBCOracle(_EncryptionOracle):
    """Embeds user data into a comment string and encrypts it using CBC.

    The metacharacters `;` and `=` are removed from the user data before it is embedded into
    `comment1=cooking%20MCs;userdata=<data>;comment2=%20like%20a%20pound%20of%20bacon`.
    A token is considered to carry admin rights if its plaintext contains `;admin=true;`.

    Keyword Arguments:
        key {bytes} -- The key to use for encryption. Will be generated if None (default: {None})
        iv {bytes} -- The IV to use for encryption. Will be generated if None (default: {None})

    Usage:
    ```python
    >>> oracle = CommentCBCOracle()
    >>> token = oracle(b';admin=true;')
    >>> oracle.decrypt(token)[32:53]
    b'admintrue;comment2=%2'
    >>> oracle.is_admin(token)
    False

    ```
    """
    prefix = b'comment1=cooking%20MCs;userdata='
    suffix = b';comment2=%20like%20a%20pound%20of%20bacon'
    needle = b';admin=true;'

    def __init__(self, key=None, keysize=128, blocksize=16, iv=None):
        if iv is None:
            iv = secrets.token_bytes(blocksize)

        super().__init__('CBC', key=key, keysize=keysize, blocksize=blocksize, iv=iv)
        self.iv = iv

    def encrypt(self, userdata):
        if isinstance(userdata, str):
            userdata = userdata.encode()

        userdata = userdata.replace(b';', b'').replace(b'=', b'')
        return self._encrypt(self.prefix, userdata, self.suffix)

    def decrypt(self, token):
        return self._decrypt_unpadded(token)

    def is_admin(self, token):
        try:
            plain = self.decrypt(token)
        except ValueError:
            return False

        return self.needle in plain

    def __call__(self, userdata):
        return self.encrypt(userdata)
