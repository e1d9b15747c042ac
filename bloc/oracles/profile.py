from bloc.oracles._base import _EncryptionOracle
from bloc.utils import parse_kv, encode_kv


__all__ = [ 'ProfileECBOracle' ]


class ProfileECBOracle(_EncryptionOracle):
    """Hands out ECB encrypted user tokens.

    The email address given is stripped of the metacharacters `&` and `=`, then the
    token `email=<email>&uid=10&role=user` is encrypted under a fixed secret key.

    Keyword Arguments:
        key {bytes} -- The key to use for encryption. Will be generated if None (default: {None})
        uid {int} -- The uid encoded into every token (default: {10})
        role {bytes} -- The role encoded into every token (default: {b'user'})

    Usage:
    ```python
    >>> oracle = ProfileECBOracle()
    >>> oracle.profile_for(b'foo@bar.com&role=admin')
    b'email=foo@bar.comroleadmin&uid=10&role=user'
    >>> token = oracle(b'foo@bar.com')
    >>> oracle.decrypt(token)[b'role']
    b'user'
    >>> oracle.is_admin(token)
    False

    ```
    """
    def __init__(self, key=None, keysize=128, blocksize=16, uid=10, role=b'user'):
        super().__init__('ECB', key=key, keysize=keysize, blocksize=blocksize)
        self.uid = str(uid).encode()
        self.role = role

    def profile_for(self, email):
        if isinstance(email, str):
            email = email.encode()

        email = email.replace(b'&', b'').replace(b'=', b'')
        return encode_kv([(b'email', email), (b'uid', self.uid), (b'role', self.role)])

    def encrypt(self, email):
        return self._encrypt(self.profile_for(email))

    def decrypt(self, token):
        """Decrypt and parse a token.

        Raises:
            ValueError: If the padding or the structure of the token is invalid

        Returns:
            dict -- The fields of the token
        """
        return parse_kv(self._decrypt_unpadded(token))

    def is_admin(self, token):
        try:
            profile = self.decrypt(token)
        except ValueError:
            return False

        return profile.get(b'role') == b'admin'

    def __call__(self, email):
        return self.encrypt(email)
