import logging

from bloc.attacks.sym.prefix import find_prefix_len
from bloc.attacks.sym.probe import find_block_size, require_mode
from bloc.oracles import as_oracle
from bloc.utils import xor


__all__ = [ 'cbc_flip', 'craft_cbc_admin_token' ]

logger = logging.getLogger(__name__)


def cbc_flip(ciphertext, offset, is_, should, iv=None, blocksize=16):
    r"""Turn the known plaintext `is_` at `offset` into `should` by flipping bits of the preceding ciphertext block.

    CBC decrypts block `N` as `D(c[N]) ^ c[N - 1]`, hence xoring `is_ ^ should` into `c[N - 1]` changes
    exactly these bytes of plaintext block `N`. Block `N - 1` itself decrypts to garbage afterwards.

    Example:
    ```python
    >>> from bloc.crypto_constructor import aes_cbc
    >>> c = aes_cbc()
    >>> plaintext = b'A' * 16 + b'user=HEY;x=1....'
    >>> _, forged = cbc_flip(c.encrypt(plaintext), 21, b'HEY', b'BYE')
    >>> c.decrypt(forged)[16:]
    b'user=BYE;x=1....'

    ```

    Arguments:
        ciphertext {byteslike} -- The ciphertext to alter
        offset {int} -- The offset into the plaintext at which `is_` starts
        is_ {byteslike} -- The known plaintext, which is to be altered
        should {byteslike} -- The desired plaintext

    Keyword Arguments:
        iv {byteslike} -- Provide the IV if available. This will allow altering the first block (default: {None})
        blocksize {int} -- The block size of the cipher in bytes (default: {16})

    Raises:
        ValueError: If the lengths of `is_` and `should` do not match
        ValueError: If there is no block in front of `offset` to flip bits in
        ValueError: If the payload does not fit into the block at `offset`

    Returns:
        (bytes, bytes) -- The new IV (None if not provided) and the new ciphertext
    """
    n = len(should)

    if len(is_) != n:
        raise ValueError(f"Length of `is_` should be equal to length of `should`: {len(is_)} != {n}")
    if offset < blocksize and iv is None:
        raise ValueError(f"Cannot alter plaintext at offset {offset} without the IV: there is no ciphertext block in front of it")

    buffer = bytearray(ciphertext) if iv is None else bytearray(iv) + bytearray(ciphertext)
    if iv is not None:
        offset += blocksize

    room = blocksize - (offset % blocksize)
    if n > room:
        raise ValueError(f"Cannot flip payload: Too long ({n} > {room})")

    i = offset - blocksize
    buffer[i:i + n] = xor(xor(buffer[i:i + n], is_), should)

    if iv is not None:
        return bytes(buffer[:blocksize]), bytes(buffer[blocksize:])
    return None, bytes(buffer)


def _placeholder(payload, forbidden):
    """Replace each forbidden byte by a variant differing in one bit which passes the filter."""
    rv = bytearray(payload)
    for i, b in enumerate(rv):
        if b not in forbidden:
            continue
        for bit in range(8):
            if b ^ (1 << bit) not in forbidden:
                rv[i] = b ^ (1 << bit)
                break
    return bytes(rv)


def craft_cbc_admin_token(oracle, payload=b';admin=true;', forbidden=b';=', blocksize=None, prefix_len=None, pb=b'A'):
    """Smuggle filtered metacharacters into a CBC encrypted token.

    The payload is submitted with its forbidden characters replaced by harmless placeholders.
    The placeholders are aligned to the start of a block and flipped back afterwards using `cbc_flip`.
    The block in front of the payload is sacrificed.

    Example:
    ```python
    >>> from bloc.oracles import CommentCBCOracle
    >>> oracle = CommentCBCOracle()
    >>> token = craft_cbc_admin_token(oracle)
    >>> oracle.is_admin(token)
    True

    ```

    Arguments:
        oracle {callable} -- The oracle encrypting our data under CBC

    Keyword Arguments:
        payload {bytes} -- The plaintext to inject. At most one block long (default: {b';admin=true;'})
        forbidden {bytes} -- The characters filtered by the oracle (default: {b';='})
        blocksize {int} -- The block size of the cipher. Probed if None (default: {None})
        prefix_len {int} -- The length of the data preceding ours. Determined using `find_prefix_len` if None. Requires a fixed IV then (default: {None})
        pb {bytes} -- The filler byte used for alignment (default: {b'A'})

    Raises:
        ModeMismatch: If the oracle encrypts using ECB
        ValueError: If the payload is longer than a block

    Returns:
        bytes -- The forged ciphertext
    """
    ask = as_oracle(oracle)
    if blocksize is None:
        blocksize = find_block_size(ask)
    require_mode(ask, blocksize, ecb=False)

    if len(payload) > blocksize:
        raise ValueError(f"Cannot flip payload: Too long ({len(payload)} > {blocksize})")

    if prefix_len is None:
        prefix_len = find_prefix_len(ask, blocksize)

    align = pb * (-prefix_len % blocksize)
    if prefix_len + len(align) < blocksize:
        # we need some block in front of the payload to flip bits in
        align += pb * blocksize
    offset = prefix_len + len(align)

    placeholder = _placeholder(payload, forbidden)
    ciphertext = ask(align + placeholder)

    logger.info("Flipping %d bytes of block %d", len(payload), offset // blocksize)
    _, forged = cbc_flip(ciphertext, offset, placeholder, payload, blocksize=blocksize)
    return forged
