import logging

from bloc.attacks.sym.probe import probe_block_cipher
from bloc.errors import ModeMismatch, PrefixLengthIndeterminate
from bloc.oracles import as_oracle
from bloc.utils import first_diff_block


__all__ = [ 'find_ecb_prefix_len', 'find_prefix_len', 'ecb_guess_block_layout' ]

logger = logging.getLogger(__name__)


def _ecb_block_size(ask, blocksize):
    if blocksize is None:
        blocksize, ecb = probe_block_cipher(ask)
        if not ecb:
            raise ModeMismatch('ECB')
    return blocksize


def _twin_blocks(c, offset, blocksize):
    a = c[offset:offset + blocksize]
    b = c[offset + blocksize:offset + 2 * blocksize]
    return len(b) == blocksize and a == b


def find_ecb_prefix_len(oracle, blocksize=None, fillers=(b'\x00', b'\x01')):
    """Find the length of the unknown prefix an ECB oracle puts in front of the attacker's data.

    First the block in which our data starts is located by encrypting two different single bytes.
    All blocks before it are constant, so they are entirely prefix. Then `2 * blocksize + k`
    filler bytes are sent for growing `k` until the two blocks after the boundary block are equal,
    i.e. until the filler fills them completely. At this point `blocksize - k` prefix bytes are
    residing in the boundary block.

    ```
    <- blocksize ->
    P P P P P P P P | P P P F F F F F | F F F F F F F F | F F F F F F F F | S ...
    0                 1 = boundary      2                 3
                            <-------- 2 * blocksize + k -------->
    ```

    Every filler has to produce the collision at the same `k`. This way a secret suffix (or its padding)
    starting with filler bytes cannot produce a false positive.

    Example:
    ```python
    >>> from bloc.oracles.known_infix import KnownInfixECBOracle as Oracle
    >>> find_ecb_prefix_len(Oracle(head=b'Some prefix, 26 bytes long', tail=b'Secret text.'))
    26
    >>> find_ecb_prefix_len(Oracle(head=b'0123456789ABCDEF', tail=b'Secret text.'))
    16

    ```

    Arguments:
        oracle {callable} -- The ECB encryption oracle

    Keyword Arguments:
        blocksize {int} -- The block size of the cipher. Probed (and ECB mode verified) if None (default: {None})
        fillers {tuple of bytes} -- At least two distinct filler bytes (default: {(b'\\x00', b'\\x01')})

    Raises:
        ModeMismatch: If the block size had to be probed and the oracle turned out not to use ECB
        PrefixLengthIndeterminate: If no residual alignment can be found

    Returns:
        int -- The length of the prefix in bytes
    """
    if len(set(fillers)) < 2:
        raise ValueError("At least two distinct filler bytes are required")

    ask = as_oracle(oracle)
    blocksize = _ecb_block_size(ask, blocksize)

    boundary = first_diff_block(ask(fillers[0]), ask(fillers[1]), blocksize)
    if boundary is None:
        raise PrefixLengthIndeterminate("The oracle output does not depend on our input")

    floor = boundary * blocksize

    # k == blocksize is the case of a prefix ending exactly on a block boundary
    for k in range(blocksize + 1):
        if all(_twin_blocks(ask(pb * (2 * blocksize + k)), floor + blocksize, blocksize) for pb in fillers):
            prefix_len = floor + blocksize - k
            logger.info("Discovered prefix length %d", prefix_len)
            return prefix_len

    raise PrefixLengthIndeterminate(f"No residual alignment found after block {boundary}")


def find_prefix_len(oracle, blocksize, pb=b'\x00', diff=(b'\x00', b'\x01')):
    """Find the length of the unknown prefix of a deterministic oracle in any mode of operation.

    The two bytes of `diff` are appended to a growing run of filler bytes. The resulting
    ciphertexts first differ in the block holding the first differing plaintext byte. This
    holds for ECB as well as for CBC with a fixed IV. As soon as this block index advances
    the filler has completed the boundary block.

    Example:
    ```python
    >>> from bloc.oracles import CommentCBCOracle
    >>> find_prefix_len(CommentCBCOracle(), 16)
    32

    ```

    Arguments:
        oracle {callable} -- The encryption oracle. Has to be deterministic
        blocksize {int} -- The block size of the cipher

    Keyword Arguments:
        pb {bytes} -- The filler byte (default: {b'\\x00'})
        diff {tuple of bytes} -- Two distinct single bytes (default: {(b'\\x00', b'\\x01')})

    Raises:
        PrefixLengthIndeterminate: If the first differing block never advances

    Returns:
        int -- The length of the prefix in bytes
    """
    ask = as_oracle(oracle)

    def diff_block(k):
        return first_diff_block(ask(pb * k + diff[0]), ask(pb * k + diff[1]), blocksize)

    boundary = diff_block(0)
    if boundary is None:
        raise PrefixLengthIndeterminate("The oracle output does not depend on our input")

    for k in range(1, blocksize + 1):
        if diff_block(k) != boundary:
            prefix_len = (boundary + 1) * blocksize - k
            logger.info("Discovered prefix length %d", prefix_len)
            return prefix_len

    raise PrefixLengthIndeterminate(f"First differing block did not advance past block {boundary}")


def ecb_guess_block_layout(oracle, blocksize=None):
    """Guesses the blocklayout given an ECB - Infix - Oracle

    A blocklayout consists of 3 parameters:
    The blocksize of the ECB algorithm (in bytes)
    The block offset, i.e. the index of the first block which can be solely controlled by the attacker
    The padding offset, i.e. the number of bytes which cannot be controlled before the attacker controlled bytes

    ```
    <- blocksize ->
    X X X X X X X X | X X X X A A A A | A A A A A A A A | ...
    0                 1                 2
        block offset -------------------^
                     <------>
                        padding offset
    ```

    Example:
    ```python
    >>> from bloc.oracles.known_infix import KnownInfixECBOracle as Oracle
    >>> ecb_guess_block_layout(Oracle(head=b'Some prefix, 26 bytes long', tail=b'Secret text.'))
    (16, 2, 10)
    >>> ecb_guess_block_layout(Oracle(tail=b'Secret text.'))
    (16, 0, 0)

    ```

    Returns:
        (int, int, int) -- the blocksize, the block offset, the padding offset respectively.
    """
    ask = as_oracle(oracle)
    blocksize = _ecb_block_size(ask, blocksize)
    prefix_len = find_ecb_prefix_len(ask, blocksize=blocksize)

    return blocksize, -(-prefix_len // blocksize), prefix_len % blocksize
