import logging

from bloc.attacks.sym.prefix import find_ecb_prefix_len
from bloc.attacks.sym.probe import probe_block_cipher
from bloc.errors import ByteRecoveryFailed, ModeMismatch
from bloc.oracles import as_oracle


__all__ = [ 'find_ecb_suffix', 'find_ecb_suffix_with_prefix' ]

logger = logging.getLogger(__name__)


def find_ecb_suffix(oracle, blocksize=None, prefix_len=0, pb=b'A'):
    r"""Performs a byte-at-a-time attack on an ECB oracle which appends a secret suffix to our data.

    The oracle is required to encrypt given input with the same secret key.

    We shift the secret suffix using filler bytes such that the next unknown byte is the
    last byte of a block. All other bytes of that block are known. Encrypting the known
    bytes followed by every possible byte value and comparing against this reference block
    reveals the unknown byte.

    ```
    filler + recovered       next unknown byte
    A A A A A A S S S S S S S S S ?   <- reference block
    S S S S S S S S S S S S S S S b   <- probe for b = 0 .. 255
    ```

    Recovery stops as soon as the reference block would lie beyond the ciphertext, i.e.
    the result is exactly the secret suffix without padding bytes.

    Example:
    ```python
    >>> from bloc.oracles.known_infix import KnownInfixECBOracle as Oracle
    >>> find_ecb_suffix(Oracle(tail=b'Very secret, very transparent text.'))
    b'Very secret, very transparent text.'
    >>> find_ecb_suffix(Oracle(head=b'Some prefix, 26 bytes long', tail=b'Hi there\n'), prefix_len=26)
    b'Hi there\n'

    ```

    Arguments:
        oracle {callable} -- The oracle, any callable which encrypts the given input with the same key in ECB mode

    Keyword Arguments:
        blocksize {int} -- The block size of the cipher. Probed (and ECB mode verified) if None (default: {None})
        prefix_len {int} -- The length of the prefix the oracle puts in front of our data (default: {0})
        pb {bytes} -- The filler byte used for alignment (default: {b'A'})

    Raises:
        ModeMismatch: If the block size had to be probed and the oracle turned out not to use ECB
        ByteRecoveryFailed: If no byte value matches the reference block

    Returns:
        bytes -- The secret suffix
    """
    ask = as_oracle(oracle)

    if blocksize is None:
        blocksize, ecb = probe_block_cipher(ask)
        if not ecb:
            raise ModeMismatch('ECB')

    # push our data to the start of a block, this way the prefix stays out of our way
    align = pb * (-prefix_len % blocksize)
    base_offset = prefix_len + len(align)

    recovered = bytearray()

    while True:
        # shift the next unknown byte to the last position of a block
        pad_len = blocksize - 1 - (len(recovered) % blocksize)
        known = pb * pad_len + recovered
        target = base_offset + len(known) + 1 - blocksize

        c = ask(align + pb * pad_len)
        if len(c) <= target + blocksize:
            # the remaining output is padding only
            break

        ref = c[target:target + blocksize]
        window = bytes(known[len(known) - (blocksize - 1):])

        for i in range(256):
            c = ask(align + window + bytes([i]))
            if c[base_offset:base_offset + blocksize] == ref:
                recovered.append(i)
                break
        else:
            raise ByteRecoveryFailed(len(recovered), bytes(recovered))

        if len(recovered) % blocksize == 0:
            logger.debug("Recovered %d suffix bytes so far", len(recovered))

    logger.info("Recovered suffix of %d bytes", len(recovered))
    return bytes(recovered)


def find_ecb_suffix_with_prefix(oracle, blocksize=None, pb=b'A'):
    """Performs a byte-at-a-time attack on an ECB oracle which wraps our data into a secret prefix and suffix.

    The length of the prefix is determined using `find_ecb_prefix_len` first.

    Example:
    ```python
    >>> from bloc.oracles.known_infix import KnownInfixECBOracle as Oracle
    >>> find_ecb_suffix_with_prefix(Oracle(head=b'Unknown length', tail=b'Very secret text.'))
    b'Very secret text.'

    ```

    Arguments:
        oracle {callable} -- The ECB encryption oracle

    Keyword Arguments:
        blocksize {int} -- The block size of the cipher. Probed (and ECB mode verified) if None (default: {None})
        pb {bytes} -- The filler byte used for alignment (default: {b'A'})

    Returns:
        bytes -- The secret suffix
    """
    ask = as_oracle(oracle)

    if blocksize is None:
        blocksize, ecb = probe_block_cipher(ask)
        if not ecb:
            raise ModeMismatch('ECB')

    prefix_len = find_ecb_prefix_len(ask, blocksize=blocksize)
    return find_ecb_suffix(ask, blocksize=blocksize, prefix_len=prefix_len, pb=pb)
