import logging

from bloc.errors import ModeMismatch, ProbeExhausted
from bloc.oracles import as_oracle
from bloc.utils import find_dup_blocks


__all__ = [ 'find_block_size', 'is_ecb_mode', 'probe_block_cipher', 'require_mode' ]

logger = logging.getLogger(__name__)


def find_block_size(oracle, pb=b'\x00', max_blocksize=256):
    """Discover the block size of the cipher used by the given oracle.

    The input is grown one byte at a time. Because of the padding the output length
    jumps by exactly one block as soon as the total input crosses a block boundary.

    Example:
    ```python
    >>> from bloc.oracles import KnownInfixECBOracle as Oracle
    >>> find_block_size(Oracle(tail=b'Hidden text', blocksize=8))
    8

    ```

    Arguments:
        oracle {callable} -- The encryption oracle

    Keyword Arguments:
        pb {bytes} -- The filler byte (default: {b'\\x00'})
        max_blocksize {int} -- The maximum number of bytes to grow the input by (default: {256})

    Raises:
        ProbeExhausted: If the output length never grows, or grows by something which is not a block size

    Returns:
        int -- The block size in bytes
    """
    ask = as_oracle(oracle)
    base_len = len(ask(b''))

    for i in range(1, max_blocksize + 1):
        c_len = len(ask(pb * i))
        if c_len == base_len:
            continue

        blocksize = c_len - base_len
        if blocksize < 0 or base_len % blocksize != 0:
            raise ProbeExhausted(f"Output length changed from {base_len} to {c_len}: not a padded block cipher")

        logger.info("Discovered block size %d after %d probes", blocksize, i)
        return blocksize

    raise ProbeExhausted(f"Output length did not grow within {max_blocksize} probes")


def is_ecb_mode(oracle, blocksize=16, pb=b'\x00', nblocks=10):
    """Detect whether the oracle encrypts in ECB mode.

    A long run of identical bytes is encrypted. In ECB mode identical plaintext blocks
    yield identical ciphertext blocks, so the output contains repetitions.
    Chained modes never show this.

    Example:
    ```python
    >>> from bloc.oracles import KnownInfixECBOracle, KnownInfixCBCOracle
    >>> is_ecb_mode(KnownInfixECBOracle(head=b'prefix'))
    True
    >>> is_ecb_mode(KnownInfixCBCOracle(head=b'prefix'))
    False

    ```

    Arguments:
        oracle {callable} -- The encryption oracle

    Keyword Arguments:
        blocksize {int} -- The block size of the cipher (default: {16})
        pb {bytes} -- The filler byte (default: {b'\\x00'})
        nblocks {int} -- The number of blocks worth of filler to send. At least 10 (default: {10})

    Returns:
        bool -- `True` if ECB mode is detected
    """
    ask = as_oracle(oracle)
    c = ask(pb * (blocksize * max(nblocks, 10)))
    ecb = len(find_dup_blocks(c, blocksize)) > 0

    logger.debug("Oracle %s in ECB mode", "is" if ecb else "is not")
    return ecb


def probe_block_cipher(oracle, pb=b'\x00', max_blocksize=256):
    """Discover block size and whether ECB mode is used.

    Returns:
        (int, bool) -- The block size and the ECB flag
    """
    ask = as_oracle(oracle)
    blocksize = find_block_size(ask, pb=pb, max_blocksize=max_blocksize)
    return blocksize, is_ecb_mode(ask, blocksize=blocksize, pb=pb)


def require_mode(oracle, blocksize, ecb=True):
    """Make sure the oracle does (not) encrypt using ECB mode.

    Raises:
        ModeMismatch: If the observed mode contradicts the expectation
    """
    if is_ecb_mode(oracle, blocksize=blocksize) != ecb:
        raise ModeMismatch('ECB' if ecb else 'a chained (non-ECB)')
