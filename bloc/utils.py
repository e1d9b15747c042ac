from collections import Counter
from itertools import zip_longest, cycle

import cryptography.hazmat.primitives.padding as padding


def chunks(iterable, n, fillvalue=None):
    """Generator to yield equal sized chunks from the given iterable

    Example:
    ```python
    >>> list(chunks(b'ABCDE', 2, fillvalue=0))
    [(65, 66), (67, 68), (69, 0)]

    ```

    Arguments:
        iterable {iterable} -- The iterable to drain
        n {int} -- The size of each chunk

    Keyword Arguments:
        fillvalue {any} -- The fill value to use if the iterable cannot be evenly distributed into n-sized chunks (default: {None})

    Yields:
        tuple -- Tuple of size `n` with elements from `iterable`
    """
    its = [ iter(iterable) ] * n
    yield from zip_longest(*its, fillvalue=fillvalue)


def get_block(byteslike, index, blocksize=16):
    """Return the block with the given index. The result may be shorter than `blocksize` (or empty) at the end of the data.

    Example:
    ```python
    >>> get_block(b'0123456789', 1, blocksize=4)
    b'4567'
    >>> get_block(b'0123456789', 3, blocksize=4)
    b''

    ```
    """
    return bytes(byteslike[index * blocksize:(index + 1) * blocksize])


def first_diff_block(a, b, blocksize=16):
    """Index of the first block in which `a` and `b` differ.

    If one of the inputs is a prefix of the other, the index of the first block
    missing in the shorter one is returned. `None` if both are equal.

    Example:
    ```python
    >>> first_diff_block(b'AAAABBBBCCCC', b'AAAABBBBDDDD', blocksize=4)
    2
    >>> first_diff_block(b'AAAABBBB', b'AAAABBBBCCCC', blocksize=4)
    2
    >>> first_diff_block(b'AAAA', b'AAAA', blocksize=4) is None
    True

    ```
    """
    for i, (x, y) in enumerate(zip(chunks(a, blocksize), chunks(b, blocksize))):
        if x != y:
            return i

    if len(a) != len(b):
        return min(len(a), len(b)) // blocksize

    return None


def pad_sym(*parts, blocksize=16, mode='pkcs7'):
    r"""Combines the given portions of data and pads them using the given scheme.

    Example:
    ```python
    >>> pad_sym(b'email=', b'foo', blocksize=8, mode='pkcs7')
    b'email=foo\x07\x07\x07\x07\x07\x07\x07'

    ```

    Keyword Arguments:
        blocksize {int} -- The desired blocksize in bytes (default: {16})
        mode {str} -- The padding scheme to use. Case insensitive. The available schemes are the ones supported be the cryptography module (default: {'pkcs7'})

    Returns:
        bytes -- The padded data
    """
    padder = _padding_scheme(mode)(blocksize * 8).padder()
    data = b''
    for p in parts:
        if len(p) > 0:
            data += padder.update(bytes(p))

    return data + padder.finalize()


def unpad_sym(byteslike, blocksize=16, mode='pkcs7'):
    r"""Strip the padding added by `pad_sym`.

    Example:
    ```python
    >>> unpad_sym(b'email=foo\x07\x07\x07\x07\x07\x07\x07', blocksize=8)
    b'email=foo'

    ```

    Raises:
        ValueError: If the padding is invalid

    Returns:
        bytes -- The unpadded data
    """
    unpadder = _padding_scheme(mode)(blocksize * 8).unpadder()
    return unpadder.update(bytes(byteslike)) + unpadder.finalize()


def _padding_scheme(mode):
    scheme = getattr(padding, mode.upper(), None)
    if scheme is None:
        raise ValueError(f"The given padding scheme '{mode}' is not supported!")
    return scheme


def is_padding_valid(byteslike, blocksize=16, mode='pkcs7'):
    r"""Checks whether the padding is valid in the given bytes-like object.

    Example:
    ```python
    >>> is_padding_valid(b'ICE ICE BABY\x04\x04\x04\x04')
    True
    >>> is_padding_valid(b'ICE ICE BABY\x01\x02\x03\x04')
    False

    ```

    Arguments:
        byteslike {byteslike} -- The blob to check

    Keyword Arguments:
        blocksize {int} -- The block size the data was padded to (default: {16})
        mode {str} -- The padding mode to check for (default: {'pkcs7'})

    Returns:
        bool -- `True` if the padding is valid, `False` if it is invalid.
    """
    if mode != 'pkcs7':
        raise NotImplementedError("Currently only PKCS7 is supported :(")

    if len(byteslike) == 0 or len(byteslike) % blocksize != 0:
        return False

    pad_byte = byteslike[-1]

    if pad_byte == 0 or pad_byte > blocksize:
        return False

    return all(b == pad_byte for b in byteslike[-pad_byte:])


def find_dup_blocks(byteslike, blocksize=16):
    r"""Finds duplicate blocks in the given bytes-like object

    Example:
    ```python
    >>> find_dup_blocks(b'XYXYXYabab01', blocksize=2)
    [(3, (88, 89)), (2, (97, 98))]

    ```

    Arguments:
        byteslike {byteslike} -- The collection of bytes to search

    Keyword Arguments:
        blocksize {int} -- The size of each block in bytes (default: {16})

    Returns:
        list of (int, tuple) -- The non-unique blocks found and their occurence count, most frequent first
    """
    count_repetitions = Counter(chunks(byteslike, blocksize, fillvalue=0))
    dups = [
        (count_repetitions[key], key) for key in count_repetitions if count_repetitions[key] > 1
    ]

    dups.sort(reverse=True)

    return dups


def xor(buffer, x):
    r"""Compute the XOR of the given operands

    The second operand may either be a single value or a list-like of values.
    If so, it will be applied cyclicly.

    Examples:
    ```python
    >>> xor(b'AB', 1)
    b'@C'
    >>> xor(b':admin<true:', b'\x01\x00\x00\x00\x00\x00\x01\x00\x00\x00\x00\x01')
    b';admin=true;'
    >>> xor(b'\x0f\xf0', b'\xff')
    b'\xf0\x0f'

    ```

    Arguments:
        buffer {byteslike} -- The first operand
        x {int or list of int} -- The second operand

    Returns:
        bytes -- The result of the XOR operation
    """
    try:
        it = cycle(x)
    except TypeError:
        it = cycle([x])

    return bytes([op1 ^ op2 for op1, op2 in zip(buffer, it)])


def parse_kv(byteslike, sep=b'&', assign=b'='):
    """Parse a `k1=v1&k2=v2` structured record.

    Later occurrences of a key override earlier ones.

    Example:
    ```python
    >>> parse_kv(b'email=foo@bar.com&uid=10&role=user&role=admin')
    {b'email': b'foo@bar.com', b'uid': b'10', b'role': b'admin'}

    ```

    Raises:
        ValueError: If a pair does not consist of exactly one key and one value

    Returns:
        dict -- The parsed record
    """
    rv = {}
    for pair in bytes(byteslike).split(sep):
        fields = pair.split(assign)
        if len(fields) != 2:
            raise ValueError(f"Invalid key-value pair: {pair!r}")
        rv[fields[0]] = fields[1]

    return rv


def encode_kv(pairs, sep=b'&', assign=b'='):
    """Inverse of `parse_kv`. Values are not escaped.

    Example:
    ```python
    >>> encode_kv([(b'uid', b'10'), (b'role', b'user')])
    b'uid=10&role=user'

    ```
    """
    return sep.join(k + assign + v for k, v in pairs)
