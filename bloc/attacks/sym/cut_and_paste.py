import logging

from bloc.attacks.sym.probe import find_block_size, require_mode
from bloc.oracles import as_oracle
from bloc.utils import get_block, parse_kv


__all__ = [ 'craft_ecb_admin_token' ]

logger = logging.getLogger(__name__)


def _grants(plaintext, field, value):
    try:
        return parse_kv(plaintext).get(field) == value
    except ValueError:
        return False


def craft_ecb_admin_token(oracle, value=b'admin', head=b'email=', tail=b'&uid=10&role=user',
                          field=b'role', blocksize=None, pb=b'A'):
    """Paste blocks of several ECB encrypted records together to forge a record with an arbitrary role.

    The oracle is expected to encrypt records of the form `<head><identifier><tail>`, e.g.
    `email=<identifier>&uid=10&role=user`, under a fixed key. Three records are requested:

    ```
                       0123456789ABCDEF 0123456789ABCDEF 0123456789ABCDEF
    AAAAAAAAAAAAA  --> email=AAAAAAAAAA AAA&uid=10&role= user
    AAAAAAAAAAadmin -> email=AAAAAAAAAA admin&uid=10&rol e=user
    AA             --> email=AA&uid=10& role=user
    ```

    The blocks up to `role=` of the first record, the block starting with the new role of the
    second record and the final block of the third record are pasted together:

    `email=AAAAAAAAAAAAA&uid=10&role=admin&uid=10&rolrole=user`

    The final block is chosen such that the original role value ends up under a mangled key.
    The parser takes the last occurrence of a key, so a final `role=user` has to be avoided.

    Example:
    ```python
    >>> from bloc.oracles import ProfileECBOracle
    >>> oracle = ProfileECBOracle()
    >>> token = craft_ecb_admin_token(oracle)
    >>> oracle.decrypt(token)[b'role']
    b'admin'

    ```

    Arguments:
        oracle {callable} -- The oracle encrypting records for a given identifier

    Keyword Arguments:
        value {bytes} -- The role to forge (default: {b'admin'})
        head {bytes} -- The known part of the record in front of the identifier (default: {b'email='})
        tail {bytes} -- The known part of the record after the identifier (default: {b'&uid=10&role=user'})
        field {bytes} -- The key of the role field (default: {b'role'})
        blocksize {int} -- The block size of the cipher. Probed if None (default: {None})
        pb {bytes} -- The filler byte used for the identifiers (default: {b'A'})

    Raises:
        ModeMismatch: If the oracle does not encrypt using ECB
        ValueError: If the value contains metacharacters or the block layout does not allow to isolate the value

    Returns:
        bytes -- The forged ciphertext
    """
    if b'&' in value or b'=' in value:
        raise ValueError(f"The value {value!r} must not contain any metacharacters")

    ask = as_oracle(oracle)
    if blocksize is None:
        blocksize = find_block_size(ask)
    require_mode(ask, blocksize, ecb=True)

    # the first record is cut right after `role=`
    assign = field + b'='
    cut = tail.rindex(assign) + len(assign)
    n1 = -(len(head) + cut) % blocksize
    head_part = ask(pb * n1)[:len(head) + n1 + cut]
    known = head + pb * n1 + tail[:cut]

    # the second record has the new value starting a fresh block
    n2 = -len(head) % blocksize
    keyword_index = (len(head) + n2) // blocksize
    keyword_plain = (value + tail)[:blocksize]
    if len(value + tail) < blocksize:
        raise ValueError(f"Cannot isolate {value!r}: the remaining record fits into a single block")

    keyword_block = get_block(ask(pb * n2 + value), keyword_index, blocksize)

    # the final block of the third record holds some fragment of the tail, choose one
    # which leaves the forged value as the effective one
    for s in range(max(0, len(tail) - blocksize + 1), len(tail) + 1):
        if _grants(known + keyword_plain + tail[s:], field, value):
            break
    else:
        raise ValueError(f"No cut point in {tail!r} yields a record granting {value!r}")

    n3 = -(len(head) + s) % blocksize
    final_block = ask(pb * n3)[-blocksize:]

    logger.info("Forged record from %d + 1 + 1 blocks, cut at tail offset %d", len(head_part) // blocksize, s)
    return bytes(head_part + keyword_block + final_block)
