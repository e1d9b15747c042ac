"""Failure conditions raised by the attacks in `bloc.attacks`.

All of them derive from `AttackError`, which itself is a `RuntimeError`, so
callers may catch a single class if they do not care why an attack failed.
"""

__all__ = [
    'AttackError', 'ProbeExhausted', 'PrefixLengthIndeterminate',
    'ByteRecoveryFailed', 'ModeMismatch'
]


class AttackError(RuntimeError):
    pass


class ProbeExhausted(AttackError):
    """The oracle did not behave like an additive, padded block cipher within the probing budget."""


class PrefixLengthIndeterminate(AttackError):
    """No residual alignment of the unknown prefix could be found."""


class ByteRecoveryFailed(AttackError):
    """None of the 256 candidates matched the reference block.

    This either means the alignment is off (wrong block size or prefix length)
    or the oracle is not encrypting in ECB mode.

    Attributes:
        position {int} -- Index of the suffix byte which could not be recovered
        recovered {bytes} -- The suffix bytes confirmed before the failure
    """

    def __init__(self, position, recovered):
        super().__init__(f"No candidate matched suffix byte {position}. Wrong alignment or not ECB?")
        self.position = position
        self.recovered = recovered


class ModeMismatch(AttackError):
    def __init__(self, expected):
        super().__init__(f"The oracle does not seem to encrypt in {expected} mode")
        self.expected = expected
