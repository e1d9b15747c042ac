from ._base import Oracle, as_oracle
from .known_infix import KnownInfixECBOracle, KnownInfixCBCOracle, random_head
from .mode_detection import EcbOrCbcOracle
from .profile import ProfileECBOracle
from .comment import CommentCBCOracle

__all__ = [
    'Oracle', 'as_oracle', 'KnownInfixECBOracle', 'KnownInfixCBCOracle', 'random_head',
    'EcbOrCbcOracle', 'ProfileECBOracle', 'CommentCBCOracle'
]
