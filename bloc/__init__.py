import logging

from . import attacks, crypto_constructor, errors, oracles, utils

__all__ = ["attacks", "crypto_constructor", "errors", "oracles", "utils"]

logging.getLogger(__name__).addHandler(logging.NullHandler())
