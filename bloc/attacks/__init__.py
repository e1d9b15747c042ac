from . import sym

__all__ = ["sym"]
