"""
Exceptions Module - Errors raised by the animated background
"""


class SetupError(RuntimeError):
    """The background could not be mounted on the given drawing surface."""


__all__ = ['SetupError']
